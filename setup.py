#!/usr/bin/env python3
#
# Copyright (c) 2012-2025 Snowflake Computing Inc. All rights reserved.
#
import os
from codecs import open

from setuptools import setup

THIS_DIR = os.path.dirname(os.path.realpath(__file__))
SRC_DIR = os.path.join(THIS_DIR, "src")
SQLWINDOW_SRC_DIR = os.path.join(SRC_DIR, "sqlwindow")
INSTALL_REQ_LIST = [
    "setuptools>=40.6.0",
    "wheel",
    # sqlwindow directly depends on typing-extension for @final on the window function leaves.
    "typing-extensions>=4.1.0, <5.0.0",
    "pyyaml",  # engine config files
    "python-dateutil",  # calendar intervals for RANGE frames
    "numpy",
    "pandas>=1.5.0",  # rolling window indexers with `step`
]
REQUIRED_PYTHON_VERSION = ">=3.9"

DEVELOPMENT_REQUIREMENTS = [
    "pytest<8.0.0",
    "pytest-cov",
    "coverage",
    "pytest-timeout",
    "pytest-xdist",
    "pre-commit",
    "tox",  # used for setting up testing environments
]

# read the version
VERSION = ()
with open(os.path.join(SQLWINDOW_SRC_DIR, "version.py"), encoding="utf-8") as f:
    exec(f.read())
if not VERSION:
    raise ValueError("version can't be read")
version = ".".join([str(v) for v in VERSION if v is not None])

with open(os.path.join(THIS_DIR, "README.md"), encoding="utf-8") as f:
    readme = f.read()
with open(os.path.join(THIS_DIR, "CHANGELOG.md"), encoding="utf-8") as f:
    changelog = f.read()


setup(
    name="sqlwindow",
    version=version,
    description="In-process evaluation of SQL window functions over materialized row sets",
    long_description=readme + "\n\n" + changelog,
    long_description_content_type="text/markdown",
    license="Apache License, Version 2.0",
    keywords="SQL window functions analytics partition frame rank",
    python_requires=REQUIRED_PYTHON_VERSION,
    install_requires=INSTALL_REQ_LIST,
    # When a new package (directory) is added, we should also add it here
    packages=[
        "sqlwindow",
        "sqlwindow._internal",
        "sqlwindow._internal.analyzer",
        "sqlwindow.engine",
    ],
    package_dir={
        "": "src",
    },
    extras_require={
        "development": DEVELOPMENT_REQUIREMENTS,
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: OS Independent",
        "Programming Language :: SQL",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Topic :: Database",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Topic :: Scientific/Engineering :: Information Analysis",
    ],
    zip_safe=False,
)
