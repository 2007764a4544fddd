#!/usr/bin/env python
#
# Copyright (c) 2012-2025 Snowflake Computing Inc. All rights reserved.
#

import logging
from pathlib import Path

import pytest

from sqlwindow._internal.utils import warning_dict
from sqlwindow.engine import WindowEngine
from sqlwindow.row_set import RowSet

RESOURCES_DIR = Path(__file__).parent.joinpath("resources")


def pytest_collection_modifyitems(items) -> None:
    """Applies tags to tests based on folders that they are in."""
    top_test_dir = Path(__file__).parent
    top_doctest_dir = top_test_dir.parent.joinpath("src/sqlwindow")
    for item in items:
        item_path = Path(str(item.fspath)).parent
        try:
            relative_path = item_path.relative_to(top_test_dir)
            for part in relative_path.parts:
                item.add_marker(part)
        except ValueError as e:
            # doctests in src/sqlwindow get their own marker, any other
            # directory outside of tests is a mistake
            if top_doctest_dir in item_path.parents or item_path == top_doctest_dir:
                item.add_marker("doctest")
            else:
                raise e


@pytest.fixture(autouse=True)
def clear_warnings():
    warning_dict.clear()
    yield
    warning_dict.clear()


@pytest.fixture(scope="session")
def engine() -> WindowEngine:
    return WindowEngine()


@pytest.fixture(scope="session")
def parallel_engine() -> WindowEngine:
    return WindowEngine.builder.config("max_workers", 4).create()


@pytest.fixture(scope="session")
def daylight() -> RowSet:
    """Hours of daylight per day of a year, one row per (month, day)."""
    import pandas

    data = pandas.read_csv(RESOURCES_DIR.joinpath("daylight.tsv"), sep="\t")
    return RowSet.from_pandas(data)


@pytest.fixture
def caplog_sqlwindow(caplog):
    caplog.set_level(logging.WARNING, logger="sqlwindow")
    return caplog
