#!/usr/bin/env python3
#
# Copyright (c) 2012-2025 Snowflake Computing Inc. All rights reserved.
#
import logging

import pytest
from _pytest.doctest import DoctestItem

from sqlwindow._internal.utils import warning_dict
from sqlwindow.engine import WindowEngine
from sqlwindow.functions import col, lit
from sqlwindow.row_set import RowSet
from sqlwindow.window import Window

logging.getLogger("sqlwindow").setLevel(logging.ERROR)


@pytest.fixture(autouse=True, scope="module")
def add_window_engine(doctest_namespace):
    doctest_namespace["engine"] = WindowEngine()
    yield
    warning_dict.clear()


@pytest.fixture(autouse=True, scope="module")
def add_doctest_imports(doctest_namespace) -> None:
    """
    Make the builder names available for doctests.
    """
    doctest_namespace["col"] = col
    doctest_namespace["lit"] = lit
    doctest_namespace["RowSet"] = RowSet
    doctest_namespace["Window"] = Window


def pytest_collection_modifyitems(config, items):
    for item in items:
        if isinstance(item, DoctestItem):
            item.add_marker("doctest")
