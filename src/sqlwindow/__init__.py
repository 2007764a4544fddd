#!/usr/bin/env python3
#
# Copyright (c) 2012-2025 Snowflake Computing Inc. All rights reserved.
#

"""
Contains core classes of sqlwindow.
"""

# types, functions, exceptions still use its own modules

__all__ = [
    "Column",
    "Row",
    "RowSet",
    "Window",
    "WindowSpec",
    "WindowEngine",
    "WindowResult",
    "PassOutcome",
]


from sqlwindow.version import VERSION

__version__ = ".".join(str(x) for x in VERSION if x is not None)


from sqlwindow.column import Column
from sqlwindow.engine import PassOutcome, WindowEngine, WindowResult
from sqlwindow.row import Row
from sqlwindow.row_set import RowSet
from sqlwindow.window import Window, WindowSpec
