#!/usr/bin/env python3
#
# Copyright (c) 2012-2025 Snowflake Computing Inc. All rights reserved.
#

import pytest

from sqlwindow import Column
from sqlwindow._internal.analyzer.expression import Attribute, Literal, Star
from sqlwindow.functions import col, lit, make_interval, sum


def test_column_constructor():
    assert isinstance(Column("a")._expression, Attribute)
    assert isinstance(Column("*")._expression, Star)
    assert repr(col("light")) == "Column[light]"


def test_column_is_not_a_bool():
    with pytest.raises(TypeError) as ex_info:
        bool(col("a"))
    assert "Cannot convert a Column object into bool" in str(ex_info.value)
    with pytest.raises(TypeError):
        iter(col("a"))


def test_negation_of_constants():
    negated = -lit(2.5)
    assert isinstance(negated._expression, Literal)
    assert negated._expression.value == -2.5
    assert str(-make_interval(days=1)) == "INTERVAL '-1 DAY'"
    with pytest.raises(TypeError):
        -col("a")
    with pytest.raises(TypeError):
        -lit(None)


def test_alias():
    assert str(col("a").alias("b")) == "a AS b"
    assert str(col("a").as_("b").name("c")) == "a AS c"
    assert col("a").alias("b")._output_name == "b"
    assert col("a")._output_name is None


def test_over_keeps_alias():
    column = sum("v").name("total").over()
    assert column._output_name == "total"
    assert str(column._window_expression) == "SUM(v) OVER ()"


def test_plain_column_has_no_window_expression():
    assert col("a")._window_expression is None
    assert sum("a")._window_expression is None
