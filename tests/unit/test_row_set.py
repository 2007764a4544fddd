#!/usr/bin/env python3
#
# Copyright (c) 2012-2025 Snowflake Computing Inc. All rights reserved.
#

import datetime
from decimal import Decimal

import pandas
import pytest

from sqlwindow import Row, RowSet
from sqlwindow.exceptions import WindowConfigurationException
from sqlwindow.types import (
    DateType,
    DecimalType,
    DoubleType,
    LongType,
    NullType,
    StringType,
    StructField,
    StructType,
    TimestampType,
    VariantType,
)


def test_from_records_with_names():
    rows = RowSet.from_records([(1, "a", 1.5), (2, None, 2.5)], schema=["i", "s", "x"])
    assert rows.columns == ["i", "s", "x"]
    assert rows.schema == StructType(
        [
            StructField("i", LongType()),
            StructField("s", StringType()),
            StructField("x", DoubleType()),
        ]
    )
    assert rows.collect() == [Row(i=1, s="a", x=1.5), Row(i=2, s=None, x=2.5)]
    assert len(rows) == 2


def test_from_records_infers_names():
    assert RowSet.from_records([(1, 2)]).columns == ["_1", "_2"]
    assert RowSet.from_records([{"b": 1, "a": 2}, {"a": 3}]).column_values("b") == [1, None]
    assert RowSet.from_records([Row(month=1, day=2)]).columns == ["month", "day"]


def test_from_records_keeps_python_values():
    rows = RowSet.from_records(
        [(Decimal("1.10"), datetime.date(2024, 2, 29), None)], schema=["d", "day", "n"]
    )
    assert rows.column_values("d") == [Decimal("1.10")]
    assert rows.column_values("day") == [datetime.date(2024, 2, 29)]
    assert rows.datatype_of("d") == DecimalType(38, 18)
    assert rows.datatype_of("day") == DateType()
    assert rows.datatype_of("n") == NullType()


def test_mixed_values_widen():
    rows = RowSet.from_records([(1, 1), (2.5, "a")], schema=["x", "y"])
    assert rows.datatype_of("x") == DoubleType()
    assert rows.datatype_of("y") == VariantType()


def test_from_records_with_struct_type():
    schema = StructType([StructField("light", DoubleType())])
    rows = RowSet.from_records([(None,)], schema=schema)
    assert rows.datatype_of("light") == DoubleType()


def test_from_records_rejects_ragged_rows():
    with pytest.raises(ValueError):
        RowSet.from_records([(1, 2), (3,)], schema=["a", "b"])


def test_from_pandas():
    df = pandas.DataFrame(
        {
            "month": [1, 2],
            "light": [9.05, 10.5],
            "ts": pandas.to_datetime(["2024-01-01", "2024-02-01"]),
        },
        index=[10, 20],
    )
    rows = RowSet.from_pandas(df)
    assert rows.datatype_of("month") == LongType()
    assert rows.datatype_of("light") == DoubleType()
    assert rows.datatype_of("ts") == TimestampType()
    assert rows.column_values("month") == [1, 2]
    # the index is dropped
    assert rows.to_pandas().index.tolist() == [0, 1]
    df.loc[10, "month"] = 12
    assert rows.column_values("month") == [1, 2]


def test_unknown_column():
    rows = RowSet.from_records([(1,)], schema=["a"])
    with pytest.raises(WindowConfigurationException) as ex_info:
        rows.column_values("b")
    assert ex_info.value.error_code == "1104"
    with pytest.raises(WindowConfigurationException):
        rows.datatype_of("b")


def test_schema_must_match_columns():
    with pytest.raises(ValueError):
        RowSet(pandas.DataFrame({"a": [1]}), StructType([StructField("b", LongType())]))


def test_with_columns():
    rows = RowSet.from_records([(1,), (2,)], schema=["a"])
    extended = rows.with_columns(["b", "a"], [[0.5, None], ["x", "y"]])
    assert extended.columns == ["a", "b"]
    assert extended.column_values("a") == ["x", "y"]
    assert extended.datatype_of("a") == StringType()
    assert extended.datatype_of("b") == DoubleType()
    assert rows.column_values("a") == [1, 2]

    with pytest.raises(ValueError):
        rows.with_columns(["c"], [[1]])
