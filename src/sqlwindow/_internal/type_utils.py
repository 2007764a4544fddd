#
# Copyright (c) 2012-2025 Snowflake Computing Inc. All rights reserved.
#

import datetime
import decimal
from typing import Any, Dict, Optional, Type, Union

import numpy
import pandas

import sqlwindow
from sqlwindow.types import (
    BinaryType,
    BooleanType,
    DataType,
    DateType,
    DecimalType,
    DoubleType,
    FloatType,
    LongType,
    NullType,
    StringType,
    TimestampType,
    TimeType,
    VariantType,
    _NumericType,
)

NoneType = type(None)

PYTHON_TO_SQL_TYPE_MAPPINGS: Dict[type, Type[DataType]] = {
    NoneType: NullType,
    bool: BooleanType,
    int: LongType,
    float: DoubleType,
    str: StringType,
    bytearray: BinaryType,
    bytes: BinaryType,
    decimal.Decimal: DecimalType,
    datetime.date: DateType,
    datetime.datetime: TimestampType,
    datetime.time: TimeType,
    pandas.Timestamp: TimestampType,
    numpy.bool_: BooleanType,
    numpy.int8: LongType,
    numpy.int16: LongType,
    numpy.int32: LongType,
    numpy.int64: LongType,
    numpy.float32: FloatType,
    numpy.float64: DoubleType,
}


def is_null(value: Any) -> bool:
    """SQL NULL test for a scalar: ``None``, ``NaN``, ``NaT`` and ``pd.NA`` are all NULL."""
    if value is None:
        return True
    # array-like values are never NULL scalars
    if not pandas.api.types.is_scalar(value):
        return False
    return bool(pandas.isna(value))


def infer_type(obj: Any) -> DataType:
    """Infer the DataType from obj"""
    if is_null(obj):
        return NullType()

    datatype = PYTHON_TO_SQL_TYPE_MAPPINGS.get(type(obj))
    if datatype is DecimalType:
        # the precision and scale of `obj` may be different from row to row.
        return DecimalType(38, 18)
    elif datatype is TimestampType:
        return TimestampType(tz_aware=obj.tzinfo is not None)
    elif datatype is not None:
        return datatype()
    return VariantType()


def merge_type(a: DataType, b: DataType) -> DataType:
    if isinstance(a, NullType):
        return b
    elif isinstance(b, NullType):
        return a
    elif type(a) is type(b):
        return a
    elif isinstance(a, _NumericType) and isinstance(b, _NumericType):
        # int and float mixed in a single field widen to double
        return DoubleType()
    else:
        return VariantType()


def infer_type_from_dtype(dtype: Any) -> Optional[DataType]:
    """Map a pandas dtype to a DataType. Returns None for object columns, whose type
    must be inferred from their values."""
    from pandas.api.types import (
        is_bool_dtype,
        is_datetime64_any_dtype,
        is_float_dtype,
        is_integer_dtype,
        is_object_dtype,
        is_string_dtype,
    )

    if is_bool_dtype(dtype):
        return BooleanType()
    if is_integer_dtype(dtype):
        return LongType()
    if is_float_dtype(dtype):
        return DoubleType()
    if is_datetime64_any_dtype(dtype):
        return TimestampType(tz_aware=getattr(dtype, "tz", None) is not None)
    if is_object_dtype(dtype):
        return None
    if is_string_dtype(dtype):
        return StringType()
    return None


def is_numeric_type(datatype: DataType) -> bool:
    return isinstance(datatype, _NumericType)


def is_temporal_type(datatype: DataType) -> bool:
    return isinstance(datatype, (DateType, TimestampType))


def is_numeric_value(value: Any) -> bool:
    # bool is an int subclass but not a SQL number
    return isinstance(value, (int, float, decimal.Decimal, numpy.number)) and not isinstance(
        value, (bool, numpy.bool_)
    )


ColumnOrName = Union["sqlwindow.column.Column", str]
