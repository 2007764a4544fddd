#!/usr/bin/env python3
#
# Copyright (c) 2012-2025 Snowflake Computing Inc. All rights reserved.
#
"""Field data types of a :class:`~sqlwindow.row_set.RowSet`."""
from typing import Iterator, List, Optional, Union


class DataType:
    """The base class of sqlwindow data types."""

    def __hash__(self):
        return hash(repr(self))

    def __eq__(self, other):
        return isinstance(other, self.__class__) and self.__dict__ == other.__dict__

    def __ne__(self, other):
        return not self.__eq__(other)

    def __repr__(self):
        return f"{self.__class__.__name__}()"

    @classmethod
    def type_name(cls) -> str:
        return cls.__name__[:-4].lower()

    def simple_string(self) -> str:
        return self.type_name()


# Data types
class NullType(DataType):
    """Represents a null type."""


class _AtomicType(DataType):
    pass


# Atomic types
class BinaryType(_AtomicType):
    """Binary data type."""


class BooleanType(_AtomicType):
    """Boolean data type."""


class StringType(_AtomicType):
    """String data type."""


class DateType(_AtomicType):
    """Date data type."""


class TimeType(_AtomicType):
    """Time data type."""


class TimestampType(_AtomicType):
    """Timestamp data type, optionally timezone aware."""

    def __init__(self, tz_aware: bool = False) -> None:
        self.tz_aware = tz_aware

    def __repr__(self) -> str:
        return "TimestampType(tz_aware=True)" if self.tz_aware else "TimestampType()"

    def simple_string(self) -> str:
        return "timestamp_tz" if self.tz_aware else "timestamp"


class _NumericType(_AtomicType):
    pass


# Numeric types
class _IntegralType(_NumericType):
    pass


class _FractionalType(_NumericType):
    pass


class LongType(_IntegralType):
    """Long integer data type. This maps to the BIGINT SQL type."""

    def simple_string(self) -> str:
        return "bigint"


class FloatType(_FractionalType):
    """Float data type."""


class DoubleType(_FractionalType):
    """Double data type."""


class DecimalType(_FractionalType):
    """Decimal data type. This maps to the DECIMAL(precision, scale) SQL type."""

    def __init__(self, precision: int = 38, scale: int = 0) -> None:
        self.precision = precision
        self.scale = scale

    def __repr__(self) -> str:
        return f"DecimalType({self.precision}, {self.scale})"

    def simple_string(self) -> str:
        return f"decimal({self.precision},{self.scale})"


class VariantType(DataType):
    """Values of mixed or unknown type."""


class StructField:
    """A named, typed field of a :class:`StructType`."""

    def __init__(self, name: str, datatype: DataType, nullable: bool = True) -> None:
        self.name = name
        self.datatype = datatype
        self.nullable = nullable

    def __repr__(self) -> str:
        return f"StructField({self.name!r}, {repr(self.datatype)}, nullable={self.nullable})"

    def __eq__(self, other):
        return isinstance(other, self.__class__) and (
            (self.name, self.datatype, self.nullable)
            == (other.name, other.datatype, other.nullable)
        )


class StructType:
    """The schema of a row set: an ordered list of :class:`StructField`."""

    def __init__(self, fields: Optional[List[StructField]] = None) -> None:
        self.fields = list(fields) if fields else []

    @property
    def names(self) -> List[str]:
        return [f.name for f in self.fields]

    def __repr__(self) -> str:
        return f"StructType([{', '.join(repr(f) for f in self.fields)}])"

    def __eq__(self, other):
        return isinstance(other, self.__class__) and self.fields == other.fields

    def __len__(self) -> int:
        return len(self.fields)

    def __iter__(self) -> Iterator[StructField]:
        return iter(self.fields)

    def __getitem__(self, item: Union[str, int, slice]) -> StructField:
        if isinstance(item, str):
            for field in self.fields:
                if field.name == item:
                    return field
            raise KeyError(f"No StructField named {item}")
        elif isinstance(item, int):
            return self.fields[item]
        elif isinstance(item, slice):
            return StructType(self.fields[item])
        else:
            raise TypeError(
                f"StructType items should be strings, integers or slices, but got {type(item).__name__}"
            )

    def __contains__(self, item: str) -> bool:
        return item in self.names
