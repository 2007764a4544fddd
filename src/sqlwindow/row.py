#!/usr/bin/env python3
#
# Copyright (c) 2012-2025 Snowflake Computing Inc. All rights reserved.
#

from typing import Any, Dict, Iterable, Optional, Tuple, Union


def _restore_row(values: Tuple, fields: Optional[Tuple[str, ...]]) -> "Row":
    return Row._from_fields(fields, values) if fields else Row(*values)


class Row(tuple):
    """Represents a row of a :class:`~sqlwindow.row_set.RowSet`.

    It is immutable and works like a tuple or a named tuple.

    >>> row = Row(1, 2)
    >>> row
    Row(1, 2)
    >>> row[0]
    1
    >>> named_row = Row(month=3, day=11, light=12.0)
    >>> named_row
    Row(month=3, day=11, light=12.0)
    >>> named_row["light"]
    12.0
    >>> named_row.day
    11
    """

    def __new__(cls, *values: Any, **named_values: Any):
        if values and named_values:
            raise ValueError("Either values or named_values is required but not both.")
        if named_values:
            row = tuple.__new__(cls, tuple(named_values.values()))
            row.__dict__["_fields"] = tuple(named_values.keys())
        else:
            row = tuple.__new__(cls, values)
            row.__dict__["_fields"] = None
        return row

    @classmethod
    def _from_fields(cls, fields: Iterable[str], values: Iterable[Any]) -> "Row":
        row = tuple.__new__(cls, tuple(values))
        row.__dict__["_fields"] = tuple(fields)
        if len(row._fields) != len(row):
            raise ValueError(
                f"{len(row._fields)} field names given for a row of {len(row)} values."
            )
        return row

    def _index_of(self, item: str) -> int:
        if not self._fields:
            raise KeyError(item)
        try:
            return self._fields.index(item)
        except ValueError:
            raise KeyError(item) from None

    def __getitem__(self, item: Union[int, str, slice]):
        if isinstance(item, int):
            return super().__getitem__(item)
        elif isinstance(item, slice):
            values = super().__getitem__(item)
            if self._fields:
                return Row._from_fields(self._fields[item], values)
            return Row(*values)
        else:  # str
            return super().__getitem__(self._index_of(item))

    def __setitem__(self, key, value):
        raise TypeError("Row object does not support item assignment")

    def __getattr__(self, item):
        try:
            return self[self._index_of(item)]
        except KeyError:
            raise AttributeError(f"Row object has no attribute {item}") from None

    def __setattr__(self, key, value):
        raise AttributeError("Can't set attribute to Row object")

    def __contains__(self, item):
        if self._fields:
            return item in self._fields
        return super().__contains__(item)

    def __repr__(self):
        if self._fields:
            return "Row({})".format(
                ", ".join(f"{k}={v!r}" for k, v in zip(self._fields, self))
            )
        return "Row({})".format(", ".join(f"{v!r}" for v in self))

    def __reduce__(self):
        return (_restore_row, (tuple(self), self._fields))

    def as_dict(self) -> Dict[str, Any]:
        """Convert to a dict if this row object has field names.

        >>> Row(month=6, day=21).as_dict()
        {'month': 6, 'day': 21}
        """
        if not self._fields:
            raise TypeError("Cannot convert a Row without field names to a dict.")
        return dict(zip(self._fields, self))

    # Add aliases for user code migration
    asDict = as_dict
