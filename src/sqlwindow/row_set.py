#!/usr/bin/env python3
#
# Copyright (c) 2012-2025 Snowflake Computing Inc. All rights reserved.
#

"""The materialized, read-only input of window evaluation."""
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

import pandas

from sqlwindow._internal.error_message import SqlWindowExceptionMessages
from sqlwindow._internal.type_utils import (
    infer_type,
    infer_type_from_dtype,
    merge_type,
)
from sqlwindow.row import Row
from sqlwindow.types import DataType, NullType, StructField, StructType

_logger = logging.getLogger(__name__)


def _infer_schema(data: pandas.DataFrame) -> StructType:
    fields = []
    for name in data.columns:
        series = data[name]
        datatype = infer_type_from_dtype(series.dtype)
        if datatype is None:
            datatype = NullType()
            for value in series:
                datatype = merge_type(datatype, infer_type(value))
        fields.append(StructField(str(name), datatype, nullable=True))
    return StructType(fields)


class RowSet:
    """A materialized, immutable sequence of rows with a schema.

    Rows are identified by their position ``0..N-1``. A RowSet is never modified by
    window evaluation: :meth:`~sqlwindow.engine.WindowEngine.with_window_columns`
    returns a new RowSet.

    Create one from records or from a pandas DataFrame:

        >>> rows = RowSet.from_records([(3, 1, 10.5), (3, 2, 10.6)], schema=["month", "day", "light"])
        >>> rows.schema.names
        ['month', 'day', 'light']
        >>> rows.collect()
        [Row(month=3, day=1, light=10.5), Row(month=3, day=2, light=10.6)]
    """

    def __init__(self, data: pandas.DataFrame, schema: Optional[StructType] = None) -> None:
        self._data = data.reset_index(drop=True)
        self._schema = schema if schema is not None else _infer_schema(self._data)
        if self._schema.names != [str(c) for c in self._data.columns]:
            raise ValueError(
                f"Schema {self._schema.names} does not match the columns {list(self._data.columns)}"
            )

    @classmethod
    def from_records(
        cls,
        data: Iterable[Union[Row, Sequence, Dict[str, Any]]],
        schema: Optional[Union[StructType, List[str]]] = None,
    ) -> "RowSet":
        """Creates a RowSet from tuples, :class:`~sqlwindow.row.Row` objects or dicts.

        Values are kept as given (no dtype coercion), so ``Decimal``, ``date`` and
        ``None`` survive unchanged. Field types are inferred from the values unless
        ``schema`` is a :class:`~sqlwindow.types.StructType`.
        """
        records = list(data)
        names: Optional[List[str]] = None
        if isinstance(schema, StructType):
            names = schema.names
        elif schema is not None:
            names = list(schema)

        if names is None and records:
            first = records[0]
            if isinstance(first, dict):
                names = list(first.keys())
            elif isinstance(first, Row) and first._fields:
                names = list(first._fields)
            else:
                names = [f"_{i + 1}" for i in range(len(first))]
        names = names or []

        rows = []
        for record in records:
            if isinstance(record, dict):
                rows.append([record.get(name) for name in names])
            else:
                if len(record) != len(names):
                    raise ValueError(
                        f"Expected {len(names)} values in row, got {len(record)}: {record!r}"
                    )
                rows.append(list(record))
        frame = pandas.DataFrame(rows, columns=names, dtype=object)
        return cls(frame, schema if isinstance(schema, StructType) else None)

    @classmethod
    def from_pandas(cls, data: pandas.DataFrame) -> "RowSet":
        """Creates a RowSet from a pandas DataFrame. Field types are inferred from the
        column dtypes, or from the values of ``object`` columns."""
        return cls(data.copy())

    @property
    def schema(self) -> StructType:
        return self._schema

    @property
    def columns(self) -> List[str]:
        return self._schema.names

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"RowSet(rows={len(self)}, schema={self._schema!r})"

    def datatype_of(self, name: str) -> DataType:
        if name not in self._schema:
            raise SqlWindowExceptionMessages.WINDOW_UNKNOWN_COLUMN(name, self.columns)
        return self._schema[name].datatype

    def column_values(self, name: str) -> List[Any]:
        """The values of a field in row order, as Python objects."""
        if name not in self._schema:
            raise SqlWindowExceptionMessages.WINDOW_UNKNOWN_COLUMN(name, self.columns)
        return self._data[name].to_numpy(dtype=object).tolist()

    def to_pandas(self) -> pandas.DataFrame:
        """Returns a copy of the rows as a pandas DataFrame."""
        return self._data.copy()

    def collect(self) -> List[Row]:
        """Returns all rows as a list of :class:`~sqlwindow.row.Row`."""
        names = self.columns
        return [
            Row._from_fields(names, values)
            for values in self._data.itertuples(index=False, name=None)
        ]

    def with_columns(
        self, names: List[str], values: List[Sequence[Any]], datatypes: Optional[List[DataType]] = None
    ) -> "RowSet":
        """Returns a new RowSet with the given columns appended, or replaced when a
        name already exists."""
        data = self._data.copy()
        fields = {field.name: field for field in self._schema}
        for i, (name, column) in enumerate(zip(names, values)):
            if len(column) != len(data):
                raise ValueError(
                    f"Column {name} has {len(column)} values for {len(data)} rows"
                )
            data[name] = pandas.Series(list(column), index=data.index, dtype=object)
            datatype = datatypes[i] if datatypes else None
            if datatype is None:
                datatype = NullType()
                for value in column:
                    datatype = merge_type(datatype, infer_type(value))
            fields[name] = StructField(name, datatype, nullable=True)
        _logger.debug("Appended columns %s to a row set of %d rows", names, len(data))
        return RowSet(data, StructType([fields[str(c)] for c in data.columns]))
