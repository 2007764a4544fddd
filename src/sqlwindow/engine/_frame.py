#
# Copyright (c) 2012-2025 Snowflake Computing Inc. All rights reserved.
#

"""Resolves the frame of every row of an ordered partition.

Frames are half-open ranges ``[start, end)`` of ordered indices, kept as two int64
numpy arrays. ``start == end`` is an empty frame.
"""
import datetime
import decimal
from bisect import bisect_left, bisect_right
from typing import Any, Iterator, List, Optional, Tuple

import numpy
import pandas
from dateutil.relativedelta import relativedelta

from sqlwindow._internal.analyzer.expression import Expression
from sqlwindow._internal.analyzer.sort_expression import SortOrder
from sqlwindow._internal.analyzer.window_expression import (
    CurrentRow,
    FrameOffset,
    SpecifiedWindowFrame,
    UnboundedFollowing,
    UnboundedPreceding,
)
from sqlwindow._internal.error_message import SqlWindowExceptionMessages
from sqlwindow._internal.type_utils import (
    is_null,
    is_numeric_type,
    is_temporal_type,
)
from sqlwindow.engine._orderer import OrderedPartition
from sqlwindow.types import DataType, NullType

_NUMERIC_OFFSET_TYPES = (int, float, decimal.Decimal)
_TEMPORAL_OFFSET_TYPES = (datetime.timedelta, relativedelta)


class FrameBounds:
    """Resolved frames of one ordered partition."""

    def __init__(self, start: numpy.ndarray, end: numpy.ndarray) -> None:
        self.start = start
        self.end = end

    def __len__(self) -> int:
        return len(self.start)

    def __iter__(self) -> Iterator[Tuple[int, int]]:
        """Yields inclusive ``(lo, hi)`` pairs. ``lo > hi`` is an empty frame."""
        for start, end in zip(self.start.tolist(), self.end.tolist()):
            yield start, end - 1

    def inclusive(self) -> List[Tuple[int, int]]:
        return list(self)

    def indexer(self) -> "FrameIndexer":
        return FrameIndexer(self)


class FrameIndexer(pandas.api.indexers.BaseIndexer):
    """Feeds resolved frames to ``pandas.Series.rolling``.

    The series must be in the order of the partition the frames were resolved for:

    >>> import numpy, pandas
    >>> bounds = FrameBounds(numpy.array([0, 0, 1]), numpy.array([1, 2, 3]))
    >>> pandas.Series([1.0, 2.0, 3.0]).rolling(bounds.indexer(), min_periods=0).sum().tolist()
    [1.0, 3.0, 5.0]
    """

    def __init__(self, bounds: FrameBounds, **kwargs) -> None:  # noqa: FIR100
        super().__init__(**kwargs)
        self.bounds = bounds

    def get_window_bounds(
        self, num_values=0, min_periods=None, center=None, closed=None, step=None
    ):
        if num_values != len(self.bounds):
            raise ValueError(
                f"Frames were resolved for {len(self.bounds)} rows, got {num_values}"
            )
        return (
            self.bounds.start.astype(numpy.int64),
            self.bounds.end.astype(numpy.int64),
        )


def _offset_kind(boundary: Expression) -> Optional[str]:
    if not isinstance(boundary, FrameOffset):
        return None
    value = boundary.value
    if isinstance(value, bool):
        return "other"
    if isinstance(value, _NUMERIC_OFFSET_TYPES):
        return "numeric"
    if isinstance(value, _TEMPORAL_OFFSET_TYPES):
        return "temporal"
    return "other"


def _shift(value: Any, offset: Any) -> Any:
    if isinstance(value, decimal.Decimal) and isinstance(offset, float):
        offset = decimal.Decimal(repr(offset))
    elif isinstance(value, float) and isinstance(offset, decimal.Decimal):
        offset = float(offset)
    return value + offset


class FrameResolver:
    """Turns the frame clause of a window into per-row frames.

    The frame clause is validated when the resolver is created, so a malformed frame
    fails before any row is read.

    ROWS frames count rows from the current one and are clipped to the partition.
    RANGE frames work on the values of the single ORDER BY key: ``CURRENT ROW``
    stands for the current row's peer group, and an offset ``v`` selects the rows
    whose key lies within ``v`` of the current key, in sort direction. A row whose
    key is NULL gets its NULL peer group for any offset boundary.
    """

    def __init__(
        self,
        frame: SpecifiedWindowFrame,
        order_spec: List[SortOrder],
        key_type: Optional[DataType] = None,
    ) -> None:
        self.frame = frame
        self.order_spec = order_spec
        self.key_type = key_type
        self._validate()

    def _validate(self) -> None:
        frame = self.frame
        for boundary, position in ((frame.lower, "start"), (frame.upper, "end")):
            kind = _offset_kind(boundary)
            if kind is None:
                continue
            if not frame.is_range:
                if kind != "numeric" or not isinstance(boundary.value, int):
                    raise SqlWindowExceptionMessages.WINDOW_INVALID_FRAME_BOUNDARY(
                        boundary.sql, position
                    )
            elif kind == "other":
                raise SqlWindowExceptionMessages.WINDOW_INVALID_FRAME_BOUNDARY(
                    boundary.sql, position
                )

        if frame.is_range and frame.has_offset:
            if len(self.order_spec) != 1:
                raise SqlWindowExceptionMessages.WINDOW_RANGE_OFFSET_REQUIRES_SINGLE_ORDER_KEY(
                    len(self.order_spec)
                )
            key_name = self.order_spec[0].child.sql
            key_type = self.key_type if self.key_type is not None else NullType()
            kinds = {_offset_kind(b) for b in (frame.lower, frame.upper)} - {None}
            if is_numeric_type(key_type):
                allowed = {"numeric"}
            elif is_temporal_type(key_type):
                allowed = {"temporal"}
            elif isinstance(key_type, NullType):
                allowed = {"numeric", "temporal"}
            else:
                allowed = set()
            offset = (
                frame.lower if isinstance(frame.lower, FrameOffset) else frame.upper
            )
            if not kinds <= allowed or len(kinds) > 1:
                raise SqlWindowExceptionMessages.WINDOW_RANGE_OFFSET_UNSUPPORTED_TYPE(
                    key_name, key_type.simple_string(), offset.sql
                )

        frame.check_bounds()

    def resolve(self, partition: OrderedPartition) -> FrameBounds:
        size = len(partition)
        if self.frame.is_range:
            start, end = self._resolve_range(partition)
        else:
            start, end = self._resolve_rows(size)
        end = numpy.maximum(end, start)
        return FrameBounds(start.astype(numpy.int64), end.astype(numpy.int64))

    def _resolve_rows(self, size: int) -> Tuple[numpy.ndarray, numpy.ndarray]:
        index = numpy.arange(size, dtype=numpy.int64)
        lower, upper = self.frame.lower, self.frame.upper

        if isinstance(lower, UnboundedPreceding):
            start = numpy.zeros(size, dtype=numpy.int64)
        elif isinstance(lower, CurrentRow):
            start = index.copy()
        else:
            start = numpy.clip(index + lower.value, 0, size)

        if isinstance(upper, UnboundedFollowing):
            end = numpy.full(size, size, dtype=numpy.int64)
        elif isinstance(upper, CurrentRow):
            end = index + 1
        else:
            # + 1 to include the right endpoint
            end = numpy.clip(index + upper.value + 1, 0, size)
        return start, end

    def _resolve_range(
        self, partition: OrderedPartition
    ) -> Tuple[numpy.ndarray, numpy.ndarray]:
        size = len(partition)
        lower, upper = self.frame.lower, self.frame.upper

        if isinstance(lower, UnboundedPreceding):
            start = numpy.zeros(size, dtype=numpy.int64)
        elif isinstance(lower, CurrentRow):
            start = partition.peer_start.copy()
        else:
            start = self._offset_bounds(partition, lower, is_start=True)

        if isinstance(upper, UnboundedFollowing):
            end = numpy.full(size, size, dtype=numpy.int64)
        elif isinstance(upper, CurrentRow):
            end = partition.peer_end.copy()
        else:
            end = self._offset_bounds(partition, upper, is_start=False)
        return start, end

    def _offset_bounds(
        self, partition: OrderedPartition, boundary: FrameOffset, is_start: bool
    ) -> numpy.ndarray:
        size = len(partition)
        key = partition.sort_keys[0]
        keys = partition.ordered_values(key.values)
        nulls = [is_null(v) for v in keys]
        null_count = sum(nulls)
        # nulls sit together at one end of the ordered partition
        lo = null_count if key.nulls_first else 0
        hi = size if key.nulls_first else size - null_count

        segment = keys[lo:hi]
        ascending_segment = segment if key.ascending else segment[::-1]
        length = len(segment)
        offset = boundary.value
        temporal = _offset_kind(boundary) == "temporal"
        result = numpy.empty(size, dtype=numpy.int64)

        for j in range(size):
            if nulls[j]:
                result[j] = partition.peer_start[j] if is_start else partition.peer_end[j]
                continue
            try:
                target = (
                    _shift(keys[j], offset)
                    if key.ascending
                    else _shift(keys[j], -offset)
                )
            except OverflowError:
                result[j] = lo if boundary.sign < 0 else hi
                continue
            except ValueError:
                # calendar arithmetic past year 9999 or before year 1
                if not temporal:
                    raise
                result[j] = lo if boundary.sign < 0 else hi
                continue
            if key.ascending:
                found = (
                    bisect_left(ascending_segment, target)
                    if is_start
                    else bisect_right(ascending_segment, target)
                )
            else:
                found = length - (
                    bisect_right(ascending_segment, target)
                    if is_start
                    else bisect_left(ascending_segment, target)
                )
            result[j] = lo + found
        return result
