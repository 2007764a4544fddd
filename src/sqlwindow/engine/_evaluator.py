#
# Copyright (c) 2012-2025 Snowflake Computing Inc. All rights reserved.
#

"""Computes one value per row for every kind of window function.

Implementations are registered per :class:`WindowFunction` leaf class with
:func:`patch`. Each one receives the function and a :class:`PartitionInput`, and
returns the results of the partition in window order.
"""
import decimal
import logging
import threading
from bisect import bisect_left
from typing import Any, Callable, Dict, List, Optional, Type

import numpy

from sqlwindow._internal.analyzer.expression import (
    Attribute,
    Expression,
    Literal,
    Star,
)
from sqlwindow._internal.analyzer.window_function import (
    Avg,
    Count,
    CumeDist,
    DenseRank,
    FirstValue,
    Lag,
    LastValue,
    Lead,
    Max,
    Min,
    Ntile,
    NthValue,
    OffsetFunction,
    PercentRank,
    Rank,
    RowNumber,
    Sum,
    WindowFunction,
    leaf_window_functions,
)
from sqlwindow._internal.error_message import SqlWindowExceptionMessages
from sqlwindow._internal.type_utils import is_null, is_numeric_value
from sqlwindow.engine._frame import FrameBounds
from sqlwindow.engine._orderer import OrderedPartition

_logger = logging.getLogger(__name__)


class PartitionInput:
    """What a function implementation sees of one partition: the ordered rows, the
    resolved frames (``None`` for functions that ignore frames) and the values of
    the referenced fields, keyed by field name and in row set order."""

    def __init__(
        self,
        partition: OrderedPartition,
        frames: Optional[FrameBounds],
        columns: Dict[str, List[Any]],
    ) -> None:
        self.partition = partition
        self.frames = frames
        self.columns = columns

    def __len__(self) -> int:
        return len(self.partition)

    def values(self, expr: Optional[Expression]) -> List[Any]:
        """Values of ``expr`` for every row of the partition, in window order."""
        size = len(self.partition)
        if expr is None:
            return [None] * size
        if isinstance(expr, Attribute):
            return self.partition.ordered_values(self.columns[expr.name])
        if isinstance(expr, Literal):
            return [expr.value] * size
        raise NotImplementedError(
            f"[{type(expr).__name__}] cannot be evaluated inside a window function"
        )

    def row_index(self, ordered_index: int) -> int:
        return int(self.partition.positions[ordered_index])


class WindowFunctionImpl:
    def __init__(
        self,
        function_class: Type[WindowFunction],
        func_implementation: Callable[[Any, PartitionInput], List[Any]],
        validate: Optional[Callable[[Any], None]] = None,
    ) -> None:
        self.function_class = function_class
        self.impl = func_implementation
        self._validate = validate

    def validate(self, function: WindowFunction) -> None:
        if self._validate is not None:
            self._validate(function)

    def __call__(self, function: WindowFunction, data: PartitionInput) -> List[Any]:
        return self.impl(function, data)


class WindowFunctionRegistry:
    _instance = None
    _lock_init = threading.Lock()

    def __init__(self) -> None:
        self._registry: Dict[Type[WindowFunction], WindowFunctionImpl] = dict()
        self._lock = threading.RLock()

    @classmethod
    def get_or_create(cls) -> "WindowFunctionRegistry":
        with cls._lock_init:
            if cls._instance is None:
                cls._instance = WindowFunctionRegistry()
        return cls._instance

    def get_function(self, function: WindowFunction) -> WindowFunctionImpl:
        with self._lock:
            impl = self._registry.get(type(function))
        if impl is None:
            raise NotImplementedError(
                f"Window function [{function.pretty_name}] has no implementation"
            )
        return impl

    def register(
        self,
        function_class: Type[WindowFunction],
        func_implementation: Callable,
        *args,
        **kwargs,
    ) -> WindowFunctionImpl:
        impl = WindowFunctionImpl(function_class, func_implementation, *args, **kwargs)
        with self._lock:
            self._registry[function_class] = impl
        return impl

    def unregister(self, function_class: Type[WindowFunction]) -> None:
        with self._lock:
            self._registry.pop(function_class, None)

    def registered_classes(self) -> List[Type[WindowFunction]]:
        with self._lock:
            return list(self._registry)


def patch(function_class, *args, **kwargs):
    def decorator(implementation):
        return WindowFunctionRegistry.get_or_create().register(
            function_class, implementation, *args, **kwargs
        )

    return decorator


def check_exhaustive() -> None:
    """Every concrete window function must have an implementation."""
    registered = set(WindowFunctionRegistry.get_or_create().registered_classes())
    missing = [
        cls.name for cls in leaf_window_functions() if cls not in registered
    ]
    if missing:
        raise NotImplementedError(
            f"Window functions without implementation: {', '.join(sorted(missing))}"
        )
    _logger.debug("Window function implementations: %d", len(registered))


def evaluate_function(function: WindowFunction, data: PartitionInput) -> List[Any]:
    return WindowFunctionRegistry.get_or_create().get_function(function)(
        function, data
    )


def validate_function(function: WindowFunction) -> None:
    WindowFunctionRegistry.get_or_create().get_function(function).validate(function)


# Argument checks


def _is_integer(value: Any) -> bool:
    return isinstance(value, (int, numpy.integer)) and not isinstance(
        value, (bool, numpy.bool_)
    )


def _validate_ntile(function: Ntile) -> None:
    if not _is_integer(function.n) or function.n <= 0:
        raise SqlWindowExceptionMessages.WINDOW_FUNCTION_INVALID_ARGUMENT(
            function.name, "n", function.n, "must be a positive integer"
        )


def _validate_lag_lead(function: OffsetFunction) -> None:
    if not _is_integer(function.offset) or function.offset < 0:
        raise SqlWindowExceptionMessages.WINDOW_FUNCTION_INVALID_ARGUMENT(
            function.name, "offset", function.offset, "must be a non-negative integer"
        )


def _validate_nth_value(function: NthValue) -> None:
    if not _is_integer(function.offset) or function.offset <= 0:
        raise SqlWindowExceptionMessages.WINDOW_FUNCTION_INVALID_ARGUMENT(
            function.name, "n", function.offset, "must be a positive integer"
        )


# Aggregates


def _add(total: Any, value: Any) -> Any:
    if total is None:
        return value
    if isinstance(total, decimal.Decimal) != isinstance(value, decimal.Decimal):
        if isinstance(total, float) or isinstance(value, float):
            return float(total) + float(value)
    return total + value


def _fold_frames(data: PartitionInput, fold: Callable) -> List[Any]:
    """Applies ``fold(lo, hi)`` to every frame. Rows sharing a frame share the result."""
    results = []
    previous = None
    result = None
    for lo, hi in data.frames:
        if (lo, hi) != previous:
            result = fold(lo, hi)
            previous = (lo, hi)
        results.append(result)
    return results


def _numeric_fold(function: WindowFunction, data: PartitionInput):
    values = data.values(function.child)

    def fold(lo: int, hi: int):
        total, count = None, 0
        for j in range(lo, hi + 1):
            value = values[j]
            if is_null(value):
                continue
            total = _add(total, value)
            count += 1
        return total, count

    return fold


def check_input_types(function: WindowFunction, values: List[Any]) -> None:
    """SUM and AVG only accept numbers. ``values`` are in row set order, so the
    error names the first offending row of the input."""
    if not isinstance(function, (Sum, Avg)):
        return
    for index, value in enumerate(values):
        if not is_null(value) and not is_numeric_value(value):
            raise SqlWindowExceptionMessages.FUNCTION_INCOMPATIBLE_TYPE(
                function.name, value, index
            )


@patch(Sum)
def eval_sum(function: Sum, data: PartitionInput) -> List[Any]:
    fold = _numeric_fold(function, data)
    return _fold_frames(data, lambda lo, hi: fold(lo, hi)[0])


@patch(Avg)
def eval_avg(function: Avg, data: PartitionInput) -> List[Any]:
    fold = _numeric_fold(function, data)

    def average(lo: int, hi: int):
        total, count = fold(lo, hi)
        if count == 0:
            return None
        if isinstance(total, decimal.Decimal):
            return total / decimal.Decimal(count)
        return float(total) / count

    return _fold_frames(data, average)


def _extreme(function: WindowFunction, data: PartitionInput, want_max: bool):
    values = data.values(function.child)

    def fold(lo: int, hi: int):
        best = None
        for j in range(lo, hi + 1):
            value = values[j]
            if is_null(value):
                continue
            try:
                if best is None or (value > best if want_max else value < best):
                    best = value
            except TypeError:
                raise SqlWindowExceptionMessages.FUNCTION_INCOMPATIBLE_TYPE(
                    function.name, value, data.row_index(j)
                ) from None
        return best

    return _fold_frames(data, fold)


@patch(Min)
def eval_min(function: Min, data: PartitionInput) -> List[Any]:
    return _extreme(function, data, want_max=False)


@patch(Max)
def eval_max(function: Max, data: PartitionInput) -> List[Any]:
    return _extreme(function, data, want_max=True)


@patch(Count)
def eval_count(function: Count, data: PartitionInput) -> List[Any]:
    if isinstance(function.child, Star):
        counted = numpy.ones(len(data), dtype=numpy.int64)
    else:
        counted = numpy.array(
            [not is_null(v) for v in data.values(function.child)], dtype=numpy.int64
        )
    prefix = numpy.concatenate(([0], numpy.cumsum(counted)))
    return (prefix[data.frames.end] - prefix[data.frames.start]).tolist()


# Ranking


@patch(Rank)
def eval_rank(function: Rank, data: PartitionInput) -> List[Any]:
    return (data.partition.peer_start + 1).tolist()


@patch(DenseRank)
def eval_dense_rank(function: DenseRank, data: PartitionInput) -> List[Any]:
    return (data.partition.peer_id + 1).tolist()


@patch(RowNumber)
def eval_row_number(function: RowNumber, data: PartitionInput) -> List[Any]:
    return list(range(1, len(data) + 1))


@patch(PercentRank)
def eval_percent_rank(function: PercentRank, data: PartitionInput) -> List[Any]:
    size = len(data)
    if size == 1:
        return [0.0]
    return [float(start) / (size - 1) for start in data.partition.peer_start.tolist()]


@patch(CumeDist)
def eval_cume_dist(function: CumeDist, data: PartitionInput) -> List[Any]:
    size = len(data)
    return [float(end) / size for end in data.partition.peer_end.tolist()]


@patch(Ntile, validate=_validate_ntile)
def eval_ntile(function: Ntile, data: PartitionInput) -> List[Any]:
    size, buckets = len(data), int(function.n)
    bucket_size, remainder = divmod(size, buckets)
    # the first `remainder` buckets hold one extra row
    large_rows = remainder * (bucket_size + 1)
    results = []
    for j in range(size):
        if j < large_rows:
            results.append(j // (bucket_size + 1) + 1)
        else:
            results.append(remainder + (j - large_rows) // bucket_size + 1)
    return results


# Offsets


class _NonNullIndex:
    """Positions of the non-NULL values of a partition, for IGNORE NULLS lookups."""

    def __init__(self, values: List[Any]) -> None:
        self.positions = [j for j, v in enumerate(values) if not is_null(v)]

    def count_before(self, index: int) -> int:
        return bisect_left(self.positions, index)


def _shifted_value(function: OffsetFunction, data: PartitionInput, direction: int):
    values = data.values(function.expr)
    defaults = data.values(function.default)
    offset = int(function.offset)
    size = len(values)
    results = []

    if not function.ignore_nulls or offset == 0:
        for j in range(size):
            target = j + direction * offset
            results.append(values[target] if 0 <= target < size else defaults[j])
        return results

    non_null = _NonNullIndex(values)
    for j in range(size):
        before = non_null.count_before(j)
        if direction < 0:
            ordinal = before - offset
        else:
            # skip the current row itself when it is not NULL
            after_start = non_null.count_before(j + 1)
            ordinal = after_start + offset - 1
        if 0 <= ordinal < len(non_null.positions):
            results.append(values[non_null.positions[ordinal]])
        else:
            results.append(defaults[j])
    return results


@patch(Lag, validate=_validate_lag_lead)
def eval_lag(function: Lag, data: PartitionInput) -> List[Any]:
    return _shifted_value(function, data, direction=-1)


@patch(Lead, validate=_validate_lag_lead)
def eval_lead(function: Lead, data: PartitionInput) -> List[Any]:
    return _shifted_value(function, data, direction=1)


def _nth_in_frame(function: OffsetFunction, data: PartitionInput, pick: Callable):
    values = data.values(function.expr)
    if function.ignore_nulls:
        candidates = _NonNullIndex(values)
    else:
        candidates = None
    results = []
    for lo, hi in data.frames:
        if candidates is None:
            first, last = lo, hi + 1
            positions = None
        else:
            first = candidates.count_before(lo)
            last = candidates.count_before(hi + 1)
            positions = candidates.positions
        index = pick(first, last)
        if not first <= index < last:
            results.append(None)
        else:
            results.append(values[positions[index] if positions is not None else index])
    return results


@patch(FirstValue)
def eval_first_value(function: FirstValue, data: PartitionInput) -> List[Any]:
    return _nth_in_frame(function, data, lambda first, last: first)


@patch(LastValue)
def eval_last_value(function: LastValue, data: PartitionInput) -> List[Any]:
    return _nth_in_frame(function, data, lambda first, last: last - 1)


@patch(NthValue, validate=_validate_nth_value)
def eval_nth_value(function: NthValue, data: PartitionInput) -> List[Any]:
    n = int(function.offset)
    return _nth_in_frame(function, data, lambda first, last: first + n - 1)


check_exhaustive()
