#
# Copyright (c) 2012-2025 Snowflake Computing Inc. All rights reserved.
#

"""Orders one partition and segments it into peer groups."""
from functools import cmp_to_key, partial
from typing import Any, List, Sequence

import numpy

from sqlwindow._internal.error_message import SqlWindowExceptionMessages
from sqlwindow._internal.type_utils import is_null


class SortKey:
    """The values of one ORDER BY key for every row of the row set, with its
    direction and null ordering."""

    def __init__(
        self, name: str, values: Sequence[Any], ascending: bool, nulls_first: bool
    ) -> None:
        self.name = name
        self.values = values
        self.ascending = ascending
        self.nulls_first = nulls_first


def compare_values(
    ascending: bool, nulls_first: bool, key_name: str, value_a: Any, value_b: Any
) -> int:
    a_null, b_null = is_null(value_a), is_null(value_b)
    if a_null and b_null:
        return 0
    # null placement does not flip with the direction
    if a_null:
        return -1 if nulls_first else 1
    if b_null:
        return 1 if nulls_first else -1
    try:
        if value_a == value_b:
            return 0
        ret = -1 if value_a < value_b else 1
    except TypeError:
        raise SqlWindowExceptionMessages.ORDER_KEY_NOT_COMPARABLE(
            key_name, value_a, value_b
        ) from None
    return ret if ascending else -1 * ret


def _row_comparator(sort_keys: List[SortKey], a: int, b: int) -> int:
    for key in sort_keys:
        ret = compare_values(
            key.ascending, key.nulls_first, key.name, key.values[a], key.values[b]
        )
        if ret != 0:
            return ret
    return 0


class OrderedPartition:
    """A partition in window order.

    ``positions[j]`` is the row set position of the ``j``-th ordered row. Peer groups
    are maximal runs of rows with equal ORDER BY values: ``peer_id[j]`` numbers them
    from 0, and ``peer_start[j]`` / ``peer_end[j]`` bound the half-open range of
    ordered indices sharing row ``j``'s group.
    """

    def __init__(
        self,
        positions: numpy.ndarray,
        peer_id: numpy.ndarray,
        peer_start: numpy.ndarray,
        peer_end: numpy.ndarray,
        sort_keys: List[SortKey],
    ) -> None:
        self.positions = positions
        self.peer_id = peer_id
        self.peer_start = peer_start
        self.peer_end = peer_end
        self.sort_keys = sort_keys

    def __len__(self) -> int:
        return len(self.positions)

    @property
    def peer_group_count(self) -> int:
        return int(self.peer_id[-1]) + 1 if len(self.peer_id) else 0

    def ordered_values(self, values: Sequence[Any]) -> List[Any]:
        """Reorders row set values into the order of this partition."""
        return [values[p] for p in self.positions]


def order_partition(
    positions: numpy.ndarray, sort_keys: List[SortKey]
) -> OrderedPartition:
    """Sorts the row positions of a partition by ``sort_keys``, compared left to right.

    The sort is stable: rows that tie on every key keep their input order. Which tie
    comes first is not part of the contract of ROW_NUMBER and similar functions.
    """
    if sort_keys:
        comparator = partial(_row_comparator, sort_keys)
        ordered = numpy.array(
            sorted(positions.tolist(), key=cmp_to_key(comparator)), dtype=numpy.int64
        )
    else:
        ordered = numpy.asarray(positions, dtype=numpy.int64)

    size = len(ordered)
    is_new_group = numpy.zeros(size, dtype=bool)
    if size:
        is_new_group[0] = True
    if sort_keys:
        for j in range(1, size):
            is_new_group[j] = _row_comparator(sort_keys, ordered[j - 1], ordered[j]) != 0

    peer_id = numpy.cumsum(is_new_group, dtype=numpy.int64) - 1
    group_starts = numpy.flatnonzero(is_new_group)
    group_ends = numpy.append(group_starts[1:], size)
    peer_start = group_starts[peer_id] if size else numpy.empty(0, dtype=numpy.int64)
    peer_end = group_ends[peer_id] if size else numpy.empty(0, dtype=numpy.int64)
    return OrderedPartition(ordered, peer_id, peer_start, peer_end, sort_keys)
