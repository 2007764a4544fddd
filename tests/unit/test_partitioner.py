#
# Copyright (c) 2012-2025 Snowflake Computing Inc. All rights reserved.
#

import math

import numpy

from sqlwindow.engine._partitioner import partition_rows


def _as_lists(partitions):
    return [p.tolist() for p in partitions]


def test_empty_input_has_no_partitions():
    assert partition_rows([], 0) == []
    assert partition_rows([[]], 0) == []


def test_no_keys_is_one_partition():
    partitions = partition_rows([], 4)
    assert _as_lists(partitions) == [[0, 1, 2, 3]]
    assert partitions[0].dtype == numpy.int64


def test_partitions_in_order_of_first_row():
    keys = [["b", "a", "b", "c", "a"]]
    assert _as_lists(partition_rows(keys, 5)) == [[0, 2], [1, 4], [3]]


def test_multiple_keys():
    keys = [[1, 1, 2, 1], ["x", "y", "x", "x"]]
    assert _as_lists(partition_rows(keys, 4)) == [[0, 3], [1], [2]]


def test_null_keys_share_a_partition():
    keys = [[None, "a", math.nan, "a", None]]
    assert _as_lists(partition_rows(keys, 5)) == [[0, 2, 4], [1, 3]]


def test_null_keys_as_singletons():
    keys = [[None, "a", None, "a"]]
    assert _as_lists(partition_rows(keys, 4, null_keys_equal=False)) == [
        [0],
        [1, 3],
        [2],
    ]


def test_null_in_any_key_makes_a_singleton():
    keys = [[1, 1, 1], [None, 2, None]]
    assert _as_lists(partition_rows(keys, 3, null_keys_equal=True)) == [[0, 2], [1]]
    assert _as_lists(partition_rows(keys, 3, null_keys_equal=False)) == [
        [0],
        [1],
        [2],
    ]


def test_every_row_in_exactly_one_partition():
    keys = [[i % 7 for i in range(100)]]
    partitions = partition_rows(keys, 100)
    assert len(partitions) == 7
    assert sorted(numpy.concatenate(partitions).tolist()) == list(range(100))
    for positions in partitions:
        assert positions.tolist() == sorted(positions.tolist())
