#
# Copyright (c) 2012-2025 Snowflake Computing Inc. All rights reserved.
#

"""Splits the rows of a :class:`~sqlwindow.row_set.RowSet` into window partitions."""
import logging
from typing import Any, List, Sequence

import numpy
import pandas

from sqlwindow._internal.type_utils import is_null

_logger = logging.getLogger(__name__)


def partition_rows(
    key_columns: Sequence[Sequence[Any]],
    row_count: int,
    null_keys_equal: bool = True,
) -> List[numpy.ndarray]:
    """Groups row positions by their partition key values.

    ``key_columns`` holds one sequence of values per partition key, each in row order.
    Partitions are returned in order of their first row, and every partition lists its
    row positions in input order. Without keys all rows form a single partition; an
    empty input has no partitions.

    NULL keys compare equal to each other, so rows whose keys are NULL share a
    partition. With ``null_keys_equal=False`` every row with a NULL key forms a
    partition of its own.
    """
    if row_count == 0:
        return []
    if not key_columns:
        return [numpy.arange(row_count, dtype=numpy.int64)]

    keys = pandas.DataFrame(
        {i: pandas.Series(list(values), dtype=object) for i, values in enumerate(key_columns)}
    )
    codes = (
        keys.groupby(list(keys.columns), sort=False, dropna=False)
        .ngroup()
        .to_numpy(dtype=numpy.int64)
    )

    if not null_keys_equal:
        has_null = numpy.array(
            [any(is_null(values[i]) for values in key_columns) for i in range(row_count)],
            dtype=bool,
        )
        singletons = int(has_null.sum())
        if singletons:
            codes = codes.copy()
            codes[has_null] = codes.max() + 1 + numpy.arange(singletons)

    order = numpy.argsort(codes, kind="stable")
    boundaries = numpy.flatnonzero(numpy.diff(codes[order])) + 1
    partitions = numpy.split(order, boundaries)
    # group codes are not first-appearance ordered once singletons are split off
    partitions.sort(key=lambda positions: positions[0])

    _logger.debug("Split %d rows into %d partitions", row_count, len(partitions))
    return partitions
