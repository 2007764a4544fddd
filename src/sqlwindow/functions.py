#!/usr/bin/env python3
#
# Copyright (c) 2012-2025 Snowflake Computing Inc. All rights reserved.
#

"""
Provides utility and window functions that generate :class:`~sqlwindow.column.Column`
expressions that you can pass to :meth:`~sqlwindow.column.Column.over` and evaluate
with a :class:`~sqlwindow.engine.WindowEngine`.

Every function returns a :class:`~sqlwindow.column.Column`. Aggregate functions take a
column name or a :class:`~sqlwindow.column.Column`:

    >>> from sqlwindow.functions import col, avg, rank, lag
    >>> from sqlwindow.window import Window
    >>> print(avg("light").over(Window.order_by("day").rows_between(-6, Window.CURRENT_ROW)))
    AVG(light) OVER (ORDER BY day ASC NULLS FIRST ROWS BETWEEN 6 PRECEDING AND CURRENT ROW)
    >>> print(rank().over(Window.partition_by("month").order_by(col("light").desc())))
    RANK() OVER (PARTITION BY month ORDER BY light DESC NULLS LAST)
    >>> print(lag("light", 1, 0.0).over(Window.order_by("month", "day")))
    LAG(light, 1, 0.0) OVER (ORDER BY month ASC NULLS FIRST, day ASC NULLS FIRST)

The names :func:`sum`, :func:`min` and :func:`max` shadow the Python built-ins, as
they do in SQL, so import them by module or by alias where that matters.
"""
from typing import Any, Optional, Union

from dateutil.relativedelta import relativedelta

from sqlwindow._internal.analyzer.expression import Expression, Interval, Literal
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
    PercentRank,
    Rank,
    RowNumber,
    Sum,
)
from sqlwindow._internal.type_utils import ColumnOrName
from sqlwindow.column import Column

LiteralType = Union[None, bool, int, float, str, bytes, Any]
ColumnOrLiteral = Union[Column, LiteralType]


def _to_col_if_str(col: ColumnOrName, func_name: str) -> Column:
    if isinstance(col, Column):
        return col
    elif isinstance(col, str):
        return Column(col)
    else:
        raise TypeError(
            f"'{func_name.upper()}' expected Column or str, got: {type(col)}"
        )


def _to_expr(value: ColumnOrLiteral) -> Optional[Expression]:
    if value is None:
        return None
    if isinstance(value, Column):
        return value._expression
    return Literal(value)


def col(col_name: str) -> Column:
    """Returns the :class:`~sqlwindow.column.Column` with the specified name.

    Example::

        >>> print(col("light"))
        light
    """
    return Column(col_name)


column = col


def lit(literal: LiteralType) -> Column:
    """
    Creates a :class:`~sqlwindow.column.Column` expression for a literal value,
    such as the default of :func:`lag` or a numeric RANGE frame offset.

    Example::

        >>> print(lit(9.0))
        9.0
        >>> print(-lit(3))
        -3
    """
    return literal if isinstance(literal, Column) else Column(Literal(literal))


def make_interval(
    years: Optional[int] = None,
    quarters: Optional[int] = None,
    months: Optional[int] = None,
    weeks: Optional[int] = None,
    days: Optional[int] = None,
    hours: Optional[int] = None,
    minutes: Optional[int] = None,
    seconds: Optional[int] = None,
    mins: Optional[int] = None,
    secs: Optional[int] = None,
) -> Column:
    """
    Creates an interval column with the specified years, quarters, months, weeks, days,
    hours, minutes and seconds. ``mins`` and ``secs`` are aliases of ``minutes`` and
    ``seconds``.

    Intervals are calendar aware: one month added to January 31 lands on the last day of
    February. They can only be used as RANGE frame offsets over a DATE or TIMESTAMP ORDER BY
    key, see :meth:`~sqlwindow.window.Window.range_between`. Negate an interval to
    make a PRECEDING offset.

    Example::

        >>> print(make_interval(days=7))
        INTERVAL '7 DAY'
        >>> print(-make_interval(years=1, months=2))
        INTERVAL '-1 YEAR, -2 MONTH'
    """
    if minutes is not None and mins is not None:
        raise ValueError("Only one of minutes and mins can be set.")
    if seconds is not None and secs is not None:
        raise ValueError("Only one of seconds and secs can be set.")
    delta = relativedelta(
        years=years or 0,
        months=(months or 0) + 3 * (quarters or 0),
        weeks=weeks or 0,
        days=days or 0,
        hours=hours or 0,
        minutes=minutes or mins or 0,
        seconds=seconds or secs or 0,
    )
    return Column(Interval(delta))


def sum(e: ColumnOrName) -> Column:
    """Returns the sum of non-NULL records in a window frame. If all records inside
    the frame are NULL, the function returns NULL. The result keeps the type of the
    input: integers sum to integers and decimals to decimals.

    Example::

        >>> from sqlwindow.window import Window
        >>> print(sum("light").over(Window.order_by("day").range_between(Window.UNBOUNDED_PRECEDING, 0)))
        SUM(light) OVER (ORDER BY day ASC NULLS FIRST RANGE BETWEEN UNBOUNDED PRECEDING AND CURRENT ROW)
    """
    c = _to_col_if_str(e, "sum")
    return Column(Sum(c._expression))


def avg(e: ColumnOrName) -> Column:
    """Returns the average of non-NULL records in a window frame. If all records
    inside the frame are NULL, the function returns NULL. Decimal inputs average to a
    decimal, every other numeric input to a float."""
    c = _to_col_if_str(e, "avg")
    return Column(Avg(c._expression))


mean = avg


def min(e: ColumnOrName) -> Column:
    """Returns the minimum non-NULL value in a window frame, or NULL for an empty
    or all-NULL frame."""
    c = _to_col_if_str(e, "min")
    return Column(Min(c._expression))


def max(e: ColumnOrName) -> Column:
    """Returns the maximum non-NULL value in a window frame, or NULL for an empty
    or all-NULL frame."""
    c = _to_col_if_str(e, "max")
    return Column(Max(c._expression))


def count(e: ColumnOrName) -> Column:
    """Returns either the number of non-NULL records for the specified column, or the
    total number of records in the frame when ``e`` is ``"*"``.

    Example::

        >>> print(count("*").over())
        COUNT(*) OVER ()
    """
    c = _to_col_if_str(e, "count")
    return Column(Count(c._expression))


def rank() -> Column:
    """
    Returns the rank of a value within an ordered group of values.
    The rank value starts at 1 and continues up sequentially.
    If two values are the same, they have the same rank, and the next rank
    skips as many positions as there were ties.
    """
    return Column(Rank())


def dense_rank() -> Column:
    """
    Returns the rank of a value within a group of values, without gaps in the ranks.
    The rank value starts at 1 and continues up sequentially.
    If two values are the same, they will have the same rank.
    """
    return Column(DenseRank())


def row_number() -> Column:
    """
    Returns a unique row number for each row within a window partition.
    The row number starts at 1 and continues up sequentially. Rows that tie on
    the ORDER BY keys are numbered in an implementation defined order.
    """
    return Column(RowNumber())


def percent_rank() -> Column:
    """
    Returns the relative rank of a value within a group of values, specified as a
    percentage ranging from 0.0 to 1.0: ``(rank - 1) / (rows in partition - 1)``,
    and 0.0 for a partition of one row.
    """
    return Column(PercentRank())


def cume_dist() -> Column:
    """
    Finds the cumulative distribution of a value with regard to other values
    within the same window partition: the fraction of rows ordered at or before
    the current row, peers included.
    """
    return Column(CumeDist())


def ntile(n: int) -> Column:
    """
    Divides an ordered data set equally into the number of buckets specified by n.
    Buckets are sequentially numbered 1 through n. When the rows do not divide
    evenly, the first buckets get one extra row each.

    Args:
        n: The desired number of buckets; must be a positive integer value.
    """
    return Column(Ntile(n))


def lag(
    e: ColumnOrName,
    offset: int = 1,
    default_value: Optional[ColumnOrLiteral] = None,
    ignore_nulls: bool = False,
) -> Column:
    """
    Accesses data in a previous row of the same ordered partition without having to
    join the row set to itself. Returns ``default_value`` (NULL when not given) if
    there is no row ``offset`` positions back. The window frame is ignored.

    With ``ignore_nulls=True`` rows whose value is NULL are skipped when counting
    the offset.
    """
    c = _to_col_if_str(e, "lag")
    return Column(Lag(c._expression, offset, _to_expr(default_value), ignore_nulls))


def lead(
    e: ColumnOrName,
    offset: int = 1,
    default_value: Optional[ColumnOrLiteral] = None,
    ignore_nulls: bool = False,
) -> Column:
    """
    Accesses data in a subsequent row of the same ordered partition without having
    to join the row set to itself. Returns ``default_value`` (NULL when not given) if
    there is no row ``offset`` positions ahead. The window frame is ignored.
    """
    c = _to_col_if_str(e, "lead")
    return Column(Lead(c._expression, offset, _to_expr(default_value), ignore_nulls))


def first_value(e: ColumnOrName, ignore_nulls: bool = False) -> Column:
    """
    Returns the first value within the window frame of each row, or NULL when the
    frame is empty.
    """
    c = _to_col_if_str(e, "first_value")
    return Column(FirstValue(c._expression, None, None, ignore_nulls))


def last_value(e: ColumnOrName, ignore_nulls: bool = False) -> Column:
    """
    Returns the last value within the window frame of each row, or NULL when the
    frame is empty. With the default frame of an ordered window this is the value
    of the last peer of the current row.
    """
    c = _to_col_if_str(e, "last_value")
    return Column(LastValue(c._expression, None, None, ignore_nulls))


def nth_value(e: ColumnOrName, n: int, ignore_nulls: bool = False) -> Column:
    """
    Returns the ``n``-th value (counting from 1) within the window frame of each row,
    or NULL when the frame holds fewer than ``n`` rows.
    """
    c = _to_col_if_str(e, "nth_value")
    return Column(NthValue(c._expression, n, None, ignore_nulls))

