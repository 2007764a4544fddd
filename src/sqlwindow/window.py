#!/usr/bin/env python3
#
# Copyright (c) 2012-2025 Snowflake Computing Inc. All rights reserved.
#

"""Window frames in sqlwindow."""
import datetime
import decimal
import sys
from collections.abc import Iterable
from enum import IntEnum
from typing import List, Tuple, Union

import sqlwindow
from sqlwindow._internal.analyzer.expression import Expression, Interval, Literal
from sqlwindow._internal.analyzer.sort_expression import Ascending, SortOrder
from sqlwindow._internal.analyzer.window_expression import (
    CurrentRow,
    FrameOffset,
    RangeFrame,
    RowFrame,
    SpecifiedWindowFrame,
    UnboundedFollowing,
    UnboundedPreceding,
    UnspecifiedFrame,
    WindowExpression,
    WindowFrame,
    WindowSpecDefinition,
)
from sqlwindow._internal.type_utils import ColumnOrName
from sqlwindow._internal.utils import parse_positional_args_to_list

FrameBoundary = Union[
    int, float, decimal.Decimal, datetime.timedelta, "sqlwindow.column.Column"
]


def _convert_boundary_to_expr(
    boundary: FrameBoundary, position: str
) -> Expression:
    if isinstance(boundary, bool):
        raise ValueError(f"{position} must be a number, a timedelta or a Column")
    if isinstance(boundary, int):
        if boundary == 0:
            return CurrentRow()
        if boundary <= Window.UNBOUNDED_PRECEDING:
            return UnboundedPreceding()
        if boundary >= Window.UNBOUNDED_FOLLOWING:
            return UnboundedFollowing()
        return FrameOffset(int(boundary))
    if isinstance(boundary, (float, decimal.Decimal, datetime.timedelta)):
        if boundary == type(boundary)(0):
            return CurrentRow()
        return FrameOffset(boundary)
    if isinstance(boundary, sqlwindow.column.Column):
        expr = boundary._expression
        if isinstance(expr, Interval):
            if not expr.delta:
                return CurrentRow()
            return FrameOffset(expr.delta)
        if isinstance(expr, Literal) and expr.value is not None:
            return _convert_boundary_to_expr(expr.value, position)
        raise ValueError(
            f"{position} must be a constant, got the column expression {expr.sql}"
        )
    raise ValueError(f"{position} must be a number, a timedelta or a Column")


def _convert_boundaries_to_expr(
    start: FrameBoundary, end: FrameBoundary
) -> Tuple[Expression, Expression]:
    return (
        _convert_boundary_to_expr(start, "start"),
        _convert_boundary_to_expr(end, "end"),
    )


class WindowRelativePosition(IntEnum):
    UNBOUNDED_PRECEDING = -sys.maxsize
    UNBOUNDED_FOLLOWING = sys.maxsize
    CURRENT_ROW = 0


class Window:
    """
    Contains functions to form :class:`WindowSpec`.

    Examples::

        >>> from sqlwindow.functions import col, avg
        >>> window1 = Window.partition_by("value").order_by("key").rows_between(Window.CURRENT_ROW, 2)
        >>> window2 = Window.order_by(col("key").desc()).range_between(Window.UNBOUNDED_PRECEDING, Window.UNBOUNDED_FOLLOWING)
        >>> print(avg("value").over(window1))
        AVG(value) OVER (PARTITION BY value ORDER BY key ASC NULLS FIRST ROWS BETWEEN CURRENT ROW AND 2 FOLLOWING)
    """

    #: Returns a value representing unbounded preceding.
    UNBOUNDED_PRECEDING: int = WindowRelativePosition.UNBOUNDED_PRECEDING
    unboundedPreceding: int = UNBOUNDED_PRECEDING

    #: Returns a value representing unbounded following.
    UNBOUNDED_FOLLOWING: int = WindowRelativePosition.UNBOUNDED_FOLLOWING
    unboundedFollowing: int = UNBOUNDED_FOLLOWING

    #: Returns a value representing current row.
    CURRENT_ROW: int = WindowRelativePosition.CURRENT_ROW
    currentRow: int = CURRENT_ROW

    @staticmethod
    def partition_by(
        *cols: Union[
            ColumnOrName,
            Iterable,
        ],
    ) -> "WindowSpec":
        """
        Returns a :class:`WindowSpec` object with partition by clause.

        Args:
            cols: A column, as :class:`str`, :class:`~sqlwindow.column.Column`
                or a list of those.
        """
        return Window._spec().partition_by(*cols)

    @staticmethod
    def order_by(
        *cols: Union[
            ColumnOrName,
            Iterable,
        ],
    ) -> "WindowSpec":
        """
        Returns a :class:`WindowSpec` object with order by clause.

        Args:
            cols: A column, as :class:`str`, :class:`~sqlwindow.column.Column`
                or a list of those. Plain names sort ascending with nulls first.
        """
        return Window._spec().order_by(*cols)

    @staticmethod
    def rows_between(
        start: Union[int, WindowRelativePosition],
        end: Union[int, WindowRelativePosition],
    ) -> "WindowSpec":
        """
        Returns a :class:`WindowSpec` object with the row frame clause.

        Args:
            start: The relative position from the current row as a boundary start (inclusive).
                Negative values count rows before the current row, positive values rows
                after it. The frame is unbounded if this is :attr:`Window.UNBOUNDED_PRECEDING`,
                or any value less than or equal to ``-sys.maxsize``.
            end: The relative position from the current row as a boundary end (inclusive).
                The frame is unbounded if this is :attr:`Window.UNBOUNDED_FOLLOWING`, or any
                value greater than or equal to ``sys.maxsize``.

        Note:
            You can use :attr:`Window.UNBOUNDED_PRECEDING`, :attr:`Window.UNBOUNDED_FOLLOWING`,
            and :attr:`Window.CURRENT_ROW` to specify ``start`` and ``end``, instead of using
            integral values directly.

        Example::

            >>> weekly = Window.order_by("day").rows_between(-6, Window.CURRENT_ROW)
            >>> print(weekly.frame.sql)
            ROWS BETWEEN 6 PRECEDING AND CURRENT ROW
        """
        return Window._spec().rows_between(start, end)

    @staticmethod
    def range_between(
        start: FrameBoundary,
        end: FrameBoundary,
    ) -> "WindowSpec":
        """
        Returns a :class:`WindowSpec` object with the range frame clause.
        ``start`` and ``end`` can be

            - a number representing the distance from the current row's ORDER BY value, or

            - :attr:`Window.UNBOUNDED_PRECEDING`, :attr:`Window.UNBOUNDED_FOLLOWING`
              and :attr:`Window.CURRENT_ROW`, which represent unbounded preceding,
              unbounded following and current row respectively, or

            - a :class:`datetime.timedelta`, or a :class:`~sqlwindow.column.Column` object
              created by :func:`~sqlwindow.functions.make_interval`. Intervals can only be
              used when the order by column is of DATE or TIMESTAMP type.

        A range frame with an offset requires exactly one ORDER BY column.

        Example::

            >>> from sqlwindow.functions import make_interval
            >>> window = Window.order_by("ts").range_between(-make_interval(hours=1), Window.CURRENT_ROW)
            >>> print(window.frame.sql)
            RANGE BETWEEN INTERVAL '1 HOUR' PRECEDING AND CURRENT ROW
        """
        return Window._spec().range_between(start, end)

    @staticmethod
    def _spec() -> "WindowSpec":
        return WindowSpec([], [], UnspecifiedFrame())

    orderBy = order_by
    partitionBy = partition_by
    rangeBetween = range_between
    rowsBetween = rows_between


def _check_window_position_parameter(value, name: str) -> None:
    if isinstance(value, bool) or not isinstance(
        value,
        (int, float, decimal.Decimal, datetime.timedelta, sqlwindow.column.Column),
    ):
        raise ValueError(
            f"{name} must be a number, a timedelta, a Column or one of "
            "Window.UNBOUNDED_PRECEDING, Window.UNBOUNDED_FOLLOWING, Window.CURRENT_ROW"
        )


class WindowSpec:
    """Represents a window frame clause."""

    def __init__(
        self,
        partition_spec: List[Expression],
        order_spec: List[SortOrder],
        frame: WindowFrame,
    ) -> None:
        self.partition_spec = partition_spec
        self.order_spec = order_spec
        self.frame = frame

    def partition_by(
        self,
        *cols: Union[
            ColumnOrName,
            Iterable,
        ],
    ) -> "WindowSpec":
        """
        Returns a new :class:`WindowSpec` object with the new partition by clause.

        See Also:
            - :func:`Window.partition_by`
        """
        exprs = parse_positional_args_to_list(*cols)
        partition_spec = [
            e._expression
            if isinstance(e, sqlwindow.column.Column)
            else sqlwindow.column.Column(e)._expression
            for e in exprs
        ]

        return WindowSpec(partition_spec, self.order_spec, self.frame)

    def order_by(
        self,
        *cols: Union[
            ColumnOrName,
            Iterable,
        ],
    ) -> "WindowSpec":
        """
        Returns a new :class:`WindowSpec` object with the new order by clause.

        See Also:
            - :func:`Window.order_by`
        """
        exprs = parse_positional_args_to_list(*cols)
        order_spec = []
        for e in exprs:
            if isinstance(e, str):
                order_spec.append(
                    SortOrder(sqlwindow.column.Column(e)._expression, Ascending())
                )
            elif isinstance(e, sqlwindow.column.Column):
                if isinstance(e._expression, SortOrder):
                    order_spec.append(e._expression)
                elif isinstance(e._expression, Expression):
                    order_spec.append(SortOrder(e._expression, Ascending()))
            else:
                raise TypeError(
                    f"order_by accepts column names or Columns, got {type(e).__name__}"
                )

        return WindowSpec(self.partition_spec, order_spec, self.frame)

    def rows_between(
        self,
        start: Union[int, WindowRelativePosition],
        end: Union[int, WindowRelativePosition],
    ) -> "WindowSpec":
        """
        Returns a new :class:`WindowSpec` object with the new row frame clause.

        See Also:
            - :func:`Window.rows_between`
        """
        for value, name in ((start, "start"), (end, "end")):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} of a ROWS frame must be an integer")

        boundary_start, boundary_end = _convert_boundaries_to_expr(start, end)

        return WindowSpec(
            self.partition_spec,
            self.order_spec,
            SpecifiedWindowFrame(RowFrame(), boundary_start, boundary_end),
        )

    def range_between(
        self,
        start: FrameBoundary,
        end: FrameBoundary,
    ) -> "WindowSpec":
        """
        Returns a new :class:`WindowSpec` object with the new range frame clause.

        See Also:
            - :func:`Window.range_between`
        """

        _check_window_position_parameter(start, "start")
        _check_window_position_parameter(end, "end")

        boundary_start, boundary_end = _convert_boundaries_to_expr(start, end)

        return WindowSpec(
            self.partition_spec,
            self.order_spec,
            SpecifiedWindowFrame(RangeFrame(), boundary_start, boundary_end),
        )

    def _with_aggregate(self, aggregate: Expression) -> "sqlwindow.column.Column":
        spec = WindowSpecDefinition(self.partition_spec, self.order_spec, self.frame)
        return sqlwindow.column.Column(WindowExpression(aggregate, spec))

    orderBy = order_by
    partitionBy = partition_by
    rangeBetween = range_between
    rowsBetween = rows_between
