#!/usr/bin/env python3
#
# Copyright (c) 2012-2025 Snowflake Computing Inc. All rights reserved.
#

from typing import Optional, Union

import sqlwindow
from sqlwindow._internal.analyzer.expression import (
    Alias,
    Attribute,
    Expression,
    Interval,
    Literal,
    Star,
)
from sqlwindow._internal.analyzer.sort_expression import (
    Ascending,
    Descending,
    NullsFirst,
    NullsLast,
    SortOrder,
)
from sqlwindow._internal.analyzer.window_expression import WindowExpression


class Column:
    """Represents a field reference or a window expression over a
    :class:`~sqlwindow.row_set.RowSet`.

    To create a Column that refers to a field, use its name or
    :func:`sqlwindow.functions.col`. Sort orders for :meth:`Window.order_by` are
    built with :meth:`asc`, :meth:`desc` and their ``nulls_first`` / ``nulls_last``
    variants, and window functions are turned into window expressions with
    :meth:`over`:

        >>> from sqlwindow.functions import col, max
        >>> from sqlwindow.window import Window
        >>> month_max = max("light").over(Window.partition_by("month"))
        >>> print(month_max)
        MAX(light) OVER (PARTITION BY month)
        >>> print(col("light").desc())
        light DESC NULLS LAST
    """

    def __init__(self, expr: Union[str, Expression]) -> None:
        if isinstance(expr, str):
            self._expression = Star() if expr == "*" else Attribute(expr)
        elif isinstance(expr, Expression):
            self._expression = expr
        else:  # pragma: no cover
            raise TypeError("Column constructor only accepts str or expression.")

    def __neg__(self) -> "Column":
        """Unary minus. Only constants can be negated, which is how frame
        offsets such as ``-make_interval(days=7)`` are written."""
        if isinstance(self._expression, Interval):
            return Column(-self._expression)
        if isinstance(self._expression, Literal) and self._expression.value is not None:
            return Column(Literal(-self._expression.value))
        raise TypeError(f"Cannot negate {self._expression.sql}")

    def __bool__(self):
        raise TypeError("Cannot convert a Column object into bool")

    def __iter__(self) -> None:
        raise TypeError("Column is not iterable")

    def __hash__(self):
        return hash(self._expression)

    def desc(self) -> "Column":
        """Returns a Column expression with values sorted in descending order."""
        return Column(SortOrder(self._expression, Descending()))

    def desc_nulls_first(self) -> "Column":
        """Returns a Column expression with values sorted in descending order
        (null values sorted before non-null values)."""
        return Column(SortOrder(self._expression, Descending(), NullsFirst()))

    def desc_nulls_last(self) -> "Column":
        """Returns a Column expression with values sorted in descending order
        (null values sorted after non-null values)."""
        return Column(SortOrder(self._expression, Descending(), NullsLast()))

    def asc(self) -> "Column":
        """Returns a Column expression with values sorted in ascending order."""
        return Column(SortOrder(self._expression, Ascending()))

    def asc_nulls_first(self) -> "Column":
        """Returns a Column expression with values sorted in ascending order
        (null values sorted before non-null values)."""
        return Column(SortOrder(self._expression, Ascending(), NullsFirst()))

    def asc_nulls_last(self) -> "Column":
        """Returns a Column expression with values sorted in ascending order
        (null values sorted after non-null values)."""
        return Column(SortOrder(self._expression, Ascending(), NullsLast()))

    def name(self, alias: str) -> "Column":
        """Returns a new renamed Column."""
        expr = self._expression
        if isinstance(expr, Alias):
            expr = expr.child
        return Column(Alias(expr, alias))

    def alias(self, alias: str) -> "Column":
        """Returns a new renamed Column. Alias of :func:`name`."""
        return self.name(alias)

    def as_(self, alias: str) -> "Column":
        """Returns a new renamed Column. Alias of :func:`name`."""
        return self.name(alias)

    def over(self, window: Optional["sqlwindow.window.WindowSpec"] = None) -> "Column":
        """
        Returns a window expression, based on the specified :class:`~sqlwindow.window.WindowSpec`.
        An empty window means one partition holding every row, like ``OVER ()``.
        """
        if window is None:
            window = sqlwindow.window.Window._spec()
        expr = self._expression
        alias = None
        if isinstance(expr, Alias):
            expr, alias = expr.child, expr.name
        result = window._with_aggregate(expr)
        return result.alias(alias) if alias else result

    @property
    def _window_expression(self) -> Optional[WindowExpression]:
        expr = self._expression
        if isinstance(expr, Alias):
            expr = expr.child
        return expr if isinstance(expr, WindowExpression) else None

    @property
    def _output_name(self) -> Optional[str]:
        return self._expression.name if isinstance(self._expression, Alias) else None

    def __str__(self):
        return self._expression.sql

    def __repr__(self):
        return f"Column[{self._expression.sql}]"

    # Add these alias for user code migration
    asc_null_first = asc_nulls_first
    asc_null_last = asc_nulls_last
    desc_null_first = desc_nulls_first
    desc_null_last = desc_nulls_last

