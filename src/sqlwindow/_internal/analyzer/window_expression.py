#
# Copyright (c) 2012-2025 Snowflake Computing Inc. All rights reserved.
#

import datetime
import decimal
from typing import AbstractSet, Any, List, Tuple, Union

from dateutil.relativedelta import relativedelta

from sqlwindow._internal.analyzer.analyzer_utils import (
    specified_window_frame_expression,
    window_expression,
    window_frame_boundary_expression,
    window_spec_expression,
)
from sqlwindow._internal.analyzer.expression import (
    Expression,
    Interval,
    derive_dependent_columns,
)
from sqlwindow._internal.analyzer.sort_expression import SortOrder
from sqlwindow._internal.error_message import SqlWindowExceptionMessages

# relativedelta has no ordering, so offsets are compared by where they land from here
_REFERENCE_TIMESTAMP = datetime.datetime(2000, 1, 1)


class SpecialFrameBoundary(Expression):
    sql: str

    def __init__(self) -> None:
        super().__init__()


class UnboundedPreceding(SpecialFrameBoundary):
    sql = "UNBOUNDED PRECEDING"


class UnboundedFollowing(SpecialFrameBoundary):
    sql = "UNBOUNDED FOLLOWING"


class CurrentRow(SpecialFrameBoundary):
    sql = "CURRENT ROW"


OffsetValue = Union[int, float, decimal.Decimal, datetime.timedelta, relativedelta]


def _comparable_offset(value: OffsetValue) -> Any:
    if isinstance(value, relativedelta):
        return (_REFERENCE_TIMESTAMP + value) - _REFERENCE_TIMESTAMP
    return value


def _zero_like(value: Any) -> Any:
    return datetime.timedelta(0) if isinstance(value, datetime.timedelta) else 0


class FrameOffset(Expression):
    """``n PRECEDING`` or ``n FOLLOWING``.

    ``value`` is signed: a negative value points before the current row and a
    positive one after it. In ROWS mode it is a row count, in RANGE mode it is a
    distance in the value domain of the ORDER BY key (a number, a
    :class:`datetime.timedelta` or a :class:`dateutil.relativedelta.relativedelta`).
    """

    def __init__(self, value: OffsetValue) -> None:
        super().__init__()
        if isinstance(value, Interval):
            value = value.delta
        self.value = value

    @property
    def sign(self) -> int:
        comparable = _comparable_offset(self.value)
        zero = _zero_like(comparable)
        return (comparable > zero) - (comparable < zero)

    @property
    def is_following(self) -> bool:
        return self.sign > 0

    @property
    def magnitude(self) -> OffsetValue:
        return -self.value if self.sign < 0 else self.value

    @property
    def sql(self) -> str:
        magnitude = self.magnitude
        if isinstance(magnitude, relativedelta):
            text = Interval(magnitude).sql
        elif isinstance(magnitude, datetime.timedelta):
            text = f"INTERVAL '{magnitude}'"
        else:
            text = str(magnitude)
        return window_frame_boundary_expression(text, self.is_following)


class FrameType:
    sql: str


class RowFrame(FrameType):
    sql = "ROWS"


class RangeFrame(FrameType):
    sql = "RANGE"


class WindowFrame(Expression):
    def __init__(self) -> None:
        super().__init__()


class UnspecifiedFrame(WindowFrame):
    @property
    def sql(self) -> str:
        return ""


def _boundary_rank(boundary: Expression, position: str) -> Tuple[int, Any]:
    if isinstance(boundary, UnboundedPreceding):
        return -2, None
    if isinstance(boundary, UnboundedFollowing):
        return 2, None
    if isinstance(boundary, CurrentRow):
        return 0, None
    if not isinstance(boundary, FrameOffset):
        raise SqlWindowExceptionMessages.WINDOW_INVALID_FRAME_BOUNDARY(
            boundary.sql, position
        )
    if boundary.sign == 0:
        # 0 PRECEDING and 0 FOLLOWING are the current row
        return 0, None
    return boundary.sign, _comparable_offset(boundary.magnitude)


class SpecifiedWindowFrame(WindowFrame):
    def __init__(
        self, frame_type: FrameType, lower: Expression, upper: Expression
    ) -> None:
        super().__init__()
        self.frame_type = frame_type
        self.lower = lower
        self.upper = upper

    @property
    def is_range(self) -> bool:
        return isinstance(self.frame_type, RangeFrame)

    @property
    def has_offset(self) -> bool:
        return isinstance(self.lower, FrameOffset) or isinstance(
            self.upper, FrameOffset
        )

    def check_bounds(self) -> None:
        """Raises a configuration error if the frame can never be valid: the start
        boundary is UNBOUNDED FOLLOWING, the end boundary is UNBOUNDED PRECEDING, or
        the start lies after the end."""
        if isinstance(self.lower, UnboundedFollowing):
            raise SqlWindowExceptionMessages.WINDOW_INVALID_FRAME_BOUNDARY(
                self.lower.sql, "start"
            )
        if isinstance(self.upper, UnboundedPreceding):
            raise SqlWindowExceptionMessages.WINDOW_INVALID_FRAME_BOUNDARY(
                self.upper.sql, "end"
            )
        lower_rank, lower_magnitude = _boundary_rank(self.lower, "start")
        upper_rank, upper_magnitude = _boundary_rank(self.upper, "end")
        inverted = lower_rank > upper_rank
        if lower_rank == upper_rank and lower_magnitude is not None:
            if lower_rank < 0:
                # 3 PRECEDING .. 5 PRECEDING
                inverted = lower_magnitude < upper_magnitude
            else:
                # 5 FOLLOWING .. 3 FOLLOWING
                inverted = lower_magnitude > upper_magnitude
        if inverted:
            raise SqlWindowExceptionMessages.WINDOW_FRAME_INVERTED_BOUNDS(
                self.lower.sql, self.upper.sql
            )

    @property
    def sql(self) -> str:
        return specified_window_frame_expression(
            self.frame_type.sql, self.lower.sql, self.upper.sql
        )


class WindowSpecDefinition(Expression):
    def __init__(
        self,
        partition_spec: List[Expression],
        order_spec: List[SortOrder],
        frame_spec: WindowFrame,
    ) -> None:
        super().__init__()
        self.partition_spec = partition_spec
        self.order_spec = order_spec
        self.frame_spec = frame_spec

    def effective_frame(self) -> SpecifiedWindowFrame:
        """The frame the window uses when none is given: everything up to the
        current row's peers when there is an ORDER BY, the whole partition otherwise."""
        if isinstance(self.frame_spec, SpecifiedWindowFrame):
            return self.frame_spec
        if self.order_spec:
            return SpecifiedWindowFrame(RangeFrame(), UnboundedPreceding(), CurrentRow())
        return SpecifiedWindowFrame(
            RowFrame(), UnboundedPreceding(), UnboundedFollowing()
        )

    def dependent_column_names(self) -> AbstractSet[str]:
        return derive_dependent_columns(*self.partition_spec, *self.order_spec)

    @property
    def sql(self) -> str:
        return window_spec_expression(
            [e.sql for e in self.partition_spec],
            [e.sql for e in self.order_spec],
            self.frame_spec.sql,
        )


class WindowExpression(Expression):
    def __init__(
        self, window_function: Expression, window_spec: WindowSpecDefinition
    ) -> None:
        super().__init__()
        self.window_function = window_function
        self.window_spec = window_spec

    def dependent_column_names(self) -> AbstractSet[str]:
        return derive_dependent_columns(self.window_function, self.window_spec)

    @property
    def sql(self) -> str:
        return window_expression(self.window_function.sql, self.window_spec.sql)
