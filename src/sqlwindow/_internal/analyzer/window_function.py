#
# Copyright (c) 2012-2025 Snowflake Computing Inc. All rights reserved.
#

"""The closed family of functions that can be evaluated over a window.

Every concrete function is a leaf of exactly one of :class:`AggregateFunction`,
:class:`RankingFunction` or :class:`OffsetFunction`. The evaluator dispatches on
these classes, never on function names.
"""

from typing import AbstractSet, Any, Optional

from typing_extensions import final

from sqlwindow._internal.analyzer.analyzer_utils import (
    function_expression,
    rank_related_function_expression,
)
from sqlwindow._internal.analyzer.expression import (
    Expression,
    Literal,
    derive_dependent_columns,
)


class WindowFunction(Expression):
    name: str
    #: whether the function reads the resolved frame of a row
    uses_frame: bool = True

    @property
    def pretty_name(self) -> str:
        return self.name


class AggregateFunction(WindowFunction):
    """Folds the values of the target expression over a row's frame."""

    def __init__(self, child: Expression) -> None:
        super().__init__(child)
        self.child: Expression

    def dependent_column_names(self) -> AbstractSet[str]:
        return derive_dependent_columns(self.child)


@final
class Sum(AggregateFunction):
    name = "SUM"


@final
class Avg(AggregateFunction):
    name = "AVG"


@final
class Min(AggregateFunction):
    name = "MIN"


@final
class Max(AggregateFunction):
    name = "MAX"


@final
class Count(AggregateFunction):
    """``COUNT(expr)`` counts non-NULL values, ``COUNT(*)`` counts rows."""

    name = "COUNT"


class RankingFunction(WindowFunction):
    """Computes a row's standing within its ordered partition. Ignores frames."""

    uses_frame = False

    @property
    def sql(self) -> str:
        return function_expression(self.name, [])


@final
class Rank(RankingFunction):
    name = "RANK"


@final
class DenseRank(RankingFunction):
    name = "DENSE_RANK"


@final
class RowNumber(RankingFunction):
    name = "ROW_NUMBER"


@final
class PercentRank(RankingFunction):
    name = "PERCENT_RANK"


@final
class CumeDist(RankingFunction):
    name = "CUME_DIST"


@final
class Ntile(RankingFunction):
    name = "NTILE"

    def __init__(self, n: Any) -> None:
        super().__init__()
        self.n = n

    @property
    def sql(self) -> str:
        return function_expression(self.name, [str(self.n)])


class OffsetFunction(WindowFunction):
    """Reads the value of the target expression at another row of the partition."""

    def __init__(
        self,
        expr: Expression,
        offset: Optional[int],
        default: Optional[Expression],
        ignore_nulls: bool,
    ) -> None:
        super().__init__()
        self.expr = expr
        self.offset = offset
        self.default = default
        self.ignore_nulls = ignore_nulls

    @property
    def default_value(self) -> Any:
        return self.default.value if isinstance(self.default, Literal) else None

    def dependent_column_names(self) -> AbstractSet[str]:
        return derive_dependent_columns(self.expr, self.default)

    @property
    def sql(self) -> str:
        return rank_related_function_expression(
            self.name,
            self.expr.sql,
            self.offset,
            self.default.sql if self.default is not None else None,
            self.ignore_nulls,
        )


@final
class Lag(OffsetFunction):
    name = "LAG"
    uses_frame = False


@final
class Lead(OffsetFunction):
    name = "LEAD"
    uses_frame = False


@final
class FirstValue(OffsetFunction):
    name = "FIRST_VALUE"


@final
class LastValue(OffsetFunction):
    name = "LAST_VALUE"


@final
class NthValue(OffsetFunction):
    name = "NTH_VALUE"


def leaf_window_functions():
    """All concrete window function classes."""
    leaves = []
    pending = [WindowFunction]
    while pending:
        cls = pending.pop()
        subclasses = cls.__subclasses__()
        if subclasses:
            pending.extend(subclasses)
        elif cls not in (AggregateFunction, RankingFunction, OffsetFunction):
            leaves.append(cls)
    return leaves
