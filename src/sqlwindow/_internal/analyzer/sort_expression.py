#
# Copyright (c) 2012-2025 Snowflake Computing Inc. All rights reserved.
#

from typing import AbstractSet, Optional, Type

from sqlwindow._internal.analyzer.analyzer_utils import order_expression
from sqlwindow._internal.analyzer.expression import (
    Expression,
    derive_dependent_columns,
)


class NullOrdering:
    sql: str


class NullsFirst(NullOrdering):
    sql = "NULLS FIRST"


class NullsLast(NullOrdering):
    sql = "NULLS LAST"


class SortDirection:
    sql: str
    default_null_ordering: Type[NullOrdering]


class Ascending(SortDirection):
    sql = "ASC"
    default_null_ordering = NullsFirst


class Descending(SortDirection):
    sql = "DESC"
    default_null_ordering = NullsLast


class SortOrder(Expression):
    def __init__(
        self,
        child: Expression,
        direction: SortDirection,
        null_ordering: Optional[NullOrdering] = None,
    ) -> None:
        super().__init__(child)
        self.child: Expression
        self.direction = direction
        self.null_ordering = (
            null_ordering if null_ordering else direction.default_null_ordering()
        )

    @property
    def ascending(self) -> bool:
        return isinstance(self.direction, Ascending)

    @property
    def nulls_first(self) -> bool:
        return isinstance(self.null_ordering, NullsFirst)

    @property
    def sql(self) -> str:
        return order_expression(
            self.child.sql, self.direction.sql, self.null_ordering.sql
        )

    def dependent_column_names(self) -> Optional[AbstractSet[str]]:
        return derive_dependent_columns(self.child)
