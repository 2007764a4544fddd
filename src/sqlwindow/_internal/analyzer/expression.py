#
# Copyright (c) 2012-2025 Snowflake Computing Inc. All rights reserved.
#

import datetime
import decimal
from typing import AbstractSet, Any, List, Optional

from dateutil.relativedelta import relativedelta

from sqlwindow._internal.type_utils import infer_type
from sqlwindow.types import DataType

COLUMN_DEPENDENCY_EMPTY: AbstractSet[str] = frozenset()  # depend on no columns.

VALID_PYTHON_TYPES_FOR_LITERAL_VALUE = (
    type(None),
    bool,
    int,
    float,
    str,
    bytes,
    decimal.Decimal,
    datetime.date,
    datetime.datetime,
    datetime.time,
    datetime.timedelta,
)


def derive_dependent_columns(
    *expressions: "Optional[Expression]",
) -> AbstractSet[str]:
    """
    Given set of expressions, derive the set of columns that the expressions dependents on.

    The returned dependent columns is a set without duplication.
    """
    result = set()
    for exp in expressions:
        if exp is not None:
            result.update(exp.dependent_column_names())
    return result


class Expression:
    """Base class of all expression nodes.
    A subclass of Expression may have no child, one child, or multiple children.
    """

    def __init__(self, child: Optional["Expression"] = None) -> None:
        self.child = child
        self.nullable = True
        self.children = [child] if child else None
        self.datatype: Optional[DataType] = None

    def dependent_column_names(self) -> AbstractSet[str]:
        return COLUMN_DEPENDENCY_EMPTY

    @property
    def pretty_name(self) -> str:
        """Returns a user-facing string representation of this expression's name.
        This should usually match the name of the function in SQL."""
        return self.__class__.__name__.upper()

    @property
    def sql(self) -> str:
        children_sql = (
            ", ".join([x.sql for x in self.children]) if self.children else ""
        )
        return f"{self.pretty_name}({children_sql})"

    def __str__(self) -> str:
        return self.sql


class Attribute(Expression):
    """A reference to a field of the input row set by name."""

    def __init__(self, name: str) -> None:
        super().__init__()
        self.name = name

    @property
    def sql(self) -> str:
        return self.name

    def __eq__(self, other):
        return type(other) is type(self) and other.name == self.name

    def __hash__(self):
        return hash(self.name)

    def dependent_column_names(self) -> AbstractSet[str]:
        return {self.name}


class Star(Expression):
    """``*``, as in ``COUNT(*)``."""

    @property
    def sql(self) -> str:
        return "*"


class Literal(Expression):
    def __init__(self, value: Any, datatype: Optional[DataType] = None) -> None:
        super().__init__()

        # check value
        if not isinstance(value, VALID_PYTHON_TYPES_FOR_LITERAL_VALUE):
            raise TypeError(f"Cannot create a Literal for {type(value).__name__}")
        self.value = value
        self.nullable = value is None
        self.datatype = datatype or infer_type(value)

    @property
    def sql(self) -> str:
        if self.value is None:
            return "NULL"
        if isinstance(self.value, (str, datetime.date, datetime.time)):
            return f"'{self.value}'"
        if isinstance(self.value, datetime.timedelta):
            return f"INTERVAL '{self.value}'"
        return str(self.value)


class Interval(Expression):
    """A calendar aware interval constant, used as a RANGE frame offset for
    DATE and TIMESTAMP order keys."""

    # relativedelta folds weeks into days
    _UNITS = ("years", "months", "days", "hours", "minutes", "seconds")

    def __init__(self, delta: relativedelta) -> None:
        super().__init__()
        self.delta = delta.normalized()

    def __neg__(self) -> "Interval":
        return Interval(-self.delta)

    @property
    def sql(self) -> str:
        parts: List[str] = []
        for unit in self._UNITS:
            value = getattr(self.delta, unit)
            if value:
                parts.append(f"{value} {unit.upper()[:-1]}")
        return f"INTERVAL '{', '.join(parts) or '0 DAY'}'"


class Alias(Expression):
    def __init__(self, child: Expression, name: str) -> None:
        super().__init__(child)
        self.child: Expression
        self.name = name

    def dependent_column_names(self) -> AbstractSet[str]:
        return derive_dependent_columns(self.child)

    @property
    def sql(self) -> str:
        return f"{self.child.sql} AS {self.name}"
