#
# Copyright (c) 2012-2025 Snowflake Computing Inc. All rights reserved.
#

import logging
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Iterator, List, NamedTuple, Optional, Tuple

import numpy
import pandas
import yaml

from sqlwindow._internal.analyzer.expression import Attribute, Expression, Literal
from sqlwindow._internal.analyzer.window_expression import (
    SpecifiedWindowFrame,
    WindowExpression,
    WindowSpecDefinition,
)
from sqlwindow._internal.analyzer.window_function import (
    Lag,
    Lead,
    RankingFunction,
    WindowFunction,
)
from sqlwindow._internal.error_message import SqlWindowExceptionMessages
from sqlwindow._internal.utils import warning
from sqlwindow.column import Column
from sqlwindow.engine._evaluator import (
    PartitionInput,
    check_input_types,
    evaluate_function,
    validate_function,
)
from sqlwindow.engine._frame import FrameResolver
from sqlwindow.engine._orderer import SortKey, order_partition
from sqlwindow.engine._partitioner import partition_rows
from sqlwindow.exceptions import WindowEvaluationException
from sqlwindow.row_set import RowSet
from sqlwindow.types import DataType

_logger = logging.getLogger(__name__)

_MAX_WORKERS = "max_workers"
_NULL_PARTITION_KEYS_EQUAL = "null_partition_keys_equal"
_REQUIRE_ORDER_FOR_RANKING = "require_order_for_ranking"

DEFAULT_OPTIONS: Dict[str, Any] = {
    _MAX_WORKERS: 1,
    _NULL_PARTITION_KEYS_EQUAL: True,
    _REQUIRE_ORDER_FOR_RANKING: False,
}


def _validate_options(options: Dict[str, Any]) -> Dict[str, Any]:
    resolved = dict(DEFAULT_OPTIONS)
    for key, value in options.items():
        if key not in DEFAULT_OPTIONS:
            raise SqlWindowExceptionMessages.ENGINE_UNKNOWN_OPTION(key, DEFAULT_OPTIONS)
        if key == _MAX_WORKERS:
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise SqlWindowExceptionMessages.ENGINE_INVALID_OPTION_VALUE(
                    key, value, "must be a positive integer"
                )
        elif not isinstance(value, bool):
            raise SqlWindowExceptionMessages.ENGINE_INVALID_OPTION_VALUE(
                key, value, "must be a boolean"
            )
        resolved[key] = value
    return resolved


class WindowResult(Mapping):
    """The values of one window expression, one per input row.

    A read-only mapping from row position to value, in input row order. ``to_list``
    and ``to_series`` give the values aligned with the input rows.
    """

    def __init__(
        self,
        values: List[Any],
        index: pandas.Index,
        name: Optional[str],
        window_sql: str,
    ) -> None:
        self._values = values
        self._index = index
        self.name = name
        self.window_sql = window_sql

    def __getitem__(self, position: int) -> Any:
        if isinstance(position, bool) or not isinstance(position, (int, numpy.integer)):
            raise KeyError(position)
        if not 0 <= position < len(self._values):
            raise KeyError(position)
        return self._values[position]

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[int]:
        return iter(range(len(self._values)))

    def to_list(self) -> List[Any]:
        return list(self._values)

    def to_series(self) -> pandas.Series:
        return pandas.Series(
            self._values, index=self._index, name=self.name, dtype=object
        )

    def __repr__(self) -> str:
        return f"WindowResult({self.window_sql!r}, rows={len(self)})"


class PassOutcome(NamedTuple):
    """What :meth:`WindowEngine.evaluate_all` reports for one window expression:
    either ``result`` or ``error`` is set."""

    window_sql: str
    result: Optional[WindowResult]
    error: Optional[BaseException]

    @property
    def ok(self) -> bool:
        return self.error is None


def _expression_values(expr: Expression, row_set: RowSet) -> List[Any]:
    if isinstance(expr, Attribute):
        return row_set.column_values(expr.name)
    if isinstance(expr, Literal):
        return [expr.value] * len(row_set)
    raise NotImplementedError(
        f"[{type(expr).__name__}] cannot be used as a window key: {expr.sql}"
    )


def _expression_type(expr: Expression, row_set: RowSet) -> Optional[DataType]:
    if isinstance(expr, Attribute):
        return row_set.datatype_of(expr.name)
    return expr.datatype


class _WindowPass:
    """One window expression over one row set, checked and ready to run.

    Every configuration error surfaces while the pass is built, before any row is
    partitioned.
    """

    def __init__(
        self, column: Column, row_set: RowSet, options: Dict[str, Any]
    ) -> None:
        window = column._window_expression if isinstance(column, Column) else None
        if not isinstance(window, WindowExpression):
            raise TypeError(
                f"Expected a window expression built with Column.over(), got {column!r}"
            )
        if not isinstance(window.window_function, WindowFunction):
            raise NotImplementedError(
                f"[{window.window_function.sql}] is not a window function"
            )
        self.row_set = row_set
        self.window = window
        self.function: WindowFunction = window.window_function
        self.name = column._output_name
        self.sql = window.sql
        self.options = options
        try:
            self._prepare(window.window_spec)
        except Exception as e:
            WindowEvaluationException.raise_from_error(e, self.sql)

    def _prepare(self, spec: WindowSpecDefinition) -> None:
        row_set, options, window = self.row_set, self.options, self.window

        for name in sorted(window.dependent_column_names()):
            if name not in row_set.schema:
                raise SqlWindowExceptionMessages.WINDOW_UNKNOWN_COLUMN(
                    name, row_set.columns
                )

        validate_function(self.function)

        requires_order = isinstance(self.function, (RankingFunction, Lag, Lead))
        if requires_order and not spec.order_spec and options[_REQUIRE_ORDER_FOR_RANKING]:
            raise SqlWindowExceptionMessages.WINDOW_FUNCTION_REQUIRES_ORDER_BY(
                self.function.name
            )

        key_type = (
            _expression_type(spec.order_spec[0].child, row_set)
            if len(spec.order_spec) == 1
            else None
        )
        if isinstance(spec.frame_spec, SpecifiedWindowFrame):
            # a malformed frame is an error even where it would be ignored
            resolver = FrameResolver(spec.frame_spec, spec.order_spec, key_type)
            if not self.function.uses_frame:
                warning(
                    f"ignored_frame_{self.function.name}",
                    f"{self.function.name} ignores the window frame {spec.frame_spec.sql}",
                )
        else:
            resolver = FrameResolver(spec.effective_frame(), spec.order_spec, key_type)
        self.resolver = resolver if self.function.uses_frame else None

        self.partition_keys = [_expression_values(e, row_set) for e in spec.partition_spec]
        self.sort_keys = [
            SortKey(
                order.child.sql,
                _expression_values(order.child, row_set),
                order.ascending,
                order.nulls_first,
            )
            for order in spec.order_spec
        ]
        self.columns = {
            name: row_set.column_values(name)
            for name in self.function.dependent_column_names()
        }
        child = getattr(self.function, "child", None)
        if isinstance(child, (Attribute, Literal)):
            check_input_types(self.function, _expression_values(child, row_set))

    def _evaluate_partition(
        self, positions: numpy.ndarray
    ) -> Tuple[numpy.ndarray, List[Any]]:
        ordered = order_partition(positions, self.sort_keys)
        frames = self.resolver.resolve(ordered) if self.resolver else None
        values = evaluate_function(
            self.function, PartitionInput(ordered, frames, self.columns)
        )
        return ordered.positions, values

    def run(self, max_workers: int = 1) -> WindowResult:
        row_count = len(self.row_set)
        try:
            partitions = partition_rows(
                self.partition_keys,
                row_count,
                self.options[_NULL_PARTITION_KEYS_EQUAL],
            )
            _logger.debug(
                "Evaluating %s over %d rows in %d partitions",
                self.sql,
                row_count,
                len(partitions),
            )
            if max_workers > 1 and len(partitions) > 1:
                with ThreadPoolExecutor(max_workers=max_workers) as executor:
                    evaluated = list(executor.map(self._evaluate_partition, partitions))
            else:
                evaluated = [self._evaluate_partition(p) for p in partitions]
        except Exception as e:
            WindowEvaluationException.raise_from_error(e, self.sql)

        values: List[Any] = [None] * row_count
        for positions, partition_values in evaluated:
            for position, value in zip(positions.tolist(), partition_values):
                values[position] = value
        return WindowResult(values, pandas.RangeIndex(row_count), self.name, self.sql)


class _EngineBuilderAccessor:
    def __get__(self, instance, owner) -> "WindowEngine.EngineBuilder":
        return owner.EngineBuilder()


class WindowEngine:
    """
    Evaluates window expressions over a :class:`~sqlwindow.row_set.RowSet`.

    Every window expression is evaluated in its own pass: the rows are split into
    partitions, each partition is ordered and its frames resolved, and the window
    function produces one value per row. The input row set is never modified and
    results keep the input row order.

    Create an engine with default options, or use :attr:`builder`:

        >>> from sqlwindow.functions import col, rank
        >>> from sqlwindow.row_set import RowSet
        >>> from sqlwindow.window import Window
        >>> rows = RowSet.from_records([(9.1,), (9.1,), (9.3,)], schema=["light"])
        >>> engine = WindowEngine.builder.config("max_workers", 2).create()
        >>> engine.evaluate(rows, rank().over(Window.order_by(col("light").desc()))).to_list()
        [2, 2, 1]
    """

    class EngineBuilder:
        """
        Provides methods to set engine options and create a :class:`WindowEngine`.

        Known options are ``max_workers`` (default 1, sequential),
        ``null_partition_keys_equal`` (default True) and ``require_order_for_ranking``
        (default False).
        """

        def __init__(self) -> None:
            self._options = {}

        def config(self, key: str, value: Any) -> "WindowEngine.EngineBuilder":
            """
            Adds the specified option to the :class:`EngineBuilder` configuration.
            """
            self._options[key] = value
            return self

        def configs(self, options: Dict[str, Any]) -> "WindowEngine.EngineBuilder":
            """
            Adds the specified :class:`dict` of options to the :class:`EngineBuilder`
            configuration.

            Note:
                Calling this method overwrites any existing options of the same name
                that you have already set in the EngineBuilder.
            """
            self._options = {**self._options, **options}
            return self

        def config_file(self, path: str) -> "WindowEngine.EngineBuilder":
            """
            Adds the options of a YAML file, a mapping of option names to values.
            """
            try:
                with open(path, encoding="utf-8") as f:
                    options = yaml.safe_load(f)
            except (OSError, yaml.YAMLError) as e:
                raise SqlWindowExceptionMessages.ENGINE_INVALID_CONFIG_FILE(
                    path, str(e)
                ) from e
            if options is None:
                options = {}
            if not isinstance(options, dict):
                raise SqlWindowExceptionMessages.ENGINE_INVALID_CONFIG_FILE(
                    path, f"expected a mapping of options, got {type(options).__name__}"
                )
            return self.configs(options)

        def create(self) -> "WindowEngine":
            """Creates a new WindowEngine."""
            return WindowEngine(self._options)

    #: Returns a new :class:`EngineBuilder`.
    builder: "WindowEngine.EngineBuilder" = _EngineBuilderAccessor()

    def __init__(self, options: Optional[Dict[str, Any]] = None) -> None:
        self._options = _validate_options(options or {})
        _logger.debug("Created window engine with options %s", self._options)

    @property
    def options(self) -> Dict[str, Any]:
        return dict(self._options)

    @property
    def max_workers(self) -> int:
        return self._options[_MAX_WORKERS]

    def evaluate(self, row_set: RowSet, window_column: Column) -> WindowResult:
        """
        Evaluates one window expression and returns its values in input row order.

        Raises:
            WindowConfigurationException: if the window is malformed. Nothing has been
                evaluated in that case.
            WindowTypeException: if a function meets values it cannot handle.
            WindowEvaluationException: if the evaluation fails for any other reason.

        Each of these carries the SQL text of the failing window in ``window_sql``.
        """
        window_pass = _WindowPass(window_column, row_set, self._options)
        return window_pass.run(self.max_workers)

    def _evaluate_pass(self, row_set: RowSet, window_column: Column) -> PassOutcome:
        window = (
            window_column._window_expression
            if isinstance(window_column, Column)
            else None
        )
        window_sql = window.sql if window is not None else repr(window_column)
        try:
            window_pass = _WindowPass(window_column, row_set, self._options)
            # passes already run in parallel, so partitions of a pass do not
            return PassOutcome(window_sql, window_pass.run(1), None)
        except Exception as e:
            _logger.debug("Window pass %s failed: %s", window_sql, e)
            return PassOutcome(window_sql, None, e)

    def evaluate_all(
        self, row_set: RowSet, *window_columns: Column, raise_on_error: bool = True
    ) -> List[PassOutcome]:
        """
        Evaluates several window expressions over the same row set. The passes are
        independent: a failing pass leaves no partial result but does not stop the
        others.

        Args:
            row_set: The rows to evaluate over.
            window_columns: Window expressions built with :meth:`Column.over`.
            raise_on_error: When True, the first failure, in argument order, is
                raised once every pass has finished.

        Returns:
            One :class:`PassOutcome` per window expression, in argument order.
        """
        columns = list(window_columns)
        if self.max_workers > 1 and len(columns) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                outcomes = list(
                    executor.map(lambda c: self._evaluate_pass(row_set, c), columns)
                )
        else:
            outcomes = [self._evaluate_pass(row_set, c) for c in columns]

        if raise_on_error:
            for outcome in outcomes:
                if outcome.error is not None:
                    raise outcome.error
        return outcomes

    def with_window_columns(
        self, row_set: RowSet, *window_columns: Column, **named_columns: Column
    ) -> RowSet:
        """
        Returns a new :class:`~sqlwindow.row_set.RowSet` with the values of the window
        expressions appended as columns. Positional columns are named by their alias,
        or by their SQL text when they have none; keyword columns by their keyword.
        """
        columns = list(window_columns) + list(named_columns.values())
        names = [
            c._output_name or str(c._window_expression or c) for c in window_columns
        ] + list(named_columns.keys())
        outcomes = self.evaluate_all(row_set, *columns, raise_on_error=True)
        return row_set.with_columns(names, [o.result.to_list() for o in outcomes])
