#
# Copyright (c) 2012-2025 Snowflake Computing Inc. All rights reserved.
#

import pandas
import pytest

from sqlwindow._internal.analyzer.expression import Attribute
from sqlwindow._internal.analyzer.window_function import Rank, Sum
from sqlwindow.engine import DEFAULT_OPTIONS, PassOutcome, WindowEngine, WindowResult
from sqlwindow.engine._evaluator import WindowFunctionRegistry, patch
from sqlwindow.exceptions import (
    SqlWindowEngineConfigException,
    WindowConfigurationException,
    WindowEvaluationException,
    WindowTypeException,
)
from sqlwindow.functions import (
    avg,
    col,
    count,
    dense_rank,
    lag,
    max,
    ntile,
    rank,
    row_number,
    sum,
)
from sqlwindow.row_set import RowSet
from sqlwindow.window import Window


@pytest.fixture(scope="module")
def rows():
    return RowSet.from_records(
        [("a", 1, 10), ("b", 1, 5), ("a", 2, 20), (None, 1, 7), ("b", 2, 15), (None, 2, 8)],
        schema=["g", "i", "v"],
    )


@pytest.fixture
def failing_sum():
    registry = WindowFunctionRegistry.get_or_create()
    original = registry.get_function(Sum(Attribute("v")))

    @patch(Sum)
    def raise_division_error(function, data):
        raise ZeroDivisionError("division by zero")

    yield
    registry.register(Sum, original.impl)


@pytest.fixture
def missing_rank():
    registry = WindowFunctionRegistry.get_or_create()
    original = registry.get_function(Rank())
    registry.unregister(Rank)
    yield
    registry.register(Rank, original.impl)


def test_default_options():
    engine = WindowEngine()
    assert engine.options == DEFAULT_OPTIONS
    assert engine.max_workers == 1


def test_builder():
    assert WindowEngine.builder is not WindowEngine.builder
    engine = (
        WindowEngine.builder.config("max_workers", 3)
        .configs({"null_partition_keys_equal": False})
        .create()
    )
    assert engine.max_workers == 3
    assert engine.options["null_partition_keys_equal"] is False
    assert engine.options["require_order_for_ranking"] is False

    # configs overwrites earlier values
    engine = WindowEngine.builder.config("max_workers", 3).configs({"max_workers": 2}).create()
    assert engine.max_workers == 2


def test_options_are_a_copy():
    engine = WindowEngine()
    engine.options["max_workers"] = 8
    assert engine.max_workers == 1


def test_unknown_option():
    with pytest.raises(SqlWindowEngineConfigException) as ex_info:
        WindowEngine.builder.config("workers", 2).create()
    assert ex_info.value.error_code == "1400"
    assert "max_workers" in ex_info.value.message


@pytest.mark.parametrize(
    "key, value",
    [
        ("max_workers", 0),
        ("max_workers", "2"),
        ("max_workers", True),
        ("null_partition_keys_equal", "yes"),
        ("require_order_for_ranking", 1),
    ],
)
def test_invalid_option_values(key, value):
    with pytest.raises(SqlWindowEngineConfigException) as ex_info:
        WindowEngine({key: value})
    assert ex_info.value.error_code == "1401"


def test_config_file(tmp_path):
    path = tmp_path / "engine.yaml"
    path.write_text("max_workers: 4\nnull_partition_keys_equal: false\n")
    engine = WindowEngine.builder.config_file(str(path)).create()
    assert engine.max_workers == 4
    assert engine.options["null_partition_keys_equal"] is False

    # later settings win
    engine = WindowEngine.builder.config_file(str(path)).config("max_workers", 1).create()
    assert engine.max_workers == 1


def test_empty_config_file(tmp_path):
    path = tmp_path / "engine.yaml"
    path.write_text("")
    assert WindowEngine.builder.config_file(str(path)).create().options == DEFAULT_OPTIONS


@pytest.mark.parametrize(
    "content", ["- max_workers\n- 2\n", "max_workers: [1, 2\n", "just text\n"]
)
def test_invalid_config_file(tmp_path, content):
    path = tmp_path / "engine.yaml"
    path.write_text(content)
    with pytest.raises(SqlWindowEngineConfigException) as ex_info:
        WindowEngine.builder.config_file(str(path))
    assert ex_info.value.error_code == "1402"


def test_missing_config_file(tmp_path):
    with pytest.raises(SqlWindowEngineConfigException) as ex_info:
        WindowEngine.builder.config_file(str(tmp_path / "missing.yaml"))
    assert ex_info.value.error_code == "1402"


def test_evaluate_requires_window_expression(engine, rows):
    with pytest.raises(TypeError):
        engine.evaluate(rows, col("v"))
    with pytest.raises(TypeError):
        engine.evaluate(rows, sum("v"))


def test_unknown_columns(engine, rows):
    for window_column in [
        sum("w").over(),
        sum("v").over(Window.partition_by("h")),
        rank().over(Window.order_by("j")),
    ]:
        with pytest.raises(WindowConfigurationException) as ex_info:
            engine.evaluate(rows, window_column)
        assert ex_info.value.error_code == "1104"
        assert ex_info.value.window_sql == str(window_column)


def test_errors_name_the_failing_window(engine, parallel_engine):
    mixed = RowSet.from_records([(1,), ("a",), (2,)], schema=["x"])
    bad_ntile = ntile(0).over(Window.order_by("x"))
    with pytest.raises(WindowConfigurationException) as ex_info:
        engine.evaluate(mixed, bad_ntile)
    assert ex_info.value.error_code == "1103"
    assert ex_info.value.window_sql == "NTILE(0) OVER (ORDER BY x ASC NULLS FIRST)"

    for e in (engine, parallel_engine):
        with pytest.raises(WindowTypeException) as ex_info:
            e.evaluate(mixed, rank().over(Window.order_by("x")))
        assert ex_info.value.error_code == "1201"
        assert ex_info.value.window_sql == "RANK() OVER (ORDER BY x ASC NULLS FIRST)"

    outcome = engine.evaluate_all(mixed, bad_ntile, raise_on_error=False)[0]
    assert outcome.error.window_sql == outcome.window_sql


def test_window_result(engine, rows):
    result = engine.evaluate(
        rows, sum("v").alias("total").over(Window.partition_by("g"))
    )
    assert isinstance(result, WindowResult)
    assert len(result) == 6
    assert list(result) == [0, 1, 2, 3, 4, 5]
    assert result[0] == 30
    assert dict(result) == {0: 30, 1: 20, 2: 30, 3: 15, 4: 20, 5: 15}
    assert result.window_sql == "SUM(v) OVER (PARTITION BY g)"
    for position in [-1, 6, "0", True]:
        with pytest.raises(KeyError):
            result[position]

    series = result.to_series()
    assert series.name == "total"
    assert series.dtype == object
    assert series.tolist() == [30, 20, 30, 15, 20, 15]


def test_null_partition_keys(rows):
    grouped = WindowEngine().evaluate(rows, count("*").over(Window.partition_by("g")))
    assert grouped.to_list() == [2, 2, 2, 2, 2, 2]

    engine = WindowEngine.builder.config("null_partition_keys_equal", False).create()
    singletons = engine.evaluate(rows, count("*").over(Window.partition_by("g")))
    assert singletons.to_list() == [2, 2, 2, 1, 2, 1]


def test_input_is_not_modified(engine, rows):
    before = rows.to_pandas()
    engine.evaluate(rows, rank().over(Window.partition_by("g").order_by(col("v").desc())))
    engine.with_window_columns(rows, sum("v").over())
    pandas.testing.assert_frame_equal(rows.to_pandas(), before)
    assert rows.columns == ["g", "i", "v"]


def test_empty_row_set(engine):
    empty = RowSet.from_records([], schema=["g", "v"])
    assert engine.evaluate(empty, rank().over(Window.partition_by("g").order_by("v"))).to_list() == []


def test_evaluate_all(engine, rows):
    outcomes = engine.evaluate_all(
        rows,
        sum("v").over(Window.partition_by("g")),
        row_number().over(Window.partition_by("g").order_by("i")),
    )
    assert [type(o) for o in outcomes] == [PassOutcome, PassOutcome]
    assert all(o.ok for o in outcomes)
    assert outcomes[0].window_sql == "SUM(v) OVER (PARTITION BY g)"
    assert outcomes[0].result.to_list() == [30, 20, 30, 15, 20, 15]
    assert outcomes[1].result.to_list() == [1, 1, 2, 1, 2, 2]


def test_evaluate_all_keeps_passes_independent(engine, rows):
    outcomes = engine.evaluate_all(
        rows,
        max("v").over(),
        sum("g").over(),
        lag("v", -1).over(Window.order_by("i")),
        count("v").over(),
        raise_on_error=False,
    )
    assert [o.ok for o in outcomes] == [True, False, False, True]
    assert outcomes[0].result.to_list() == [20] * 6
    assert isinstance(outcomes[1].error, WindowTypeException)
    assert outcomes[1].result is None
    assert isinstance(outcomes[2].error, WindowConfigurationException)
    assert outcomes[3].result.to_list() == [6] * 6


def test_evaluate_all_raises_first_error(engine, parallel_engine, rows):
    for e in (engine, parallel_engine):
        with pytest.raises(WindowTypeException):
            e.evaluate_all(
                rows,
                max("v").over(),
                sum("g").over(),
                lag("v", -1).over(Window.order_by("i")),
            )


def test_evaluate_all_of_nothing(engine, rows):
    assert engine.evaluate_all(rows) == []


def test_parallel_evaluation_matches_sequential(engine, parallel_engine, daylight):
    columns = [
        avg("light").over(
            Window.partition_by("month").order_by("day").rows_between(-6, 0)
        ),
        rank().over(Window.partition_by("month").order_by(col("light").desc())),
        dense_rank().over(Window.order_by("light")),
        lag("light", 7).over(Window.partition_by("month").order_by("day")),
    ]
    for column in columns:
        assert (
            parallel_engine.evaluate(daylight, column).to_list()
            == engine.evaluate(daylight, column).to_list()
        )
    sequential = [o.result.to_list() for o in engine.evaluate_all(daylight, *columns)]
    parallel = [o.result.to_list() for o in parallel_engine.evaluate_all(daylight, *columns)]
    assert parallel == sequential


def test_with_window_columns(engine, rows):
    result = engine.with_window_columns(
        rows,
        sum("v").alias("total").over(Window.partition_by("g")),
        rank().over(Window.partition_by("g").order_by("i")),
        latest=max("i").over(Window.partition_by("g")),
    )
    assert result.columns == [
        "g",
        "i",
        "v",
        "total",
        "RANK() OVER (PARTITION BY g ORDER BY i ASC NULLS FIRST)",
        "latest",
    ]
    assert result.column_values("total") == [30, 20, 30, 15, 20, 15]
    assert result.column_values("latest") == [2] * 6
    assert len(result) == len(rows)


def test_with_window_columns_raises(engine, rows):
    with pytest.raises(WindowTypeException):
        engine.with_window_columns(rows, sum("g").over())


def test_unexpected_errors_are_wrapped(engine, rows, failing_sum):
    with pytest.raises(WindowEvaluationException) as ex_info:
        engine.evaluate(rows, sum("v").over())
    assert ex_info.value.error_code == "1300"
    assert ex_info.value.window_sql == "SUM(v) OVER ()"
    assert isinstance(ex_info.value.cause, ZeroDivisionError)
    assert isinstance(ex_info.value.__cause__, ZeroDivisionError)
    assert "ZeroDivisionError: division by zero" in str(ex_info.value)

    outcome = engine.evaluate_all(rows, sum("v").over(), raise_on_error=False)[0]
    assert isinstance(outcome.error, WindowEvaluationException)


def test_missing_implementation(engine, rows, missing_rank):
    with pytest.raises(NotImplementedError):
        engine.evaluate(rows, rank().over(Window.order_by("i")))
