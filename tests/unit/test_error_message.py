#
# Copyright (c) 2012-2025 Snowflake Computing Inc. All rights reserved.
#

import traceback

import pytest

from sqlwindow._internal.error_message import SqlWindowExceptionMessages
from sqlwindow.exceptions import (
    SqlWindowClientException,
    SqlWindowEngineConfigException,
    WindowConfigurationException,
    WindowEvaluationException,
    WindowTypeException,
)


def test_window_frame_inverted_bounds():
    ex = SqlWindowExceptionMessages.WINDOW_FRAME_INVERTED_BOUNDS(
        "1 FOLLOWING", "1 PRECEDING"
    )
    assert type(ex) == WindowConfigurationException
    assert ex.error_code == "1100"
    assert (
        ex.message
        == "Invalid window frame: the start boundary 1 FOLLOWING lies after the end boundary 1 PRECEDING."
    )
    assert str(ex) == f"(1100): {ex.message}"


def test_window_range_offset_requires_single_order_key():
    ex = SqlWindowExceptionMessages.WINDOW_RANGE_OFFSET_REQUIRES_SINGLE_ORDER_KEY(2)
    assert type(ex) == WindowConfigurationException
    assert ex.error_code == "1101"
    assert "but 2 were given" in ex.message


def test_window_range_offset_unsupported_type():
    ex = SqlWindowExceptionMessages.WINDOW_RANGE_OFFSET_UNSUPPORTED_TYPE(
        "day", "string", "1 PRECEDING"
    )
    assert ex.error_code == "1102"
    assert "ORDER BY key day of type string" in ex.message


def test_window_function_invalid_argument():
    ex = SqlWindowExceptionMessages.WINDOW_FUNCTION_INVALID_ARGUMENT(
        "NTILE", "n", 0, "must be a positive integer"
    )
    assert ex.error_code == "1103"
    assert ex.message == "Invalid argument n=0 for NTILE: must be a positive integer."


def test_window_unknown_column():
    ex = SqlWindowExceptionMessages.WINDOW_UNKNOWN_COLUMN("x", ["a", "b"])
    assert ex.error_code == "1104"
    assert ex.message.endswith("Available columns: a, b.")


def test_window_invalid_frame_boundary():
    ex = SqlWindowExceptionMessages.WINDOW_INVALID_FRAME_BOUNDARY(
        "UNBOUNDED FOLLOWING", "start"
    )
    assert ex.error_code == "1105"
    assert (
        ex.message
        == "UNBOUNDED FOLLOWING cannot be used as the start boundary of a window frame."
    )


def test_window_function_requires_order_by():
    ex = SqlWindowExceptionMessages.WINDOW_FUNCTION_REQUIRES_ORDER_BY("RANK")
    assert ex.error_code == "1106"


def test_function_incompatible_type():
    ex = SqlWindowExceptionMessages.FUNCTION_INCOMPATIBLE_TYPE("SUM", "x", 3)
    assert type(ex) == WindowTypeException
    assert ex.error_code == "1200"
    assert ex.row_index == 3
    assert ex.message == "Cannot compute SUM on value 'x' of type str at row 3."

    ex = SqlWindowExceptionMessages.FUNCTION_INCOMPATIBLE_TYPE("MIN", b"x")
    assert ex.row_index is None
    assert "at row" not in ex.message


def test_order_key_not_comparable():
    ex = SqlWindowExceptionMessages.ORDER_KEY_NOT_COMPARABLE("k", 1, "a")
    assert type(ex) == WindowTypeException
    assert ex.error_code == "1201"


def test_window_evaluation_failed():
    cause = ValueError("bad value")
    ex = SqlWindowExceptionMessages.WINDOW_EVALUATION_FAILED("SUM(v) OVER ()", cause)
    assert type(ex) == WindowEvaluationException
    assert ex.error_code == "1300"
    assert ex.window_sql == "SUM(v) OVER ()"
    assert ex.cause is cause
    assert ex.message == "Failed to evaluate SUM(v) OVER (): ValueError: bad value"


@pytest.mark.parametrize(
    "ex, error_code",
    [
        (SqlWindowExceptionMessages.ENGINE_UNKNOWN_OPTION("x", {"b": 1, "a": 2}), "1400"),
        (
            SqlWindowExceptionMessages.ENGINE_INVALID_OPTION_VALUE(
                "max_workers", 0, "must be a positive integer"
            ),
            "1401",
        ),
        (SqlWindowExceptionMessages.ENGINE_INVALID_CONFIG_FILE("a.yaml", "missing"), "1402"),
    ],
)
def test_engine_config_errors(ex, error_code):
    assert type(ex) == SqlWindowEngineConfigException
    assert ex.error_code == error_code


def test_unknown_option_lists_known_options():
    ex = SqlWindowExceptionMessages.ENGINE_UNKNOWN_OPTION("x", {"b": 1, "a": 2})
    assert ex.message == 'Engine option "x" does not exist. Known options: a, b.'


def test_raise_from_error():
    # make sure the traceback works
    try:
        WindowEvaluationException.raise_from_error(
            ValueError("exception message"), "RANK() OVER ()"
        )
    except Exception as exc:
        tb = traceback.format_exc()
        assert isinstance(exc, WindowEvaluationException)
        assert "Failed to evaluate RANK() OVER ()" in str(exc)
        assert "ValueError: exception message" in tb

    # sqlwindow errors are not wrapped again
    error = WindowTypeException("type message", "1200")
    with pytest.raises(WindowTypeException) as ex_info:
        WindowEvaluationException.raise_from_error(error, "RANK() OVER ()")
    assert ex_info.value is error

    with pytest.raises(NotImplementedError):
        WindowEvaluationException.raise_from_error(
            NotImplementedError("missing"), "RANK() OVER ()"
        )


def test_exception_repr():
    ex = SqlWindowClientException("message", "1000")
    assert repr(ex) == "SqlWindowClientException('message', '1000')"
    assert str(SqlWindowClientException("message")) == "message"
    ex = WindowTypeException("message", "1200", 4)
    assert repr(ex) == "WindowTypeException('message', '1200', 4)"
