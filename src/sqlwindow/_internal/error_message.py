#!/usr/bin/env python3
#
# Copyright (c) 2012-2025 Snowflake Computing Inc. All rights reserved.
#

from typing import Any, Iterable, Optional

from sqlwindow.exceptions import (
    SqlWindowEngineConfigException,
    WindowConfigurationException,
    WindowEvaluationException,
    WindowTypeException,
)


class SqlWindowExceptionMessages:
    """Holds all of the error messages that could be used in the SqlWindowClientException Class.

    IMPORTANT: keep this file in numerical order of the error-code."""

    # Window Specification Error Messages 11XX

    @staticmethod
    def WINDOW_FRAME_INVERTED_BOUNDS(
        lower: str, upper: str
    ) -> WindowConfigurationException:
        return WindowConfigurationException(
            f"Invalid window frame: the start boundary {lower} lies after the end boundary {upper}.",
            error_code="1100",
        )

    @staticmethod
    def WINDOW_RANGE_OFFSET_REQUIRES_SINGLE_ORDER_KEY(
        order_key_count: int,
    ) -> WindowConfigurationException:
        return WindowConfigurationException(
            "A RANGE frame with an offset boundary requires exactly one ORDER BY key, "
            f"but {order_key_count} were given.",
            error_code="1101",
        )

    @staticmethod
    def WINDOW_RANGE_OFFSET_UNSUPPORTED_TYPE(
        key_name: str, key_type: str, offset: Any
    ) -> WindowConfigurationException:
        return WindowConfigurationException(
            f"A RANGE frame offset {offset!r} cannot be applied to ORDER BY key {key_name} "
            f"of type {key_type}. RANGE offsets need a numeric key with a numeric offset or a "
            "date/timestamp key with an interval offset.",
            error_code="1102",
        )

    @staticmethod
    def WINDOW_FUNCTION_INVALID_ARGUMENT(
        func_name: str, argument: str, value: Any, requirement: str
    ) -> WindowConfigurationException:
        return WindowConfigurationException(
            f"Invalid argument {argument}={value!r} for {func_name}: {requirement}.",
            error_code="1103",
        )

    @staticmethod
    def WINDOW_UNKNOWN_COLUMN(
        col_name: str, available: Iterable[str]
    ) -> WindowConfigurationException:
        return WindowConfigurationException(
            f"Column {col_name} referenced by the window does not exist. "
            f"Available columns: {', '.join(available)}.",
            error_code="1104",
        )

    @staticmethod
    def WINDOW_INVALID_FRAME_BOUNDARY(
        boundary: str, position: str
    ) -> WindowConfigurationException:
        return WindowConfigurationException(
            f"{boundary} cannot be used as the {position} boundary of a window frame.",
            error_code="1105",
        )

    @staticmethod
    def WINDOW_FUNCTION_REQUIRES_ORDER_BY(
        func_name: str,
    ) -> WindowConfigurationException:
        return WindowConfigurationException(
            f"Window function type [{func_name}] requires ORDER BY in window specification.",
            error_code="1106",
        )

    # Type Error Messages 12XX

    @staticmethod
    def FUNCTION_INCOMPATIBLE_TYPE(
        func_name: str, value: Any, row_index: Optional[int] = None
    ) -> WindowTypeException:
        location = f" at row {row_index}" if row_index is not None else ""
        return WindowTypeException(
            f"Cannot compute {func_name} on value {value!r} of type {type(value).__name__}{location}.",
            error_code="1200",
            row_index=row_index,
        )

    @staticmethod
    def ORDER_KEY_NOT_COMPARABLE(
        key_name: str, left: Any, right: Any
    ) -> WindowTypeException:
        return WindowTypeException(
            f"Values of ORDER BY key {key_name} cannot be compared: "
            f"{left!r} ({type(left).__name__}) and {right!r} ({type(right).__name__}).",
            error_code="1201",
        )

    # Evaluation Error Messages 13XX

    @staticmethod
    def WINDOW_EVALUATION_FAILED(
        window_sql: str, cause: BaseException
    ) -> WindowEvaluationException:
        return WindowEvaluationException(
            f"Failed to evaluate {window_sql}: {type(cause).__name__}: {cause}",
            error_code="1300",
            window_sql=window_sql,
            cause=cause,
        )

    # Engine Configuration Error Messages 14XX

    @staticmethod
    def ENGINE_UNKNOWN_OPTION(
        key: str, known: Iterable[str]
    ) -> SqlWindowEngineConfigException:
        return SqlWindowEngineConfigException(
            f'Engine option "{key}" does not exist. Known options: {", ".join(sorted(known))}.',
            error_code="1400",
        )

    @staticmethod
    def ENGINE_INVALID_OPTION_VALUE(
        key: str, value: Any, requirement: str
    ) -> SqlWindowEngineConfigException:
        return SqlWindowEngineConfigException(
            f'Invalid value {value!r} for engine option "{key}": {requirement}.',
            error_code="1401",
        )

    @staticmethod
    def ENGINE_INVALID_CONFIG_FILE(path: str, reason: str) -> SqlWindowEngineConfigException:
        return SqlWindowEngineConfigException(
            f"Cannot read engine options from {path}: {reason}.",
            error_code="1402",
        )
