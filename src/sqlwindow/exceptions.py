#!/usr/bin/env python3
#
# Copyright (c) 2012-2025 Snowflake Computing Inc. All rights reserved.
#
"""This package contains all sqlwindow client-side exceptions."""
import logging
from typing import Optional

_logger = logging.getLogger(__name__)


class SqlWindowClientException(Exception):
    """Base sqlwindow exception class"""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
    ) -> None:
        self.message: str = message
        self.error_code: Optional[str] = error_code
        # SQL text of the window expression that failed, set by the engine
        self.window_sql: Optional[str] = None

        self._pretty_msg = (
            f"({self.error_code}): {self.message}" if self.error_code else self.message
        )

    def __repr__(self):
        return f"{self.__class__.__name__}({self.message!r}, {self.error_code!r})"

    def __str__(self):
        return self._pretty_msg


class WindowConfigurationException(SqlWindowClientException):
    """Exception for a malformed window specification.

    Raised before any row is processed. Includes all error codes in range 11XX.
    """

    pass


class WindowTypeException(SqlWindowClientException):
    """Exception for a window function applied to values of an incompatible type.

    Includes all error codes in range 12XX.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        row_index: Optional[int] = None,
    ) -> None:
        super().__init__(message, error_code)
        self.row_index: Optional[int] = row_index

    def __repr__(self):
        return f"{self.__class__.__name__}({self.message!r}, {self.error_code!r}, {self.row_index!r})"


class WindowEvaluationException(SqlWindowClientException):
    """Exception for a failed evaluation pass of a single window expression.

    Includes error codes: 1300. The window expression is kept in ``window_sql``
    and the original error is available as ``cause`` (and ``__cause__``).
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        window_sql: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message, error_code)
        self.window_sql: Optional[str] = window_sql
        self.cause: Optional[BaseException] = cause

        log_cause = _logger.getEffectiveLevel() == logging.DEBUG
        pretty_error_code = f"({self.error_code}): " if self.error_code else ""
        pretty_cause = f" [{type(cause).__name__}]" if cause and log_cause else ""
        self._pretty_msg = f"{pretty_error_code}{self.message}{pretty_cause}"

    def __repr__(self):
        return f"{self.__class__.__name__}({self.message!r}, {self.error_code!r}, {self.window_sql!r})"

    @classmethod
    def raise_from_error(cls, error: BaseException, window_sql: str):
        """Re-raises sqlwindow errors and ``NotImplementedError`` unchanged, and wraps
        anything else into a 1300 error for the window ``window_sql``. sqlwindow errors
        are tagged with ``window_sql`` on the way out."""
        if isinstance(error, SqlWindowClientException):
            if error.window_sql is None:
                error.window_sql = window_sql
            raise error
        if isinstance(error, NotImplementedError):
            raise error

        from sqlwindow._internal.error_message import SqlWindowExceptionMessages

        raise SqlWindowExceptionMessages.WINDOW_EVALUATION_FAILED(
            window_sql, error
        ) from error


class SqlWindowEngineConfigException(SqlWindowClientException):
    """Exception for unknown or invalid engine options.

    Includes all error codes in range 14XX.
    """

    pass
