#!/usr/bin/env python3
#
# Copyright (c) 2012-2025 Snowflake Computing Inc. All rights reserved.
#

import logging
import threading
from typing import Any, Dict, List

_logger = logging.getLogger("sqlwindow")


def parse_positional_args_to_list(*inputs: Any) -> List:
    """Convert the positional arguments to a list."""
    if len(inputs) == 1:
        return (
            [*inputs[0]] if isinstance(inputs[0], (list, tuple, set)) else [inputs[0]]
        )
    else:
        return [*inputs]


class WarningHelper:
    def __init__(self, warning_times: int) -> None:
        self.warning_times = warning_times
        self.count = 0
        self._lock = threading.Lock()

    def warning(self, text: str) -> None:
        with self._lock:
            should_warn = self.count < self.warning_times
            self.count += 1
        if should_warn:
            _logger.warning(text)


warning_dict: Dict[str, WarningHelper] = {}
_warning_dict_lock = threading.Lock()


def warning(name: str, text: str, warning_times: int = 1) -> None:
    with _warning_dict_lock:
        if name not in warning_dict:
            warning_dict[name] = WarningHelper(warning_times)
        helper = warning_dict[name]
    helper.warning(text)
