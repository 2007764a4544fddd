#
# Copyright (c) 2012-2025 Snowflake Computing Inc. All rights reserved.
#
from .window_engine import DEFAULT_OPTIONS, PassOutcome, WindowEngine, WindowResult

__all__ = ["DEFAULT_OPTIONS", "PassOutcome", "WindowEngine", "WindowResult"]
