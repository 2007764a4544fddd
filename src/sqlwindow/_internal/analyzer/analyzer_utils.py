#
# Copyright (c) 2012-2025 Snowflake Computing Inc. All rights reserved.
#

from typing import List, Optional

LEFT_PARENTHESIS = "("
RIGHT_PARENTHESIS = ")"
COMMA = ", "
SPACE = " "
EMPTY_STRING = ""
OVER = " OVER "
BETWEEN = " BETWEEN "
AND = " AND "
PRECEDING = " PRECEDING"
FOLLOWING = " FOLLOWING"
IGNORE_NULLS = " IGNORE NULLS"
PARTITION_BY = "PARTITION BY "
ORDER_BY = "ORDER BY "


def function_expression(name: str, children: List[str]) -> str:
    return name + LEFT_PARENTHESIS + COMMA.join(children) + RIGHT_PARENTHESIS


def partition_spec(col_exprs: List[str]) -> str:
    return f"{PARTITION_BY}{COMMA.join(col_exprs)}" if col_exprs else EMPTY_STRING


def order_by_spec(col_exprs: List[str]) -> str:
    return f"{ORDER_BY}{COMMA.join(col_exprs)}" if col_exprs else EMPTY_STRING


def window_expression(window_function: str, window_spec: str) -> str:
    return window_function + OVER + LEFT_PARENTHESIS + window_spec + RIGHT_PARENTHESIS


def window_spec_expression(
    partition_exprs: List[str], order_exprs: List[str], frame_spec: str
) -> str:
    return SPACE.join(
        part
        for part in (
            partition_spec(partition_exprs),
            order_by_spec(order_exprs),
            frame_spec,
        )
        if part
    )


def specified_window_frame_expression(frame_type: str, lower: str, upper: str) -> str:
    return frame_type + BETWEEN + lower + AND + upper


def window_frame_boundary_expression(offset: str, is_following: bool) -> str:
    return offset + (FOLLOWING if is_following else PRECEDING)


def rank_related_function_expression(
    func_name: str,
    expr: str,
    offset: Optional[int],
    default: Optional[str],
    ignore_nulls: bool,
) -> str:
    return (
        func_name
        + LEFT_PARENTHESIS
        + expr
        + (COMMA + str(offset) if offset is not None else EMPTY_STRING)
        + (COMMA + default if default else EMPTY_STRING)
        + RIGHT_PARENTHESIS
        + (IGNORE_NULLS if ignore_nulls else EMPTY_STRING)
    )


def order_expression(name: str, direction: str, null_ordering: str) -> str:
    return name + SPACE + direction + SPACE + null_ordering
