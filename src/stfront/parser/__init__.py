"""Structured Text parser.

Entry points::

    from stfront.parser import parse, parse_expression

    block = parse(source)          # Block or None
    expr = parse_expression("A AND NOT B")
"""

from __future__ import annotations

from stfront.model.block import Block
from stfront.model.expressions import Expression

from ._parser import STParser, find_block_type


def parse(source: str) -> Block | None:
    """Parse the first PROGRAM/FUNCTION/FUNCTION_BLOCK in *source*."""
    return STParser().parse(source)


def parse_expression(text: str) -> Expression:
    """Parse a single expression. Unrecognised text becomes a variable node."""
    return STParser().parse_expression(text)


__all__ = ["STParser", "find_block_type", "parse", "parse_expression"]
