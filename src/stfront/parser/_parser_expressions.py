"""Expression parsing methods for the ST parser.

Expressions are recognised by trying patterns in a fixed order:
boolean literal, numeric literal, ``NOT``, AND-split, OR-split,
comparison split, call syntax, and finally a bare variable reference.
Splits only happen outside parentheses.
"""

from __future__ import annotations

import logging
import math
import re

from stfront.model.expressions import (
    COMPARISON_OPS,
    BinaryExpr,
    BinaryOp,
    CallExpr,
    Expression,
    LiteralExpr,
    UnaryExpr,
    UnaryOp,
    VariableRef,
)
from stfront.source import find_top_level, matching_paren

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"^-?\d+(\.\d+)?$")
_NOT_RE = re.compile(r"^NOT(?:\s+|(?=\())(.+)$", re.DOTALL)
_CALL_RE = re.compile(r"^(\w+)\s*\((.*)\)$", re.DOTALL)
_NAMED_ARG_RE = re.compile(r"^(\w+)\s*:=\s*(.+)$", re.DOTALL)

# Sub-expressions nested deeper than this are kept as plain text.
MAX_EXPRESSION_DEPTH = 64


# ---------------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------------

def _is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


def _at_token_boundary(text: str, index: int) -> bool:
    return index < 0 or index >= len(text) or not _is_word_char(text[index])


def _number_literal(text: str) -> Expression:
    """Numeric literal for *text*, or the plain text if it has no finite value."""
    try:
        value = float(text) if "." in text else int(text)
    except ValueError:
        # past the interpreter's integer string conversion limit
        return VariableRef(name=text)
    if isinstance(value, float) and math.isinf(value):
        return VariableRef(name=text)
    return LiteralExpr(value=value)


def strip_enclosing_parens(text: str) -> str:
    """Remove parenthesis pairs that wrap the whole of *text*."""
    text = text.strip()
    while text.startswith("(") and matching_paren(text, 0) == len(text) - 1:
        text = text[1:-1].strip()
    return text


def split_by_operator(expr: str, operator: str) -> list[str]:
    """Split *expr* on the word operator *operator* at parenthesis depth 0.

    Returns ``[expr]`` unchanged when there is no top-level occurrence.
    """
    parts: list[str] = []
    depth = 0
    start = 0
    i = 0
    width = len(operator)
    while i < len(expr):
        ch = expr[i]
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        elif (
            depth == 0
            and expr.startswith(operator, i)
            and _at_token_boundary(expr, i - 1)
            and _at_token_boundary(expr, i + width)
        ):
            parts.append(expr[start:i].strip())
            start = i + width
            i = start
            continue
        i += 1

    if start < len(expr):
        parts.append(expr[start:].strip())

    return parts if len(parts) > 1 else [expr]


# ---------------------------------------------------------------------------
# Expression mixin
# ---------------------------------------------------------------------------

class _ExpressionMixin:
    """Mixin providing expression parsing methods for STParser."""

    def parse_expression(self, text: str) -> Expression:
        """Parse *text* into an expression tree. Never fails.

        Text that matches no pattern becomes a ``VariableRef`` holding it,
        as does any sub-expression nested deeper than
        ``MAX_EXPRESSION_DEPTH``.
        """
        return self._parse_expression(text)

    def _parse_expression(self, text: str, depth: int = 0) -> Expression:
        if depth > MAX_EXPRESSION_DEPTH:
            logger.warning(
                f"Expression nested deeper than {MAX_EXPRESSION_DEPTH} levels, "
                f"keeping the rest as plain text ({len(text)} chars)"
            )
            return VariableRef(name=text.strip())

        expr = strip_enclosing_parens(text)

        if expr in ("TRUE", "FALSE"):
            return LiteralExpr(value=expr == "TRUE")

        if _NUMBER_RE.match(expr):
            return _number_literal(expr)

        m = _NOT_RE.match(expr)
        if m:
            return UnaryExpr(
                operator=UnaryOp.NOT,
                operand=self._parse_expression(m.group(1), depth + 1),
            )

        # AND before OR; chains fold to the left: ((a AND b) AND c)
        for op in (BinaryOp.AND, BinaryOp.OR):
            parts = split_by_operator(expr, op.value)
            if len(parts) > 1:
                result = self._parse_expression(parts[0], depth + 1)
                for part in parts[1:]:
                    result = BinaryExpr(
                        operator=op,
                        left=result,
                        right=self._parse_expression(part, depth + 1),
                    )
                return result

        for op in COMPARISON_OPS:
            index = find_top_level(expr, op.value)
            if index > 0:
                return BinaryExpr(
                    operator=op,
                    left=self._parse_expression(expr[:index], depth + 1),
                    right=self._parse_expression(expr[index + len(op.value):], depth + 1),
                )

        call = self._parse_call(expr, depth)
        if call is not None:
            return call

        return VariableRef(name=expr)

    def _parse_call(self, text: str, depth: int = 0) -> CallExpr | None:
        """Parse ``name(args)`` where the parentheses enclose the rest of *text*."""
        m = _CALL_RE.match(text)
        if m is None:
            return None
        if matching_paren(text, m.start(2) - 1) != len(text) - 1:
            return None
        return CallExpr(name=m.group(1), arguments=self._parse_arguments(m.group(2), depth + 1))

    def _parse_arguments(self, args: str, depth: int) -> list[Expression]:
        # Plain comma split: a nested call's own commas are not protected.
        if not args.strip():
            return []
        result: list[Expression] = []
        for part in args.split(","):
            trimmed = part.strip()
            named = _NAMED_ARG_RE.match(trimmed)
            if named:
                result.append(self._parse_expression(named.group(2), depth))
            else:
                result.append(self._parse_expression(trimmed, depth))
        return result
