"""Statement parsing methods for the ST parser.

Handles assignments, bare calls and IF statements.  A line of the form
``IF <cond> THEN`` opens a multi-line block that runs to the matching
``END_IF``; IF blocks nested inside a branch recurse through the same
dispatcher.
"""

from __future__ import annotations

import re

from stfront.model.statements import (
    Assignment,
    CallStatement,
    IfStatement,
    Statement,
)
from stfront.source import LineCursor


_ASSIGN_RE = re.compile(r"^([\w.\[\]]+)\s*:=\s*(.+)$")
_IF_RE = re.compile(r"^IF\b")
_IF_THEN_RE = re.compile(r"^IF\s+(.+)\s+THEN$")
_TRAILING_THEN_RE = re.compile(r"\s*\bTHEN$")

_END_IF_LINES = frozenset({"END_IF", "END_IF;"})

# IF blocks nested deeper than this are read as single-line IFs.
MAX_IF_DEPTH = 64


# ---------------------------------------------------------------------------
# Statement mixin
# ---------------------------------------------------------------------------

class _StatementMixin:
    """Mixin providing statement parsing methods for STParser."""

    def _parse_statement_at(self, line: str, cursor: LineCursor) -> Statement | None:
        """Parse *line*; a multi-line IF also consumes its body from *cursor*.

        An IF block that never reaches END_IF, or that sits more than
        ``MAX_IF_DEPTH`` blocks deep, leaves the cursor where it was and
        degrades to a branchless single-line ``if``.
        """
        if _IF_RE.match(line) and line.endswith("THEN"):
            stmt = self._parse_if_block(line, cursor)
            if stmt is not None:
                return stmt
        return self._parse_statement(line)

    def _parse_if_block(self, line: str, cursor: LineCursor) -> IfStatement | None:
        start = cursor.mark()
        cached = self._if_blocks.get(start)
        if cached is not None:
            stmt, end = cached
            if stmt is not None:
                cursor.reset(end)
            return stmt

        if self._if_depth >= MAX_IF_DEPTH:
            self._depth_limited = True
            return None

        self._if_depth += 1
        try:
            return self._scan_if_block(line, start, cursor)
        finally:
            self._if_depth -= 1

    def _scan_if_block(self, line: str, start: int, cursor: LineCursor) -> IfStatement | None:
        m = _IF_THEN_RE.match(line)
        stmt = IfStatement(
            condition=self._parse_expression(m.group(1)) if m else None,
            then_branch=[],
            else_branch=[],
        )
        branch = stmt.then_branch

        while not cursor.at_end():
            body_line = cursor.advance()
            if not body_line:
                continue
            if body_line == "ELSE":
                branch = stmt.else_branch
                continue
            if body_line in _END_IF_LINES:
                self._if_blocks[start] = (stmt, cursor.mark())
                return stmt
            nested = self._parse_statement_at(body_line, cursor)
            if nested is not None:
                branch.append(nested)

        self._if_blocks[start] = (None, start)
        cursor.reset(start)
        return None

    def _parse_statement(self, line: str) -> Statement | None:
        """Parse a single-line statement, or return None if nothing matches."""
        if line.endswith(";"):
            line = line[:-1]
        line = line.strip()
        if not line:
            return None

        m = _ASSIGN_RE.match(line)
        if m:
            return Assignment(target=m.group(1), expression=self._parse_expression(m.group(2)))

        if _IF_RE.match(line):
            cond_text = _TRAILING_THEN_RE.sub("", line[2:].strip())
            return IfStatement(condition=self._parse_expression(cond_text) if cond_text else None)

        call = self._parse_call(line)
        if call is not None:
            return CallStatement(target=call.name, expression=call)

        return None
