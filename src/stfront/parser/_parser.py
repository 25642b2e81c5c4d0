"""Structural parser: turns Structured Text source into a ``Block``.

The parser is best-effort.  It locates the first PROGRAM, FUNCTION_BLOCK
or FUNCTION header, collects variables from VAR sections and dispatches
every other line to statement parsing.  Lines that match no pattern are
skipped; nothing here raises for malformed source.

Key pieces:

- **find_block_type**: picks the parse mode from the first header line.
- **STParser**: walks a ``LineCursor`` over the normalized lines.  The
  expression and statement methods live in mixins
  (``_parser_expressions``, ``_parser_statements``).
"""

from __future__ import annotations

import logging
import re

from stfront.language import VAR_SECTION_KEYWORDS
from stfront.model.block import Block, BlockType, Variable, VariableKind
from stfront.model.statements import IfStatement
from stfront.source import LineCursor, normalize_lines

from ._parser_expressions import _ExpressionMixin
from ._parser_statements import MAX_IF_DEPTH, _StatementMixin

logger = logging.getLogger(__name__)

# \b keeps FUNCTION from matching the start of FUNCTION_BLOCK.
_BLOCK_HEADER_RE = re.compile(r"^(PROGRAM|FUNCTION_BLOCK|FUNCTION)\b")
_VAR_DECL_RE = re.compile(r"^(\w+)\s*:\s*(\w+)(?:\s*:=\s*(.+?))?\s*;?$")

# VAR_* openers not listed here open a section whose declarations are ignored.
_VAR_SECTION_KINDS: dict[str, VariableKind] = {
    "VAR": VariableKind.LOCAL,
    "VAR_INPUT": VariableKind.INPUT,
    "VAR_OUTPUT": VariableKind.OUTPUT,
    "VAR_IN_OUT": VariableKind.INOUT,
    "VAR_TEMP": VariableKind.LOCAL,
}


def find_block_type(lines: list[str]) -> tuple[BlockType, int] | None:
    """Return the block type and line index of the first header, if any."""
    for index, line in enumerate(lines):
        m = _BLOCK_HEADER_RE.match(line)
        if m:
            return BlockType(m.group(1).lower()), index
    return None


def _first_word(line: str) -> str:
    return line.split(None, 1)[0].rstrip(";")


# ---------------------------------------------------------------------------
# STParser
# ---------------------------------------------------------------------------

class STParser(_ExpressionMixin, _StatementMixin):
    """Parses one ST unit into a ``Block``.

    Holds only per-call scratch state, reset by each ``parse()``.
    """

    def __init__(self) -> None:
        # IF-block start line -> (statement or None if unterminated, end line)
        self._if_blocks: dict[int, tuple[IfStatement | None, int]] = {}
        self._if_depth = 0
        self._depth_limited = False

    def parse(self, source: str) -> Block | None:
        """Parse the first PROGRAM/FUNCTION/FUNCTION_BLOCK in *source*.

        Returns None when no such unit is found.
        """
        self._if_blocks = {}
        self._if_depth = 0
        self._depth_limited = False
        lines = normalize_lines(source)
        found = find_block_type(lines)
        if found is None:
            logger.debug("No PROGRAM, FUNCTION or FUNCTION_BLOCK header found")
            return None

        block_type, start = found
        try:
            block = self._parse_block(block_type, LineCursor(lines, start))
        finally:
            self._if_blocks = {}

        if self._depth_limited:
            logger.warning(
                f"{block.type.keyword} {block.name}: IF blocks nested deeper than "
                f"{MAX_IF_DEPTH} levels were read as single-line IFs"
            )

        logger.debug(
            f"Parsed {block.type.keyword} {block.name}: "
            f"{len(block.variables)} variables, {len(block.statements)} statements"
        )
        return block

    def _parse_block(self, block_type: BlockType, cursor: LineCursor) -> Block:
        block = Block(type=block_type)

        header = cursor.advance()
        m = re.match(rf"^{block_type.keyword}\s+(\w+)(?:\s*:\s*(\w+))?", header)
        if m:
            block.name = m.group(1)
            block.return_type = m.group(2)

        in_var_section = False
        var_kind: VariableKind | None = None

        while not cursor.at_end():
            line = cursor.advance()
            if not line:
                continue

            word = _first_word(line)
            if word == block_type.terminator:
                break

            # Variable sections
            if word in VAR_SECTION_KEYWORDS:
                in_var_section = True
                var_kind = _VAR_SECTION_KINDS.get(word)
                continue
            if word == "END_VAR":
                in_var_section = False
                continue
            if in_var_section:
                if var_kind is not None:
                    variable = self._parse_variable(line, var_kind)
                    if variable is not None:
                        block.variables.append(variable)
                continue

            # Stray terminators of other constructs
            if word.startswith("END_"):
                continue

            stmt = self._parse_statement_at(line, cursor)
            if stmt is not None:
                block.statements.append(stmt)

        return block

    def _parse_variable(self, line: str, kind: VariableKind) -> Variable | None:
        m = _VAR_DECL_RE.match(line)
        if m is None:
            return None
        return Variable(name=m.group(1), type=m.group(2), kind=kind, initial_value=m.group(3))
