"""Line-oriented Structured Text validator.

Each non-blank normalized line runs through independent checks; their
findings accumulate without suppression.  A stack of open constructs
(PROGRAM, VAR, IF, ...) is carried across lines for block matching and
to know whether a line sits inside a VAR section:

- block matching: every opener needs the matching ``END_*``
- semicolons: assignments, calls and RETURN/EXIT/CONTINUE end in ``;``
- declarations (inside VAR sections): name and type sanity
- assignments (outside VAR sections): one top-level ``:=``, a plain
  target, balanced parentheses
- calls (outside VAR sections): balanced parentheses, named parameters
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass

from stfront.language import (
    KEYWORDS,
    VAR_SECTION_KEYWORDS,
    WORD_OPERATORS,
    is_known_type,
)
from stfront.model.diagnostics import Diagnostic, Severity
from stfront.source import (
    SourceLine,
    find_top_level,
    matching_paren,
    split_source,
    split_top_level,
)

logger = logging.getLogger(__name__)

_UNIT_OPEN_RE = re.compile(r"^(PROGRAM|FUNCTION_BLOCK|FUNCTION)\s+\w+")
_CONTROL_OPEN_RE = re.compile(r"^(IF|CASE|FOR|WHILE|REPEAT)\b")
_END_RE = re.compile(r"^END_(FUNCTION_BLOCK|PROGRAM|FUNCTION|VAR|IF|CASE|FOR|WHILE|REPEAT)\b")

_SEMICOLON_EXEMPT_RE = re.compile(
    r"^(PROGRAM|FUNCTION_BLOCK|FUNCTION|VAR\w*|IF|CASE|FOR|WHILE|REPEAT|END_\w*"
    r"|THEN|ELSE|ELSIF|DO|TO|BY|OF|UNTIL)\b",
    re.IGNORECASE,
)
_CALL_START_RE = re.compile(r"^(\w+)\s*\(")
_JUMP_RE = re.compile(r"^(RETURN|EXIT|CONTINUE)\b", re.IGNORECASE)
_VAR_DECL_RE = re.compile(r"^(\w+)\s*:\s*(\w+)")
_ASSIGN_TARGET_RE = re.compile(r"^[\w\[\].]+$")
_NAMED_PARAM_RE = re.compile(r"^\w+\s*(:=|=>)\s*.+$", re.DOTALL)
_FOR_RE = re.compile(r"^FOR\b", re.IGNORECASE)
_CASE_LABEL_RE = re.compile(r"^[\w#.\-\s,]+:(?!=)\s*")
_CONTROL_PREFIX_RE = re.compile(
    r"^(?:(?:IF|ELSIF)\b.*?\bTHEN|WHILE\b.*?\bDO|ELSE)\s+", re.IGNORECASE
)


@dataclass(slots=True)
class _OpenBlock:
    kind: str
    line: int


class STValidator:
    """Validates Structured Text source line by line.

    Parameters
    ----------
    extra_types
        Additional type names (user-defined structs, FBs, or
        ``STANDARD_FUNCTION_BLOCKS``) to accept in variable declarations
        without an "Unknown type" warning.
    """

    def __init__(self, extra_types: Iterable[str] = ()) -> None:
        self.extra_types = frozenset(t.upper() for t in extra_types)

    def validate(self, code: str) -> list[Diagnostic]:
        """Return all findings for *code*, ordered by line then check.

        Never raises for any string input; clean code yields ``[]``.
        """
        diagnostics: list[Diagnostic] = []
        stack: list[_OpenBlock] = []

        for line in split_source(code):
            if not line.text:
                continue
            self._check_block_matching(line, stack, diagnostics)
            top = stack[-1].kind if stack else None
            in_var_section = top == "VAR"
            self._check_semicolons(line, diagnostics)
            if in_var_section:
                self._check_variable_declaration(line, diagnostics)
            else:
                self._check_assignment(line, top == "CASE", diagnostics)
                self._check_function_call(line, diagnostics)

        for block in stack:
            diagnostics.append(Diagnostic(
                line=block.line,
                column=0,
                message=f"Unclosed {block.kind} block",
                severity=Severity.ERROR,
            ))

        logger.debug(f"Validated {len(code)} chars: {len(diagnostics)} diagnostics")
        return diagnostics

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------

    def _check_block_matching(
        self,
        line: SourceLine,
        stack: list[_OpenBlock],
        out: list[Diagnostic],
    ) -> None:
        text = line.text
        opener: str | None = None
        m = _UNIT_OPEN_RE.match(text) or _CONTROL_OPEN_RE.match(text)
        if m:
            opener = m.group(1)
        elif text.split(None, 1)[0].rstrip(";") in VAR_SECTION_KEYWORDS:
            opener = "VAR"

        # IF a THEN b := 1; END_IF; opens and closes on one line
        if opener is not None and not re.search(rf"\bEND_{opener}\b", text):
            stack.append(_OpenBlock(opener, line.number))

        end = _END_RE.match(text)
        if end is None:
            return
        end_kind = end.group(1)
        if not stack:
            out.append(Diagnostic(
                line=line.number,
                column=0,
                message=f"Unexpected END_{end_kind}",
                severity=Severity.ERROR,
            ))
        elif stack[-1].kind != end_kind:
            out.append(Diagnostic(
                line=line.number,
                column=0,
                message=f"Expected END_{stack[-1].kind} but found END_{end_kind}",
                severity=Severity.ERROR,
            ))
        else:
            stack.pop()

    def _check_semicolons(self, line: SourceLine, out: list[Diagnostic]) -> None:
        text = line.text
        if _SEMICOLON_EXEMPT_RE.match(text):
            return
        needs_semicolon = (
            ":=" in text
            or _CALL_START_RE.match(text) is not None
            or _JUMP_RE.match(text) is not None
        )
        if needs_semicolon and not text.endswith(";"):
            out.append(Diagnostic(
                line=line.number,
                column=line.column(len(text)),
                message="Missing semicolon",
                severity=Severity.WARNING,
            ))

    def _check_variable_declaration(self, line: SourceLine, out: list[Diagnostic]) -> None:
        m = _VAR_DECL_RE.match(line.text)
        if m is None:
            return
        var_name, var_type = m.group(1), m.group(2)

        if var_name[0].isdigit():
            out.append(Diagnostic(
                line=line.number,
                column=line.column(m.start(1)),
                message="Variable name cannot start with a number",
                severity=Severity.ERROR,
            ))

        if not is_known_type(var_type) and var_type.upper() not in self.extra_types:
            out.append(Diagnostic(
                line=line.number,
                column=line.column(m.start(2)),
                message=f"Unknown type: {var_type}",
                severity=Severity.WARNING,
            ))

    def _check_assignment(self, line: SourceLine, in_case: bool, out: list[Diagnostic]) -> None:
        text = line.text
        if _FOR_RE.match(text):
            return
        # Skip a same-line control prefix or CASE label before the statement
        start = 0
        prefix = _CONTROL_PREFIX_RE.match(text)
        if prefix:
            start = prefix.end()
        elif in_case:
            label = _CASE_LABEL_RE.match(text)
            if label:
                start = label.end()
        # Only top-level := counts; named call parameters sit inside parentheses.
        index = find_top_level(text, ":=", start)
        if index < 0:
            return

        if find_top_level(text, ":=", index + 2) >= 0:
            out.append(Diagnostic(
                line=line.number,
                column=line.column(index),
                message="Invalid assignment syntax",
                severity=Severity.ERROR,
            ))
            return

        left = text[start:index].strip()
        right = text[index + 2:].strip()
        if right.endswith(";"):
            right = right[:-1]

        if not _ASSIGN_TARGET_RE.match(left):
            out.append(Diagnostic(
                line=line.number,
                column=line.column(start),
                message="Invalid left-hand side of assignment",
                severity=Severity.ERROR,
            ))

        if right.count("(") != right.count(")"):
            out.append(Diagnostic(
                line=line.number,
                column=line.column(index + 2),
                message="Unbalanced parentheses",
                severity=Severity.ERROR,
            ))

    def _check_function_call(self, line: SourceLine, out: list[Diagnostic]) -> None:
        text = line.text
        m = _CALL_START_RE.match(text)
        if m is None:
            return
        name = m.group(1).upper()
        if name in KEYWORDS or name in WORD_OPERATORS:
            return

        open_index = m.end() - 1
        if text.count("(") != text.count(")"):
            out.append(Diagnostic(
                line=line.number,
                column=line.column(open_index),
                message="Unbalanced parentheses in function call",
                severity=Severity.ERROR,
            ))

        close_index = matching_paren(text, open_index)
        if close_index < 0:
            return
        params_start = open_index + 1
        params = text[params_start:close_index]
        if not params.strip():
            return
        for number, (offset, param) in enumerate(split_top_level(params), start=1):
            trimmed = param.strip()
            if trimmed and not _NAMED_PARAM_RE.match(trimmed):
                leading = len(param) - len(param.lstrip())
                out.append(Diagnostic(
                    line=line.number,
                    column=line.column(params_start + offset + leading),
                    message=f"Parameter {number} should use named parameter syntax (name := value)",
                    severity=Severity.INFO,
                ))
