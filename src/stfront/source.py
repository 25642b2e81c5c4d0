"""Lexical line normalization shared by the parser and the validator.

Source text is split into physical lines, comments are blanked out in
place (so line numbers and columns survive), and each line is trimmed.
Both ``//`` line comments and ``(* ... *)`` block comments are removed;
a block comment may span several lines.  Comment markers inside quoted
string literals are left alone.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SourceLine:
    """One normalized physical line.

    *number* is 1-based; *indent* is the number of characters stripped
    from the left, so ``indent + offset + 1`` is the 1-based column of
    *offset* within *text*.
    """

    number: int
    text: str
    indent: int

    def column(self, offset: int) -> int:
        return self.indent + offset + 1


def split_source(source: str) -> list[SourceLine]:
    """Split *source* into comment-free, trimmed :class:`SourceLine` records."""
    result: list[SourceLine] = []
    in_block_comment = False
    for number, raw in enumerate(source.split("\n"), start=1):
        if raw.endswith("\r"):
            raw = raw[:-1]
        cleaned, in_block_comment = _blank_comments(raw, in_block_comment)
        text = cleaned.strip()
        indent = len(cleaned) - len(cleaned.lstrip()) if text else 0
        result.append(SourceLine(number=number, text=text, indent=indent))
    return result


def normalize_lines(source: str) -> list[str]:
    """Comment-free, trimmed line texts of *source* (one per physical line)."""
    return [line.text for line in split_source(source)]


def _blank_comments(line: str, in_block_comment: bool) -> tuple[str, bool]:
    """Replace comment characters in *line* with spaces.

    Returns the cleaned line and whether a block comment is still open
    at its end.
    """
    out: list[str] = []
    quote: str | None = None
    i = 0
    n = len(line)
    while i < n:
        ch = line[i]
        if in_block_comment:
            if line.startswith("*)", i):
                out.append("  ")
                i += 2
                in_block_comment = False
            else:
                out.append(" ")
                i += 1
            continue
        if quote is not None:
            out.append(ch)
            if ch == quote:
                quote = None
            i += 1
            continue
        if ch in ("'", '"'):
            quote = ch
            out.append(ch)
            i += 1
            continue
        if line.startswith("//", i):
            # Rest of the line is comment
            out.append(" " * (n - i))
            break
        if line.startswith("(*", i):
            out.append("  ")
            i += 2
            in_block_comment = True
            continue
        out.append(ch)
        i += 1
    return "".join(out), in_block_comment


class LineCursor:
    """Forward cursor over normalized lines with save/restore lookahead."""

    def __init__(self, lines: list[str], pos: int = 0) -> None:
        self.lines = lines
        self.pos = pos

    def at_end(self) -> bool:
        return self.pos >= len(self.lines)

    def advance(self) -> str:
        line = self.lines[self.pos]
        self.pos += 1
        return line

    def mark(self) -> int:
        return self.pos

    def reset(self, mark: int) -> None:
        self.pos = mark


# ---------------------------------------------------------------------------
# Parenthesis-aware scanning
# ---------------------------------------------------------------------------

def matching_paren(text: str, open_index: int) -> int:
    """Index of the ``)`` closing the ``(`` at *open_index*, or -1."""
    depth = 0
    for i in range(open_index, len(text)):
        ch = text[i]
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i
    return -1


def find_top_level(text: str, symbol: str, start: int = 0) -> int:
    """Index of the first *symbol* at parenthesis depth 0 from *start*, or -1."""
    depth = 0
    for i in range(start, len(text)):
        ch = text[i]
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        elif depth == 0 and text.startswith(symbol, i):
            return i
    return -1


def split_top_level(text: str, separator: str = ",") -> list[tuple[int, str]]:
    """Split *text* on *separator* outside parentheses.

    Returns ``(offset, part)`` pairs; offsets index into *text*.
    """
    parts: list[tuple[int, str]] = []
    start = 0
    while True:
        index = find_top_level(text, separator, start)
        if index < 0:
            parts.append((start, text[start:]))
            return parts
        parts.append((start, text[start:index]))
        start = index + len(separator)
