"""Validator output records."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class Diagnostic(BaseModel):
    """One validator finding.

    *line* is 1-based. *column* is the 1-based column in the physical
    source line, or 0 when the finding applies to the whole line.
    """

    line: int
    column: int = 0
    message: str
    severity: Severity
