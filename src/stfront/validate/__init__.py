"""Structured Text validation."""

from stfront.model.diagnostics import Diagnostic

from ._validator import STValidator


def validate(code: str) -> list[Diagnostic]:
    """Validate *code* with the default settings."""
    return STValidator().validate(code)


__all__ = ["STValidator", "validate"]
