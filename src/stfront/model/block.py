"""Top-level units (PROGRAM / FUNCTION / FUNCTION_BLOCK) and their variables."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from .statements import Statement


class BlockType(str, Enum):
    PROGRAM = "program"
    FUNCTION = "function"
    FUNCTION_BLOCK = "function_block"

    @property
    def keyword(self) -> str:
        """The ST keyword that opens this block (``FUNCTION_BLOCK``)."""
        return self.value.upper()

    @property
    def terminator(self) -> str:
        return f"END_{self.keyword}"


class VariableKind(str, Enum):
    INPUT = "input"
    OUTPUT = "output"
    LOCAL = "local"
    INOUT = "inout"


class Variable(BaseModel):
    """A declared variable.

    *kind* records which VAR section declared it. *initial_value* is the
    raw text after ``:=`` in the declaration, if any.
    """

    name: str
    type: str
    kind: VariableKind = VariableKind.LOCAL
    initial_value: str | None = None


class Block(BaseModel):
    """One parsed PROGRAM, FUNCTION or FUNCTION_BLOCK."""

    type: BlockType
    name: str = ""
    return_type: str | None = None
    variables: list[Variable] = []
    statements: list[Statement] = []

    @property
    def inputs(self) -> list[Variable]:
        return [v for v in self.variables if v.kind == VariableKind.INPUT]

    @property
    def outputs(self) -> list[Variable]:
        return [v for v in self.variables if v.kind == VariableKind.OUTPUT]

    def variable(self, name: str) -> Variable | None:
        """Look up a declared variable by name (first declaration wins)."""
        for v in self.variables:
            if v.name == name:
                return v
        return None
