"""Statement AST nodes for parsed Structured Text."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from .expressions import CallExpr, Expression


class Assignment(BaseModel):
    kind: Literal["assignment"] = "assignment"
    target: str
    expression: Expression


class IfStatement(BaseModel):
    """IF / THEN / ELSE.

    Branch lists are None for a same-line ``IF cond THEN`` whose block
    never reached END_IF; they are lists (possibly empty) otherwise.
    """

    kind: Literal["if"] = "if"
    condition: Expression | None = None
    then_branch: list[Statement] | None = None
    else_branch: list[Statement] | None = None


class CallStatement(BaseModel):
    """Bare function or function-block invocation used as a statement."""

    kind: Literal["call"] = "call"
    target: str
    expression: CallExpr


class ForStatement(BaseModel):
    kind: Literal["for"] = "for"
    body: list[Statement] = []


class WhileStatement(BaseModel):
    kind: Literal["while"] = "while"
    condition: Expression | None = None
    body: list[Statement] = []


class ReturnStatement(BaseModel):
    kind: Literal["return"] = "return"
    expression: Expression | None = None


Statement = Annotated[
    Union[
        Assignment,
        IfStatement,
        CallStatement,
        ForStatement,
        WhileStatement,
        ReturnStatement,
    ],
    Field(discriminator="kind"),
]

# Rebuild models with recursive Statement references.
IfStatement.model_rebuild()
CallStatement.model_rebuild()
ForStatement.model_rebuild()
WhileStatement.model_rebuild()
ReturnStatement.model_rebuild()
