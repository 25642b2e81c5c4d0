"""Expression AST nodes for parsed Structured Text."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class BinaryOp(str, Enum):
    AND = "AND"
    OR = "OR"
    NE = "<>"
    LE = "<="
    GE = ">="
    EQ = "="
    LT = "<"
    GT = ">"


class UnaryOp(str, Enum):
    NOT = "NOT"


# Order in which comparison operators are tried against an expression.
COMPARISON_OPS: tuple[BinaryOp, ...] = (
    BinaryOp.NE,
    BinaryOp.LE,
    BinaryOp.GE,
    BinaryOp.EQ,
    BinaryOp.LT,
    BinaryOp.GT,
)


class LiteralExpr(BaseModel):
    """A constant value: TRUE/FALSE, a number, or a string."""

    kind: Literal["literal"] = "literal"
    value: bool | int | float | str


class VariableRef(BaseModel):
    """Reference to a variable by name.

    Also the fallback for any text the expression parser cannot break
    down further, in which case *name* holds that text verbatim.
    """

    kind: Literal["variable"] = "variable"
    name: str


class BinaryExpr(BaseModel):
    kind: Literal["binary"] = "binary"
    operator: BinaryOp
    left: Expression
    right: Expression


class UnaryExpr(BaseModel):
    kind: Literal["unary"] = "unary"
    operator: UnaryOp
    operand: Expression


class CallExpr(BaseModel):
    """Function or function-block call.

    Named arguments (``IN := x``) keep only their value expression.
    """

    kind: Literal["call"] = "call"
    name: str
    arguments: list[Expression] = []


Expression = Annotated[
    Union[
        LiteralExpr,
        VariableRef,
        BinaryExpr,
        UnaryExpr,
        CallExpr,
    ],
    Field(discriminator="kind"),
]

# Rebuild models with recursive Expression references.
BinaryExpr.model_rebuild()
UnaryExpr.model_rebuild()
CallExpr.model_rebuild()
