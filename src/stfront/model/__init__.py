"""Data model for the Structured Text front end.

Parsed units (``Block``), their statement and expression trees,
validator findings (``Diagnostic``) and synthesized diagrams.
"""

from .block import Block, BlockType, Variable, VariableKind
from .diagnostics import Diagnostic, Severity
from .diagram import (
    CoilData,
    CoilNode,
    ContactData,
    ContactNode,
    Diagram,
    Edge,
    FunctionBlockData,
    FunctionBlockNode,
    Node,
    Position,
    TimerData,
    TimerNode,
)
from .expressions import (
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
from .statements import (
    Assignment,
    CallStatement,
    ForStatement,
    IfStatement,
    ReturnStatement,
    Statement,
    WhileStatement,
)

__all__ = [
    "Assignment",
    "BinaryExpr",
    "BinaryOp",
    "Block",
    "BlockType",
    "COMPARISON_OPS",
    "CallExpr",
    "CallStatement",
    "CoilData",
    "CoilNode",
    "ContactData",
    "ContactNode",
    "Diagnostic",
    "Diagram",
    "Edge",
    "Expression",
    "ForStatement",
    "FunctionBlockData",
    "FunctionBlockNode",
    "IfStatement",
    "LiteralExpr",
    "Node",
    "Position",
    "ReturnStatement",
    "Severity",
    "Statement",
    "TimerData",
    "TimerNode",
    "UnaryExpr",
    "UnaryOp",
    "Variable",
    "VariableKind",
    "VariableRef",
    "WhileStatement",
]
