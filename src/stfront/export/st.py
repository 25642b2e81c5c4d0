"""Structured Text pretty-printer for parsed blocks.

Walks the pydantic ``Block`` model and emits IEC 61131-3 Structured Text
that the parser in :mod:`stfront.parser` reads back to the same tree.
"""

from __future__ import annotations

from io import StringIO

from stfront.model.block import Block, Variable, VariableKind
from stfront.model.expressions import (
    COMPARISON_OPS,
    BinaryExpr,
    BinaryOp,
    CallExpr,
    Expression,
    LiteralExpr,
    UnaryExpr,
    VariableRef,
)
from stfront.model.statements import (
    Assignment,
    CallStatement,
    ForStatement,
    IfStatement,
    ReturnStatement,
    Statement,
    WhileStatement,
)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def to_structured_text(block: Block) -> str:
    """Emit Structured Text for a parsed ``Block``."""
    if not isinstance(block, Block):
        raise TypeError(
            f"to_structured_text() expects Block, got {type(block).__name__}"
        )
    w = STWriter()
    w.write_block(block)
    return w.getvalue()


def expression_to_text(expr: Expression) -> str:
    """Render a single expression as ST source text."""
    return STWriter()._expr(expr)


# ---------------------------------------------------------------------------
# Operator precedence
# ---------------------------------------------------------------------------

# Higher binds tighter.  The parser splits AND before OR, so AND is the
# loosest operator here.
_BINOP_PRECEDENCE: dict[BinaryOp, int] = {
    BinaryOp.AND: 1,
    BinaryOp.OR: 2,
    BinaryOp.NE: 3,
    BinaryOp.LE: 3,
    BinaryOp.GE: 3,
    BinaryOp.EQ: 3,
    BinaryOp.LT: 3,
    BinaryOp.GT: 3,
}

# Section keyword per variable kind, in output order
_VAR_SECTIONS: tuple[tuple[VariableKind, str], ...] = (
    (VariableKind.INPUT, "VAR_INPUT"),
    (VariableKind.OUTPUT, "VAR_OUTPUT"),
    (VariableKind.INOUT, "VAR_IN_OUT"),
    (VariableKind.LOCAL, "VAR"),
)


# ---------------------------------------------------------------------------
# STWriter
# ---------------------------------------------------------------------------

class STWriter:
    """Walks a ``Block`` and emits Structured Text into an internal buffer."""

    def __init__(self) -> None:
        self._buf = StringIO()
        self._indent = 0
        self._indent_str = "    "

    def getvalue(self) -> str:
        return self._buf.getvalue().rstrip("\n") + "\n"

    # -- Low-level output helpers -------------------------------------------

    def _line(self, text: str = "") -> None:
        if text:
            self._buf.write(self._indent_str * self._indent + text + "\n")
        else:
            self._buf.write("\n")

    def _indent_inc(self) -> None:
        self._indent += 1

    def _indent_dec(self) -> None:
        self._indent = max(0, self._indent - 1)

    # ======================================================================
    # Block
    # ======================================================================

    def write_block(self, block: Block) -> None:
        keyword = block.type.keyword
        header = f"{keyword} {block.name}".rstrip()
        if block.return_type:
            header += f" : {block.return_type}"
        self._line(header)

        for kind, section in _VAR_SECTIONS:
            self._write_var_block(section, [v for v in block.variables if v.kind == kind])

        for stmt in block.statements:
            self._write_stmt(stmt)
        self._line(block.type.terminator)

    # ======================================================================
    # Variable declarations
    # ======================================================================

    def _write_var_block(self, keyword: str, variables: list[Variable]) -> None:
        if not variables:
            return
        self._line(keyword)
        self._indent_inc()
        for v in variables:
            self._write_var_decl(v)
        self._indent_dec()
        self._line("END_VAR")

    def _write_var_decl(self, v: Variable) -> None:
        decl = f"{v.name} : {v.type}"
        if v.initial_value is not None:
            decl += f" := {v.initial_value}"
        self._line(decl + ";")

    # ======================================================================
    # Statements
    # ======================================================================

    def _write_stmt(self, stmt: Statement) -> None:
        kind = stmt.kind
        handler = _STMT_WRITERS.get(kind)
        if handler is not None:
            handler(self, stmt)
        else:
            self._line(f"// Unsupported statement: {kind}")

    def _write_body(self, stmts: list[Statement] | None) -> None:
        self._indent_inc()
        for s in stmts or []:
            self._write_stmt(s)
        self._indent_dec()

    def _write_assignment(self, stmt: Assignment) -> None:
        self._line(f"{stmt.target} := {self._expr(stmt.expression)};")

    def _write_if(self, stmt: IfStatement) -> None:
        if stmt.condition is not None:
            self._line(f"IF {self._expr(stmt.condition)} THEN")
        else:
            self._line("IF TRUE THEN")
        self._write_body(stmt.then_branch)

        if stmt.else_branch:
            self._line("ELSE")
            self._write_body(stmt.else_branch)

        self._line("END_IF;")

    def _write_call(self, stmt: CallStatement) -> None:
        self._line(f"{self._expr(stmt.expression)};")

    def _write_for(self, stmt: ForStatement) -> None:
        self._line("FOR")
        self._write_body(stmt.body)
        self._line("END_FOR;")

    def _write_while(self, stmt: WhileStatement) -> None:
        cond = self._expr(stmt.condition) if stmt.condition is not None else "TRUE"
        self._line(f"WHILE {cond} DO")
        self._write_body(stmt.body)
        self._line("END_WHILE;")

    def _write_return(self, stmt: ReturnStatement) -> None:
        if stmt.expression is not None:
            self._line(f"RETURN {self._expr(stmt.expression)};")
        else:
            self._line("RETURN;")

    # ======================================================================
    # Expressions
    # ======================================================================

    def _expr(self, expr: Expression, parent_prec: int = 0) -> str:
        kind = expr.kind
        handler = _EXPR_WRITERS.get(kind)
        if handler is not None:
            return handler(self, expr, parent_prec)
        return f"/* unsupported: {kind} */"

    def _expr_literal(self, expr: LiteralExpr, _prec: int) -> str:
        # bool check before int (bool is subclass of int)
        if isinstance(expr.value, bool):
            return "TRUE" if expr.value else "FALSE"
        return str(expr.value)

    def _expr_variable_ref(self, expr: VariableRef, _prec: int) -> str:
        return expr.name

    def _expr_binary(self, expr: BinaryExpr, parent_prec: int) -> str:
        my_prec = _BINOP_PRECEDENCE[expr.operator]
        # Comparisons do not chain: a nested comparison on either side
        # is always parenthesized.
        left_prec = my_prec + 1 if expr.operator in COMPARISON_OPS else my_prec
        left = self._expr(expr.left, left_prec)
        if isinstance(expr.left, UnaryExpr):
            # NOT takes the rest of the text as its operand
            left = f"({left})"
        right = self._expr(expr.right, my_prec + 1)
        result = f"{left} {expr.operator.value} {right}"
        if my_prec < parent_prec:
            return f"({result})"
        return result

    def _expr_unary(self, expr: UnaryExpr, _prec: int) -> str:
        operand = self._expr(expr.operand, 10)
        return f"{expr.operator.value} {operand}"

    def _expr_call(self, expr: CallExpr, _prec: int) -> str:
        args = ", ".join(self._expr(a) for a in expr.arguments)
        return f"{expr.name}({args})"


# ---------------------------------------------------------------------------
# Dispatch tables
# ---------------------------------------------------------------------------

_STMT_WRITERS = {
    "assignment": STWriter._write_assignment,
    "if": STWriter._write_if,
    "call": STWriter._write_call,
    "for": STWriter._write_for,
    "while": STWriter._write_while,
    "return": STWriter._write_return,
}

_EXPR_WRITERS = {
    "literal": STWriter._expr_literal,
    "variable": STWriter._expr_variable_ref,
    "binary": STWriter._expr_binary,
    "unary": STWriter._expr_unary,
    "call": STWriter._expr_call,
}
