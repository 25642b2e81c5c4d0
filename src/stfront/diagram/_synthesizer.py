"""Parser-driven diagram synthesis.

Turns a parsed ``Block`` into a ladder / function block diagram graph.
Nodes are created in this order:

1. a ``functionBlock`` node for the block itself (its interface)
2. one contact per input variable, in a column
3. one coil per output or local variable that is assigned anywhere
4. nodes for each statement, walked in order

Expression translation follows ladder conventions: operands of ``AND``
are wired in series, ``NOT`` turns a contact normally-closed and an
assignment wires the last node of its expression to the target's coil.
``OR`` operands get nodes but no connecting edge (parallel branches are
not modelled).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator

from stfront.export.st import expression_to_text
from stfront.language import TIMER_TYPES
from stfront.model.block import Block, VariableKind
from stfront.model.diagram import CoilNode, ContactNode, Diagram, Node
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
    IfStatement,
    Statement,
)
from stfront.parser import parse

from ._config import DiagramConfig
from ._context import SynthesisContext
from ._patterns import duration_to_ms, generate_diagram_from_patterns

logger = logging.getLogger(__name__)

_COIL_KINDS = frozenset({VariableKind.OUTPUT, VariableKind.LOCAL})

# Statements and expressions nested deeper than this are not drawn.
MAX_NESTING_DEPTH = 200


def generate_diagram_from_st(source: str, config: DiagramConfig | None = None) -> Diagram:
    """Parse *source* and synthesize its diagram.

    Source with no PROGRAM/FUNCTION/FUNCTION_BLOCK yields an empty
    diagram, or the pattern-strategy diagram when
    ``config.fallback_to_patterns`` is set.
    """
    config = config or DiagramConfig()
    block = parse(source)
    if block is None:
        if config.fallback_to_patterns:
            logger.debug("Source did not parse, falling back to text patterns")
            return generate_diagram_from_patterns(source)
        return Diagram()
    return DiagramSynthesizer(config).synthesize(block)


def _assigned_targets(stmts: list[Statement] | None, depth: int = 0) -> Iterator[str]:
    """Assignment targets in *stmts*, including both IF branches."""
    if depth >= MAX_NESTING_DEPTH:
        return
    for stmt in stmts or []:
        if isinstance(stmt, Assignment):
            yield stmt.target
        elif isinstance(stmt, IfStatement):
            yield from _assigned_targets(stmt.then_branch, depth + 1)
            yield from _assigned_targets(stmt.else_branch, depth + 1)


# ---------------------------------------------------------------------------
# DiagramSynthesizer
# ---------------------------------------------------------------------------

class DiagramSynthesizer:
    """Synthesizes a ``Diagram`` from a parsed ``Block``.

    Holds only configuration.  Every ``synthesize()`` call threads its own
    ``SynthesisContext`` through the handlers, so ids restart at
    ``node-1`` / ``edge-1`` and one instance can serve concurrent calls.
    """

    def __init__(self, config: DiagramConfig | None = None) -> None:
        self.config = config or DiagramConfig()

    def synthesize(self, block: Block) -> Diagram:
        ctx = SynthesisContext(block=block)
        self._add_block_node(ctx, block)
        self._add_input_contacts(ctx, block)
        self._add_coils(ctx, block)
        for stmt in block.statements:
            self._visit_statement(ctx, stmt)

        diagram = ctx.diagram()
        logger.debug(
            f"Synthesized {block.name}: {len(diagram.nodes)} nodes, {len(diagram.edges)} edges"
        )
        return diagram

    # -----------------------------------------------------------------------
    # Layout
    # -----------------------------------------------------------------------

    def _next_position(self, ctx: SynthesisContext) -> tuple[float, float]:
        cfg = self.config
        x = cfg.logic_x + ctx.column * cfg.series_spacing
        y = cfg.start_y + ctx.rung * cfg.row_spacing
        ctx.column += 1
        return x, y

    @staticmethod
    def _next_rung(ctx: SynthesisContext) -> None:
        ctx.rung += 1
        ctx.column = 0

    # -----------------------------------------------------------------------
    # Fixed nodes
    # -----------------------------------------------------------------------

    def _add_block_node(self, ctx: SynthesisContext, block: Block) -> None:
        outputs = [v.name for v in block.outputs]
        if block.return_type:
            outputs.append(block.name)
        ctx.add_function_block(
            block.name,
            self.config.block_x,
            self.config.start_y,
            inputs=[v.name for v in block.inputs],
            outputs=outputs,
        )

    def _add_input_contacts(self, ctx: SynthesisContext, block: Block) -> None:
        cfg = self.config
        for row, var in enumerate(block.inputs):
            ctx.inputs[var.name] = ctx.add_contact(
                var.name, cfg.input_x, cfg.start_y + row * cfg.row_spacing,
            )

    def _add_coils(self, ctx: SynthesisContext, block: Block) -> None:
        cfg = self.config
        targets = set(_assigned_targets(block.statements))
        row = 0
        for var in block.variables:
            if var.kind in _COIL_KINDS and var.name in targets and var.name not in ctx.coils:
                ctx.coils[var.name] = ctx.add_coil(
                    var.name, cfg.coil_x, cfg.start_y + row * cfg.row_spacing,
                )
                row += 1

    # -----------------------------------------------------------------------
    # Statements
    # -----------------------------------------------------------------------

    def _visit_statement(self, ctx: SynthesisContext, stmt: Statement) -> None:
        handler = self._STATEMENT_HANDLERS.get(stmt.kind)
        if handler is None:
            return
        if ctx.depth >= MAX_NESTING_DEPTH:
            logger.warning(f"Statement nested deeper than {MAX_NESTING_DEPTH} levels, not drawn")
            return
        ctx.depth += 1
        try:
            handler(self, ctx, stmt)
        finally:
            ctx.depth -= 1

    def _visit_assignment(self, ctx: SynthesisContext, stmt: Assignment) -> None:
        nodes = self._visit_expression(ctx, stmt.expression)
        coil = ctx.coils.get(stmt.target)
        if nodes and coil is not None:
            ctx.connect(nodes[-1], coil)
        self._next_rung(ctx)

    def _visit_if(self, ctx: SynthesisContext, stmt: IfStatement) -> None:
        if stmt.condition is not None:
            self._visit_expression(ctx, stmt.condition)
            self._next_rung(ctx)
        for s in stmt.then_branch or []:
            self._visit_statement(ctx, s)
        if self.config.walk_else_branches:
            for s in stmt.else_branch or []:
                self._visit_statement(ctx, s)

    def _visit_call_statement(self, ctx: SynthesisContext, stmt: CallStatement) -> None:
        x, y = self._next_position(ctx)
        call = stmt.expression
        var = ctx.block.variable(stmt.target)
        if var is not None and var.type.upper() in TIMER_TYPES:
            ctx.add_timer(stmt.target, x, y, self._timer_preset(call), var.type.upper())
        else:
            ctx.add_function_block(
                stmt.target, x, y,
                inputs=[expression_to_text(a) for a in call.arguments],
                outputs=[],
            )
        self._next_rung(ctx)

    @staticmethod
    def _timer_preset(call: CallExpr) -> int:
        for arg in call.arguments:
            if isinstance(arg, VariableRef):
                ms = duration_to_ms(arg.name)
                if ms is not None:
                    return ms
        return 0

    _STATEMENT_HANDLERS: dict[str, Callable[[DiagramSynthesizer, SynthesisContext, Statement], None]] = {
        "assignment": _visit_assignment,
        "if": _visit_if,
        "call": _visit_call_statement,
    }

    # -----------------------------------------------------------------------
    # Expressions
    # -----------------------------------------------------------------------

    def _visit_expression(self, ctx: SynthesisContext, expr: Expression) -> list[Node]:
        """Create nodes for *expr*; returns them in creation order."""
        handler = self._EXPRESSION_HANDLERS.get(expr.kind)
        if handler is None:
            return []
        if ctx.depth >= MAX_NESTING_DEPTH:
            logger.warning(f"Expression nested deeper than {MAX_NESTING_DEPTH} levels, not drawn")
            return []
        ctx.depth += 1
        try:
            return handler(self, ctx, expr)
        finally:
            ctx.depth -= 1

    def _visit_variable(self, ctx: SynthesisContext, expr: VariableRef) -> list[Node]:
        known = ctx.inputs.get(expr.name)
        if known is not None:
            return [known]
        x, y = self._next_position(ctx)
        return [ctx.add_contact(expr.name, x, y)]

    def _visit_literal(self, ctx: SynthesisContext, expr: LiteralExpr) -> list[Node]:
        if not isinstance(expr.value, bool):
            return []
        x, y = self._next_position(ctx)
        label = "TRUE" if expr.value else "FALSE"
        return [ctx.add_contact(label, x, y, state=expr.value)]

    def _visit_unary(self, ctx: SynthesisContext, expr: UnaryExpr) -> list[Node]:
        nodes = self._visit_expression(ctx, expr.operand)
        if nodes and isinstance(nodes[0], ContactNode):
            nodes[0].data.normally_closed = True
        return nodes

    def _visit_binary(self, ctx: SynthesisContext, expr: BinaryExpr) -> list[Node]:
        if expr.operator in COMPARISON_OPS:
            x, y = self._next_position(ctx)
            return [ctx.add_contact(expression_to_text(expr), x, y)]

        left = self._visit_expression(ctx, expr.left)
        right = self._visit_expression(ctx, expr.right)
        if expr.operator == BinaryOp.AND and left and right:
            ctx.connect(left[-1], right[0])
        return left + right

    def _visit_call(self, ctx: SynthesisContext, expr: CallExpr) -> list[Node]:
        x, y = self._next_position(ctx)
        return [ctx.add_function_block(
            expr.name, x, y,
            inputs=[expression_to_text(a) for a in expr.arguments],
            outputs=[],
        )]

    _EXPRESSION_HANDLERS: dict[str, Callable[[DiagramSynthesizer, SynthesisContext, Expression], list[Node]]] = {
        "variable": _visit_variable,
        "literal": _visit_literal,
        "unary": _visit_unary,
        "binary": _visit_binary,
        "call": _visit_call,
    }
