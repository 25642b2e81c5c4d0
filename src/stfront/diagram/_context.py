"""Per-run graph under construction, shared by both synthesis strategies."""

from __future__ import annotations

from dataclasses import dataclass, field

from stfront.model.block import Block
from stfront.model.diagram import (
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


@dataclass
class SynthesisContext:
    """Mutable state carried through one synthesis run.

    Node and edge ids (``node-N`` / ``edge-N``) count from 1 for every
    new context.  The block, lookup maps and layout cursor are only used
    by the parser-driven strategy.
    """

    nodes: list[Node] = field(default_factory=list)
    edges: list[Edge] = field(default_factory=list)

    block: Block | None = None
    """The block being synthesized"""

    inputs: dict[str, ContactNode] = field(default_factory=dict)
    """input variable name -> its contact"""

    coils: dict[str, CoilNode] = field(default_factory=dict)
    """assigned variable name -> its coil"""

    rung: int = 0
    column: int = 0
    depth: int = 0
    """Current statement / expression nesting while walking the tree"""

    _node_counter: int = 0
    _edge_counter: int = 0

    def next_node_id(self) -> str:
        self._node_counter += 1
        return f"node-{self._node_counter}"

    def next_edge_id(self) -> str:
        self._edge_counter += 1
        return f"edge-{self._edge_counter}"

    def diagram(self) -> Diagram:
        return Diagram(nodes=self.nodes, edges=self.edges)

    # -- Node factories -----------------------------------------------------

    def add_contact(
        self,
        label: str,
        x: float,
        y: float,
        *,
        normally_closed: bool = False,
        state: bool = False,
    ) -> ContactNode:
        node = ContactNode(
            id=self.next_node_id(),
            position=Position(x=x, y=y),
            data=ContactData(label=label, state=state, normally_closed=normally_closed),
        )
        self.nodes.append(node)
        return node

    def add_coil(self, label: str, x: float, y: float) -> CoilNode:
        node = CoilNode(
            id=self.next_node_id(),
            position=Position(x=x, y=y),
            data=CoilData(label=label, state=False, normally_open=True),
        )
        self.nodes.append(node)
        return node

    def add_function_block(
        self,
        label: str,
        x: float,
        y: float,
        inputs: list[str],
        outputs: list[str],
        vendor: str | None = None,
    ) -> FunctionBlockNode:
        node = FunctionBlockNode(
            id=self.next_node_id(),
            position=Position(x=x, y=y),
            data=FunctionBlockData(label=label, inputs=inputs, outputs=outputs, vendor=vendor),
        )
        self.nodes.append(node)
        return node

    def add_timer(self, label: str, x: float, y: float, preset: int, timer_type: str) -> TimerNode:
        node = TimerNode(
            id=self.next_node_id(),
            position=Position(x=x, y=y),
            data=TimerData(label=label, preset=preset, accumulated=0, type=timer_type),
        )
        self.nodes.append(node)
        return node

    # -- Edges --------------------------------------------------------------

    def connect(self, source: Node, target: Node) -> Edge:
        """Wire *source*'s right handle to *target*'s left handle."""
        edge = Edge(
            id=self.next_edge_id(),
            source=source.id,
            target=target.id,
            source_handle="right",
            target_handle="left",
        )
        self.edges.append(edge)
        return edge
