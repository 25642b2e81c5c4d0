"""Node/edge graph consumed by the ladder / function block diagram view.

Node ``type`` values form a closed set the renderer must recognise:
``contact``, ``coil``, ``timer`` and ``functionBlock``.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class Position(BaseModel):
    x: float
    y: float


# ---------------------------------------------------------------------------
# Node payloads
# ---------------------------------------------------------------------------

class ContactData(BaseModel):
    label: str
    state: bool = False
    normally_closed: bool | None = None


class CoilData(BaseModel):
    label: str
    state: bool = False
    normally_open: bool | None = None


class FunctionBlockData(BaseModel):
    label: str
    inputs: list[str] = []
    outputs: list[str] = []
    vendor: str | None = None


class TimerData(BaseModel):
    label: str
    preset: int
    accumulated: int = 0
    type: str | None = None


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------

class ContactNode(BaseModel):
    type: Literal["contact"] = "contact"
    id: str
    position: Position
    data: ContactData


class CoilNode(BaseModel):
    type: Literal["coil"] = "coil"
    id: str
    position: Position
    data: CoilData


class TimerNode(BaseModel):
    type: Literal["timer"] = "timer"
    id: str
    position: Position
    data: TimerData


class FunctionBlockNode(BaseModel):
    type: Literal["functionBlock"] = "functionBlock"
    id: str
    position: Position
    data: FunctionBlockData


Node = Annotated[
    Union[ContactNode, CoilNode, TimerNode, FunctionBlockNode],
    Field(discriminator="type"),
]


class Edge(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    source: str
    target: str
    source_handle: str | None = Field(default=None, alias="sourceHandle")
    target_handle: str | None = Field(default=None, alias="targetHandle")
    type: str | None = "smoothstep"


class Diagram(BaseModel):
    """A complete synthesized graph. Regenerated wholesale, never patched."""

    nodes: list[Node] = []
    edges: list[Edge] = []

    def node(self, node_id: str) -> Node | None:
        for n in self.nodes:
            if n.id == node_id:
                return n
        return None

    def nodes_labelled(self, label: str) -> list[Node]:
        return [n for n in self.nodes if n.data.label == label]

    def to_reactflow(self) -> dict[str, Any]:
        """Plain-dict form for the graph renderer (camelCase handle keys)."""
        return self.model_dump(by_alias=True, exclude_none=True)
