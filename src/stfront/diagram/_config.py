"""Settings for parser-driven diagram synthesis."""

from __future__ import annotations

from pydantic import BaseModel


class DiagramConfig(BaseModel):
    """Layout constants and behaviour switches for ``DiagramSynthesizer``.

    Input contacts sit in the ``input_x`` column, one row per input.
    Nodes synthesized from expressions run left to right from ``logic_x``
    (``series_spacing`` apart), one rung per statement.  Coils sit in the
    ``coil_x`` column and the block's own function-block node at
    ``block_x``.
    """

    input_x: float = 100
    logic_x: float = 300
    coil_x: float = 800
    block_x: float = 1000
    start_y: float = 100
    row_spacing: float = 100
    series_spacing: float = 150

    walk_else_branches: bool = False
    """Also synthesize nodes for IF ``else_branch`` statements."""

    fallback_to_patterns: bool = False
    """Use the raw-text pattern strategy when the source does not parse."""
