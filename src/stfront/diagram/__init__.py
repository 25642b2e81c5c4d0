"""Ladder / function block diagram synthesis.

Two strategies share the same output model:

- ``generate_diagram_from_st``: parses the source and walks the ``Block``
- ``generate_diagram_from_patterns``: scans raw text for known shapes
"""

from ._config import DiagramConfig
from ._context import SynthesisContext
from ._patterns import (
    auto_layout,
    convert_to_ms,
    duration_to_ms,
    generate_diagram_from_patterns,
    generate_ladder_diagram,
)
from ._synthesizer import DiagramSynthesizer, generate_diagram_from_st

__all__ = [
    "DiagramConfig",
    "DiagramSynthesizer",
    "SynthesisContext",
    "auto_layout",
    "convert_to_ms",
    "duration_to_ms",
    "generate_diagram_from_patterns",
    "generate_diagram_from_st",
    "generate_ladder_diagram",
]
