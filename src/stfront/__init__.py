"""stfront: IEC 61131-3 Structured Text front end.

Users import the pipeline operations from this flat namespace::

    from stfront import parse, validate, generate_diagram_from_st

    block = parse(source)                  # Block or None
    diagnostics = validate(source)         # list[Diagnostic]
    diagram = generate_diagram_from_st(source)
"""

from .diagram import (
    DiagramConfig,
    generate_diagram_from_patterns,
    generate_diagram_from_st,
    generate_ladder_diagram,
)
from .export import to_structured_text
from .parser import parse, parse_expression
from .validate import validate

__all__ = [
    "DiagramConfig",
    "generate_diagram_from_patterns",
    "generate_diagram_from_st",
    "generate_ladder_diagram",
    "parse",
    "parse_expression",
    "to_structured_text",
    "validate",
]
