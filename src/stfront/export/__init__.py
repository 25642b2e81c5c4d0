"""stfront export: Structured Text generation from a parsed ``Block``.

Public API::

    from stfront.export import to_structured_text
    st_text = to_structured_text(block)
"""

from .st import STWriter, expression_to_text, to_structured_text

__all__ = ["STWriter", "expression_to_text", "to_structured_text"]
