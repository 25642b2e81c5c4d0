"""Shared test helpers for the stfront test suite."""

import textwrap

from stfront.model.block import Block
from stfront.model.expressions import VariableRef
from stfront.parser import STParser


MOTOR_PROGRAM = """\
PROGRAM Main
VAR
    Start : BOOL;
    Stop : BOOL;
    Motor : BOOL;
END_VAR
Motor := Start AND NOT Stop;
END_PROGRAM
"""


def parse_block(source: str) -> Block | None:
    """Parse dedented ST source into a Block."""
    return STParser().parse(textwrap.dedent(source))


def parse_expr(text: str):
    """Parse a single ST expression string."""
    return STParser().parse_expression(text)


def var(name: str) -> VariableRef:
    """Shorthand for VariableRef(name=name)."""
    return VariableRef(name=name)
