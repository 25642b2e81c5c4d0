"""Raw-text diagram strategy.

Scans source text for a few recognisable shapes without running the
structural parser: two canned programs (safety monitor, conveyor
motor), timer calls, AND/OR assignments and function-block calls.
The result is laid out on a fixed three-column grid.
"""

from __future__ import annotations

import logging
import re

from stfront.language import KEYWORDS, WORD_OPERATORS
from stfront.model.diagram import Diagram, Node, Position
from stfront.source import normalize_lines

from ._context import SynthesisContext

logger = logging.getLogger(__name__)

_TIMER_CALL_RE = re.compile(r"(\w+)\s*\(\s*IN\s*:=\s*(\w+),\s*PT\s*:=\s*T#(\d+)(ms|s|m|h)")
_ASSIGN_RE = re.compile(r"(\w+)\s*:=\s*(.+)$")
_AND_OR_SPLIT_RE = re.compile(r"\s+(AND|OR)\s+")
_FB_CALL_RE = re.compile(r"(\w+)\s*\((.+)\)")
_NOT_WORD_RE = re.compile(r"\bNOT\b")

_DURATION_RE = re.compile(r"^(?:T|TIME)#((?:\d+(?:ms|h|m|s))+)$", re.IGNORECASE)
_DURATION_PART_RE = re.compile(r"(\d+)(ms|h|m|s)", re.IGNORECASE)

_UNIT_MS = {"ms": 1, "s": 1000, "m": 60 * 1000, "h": 60 * 60 * 1000}


# ---------------------------------------------------------------------------
# Durations
# ---------------------------------------------------------------------------

def convert_to_ms(value: int, unit: str) -> int:
    """Scale *value* in *unit* (``ms``, ``s``, ``m``, ``h``) to milliseconds.

    Unknown units leave *value* unchanged.
    """
    return value * _UNIT_MS.get(unit.lower(), 1)


def duration_to_ms(text: str) -> int | None:
    """Milliseconds in a ``T#`` / ``TIME#`` literal such as ``T#1m30s``.

    Returns None when *text* is not a duration literal, or when a part has
    more digits than the interpreter converts to ``int``.
    """
    m = _DURATION_RE.match(text.strip())
    if m is None:
        return None
    try:
        return sum(
            convert_to_ms(int(value), unit)
            for value, unit in _DURATION_PART_RE.findall(m.group(1))
        )
    except ValueError:
        return None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def generate_diagram_from_patterns(source: str) -> Diagram:
    """Build a diagram from recognisable text patterns in *source*."""
    ctx = SynthesisContext()
    lowered = source.lower()

    if "systemsafe" in lowered and "emergencystop" in lowered:
        _safety_monitor(ctx)
        return ctx.diagram()

    if "conveyormotor" in lowered:
        _conveyor_motor(ctx)
        return ctx.diagram()

    current_y = 100
    for text in normalize_lines(source):
        if not text:
            continue

        timer = _TIMER_CALL_RE.search(text)
        if timer:
            name, _, time, unit = timer.groups()
            preset = duration_to_ms(f"T#{time}{unit}") or 0
            ctx.add_timer(name, 400, current_y, preset, "TON")
            current_y += 120

        assign = _ASSIGN_RE.search(text)
        if assign:
            output, expression = assign.group(1), assign.group(2).rstrip(";").strip()
            if _AND_OR_SPLIT_RE.search(expression):
                _series_rung(ctx, output, expression, current_y)
                current_y += 100

        call = _FB_CALL_RE.search(text)
        if call and not timer:
            name = call.group(1)
            if name.upper() not in KEYWORDS and name.upper() not in WORD_OPERATORS:
                ctx.add_function_block(
                    name, 300, current_y,
                    inputs=_named_inputs(call.group(2))[:3],
                    outputs=["Q", "Error"],
                    vendor="rockwell",
                )
                current_y += 150

    auto_layout(ctx.nodes)
    logger.debug(f"Pattern diagram: {len(ctx.nodes)} nodes, {len(ctx.edges)} edges")
    return ctx.diagram()


def generate_ladder_diagram(tags: list[str]) -> Diagram:
    """One contact-to-coil rung per consecutive pair of *tags*.

    A trailing unpaired tag is ignored.
    """
    ctx = SynthesisContext()
    current_y = 100
    for i in range(0, len(tags) - 1, 2):
        contact = ctx.add_contact(tags[i], 100, current_y)
        coil = ctx.add_coil(tags[i + 1], 400, current_y)
        ctx.connect(contact, coil)
        current_y += 100
    return ctx.diagram()


def auto_layout(
    nodes: list[Node],
    per_row: int = 3,
    x_spacing: float = 250,
    y_spacing: float = 150,
    start_x: float = 100,
    start_y: float = 100,
) -> None:
    """Place *nodes* on a grid, *per_row* to a row, in list order."""
    for index, node in enumerate(nodes):
        row, col = divmod(index, per_row)
        node.position = Position(x=start_x + col * x_spacing, y=start_y + row * y_spacing)


# ---------------------------------------------------------------------------
# Canned programs
# ---------------------------------------------------------------------------

def _safety_monitor(ctx: SynthesisContext) -> None:
    estop = ctx.add_contact("EmergencyStop", 100, 100, normally_closed=True)
    curtain = ctx.add_contact("LightCurtain", 300, 100, normally_closed=True)
    relay = ctx.add_coil("SafetyRelay", 500, 100)
    ctx.connect(estop, curtain)
    ctx.connect(curtain, relay)


def _conveyor_motor(ctx: SynthesisContext) -> None:
    enable = ctx.add_contact("SystemEnable", 100, 100)
    estop = ctx.add_contact("EmergencyStop", 300, 100, normally_closed=True)
    motor = ctx.add_function_block(
        "ConveyorMotor", 500, 80,
        inputs=["Start", "Stop", "Speed"],
        outputs=["Running", "Fault"],
        vendor="rockwell",
    )
    ctx.connect(enable, estop)
    ctx.connect(estop, motor)


# ---------------------------------------------------------------------------
# Line patterns
# ---------------------------------------------------------------------------

def _series_rung(ctx: SynthesisContext, output: str, expression: str, y: float) -> None:
    """Contacts for each AND/OR operand in series, ending in a coil for *output*."""
    contacts = []
    x = 100
    # re.split keeps the captured operators at odd indices
    for part in _AND_OR_SPLIT_RE.split(expression)[::2]:
        part = part.strip()
        if not part:
            continue
        negated = _NOT_WORD_RE.search(part) is not None
        label = _NOT_WORD_RE.sub("", part, count=1).strip()
        contacts.append(ctx.add_contact(label, x, y, normally_closed=negated))
        x += 150

    coil = ctx.add_coil(output, x + 100, y)
    for left, right in zip(contacts, contacts[1:]):
        ctx.connect(left, right)
    if contacts:
        ctx.connect(contacts[-1], coil)


def _named_inputs(params: str) -> list[str]:
    """``name:value`` labels for the ``name := value`` pairs in *params*."""
    inputs = []
    for pair in params.split(","):
        name, _, value = pair.partition(":=")
        name, value = name.strip(), value.strip()
        if name and value:
            inputs.append(f"{name}:{value}")
    return inputs
