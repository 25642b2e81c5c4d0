"""Structured Text vocabulary: keywords, operators, types and editor snippets."""

from __future__ import annotations

from pydantic import BaseModel


KEYWORDS: frozenset[str] = frozenset({
    "PROGRAM", "END_PROGRAM", "FUNCTION", "END_FUNCTION",
    "FUNCTION_BLOCK", "END_FUNCTION_BLOCK",
    "VAR", "VAR_INPUT", "VAR_OUTPUT", "VAR_IN_OUT", "VAR_GLOBAL", "END_VAR",
    "IF", "THEN", "ELSIF", "ELSE", "END_IF", "CASE", "OF", "END_CASE",
    "FOR", "TO", "BY", "DO", "END_FOR", "WHILE", "END_WHILE",
    "REPEAT", "UNTIL", "END_REPEAT",
    "RETURN", "EXIT", "CONTINUE", "TRUE", "FALSE", "NULL",
    "BOOL", "BYTE", "WORD", "DWORD", "LWORD", "SINT", "INT", "DINT", "LINT",
    "USINT", "UINT", "UDINT", "ULINT", "REAL", "LREAL", "TIME", "DATE", "STRING",
    "ARRAY", "STRUCT", "END_STRUCT", "TYPE", "END_TYPE",
    "AT", "RETAIN", "CONSTANT", "PERSISTENT",
})

OPERATORS: tuple[str, ...] = (
    ":=", "=", "<>", "<", ">", "<=", ">=",
    "+", "-", "*", "/", "MOD", "**",
    "AND", "OR", "XOR", "NOT",
)

# Word operators that look like calls when followed by "(": NOT(x), MOD(a, b)
WORD_OPERATORS: frozenset[str] = frozenset({"AND", "OR", "XOR", "NOT", "MOD"})

DATA_TYPES: tuple[str, ...] = (
    "BOOL", "BYTE", "WORD", "DWORD", "LWORD",
    "SINT", "INT", "DINT", "LINT",
    "USINT", "UINT", "UDINT", "ULINT",
    "REAL", "LREAL", "TIME", "DATE", "STRING",
)

TIMER_TYPES: frozenset[str] = frozenset({"TON", "TOF", "TP", "RTO"})

STANDARD_FUNCTION_BLOCKS: frozenset[str] = TIMER_TYPES | frozenset({
    "CTU", "CTD", "CTUD", "R_TRIG", "F_TRIG", "RS", "SR",
})

VAR_SECTION_KEYWORDS: frozenset[str] = frozenset({
    "VAR", "VAR_INPUT", "VAR_OUTPUT", "VAR_IN_OUT", "VAR_TEMP",
    "VAR_GLOBAL", "VAR_EXTERNAL", "VAR_CONFIG", "VAR_ACCESS",
})


class Snippet(BaseModel):
    """Editor code template. *insert_text* uses ``${n:placeholder}`` tab stops."""

    label: str
    insert_text: str
    documentation: str


SNIPPETS: tuple[Snippet, ...] = (
    Snippet(
        label="PROGRAM",
        insert_text="PROGRAM ${1:ProgramName}\n\t$0\nEND_PROGRAM",
        documentation="Defines a program block",
    ),
    Snippet(
        label="FUNCTION",
        insert_text="FUNCTION ${1:FunctionName} : ${2:BOOL}\n\t$0\nEND_FUNCTION",
        documentation="Defines a function",
    ),
    Snippet(
        label="FUNCTION_BLOCK",
        insert_text="FUNCTION_BLOCK ${1:FBName}\n\t$0\nEND_FUNCTION_BLOCK",
        documentation="Defines a function block",
    ),
    Snippet(
        label="VAR",
        insert_text="VAR\n\t${1:variable} : ${2:BOOL};\n\t$0\nEND_VAR",
        documentation="Variable declaration block",
    ),
    Snippet(
        label="IF",
        insert_text="IF ${1:condition} THEN\n\t$0\nEND_IF;",
        documentation="IF statement",
    ),
    Snippet(
        label="FOR",
        insert_text="FOR ${1:i} := ${2:0} TO ${3:10} DO\n\t$0\nEND_FOR;",
        documentation="FOR loop",
    ),
    Snippet(
        label="WHILE",
        insert_text="WHILE ${1:condition} DO\n\t$0\nEND_WHILE;",
        documentation="WHILE loop",
    ),
    Snippet(
        label="TON",
        insert_text="TON(IN := ${1:Start}, PT := T#${2:5s})",
        documentation="On-delay timer",
    ),
    Snippet(
        label="TOF",
        insert_text="TOF(IN := ${1:Start}, PT := T#${2:5s})",
        documentation="Off-delay timer",
    ),
    Snippet(
        label="CTU",
        insert_text="CTU(CU := ${1:CountUp}, R := ${2:Reset}, PV := ${3:100})",
        documentation="Count up counter",
    ),
    Snippet(
        label="CTD",
        insert_text="CTD(CD := ${1:CountDown}, LD := ${2:Load}, PV := ${3:100})",
        documentation="Count down counter",
    ),
    Snippet(
        label="R_TRIG",
        insert_text="R_TRIG(CLK := ${1:Signal})",
        documentation="Rising edge detection",
    ),
    Snippet(
        label="F_TRIG",
        insert_text="F_TRIG(CLK := ${1:Signal})",
        documentation="Falling edge detection",
    ),
)


def is_known_type(type_name: str) -> bool:
    """True for elementary types and ARRAY/STRUCT declarations.

    Function-block types, standard ones included, are not known here;
    callers that accept them pass them in explicitly.
    """
    upper = type_name.upper()
    return upper in DATA_TYPES or upper.startswith(("ARRAY", "STRUCT"))


def completions(prefix: str) -> list[Snippet]:
    """Snippets, then bare keywords, whose label starts with *prefix*.

    Matching is case-insensitive. Keywords that already have a snippet
    are not repeated.
    """
    upper = prefix.upper()
    result = [s for s in SNIPPETS if s.label.startswith(upper)]
    seen = {s.label for s in result}
    for kw in sorted(KEYWORDS):
        if kw.startswith(upper) and kw not in seen:
            result.append(Snippet(label=kw, insert_text=kw, documentation="Keyword"))
    return result
