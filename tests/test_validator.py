"""Tests for the line validator."""

import textwrap
from dataclasses import fields

import pytest
from conftest import MOTOR_PROGRAM

from stfront.language import STANDARD_FUNCTION_BLOCKS
from stfront.model.diagnostics import Diagnostic, Severity
from stfront.validate import STValidator, validate
from stfront.validate._validator import _OpenBlock


def check(source: str, **kwargs) -> list[Diagnostic]:
    return STValidator(**kwargs).validate(textwrap.dedent(source))


def messages(diagnostics: list[Diagnostic]) -> list[str]:
    return [d.message for d in diagnostics]


def errors(diagnostics: list[Diagnostic]) -> list[Diagnostic]:
    return [d for d in diagnostics if d.severity == Severity.ERROR]


# ---------------------------------------------------------------------------
# Clean input
# ---------------------------------------------------------------------------

class TestClean:
    def test_motor_program(self):
        assert validate(MOTOR_PROGRAM) == []

    def test_empty(self):
        assert validate("") == []

    def test_nested_constructs(self):
        assert check("""\
            FUNCTION_BLOCK Conveyor
            VAR_INPUT
                Run : BOOL;
            END_VAR
            VAR_OUTPUT
                Motor : BOOL;
            END_VAR
            VAR
                i : INT;
                Count : INT;
                Delay : TON;
            END_VAR
            IF Run THEN
                FOR i := 1 TO 10 DO
                    Count := Count + 1;
                END_FOR;
            ELSE
                WHILE Count > 0 DO
                    Count := Count - 1;
                END_WHILE;
            END_IF;
            REPEAT
                Count := Count + 1;
            UNTIL Count > 5
            END_REPEAT;
            Delay(IN := Run, PT := T#5s, Q => Motor);
            Motor := Run;
            END_FUNCTION_BLOCK
        """, extra_types=["TON"]) == []

    def test_case_labels(self):
        assert check("""\
            PROGRAM P
            VAR
                State : INT;
                Motor : BOOL;
            END_VAR
            CASE State OF
                1: Motor := TRUE;
                2, 3: Motor := FALSE;
            END_CASE;
            END_PROGRAM
        """) == []

    def test_single_line_if(self):
        assert check("""\
            PROGRAM P
            IF A THEN B := 1; END_IF;
            END_PROGRAM
        """) == []

    def test_comments_ignored(self):
        assert check("""\
            PROGRAM P // main program
            (* block
               comment := broken( *)
            A := 1; // trailing
            END_PROGRAM
        """) == []


# ---------------------------------------------------------------------------
# Block matching
# ---------------------------------------------------------------------------

class TestBlockMatching:
    def test_unclosed_if_reported_at_opener(self):
        result = check("""\
            PROGRAM P
            IF A THEN
                B := 1;
            END_PROGRAM
        """)
        assert any(d.line == 2 and d.severity == Severity.ERROR for d in result)
        assert "Unclosed IF block" in messages(result)

    def test_unclosed_program(self):
        result = check("PROGRAM P\nA := 1;")
        assert result == [
            Diagnostic(line=1, column=0, message="Unclosed PROGRAM block", severity=Severity.ERROR),
        ]

    def test_mismatched_terminator(self):
        result = check("""\
            PROGRAM P
            IF A THEN
            END_WHILE;
            END_IF;
            END_PROGRAM
        """)
        assert result == [
            Diagnostic(
                line=3,
                column=0,
                message="Expected END_IF but found END_WHILE",
                severity=Severity.ERROR,
            ),
        ]

    def test_unexpected_end(self):
        assert check("END_IF;") == [
            Diagnostic(line=1, column=0, message="Unexpected END_IF", severity=Severity.ERROR),
        ]

    def test_terminator_with_semicolon(self):
        assert check("PROGRAM P\nIF A THEN\nEND_IF;\nEND_PROGRAM") == []

    def test_unclosed_var_section(self):
        result = check("PROGRAM P\nVAR\nA : BOOL;\n")
        assert "Unclosed VAR block" in messages(result)

    def test_open_block_record(self):
        assert [f.name for f in fields(_OpenBlock)] == ["kind", "line"]
        opened = _OpenBlock("IF", 3)
        assert opened == _OpenBlock(kind="IF", line=3)
        assert not hasattr(opened, "__dict__")


# ---------------------------------------------------------------------------
# Semicolons
# ---------------------------------------------------------------------------

class TestSemicolons:
    def test_missing_after_assignment(self):
        result = check("""\
            PROGRAM P
                A := TRUE
            END_PROGRAM
        """)
        assert result == [
            Diagnostic(line=2, column=14, message="Missing semicolon", severity=Severity.WARNING),
        ]

    def test_missing_after_call(self):
        result = check("PROGRAM P\nReset()\nEND_PROGRAM")
        assert messages(result) == ["Missing semicolon"]

    def test_missing_after_return(self):
        result = check("FUNCTION F : INT\nRETURN\nEND_FUNCTION")
        assert messages(result) == ["Missing semicolon"]

    def test_declaration_without_semicolon_not_flagged(self):
        result = check("PROGRAM P\nVAR\n T1 : TON;\n X : BOOL\nEND_VAR\nEND_PROGRAM")
        assert messages(result) == ["Unknown type: TON"]
        assert result[0].line == 3

    def test_declaration_with_initial_value_needs_semicolon(self):
        result = check("PROGRAM P\nVAR\n    Count : INT := 5\nEND_VAR\nEND_PROGRAM")
        assert messages(result) == ["Missing semicolon"]

    def test_block_keyword_lines_exempt(self):
        assert check("PROGRAM P\nWHILE A DO\nEND_WHILE\nEND_PROGRAM") == []


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------

class TestDeclarations:
    def test_name_starting_with_digit(self):
        result = check("PROGRAM P\nVAR\n    1A : BOOL;\nEND_VAR\nEND_PROGRAM")
        assert result == [
            Diagnostic(
                line=3,
                column=5,
                message="Variable name cannot start with a number",
                severity=Severity.ERROR,
            ),
        ]

    def test_unknown_type(self):
        result = check("PROGRAM P\nVAR\nX : FOO;\nEND_VAR\nEND_PROGRAM")
        assert result == [
            Diagnostic(line=3, column=5, message="Unknown type: FOO", severity=Severity.WARNING),
        ]

    def test_extra_types_accepted(self):
        assert check("PROGRAM P\nVAR\nX : FOO;\nEND_VAR\nEND_PROGRAM", extra_types=["foo"]) == []

    @pytest.mark.parametrize("decl", [
        "x : bool;",
        "Arr : ARRAY[1..5] OF INT;",
        "Count : INT := 5;",
    ])
    def test_known_types(self, decl):
        assert check(f"PROGRAM P\nVAR\n{decl}\nEND_VAR\nEND_PROGRAM") == []

    @pytest.mark.parametrize("decl", ["T1 : TON;", "C1 : CTU;", "Edge : R_TRIG;"])
    def test_standard_blocks_warn_by_default(self, decl):
        result = check(f"PROGRAM P\nVAR\n{decl}\nEND_VAR\nEND_PROGRAM")
        assert len(result) == 1
        assert result[0].message.startswith("Unknown type: ")
        assert result[0].severity == Severity.WARNING

    def test_standard_blocks_opt_in(self):
        source = "PROGRAM P\nVAR\nT1 : TON;\nEdge : R_TRIG;\nEND_VAR\nEND_PROGRAM"
        assert check(source, extra_types=STANDARD_FUNCTION_BLOCKS) == []

    def test_declaration_check_only_inside_var(self):
        # A CASE label outside VAR is not a declaration
        assert check("PROGRAM P\nCASE S OF\n1 : A := 1;\nEND_CASE;\nEND_PROGRAM") == []


# ---------------------------------------------------------------------------
# Assignments
# ---------------------------------------------------------------------------

class TestAssignment:
    def test_double_assignment(self):
        result = check("PROGRAM P\nA := B := C;\nEND_PROGRAM")
        assert messages(result) == ["Invalid assignment syntax"]
        assert result[0].severity == Severity.ERROR

    def test_invalid_target(self):
        result = check("PROGRAM P\nA + B := C;\nEND_PROGRAM")
        assert result == [
            Diagnostic(
                line=2,
                column=1,
                message="Invalid left-hand side of assignment",
                severity=Severity.ERROR,
            ),
        ]

    def test_structured_targets_valid(self):
        assert check("PROGRAM P\nMotor.Run := A;\nOut[1] := B;\nEND_PROGRAM") == []

    def test_unbalanced_right_side(self):
        result = check("PROGRAM P\nA := (B AND C;\nEND_PROGRAM")
        assert messages(result) == ["Unbalanced parentheses"]

    def test_named_parameters_are_not_assignments(self):
        assert check("PROGRAM P\nX := LIMIT(MN := 0, IN := V, MX := 10);\nEND_PROGRAM") == []

    def test_for_header_exempt(self):
        assert check("PROGRAM P\nFOR i := 0 TO 9 DO\nEND_FOR;\nEND_PROGRAM") == []

    def test_one_line_can_yield_several_findings(self):
        result = check("PROGRAM P\nA + B := (C\nEND_PROGRAM")
        assert messages(result) == [
            "Missing semicolon",
            "Invalid left-hand side of assignment",
            "Unbalanced parentheses",
        ]


# ---------------------------------------------------------------------------
# Calls
# ---------------------------------------------------------------------------

class TestCalls:
    def test_positional_parameters(self):
        result = check("PROGRAM P\nTimer1(Start, T#5s);\nEND_PROGRAM")
        assert result == [
            Diagnostic(
                line=2,
                column=8,
                message="Parameter 1 should use named parameter syntax (name := value)",
                severity=Severity.INFO,
            ),
            Diagnostic(
                line=2,
                column=15,
                message="Parameter 2 should use named parameter syntax (name := value)",
                severity=Severity.INFO,
            ),
        ]

    def test_named_and_output_parameters(self):
        assert check("PROGRAM P\nTimer1(IN := Start, Q => Done);\nEND_PROGRAM") == []

    def test_nested_call_argument_counts_once(self):
        result = check("PROGRAM P\nFB1(IN := MAX(a, b), EN := TRUE);\nEND_PROGRAM")
        assert result == []

    def test_empty_call(self):
        assert check("PROGRAM P\nReset();\nEND_PROGRAM") == []

    def test_unbalanced_call(self):
        result = check("PROGRAM P\nFoo(a := 1;\nEND_PROGRAM")
        assert result == [
            Diagnostic(
                line=2,
                column=4,
                message="Unbalanced parentheses in function call",
                severity=Severity.ERROR,
            ),
        ]

    def test_keyword_with_paren_not_a_call(self):
        assert check("PROGRAM P\nIF(A) THEN\nEND_IF;\nEND_PROGRAM") == []


# ---------------------------------------------------------------------------
# Totality
# ---------------------------------------------------------------------------

class TestTotality:
    @pytest.mark.parametrize("source", [
        "",
        "\x00\x01\xff�",
        "(((((",
        ")))))",
        "END_IF END_IF END_IF",
        ":=" * 1000,
        "(" * 50000,
        "x" * 100000,
        "(* never closed",
        "'never closed",
        "IF" + " THEN" * 1000,
        "\n" * 10000,
    ])
    def test_never_raises(self, source):
        result = validate(source)
        assert isinstance(result, list)
        assert all(isinstance(d, Diagnostic) for d in result)

    def test_soundness_on_balanced_nesting(self):
        depth = 50
        source = "PROGRAM P\n" + "IF A THEN\n" * depth + "END_IF;\n" * depth + "END_PROGRAM\n"
        assert errors(validate(source)) == []

    def test_completeness_on_missing_terminator(self):
        source = "PROGRAM P\n" + "IF A THEN\n" * 3 + "END_IF;\n" * 2 + "END_PROGRAM\n"
        result = errors(validate(source))
        assert any(d.line == 2 for d in result)
