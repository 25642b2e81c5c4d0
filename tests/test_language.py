"""Tests for the ST vocabulary tables and editor completions."""

import pytest

from stfront.language import (
    DATA_TYPES,
    KEYWORDS,
    SNIPPETS,
    STANDARD_FUNCTION_BLOCKS,
    TIMER_TYPES,
    completions,
    is_known_type,
)


class TestKnownTypes:
    @pytest.mark.parametrize("name", ["BOOL", "int", "Real", "ARRAY[1..5] OF INT"])
    def test_known(self, name):
        assert is_known_type(name)

    @pytest.mark.parametrize("name", ["FOO", "MotorData", "", "TON", "ctu", "R_TRIG"])
    def test_unknown(self, name):
        assert not is_known_type(name)

    def test_timers_are_standard_blocks(self):
        assert TIMER_TYPES <= STANDARD_FUNCTION_BLOCKS

    def test_elementary_types_are_keywords(self):
        assert set(DATA_TYPES) <= KEYWORDS


class TestCompletions:
    def test_snippets_before_keywords(self):
        labels = [s.label for s in completions("F")]
        assert labels == ["FUNCTION", "FUNCTION_BLOCK", "FOR", "F_TRIG", "FALSE"]

    def test_case_insensitive(self):
        assert [s.label for s in completions("end_i")] == ["END_IF"]

    def test_keyword_entry(self):
        (entry,) = completions("END_WHILE")
        assert entry.insert_text == "END_WHILE"
        assert entry.documentation == "Keyword"

    def test_no_match(self):
        assert completions("ZZZ") == []

    def test_snippet_tab_stops(self):
        ton = next(s for s in SNIPPETS if s.label == "TON")
        assert ton.insert_text == "TON(IN := ${1:Start}, PT := T#${2:5s})"
