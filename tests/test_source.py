"""Tests for line normalization and parenthesis scanning (stfront.source)."""

from stfront.source import (
    LineCursor,
    SourceLine,
    find_top_level,
    matching_paren,
    normalize_lines,
    split_source,
    split_top_level,
)


# ---------------------------------------------------------------------------
# Line normalization
# ---------------------------------------------------------------------------

class TestSplitSource:
    def test_trims_and_numbers_lines(self):
        lines = split_source("  A := 1;\nB := 2;  ")
        assert lines == [
            SourceLine(number=1, text="A := 1;", indent=2),
            SourceLine(number=2, text="B := 2;", indent=0),
        ]

    def test_line_comment_removed(self):
        assert normalize_lines("A := 1; // set A") == ["A := 1;"]

    def test_comment_only_line_is_blank(self):
        assert normalize_lines("// header\nA := 1;") == ["", "A := 1;"]

    def test_block_comment_on_one_line(self):
        assert normalize_lines("A (* note *) := 1;") == ["A" + " " * 12 + ":= 1;"]

    def test_block_comment_spanning_lines(self):
        lines = split_source("(* first\nsecond\nthird *) A := 1;\nB := 2;")
        assert [line.text for line in lines] == ["", "", "A := 1;", "B := 2;"]
        # Physical line numbers survive
        assert lines[2].number == 3

    def test_columns_survive_block_comment(self):
        line = split_source("(* c\ny *) b := 2;")[1]
        assert line.text == "b := 2;"
        assert line.column(0) == 6

    def test_comment_markers_inside_strings_kept(self):
        assert normalize_lines("S := '// not a comment';") == ["S := '// not a comment';"]
        assert normalize_lines('S := "(* kept *)";') == ['S := "(* kept *)";']

    def test_crlf_line_endings(self):
        assert normalize_lines("A := 1;\r\nB := 2;\r\n") == ["A := 1;", "B := 2;", ""]

    def test_empty_source(self):
        assert split_source("") == [SourceLine(number=1, text="", indent=0)]

    def test_unterminated_block_comment_blanks_rest(self):
        assert normalize_lines("A := 1;\n(* open\nB := 2;") == ["A := 1;", "", ""]


class TestSourceLineColumn:
    def test_column_is_one_based(self):
        line = SourceLine(number=1, text="X := 1;", indent=0)
        assert line.column(0) == 1

    def test_column_accounts_for_indent(self):
        line = SourceLine(number=4, text="X := 1;", indent=4)
        assert line.column(2) == 7


# ---------------------------------------------------------------------------
# Cursor
# ---------------------------------------------------------------------------

class TestLineCursor:
    def test_advance_and_end(self):
        cursor = LineCursor(["a", "b"])
        assert cursor.advance() == "a"
        assert cursor.advance() == "b"
        assert cursor.at_end()

    def test_mark_and_reset(self):
        cursor = LineCursor(["a", "b", "c"], pos=1)
        mark = cursor.mark()
        cursor.advance()
        cursor.advance()
        cursor.reset(mark)
        assert cursor.advance() == "b"


# ---------------------------------------------------------------------------
# Parenthesis scanning
# ---------------------------------------------------------------------------

class TestParenScanning:
    def test_matching_paren(self):
        assert matching_paren("(a(b)c)", 0) == 6
        assert matching_paren("(a(b)c)", 2) == 4

    def test_matching_paren_unclosed(self):
        assert matching_paren("(a(b)", 0) == -1

    def test_find_top_level_skips_nested(self):
        assert find_top_level("f(a := 1) := 2", ":=") == 10

    def test_find_top_level_missing(self):
        assert find_top_level("f(a := 1)", ":=") == -1

    def test_find_top_level_from_start(self):
        assert find_top_level("a := b := c", ":=", 3) == 7

    def test_split_top_level_offsets(self):
        assert split_top_level("IN := a, PT := f(x, y)") == [
            (0, "IN := a"),
            (8, " PT := f(x, y)"),
        ]

    def test_split_top_level_single(self):
        assert split_top_level("a") == [(0, "a")]
