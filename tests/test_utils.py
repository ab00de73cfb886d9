"""Tests for cwd_history._utils (width measurement, highlighting, truncation)."""

from __future__ import annotations

import re

from cwd_history._utils import (
    compile_query,
    highlight_spans,
    single_line,
    strip_ansi,
    truncate_highlighted,
    truncate_to_width,
    visible_width,
)

ON = "\x1b[7m"
OFF = "\x1b[27m"


class TestVisibleWidth:
    def test_plain(self):
        assert visible_width("hello") == 5

    def test_escapes_ignored(self):
        assert visible_width(f"{ON}hi{OFF}") == 2
        assert visible_width("\x1b[38;2;1;2;3mred\x1b[39m") == 3

    def test_wide_chars(self):
        assert visible_width("日本") == 4

    def test_strip_ansi(self):
        assert strip_ansi(f"a{ON}b{OFF}c") == "abc"


class TestSingleLine:
    def test_newlines_and_tabs_become_spaces(self):
        assert single_line("a\nb\tc") == "a b c"

    def test_carriage_returns_dropped(self):
        assert single_line("a\r\nb") == "a b"

    def test_other_controls_dropped(self):
        assert single_line("bell\x07 esc\x1b[1m del\x7f") == "bell esc[1m del"

    def test_plain_text_unchanged(self):
        assert single_line("日本 text") == "日本 text"


class TestCompileQuery:
    def test_empty(self):
        assert compile_query("") is None

    def test_invalid(self):
        assert compile_query("(") is None
        assert compile_query("*abc") is None

    def test_case_insensitive(self):
        pattern = compile_query("abc")
        assert pattern.search("xxABCxx")


class TestHighlightSpans:
    def test_no_pattern(self):
        assert highlight_spans("text", None) == [("text", False)]
        assert highlight_spans("", None) == []

    def test_splits_matches(self):
        assert highlight_spans("a-b-a", re.compile("a")) == [
            ("a", True),
            ("-b-", False),
            ("a", True),
        ]

    def test_zero_width_matches_skipped(self):
        assert highlight_spans("abc", re.compile("x*")) == [("abc", False)]


class TestTruncate:
    def test_fits_unchanged(self):
        assert truncate_to_width("short", 10) == "short"

    def test_exact_fit_unchanged(self):
        assert truncate_to_width("12345", 5) == "12345"

    def test_truncated_with_ellipsis(self):
        assert truncate_to_width("abcdefghij", 6) == "abc..."

    def test_ellipsis_cropped_when_tiny(self):
        assert truncate_to_width("abcdefghij", 2) == ".."

    def test_non_positive_width(self):
        assert truncate_to_width("abc", 0) == ""
        assert truncate_to_width("abc", -3) == ""

    def test_wide_chars_not_split(self):
        result = truncate_to_width("日本語テキスト", 8)
        assert result == "日本..."
        assert visible_width(result) <= 8

    def test_highlight_survives_truncation(self):
        result = truncate_highlighted("abcabcabc", re.compile("b"), 6)
        assert result == f"a{ON}b{OFF}c..."
        assert visible_width(result) == 6

    def test_match_cut_at_boundary(self):
        result = truncate_highlighted("xxmatchxx", re.compile("match"), 7)
        assert strip_ansi(result) == "xxma..."
        assert f"{ON}ma{OFF}" in result

    def test_custom_ellipsis(self):
        assert truncate_to_width("abcdefghij", 5, ellipsis="~") == "abcd~"
