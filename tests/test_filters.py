# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for ugcguard.filters: control characters, SQL patterns, whitespace."""

from ugcguard.filters import (
    normalize_paragraphs,
    normalize_whitespace,
    remove_control_characters,
    remove_sql_patterns,
)


class TestRemoveControlCharacters:
    def test_strips_c0_and_del(self):
        assert remove_control_characters("a\x00b\x08c\x0bd\x0ce\x1ff\x7fg") == "abcdefg"

    def test_keeps_tab_newline_cr(self):
        assert remove_control_characters("a\tb\nc\rd") == "a\tb\nc\rd"

    def test_records_issue(self, issues):
        remove_control_characters("x\x00", issues)
        assert issues == ["Removed control characters"]


class TestRemoveSqlPatterns:
    def test_drop_table(self, issues):
        out = remove_sql_patterns("'; DROP TABLE users; --", issues)
        assert out == "  TABLE users "
        assert issues == ["Removed potential SQL injection patterns"]

    def test_keywords_whole_word_only(self, issues):
        assert remove_sql_patterns("selection updated", issues) == "selection updated"
        assert issues == []

    def test_keywords_case_insensitive(self, issues):
        assert remove_sql_patterns("please Select me", issues) == "please  me"

    def test_comment_markers(self, issues):
        assert remove_sql_patterns("a/*b*/c#d", issues) == "abcd"

    def test_punctuation_is_stripped(self, issues):
        # Heuristic is deliberately over-aggressive on prose
        assert remove_sql_patterns("don't pay 50%", issues) == "dont pay 50"

    def test_pipe_and_semicolon(self, issues):
        assert remove_sql_patterns("a|b;c", issues) == "abc"

    def test_single_issue_for_many_matches(self, issues):
        remove_sql_patterns("SELECT * FROM t; DELETE", issues)
        assert issues == ["Removed potential SQL injection patterns"]


class TestNormalizeWhitespace:
    def test_collapses_and_trims(self):
        assert normalize_whitespace("  a \t\n b   c  ") == "a b c"

    def test_issue_only_when_changed(self, issues):
        normalize_whitespace("a b", issues)
        assert issues == []
        normalize_whitespace("a  b", issues)
        assert issues == ["Normalized whitespace"]


class TestNormalizeParagraphs:
    def test_keeps_single_and_double_newlines(self):
        assert normalize_paragraphs("a\nb\n\nc") == "a\nb\n\nc"

    def test_caps_newlines_at_two(self):
        assert normalize_paragraphs("a\n\n\n\n\nb") == "a\n\nb"

    def test_collapses_spaces_and_tabs(self):
        assert normalize_paragraphs("a  \t b") == "a b"
