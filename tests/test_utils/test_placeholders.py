"""Tests for placeholder utilities."""

import pytest

from recordsql.utils.placeholders import count_placeholders, to_format_paramstyle


class TestCountPlaceholders:
    """Tests for count_placeholders."""

    @pytest.mark.parametrize(
        "query,expected",
        [
            ("SELECT 1", 0),
            ("INSERT INTO `t` (a,b) VALUES (?,?)", 2),
            ("SELECT * FROM t WHERE a = '?' AND b = ?", 1),
            ('SELECT * FROM t WHERE "odd?" = ?', 1),
            ("SELECT * FROM `we?ird` WHERE a = ?", 1),
            ("SELECT * FROM t WHERE a = 'it''s?' AND b = ?", 1),
        ],
    )
    def test_counts_outside_literals(self, query, expected):
        assert count_placeholders(query) == expected


class TestToFormatParamstyle:
    """Tests for to_format_paramstyle."""

    def test_replaces_question_marks(self):
        assert to_format_paramstyle("DELETE FROM t WHERE id=?") == "DELETE FROM t WHERE id=%s"

    def test_escapes_percent(self):
        assert to_format_paramstyle("SELECT 100 % 7, ?") == "SELECT 100 %% 7, %s"

    def test_keeps_question_mark_in_literal(self):
        assert to_format_paramstyle("SELECT '?', ?") == "SELECT '?', %s"

    def test_escapes_percent_in_literal(self):
        assert to_format_paramstyle("WHERE a LIKE 'x%'") == "WHERE a LIKE 'x%%'"
