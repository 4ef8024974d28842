"""Tests for the output judge."""

import pytest

from minic import judge, normalize_output


class TestNormalize:
    def test_trailing_newline_dropped(self):
        assert normalize_output("Hello\n") == "Hello"

    def test_crlf(self):
        assert normalize_output("a\r\nb\rc") == "a\nb\nc"

    def test_inline_whitespace_collapsed(self):
        assert normalize_output("Sum:   8\t\t!") == "Sum: 8 !"

    def test_lines_stripped(self):
        assert normalize_output("  one  \n  two") == "one\ntwo"

    def test_line_breaks_kept(self):
        assert normalize_output("1\n2\n3") == "1\n2\n3"

    @pytest.mark.parametrize("text", [
        "",
        "plain",
        " padded \r\n\tlines\t \n\n",
        "a  b\n\n  c",
    ])
    def test_idempotent(self, text):
        once = normalize_output(text)
        assert normalize_output(once) == once


class TestJudge:
    def test_exact_match(self):
        assert judge("Hello, World!", "Hello, World!")

    def test_trailing_newline_ignored(self):
        assert judge("1\n2\n3", "1\n2\n3\n")

    def test_surrounding_whitespace_ignored(self):
        assert judge("  Sum: 8  \n", "Sum: 8")

    def test_case_sensitive(self):
        assert not judge("sum: 8", "Sum: 8")

    def test_different_value(self):
        assert not judge("Sum: 9", "Sum: 8")

    def test_line_break_significant(self):
        assert not judge("1 2 3", "1\n2\n3")

    def test_windows_line_endings(self):
        assert judge("a\r\nb\r\n", "a\nb")

    def test_symmetric(self):
        assert judge("x  y", "x y") == judge("x y", "x  y")

    def test_empty(self):
        assert judge("", "\n")
