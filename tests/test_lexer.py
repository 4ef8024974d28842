"""Tests for the tokenizer."""

import pytest

from minic.frontend import CompileError, TokenKind, tokenize
from minic.frontend._lexer import char_literal_value, parse_int_literal


def _kinds(source):
    return [t.kind for t in tokenize(source)]


def _texts(source):
    return [t.text for t in tokenize(source) if t.kind != TokenKind.EOF]


class TestTokens:
    def test_declaration(self):
        assert _texts("int x = 42;") == ["int", "x", "=", "42", ";"]
        assert _kinds("int x = 42;") == [
            TokenKind.KEYWORD, TokenKind.IDENT, TokenKind.OP,
            TokenKind.NUMBER, TokenKind.OP, TokenKind.EOF,
        ]

    def test_longest_operator_wins(self):
        assert _texts("a <= b && c++ != d") == ["a", "<=", "b", "&&", "c", "++", "!=", "d"]

    def test_compound_assignment_ops(self):
        assert _texts("x += 1; y *= 2; z %= 3;") == [
            "x", "+=", "1", ";", "y", "*=", "2", ";", "z", "%=", "3", ";",
        ]

    def test_string_with_escaped_quote(self):
        toks = tokenize(r'printf("say \"hi\"\n");')
        assert toks[2].kind == TokenKind.STRING
        assert toks[2].text == r'"say \"hi\"\n"'

    def test_char_literal(self):
        toks = tokenize("'A'")
        assert toks[0].kind == TokenKind.CHAR

    def test_directive_is_one_token(self):
        toks = tokenize("#include <stdio.h>\nint main")
        assert toks[0].kind == TokenKind.DIRECTIVE
        assert toks[0].text == "#include <stdio.h>"
        assert toks[1].text == "int"

    def test_comments_dropped(self):
        assert _texts("a /* b */ c // d\ne") == ["a", "c", "e"]

    def test_printf_is_identifier(self):
        assert tokenize("printf")[0].kind == TokenKind.IDENT

    def test_ends_with_eof(self):
        assert tokenize("")[-1].kind == TokenKind.EOF


class TestLineNumbers:
    def test_lines_counted(self):
        toks = tokenize("a\nb\n\nc")
        assert [t.line for t in toks[:3]] == [1, 2, 4]

    def test_block_comment_lines_counted(self):
        toks = tokenize("/* one\ntwo\n*/ x")
        assert toks[0].line == 3


class TestErrors:
    def test_unexpected_character(self):
        with pytest.raises(CompileError, match="Unexpected character '@'"):
            tokenize("int x = @;")

    def test_unterminated_string(self):
        with pytest.raises(CompileError, match="Unterminated"):
            tokenize('printf("oops);')

    def test_unterminated_comment(self):
        with pytest.raises(CompileError, match="Unterminated comment"):
            tokenize("/* never closed")

    def test_error_carries_line(self):
        with pytest.raises(CompileError) as exc_info:
            tokenize("int x;\nint y = $;")
        assert exc_info.value.line == 2


class TestLiterals:
    def test_decimal(self):
        assert parse_int_literal("120") == 120

    def test_hex(self):
        assert parse_int_literal("0x1F") == 31

    def test_octal(self):
        assert parse_int_literal("017") == 15

    def test_zero(self):
        assert parse_int_literal("0") == 0

    def test_bad_octal(self):
        with pytest.raises(CompileError, match="Invalid octal"):
            parse_int_literal("09")

    def test_char_values(self):
        assert char_literal_value("'A'") == 65
        assert char_literal_value(r"'\n'") == 10
        assert char_literal_value(r"'\0'") == 0
