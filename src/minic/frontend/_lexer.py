"""Tokenizer for the C subset.

Produces a flat list of ``Token`` objects.  Comments and whitespace are
dropped; preprocessor lines become single ``DIRECTIVE`` tokens so the
parser can decide which ones it accepts.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from ._errors import CompileError


class TokenKind(str, Enum):
    NUMBER = "NUMBER"
    CHAR = "CHAR"
    STRING = "STRING"
    IDENT = "IDENT"
    KEYWORD = "KEYWORD"
    OP = "OP"
    DIRECTIVE = "DIRECTIVE"
    EOF = "EOF"


KEYWORDS = frozenset({
    "int", "void", "return", "if", "else", "for", "while", "do",
    "break", "continue",
    # Recognised only to produce a precise "unsupported" error
    "char", "float", "double", "long", "short", "unsigned", "signed",
    "struct", "switch", "case", "default", "goto", "const", "static",
})


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    line: int

    def is_op(self, *ops: str) -> bool:
        return self.kind == TokenKind.OP and self.text in ops

    def is_keyword(self, *words: str) -> bool:
        return self.kind == TokenKind.KEYWORD and self.text in words


# Longest operators first so ``<=`` wins over ``<``.
_OPERATORS = (
    "++", "--", "+=", "-=", "*=", "/=", "%=",
    "==", "!=", "<=", ">=", "&&", "||",
    "+", "-", "*", "/", "%", "<", ">", "=", "!",
    "(", ")", "{", "}", "[", "]", ";", ",",
    "&", "|", "^", "~", "?", ":", ".",
)

_TOKEN_RE = re.compile(
    r"""
    (?P<ws>[ \t\r\f\v]+)
  | (?P<newline>\n)
  | (?P<line_comment>//[^\n]*)
  | (?P<block_comment>/\*.*?\*/)
  | (?P<open_comment>/\*)
  | (?P<directive>\#[^\n]*)
  | (?P<number>0[xX][0-9a-fA-F]+|\d+)
  | (?P<char>'(?:\\.|[^\\'\n])*')
  | (?P<string>"(?:\\.|[^\\"\n])*")
  | (?P<ident>[A-Za-z_][A-Za-z0-9_]*)
  | (?P<op>"""
    + "|".join(re.escape(op) for op in _OPERATORS)
    + r""")
    """,
    re.VERBOSE | re.DOTALL,
)

_CHAR_ESCAPES = {
    "n": "\n", "t": "\t", "r": "\r", "0": "\0",
    "\\": "\\", "'": "'", '"': '"',
}


def describe_token(tok: Token) -> str:
    """Render a token for error messages."""
    if tok.kind == TokenKind.EOF:
        return "end of input"
    return f"'{tok.text}'"


def parse_int_literal(text: str, line: int | None = None) -> int:
    """Decode a C integer literal: decimal, ``0x`` hex or leading-zero octal."""
    if text[:2] in ("0x", "0X"):
        return int(text, 16)
    if len(text) > 1 and text.startswith("0"):
        try:
            return int(text, 8)
        except ValueError:
            raise CompileError(f"Invalid octal literal: {text}", line) from None
    return int(text)


def char_literal_value(text: str, line: int | None = None) -> int:
    """Decode a character literal such as ``'A'`` or ``'\\n'`` to its code."""
    body = text[1:-1]
    if body.startswith("\\") and len(body) == 2 and body[1] in _CHAR_ESCAPES:
        return ord(_CHAR_ESCAPES[body[1]])
    if len(body) == 1:
        return ord(body)
    raise CompileError(f"Invalid character literal: {text}", line)


def tokenize(source: str) -> list[Token]:
    """Split *source* into tokens, ending with a single ``EOF`` token."""
    tokens: list[Token] = []
    line = 1
    pos = 0
    length = len(source)

    while pos < length:
        m = _TOKEN_RE.match(source, pos)
        if m is None:
            if source[pos] in "\"'":
                raise CompileError("Unterminated string or character literal", line)
            raise CompileError(f"Unexpected character {source[pos]!r}", line)

        group = m.lastgroup
        text = m.group()
        pos = m.end()

        if group == "newline":
            line += 1
        elif group in ("ws", "line_comment"):
            pass
        elif group == "open_comment":
            raise CompileError("Unterminated comment", line)
        elif group == "block_comment":
            line += text.count("\n")
        elif group == "directive":
            tokens.append(Token(TokenKind.DIRECTIVE, text.strip(), line))
        elif group == "number":
            tokens.append(Token(TokenKind.NUMBER, text, line))
        elif group == "char":
            tokens.append(Token(TokenKind.CHAR, text, line))
        elif group == "string":
            tokens.append(Token(TokenKind.STRING, text, line))
        elif group == "ident":
            kind = TokenKind.KEYWORD if text in KEYWORDS else TokenKind.IDENT
            tokens.append(Token(kind, text, line))
        else:
            tokens.append(Token(TokenKind.OP, text, line))

    tokens.append(Token(TokenKind.EOF, "", line))
    return tokens
