"""Recursive-descent parser: turns C-subset source into IR nodes.

The parser makes one linear pass over the token stream and builds the
``Program`` tree (statements owning their bodies), so every later stage
works on structure instead of re-scanning text.

Key concepts:

- **ParseContext**: carries loop nesting and collected headers during
  parsing.
- **Parser**: token cursor plus dispatch-table handlers, split across the
  expression and statement mixins.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from minic.model.program import Program
from minic.model.statements import Statement

from ._errors import CompileError
from ._lexer import Token, TokenKind, describe_token, tokenize
from ._parser_expressions import _ExpressionMixin
from ._parser_statements import _StatementMixin


_INCLUDE_RE = re.compile(r'^#\s*include\s*[<"]([^>"]+)[>"]\s*$')


# ---------------------------------------------------------------------------
# ParseContext
# ---------------------------------------------------------------------------

@dataclass
class ParseContext:
    """Mutable state carried through parsing."""

    headers: list[str] = field(default_factory=list)
    """``#include`` targets in source order"""

    loop_depth: int = 0
    """Nesting depth of the loop currently being parsed"""


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

class Parser(_ExpressionMixin, _StatementMixin):
    """Parses a token list into a ``Program``."""

    def __init__(self, tokens: list[Token], ctx: ParseContext | None = None) -> None:
        self.tokens = tokens
        self.pos = 0
        self.ctx = ctx or ParseContext()

    # -----------------------------------------------------------------------
    # Token cursor
    # -----------------------------------------------------------------------

    def _peek(self, offset: int = 0) -> Token:
        idx = min(self.pos + offset, len(self.tokens) - 1)
        return self.tokens[idx]

    def _advance(self) -> Token:
        tok = self.tokens[self.pos]
        if tok.kind != TokenKind.EOF:
            self.pos += 1
        return tok

    def _accept_op(self, *ops: str) -> Token | None:
        if self._peek().is_op(*ops):
            return self._advance()
        return None

    def _expect_op(self, op: str, context: str = "") -> Token:
        tok = self._peek()
        if not tok.is_op(op):
            where = f" {context}" if context else ""
            raise CompileError(
                f"Expected '{op}'{where}, found {describe_token(tok)}", tok.line,
            )
        return self._advance()

    def _expect_keyword(self, word: str) -> Token:
        tok = self._peek()
        if not tok.is_keyword(word):
            raise CompileError(f"Expected '{word}', found {describe_token(tok)}", tok.line)
        return self._advance()

    def _expect_ident(self, context: str = "an identifier") -> Token:
        tok = self._peek()
        if tok.kind != TokenKind.IDENT:
            raise CompileError(f"Expected {context}, found {describe_token(tok)}", tok.line)
        return self._advance()

    # -----------------------------------------------------------------------
    # Translation unit
    # -----------------------------------------------------------------------

    def parse_program(self) -> Program:
        """Parse directives, file-scope declarations and ``main``."""
        body: list[Statement] = []

        while True:
            tok = self._peek()
            if tok.kind == TokenKind.DIRECTIVE:
                self._parse_directive(self._advance())
            elif tok.is_keyword("int") and self._peek(1).kind == TokenKind.IDENT \
                    and self._peek(2).is_op("("):
                break
            elif tok.is_keyword("int"):
                body.extend(self._parse_declaration())
            elif tok.kind == TokenKind.EOF:
                raise CompileError("Missing 'int main()' function", tok.line)
            else:
                raise CompileError(
                    f"Expected a declaration or 'int main()', found {describe_token(tok)}",
                    tok.line,
                )

        body.extend(self._parse_main())

        tok = self._peek()
        if tok.kind != TokenKind.EOF:
            if tok.is_keyword("int", "void") and self._peek(2).is_op("("):
                raise CompileError(
                    "Only a single 'main' function is supported", tok.line,
                )
            raise CompileError(
                f"Unexpected {describe_token(tok)} after the end of main", tok.line,
            )

        return Program(headers=list(self.ctx.headers), body=body)

    def _parse_directive(self, tok: Token) -> None:
        m = _INCLUDE_RE.match(tok.text)
        if m is None:
            raise CompileError(
                f"Preprocessor directive not supported: {tok.text}", tok.line,
            )
        self.ctx.headers.append(m.group(1).strip())

    def _parse_main(self) -> list[Statement]:
        self._expect_keyword("int")
        name = self._expect_ident("a function name")
        if name.text != "main":
            raise CompileError(
                f"Only a single 'main' function is supported, found '{name.text}'",
                name.line,
            )
        self._expect_op("(", "after 'main'")
        if self._peek().is_keyword("void"):
            self._advance()
        self._expect_op(")", "in the parameter list of 'main'")
        self._expect_op("{", "to open the body of 'main'")
        return self._parse_block_items()


# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------

def parse_program(source: str) -> Program:
    """Tokenize and parse *source* into a ``Program``.

    Raises ``CompileError`` for anything outside the supported subset.
    """
    return Parser(tokenize(source)).parse_program()
