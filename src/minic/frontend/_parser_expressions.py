"""Expression parsing methods for the parser.

Precedence climbing over the binary operators, with unary operators,
literals, variable references, array subscripts and parentheses as
primaries.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from minic.model.expressions import (
    ArrayIndex,
    BinaryExpr,
    BinaryOp,
    Expression,
    IntegerLiteral,
    StringLiteral,
    UnaryExpr,
    UnaryOp,
    VariableRef,
)

from ._errors import CompileError
from ._lexer import TokenKind, char_literal_value, describe_token, parse_int_literal

if TYPE_CHECKING:
    from ._parser import Parser


# operator text -> (op, precedence); higher binds tighter
_BINOP_MAP: dict[str, tuple[BinaryOp, int]] = {
    "||": (BinaryOp.OR, 1),
    "&&": (BinaryOp.AND, 2),
    "==": (BinaryOp.EQ, 3),
    "!=": (BinaryOp.NE, 3),
    "<": (BinaryOp.LT, 4),
    "<=": (BinaryOp.LE, 4),
    ">": (BinaryOp.GT, 4),
    ">=": (BinaryOp.GE, 4),
    "+": (BinaryOp.ADD, 5),
    "-": (BinaryOp.SUB, 5),
    "*": (BinaryOp.MUL, 6),
    "/": (BinaryOp.DIV, 6),
    "%": (BinaryOp.MOD, 6),
}

_UNARY_MAP: dict[str, UnaryOp] = {
    "-": UnaryOp.NEG,
    "+": UnaryOp.POS,
    "!": UnaryOp.NOT,
}

_REJECTED_OPERATOR_MESSAGES: dict[str, str] = {
    "&": "Bitwise and address-of '&' is not supported",
    "|": "Bitwise '|' is not supported; use '||' for logical OR",
    "^": "Bitwise '^' is not supported",
    "~": "Bitwise '~' is not supported; use '!' for logical NOT",
    "?": "The conditional operator '?:' is not supported; use if/else",
    ".": "Member access '.' is not supported",
    "++": "'++' is only supported as a statement (e.g. 'i++;')",
    "--": "'--' is only supported as a statement (e.g. 'i--;')",
    "=": "Assignment is not allowed inside an expression",
    "+=": "Assignment is not allowed inside an expression",
    "-=": "Assignment is not allowed inside an expression",
    "*=": "Assignment is not allowed inside an expression",
    "/=": "Assignment is not allowed inside an expression",
    "%=": "Assignment is not allowed inside an expression",
}


# ---------------------------------------------------------------------------
# Expression mixin
# ---------------------------------------------------------------------------

class _ExpressionMixin:
    """Mixin providing expression parsing methods for Parser."""

    def parse_expression(self: Parser) -> Expression:
        expr = self._parse_binary(1)
        tok = self._peek()
        if tok.kind == TokenKind.OP and tok.text in ("++", "--", "=", "?", "&", "|", "^", "."):
            raise CompileError(_REJECTED_OPERATOR_MESSAGES[tok.text], tok.line)
        return expr

    def _parse_binary(self: Parser, min_prec: int) -> Expression:
        left = self._parse_unary()
        while True:
            tok = self._peek()
            entry = _BINOP_MAP.get(tok.text) if tok.kind == TokenKind.OP else None
            if entry is None:
                return left
            op, prec = entry
            if prec < min_prec:
                return left
            self._advance()
            # Left-associative: the right side only takes tighter operators
            right = self._parse_binary(prec + 1)
            left = BinaryExpr(op=op, left=left, right=right)

    def _parse_unary(self: Parser) -> Expression:
        tok = self._peek()
        if tok.kind == TokenKind.OP and tok.text in _UNARY_MAP:
            self._advance()
            operand = self._parse_unary()
            # Fold negative literals so -7 stays a literal
            if tok.text == "-" and isinstance(operand, IntegerLiteral):
                return IntegerLiteral(value=-operand.value)
            return UnaryExpr(op=_UNARY_MAP[tok.text], operand=operand)
        return self._parse_primary()

    def _parse_primary(self: Parser) -> Expression:
        tok = self._peek()

        if tok.kind == TokenKind.NUMBER:
            self._advance()
            return IntegerLiteral(value=parse_int_literal(tok.text, tok.line))

        if tok.kind == TokenKind.CHAR:
            self._advance()
            return IntegerLiteral(value=char_literal_value(tok.text, tok.line))

        if tok.kind == TokenKind.STRING:
            return StringLiteral(value=self._parse_string_literal())

        if tok.kind == TokenKind.IDENT:
            self._advance()
            if self._peek().is_op("("):
                raise CompileError(
                    f"Function calls are not supported in expressions: '{tok.text}()'",
                    tok.line,
                )
            if self._accept_op("["):
                index = self.parse_expression()
                self._expect_op("]", f"to close the index of '{tok.text}'")
                return ArrayIndex(name=tok.text, index=index)
            return VariableRef(name=tok.text)

        if tok.is_op("("):
            self._advance()
            expr = self.parse_expression()
            self._expect_op(")", "to close the parenthesised expression")
            return expr

        if tok.kind == TokenKind.OP and tok.text in _REJECTED_OPERATOR_MESSAGES:
            raise CompileError(_REJECTED_OPERATOR_MESSAGES[tok.text], tok.line)

        raise CompileError(f"Expected an expression, found {describe_token(tok)}", tok.line)

    def _parse_string_literal(self: Parser) -> str:
        """Consume one or more adjacent string tokens, joined, quotes stripped."""
        parts: list[str] = []
        while self._peek().kind == TokenKind.STRING:
            parts.append(self._advance().text[1:-1])
        return "".join(parts)
