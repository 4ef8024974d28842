"""Statement parsing methods for the parser.

Handles declarations, assignments and ``++``/``--`` statements,
``printf`` calls, ``if``/``else`` chains, ``for``/``while``/``do`` loops,
``break``/``continue`` and ``return``.  Bare ``{ ... }`` blocks are
flattened into the enclosing body: the subset has a single scope.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from minic.model.expressions import ArrayIndex, IntegerLiteral, StringLiteral, VariableRef
from minic.model.statements import (
    ArrayDeclaration,
    AssignOp,
    Assignment,
    BreakStatement,
    Conditional,
    ConditionalBranch,
    ContinueStatement,
    Declaration,
    DoWhileLoop,
    ForLoop,
    PrintCall,
    ReturnStatement,
    Statement,
    WhileLoop,
)

from ._errors import CompileError
from ._lexer import TokenKind, char_literal_value, describe_token, parse_int_literal

if TYPE_CHECKING:
    from ._parser import Parser


_ASSIGN_OPS: dict[str, AssignOp] = {op.value: op for op in AssignOp}

_UNSUPPORTED_TYPES = frozenset({
    "char", "float", "double", "long", "short", "unsigned", "signed", "void",
    "const", "static",
})

_REJECTED_KEYWORD_MESSAGES: dict[str, str] = {
    "struct": "structs are not supported",
    "switch": "switch statements are not supported; use if/else if/else",
    "case": "'case' outside of a switch is not supported",
    "default": "'default' outside of a switch is not supported",
    "goto": "goto is not supported",
    "else": "'else' without a matching 'if'",
}


# ---------------------------------------------------------------------------
# Statement mixin
# ---------------------------------------------------------------------------

class _StatementMixin:
    """Mixin providing statement parsing methods for Parser."""

    def _parse_block_items(self: Parser) -> list[Statement]:
        """Parse statements up to and including the closing ``}``."""
        body: list[Statement] = []
        while not self._peek().is_op("}"):
            if self._peek().kind == TokenKind.EOF:
                raise CompileError("Expected '}' before end of input", self._peek().line)
            body.extend(self.parse_statement())
        self._advance()
        return body

    def _parse_body(self: Parser) -> list[Statement]:
        """Loop/branch body: a braced block or a single statement."""
        if self._accept_op("{"):
            return self._parse_block_items()
        return self.parse_statement()

    def parse_statement(self: Parser) -> list[Statement]:
        """Parse one statement; declarations with commas yield several."""
        tok = self._peek()

        if tok.kind == TokenKind.KEYWORD:
            handler = self._KEYWORD_HANDLERS.get(tok.text)
            if handler is not None:
                return handler(self)
            if tok.text in _UNSUPPORTED_TYPES:
                raise CompileError(
                    f"Type '{tok.text}' is not supported; only 'int' variables are available",
                    tok.line,
                )
            raise CompileError(
                _REJECTED_KEYWORD_MESSAGES.get(tok.text, f"Unsupported keyword '{tok.text}'"),
                tok.line,
            )

        if tok.is_op("{"):
            self._advance()
            return self._parse_block_items()

        if tok.is_op(";"):
            self._advance()
            return []

        if tok.kind == TokenKind.IDENT and self._peek(1).is_op("("):
            return [self._parse_call()]

        stmt = self._parse_simple_statement()
        self._expect_op(";", "after statement")
        return [stmt]

    # -----------------------------------------------------------------------
    # Declarations
    # -----------------------------------------------------------------------

    def _parse_declaration(self: Parser) -> list[Statement]:
        """``int a, b = 2, c[] = {1, 2};``"""
        self._expect_keyword("int")
        decls: list[Statement] = [self._parse_declarator()]
        while self._accept_op(","):
            decls.append(self._parse_declarator())
        self._expect_op(";", "after declaration")
        return decls

    def _parse_declarator(self: Parser) -> Statement:
        name_tok = self._peek()
        if name_tok.is_op("*"):
            raise CompileError("Pointers are not supported", name_tok.line)
        name = self._expect_ident("a variable name").text

        if self._accept_op("["):
            return self._parse_array_declarator(name, name_tok.line)

        value = None
        if self._accept_op("="):
            value = self.parse_expression()
        return Declaration(name=name, value=value, line=name_tok.line)

    def _parse_array_declarator(self: Parser, name: str, line: int) -> ArrayDeclaration:
        size: int | None = None
        if not self._peek().is_op("]"):
            size_tok = self._peek()
            if size_tok.kind != TokenKind.NUMBER:
                raise CompileError(
                    f"Array size of '{name}' must be an integer literal, "
                    f"found {describe_token(size_tok)}",
                    size_tok.line,
                )
            self._advance()
            size = parse_int_literal(size_tok.text, size_tok.line)
            if size <= 0:
                raise CompileError(f"Array size of '{name}' must be positive", size_tok.line)
        self._expect_op("]", f"in the declaration of '{name}'")

        values: list[int] = []
        if self._accept_op("="):
            self._expect_op("{", f"to open the initializer list of '{name}'")
            if not self._peek().is_op("}"):
                values.append(self._parse_array_element(name))
                while self._accept_op(","):
                    if self._peek().is_op("}"):
                        break  # trailing comma
                    values.append(self._parse_array_element(name))
            self._expect_op("}", f"to close the initializer list of '{name}'")

        if size is None and not values:
            raise CompileError(
                f"Array '{name}' needs a size or a non-empty initializer list", line,
            )
        if size is not None and len(values) > size:
            raise CompileError(
                f"Too many initializers for array '{name}' ({len(values)} > {size})", line,
            )
        return ArrayDeclaration(name=name, size=size, values=values, line=line)

    def _parse_array_element(self: Parser, name: str) -> int:
        sign = -1 if self._accept_op("-") else 1
        tok = self._peek()
        if tok.kind == TokenKind.NUMBER:
            self._advance()
            return sign * parse_int_literal(tok.text, tok.line)
        if tok.kind == TokenKind.CHAR:
            self._advance()
            return sign * char_literal_value(tok.text, tok.line)
        raise CompileError(
            f"Elements of array '{name}' must be integer literals, found {describe_token(tok)}",
            tok.line,
        )

    # -----------------------------------------------------------------------
    # Assignments and calls
    # -----------------------------------------------------------------------

    def _parse_simple_statement(self: Parser) -> Statement:
        """Assignment, compound assignment, or ``++``/``--`` (no ``;``)."""
        tok = self._peek()

        # Prefix form: ++i / --i
        if tok.is_op("++", "--"):
            self._advance()
            target = self._parse_assign_target()
            op = AssignOp.ADD if tok.text == "++" else AssignOp.SUB
            return Assignment(target=target, op=op, value=IntegerLiteral(value=1), line=tok.line)

        target = self._parse_assign_target()
        op_tok = self._peek()

        if op_tok.is_op("++", "--"):
            self._advance()
            op = AssignOp.ADD if op_tok.text == "++" else AssignOp.SUB
            return Assignment(target=target, op=op, value=IntegerLiteral(value=1), line=tok.line)

        if op_tok.kind == TokenKind.OP and op_tok.text in _ASSIGN_OPS:
            self._advance()
            value = self.parse_expression()
            return Assignment(target=target, op=_ASSIGN_OPS[op_tok.text], value=value, line=tok.line)

        raise CompileError(
            f"Expected an assignment, found {describe_token(op_tok)} after '{tok.text}'",
            op_tok.line,
        )

    def _parse_assign_target(self: Parser) -> VariableRef | ArrayIndex:
        tok = self._peek()
        if tok.kind != TokenKind.IDENT:
            if tok.is_keyword("int"):
                raise CompileError("Declarations are not allowed here", tok.line)
            raise CompileError(
                f"Expected a statement, found {describe_token(tok)}", tok.line,
            )
        self._advance()
        if self._accept_op("["):
            index = self.parse_expression()
            self._expect_op("]", f"to close the index of '{tok.text}'")
            return ArrayIndex(name=tok.text, index=index)
        return VariableRef(name=tok.text)

    def _parse_call(self: Parser) -> Statement:
        name_tok = self._advance()
        if name_tok.text != "printf":
            raise CompileError(
                f"Unsupported function '{name_tok.text}'; only printf can be called",
                name_tok.line,
            )
        self._expect_op("(", "after 'printf'")
        if self._peek().kind != TokenKind.STRING:
            raise CompileError(
                f"printf needs a string literal format, found {describe_token(self._peek())}",
                self._peek().line,
            )
        fmt = self._parse_string_literal()
        args = []
        while self._accept_op(","):
            args.append(self.parse_expression())
        self._expect_op(")", "to close the printf call")
        self._expect_op(";", "after the printf call")
        return PrintCall(format=fmt, args=args, line=name_tok.line)

    # -----------------------------------------------------------------------
    # Control flow
    # -----------------------------------------------------------------------

    def _parse_if(self: Parser) -> list[Statement]:
        if_tok = self._expect_keyword("if")
        branches: list[ConditionalBranch] = []
        else_body: list[Statement] = []

        condition = self._parse_condition("if")
        branches.append(ConditionalBranch(condition=condition, body=self._parse_body()))

        while self._peek().is_keyword("else"):
            self._advance()
            if self._peek().is_keyword("if"):
                self._advance()
                condition = self._parse_condition("else if")
                branches.append(ConditionalBranch(condition=condition, body=self._parse_body()))
            else:
                else_body = self._parse_body()
                break

        return [Conditional(branches=branches, else_body=else_body, line=if_tok.line)]

    def _parse_condition(self: Parser, keyword: str):
        self._expect_op("(", f"after '{keyword}'")
        condition = self.parse_expression()
        self._expect_op(")", f"to close the '{keyword}' condition")
        return condition

    def _parse_loop_body(self: Parser) -> list[Statement]:
        self.ctx.loop_depth += 1
        try:
            return self._parse_body()
        finally:
            self.ctx.loop_depth -= 1

    def _parse_for(self: Parser) -> list[Statement]:
        for_tok = self._expect_keyword("for")
        self._expect_op("(", "after 'for'")

        init: Statement | None = None
        if self._peek().is_keyword("int"):
            self._advance()
            init = self._parse_declarator()
            if self._peek().is_op(","):
                raise CompileError(
                    "Only one variable may be declared in a for-loop initializer",
                    self._peek().line,
                )
        elif not self._peek().is_op(";"):
            init = self._parse_simple_statement()
        self._expect_op(";", "after the for-loop initializer")

        condition = None
        if not self._peek().is_op(";"):
            condition = self.parse_expression()
        self._expect_op(";", "after the for-loop condition")

        step: Statement | None = None
        if not self._peek().is_op(")"):
            step = self._parse_simple_statement()
        self._expect_op(")", "to close the for-loop header")

        body = self._parse_loop_body()
        return [ForLoop(init=init, condition=condition, step=step, body=body, line=for_tok.line)]

    def _parse_while(self: Parser) -> list[Statement]:
        while_tok = self._expect_keyword("while")
        condition = self._parse_condition("while")
        body = self._parse_loop_body()
        return [WhileLoop(condition=condition, body=body, line=while_tok.line)]

    def _parse_do_while(self: Parser) -> list[Statement]:
        do_tok = self._expect_keyword("do")
        body = self._parse_loop_body()
        self._expect_keyword("while")
        condition = self._parse_condition("while")
        self._expect_op(";", "after do-while")
        return [DoWhileLoop(body=body, condition=condition, line=do_tok.line)]

    def _parse_break(self: Parser) -> list[Statement]:
        tok = self._expect_keyword("break")
        if self.ctx.loop_depth == 0:
            raise CompileError("'break' outside of a loop", tok.line)
        self._expect_op(";", "after 'break'")
        return [BreakStatement(line=tok.line)]

    def _parse_continue(self: Parser) -> list[Statement]:
        tok = self._expect_keyword("continue")
        if self.ctx.loop_depth == 0:
            raise CompileError("'continue' outside of a loop", tok.line)
        self._expect_op(";", "after 'continue'")
        return [ContinueStatement(line=tok.line)]

    def _parse_return(self: Parser) -> list[Statement]:
        tok = self._expect_keyword("return")
        value = None
        if not self._peek().is_op(";"):
            value = self.parse_expression()
            if isinstance(value, StringLiteral):
                raise CompileError("main must return an integer", tok.line)
        self._expect_op(";", "after 'return'")
        return [ReturnStatement(value=value, line=tok.line)]

    # Keyword handler dispatch table
    _KEYWORD_HANDLERS: dict[str, Callable[[Parser], list[Statement]]] = {
        "int": _parse_declaration,
        "if": _parse_if,
        "for": _parse_for,
        "while": _parse_while,
        "do": _parse_do_while,
        "break": _parse_break,
        "continue": _parse_continue,
        "return": _parse_return,
    }
