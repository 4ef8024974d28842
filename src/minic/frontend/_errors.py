"""Compile-time error type shared by the lexer, parser and validator."""

from __future__ import annotations


class CompileError(Exception):
    """Structural or syntax error with an optional source line."""

    def __init__(self, message: str, line: int | None = None):
        self.message = message
        self.line = line
        loc = f" (line {line})" if line is not None else ""
        super().__init__(f"{message}{loc}")
