"""minic front end — structural validation and parsing of C-subset source.

Public API::

    from minic.frontend import validate, parse_program

    check = validate(source)
    if check.ok:
        program = parse_program(source)
"""

from ._errors import CompileError
from ._lexer import Token, TokenKind, tokenize
from ._parser import ParseContext, Parser, parse_program
from ._validator import ValidationResult, validate

__all__ = [
    "CompileError",
    "ParseContext",
    "Parser",
    "Token",
    "TokenKind",
    "ValidationResult",
    "parse_program",
    "tokenize",
    "validate",
]
