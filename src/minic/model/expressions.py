"""Expression AST nodes for the C-subset IR."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class BinaryOp(str, Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    EQ = "=="
    NE = "!="
    AND = "&&"
    OR = "||"


class UnaryOp(str, Enum):
    NEG = "-"
    POS = "+"
    NOT = "!"


class IntegerLiteral(BaseModel):
    """An integer constant (decimal, hex, octal or character literal)."""

    kind: Literal["integer"] = "integer"
    value: int


class StringLiteral(BaseModel):
    """A string constant, stored without its surrounding quotes.

    Escape sequences are kept verbatim; only the format string of a
    ``printf`` call has its escapes expanded.
    """

    kind: Literal["string"] = "string"
    value: str


class VariableRef(BaseModel):
    """Reference to a scalar variable by name."""

    kind: Literal["variable_ref"] = "variable_ref"
    name: str


class ArrayIndex(BaseModel):
    """Array subscript: ``arr[i]``."""

    kind: Literal["array_index"] = "array_index"
    name: str
    index: Expression


class BinaryExpr(BaseModel):
    kind: Literal["binary"] = "binary"
    op: BinaryOp
    left: Expression
    right: Expression


class UnaryExpr(BaseModel):
    kind: Literal["unary"] = "unary"
    op: UnaryOp
    operand: Expression


Expression = Annotated[
    Union[
        IntegerLiteral,
        StringLiteral,
        VariableRef,
        ArrayIndex,
        BinaryExpr,
        UnaryExpr,
    ],
    Field(discriminator="kind"),
]

# Rebuild models with recursive Expression references.
ArrayIndex.model_rebuild()
BinaryExpr.model_rebuild()
UnaryExpr.model_rebuild()
