"""Statement AST nodes for the C-subset IR."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, model_validator

from .expressions import ArrayIndex, Expression, VariableRef


class AssignOp(str, Enum):
    ASSIGN = "="
    ADD = "+="
    SUB = "-="
    MUL = "*="
    DIV = "/="
    MOD = "%="


class Declaration(BaseModel):
    """``int name;`` or ``int name = value;``"""

    kind: Literal["declaration"] = "declaration"
    name: str
    value: Expression | None = None
    line: int | None = None


class ArrayDeclaration(BaseModel):
    """``int name[] = {1, 2, 3};`` or ``int name[N];``

    *size* is None when the length comes from the initializer list.
    """

    kind: Literal["array_declaration"] = "array_declaration"
    name: str
    size: int | None = None
    values: list[int] = []
    line: int | None = None

    @model_validator(mode="after")
    def _size_check(self):
        if self.size is None and not self.values:
            raise ValueError(
                f"array '{self.name}' needs a size or an initializer list"
            )
        if self.size is not None and self.size <= 0:
            raise ValueError(
                f"array '{self.name}' size must be positive, got {self.size}"
            )
        if self.size is not None and len(self.values) > self.size:
            raise ValueError(
                f"too many initializers for array '{self.name}' "
                f"({len(self.values)} > {self.size})"
            )
        return self

    @property
    def length(self) -> int:
        return self.size if self.size is not None else len(self.values)


class Assignment(BaseModel):
    """``target op value;`` where *op* is ``=`` or a compound operator.

    ``i++`` / ``i--`` are represented as ``i += 1`` / ``i -= 1``.
    """

    kind: Literal["assignment"] = "assignment"
    target: Annotated[Union[VariableRef, ArrayIndex], Field(discriminator="kind")]
    op: AssignOp = AssignOp.ASSIGN
    value: Expression
    line: int | None = None


class ConditionalBranch(BaseModel):
    condition: Expression
    body: list[Statement]


class Conditional(BaseModel):
    """``if`` / ``else if`` ... / ``else`` chain."""

    kind: Literal["conditional"] = "conditional"
    branches: list[ConditionalBranch]
    else_body: list[Statement] = []
    line: int | None = None

    @model_validator(mode="after")
    def _has_branch(self):
        if not self.branches:
            raise ValueError("conditional needs at least one branch")
        return self


class ForLoop(BaseModel):
    """``for (init; condition; step) body``

    A missing *condition* loops until ``break`` or the loop budget.
    """

    kind: Literal["for"] = "for"
    init: Statement | None = None
    condition: Expression | None = None
    step: Statement | None = None
    body: list[Statement]
    line: int | None = None


class WhileLoop(BaseModel):
    kind: Literal["while"] = "while"
    condition: Expression
    body: list[Statement]
    line: int | None = None


class DoWhileLoop(BaseModel):
    kind: Literal["do_while"] = "do_while"
    body: list[Statement]
    condition: Expression
    line: int | None = None


class PrintCall(BaseModel):
    """``printf("format", args...);``

    *format* holds the literal text between the quotes, escapes unexpanded.
    """

    kind: Literal["print"] = "print"
    format: str
    args: list[Expression] = []
    line: int | None = None


class BreakStatement(BaseModel):
    kind: Literal["break"] = "break"
    line: int | None = None


class ContinueStatement(BaseModel):
    kind: Literal["continue"] = "continue"
    line: int | None = None


class ReturnStatement(BaseModel):
    kind: Literal["return"] = "return"
    value: Expression | None = None
    line: int | None = None


Statement = Annotated[
    Union[
        Declaration,
        ArrayDeclaration,
        Assignment,
        Conditional,
        ForLoop,
        WhileLoop,
        DoWhileLoop,
        PrintCall,
        BreakStatement,
        ContinueStatement,
        ReturnStatement,
    ],
    Field(discriminator="kind"),
]

# Rebuild models with recursive Statement references.
ConditionalBranch.model_rebuild()
Conditional.model_rebuild()
ForLoop.model_rebuild()
WhileLoop.model_rebuild()
DoWhileLoop.model_rebuild()
