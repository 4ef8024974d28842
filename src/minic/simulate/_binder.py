"""Declaration binder: builds the initial environment of a run.

One linear pass over the program tree in source order (nested bodies
included).  Every declaration is bound; every identifier use is checked
against the names declared *before* it, so forward references and
undeclared names are rejected before any statement runs.

Scalar initializers that only reference literals and previously bound
constant scalars are evaluated here.  Initializers that depend on values
computed at runtime bind ``0`` and are evaluated again when the executor
reaches the declaration.

Declarations nested in a loop or branch are allocated but left
undeclared in the environment until the executor actually runs them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from minic.model.expressions import (
    ArrayIndex,
    BinaryExpr,
    Expression,
    UnaryExpr,
    VariableRef,
)
from minic.model.program import Program
from minic.model.statements import (
    ArrayDeclaration,
    Assignment,
    Conditional,
    Declaration,
    DoWhileLoop,
    ForLoop,
    PrintCall,
    ReturnStatement,
    Statement,
    WhileLoop,
)

from ._environment import Environment
from ._evaluator import Evaluator
from ._values import SimulationError, UndefinedVariable

logger = logging.getLogger(__name__)


def iter_references(expr: Expression) -> Iterator[tuple[str, bool]]:
    """Yield ``(name, is_array)`` for every identifier used in *expr*."""
    if isinstance(expr, VariableRef):
        yield expr.name, False
    elif isinstance(expr, ArrayIndex):
        yield expr.name, True
        yield from iter_references(expr.index)
    elif isinstance(expr, BinaryExpr):
        yield from iter_references(expr.left)
        yield from iter_references(expr.right)
    elif isinstance(expr, UnaryExpr):
        yield from iter_references(expr.operand)


class Binder:
    """Single-pass declaration binder.

    Parameters
    ----------
    env : Environment, optional
        Environment to populate; a fresh one is created when omitted.
    """

    def __init__(self, env: Environment | None = None) -> None:
        self.env = env if env is not None else Environment()
        self.evaluator = Evaluator(self.env)
        self._declared: set[str] = set()
        self._constant: set[str] = set()

    def bind(self, program: Program) -> Environment:
        self._bind_body(program.body, top_level=True)
        logger.debug("bound %d name(s): %s", len(self._declared), sorted(self._declared))
        return self.env

    # -----------------------------------------------------------------------
    # Walk
    # -----------------------------------------------------------------------

    def _bind_body(self, body: list[Statement], top_level: bool = False) -> None:
        for stmt in body:
            self._bind_stmt(stmt, top_level)

    def _bind_stmt(self, stmt: Statement, top_level: bool) -> None:
        line = stmt.line

        if isinstance(stmt, Declaration):
            self._bind_declaration(stmt, top_level)
        elif isinstance(stmt, ArrayDeclaration):
            self.env.declare_array(stmt.name, stmt.values, stmt.length, reached=top_level)
            self._declared.add(stmt.name)
            self._constant.discard(stmt.name)
        elif isinstance(stmt, Assignment):
            self._check_expr(stmt.value, line)
            target = stmt.target
            self._check_name(target.name, line, isinstance(target, ArrayIndex))
            if isinstance(target, ArrayIndex):
                self._check_expr(target.index, line)
            self._constant.discard(target.name)
        elif isinstance(stmt, Conditional):
            for branch in stmt.branches:
                self._check_expr(branch.condition, line)
                self._bind_body(branch.body)
            self._bind_body(stmt.else_body)
        elif isinstance(stmt, ForLoop):
            if stmt.init is not None:
                self._bind_stmt(stmt.init, top_level)
            if stmt.condition is not None:
                self._check_expr(stmt.condition, line)
            self._bind_body(stmt.body)
            if stmt.step is not None:
                self._bind_stmt(stmt.step, False)
        elif isinstance(stmt, WhileLoop):
            self._check_expr(stmt.condition, line)
            self._bind_body(stmt.body)
        elif isinstance(stmt, DoWhileLoop):
            self._bind_body(stmt.body)
            self._check_expr(stmt.condition, line)
        elif isinstance(stmt, PrintCall):
            for arg in stmt.args:
                self._check_expr(arg, line)
        elif isinstance(stmt, ReturnStatement):
            if stmt.value is not None:
                self._check_expr(stmt.value, line)

    def _bind_declaration(self, stmt: Declaration, top_level: bool) -> None:
        value = 0
        constant = top_level
        if stmt.value is not None:
            refs = list(iter_references(stmt.value))
            for name, is_array in refs:
                self._check_name(name, stmt.line, is_array)
            constant = top_level and all(
                not is_array and name in self._constant for name, is_array in refs
            )
            if constant:
                value = self.evaluator.evaluate(stmt.value, stmt.line)

        self.env.declare_scalar(stmt.name, value, reached=top_level)
        self._declared.add(stmt.name)
        if constant:
            self._constant.add(stmt.name)
        else:
            self._constant.discard(stmt.name)

    # -----------------------------------------------------------------------
    # Reference checks
    # -----------------------------------------------------------------------

    def _check_expr(self, expr: Expression, line: int | None) -> None:
        for name, is_array in iter_references(expr):
            self._check_name(name, line, is_array)

    def _check_name(self, name: str, line: int | None, is_array: bool) -> None:
        if name not in self._declared:
            raise UndefinedVariable(name, line, "declare it before this use")
        if is_array and name not in self.env.arrays:
            raise SimulationError(f"'{name}' is not an array and cannot be indexed", line)
        if not is_array and name in self.env.arrays:
            raise SimulationError(
                f"array '{name}' used as a value; index it like {name}[0]", line,
            )


def bind(program: Program | str, env: Environment | None = None) -> Environment:
    """Build the initial environment for *program*.

    *program* may be a parsed ``Program`` or C-subset source text.
    """
    if isinstance(program, str):
        from minic.frontend import parse_program

        program = parse_program(program)
    return Binder(env).bind(program)
