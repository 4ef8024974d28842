"""Execution engine: tree-walking interpreter for the C-subset IR.

The ``Executor`` runs statements in program order against an
``Environment``, accumulating ``printf`` output in a buffer.  A single
loop-iteration budget is shared by every loop of the run, so a
non-terminating ``while`` aborts with ``LoopBudgetExceeded`` instead of
blocking the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from minic.model.expressions import ArrayIndex
from minic.model.statements import (
    ArrayDeclaration,
    AssignOp,
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
from ._format import format_output
from ._values import (
    DivisionByZero,
    LoopBudgetExceeded,
    OutputLimitExceeded,
    SimulationError,
    c_div,
    c_mod,
)

logger = logging.getLogger(__name__)

DEFAULT_LOOP_BUDGET = 100_000
DEFAULT_MAX_OUTPUT_CHARS = 1_000_000


# ---------------------------------------------------------------------------
# Private signal exceptions for break/continue/return
# ---------------------------------------------------------------------------

class _BreakSignal(Exception):
    """Raised by ``break``, caught by loop handlers."""


class _ContinueSignal(Exception):
    """Raised by ``continue``, caught by loop handlers."""


class _ReturnSignal(Exception):
    """Raised by ``return``, carries the exit code."""

    def __init__(self, value: int | None = None):
        self.value = value


# ---------------------------------------------------------------------------
# Executor
# ---------------------------------------------------------------------------

class Executor:
    """Tree-walking interpreter for one run.

    Parameters
    ----------
    env : Environment
        Mutable variable store, normally produced by the binder.
    loop_budget : int
        Maximum number of loop iterations across the whole run.
    max_output_chars : int
        Maximum length of the accumulated output.
    """

    def __init__(
        self,
        env: Environment,
        loop_budget: int = DEFAULT_LOOP_BUDGET,
        max_output_chars: int = DEFAULT_MAX_OUTPUT_CHARS,
    ) -> None:
        self.env = env
        self.evaluator = Evaluator(env)
        self.loop_budget = loop_budget
        self.max_output_chars = max_output_chars
        self.iterations = 0
        self.warnings: list[str] = []
        self.exit_code: int | None = None
        self._buffer: list[str] = []
        self._output_len = 0

    # -----------------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------------

    def execute(self, statements: list[Statement]) -> None:
        """Run *statements* in order until the end or a ``return``."""
        try:
            self._exec_body(statements)
        except _ReturnSignal as ret:
            self.exit_code = ret.value

    @property
    def output(self) -> str:
        return "".join(self._buffer)

    # -----------------------------------------------------------------------
    # Statement dispatch
    # -----------------------------------------------------------------------

    def _exec_stmt(self, stmt: Statement) -> None:
        handler = self._STMT_DISPATCH.get(stmt.kind)
        if handler is None:
            raise SimulationError(f"Unsupported statement kind: {stmt.kind}", stmt.line)
        handler(self, stmt)

    def _exec_body(self, stmts: list[Statement]) -> None:
        for stmt in stmts:
            self._exec_stmt(stmt)

    def _exec_declaration(self, stmt: Declaration) -> None:
        value = 0
        if stmt.value is not None:
            value = self.evaluator.evaluate(stmt.value, stmt.line)
        self.env.declare_scalar(stmt.name, value)

    def _exec_array_declaration(self, stmt: ArrayDeclaration) -> None:
        self.env.declare_array(stmt.name, stmt.values, stmt.length)

    def _exec_assignment(self, stmt: Assignment) -> None:
        # Right side sees the pre-update environment
        value = self.evaluator.evaluate(stmt.value, stmt.line)
        target = stmt.target

        if isinstance(target, ArrayIndex):
            index = self.evaluator.evaluate(target.index, stmt.line)
            if stmt.op != AssignOp.ASSIGN:
                current = self.env.get_element(target.name, index, stmt.line)
                value = self._combine(stmt.op, current, value, stmt.line)
            self.env.set_element(target.name, index, value, stmt.line)
            return

        if stmt.op != AssignOp.ASSIGN:
            current = self.env.get(target.name, stmt.line)
            value = self._combine(stmt.op, current, value, stmt.line)
        self.env.set(target.name, value, stmt.line)

    @staticmethod
    def _combine(op: AssignOp, current: int, value: int, line: int | None) -> int:
        if op == AssignOp.ADD:
            return current + value
        if op == AssignOp.SUB:
            return current - value
        if op == AssignOp.MUL:
            return current * value
        if op == AssignOp.DIV:
            if value == 0:
                raise DivisionByZero("division by zero", line)
            return c_div(current, value)
        if op == AssignOp.MOD:
            if value == 0:
                raise DivisionByZero("modulo by zero", line)
            return c_mod(current, value)
        raise SimulationError(f"Unsupported assignment operator: {op.value}", line)

    def _exec_conditional(self, stmt: Conditional) -> None:
        for branch in stmt.branches:
            if self.evaluator.evaluate_condition(branch.condition, stmt.line):
                self._exec_body(branch.body)
                return

        if stmt.else_body:
            self._exec_body(stmt.else_body)

    def _exec_for(self, stmt: ForLoop) -> None:
        if stmt.init is not None:
            self._exec_stmt(stmt.init)

        while stmt.condition is None or self.evaluator.evaluate_condition(
            stmt.condition, stmt.line,
        ):
            self._count_iteration(stmt.line)
            try:
                self._exec_body(stmt.body)
            except _BreakSignal:
                break
            except _ContinueSignal:
                pass
            if stmt.step is not None:
                self._exec_stmt(stmt.step)

    def _exec_while(self, stmt: WhileLoop) -> None:
        while self.evaluator.evaluate_condition(stmt.condition, stmt.line):
            self._count_iteration(stmt.line)
            try:
                self._exec_body(stmt.body)
            except _BreakSignal:
                break
            except _ContinueSignal:
                pass

    def _exec_do_while(self, stmt: DoWhileLoop) -> None:
        while True:
            self._count_iteration(stmt.line)
            try:
                self._exec_body(stmt.body)
            except _BreakSignal:
                break
            except _ContinueSignal:
                pass
            if not self.evaluator.evaluate_condition(stmt.condition, stmt.line):
                break

    def _exec_print(self, stmt: PrintCall) -> None:
        formatted = format_output(
            stmt.format, stmt.args, self.env, evaluator=self.evaluator, line=stmt.line,
        )
        for warning in formatted.warnings:
            loc = f"line {stmt.line}: " if stmt.line is not None else ""
            self.warnings.append(f"{loc}{warning}")
        self._emit(formatted.text, stmt.line)

    def _exec_break(self, _stmt: Statement) -> None:
        raise _BreakSignal()

    def _exec_continue(self, _stmt: Statement) -> None:
        raise _ContinueSignal()

    def _exec_return(self, stmt: ReturnStatement) -> None:
        value = self.evaluator.evaluate(stmt.value, stmt.line) if stmt.value is not None else None
        raise _ReturnSignal(value)

    # Statement dispatch table
    _STMT_DISPATCH: dict[str, Callable[[Executor, Statement], None]] = {
        "declaration": _exec_declaration,
        "array_declaration": _exec_array_declaration,
        "assignment": _exec_assignment,
        "conditional": _exec_conditional,
        "for": _exec_for,
        "while": _exec_while,
        "do_while": _exec_do_while,
        "print": _exec_print,
        "break": _exec_break,
        "continue": _exec_continue,
        "return": _exec_return,
    }

    # -----------------------------------------------------------------------
    # Budgets
    # -----------------------------------------------------------------------

    def _count_iteration(self, line: int | None) -> None:
        self.iterations += 1
        if self.iterations > self.loop_budget:
            logger.warning(
                "loop budget of %d iterations exceeded (line %s)", self.loop_budget, line,
            )
            raise LoopBudgetExceeded(self.loop_budget, line)

    def _emit(self, text: str, line: int | None) -> None:
        self._output_len += len(text)
        if self._output_len > self.max_output_chars:
            raise OutputLimitExceeded(self.max_output_chars, line)
        self._buffer.append(text)


# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------

def execute(
    statements: list[Statement],
    env: Environment,
    *,
    loop_budget: int = DEFAULT_LOOP_BUDGET,
    max_output_chars: int = DEFAULT_MAX_OUTPUT_CHARS,
) -> Executor:
    """Run *statements* against *env* and return the finished executor.

    The caller reads ``output``, ``warnings`` and ``exit_code`` from the
    returned executor.
    """
    executor = Executor(env, loop_budget=loop_budget, max_output_chars=max_output_chars)
    executor.execute(statements)
    return executor
