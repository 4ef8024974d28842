"""Expression evaluator: integer semantics over an ``Environment``.

Evaluation is pure: it reads the environment and never writes to it.
Relational and logical operators yield ``1``/``0`` like C, and ``&&`` /
``||`` short-circuit so ``i < n && arr[i] > 0`` never indexes past the end.
"""

from __future__ import annotations

from collections.abc import Callable

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

from ._environment import Environment
from ._values import DivisionByZero, SimulationError, c_div, c_mod, wrap_int


class Evaluator:
    """Evaluates IR expressions against an environment.

    Parameters
    ----------
    env : Environment
        The variable store to read from.
    """

    def __init__(self, env: Environment) -> None:
        self.env = env
        self._line: int | None = None

    # -----------------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------------

    def evaluate(self, expr: Expression, line: int | None = None) -> int:
        """Evaluate *expr* to an integer.

        *line* is the source line reported by any error raised.
        """
        self._line = line
        return self._eval(expr)

    def evaluate_condition(self, expr: Expression, line: int | None = None) -> bool:
        """Evaluate *expr* as a guard: any non-zero value is true."""
        return self.evaluate(expr, line) != 0

    # -----------------------------------------------------------------------
    # Expression dispatch
    # -----------------------------------------------------------------------

    def _eval(self, expr: Expression) -> int:
        handler = self._EXPR_DISPATCH.get(expr.kind)
        if handler is None:
            raise SimulationError(f"Unsupported expression kind: {expr.kind}", self._line)
        return handler(self, expr)

    def _eval_integer(self, expr: IntegerLiteral) -> int:
        return wrap_int(expr.value)

    def _eval_string(self, expr: StringLiteral) -> int:
        raise SimulationError(
            f"string literal \"{expr.value}\" used where an integer is expected",
            self._line,
        )

    def _eval_variable_ref(self, expr: VariableRef) -> int:
        return self.env.get(expr.name, self._line)

    def _eval_array_index(self, expr: ArrayIndex) -> int:
        index = self._eval(expr.index)
        return self.env.get_element(expr.name, index, self._line)

    def _eval_unary(self, expr: UnaryExpr) -> int:
        operand = self._eval(expr.operand)
        if expr.op == UnaryOp.NEG:
            return wrap_int(-operand)
        if expr.op == UnaryOp.POS:
            return operand
        if expr.op == UnaryOp.NOT:
            return int(operand == 0)
        raise SimulationError(f"Unsupported unary op: {expr.op}", self._line)

    def _eval_binary(self, expr: BinaryExpr) -> int:
        op = expr.op

        # Short-circuit: the right side is only evaluated when needed
        if op == BinaryOp.AND:
            return int(self._eval(expr.left) != 0 and self._eval(expr.right) != 0)
        if op == BinaryOp.OR:
            return int(self._eval(expr.left) != 0 or self._eval(expr.right) != 0)

        left = self._eval(expr.left)
        right = self._eval(expr.right)
        return self._apply_binop(op, left, right)

    def _apply_binop(self, op: BinaryOp, left: int, right: int) -> int:
        if op == BinaryOp.ADD:
            return wrap_int(left + right)
        if op == BinaryOp.SUB:
            return wrap_int(left - right)
        if op == BinaryOp.MUL:
            return wrap_int(left * right)
        if op == BinaryOp.DIV:
            if right == 0:
                raise DivisionByZero("division by zero", self._line)
            return wrap_int(c_div(left, right))
        if op == BinaryOp.MOD:
            if right == 0:
                raise DivisionByZero("modulo by zero", self._line)
            return wrap_int(c_mod(left, right))

        # Comparison
        if op == BinaryOp.EQ:
            return int(left == right)
        if op == BinaryOp.NE:
            return int(left != right)
        if op == BinaryOp.GT:
            return int(left > right)
        if op == BinaryOp.GE:
            return int(left >= right)
        if op == BinaryOp.LT:
            return int(left < right)
        if op == BinaryOp.LE:
            return int(left <= right)

        raise SimulationError(f"Unsupported binary op: {op}", self._line)

    # Expression dispatch table
    _EXPR_DISPATCH: dict[str, Callable[[Evaluator, Expression], int]] = {
        "integer": _eval_integer,
        "string": _eval_string,
        "variable_ref": _eval_variable_ref,
        "array_index": _eval_array_index,
        "unary": _eval_unary,
        "binary": _eval_binary,
    }


# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------

def evaluate(expr: Expression, env: Environment) -> int:
    """Evaluate *expr* against *env*."""
    return Evaluator(env).evaluate(expr)


def evaluate_condition(expr: Expression, env: Environment) -> bool:
    """Evaluate *expr* against *env* as a boolean guard."""
    return Evaluator(env).evaluate_condition(expr)
