"""Value system for the simulator.

Provides the runtime error taxonomy and C ``int`` arithmetic: 32-bit
two's-complement wrap-around, division truncating toward zero, and a
remainder that takes the sign of the dividend.
"""

from __future__ import annotations


class SimulationError(Exception):
    """Runtime error during simulation."""

    def __init__(self, message: str, line: int | None = None):
        self.message = message
        self.line = line
        loc = f" (line {line})" if line is not None else ""
        super().__init__(f"{message}{loc}")


class UndefinedVariable(SimulationError):
    """An identifier was used before (or without) being declared."""

    def __init__(self, name: str, line: int | None = None, detail: str = ""):
        self.name = name
        message = f"'{name}' is not declared"
        if detail:
            message = f"{message}; {detail}"
        super().__init__(message, line)


class DivisionByZero(SimulationError):
    """Integer ``/`` or ``%`` with a zero divisor."""


class ArrayIndexOutOfRange(SimulationError):
    """Array subscript outside ``[0, length)``."""

    def __init__(self, name: str, index: int, length: int, line: int | None = None):
        self.name = name
        self.index = index
        self.length = length
        super().__init__(
            f"index {index} is out of range for array '{name}' of length {length} "
            f"(valid: 0..{length - 1})",
            line,
        )


class LoopBudgetExceeded(SimulationError):
    """The run performed more loop iterations than the configured budget."""

    def __init__(self, budget: int, line: int | None = None):
        self.budget = budget
        super().__init__(
            f"loop iteration budget of {budget} exceeded; "
            f"the program may contain an infinite loop",
            line,
        )


class OutputLimitExceeded(SimulationError):
    """The program printed more text than the configured limit."""

    def __init__(self, limit: int, line: int | None = None):
        self.limit = limit
        super().__init__(f"output exceeded the limit of {limit} characters", line)


# ---------------------------------------------------------------------------
# C int arithmetic
# ---------------------------------------------------------------------------

INT_BITS = 32
_INT_MASK = (1 << INT_BITS) - 1
_INT_SIGN = 1 << (INT_BITS - 1)


def wrap_int(value: int) -> int:
    """Wrap *value* into the signed 32-bit range, as a C ``int`` overflows."""
    value &= _INT_MASK
    return value - (1 << INT_BITS) if value & _INT_SIGN else value


def to_unsigned(value: int) -> int:
    """The 32-bit unsigned pattern of *value* (used by ``%u``/``%o``/``%x``)."""
    return value & _INT_MASK


def c_div(left: int, right: int) -> int:
    """Integer division truncating toward zero: ``-7 / 2 == -3``."""
    if right == 0:
        raise DivisionByZero("division by zero")
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


def c_mod(left: int, right: int) -> int:
    """Remainder matching ``c_div``: ``-7 % 2 == -1``."""
    if right == 0:
        raise DivisionByZero("modulo by zero")
    return left - right * c_div(left, right)
