"""minic simulator — binds and runs a parsed C-subset program.

Entry point::

    from minic.frontend import parse_program
    from minic.simulate import bind, execute

    program = parse_program(source)
    env = bind(program)
    run = execute(program.body, env, loop_budget=10_000)
    print(run.output)
"""

from __future__ import annotations

from ._binder import Binder, bind
from ._environment import Environment
from ._evaluator import Evaluator, evaluate, evaluate_condition
from ._executor import Executor, execute
from ._format import FormattedText, expand_escapes, format_output
from ._values import (
    ArrayIndexOutOfRange,
    DivisionByZero,
    LoopBudgetExceeded,
    OutputLimitExceeded,
    SimulationError,
    UndefinedVariable,
)

__all__ = [
    "ArrayIndexOutOfRange",
    "Binder",
    "DivisionByZero",
    "Environment",
    "Evaluator",
    "Executor",
    "FormattedText",
    "LoopBudgetExceeded",
    "OutputLimitExceeded",
    "SimulationError",
    "UndefinedVariable",
    "bind",
    "evaluate",
    "evaluate_condition",
    "execute",
    "expand_escapes",
    "format_output",
]
