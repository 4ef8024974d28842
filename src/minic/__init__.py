"""minic — in-process execution engine for a teaching subset of C.

Entry point::

    from minic import run_program, judge

    result = run_program(source)
    if result.succeeded:
        passed = judge(result.output, expected)
    else:
        print(result.diagnostic)
"""

from __future__ import annotations

from minic.config import EngineConfig
from minic.engine import grade, run_exercise, run_program
from minic.judge import judge, normalize_output
from minic.model.exercise import Difficulty, Exercise, SubmissionRecord
from minic.model.result import ExecutionResult, RunStatus

__all__ = [
    "Difficulty",
    "EngineConfig",
    "Exercise",
    "ExecutionResult",
    "RunStatus",
    "SubmissionRecord",
    "grade",
    "judge",
    "normalize_output",
    "run_exercise",
    "run_program",
]
