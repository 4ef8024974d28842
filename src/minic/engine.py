"""Run entry points: validate, parse, bind, execute and judge.

``run_program`` never raises.  Every failure comes back as an
``ExecutionResult`` whose ``status`` says which stage failed and whose
``diagnostic`` carries the message.  Output is only returned from runs
that complete: a runtime error discards whatever was printed before it.
"""

from __future__ import annotations

import logging
import time

from minic.config import EngineConfig
from minic.frontend import CompileError, parse_program, validate
from minic.judge import judge
from minic.model.exercise import Exercise, SubmissionRecord
from minic.model.result import ExecutionResult, RunStatus
from minic.simulate import SimulationError, bind, execute

logger = logging.getLogger(__name__)


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000.0


def run_program(source: str, *, config: EngineConfig | None = None) -> ExecutionResult:
    """Validate and simulate *source*, returning a fresh ``ExecutionResult``."""
    config = config or EngineConfig()
    start = time.perf_counter()

    check = validate(source)
    if not check.ok:
        logger.debug("validation failed: %s", check.diagnostic.splitlines()[0])
        return ExecutionResult(
            diagnostic=check.diagnostic,
            status=RunStatus.COMPILE_ERROR,
            elapsed_ms=_elapsed_ms(start),
        )

    try:
        program = parse_program(source)
        logger.debug("parsed %d top-level statement(s)", len(program.body))
        env = bind(program)
        run = execute(
            program.body,
            env,
            loop_budget=config.loop_budget,
            max_output_chars=config.max_output_chars,
        )
    except CompileError as exc:
        return ExecutionResult(
            diagnostic=f"Compilation Error: {exc}",
            status=RunStatus.COMPILE_ERROR,
            elapsed_ms=_elapsed_ms(start),
        )
    except SimulationError as exc:
        return ExecutionResult(
            diagnostic=f"Runtime Error ({type(exc).__name__}): {exc}",
            status=RunStatus.RUNTIME_ERROR,
            elapsed_ms=_elapsed_ms(start),
        )
    except Exception as exc:
        logger.exception("internal error while running program")
        return ExecutionResult(
            diagnostic=f"Internal Error: {type(exc).__name__}: {exc}",
            status=RunStatus.INTERNAL_ERROR,
            elapsed_ms=_elapsed_ms(start),
        )

    elapsed = _elapsed_ms(start)
    logger.debug(
        "run finished in %.3f ms (%d loop iteration(s), %d warning(s))",
        elapsed, run.iterations, len(run.warnings),
    )
    diagnostic = None
    if run.warnings:
        diagnostic = "Format Warning: " + "\nFormat Warning: ".join(run.warnings)
    return ExecutionResult(
        output=run.output,
        diagnostic=diagnostic,
        elapsed_ms=elapsed,
        status=RunStatus.OK,
        warnings=tuple(run.warnings),
        exit_code=run.exit_code,
    )


def run_exercise(
    source: str,
    expected_output: str,
    *,
    config: EngineConfig | None = None,
) -> tuple[ExecutionResult, bool]:
    """Run *source* and judge it; a run that did not succeed never passes."""
    result = run_program(source, config=config)
    passed = result.succeeded and judge(result.output, expected_output)
    return result, passed


def grade(
    exercise: Exercise,
    source: str,
    *,
    config: EngineConfig | None = None,
) -> SubmissionRecord:
    """Run a submission for *exercise* and build the record to persist."""
    result, passed = run_exercise(source, exercise.expected_output, config=config)
    logger.info("exercise %s graded: passed=%s", exercise.id, passed)
    return SubmissionRecord(
        exercise_id=exercise.id,
        code=source,
        output=result.output,
        passed=passed,
        diagnostic=result.diagnostic,
    )
