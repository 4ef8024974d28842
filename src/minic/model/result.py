"""Run results handed back to the caller."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class RunStatus(str, Enum):
    OK = "ok"
    COMPILE_ERROR = "compile_error"
    RUNTIME_ERROR = "runtime_error"
    INTERNAL_ERROR = "internal_error"


class ExecutionResult(BaseModel):
    """Outcome of a single run.

    *output* is empty whenever *status* is not ``OK``: a run either
    completes or reports one error.  *diagnostic* carries the error text,
    or the formatting warnings of a successful run.
    """

    model_config = ConfigDict(frozen=True)

    output: str = ""
    diagnostic: str | None = None
    elapsed_ms: float = 0.0
    status: RunStatus = RunStatus.OK
    warnings: tuple[str, ...] = ()
    exit_code: int | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == RunStatus.OK
