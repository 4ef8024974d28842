"""Engine configuration.

Deployments tune the run limits either by constructing ``EngineConfig``
directly or through environment variables::

    MINIC_LOOP_BUDGET=50000 MINIC_MAX_OUTPUT_CHARS=20000
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field

_ENV_PREFIX = "MINIC_"


class EngineConfig(BaseModel):
    """Limits applied to every run."""

    model_config = ConfigDict(frozen=True)

    loop_budget: int = Field(default=100_000, gt=0)
    """Maximum loop iterations across one run"""

    max_output_chars: int = Field(default=1_000_000, gt=0)
    """Maximum characters a run may print"""

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> EngineConfig:
        """Build a config from ``MINIC_*`` variables; unset ones keep defaults.

        Raises ``pydantic.ValidationError`` for non-integer or non-positive
        values.
        """
        environ = os.environ if environ is None else environ
        values: dict[str, str] = {}
        for name in cls.model_fields:
            key = f"{_ENV_PREFIX}{name.upper()}"
            if key in environ:
                values[name] = environ[key]
        return cls.model_validate(values)
