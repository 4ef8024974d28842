"""Exercise and submission records exchanged with the platform layer.

The engine never stores these; it reads an ``Exercise`` and produces a
``SubmissionRecord`` for the caller to persist.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Exercise(BaseModel):
    id: str
    title: str
    description: str = ""
    starter_code: str = ""
    expected_output: str
    difficulty: Difficulty = Difficulty.EASY
    tags: list[str] = []


class SubmissionRecord(BaseModel):
    """What the platform persists for one graded submission."""

    model_config = ConfigDict(frozen=True)

    exercise_id: str
    code: str
    output: str
    passed: bool
    diagnostic: str | None = None
