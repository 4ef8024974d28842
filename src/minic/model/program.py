"""Top-level program node for the C-subset IR."""

from __future__ import annotations

from pydantic import BaseModel

from .statements import Statement


class Program(BaseModel):
    """A parsed translation unit.

    *headers* lists the ``#include`` targets in source order (e.g.
    ``"stdio.h"``).  *body* is the file-scope declarations followed by the
    statements of ``main``.
    """

    headers: list[str] = []
    body: list[Statement] = []
