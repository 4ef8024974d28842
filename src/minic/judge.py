"""Output judge: decides whether produced output matches the expected text.

One normalization rule is applied to both sides:

- ``\\r\\n`` and ``\\r`` become ``\\n``
- runs of spaces/tabs inside a line collapse to a single space
- each line is stripped, then the whole text is stripped

Line breaks stay significant and the comparison is case-sensitive, so
``"Sum: 8"`` and ``"sum: 8"`` differ while a trailing newline does not
matter.
"""

from __future__ import annotations

import re

_INLINE_WS_RE = re.compile(r"[^\S\n]+")


def normalize_output(text: str) -> str:
    """Apply the judge's normalization to *text*."""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    lines = [_INLINE_WS_RE.sub(" ", line).strip() for line in text.split("\n")]
    return "\n".join(lines).strip()


def judge(actual: str, expected: str) -> bool:
    """Return True when *actual* matches *expected* after normalization."""
    return normalize_output(actual) == normalize_output(expected)
