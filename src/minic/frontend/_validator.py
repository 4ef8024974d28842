"""Structural validator: the gate every program passes before simulation.

Checks run in a fixed order and stop at the first failure, so a
response never carries more than one diagnostic:

1. ``#include <stdio.h>`` is present
2. ``int main()`` / ``int main(void)`` opens a body
3. ``main`` contains ``return <integer>;``
4. ``{`` and ``}`` counts match
5. ``(`` and ``)`` counts match

Comments and the insides of string/character literals are masked out
before any check, so ``printf("{")`` does not unbalance the braces.
"""

from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    diagnostic: str | None = None


_MASK_RE = re.compile(
    r"""//[^\n]*|/\*.*?\*/|"(?:\\.|[^\\"\n])*"|'(?:\\.|[^\\'\n])*'""",
    re.DOTALL,
)

_HEADER_RE = re.compile(r"#\s*include\s*<stdio\.h>")
_MAIN_RE = re.compile(r"\bint\s+main\s*\(\s*(?:void\s*)?\)\s*\{")
_RETURN_RE = re.compile(r"\breturn\s+-?\d+\s*;")


def _mask(source: str) -> str:
    """Blank out comments and literal contents, keeping newlines and quotes."""
    def _blank(m: re.Match) -> str:
        text = m.group()
        if text[0] in "\"'":
            inner = re.sub(r"[^\n]", " ", text[1:-1])
            return text[0] + inner + text[-1]
        return re.sub(r"[^\n]", " ", text)

    return _MASK_RE.sub(_blank, source)


def _error(title: str, expected_or_found: str, fix: str) -> ValidationResult:
    return ValidationResult(
        ok=False,
        diagnostic=f"Compilation Error: {title}\n\n{expected_or_found}\nFix: {fix}",
    )


def validate(source: str) -> ValidationResult:
    """Run the structural checks over raw *source* text."""
    text = _mask(source)

    if _HEADER_RE.search(text) is None:
        return _error(
            "Missing required header file.",
            "Expected: #include <stdio.h>\nFound: no #include <stdio.h> directive",
            "Add '#include <stdio.h>' at the top of your program.",
        )

    main = _MAIN_RE.search(text)
    if main is None:
        found = "a 'main' with an unsupported signature" if re.search(r"\bmain\s*\(", text) \
            else "no 'main' function"
        return _error(
            "Invalid or missing main function.",
            f"Expected: int main() {{\nFound: {found}",
            "Your program must have a main function with signature 'int main() {'",
        )

    if _RETURN_RE.search(text, main.end()) is None:
        return _error(
            "Missing return statement in main function.",
            "Expected: return 0;\nFound: no 'return <integer>;' inside main",
            "Add 'return 0;' at the end of your main function.",
        )

    open_braces = text.count("{")
    close_braces = text.count("}")
    if open_braces != close_braces:
        return _error(
            "Mismatched braces.",
            f"Expected: equal numbers of '{{' and '}}'\n"
            f"Found: {open_braces} opening braces '{{' and {close_braces} closing braces '}}'",
            "Check that every '{' has a matching '}'",
        )

    open_parens = text.count("(")
    close_parens = text.count(")")
    if open_parens != close_parens:
        return _error(
            "Mismatched parentheses.",
            f"Expected: equal numbers of '(' and ')'\n"
            f"Found: {open_parens} opening '(' and {close_parens} closing ')'",
            "Check that every '(' has a matching ')'",
        )

    return ValidationResult(ok=True)
