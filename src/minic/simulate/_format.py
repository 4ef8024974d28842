"""``printf`` rendering.

Splits a format string into literal text and conversion specifiers,
substitutes arguments left to right and expands escape sequences in the
literal parts only.  Problems that C would accept at runtime (a missing
argument, a surplus argument, a conversion the subset does not model)
are reported as warnings and never abort the run.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from minic.model.expressions import Expression, StringLiteral

from ._environment import Environment
from ._evaluator import Evaluator
from ._values import to_unsigned


@dataclass
class FormattedText:
    text: str
    warnings: list[str] = field(default_factory=list)


_SPEC_RE = re.compile(
    r"%(?P<flags>[-+ 0#]*)(?P<width>\d+)?(?:\.(?P<precision>\d*))?"
    r"(?P<length>hh|h|ll|l|z)?(?P<conv>[A-Za-z%])"
)

_ESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "\\": "\\",
    '"': '"',
    "'": "'",
    "0": "\0",
}

_INTEGER_CONVERSIONS = frozenset("diuoxX")
_SUPPORTED_CONVERSIONS = _INTEGER_CONVERSIONS | {"s", "c"}


def expand_escapes(text: str) -> str:
    """Expand ``\\n``, ``\\t``, ``\\r``, ``\\\\``, quotes and ``\\0``.

    Unknown escapes are kept as written.
    """
    return _ESCAPE_RE.sub(lambda m: _ESCAPES.get(m.group(1), m.group()), text)


def _spec_pattern(m: re.Match, conv: str) -> str:
    """Rebuild a Python %-format pattern from a C specifier match."""
    precision = m.group("precision")
    prec = f".{precision or 0}" if precision is not None else ""
    return f"%{m.group('flags')}{m.group('width') or ''}{prec}{conv}"


def _render_integer(m: re.Match, value: int) -> str:
    conv = m.group("conv")
    if conv in ("d", "i"):
        return _spec_pattern(m, "d") % value
    if conv == "u":
        return _spec_pattern(m, "d") % to_unsigned(value)
    if conv == "o":
        # C's '#' prefixes a single 0 where Python's would add '0o'
        text = f"{to_unsigned(value):o}"
        if "#" in m.group("flags") and not text.startswith("0"):
            text = "0" + text
        return _pad_text(m, text, zero_fill=True)
    pattern = _spec_pattern(m, conv)
    if to_unsigned(value) == 0:
        # C's '#' adds no 0x prefix to zero
        pattern = pattern.replace("#", "")
    return pattern % to_unsigned(value)


def _pad_text(m: re.Match, text: str, zero_fill: bool = False) -> str:
    flags = m.group("flags")
    width = m.group("width")
    precision = m.group("precision")
    if precision is not None and m.group("conv") == "s":
        text = text[: int(precision or 0)]
    if not width:
        return text
    if "-" in flags:
        return text.ljust(int(width))
    if zero_fill and "0" in flags:
        return text.rjust(int(width), "0")
    return text.rjust(int(width))


def format_output(
    fmt: str,
    args: list[Expression],
    env: Environment,
    *,
    evaluator: Evaluator | None = None,
    line: int | None = None,
) -> FormattedText:
    """Render a ``printf`` call.

    Parameters
    ----------
    fmt
        The format string as written between the quotes (escapes unexpanded).
    args
        The argument expressions, consumed one per specifier.
    env
        Environment the arguments are evaluated against.
    evaluator
        Reuse an existing evaluator (the executor passes its own).
    line
        Source line used in warnings and errors.
    """
    evaluator = evaluator or Evaluator(env)
    warnings: list[str] = []
    pieces: list[str] = []
    arg_index = 0
    pos = 0

    for m in _SPEC_RE.finditer(fmt):
        pieces.append(expand_escapes(fmt[pos:m.start()]))
        pos = m.end()
        spec = m.group()
        conv = m.group("conv")

        if conv == "%":
            pieces.append("%")
            continue

        if arg_index >= len(args):
            warnings.append(f"format specifier '{spec}' has no matching argument")
            pieces.append(spec)
            continue

        arg = args[arg_index]
        arg_index += 1

        if conv not in _SUPPORTED_CONVERSIONS:
            warnings.append(f"format specifier '{spec}' is not supported")
            pieces.append(spec)
            continue

        if conv == "s":
            if isinstance(arg, StringLiteral):
                pieces.append(_pad_text(m, arg.value))
            else:
                warnings.append(
                    f"argument {arg_index} for '{spec}' is not a string literal"
                )
                pieces.append(_pad_text(m, str(evaluator.evaluate(arg, line))))
            continue

        if isinstance(arg, StringLiteral):
            if conv == "c" and arg.value:
                pieces.append(_pad_text(m, arg.value[0]))
            else:
                warnings.append(f"argument {arg_index} for '{spec}' is a string literal")
                pieces.append(spec)
            continue

        value = evaluator.evaluate(arg, line)
        if conv == "c":
            pieces.append(_pad_text(m, chr(to_unsigned(value) & 0xFF)))
        else:
            pieces.append(_render_integer(m, value))

    pieces.append(expand_escapes(fmt[pos:]))

    if arg_index < len(args):
        surplus = len(args) - arg_index
        warnings.append(f"{surplus} argument(s) not used by the format string")

    return FormattedText(text="".join(pieces), warnings=warnings)
