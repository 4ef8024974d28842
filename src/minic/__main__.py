"""Command-line runner.

Usage
-----
    python -m minic program.c
    python -m minic program.c --expected "Sum: 8"
    python -m minic program.c --expected-file answer.txt --loop-budget 5000 -v

Exit codes
----------
    0   the run succeeded (and passed, when an expected output was given)
    1   compile or runtime error, or the output did not match
    2   usage or I/O problem
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError

from minic.config import EngineConfig
from minic.engine import run_program
from minic.judge import judge

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2

_log = logging.getLogger("minic")
_cli_handler: logging.Handler | None = None


class InputError(Exception):
    """A source or expected-output file could not be read."""


def _configure_logging(verbosity: int) -> None:
    """Set up the ``minic`` logger: 0 → WARNING, 1 → INFO, 2+ → DEBUG.

    Replaces the handler installed by an earlier call.
    """
    global _cli_handler
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    if _cli_handler is not None:
        _log.removeHandler(_cli_handler)
    _cli_handler = handler
    _log.setLevel(level)
    _log.addHandler(handler)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="minic",
        description="Run a C-subset program in-process and optionally judge its output.",
    )
    parser.add_argument("source", help="C source file, or '-' for stdin")
    expected = parser.add_mutually_exclusive_group()
    expected.add_argument("--expected", help="expected output text")
    expected.add_argument("--expected-file", help="file holding the expected output")
    parser.add_argument(
        "--loop-budget", type=int, default=None,
        help="maximum loop iterations per run (default: MINIC_LOOP_BUDGET or 100000)",
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0,
        help="increase log verbosity (-v info, -vv debug)",
    )
    return parser


def _read_text(raw: str, label: str) -> str:
    if raw == "-":
        return sys.stdin.read()
    path = Path(raw).expanduser()
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise InputError(f"cannot read {label} {path}: {exc}") from exc


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and return the exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        config = EngineConfig.from_env()
        if args.loop_budget is not None:
            config = EngineConfig(
                loop_budget=args.loop_budget, max_output_chars=config.max_output_chars,
            )
    except ValidationError as exc:
        _log.error("invalid configuration: %s", exc)
        return EXIT_USAGE

    try:
        source = _read_text(args.source, "source file")
        expected = args.expected
        if args.expected_file is not None:
            expected = _read_text(args.expected_file, "expected-output file")
    except InputError as exc:
        _log.error("%s", exc)
        return EXIT_USAGE

    result = run_program(source, config=config)
    sys.stdout.write(result.output)
    if result.output and not result.output.endswith("\n"):
        sys.stdout.write("\n")
    if result.diagnostic:
        print(result.diagnostic, file=sys.stderr)
    _log.info("finished in %.3f ms with status %s", result.elapsed_ms, result.status.value)

    if not result.succeeded:
        return EXIT_FAILED
    if expected is not None:
        passed = judge(result.output, expected)
        print("PASSED" if passed else "FAILED", file=sys.stderr)
        return EXIT_OK if passed else EXIT_FAILED
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
