"""Shared test helpers for the minic test suite."""

import textwrap

from minic.frontend import Parser, parse_program, tokenize
from minic.model.program import Program
from minic.simulate import Environment, Executor, bind


def wrap_main(body: str, prelude: str = "") -> str:
    """Wrap statements in a complete, valid C program."""
    body = textwrap.indent(textwrap.dedent(body).strip("\n"), "    ")
    return (
        "#include <stdio.h>\n"
        f"{prelude}"
        "int main() {\n"
        f"{body}\n"
        "    return 0;\n"
        "}\n"
    )


def parse_stmts(body: str) -> list:
    """Parse statements (as if inside main) into IR, dropping the final return."""
    program = parse_program(wrap_main(body))
    return program.body[:-1]


def parse_expr(source: str):
    """Parse a single C expression string to an IR expression."""
    return Parser(tokenize(source)).parse_expression()


def run_body(body: str, loop_budget: int = 10_000) -> Executor:
    """Parse, bind and execute statements; return the finished executor."""
    program = parse_program(wrap_main(body))
    env = bind(program)
    executor = Executor(env, loop_budget=loop_budget)
    executor.execute(program.body)
    return executor


def make_program(stmts=None) -> Program:
    """Build a Program from IR statements."""
    return Program(headers=["stdio.h"], body=stmts or [])


def make_env(scalars=None, arrays=None) -> Environment:
    """Shorthand for an Environment with copied contents."""
    env = Environment()
    for name, value in (scalars or {}).items():
        env.declare_scalar(name, value)
    for name, values in (arrays or {}).items():
        env.declare_array(name, values)
    return env
