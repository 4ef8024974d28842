"""Tests for the declaration binder."""

import pytest

from conftest import make_program, wrap_main

from minic.frontend import parse_program
from minic.model.expressions import BinaryExpr, BinaryOp, IntegerLiteral, VariableRef
from minic.model.statements import ArrayDeclaration, Declaration
from minic.simulate import Binder, Environment, SimulationError, UndefinedVariable, bind
from minic.simulate._binder import iter_references


def _bind_body(body, prelude=""):
    return bind(parse_program(wrap_main(body, prelude=prelude)))


# ---------------------------------------------------------------------------
# Binding
# ---------------------------------------------------------------------------

class TestBinding:
    def test_literal_initializers(self):
        env = _bind_body("int a = 5; int b = 3;")
        assert env.snapshot() == {"a": 5, "b": 3}

    def test_uninitialized_is_zero(self):
        env = _bind_body("int a;")
        assert env.scalars["a"] == 0

    def test_initializer_uses_earlier_constant(self):
        env = _bind_body("int n = 5; int result = n * 2 + 1;")
        assert env.scalars["result"] == 11

    def test_array_zero_padded(self):
        env = _bind_body("int arr[5] = {1, 2};")
        assert env.arrays["arr"] == [1, 2, 0, 0, 0]

    def test_array_from_initializer(self):
        env = _bind_body("int arr[] = {1, 2, 3, 4, 5};")
        assert env.arrays["arr"] == [1, 2, 3, 4, 5]

    def test_runtime_dependent_initializer_binds_zero(self):
        env = _bind_body("int a = 1; a = 4; int b = a;")
        assert env.scalars["b"] == 0

    def test_array_element_initializer_binds_zero(self):
        env = _bind_body("int arr[] = {7}; int first = arr[0];")
        assert env.scalars["first"] == 0

    def test_nested_declarations_bound(self):
        env = _bind_body("for (int i = 0; i < 3; i++) { int sq = i * i; }")
        assert "i" in env
        assert "sq" in env
        assert "i" in env.declared
        assert "sq" not in env.declared

    def test_file_scope_declaration(self):
        env = _bind_body("int x = limit;", prelude="int limit = 10;\n")
        assert env.scalars["x"] == 10

    def test_populates_given_environment(self):
        env = Environment()
        result = bind(parse_program(wrap_main("int a = 1;")), env)
        assert result is env
        assert env.scalars == {"a": 1}

    def test_accepts_source_text(self):
        env = bind(wrap_main("int a = 2;"))
        assert env.scalars["a"] == 2

    def test_ir_program(self):
        program = make_program([
            Declaration(name="a", value=IntegerLiteral(value=6)),
            Declaration(
                name="b",
                value=BinaryExpr(
                    op=BinaryOp.DIV,
                    left=VariableRef(name="a"),
                    right=IntegerLiteral(value=4),
                ),
            ),
            ArrayDeclaration(name="xs", size=2),
        ])
        env = Binder().bind(program)
        assert env.snapshot() == {"a": 6, "b": 1, "xs": [0, 0]}

    def test_idempotent(self):
        program = parse_program(wrap_main("int a = 1; int b = a + 1; int c[] = {1, 2};"))
        assert bind(program).snapshot() == bind(program).snapshot()

    def test_overflowing_initializer_wraps(self):
        env = _bind_body("int big = 2147483647 + 1;")
        assert env.scalars["big"] == -2147483648


# ---------------------------------------------------------------------------
# Reference checks
# ---------------------------------------------------------------------------

class TestReferences:
    def test_undeclared_in_initializer(self):
        with pytest.raises(UndefinedVariable, match="'y' is not declared"):
            _bind_body("int x = y + 1;")

    def test_forward_reference(self):
        with pytest.raises(UndefinedVariable) as exc_info:
            _bind_body("int a = b;\nint b = 1;")
        assert exc_info.value.name == "b"
        assert exc_info.value.line == 3

    def test_undeclared_in_printf(self):
        with pytest.raises(UndefinedVariable, match="'total'"):
            _bind_body('printf("%d", total);')

    def test_undeclared_assignment_target(self):
        with pytest.raises(UndefinedVariable, match="'z'"):
            _bind_body("z = 1;")

    def test_undeclared_in_loop_condition(self):
        with pytest.raises(UndefinedVariable, match="'n'"):
            _bind_body("int i = 0; while (i < n) { i++; }")

    def test_indexing_a_scalar(self):
        with pytest.raises(SimulationError, match="not an array"):
            _bind_body("int x = 1; int y = x[0];")

    def test_array_used_as_value(self):
        with pytest.raises(SimulationError, match="used as a value"):
            _bind_body("int arr[] = {1}; int y = arr;")

    def test_nested_declaration_is_bound_but_not_reached(self):
        env = _bind_body("if (0) { int t = 2; } int u = 0; u = t;")
        assert env.scalars["t"] == 0
        assert "t" not in env.declared
        with pytest.raises(UndefinedVariable, match="never executed"):
            env.get("t")


class TestIterReferences:
    def test_walks_all_names(self):
        expr = BinaryExpr(
            op=BinaryOp.ADD,
            left=VariableRef(name="a"),
            right=BinaryExpr(
                op=BinaryOp.MUL,
                left=VariableRef(name="b"),
                right=IntegerLiteral(value=2),
            ),
        )
        assert list(iter_references(expr)) == [("a", False), ("b", False)]

    def test_literal_has_no_references(self):
        assert list(iter_references(IntegerLiteral(value=1))) == []
