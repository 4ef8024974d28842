"""Tests for the expression evaluator."""

import pytest

from conftest import make_env, parse_expr

from minic.simulate import (
    ArrayIndexOutOfRange,
    DivisionByZero,
    Evaluator,
    SimulationError,
    UndefinedVariable,
    evaluate,
    evaluate_condition,
)


def _eval(source, scalars=None, arrays=None):
    return evaluate(parse_expr(source), make_env(scalars, arrays))


# ---------------------------------------------------------------------------
# Arithmetic
# ---------------------------------------------------------------------------

class TestArithmetic:
    def test_precedence(self):
        assert _eval("2 + 3 * 4") == 14

    def test_parentheses(self):
        assert _eval("(2 + 3) * 4") == 20

    def test_variables(self):
        assert _eval("a + b", {"a": 5, "b": 3}) == 8

    @pytest.mark.parametrize("source,expected", [
        ("7 / 2", 3),
        ("-7 / 2", -3),
        ("7 / -2", -3),
        ("-7 / -2", 3),
        ("7 % 3", 1),
        ("-7 % 3", -1),
        ("7 % -3", 1),
    ])
    def test_division_truncates_toward_zero(self, source, expected):
        assert _eval(source) == expected

    def test_overflow_wraps(self):
        assert _eval("2147483647 + 1") == -2147483648
        assert _eval("x * 2", {"x": 2_000_000_000}) == -294967296

    def test_unary(self):
        assert _eval("-x", {"x": 4}) == -4
        assert _eval("+x", {"x": 4}) == 4
        assert _eval("!x", {"x": 4}) == 0
        assert _eval("!x", {"x": 0}) == 1

    def test_array_element(self):
        assert _eval("arr[i] * 2", {"i": 2}, {"arr": [1, 2, 3]}) == 6


# ---------------------------------------------------------------------------
# Comparison and logic
# ---------------------------------------------------------------------------

class TestComparison:
    @pytest.mark.parametrize("source,expected", [
        ("3 < 5", 1),
        ("5 < 3", 0),
        ("3 <= 3", 1),
        ("4 > 4", 0),
        ("4 >= 4", 1),
        ("2 == 2", 1),
        ("2 != 2", 0),
    ])
    def test_relational_yields_one_or_zero(self, source, expected):
        assert _eval(source) == expected

    def test_logical(self):
        assert _eval("1 && 5") == 1
        assert _eval("0 || 0") == 0
        assert _eval("0 || 7") == 1

    def test_and_short_circuits(self):
        # The right side would index out of range if evaluated
        assert _eval("i < 3 && arr[i] > 0", {"i": 3}, {"arr": [1, 2, 3]}) == 0

    def test_or_short_circuits(self):
        assert _eval("1 || 1 / 0") == 1

    def test_condition(self):
        env = make_env({"x": 3})
        assert evaluate_condition(parse_expr("x"), env) is True
        assert evaluate_condition(parse_expr("x - 3"), env) is False


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class TestErrors:
    def test_division_by_zero(self):
        with pytest.raises(DivisionByZero, match="division by zero"):
            _eval("1 / x", {"x": 0})

    def test_modulo_by_zero(self):
        with pytest.raises(DivisionByZero, match="modulo by zero"):
            _eval("5 % 0")

    def test_undefined_variable(self):
        with pytest.raises(UndefinedVariable):
            _eval("missing + 1")

    def test_index_out_of_range(self):
        with pytest.raises(ArrayIndexOutOfRange) as exc_info:
            _eval("arr[3]", arrays={"arr": [1, 2, 3]})
        assert exc_info.value.index == 3
        assert exc_info.value.length == 3

    def test_negative_index(self):
        with pytest.raises(ArrayIndexOutOfRange):
            _eval("arr[-1]", arrays={"arr": [1]})

    def test_string_in_integer_context(self):
        with pytest.raises(SimulationError, match="string literal"):
            _eval('"abc" + 1')

    def test_error_carries_line(self):
        evaluator = Evaluator(make_env({"x": 0}))
        with pytest.raises(DivisionByZero) as exc_info:
            evaluator.evaluate(parse_expr("10 / x"), line=7)
        assert exc_info.value.line == 7


class TestPurity:
    def test_environment_untouched(self):
        env = make_env({"a": 1}, {"arr": [1, 2]})
        before = env.snapshot()
        evaluate(parse_expr("a * 10 + arr[1]"), env)
        assert env.snapshot() == before
