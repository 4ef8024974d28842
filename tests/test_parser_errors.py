"""Tests for constructs the parser rejects."""

import pytest

from conftest import wrap_main

from minic.frontend import CompileError, parse_program


def _reject(body, prelude=""):
    with pytest.raises(CompileError) as exc_info:
        parse_program(wrap_main(body, prelude=prelude))
    return exc_info.value


class TestUnsupportedTypes:
    @pytest.mark.parametrize("typ", ["float", "double", "char", "long"])
    def test_non_int_types(self, typ):
        err = _reject(f"{typ} x = 1;")
        assert f"Type '{typ}' is not supported" in err.message

    def test_pointer(self):
        assert "Pointers" in _reject("int *p;").message

    def test_struct(self):
        assert "structs" in _reject("struct point p;").message

    def test_switch(self):
        assert "switch" in _reject("switch (1) { }").message


class TestFunctions:
    def test_other_function_call(self):
        err = _reject("puts(\"hi\");")
        assert "Unsupported function 'puts'" in err.message

    def test_printf_needs_literal_format(self):
        err = _reject("int x = 1; printf(x);")
        assert "string literal format" in err.message

    def test_second_function(self):
        source = wrap_main("") + "int helper() {\n return 1;\n}\n"
        with pytest.raises(CompileError, match="single 'main'"):
            parse_program(source)

    def test_function_before_main(self):
        source = (
            "#include <stdio.h>\n"
            "int helper() {\n return 1;\n}\n"
            "int main() {\n return 0;\n}\n"
        )
        with pytest.raises(CompileError, match="single 'main'"):
            parse_program(source)


class TestDirectives:
    def test_define_rejected(self):
        with pytest.raises(CompileError, match="directive not supported"):
            parse_program("#include <stdio.h>\n#define N 3\nint main() {\n return 0;\n}\n")


class TestLoops:
    def test_break_outside_loop(self):
        assert "'break' outside of a loop" in _reject("break;").message

    def test_continue_outside_loop(self):
        assert "'continue' outside of a loop" in _reject("continue;").message

    def test_break_in_if_outside_loop(self):
        assert "outside of a loop" in _reject("if (1) { break; }").message

    def test_for_with_two_declarations(self):
        err = _reject("for (int i = 0, j = 0; i < 3; i++) { }")
        assert "Only one variable" in err.message


class TestArrays:
    def test_too_many_initializers(self):
        assert "Too many initializers" in _reject("int a[2] = {1, 2, 3};").message

    def test_non_literal_element(self):
        err = _reject("int x = 1; int a[] = {x};")
        assert "must be integer literals" in err.message

    def test_missing_size_and_values(self):
        assert "needs a size" in _reject("int a[];").message

    def test_zero_size(self):
        assert "must be positive" in _reject("int a[0];").message


class TestSyntax:
    def test_missing_semicolon(self):
        err = _reject("int x = 1\nint y = 2;")
        assert "Expected ';'" in err.message
        assert err.line == 4

    def test_expression_statement_without_assignment(self):
        assert "Expected an assignment" in _reject("int x = 1; x + 1;").message

    def test_else_without_if(self):
        assert "'else' without a matching 'if'" in _reject("else { }").message

    def test_return_string(self):
        assert "must return an integer" in _reject('return "zero";').message

    def test_declaration_as_for_step(self):
        assert "Declarations are not allowed" in _reject(
            "for (int i = 0; i < 3; int j) { }"
        ).message

    def test_error_str_includes_line(self):
        err = _reject("float f;")
        assert str(err).endswith("(line 3)")
