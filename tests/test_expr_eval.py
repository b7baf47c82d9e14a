"""
Tests for expression compilation and evaluation.
"""

import math

import pytest
from paraprim.expr import (
    compile_expression, evaluate, clear_cache, CompileError,
    get_builtin_registry, is_reserved_name,
)


class TestArithmetic:
    """Numeric results."""

    @pytest.mark.parametrize("text,expected", [
        ("1 + 2 * 3", 7.0),
        ("2^3^2", 512.0),
        ("2**3", 8.0),
        ("-2^2", -4.0),
        ("7 % 4", 3.0),
        ("10 / 4", 2.5),
        ("pi", math.pi),
        ("e", math.e),
    ])
    def test_constant_expressions(self, text, expected):
        """Literal expressions evaluate without variables."""
        assert evaluate(text) == pytest.approx(expected)

    def test_variables_by_position(self):
        """Values are bound in variable order."""
        expr = compile_expression("a - b", ["a", "b"])
        assert expr.evaluate([5.0, 2.0]) == 3.0
        assert expr.evaluate([2.0, 5.0]) == -3.0

    def test_later_variable_shadows_earlier(self):
        """A repeated name resolves to its last position."""
        expr = compile_expression("x", ["x", "y", "x"])
        assert expr.evaluate([1.0, 2.0, 3.0]) == 3.0

    def test_builtin_functions(self):
        """A sample of the built-in functions."""
        assert evaluate("sqrt(16)") == 4.0
        assert evaluate("atan2(1, 0)") == pytest.approx(math.pi / 2)
        assert evaluate("min(3, -1)") == -1.0
        assert evaluate("max(3, -1)") == 3.0
        assert evaluate("int(2.5)") == 3.0
        assert evaluate("int(-2.5)") == -3.0
        assert evaluate("floor(-0.5)") == -1.0
        assert evaluate("abs(-4)") == 4.0

    def test_wrong_value_count(self):
        """A value vector of the wrong length raises ValueError."""
        expr = compile_expression("a + b", ["a", "b"])
        with pytest.raises(ValueError):
            expr.evaluate([1.0])


class TestLogic:
    """Comparisons and logical operators yield 1 or 0."""

    def test_unit_disk(self):
        """x^2+y^2<=1 is exactly 1 inside and 0 outside."""
        expr = compile_expression("x^2+y^2<=1", ["x", "y"])
        assert expr.evaluate([0.5, 0.5]) == 1.0
        assert expr.evaluate([1.0, 0.0]) == 1.0
        assert expr.evaluate([1.0, 1.0]) == 0.0

    def test_equality_spellings(self):
        """= and == both mean equality."""
        assert evaluate("2 = 2") == 1.0
        assert evaluate("2 == 3") == 0.0
        assert evaluate("2 != 3") == 1.0

    def test_and_or_not(self):
        """Logical operators."""
        assert evaluate("(1 < 2) & (3 < 4)") == 1.0
        assert evaluate("(1 < 2) & (3 > 4)") == 0.0
        assert evaluate("(1 > 2) | (3 < 4)") == 1.0
        assert evaluate("!(1 < 2)") == 0.0
        assert evaluate("1 < 2 and not 0") == 1.0

    def test_if_is_lazy(self):
        """The untaken branch of if() is never evaluated."""
        expr = compile_expression("if(x > 0, 1 / x, 0 - 1)", ["x"])
        assert expr.evaluate([4.0]) == 0.25
        assert expr.evaluate([0.0]) == -1.0


class TestDomainFaults:
    """Numeric faults produce nan or infinity, never exceptions."""

    def test_sqrt_of_negative(self):
        """sqrt(-1) is nan."""
        assert math.isnan(evaluate("sqrt(-1)"))

    def test_log_of_zero(self):
        """log(0) is nan."""
        assert math.isnan(evaluate("log(0)"))

    def test_division_by_zero(self):
        """Division by zero is signed infinity, 0/0 is nan."""
        assert evaluate("1 / 0") == math.inf
        assert evaluate("-1 / 0") == -math.inf
        assert math.isnan(evaluate("0 / 0"))

    def test_overflow(self):
        """Overflow gives infinity."""
        assert evaluate("exp(1000)") == math.inf
        assert evaluate("10^400") == math.inf

    def test_overflow_keeps_sign(self):
        """A negative base to an odd power overflows to -inf."""
        assert evaluate("(-10)^401") == -math.inf
        assert evaluate("(-10)^400") == math.inf
        assert evaluate("pow(-10, 401)") == -math.inf
        assert evaluate("sinh(-1000)") == -math.inf
        assert evaluate("sinh(1000)") == math.inf

    def test_zero_to_negative_odd_power(self):
        """-0 to a negative odd power is -inf."""
        assert evaluate("0^(-1)") == math.inf
        assert evaluate("(0 * -1)^(-3)") == -math.inf

    def test_rounding_infinity(self):
        """floor, ceil and int pass infinities through."""
        assert evaluate("floor(-1e308*10)") == -math.inf
        assert evaluate("ceil(1e308*10)") == math.inf
        assert evaluate("int(-1e308*10)") == -math.inf
        assert evaluate("floor(1/0)") == math.inf

    def test_modulo_of_infinity(self):
        """inf % b is nan."""
        assert math.isnan(evaluate("(1/0) % 2"))

    def test_fractional_power_of_negative(self):
        """A complex result is nan."""
        assert math.isnan(evaluate("(-8)^(1/3)"))


class TestCompileErrors:
    """Names and calls are checked at compile time."""

    def test_undefined_identifier(self):
        """Unknown names are E201 with a hint."""
        with pytest.raises(CompileError) as exc:
            compile_expression("a + q", ["a"])
        assert exc.value.code == "E201"
        assert "known variables: a" in exc.value.diagnostic.hints[0]

    def test_unknown_function(self):
        """Unknown functions are E202."""
        with pytest.raises(CompileError) as exc:
            compile_expression("frobnicate(1)")
        assert exc.value.code == "E202"

    def test_wrong_arity(self):
        """Argument count is checked."""
        with pytest.raises(CompileError) as exc:
            compile_expression("atan2(1)")
        assert exc.value.code == "E203"

    def test_variable_called_as_function(self):
        """A variable followed by '(' is E204."""
        with pytest.raises(CompileError) as exc:
            compile_expression("r(2)", ["r"])
        assert exc.value.code == "E204"


class TestCache:
    """Compiled expression caching."""

    def test_same_object_until_cleared(self):
        """Identical requests share a compiled expression."""
        first = compile_expression("a * 2", ["a"])
        assert compile_expression("a * 2", ("a",)) is first
        clear_cache()
        assert compile_expression("a * 2", ["a"]) is not first

    def test_reserved_names(self):
        """Constants and builtins are reserved."""
        assert is_reserved_name("pi")
        assert is_reserved_name("sin")
        assert not is_reserved_name("width")
        assert "if" in get_builtin_registry()
