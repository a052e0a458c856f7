#!/usr/bin/env python3
"""
Tests for the expression sub-language: precedence, typing rules and errors.
"""

import pytest
from tclish.expr import evaluate, evaluate_bool, evaluate_value
from tclish.expr import values as ev
from tclish.runtime.values import String
from tclish.shared.errors import (
    CastError,
    DivisionByZeroError,
    TclSyntaxError,
    TclTypeError,
    UnsupportedOperationError,
)


class TestArithmetic:
    """Integer and real arithmetic"""

    @pytest.mark.parametrize("text,expected", [
        ("1 + 2 * 3", "7"),
        ("(1 + 2) * 3", "9"),
        ("10 - 4 - 3", "3"),
        ("2 ** 3 ** 2", "512"),
        ("-2 ** 2", "4"),
        ("7 / 2", "3"),
        ("-7 / 2", "-3"),
        ("-7 % 2", "-1"),
        ("7.0 / 2", "3.5"),
        ("1 + 0.5", "1.5"),
        ("0.1 + 0.2", "0.30000000000000004"),
        ("0x10 + 010", "24"),
        ("0b101 + 0o7", "12"),
        ("2 ** -1", "0"),
        ("2.0 ** -1", "0.5"),
    ])
    def test_values(self, interp, text, expected):
        assert str(evaluate_value(text, interp)) == expected

    def test_integer_wraps_at_64_bits(self, interp):
        assert str(evaluate_value("9223372036854775807 + 1", interp)) == "-9223372036854775808"

    def test_real_modulo_is_fmod(self, interp):
        assert str(evaluate_value("-7.5 % 2", interp)) == "-1.5"

    @pytest.mark.parametrize("a,b", [
        (7, 2), (-7, 2), (7, -2), (-7, -2), (0, 5), (100, 7), (-9223372036854775807, 3),
    ])
    def test_division_identity(self, a, b):
        left, right = ev.wrap(a), ev.wrap(b)
        rebuilt = ev.add(ev.multiply(ev.divide(left, right), right), ev.modulo(left, right))
        assert rebuilt == left

    @pytest.mark.parametrize("text", ["1 / 0", "1 % 0", "1.0 / 0", "1 / 0.0", "0 ** -1"])
    def test_division_by_zero(self, interp, text):
        with pytest.raises(DivisionByZeroError):
            evaluate(text, interp)

    def test_result_variants(self, interp):
        assert isinstance(evaluate("1 + 1", interp), ev.Integer)
        assert isinstance(evaluate("1 + 1.0", interp), ev.Real)
        assert isinstance(evaluate("1 < 2", interp), ev.Boolean)


class TestBitwise:
    """Bitwise and shift operators"""

    @pytest.mark.parametrize("text,expected", [
        ("1 << 3", "8"),
        ("256 >> 4", "16"),
        ("~0", "-1"),
        ("5 ^ 3", "6"),
        ("6 & 3", "2"),
        ("6 | 3", "7"),
        ("1 | 2 ^ 3 & 4", "3"),
    ])
    def test_values(self, interp, text, expected):
        assert str(evaluate_value(text, interp)) == expected

    @pytest.mark.parametrize("text", ["1.5 & 1", "1 << 2.0", "~1.0", "true | 1"])
    def test_integers_only(self, interp, text):
        with pytest.raises(UnsupportedOperationError):
            evaluate(text, interp)


class TestLogicAndComparison:
    """Booleans, comparisons and the ternary operator"""

    @pytest.mark.parametrize("text,expected", [
        ("1 < 2", "1"),
        ("2 <= 1", "0"),
        ("1.5 > 1.25", "1"),
        ("3 == 3", "1"),
        ("3 != 3", "0"),
        ("true && 0", "0"),
        ("false || yes", "1"),
        ("!0", "1"),
        ("!on", "0"),
        ("1 ? 10 : 20", "10"),
        ("0 ? 10 : 20", "20"),
        ("0 ? 1 : 0 ? 2 : 3", "3"),
        ("true == false", "0"),
    ])
    def test_values(self, interp, text, expected):
        assert str(evaluate_value(text, interp)) == expected

    def test_short_circuit(self, interp):
        assert str(evaluate_value("0 && [error boom]", interp)) == "0"
        assert str(evaluate_value("1 || [error boom]", interp)) == "1"

    def test_ternary_evaluates_chosen_branch_only(self, interp):
        assert str(evaluate_value("1 ? 5 : [error boom]", interp)) == "5"

    @pytest.mark.parametrize("text", ["1 < 2.5", "1 == 1.0", "true == 1"])
    def test_comparison_needs_same_variant(self, interp, text):
        with pytest.raises(TclTypeError):
            evaluate(text, interp)

    def test_booleans_are_not_ordered(self, interp):
        with pytest.raises(UnsupportedOperationError):
            evaluate("true < false", interp)

    def test_boolean_arithmetic(self, interp):
        with pytest.raises(UnsupportedOperationError):
            evaluate("true + 1", interp)


class TestOperands:
    """Variables, nested scripts and quoted operands"""

    def test_variable(self, interp):
        interp.define("x", String("4"))
        assert str(evaluate_value("$x * 2", interp)) == "8"
        assert evaluate_bool("$x > 3", interp)

    def test_nested_script(self, interp):
        interp.define("x", String("4"))
        assert str(evaluate_value("[set x] + 1", interp)) == "5"

    def test_quoted_and_braced(self, interp):
        interp.define("x", String("4"))
        assert str(evaluate_value('"$x" + {1}', interp)) == "5"

    def test_array_element(self, interp):
        interp.run("set a(k) 7")
        assert str(evaluate_value("$a(k) - 1", interp)) == "6"

    def test_non_numeric_operand(self, interp):
        interp.define("s", String("abc"))
        with pytest.raises(CastError):
            evaluate("$s + 1", interp)


class TestExpressionSyntax:
    """Malformed expressions"""

    @pytest.mark.parametrize("text,message", [
        ("", "empty expression"),
        ("1 +", "incomplete expression"),
        ("(1 + 2", "missing close parenthesis"),
        ("foo", "invalid bareword"),
        ("1 2", "unexpected"),
        ("1 ? 2", "incomplete expression"),
        ("99999999999999999999", "too large"),
    ])
    def test_errors(self, interp, text, message):
        with pytest.raises(TclSyntaxError, match=message):
            evaluate(text, interp)
