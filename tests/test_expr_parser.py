"""
Unit tests for the paraprim expression parser.
"""

import pytest
from paraprim.expr import (
    parse, free_names, ParserError, TokenType,
    Number, Identifier, BinaryOp, UnaryOp, FunctionCall,
)


class TestPrecedence:
    """Operator precedence and associativity."""

    def test_product_binds_tighter_than_sum(self):
        """1 + 2 * 3 parses as 1 + (2 * 3)."""
        tree = parse("1 + 2 * 3")
        assert isinstance(tree, BinaryOp)
        assert tree.operator == TokenType.PLUS
        assert isinstance(tree.right, BinaryOp)
        assert tree.right.operator == TokenType.STAR

    def test_power_is_right_associative(self):
        """2^3^2 parses as 2^(3^2)."""
        tree = parse("2^3^2")
        assert tree.operator == TokenType.CARET
        assert isinstance(tree.left, Number)
        assert isinstance(tree.right, BinaryOp)
        assert tree.right.operator == TokenType.CARET

    def test_unary_minus_below_power(self):
        """-x^2 parses as -(x^2)."""
        tree = parse("-x^2")
        assert isinstance(tree, UnaryOp)
        assert tree.operator == TokenType.MINUS
        assert isinstance(tree.operand, BinaryOp)

    def test_comparison_below_arithmetic(self):
        """x^2+y^2<=1 compares the whole sum."""
        tree = parse("x^2+y^2<=1")
        assert tree.operator == TokenType.LE
        assert tree.left.operator == TokenType.PLUS

    def test_and_binds_tighter_than_or(self):
        """a | b & c parses as a | (b & c)."""
        tree = parse("a | b & c")
        assert tree.operator == TokenType.OR
        assert tree.right.operator == TokenType.AND

    def test_parentheses(self):
        """Parentheses override precedence."""
        tree = parse("(1 + 2) * 3")
        assert tree.operator == TokenType.STAR
        assert tree.left.operator == TokenType.PLUS


class TestCalls:
    """Function call syntax."""

    def test_call_with_arguments(self):
        """Arguments are collected in order."""
        tree = parse("atan2(y, x)")
        assert isinstance(tree, FunctionCall)
        assert tree.name == "atan2"
        assert [a.name for a in tree.arguments] == ["y", "x"]

    def test_identifier_without_call(self):
        """A bare name is an identifier."""
        tree = parse("radius")
        assert isinstance(tree, Identifier)
        assert tree.name == "radius"

    def test_free_names_order(self):
        """Names are listed once, in order of appearance."""
        assert free_names(parse("b + a*sin(b) + c")) == ["b", "a", "c"]


class TestErrors:
    """Parser diagnostics."""

    def test_empty_expression(self):
        """Empty input is E103."""
        with pytest.raises(ParserError) as exc:
            parse("   ")
        assert exc.value.code == "E103"

    def test_trailing_tokens(self):
        """Leftover tokens are E101."""
        with pytest.raises(ParserError) as exc:
            parse("1 2")
        assert exc.value.code == "E101"

    def test_unclosed_paren(self):
        """Missing ')' at end is E102."""
        with pytest.raises(ParserError) as exc:
            parse("(1 + 2")
        assert exc.value.code == "E102"

    def test_error_formats_source_line(self):
        """Formatted diagnostics show the source and a caret."""
        with pytest.raises(ParserError) as exc:
            parse("1 + * 2")
        text = str(exc.value)
        assert "E101" in text
        assert "1 + * 2" in text
        assert "^" in text
