"""
Recursive descent parser for parametric expressions.

Binary operators are parsed by precedence climbing.  From loosest to
tightest::

    |
    &
    =  !=
    <  >  <=  >=
    +  -
    *  /  %
    unary - + !
    ^            (right-associative, binds tighter than unary minus)

so ``-x^2`` is ``-(x^2)`` and ``2^-1`` is ``2^(-1)``.
"""

from typing import List, Optional

from .tokens import Token, TokenType, SourceSpan
from .ast import Expression, Number, Identifier, BinaryOp, UnaryOp, FunctionCall
from .lexer import tokenize
from .errors import (
    error_unexpected_token,
    error_unexpected_eof,
    error_empty_expression,
)

_LEVELS = (
    (TokenType.OR,),
    (TokenType.AND,),
    (TokenType.EQ, TokenType.NE),
    (TokenType.LT, TokenType.GT, TokenType.LE, TokenType.GE),
    (TokenType.PLUS, TokenType.MINUS),
    (TokenType.STAR, TokenType.SLASH, TokenType.PERCENT),
)

PRECEDENCE = {op: level for level, ops in enumerate(_LEVELS, start=1) for op in ops}


class Parser:
    """
    Turns a token list into an expression tree.

    Usage:
        tree = Parser(tokenize(text), source=text).parse_expression()
    """

    def __init__(self, tokens: List[Token], source: Optional[str] = None):
        self.tokens = tokens
        self.source = source
        self.pos = 0

    @property
    def _current(self) -> Token:
        return self.tokens[min(self.pos, len(self.tokens) - 1)]

    def _at(self, *token_types: TokenType) -> bool:
        return self._current.type in token_types

    def _take(self) -> Token:
        token = self._current
        if token.type != TokenType.EOF:
            self.pos += 1
        return token

    def _expect(self, token_type: TokenType, expected: str) -> Token:
        if not self._at(token_type):
            self._fail(expected)
        return self._take()

    def _fail(self, expected: str) -> None:
        token = self._current
        if token.type == TokenType.EOF:
            raise error_unexpected_eof(expected, token.span, self.source)
        raise error_unexpected_token(expected, f"'{token.lexeme}'", token.span, self.source)

    def parse_expression(self) -> Expression:
        """Parse the whole token list; leftovers are an error."""
        if self._at(TokenType.EOF):
            raise error_empty_expression(self._current.span, self.source)
        tree = self._binary(1)
        if not self._at(TokenType.EOF):
            self._fail("operator or end of expression")
        return tree

    def _binary(self, min_level: int) -> Expression:
        left = self._unary()
        while True:
            op = self._current
            level = PRECEDENCE.get(op.type)
            if level is None or level < min_level:
                return left
            self._take()
            right = self._binary(level + 1)
            left = BinaryOp(span=SourceSpan(left.span.start, right.span.end),
                            left=left, operator=op.type, right=right)

    def _unary(self) -> Expression:
        if self._at(TokenType.MINUS, TokenType.NOT):
            op = self._take()
            operand = self._unary()
            return UnaryOp(span=SourceSpan(op.span.start, operand.span.end),
                           operator=op.type, operand=operand)
        if self._at(TokenType.PLUS):
            self._take()
            return self._unary()
        return self._power()

    def _power(self) -> Expression:
        base = self._primary()
        if not self._at(TokenType.CARET):
            return base
        self._take()
        exponent = self._unary()
        return BinaryOp(span=SourceSpan(base.span.start, exponent.span.end),
                        left=base, operator=TokenType.CARET, right=exponent)

    def _arguments(self) -> List[Expression]:
        self._expect(TokenType.LPAREN, "'('")
        args: List[Expression] = []
        if not self._at(TokenType.RPAREN):
            args.append(self._binary(1))
            while self._at(TokenType.COMMA):
                self._take()
                args.append(self._binary(1))
        return args

    def _primary(self) -> Expression:
        token = self._current
        if token.type == TokenType.NUMBER:
            self._take()
            return Number(span=token.span, value=token.value)

        if token.type == TokenType.IDENTIFIER:
            self._take()
            if not self._at(TokenType.LPAREN):
                return Identifier(span=token.span, name=token.value)
            args = self._arguments()
            close = self._expect(TokenType.RPAREN, "')'")
            return FunctionCall(span=SourceSpan(token.span.start, close.span.end),
                                name=token.value, arguments=args)

        if token.type == TokenType.LPAREN:
            self._take()
            inner = self._binary(1)
            self._expect(TokenType.RPAREN, "')'")
            return inner

        self._fail("expression")


def parse(source: str) -> Expression:
    """
    Parse expression text into a tree.

    Raises:
        LexerError: on invalid characters or literals
        ParserError: on malformed expressions
    """
    return Parser(tokenize(source), source=source).parse_expression()
