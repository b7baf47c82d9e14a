"""
Lexer for the paraprim expression language.

Numbers are always floats and may start with a decimal point (``.5``)
or carry an exponent (``1e-3``).  Identifiers name parameters,
coordinate variables and functions.  ``and``, ``or`` and ``not`` are
spellings of the logical operators.  Whitespace, including newlines,
only separates tokens.
"""

from typing import Iterator, List

from .tokens import Token, TokenType, SourceSpan, KEYWORDS
from .errors import (
    error_unexpected_character,
    error_invalid_number_literal,
)

_TWO_CHAR = {
    "**": TokenType.CARET,
    "==": TokenType.EQ,
    "!=": TokenType.NE,
    "<=": TokenType.LE,
    ">=": TokenType.GE,
    "&&": TokenType.AND,
    "||": TokenType.OR,
}

_ONE_CHAR = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "%": TokenType.PERCENT,
    "^": TokenType.CARET,
    "<": TokenType.LT,
    ">": TokenType.GT,
    "=": TokenType.EQ,
    "&": TokenType.AND,
    "|": TokenType.OR,
    "!": TokenType.NOT,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    ",": TokenType.COMMA,
}


class Lexer:
    """
    Tokenizer for parametric expressions.

    Usage:
        tokens = Lexer("x^2 + y^2 <= r^2").tokenize()
    """

    def __init__(self, source: str):
        self.source = source
        self.pos = 0

    def _peek(self, ahead: int = 0) -> str:
        idx = self.pos + ahead
        return self.source[idx] if idx < len(self.source) else ""

    def _digits(self) -> None:
        while self._peek().isdigit():
            self.pos += 1

    def _token(self, token_type: TokenType, value, start: int) -> Token:
        return Token(token_type, value, self.source[start:self.pos],
                     SourceSpan(start, self.pos))

    def _scan_number(self, start: int) -> Token:
        self._digits()
        if self._peek() == ".":
            self.pos += 1
            self._digits()
        if self._peek() in ("e", "E"):
            self.pos += 1
            if self._peek() in ("+", "-"):
                self.pos += 1
            if not self._peek().isdigit():
                raise error_invalid_number_literal(
                    self.source[start:self.pos], SourceSpan(start, self.pos), self.source)
            self._digits()
        text = self.source[start:self.pos]
        try:
            value = float(text)
        except ValueError:
            raise error_invalid_number_literal(text, SourceSpan(start, self.pos), self.source)
        return self._token(TokenType.NUMBER, value, start)

    def _scan_word(self, start: int) -> Token:
        while self._peek().isalnum() or self._peek() == "_":
            self.pos += 1
        word = self.source[start:self.pos]
        return self._token(KEYWORDS.get(word, TokenType.IDENTIFIER), word, start)

    def next_token(self) -> Token:
        """Scan one token; returns EOF repeatedly at the end."""
        while self._peek().isspace():
            self.pos += 1

        start = self.pos
        ch = self._peek()
        if not ch:
            return self._token(TokenType.EOF, None, start)
        if ch.isdigit() or (ch == "." and self._peek(1).isdigit()):
            return self._scan_number(start)
        if ch.isalpha() or ch == "_":
            return self._scan_word(start)

        pair = self.source[start:start + 2]
        if pair in _TWO_CHAR:
            self.pos += 2
            return self._token(_TWO_CHAR[pair], pair, start)
        if ch in _ONE_CHAR:
            self.pos += 1
            return self._token(_ONE_CHAR[ch], ch, start)

        raise error_unexpected_character(ch, SourceSpan(start, start + 1), self.source)

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                return

    def tokenize(self) -> List[Token]:
        """All tokens of the source, terminated by EOF."""
        return list(self)


def tokenize(source: str) -> List[Token]:
    """
    Tokenize an expression.

    Raises:
        LexerError: on an unexpected character or a malformed number
    """
    return Lexer(source).tokenize()
