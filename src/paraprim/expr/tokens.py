"""
Token types for the paraprim expression lexer.

Expressions are single line formulas in the conventions of parametric
geometry tools: ``^`` is power, ``=`` is equality, ``&`` and ``|`` are
logical operators, and every comparison yields 1 or 0.
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any


class TokenType(Enum):
    """Every kind of token the lexer can produce."""

    NUMBER = auto()             # 42, 3.14, 1e-9, .5
    IDENTIFIER = auto()         # parameter, variable or function name

    # arithmetic
    PLUS = auto()               # +
    MINUS = auto()              # -
    STAR = auto()               # *
    SLASH = auto()              # /
    PERCENT = auto()            # %
    CARET = auto()              # ^ or **

    # comparison
    LT = auto()                 # <
    GT = auto()                 # >
    LE = auto()                 # <=
    GE = auto()                 # >=
    EQ = auto()                 # = or ==
    NE = auto()                 # !=

    # logic
    AND = auto()                # &, && or 'and'
    OR = auto()                 # |, || or 'or'
    NOT = auto()                # ! or 'not'

    LPAREN = auto()
    RPAREN = auto()
    COMMA = auto()

    EOF = auto()


@dataclass(frozen=True)
class SourceSpan:
    """Half-open character range ``[start, end)`` of an expression."""
    start: int
    end: int

    @property
    def column(self) -> int:
        """1-based column of the first character."""
        return self.start + 1

    @property
    def end_column(self) -> int:
        return self.end + 1

    @property
    def width(self) -> int:
        return max(1, self.end - self.start)

    @classmethod
    def covering(cls, text: str) -> "SourceSpan":
        return cls(0, len(text))

    def __str__(self) -> str:
        if self.end - self.start > 1:
            return f"col {self.column}-{self.end_column}"
        return f"col {self.column}"


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: Any              # float for NUMBER, str for IDENTIFIER
    lexeme: str
    span: SourceSpan

    def __str__(self) -> str:
        if self.type in (TokenType.NUMBER, TokenType.IDENTIFIER):
            return f"{self.type.name}({self.value!r})"
        return self.type.name


# word spellings of the logical operators
KEYWORDS = {
    "and": TokenType.AND,
    "or": TokenType.OR,
    "not": TokenType.NOT,
}

