"""
Errors raised while lexing, parsing, compiling or evaluating an
expression.

Every error wraps a :class:`Diagnostic` that knows where in the
expression text the problem is.  Codes:

    E0xx  lexer
    E1xx  parser
    E2xx  compile (names, functions, arity)
    E3xx  evaluation
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List
from .tokens import SourceSpan


class ErrorSeverity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass
class Diagnostic:
    """One located message about an expression."""
    code: str
    message: str
    severity: ErrorSeverity
    span: SourceSpan
    source_line: Optional[str] = None
    hints: List[str] = field(default_factory=list)

    def format(self, show_source: bool = True) -> str:
        """Message, the expression with the span underlined, then hints."""
        lines = [f"{self.span}: {self.severity.value}[{self.code}]: {self.message}"]
        if show_source and self.source_line is not None:
            lines.append(f"    | {self.source_line}")
            lines.append(f"    | {' ' * self.span.start}{'^' * self.span.width}")
        lines.extend(f"    = hint: {hint}" for hint in self.hints)
        return "\n".join(lines)

    def to_json(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "range": {"start": self.span.start, "end": self.span.end},
            "hints": list(self.hints),
        }


class ExpressionError(Exception):
    """Base exception for expression errors."""

    def __init__(self, diagnostic: Diagnostic):
        self.diagnostic = diagnostic
        super().__init__(diagnostic.message)

    @property
    def code(self) -> str:
        return self.diagnostic.code

    def __str__(self) -> str:
        return self.diagnostic.format()


class LexerError(ExpressionError):
    """Error during lexical analysis (E0xx)."""
    pass


class ParserError(ExpressionError):
    """Error during parsing (E1xx)."""
    pass


class CompileError(ExpressionError):
    """Error while binding names and functions (E2xx)."""
    pass


def _diag(code: str, message: str, span: SourceSpan, source_line: Optional[str],
          hints: Optional[List[str]] = None) -> Diagnostic:
    return Diagnostic(
        code=code,
        message=message,
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
        hints=hints or [],
    )


# --- Lexer error codes ---

def error_unexpected_character(char: str, span: SourceSpan, source_line: str = None) -> LexerError:
    """E001: Unexpected character."""
    return LexerError(_diag("E001", f"unexpected character '{char}'", span, source_line))


def error_invalid_number_literal(text: str, span: SourceSpan, source_line: str = None) -> LexerError:
    """E002: Invalid number literal."""
    return LexerError(_diag("E002", f"invalid number literal '{text}'", span, source_line))


# --- Parser error codes ---

def error_unexpected_token(expected: str, found: str, span: SourceSpan,
                           source_line: str = None) -> ParserError:
    """E101: Unexpected token."""
    return ParserError(_diag("E101", f"expected {expected}, found {found}", span, source_line))


def error_unexpected_eof(expected: str, span: SourceSpan, source_line: str = None) -> ParserError:
    """E102: Unexpected end of expression."""
    return ParserError(_diag("E102", f"unexpected end of expression, expected {expected}",
                             span, source_line))


def error_empty_expression(span: SourceSpan, source_line: str = None) -> ParserError:
    """E103: Empty expression."""
    return ParserError(_diag("E103", "empty expression", span, source_line))


# --- Compile error codes ---

def error_undefined_identifier(name: str, span: SourceSpan, source_line: str = None,
                               known: Optional[List[str]] = None) -> CompileError:
    """E201: Undefined identifier."""
    hints = []
    if known:
        hints.append(f"known variables: {', '.join(known)}")
    return CompileError(_diag("E201", f"undefined identifier '{name}'", span, source_line, hints))


def error_unknown_function(name: str, span: SourceSpan, source_line: str = None) -> CompileError:
    """E202: Unknown function."""
    return CompileError(_diag("E202", f"unknown function '{name}'", span, source_line))


def error_wrong_arity(name: str, expected: str, found: int, span: SourceSpan,
                      source_line: str = None) -> CompileError:
    """E203: Wrong number of arguments."""
    return CompileError(_diag(
        "E203",
        f"function '{name}' takes {expected} argument(s), {found} given",
        span, source_line,
    ))


def error_not_callable(name: str, span: SourceSpan, source_line: str = None) -> CompileError:
    """E204: Variable used as a function."""
    return CompileError(_diag("E204", f"'{name}' is a variable, not a function", span, source_line))


class EvaluationError(ExpressionError):
    """Expression compiled but produced no finite value (E3xx)."""
    pass


# --- Evaluation error codes ---

def error_not_a_number(source_line: str, span: SourceSpan) -> EvaluationError:
    """E301: Expression evaluated to nan."""
    return EvaluationError(_diag(
        "E301", "expression evaluated to nan", span, source_line,
        ["check for division by zero or arguments outside a function's domain"],
    ))
