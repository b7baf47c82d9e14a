"""
Symbolic expression engine for parametric primitive fields.

This module provides:
- Lexer: tokenizes expression text
- Parser: builds an AST from tokens
- Compiler: binds names to a variable list and produces an evaluator

Usage:
    from paraprim.expr import compile_expression

    expr = compile_expression("x^2 + y^2 <= r^2", ["r", "x", "y"])
    expr.evaluate([1.0, 0.5, 0.5])   # -> 1.0
"""

from .tokens import (
    Token,
    TokenType,
    SourceSpan,
    KEYWORDS,
)

from .lexer import (
    Lexer,
    tokenize,
)

from .parser import (
    Parser,
    parse,
)

from .ast import (
    AstNode,
    AstVisitor,
    Expression,
    Number,
    Identifier,
    BinaryOp,
    UnaryOp,
    FunctionCall,
    free_names,
)

from .errors import (
    ErrorSeverity,
    Diagnostic,
    ExpressionError,
    LexerError,
    ParserError,
    CompileError,
    EvaluationError,
)

from .builtins import (
    BuiltinFunction,
    BuiltinRegistry,
    CONSTANTS,
    get_builtin_registry,
    is_reserved_name,
)

from .compiler import (
    Compiler,
    CompiledExpression,
    compile_expression,
    evaluate,
    clear_cache,
)

__all__ = [
    # Tokens
    "Token",
    "TokenType",
    "SourceSpan",
    "KEYWORDS",
    # Lexer / parser
    "Lexer",
    "tokenize",
    "Parser",
    "parse",
    # AST
    "AstNode",
    "AstVisitor",
    "Expression",
    "Number",
    "Identifier",
    "BinaryOp",
    "UnaryOp",
    "FunctionCall",
    "free_names",
    # Errors
    "ErrorSeverity",
    "Diagnostic",
    "ExpressionError",
    "LexerError",
    "ParserError",
    "CompileError",
    "EvaluationError",
    # Builtins
    "BuiltinFunction",
    "BuiltinRegistry",
    "CONSTANTS",
    "get_builtin_registry",
    "is_reserved_name",
    # Compiler
    "Compiler",
    "CompiledExpression",
    "compile_expression",
    "evaluate",
    "clear_cache",
]
