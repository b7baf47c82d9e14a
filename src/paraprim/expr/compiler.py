"""
Compile expression ASTs into evaluable closure trees.

Names are bound to positions in a variable list at compile time, so a
compiled expression is evaluated by handing it a plain sequence of
floats in the same order.  This is what makes per-mesh-point evaluation
of user defined primitives cheap.
"""

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Callable, Dict, Optional, Sequence, Tuple

from .ast import Expression, Number, Identifier, BinaryOp, UnaryOp, FunctionCall
from .builtins import (
    CONSTANTS, get_builtin_registry, truth, boolean,
    safe_div, safe_mod, safe_pow,
)
from .errors import (
    error_undefined_identifier,
    error_unknown_function,
    error_wrong_arity,
    error_not_callable,
)
from .parser import parse
from .tokens import TokenType

Evaluator = Callable[[Sequence[float]], float]


_BINARY: Dict[TokenType, Callable[[float, float], float]] = {
    TokenType.PLUS: lambda a, b: a + b,
    TokenType.MINUS: lambda a, b: a - b,
    TokenType.STAR: lambda a, b: a * b,
    TokenType.SLASH: safe_div,
    TokenType.PERCENT: safe_mod,
    TokenType.CARET: safe_pow,
    TokenType.LT: lambda a, b: boolean(a < b),
    TokenType.GT: lambda a, b: boolean(a > b),
    TokenType.LE: lambda a, b: boolean(a <= b),
    TokenType.GE: lambda a, b: boolean(a >= b),
    TokenType.EQ: lambda a, b: boolean(a == b),
    TokenType.NE: lambda a, b: boolean(a != b),
}


@dataclass
class CompiledExpression:
    """An expression bound to an ordered list of variable names."""
    text: str
    variables: Tuple[str, ...]
    tree: Expression
    _fn: Evaluator = field(repr=False)

    def evaluate(self, values: Sequence[float] = ()) -> float:
        """
        Evaluate with ``values`` ordered like ``variables``.

        Raises:
            ValueError: if the number of values does not match
        """
        if len(values) != len(self.variables):
            raise ValueError(
                f"expression '{self.text}' expects {len(self.variables)} values, "
                f"got {len(values)}"
            )
        return float(self._fn(values))

    __call__ = evaluate


class Compiler:
    """Turns an expression AST into a closure over a value sequence."""

    def __init__(self, variables: Sequence[str], source: Optional[str] = None):
        self.variables = tuple(variables)
        self.source = source
        # later names shadow earlier ones (coordinates over parameters)
        self._index = {name: i for i, name in enumerate(self.variables)}
        self._registry = get_builtin_registry()

    def compile(self, node: Expression) -> Evaluator:
        if isinstance(node, Number):
            return self._compile_number(node)
        elif isinstance(node, Identifier):
            return self._compile_identifier(node)
        elif isinstance(node, BinaryOp):
            return self._compile_binary(node)
        elif isinstance(node, UnaryOp):
            return self._compile_unary(node)
        elif isinstance(node, FunctionCall):
            return self._compile_call(node)
        raise RuntimeError(f"Unknown expression type: {type(node).__name__}")

    def _compile_number(self, node: Number) -> Evaluator:
        value = float(node.value)
        return lambda values: value

    def _compile_identifier(self, node: Identifier) -> Evaluator:
        idx = self._index.get(node.name)
        if idx is not None:
            return lambda values: values[idx]
        if node.name in CONSTANTS:
            value = CONSTANTS[node.name]
            return lambda values: value
        if node.name in self._registry:
            raise error_unknown_function(
                f"{node.name} (missing argument list)", node.span, self.source)
        raise error_undefined_identifier(node.name, node.span, self.source,
                                         list(self.variables))

    def _compile_binary(self, node: BinaryOp) -> Evaluator:
        left = self.compile(node.left)
        right = self.compile(node.right)

        if node.operator == TokenType.AND:
            return lambda values: boolean(truth(left(values)) and truth(right(values)))
        if node.operator == TokenType.OR:
            return lambda values: boolean(truth(left(values)) or truth(right(values)))

        op = _BINARY.get(node.operator)
        if op is None:
            raise RuntimeError(f"Unknown binary operator: {node.operator}")

        return lambda values: op(left(values), right(values))

    def _compile_unary(self, node: UnaryOp) -> Evaluator:
        operand = self.compile(node.operand)
        if node.operator == TokenType.MINUS:
            return lambda values: -operand(values)
        if node.operator == TokenType.NOT:
            return lambda values: boolean(not truth(operand(values)))
        raise RuntimeError(f"Unknown unary operator: {node.operator}")

    def _compile_call(self, node: FunctionCall) -> Evaluator:
        func = self._registry.get_function(node.name)
        if func is None:
            if node.name in self._index or node.name in CONSTANTS:
                raise error_not_callable(node.name, node.span, self.source)
            raise error_unknown_function(node.name, node.span, self.source)

        nargs = len(node.arguments)
        if not func.min_args <= nargs <= func.max_args:
            raise error_wrong_arity(node.name, func.arity_text(), nargs, node.span, self.source)

        args = [self.compile(arg) for arg in node.arguments]

        if node.name == "if":
            cond, then_branch, else_branch = args
            return lambda values: then_branch(values) if truth(cond(values)) else else_branch(values)

        if nargs == 1:
            (arg,) = args
            return lambda values: func(arg(values))
        return lambda values: func(*[a(values) for a in args])


@lru_cache(maxsize=1024)
def _compile_cached(text: str, variables: Tuple[str, ...]) -> CompiledExpression:
    tree = parse(text)
    fn = Compiler(variables, source=text).compile(tree)
    return CompiledExpression(text=text, variables=variables, tree=tree, _fn=fn)


def compile_expression(text: str, variables: Sequence[str] = ()) -> CompiledExpression:
    """
    Parse and bind ``text`` against ``variables``.

    Raises:
        LexerError, ParserError, CompileError: on any malformed input
    """
    return _compile_cached(text, tuple(variables))


def evaluate(text: str, variables: Sequence[str] = (), values: Sequence[float] = ()) -> float:
    """One-shot compile and evaluate."""
    return compile_expression(text, variables).evaluate(values)


def clear_cache() -> None:
    """Drop all cached compiled expressions."""
    _compile_cached.cache_clear()
