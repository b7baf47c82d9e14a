"""
Built-in function and constant registry for parametric expressions.

Every function takes and returns floats.  Numeric domain faults are
not raised: they evaluate to ``nan`` (or a signed infinity for
overflow and division by zero), so a broken expression degrades a
containment query instead of aborting a mesh sweep.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Optional
import math


NAN = float("nan")
INF = float("inf")

CONSTANTS: Dict[str, float] = {
    "pi": math.pi,
    "e": math.e,
}


def truth(value: float) -> bool:
    """Logical truth of a numeric value (function-parser rule: |v| >= 0.5)."""
    return abs(value) >= 0.5


def boolean(flag: bool) -> float:
    return 1.0 if flag else 0.0


def safe_div(a: float, b: float) -> float:
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return NAN
        return math.copysign(INF, a) * math.copysign(1.0, b)
    return a / b


def safe_mod(a: float, b: float) -> float:
    if b == 0.0 or math.isinf(a):
        return NAN
    return math.fmod(a, b)


def _odd_integer(b: float) -> bool:
    return math.isfinite(b) and b == math.floor(b) and math.fmod(b, 2.0) != 0.0


def safe_pow(a: float, b: float) -> float:
    """``a ^ b``; an infinite result keeps the sign of ``a`` for odd integer ``b``."""
    try:
        result = a ** b
    except (ZeroDivisionError, OverflowError):
        if _odd_integer(b) and math.copysign(1.0, a) < 0.0:
            return -INF
        if a < 0.0 and b != math.floor(b):
            return NAN
        return INF
    if isinstance(result, complex):
        return NAN
    return result


def _integral(fn: Callable[[float], float]) -> Callable[[float], float]:
    # rounding functions pass infinities through with their sign
    def wrapped(x: float) -> float:
        if math.isinf(x):
            return x
        return fn(x)
    return wrapped


def _round_half_away(x: float) -> float:
    if x >= 0.0:
        return float(math.floor(x + 0.5))
    return float(math.ceil(x - 0.5))


def _signed_overflow(x: float) -> float:
    return math.copysign(INF, x)


@dataclass
class BuiltinFunction:
    """A built-in function with its arity and implementation."""
    name: str
    min_args: int
    max_args: int
    implementation: Callable[..., float]
    doc: str = ""
    # value on OverflowError, from the arguments; +inf when unset
    overflow: Optional[Callable[..., float]] = None

    def arity_text(self) -> str:
        if self.min_args == self.max_args:
            return str(self.min_args)
        return f"{self.min_args}-{self.max_args}"

    def __call__(self, *args: float) -> float:
        try:
            return float(self.implementation(*args))
        except (ValueError, ZeroDivisionError):
            return NAN
        except OverflowError:
            if self.overflow is not None:
                return self.overflow(*args)
            return INF


class BuiltinRegistry:
    """
    Registry of all built-in functions.

    ``if`` is listed for arity checking only; the compiler evaluates it
    lazily so the untaken branch never runs.
    """

    def __init__(self):
        self._functions: Dict[str, BuiltinFunction] = {}
        self._register_all()

    def get_function(self, name: str) -> Optional[BuiltinFunction]:
        return self._functions.get(name)

    def register(self, func: BuiltinFunction) -> None:
        self._functions[func.name] = func

    def names(self):
        return list(self._functions.keys())

    def __contains__(self, name: str) -> bool:
        return name in self._functions

    def _register_all(self) -> None:
        self._register_unary_math()
        self._register_multi_arg()

    def _register_unary_math(self) -> None:
        unary = {
            "abs": abs,
            "acos": math.acos,
            "acosh": math.acosh,
            "asin": math.asin,
            "asinh": math.asinh,
            "atan": math.atan,
            "ceil": _integral(math.ceil),
            "cos": math.cos,
            "cosh": math.cosh,
            "exp": math.exp,
            "floor": _integral(math.floor),
            "int": _integral(_round_half_away),
            "log": math.log,
            "log10": math.log10,
            "log2": math.log2,
            "sin": math.sin,
            "sqrt": math.sqrt,
            "tan": math.tan,
            "tanh": math.tanh,
        }
        for name, impl in unary.items():
            self.register(BuiltinFunction(name, 1, 1, impl))
        self.register(BuiltinFunction("sinh", 1, 1, math.sinh, overflow=_signed_overflow))

    def _register_multi_arg(self) -> None:
        self.register(BuiltinFunction("atan2", 2, 2, math.atan2,
                                      "angle of (x, y) given as atan2(y, x)"))
        self.register(BuiltinFunction("pow", 2, 2, safe_pow))
        self.register(BuiltinFunction("min", 2, 2, min))
        self.register(BuiltinFunction("max", 2, 2, max))
        self.register(BuiltinFunction("if", 3, 3, lambda c, a, b: a if truth(c) else b,
                                      "if(condition, then, else)"))


# Global singleton registry
_registry: Optional[BuiltinRegistry] = None


def get_builtin_registry() -> BuiltinRegistry:
    """Get the global built-in function registry."""
    global _registry
    if _registry is None:
        _registry = BuiltinRegistry()
    return _registry


def is_reserved_name(name: str) -> bool:
    """True for names taken by built-in constants or functions."""
    return name in CONSTANTS or name in get_builtin_registry()
