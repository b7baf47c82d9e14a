"""
Shared parameter environment and parametric scalars.

A :class:`ParameterSet` is an ordered collection of named numeric
parameters shared by every primitive of a structure.  A
:class:`ParameterScalar` is one numeric field that is either a literal
or an expression over those parameters; expressions are only evaluated
when :meth:`ParameterScalar.evaluate` is called.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Union
import math

from .expr import compile_expression, is_reserved_name, SourceSpan
from .expr.errors import error_not_a_number


@dataclass
class Parameter:
    """A named numeric parameter."""
    name: str
    value: float = 0.0


class ParameterSet:
    """
    Ordered set of named parameters.

    The order of :meth:`names` and :meth:`values` is insertion order and
    is the variable order expressions are compiled against.
    """

    def __init__(self, values: Optional[Dict[str, float]] = None):
        self._params: Dict[str, Parameter] = {}
        for name, value in (values or {}).items():
            self.add(name, value)

    @staticmethod
    def _check_name(name: str) -> None:
        if not isinstance(name, str) or not name.isidentifier():
            raise ValueError(f"invalid parameter name: {name!r}")
        if is_reserved_name(name):
            raise ValueError(f"parameter name '{name}' is a built-in constant or function")

    def add(self, name: str, value: float = 0.0) -> Parameter:
        """Add a parameter; re-adding an existing name updates its value."""
        self._check_name(name)
        if name in self._params:
            self._params[name].value = float(value)
        else:
            self._params[name] = Parameter(name, float(value))
        return self._params[name]

    def set_value(self, name: str, value: float) -> None:
        if name not in self._params:
            raise KeyError(f"unknown parameter: {name}")
        self._params[name].value = float(value)

    def remove(self, name: str) -> None:
        if name not in self._params:
            raise KeyError(f"unknown parameter: {name}")
        del self._params[name]

    def value(self, name: str) -> float:
        return self._params[name].value

    def names(self) -> List[str]:
        return list(self._params.keys())

    def values(self) -> List[float]:
        return [p.value for p in self._params.values()]

    @property
    def count(self) -> int:
        return len(self._params)

    def parameter_string(self) -> str:
        """Comma separated parameter names, e.g. ``"a,b,c"``."""
        return ",".join(self._params.keys())

    def __contains__(self, name: str) -> bool:
        return name in self._params

    def __iter__(self) -> Iterator[Parameter]:
        return iter(list(self._params.values()))

    def __len__(self) -> int:
        return len(self._params)

    def __repr__(self) -> str:
        items = ", ".join(f"{p.name}={p.value:g}" for p in self._params.values())
        return f"ParameterSet({items})"


def _literal(text: str) -> Optional[float]:
    try:
        return float(text)
    except ValueError:
        return None


class ParameterScalar:
    """
    A numeric field that may be backed by an expression.

    ``value`` is the last evaluated value.  Setting an expression does not
    evaluate it; call :meth:`evaluate` after the expression or the
    parameter set changes.
    """

    def __init__(self, params: Optional[ParameterSet] = None,
                 value: Union[float, str] = 0.0):
        self.params = params
        self._value = 0.0
        self._expression: Optional[str] = None
        self.set_value(value)

    def set_value(self, value: Union[float, str]) -> None:
        """Set a literal (number or numeric string) or an expression string."""
        if isinstance(value, bool):
            raise TypeError("parametric value must be a number or a string")
        if isinstance(value, (int, float)):
            self._value = float(value)
            self._expression = None
            return
        if not isinstance(value, str):
            raise TypeError("parametric value must be a number or a string")

        text = value.strip()
        if not text:
            raise ValueError("empty expression")
        number = _literal(text)
        if number is not None:
            self._value = number
            self._expression = None
        else:
            self._expression = text

    @property
    def value(self) -> float:
        return self._value

    @property
    def expression(self) -> Optional[str]:
        return self._expression

    @property
    def is_parametric(self) -> bool:
        return self._expression is not None

    @property
    def term(self) -> str:
        """Expression text, or the literal formatted as text."""
        if self._expression is not None:
            return self._expression
        return "%.15g" % self._value

    def evaluate(self) -> float:
        """
        Evaluate the expression against the current parameter values.

        Returns:
            The new value (literals return unchanged)

        Raises:
            ExpressionError: if the expression does not compile or is nan
        """
        if self._expression is None:
            return self._value

        names = self.params.names() if self.params is not None else []
        values = self.params.values() if self.params is not None else []
        result = compile_expression(self._expression, names).evaluate(values)
        if math.isnan(result):
            span = SourceSpan.covering(self._expression)
            raise error_not_a_number(self._expression, span)
        self._value = result
        return result

    def copy(self, params: Optional[ParameterSet] = None) -> "ParameterScalar":
        """Duplicate, keeping the expression link."""
        dup = ParameterScalar(params if params is not None else self.params)
        dup._value = self._value
        dup._expression = self._expression
        return dup

    def __float__(self) -> float:
        return self._value

    def __repr__(self) -> str:
        if self._expression is not None:
            return f"ParameterScalar({self._expression!r}, value={self._value:g})"
        return f"ParameterScalar({self._value:g})"
