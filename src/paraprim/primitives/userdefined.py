"""
Implicit primitive defined by a boolean valued function.

The function is compiled against the structure's parameter names
followed by the positional variables of the chosen coordinate system:

    cartesian     x, y, z
    cylindrical   x, y, z, r, a
    spherical     x, y, z, r, a, t

``x, y, z`` are the query point minus ``shift``.  ``r`` is the distance
from the z axis (cylindrical) or the origin (spherical), ``a`` the
azimuth ``atan2(y, x)`` and ``t`` the polar angle from +z.  A point is
inside when the function evaluates to exactly 1.

A positional variable shadows a parameter of the same name.
"""

from __future__ import annotations

from typing import Optional, Sequence, Union

from ..errors import (
    ExpressionParseError, ParameterMismatchError, UnknownCoordinateSystem, UpdateReport,
)
from ..expr import CompiledExpression, ExpressionError, compile_expression
from ..params import ParameterSet
from ..shapes import CoordinateSystem, UserDefinedShape, coordinate_variables
from .base import Primitive, PrimitiveType, Value


class UserDefined(Primitive):

    TYPE = PrimitiveType.USERDEFINED

    def __init__(self, params: Optional[ParameterSet] = None, function: str = "",
                 coordinate_system: Union[CoordinateSystem, int] = CoordinateSystem.CARTESIAN,
                 shift: Sequence[Value] = (0.0, 0.0, 0.0), **kwargs):
        super().__init__(params, **kwargs)
        self._function = ""
        self._system = CoordinateSystem.CARTESIAN
        self._compiled: Optional[CompiledExpression] = None
        self._compiled_count = 0
        self._shift = self._vector(shift)
        self.function = function
        self.coordinate_system = coordinate_system

    @property
    def function(self) -> str:
        return self._function

    @function.setter
    def function(self, text: str) -> None:
        if not isinstance(text, str):
            raise TypeError("function must be a string")
        self._function = text
        self._invalidate()

    @property
    def coordinate_system(self):
        """The system tag; an unknown raw tag is kept as given."""
        return self._system

    @coordinate_system.setter
    def coordinate_system(self, system: Union[CoordinateSystem, int]) -> None:
        try:
            self._system = CoordinateSystem(system)
        except ValueError:
            self._system = system
        self._invalidate()

    @property
    def shift(self):
        return self._values(self._shift)

    @shift.setter
    def shift(self, values: Sequence[Value]) -> None:
        self._assign_vector(self._shift, values)

    @property
    def shift_terms(self):
        return self._terms(self._shift)

    @property
    def compiled(self) -> Optional[CompiledExpression]:
        return self._compiled

    @property
    def compiled_parameter_count(self) -> int:
        return self._compiled_count

    def check_parameters(self) -> None:
        """
        Raise if the parameter set changed size since the last
        ``reevaluate()``; containment answers False in that state.

        Raises:
            ParameterMismatchError: when the counts differ
        """
        if self._compiled is not None and self.params.count != self._compiled_count:
            raise ParameterMismatchError(self._compiled_count, self.params.count,
                                         self.id, self.type_name)

    def variable_names(self):
        """Variable order the function is compiled against."""
        return self.params.names() + list(coordinate_variables(self._system))

    def _evaluate_fields(self, report: UpdateReport) -> None:
        self._compiled = None
        self._compiled_count = self.params.count
        try:
            names = self.variable_names()
        except UnknownCoordinateSystem as exc:
            exc.primitive_id = self.id
            exc.type_name = self.type_name
            report.add(exc)
        else:
            try:
                self._compiled = compile_expression(self._function, names)
            except ExpressionError as exc:
                report.add(ExpressionParseError("function", self.id, exc, self.type_name))

        self._evaluate_vector(self._shift, "position shift", report)

    def _build_shape(self, version: int) -> UserDefinedShape:
        return UserDefinedShape(
            expression=self._compiled,
            system=self._system,
            shift=self.shift,
            params=self.params,
            compiled_count=self._compiled_count,
            version=version,
        )

    def copy(self, params: Optional[ParameterSet] = None) -> "UserDefined":
        dup = self._copy_base(params)
        dup._function = self._function
        dup._system = self._system
        dup._compiled = None
        dup._compiled_count = 0
        dup._shift = dup._copy_scalars(self._shift)
        return dup

    def _describe_fields(self) -> str:
        system = getattr(self._system, "name", repr(self._system)).lower()
        return f"f={self._function!r} system={system} shift={self.shift_terms}"
