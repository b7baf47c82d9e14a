"""
Common primitive behaviour: identity, priority, parametric fields,
re-evaluation and the evaluated snapshot cache.

Queries (``bounding_box``, ``contains``) read an immutable shape
snapshot.  Field setters only drop the cached snapshot; the next query
rebuilds it from the last evaluated values.  ``reevaluate()`` evaluates
every expression, bumps ``version`` and rebuilds the snapshot.
"""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import List, Optional, Sequence, Tuple, Union

from ..errors import ExpressionParseError, UpdateReport
from ..expr import ExpressionError
from ..params import ParameterScalar, ParameterSet
from ..shapes import Bounds, Shape, shape_bounds, shape_contains

logger = logging.getLogger(__name__)

Value = Union[float, str]


class PrimitiveType(IntEnum):
    """Type tag of a primitive."""
    BOX = 0x01
    MULTIBOX = 0x02
    SPHERE = 0x04
    CYLINDER = 0x08
    POLYGON = 0x10
    LINPOLY = 0x20
    ROTPOLY = 0x40
    USERDEFINED = 0x80


TYPE_NAMES = {
    PrimitiveType.BOX: "Box",
    PrimitiveType.MULTIBOX: "MultiBox",
    PrimitiveType.SPHERE: "Sphere",
    PrimitiveType.CYLINDER: "Cylinder",
    PrimitiveType.POLYGON: "Polygon",
    PrimitiveType.LINPOLY: "LinPoly",
    PrimitiveType.ROTPOLY: "RotPoly",
    PrimitiveType.USERDEFINED: "UserDefined",
}

AXES = ("X", "Y", "Z")


class Primitive:
    """Base class for all parametric primitives."""

    TYPE: PrimitiveType

    def __init__(self, params: Optional[ParameterSet] = None, id: Optional[int] = None,
                 priority: int = 0):
        self.params = params if params is not None else ParameterSet()
        self.id = id
        self.priority = priority
        self.used = False
        self._structure = None
        self._version = 0
        self._shape: Optional[Shape] = None

    # ------------------------------------------------------------------
    # identity
    # ------------------------------------------------------------------

    @property
    def type_tag(self) -> PrimitiveType:
        return self.TYPE

    @property
    def type_name(self) -> str:
        return TYPE_NAMES[self.TYPE]

    @property
    def priority(self) -> int:
        return self._priority

    @priority.setter
    def priority(self, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError("priority must be an integer")
        self._priority = value

    @property
    def region(self):
        """Owning region, or ``None``."""
        if self._structure is None:
            return None
        return self._structure.owner_of(self)

    @property
    def structure(self):
        return self._structure

    def reset_used(self) -> None:
        self.used = False

    # ------------------------------------------------------------------
    # parametric helpers
    # ------------------------------------------------------------------

    def _scalar(self, value: Value = 0.0) -> ParameterScalar:
        return ParameterScalar(self.params, value)

    def _vector(self, values: Sequence[Value] = (0.0, 0.0, 0.0)) -> List[ParameterScalar]:
        scalars = [self._scalar() for _ in range(3)]
        self._assign_vector(scalars, values)
        return scalars

    def _assign_vector(self, scalars: List[ParameterScalar], values: Sequence[Value]) -> None:
        if isinstance(values, str) or len(values) != 3:
            raise ValueError("expected three coordinates")
        for scalar, value in zip(scalars, values):
            scalar.set_value(value)
        self._invalidate()

    def _assign(self, scalar: ParameterScalar, value: Value) -> None:
        scalar.set_value(value)
        self._invalidate()

    @staticmethod
    def _values(scalars: Sequence[ParameterScalar]) -> Tuple[float, ...]:
        return tuple(s.value for s in scalars)

    @staticmethod
    def _terms(scalars: Sequence[ParameterScalar]) -> Tuple[str, ...]:
        return tuple(s.term for s in scalars)

    def _copy_scalars(self, scalars: Sequence[ParameterScalar]) -> List[ParameterScalar]:
        return [s.copy(self.params) for s in scalars]

    def _evaluate_scalar(self, scalar: ParameterScalar, field: str, report: UpdateReport) -> None:
        try:
            scalar.evaluate()
        except ExpressionError as exc:
            report.add(ExpressionParseError(field, self.id, exc, self.type_name))

    def _evaluate_vector(self, scalars: Sequence[ParameterScalar], field: str,
                         report: UpdateReport) -> None:
        for axis, scalar in zip(AXES, scalars):
            self._evaluate_scalar(scalar, f"{field} ({axis})", report)

    # ------------------------------------------------------------------
    # snapshot
    # ------------------------------------------------------------------

    def _invalidate(self) -> None:
        self._shape = None

    @property
    def version(self) -> int:
        return self._version

    @property
    def shape(self) -> Shape:
        """Current evaluated snapshot."""
        shape = self._shape
        if shape is None:
            shape = self._build_shape(self._version)
            self._shape = shape
        return shape

    def _build_shape(self, version: int) -> Shape:
        raise NotImplementedError

    def _evaluate_fields(self, report: UpdateReport) -> None:
        raise NotImplementedError

    def reevaluate(self) -> UpdateReport:
        """
        Evaluate every parametric field.

        Failures do not stop evaluation of the remaining fields; all of
        them are returned in the report and logged.
        """
        report = UpdateReport()
        self._evaluate_fields(report)
        self._version += 1
        self._shape = self._build_shape(self._version)
        for error in report:
            logger.warning("%s", error)
        return report

    # ------------------------------------------------------------------
    # queries
    # ------------------------------------------------------------------

    def bounding_box(self) -> Bounds:
        return shape_bounds(self.shape)

    def contains(self, point, tol: float = 0.0) -> bool:
        return shape_contains(self.shape, point, tol)

    # ------------------------------------------------------------------
    # copies and status
    # ------------------------------------------------------------------

    def _copy_base(self, params: Optional[ParameterSet]):
        dup = self.__class__.__new__(self.__class__)
        Primitive.__init__(dup, params if params is not None else self.params,
                           self.id, self.priority)
        return dup

    def copy(self, params: Optional[ParameterSet] = None) -> "Primitive":
        """Duplicate with all expressions kept; the copy has no owner."""
        raise NotImplementedError

    def _describe_fields(self) -> str:
        return ""

    def describe(self) -> str:
        """One line status summary."""
        head = f"{self.type_name} (ID: {self.id}, priority: {self.priority})"
        detail = self._describe_fields()
        if detail:
            return f"{head}: {detail}"
        return head

    def __repr__(self) -> str:
        return f"<{self.describe()}>"
