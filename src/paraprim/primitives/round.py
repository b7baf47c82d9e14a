"""
Round primitives: spheres and finite circular cylinders.
"""

from __future__ import annotations

from typing import Optional, Sequence

from ..errors import UpdateReport
from ..params import ParameterSet
from ..shapes import CylinderShape, SphereShape
from .base import Primitive, PrimitiveType, Value


class Sphere(Primitive):
    """Solid sphere; points exactly on the surface are outside."""

    TYPE = PrimitiveType.SPHERE

    def __init__(self, params: Optional[ParameterSet] = None,
                 center: Sequence[Value] = (0.0, 0.0, 0.0),
                 radius: Value = 0.0, **kwargs):
        super().__init__(params, **kwargs)
        self._center = self._vector(center)
        self._radius = self._scalar(radius)

    @property
    def center(self):
        return self._values(self._center)

    @center.setter
    def center(self, values: Sequence[Value]) -> None:
        self._assign_vector(self._center, values)

    @property
    def center_terms(self):
        return self._terms(self._center)

    @property
    def radius(self) -> float:
        return self._radius.value

    @radius.setter
    def radius(self, value: Value) -> None:
        self._assign(self._radius, value)

    @property
    def radius_term(self) -> str:
        return self._radius.term

    def _evaluate_fields(self, report: UpdateReport) -> None:
        self._evaluate_vector(self._center, "center point", report)
        self._evaluate_scalar(self._radius, "radius", report)

    def _build_shape(self, version: int) -> SphereShape:
        return SphereShape(self.center, self.radius, version=version)

    def copy(self, params: Optional[ParameterSet] = None) -> "Sphere":
        dup = self._copy_base(params)
        dup._center = dup._copy_scalars(self._center)
        dup._radius = self._radius.copy(dup.params)
        return dup

    def _describe_fields(self) -> str:
        return f"center={self.center_terms} radius={self.radius_term}"


class Cylinder(Primitive):
    """
    Solid cylinder between two axis points.

    The bounding box is exact only when the axis is parallel to one of
    the coordinate axes.
    """

    TYPE = PrimitiveType.CYLINDER

    def __init__(self, params: Optional[ParameterSet] = None,
                 start: Sequence[Value] = (0.0, 0.0, 0.0),
                 stop: Sequence[Value] = (0.0, 0.0, 0.0),
                 radius: Value = 0.0, **kwargs):
        super().__init__(params, **kwargs)
        self._start = self._vector(start)
        self._stop = self._vector(stop)
        self._radius = self._scalar(radius)

    @property
    def start(self):
        return self._values(self._start)

    @start.setter
    def start(self, values: Sequence[Value]) -> None:
        self._assign_vector(self._start, values)

    @property
    def stop(self):
        return self._values(self._stop)

    @stop.setter
    def stop(self, values: Sequence[Value]) -> None:
        self._assign_vector(self._stop, values)

    @property
    def start_terms(self):
        return self._terms(self._start)

    @property
    def stop_terms(self):
        return self._terms(self._stop)

    @property
    def radius(self) -> float:
        return self._radius.value

    @radius.setter
    def radius(self, value: Value) -> None:
        self._assign(self._radius, value)

    @property
    def radius_term(self) -> str:
        return self._radius.term

    def _evaluate_fields(self, report: UpdateReport) -> None:
        self._evaluate_vector(self._start, "axis start", report)
        self._evaluate_vector(self._stop, "axis stop", report)
        self._evaluate_scalar(self._radius, "radius", report)

    def _build_shape(self, version: int) -> CylinderShape:
        return CylinderShape(self.start, self.stop, self.radius, version=version)

    def copy(self, params: Optional[ParameterSet] = None) -> "Cylinder":
        dup = self._copy_base(params)
        dup._start = dup._copy_scalars(self._start)
        dup._stop = dup._copy_scalars(self._stop)
        dup._radius = self._radius.copy(dup.params)
        return dup

    def _describe_fields(self) -> str:
        return f"start={self.start_terms} stop={self.stop_terms} radius={self.radius_term}"
