"""
Planar polygons and their linear and rotational extrusions.

A polygon lives in the plane ``dot(p, n) == elevation`` where ``n`` is
the unit normal.  Vertices are 2D pairs in that plane's frame: for a
normal along x, y or z the pairs are (y, z), (z, x) or (x, y); any other
normal gets an orthonormal frame built from it.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from .. import geom
from ..errors import InvalidInput, UpdateReport
from ..params import ParameterScalar, ParameterSet
from ..shapes import LinearExtrudeShape, PolygonShape, RotationalExtrudeShape
from .base import Primitive, PrimitiveType, Value


class Polygon(Primitive):
    """
    Zero thickness polygon; edges and vertices are inside.

    The polygon lies in the plane ``dot(p, unit normal) == elevation``.
    Elevation is measured along the normal as given, so flipping the
    normal to (0, 0, -1) moves elevation 5 to z = -5.  Vertex pairs are
    in the frame of :func:`paraprim.geom.planebasis`.
    """

    TYPE = PrimitiveType.POLYGON

    def __init__(self, params: Optional[ParameterSet] = None,
                 elevation: Value = 0.0,
                 normal: Sequence[Value] = (0.0, 0.0, 1.0),
                 vertices: Sequence[Sequence[Value]] = (), **kwargs):
        super().__init__(params, **kwargs)
        self._elevation = self._scalar(elevation)
        self._normal = self._vector(normal)
        self._coords: List[ParameterScalar] = []
        for x1, x2 in vertices:
            self._coords.extend((self._scalar(x1), self._scalar(x2)))

    @property
    def elevation(self) -> float:
        return self._elevation.value

    @elevation.setter
    def elevation(self, value: Value) -> None:
        self._assign(self._elevation, value)

    @property
    def elevation_term(self) -> str:
        return self._elevation.term

    @property
    def normal(self):
        return self._values(self._normal)

    @normal.setter
    def normal(self, values: Sequence[Value]) -> None:
        self._assign_vector(self._normal, values)

    @property
    def normal_terms(self):
        return self._terms(self._normal)

    # vertex list
    def _clear_odd(self) -> None:
        if len(self._coords) % 2:
            self._coords.pop()
            self._invalidate()

    def add_vertex(self, x1: Value, x2: Value) -> int:
        """Append a vertex and return its index."""
        self._clear_odd()
        self._coords.extend((self._scalar(x1), self._scalar(x2)))
        self._invalidate()
        return self.vertex_count - 1

    def remove_vertex(self, index: int) -> None:
        """Remove vertex ``index``; out of range indices are ignored."""
        self._clear_odd()
        if 0 <= index < self.vertex_count:
            del self._coords[2*index:2*index + 2]
            self._invalidate()

    def add_coord(self, value: Value) -> None:
        self._coords.append(self._scalar(value))
        self._invalidate()

    def set_coord(self, index: int, value: Value) -> None:
        if 0 <= index < len(self._coords):
            self._assign(self._coords[index], value)

    def coord(self, index: int) -> float:
        if 0 <= index < len(self._coords):
            return self._coords[index].value
        return 0.0

    def coord_term(self, index: int) -> str:
        if 0 <= index < len(self._coords):
            return self._coords[index].term
        return ""

    @property
    def coord_count(self) -> int:
        return len(self._coords)

    @property
    def vertex_count(self) -> int:
        return len(self._coords) // 2

    def vertices(self) -> List[Tuple[float, float]]:
        return [(self._coords[2*i].value, self._coords[2*i + 1].value)
                for i in range(self.vertex_count)]

    # evaluation
    def _evaluate_fields(self, report: UpdateReport) -> None:
        self._evaluate_scalar(self._elevation, "elevation", report)
        self._evaluate_vector(self._normal, "normal", report)
        for i, scalar in enumerate(self._coords):
            self._evaluate_scalar(scalar, f"vertex {i // 2} coordinate {i % 2}", report)
        self._check_geometry(report)

    def _check_geometry(self, report: UpdateReport) -> None:
        if self.vertex_count < 3:
            report.add(InvalidInput(
                f"polygon needs at least 3 vertices, has {self.vertex_count}",
                self.id, self.type_name))
        if geom.normalize(self.normal) is None:
            report.add(InvalidInput("normal direction is zero", self.id, self.type_name))

    def _shape_fields(self):
        return dict(elevation=self.elevation, normal=self.normal,
                    vertices=tuple(self.vertices()))

    def _build_shape(self, version: int) -> PolygonShape:
        return PolygonShape(**self._shape_fields(), version=version)

    def copy(self, params: Optional[ParameterSet] = None) -> "Polygon":
        dup = self._copy_base(params)
        dup._elevation = self._elevation.copy(dup.params)
        dup._normal = dup._copy_scalars(self._normal)
        dup._coords = dup._copy_scalars(self._coords)
        return dup

    def _describe_fields(self) -> str:
        return (f"{self.vertex_count} vertices, elevation={self.elevation_term} "
                f"normal={self.normal_terms}")


class LinearExtrudePolygon(Polygon):
    """Polygon extruded along its normal by ``length`` (which may be negative)."""

    TYPE = PrimitiveType.LINPOLY

    def __init__(self, params: Optional[ParameterSet] = None,
                 length: Value = 0.0, **kwargs):
        super().__init__(params, **kwargs)
        self._length = self._scalar(length)

    @property
    def length(self) -> float:
        return self._length.value

    @length.setter
    def length(self, value: Value) -> None:
        self._assign(self._length, value)

    @property
    def length_term(self) -> str:
        return self._length.term

    def _evaluate_fields(self, report: UpdateReport) -> None:
        self._evaluate_scalar(self._length, "extrusion length", report)
        super()._evaluate_fields(report)

    def _build_shape(self, version: int) -> LinearExtrudeShape:
        return LinearExtrudeShape(**self._shape_fields(), length=self.length,
                                  version=version)

    def copy(self, params: Optional[ParameterSet] = None) -> "LinearExtrudePolygon":
        dup = super().copy(params)
        dup._length = self._length.copy(dup.params)
        return dup

    def _describe_fields(self) -> str:
        return f"{super()._describe_fields()} length={self.length_term}"


class RotationalExtrudePolygon(Polygon):
    """
    Polygon swept about an axis through the origin.

    The polygon is rotated by every angle from ``start_angle`` to
    ``stop_angle`` (radians, positive from ``normal x axis`` toward
    ``axis x (normal x axis)``); a span of 2*pi or more is a full
    revolution.  The polygon plane need not contain the axis.
    """

    TYPE = PrimitiveType.ROTPOLY

    def __init__(self, params: Optional[ParameterSet] = None,
                 axis: Sequence[Value] = (0.0, 0.0, 1.0),
                 start_angle: Value = 0.0, stop_angle: Value = geom.pi2, **kwargs):
        super().__init__(params, **kwargs)
        self._axis = self._vector(axis)
        self._start_angle = self._scalar(start_angle)
        self._stop_angle = self._scalar(stop_angle)

    @property
    def axis(self):
        return self._values(self._axis)

    @axis.setter
    def axis(self, values: Sequence[Value]) -> None:
        self._assign_vector(self._axis, values)

    @property
    def axis_terms(self):
        return self._terms(self._axis)

    @property
    def start_angle(self) -> float:
        return self._start_angle.value

    @start_angle.setter
    def start_angle(self, value: Value) -> None:
        self._assign(self._start_angle, value)

    @property
    def stop_angle(self) -> float:
        return self._stop_angle.value

    @stop_angle.setter
    def stop_angle(self, value: Value) -> None:
        self._assign(self._stop_angle, value)

    @property
    def angle_terms(self):
        return (self._start_angle.term, self._stop_angle.term)

    def _evaluate_fields(self, report: UpdateReport) -> None:
        self._evaluate_vector(self._axis, "rotation axis", report)
        self._evaluate_scalar(self._start_angle, "start angle", report)
        self._evaluate_scalar(self._stop_angle, "stop angle", report)
        super()._evaluate_fields(report)

    def _check_geometry(self, report: UpdateReport) -> None:
        super()._check_geometry(report)
        axis = geom.normalize(self.axis)
        normal = geom.normalize(self.normal)
        if axis is None:
            report.add(InvalidInput("rotation axis is zero", self.id, self.type_name))
        elif normal is not None and geom.normalize(geom.cross(normal, axis)) is None:
            report.add(InvalidInput("rotation axis is parallel to the normal",
                                    self.id, self.type_name))

    def _build_shape(self, version: int) -> RotationalExtrudeShape:
        return RotationalExtrudeShape(**self._shape_fields(), axis=self.axis,
                                      start_angle=self.start_angle,
                                      stop_angle=self.stop_angle, version=version)

    def copy(self, params: Optional[ParameterSet] = None) -> "RotationalExtrudePolygon":
        dup = super().copy(params)
        dup._axis = dup._copy_scalars(self._axis)
        dup._start_angle = self._start_angle.copy(dup.params)
        dup._stop_angle = self._stop_angle.copy(dup.params)
        return dup

    def _describe_fields(self) -> str:
        return (f"{super()._describe_fields()} axis={self.axis_terms} "
                f"angles={self.angle_terms}")
