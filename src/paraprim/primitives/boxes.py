"""
Axis aligned boxes: a single :class:`Box` and the :class:`MultiBox`
union of boxes.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..errors import UpdateReport
from ..params import ParameterScalar, ParameterSet
from ..shapes import BoxShape, MultiBoxShape
from .base import Primitive, PrimitiveType, Value


class Box(Primitive):
    """
    Box between two corners.

    The corners may be given in any order per axis; the bounding box is
    always normalized and faces are inside.
    """

    TYPE = PrimitiveType.BOX

    def __init__(self, params: Optional[ParameterSet] = None,
                 start: Sequence[Value] = (0.0, 0.0, 0.0),
                 stop: Sequence[Value] = (0.0, 0.0, 0.0), **kwargs):
        super().__init__(params, **kwargs)
        self._start = self._vector(start)
        self._stop = self._vector(stop)

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

    def set_coord(self, index: int, value: Value) -> None:
        """Set one of the six coordinates in ``(x1, x2, y1, y2, z1, z2)`` order."""
        if not 0 <= index < 6:
            raise IndexError(f"box coordinate index out of range: {index}")
        corner = self._start if index % 2 == 0 else self._stop
        self._assign(corner[index // 2], value)

    def _evaluate_fields(self, report: UpdateReport) -> None:
        self._evaluate_vector(self._start, "start-point coordinate", report)
        self._evaluate_vector(self._stop, "end-point coordinate", report)

    def _build_shape(self, version: int) -> BoxShape:
        return BoxShape(self.start, self.stop, version=version)

    def copy(self, params: Optional[ParameterSet] = None) -> "Box":
        dup = self._copy_base(params)
        dup._start = dup._copy_scalars(self._start)
        dup._stop = dup._copy_scalars(self._stop)
        return dup

    def _describe_fields(self) -> str:
        return f"start={self.start_terms} stop={self.stop_terms}"


class MultiBox(Primitive):
    """
    Union of boxes stored as a flat coordinate list.

    Every group of six coordinates ``(x1, x2, y1, y2, z1, z2)`` is one
    box.  A trailing partial group can exist after :meth:`add_coord`;
    it is ignored by queries and discarded by the next structural
    change (:meth:`add_box`, :meth:`delete_box`, :meth:`clear_overlap`).
    """

    TYPE = PrimitiveType.MULTIBOX

    def __init__(self, params: Optional[ParameterSet] = None,
                 boxes: Sequence[Sequence[Value]] = (), **kwargs):
        super().__init__(params, **kwargs)
        self._coords: List[ParameterScalar] = []
        for box in boxes:
            if len(box) != 6:
                raise ValueError("each box needs six coordinates")
            self._coords.extend(self._scalar(v) for v in box)

    # structural
    def clear_overlap(self) -> None:
        """Drop an incomplete trailing group of coordinates."""
        extra = len(self._coords) % 6
        if extra:
            del self._coords[-extra:]
            self._invalidate()

    def add_box(self, init_box: int = -1) -> int:
        """
        Append a box and return its index.

        With a valid ``init_box`` index the new box copies that box's
        coordinates, expressions included; otherwise it is all zeros.
        """
        self.clear_overlap()
        if 0 <= init_box < self.box_count:
            source = self._coords[6*init_box:6*init_box + 6]
            self._coords.extend(s.copy(self.params) for s in source)
        else:
            self._coords.extend(self._scalar(0.0) for _ in range(6))
        self._invalidate()
        return self.box_count - 1

    def delete_box(self, index: int) -> None:
        """Remove box ``index``; out of range indices are ignored."""
        self.clear_overlap()
        if not 0 <= index < self.box_count:
            return
        del self._coords[6*index:6*index + 6]
        self._invalidate()

    # per coordinate
    def add_coord(self, value: Value) -> None:
        self._coords.append(self._scalar(value))
        self._invalidate()

    def set_coord(self, index: int, value: Value) -> None:
        """Set one flat coordinate; out of range indices are ignored."""
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

    def all_coords(self) -> List[float]:
        return [s.value for s in self._coords]

    @property
    def coord_count(self) -> int:
        return len(self._coords)

    @property
    def box_count(self) -> int:
        return len(self._coords) // 6

    def _evaluate_fields(self, report: UpdateReport) -> None:
        for i, scalar in enumerate(self._coords):
            self._evaluate_scalar(scalar, f"box {i // 6} coordinate {i % 6}", report)

    def _build_shape(self, version: int) -> MultiBoxShape:
        values = self.all_coords()
        boxes = tuple(tuple(values[6*i:6*i + 6]) for i in range(len(values) // 6))
        return MultiBoxShape(boxes, version=version)

    def copy(self, params: Optional[ParameterSet] = None) -> "MultiBox":
        dup = self._copy_base(params)
        dup._coords = dup._copy_scalars(self._coords)
        return dup

    def _describe_fields(self) -> str:
        return f"{self.box_count} boxes"
