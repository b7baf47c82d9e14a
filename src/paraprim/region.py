"""
Regions: ordered groups of primitives that classify points.

A region does not hold primitives directly.  It holds an ordered list
of primitive ids into its :class:`~paraprim.structure.Structure`, which
owns the primitives and the ownership map.  All membership edits go
through the structure so a primitive is never listed by two regions.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from .primitives import (
    Box, Cylinder, LinearExtrudePolygon, MultiBox, Polygon, Primitive,
    RotationalExtrudePolygon, Sphere, UserDefined,
)

logger = logging.getLogger(__name__)


class Region:
    """A named, ordered set of primitives (a material or property)."""

    def __init__(self, structure, name: str, region_id: int):
        self._structure = structure
        self.name = name
        self.id = region_id
        self._members: List[int] = []

    @property
    def structure(self):
        return self._structure

    # ------------------------------------------------------------------
    # membership
    # ------------------------------------------------------------------

    def attach(self, primitive: Primitive) -> Primitive:
        """Make this region the owner of ``primitive``, detaching it elsewhere."""
        self._structure.set_owner(primitive, self)
        return primitive

    def detach(self, primitive: Primitive) -> None:
        """Release ``primitive`` if this region owns it."""
        with self._structure.lock:
            if self._structure.owner_of(primitive) is self:
                self._structure.set_owner(primitive, None)

    def take(self, index: int) -> Optional[Primitive]:
        """Detach and return the primitive at ``index``, or ``None``."""
        with self._structure.lock:
            primitive = self.primitive_at(index)
            if primitive is not None:
                self._structure.set_owner(primitive, None)
            return primitive

    def primitive_count(self) -> int:
        return len(self._members)

    def __len__(self) -> int:
        return len(self._members)

    def primitive_at(self, index: int) -> Optional[Primitive]:
        with self._structure.lock:
            if 0 <= index < len(self._members):
                return self._structure.primitive(self._members[index])
            return None

    @property
    def primitives(self) -> List[Primitive]:
        """Members in list order (a copy)."""
        with self._structure.lock:
            return [self._structure.primitive(pid) for pid in self._members]

    def __contains__(self, primitive: Primitive) -> bool:
        return self._structure.owner_of(primitive) is self

    def __iter__(self):
        return iter(self.primitives)

    # ------------------------------------------------------------------
    # classification
    # ------------------------------------------------------------------

    def classify(self, point, tol: float = 0.0,
                 mark_used: bool = False) -> Tuple[Optional[Primitive], Optional[int]]:
        """
        Find the governing primitive for ``point``.

        Returns ``(primitive, priority)`` for the containing member with
        the highest priority, or ``(None, None)``.  On equal priority the
        member later in the list wins.
        """
        found = None
        for primitive in self.primitives:
            if not primitive.contains(point, tol):
                continue
            if found is None or primitive.priority >= found.priority:
                found = primitive
        if found is None:
            return None, None
        if mark_used:
            found.used = True
        return found, found.priority

    def contains(self, point, tol: float = 0.0) -> bool:
        return self.classify(point, tol)[0] is not None

    # ------------------------------------------------------------------
    # convenience constructors
    # ------------------------------------------------------------------

    def _adopt(self, primitive: Primitive) -> Primitive:
        self._structure.add_primitive(primitive, self)
        return primitive

    def add_box(self, start: Sequence = (0.0, 0.0, 0.0), stop: Sequence = (0.0, 0.0, 0.0),
                priority: int = 0) -> Box:
        return self._adopt(Box(self._structure.params, start=start, stop=stop,
                               priority=priority))

    def add_multibox(self, boxes: Sequence[Sequence] = (), priority: int = 0) -> MultiBox:
        return self._adopt(MultiBox(self._structure.params, boxes=boxes, priority=priority))

    def add_sphere(self, center: Sequence = (0.0, 0.0, 0.0), radius=0.0,
                   priority: int = 0) -> Sphere:
        return self._adopt(Sphere(self._structure.params, center=center, radius=radius,
                                  priority=priority))

    def add_cylinder(self, start: Sequence = (0.0, 0.0, 0.0), stop: Sequence = (0.0, 0.0, 0.0),
                     radius=0.0, priority: int = 0) -> Cylinder:
        return self._adopt(Cylinder(self._structure.params, start=start, stop=stop,
                                    radius=radius, priority=priority))

    def add_polygon(self, vertices: Sequence[Sequence] = (), elevation=0.0,
                    normal: Sequence = (0.0, 0.0, 1.0), priority: int = 0) -> Polygon:
        return self._adopt(Polygon(self._structure.params, elevation=elevation,
                                   normal=normal, vertices=vertices, priority=priority))

    def add_linear_extrude(self, vertices: Sequence[Sequence] = (), length=0.0,
                           elevation=0.0, normal: Sequence = (0.0, 0.0, 1.0),
                           priority: int = 0) -> LinearExtrudePolygon:
        return self._adopt(LinearExtrudePolygon(
            self._structure.params, length=length, elevation=elevation,
            normal=normal, vertices=vertices, priority=priority))

    def add_rotational_extrude(self, vertices: Sequence[Sequence] = (),
                               axis: Sequence = (0.0, 0.0, 1.0), start_angle=0.0,
                               stop_angle=None, elevation=0.0,
                               normal: Sequence = (0.0, 1.0, 0.0),
                               priority: int = 0) -> RotationalExtrudePolygon:
        fields = dict(axis=axis, start_angle=start_angle, elevation=elevation,
                      normal=normal, vertices=vertices, priority=priority)
        if stop_angle is not None:
            fields["stop_angle"] = stop_angle
        return self._adopt(RotationalExtrudePolygon(self._structure.params, **fields))

    def add_user_defined(self, function: str, coordinate_system=0,
                         shift: Sequence = (0.0, 0.0, 0.0), priority: int = 0) -> UserDefined:
        return self._adopt(UserDefined(self._structure.params, function=function,
                                       coordinate_system=coordinate_system, shift=shift,
                                       priority=priority))

    # ------------------------------------------------------------------
    # diagnostics
    # ------------------------------------------------------------------

    def reset_used(self) -> None:
        for primitive in self.primitives:
            primitive.reset_used()

    def unused_primitives(self) -> List[Primitive]:
        return [p for p in self.primitives if not p.used]

    def warn_unused_primitives(self) -> List[Primitive]:
        """Log one warning per member that never governed a point."""
        unused = self.unused_primitives()
        for primitive in unused:
            logger.warning("Region '%s' (ID: %s): unused primitive %s",
                           self.name, self.id, primitive.describe())
        return unused

    def status(self) -> str:
        """Multi-line summary of the region and its members."""
        lines = [f"Region '{self.name}' (ID: {self.id}): {len(self)} primitives"]
        for primitive in self.primitives:
            flag = "used" if primitive.used else "unused"
            lines.append(f"  {primitive.describe()} [{flag}]")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"Region({self.name!r}, id={self.id}, primitives={len(self)})"
