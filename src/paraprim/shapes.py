"""evaluated primitive snapshots for **paraprim**

====================
OVERVIEW
====================

A primitive's parametric fields are turned into an immutable *shape*
snapshot once they have been evaluated.  Every query works on a
snapshot, never on the live primitive, so a snapshot can be shared
freely between threads while the primitive is being edited.

There is exactly one bounding-box function, ``shape_bounds()``, and one
containment function, ``shape_contains()``.  Both dispatch over the
closed set of snapshot classes defined here.

bounding boxes
==============

``shape_bounds()`` returns a ``Bounds`` tuple ``(xmin, xmax, ymin,
ymax, zmin, zmax, accurate)``.  ``accurate`` is true only when the box
is the tight envelope of the shape; otherwise it is a conservative
over-approximation.

containment
===========

``shape_contains()`` never raises for geometric problems.  A missing
point, a degenerate shape or an expression that fails to evaluate all
answer ``False``.

"""

from dataclasses import dataclass, field
from enum import IntEnum
from math import asin, atan2, cos, fmod, hypot, isnan, pi, sin, sqrt
from typing import NamedTuple, Optional, Sequence, Tuple, Any

from . import geom
from .errors import UnknownCoordinateSystem

Point = Tuple[float, float, float]
Sextet = Tuple[float, float, float, float, float, float]


class Bounds(NamedTuple):
    """Axis aligned bounding box plus the accuracy flag."""
    xmin: float
    xmax: float
    ymin: float
    ymax: float
    zmin: float
    zmax: float
    accurate: bool = True

    @property
    def box(self) -> Sextet:
        return tuple(self[:6])

    @classmethod
    def of(cls, box: Sequence[float], accurate: bool) -> "Bounds":
        return cls(*box[:6], accurate=accurate)


EMPTY_BOUNDS = Bounds(0.0, 0.0, 0.0, 0.0, 0.0, 0.0, False)
UNBOUNDED_BOUNDS = Bounds.of(geom.UNBOUNDED, False)


class CoordinateSystem(IntEnum):
    """Coordinate system used by a user defined primitive's function."""
    CARTESIAN = 0
    CYLINDRICAL = 1
    SPHERICAL = 2


_SYSTEM_VARIABLES = {
    CoordinateSystem.CARTESIAN: ("x", "y", "z"),
    CoordinateSystem.CYLINDRICAL: ("x", "y", "z", "r", "a"),
    CoordinateSystem.SPHERICAL: ("x", "y", "z", "r", "a", "t"),
}


def coordinate_variables(system) -> Tuple[str, ...]:
    """
    Positional variable names for ``system``.

    Raises:
        UnknownCoordinateSystem: for a tag that is not a known system
    """
    try:
        return _SYSTEM_VARIABLES[CoordinateSystem(system)]
    except (ValueError, KeyError, TypeError):
        raise UnknownCoordinateSystem(system)


# ---------------------------------------------------------------------------
# Snapshots
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Shape:
    """Base class for evaluated snapshots."""
    version: int = field(default=0, kw_only=True)


@dataclass(frozen=True)
class BoxShape(Shape):
    start: Point
    stop: Point


@dataclass(frozen=True)
class MultiBoxShape(Shape):
    """Union of boxes; each sextet is ``(x1, x2, y1, y2, z1, z2)``."""
    boxes: Tuple[Sextet, ...] = ()


@dataclass(frozen=True)
class SphereShape(Shape):
    center: Point
    radius: float


@dataclass(frozen=True)
class CylinderShape(Shape):
    start: Point
    stop: Point
    radius: float


@dataclass(frozen=True)
class PolygonShape(Shape):
    """Planar vertex loop at ``dot(p, n) == elevation``."""
    elevation: float
    normal: Point
    vertices: Tuple[Tuple[float, float], ...] = ()
    frame: Optional[Tuple[Point, Point, Point]] = field(default=None, init=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "frame", geom.planebasis(self.normal))

    @property
    def valid(self) -> bool:
        return self.frame is not None and len(self.vertices) >= 3

    def to_world(self, u: float, v: float, height: float = 0.0) -> Point:
        e1, e2, n = self.frame
        h = self.elevation + height
        return (h*n[0] + u*e1[0] + v*e2[0],
                h*n[1] + u*e1[1] + v*e2[1],
                h*n[2] + u*e1[2] + v*e2[2])

    def world_vertices(self, height: float = 0.0):
        return [self.to_world(u, v, height) for u, v in self.vertices]

    def to_plane(self, p) -> Tuple[float, float, float]:
        """``(u, v, h)`` of a world point, ``h`` measured from the plane."""
        e1, e2, n = self.frame
        return (geom.dot(p, e1), geom.dot(p, e2), geom.dot(p, n) - self.elevation)


@dataclass(frozen=True)
class LinearExtrudeShape(PolygonShape):
    length: float = 0.0


@dataclass(frozen=True)
class RotationalExtrudeShape(PolygonShape):
    """Polygon swept about ``axis`` (through the origin) from start to stop angle."""
    axis: Point = (0.0, 0.0, 1.0)
    start_angle: float = 0.0
    stop_angle: float = geom.pi2

    @property
    def axis_frame(self):
        """``(a, u, w)``: unit axis, angle-zero direction and the right-hand third."""
        if self.frame is None:
            return None
        a = geom.normalize(self.axis)
        if a is None:
            return None
        u = geom.normalize(geom.cross(self.frame[2], a))
        if u is None:
            return None
        return (a, u, geom.cross(a, u))

    @property
    def valid(self) -> bool:
        return super().valid and self.axis_frame is not None

    def sweep_extent(self):
        """``(amin, amax, rmax)``: axial range of the vertices and their largest distance from the axis."""
        a, u, w = self.axis_frame
        axial = []
        rmax = 0.0
        for v in self.world_vertices():
            axial.append(geom.dot(v, a))
            rmax = max(rmax, hypot(geom.dot(v, u), geom.dot(v, w)))
        return (min(axial), max(axial), rmax)


@dataclass(frozen=True)
class UserDefinedShape(Shape):
    """
    Compiled implicit function.

    ``params`` is the live parameter set: containment reads its current
    values and refuses to answer when its size differs from
    ``compiled_count``.
    """
    expression: Any = None
    system: Any = CoordinateSystem.CARTESIAN
    shift: Point = (0.0, 0.0, 0.0)
    params: Any = None
    compiled_count: int = 0


# ---------------------------------------------------------------------------
# Bounding boxes
# ---------------------------------------------------------------------------

def _box_bounds(shape: BoxShape) -> Bounds:
    s, e = shape.start, shape.stop
    return Bounds.of(geom.normalizebbox((s[0], e[0], s[1], e[1], s[2], e[2])), True)


def _multibox_bounds(shape: MultiBoxShape) -> Bounds:
    bb = None
    for sextet in shape.boxes:
        bb = geom.bboxunion(bb, geom.normalizebbox(sextet))
    if bb is None:
        return EMPTY_BOUNDS
    return Bounds.of(bb, False)


def _sphere_bounds(shape: SphereShape) -> Bounds:
    c, r = shape.center, shape.radius
    return Bounds(c[0]-r, c[0]+r, c[1]-r, c[1]+r, c[2]-r, c[2]+r, True)


def _cylinder_bounds(shape: CylinderShape) -> Bounds:
    r = shape.radius
    bb = []
    direction = 0
    for i in range(3):
        lo, hi = geom.orderedpair(shape.start[i], shape.stop[i])
        bb.extend((lo - r, hi + r))
        if shape.start[i] == shape.stop[i]:
            direction += 1 << i

    ## aligned with exactly one axis: tighten along that axis
    aligned = {3: 2, 5: 1, 6: 0}.get(direction)
    if aligned is None:
        return Bounds.of(bb, False)
    bb[2*aligned] += r
    bb[2*aligned+1] -= r
    return Bounds.of(bb, True)


def _polygon_bounds(shape: PolygonShape) -> Bounds:
    if not shape.valid:
        return EMPTY_BOUNDS
    return Bounds.of(geom.pointsbbox(shape.world_vertices()), True)


def _linear_extrude_bounds(shape: LinearExtrudeShape) -> Bounds:
    if not shape.valid:
        return EMPTY_BOUNDS
    caps = shape.world_vertices() + shape.world_vertices(shape.length)
    return Bounds.of(geom.pointsbbox(caps), True)


def _rotational_extrude_bounds(shape: RotationalExtrudeShape) -> Bounds:
    if not shape.valid:
        return EMPTY_BOUNDS
    a = shape.axis_frame[0]
    amin, amax, rmax = shape.sweep_extent()
    bb = []
    for i in range(3):
        lo, hi = geom.orderedpair(amin*a[i], amax*a[i])
        spread = rmax*sqrt(max(0.0, 1.0 - a[i]*a[i]))
        bb.extend((lo - spread, hi + spread))
    return Bounds.of(bb, False)


def shape_bounds(shape: Shape) -> Bounds:
    """Bounding box of any snapshot kind."""
    if isinstance(shape, BoxShape):
        return _box_bounds(shape)
    elif isinstance(shape, MultiBoxShape):
        return _multibox_bounds(shape)
    elif isinstance(shape, SphereShape):
        return _sphere_bounds(shape)
    elif isinstance(shape, CylinderShape):
        return _cylinder_bounds(shape)
    elif isinstance(shape, RotationalExtrudeShape):
        return _rotational_extrude_bounds(shape)
    elif isinstance(shape, LinearExtrudeShape):
        return _linear_extrude_bounds(shape)
    elif isinstance(shape, PolygonShape):
        return _polygon_bounds(shape)
    elif isinstance(shape, UserDefinedShape):
        return UNBOUNDED_BOUNDS
    raise TypeError(f"unknown shape kind: {type(shape).__name__}")


# ---------------------------------------------------------------------------
# Containment
# ---------------------------------------------------------------------------

def _box_contains(shape: BoxShape, p) -> bool:
    s, e = shape.start, shape.stop
    return geom.isinsidebbox((s[0], e[0], s[1], e[1], s[2], e[2]), p)


def _multibox_contains(shape: MultiBoxShape, p) -> bool:
    return any(geom.isinsidebbox(sextet, p) for sextet in shape.boxes)


def _sphere_contains(shape: SphereShape, p) -> bool:
    return geom.dist(p, shape.center) < shape.radius


def _cylinder_contains(shape: CylinderShape, p) -> bool:
    r0, r1 = shape.start, shape.stop
    a = geom.sub(r1, r0)
    a2 = geom.dot(a, a)
    if a2 == 0.0:
        return False
    t = geom.dot(geom.sub(p, r0), a) / a2
    e = 0.0
    for i in range(3):
        foot = r0[i] + t*a[i]
        ## per-axis range of the foot point, only along axes the segment spans
        if a[i] != 0.0 and not geom.isinsiderange(r0[i], r1[i], foot):
            return False
        e += (foot - p[i])**2
    return e < shape.radius*shape.radius


def _edge_tol(tol: float) -> float:
    return tol if tol > 0.0 else 1e-12


def _polygon_contains(shape: PolygonShape, p, tol: float) -> bool:
    if not shape.valid:
        return False
    u, v, h = shape.to_plane(p)
    if abs(h) > tol:
        return False
    return geom.isinsidepoly2d(shape.vertices, (u, v), _edge_tol(tol))


def _linear_extrude_contains(shape: LinearExtrudeShape, p, tol: float) -> bool:
    if not shape.valid:
        return False
    u, v, h = shape.to_plane(p)
    lo, hi = geom.orderedpair(0.0, shape.length)
    if h < lo - tol or h > hi + tol:
        return False
    return geom.isinsidepoly2d(shape.vertices, (u, v), _edge_tol(tol))


def _angle_inside(phi: float, start: float, stop: float, tol: float) -> bool:
    lo, hi = geom.orderedpair(start, stop)
    if hi - lo >= geom.pi2:
        return True
    rel = fmod(phi - lo, geom.pi2)
    if rel < 0.0:
        rel += geom.pi2
    return rel <= (hi - lo) + tol or rel >= geom.pi2 - tol


def _rotational_extrude_contains(shape: RotationalExtrudeShape, p, tol: float) -> bool:
    if not shape.valid:
        return False
    a, u, w = shape.axis_frame
    n = shape.frame[2]
    axial = geom.dot(p, a)
    pu, pw = geom.dot(p, u), geom.dot(p, w)
    radial = hypot(pu, pw)
    if radial <= _edge_tol(tol):
        ## points on the axis are fixed by the sweep
        return _polygon_contains(shape, p, tol)

    ## the circle of p meets the polygon plane where
    ## radial*sin(psi)*dot(n, w) == elevation - axial*dot(n, a)
    reach = radial*geom.dot(n, w)
    offset = shape.elevation - axial*geom.dot(n, a)
    if abs(offset) > reach + tol:
        return False
    psi = asin(max(-1.0, min(1.0, offset/reach)))
    phi = atan2(pw, pu)
    for landing in (psi, pi - psi):
        if not _angle_inside(phi - landing, shape.start_angle, shape.stop_angle, _edge_tol(tol)):
            continue
        c, s = cos(landing)*radial, sin(landing)*radial
        q = tuple(axial*a[i] + c*u[i] + s*w[i] for i in range(3))
        qu, qv, _ = shape.to_plane(q)
        if geom.isinsidepoly2d(shape.vertices, (qu, qv), _edge_tol(tol)):
            return True
    return False


def userdefined_values(shape: UserDefinedShape, p):
    """
    Variable vector for the compiled function at point ``p``:
    parameter values, then ``x, y, z`` and the system's extras.
    """
    x = p[0] - shape.shift[0]
    y = p[1] - shape.shift[1]
    z = p[2] - shape.shift[2]
    rxy = sqrt(x*x + y*y)
    values = list(shape.params.values()) if shape.params is not None else []
    values.extend((x, y, z))
    system = CoordinateSystem(shape.system)
    if system == CoordinateSystem.CYLINDRICAL:
        values.extend((rxy, atan2(y, x)))
    elif system == CoordinateSystem.SPHERICAL:
        values.extend((sqrt(x*x + y*y + z*z), atan2(y, x), atan2(rxy, z)))
    return values


def _userdefined_contains(shape: UserDefinedShape, p) -> bool:
    if shape.expression is None:
        return False
    current = shape.params.count if shape.params is not None else 0
    if current != shape.compiled_count:
        return False
    try:
        values = userdefined_values(shape, p)
        result = shape.expression.evaluate(values)
    except ValueError:
        return False
    return not isnan(result) and result == 1.0


def shape_contains(shape: Shape, point, tol: float = 0.0) -> bool:
    """
    Is ``point`` inside ``shape``.

    ``tol`` widens the polygon family's plane and edge tests; the
    closed-form shapes ignore it.
    """
    if point is None or len(point) < 3:
        return False
    if isinstance(shape, BoxShape):
        return _box_contains(shape, point)
    elif isinstance(shape, MultiBoxShape):
        return _multibox_contains(shape, point)
    elif isinstance(shape, SphereShape):
        return _sphere_contains(shape, point)
    elif isinstance(shape, CylinderShape):
        return _cylinder_contains(shape, point)
    elif isinstance(shape, RotationalExtrudeShape):
        return _rotational_extrude_contains(shape, point, tol)
    elif isinstance(shape, LinearExtrudeShape):
        return _linear_extrude_contains(shape, point, tol)
    elif isinstance(shape, PolygonShape):
        return _polygon_contains(shape, point, tol)
    elif isinstance(shape, UserDefinedShape):
        return _userdefined_contains(shape, point)
    raise TypeError(f"unknown shape kind: {type(shape).__name__}")
