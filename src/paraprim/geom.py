"""computational geometry helpers for **paraprim**

Points and vectors are plain 3-sequences ``(x, y, z)``; lists and
tuples are both accepted and results are returned as tuples.

Bounding boxes use the flat layout ``(xmin, xmax, ymin, ymax, zmin,
zmax)``.  The range helpers are *direction-aware*: a pair of bounds
may arrive in either order and is normalized before comparing.
"""

from math import sqrt, pi, isfinite

epsilon = 0.000005
pi2 = 2.0*pi

## largest representable bounds, used for unbounded shapes
UNBOUNDED = (-1.7976931348623157e308, 1.7976931348623157e308) * 3


## R^3 -> R^3 functions
## --------------------

def sub(a, b):
    """ 3 vector, `a - b`"""
    return (a[0]-b[0], a[1]-b[1], a[2]-b[2])

def scale3(a, c):
    """ 3 vector, vector ``a`` times scalar ``c``, `a * c`"""
    return (a[0]*c, a[1]*c, a[2]*c)

def cross(a, b):
    """ 3 vector cross product ``a x b``"""
    return (a[1]*b[2] - a[2]*b[1],
            a[2]*b[0] - a[0]*b[2],
            a[0]*b[1] - a[1]*b[0])

def dot(a, b):
    """ 3 vector ``a`` dot ``b`` """
    return a[0]*b[0]+a[1]*b[1]+a[2]*b[2]

def mag(a):
    """ compute the magnitude of 3 vector ``a``"""
    return sqrt(a[0]*a[0]+a[1]*a[1]+a[2]*a[2])

def dist(a, b):
    """ compute the euclidean distance between two 3 vector points ``a`` and ``b``"""
    return mag(sub(a, b))

def normalize(a):
    """return ``a`` scaled to unit length, or ``None`` for a zero vector"""
    m = mag(a)
    if m == 0.0 or not isfinite(m):
        return None
    return scale3(a, 1.0/m)


## ranges and bounding boxes
## -------------------------

def orderedpair(a, b):
    """return ``(min, max)`` of two values"""
    return (a, b) if a <= b else (b, a)

def isinsiderange(a, b, v):
    """is ``v`` in the closed interval spanned by ``a`` and ``b``, in either order"""
    lo, hi = orderedpair(a, b)
    return lo <= v <= hi

def isinsidebbox(bbox, p):
    """ does point ``p`` lie inside flat bounding box ``bbox``? Faces are inside."""
    return isinsiderange(bbox[0], bbox[1], p[0]) and \
        isinsiderange(bbox[2], bbox[3], p[1]) and \
        isinsiderange(bbox[4], bbox[5], p[2])

def normalizebbox(bbox):
    """swap per-axis values so index 0/2/4 holds the lower bound"""
    out = []
    for n in range(3):
        out.extend(orderedpair(bbox[2*n], bbox[2*n+1]))
    return tuple(out)

def bboxunion(a, b):
    """union of two normalized flat bounding boxes; either may be ``None``"""
    if a is None:
        return b
    if b is None:
        return a
    return (min(a[0], b[0]), max(a[1], b[1]),
            min(a[2], b[2]), max(a[3], b[3]),
            min(a[4], b[4]), max(a[5], b[5]))

def pointsbbox(points):
    """flat bounding box of a non-empty sequence of 3D points"""
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    zs = [p[2] for p in points]
    return (min(xs), max(xs), min(ys), max(ys), min(zs), max(zs))


## plane frames
## ------------

def planebasis(normal):
    """Build an orthonormal frame ``(e1, e2, n)`` for a plane with normal ``normal``.

    Axis aligned normals follow the cyclic convention: normal x gives
    in-plane axes (y, z), normal y gives (z, x), normal z gives (x, y),
    whichever way the normal points.  ``n`` keeps the sign of
    ``normal``, so a plane ``dot(p, n) == elevation`` is measured along
    the normal as given: normal (0, 0, -1) at elevation 5 is z = -5.
    Returns ``None`` for a zero normal.
    """
    n = normalize(normal)
    if n is None:
        return None
    for axis in range(3):
        if abs(n[axis]) == 1.0:
            e1 = [0.0, 0.0, 0.0]
            e2 = [0.0, 0.0, 0.0]
            e1[(axis+1) % 3] = 1.0
            e2[(axis+2) % 3] = 1.0
            return (tuple(e1), tuple(e2), n)

    ## pick the world axis least aligned with n as a seed
    seed = min(range(3), key=lambda i: abs(n[i]))
    s = [0.0, 0.0, 0.0]
    s[seed] = 1.0
    e1 = normalize(cross(s, n))
    e2 = cross(n, e1)
    return (e1, e2, n)


## 2D polygons
## -----------

def isonsegment2d(a, b, p, tol=epsilon):
    """does 2D point ``p`` lie within ``tol`` of segment ``a``-``b``"""
    dx = b[0]-a[0]
    dy = b[1]-a[1]
    ll = dx*dx + dy*dy
    if ll == 0.0:
        return abs(p[0]-a[0]) <= tol and abs(p[1]-a[1]) <= tol
    u = ((p[0]-a[0])*dx + (p[1]-a[1])*dy) / ll
    u = max(0.0, min(1.0, u))
    qx = a[0] + u*dx - p[0]
    qy = a[1] + u*dy - p[1]
    return qx*qx + qy*qy <= tol*tol

def polybbox2d(poly):
    xs = [v[0] for v in poly]
    ys = [v[1] for v in poly]
    return (min(xs), max(xs), min(ys), max(ys))

def isinsidepoly2d(poly, p, tol=epsilon):
    """
    Determine if 2D point ``p`` lies within the closed vertex loop
    ``poly`` by the even-odd crossing method.  Points on an edge (within
    ``tol``) count as inside.  Loops with fewer than three vertices
    contain nothing.
    """
    n = len(poly)
    if n < 3:
        return False

    ## do quick bounding box check
    bb = polybbox2d(poly)
    if p[0] < bb[0]-tol or p[0] > bb[1]+tol or p[1] < bb[2]-tol or p[1] > bb[3]+tol:
        return False

    for i in range(n):
        if isonsegment2d(poly[i-1], poly[i], p, tol):
            return True

    inside = False
    px, py = p[0], p[1]
    j = n - 1
    for i in range(n):
        xi, yi = poly[i][0], poly[i][1]
        xj, yj = poly[j][0], poly[j][1]
        if (yi > py) != (yj > py):
            xcross = (xj - xi) * (py - yi) / (yj - yi) + xi
            if px < xcross:
                inside = not inside
        j = i
    return inside
