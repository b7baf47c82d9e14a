"""
Parametric geometric primitives.

Usage:
    from paraprim import ParameterSet
    from paraprim.primitives import Box

    params = ParameterSet({"w": 2.0})
    box = Box(params, start=(0, 0, 0), stop=("w", 1, 1))
    box.reevaluate()
    box.contains((1.5, 0.5, 0.5))   # -> True
"""

from .base import Primitive, PrimitiveType, TYPE_NAMES
from .boxes import Box, MultiBox
from .round import Sphere, Cylinder
from .polygons import Polygon, LinearExtrudePolygon, RotationalExtrudePolygon
from .userdefined import UserDefined
from .registry import PRIMITIVE_TYPES, create_primitive, primitive_class

__all__ = [
    "Primitive",
    "PrimitiveType",
    "TYPE_NAMES",
    "Box",
    "MultiBox",
    "Sphere",
    "Cylinder",
    "Polygon",
    "LinearExtrudePolygon",
    "RotationalExtrudePolygon",
    "UserDefined",
    "PRIMITIVE_TYPES",
    "create_primitive",
    "primitive_class",
]
