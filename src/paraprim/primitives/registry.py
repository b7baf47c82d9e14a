"""
Primitive factory keyed by type name or type tag.
"""

from __future__ import annotations

from typing import Dict, Optional, Type, Union

from ..params import ParameterSet
from .base import Primitive, PrimitiveType, TYPE_NAMES
from .boxes import Box, MultiBox
from .polygons import LinearExtrudePolygon, Polygon, RotationalExtrudePolygon
from .round import Cylinder, Sphere
from .userdefined import UserDefined

PRIMITIVE_TYPES: Dict[PrimitiveType, Type[Primitive]] = {
    PrimitiveType.BOX: Box,
    PrimitiveType.MULTIBOX: MultiBox,
    PrimitiveType.SPHERE: Sphere,
    PrimitiveType.CYLINDER: Cylinder,
    PrimitiveType.POLYGON: Polygon,
    PrimitiveType.LINPOLY: LinearExtrudePolygon,
    PrimitiveType.ROTPOLY: RotationalExtrudePolygon,
    PrimitiveType.USERDEFINED: UserDefined,
}

_BY_NAME = {name.lower(): tag for tag, name in TYPE_NAMES.items()}


def primitive_class(kind: Union[str, int, PrimitiveType]) -> Type[Primitive]:
    """
    Look up a primitive class by type name (case-insensitive) or tag.

    Raises:
        ValueError: for an unknown kind
    """
    if isinstance(kind, str):
        tag = _BY_NAME.get(kind.lower())
        if tag is None:
            raise ValueError(
                f"unknown primitive type '{kind}'. Known: {sorted(TYPE_NAMES.values())}"
            )
        return PRIMITIVE_TYPES[tag]
    try:
        return PRIMITIVE_TYPES[PrimitiveType(kind)]
    except ValueError:
        raise ValueError(f"unknown primitive type tag: {kind!r}")


def create_primitive(kind: Union[str, int, PrimitiveType],
                     params: Optional[ParameterSet] = None, **fields) -> Primitive:
    """Create a primitive of ``kind``; ``fields`` go to its constructor."""
    return primitive_class(kind)(params, **fields)
