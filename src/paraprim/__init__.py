# -*- coding: utf-8 -*-
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("paraprim")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"

from .params import Parameter, ParameterSet, ParameterScalar
from .errors import (
    PrimitiveError,
    ExpressionParseError,
    ParameterMismatchError,
    UnknownCoordinateSystem,
    InvalidInput,
    UpdateReport,
)
from .shapes import Bounds, CoordinateSystem, shape_bounds, shape_contains
from .primitives import (
    Primitive,
    PrimitiveType,
    Box,
    MultiBox,
    Sphere,
    Cylinder,
    Polygon,
    LinearExtrudePolygon,
    RotationalExtrudePolygon,
    UserDefined,
    PRIMITIVE_TYPES,
    create_primitive,
)
from .region import Region
from .structure import Structure
from .config import Settings, load_settings
from .logging_config import setup_logging

__all__ = [
    "__version__",
    "Parameter",
    "ParameterSet",
    "ParameterScalar",
    "PrimitiveError",
    "ExpressionParseError",
    "ParameterMismatchError",
    "UnknownCoordinateSystem",
    "InvalidInput",
    "UpdateReport",
    "Bounds",
    "CoordinateSystem",
    "shape_bounds",
    "shape_contains",
    "Primitive",
    "PrimitiveType",
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
    "Region",
    "Structure",
    "Settings",
    "load_settings",
    "setup_logging",
]
