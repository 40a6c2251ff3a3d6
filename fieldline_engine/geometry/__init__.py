"""
Geometry Layer
==============

Bounded Context: Meter-space primitives resolved from templates.

Responsibilities:
- Primitive shape representation (immutable)
- Template + field size -> primitives (Geometry Builder)
- NO projection, NO drawing

Design Philosophy:
- Pure functions where possible
- Immutable data structures
- Fail-fast validation
- Zero side effects
"""

from fieldline_engine.geometry.shapes import (
    ArcPrimitive,
    CirclePrimitive,
    LinePrimitive,
    PointPrimitive,
    RectPrimitive,
    ResolvedPrimitive,
    arc_points,
    primitives_to_dicts,
)
from fieldline_engine.geometry.builder import build, check_field_size, resolve_element

__all__ = [
    "ArcPrimitive",
    "CirclePrimitive",
    "LinePrimitive",
    "PointPrimitive",
    "RectPrimitive",
    "ResolvedPrimitive",
    "arc_points",
    "primitives_to_dicts",
    "build",
    "check_field_size",
    "resolve_element",
]
