"""
Resolved Primitive Shapes
=========================

Pure geometric representations - NO state, NO side effects.

Every primitive carries plain float coordinates and the id of the template
element it came from. The same types describe meter space (Geometry
Builder output) and pixel space (Projection Stage output).

Conventions:
- Origin at the field's top-left corner, x along the width, y along the
  length (y grows downward)
- Angles in degrees, measured clockwise from the positive x-axis

Design:
- Immutable shapes (frozen dataclass pattern)
- Fail-fast validation in __post_init__
- Immutable, safe to share across threads
"""

import math
from dataclasses import asdict, dataclass
from typing import Any, ClassVar, Dict, List, Sequence, Union

import numpy as np

from fieldline_engine.errors import InvalidDimensionsError


def _require_finite(shape: str, **values: float) -> None:
    for name, value in values.items():
        if not math.isfinite(value):
            raise InvalidDimensionsError(f"{shape} {name} must be finite, got {value}")


def _require_non_negative(shape: str, **values: float) -> None:
    for name, value in values.items():
        if value < 0:
            raise InvalidDimensionsError(f"{shape} {name} must be >= 0, got {value}")


def arc_points(
    cx: float,
    cy: float,
    radius: float,
    start_angle: float,
    end_angle: float,
    segments: int,
) -> np.ndarray:
    """
    Sample points along a circular arc.

    Returns:
        (segments + 1) x 2 array of (x, y), clockwise from start to end
    """
    angles = np.radians(np.linspace(start_angle, end_angle, segments + 1))
    return np.column_stack((cx + radius * np.cos(angles), cy + radius * np.sin(angles)))


@dataclass(frozen=True)
class RectPrimitive:
    """
    Rectangle anchored at (x, y).

    ``angle`` rotates the rectangle clockwise about its anchor; it is 0 in
    meter space and picks up the field rotation after projection.
    """

    kind: ClassVar[str] = "rect"

    element_id: str
    x: float
    y: float
    width: float
    height: float
    angle: float = 0.0

    def __post_init__(self):
        _require_finite("Rect", x=self.x, y=self.y, width=self.width,
                        height=self.height, angle=self.angle)
        _require_non_negative("Rect", width=self.width, height=self.height)

    def corners(self) -> np.ndarray:
        """
        Rectangle corners in drawing order (anchor first, clockwise).

        Returns:
            4x2 array of (x, y)
        """
        theta = math.radians(self.angle)
        cos_t, sin_t = math.cos(theta), math.sin(theta)
        offsets = np.array([
            [0.0, 0.0],
            [self.width, 0.0],
            [self.width, self.height],
            [0.0, self.height],
        ])
        rotation = np.array([[cos_t, -sin_t], [sin_t, cos_t]])
        return offsets @ rotation.T + np.array([self.x, self.y])

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, **_camel(asdict(self))}


@dataclass(frozen=True)
class LinePrimitive:
    """Segment from (x1, y1) to (x2, y2)."""

    kind: ClassVar[str] = "line"

    element_id: str
    x1: float
    y1: float
    x2: float
    y2: float

    def __post_init__(self):
        _require_finite("Line", x1=self.x1, y1=self.y1, x2=self.x2, y2=self.y2)

    @property
    def length(self) -> float:
        return math.hypot(self.x2 - self.x1, self.y2 - self.y1)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, **_camel(asdict(self))}


@dataclass(frozen=True)
class CirclePrimitive:
    """Circle outline."""

    kind: ClassVar[str] = "circle"

    element_id: str
    cx: float
    cy: float
    radius: float

    def __post_init__(self):
        _require_finite("Circle", cx=self.cx, cy=self.cy, radius=self.radius)
        _require_non_negative("Circle", radius=self.radius)

    def outline(self, segments: int = 72) -> np.ndarray:
        return arc_points(self.cx, self.cy, self.radius, 0.0, 360.0, segments)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, **_camel(asdict(self))}


@dataclass(frozen=True)
class PointPrimitive:
    """Filled dot."""

    kind: ClassVar[str] = "point"

    element_id: str
    x: float
    y: float
    radius: float

    def __post_init__(self):
        _require_finite("Point", x=self.x, y=self.y, radius=self.radius)
        _require_non_negative("Point", radius=self.radius)

    def outline(self, segments: int = 24) -> np.ndarray:
        return arc_points(self.x, self.y, self.radius, 0.0, 360.0, segments)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, **_camel(asdict(self))}


@dataclass(frozen=True)
class ArcPrimitive:
    """Arc swept clockwise from start_angle to end_angle (degrees)."""

    kind: ClassVar[str] = "arc"

    element_id: str
    cx: float
    cy: float
    radius: float
    start_angle: float
    end_angle: float

    def __post_init__(self):
        _require_finite("Arc", cx=self.cx, cy=self.cy, radius=self.radius,
                        start_angle=self.start_angle, end_angle=self.end_angle)
        _require_non_negative("Arc", radius=self.radius)

    @property
    def sweep(self) -> float:
        return self.end_angle - self.start_angle

    def outline(self, segments: int = 36) -> np.ndarray:
        return arc_points(self.cx, self.cy, self.radius,
                          self.start_angle, self.end_angle, segments)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, **_camel(asdict(self))}


ResolvedPrimitive = Union[RectPrimitive, LinePrimitive, CirclePrimitive, PointPrimitive, ArcPrimitive]


def _camel(values: Dict[str, Any]) -> Dict[str, Any]:
    result = {}
    for key, value in values.items():
        head, *rest = key.split("_")
        result[head + "".join(part.title() for part in rest)] = value
    return result


def primitives_to_dicts(primitives: Sequence[ResolvedPrimitive]) -> List[Dict[str, Any]]:
    """Serialize primitives for a renderer (JSON-compatible)."""
    return [primitive.to_dict() for primitive in primitives]
