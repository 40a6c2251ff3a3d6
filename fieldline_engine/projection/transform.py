"""
Projection / Transform Stage
============================

Converts meter-space primitives into pixel-space primitives.

Order of operations is fixed:

    1. scale      x, y, lengths  *= pixels_per_meter
    2. rotate     clockwise about the scaled field centroid (W*s/2, L*s/2)
    3. translate  += (origin_x, origin_y)

Reordering changes the output. Rotation by 0 (or any multiple of 360)
is an exact identity.

Dependencies:
- numpy (2x2 rotation matrix, bulk point transforms)
"""

import math
from dataclasses import dataclass, replace
from typing import List, Sequence, Tuple

import numpy as np

from fieldline_engine.errors import InvalidDimensionsError
from fieldline_engine.geometry.shapes import (
    ArcPrimitive,
    CirclePrimitive,
    LinePrimitive,
    PointPrimitive,
    RectPrimitive,
    ResolvedPrimitive,
)


def normalize_degrees(angle: float) -> float:
    """Wrap an angle into [0, 360)."""
    wrapped = angle % 360.0
    return 0.0 if wrapped == 360.0 else wrapped


def rotation_matrix(rotation_degrees: float) -> np.ndarray:
    """
    Clockwise rotation matrix for y-down screen space.

    In y-down coordinates the standard counter-clockwise matrix turns
    points clockwise on screen.
    """
    theta = math.radians(rotation_degrees)
    cos_t, sin_t = math.cos(theta), math.sin(theta)
    return np.array([[cos_t, -sin_t], [sin_t, cos_t]])


def _require_positive(name: str, value: float) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidDimensionsError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value) or value <= 0:
        raise InvalidDimensionsError(f"{name} must be positive and finite, got {value}")


def _require_finite(name: str, value: float) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidDimensionsError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise InvalidDimensionsError(f"{name} must be finite, got {value}")


@dataclass(frozen=True)
class ProjectionTransform:
    """
    Immutable meter -> pixel transform for one field placement.

    Attributes:
        scale: Pixels per meter (> 0)
        rotation_degrees: Clockwise rotation, wrapped into [0, 360)
        pivot: Rotation centre in scaled (pre-translation) pixel space
        origin: Translation applied after rotation
    """

    scale: float
    rotation_degrees: float
    pivot: Tuple[float, float]
    origin: Tuple[float, float] = (0.0, 0.0)

    def __post_init__(self):
        _require_positive("scale", self.scale)
        _require_finite("rotation_degrees", self.rotation_degrees)
        for name, value in zip(("pivot.x", "pivot.y", "origin.x", "origin.y"),
                               (*self.pivot, *self.origin)):
            _require_finite(name, value)

        rotation = normalize_degrees(self.rotation_degrees)
        object.__setattr__(self, "rotation_degrees", rotation)
        matrix = np.eye(2) if rotation == 0.0 else rotation_matrix(rotation)
        object.__setattr__(self, "_matrix", matrix)

    @classmethod
    def for_field(
        cls,
        scale: float,
        rotation_degrees: float,
        field_width_m: float,
        field_length_m: float,
        origin_x: float = 0.0,
        origin_y: float = 0.0,
    ) -> "ProjectionTransform":
        """Transform rotating about the field's centroid."""
        _require_positive("scale", scale)
        _require_positive("field_width_m", field_width_m)
        _require_positive("field_length_m", field_length_m)
        pivot = (field_width_m * scale / 2, field_length_m * scale / 2)
        return cls(scale=scale, rotation_degrees=rotation_degrees,
                   pivot=pivot, origin=(origin_x, origin_y))

    @property
    def matrix(self) -> np.ndarray:
        return self._matrix.copy()

    @property
    def is_rotated(self) -> bool:
        return self.rotation_degrees != 0.0

    def apply_points(self, points: np.ndarray) -> np.ndarray:
        """
        Transform an Nx2 array of meter coordinates.

        Returns:
            Nx2 array of pixel coordinates
        """
        scaled = np.asarray(points, dtype=np.float64) * self.scale
        if self.is_rotated:
            pivot = np.array(self.pivot)
            scaled = (scaled - pivot) @ self._matrix.T + pivot
        return scaled + np.array(self.origin)

    def apply_point(self, x: float, y: float) -> Tuple[float, float]:
        px, py = self.apply_points(np.array([[x, y]]))[0]
        return float(px), float(py)

    def apply_length(self, length: float) -> float:
        return length * self.scale

    def apply_angle(self, angle: float) -> float:
        """Shift a direction angle by the rotation (identity when unrotated)."""
        if not self.is_rotated:
            return angle
        return normalize_degrees(angle + self.rotation_degrees)

    def apply(self, primitive: ResolvedPrimitive) -> ResolvedPrimitive:
        """Project one primitive; its element id is preserved."""
        if isinstance(primitive, LinePrimitive):
            (x1, y1), (x2, y2) = self.apply_points(
                np.array([[primitive.x1, primitive.y1], [primitive.x2, primitive.y2]])
            )
            return replace(primitive, x1=float(x1), y1=float(y1), x2=float(x2), y2=float(y2))

        if isinstance(primitive, RectPrimitive):
            x, y = self.apply_point(primitive.x, primitive.y)
            return replace(
                primitive,
                x=x,
                y=y,
                width=self.apply_length(primitive.width),
                height=self.apply_length(primitive.height),
                angle=self.apply_angle(primitive.angle),
            )

        if isinstance(primitive, CirclePrimitive):
            cx, cy = self.apply_point(primitive.cx, primitive.cy)
            return replace(primitive, cx=cx, cy=cy, radius=self.apply_length(primitive.radius))

        if isinstance(primitive, PointPrimitive):
            x, y = self.apply_point(primitive.x, primitive.y)
            return replace(primitive, x=x, y=y, radius=self.apply_length(primitive.radius))

        if isinstance(primitive, ArcPrimitive):
            cx, cy = self.apply_point(primitive.cx, primitive.cy)
            start = self.apply_angle(primitive.start_angle)
            return replace(
                primitive,
                cx=cx,
                cy=cy,
                radius=self.apply_length(primitive.radius),
                start_angle=start,
                end_angle=start + primitive.sweep if self.is_rotated else primitive.end_angle,
            )

        raise TypeError(f"Unsupported primitive type: {type(primitive).__name__}")


def project(
    primitives: Sequence[ResolvedPrimitive],
    scale: float,
    rotation_degrees: float,
    field_width_m: float,
    field_length_m: float,
    origin_x: float = 0.0,
    origin_y: float = 0.0,
) -> List[ResolvedPrimitive]:
    """
    Project meter-space primitives into pixel space.

    Args:
        primitives: Output of the Geometry Builder
        scale: Pixels per meter (> 0)
        rotation_degrees: Clockwise rotation about the field centroid
        field_width_m: Field width in meters (defines the centroid)
        field_length_m: Field length in meters (defines the centroid)
        origin_x: Horizontal offset applied after rotation
        origin_y: Vertical offset applied after rotation

    Returns:
        Pixel-space primitives, same order and element ids

    Raises:
        InvalidDimensionsError: Non-positive scale or field size, non-finite
            rotation or origin
    """
    transform = ProjectionTransform.for_field(
        scale, rotation_degrees, field_width_m, field_length_m, origin_x, origin_y
    )
    return [transform.apply(primitive) for primitive in primitives]


def centered_origin(
    canvas_wh: Tuple[int, int],
    field_width_m: float,
    field_length_m: float,
    scale: float,
) -> Tuple[float, float]:
    """
    Origin that puts the field centroid at the canvas centre.

    Rotation happens about the centroid, so the result holds for any
    rotation.
    """
    _require_positive("scale", scale)
    canvas_width, canvas_height = canvas_wh
    return (
        canvas_width / 2 - field_width_m * scale / 2,
        canvas_height / 2 - field_length_m * scale / 2,
    )


def fit_scale(
    canvas_wh: Tuple[int, int],
    field_width_m: float,
    field_length_m: float,
    margin_px: float = 0.0,
) -> float:
    """
    Largest scale at which the field fits the canvas under any rotation.

    Uses the field diagonal, the widest extent a rotated field can reach.

    Raises:
        InvalidDimensionsError: If the margin leaves no room on the canvas
    """
    _require_positive("field_width_m", field_width_m)
    _require_positive("field_length_m", field_length_m)
    available = min(canvas_wh[0], canvas_wh[1]) - 2 * margin_px
    if available <= 0:
        raise InvalidDimensionsError(
            f"Canvas {canvas_wh} too small for margin {margin_px}px"
        )
    return available / math.hypot(field_width_m, field_length_m)
