"""
Geographic Overlay Projection
=============================

Places meter-space primitives on a map as lat/lng polylines, for map
previews of a configured field at a sports ground.

Conventions:
- The field centroid sits at ``center`` (lat, lng)
- Field-local y = 0 (the top edge) faces north before rotation
- Flat-earth approximation: 111 320 m per degree of latitude, scaled by
  cos(latitude) for longitude (fine at pitch scale)
"""

import math
from typing import List, Tuple

import numpy as np

from fieldline_engine.geometry.shapes import (
    ArcPrimitive,
    CirclePrimitive,
    LinePrimitive,
    PointPrimitive,
    RectPrimitive,
    ResolvedPrimitive,
)

METERS_PER_DEGREE_LAT = 111320.0

LatLng = Tuple[float, float]


def local_to_lat_lng(center: LatLng, x: float, y: float, rotation_degrees: float) -> LatLng:
    """
    Convert a centroid-relative offset to lat/lng.

    Args:
        center: (lat, lng) of the field centroid
        x: Offset in meters along the field width (east before rotation)
        y: Offset in meters along the field length (north before rotation)
        rotation_degrees: Field rotation

    Returns:
        (lat, lng)
    """
    lat, lng = center
    meters_per_degree_lng = METERS_PER_DEGREE_LAT * math.cos(math.radians(lat))

    # Rotate in meters, then convert each axis to degrees
    theta = math.radians(rotation_degrees)
    north = y * math.cos(theta) - x * math.sin(theta)
    east = y * math.sin(theta) + x * math.cos(theta)

    return lat + north / METERS_PER_DEGREE_LAT, lng + east / meters_per_degree_lng


def _outline(primitive: ResolvedPrimitive, segments: int) -> np.ndarray:
    if isinstance(primitive, LinePrimitive):
        return np.array([[primitive.x1, primitive.y1], [primitive.x2, primitive.y2]])
    if isinstance(primitive, RectPrimitive):
        corners = primitive.corners()
        return np.vstack([corners, corners[:1]])
    if isinstance(primitive, (CirclePrimitive, PointPrimitive, ArcPrimitive)):
        return primitive.outline(segments)
    raise TypeError(f"Unsupported primitive type: {type(primitive).__name__}")


def primitive_to_geo_path(
    primitive: ResolvedPrimitive,
    center: LatLng,
    rotation_degrees: float,
    field_width_m: float,
    field_length_m: float,
    segments: int = 36,
) -> List[LatLng]:
    """
    Convert one meter-space primitive into a lat/lng polyline.

    Circles, points and arcs are sampled with ``segments`` segments.
    Rectangles are closed (first corner repeated).
    """
    points = _outline(primitive, segments)
    return [
        local_to_lat_lng(center, x - field_width_m / 2, field_length_m / 2 - y, rotation_degrees)
        for x, y in points
    ]
