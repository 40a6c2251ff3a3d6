"""
Projection Layer
================

Bounded Context: Meter space -> render space.

Responsibilities:
- Scale / rotate / translate primitives into pixel space
- Canvas placement helpers (centring, fit-to-canvas scale)
- Lat/lng polylines for map overlays
- NO drawing
"""

from fieldline_engine.projection.transform import (
    ProjectionTransform,
    centered_origin,
    fit_scale,
    normalize_degrees,
    project,
    rotation_matrix,
)
from fieldline_engine.projection.geo import local_to_lat_lng, primitive_to_geo_path

__all__ = [
    "ProjectionTransform",
    "centered_origin",
    "fit_scale",
    "normalize_degrees",
    "project",
    "rotation_matrix",
    "local_to_lat_lng",
    "primitive_to_geo_path",
]
