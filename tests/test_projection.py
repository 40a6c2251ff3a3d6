"""
Tests for the projection / transform stage.
"""
import math

import numpy as np
import pytest

from fieldline_engine.errors import InvalidDimensionsError
from fieldline_engine.geometry import ArcPrimitive, LinePrimitive, RectPrimitive, build
from fieldline_engine.projection import (
    ProjectionTransform,
    centered_origin,
    fit_scale,
    normalize_degrees,
    project,
)

EPS = 1e-9

COORDINATE_FIELDS = {
    "rect": ("x", "y", "width", "height"),
    "line": ("x1", "y1", "x2", "y2"),
    "circle": ("cx", "cy", "radius"),
    "point": ("x", "y", "radius"),
    "arc": ("cx", "cy", "radius"),
}
ANGLE_FIELDS = {
    "rect": ("angle",),
    "arc": ("start_angle", "end_angle"),
}


def angle_delta(a, b):
    """Smallest difference between two angles, in degrees."""
    d = (a - b) % 360.0
    return min(d, 360.0 - d)


def assert_same_geometry(actual, expected, abs_tol=EPS, scale=1.0):
    assert len(actual) == len(expected)
    for a, e in zip(actual, expected):
        assert a.element_id == e.element_id
        assert a.kind == e.kind
        for name in COORDINATE_FIELDS[a.kind]:
            assert getattr(a, name) == pytest.approx(getattr(e, name) * scale, rel=EPS, abs=abs_tol), name
        for name in ANGLE_FIELDS.get(a.kind, ()):
            assert angle_delta(getattr(a, name), getattr(e, name)) < 1e-6, name


@pytest.fixture
def meters(soccer_template):
    return build(soccer_template, 64, 100)


class TestProject:
    """Properties of project()."""

    def test_deterministic(self, meters):
        first = project(meters, 6, 15, 64, 100, 40, 40)
        second = project(meters, 6, 15, 64, 100, 40, 40)
        assert first == second

    @pytest.mark.parametrize("rotation", [0, 360, 720, -360])
    def test_rotation_identity(self, meters, rotation):
        projected = project(meters, 3, rotation, 64, 100, 0, 0)
        assert_same_geometry(projected, meters, scale=3)

    def test_zero_rotation_keeps_angles_exact(self, meters):
        projected = project(meters, 3, 0, 64, 100)
        arcs = [p for p in projected if isinstance(p, ArcPrimitive)]
        assert [(a.start_angle, a.end_angle) for a in arcs] == [
            (37, 143), (217, 323), (0, 90), (90, 180), (270, 360), (180, 270),
        ]

    @pytest.mark.parametrize("rotation", [15, 90, 137.5, 270, 359])
    def test_rotation_periodicity(self, meters, rotation):
        scale = 4
        once = project(meters, scale, rotation, 64, 100)
        # Second pass at scale 1 rotates about the same (already scaled) centroid
        back = project(once, 1, 360 - rotation, 64 * scale, 100 * scale)
        assert_same_geometry(back, meters, abs_tol=1e-9 * 1000, scale=scale)

    @pytest.mark.parametrize("rotation", [0, 30])
    def test_scale_linearity(self, meters, rotation):
        single = project(meters, 5, rotation, 64, 100)
        double = project(meters, 10, rotation, 64, 100)
        for a, b in zip(single, double):
            for name in COORDINATE_FIELDS[a.kind]:
                assert getattr(b, name) == pytest.approx(2 * getattr(a, name), abs=1e-9)

    def test_translation_after_rotation(self, meters):
        base = project(meters, 2, 45, 64, 100)
        moved = project(meters, 2, 45, 64, 100, origin_x=100, origin_y=-50)
        for a, b in zip(base, moved):
            if isinstance(a, LinePrimitive):
                assert b.x1 == pytest.approx(a.x1 + 100)
                assert b.y1 == pytest.approx(a.y1 - 50)

    def test_rotation_is_clockwise_about_centroid(self):
        # Point on +x of a 10 x 10 field's centroid, rotated 90° clockwise (y down)
        line = LinePrimitive("probe", 5, 5, 10, 5)
        (rotated,) = project([line], 1, 90, 10, 10)
        assert (rotated.x1, rotated.y1) == pytest.approx((5, 5))
        assert (rotated.x2, rotated.y2) == pytest.approx((5, 10))

    def test_field_rotation_180(self, meters):
        projected = project(meters, 1, 180, 64, 100)
        boundary = projected[0]
        assert isinstance(boundary, RectPrimitive)
        assert (boundary.x, boundary.y) == pytest.approx((64, 100))
        assert boundary.angle == 180
        assert np.allclose(
            sorted(map(tuple, boundary.corners().round(9))),
            sorted([(0, 0), (64, 0), (64, 100), (0, 100)]),
        )

    def test_arc_angles_follow_rotation(self, meters):
        projected = {p.element_id: p for p in project(meters, 1, 30, 64, 100)}
        arc = projected["penalty_arc_top"]
        assert arc.start_angle == pytest.approx(67)
        assert arc.end_angle == pytest.approx(173)

    def test_arc_sweep_preserved_across_wrap(self, meters):
        projected = {p.element_id: p for p in project(meters, 1, 100, 64, 100)}
        arc = projected["corner_arc_bl"]
        assert arc.start_angle == pytest.approx(10)
        assert arc.sweep == pytest.approx(90)

    def test_element_ids_preserved(self, meters):
        projected = project(meters, 2, 77, 64, 100, 10, 10)
        assert [p.element_id for p in projected] == [p.element_id for p in meters]

    @pytest.mark.parametrize("scale", [0, -1, float("nan")])
    def test_invalid_scale(self, meters, scale):
        with pytest.raises(InvalidDimensionsError):
            project(meters, scale, 0, 64, 100)

    def test_invalid_rotation(self, meters):
        with pytest.raises(InvalidDimensionsError):
            project(meters, 1, float("inf"), 64, 100)


class TestProjectionTransform:
    """Tests for ProjectionTransform."""

    def test_rotation_normalised(self):
        transform = ProjectionTransform.for_field(1, -90, 10, 10)
        assert transform.rotation_degrees == 270

    def test_identity_matrix_when_unrotated(self):
        transform = ProjectionTransform.for_field(2, 360, 10, 10)
        assert not transform.is_rotated
        assert np.array_equal(transform.matrix, np.eye(2))

    def test_apply_points(self):
        transform = ProjectionTransform.for_field(2, 0, 10, 10, origin_x=1, origin_y=1)
        points = transform.apply_points(np.array([[0, 0], [10, 10]]))
        assert np.allclose(points, [[1, 1], [21, 21]])

    def test_normalize_degrees(self):
        assert normalize_degrees(370) == 10
        assert normalize_degrees(-10) == 350
        assert normalize_degrees(360) == 0


class TestCanvasPlacement:
    """Tests for centered_origin() and fit_scale()."""

    def test_centered_origin(self):
        assert centered_origin((1280, 720), 64, 100, 6) == (448, 60)

    @pytest.mark.parametrize("rotation", [0, 45, 90])
    def test_centroid_lands_on_canvas_centre(self, rotation):
        origin = centered_origin((800, 600), 64, 100, 4)
        probe = LinePrimitive("c", 32, 50, 32, 50)
        (projected,) = project([probe], 4, rotation, 64, 100, *origin)
        assert (projected.x1, projected.y1) == pytest.approx((400, 300))

    def test_fit_scale_uses_diagonal(self):
        scale = fit_scale((1000, 800), 60, 80, margin_px=0)
        assert scale == pytest.approx(800 / 100)

    def test_fit_scale_margin(self):
        assert fit_scale((1000, 800), 60, 80, margin_px=50) == pytest.approx(7)

    def test_fit_scale_margin_too_large(self):
        with pytest.raises(InvalidDimensionsError):
            fit_scale((100, 100), 60, 80, margin_px=50)

    def test_fitted_field_stays_on_canvas(self, meters):
        canvas = (640, 480)
        scale = fit_scale(canvas, 64, 100, margin_px=10)
        origin = centered_origin(canvas, 64, 100, scale)
        boundary = project(meters, scale, 33, 64, 100, *origin)[0]
        corners = boundary.corners()
        assert corners[:, 0].min() >= 0 and corners[:, 0].max() <= canvas[0]
        assert corners[:, 1].min() >= 0 and corners[:, 1].max() <= canvas[1]

    def test_rotation_does_not_mutate_input(self, meters):
        snapshot = list(meters)
        project(meters, 3, 45, 64, 100)
        assert meters == snapshot
        assert math.isclose(meters[0].width, 64)
