"""
Field Visualizer Module
=======================

Reference renderer adapter: draws pixel-space primitives on a frame.

Design:
- Stateless rendering (pure functions of frame + primitives)
- No geometry computation beyond sampling curves into polylines
- Configurable styles
- Uses supervision drawing utilities

Dependencies:
- supervision (draw utilities, Color, Point)
- numpy (arrays)
"""

from typing import Sequence, Tuple

import numpy as np
import supervision as sv

from fieldline_engine.config import RenderSettings
from fieldline_engine.geometry.shapes import (
    ArcPrimitive,
    CirclePrimitive,
    LinePrimitive,
    PointPrimitive,
    RectPrimitive,
    ResolvedPrimitive,
)


def _as_polygon(points: np.ndarray) -> np.ndarray:
    return np.round(points).astype(np.int32)


class FieldVisualizer:
    """
    Stateless visualizer for field markings.

    Usage:
        visualizer = FieldVisualizer(
            line_color=sv.Color.from_hex("#FFFFFF"),
            thickness=2
        )

        canvas = FieldVisualizer.blank_canvas((1280, 720), "#1E6B2E")
        canvas = visualizer.draw(canvas, pixel_primitives)
    """

    def __init__(
        self,
        line_color: sv.Color = sv.Color(r=255, g=255, b=255),
        thickness: int = 2,
        arc_segments: int = 36,
    ):
        """
        Args:
            line_color: Colour of every marking
            thickness: Stroke width in pixels (>= 1)
            arc_segments: Polyline segments per arc (circles use 2x)
        """
        self.line_color = line_color
        self.thickness = max(1, int(thickness))
        self.arc_segments = arc_segments

    @classmethod
    def from_settings(
        cls,
        settings: RenderSettings,
        line_color_hex: str,
        scale: float,
    ) -> "FieldVisualizer":
        """Stroke width follows the regulation line width at this scale."""
        return cls(
            line_color=sv.Color.from_hex(line_color_hex),
            thickness=round(settings.line_width_m * scale),
            arc_segments=settings.arc_segments,
        )

    @staticmethod
    def blank_canvas(canvas_wh: Tuple[int, int], background_hex: str) -> np.ndarray:
        """BGR canvas filled with the background colour."""
        width, height = canvas_wh
        canvas = np.zeros((height, width, 3), dtype=np.uint8)
        canvas[:] = sv.Color.from_hex(background_hex).as_bgr()
        return canvas

    def draw(self, frame: np.ndarray, primitives: Sequence[ResolvedPrimitive]) -> np.ndarray:
        """
        Draw primitives in order (later primitives on top).

        Args:
            frame: BGR frame (left unchanged)
            primitives: Pixel-space primitives

        Returns:
            Annotated copy of the frame
        """
        annotated = frame.copy()
        for primitive in primitives:
            if isinstance(primitive, LinePrimitive):
                annotated = self.draw_line(annotated, primitive)
            elif isinstance(primitive, RectPrimitive):
                annotated = self.draw_rect(annotated, primitive)
            elif isinstance(primitive, CirclePrimitive):
                annotated = self.draw_circle(annotated, primitive)
            elif isinstance(primitive, PointPrimitive):
                annotated = self.draw_point(annotated, primitive)
            elif isinstance(primitive, ArcPrimitive):
                annotated = self.draw_arc(annotated, primitive)
            else:
                raise TypeError(f"Unsupported primitive type: {type(primitive).__name__}")
        return annotated

    def draw_line(self, frame: np.ndarray, line: LinePrimitive) -> np.ndarray:
        return sv.draw_line(
            scene=frame,
            start=sv.Point(x=line.x1, y=line.y1),
            end=sv.Point(x=line.x2, y=line.y2),
            color=self.line_color,
            thickness=self.thickness,
        )

    def draw_rect(self, frame: np.ndarray, rect: RectPrimitive) -> np.ndarray:
        # Rotated rectangles are not axis-aligned, draw as a closed polygon
        return sv.draw_polygon(
            scene=frame,
            polygon=_as_polygon(rect.corners()),
            color=self.line_color,
            thickness=self.thickness,
        )

    def draw_circle(self, frame: np.ndarray, circle: CirclePrimitive) -> np.ndarray:
        return sv.draw_polygon(
            scene=frame,
            polygon=_as_polygon(circle.outline(self.arc_segments * 2)),
            color=self.line_color,
            thickness=self.thickness,
        )

    def draw_point(self, frame: np.ndarray, point: PointPrimitive) -> np.ndarray:
        if point.radius < 1:
            return sv.draw_filled_rectangle(
                scene=frame,
                rect=sv.Rect(x=point.x, y=point.y, width=1, height=1),
                color=self.line_color,
            )
        return sv.draw_filled_polygon(
            scene=frame,
            polygon=_as_polygon(point.outline()),
            color=self.line_color,
            opacity=1.0,
        )

    def draw_arc(self, frame: np.ndarray, arc: ArcPrimitive) -> np.ndarray:
        points = _as_polygon(arc.outline(self.arc_segments))
        for (x1, y1), (x2, y2) in zip(points[:-1], points[1:]):
            frame = sv.draw_line(
                scene=frame,
                start=sv.Point(x=int(x1), y=int(y1)),
                end=sv.Point(x=int(x2), y=int(y2)),
                color=self.line_color,
                thickness=self.thickness,
            )
        return frame
