"""
Rendering Layer
===============

Bounded Context: Renderer adapter (output side only).

Responsibilities:
- Draw pixel-space primitives onto a numpy frame
- NO geometry, NO projection, NO state between frames
"""

from fieldline_engine.rendering.visualizer import FieldVisualizer

__all__ = [
    "FieldVisualizer",
]
