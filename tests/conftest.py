"""
Pytest fixtures for fieldline tests.
"""
import numpy as np
import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from fieldline_catalog import BUILTIN_TEMPLATE_DIR, TemplateRegistry, load_template
from fieldline_engine.config import FieldConfiguration
from fieldline_engine.formula import field_variables
from fieldline_engine.logging import StructuredLogger
from fieldline_engine.template import TemplateDefinition


@pytest.fixture
def soccer_template():
    """The built-in FIFA 11v11 template."""
    return load_template(BUILTIN_TEMPLATE_DIR / "soccer_11v11.yaml")


@pytest.fixture
def soccer_vars():
    """Variable table for a 64 x 100 m field."""
    return field_variables(64, 100)


@pytest.fixture
def template_doc():
    """Minimal template document (one of each element kind)."""
    return {
        "id": "mini",
        "sport": "futsal",
        "name": "Mini Pitch",
        "minLength": 20,
        "maxLength": 40,
        "minWidth": 10,
        "maxWidth": 20,
        "defaultLength": 30,
        "defaultWidth": 15,
        "interiorElements": {
            "elements": [
                {
                    "id": "boundary",
                    "type": "rectangle",
                    "position": {"x": 0, "y": 0},
                    "size": {"width": "field_width", "height": "field_length"},
                },
                {
                    "id": "halfway",
                    "type": "line",
                    "start": {"x": 0, "y": "field_length / 2"},
                    "end": {"x": "field_width", "y": "field_length / 2"},
                },
                {
                    "id": "centre_circle",
                    "type": "circle",
                    "center": {"x": "field_width / 2", "y": "field_length / 2"},
                    "radius": 3,
                },
                {
                    "id": "centre_spot",
                    "type": "point",
                    "position": {"x": "field_width / 2", "y": "field_length / 2"},
                    "radius": 0.1,
                },
                {
                    "id": "corner",
                    "type": "arc",
                    "center": {"x": 0, "y": 0},
                    "radius": 0.25,
                    "quadrant": "bottom-right",
                },
            ],
            "fixedElements": ["centre_circle", "corner"],
            "specifications": {
                "centerCircleRadius": 3,
                "markRadius": 0.1,
                "cornerArcRadius": 0.25,
            },
        },
    }


@pytest.fixture
def mini_template(template_doc):
    """Parsed minimal template."""
    return TemplateDefinition.from_dict(template_doc)


@pytest.fixture
def quiet_logger():
    """Logger that only emits warnings and errors."""
    import logging
    return StructuredLogger(component="test", level=logging.WARNING)


@pytest.fixture
def registry(quiet_logger):
    """Registry with the built-in templates."""
    return TemplateRegistry.with_builtin_templates(logger=quiet_logger)


@pytest.fixture
def field_config():
    """Default-size soccer field, unrotated."""
    return FieldConfiguration(
        template_id="soccer_11v11",
        length_meters=100,
        width_meters=64,
        scale_pixels_per_meter=5,
    )


@pytest.fixture
def blank_frame():
    """Black 640x480 BGR frame."""
    return np.zeros((480, 640, 3), dtype=np.uint8)


@pytest.fixture
def field_config_yaml(tmp_path):
    """Field configuration document on disk."""
    path = tmp_path / "field.yaml"
    path.write_text(
        "templateId: soccer_11v11\n"
        "name: Main pitch\n"
        "lengthMeters: 105\n"
        "widthMeters: 68\n"
        "rotationDegrees: 30\n"
        "scalePixelsPerMeter: 4\n"
        "lineColor: yellow\n"
    )
    return path
