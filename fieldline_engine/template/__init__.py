"""
Template Layer
==============

Bounded Context: Regulation layouts as declarative data.

Responsibilities:
- Element tagged union and TemplateDefinition schema
- Document (de)serialization
- Authoring-time validation
"""

from fieldline_engine.template.schema import (
    ArcElement,
    CircleElement,
    Element,
    LineElement,
    MeasurePoint,
    PointElement,
    Quadrant,
    QUADRANT_ANGLES,
    RectangleElement,
    TemplateDefinition,
    element_from_dict,
    parse_measure,
)
from fieldline_engine.template.validation import (
    Severity,
    ValidationError,
    has_errors,
    validate_template,
)

__all__ = [
    "ArcElement",
    "CircleElement",
    "Element",
    "LineElement",
    "MeasurePoint",
    "PointElement",
    "Quadrant",
    "QUADRANT_ANGLES",
    "RectangleElement",
    "TemplateDefinition",
    "element_from_dict",
    "parse_measure",
    "Severity",
    "ValidationError",
    "has_errors",
    "validate_template",
]
