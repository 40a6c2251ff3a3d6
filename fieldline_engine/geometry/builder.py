"""
Geometry Builder Module
=======================

Walks a TemplateDefinition and emits meter-space primitives.

Design:
- Pure function of (template, width, length): no state, no caching
- Every measure goes through the Formula Evaluator
- Fail fast: the first broken element aborts the whole build
- Bounds are NOT enforced here (preview at any size is allowed)
"""

import math
from typing import Callable, Dict, List, Mapping

from fieldline_engine.errors import GeometryError, InvalidDimensionsError, UnresolvedElementError
from fieldline_engine.formula.evaluator import Measure, evaluate, field_variables
from fieldline_engine.geometry.shapes import (
    ArcPrimitive,
    CirclePrimitive,
    LinePrimitive,
    PointPrimitive,
    RectPrimitive,
    ResolvedPrimitive,
)
from fieldline_engine.template.schema import (
    ArcElement,
    CircleElement,
    Element,
    LineElement,
    PointElement,
    RectangleElement,
    TemplateDefinition,
)


def check_field_size(width: float, length: float) -> None:
    """
    Raises:
        InvalidDimensionsError: If width or length is not a positive finite number
    """
    for name, value in (("width", width), ("length", length)):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidDimensionsError(f"Field {name} must be a number, got {value!r}")
        if not math.isfinite(value) or value <= 0:
            raise InvalidDimensionsError(f"Field {name} must be positive and finite, got {value}")


class _Resolver:
    """Evaluates the measures of a single element."""

    def __init__(self, variables: Mapping[str, float]):
        self.variables = variables

    def __call__(self, measure: Measure) -> float:
        return float(evaluate(measure, self.variables))

    def size(self, measure: Measure, name: str) -> float:
        value = self(measure)
        if value < 0:
            raise InvalidDimensionsError(f"{name} resolved to a negative value ({value})")
        return value


def _resolve_rectangle(element: RectangleElement, r: _Resolver) -> RectPrimitive:
    return RectPrimitive(
        element_id=element.id,
        x=r(element.position.x),
        y=r(element.position.y),
        width=r.size(element.width, "size.width"),
        height=r.size(element.height, "size.height"),
    )


def _resolve_line(element: LineElement, r: _Resolver) -> LinePrimitive:
    return LinePrimitive(
        element_id=element.id,
        x1=r(element.start.x),
        y1=r(element.start.y),
        x2=r(element.end.x),
        y2=r(element.end.y),
    )


def _resolve_circle(element: CircleElement, r: _Resolver) -> CirclePrimitive:
    return CirclePrimitive(
        element_id=element.id,
        cx=r(element.center.x),
        cy=r(element.center.y),
        radius=r.size(element.radius, "radius"),
    )


def _resolve_point(element: PointElement, r: _Resolver) -> PointPrimitive:
    return PointPrimitive(
        element_id=element.id,
        x=r(element.position.x),
        y=r(element.position.y),
        radius=r.size(element.radius, "radius"),
    )


def _resolve_arc(element: ArcElement, r: _Resolver) -> ArcPrimitive:
    if element.quadrant is not None:
        start_angle, end_angle = element.quadrant.angles
    else:
        start_angle, end_angle = r(element.start_angle), r(element.end_angle)
    return ArcPrimitive(
        element_id=element.id,
        cx=r(element.center.x),
        cy=r(element.center.y),
        radius=r.size(element.radius, "radius"),
        start_angle=start_angle,
        end_angle=end_angle,
    )


_RESOLVERS: Dict[type, Callable[[Element, _Resolver], ResolvedPrimitive]] = {
    RectangleElement: _resolve_rectangle,
    LineElement: _resolve_line,
    CircleElement: _resolve_circle,
    PointElement: _resolve_point,
    ArcElement: _resolve_arc,
}


def resolve_element(element: Element, variables: Mapping[str, float]) -> ResolvedPrimitive:
    """
    Resolve one element against a variable table.

    Raises:
        UnresolvedElementError: Wrapping the originating GeometryError
    """
    resolver = _RESOLVERS.get(type(element))
    if resolver is None:
        raise TypeError(f"Unsupported element type: {type(element).__name__}")
    try:
        return resolver(element, _Resolver(variables))
    except GeometryError as e:
        raise UnresolvedElementError(element.id, e) from e


def build(template: TemplateDefinition, width: float, length: float) -> List[ResolvedPrimitive]:
    """
    Resolve every element of a template for a concrete field size.

    Args:
        template: Regulation layout
        width: Field width in meters (positive, finite)
        length: Field length in meters (positive, finite)

    Returns:
        Meter-space primitives, in template element order

    Raises:
        InvalidDimensionsError: Non-positive / non-finite width or length
        UnresolvedElementError: First element that fails to resolve

    Example:
        >>> primitives = build(soccer_template, width=64, length=100)
        >>> primitives[0]
        RectPrimitive(element_id='outer_boundary', x=0.0, y=0.0, width=64.0, height=100.0, angle=0.0)
    """
    check_field_size(width, length)
    variables = field_variables(width, length)
    return [resolve_element(element, variables) for element in template.elements]
