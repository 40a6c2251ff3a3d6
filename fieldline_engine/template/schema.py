"""
Template Schema
===============

Bounded Context: Declarative regulation layouts.

This module defines the shape of a field template: a sport's bounds and
an ordered list of drawable elements whose positions and sizes are
measures (plain meters or formulas over the field size).

Design Principles:
- Immutability: frozen=True prevents accidental mutation
- Tagged union: one dataclass per element kind, dispatched on "type"
- Serialization: to_dict() / from_dict() mirror the JSON document shape
- Validation: structural checks here, authoring lint in validation.py

Document shape (camelCase, as stored by template storage):

    {
      "id": "soccer_11v11",
      "sport": "soccer",
      "minLength": 90, "maxLength": 120, ...
      "interiorElements": {
        "elements": [{"id": "center_line", "type": "line", ...}],
        "fixedElements": ["center_circle"],
        "specifications": {"centerCircleRadius": 9.15}
      }
    }
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, FrozenSet, Iterator, List, Optional, Tuple, Union

from fieldline_engine.formula.evaluator import Formula, Measure


class Quadrant(str, Enum):
    """
    Corner-arc sugar: the direction the 90° sweep opens toward.

    Angles are degrees clockwise from +x in field-local (y-down) space.
    """

    BOTTOM_RIGHT = "bottom-right"
    BOTTOM_LEFT = "bottom-left"
    TOP_LEFT = "top-left"
    TOP_RIGHT = "top-right"

    @property
    def angles(self) -> Tuple[float, float]:
        return QUADRANT_ANGLES[self]


QUADRANT_ANGLES: Dict[Quadrant, Tuple[float, float]] = {
    Quadrant.BOTTOM_RIGHT: (0.0, 90.0),
    Quadrant.BOTTOM_LEFT: (90.0, 180.0),
    Quadrant.TOP_LEFT: (180.0, 270.0),
    Quadrant.TOP_RIGHT: (270.0, 360.0),
}


def parse_measure(raw: Any, field_name: str) -> Measure:
    """
    Convert a raw document value into a Measure.

    Raises:
        ValueError: If the value is neither a finite number nor a string
    """
    if isinstance(raw, bool):
        raise ValueError(f"Invalid measure for '{field_name}': {raw!r}")
    if isinstance(raw, (int, float)):
        if not math.isfinite(raw):
            raise ValueError(f"Measure '{field_name}' must be finite, got {raw!r}")
        return float(raw)
    if isinstance(raw, str):
        return Formula(raw.strip())
    raise ValueError(
        f"Invalid measure for '{field_name}': expected number or formula, "
        f"got {type(raw).__name__}"
    )


def measure_to_raw(measure: Measure) -> Union[float, str]:
    """Serialize a Measure back to its document form."""
    if isinstance(measure, Formula):
        return measure.source
    return measure


@dataclass(frozen=True)
class MeasurePoint:
    """An (x, y) position whose coordinates are measures."""

    x: Measure
    y: Measure

    @classmethod
    def from_dict(cls, data: Any, field_name: str) -> "MeasurePoint":
        if not isinstance(data, dict):
            raise ValueError(f"'{field_name}' must be an object with x and y")
        try:
            return cls(
                x=parse_measure(data["x"], f"{field_name}.x"),
                y=parse_measure(data["y"], f"{field_name}.y"),
            )
        except KeyError as e:
            raise ValueError(f"Missing required field {field_name}.{e.args[0]}")

    def to_dict(self) -> Dict[str, Union[float, str]]:
        return {"x": measure_to_raw(self.x), "y": measure_to_raw(self.y)}


# ── Elements ─────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class RectangleElement:
    """Axis-aligned rectangle anchored at its top-left corner."""

    kind: ClassVar[str] = "rectangle"

    id: str
    position: MeasurePoint
    width: Measure
    height: Measure
    description: str = ""

    def measures(self) -> Iterator[Tuple[str, Measure]]:
        yield "position.x", self.position.x
        yield "position.y", self.position.y
        yield "size.width", self.width
        yield "size.height", self.height

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.kind,
            "description": self.description,
            "position": self.position.to_dict(),
            "size": {
                "width": measure_to_raw(self.width),
                "height": measure_to_raw(self.height),
            },
        }


@dataclass(frozen=True)
class LineElement:
    """Straight segment between two points."""

    kind: ClassVar[str] = "line"

    id: str
    start: MeasurePoint
    end: MeasurePoint
    description: str = ""

    def measures(self) -> Iterator[Tuple[str, Measure]]:
        yield "start.x", self.start.x
        yield "start.y", self.start.y
        yield "end.x", self.end.x
        yield "end.y", self.end.y

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.kind,
            "description": self.description,
            "start": self.start.to_dict(),
            "end": self.end.to_dict(),
        }


@dataclass(frozen=True)
class CircleElement:
    """Circle outline."""

    kind: ClassVar[str] = "circle"

    id: str
    center: MeasurePoint
    radius: Measure
    description: str = ""

    def measures(self) -> Iterator[Tuple[str, Measure]]:
        yield "center.x", self.center.x
        yield "center.y", self.center.y
        yield "radius", self.radius

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.kind,
            "description": self.description,
            "center": self.center.to_dict(),
            "radius": measure_to_raw(self.radius),
        }


@dataclass(frozen=True)
class PointElement:
    """Filled dot (center spot, penalty mark)."""

    kind: ClassVar[str] = "point"

    id: str
    position: MeasurePoint
    radius: Measure
    description: str = ""

    def measures(self) -> Iterator[Tuple[str, Measure]]:
        yield "position.x", self.position.x
        yield "position.y", self.position.y
        yield "radius", self.radius

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.kind,
            "description": self.description,
            "position": self.position.to_dict(),
            "radius": measure_to_raw(self.radius),
        }


@dataclass(frozen=True)
class ArcElement:
    """
    Circular arc.

    Exactly one of:
    - start_angle + end_angle (degrees, clockwise from +x)
    - quadrant (expands to a fixed 90° range)
    """

    kind: ClassVar[str] = "arc"

    id: str
    center: MeasurePoint
    radius: Measure
    start_angle: Optional[Measure] = None
    end_angle: Optional[Measure] = None
    quadrant: Optional[Quadrant] = None
    description: str = ""

    def __post_init__(self):
        has_angles = self.start_angle is not None or self.end_angle is not None
        if self.quadrant is not None and has_angles:
            raise ValueError(
                f"Arc '{self.id}' must use either quadrant or startAngle/endAngle, not both"
            )
        if self.quadrant is None and (self.start_angle is None or self.end_angle is None):
            raise ValueError(
                f"Arc '{self.id}' requires both startAngle and endAngle, or a quadrant"
            )

    def measures(self) -> Iterator[Tuple[str, Measure]]:
        yield "center.x", self.center.x
        yield "center.y", self.center.y
        yield "radius", self.radius
        if self.quadrant is None:
            yield "startAngle", self.start_angle
            yield "endAngle", self.end_angle

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "type": self.kind,
            "description": self.description,
            "center": self.center.to_dict(),
            "radius": measure_to_raw(self.radius),
        }
        if self.quadrant is not None:
            data["quadrant"] = self.quadrant.value
        else:
            data["startAngle"] = measure_to_raw(self.start_angle)
            data["endAngle"] = measure_to_raw(self.end_angle)
        return data


Element = Union[RectangleElement, LineElement, CircleElement, PointElement, ArcElement]

# Measure paths that are angles (degrees), not lengths
ANGLE_FIELDS = frozenset({"startAngle", "endAngle"})


def _parse_rectangle(data: Dict[str, Any]) -> RectangleElement:
    size = data["size"]
    if not isinstance(size, dict):
        raise ValueError("'size' must be an object with width and height")
    return RectangleElement(
        id=data["id"],
        position=MeasurePoint.from_dict(data["position"], "position"),
        width=parse_measure(size["width"], "size.width"),
        height=parse_measure(size["height"], "size.height"),
        description=data.get("description", ""),
    )


def _parse_line(data: Dict[str, Any]) -> LineElement:
    return LineElement(
        id=data["id"],
        start=MeasurePoint.from_dict(data["start"], "start"),
        end=MeasurePoint.from_dict(data["end"], "end"),
        description=data.get("description", ""),
    )


def _parse_circle(data: Dict[str, Any]) -> CircleElement:
    return CircleElement(
        id=data["id"],
        center=MeasurePoint.from_dict(data["center"], "center"),
        radius=parse_measure(data["radius"], "radius"),
        description=data.get("description", ""),
    )


def _parse_point(data: Dict[str, Any]) -> PointElement:
    return PointElement(
        id=data["id"],
        position=MeasurePoint.from_dict(data["position"], "position"),
        radius=parse_measure(data["radius"], "radius"),
        description=data.get("description", ""),
    )


def _parse_arc(data: Dict[str, Any]) -> ArcElement:
    quadrant = None
    if data.get("quadrant") is not None:
        try:
            quadrant = Quadrant(data["quadrant"])
        except ValueError:
            valid = ", ".join(q.value for q in Quadrant)
            raise ValueError(
                f"Invalid quadrant {data['quadrant']!r} on arc '{data['id']}'. "
                f"Must be one of: {valid}"
            )
    start_angle = data.get("startAngle")
    end_angle = data.get("endAngle")
    return ArcElement(
        id=data["id"],
        center=MeasurePoint.from_dict(data["center"], "center"),
        radius=parse_measure(data["radius"], "radius"),
        start_angle=None if start_angle is None else parse_measure(start_angle, "startAngle"),
        end_angle=None if end_angle is None else parse_measure(end_angle, "endAngle"),
        quadrant=quadrant,
        description=data.get("description", ""),
    )


_ELEMENT_PARSERS = {
    "rectangle": _parse_rectangle,
    "line": _parse_line,
    "circle": _parse_circle,
    "point": _parse_point,
    "arc": _parse_arc,
}


def element_from_dict(data: Dict[str, Any]) -> Element:
    """
    Deserialize one element, dispatching on its "type" tag.

    Raises:
        ValueError: Unknown type, missing fields or invalid values
    """
    if not isinstance(data, dict):
        raise ValueError(f"Element must be an object, got {type(data).__name__}")
    element_type = data.get("type")
    parser = _ELEMENT_PARSERS.get(element_type)
    if parser is None:
        raise ValueError(
            f"Unknown element type {element_type!r} on element {data.get('id')!r}. "
            f"Must be one of: {', '.join(sorted(_ELEMENT_PARSERS))}"
        )
    try:
        return parser(data)
    except KeyError as e:
        raise ValueError(
            f"Missing required field '{e.args[0]}' on {element_type} element {data.get('id')!r}"
        )


# ── Template ─────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TemplateDefinition:
    """
    A sport's regulation layout.

    Attributes:
        template_id: Stable identifier (registry / cache key)
        sport: Sport identifier (e.g. "soccer")
        name: Display name (e.g. "11v11 Full Field")
        min_length, max_length, min_width, max_width: Bounds in meters
        default_length, default_width: Defaults in meters
        elements: Ordered elements (order = z-order only)
        fixed_elements: Ids of elements sized by fixed meters
        specifications: Named constants referenced by element geometry
        description: Free text
        is_active: Inactive templates are hidden from listings

    Invariants (checked by validate_template, not here):
        min_length <= default_length <= max_length, same for width
    """

    template_id: str
    sport: str
    name: str
    min_length: float
    max_length: float
    min_width: float
    max_width: float
    default_length: float
    default_width: float
    elements: Tuple[Element, ...] = ()
    fixed_elements: FrozenSet[str] = frozenset()
    specifications: Dict[str, float] = field(default_factory=dict, hash=False)  # compared, not hashed
    description: str = ""
    is_active: bool = True

    def __post_init__(self):
        if not self.template_id:
            raise ValueError("template_id cannot be empty")
        if not self.sport:
            raise ValueError("sport cannot be empty")

    @property
    def element_ids(self) -> List[str]:
        return [element.id for element in self.elements]

    def element(self, element_id: str) -> Element:
        for element in self.elements:
            if element.id == element_id:
                return element
        raise KeyError(f"Template '{self.template_id}' has no element '{element_id}'")

    def is_fixed(self, element_id: str) -> bool:
        return element_id in self.fixed_elements

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the JSON document shape."""
        return {
            "id": self.template_id,
            "sport": self.sport,
            "name": self.name,
            "description": self.description,
            "isActive": self.is_active,
            "minLength": self.min_length,
            "maxLength": self.max_length,
            "minWidth": self.min_width,
            "maxWidth": self.max_width,
            "defaultLength": self.default_length,
            "defaultWidth": self.default_width,
            "interiorElements": {
                "elements": [element.to_dict() for element in self.elements],
                "fixedElements": sorted(self.fixed_elements),
                "specifications": dict(self.specifications),
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], template_id: Optional[str] = None) -> "TemplateDefinition":
        """
        Deserialize from a template document.

        Elements, fixedElements and specifications are read from
        "interiorElements" when present, otherwise from the top level.

        Args:
            data: Template document
            template_id: Fallback id when the document carries none

        Raises:
            ValueError: If required keys are missing or values invalid
        """
        if not isinstance(data, dict):
            raise ValueError(f"Template document must be an object, got {type(data).__name__}")

        interior = data.get("interiorElements") or data
        try:
            resolved_id = data.get("id") or template_id
            if not resolved_id:
                raise ValueError("Template document has no 'id'")

            elements = tuple(element_from_dict(e) for e in interior.get("elements", []))
            specifications = {
                str(name): _finite(value, f"specifications.{name}")
                for name, value in (interior.get("specifications") or {}).items()
            }

            return cls(
                template_id=str(resolved_id),
                sport=data["sport"],
                name=data.get("name", ""),
                description=data.get("description", ""),
                is_active=bool(data.get("isActive", True)),
                min_length=_finite(data["minLength"], "minLength"),
                max_length=_finite(data["maxLength"], "maxLength"),
                min_width=_finite(data["minWidth"], "minWidth"),
                max_width=_finite(data["maxWidth"], "maxWidth"),
                default_length=_finite(data["defaultLength"], "defaultLength"),
                default_width=_finite(data["defaultWidth"], "defaultWidth"),
                elements=elements,
                fixed_elements=frozenset(interior.get("fixedElements") or ()),
                specifications=specifications,
            )
        except KeyError as e:
            raise ValueError(f"Missing required template field: {e.args[0]}")


def _finite(value: Any, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"'{field_name}' must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ValueError(f"'{field_name}' must be finite, got {value!r}")
    return float(value)
