"""
Tests for the template schema.
"""
import copy

import pytest

from fieldline_engine.formula import Formula
from fieldline_engine.template import (
    ArcElement,
    CircleElement,
    MeasurePoint,
    Quadrant,
    RectangleElement,
    TemplateDefinition,
    element_from_dict,
    parse_measure,
)


class TestParseMeasure:
    """Tests for raw measure conversion."""

    def test_number(self):
        assert parse_measure(9.15, "radius") == 9.15
        assert isinstance(parse_measure(11, "y"), float)

    def test_formula(self):
        assert parse_measure(" field_width / 2 ", "x") == Formula("field_width / 2")

    @pytest.mark.parametrize("raw", [True, None, [1, 2], float("nan"), float("inf")])
    def test_invalid(self, raw):
        with pytest.raises(ValueError):
            parse_measure(raw, "x")


class TestElementFromDict:
    """Tests for the element tagged union."""

    def test_rectangle(self):
        element = element_from_dict({
            "id": "box",
            "type": "rectangle",
            "position": {"x": "(field_width - 40.3) / 2", "y": 0},
            "size": {"width": 40.3, "height": 16.5},
        })
        assert isinstance(element, RectangleElement)
        assert element.position == MeasurePoint(Formula("(field_width - 40.3) / 2"), 0.0)
        assert element.width == 40.3

    def test_arc_with_angles(self):
        element = element_from_dict({
            "id": "arc",
            "type": "arc",
            "center": {"x": 0, "y": 11},
            "radius": 9.15,
            "startAngle": 37,
            "endAngle": 143,
        })
        assert isinstance(element, ArcElement)
        assert (element.start_angle, element.end_angle) == (37.0, 143.0)
        assert element.quadrant is None

    def test_arc_with_quadrant(self):
        element = element_from_dict({
            "id": "corner",
            "type": "arc",
            "center": {"x": 0, "y": 0},
            "radius": 1,
            "quadrant": "top-left",
        })
        assert element.quadrant is Quadrant.TOP_LEFT

    def test_arc_with_both_forms_rejected(self):
        with pytest.raises(ValueError, match="not both"):
            element_from_dict({
                "id": "corner",
                "type": "arc",
                "center": {"x": 0, "y": 0},
                "radius": 1,
                "quadrant": "top-left",
                "startAngle": 0,
                "endAngle": 90,
            })

    def test_arc_with_neither_form_rejected(self):
        with pytest.raises(ValueError, match="requires both"):
            element_from_dict({
                "id": "corner",
                "type": "arc",
                "center": {"x": 0, "y": 0},
                "radius": 1,
                "startAngle": 0,
            })

    def test_invalid_quadrant(self):
        with pytest.raises(ValueError, match="Invalid quadrant"):
            element_from_dict({
                "id": "corner",
                "type": "arc",
                "center": {"x": 0, "y": 0},
                "radius": 1,
                "quadrant": "north-east",
            })

    def test_unknown_type(self):
        with pytest.raises(ValueError, match="Unknown element type"):
            element_from_dict({"id": "x", "type": "ellipse"})

    def test_missing_field(self):
        with pytest.raises(ValueError, match="Missing required field 'radius'"):
            element_from_dict({"id": "c", "type": "circle", "center": {"x": 0, "y": 0}})


class TestTemplateDefinition:
    """Tests for TemplateDefinition (de)serialization."""

    def test_soccer_seed(self, soccer_template):
        assert soccer_template.template_id == "soccer_11v11"
        assert soccer_template.sport == "soccer"
        assert len(soccer_template.elements) == 16
        assert soccer_template.element_ids[0] == "outer_boundary"
        assert soccer_template.specifications["centerCircleRadius"] == 9.15
        assert soccer_template.is_fixed("center_circle")
        assert not soccer_template.is_fixed("outer_boundary")

    def test_soccer_bounds(self, soccer_template):
        assert (soccer_template.min_length, soccer_template.max_length) == (90, 120)
        assert (soccer_template.min_width, soccer_template.max_width) == (45, 90)
        assert (soccer_template.default_length, soccer_template.default_width) == (100, 64)

    def test_hashable(self, soccer_template, mini_template):
        same = TemplateDefinition.from_dict(soccer_template.to_dict())
        assert hash(same) == hash(soccer_template)
        assert len({soccer_template, same, mini_template}) == 2

    def test_element_lookup(self, soccer_template):
        circle = soccer_template.element("center_circle")
        assert isinstance(circle, CircleElement)
        assert circle.radius == 9.15
        with pytest.raises(KeyError):
            soccer_template.element("goal_net")

    def test_round_trip(self, soccer_template):
        assert TemplateDefinition.from_dict(soccer_template.to_dict()) == soccer_template

    def test_flat_document(self, template_doc):
        flat = copy.deepcopy(template_doc)
        flat.update(flat.pop("interiorElements"))
        template = TemplateDefinition.from_dict(flat)
        assert template.element_ids == ["boundary", "halfway", "centre_circle", "centre_spot", "corner"]

    def test_fallback_id(self, template_doc):
        del template_doc["id"]
        template = TemplateDefinition.from_dict(template_doc, template_id="from_file")
        assert template.template_id == "from_file"

    def test_missing_id(self, template_doc):
        del template_doc["id"]
        with pytest.raises(ValueError, match="no 'id'"):
            TemplateDefinition.from_dict(template_doc)

    def test_missing_bound(self, template_doc):
        del template_doc["maxWidth"]
        with pytest.raises(ValueError, match="maxWidth"):
            TemplateDefinition.from_dict(template_doc)

    def test_inactive(self, template_doc):
        template_doc["isActive"] = False
        assert TemplateDefinition.from_dict(template_doc).is_active is False
