"""
Template Validation
===================

Authoring-time checks run by the template-editing flow, not on every
render.

Errors (template must not be published):
- fixedElements ids missing from elements
- duplicate element ids
- non-positive bounds, or min <= default <= max violated
- formula syntax errors (reported with the element id)
- geometry that cannot be built at the template's default size

Warnings (best-effort lint):
- numeric domain constants in element geometry that are missing from
  the specifications table
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List

from fieldline_engine.errors import GeometryError, UnresolvedElementError
from fieldline_engine.formula.evaluator import Formula, constant_literals, parse_formula
from fieldline_engine.template.schema import ANGLE_FIELDS, TemplateDefinition

CONSTANT_TOLERANCE = 1e-9


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class ValidationError:
    """
    One validation finding.

    Attributes:
        severity: ERROR blocks publishing, WARNING is informational
        code: Machine-readable category (e.g. "bounds.length")
        message: Human-readable description
        element_id: Offending element, if any
    """

    severity: Severity
    code: str
    message: str
    element_id: str = ""

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def to_dict(self) -> Dict[str, str]:
        data = {"severity": self.severity.value, "code": self.code, "message": self.message}
        if self.element_id:
            data["elementId"] = self.element_id
        return data


def _error(code: str, message: str, element_id: str = "") -> ValidationError:
    return ValidationError(Severity.ERROR, code, message, element_id)


def _warning(code: str, message: str, element_id: str = "") -> ValidationError:
    return ValidationError(Severity.WARNING, code, message, element_id)


def _check_bounds(template: TemplateDefinition) -> List[ValidationError]:
    issues = []
    axes = (
        ("length", template.min_length, template.default_length, template.max_length),
        ("width", template.min_width, template.default_width, template.max_width),
    )
    for axis, low, default, high in axes:
        if low <= 0:
            issues.append(_error(f"bounds.{axis}", f"min {axis} must be positive, got {low}"))
        if not low <= default <= high:
            issues.append(_error(
                f"bounds.{axis}",
                f"Expected min {axis} <= default {axis} <= max {axis}, "
                f"got {low} <= {default} <= {high}",
            ))
    return issues


def _check_element_ids(template: TemplateDefinition) -> List[ValidationError]:
    issues = []
    seen = set()
    for element_id in template.element_ids:
        if element_id in seen:
            issues.append(_error("elements.duplicate_id",
                                 f"Duplicate element id '{element_id}'", element_id))
        seen.add(element_id)

    for fixed_id in sorted(template.fixed_elements - seen):
        issues.append(_error("fixed_elements.unknown",
                             f"fixedElements references unknown element '{fixed_id}'", fixed_id))
    return issues


def _check_formulas(template: TemplateDefinition) -> List[ValidationError]:
    issues = []
    for element in template.elements:
        for path, measure in element.measures():
            if not isinstance(measure, Formula):
                continue
            try:
                parse_formula(measure.source)
            except GeometryError as e:
                issues.append(_error("formula.invalid", f"{path}: {e}", element.id))
    return issues


def _is_specified(value: float, constants: Iterable[float]) -> bool:
    return any(math.isclose(value, c, rel_tol=CONSTANT_TOLERANCE, abs_tol=CONSTANT_TOLERANCE)
               for c in constants)


def _check_constants(template: TemplateDefinition) -> List[ValidationError]:
    issues = []
    constants = list(template.specifications.values())
    for element in template.elements:
        reported = set()
        for path, measure in element.measures():
            if path in ANGLE_FIELDS:
                continue
            try:
                literals = constant_literals(measure)
            except GeometryError:
                continue  # already reported by _check_formulas
            for value in literals:
                if value in reported or _is_specified(value, constants):
                    continue
                reported.add(value)
                issues.append(_warning(
                    "specifications.missing_constant",
                    f"{path}: constant {value:g} is not listed in specifications",
                    element.id,
                ))
    return issues


def _check_default_build(template: TemplateDefinition) -> List[ValidationError]:
    from fieldline_engine.geometry.builder import build

    try:
        build(template, template.default_width, template.default_length)
    except UnresolvedElementError as e:
        return [_error("geometry.unresolved",
                       f"Cannot build at default size: {e.cause}", e.element_id)]
    except GeometryError as e:
        return [_error("geometry.unresolved", f"Cannot build at default size: {e}")]
    return []


def validate_template(template: TemplateDefinition) -> List[ValidationError]:
    """
    Run every authoring check on a template.

    Returns:
        Findings in check order; empty list means valid and lint-clean.
        Use ``has_errors`` to decide whether the template may be published.
    """
    issues: List[ValidationError] = []
    issues.extend(_check_bounds(template))
    issues.extend(_check_element_ids(template))
    formula_issues = _check_formulas(template)
    issues.extend(formula_issues)
    issues.extend(_check_constants(template))
    if not formula_issues and not any(i.code.startswith("bounds.") for i in issues):
        issues.extend(_check_default_build(template))
    return issues


def has_errors(issues: Iterable[ValidationError]) -> bool:
    return any(issue.is_error for issue in issues)
