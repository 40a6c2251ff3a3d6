"""
Geometry Engine Errors
======================

Bounded Context: Failure taxonomy of the geometry engine.

Every failure is a synchronous exception. The engine never recovers
internally: the first error stops the computation and reaches the caller.

Hierarchy:

    GeometryError (ValueError)
    ├── InvalidFormulaError      malformed / unknown-symbol expression
    ├── DivisionByZeroError      evaluated zero denominator
    ├── InvalidDimensionsError   non-positive or non-finite sizes
    ├── UnresolvedElementError   build aborted on a specific element
    └── FieldOutOfBoundsError    configuration outside template bounds
"""

from typing import List, Optional


class GeometryError(ValueError):
    """Base class for every geometry engine failure."""
    pass


class InvalidFormulaError(GeometryError):
    """
    Raised when a formula cannot be parsed or references unknown symbols.

    Attributes:
        formula: Source text of the offending formula
        position: Character offset where parsing failed (if known)
    """

    def __init__(self, message: str, formula: str = "", position: Optional[int] = None):
        self.formula = formula
        self.position = position
        if formula:
            where = f" at position {position}" if position is not None else ""
            message = f"{message}{where} in formula {formula!r}"
        super().__init__(message)


class DivisionByZeroError(GeometryError):
    """Raised when an evaluated division has a zero denominator."""

    def __init__(self, formula: str = ""):
        self.formula = formula
        super().__init__(f"Division by zero in formula {formula!r}")


class InvalidDimensionsError(GeometryError):
    """Raised for non-positive width/length/scale or negative resolved sizes."""
    pass


class UnresolvedElementError(GeometryError):
    """
    Raised when the Geometry Builder cannot resolve a template element.

    Wraps the originating error with the element id so the caller can point
    at the broken marking instead of rendering a partial field.

    Attributes:
        element_id: Id of the element that failed
        cause: Original GeometryError
    """

    def __init__(self, element_id: str, cause: GeometryError):
        self.element_id = element_id
        self.cause = cause
        super().__init__(f"Element '{element_id}' could not be resolved: {cause}")


class FieldOutOfBoundsError(GeometryError):
    """
    Raised at the configuration boundary when a field size violates the
    template's min/max bounds.

    Attributes:
        violations: One human-readable line per violated bound
    """

    def __init__(self, template_id: str, violations: List[str]):
        self.template_id = template_id
        self.violations = list(violations)
        super().__init__(
            f"Field configuration outside bounds of template '{template_id}': "
            + "; ".join(self.violations)
        )
