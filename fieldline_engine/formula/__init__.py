"""
Formula Layer
=============

Bounded Context: Symbolic measures over field dimensions.

Responsibilities:
- Tokenize and parse the restricted arithmetic grammar
- Evaluate measures against {field_width, field_length}
- NO template knowledge, NO geometry

Design Philosophy:
- Pure functions, immutable parse trees
- Fail fast on malformed formulas
"""

from fieldline_engine.formula.evaluator import (
    FIELD_LENGTH,
    FIELD_WIDTH,
    VARIABLES,
    Formula,
    Measure,
    constant_literals,
    evaluate,
    field_variables,
    parse_formula,
)

__all__ = [
    "FIELD_LENGTH",
    "FIELD_WIDTH",
    "VARIABLES",
    "Formula",
    "Measure",
    "constant_literals",
    "evaluate",
    "field_variables",
    "parse_formula",
]
