"""
Fieldline Geometry Engine v1.0
==============================

Bounded Context: Sports-field line-marking geometry.

Design Philosophy:
- Separation of Concerns: Formula, Template, Geometry, Projection, Rendering
- Pure engine: every build/project call is a function of its inputs
- Fail fast: a broken element aborts the build, never a partial field
- Pragmatismo > Purismo: supervision draws, numpy rotates

Architecture:

    fieldline_engine/
    ├── formula/           # Restricted arithmetic over field_width/field_length
    │   └── evaluator.py   # tokenize, parse_formula, evaluate
    │
    ├── template/          # Declarative regulation layouts
    │   ├── schema.py      # Element union, TemplateDefinition
    │   └── validation.py  # validate_template (authoring-time)
    │
    ├── geometry/          # Meter-space primitives (immutable)
    │   ├── shapes.py      # RectPrimitive, LinePrimitive, ArcPrimitive, ...
    │   └── builder.py     # build(template, width, length)
    │
    ├── projection/        # Meter -> pixel (and lat/lng) space
    │   ├── transform.py   # project, ProjectionTransform
    │   └── geo.py         # map overlay polylines
    │
    ├── rendering/         # Reference renderer adapter
    │   └── visualizer.py  # FieldVisualizer
    │
    ├── logging/           # Structured JSON logs (orchestration only)
    ├── config.py          # FieldConfiguration, RenderSettings, EngineConfig
    ├── errors.py          # GeometryError hierarchy
    └── pipeline.py        # Orchestration (lookup, build, project, draw, cache)

Usage:

    # 1. Build meter-space primitives (pure)
    from fieldline_engine import build, project

    primitives = build(template, width=64, length=100)

    # 2. Project to pixels (pure)
    pixels = project(primitives, scale=6, rotation_degrees=15,
                     field_width_m=64, field_length_m=100,
                     origin_x=40, origin_y=40)

    # 3. Or use the Pipeline (lookup + bounds + cache + draw)
    from fieldline_engine import PipelineBuilder, BuildCache

    pipeline = (
        PipelineBuilder()
        .with_templates(registry)
        .with_cache(BuildCache(max_size=128))
        .build()
    )
    image = pipeline.draw(field_config)
"""

# Errors
from fieldline_engine.errors import (
    DivisionByZeroError,
    FieldOutOfBoundsError,
    GeometryError,
    InvalidDimensionsError,
    InvalidFormulaError,
    UnresolvedElementError,
)

# Formula Layer
from fieldline_engine.formula import Formula, evaluate, field_variables, parse_formula

# Template Layer
from fieldline_engine.template import (
    ArcElement,
    CircleElement,
    LineElement,
    MeasurePoint,
    PointElement,
    Quadrant,
    RectangleElement,
    Severity,
    TemplateDefinition,
    ValidationError,
    validate_template,
)

# Geometry Layer
from fieldline_engine.geometry import (
    ArcPrimitive,
    CirclePrimitive,
    LinePrimitive,
    PointPrimitive,
    RectPrimitive,
    build,
    primitives_to_dicts,
)

# Projection Layer
from fieldline_engine.projection import ProjectionTransform, project

# Configuration
from fieldline_engine.config import EngineConfig, FieldConfiguration, RenderSettings

# Rendering Layer
from fieldline_engine.rendering import FieldVisualizer

# Pipeline (orchestration)
from fieldline_engine.pipeline import BuildCache, FieldRenderPipeline, PipelineBuilder

__all__ = [
    # Errors
    "DivisionByZeroError",
    "FieldOutOfBoundsError",
    "GeometryError",
    "InvalidDimensionsError",
    "InvalidFormulaError",
    "UnresolvedElementError",
    # Formula
    "Formula",
    "evaluate",
    "field_variables",
    "parse_formula",
    # Template
    "ArcElement",
    "CircleElement",
    "LineElement",
    "MeasurePoint",
    "PointElement",
    "Quadrant",
    "RectangleElement",
    "Severity",
    "TemplateDefinition",
    "ValidationError",
    "validate_template",
    # Geometry
    "ArcPrimitive",
    "CirclePrimitive",
    "LinePrimitive",
    "PointPrimitive",
    "RectPrimitive",
    "build",
    "primitives_to_dicts",
    # Projection
    "ProjectionTransform",
    "project",
    # Configuration
    "EngineConfig",
    "FieldConfiguration",
    "RenderSettings",
    # Rendering
    "FieldVisualizer",
    # Pipeline
    "BuildCache",
    "FieldRenderPipeline",
    "PipelineBuilder",
]

__version__ = "1.0.0"
