"""
Configuration schema for the geometry engine.

This module defines the configuration structures consumed by the engine:
the per-booking field configuration (size, rotation, scale, line colour),
renderer settings, and the engine-wide settings (template directories,
build cache, log level). All are frozen dataclasses validated at
construction and loadable from YAML.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple

import yaml

from fieldline_engine.errors import FieldOutOfBoundsError, InvalidDimensionsError
from fieldline_engine.template.schema import TemplateDefinition

# Palette offered by the field editor
LINE_COLORS: Dict[str, str] = {
    "white": "#FFFFFF",
    "yellow": "#FFFF00",
    "blue": "#0066FF",
    "orange": "#FF6600",
    "red": "#FF0000",
    "green": "#00FF00",
}

# Regulation line width (12 cm)
DEFAULT_LINE_WIDTH_M = 0.12
DEFAULT_SCALE_PX_PER_M = 12.0

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


def resolve_line_color(color: str) -> str:
    """
    Resolve a palette name or #RRGGBB literal to an upper-case hex string.

    Raises:
        ValueError: If the colour is neither a palette name nor a hex literal
    """
    if not isinstance(color, str) or not color.strip():
        raise ValueError("Line color is required")
    name = color.strip().lower()
    if name in LINE_COLORS:
        return LINE_COLORS[name]
    if _HEX_COLOR.match(color.strip()):
        return color.strip().upper()
    raise ValueError(
        f"Invalid line color: {color!r}. "
        f"Must be one of {sorted(LINE_COLORS)} or a #RRGGBB literal"
    )


def _positive(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidDimensionsError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value) or value <= 0:
        raise InvalidDimensionsError(f"{name} must be positive, got {value}")
    return float(value)


@dataclass(frozen=True)
class FieldConfiguration:
    """
    A field placed by a customer: which template, what size, how drawn.

    Created and persisted by the booking/editor flow; the engine only
    reads it. Bounds against the template are checked with
    ``check_bounds`` before the configuration reaches the builder.
    """

    template_id: str
    length_meters: float
    width_meters: float
    rotation_degrees: float = 0.0  # wrapped into [0, 360)
    scale_pixels_per_meter: float = DEFAULT_SCALE_PX_PER_M
    line_color: str = "white"
    name: str = ""

    def __post_init__(self):
        """Validate field configuration."""
        if not self.template_id:
            raise ValueError("template_id cannot be empty")

        object.__setattr__(self, "length_meters", _positive("length_meters", self.length_meters))
        object.__setattr__(self, "width_meters", _positive("width_meters", self.width_meters))
        object.__setattr__(
            self, "scale_pixels_per_meter",
            _positive("scale_pixels_per_meter", self.scale_pixels_per_meter),
        )

        rotation = self.rotation_degrees
        if isinstance(rotation, bool) or not isinstance(rotation, (int, float)) \
                or not math.isfinite(rotation):
            raise InvalidDimensionsError(f"rotation_degrees must be finite, got {rotation!r}")
        wrapped = float(rotation) % 360.0
        object.__setattr__(self, "rotation_degrees", 0.0 if wrapped == 360.0 else wrapped)

        resolve_line_color(self.line_color)

    @property
    def line_color_hex(self) -> str:
        return resolve_line_color(self.line_color)

    def bound_violations(self, template: TemplateDefinition) -> List[str]:
        """List every template bound this configuration violates."""
        violations = []
        if not template.min_length <= self.length_meters <= template.max_length:
            violations.append(
                f"length {self.length_meters:g}m not in "
                f"[{template.min_length:g}, {template.max_length:g}]"
            )
        if not template.min_width <= self.width_meters <= template.max_width:
            violations.append(
                f"width {self.width_meters:g}m not in "
                f"[{template.min_width:g}, {template.max_width:g}]"
            )
        return violations

    def check_bounds(self, template: TemplateDefinition) -> None:
        """
        Reject a configuration outside the template's bounds.

        Raises:
            ValueError: If the configuration targets a different template
            FieldOutOfBoundsError: If length or width is out of bounds
        """
        if template.template_id != self.template_id:
            raise ValueError(
                f"Configuration targets template '{self.template_id}', "
                f"got '{template.template_id}'"
            )
        violations = self.bound_violations(template)
        if violations:
            raise FieldOutOfBoundsError(template.template_id, violations)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "templateId": self.template_id,
            "name": self.name,
            "lengthMeters": self.length_meters,
            "widthMeters": self.width_meters,
            "rotationDegrees": self.rotation_degrees,
            "scalePixelsPerMeter": self.scale_pixels_per_meter,
            "lineColor": self.line_color,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldConfiguration":
        """
        Deserialize from a configuration document (camelCase keys).

        Raises:
            ValueError: If required keys are missing or values invalid
        """
        try:
            return cls(
                template_id=data["templateId"],
                name=data.get("name", ""),
                length_meters=data["lengthMeters"],
                width_meters=data["widthMeters"],
                rotation_degrees=data.get("rotationDegrees", 0.0),
                scale_pixels_per_meter=data.get("scalePixelsPerMeter", DEFAULT_SCALE_PX_PER_M),
                line_color=data.get("lineColor", "white"),
            )
        except KeyError as e:
            raise ValueError(f"Missing required field configuration key: {e.args[0]}")

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "FieldConfiguration":
        """
        Load a field configuration from YAML.

        Example YAML:
            templateId: "soccer_11v11"
            lengthMeters: 100
            widthMeters: 64
            rotationDegrees: 15
            scalePixelsPerMeter: 6
            lineColor: "white"
        """
        with open(yaml_path) as f:
            data = yaml.safe_load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Field configuration {yaml_path} must be a mapping")
        return cls.from_dict(data)


@dataclass(frozen=True)
class RenderSettings:
    """Reference renderer settings."""

    canvas_wh: Tuple[int, int] = (1280, 720)  # (width, height)
    background_color: str = "#1E6B2E"
    line_width_m: float = DEFAULT_LINE_WIDTH_M
    arc_segments: int = 36
    margin_px: int = 20
    fit_to_canvas: bool = False  # ignore configured scale, fit the canvas instead

    def __post_init__(self):
        """Validate render settings."""
        width, height = self.canvas_wh
        if width <= 0 or height <= 0:
            raise ValueError(f"canvas_wh must have positive dimensions, got {self.canvas_wh}")
        if width > 8192 or height > 8192:
            raise ValueError(f"canvas_wh dimensions too large (max 8192x8192), got {self.canvas_wh}")
        if self.line_width_m <= 0:
            raise ValueError(f"line_width_m must be > 0, got {self.line_width_m}")
        if not 4 <= self.arc_segments <= 720:
            raise ValueError(f"arc_segments must be in [4, 720], got {self.arc_segments}")
        if self.margin_px < 0:
            raise ValueError(f"margin_px must be >= 0, got {self.margin_px}")
        resolve_line_color(self.background_color)

    @property
    def background_color_hex(self) -> str:
        return resolve_line_color(self.background_color)


@dataclass(frozen=True)
class EngineConfig:
    """
    Engine-wide configuration.

    Loaded from YAML and validated at startup. Immutable after construction.
    """

    template_dirs: List[Path] = field(default_factory=list)
    include_builtin_templates: bool = True
    cache_enabled: bool = True
    cache_size: int = 256
    log_level: str = "INFO"
    render: RenderSettings = field(default_factory=RenderSettings)

    def __post_init__(self):
        """Validate engine configuration."""
        if self.cache_size < 1:
            raise ValueError(f"cache_size must be >= 1, got {self.cache_size}")

        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Invalid log_level: {self.log_level}")

        for directory in self.template_dirs:
            if not directory.is_dir():
                raise FileNotFoundError(
                    f"Template directory not found: {directory}\n"
                    f"Create directory or update 'template_dirs' in config"
                )

    @property
    def log_level_value(self) -> int:
        return logging.getLevelName(self.log_level.upper())

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "EngineConfig":
        """
        Load configuration from YAML file.

        Example YAML:
            template_dirs: ["./templates"]
            include_builtin_templates: true
            cache_enabled: true
            cache_size: 256
            log_level: "INFO"

            render:
              canvas_wh: [1280, 720]  # [width, height]
              background_color: "#1E6B2E"
              line_width_m: 0.12
              arc_segments: 36
              margin_px: 20
              fit_to_canvas: false
        """
        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}

        render_data = dict(data.get("render") or {})
        if "canvas_wh" in render_data:
            render_data["canvas_wh"] = tuple(render_data["canvas_wh"])
        render = RenderSettings(**render_data)

        base_dir = Path(yaml_path).parent
        template_dirs = [
            (base_dir / Path(d)) if not Path(d).is_absolute() else Path(d)
            for d in data.get("template_dirs", [])
        ]

        return cls(
            template_dirs=template_dirs,
            include_builtin_templates=data.get("include_builtin_templates", True),
            cache_enabled=data.get("cache_enabled", True),
            cache_size=data.get("cache_size", 256),
            log_level=data.get("log_level", "INFO"),
            render=render,
        )
