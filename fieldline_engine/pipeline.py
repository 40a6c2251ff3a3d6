"""
Field Render Pipeline Module
============================

Bounded Context: Orchestration of template -> meters -> pixels.

Design:
- Orchestrator: template lookup, bounds check, build, project, draw
- Builder pattern: Fluent configuration
- Fail Fast: Validation at build time, errors re-raised after logging
- Engine functions stay pure; logging and caching live here

Dependencies:
- fieldline_engine.geometry (builder)
- fieldline_engine.projection (transform, canvas placement)
- fieldline_engine.rendering (reference renderer adapter)
"""

import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Optional, Protocol, Tuple

import numpy as np

from fieldline_engine.config import EngineConfig, FieldConfiguration, RenderSettings
from fieldline_engine.errors import FieldOutOfBoundsError, GeometryError, UnresolvedElementError
from fieldline_engine.geometry.builder import build
from fieldline_engine.geometry.shapes import ResolvedPrimitive
from fieldline_engine.logging import LogEvent, StructuredLogger
from fieldline_engine.projection.transform import centered_origin, fit_scale, project
from fieldline_engine.rendering.visualizer import FieldVisualizer
from fieldline_engine.template.schema import TemplateDefinition


class TemplateSource(Protocol):
    """Anything that can look up a template by id (e.g. TemplateRegistry)."""

    def get(self, template_id: str) -> TemplateDefinition:
        ...


@dataclass(frozen=True)
class CacheKey:
    template_id: str
    width: float
    length: float
    scale: float
    rotation_degrees: float
    origin_x: float
    origin_y: float


class BuildCache:
    """
    Bounded LRU memo of projected primitives.

    The pipeline only reads and fills it; invalidation belongs to the
    caller (``clear`` / ``invalidate_template``), e.g. after a template
    is edited.

    Thread Safety:
        All operations hold a lock (LRU reordering mutates on read).
    """

    def __init__(self, max_size: int = 256):
        if max_size < 1:
            raise ValueError(f"max_size must be >= 1, got {max_size}")
        self.max_size = max_size
        self._entries: "OrderedDict[CacheKey, Tuple[ResolvedPrimitive, ...]]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: CacheKey) -> Optional[Tuple[ResolvedPrimitive, ...]]:
        with self._lock:
            primitives = self._entries.get(key)
            if primitives is not None:
                self._entries.move_to_end(key)
            return primitives

    def put(self, key: CacheKey, primitives: Tuple[ResolvedPrimitive, ...]) -> None:
        with self._lock:
            self._entries[key] = tuple(primitives)
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_size:
                self._entries.popitem(last=False)

    def invalidate_template(self, template_id: str) -> int:
        """Drop every entry of one template. Returns the number dropped."""
        with self._lock:
            stale = [key for key in self._entries if key.template_id == template_id]
            for key in stale:
                del self._entries[key]
            return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


@dataclass(frozen=True)
class RenderResult:
    """
    Pixel-space output for one field configuration.

    Attributes:
        configuration: Configuration that was rendered
        scale: Pixels per meter actually used
        origin: Translation actually used
        primitives: Pixel-space primitives in z-order
        from_cache: True if served from the build cache
    """

    configuration: FieldConfiguration
    scale: float
    origin: Tuple[float, float]
    primitives: Tuple[ResolvedPrimitive, ...]
    from_cache: bool = False


@dataclass
class PipelineConfig:
    """
    Pipeline configuration.

    Design:
    - All dependencies injected
    - Validated at construction
    """

    templates: TemplateSource
    settings: RenderSettings
    logger: StructuredLogger
    cache: Optional[BuildCache] = None
    enforce_bounds: bool = True


class FieldRenderPipeline:
    """
    Orchestrates template lookup, build, projection and drawing.

    Usage:
        pipeline = (
            PipelineBuilder()
            .with_templates(registry)
            .with_cache(BuildCache(max_size=128))
            .build()
        )

        result = pipeline.render(field_config)
        image = pipeline.draw(field_config)
    """

    def __init__(self, config: PipelineConfig):
        self.config = config
        self.logger = config.logger

    def template_for(self, configuration: FieldConfiguration) -> TemplateDefinition:
        return self.config.templates.get(configuration.template_id)

    def build_meters(self, configuration: FieldConfiguration) -> list:
        """
        Meter-space primitives for a configuration.

        Raises:
            FieldOutOfBoundsError: If bounds are enforced and violated
            UnresolvedElementError: If an element fails to resolve
        """
        template = self.template_for(configuration)
        self.enforce_bounds(configuration, template)
        return self._build(configuration, template)

    def enforce_bounds(self, configuration: FieldConfiguration, template: TemplateDefinition) -> None:
        """Reject configurations outside the template bounds (no-op when disabled)."""
        if not self.config.enforce_bounds:
            return
        try:
            configuration.check_bounds(template)
        except FieldOutOfBoundsError as e:
            self.logger.warning(
                event=LogEvent.CONFIG_REJECTED,
                message=str(e),
                metadata={
                    'template_id': template.template_id,
                    'width': configuration.width_meters,
                    'length': configuration.length_meters,
                    'violations': e.violations,
                },
            )
            raise

    def _build(self, configuration: FieldConfiguration, template: TemplateDefinition) -> list:
        metadata = {
            'template_id': template.template_id,
            'width': configuration.width_meters,
            'length': configuration.length_meters,
        }

        try:
            primitives = build(template, configuration.width_meters, configuration.length_meters)
        except UnresolvedElementError as e:
            self.logger.error(
                event=LogEvent.BUILD_FAILED,
                message=f"Build of '{template.template_id}' aborted",
                metadata={**metadata, 'element_id': e.element_id},
                exc_info=e,
            )
            raise
        except GeometryError as e:
            self.logger.error(
                event=LogEvent.BUILD_FAILED,
                message=f"Build of '{template.template_id}' aborted",
                metadata=metadata,
                exc_info=e,
            )
            raise

        self.logger.info(
            event=LogEvent.BUILD_COMPLETED,
            message=f"Built {len(primitives)} primitives for '{template.template_id}'",
            metadata=metadata,
        )
        return primitives

    def placement(
        self,
        configuration: FieldConfiguration,
        origin: Optional[Tuple[float, float]] = None,
    ) -> Tuple[float, Tuple[float, float]]:
        """
        Scale and origin for a configuration.

        Scale comes from the configuration unless the settings ask to fit
        the canvas; the origin defaults to centring the field on the canvas.
        """
        settings = self.config.settings
        scale = configuration.scale_pixels_per_meter
        if settings.fit_to_canvas:
            scale = fit_scale(settings.canvas_wh, configuration.width_meters,
                              configuration.length_meters, settings.margin_px)
        if origin is None:
            origin = centered_origin(settings.canvas_wh, configuration.width_meters,
                                     configuration.length_meters, scale)
        return scale, (float(origin[0]), float(origin[1]))

    def render(
        self,
        configuration: FieldConfiguration,
        origin: Optional[Tuple[float, float]] = None,
    ) -> RenderResult:
        """
        Pixel-space primitives for a configuration.

        Args:
            configuration: Field configuration
            origin: Translation after rotation (default: centred on canvas)

        Returns:
            RenderResult
        """
        template = self.template_for(configuration)
        # Bounds apply to cached results too
        self.enforce_bounds(configuration, template)

        scale, origin = self.placement(configuration, origin)
        key = CacheKey(
            template_id=configuration.template_id,
            width=configuration.width_meters,
            length=configuration.length_meters,
            scale=scale,
            rotation_degrees=configuration.rotation_degrees,
            origin_x=origin[0],
            origin_y=origin[1],
        )

        cache = self.config.cache
        if cache is not None:
            cached = cache.get(key)
            if cached is not None:
                self.logger.debug(
                    event=LogEvent.CACHE_HIT,
                    message=f"Cache hit for '{key.template_id}'",
                    metadata={'template_id': key.template_id},
                )
                return RenderResult(configuration, scale, origin, cached, from_cache=True)
            self.logger.debug(
                event=LogEvent.CACHE_MISS,
                message=f"Cache miss for '{key.template_id}'",
                metadata={'template_id': key.template_id},
            )

        meters = self._build(configuration, template)
        pixels = tuple(project(
            meters,
            scale,
            configuration.rotation_degrees,
            configuration.width_meters,
            configuration.length_meters,
            origin[0],
            origin[1],
        ))
        self.logger.info(
            event=LogEvent.PROJECTION_COMPLETED,
            message=f"Projected {len(pixels)} primitives",
            metadata={
                'template_id': key.template_id,
                'scale': scale,
                'rotation_degrees': configuration.rotation_degrees,
                'origin': list(origin),
            },
        )

        if cache is not None:
            cache.put(key, pixels)
        return RenderResult(configuration, scale, origin, pixels)

    def draw(
        self,
        configuration: FieldConfiguration,
        canvas: Optional[np.ndarray] = None,
        origin: Optional[Tuple[float, float]] = None,
    ) -> np.ndarray:
        """
        Render a configuration onto a canvas with the reference visualizer.

        Args:
            configuration: Field configuration
            canvas: BGR frame to draw on (default: blank canvas from settings)
            origin: Translation after rotation (default: centred on canvas)

        Returns:
            Annotated BGR frame
        """
        settings = self.config.settings
        if canvas is None:
            canvas = FieldVisualizer.blank_canvas(settings.canvas_wh, settings.background_color_hex)

        result = self.render(configuration, origin)
        visualizer = FieldVisualizer.from_settings(
            settings, configuration.line_color_hex, result.scale
        )
        frame = visualizer.draw(canvas, result.primitives)

        self.logger.info(
            event=LogEvent.RENDER_COMPLETED,
            message=f"Rendered '{configuration.template_id}'",
            metadata={
                'template_id': configuration.template_id,
                'canvas_wh': [frame.shape[1], frame.shape[0]],
                'primitives': len(result.primitives),
            },
        )
        return frame


class PipelineBuilder:
    """
    Builder for FieldRenderPipeline.

    Design:
    - Fluent API for construction
    - Fail-fast validation
    - Sensible defaults

    Usage:
        pipeline = (
            PipelineBuilder()
            .with_templates(registry)
            .with_render_settings(RenderSettings(canvas_wh=(800, 600)))
            .build()
        )
    """

    def __init__(self):
        self._templates: Optional[TemplateSource] = None
        self._settings: Optional[RenderSettings] = None
        self._logger: Optional[StructuredLogger] = None
        self._cache: Optional[BuildCache] = None
        self._enforce_bounds: bool = True

    def with_templates(self, templates: TemplateSource) -> "PipelineBuilder":
        """Set template source (e.g. TemplateRegistry)."""
        self._templates = templates
        return self

    def with_render_settings(self, settings: RenderSettings) -> "PipelineBuilder":
        """Set renderer settings."""
        self._settings = settings
        return self

    def with_logger(self, logger: StructuredLogger) -> "PipelineBuilder":
        """Set structured logger."""
        self._logger = logger
        return self

    def with_cache(self, cache: BuildCache) -> "PipelineBuilder":
        """Enable memoisation with a caller-owned cache."""
        self._cache = cache
        return self

    def with_bounds_enforced(self, enforce: bool) -> "PipelineBuilder":
        """Disable for interactive previews outside template bounds."""
        self._enforce_bounds = enforce
        return self

    def with_engine_config(self, config: EngineConfig) -> "PipelineBuilder":
        """Apply render settings and cache policy from an EngineConfig."""
        self._settings = config.render
        self._cache = BuildCache(max_size=config.cache_size) if config.cache_enabled else None
        return self

    def build(self) -> FieldRenderPipeline:
        """
        Build the pipeline.

        Raises:
            ValueError: If required configuration is missing
        """
        if self._templates is None:
            raise ValueError("Template source is required (use .with_templates())")

        config = PipelineConfig(
            templates=self._templates,
            settings=self._settings or RenderSettings(),
            logger=self._logger or StructuredLogger(component="pipeline"),
            cache=self._cache,
            enforce_bounds=self._enforce_bounds,
        )
        return FieldRenderPipeline(config)
