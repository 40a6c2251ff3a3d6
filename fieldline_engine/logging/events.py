"""
Structured Log Event Types
==========================

Bounded Context: Observability Event Taxonomy

Typed event names for structured logging.

Event Naming Convention:
    <component>.<category>.<action>

    component: template, build, projection, cache, config, render
    action: loaded, completed, failed, hit, ...

Example Log Query (CloudWatch Insights):
    fields @timestamp, event, message, metadata.template_id
    | filter event = "build.failed"
    | stats count() by metadata.element_id
"""

from enum import Enum


class LogEvent(str, Enum):
    """
    Typed log event names for structured logging.

    Categories:
    - template.*: Template catalog lifecycle
    - build.*, projection.*: Geometry pipeline
    - cache.*: Build memoisation
    - config.*: Field configuration boundary
    - render.*: Renderer adapter output
    """

    # ========== Template Events ==========
    TEMPLATE_LOADED = "template.loaded"
    """Template document parsed from storage."""

    TEMPLATE_REGISTERED = "template.registered"
    """Template added to the registry."""

    TEMPLATE_VALIDATED = "template.validated"
    """Authoring validation finished (may include warnings)."""

    TEMPLATE_REJECTED = "template.rejected"
    """Template failed authoring validation or could not be parsed."""

    # ========== Pipeline Events ==========
    BUILD_COMPLETED = "build.completed"
    """Meter-space primitives resolved."""

    BUILD_FAILED = "build.failed"
    """Geometry build aborted on an element."""

    PROJECTION_COMPLETED = "projection.completed"
    """Primitives projected to pixel space."""

    # ========== Cache Events ==========
    CACHE_HIT = "cache.hit"
    """Projected primitives served from the build cache."""

    CACHE_MISS = "cache.miss"
    """Build cache had no entry for the key."""

    # ========== Config Events ==========
    CONFIG_LOADED = "config.loaded"
    """Configuration file loaded."""

    CONFIG_REJECTED = "config.rejected"
    """Field configuration outside template bounds or invalid."""

    # ========== Render Events ==========
    RENDER_COMPLETED = "render.completed"
    """Primitives drawn onto a canvas."""


# Event categories for filtering
TEMPLATE_EVENTS = {
    LogEvent.TEMPLATE_LOADED,
    LogEvent.TEMPLATE_REGISTERED,
    LogEvent.TEMPLATE_VALIDATED,
    LogEvent.TEMPLATE_REJECTED,
}

PIPELINE_EVENTS = {
    LogEvent.BUILD_COMPLETED,
    LogEvent.BUILD_FAILED,
    LogEvent.PROJECTION_COMPLETED,
    LogEvent.CACHE_HIT,
    LogEvent.CACHE_MISS,
}

ERROR_EVENTS = {
    LogEvent.TEMPLATE_REJECTED,
    LogEvent.BUILD_FAILED,
    LogEvent.CONFIG_REJECTED,
}
