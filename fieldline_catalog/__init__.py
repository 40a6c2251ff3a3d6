"""
Fieldline Template Catalog
==========================

Bounded Context: Template storage (flat files + in-memory registry).

The engine never imports this package; the pipeline takes any object
with a ``get(template_id)`` method, and TemplateRegistry is one.

Usage:

    from fieldline_catalog import TemplateRegistry

    registry = TemplateRegistry.with_builtin_templates()
    registry.load_directory("./templates")

    for template in registry.list_active():
        print(template.sport, template.name)
"""

from fieldline_catalog.loader import (
    BUILTIN_TEMPLATE_DIR,
    builtin_template_paths,
    load_template,
    template_paths,
)
from fieldline_catalog.registry import TemplateNotAvailableError, TemplateRegistry

__all__ = [
    "BUILTIN_TEMPLATE_DIR",
    "builtin_template_paths",
    "load_template",
    "template_paths",
    "TemplateNotAvailableError",
    "TemplateRegistry",
]
