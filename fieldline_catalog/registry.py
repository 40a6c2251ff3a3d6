"""
TemplateRegistry - Explicit template registration pattern

Bounded Context: Template storage seen from the engine
Responsibilities:
  - Register templates by id (fail on double registration)
  - Look up templates, failing fast on unknown ids
  - List active templates for pickers (sorted by sport, then name)
  - Bulk-load template directories

Threading: Thread-safe (uses lock for write operations)
Pattern: Registry with explicit registration
"""

import threading
from pathlib import Path
from typing import Dict, List, Optional, Set, Union

from fieldline_catalog.loader import builtin_template_paths, load_template, template_paths
from fieldline_engine.logging import LogEvent, StructuredLogger
from fieldline_engine.template.schema import TemplateDefinition
from fieldline_engine.template.validation import has_errors, validate_template


class TemplateNotAvailableError(KeyError):
    """Raised when looking up a template id that was never registered"""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class TemplateRegistry:
    """
    Registry of template definitions keyed by template id.

    Key Features:
      - Fail-fast: Unknown ids rejected with the list of known ones
      - Introspection: available_templates, list_active, count
      - Optional validation gate: templates with errors can be refused

    Thread Safety:
      - Uses lock for write operations (register, load_directory)
      - Read operations are lock-free (immutable dict reads)

    Example:
        registry = TemplateRegistry.with_builtin_templates()
        registry.load_directory(Path("./templates"))

        try:
            template = registry.get("soccer_11v11")
        except TemplateNotAvailableError as e:
            print(f"Template not available: {e}")
    """

    def __init__(
        self,
        logger: Optional[StructuredLogger] = None,
        validate: bool = True,
    ):
        """
        Args:
            logger: Structured logger (default: component "registry")
            validate: Refuse templates whose validation reports errors
        """
        self._templates: Dict[str, TemplateDefinition] = {}
        self._lock = threading.Lock()
        self._validate = validate
        self.logger = logger or StructuredLogger(component="registry")

    @classmethod
    def with_builtin_templates(
        cls,
        logger: Optional[StructuredLogger] = None,
        validate: bool = True,
    ) -> "TemplateRegistry":
        """Registry preloaded with the templates shipped in the package."""
        registry = cls(logger=logger, validate=validate)
        for path in builtin_template_paths():
            registry.register(load_template(path))
        return registry

    def register(self, template: TemplateDefinition) -> None:
        """
        Register a template.

        Raises:
            ValueError: If the id is already registered, or validation is
                enabled and the template has errors
        """
        if self._validate:
            issues = validate_template(template)
            if has_errors(issues):
                errors = [i.message for i in issues if i.is_error]
                self.logger.warning(
                    event=LogEvent.TEMPLATE_REJECTED,
                    message=f"Template '{template.template_id}' rejected",
                    metadata={'template_id': template.template_id, 'errors': errors},
                )
                raise ValueError(
                    f"Template '{template.template_id}' is invalid: " + "; ".join(errors)
                )

        with self._lock:
            if template.template_id in self._templates:
                raise ValueError(f"Template '{template.template_id}' already registered")
            self._templates[template.template_id] = template

        self.logger.info(
            event=LogEvent.TEMPLATE_REGISTERED,
            message=f"Registered template '{template.template_id}'",
            metadata={
                'template_id': template.template_id,
                'sport': template.sport,
                'elements': len(template.elements),
            },
        )

    def replace(self, template: TemplateDefinition) -> None:
        """Register or overwrite a template (editor save). Not validated."""
        with self._lock:
            self._templates[template.template_id] = template
        self.logger.info(
            event=LogEvent.TEMPLATE_REGISTERED,
            message=f"Replaced template '{template.template_id}'",
            metadata={'template_id': template.template_id},
        )

    def get(self, template_id: str) -> TemplateDefinition:
        """
        Look up a template.

        Raises:
            TemplateNotAvailableError: If the id is not registered
        """
        template = self._templates.get(template_id)
        if template is None:
            raise TemplateNotAvailableError(
                f"Template '{template_id}' not available. "
                f"Available templates: {', '.join(sorted(self.available_templates)) or 'none'}"
            )
        return template

    def is_available(self, template_id: str) -> bool:
        return template_id in self._templates

    @property
    def available_templates(self) -> Set[str]:
        """Snapshot of every registered id (active or not)."""
        return set(self._templates.keys())

    def list_active(self, sport: Optional[str] = None) -> List[TemplateDefinition]:
        """Active templates ordered by sport, then name."""
        templates = [
            t for t in self._templates.values()
            if t.is_active and (sport is None or t.sport == sport)
        ]
        return sorted(templates, key=lambda t: (t.sport, t.name))

    def load_directory(self, directory: Union[str, Path]) -> List[str]:
        """
        Load and register every template document in a directory.

        Returns:
            Ids registered, in file-name order

        Raises:
            FileNotFoundError: If the directory does not exist
            ValueError: On the first malformed, invalid or duplicate template
        """
        registered = []
        for path in template_paths(directory):
            template = load_template(path)
            self.logger.debug(
                event=LogEvent.TEMPLATE_LOADED,
                message=f"Loaded {path.name}",
                metadata={'template_id': template.template_id, 'path': str(path)},
            )
            self.register(template)
            registered.append(template.template_id)
        return registered

    def count(self) -> int:
        return len(self._templates)
