"""
Structured Logging for Fieldline
================================

Bounded Context: Observability

Public API
----------
    LogEvent: Typed event names (enum)
    StructuredLogger: JSON logger implementation
    create_logger: Factory function

Example:
    >>> from fieldline_engine.logging import StructuredLogger, LogEvent
    >>> logger = StructuredLogger(component="registry")
    >>> logger.info(
    ...     event=LogEvent.TEMPLATE_REGISTERED,
    ...     message="Registered soccer_11v11",
    ...     metadata={'template_id': 'soccer_11v11'}
    ... )
"""

from .events import LogEvent
from .structured import StructuredLogger, create_logger

__all__ = [
    'LogEvent',
    'StructuredLogger',
    'create_logger',
]
