"""Context management for structured logging.

Provides automatic context injection into log records using contextvars,
so every line emitted while a notification is processed carries its
``notification_id`` and ``channel`` without explicit passing. Each asyncio
task gets its own copy of the context, so concurrently processed
notifications never see each other's fields.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any

_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})


def set_log_context(**kwargs: Any) -> None:
    """Set logging context for the current async task.

    Example:
        ```python
        set_log_context(notification_id="0192...", channel="push")
        logger.info("Sending notification")  # Includes both fields
        ```
    """
    current = _log_context.get().copy()
    current.update(kwargs)
    _log_context.set(current)


def get_log_context() -> dict[str, Any]:
    """Get a copy of the current logging context."""
    return _log_context.get().copy()


def clear_log_context() -> None:
    """Clear all logging context for the current async task."""
    _log_context.set({})


class ContextInjectingFilter(logging.Filter):
    """Logging filter that copies the contextvars log context onto each record.

    Attached to the handlers (not the root logger) so records propagated
    from child loggers are enriched too. Existing record attributes,
    including explicit ``extra=`` fields, are never overwritten.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _log_context.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
