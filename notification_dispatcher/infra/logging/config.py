"""Logging configuration setup.

Provides production-ready logging configuration using:
- dictConfig for formatters, filters and logger levels
- QueueHandler + QueueListener so handler I/O never blocks the event loop
- ContextInjectingFilter for automatic context propagation
- JSONL format for machine parsing
"""

from __future__ import annotations

import atexit
import logging
import logging.config
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from queue import Queue
from typing import TYPE_CHECKING

from .context import ContextInjectingFilter
from .formatters import JSONFormatter

if TYPE_CHECKING:
    from notification_dispatcher.core.settings.logs import LoggingSettings

_listener: QueueListener | None = None
_LOGGING_INITIALIZED = False

logger = logging.getLogger(__name__)

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
) -> None:
    """Ensure logging is configured once across entrypoints (API, CLI, worker).

    Args:
        log_settings: Optional logging settings instance. If omitted, settings
            are loaded via get_logging_settings().
        force: Reconfigure logging even if it was already initialized.
    """
    global _LOGGING_INITIALIZED

    if _LOGGING_INITIALIZED and not force:
        return

    if log_settings is None:
        from notification_dispatcher.core.settings import get_logging_settings

        log_settings = get_logging_settings()

    configure_logging(log_settings)
    _LOGGING_INITIALIZED = True


def configure_logging(log_settings: LoggingSettings) -> None:
    """Configure the root logger from settings.

    All handlers hang off a single QueueHandler on the root logger;
    application loggers propagate up to it.
    """
    global _listener

    shutdown()
    logging.captureWarnings(True)

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "root": {"level": log_settings.level, "handlers": []},
            "loggers": {
                name: {"level": level} for name, level in log_settings.logger_levels.items()
            },
        },
    )

    handlers = _build_handlers(log_settings)
    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)

    if log_settings.use_queue:
        queue: Queue[logging.LogRecord] = Queue(-1)
        queue_handler = QueueHandler(queue)
        if log_settings.include_context:
            queue_handler.addFilter(ContextInjectingFilter())
        root.addHandler(queue_handler)
        _listener = QueueListener(queue, *handlers, respect_handler_level=True)
        _listener.start()
    else:
        for handler in handlers:
            if log_settings.include_context:
                handler.addFilter(ContextInjectingFilter())
            root.addHandler(handler)

    logger.debug(
        "Logging configured",
        extra={"level": log_settings.level, "json": log_settings.json_logs},
    )


def _build_formatter(log_settings: LoggingSettings) -> logging.Formatter:
    if log_settings.json_logs:
        return JSONFormatter(static={"service": log_settings.service_name})
    return logging.Formatter(TEXT_FORMAT)


def _build_handlers(log_settings: LoggingSettings) -> list[logging.Handler]:
    formatter = _build_formatter(log_settings)
    handlers: list[logging.Handler] = []

    if log_settings.console_enabled:
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        handlers.append(console)

    if log_settings.file_enabled:
        log_settings.file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_settings.file_path,
            maxBytes=log_settings.file_max_bytes,
            backupCount=log_settings.file_backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    return handlers


def shutdown() -> None:
    """Stop the QueueListener, flushing pending records."""
    global _listener

    if _listener is not None:
        _listener.stop()
        _listener = None


atexit.register(shutdown)
