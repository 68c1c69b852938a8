"""Logging configuration settings."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingSettings(BaseSettings):
    """Structured logging configuration.

    Environment variables use LOG_ prefix.
    Example: LOG_LEVEL=INFO, LOG_JSON_LOGS=true, LOG_FILE_ENABLED=false
    """

    service_name: str = Field(
        default="notification-dispatcher",
        description="Service name to include in log records (static field in JSON)",
    )
    level: LogLevel = Field(default="INFO", description="Root logger level")
    json_logs: bool = Field(
        default=True,
        description="Enable JSON Lines formatted structured logs",
    )

    console_enabled: bool = Field(default=True, description="Log to stderr")
    file_enabled: bool = Field(default=False, description="Also log to a rotating file")
    file_path: Path = Field(default=Path("logs/notification-dispatcher.log"))
    file_max_bytes: int = Field(default=10 * 1024 * 1024, ge=1024)
    file_backup_count: int = Field(default=5, ge=0, le=100)

    use_queue: bool = Field(
        default=True,
        description="Route records through a QueueHandler so I/O happens off the event loop",
    )
    include_context: bool = Field(
        default=True,
        description="Inject contextvars (notification_id, channel, ...) into every record",
    )

    # Noisy third-party loggers
    logger_levels: dict[str, LogLevel] = Field(
        default_factory=lambda: {
            "uvicorn.access": "WARNING",
            "sqlalchemy.engine": "WARNING",
            "httpx": "WARNING",
            "apscheduler": "WARNING",
            "aio_pika": "WARNING",
            "aiormq": "WARNING",
        },
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )
