"""Notification dispatch, retry and retention settings."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class NotificationSettings(BaseSettings):
    """Dispatch loop, retry policy and retention configuration.

    Environment variables use NOTIFY_ prefix.
    Example: NOTIFY_BATCH_SIZE=25, NOTIFY_RETENTION_DAYS=14
    """

    batch_size: int = Field(
        default=50,
        ge=1,
        le=50,
        description="Maximum notifications claimed per dispatch pass",
    )
    max_attempts: int = Field(
        default=3,
        ge=1,
        le=20,
        description="Failed attempts after which a notification is marked failed",
    )
    retention_days: int = Field(
        default=30,
        ge=1,
        le=3650,
        description="Terminal notifications older than this are deleted",
    )
    cleanup_batch_size: int = Field(
        default=500,
        ge=1,
        le=500,
        description="Maximum notifications deleted per cleanup pass",
    )

    # Scheduling
    scheduler_enabled: bool = Field(
        default=True,
        description="Register the periodic dispatch and cleanup jobs on startup",
    )
    dispatch_interval_seconds: int = Field(default=60, ge=5, le=3600)
    cleanup_interval_hours: int = Field(default=24, ge=1, le=168)

    # Payload constants
    notification_type: str = Field(default="event_reminder")
    email_template_id: str = Field(default="event_reminder")
    push_click_action: str = Field(default="FLUTTER_NOTIFICATION_CLICK")
    android_channel_id: str = Field(default="event_reminders")

    model_config = SettingsConfigDict(
        env_prefix="NOTIFY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )
