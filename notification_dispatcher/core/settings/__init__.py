"""Modular Pydantic Settings v2 configuration.

Each domain has its own frozen settings model with an env prefix
(APP_, DB_, LOG_, RABBIT_, NOTIFY_, PUSH_). Import via the cached loaders:

    from notification_dispatcher.core.settings import get_notification_settings
"""

from __future__ import annotations

from .app import AppSettings
from .loader import (
    clear_all_caches,
    get_app_settings,
    get_db_settings,
    get_logging_settings,
    get_notification_settings,
    get_push_settings,
    get_rabbit_settings,
)
from .logs import LoggingSettings
from .notifications import NotificationSettings
from .postgres import PostgresSettings
from .push import PushSettings
from .rabbit import RabbitSettings

__all__ = [
    "AppSettings",
    "LoggingSettings",
    "NotificationSettings",
    "PostgresSettings",
    "PushSettings",
    "RabbitSettings",
    "clear_all_caches",
    "get_app_settings",
    "get_db_settings",
    "get_logging_settings",
    "get_notification_settings",
    "get_push_settings",
    "get_rabbit_settings",
]
