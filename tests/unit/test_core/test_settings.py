"""Tests for environment-driven settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from notification_dispatcher.core.settings import (
    AppSettings,
    LoggingSettings,
    NotificationSettings,
    PostgresSettings,
    PushSettings,
    RabbitSettings,
)


class TestNotificationSettings:
    def test_defaults(self, monkeypatch):
        for var in ("NOTIFY_BATCH_SIZE", "NOTIFY_MAX_ATTEMPTS", "NOTIFY_RETENTION_DAYS"):
            monkeypatch.delenv(var, raising=False)

        settings = NotificationSettings(_env_file=None)

        assert settings.batch_size == 50
        assert settings.max_attempts == 3
        assert settings.retention_days == 30
        assert settings.cleanup_batch_size == 500

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("NOTIFY_BATCH_SIZE", "25")
        monkeypatch.setenv("NOTIFY_RETENTION_DAYS", "14")

        settings = NotificationSettings(_env_file=None)

        assert settings.batch_size == 25
        assert settings.retention_days == 14

    def test_batch_size_above_cap_is_rejected(self):
        with pytest.raises(ValidationError):
            NotificationSettings(_env_file=None, batch_size=51)

    def test_frozen(self):
        settings = NotificationSettings(_env_file=None)

        with pytest.raises(ValidationError):
            settings.batch_size = 10


class TestPostgresSettings:
    def test_dsn_overrides_components(self, monkeypatch):
        monkeypatch.setenv("DB_DSN", "sqlite+aiosqlite:///./local.db")

        settings = PostgresSettings(_env_file=None)

        assert settings.database_url == "sqlite+aiosqlite:///./local.db"
        assert settings.is_sqlite

    def test_url_from_components(self, monkeypatch):
        monkeypatch.delenv("DB_DSN", raising=False)

        settings = PostgresSettings(
            _env_file=None, host="db", user="app", password="p@ss", name="notify",
        )

        assert settings.database_url == "postgresql+psycopg://app:p%40ss@db:5432/notify"
        assert not settings.is_sqlite

    def test_disabled_is_not_configured(self):
        assert not PostgresSettings(_env_file=None, enabled=False).is_configured


class TestOtherSettings:
    def test_rabbit_disabled_is_not_configured(self):
        assert not RabbitSettings(_env_file=None, enabled=False).is_configured

    def test_rabbit_url_from_amqp_uri(self, monkeypatch):
        monkeypatch.setenv("RABBIT_AMQP_URI", "amqp://guest:guest@mq:5672/")

        settings = RabbitSettings(_env_file=None, enabled=True)

        assert settings.url == "amqp://guest:guest@mq:5672/"
        assert settings.is_configured

    def test_push_requires_project_and_token(self):
        assert not PushSettings(_env_file=None, enabled=True, project_id="demo").is_configured
        assert PushSettings(
            _env_file=None, enabled=True, project_id="demo", access_token="t",
        ).is_configured

    def test_push_service_account_is_enough(self):
        settings = PushSettings(_env_file=None, enabled=True, service_account_json='{"type": "service_account"}')

        assert settings.is_configured

    def test_logging_json_flag(self, monkeypatch):
        monkeypatch.setenv("LOG_JSON_LOGS", "true")

        assert LoggingSettings(_env_file=None).json_logs is True

    def test_debug_rejected_in_production(self):
        with pytest.raises(ValidationError):
            AppSettings(_env_file=None, environment="production", debug=True)
