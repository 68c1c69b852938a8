"""Push delivery settings (Firebase Cloud Messaging HTTP v1)."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class PushSettings(BaseSettings):
    """FCM transport configuration.

    Environment variables use PUSH_ prefix.
    Credentials, in order of precedence:
    1. PUSH_SERVICE_ACCOUNT_JSON: service-account key content (tokens refreshed automatically)
    2. PUSH_SERVICE_ACCOUNT_FILE: path to a service-account key file (same)
    3. PUSH_ACCESS_TOKEN: a pre-issued OAuth2 token, for short-lived runs only

    The project id defaults to the one in the service-account key.
    """

    enabled: bool = Field(default=True, description="Enable the push transport")
    project_id: str | None = Field(default=None, description="Firebase project id")
    service_account_json: SecretStr | None = Field(
        default=None,
        description="Service-account key JSON with access to Firebase Cloud Messaging",
    )
    service_account_file: Path | None = Field(
        default=None,
        description="Path to a service-account key JSON file",
    )
    access_token: SecretStr | None = Field(
        default=None,
        description="OAuth2 bearer token with the firebase.messaging scope",
    )
    base_url: str = Field(
        default="https://fcm.googleapis.com/v1",
        description="FCM HTTP v1 API base URL",
    )
    timeout: float = Field(default=10.0, gt=0, le=120.0, description="Request timeout in seconds")

    model_config = SettingsConfigDict(
        env_prefix="PUSH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @property
    def is_configured(self) -> bool:
        """Check if push is enabled and has credentials."""
        if not self.enabled:
            return False
        if self.service_account_json is not None or self.service_account_file is not None:
            return True
        return bool(self.project_id) and self.access_token is not None
