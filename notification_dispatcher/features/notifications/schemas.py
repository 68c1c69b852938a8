"""Pydantic schemas for notification payloads and pass summaries."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class NotificationPayload(BaseModel):
    """Content of a scheduled notification.

    Unknown keys are kept so channel-specific fields survive a round trip
    through the store.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    title: str = ""
    body: str = ""
    event_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("event_id", "eventId"),
    )


class DispatchSummary(BaseModel):
    """Aggregate result of one dispatch pass."""

    processed: int = Field(default=0, ge=0, description="Notifications selected this pass")
    succeeded: int = Field(default=0, ge=0, description="Notifications delivered")
    failed: int = Field(default=0, ge=0, description="Notifications that raised a delivery error")


class CleanupSummary(BaseModel):
    """Result of one retention cleanup pass."""

    cleaned: int = Field(default=0, ge=0, description="Terminal notifications deleted")
