"""SQLAlchemy models for the notification store collections."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, Boolean, CheckConstraint, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from notification_dispatcher.core.database import Base, TimestampMixin, UTCDateTime, UUIDv7PKMixin

from .enums import EmailRequestStatus, NotificationStatus

# JSONB on PostgreSQL, JSON text elsewhere
JSONType = JSON().with_variant(JSONB(), "postgresql")


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ScheduledNotification(Base, UUIDv7PKMixin, TimestampMixin):
    """A notification intent waiting for (or done with) delivery.

    ``channel`` and ``status`` are plain strings so rows written by other
    producers with unexpected values still load; the processor validates them.
    """

    __tablename__ = "scheduled_notifications"

    recipient_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    channel: Mapped[str] = mapped_column(String(20), nullable=False)
    payload: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False, default=dict)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=NotificationStatus.SCHEDULED.value,
    )
    scheduled_for: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_attempt_at: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)
    sent_at: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)
    error: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("attempts >= 0", name="attempts_non_negative"),
        Index("ix_scheduled_notifications_status_scheduled_for", "status", "scheduled_for"),
        Index("ix_scheduled_notifications_status_updated_at", "status", "updated_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<ScheduledNotification(id={self.id}, channel={self.channel!r}, "
            f"status={self.status!r}, attempts={self.attempts})>"
        )


class NotificationLog(Base, UUIDv7PKMixin):
    """Append-only audit entry for a terminal delivery outcome.

    ``notification_id`` is not a foreign key: logs outlive the
    notifications removed by the retention cleaner.
    """

    __tablename__ = "notification_logs"

    notification_id: Mapped[uuid.UUID] = mapped_column(nullable=False, index=True)
    event_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    channel: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    error: Mapped[str | None] = mapped_column(Text, nullable=True)
    sent_at: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, default=_utcnow)


class EmailQueueItem(Base, UUIDv7PKMixin):
    """Request handed to the email subsystem, which owns it after insertion."""

    __tablename__ = "email_queue"

    to: Mapped[str] = mapped_column(String(320), nullable=False)
    subject: Mapped[str] = mapped_column(String(500), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    event_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    template_id: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=EmailRequestStatus.PENDING.value, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, default=_utcnow)


class InAppNotification(Base, UUIDv7PKMixin):
    """User inbox entry shown by the in-app notification feature."""

    __tablename__ = "in_app_notifications"

    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    event_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, default=_utcnow)
