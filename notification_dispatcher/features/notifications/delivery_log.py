"""Audit log of terminal delivery outcomes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .enums import NotificationStatus
from .store import DeliveryLogEntry

if TYPE_CHECKING:
    from datetime import datetime

    from .store import NotificationSnapshot


class DeliveryLogger:
    """Builds the one ``notification_logs`` entry per sent or permanently failed notification.

    The entry is written by the store together with the status change, so a
    terminal record never exists without its log entry.
    """

    def sent_entry(self, notification: NotificationSnapshot, sent_at: datetime) -> DeliveryLogEntry:
        return DeliveryLogEntry(
            notification_id=notification.id,
            event_id=notification.payload.event_id,
            user_id=notification.recipient_id,
            channel=notification.channel,
            status=NotificationStatus.SENT,
            sent_at=sent_at,
            created_at=sent_at,
        )

    def failed_entry(
        self, notification: NotificationSnapshot, error: str, failed_at: datetime,
    ) -> DeliveryLogEntry:
        return DeliveryLogEntry(
            notification_id=notification.id,
            event_id=notification.payload.event_id,
            user_id=notification.recipient_id,
            channel=notification.channel,
            status=NotificationStatus.FAILED,
            error=error,
            created_at=failed_at,
        )
