"""Status and channel enumerations for scheduled notifications."""

from __future__ import annotations

from enum import StrEnum


class NotificationStatus(StrEnum):
    """Lifecycle state of a scheduled notification.

    ``scheduled`` is the only non-terminal state. Retries keep a record in
    ``scheduled`` with an incremented attempt count.
    """

    SCHEDULED = "scheduled"
    SENT = "sent"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self is not NotificationStatus.SCHEDULED


TERMINAL_STATUSES: tuple[NotificationStatus, ...] = (
    NotificationStatus.SENT,
    NotificationStatus.FAILED,
    NotificationStatus.CANCELLED,
)


class NotificationChannel(StrEnum):
    """Delivery channels. Adding a member requires a branch in ``ChannelDispatcher``."""

    PUSH = "push"
    EMAIL = "email"
    IN_APP = "in_app"


class EmailRequestStatus(StrEnum):
    PENDING = "pending"
