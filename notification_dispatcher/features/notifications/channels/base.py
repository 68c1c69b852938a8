"""Shared types for channel senders."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from notification_dispatcher.features.notifications.enums import NotificationChannel
    from notification_dispatcher.features.notifications.store import (
        NotificationSnapshot,
        Recipient,
    )


@dataclass(frozen=True, slots=True)
class DeliveryResult:
    """Result of a successful channel delivery.

    Attributes:
        channel: Channel that actually delivered (``in_app`` after a push fallback)
        message_id: Provider message id, when the sink returns one
        fallback_reason: Why push was redirected to in-app (``no_token``, ``invalid_token``)
    """

    channel: NotificationChannel
    message_id: str | None = None
    fallback_reason: str | None = None


class ChannelSender(Protocol):
    """Delivers one notification through a single channel.

    Failures are raised, never returned.
    """

    async def send(
        self, notification: NotificationSnapshot, recipient: Recipient,
    ) -> DeliveryResult: ...
