"""Routes a notification to the sender for its channel."""

from __future__ import annotations

from typing import TYPE_CHECKING, assert_never

from notification_dispatcher.features.notifications.enums import NotificationChannel
from notification_dispatcher.features.notifications.exceptions import UnsupportedChannelError

if TYPE_CHECKING:
    from notification_dispatcher.features.notifications.store import (
        NotificationSnapshot,
        Recipient,
    )

    from .base import DeliveryResult
    from .email import EmailSender
    from .in_app import InAppSender
    from .push import PushSender


def parse_channel(value: str) -> NotificationChannel:
    """Convert a stored channel string into a ``NotificationChannel``.

    Raises:
        UnsupportedChannelError: If ``value`` is not a known channel.
    """
    try:
        return NotificationChannel(value)
    except ValueError:
        raise UnsupportedChannelError(value) from None


class ChannelDispatcher:
    """Holds one sender per channel and dispatches by ``NotificationChannel``."""

    def __init__(self, push: PushSender, email: EmailSender, in_app: InAppSender) -> None:
        self.push = push
        self.email = email
        self.in_app = in_app

    async def dispatch(
        self, notification: NotificationSnapshot, recipient: Recipient,
    ) -> DeliveryResult:
        channel = parse_channel(notification.channel)
        match channel:
            case NotificationChannel.PUSH:
                return await self.push.send(notification, recipient)
            case NotificationChannel.EMAIL:
                return await self.email.send(notification, recipient)
            case NotificationChannel.IN_APP:
                return await self.in_app.send(notification, recipient)
            case _:
                assert_never(channel)
