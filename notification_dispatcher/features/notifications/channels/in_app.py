"""In-app channel: writes an unread inbox entry."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from notification_dispatcher.features.notifications.enums import NotificationChannel
from notification_dispatcher.features.notifications.store import InAppMessage

from .base import DeliveryResult

if TYPE_CHECKING:
    from notification_dispatcher.features.notifications.store import (
        NotificationSnapshot,
        NotificationStore,
        Recipient,
    )

logger = logging.getLogger(__name__)


class InAppSender:
    """Creates an ``in_app_notifications`` record with ``read = False``.

    The inbox entry itself is the delivery, so there is nothing to wait for.
    """

    def __init__(self, store: NotificationStore, notification_type: str = "event_reminder") -> None:
        self._store = store
        self._notification_type = notification_type

    async def send(
        self, notification: NotificationSnapshot, recipient: Recipient,
    ) -> DeliveryResult:
        await self._store.add_in_app_notification(
            InAppMessage(
                user_id=recipient.id,
                title=notification.payload.title,
                body=notification.payload.body,
                event_id=notification.payload.event_id,
                type=self._notification_type,
            ),
        )
        logger.debug("In-app notification created", extra={"user_id": recipient.id})
        return DeliveryResult(channel=NotificationChannel.IN_APP)
