"""Email channel: queues a request for the email subsystem."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from notification_dispatcher.features.notifications.enums import NotificationChannel
from notification_dispatcher.features.notifications.exceptions import ChannelDeliveryError
from notification_dispatcher.features.notifications.store import EmailRequest

from .base import DeliveryResult

if TYPE_CHECKING:
    from notification_dispatcher.features.notifications.store import (
        NotificationSnapshot,
        NotificationStore,
        Recipient,
    )

logger = logging.getLogger(__name__)


class EmailSender:
    """Enqueues a ``pending`` email request; queuing is the success condition.

    Actual transmission happens in the email subsystem, which consumes
    ``email_queue`` independently.
    """

    def __init__(self, store: NotificationStore, template_id: str = "event_reminder") -> None:
        self._store = store
        self._template_id = template_id

    async def send(
        self, notification: NotificationSnapshot, recipient: Recipient,
    ) -> DeliveryResult:
        if not recipient.email:
            raise ChannelDeliveryError(
                NotificationChannel.EMAIL,
                f"Recipient {recipient.id} has no email address",
                code="missing-email",
            )

        await self._store.add_email_request(
            EmailRequest(
                to=recipient.email,
                subject=notification.payload.title,
                body=notification.payload.body,
                event_id=notification.payload.event_id,
                template_id=self._template_id,
            ),
        )
        logger.info("Email request queued", extra={"user_id": recipient.id})
        return DeliveryResult(channel=NotificationChannel.EMAIL)
