"""Push channel with token invalidation and in-app fallback."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from notification_dispatcher.features.notifications import metrics
from notification_dispatcher.features.notifications.enums import NotificationChannel
from notification_dispatcher.features.notifications.exceptions import (
    ChannelDeliveryError,
    StoreError,
)
from notification_dispatcher.infra.push import PushTransportError

from .base import DeliveryResult

if TYPE_CHECKING:
    from notification_dispatcher.features.notifications.schemas import NotificationPayload
    from notification_dispatcher.features.notifications.store import (
        NotificationSnapshot,
        NotificationStore,
        Recipient,
    )
    from notification_dispatcher.infra.push import PushTransport

    from .in_app import InAppSender

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PushMessageOptions:
    notification_type: str = "event_reminder"
    click_action: str = "FLUTTER_NOTIFICATION_CLICK"
    android_channel_id: str = "event_reminders"


def build_push_message(
    token: str,
    payload: NotificationPayload,
    options: PushMessageOptions | None = None,
) -> dict[str, Any]:
    """Build an FCM v1 message for ``token``.

    FCM requires every ``data`` value to be a string.
    """
    options = options or PushMessageOptions()
    return {
        "token": token,
        "notification": {"title": payload.title, "body": payload.body},
        "data": {
            "eventId": payload.event_id or "",
            "type": options.notification_type,
            "click_action": options.click_action,
        },
        "android": {
            "priority": "high",
            "notification": {"sound": "default", "channel_id": options.android_channel_id},
        },
        "apns": {
            "payload": {"aps": {"sound": "default", "badge": 1, "content-available": 1}},
        },
    }


class PushSender:
    """Sends through the push transport, redirecting to in-app when the token is unusable.

    - No token: in-app fallback, the transport is never called.
    - Transport reports the token invalid or unregistered: the token is
      cleared (best effort) and the in-app fallback is used.
    - Any other transport error: ``ChannelDeliveryError``.
    """

    def __init__(
        self,
        store: NotificationStore,
        transport: PushTransport,
        fallback: InAppSender,
        options: PushMessageOptions | None = None,
    ) -> None:
        self._store = store
        self._transport = transport
        self._fallback = fallback
        self._options = options or PushMessageOptions()

    async def send(
        self, notification: NotificationSnapshot, recipient: Recipient,
    ) -> DeliveryResult:
        if not recipient.push_token:
            logger.info("No push token, falling back to in-app", extra={"user_id": recipient.id})
            return await self._fall_back(notification, recipient, reason="no_token")

        message = build_push_message(recipient.push_token, notification.payload, self._options)
        try:
            message_id = await self._transport.send(message)
        except PushTransportError as exc:
            if not exc.is_token_error:
                raise ChannelDeliveryError(
                    NotificationChannel.PUSH,
                    exc.message,
                    code=str(exc.code),
                ) from exc

            logger.info(
                "Push token rejected, clearing token and falling back to in-app",
                extra={"user_id": recipient.id, "error_code": str(exc.code)},
            )
            await self._clear_token(recipient.id)
            return await self._fall_back(notification, recipient, reason="invalid_token")

        logger.info("Push notification sent", extra={"user_id": recipient.id})
        return DeliveryResult(channel=NotificationChannel.PUSH, message_id=message_id)

    async def _clear_token(self, user_id: str) -> None:
        try:
            await self._store.clear_push_token(user_id)
        except StoreError:
            logger.warning(
                "Failed to clear invalid push token", extra={"user_id": user_id}, exc_info=True,
            )

    async def _fall_back(
        self, notification: NotificationSnapshot, recipient: Recipient, *, reason: str,
    ) -> DeliveryResult:
        metrics.push_fallbacks_total.labels(reason=reason).inc()
        result = await self._fallback.send(notification, recipient)
        return DeliveryResult(channel=result.channel, fallback_reason=reason)
