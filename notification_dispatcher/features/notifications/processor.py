"""Per-notification delivery with retry bookkeeping."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from notification_dispatcher.infra.logging import set_log_context

from . import metrics
from .enums import NotificationStatus
from .exceptions import InvalidPayloadError, StoreError

if TYPE_CHECKING:
    from collections.abc import Callable

    from .channels import ChannelDispatcher, DeliveryResult
    from .delivery_log import DeliveryLogger
    from .resolver import RecipientResolver
    from .store import NotificationSnapshot, NotificationStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3


def utcnow() -> datetime:
    return datetime.now(UTC)


class NotificationProcessor:
    """Resolves, dispatches and records the outcome of one notification.

    On success the record becomes ``sent`` with ``sent_at`` stamped and a
    ``sent`` log entry is appended. On failure ``attempts`` is incremented;
    below ``max_attempts`` the record stays ``scheduled`` for a later pass,
    otherwise it becomes ``failed`` and a ``failed`` log entry is appended.
    Status change and log entry go to the store as one write. If the ``sent``
    write itself fails the record stays ``scheduled`` and is delivered again
    on a later pass. The delivery error is always re-raised so callers can count it.
    """

    def __init__(
        self,
        store: NotificationStore,
        resolver: RecipientResolver,
        channels: ChannelDispatcher,
        delivery_log: DeliveryLogger,
        *,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._resolver = resolver
        self._channels = channels
        self._delivery_log = delivery_log
        self._max_attempts = max_attempts
        self._clock = clock

    async def process(self, notification: NotificationSnapshot) -> DeliveryResult:
        set_log_context(notification_id=str(notification.id), channel=notification.channel)

        try:
            if notification.payload_error is not None:
                raise InvalidPayloadError(notification.payload_error)
            recipient = await self._resolver.resolve(notification.recipient_id)
            result = await self._channels.dispatch(notification, recipient)
        except Exception as exc:
            await self._record_failure(notification, exc)
            raise

        sent_at = self._clock()
        await self._store.update_notification(
            notification.id,
            {"status": NotificationStatus.SENT, "sent_at": sent_at, "updated_at": sent_at},
            self._delivery_log.sent_entry(notification, sent_at),
        )

        metrics.notifications_processed_total.labels(
            channel=notification.channel, outcome="sent",
        ).inc()
        logger.info(
            "Notification sent",
            extra={"delivered_via": str(result.channel), "fallback_reason": result.fallback_reason},
        )
        return result

    async def _record_failure(self, notification: NotificationSnapshot, exc: Exception) -> None:
        message = str(exc) or type(exc).__name__
        attempts = notification.attempts + 1
        now = self._clock()
        terminal = attempts >= self._max_attempts

        values: dict[str, object] = {
            "attempts": attempts,
            "error": message,
            "last_attempt_at": now,
            "updated_at": now,
        }
        if terminal:
            values["status"] = NotificationStatus.FAILED
            values["error"] = f"Max attempts reached: {message}"

        log_entry = self._delivery_log.failed_entry(notification, message, now) if terminal else None
        try:
            await self._store.update_notification(notification.id, values, log_entry)
        except StoreError:
            logger.exception(
                "Failed to record delivery failure",
                extra={"attempts": attempts, "delivery_error": message},
            )

        outcome = "failed" if terminal else "retry"
        metrics.notifications_processed_total.labels(
            channel=notification.channel, outcome=outcome,
        ).inc()
        logger.warning(
            "Notification delivery failed",
            extra={
                "attempts": attempts,
                "max_attempts": self._max_attempts,
                "outcome": outcome,
                "error": message,
            },
        )
