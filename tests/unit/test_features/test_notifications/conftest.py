"""In-memory fakes for the notification store and push transport."""

from __future__ import annotations

import dataclasses
import uuid
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from notification_dispatcher.features.notifications.enums import NotificationStatus
from notification_dispatcher.features.notifications.exceptions import StoreError
from notification_dispatcher.features.notifications.store import (
    DeliveryLogEntry,
    EmailRequest,
    InAppMessage,
    NotificationSnapshot,
    Recipient,
    parse_payload,
)
from notification_dispatcher.infra.push import PushTransportError

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)


class InMemoryNotificationStore:
    """Implements ``NotificationStore`` over plain dicts and lists.

    Operations named in ``fail_operations`` raise ``StoreError``.
    """

    def __init__(self) -> None:
        self.notifications: dict[uuid.UUID, dict[str, Any]] = {}
        self.users: dict[str, Recipient] = {}
        self.email_requests: list[EmailRequest] = []
        self.in_app_messages: list[InAppMessage] = []
        self.logs: list[DeliveryLogEntry] = []
        self.deleted_batches: list[list[uuid.UUID]] = []
        self.fail_operations: set[str] = set()

    # Test helpers

    def add_user(self, user_id: str, *, email: str | None = None, push_token: str | None = None) -> None:
        self.users[user_id] = Recipient(id=user_id, email=email, push_token=push_token)

    def add_notification(
        self,
        *,
        recipient_id: str = "user-1",
        channel: str = "push",
        status: NotificationStatus = NotificationStatus.SCHEDULED,
        scheduled_for: datetime | None = None,
        updated_at: datetime | None = None,
        attempts: int = 0,
        payload: dict[str, Any] | None = None,
    ) -> uuid.UUID:
        notification_id = uuid.uuid4()
        self.notifications[notification_id] = {
            "id": notification_id,
            "recipient_id": recipient_id,
            "channel": channel,
            "payload": payload or {"title": "Standup", "body": "Starts in 10 minutes", "eventId": "evt-1"},
            "status": status,
            "scheduled_for": scheduled_for or NOW - timedelta(minutes=1),
            "attempts": attempts,
            "last_attempt_at": None,
            "sent_at": None,
            "error": None,
            "updated_at": updated_at or NOW,
        }
        return notification_id

    def snapshot(self, notification_id: uuid.UUID) -> NotificationSnapshot:
        row = self.notifications[notification_id]
        payload, payload_error = parse_payload(row["payload"])
        return NotificationSnapshot(
            id=row["id"],
            recipient_id=row["recipient_id"],
            channel=row["channel"],
            payload=payload,
            attempts=row["attempts"],
            scheduled_for=row["scheduled_for"],
            payload_error=payload_error,
        )

    def logs_for(self, notification_id: uuid.UUID) -> list[DeliveryLogEntry]:
        return [entry for entry in self.logs if entry.notification_id == notification_id]

    def _check(self, operation: str) -> None:
        if operation in self.fail_operations:
            raise StoreError(operation, "simulated failure")

    # NotificationStore

    async def fetch_due_notifications(self, now: datetime, limit: int) -> list[NotificationSnapshot]:
        self._check("fetch_due_notifications")
        due = sorted(
            (
                row
                for row in self.notifications.values()
                if row["status"] == NotificationStatus.SCHEDULED and row["scheduled_for"] <= now
            ),
            key=lambda row: row["scheduled_for"],
        )
        return [self.snapshot(row["id"]) for row in due[:limit]]

    async def update_notification(
        self,
        notification_id: uuid.UUID,
        values: dict[str, Any],
        log_entry: DeliveryLogEntry | None = None,
    ) -> None:
        self._check("update_notification")
        if log_entry is not None:
            # Both writes fail together, like one database transaction
            self._check("add_delivery_log")
            self.logs.append(log_entry)
        self.notifications[notification_id].update(values)

    async def get_user(self, user_id: str) -> Recipient | None:
        self._check("get_user")
        return self.users.get(user_id)

    async def clear_push_token(self, user_id: str) -> None:
        self._check("clear_push_token")
        if user_id in self.users:
            self.users[user_id] = dataclasses.replace(self.users[user_id], push_token=None)

    async def add_email_request(self, request: EmailRequest) -> None:
        self._check("add_email_request")
        self.email_requests.append(request)

    async def add_in_app_notification(self, message: InAppMessage) -> None:
        self._check("add_in_app_notification")
        self.in_app_messages.append(message)

    async def fetch_expired_notification_ids(self, statuses, cutoff: datetime, limit: int) -> list[uuid.UUID]:
        self._check("fetch_expired_notification_ids")
        expired = [
            row["id"]
            for row in sorted(self.notifications.values(), key=lambda row: row["updated_at"])
            if row["status"] in statuses and row["updated_at"] < cutoff
        ]
        return expired[:limit]

    async def delete_notifications(self, notification_ids) -> int:
        self._check("delete_notifications")
        self.deleted_batches.append(list(notification_ids))
        deleted = 0
        for notification_id in notification_ids:
            if self.notifications.pop(notification_id, None) is not None:
                deleted += 1
        return deleted


class FakePushTransport:
    """Records sent messages; raises ``error`` instead when it is set."""

    def __init__(self, error: PushTransportError | None = None) -> None:
        self.error = error
        self.sent: list[dict[str, Any]] = []

    async def send(self, message: dict[str, Any]) -> str:
        if self.error is not None:
            raise self.error
        self.sent.append(message)
        return f"projects/test/messages/{len(self.sent)}"


@pytest.fixture
def store() -> InMemoryNotificationStore:
    return InMemoryNotificationStore()


@pytest.fixture
def transport() -> FakePushTransport:
    return FakePushTransport()


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def notification_settings():
    from notification_dispatcher.core.settings import NotificationSettings

    return NotificationSettings()


@pytest.fixture
def build_processor(store, transport, clock, notification_settings):
    """Factory for a processor wired to the in-memory store and fake transport."""
    from notification_dispatcher.features.notifications.delivery_log import DeliveryLogger
    from notification_dispatcher.features.notifications.factory import build_channel_dispatcher
    from notification_dispatcher.features.notifications.processor import NotificationProcessor
    from notification_dispatcher.features.notifications.resolver import RecipientResolver

    def _build(*, max_attempts: int = 3):
        return NotificationProcessor(
            store,
            RecipientResolver(store),
            build_channel_dispatcher(store, transport, notification_settings),
            DeliveryLogger(),
            max_attempts=max_attempts,
            clock=clock,
        )

    return _build


@pytest.fixture
def processor(build_processor):
    return build_processor()


@pytest.fixture
def service(store, processor, clock):
    from notification_dispatcher.features.notifications.service import NotificationDispatchService

    return NotificationDispatchService(store, processor, clock=clock)


@pytest.fixture
def now() -> datetime:
    return NOW
