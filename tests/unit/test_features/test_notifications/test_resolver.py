"""Tests for RecipientResolver and DeliveryLogger."""

from __future__ import annotations

import pytest

from notification_dispatcher.features.notifications.delivery_log import DeliveryLogger
from notification_dispatcher.features.notifications.enums import NotificationStatus
from notification_dispatcher.features.notifications.exceptions import (
    RecipientNotFoundError,
    StoreError,
)
from notification_dispatcher.features.notifications.resolver import RecipientResolver


class TestRecipientResolver:
    async def test_returns_recipient(self, store):
        store.add_user("user-1", email="ada@example.com", push_token="tok")

        recipient = await RecipientResolver(store).resolve("user-1")

        assert recipient.email == "ada@example.com"
        assert recipient.push_token == "tok"

    async def test_missing_recipient(self, store):
        with pytest.raises(RecipientNotFoundError) as exc_info:
            await RecipientResolver(store).resolve("ghost")

        assert exc_info.value.recipient_id == "ghost"

    async def test_store_error_propagates(self, store):
        store.fail_operations.add("get_user")

        with pytest.raises(StoreError):
            await RecipientResolver(store).resolve("user-1")


class TestDeliveryLogger:
    def test_sent_entry(self, store, now):
        notification_id = store.add_notification(channel="email")

        entry = DeliveryLogger().sent_entry(store.snapshot(notification_id), now)

        assert entry.notification_id == notification_id
        assert entry.status == NotificationStatus.SENT
        assert entry.channel == "email"
        assert entry.event_id == "evt-1"
        assert entry.sent_at == now
        assert entry.error is None

    def test_failed_entry(self, store, now):
        notification_id = store.add_notification()

        entry = DeliveryLogger().failed_entry(store.snapshot(notification_id), "boom", now)

        assert entry.status == NotificationStatus.FAILED
        assert entry.error == "boom"
        assert entry.sent_at is None
        assert entry.created_at == now
