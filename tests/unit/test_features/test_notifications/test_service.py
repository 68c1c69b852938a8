"""Tests for the batch dispatch loop."""

from __future__ import annotations

from datetime import timedelta

import pytest

from notification_dispatcher.features.notifications.enums import NotificationStatus
from notification_dispatcher.features.notifications.exceptions import StoreError
from notification_dispatcher.features.notifications.schemas import DispatchSummary
from notification_dispatcher.features.notifications.service import (
    MAX_BATCH_SIZE,
    NotificationDispatchService,
)
from notification_dispatcher.infra.push import PushErrorCode, PushTransportError


async def test_empty_run_returns_zero_summary(service):
    assert await service.run_once() == DispatchSummary(processed=0, succeeded=0, failed=0)


async def test_failures_are_isolated(store, service):
    store.add_user("user-1", push_token="tok-1")
    store.add_user("user-2", email="bob@example.com")
    ok_push = store.add_notification(recipient_id="user-1")
    ok_email = store.add_notification(recipient_id="user-2", channel="email")
    missing = store.add_notification(recipient_id="ghost")

    summary = await service.run_once()

    assert summary == DispatchSummary(processed=3, succeeded=2, failed=1)
    assert store.notifications[ok_push]["status"] == NotificationStatus.SENT
    assert store.notifications[ok_email]["status"] == NotificationStatus.SENT
    assert store.notifications[missing]["status"] == NotificationStatus.SCHEDULED
    assert store.notifications[missing]["attempts"] == 1


async def test_batch_is_capped(store, processor, clock):
    store.add_user("user-1")
    for _ in range(MAX_BATCH_SIZE + 5):
        store.add_notification(channel="in_app")

    service = NotificationDispatchService(store, processor, batch_size=500, clock=clock)
    summary = await service.run_once()

    assert summary.processed == MAX_BATCH_SIZE
    remaining = [
        row for row in store.notifications.values() if row["status"] == NotificationStatus.SCHEDULED
    ]
    assert len(remaining) == 5


async def test_smaller_batch_size_is_respected(store, processor, clock):
    store.add_user("user-1")
    for _ in range(4):
        store.add_notification(channel="in_app")

    service = NotificationDispatchService(store, processor, batch_size=2, clock=clock)

    assert (await service.run_once()).processed == 2
    assert (await service.run_once()).processed == 2
    assert (await service.run_once()).processed == 0


async def test_future_and_terminal_records_are_skipped(store, service, now):
    store.add_user("user-1")
    store.add_notification(channel="in_app", scheduled_for=now + timedelta(minutes=5))
    store.add_notification(channel="in_app", status=NotificationStatus.SENT)
    store.add_notification(channel="in_app", status=NotificationStatus.CANCELLED)
    due = store.add_notification(channel="in_app")

    summary = await service.run_once()

    assert summary.processed == 1
    assert store.notifications[due]["status"] == NotificationStatus.SENT


async def test_persistent_failure_exhausts_after_three_passes(store, transport, service):
    store.add_user("user-1", push_token="tok-1")
    transport.error = PushTransportError(PushErrorCode.UNAVAILABLE, "FCM down")
    notification_id = store.add_notification()

    summaries = [await service.run_once() for _ in range(4)]

    assert [s.failed for s in summaries] == [1, 1, 1, 0]
    row = store.notifications[notification_id]
    assert row["status"] == NotificationStatus.FAILED
    assert row["attempts"] == 3
    assert len(store.logs_for(notification_id)) == 1


async def test_retry_succeeds_after_transient_error(store, transport, service):
    store.add_user("user-1", push_token="tok-1")
    transport.error = PushTransportError(PushErrorCode.UNAVAILABLE, "FCM down")
    notification_id = store.add_notification()

    first = await service.run_once()
    transport.error = None
    second = await service.run_once()

    assert first.failed == 1
    assert second.succeeded == 1
    row = store.notifications[notification_id]
    assert row["status"] == NotificationStatus.SENT
    assert row["attempts"] == 1


async def test_query_error_propagates(store, service):
    store.fail_operations.add("fetch_due_notifications")

    with pytest.raises(StoreError):
        await service.run_once()


async def test_malformed_payload_does_not_block_batch(store, service, now):
    store.add_user("user-1")
    malformed = store.add_notification(
        channel="in_app", payload={"title": 12345}, scheduled_for=now - timedelta(minutes=10),
    )
    valid = store.add_notification(channel="in_app", scheduled_for=now - timedelta(minutes=1))

    summary = await service.run_once()

    assert summary == DispatchSummary(processed=2, succeeded=1, failed=1)
    assert store.notifications[valid]["status"] == NotificationStatus.SENT
    assert store.notifications[malformed]["attempts"] == 1


async def test_sent_log_failure_is_retried_next_pass(store, service):
    store.add_user("user-1")
    notification_id = store.add_notification(channel="in_app")
    store.fail_operations.add("add_delivery_log")

    first = await service.run_once()
    store.fail_operations.clear()
    second = await service.run_once()

    assert first == DispatchSummary(processed=1, succeeded=0, failed=1)
    assert second == DispatchSummary(processed=1, succeeded=1, failed=0)
    assert len(store.logs_for(notification_id)) == 1


async def test_empty_pass_records_duration(service):
    from prometheus_client import REGISTRY

    metric = "notification_dispatch_pass_duration_seconds_count"
    before = REGISTRY.get_sample_value(metric) or 0.0

    await service.run_once()

    assert REGISTRY.get_sample_value(metric) == before + 1
