"""Tests for RetentionCleaner."""

from __future__ import annotations

from datetime import timedelta

import pytest

from notification_dispatcher.features.notifications.cleanup import (
    MAX_CLEANUP_BATCH_SIZE,
    RetentionCleaner,
)
from notification_dispatcher.features.notifications.enums import NotificationStatus
from notification_dispatcher.features.notifications.schemas import CleanupSummary


@pytest.fixture
def cleaner(store, clock):
    return RetentionCleaner(store, clock=clock)


async def test_deletes_old_terminal_records(store, cleaner, now):
    old = now - timedelta(days=31)
    sent = store.add_notification(status=NotificationStatus.SENT, updated_at=old)
    failed = store.add_notification(status=NotificationStatus.FAILED, updated_at=old)
    cancelled = store.add_notification(status=NotificationStatus.CANCELLED, updated_at=old)

    summary = await cleaner.run_once()

    assert summary == CleanupSummary(cleaned=3)
    assert not {sent, failed, cancelled} & store.notifications.keys()


async def test_scheduled_records_are_never_deleted(store, cleaner, now):
    ancient = store.add_notification(updated_at=now - timedelta(days=365))

    summary = await cleaner.run_once()

    assert summary.cleaned == 0
    assert ancient in store.notifications


async def test_recent_terminal_records_are_kept(store, cleaner, now):
    recent = store.add_notification(
        status=NotificationStatus.SENT, updated_at=now - timedelta(days=29),
    )

    assert (await cleaner.run_once()).cleaned == 0
    assert recent in store.notifications


async def test_one_batch_per_run(store, clock, now):
    for _ in range(5):
        store.add_notification(status=NotificationStatus.SENT, updated_at=now - timedelta(days=40))
    cleaner = RetentionCleaner(store, batch_size=2, clock=clock)

    assert (await cleaner.run_once()).cleaned == 2
    assert len(store.notifications) == 3


async def test_batch_size_is_capped(store, clock):
    cleaner = RetentionCleaner(store, batch_size=10_000, clock=clock)
    store.add_notification(status=NotificationStatus.SENT, updated_at=clock() - timedelta(days=40))

    await cleaner.run_once()

    assert len(store.deleted_batches) == 1
    assert MAX_CLEANUP_BATCH_SIZE == 500


async def test_nothing_to_delete_skips_delete(store, cleaner):
    assert await cleaner.run_once() == CleanupSummary(cleaned=0)
    assert store.deleted_batches == []


async def test_custom_retention(store, clock, now):
    store.add_notification(status=NotificationStatus.FAILED, updated_at=now - timedelta(days=8))
    cleaner = RetentionCleaner(store, retention_days=7, clock=clock)

    assert (await cleaner.run_once()).cleaned == 1
