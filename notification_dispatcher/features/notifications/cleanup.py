"""Retention cleanup of terminal notifications."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING

from . import metrics
from .enums import TERMINAL_STATUSES
from .processor import utcnow
from .schemas import CleanupSummary

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from .store import NotificationStore

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_DAYS = 30
MAX_CLEANUP_BATCH_SIZE = 500


class RetentionCleaner:
    """Deletes up to one batch of ``sent``/``failed``/``cancelled`` records past retention.

    ``scheduled`` records are never selected regardless of age.
    """

    def __init__(
        self,
        store: NotificationStore,
        *,
        retention_days: int = DEFAULT_RETENTION_DAYS,
        batch_size: int = MAX_CLEANUP_BATCH_SIZE,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._retention = timedelta(days=retention_days)
        self._batch_size = min(batch_size, MAX_CLEANUP_BATCH_SIZE)
        self._clock = clock

    async def run_once(self) -> CleanupSummary:
        cutoff = self._clock() - self._retention
        ids = await self._store.fetch_expired_notification_ids(
            TERMINAL_STATUSES, cutoff, self._batch_size,
        )
        if not ids:
            logger.info("No expired notifications to clean", extra={"cutoff": cutoff.isoformat()})
            return CleanupSummary()

        cleaned = await self._store.delete_notifications(ids)
        metrics.notifications_cleaned_total.inc(cleaned)
        logger.info(
            "Cleaned up old notifications",
            extra={"cleaned": cleaned, "cutoff": cutoff.isoformat()},
        )
        return CleanupSummary(cleaned=cleaned)
