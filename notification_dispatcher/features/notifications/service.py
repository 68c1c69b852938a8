"""Batch dispatch loop."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING

from . import metrics
from .processor import utcnow
from .schemas import DispatchSummary

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from .processor import NotificationProcessor
    from .store import NotificationSnapshot, NotificationStore

logger = logging.getLogger(__name__)

MAX_BATCH_SIZE = 50


class NotificationDispatchService:
    """Pulls one bounded batch of due notifications and processes it concurrently.

    Each notification runs in its own task inside an ``asyncio.TaskGroup``.
    Per-task wrappers capture delivery errors, so one failure never cancels
    its siblings; only errors from the batch query itself propagate.
    """

    def __init__(
        self,
        store: NotificationStore,
        processor: NotificationProcessor,
        *,
        batch_size: int = MAX_BATCH_SIZE,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._processor = processor
        self._batch_size = min(batch_size, MAX_BATCH_SIZE)
        self._clock = clock

    async def run_once(self) -> DispatchSummary:
        start = time.perf_counter()
        logger.info("Processing scheduled notifications")

        try:
            summary = await self._run_batch()
        finally:
            metrics.dispatch_pass_duration_seconds.observe(time.perf_counter() - start)
        logger.info("Dispatch pass complete", extra=summary.model_dump())
        return summary

    async def _run_batch(self) -> DispatchSummary:
        due = await self._store.fetch_due_notifications(self._clock(), self._batch_size)
        metrics.dispatch_batch_size.observe(len(due))
        if not due:
            logger.info("No scheduled notifications due")
            return DispatchSummary()

        logger.info("Found due notifications", extra={"count": len(due)})

        async with asyncio.TaskGroup() as tg:
            tasks = [tg.create_task(self._settle(notification)) for notification in due]

        succeeded = sum(1 for task in tasks if task.result())
        return DispatchSummary(
            processed=len(due),
            succeeded=succeeded,
            failed=len(due) - succeeded,
        )

    async def _settle(self, notification: NotificationSnapshot) -> bool:
        try:
            await self._processor.process(notification)
        except Exception:
            # Already recorded by the processor
            return False
        return True
