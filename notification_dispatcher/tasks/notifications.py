"""Notification task definitions.

This module provides:
- The periodic dispatch pass over due scheduled notifications
- The daily retention cleanup of terminal notifications
"""

from __future__ import annotations

import logging

from notification_dispatcher.features.notifications.factory import (
    run_cleanup_pass,
    run_dispatch_pass,
)
from notification_dispatcher.tasks.broker import broker

logger = logging.getLogger(__name__)


if broker is not None:

    @broker.task(task_name="process_scheduled_notifications")
    async def process_scheduled_notifications() -> dict[str, int]:
        """Deliver up to one batch of due notifications.

        Scheduled: every ``NOTIFY_DISPATCH_INTERVAL_SECONDS`` (via APScheduler).

        Returns:
            ``{"processed": n, "succeeded": n, "failed": n}``
        """
        summary = await run_dispatch_pass()
        return summary.model_dump()

    @broker.task(task_name="cleanup_old_notifications")
    async def cleanup_old_notifications() -> dict[str, int]:
        """Delete terminal notifications older than the retention window.

        Scheduled: every ``NOTIFY_CLEANUP_INTERVAL_HOURS`` (via APScheduler).
        """
        summary = await run_cleanup_pass()
        return summary.model_dump()
