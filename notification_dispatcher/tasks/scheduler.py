"""APScheduler integration for the periodic notification passes.

With a Taskiq broker, jobs enqueue tasks for workers:
    APScheduler (in-process) -> Taskiq kiq() -> RabbitMQ -> Taskiq Worker

Without one, jobs run the pass in-process. Either way each job has
``max_instances=1`` and ``coalesce=True``, so a slow dispatch pass delays
the next tick in this process instead of overlapping it.
"""

from __future__ import annotations

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from notification_dispatcher.core.settings import get_notification_settings
from notification_dispatcher.features.notifications.factory import (
    run_cleanup_pass,
    run_dispatch_pass,
)
from notification_dispatcher.tasks.broker import broker

logger = logging.getLogger(__name__)

DISPATCH_JOB_ID = "process_scheduled_notifications"
CLEANUP_JOB_ID = "cleanup_old_notifications"

scheduler = AsyncIOScheduler(
    timezone="UTC",
    job_defaults={
        "coalesce": True,
        "max_instances": 1,
        "misfire_grace_time": 60,
    },
)


async def _dispatch_job() -> None:
    if broker is not None:
        from notification_dispatcher.tasks.notifications import process_scheduled_notifications

        await process_scheduled_notifications.kiq()
        return

    try:
        await run_dispatch_pass()
    except Exception:
        # The next tick retries
        logger.exception("Scheduled dispatch pass failed")


async def _cleanup_job() -> None:
    if broker is not None:
        from notification_dispatcher.tasks.notifications import cleanup_old_notifications

        await cleanup_old_notifications.kiq()
        return

    try:
        await run_cleanup_pass()
    except Exception:
        logger.exception("Scheduled cleanup pass failed")


def setup_scheduled_jobs() -> None:
    """Register the dispatch and cleanup jobs with APScheduler."""
    settings = get_notification_settings()

    scheduler.add_job(
        func=_dispatch_job,
        trigger=IntervalTrigger(seconds=settings.dispatch_interval_seconds),
        id=DISPATCH_JOB_ID,
        name="Process scheduled notifications",
        replace_existing=True,
    )
    scheduler.add_job(
        func=_cleanup_job,
        trigger=IntervalTrigger(hours=settings.cleanup_interval_hours),
        id=CLEANUP_JOB_ID,
        name="Clean up old notifications",
        replace_existing=True,
    )
    logger.info(
        "Scheduled notification jobs registered",
        extra={
            "dispatch_interval_seconds": settings.dispatch_interval_seconds,
            "cleanup_interval_hours": settings.cleanup_interval_hours,
            "mode": "taskiq" if broker is not None else "inline",
        },
    )


async def start_scheduler() -> None:
    """Start the APScheduler. Call after setup_scheduled_jobs()."""
    if scheduler.running:
        logger.warning("APScheduler is already running")
        return
    scheduler.start()
    logger.info("APScheduler started", extra={"jobs": len(scheduler.get_jobs())})


async def stop_scheduler() -> None:
    """Stop the APScheduler without waiting for a running pass."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("APScheduler stopped")
