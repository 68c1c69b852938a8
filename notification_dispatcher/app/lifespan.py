"""Application lifespan management.

Startup order:
1. Logging
2. Database connectivity check (when configured)
3. Push transport client
4. Taskiq broker (when RabbitMQ is configured)
5. APScheduler jobs (when NOTIFY_SCHEDULER_ENABLED)

Shutdown runs in reverse.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from notification_dispatcher.core.settings import (
    get_app_settings,
    get_db_settings,
    get_notification_settings,
    get_push_settings,
)
from notification_dispatcher.infra.logging import setup_logging
from notification_dispatcher.infra.push import FcmPushClient

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    setup_logging()
    app_settings = get_app_settings()
    db_settings = get_db_settings()
    notify_settings = get_notification_settings()

    logger.info(
        "Starting application",
        extra={"service": app_settings.service_name, "environment": app_settings.environment},
    )

    if db_settings.is_configured:
        from notification_dispatcher.infra.database import create_tables, init_database

        await init_database()
        if db_settings.is_sqlite:
            await create_tables()

    push_settings = get_push_settings()
    app.state.push_client = FcmPushClient.from_settings(push_settings)
    if not push_settings.is_configured:
        logger.warning("Push transport not configured; push notifications will be retried and fail")

    from notification_dispatcher.tasks.broker import start_taskiq, stop_taskiq

    await start_taskiq()

    scheduler_started = False
    if notify_settings.scheduler_enabled and db_settings.is_configured:
        from notification_dispatcher.tasks.scheduler import setup_scheduled_jobs, start_scheduler

        setup_scheduled_jobs()
        await start_scheduler()
        scheduler_started = True

    try:
        yield
    finally:
        logger.info("Shutting down application")
        if scheduler_started:
            from notification_dispatcher.tasks.scheduler import stop_scheduler

            await stop_scheduler()
        await stop_taskiq()
        await app.state.push_client.aclose()
        if db_settings.is_configured:
            from notification_dispatcher.infra.database import close_database

            await close_database()
