"""Taskiq broker configuration for background task processing.

The broker exists only when RabbitMQ is configured (``RABBIT_ENABLED=true``).
Without it, scheduled jobs run the notification passes inside the API process.

Run worker: `taskiq worker notification_dispatcher.tasks.broker:broker notification_dispatcher.tasks.notifications`
"""

from __future__ import annotations

import logging

from taskiq_aio_pika import AioPikaBroker

from notification_dispatcher.core.settings import get_rabbit_settings
from notification_dispatcher.infra.logging import setup_logging

logger = logging.getLogger(__name__)

rabbit_settings = get_rabbit_settings()
setup_logging()

broker: AioPikaBroker | None = None

if rabbit_settings.is_configured:
    broker = AioPikaBroker(
        url=rabbit_settings.url,
        queue_name=rabbit_settings.queue_name,
        declare_exchange=True,
    )
    logger.info(
        "Taskiq background task broker configured",
        extra={"queue": rabbit_settings.queue_name},
    )
else:
    logger.info("RabbitMQ not configured - notification passes run in-process")


async def start_taskiq() -> None:
    """Start the Taskiq broker for enqueuing from the API process.

    Raises:
        Exception: If the broker cannot connect to RabbitMQ.
    """
    if broker is None:
        logger.debug("Taskiq broker not configured, skipping startup")
        return

    logger.info("Starting Taskiq broker")
    try:
        await broker.startup()
    except Exception as e:
        logger.exception("Failed to start Taskiq broker", extra={"error": str(e)})
        raise
    logger.info("Taskiq broker started successfully")


async def stop_taskiq() -> None:
    """Stop the Taskiq broker."""
    if broker is None:
        return

    logger.info("Stopping Taskiq broker")
    try:
        await broker.shutdown()
    except Exception as e:
        logger.exception("Error stopping Taskiq broker", extra={"error": str(e)})
