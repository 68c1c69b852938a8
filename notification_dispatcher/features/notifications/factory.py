"""Object graph construction for the dispatch engine.

The API, the Taskiq tasks and the CLI all build their services here, so
the engine itself only ever receives explicitly injected collaborators.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from notification_dispatcher.core.settings import (
    NotificationSettings,
    get_notification_settings,
    get_push_settings,
)
from notification_dispatcher.infra.push import FcmPushClient

from .channels import (
    ChannelDispatcher,
    EmailSender,
    InAppSender,
    PushMessageOptions,
    PushSender,
)
from .cleanup import RetentionCleaner
from .delivery_log import DeliveryLogger
from .processor import NotificationProcessor
from .resolver import RecipientResolver
from .service import NotificationDispatchService
from .store import SqlAlchemyNotificationStore

if TYPE_CHECKING:
    from notification_dispatcher.infra.push import PushTransport

    from .schemas import CleanupSummary, DispatchSummary
    from .store import NotificationStore


def build_channel_dispatcher(
    store: NotificationStore,
    transport: PushTransport,
    settings: NotificationSettings,
) -> ChannelDispatcher:
    in_app = InAppSender(store, notification_type=settings.notification_type)
    push = PushSender(
        store,
        transport,
        fallback=in_app,
        options=PushMessageOptions(
            notification_type=settings.notification_type,
            click_action=settings.push_click_action,
            android_channel_id=settings.android_channel_id,
        ),
    )
    email = EmailSender(store, template_id=settings.email_template_id)
    return ChannelDispatcher(push=push, email=email, in_app=in_app)


def build_dispatch_service(
    store: NotificationStore,
    transport: PushTransport,
    settings: NotificationSettings | None = None,
) -> NotificationDispatchService:
    settings = settings or get_notification_settings()
    processor = NotificationProcessor(
        store,
        RecipientResolver(store),
        build_channel_dispatcher(store, transport, settings),
        DeliveryLogger(),
        max_attempts=settings.max_attempts,
    )
    return NotificationDispatchService(store, processor, batch_size=settings.batch_size)


def build_retention_cleaner(
    store: NotificationStore,
    settings: NotificationSettings | None = None,
) -> RetentionCleaner:
    settings = settings or get_notification_settings()
    return RetentionCleaner(
        store,
        retention_days=settings.retention_days,
        batch_size=settings.cleanup_batch_size,
    )


def default_store() -> SqlAlchemyNotificationStore:
    from notification_dispatcher.infra.database import AsyncSessionLocal

    return SqlAlchemyNotificationStore(AsyncSessionLocal)


async def run_dispatch_pass() -> DispatchSummary:
    """Run one dispatch pass against the configured database and push transport."""
    async with FcmPushClient.from_settings(get_push_settings()) as transport:
        service = build_dispatch_service(default_store(), transport)
        return await service.run_once()


async def run_cleanup_pass() -> CleanupSummary:
    """Run one retention cleanup pass against the configured database."""
    return await build_retention_cleaner(default_store()).run_once()
