"""FastAPI dependencies for the notification endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from notification_dispatcher.core.exceptions import ServiceUnavailableException
from notification_dispatcher.core.settings import get_db_settings, get_push_settings
from notification_dispatcher.infra.push import FcmPushClient, PushTransport

from .factory import build_dispatch_service, default_store
from .service import NotificationDispatchService


def get_push_transport(request: Request) -> PushTransport:
    """Return the push client opened by the application lifespan.

    Creates one on first use when the lifespan did not run.
    """
    transport = getattr(request.app.state, "push_client", None)
    if transport is None:
        transport = FcmPushClient.from_settings(get_push_settings())
        request.app.state.push_client = transport
    return transport


def get_dispatch_service(
    transport: Annotated[PushTransport, Depends(get_push_transport)],
) -> NotificationDispatchService:
    if not get_db_settings().is_configured:
        raise ServiceUnavailableException(
            detail="Database is not configured",
            type="database-unavailable",
        )
    return build_dispatch_service(default_store(), transport)


DispatchServiceDep = Annotated[NotificationDispatchService, Depends(get_dispatch_service)]
