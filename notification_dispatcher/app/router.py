"""Router registration."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from notification_dispatcher.features.notifications.router import router as notifications_router

if TYPE_CHECKING:
    from fastapi import FastAPI

    from notification_dispatcher.core.settings import AppSettings

metrics_router = APIRouter(tags=["observability"])


@metrics_router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Prometheus scrape endpoint."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


def setup_routers(app: FastAPI, app_settings: AppSettings) -> None:
    app.include_router(notifications_router, prefix=app_settings.api_prefix)
    # No prefix: scraped at /metrics
    app.include_router(metrics_router)
