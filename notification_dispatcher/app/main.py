"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from notification_dispatcher.app.exception_handlers import configure_exception_handlers
from notification_dispatcher.app.lifespan import lifespan
from notification_dispatcher.app.router import setup_routers
from notification_dispatcher.core.settings import get_app_settings


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app_settings = get_app_settings()

    app = FastAPI(
        title=app_settings.title,
        version=app_settings.version,
        debug=app_settings.debug,
        docs_url=app_settings.get_docs_url(),
        redoc_url=app_settings.get_redoc_url(),
        openapi_url=app_settings.get_openapi_url(),
        lifespan=lifespan,
    )

    configure_exception_handlers(app)
    setup_routers(app, app_settings)

    return app
