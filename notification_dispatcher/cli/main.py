"""CLI entry point for notification-dispatcher management commands."""

from __future__ import annotations

import json

import click

from notification_dispatcher import __version__
from notification_dispatcher.infra.logging import setup_logging

from .utils import coro, error, info, success


@click.group()
@click.version_option(version=__version__, prog_name="notification-dispatcher")
def cli() -> None:
    """Notification Dispatcher - scheduled push, email and in-app delivery.

    \b
    Quick Start:
      notification-dispatcher init-db    # Create tables (SQLite/local runs)
      notification-dispatcher dispatch   # Run one dispatch pass
      notification-dispatcher cleanup    # Run one retention cleanup pass
      notification-dispatcher serve      # Run the API with the in-process scheduler
    """
    setup_logging()


@cli.command()
@coro
async def dispatch() -> None:
    """Deliver one batch of due notifications and print the result as JSON."""
    from notification_dispatcher.features.notifications.factory import run_dispatch_pass
    from notification_dispatcher.infra.database import close_database

    try:
        summary = await run_dispatch_pass()
    except Exception as exc:
        error(f"Dispatch pass failed: {exc}")
        raise SystemExit(1) from exc
    finally:
        await close_database()

    click.echo(json.dumps(summary.model_dump()))
    if summary.failed:
        info(f"{summary.failed} notification(s) failed this pass")


@cli.command()
@coro
async def cleanup() -> None:
    """Delete expired terminal notifications and print the result as JSON."""
    from notification_dispatcher.features.notifications.factory import run_cleanup_pass
    from notification_dispatcher.infra.database import close_database

    try:
        summary = await run_cleanup_pass()
    except Exception as exc:
        error(f"Cleanup pass failed: {exc}")
        raise SystemExit(1) from exc
    finally:
        await close_database()

    click.echo(json.dumps(summary.model_dump()))


@cli.command("init-db")
@coro
async def init_db() -> None:
    """Create all tables from the ORM models.

    Use Alembic (``alembic upgrade head``) for PostgreSQL deployments.
    """
    from notification_dispatcher.infra.database import close_database, create_tables

    try:
        await create_tables()
    finally:
        await close_database()
    success("Tables created")


@cli.command()
@click.option("--host", default=None, help="Bind host (default: APP_HOST)")
@click.option("--port", default=None, type=int, help="Bind port (default: APP_PORT)")
@click.option("--reload", is_flag=True, help="Reload on code changes (development)")
def serve(host: str | None, port: int | None, reload: bool) -> None:
    """Run the API server under uvicorn."""
    import uvicorn

    from notification_dispatcher.core.settings import get_app_settings, get_logging_settings

    settings = get_app_settings()
    info(f"Starting server on {host or settings.host}:{port or settings.port}")
    uvicorn.run(
        "notification_dispatcher.app.main:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        access_log=settings.debug,
        log_level=get_logging_settings().level.lower(),
    )


def main() -> None:
    cli()
