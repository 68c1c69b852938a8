"""Database session management with the psycopg3 async driver."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from notification_dispatcher.core.settings import get_app_settings, get_db_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger(__name__)

db_settings = get_db_settings()
app_settings = get_app_settings()


def build_engine(url: str, **overrides: Any) -> AsyncEngine:
    """Create an async engine, applying pool settings only where the dialect pools."""
    options: dict[str, Any] = {"echo": db_settings.echo or app_settings.debug}
    if not url.startswith("sqlite"):
        options.update(
            pool_size=db_settings.pool_size,
            max_overflow=db_settings.max_overflow,
            pool_timeout=db_settings.pool_timeout,
            pool_recycle=db_settings.pool_recycle,
            pool_pre_ping=db_settings.pool_pre_ping,
        )
    options.update(overrides)
    return create_async_engine(url, **options)


engine = build_engine(db_settings.database_url)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Get async database session.

    Example:
            async with get_async_session() as session:
            result = await session.execute(select(User))
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_database() -> None:
    """Verify the database is reachable, retrying with exponential backoff.

    Containers often start before the database accepts connections, so the
    first few failures are expected.

    Raises:
        Exception: The last connection error once all attempts are used.
    """
    attempts = db_settings.startup_retry_attempts
    delay = db_settings.startup_retry_delay

    for attempt in range(1, attempts + 1):
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            if attempt >= attempts:
                logger.error(
                    "Failed to connect to database",
                    extra={"attempts": attempt, "error": str(e)},
                )
                raise
            logger.warning(
                "Database not ready, retrying",
                extra={"attempt": attempt, "max_attempts": attempts, "delay": delay},
            )
            await asyncio.sleep(delay)
            delay = min(delay * 2, 30.0)
        else:
            logger.info(
                "Database connection established successfully",
                extra={"dialect": engine.dialect.name, "attempts": attempt},
            )
            return


async def create_tables(target: AsyncEngine | None = None) -> None:
    """Create all tables from ORM metadata (local SQLite runs and tests).

    PostgreSQL deployments use Alembic migrations instead.
    """
    from notification_dispatcher.core.database.base import Base
    from notification_dispatcher.core.models import User  # noqa: F401
    from notification_dispatcher.features.notifications import models  # noqa: F401

    async with (target or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_database() -> None:
    """Dispose of the engine's connection pool. Called during shutdown."""
    logger.info("Closing database connection")
    await engine.dispose()
