"""Pytest configuration and shared fixtures.

Organization:
    - Application Fixtures: FastAPI app and HTTP client
    - Database Fixtures: in-memory SQLite engine and session factory
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator
from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

# Ensure tests run without external infrastructure
os.environ.setdefault("DB_DSN", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("RABBIT_ENABLED", "false")
os.environ.setdefault("PUSH_ENABLED", "false")
os.environ.setdefault("NOTIFY_SCHEDULER_ENABLED", "false")
os.environ.setdefault("LOG_USE_QUEUE", "false")
os.environ.setdefault("LOG_JSON_LOGS", "false")


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
async def app():
    """Create a fresh FastAPI application for each test."""
    from notification_dispatcher.app.main import create_app

    return create_app()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client bound to the app (lifespan is not run)."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def db_engine(tmp_path) -> AsyncGenerator[AsyncEngine]:
    """Async engine on a fresh file-backed SQLite database with all tables created.

    A file lets the concurrently running notification tasks open their own connections.
    """
    from notification_dispatcher.infra.database import create_tables

    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'notifications.db'}")
    await create_tables(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, expire_on_commit=False, autoflush=False)
