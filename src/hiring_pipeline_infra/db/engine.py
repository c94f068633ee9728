"""Async database engine factory."""

from __future__ import annotations

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from hiring_pipeline_core.config.settings import Settings


def is_memory_sqlite(database_url: str) -> bool:
    """True for SQLite URLs without a file path (``sqlite+aiosqlite://``)."""
    url = make_url(database_url)
    return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")


def create_engine(settings: Settings) -> AsyncEngine:
    """Create an async SQLAlchemy engine for the configured backend.

    In-memory SQLite gets a StaticPool so the detached processing task and
    the request path see the same database.
    """
    if settings.db_backend == "sqlite":
        if is_memory_sqlite(settings.database_url):
            return create_async_engine(
                settings.database_url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        return create_async_engine(
            settings.database_url,
            connect_args={"check_same_thread": False},
        )
    return create_async_engine(
        settings.database_url,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
    )
