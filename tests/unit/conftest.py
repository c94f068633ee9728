"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator, Generator
from unittest.mock import MagicMock

import pytest
import structlog
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from hiring_pipeline_core.models.application import CandidateSubmission
from hiring_pipeline_infra.db.engine import create_engine
from hiring_pipeline_infra.db.session import create_session_factory, init_db
from tests.mocks.mock_factories import make_submission
from tests.mocks.mock_settings import make_settings


@pytest.fixture
def mock_settings() -> MagicMock:
    """Return a MagicMock Settings with sensible defaults."""
    return make_settings()


@pytest.fixture
def sample_submission() -> CandidateSubmission:
    """Return a valid CandidateSubmission."""
    return make_submission()


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine shared across sessions via a static pool."""
    engine = create_engine(make_settings(db_backend="sqlite", database_url="sqlite+aiosqlite://"))
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the in-memory engine."""
    return create_session_factory(db_engine)


@pytest.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """One session on the in-memory database."""
    async with session_factory() as sess:
        yield sess


@pytest.fixture(autouse=True)
def _reset_logging() -> Generator[None, None, None]:
    """Restore root logger handlers and structlog config after each test.

    CLI tests call configure_logging() which replaces root logger handlers.
    """
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    yield
    root.handlers = original_handlers
    root.level = original_level
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
