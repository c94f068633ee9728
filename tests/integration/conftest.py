"""Integration test fixtures: real SQLite database, external HTTP mocked."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator, Generator
from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from hiring_pipeline_core.config.settings import Settings
from hiring_pipeline_infra.db.engine import create_engine
from hiring_pipeline_infra.db.session import create_session_factory, init_db
from tests.mocks.mock_settings import make_real_settings


@pytest.fixture
def real_settings(tmp_path: Path) -> Settings:
    """Real Settings pointing at a SQLite file under tmp_path."""
    return make_real_settings(tmp_path, email_provider="smtp")


@pytest.fixture
async def db_engine(real_settings: Settings) -> AsyncGenerator[AsyncEngine, None]:
    """Engine built the way the service builds it, with tables created."""
    engine = create_engine(real_settings)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the file database."""
    return create_session_factory(db_engine)


@pytest.fixture(autouse=True)
def _reset_logging() -> Generator[None, None, None]:
    """Save and restore root logger handlers."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    yield
    root.handlers = original_handlers
    root.level = original_level
