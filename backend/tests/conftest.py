"""Root conftest — shared test configuration and database fixtures.

Invariants:
    - Tests never use real API keys or a real database file
    - Every test that needs storage gets a fresh in-memory SQLite database

Design Decisions:
    - Env defaults set before any genstudio import (get_settings is lru_cached)
    - DatabaseSessionManager built via __new__ so it wraps the test engine instead
      of creating its own pool
"""

import os

os.environ.setdefault("ANTHROPIC_API_KEY", "sk-ant-test-fake-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("CODING_FLOOR_MS", "0")

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession, create_async_engine, async_sessionmaker,
)

from genstudio.db.base import Base  # noqa: E402
from genstudio.infrastructure.database import DatabaseSessionManager  # noqa: E402
import genstudio.models  # noqa: E402,F401


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db_manager(test_engine, test_session_factory):
    """DatabaseSessionManager wired to the in-memory test engine."""
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = test_session_factory
    return manager
