"""Infrastructure test fixtures — in-memory SQLite behind a real DatabaseSessionManager."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from dao_manager.db.base import Base
from dao_manager.infrastructure.database import DatabaseSessionManager
from dao_manager.infrastructure.sql_dao_repository import SqlDaoRepository
from tests.factories import TODAY


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def test_manager(test_engine):
    """DatabaseSessionManager wired to the test engine (pool args are Postgres-only)."""
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )
    return manager


@pytest.fixture
def sql_repository(test_manager):
    return SqlDaoRepository(test_manager, clock=lambda: TODAY)
