"""API test fixtures — FastAPI app over a DaoService backed by in-memory SQLite.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_dao_service overridden; the lifespan (Postgres pool) never runs
    - db_manager and the dao_service holder patched so the readiness probe sees them
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import dao_manager.api.dependencies as deps_module
import dao_manager.infrastructure.database as db_module
from dao_manager.api.dependencies import get_dao_service
from dao_manager.core.dao_status_oracle import DeadlineStatusOracle
from dao_manager.db.base import Base
from dao_manager.infrastructure.database import DatabaseSessionManager
from dao_manager.infrastructure.sql_dao_repository import SqlDaoRepository
from dao_manager.infrastructure.ttl_cache import TTLCache
from dao_manager.main import app
from dao_manager.services.dao_service import DaoService
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
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )
    return manager


@pytest.fixture
def dao_service(test_manager):
    return DaoService(
        repository=SqlDaoRepository(test_manager, clock=lambda: TODAY),
        cache=TTLCache(),
        oracle=DeadlineStatusOracle(clock=lambda: TODAY),
        today=lambda: TODAY,
    )


@pytest.fixture
async def client(test_manager, dao_service):
    """FastAPI test client with the service dependency overridden."""
    app.dependency_overrides[get_dao_service] = lambda: dao_service

    original_manager, original_service = db_module.db_manager, deps_module.dao_service
    db_module.db_manager = test_manager
    deps_module.dao_service = dao_service

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
    deps_module.dao_service = original_service


@pytest.fixture
async def created_dao(client):
    res = await client.post("/api/v1/daos", json={
        "numeroListe": "DAO-2025-001",
        "objetDossier": "Acquisition de véhicules de service",
        "reference": "AO/TRP/2025/11",
        "autoriteContractante": "Ministère des Transports",
        "dateDepot": "2025-03-25",
    })
    assert res.status_code == 201
    return res.json()
