"""Service test fixtures — in-memory store, pinned clocks, DaoService under test.

Invariants:
    - Every test gets a fresh InMemoryDaoRepository and TTLCache
    - "today" pinned to tests.factories.TODAY for the status oracle
    - Cache clock is a manual FakeClock: TTL expiry is driven by the test

Design Decisions:
    - Fake store implements the DaoRepository Protocol structurally (no inheritance)
    - Store counts list_all calls so tests can observe cache hits
"""

import uuid
from typing import Any

import pytest

from dao_manager.core.dao_status_oracle import DeadlineStatusOracle
from dao_manager.core.errors import DaoNotFoundError
from dao_manager.infrastructure.ttl_cache import TTLCache
from dao_manager.schemas.dao import Dao
from dao_manager.services.dao_service import DaoService
from tests.factories import NOW, TODAY


class InMemoryDaoRepository:
    """Dict-backed dossier store, insertion ordered."""

    def __init__(self):
        self.rows: dict[str, Dao] = {}
        self.list_all_calls = 0
        self.update_calls: list[tuple[str, set[str]]] = []

    async def list_all(self) -> list[Dao]:
        self.list_all_calls += 1
        return list(self.rows.values())

    async def get_by_id(self, dao_id: str) -> Dao:
        if dao_id not in self.rows:
            raise DaoNotFoundError(dao_id)
        return self.rows[dao_id]

    async def create(self, fields: dict[str, Any]) -> Dao:
        dao = Dao(id=str(uuid.uuid4()), created_at=NOW, updated_at=NOW, **fields)
        self.rows[dao.id] = dao
        return dao

    async def update(self, dao_id: str, fields: dict[str, Any]) -> Dao:
        current = await self.get_by_id(dao_id)
        self.update_calls.append((dao_id, set(fields)))
        updated = Dao.model_validate({**current.model_dump(), **fields})
        self.rows[dao_id] = updated
        return updated

    async def delete(self, dao_id: str) -> None:
        await self.get_by_id(dao_id)
        del self.rows[dao_id]

    async def next_available_number(self) -> str:
        return f"DAO-{TODAY.year}-{len(self.rows) + 1:03d}"

class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now

@pytest.fixture
def repository():
    return InMemoryDaoRepository()

@pytest.fixture
def cache_clock():
    return FakeClock()

@pytest.fixture
def cache(cache_clock):
    return TTLCache(clock=cache_clock)

@pytest.fixture
def oracle():
    return DeadlineStatusOracle(clock=lambda: TODAY)

@pytest.fixture
def service(repository, cache, oracle):
    ids = (f"member_{n}" for n in range(1, 1000))
    return DaoService(
        repository=repository,
        cache=cache,
        oracle=oracle,
        clock=lambda: NOW,
        member_id_factory=lambda: next(ids),
        today=lambda: TODAY,
    )
