"""Boundary Protocols — contracts between the dossier engine and its collaborators.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Store, cache and status oracle reached only through these Protocol types
    - Implementations provided by the shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - DaoRepository and CacheLike are async because implementations do IO;
      StatusOracle is sync — it is a pure function pair
"""

from collections.abc import Awaitable, Callable, Sequence
from datetime import date
from typing import Any, Protocol, TypeVar

from dao_manager.core.domain_types import DaoStatus
from dao_manager.schemas.dao import Dao, DaoTask

T = TypeVar("T")


class DaoRepository(Protocol):
    """Contract for dossier persistence — implemented by shell."""
    async def list_all(self) -> list[Dao]: ...
    async def get_by_id(self, dao_id: str) -> Dao:
        """Raises DaoNotFoundError when absent."""
        ...
    async def create(self, fields: dict[str, Any]) -> Dao: ...
    async def update(self, dao_id: str, fields: dict[str, Any]) -> Dao:
        """Write every key of *fields* in one transaction. Raises DaoNotFoundError."""
        ...
    async def delete(self, dao_id: str) -> None: ...
    async def next_available_number(self) -> str: ...


class CacheLike(Protocol):
    """Contract for the derived-state cache — get-or-populate with TTL, key/prefix eviction."""
    async def get_or_set(
        self, key: str, producer: Callable[[], Awaitable[T]], ttl_seconds: float,
    ) -> T: ...
    def delete(self, key: str) -> None: ...
    def delete_by_prefix(self, prefix: str) -> None: ...


class StatusOracle(Protocol):
    """Contract for the progress/status policy — thresholds owned by the implementation."""
    def progress(self, tasks: Sequence[DaoTask]) -> int: ...
    def status(self, date_depot: date, progress: int) -> DaoStatus: ...
