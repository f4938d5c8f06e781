"""DAO Service — cached aggregation, filtering and consistent mutation of procurement dossiers.

Invariants:
    - Reads: cache (aggregates only) -> store on miss -> oracle -> cache populate
    - Writes: fresh read -> pure transform (core/dao_mutations) -> ONE store update -> evict aggregates
    - Writes never repopulate the cache
    - Team removal (remove_team_member, or update_dao with a smaller equipe) writes
      team and tasks in the same store update (no dangling assignee)
    - Store and cache failures propagate unchanged; no retry, no fallback
    - Mutations of one dossier are serialized in-process by a per-dossier asyncio.Lock,
      dropped once nobody holds or waits on it;
      across processes the last write wins

Design Decisions:
    - Store, cache and oracle injected: tests use in-memory fakes and a pinned clock
    - Filter/search bypass the cache so status filters always reflect current data
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable, Sequence
from contextlib import asynccontextmanager
from datetime import date, datetime, timezone
from typing import Any

from dao_manager.core import dao_accessors, dao_filters, dao_mutations
from dao_manager.core.cache_policy import (
    STATS_CACHE_KEY, TASK_PROGRESS_CACHE_KEY,
    keys_invalidated_by_write, prefixes_invalidated_by_full_reset,
)
from dao_manager.core.dao_stats import compute_dao_stats, compute_task_global_progress
from dao_manager.core.dao_template import build_default_tasks
from dao_manager.core.domain_types import DaoStatus
from dao_manager.core.repository_protocols import CacheLike, DaoRepository, StatusOracle
from dao_manager.schemas.dao import (
    CloneOverrides, Dao, DaoCreate, DaoFilters, DaoStats, DaoSummary, DaoTask,
    TaskDistributionEntry, TaskGlobalProgress, TeamMember, TeamMemberCreate,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DossierLocks:
    """One asyncio.Lock per dossier id, alive only while someone holds or waits on it."""

    def __init__(self):
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, dao_id: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(dao_id, asyncio.Lock())
        self._users[dao_id] = self._users.get(dao_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[dao_id] -= 1
            if not self._users[dao_id]:
                del self._users[dao_id]
                del self._locks[dao_id]

    def __len__(self) -> int:
        return len(self._locks)


class DaoService:
    """Entry point for every dossier read, query and mutation."""

    def __init__(
        self,
        repository: DaoRepository,
        cache: CacheLike,
        oracle: StatusOracle,
        stats_ttl_seconds: float = 60.0,
        task_progress_ttl_seconds: float = 120.0,
        clock: Callable[[], datetime] = _utcnow,
        member_id_factory: Callable[[], str] | None = None,
        today: Callable[[], date] = date.today,
    ):
        self._repository = repository
        self._cache = cache
        self._oracle = oracle
        self._stats_ttl = stats_ttl_seconds
        self._task_progress_ttl = task_progress_ttl_seconds
        self._clock = clock
        self._member_id_factory = member_id_factory
        self._today = today
        self._locks = DossierLocks()

    # ─── CRUD pass-through ──────────────────────────────────────

    async def get_all_daos(self) -> list[Dao]:
        return await self._repository.list_all()

    async def get_dao_by_id(self, dao_id: str) -> Dao:
        return await self._repository.get_by_id(dao_id)

    async def create_dao(self, payload: DaoCreate) -> Dao:
        """Create a dossier with the full default task template."""
        fields = payload.model_dump()
        fields["equipe"] = list(payload.equipe)
        fields["tasks"] = build_default_tasks()
        dao = await self._repository.create(fields)
        self._invalidate_aggregates()
        logger.info(f"DAO {dao.numero_liste} created", extra={"dao_id": dao.id})
        return dao

    async def update_dao(self, dao_id: str, updates: dict[str, Any]) -> Dao:
        """Write a partial set of dossier fields.

        A task list must keep its ids. A team replacement also unassigns every
        task whose member left, in the same store update.
        """
        async with self._locks.hold(dao_id):
            if "tasks" in updates or "equipe" in updates:
                current = await self._repository.get_by_id(dao_id)
                tasks = current.tasks
                if "tasks" in updates:
                    tasks = [DaoTask.model_validate(t) for t in updates["tasks"]]
                    dao_mutations.check_task_ids_unchanged(current, tasks)
                    updates = {**updates, "tasks": tasks}
                if "equipe" in updates:
                    team = [TeamMember.model_validate(m) for m in updates["equipe"]]
                    updates = {
                        **updates,
                        "equipe": team,
                        "tasks": dao_mutations.unassign_departed(current.equipe, team, tasks),
                    }
            dao = await self._repository.update(dao_id, updates)
        self._invalidate_aggregates()
        return dao

    async def delete_dao(self, dao_id: str) -> None:
        async with self._locks.hold(dao_id):
            await self._repository.delete(dao_id)
        self._invalidate_aggregates()
        logger.info("DAO deleted", extra={"dao_id": dao_id})

    async def get_next_dao_number(self) -> str:
        return await self._repository.next_available_number()

    # ─── Task management ────────────────────────────────────────

    async def update_task(
        self, dao_id: str, task_id: int, updates: dict[str, Any],
    ) -> Dao:
        """Shallow-replace fields of one task, stamp last_updated_at, persist the task list."""
        async with self._locks.hold(dao_id):
            dao = await self._repository.get_by_id(dao_id)
            tasks = dao_mutations.apply_task_update(dao, task_id, updates, self._clock())
            updated = await self._repository.update(dao_id, {"tasks": tasks})
        self._invalidate_aggregates()
        logger.info(
            f"Task updated: {sorted(updates)}",
            extra={"dao_id": dao_id, "task_id": task_id},
        )
        return updated

    async def update_task_progress(
        self, dao_id: str, task_id: int, progress: float, user_id: str | None = None,
    ) -> Dao:
        return await self.update_task(
            dao_id, task_id, dao_mutations.progress_update(progress, user_id),
        )

    async def assign_task(
        self, dao_id: str, task_id: int, member_id: str, user_id: str | None = None,
    ) -> Dao:
        return await self.update_task(
            dao_id, task_id, dao_mutations.assignment_update(member_id, user_id),
        )

    async def toggle_task_applicability(
        self, dao_id: str, task_id: int, is_applicable: bool, user_id: str | None = None,
    ) -> Dao:
        return await self.update_task(
            dao_id, task_id, dao_mutations.applicability_update(is_applicable, user_id),
        )

    # ─── Team management ────────────────────────────────────────

    async def add_team_member(self, dao_id: str, payload: TeamMemberCreate) -> Dao:
        async with self._locks.hold(dao_id):
            dao = await self._repository.get_by_id(dao_id)
            if self._member_id_factory:
                team, member = dao_mutations.add_team_member(
                    dao, payload, self._member_id_factory,
                )
            else:
                team, member = dao_mutations.add_team_member(dao, payload)
            updated = await self._repository.update(dao_id, {"equipe": team})
        self._invalidate_aggregates()
        logger.info(
            "Team member added", extra={"dao_id": dao_id, "member_id": member.id},
        )
        return updated

    async def update_team_member(
        self, dao_id: str, member_id: str, updates: dict[str, Any],
    ) -> Dao:
        async with self._locks.hold(dao_id):
            dao = await self._repository.get_by_id(dao_id)
            team = dao_mutations.update_team_member(dao, member_id, updates)
            updated = await self._repository.update(dao_id, {"equipe": team})
        self._invalidate_aggregates()
        return updated

    async def remove_team_member(self, dao_id: str, member_id: str) -> Dao:
        """Remove a member and unassign its tasks in a single store update."""
        async with self._locks.hold(dao_id):
            dao = await self._repository.get_by_id(dao_id)
            team, tasks = dao_mutations.remove_team_member(dao, member_id)
            updated = await self._repository.update(
                dao_id, {"equipe": team, "tasks": tasks},
            )
        self._invalidate_aggregates()
        logger.info(
            "Team member removed", extra={"dao_id": dao_id, "member_id": member_id},
        )
        return updated

    # ─── Clone ──────────────────────────────────────────────────

    async def clone_dao(self, dao_id: str, overrides: CloneOverrides | None = None) -> Dao:
        """Copy identifying fields and team; the clone restarts from the default template."""
        source = await self._repository.get_by_id(dao_id)
        fields = dao_mutations.build_clone_fields(source, overrides or CloneOverrides())
        fields["tasks"] = build_default_tasks()
        clone = await self._repository.create(fields)
        self._invalidate_aggregates()
        logger.info(
            f"DAO {source.numero_liste} cloned as {clone.numero_liste}",
            extra={"dao_id": clone.id},
        )
        return clone

    # ─── Statistics & analytics ─────────────────────────────────

    async def get_dao_stats(self) -> DaoStats:
        async def _produce() -> DaoStats:
            daos = await self._repository.list_all()
            return compute_dao_stats(daos, self._oracle)

        return await self._cache.get_or_set(STATS_CACHE_KEY, _produce, self._stats_ttl)

    async def get_task_global_progress(self) -> list[TaskGlobalProgress]:
        async def _produce() -> list[TaskGlobalProgress]:
            daos = await self._repository.list_all()
            return compute_task_global_progress(daos)

        return await self._cache.get_or_set(
            TASK_PROGRESS_CACHE_KEY, _produce, self._task_progress_ttl,
        )

    # ─── Filtering & search ─────────────────────────────────────

    async def get_filtered_daos(self, filters: DaoFilters) -> list[Dao]:
        daos = await self._repository.list_all()
        return dao_filters.filter_daos(daos, filters, self._oracle)

    async def search_daos(self, query: str) -> list[Dao]:
        daos = await self._repository.list_all()
        return dao_filters.search_daos(daos, query)

    # ─── Derived fields ─────────────────────────────────────────

    def get_dao_progress(self, dao: Dao) -> int:
        return self._oracle.progress(dao.tasks)

    def get_dao_status(self, dao: Dao) -> DaoStatus:
        return self._oracle.status(dao.date_depot, self.get_dao_progress(dao))

    def get_dao_summary(self, dao: Dao, today: date | None = None) -> DaoSummary:
        today = today or self._today()
        progress = self.get_dao_progress(dao)
        return DaoSummary(
            dao_id=dao.id,
            status=self._oracle.status(dao.date_depot, progress),
            progress=progress,
            days_until_deadline=dao_accessors.get_days_until_deadline(dao, today),
            is_overdue=dao_accessors.is_dao_overdue(dao, today),
        )

    def get_tasks_assigned_to(self, dao: Dao, member_id: str) -> list[DaoTask]:
        return dao_accessors.get_tasks_assigned_to(dao, member_id)

    def get_days_until_deadline(self, dao: Dao, today: date | None = None) -> int:
        return dao_accessors.get_days_until_deadline(dao, today or self._today())

    def is_dao_overdue(self, dao: Dao, today: date | None = None) -> bool:
        return dao_accessors.is_dao_overdue(dao, today or self._today())

    def get_non_applicable_tasks(self, dao: Dao) -> list[DaoTask]:
        return dao_accessors.get_non_applicable_tasks(dao)

    def get_in_progress_tasks(self, dao: Dao) -> list[DaoTask]:
        return dao_accessors.get_in_progress_tasks(dao)

    def get_completed_tasks(self, dao: Dao) -> list[DaoTask]:
        return dao_accessors.get_completed_tasks(dao)

    def get_task_distribution(self, dao: Dao) -> dict[str, TaskDistributionEntry]:
        return dao_accessors.get_task_distribution(dao)

    def export_dao_to_json(self, dao: Dao) -> str:
        return dao_accessors.export_dao_to_json(dao)

    # ─── Cache ──────────────────────────────────────────────────

    def invalidate_cache(self) -> None:
        """Drop every cached DAO-derived entry."""
        self._evict(keys_invalidated_by_write(), prefixes_invalidated_by_full_reset())

    def _invalidate_aggregates(self) -> None:
        self._evict(keys_invalidated_by_write(), ())

    def _evict(self, keys: Sequence[str], prefixes: Sequence[str]) -> None:
        for key in keys:
            self._cache.delete(key)
        for prefix in prefixes:
            self._cache.delete_by_prefix(prefix)
