"""API Dependencies — process-wide DaoService wiring for FastAPI routes.

Invariants:
    - dao_service is built once in the lifespan (init_dao_service) and reused per request
    - get_dao_service raises if the app was not started (never builds lazily)

Design Decisions:
    - Module-level holder mirrors infrastructure/database.db_manager; tests override
      get_dao_service through app.dependency_overrides
    - cache_enabled=False swaps in NullCache: every aggregate read hits the store
"""

from dao_manager.config import Settings
from dao_manager.core.dao_status_oracle import DeadlineStatusOracle
from dao_manager.infrastructure.database import DatabaseSessionManager
from dao_manager.infrastructure.sql_dao_repository import SqlDaoRepository
from dao_manager.infrastructure.ttl_cache import NullCache, TTLCache
from dao_manager.services.dao_service import DaoService

dao_service: DaoService | None = None


def build_dao_service(settings: Settings, manager: DatabaseSessionManager) -> DaoService:
    """Assemble the default store, cache and status policy from settings."""
    return DaoService(
        repository=SqlDaoRepository(manager),
        cache=TTLCache() if settings.cache_enabled else NullCache(),
        oracle=DeadlineStatusOracle(
            urgent_within_days=settings.status_urgent_within_days,
            safe_from_days=settings.status_safe_from_days,
        ),
        stats_ttl_seconds=settings.stats_cache_ttl_seconds,
        task_progress_ttl_seconds=settings.task_progress_cache_ttl_seconds,
    )


def init_dao_service(service: DaoService) -> None:
    global dao_service
    dao_service = service


def get_dao_service() -> DaoService:
    """FastAPI dependency for the dossier service."""
    if not dao_service:
        raise RuntimeError("DAO service not initialized")
    return dao_service
