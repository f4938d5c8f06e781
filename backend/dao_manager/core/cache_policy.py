"""Cache Policy — which derived results are cached, under which key, and what a write evicts.

Invariants:
    - Only aggregates are cached; single-dossier reads and filter/search always hit the store
    - Any dossier create/update/delete evicts both aggregate keys
    - Writes never repopulate the cache
"""

STATS_CACHE_KEY = "dao-stats"
TASK_PROGRESS_CACHE_KEY = "task-global-progress"
DAO_CACHE_PREFIX = "dao-"

AGGREGATE_KEYS: tuple[str, ...] = (STATS_CACHE_KEY, TASK_PROGRESS_CACHE_KEY)


def keys_invalidated_by_write() -> tuple[str, ...]:
    """Keys evicted after any mutation of any dossier."""
    return AGGREGATE_KEYS


def prefixes_invalidated_by_full_reset() -> tuple[str, ...]:
    return (DAO_CACHE_PREFIX,)
