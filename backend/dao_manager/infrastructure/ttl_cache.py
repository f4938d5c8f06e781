"""TTL Cache — process-scoped get-or-populate cache for derived aggregates.

Invariants:
    - An entry is served only while clock() < expires_at
    - Producer exceptions propagate and leave the cache untouched
    - delete / delete_by_prefix are idempotent (missing keys ignored)
    - A value whose key was evicted while its producer ran is returned but not stored

Design Decisions:
    - Explicit object passed to DaoService, never a module singleton: tests
      substitute a deterministic clock or a NullCache
    - No lock: single event loop, concurrent misses may both compute (last one wins)
    - Eviction bumps a per-key generation; get_or_set stores only if the generation
      it saw before awaiting the producer is still current
"""

import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TTLCache:
    """In-memory cache keyed by string with per-entry time-to-live."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}
        self._generations: dict[str, int] = {}

    async def get_or_set(
        self, key: str, producer: Callable[[], Awaitable[T]], ttl_seconds: float,
    ) -> T:
        entry = self._entries.get(key)
        now = self._clock()
        if entry is not None and now < entry[0]:
            return entry[1]

        logger.debug("Cache miss", extra={"cache_key": key})
        generation = self._generations.get(key, 0)
        value = await producer()
        if self._generations.get(key, 0) != generation:
            logger.debug("Evicted while computing, not stored", extra={"cache_key": key})
            return value
        self._entries[key] = (self._clock() + ttl_seconds, value)
        return value

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)
        self._bump(key)

    def delete_by_prefix(self, prefix: str) -> None:
        for key in {*self._entries, *self._generations}:
            if key.startswith(prefix):
                self._entries.pop(key, None)
                self._bump(key)

    def _bump(self, key: str) -> None:
        self._generations[key] = self._generations.get(key, 0) + 1

    def __contains__(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is not None and self._clock() < entry[0]


class NullCache:
    """Cache that never stores: every get_or_set runs the producer."""

    async def get_or_set(
        self, key: str, producer: Callable[[], Awaitable[T]], ttl_seconds: float,
    ) -> T:
        return await producer()

    def delete(self, key: str) -> None:
        pass

    def delete_by_prefix(self, prefix: str) -> None:
        pass
