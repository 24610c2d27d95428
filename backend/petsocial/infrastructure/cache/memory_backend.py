"""
In-process cache backend.

Host-local and lost on restart; each service instance holds its own copy,
so invalidations are only visible to the instance that committed the write.
"""

import copy
import logging
import time
from typing import Any, Callable, Dict, Hashable, NamedTuple, Optional

from cachetools import TLRUCache

from ...domain.cache.repository_interfaces import CacheBackend
from ...domain.cache.value_objects import TTL

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 1024


class _Entry(NamedTuple):
    value: Any
    ttl_seconds: int


def _expires_at(key: Hashable, entry: _Entry, now: float) -> float:
    return now + entry.ttl_seconds


class MemoryCacheBackend(CacheBackend):
    """
    Bounded in-process cache on ``cachetools.TLRUCache``.

    Every entry carries its own absolute TTL. Expired entries are purged on
    each write, so client-chosen keys such as ``breeds-{id}`` cannot pile
    up; past ``max_entries`` the least recently used entry is evicted.
    Values are copied on the way in and out so callers cannot mutate a
    cached entry in place.
    """

    name = "memory"

    def __init__(
        self,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._cache: TLRUCache = TLRUCache(
            maxsize=max_entries, ttu=_expires_at, timer=clock
        )

    async def get(self, key: str, value_type: Any = None) -> Optional[Any]:
        entry = self._cache.get(key)
        if entry is None:
            return None
        return copy.copy(entry.value)

    async def set(self, key: str, value: Any, ttl: TTL) -> None:
        self._cache[key] = _Entry(copy.copy(value), ttl.seconds)

    async def remove(self, key: str) -> bool:
        return self._cache.pop(key, None) is not None

    def purge_expired(self) -> None:
        self._cache.expire()

    async def health_check(self) -> Dict[str, Any]:
        self.purge_expired()
        return {
            "backend": self.name,
            "status": "healthy",
            "entries": len(self._cache),
            "max_entries": self._cache.maxsize,
        }

    async def close(self) -> None:
        self._cache.clear()
        logger.debug("Memory cache cleared")
