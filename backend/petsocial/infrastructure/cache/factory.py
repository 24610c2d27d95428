"""
Cache backend selection.

Chosen once at startup from ``USE_REDIS`` and shared process-wide.
"""

import logging

from ...core.config import Settings
from ...domain.cache.repository_interfaces import CacheBackend
from .memory_backend import MemoryCacheBackend
from .redis_backend import RedisCacheBackend

logger = logging.getLogger(__name__)


def create_cache_backend(settings: Settings) -> CacheBackend:
    """Build the configured cache backend."""
    if settings.USE_REDIS:
        backend = RedisCacheBackend.from_settings(settings)
    else:
        backend = MemoryCacheBackend(max_entries=settings.MEMORY_CACHE_MAX_ENTRIES)

    logger.info(
        f"Lookup cache backend selected: {backend.name}",
        extra={"backend": backend.name},
    )
    return backend
