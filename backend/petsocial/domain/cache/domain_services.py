"""
Cache Domain Services

Invalidation rules for the lookup cache: which keys a committed change set
could have staled, and removing exactly those keys.
"""

import logging
from typing import Iterable, List

from opentelemetry import trace

from ...constants import BREEDS_CACHE_KEY_PREFIX
from ...monitoring.cache_metrics import lookup_cache_invalidations
from .entities import EntityChange
from .repository_interfaces import CacheBackend
from .value_objects import CacheKey, ChangeOperation, LookupKind

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class CacheInvalidationService:
    """
    Domain service mapping committed lookup changes to cache removals.

    Removal is best-effort: a failing key is logged and skipped, the
    remaining keys are still attempted, and nothing is raised.
    """

    def __init__(self, cache: CacheBackend):
        self.cache = cache

    @staticmethod
    def keys_for_changes(changes: Iterable[EntityChange]) -> List[CacheKey]:
        """
        Compute the distinct keys to remove for a change set.

        Constant keys come first in a fixed order, followed by breed partitions
        in ascending pet type id order.
        """
        kinds = set()
        breed_partitions = set()

        for change in changes:
            kinds.add(change.kind)
            if change.kind is LookupKind.PET_BREED:
                breed_partitions.add(change.partition)
            elif (
                change.kind is LookupKind.PET_TYPE
                and change.operation is ChangeOperation.DELETED
                and change.partition is not None
            ):
                # Breeds of a deleted pet type go with it
                breed_partitions.add(change.partition)

        keys: List[CacheKey] = []
        for kind in (
            LookupKind.PET_TYPE,
            LookupKind.PET_FOOD,
            LookupKind.PET_COLOR,
            LookupKind.USER_TYPE,
        ):
            if kind in kinds:
                keys.append(CacheKey.for_lookup(kind))

        keys.extend(CacheKey.breeds(pid) for pid in sorted(breed_partitions))
        return keys

    async def invalidate(self, changes: Iterable[EntityChange]) -> List[str]:
        """
        Remove every key the change set could have staled.

        Returns:
            The keys whose removal call succeeded
        """
        keys = self.keys_for_changes(changes)
        if not keys:
            return []

        with tracer.start_as_current_span("cache.invalidate_lookups") as span:
            span.set_attribute("key_count", len(keys))
            removed: List[str] = []

            for key in keys:
                lookup = (
                    "breeds"
                    if key.value.startswith(BREEDS_CACHE_KEY_PREFIX)
                    else key.value
                )
                try:
                    await self.cache.remove(key.value)
                    removed.append(key.value)
                    lookup_cache_invalidations.labels(
                        lookup=lookup, outcome="removed"
                    ).inc()
                except Exception as e:
                    lookup_cache_invalidations.labels(
                        lookup=lookup, outcome="failed"
                    ).inc()
                    span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                    logger.warning(
                        f"Lookup cache invalidation failed for {key.value}: {e}",
                        extra={
                            "cache_key": key.value,
                            "backend": self.cache.name,
                            "error_type": type(e).__name__,
                        },
                    )

            logger.info(
                f"Invalidated {len(removed)}/{len(keys)} lookup cache keys",
                extra={"keys": removed, "backend": self.cache.name},
            )
            return removed
