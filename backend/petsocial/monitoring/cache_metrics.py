"""
Lookup cache Prometheus metrics.
"""

from prometheus_client import Counter

lookup_cache_hits = Counter(
    "petsocial_lookup_cache_hits_total",
    "Lookup reads served from the cache",
    ["lookup"],
)
lookup_cache_misses = Counter(
    "petsocial_lookup_cache_misses_total",
    "Lookup reads that fell through to the database",
    ["lookup"],
)
cache_backend_errors = Counter(
    "petsocial_cache_backend_errors_total",
    "Cache backend operations that failed and were degraded",
    ["backend", "operation"],
)
lookup_cache_invalidations = Counter(
    "petsocial_lookup_cache_invalidations_total",
    "Cache keys removed after a committed write",
    ["lookup", "outcome"],
)
