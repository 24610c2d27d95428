"""
Cache Infrastructure Module

Interchangeable lookup cache backends behind ``CacheBackend``:
- MemoryCacheBackend: in-process, per-instance
- RedisCacheBackend: shared, JSON on the wire, circuit breaker protected
"""

from .circuit_breaker import CacheCircuitBreaker, CircuitState
from .exceptions import (
    CacheCircuitBreakerOpenException,
    CacheConfigurationException,
    CacheConnectionException,
    CacheException,
    CacheSerializationException,
)
from .factory import create_cache_backend
from .memory_backend import MemoryCacheBackend
from .redis_backend import RedisCacheBackend

__all__ = [
    # Backends
    "MemoryCacheBackend",
    "RedisCacheBackend",
    "create_cache_backend",
    # Circuit breaker
    "CacheCircuitBreaker",
    "CircuitState",
    # Exceptions
    "CacheException",
    "CacheConnectionException",
    "CacheSerializationException",
    "CacheCircuitBreakerOpenException",
    "CacheConfigurationException",
]
