"""
Redis cache backend.

Shared across horizontally scaled instances and survives process restarts.
Values cross the wire as JSON and are validated back into the requested type.
"""

import asyncio
import logging
from functools import lru_cache
from typing import Any, Dict, Optional

from opentelemetry import trace
from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_json
from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import (
    ConnectionError as RedisConnectionError,
    RedisError,
    TimeoutError as RedisTimeoutError,
)

from ...core.config import Settings
from ...domain.cache.repository_interfaces import CacheBackend
from ...domain.cache.value_objects import TTL
from ...monitoring.cache_metrics import cache_backend_errors
from .circuit_breaker import CacheCircuitBreaker
from .exceptions import (
    CacheConfigurationException,
    CacheConnectionException,
    CacheException,
    CacheSerializationException,
)

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

# Failures that mean "backend unavailable" rather than a programming error
BACKEND_FAILURES = (
    CacheException,
    RedisError,
    OSError,
    asyncio.TimeoutError,
)


@lru_cache(maxsize=64)
def _adapter_for(value_type: Any) -> TypeAdapter:
    return TypeAdapter(value_type)


class RedisCacheBackend(CacheBackend):
    """
    Redis implementation of the cache backend.

    Every primitive goes through a circuit breaker; ``get`` degrades to a miss
    on any backend failure, ``set`` and ``remove`` raise ``CacheException``.
    """

    name = "redis"

    def __init__(
        self,
        client: Redis,
        circuit_breaker: Optional[CacheCircuitBreaker] = None,
        pool: Optional[ConnectionPool] = None,
    ):
        self._client = client
        self._pool = pool
        self._circuit_breaker = circuit_breaker or CacheCircuitBreaker()

    @classmethod
    def from_settings(cls, settings: Settings) -> "RedisCacheBackend":
        """Build a pooled client from ``REDIS_*`` settings."""
        try:
            pool = ConnectionPool.from_url(
                settings.REDIS_URL,
                max_connections=settings.REDIS_MAX_CONNECTIONS,
                socket_connect_timeout=settings.REDIS_CONNECTION_TIMEOUT,
                socket_timeout=settings.REDIS_OPERATION_TIMEOUT,
                retry_on_timeout=True,
                decode_responses=True,
                encoding="utf-8",
            )
        except (ValueError, RedisError) as e:
            raise CacheConfigurationException(
                message=f"Invalid Redis configuration: {e}", original_error=e
            ) from e

        breaker = CacheCircuitBreaker(
            failure_threshold=settings.CIRCUIT_BREAKER_FAILURE_THRESHOLD,
            recovery_timeout=float(settings.CIRCUIT_BREAKER_RECOVERY_TIMEOUT),
            operation_timeout=settings.REDIS_OPERATION_TIMEOUT,
            failure_exceptions=(
                RedisConnectionError,
                RedisTimeoutError,
                ConnectionError,
                OSError,
            ),
            name=cls.name,
        )

        logger.info(
            "Redis cache backend configured",
            extra={"max_connections": settings.REDIS_MAX_CONNECTIONS},
        )
        return cls(Redis(connection_pool=pool), circuit_breaker=breaker, pool=pool)

    @property
    def circuit_breaker(self) -> CacheCircuitBreaker:
        return self._circuit_breaker

    async def get(self, key: str, value_type: Any) -> Optional[Any]:
        with tracer.start_as_current_span("cache.redis.get") as span:
            span.set_attribute("cache_key", key)

            try:
                raw = await self._circuit_breaker.call(self._client.get, key)
            except BACKEND_FAILURES as e:
                cache_backend_errors.labels(backend=self.name, operation="get").inc()
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                logger.warning(
                    f"Redis get failed for {key}, treating as miss: {e}",
                    extra={"cache_key": key, "error_type": type(e).__name__},
                )
                return None

            if raw is None:
                span.set_attribute("cache_hit", False)
                return None

            try:
                value = _adapter_for(value_type).validate_json(raw)
            except ValidationError as e:
                logger.warning(
                    f"Discarding undecodable cache payload for {key}",
                    extra={"cache_key": key, "error_count": e.error_count()},
                )
                span.set_attribute("cache_hit", False)
                return None

            span.set_attribute("cache_hit", True)
            return value

    async def set(self, key: str, value: Any, ttl: TTL) -> None:
        with tracer.start_as_current_span("cache.redis.set") as span:
            span.set_attribute("cache_key", key)
            span.set_attribute("ttl_seconds", ttl.seconds)

            try:
                payload = to_json(value).decode("utf-8")
            except PydanticSerializationError as e:
                raise CacheSerializationException(key, original_error=e) from e

            try:
                await self._circuit_breaker.call(
                    self._client.set, key, payload, ex=ttl.seconds
                )
            except BACKEND_FAILURES as e:
                cache_backend_errors.labels(backend=self.name, operation="set").inc()
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                raise CacheConnectionException(
                    message=f"Redis set failed for {key}",
                    operation="set",
                    key=key,
                    original_error=e,
                ) from e

    async def remove(self, key: str) -> bool:
        with tracer.start_as_current_span("cache.redis.remove") as span:
            span.set_attribute("cache_key", key)

            try:
                deleted = await self._circuit_breaker.call(self._client.delete, key)
            except BACKEND_FAILURES as e:
                cache_backend_errors.labels(
                    backend=self.name, operation="remove"
                ).inc()
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                raise CacheConnectionException(
                    message=f"Redis delete failed for {key}",
                    operation="remove",
                    key=key,
                    original_error=e,
                ) from e

            return bool(deleted)

    async def health_check(self) -> Dict[str, Any]:
        try:
            await self._circuit_breaker.call(self._client.ping)
            status = "healthy"
            error = None
        except BACKEND_FAILURES as e:
            status = "unhealthy"
            error = str(e)

        result = {
            "backend": self.name,
            "status": status,
            "circuit_breaker": self._circuit_breaker.get_status(),
        }
        if error:
            result["error"] = error
        return result

    async def close(self) -> None:
        await self._client.aclose()
        if self._pool is not None:
            await self._pool.disconnect()
        logger.info("Redis cache backend closed")
