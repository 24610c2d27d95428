"""
Unit tests for the Redis cache backend.

The Redis client is replaced with an AsyncMock; these tests cover the
wire format, fail-soft reads and the circuit breaker wiring.
"""

import json
from typing import List
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from petsocial.core.config import Settings
from petsocial.domain.cache.value_objects import TTL
from petsocial.infrastructure.cache import (
    CacheCircuitBreaker,
    CacheConnectionException,
    CircuitState,
    MemoryCacheBackend,
    RedisCacheBackend,
    create_cache_backend,
)
from petsocial.services.lookups.schemas import ColorDto, PetTypeDto


@pytest.fixture
def redis_client():
    client = AsyncMock()
    client.get.return_value = None
    client.delete.return_value = 1
    return client


@pytest.fixture
def breaker(clock):
    return CacheCircuitBreaker(
        failure_threshold=2,
        recovery_timeout=30.0,
        failure_exceptions=(RedisConnectionError, ConnectionError, OSError),
        clock=clock,
    )


@pytest.fixture
def backend(redis_client, breaker):
    return RedisCacheBackend(redis_client, circuit_breaker=breaker)


class TestRedisCacheBackendGet:
    @pytest.mark.asyncio
    async def test_hit_decodes_typed_list(self, backend, redis_client):
        redis_client.get.return_value = json.dumps(
            [
                {"id": 1, "name": "Dog", "image_path": "/img/dog.png"},
                {"id": 2, "name": "Cat", "image_path": None},
            ]
        )

        result = await backend.get("pet-types", List[PetTypeDto])

        redis_client.get.assert_awaited_once_with("pet-types")
        assert result == [
            PetTypeDto(id=1, name="Dog", image_path="/img/dog.png"),
            PetTypeDto(id=2, name="Cat"),
        ]

    @pytest.mark.asyncio
    async def test_hit_accepts_camel_case_payload(self, backend, redis_client):
        redis_client.get.return_value = '[{"id": 1, "name": "Dog", "imagePath": "x"}]'

        result = await backend.get("pet-types", List[PetTypeDto])

        assert result[0].image_path == "x"

    @pytest.mark.asyncio
    async def test_miss(self, backend):
        assert await backend.get("colors", List[ColorDto]) is None

    @pytest.mark.asyncio
    async def test_backend_failure_is_a_miss(self, backend, redis_client):
        redis_client.get.side_effect = RedisConnectionError("connection refused")

        assert await backend.get("colors", List[ColorDto]) is None
        assert backend.circuit_breaker.failure_count == 1

    @pytest.mark.asyncio
    async def test_undecodable_payload_is_a_miss(self, backend, redis_client):
        redis_client.get.return_value = "not json at all"
        assert await backend.get("colors", List[ColorDto]) is None

    @pytest.mark.asyncio
    async def test_wrong_shape_is_a_miss(self, backend, redis_client):
        redis_client.get.return_value = '{"id": 1}'
        assert await backend.get("colors", List[ColorDto]) is None


class TestRedisCacheBackendWrites:
    @pytest.mark.asyncio
    async def test_set_serializes_with_ttl(self, backend, redis_client):
        await backend.set(
            "colors", [ColorDto(id=1, name="Black")], TTL.lookup_data()
        )

        redis_client.set.assert_awaited_once()
        args, kwargs = redis_client.set.call_args
        assert args[0] == "colors"
        assert json.loads(args[1]) == [{"id": 1, "name": "Black"}]
        assert kwargs == {"ex": 3600}

    @pytest.mark.asyncio
    async def test_set_failure_raises(self, backend, redis_client):
        redis_client.set.side_effect = RedisConnectionError("down")

        with pytest.raises(CacheConnectionException) as exc_info:
            await backend.set("colors", [], TTL.lookup_data())

        assert exc_info.value.details["operation"] == "set"
        assert exc_info.value.details["key"] == "colors"

    @pytest.mark.asyncio
    async def test_remove(self, backend, redis_client):
        assert await backend.remove("breeds-7") is True
        redis_client.delete.assert_awaited_once_with("breeds-7")

    @pytest.mark.asyncio
    async def test_remove_absent_key(self, backend, redis_client):
        redis_client.delete.return_value = 0
        assert await backend.remove("breeds-7") is False
        assert await backend.remove("breeds-7") is False

    @pytest.mark.asyncio
    async def test_remove_failure_raises(self, backend, redis_client):
        redis_client.delete.side_effect = RedisConnectionError("down")

        with pytest.raises(CacheConnectionException):
            await backend.remove("pet-types")


class TestRedisCircuitBreaker:
    @pytest.mark.asyncio
    async def test_open_circuit_skips_redis(self, backend, redis_client):
        redis_client.get.side_effect = RedisConnectionError("down")

        await backend.get("foods", list)
        await backend.get("foods", list)
        assert backend.circuit_breaker.state == CircuitState.OPEN

        assert await backend.get("foods", list) is None
        assert redis_client.get.await_count == 2

    @pytest.mark.asyncio
    async def test_open_circuit_fails_writes(self, backend, redis_client):
        redis_client.delete.side_effect = RedisConnectionError("down")
        for _ in range(2):
            with pytest.raises(CacheConnectionException):
                await backend.remove("foods")

        redis_client.delete.side_effect = None
        with pytest.raises(CacheConnectionException):
            await backend.remove("foods")
        assert redis_client.delete.await_count == 2

    @pytest.mark.asyncio
    async def test_recovers_after_timeout(self, backend, redis_client, clock):
        redis_client.get.side_effect = RedisConnectionError("down")
        await backend.get("foods", list)
        await backend.get("foods", list)

        redis_client.get.side_effect = None
        redis_client.get.return_value = "[]"
        clock.advance(31)

        assert await backend.get("foods", list) == []
        assert backend.circuit_breaker.state == CircuitState.CLOSED

    @pytest.mark.asyncio
    async def test_health_check_reports_breaker(self, backend, redis_client):
        health = await backend.health_check()

        redis_client.ping.assert_awaited_once()
        assert health["status"] == "healthy"
        assert health["circuit_breaker"]["state"] == "closed"

    @pytest.mark.asyncio
    async def test_health_check_unhealthy(self, backend, redis_client):
        redis_client.ping.side_effect = RedisConnectionError("down")

        health = await backend.health_check()

        assert health["status"] == "unhealthy"
        assert "down" in health["error"]


class TestCacheBackendFactory:
    @pytest.mark.asyncio
    async def test_memory_backend_by_default(self):
        backend = create_cache_backend(Settings(MEMORY_CACHE_MAX_ENTRIES=64))

        assert isinstance(backend, MemoryCacheBackend)
        assert (await backend.health_check())["max_entries"] == 64

    @pytest.mark.asyncio
    async def test_redis_backend_when_enabled(self):
        settings = Settings(
            USE_REDIS=True,
            REDIS_URL="redis://cache.internal:6379/0",
            CIRCUIT_BREAKER_FAILURE_THRESHOLD=3,
            CIRCUIT_BREAKER_RECOVERY_TIMEOUT=15,
        )

        backend = create_cache_backend(settings)
        try:
            assert isinstance(backend, RedisCacheBackend)
            assert backend.circuit_breaker.failure_threshold == 3
            assert backend.circuit_breaker.recovery_timeout == 15.0
        finally:
            await backend.close()
