"""
Cache circuit breaker.

Stops calling an unreachable remote cache after repeated failures so a
cache outage degrades to fast misses instead of slow ones.
"""

import asyncio
import logging
import time
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Tuple, Type, TypeVar

from ...monitoring.cache_metrics import cache_backend_errors
from .exceptions import CacheCircuitBreakerOpenException

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CircuitState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CacheCircuitBreaker:
    """
    Consecutive-failure breaker with a per-call timeout.

    Only ``failure_exceptions`` and timeouts count as failures; anything else
    is re-raised untouched. After ``recovery_timeout`` one trial call is let
    through: success closes the circuit, failure reopens it.
    """

    def __init__(
        self,
        failure_threshold: int = 5,
        recovery_timeout: float = 60.0,
        operation_timeout: float = 10.0,
        failure_exceptions: Tuple[Type[BaseException], ...] = (
            ConnectionError,
            OSError,
        ),
        clock: Callable[[], float] = time.monotonic,
        name: str = "redis",
    ):
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.operation_timeout = operation_timeout
        self.failure_exceptions = failure_exceptions
        self.name = name
        self.state = CircuitState.CLOSED
        self.failure_count = 0
        self.opened_at: Optional[float] = None
        self._clock = clock

    async def call(
        self, func: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any
    ) -> T:
        """
        Run ``func`` under the breaker.

        Raises:
            CacheCircuitBreakerOpenException: If the circuit is open
            asyncio.TimeoutError: If the call exceeds ``operation_timeout``
        """
        if self.state == CircuitState.OPEN:
            if self._clock() - self.opened_at < self.recovery_timeout:
                raise CacheCircuitBreakerOpenException()
            self.state = CircuitState.HALF_OPEN
            logger.info("Circuit breaker half-open, allowing a trial call")

        try:
            result = await asyncio.wait_for(
                func(*args, **kwargs), timeout=self.operation_timeout
            )
        except asyncio.TimeoutError:
            self._record_failure("timeout")
            raise
        except self.failure_exceptions as e:
            self._record_failure(type(e).__name__)
            raise

        if self.state == CircuitState.HALF_OPEN:
            logger.info("Circuit breaker closed after recovery")
        self.state = CircuitState.CLOSED
        self.failure_count = 0
        return result

    def _record_failure(self, failure_type: str) -> None:
        self.failure_count += 1
        if (
            self.state == CircuitState.HALF_OPEN
            or self.failure_count >= self.failure_threshold
        ):
            if self.state != CircuitState.OPEN:
                cache_backend_errors.labels(
                    backend=self.name, operation="circuit_open"
                ).inc()
            self.state = CircuitState.OPEN
            self.opened_at = self._clock()
            logger.warning(
                "Circuit breaker opened",
                extra={
                    "failure_count": self.failure_count,
                    "failure_type": failure_type,
                },
            )

    def get_status(self) -> dict:
        return {"state": self.state.value, "failure_count": self.failure_count}
