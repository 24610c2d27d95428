"""
Cache Repository Interfaces

Abstract backend contract shared by the in-process and Redis caches.
Selection happens once at startup; callers never know which one is active.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from .value_objects import TTL


class CacheBackend(ABC):
    """
    Key/value store with absolute TTL.

    Contract:
    - ``get`` never raises for backend trouble: an unreachable backend or an
      undecodable payload is reported as a miss (``None``).
    - ``set`` overwrites unconditionally.
    - ``remove`` is idempotent; removing an absent key is not an error.

    ``set`` and ``remove`` may raise ``CacheException`` when the backend is
    unreachable. Callers on the read path and the commit path log and continue.
    """

    name: str = "abstract"

    @abstractmethod
    async def get(self, key: str, value_type: Any) -> Optional[Any]:
        """Return the value stored under ``key`` as ``value_type``, or None."""
        pass

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: TTL) -> None:
        """Store ``value`` under ``key`` for ``ttl``."""
        pass

    @abstractmethod
    async def remove(self, key: str) -> bool:
        """Delete ``key``. Returns True if an entry was removed."""
        pass

    async def health_check(self) -> Dict[str, Any]:
        """Report backend health."""
        return {"backend": self.name, "status": "healthy"}

    async def close(self) -> None:
        """Release backend resources."""
        return None
