"""
Cache Value Objects

Immutable value objects for the lookup cache domain.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ...constants import (
    BREEDS_CACHE_KEY_PREFIX,
    COLORS_CACHE_KEY,
    FOODS_CACHE_KEY,
    LOOKUP_CACHE_TTL_SECONDS,
    PET_TYPES_CACHE_KEY,
    USER_TYPES_CACHE_KEY,
)


class LookupKind(str, Enum):
    """The five cached lookup collections."""

    PET_TYPE = "pet-types"
    PET_BREED = "breeds"
    PET_COLOR = "colors"
    PET_FOOD = "pet-foods"
    USER_TYPE = "user-types"


class ChangeOperation(str, Enum):
    """Unit-of-work entity state at commit time."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"


@dataclass(frozen=True)
class CacheKey:
    """
    Immutable cache key value object.

    The namespace is flat: four constant keys plus ``breeds-{petTypeId}``.
    """

    value: str

    def __post_init__(self) -> None:
        """Validate cache key format."""
        if not self.value:
            raise ValueError("Cache key cannot be empty")

        if len(self.value) > 250:
            raise ValueError("Cache key too long (max 250 characters)")

        if any(char.isspace() for char in self.value):
            raise ValueError("Cache key cannot contain whitespace")

    @classmethod
    def pet_types(cls) -> "CacheKey":
        return cls(PET_TYPES_CACHE_KEY)

    @classmethod
    def colors(cls) -> "CacheKey":
        return cls(COLORS_CACHE_KEY)

    @classmethod
    def foods(cls) -> "CacheKey":
        return cls(FOODS_CACHE_KEY)

    @classmethod
    def user_types(cls) -> "CacheKey":
        return cls(USER_TYPES_CACHE_KEY)

    @classmethod
    def breeds(cls, pet_type_id: int) -> "CacheKey":
        """Create the breed list key for one pet type partition."""
        if pet_type_id is None:
            raise ValueError("pet_type_id is required for breed cache keys")
        return cls(f"{BREEDS_CACHE_KEY_PREFIX}{int(pet_type_id)}")

    @classmethod
    def for_lookup(
        cls, kind: LookupKind, partition: Optional[int] = None
    ) -> "CacheKey":
        """Create the key holding the list for ``kind``."""
        if kind is LookupKind.PET_BREED:
            return cls.breeds(partition)
        return {
            LookupKind.PET_TYPE: cls.pet_types,
            LookupKind.PET_COLOR: cls.colors,
            LookupKind.PET_FOOD: cls.foods,
            LookupKind.USER_TYPE: cls.user_types,
        }[kind]()

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TTL:
    """
    Time To Live value object for cache expiration.

    Always an absolute duration from the moment the entry is written.
    """

    seconds: int

    def __post_init__(self) -> None:
        """Validate TTL value."""
        if self.seconds <= 0:
            raise ValueError("TTL must be positive")
        if self.seconds > 86400 * 365:  # Max 1 year
            raise ValueError("TTL too large (max 1 year)")

    @classmethod
    def minutes(cls, minutes: int) -> "TTL":
        """Create TTL from minutes."""
        return cls(minutes * 60)

    @classmethod
    def hours(cls, hours: int) -> "TTL":
        """Create TTL from hours."""
        return cls(hours * 3600)

    @classmethod
    def lookup_data(cls) -> "TTL":
        """Lookup list TTL (1 hour)."""
        return cls(LOOKUP_CACHE_TTL_SECONDS)
