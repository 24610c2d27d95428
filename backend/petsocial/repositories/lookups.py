"""
Lookup Repositories

One repository per lookup table. Breeds are the only partitioned table.
"""

from typing import Optional

from ..models import PetBreed, PetColor, PetFood, PetType, UserType
from .base import LookupRepository


class PetTypeRepository(LookupRepository):
    model = PetType


class PetBreedRepository(LookupRepository):
    """Breeds, partitioned by ``pet_type_id``."""

    model = PetBreed

    def _partition_filter(self, stmt, partition: Optional[int]):
        if partition is None:
            return stmt
        return stmt.where(PetBreed.pet_type_id == partition)


class PetColorRepository(LookupRepository):
    model = PetColor


class PetFoodRepository(LookupRepository):
    model = PetFood


class UserTypeRepository(LookupRepository):
    model = UserType
