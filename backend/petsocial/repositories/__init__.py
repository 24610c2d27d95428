"""
Repository Pattern Implementation

All lookup table access goes through these repositories.
"""

from .base import LookupRepository
from .lookups import (
    PetBreedRepository,
    PetColorRepository,
    PetFoodRepository,
    PetTypeRepository,
    UserTypeRepository,
)

__all__ = [
    "LookupRepository",
    "PetTypeRepository",
    "PetBreedRepository",
    "PetColorRepository",
    "PetFoodRepository",
    "UserTypeRepository",
]
