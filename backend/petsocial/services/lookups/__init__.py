"""Lookup reads (cache-aside) and admin writes."""

from .admin import LOOKUP_TABLES, LookupAdminService
from .queries import (
    GetBreedsHandler,
    GetColorsHandler,
    GetPetFoodsHandler,
    GetPetTypesHandler,
    GetUserTypesHandler,
    LookupQueryHandler,
    LookupService,
)
from .schemas import (
    ApiResponse,
    BreedDto,
    ColorDto,
    LookupDto,
    LookupWrite,
    PetFoodDto,
    PetTypeDto,
    UserTypeDto,
)

__all__ = [
    "LOOKUP_TABLES",
    "LookupAdminService",
    "LookupQueryHandler",
    "GetPetTypesHandler",
    "GetBreedsHandler",
    "GetColorsHandler",
    "GetPetFoodsHandler",
    "GetUserTypesHandler",
    "LookupService",
    "ApiResponse",
    "LookupDto",
    "PetTypeDto",
    "BreedDto",
    "ColorDto",
    "PetFoodDto",
    "UserTypeDto",
    "LookupWrite",
]
