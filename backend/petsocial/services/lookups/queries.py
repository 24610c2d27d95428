"""
Lookup Query Handlers

Cache-aside reads for the five lookup collections: return the cached list on
a hit, otherwise query the database, cache the result for the TTL and return
it. Database errors propagate; cache write errors do not.
"""

from typing import ClassVar, List, Optional, Type

import structlog
from opentelemetry import trace
from sqlalchemy.ext.asyncio import AsyncSession

from ...domain.cache.repository_interfaces import CacheBackend
from ...domain.cache.value_objects import TTL, CacheKey, LookupKind
from ...monitoring.cache_metrics import lookup_cache_hits, lookup_cache_misses
from ...repositories import (
    LookupRepository,
    PetBreedRepository,
    PetColorRepository,
    PetFoodRepository,
    PetTypeRepository,
    UserTypeRepository,
)
from .schemas import (
    ApiResponse,
    BreedDto,
    ColorDto,
    LookupDto,
    PetFoodDto,
    PetTypeDto,
    UserTypeDto,
)

logger = structlog.get_logger()
tracer = trace.get_tracer(__name__)


class LookupQueryHandler:
    """
    Cache-aside read for one lookup collection.

    Subclasses bind ``kind`` and ``dto_type``; the shape of the read is the
    same for all of them.
    """

    kind: ClassVar[LookupKind]
    dto_type: ClassVar[Type[LookupDto]]

    def __init__(
        self,
        repository: LookupRepository,
        cache: CacheBackend,
        ttl: Optional[TTL] = None,
    ):
        self.repository = repository
        self.cache = cache
        self.ttl = ttl or TTL.lookup_data()

    def cache_key(self, partition: Optional[int] = None) -> CacheKey:
        return CacheKey.for_lookup(self.kind, partition)

    async def load(self, partition: Optional[int] = None) -> List[LookupDto]:
        """Query the database and project rows to DTOs."""
        rows = await self.repository.list_ordered(partition)
        return [self.dto_type.model_validate(row) for row in rows]

    async def handle(
        self, partition: Optional[int] = None
    ) -> ApiResponse[List[LookupDto]]:
        key = self.cache_key(partition)

        with tracer.start_as_current_span(f"lookup.{self.kind.value}") as span:
            span.set_attribute("cache_key", key.value)

            cached = await self.cache.get(key.value, List[self.dto_type])
            if cached is not None:
                span.set_attribute("cache_hit", True)
                lookup_cache_hits.labels(lookup=self.kind.value).inc()
                logger.debug("Lookup cache hit", cache_key=key.value)
                return ApiResponse.success(cached)

            span.set_attribute("cache_hit", False)
            lookup_cache_misses.labels(lookup=self.kind.value).inc()

            items = await self.load(partition)

            try:
                await self.cache.set(key.value, items, self.ttl)
            except Exception as e:
                # Result is still correct; the next read pays the query again
                logger.warning(
                    "Lookup cache populate failed",
                    cache_key=key.value,
                    backend=self.cache.name,
                    error=str(e),
                )

            logger.debug(
                "Lookup cache miss, loaded from database",
                cache_key=key.value,
                count=len(items),
            )
            return ApiResponse.success(items)


class GetPetTypesHandler(LookupQueryHandler):
    kind = LookupKind.PET_TYPE
    dto_type = PetTypeDto


class GetBreedsHandler(LookupQueryHandler):
    kind = LookupKind.PET_BREED
    dto_type = BreedDto

    async def handle(self, pet_type_id: int) -> ApiResponse[List[LookupDto]]:
        if pet_type_id is None:
            raise ValueError("pet_type_id is required")
        return await super().handle(pet_type_id)


class GetColorsHandler(LookupQueryHandler):
    kind = LookupKind.PET_COLOR
    dto_type = ColorDto


class GetPetFoodsHandler(LookupQueryHandler):
    kind = LookupKind.PET_FOOD
    dto_type = PetFoodDto


class GetUserTypesHandler(LookupQueryHandler):
    kind = LookupKind.USER_TYPE
    dto_type = UserTypeDto


class LookupService:
    """Lookup reads bound to one session and the shared cache backend."""

    def __init__(
        self, session: AsyncSession, cache: CacheBackend, ttl: Optional[TTL] = None
    ):
        self.pet_types = GetPetTypesHandler(PetTypeRepository(session), cache, ttl)
        self.breeds = GetBreedsHandler(PetBreedRepository(session), cache, ttl)
        self.colors = GetColorsHandler(PetColorRepository(session), cache, ttl)
        self.foods = GetPetFoodsHandler(PetFoodRepository(session), cache, ttl)
        self.user_types = GetUserTypesHandler(UserTypeRepository(session), cache, ttl)

    async def get_pet_types(self) -> ApiResponse[List[LookupDto]]:
        return await self.pet_types.handle()

    async def get_breeds(self, pet_type_id: int) -> ApiResponse[List[LookupDto]]:
        return await self.breeds.handle(pet_type_id)

    async def get_colors(self) -> ApiResponse[List[LookupDto]]:
        return await self.colors.handle()

    async def get_foods(self) -> ApiResponse[List[LookupDto]]:
        return await self.foods.handle()

    async def get_user_types(self) -> ApiResponse[List[LookupDto]]:
        return await self.user_types.handle()
