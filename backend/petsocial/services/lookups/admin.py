"""
Lookup Admin Service

Create, update and delete for the lookup tables. Validation failures come
back as fail envelopes; successful writes commit through the unit of work so
the affected cache keys are removed right after the commit.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Dict, FrozenSet, Optional, Tuple, Type

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ...constants import (
    PROTECTED_BREED_NAMES,
    PROTECTED_COLOR_NAMES,
    PROTECTED_FOOD_NAMES,
    PROTECTED_PET_TYPE_NAMES,
    PROTECTED_USER_TYPE_NAMES,
)
from ...db.interceptor import LookupCacheInvalidationInterceptor
from ...db.unit_of_work import UnitOfWork
from ...domain.cache.value_objects import LookupKind
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
    LookupWrite,
    PetFoodDto,
    PetTypeDto,
    UserTypeDto,
)

logger = structlog.get_logger()


@dataclass(frozen=True)
class LookupTable:
    """How one lookup kind is stored and presented."""

    label: str
    repository: Type[LookupRepository]
    dto_type: Type[LookupDto]
    protected_names: FrozenSet[str]
    extra_fields: Tuple[str, ...] = ()


LOOKUP_TABLES: Dict[LookupKind, LookupTable] = {
    LookupKind.PET_TYPE: LookupTable(
        "Pet type", PetTypeRepository, PetTypeDto, PROTECTED_PET_TYPE_NAMES,
        ("image_path",),
    ),
    LookupKind.PET_BREED: LookupTable(
        "Breed", PetBreedRepository, BreedDto, PROTECTED_BREED_NAMES,
    ),
    LookupKind.PET_COLOR: LookupTable(
        "Color", PetColorRepository, ColorDto, PROTECTED_COLOR_NAMES,
    ),
    LookupKind.PET_FOOD: LookupTable(
        "Pet food", PetFoodRepository, PetFoodDto, PROTECTED_FOOD_NAMES,
    ),
    LookupKind.USER_TYPE: LookupTable(
        "User type", UserTypeRepository, UserTypeDto, PROTECTED_USER_TYPE_NAMES,
        ("image_path", "description"),
    ),
}


class LookupAdminService:
    """Admin writes for all lookup tables, one session per instance."""

    def __init__(
        self,
        session: AsyncSession,
        interceptor: Optional[LookupCacheInvalidationInterceptor] = None,
    ):
        self.session = session
        self.uow = UnitOfWork(session, interceptor)

    def _table(self, kind: LookupKind) -> Tuple[LookupTable, LookupRepository]:
        table = LOOKUP_TABLES[kind]
        return table, table.repository(self.session)

    async def _resolve_pet_type(
        self, pet_type_id: Optional[int]
    ) -> Optional[ApiResponse[Any]]:
        """Fail envelope when a breed's pet type is missing or unknown."""
        if pet_type_id is None:
            return ApiResponse.fail("Pet type is required.", 400)
        if await PetTypeRepository(self.session).get(pet_type_id) is None:
            return ApiResponse.fail(f"Pet type {pet_type_id} does not exist.", 400)
        return None

    async def _rolling_back(
        self, operation: Awaitable[ApiResponse[Any]]
    ) -> ApiResponse[Any]:
        """Roll the session back when a store call fails, then re-raise."""
        try:
            return await operation
        except SQLAlchemyError:
            await self.uow.rollback()
            raise

    async def create(self, kind: LookupKind, payload: LookupWrite) -> ApiResponse[Any]:
        return await self._rolling_back(self._create(kind, payload))

    async def update(
        self, kind: LookupKind, id: int, payload: LookupWrite
    ) -> ApiResponse[Any]:
        return await self._rolling_back(self._update(kind, id, payload))

    async def delete(self, kind: LookupKind, id: int) -> ApiResponse[Any]:
        return await self._rolling_back(self._delete(kind, id))

    async def _create(
        self, kind: LookupKind, payload: LookupWrite
    ) -> ApiResponse[Any]:
        table, repo = self._table(kind)

        name = payload.name.strip()
        if not name:
            return ApiResponse.fail(f"{table.label} name is required.", 400)

        partition = None
        values: Dict[str, Any] = {"name": name}
        if kind is LookupKind.PET_BREED:
            failure = await self._resolve_pet_type(payload.pet_type_id)
            if failure:
                return failure
            partition = payload.pet_type_id
            values["pet_type_id"] = partition

        if await repo.name_exists(name, partition=partition):
            return ApiResponse.fail(f"{table.label} '{name}' already exists.", 409)

        for field in table.extra_fields:
            values[field] = getattr(payload, field)
        if repo.is_sorted:
            values["sort_order"] = (
                payload.sort_order or await repo.max_sort_order(partition) + 1
            )

        obj = await repo.add(repo.model(**values))
        await self.uow.commit()

        logger.info("Lookup created", lookup=kind.value, entity_id=obj.id)
        return ApiResponse.success(
            table.dto_type.model_validate(obj),
            message=f"{table.label} created successfully.",
            status_code=201,
        )

    async def _update(
        self, kind: LookupKind, id: int, payload: LookupWrite
    ) -> ApiResponse[Any]:
        table, repo = self._table(kind)

        obj = await repo.get(id)
        if obj is None:
            return ApiResponse.fail(f"{table.label} not found.", 404)

        name = payload.name.strip()
        if not name:
            return ApiResponse.fail(f"{table.label} name is required.", 400)

        partition = None
        if kind is LookupKind.PET_BREED:
            partition = payload.pet_type_id or obj.pet_type_id
            if partition != obj.pet_type_id:
                failure = await self._resolve_pet_type(partition)
                if failure:
                    return failure

        if await repo.name_exists(name, exclude_id=id, partition=partition):
            return ApiResponse.fail(f"{table.label} '{name}' already exists.", 409)

        obj.name = name
        if partition is not None:
            obj.pet_type_id = partition
        for field in table.extra_fields:
            value = getattr(payload, field)
            if value is not None:
                setattr(obj, field, value)
        if repo.is_sorted and payload.sort_order:
            obj.sort_order = payload.sort_order

        await repo.update(obj)
        await self.uow.commit()

        logger.info("Lookup updated", lookup=kind.value, entity_id=id)
        return ApiResponse.success(
            table.dto_type.model_validate(obj),
            message=f"{table.label} updated successfully.",
        )

    async def _delete(self, kind: LookupKind, id: int) -> ApiResponse[Any]:
        table, repo = self._table(kind)

        obj = await repo.get(id)
        if obj is None:
            return ApiResponse.fail(f"{table.label} not found.", 404)

        if obj.name.strip().lower() in table.protected_names:
            return ApiResponse.fail(f"'{obj.name}' cannot be deleted.", 400)

        await repo.delete(obj)
        await self.uow.commit()

        logger.info("Lookup deleted", lookup=kind.value, entity_id=id)
        return ApiResponse.success(
            None, message=f"{table.label} deleted successfully."
        )
