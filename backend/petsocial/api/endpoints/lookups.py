"""
Lookup read endpoints.

Anonymous GETs used to populate dropdowns in the client apps.
"""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from ...constants import MAX_ENTITY_ID
from ...services.lookups import LookupService
from ..dependencies import get_lookup_service
from .responses import run_lookup_operation

router = APIRouter(prefix="/api/lookup", tags=["lookup"])


@router.get("/pet-types")
async def get_pet_types(
    service: LookupService = Depends(get_lookup_service),
) -> JSONResponse:
    return await run_lookup_operation(service.get_pet_types(), "load pet types")


@router.get("/breeds")
async def get_breeds(
    pet_type_id: int = Query(
        ..., ge=1, le=MAX_ENTITY_ID, description="Pet type whose breeds to list"
    ),
    service: LookupService = Depends(get_lookup_service),
) -> JSONResponse:
    """Breeds of one pet type, in admin sort order."""
    return await run_lookup_operation(
        service.get_breeds(pet_type_id), "load breeds", pet_type_id=pet_type_id
    )


@router.get("/colors")
async def get_colors(
    service: LookupService = Depends(get_lookup_service),
) -> JSONResponse:
    return await run_lookup_operation(service.get_colors(), "load colors")


@router.get("/foods")
async def get_foods(
    service: LookupService = Depends(get_lookup_service),
) -> JSONResponse:
    return await run_lookup_operation(service.get_foods(), "load pet foods")


@router.get("/user-types")
async def get_user_types(
    service: LookupService = Depends(get_lookup_service),
) -> JSONResponse:
    return await run_lookup_operation(service.get_user_types(), "load user types")
