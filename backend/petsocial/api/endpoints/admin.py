"""
Lookup admin endpoints.

JSON create/update/delete for every lookup table. Each successful write
commits before responding, which removes the affected lookup cache keys.
"""

from fastapi import APIRouter, Depends, Path
from fastapi.responses import JSONResponse

from ...constants import MAX_ENTITY_ID
from ...domain.cache.value_objects import LookupKind
from ...services.lookups import LookupAdminService, LookupWrite
from ..dependencies import get_lookup_admin_service
from .responses import run_lookup_operation

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.post("/{kind}")
async def create_lookup(
    kind: LookupKind,
    payload: LookupWrite,
    service: LookupAdminService = Depends(get_lookup_admin_service),
) -> JSONResponse:
    return await run_lookup_operation(
        service.create(kind, payload), f"create {kind.value}", lookup=kind.value
    )


@router.put("/{kind}/{id}")
async def update_lookup(
    kind: LookupKind,
    payload: LookupWrite,
    id: int = Path(..., ge=1, le=MAX_ENTITY_ID),
    service: LookupAdminService = Depends(get_lookup_admin_service),
) -> JSONResponse:
    return await run_lookup_operation(
        service.update(kind, id, payload),
        f"update {kind.value}",
        lookup=kind.value,
        entity_id=id,
    )


@router.delete("/{kind}/{id}")
async def delete_lookup(
    kind: LookupKind,
    id: int = Path(..., ge=1, le=MAX_ENTITY_ID),
    service: LookupAdminService = Depends(get_lookup_admin_service),
) -> JSONResponse:
    return await run_lookup_operation(
        service.delete(kind, id),
        f"delete {kind.value}",
        lookup=kind.value,
        entity_id=id,
    )
