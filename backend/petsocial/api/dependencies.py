"""
FastAPI dependencies.

The database manager and the cache backend are built once in the lifespan
hook and kept on ``app.state``; request-scoped services are assembled here.
"""

from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import Settings
from ..core.database import DatabaseManager
from ..domain.cache.repository_interfaces import CacheBackend
from ..domain.cache.value_objects import TTL
from ..services.lookups import LookupAdminService, LookupService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_database_manager(request: Request) -> DatabaseManager:
    return request.app.state.database_manager


def get_cache_backend(request: Request) -> CacheBackend:
    return request.app.state.cache_backend


async def get_database_session(
    database: DatabaseManager = Depends(get_database_manager),
) -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session; commits through the unit of work on success."""
    async with database.get_session() as session:
        yield session


def get_lookup_service(
    session: AsyncSession = Depends(get_database_session),
    cache: CacheBackend = Depends(get_cache_backend),
    settings: Settings = Depends(get_app_settings),
) -> LookupService:
    return LookupService(session, cache, TTL(settings.LOOKUP_CACHE_TTL_SECONDS))


def get_lookup_admin_service(
    session: AsyncSession = Depends(get_database_session),
    database: DatabaseManager = Depends(get_database_manager),
) -> LookupAdminService:
    return LookupAdminService(session, database.interceptor)
