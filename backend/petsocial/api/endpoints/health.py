"""
Health check and metrics endpoints.

Reports database connectivity and the active lookup cache backend, and
exposes the lookup cache counters for Prometheus.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from ...constants import APP_VERSION
from ...core.database import DatabaseManager
from ...domain.cache.repository_interfaces import CacheBackend
from ..dependencies import get_cache_backend, get_database_manager

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(
    database: DatabaseManager = Depends(get_database_manager),
    cache: CacheBackend = Depends(get_cache_backend),
) -> Dict[str, Any]:
    """
    Basic health check endpoint.

    A degraded cache does not make the service unhealthy: lookups fall back
    to the database.
    """
    database_health = await database.health_check()
    cache_health = await cache.health_check()

    return {
        "status": "healthy" if database_health["status"] == "healthy" else "unhealthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": APP_VERSION,
        "checks": {"database": database_health, "cache": cache_health},
    }


@router.get("/metrics")
async def metrics() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
