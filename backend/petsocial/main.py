"""
PetSocial API - Main FastAPI Application

Serves the cached lookup lists and the admin writes that keep them fresh:
- Lookup cache backend chosen from settings (in-process or Redis)
- Commit-aware invalidation through the unit of work
- Structured logging with trace context
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI

from .api.endpoints.admin import router as admin_router
from .api.endpoints.health import router as health_router
from .api.endpoints.lookups import router as lookups_router
from .constants import APP_NAME, APP_VERSION
from .core.config import Settings, get_settings
from .core.database import DatabaseManager
from .core.logging import configure_logging
from .db.interceptor import LookupCacheInvalidationInterceptor
from .infrastructure.cache.factory import create_cache_backend

logger = structlog.get_logger()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application; ``settings`` defaults to the environment."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        configure_logging(settings.LOG_LEVEL, json_logs=settings.LOG_JSON)
        logger.info(
            "Starting PetSocial API",
            version=APP_VERSION,
            environment=settings.ENVIRONMENT,
        )

        cache_backend = create_cache_backend(settings)
        database_manager = DatabaseManager(settings)
        try:
            await database_manager.initialize(
                LookupCacheInvalidationInterceptor(cache_backend)
            )
            if settings.is_development or settings.uses_sqlite:
                await database_manager.create_schema()
        except Exception:
            logger.exception("Failed to initialize application")
            await cache_backend.close()
            raise

        app.state.settings = settings
        app.state.cache_backend = cache_backend
        app.state.database_manager = database_manager

        logger.info(
            "PetSocial API started successfully",
            cache_backend=cache_backend.name,
        )

        yield

        logger.info("Shutting down PetSocial API")
        try:
            await cache_backend.close()
        except Exception as e:
            logger.error("Error closing cache backend", error=str(e))
        finally:
            await database_manager.close()
        logger.info("Application shutdown completed")

    app = FastAPI(
        title=APP_NAME,
        description="Lookup data API with commit-aware cache invalidation",
        version=APP_VERSION,
        lifespan=lifespan,
    )

    app.include_router(health_router)
    app.include_router(lookups_router)
    app.include_router(admin_router)

    return app
