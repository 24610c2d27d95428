"""
PetSocial Database Configuration

Async engine and session management:
- Connection pooling from settings
- Engine initialisation retried with exponential backoff
- Sessions commit through the unit of work so lookup cache invalidation
  runs after every successful commit
"""

import time
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

import asyncpg
import structlog
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..db.interceptor import LookupCacheInvalidationInterceptor, install_change_tracking
from ..db.unit_of_work import UnitOfWork
from ..models import Base
from .config import Settings, get_settings

logger = structlog.get_logger()


class DatabaseManager:
    """
    Database connection manager.

    Owns the engine, the session factory and the invalidation interceptor
    handed to every unit of work it creates.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker] = None
        self.interceptor: Optional[LookupCacheInvalidationInterceptor] = None

    def _engine_kwargs(self) -> Dict[str, Any]:
        if self.settings.uses_sqlite:
            # One shared connection so in-memory databases survive across sessions
            return {
                "poolclass": StaticPool,
                "connect_args": {"check_same_thread": False},
            }
        return {
            "pool_size": self.settings.DATABASE_POOL_SIZE,
            "max_overflow": self.settings.DATABASE_MAX_OVERFLOW,
            "pool_timeout": self.settings.DATABASE_POOL_TIMEOUT,
            "pool_recycle": self.settings.DATABASE_POOL_RECYCLE,
            "pool_pre_ping": True,
            "connect_args": {
                "command_timeout": 60,
                "server_settings": {"application_name": "petsocial_api"},
            },
        }

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type(
            (asyncpg.PostgresConnectionError, ConnectionError, OSError)
        ),
        before_sleep=lambda retry_state: logger.warning(
            "Database connection retry",
            attempt=retry_state.attempt_number,
            wait_time=retry_state.next_action.sleep,
        ),
        reraise=True,
    )
    async def _create_engine_with_retry(self) -> AsyncEngine:
        """Create the engine and prove connectivity."""
        start_time = time.time()

        engine = create_async_engine(
            self.settings.database_url,
            echo=self.settings.debug,
            **self._engine_kwargs(),
        )

        try:
            async with engine.connect() as conn:
                result = await conn.execute(text("SELECT 1"))
                assert result.scalar() == 1
        except Exception:
            await engine.dispose()
            raise

        logger.info(
            "Database engine created successfully",
            duration_seconds=time.time() - start_time,
        )
        return engine

    async def initialize(
        self, interceptor: Optional[LookupCacheInvalidationInterceptor] = None
    ) -> None:
        """Create the engine, the session factory and register change tracking."""
        try:
            self.engine = await self._create_engine_with_retry()
        except Exception as e:
            logger.error("Database initialization failed", error=str(e), exc_info=True)
            raise

        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        self.interceptor = interceptor
        install_change_tracking()

        logger.info(
            "Database initialized",
            cache_invalidation=interceptor is not None,
        )

    async def create_schema(self) -> None:
        """Create all tables (development and tests; production uses migrations)."""
        if not self.engine:
            raise RuntimeError("Database engine not initialized")
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    def unit_of_work(self, session: AsyncSession) -> UnitOfWork:
        return UnitOfWork(session, self.interceptor)

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get database session with transaction management.

        Commits through the unit of work on success, rolls back on error.
        """
        if not self.session_factory:
            raise RuntimeError("Database not initialized. Call initialize() first.")

        async with self.session_factory() as session:
            uow = self.unit_of_work(session)
            try:
                yield session
            except Exception as e:
                await uow.rollback()
                logger.error("Database transaction failed", error=str(e), exc_info=True)
                raise
            else:
                await uow.commit()

    async def health_check(self) -> Dict[str, Any]:
        """Check database connectivity."""
        start_time = time.time()

        if not self.engine:
            return {"status": "not_initialized"}

        try:
            async with self.engine.connect() as conn:
                result = await conn.execute(text("SELECT 1"))
                assert result.scalar() == 1
        except Exception as e:
            logger.error("Database health check failed", error=str(e))
            return {
                "status": "unhealthy",
                "duration_seconds": time.time() - start_time,
                "error": str(e),
            }

        return {"status": "healthy", "duration_seconds": time.time() - start_time}

    async def close(self) -> None:
        """Close database connections and cleanup resources."""
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None

            logger.info("Database connections closed")
