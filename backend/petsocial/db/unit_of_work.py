"""
Unit of work.

Wraps ``AsyncSession.commit`` so that cache invalidation runs strictly after
a successful commit and never after a failed one.
"""

from typing import List, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from .interceptor import (
    LookupCacheInvalidationInterceptor,
    discard_pending_changes,
    pop_committed_changes,
)

logger = structlog.get_logger()


class UnitOfWork:
    """Commit boundary for one request's writes."""

    def __init__(
        self,
        session: AsyncSession,
        interceptor: Optional[LookupCacheInvalidationInterceptor] = None,
    ):
        self.session = session
        self.interceptor = interceptor

    async def commit(self) -> List[str]:
        """
        Commit the session, then publish the committed lookup changes.

        Returns:
            Cache keys removed by the interceptor

        Raises:
            Exception: Any commit failure, after rollback; no invalidation
                happens in that case
        """
        try:
            await self.session.commit()
        except Exception as e:
            discard_pending_changes(self.session)
            logger.error("Unit of work commit failed", error=str(e), exc_info=True)
            raise

        changes = pop_committed_changes(self.session)
        if not changes or self.interceptor is None:
            return []

        return await self.interceptor.saved_changes(changes)

    async def rollback(self) -> None:
        await self.session.rollback()
        discard_pending_changes(self.session)
