"""
Base Lookup Repository

Data access for the lookup tables. Query failures are logged with full
context and re-raised unchanged so callers can tell "no rows" from
"query failed".
"""

from typing import Any, List, Optional, Type

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Base

logger = structlog.get_logger()


class LookupRepository:
    """
    Base repository for one lookup table.

    Subclasses set ``model``. Tables with a ``sort_order`` column are listed
    by sort order then id; the rest come back in store order.
    """

    model: Type[Base]

    def __init__(self, session: AsyncSession):
        """
        Initialize repository with strict input validation.

        Raises:
            TypeError: If session is not an AsyncSession
        """
        if not isinstance(session, AsyncSession):
            raise TypeError(
                f"session must be AsyncSession instance, got {type(session).__name__}"
            )

        self.session = session

    @property
    def is_sorted(self) -> bool:
        return hasattr(self.model, "sort_order")

    def _partition_filter(self, stmt, partition: Optional[int]):
        """Restrict ``stmt`` to one partition; unpartitioned tables ignore it."""
        return stmt

    def _ordered(self, stmt):
        if self.is_sorted:
            return stmt.order_by(self.model.sort_order.asc(), self.model.id.asc())
        return stmt

    async def list_ordered(self, partition: Optional[int] = None) -> List[Any]:
        """
        List all rows of the table (or partition) in display order.

        Raises:
            SQLAlchemyError: If the query fails
        """
        stmt = self._ordered(self._partition_filter(select(self.model), partition))

        try:
            result = await self.session.execute(stmt)
            rows = list(result.scalars().all())
        except Exception as e:
            logger.error(
                "Repository: Failed to list lookup rows",
                model=self.model.__name__,
                partition=partition,
                error=str(e),
                exc_info=True,
            )
            raise

        logger.debug(
            "Repository: Lookup rows listed",
            model=self.model.__name__,
            partition=partition,
            count=len(rows),
        )
        return rows

    async def get(self, id: int) -> Optional[Any]:
        if id is None:
            raise ValueError("Entity id is required (cannot be None)")

        try:
            return await self.session.get(self.model, id)
        except Exception as e:
            logger.error(
                "Repository: Failed to get entity",
                model=self.model.__name__,
                entity_id=id,
                error=str(e),
                exc_info=True,
            )
            raise

    async def name_exists(
        self,
        name: str,
        exclude_id: Optional[int] = None,
        partition: Optional[int] = None,
    ) -> bool:
        """Case-insensitive, whitespace-trimmed name uniqueness check."""
        stmt = select(func.count()).select_from(self.model).where(
            func.lower(self.model.name) == name.strip().lower()
        )
        stmt = self._partition_filter(stmt, partition)
        if exclude_id is not None:
            stmt = stmt.where(self.model.id != exclude_id)

        result = await self.session.execute(stmt)
        return (result.scalar() or 0) > 0

    async def max_sort_order(self, partition: Optional[int] = None) -> int:
        """Highest sort order in the table (or partition); 0 when empty."""
        if not self.is_sorted:
            raise TypeError(f"{self.model.__name__} has no sort_order column")

        stmt = self._partition_filter(
            select(func.max(self.model.sort_order)), partition
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def add(self, obj: Base) -> Base:
        if obj is None:
            raise ValueError("Entity object is required (cannot be None)")

        self.session.add(obj)
        await self.session.flush()

        logger.info(
            "Repository: Entity created",
            model=self.model.__name__,
            entity_id=obj.id,
        )
        return obj

    async def update(self, obj: Base) -> Base:
        await self.session.flush()

        logger.info(
            "Repository: Entity updated",
            model=self.model.__name__,
            entity_id=obj.id,
        )
        return obj

    async def delete(self, obj: Base) -> None:
        await self.session.delete(obj)
        await self.session.flush()

        logger.info(
            "Repository: Entity deleted",
            model=self.model.__name__,
            entity_id=obj.id,
        )
