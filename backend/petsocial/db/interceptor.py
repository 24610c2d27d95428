"""
Lookup cache invalidation on commit.

Session event listeners record which lookup rows each flush added, modified
or deleted. The record is promoted on ``after_commit`` and thrown away on
``after_rollback``, so only durable changes ever reach the interceptor.
"""

from typing import Any, Dict, Iterable, List, Type

import structlog
from sqlalchemy import event, inspect
from sqlalchemy.orm import Session

from ..domain.cache.domain_services import CacheInvalidationService
from ..domain.cache.entities import EntityChange
from ..domain.cache.repository_interfaces import CacheBackend
from ..domain.cache.value_objects import ChangeOperation, LookupKind
from ..models import PetBreed, PetColor, PetFood, PetType, UserType

logger = structlog.get_logger()

PENDING_CHANGES_KEY = "petsocial.lookup_changes.pending"
COMMITTED_CHANGES_KEY = "petsocial.lookup_changes.committed"

_KIND_BY_MODEL: Dict[Type[Any], LookupKind] = {
    PetType: LookupKind.PET_TYPE,
    PetBreed: LookupKind.PET_BREED,
    PetColor: LookupKind.PET_COLOR,
    PetFood: LookupKind.PET_FOOD,
    UserType: LookupKind.USER_TYPE,
}


def entity_changes_for(obj: Any, operation: ChangeOperation) -> List[EntityChange]:
    """
    Describe one flushed ORM object as change-set entries.

    Non-lookup entities produce nothing. A breed whose ``pet_type_id`` was
    changed yields one entry for the old partition and one for the new.
    """
    kind = _KIND_BY_MODEL.get(type(obj))
    if kind is None:
        return []

    state = inspect(obj)

    if kind is LookupKind.PET_BREED:
        partitions = {state.dict.get("pet_type_id")}
        if operation is ChangeOperation.MODIFIED:
            partitions.update(state.attrs.pet_type_id.history.deleted)
        partitions.discard(None)
        if not partitions:
            logger.warning(
                "Breed change without pet_type_id, breed partitions not invalidated",
                operation=operation.value,
            )
            return []
        return [EntityChange(kind, operation, pid) for pid in sorted(partitions)]

    if kind is LookupKind.PET_TYPE:
        return [EntityChange(kind, operation, state.dict.get("id"))]

    return [EntityChange(kind, operation)]


def _capture_lookup_changes(session: Session, flush_context: Any) -> None:
    """after_flush: new/dirty/deleted still reflect the pre-flush state here."""
    captured: List[EntityChange] = []

    for obj in session.new:
        captured.extend(entity_changes_for(obj, ChangeOperation.ADDED))
    for obj in session.dirty:
        if session.is_modified(obj, include_collections=False):
            captured.extend(entity_changes_for(obj, ChangeOperation.MODIFIED))
    for obj in session.deleted:
        captured.extend(entity_changes_for(obj, ChangeOperation.DELETED))

    if captured:
        session.info.setdefault(PENDING_CHANGES_KEY, []).extend(captured)


def _promote_lookup_changes(session: Session) -> None:
    pending = session.info.pop(PENDING_CHANGES_KEY, None)
    if pending:
        session.info.setdefault(COMMITTED_CHANGES_KEY, []).extend(pending)


def _discard_lookup_changes(session: Session) -> None:
    dropped = session.info.pop(PENDING_CHANGES_KEY, None)
    if dropped:
        logger.debug("Rolled back lookup changes discarded", count=len(dropped))


_LISTENERS = (
    ("after_flush", _capture_lookup_changes),
    ("after_commit", _promote_lookup_changes),
    ("after_rollback", _discard_lookup_changes),
)


def install_change_tracking(target: Any = Session) -> None:
    """Register the change-set listeners on ``target`` (idempotent)."""
    for identifier, listener in _LISTENERS:
        if not event.contains(target, identifier, listener):
            event.listen(target, identifier, listener)


def uninstall_change_tracking(target: Any = Session) -> None:
    for identifier, listener in _LISTENERS:
        if event.contains(target, identifier, listener):
            event.remove(target, identifier, listener)


def pop_committed_changes(session: Any) -> List[EntityChange]:
    """Take the change set published by the last successful commit(s)."""
    return session.info.pop(COMMITTED_CHANGES_KEY, None) or []


def discard_pending_changes(session: Any) -> None:
    session.info.pop(PENDING_CHANGES_KEY, None)


class LookupCacheInvalidationInterceptor:
    """
    Receives committed change sets and removes the stale lookup keys.

    Never raises: the write has already committed, so an unreachable cache
    only leaves entries stale until their TTL runs out.
    """

    def __init__(self, cache: CacheBackend):
        self.invalidation_service = CacheInvalidationService(cache)

    async def saved_changes(self, changes: Iterable[EntityChange]) -> List[str]:
        changes = list(changes)
        if not changes:
            return []

        try:
            removed = await self.invalidation_service.invalidate(changes)
        except Exception as e:
            logger.error(
                "Lookup cache invalidation failed after commit",
                change_count=len(changes),
                error=str(e),
                exc_info=True,
            )
            return []

        logger.info(
            "Lookup cache invalidated after commit",
            change_count=len(changes),
            keys=removed,
        )
        return removed
