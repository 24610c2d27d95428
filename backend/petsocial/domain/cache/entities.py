"""
Cache Domain Entities

Change-set entries published by the write path after a successful commit.
"""

from dataclasses import dataclass
from typing import Optional

from .value_objects import ChangeOperation, LookupKind


@dataclass(frozen=True)
class EntityChange:
    """
    One lookup row touched by a committed unit of work.

    ``partition`` carries the pet type id for breeds (and the row id for pet
    types); it is ``None`` for the unpartitioned lookups.
    """

    kind: LookupKind
    operation: ChangeOperation
    partition: Optional[int] = None

    def __post_init__(self) -> None:
        if self.kind is LookupKind.PET_BREED and self.partition is None:
            raise ValueError("Breed changes must carry their pet_type_id")
