"""
PetSocial persistence helpers.

Change tracking for lookup rows and the unit of work that publishes
committed change sets to the cache invalidation interceptor.
"""

from .interceptor import (
    LookupCacheInvalidationInterceptor,
    install_change_tracking,
    uninstall_change_tracking,
)
from .unit_of_work import UnitOfWork

__all__ = [
    "LookupCacheInvalidationInterceptor",
    "UnitOfWork",
    "install_change_tracking",
    "uninstall_change_tracking",
]
