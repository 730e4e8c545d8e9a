"""Best-effort remote sync of local data categories."""

from .base import RemoteStore
from .in_memory import InMemoryRemoteStore
from .models import SyncReport, SyncStatus
from .service import DEFAULT_CATEGORIES, SyncService

__all__ = [
    "DEFAULT_CATEGORIES",
    "InMemoryRemoteStore",
    "RemoteStore",
    "SyncReport",
    "SyncService",
    "SyncStatus",
]
