"""
Storage Module

Two interchangeable backends behind the ``StorageBackend`` contract:
- ``memory`` (default): dict-based, process-local, lock-guarded
- ``sql``: SQLAlchemy over DATABASE_URL (in-memory SQLite unless configured)

Usage:
    from replydesk.storage import create_storage

    storage = create_storage()          # backend from STORAGE_BACKEND
    storage = create_storage("sql")     # explicit
"""

import logging
from typing import Optional

from replydesk.core.settings import settings

from .base import StorageBackend
from .memory import MemStorage
from .sql import SqlStorage

logger = logging.getLogger(__name__)

BACKENDS = {
    MemStorage.BACKEND_NAME: MemStorage,
    SqlStorage.BACKEND_NAME: SqlStorage,
}


def create_storage(backend: Optional[str] = None) -> StorageBackend:
    """Build a fresh store; callers own the instance."""
    name = (backend or settings.storage_backend).lower()
    if name not in BACKENDS:
        raise ValueError(f"Unknown storage backend '{name}'; expected one of {sorted(BACKENDS)}")
    storage = BACKENDS[name]()
    logger.info(f"[storage] using {storage!r}")
    return storage


__all__ = [
    "StorageBackend",
    "MemStorage",
    "SqlStorage",
    "BACKENDS",
    "create_storage",
]
