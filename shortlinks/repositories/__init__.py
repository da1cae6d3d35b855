"""Repository layer for the link shortener service.

This module provides the LinkStore interface, its storage backends, and a
factory selecting a backend from settings.
"""

from shortlinks.core.config import Settings, StorageBackend
from shortlinks.repositories.base import (
    LinkStore,
    RepositoryError,
    StorageUnavailableError,
)
from shortlinks.repositories.memory_repository import MemoryLinkStore
from shortlinks.repositories.redis_repository import RedisLinkStore
from shortlinks.repositories.sql_repository import SQLLinkStore


def build_link_store(settings: Settings) -> LinkStore:
    """Create the link store configured by ``settings.STORAGE_BACKEND``."""
    if settings.STORAGE_BACKEND == StorageBackend.MEMORY:
        return MemoryLinkStore()
    if settings.STORAGE_BACKEND == StorageBackend.REDIS:
        return RedisLinkStore.from_url(settings.REDIS_URL, prefix=settings.REDIS_KEY_PREFIX)
    
    from shortlinks.db.base import create_engine_from_url
    return SQLLinkStore(create_engine_from_url(settings.DATABASE_URL, settings))


__all__ = [
    # Base classes and exceptions
    "LinkStore",
    "RepositoryError",
    "StorageUnavailableError",
    
    # Concrete stores
    "MemoryLinkStore",
    "RedisLinkStore",
    "SQLLinkStore",
    "build_link_store",
]
