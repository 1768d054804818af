"""
Storage Infrastructure Module

Key-value storage backends the image info cache persists through:
- InMemoryKeyValueStorage: process-local storage
- RedisKeyValueStorage: storage shared between processes via Redis
"""

from typing import Optional

from ...core.config import Settings, get_settings
from ...domain.image_info.repository_interfaces import KeyValueStorage
from .exceptions import (
    StorageException,
    StorageConnectionException,
    StorageOperationException,
)
from .memory_storage import InMemoryKeyValueStorage
from .redis_storage import RedisKeyValueStorage


def create_storage(settings: Optional[Settings] = None) -> KeyValueStorage:
    """Build the storage backend selected by ``STORAGE_BACKEND``."""
    settings = settings or get_settings()
    if settings.uses_redis:
        return RedisKeyValueStorage(
            url=settings.REDIS_URL, socket_timeout=settings.REDIS_SOCKET_TIMEOUT
        )
    return InMemoryKeyValueStorage()


__all__ = [
    "create_storage",
    "InMemoryKeyValueStorage",
    "RedisKeyValueStorage",
    "StorageException",
    "StorageConnectionException",
    "StorageOperationException",
]
