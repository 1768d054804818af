"""
Image Info Repository Interfaces

Abstract interfaces following the DDD Repository pattern.
Defines the storage contract the cache persists through and the cache
adapter contract images resolve their metadata against.
"""

from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional

from .value_objects import Dimensions, FileInfo


class KeyValueStorage(ABC):
    """
    Abstract string key-value storage.

    Implementations may be shared between processes; callers must not assume
    a value read earlier is still current.
    """

    @abstractmethod
    async def get_item(self, key: str) -> Optional[str]:
        """Return the stored value, or None when the key is missing."""
        pass

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        """Store a value, overwriting prior content."""
        pass

    @abstractmethod
    async def remove_item(self, key: str) -> None:
        """Remove a key. Removing a missing key is not an error."""
        pass


class ImageInfoCacheAdapter(ABC):
    """
    Abstract cache adapter consumed by images.

    Reads return None on a miss and never raise for malformed cached data.
    """

    @abstractmethod
    async def get_dimensions(self, image_url: str) -> Optional[Dimensions]:
        pass

    @abstractmethod
    async def put_dimensions(self, image_url: str, dimensions: Dimensions) -> None:
        pass

    @abstractmethod
    async def get_file_info(self, image_url: str) -> Optional[FileInfo]:
        pass

    @abstractmethod
    async def put_file_info(self, image_url: str, file_info: FileInfo) -> None:
        pass


FileInfoLoader = Callable[[str], Awaitable[FileInfo]]
DimensionsLoader = Callable[[str], Awaitable[Dimensions]]
