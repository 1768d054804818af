"""
Image Info Domain Module

Domain-Driven Design implementation for image metadata caching.
Contains entities, value objects and repository interfaces.
"""

from .entities import CacheEntry, CacheStore, parse_cache_store, serialize_cache_store
from .repository_interfaces import (
    DimensionsLoader,
    FileInfoLoader,
    ImageInfoCacheAdapter,
    KeyValueStorage,
)
from .value_objects import Dimensions, FileInfo, ImageInfo

__all__ = [
    "CacheEntry",
    "CacheStore",
    "parse_cache_store",
    "serialize_cache_store",
    "DimensionsLoader",
    "FileInfoLoader",
    "ImageInfoCacheAdapter",
    "KeyValueStorage",
    "Dimensions",
    "FileInfo",
    "ImageInfo",
]
