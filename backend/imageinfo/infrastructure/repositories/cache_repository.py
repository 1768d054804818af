"""
Bounded Image Info Cache Repository

Storage-backed cache for image dimensions and file info. Holds information
for a limited number of images so metadata loaded on one page is not loaded
again when the same images are shown on another, possibly in another process.

The whole store lives under a single storage key and is read and rewritten on
every operation; nothing is kept in memory between calls. Concurrent writers
for different keys can therefore lose an update (last full-store write wins).
This is accepted for cached metadata.
"""

import time
from typing import Callable, Optional

import structlog

from ...core.config import settings
from ...domain.image_info.entities import (
    CacheEntry,
    CacheStore,
    parse_cache_store,
    serialize_cache_store,
)
from ...domain.image_info.repository_interfaces import (
    ImageInfoCacheAdapter,
    KeyValueStorage,
)
from ...domain.image_info.value_objects import Dimensions, FileInfo

logger = structlog.get_logger(__name__)


def _now_millis() -> int:
    return int(time.time() * 1000)


class BoundedImageInfoCache(ImageInfoCacheAdapter):
    """
    Capacity-limited image info cache.

    When a write finds the store at capacity, the oldest entries by
    ``added_datetime`` are evicted before the new entry is added, so a write
    is never evicted by its own insertion. Among entries with equal
    timestamps the one stored earlier is kept.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        max_entries: Optional[int] = None,
        storage_key: Optional[str] = None,
        clock: Callable[[], int] = _now_millis,
    ):
        self.storage = storage
        self.max_entries = (
            settings.MAX_CACHED_IMAGES if max_entries is None else max_entries
        )
        self.storage_key = storage_key or settings.CACHE_STORAGE_KEY
        self._clock = clock

        if self.max_entries < 1:
            raise ValueError("max_entries must be at least 1")

    async def get_store(self) -> CacheStore:
        """Load the persisted store, resetting it if it is malformed."""
        raw = await self.storage.get_item(self.storage_key)
        store = parse_cache_store(raw)
        if store is None:
            logger.warning(
                "Cache was malformed, resetting", storage_key=self.storage_key
            )
            await self.put_store({})
            return {}
        return store

    async def put_store(self, store: CacheStore) -> None:
        await self.storage.set_item(self.storage_key, serialize_cache_store(store))

    async def get_info(self, image_url: str) -> Optional[CacheEntry]:
        store = await self.get_store()
        return store.get(image_url)

    async def put_info(
        self,
        image_url: str,
        dimensions: Optional[Dimensions] = None,
        file_info: Optional[FileInfo] = None,
    ) -> CacheEntry:
        """
        Write dimensions and/or file info for an image.

        Fields left as ``None`` keep the value of the existing entry. The
        entry's timestamp is refreshed on every write.

        Returns:
            The entry as persisted
        """
        store = await self.get_store()
        previous = store.get(image_url)

        if len(store) >= self.max_entries:
            self._evict_oldest(store)

        added_datetime = self._clock()
        if previous is not None:
            entry = previous.merged(
                dimensions=dimensions,
                file_info=file_info,
                added_datetime=added_datetime,
            )
        else:
            entry = CacheEntry(
                dimensions=dimensions,
                file_info=file_info,
                added_datetime=added_datetime,
            )

        store[image_url] = entry
        await self.put_store(store)
        return entry

    def _evict_oldest(self, store: CacheStore) -> None:
        """Keep only the ``max_entries - 1`` most recently written entries."""
        # sorted() is stable, so equal timestamps keep persisted order.
        by_recency = sorted(
            store.items(), key=lambda item: item[1].added_datetime, reverse=True
        )
        evicted = [url for url, _ in by_recency[self.max_entries - 1 :]]
        for url in evicted:
            del store[url]

        logger.debug(
            "Evicted cached image info",
            evicted_count=len(evicted),
            max_entries=self.max_entries,
        )

    async def get_dimensions(self, image_url: str) -> Optional[Dimensions]:
        entry = await self.get_info(image_url)
        return entry.dimensions if entry else None

    async def get_file_info(self, image_url: str) -> Optional[FileInfo]:
        entry = await self.get_info(image_url)
        return entry.file_info if entry else None

    async def put_dimensions(self, image_url: str, dimensions: Dimensions) -> None:
        await self.put_info(image_url, dimensions=dimensions)

    async def put_file_info(self, image_url: str, file_info: FileInfo) -> None:
        await self.put_info(image_url, file_info=file_info)

    async def clear(self) -> None:
        """Drop the whole persisted store."""
        await self.storage.remove_item(self.storage_key)
        logger.info("Image info cache cleared", storage_key=self.storage_key)
