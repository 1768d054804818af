"""
Cached Image

An image URL whose dimensions and file info are resolved lazily: the cache is
consulted first and the injected loader only runs on a miss, after which the
result is written back to the cache.
"""

from typing import Optional

import structlog

from ...domain.image_info.repository_interfaces import (
    DimensionsLoader,
    FileInfoLoader,
    ImageInfoCacheAdapter,
)
from ...domain.image_info.value_objects import Dimensions, FileInfo, ImageInfo
from ..fetch.file_info_fetcher import FileInfoFetcher

logger = structlog.get_logger(__name__)


class CachedImage:
    """
    Lazily resolved image metadata.

    Resolved values are memoized on the instance. Loader errors propagate
    and nothing is cached for a failed load.
    """

    def __init__(
        self,
        url: str,
        cache: ImageInfoCacheAdapter,
        file_info_loader: FileInfoLoader,
        dimensions_loader: Optional[DimensionsLoader] = None,
    ):
        self.url = url
        self.cache = cache
        self.file_info_loader = file_info_loader
        self.dimensions_loader = dimensions_loader
        self._dimensions: Optional[Dimensions] = None
        self._file_info: Optional[FileInfo] = None

    async def get_dimensions(self) -> Optional[Dimensions]:
        """Return the image dimensions, or None when they cannot be measured here."""
        if self._dimensions is not None:
            return self._dimensions

        dimensions = await self.cache.get_dimensions(self.url)
        if dimensions is None:
            if self.dimensions_loader is None:
                return None
            logger.debug("Dimensions cache miss", url=self.url)
            dimensions = await self.dimensions_loader(self.url)
            await self.cache.put_dimensions(self.url, dimensions)

        self._dimensions = dimensions
        return dimensions

    async def get_file_info(self) -> FileInfo:
        if self._file_info is not None:
            return self._file_info

        file_info = await self.cache.get_file_info(self.url)
        if file_info is None:
            logger.debug("File info cache miss", url=self.url)
            file_info = await self.file_info_loader(self.url)
            await self.cache.put_file_info(self.url, file_info)

        self._file_info = file_info
        return file_info

    async def get_image_info(self) -> ImageInfo:
        dimensions = await self.get_dimensions()
        file_info = await self.get_file_info()
        return ImageInfo(url=self.url, dimensions=dimensions, file_info=file_info)


def create_head_probe_image(
    url: str,
    cache: ImageInfoCacheAdapter,
    fetcher: Optional[FileInfoFetcher] = None,
    dimensions_loader: Optional[DimensionsLoader] = None,
) -> CachedImage:
    """Build a cached image whose file info comes from a retrying HEAD probe."""
    return CachedImage(
        url,
        cache,
        file_info_loader=fetcher if fetcher is not None else FileInfoFetcher(),
        dimensions_loader=dimensions_loader,
    )
