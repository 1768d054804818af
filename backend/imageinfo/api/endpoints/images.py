"""
Image info endpoints.

Resolves image file info through the bounded cache, probing the remote
server only on a cache miss, and lets clients report measured dimensions.
"""

from typing import Any, Dict

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field

from ...domain.image_info.value_objects import Dimensions
from ...infrastructure.repositories.cache_repository import BoundedImageInfoCache
from ...infrastructure.storage.exceptions import StorageException
from ...services.fetch.exceptions import ImageFetchException
from ...services.fetch.file_info_fetcher import FileInfoFetcher
from ...services.image.cached_image import create_head_probe_image
from ..dependencies import cache_provider, fetcher_provider
from ..errors import to_http_exception

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/images", tags=["images"])


class DimensionsReport(BaseModel):
    """Dimensions measured by a client for an image URL."""

    url: str = Field(..., min_length=1)
    width: int = Field(..., ge=0)
    height: int = Field(..., ge=0)


def _validate_image_url(url: str) -> str:
    if not url.startswith(("http://", "https://")):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="url must be an absolute http(s) URL",
        )
    return url


@router.get("/info")
async def get_image_info(
    url: str = Query(..., min_length=1, description="Image URL"),
    cache: BoundedImageInfoCache = Depends(cache_provider),
    fetcher: FileInfoFetcher = Depends(fetcher_provider),
) -> Dict[str, Any]:
    """Return cached dimensions and file info, fetching file info on a miss."""
    _validate_image_url(url)
    image = create_head_probe_image(url, cache, fetcher=fetcher)

    try:
        info = await image.get_image_info()
    except (ImageFetchException, StorageException) as e:
        raise to_http_exception(e, context="images.info") from e

    return info.model_dump(by_alias=True)


@router.put("/dimensions", status_code=status.HTTP_204_NO_CONTENT)
async def put_image_dimensions(
    report: DimensionsReport,
    cache: BoundedImageInfoCache = Depends(cache_provider),
) -> None:
    """Store dimensions measured by the client."""
    _validate_image_url(report.url)
    try:
        await cache.put_dimensions(
            report.url, Dimensions(width=report.width, height=report.height)
        )
    except StorageException as e:
        raise to_http_exception(e, context="images.dimensions") from e

    logger.info("Stored image dimensions", url=report.url)


@router.get("/cache")
async def get_cache_store(
    cache: BoundedImageInfoCache = Depends(cache_provider),
) -> Dict[str, Any]:
    """Return the cache store as persisted."""
    try:
        store = await cache.get_store()
    except StorageException as e:
        raise to_http_exception(e, context="images.cache") from e

    return {
        url: entry.model_dump(by_alias=True, exclude_none=True)
        for url, entry in store.items()
    }


@router.delete("/cache", status_code=status.HTTP_204_NO_CONTENT)
async def clear_cache_store(
    cache: BoundedImageInfoCache = Depends(cache_provider),
) -> None:
    try:
        await cache.clear()
    except StorageException as e:
        raise to_http_exception(e, context="images.cache.clear") from e
