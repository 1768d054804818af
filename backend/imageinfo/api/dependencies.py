from __future__ import annotations

from fastapi import Request

from ..infrastructure.repositories.cache_repository import BoundedImageInfoCache
from ..services.fetch.file_info_fetcher import FileInfoFetcher


def cache_provider(request: Request) -> BoundedImageInfoCache:
    """Provide the application-wide image info cache."""
    return request.app.state.image_info_cache


def fetcher_provider(request: Request) -> FileInfoFetcher:
    """Provide the application-wide file info fetcher."""
    return request.app.state.file_info_fetcher
