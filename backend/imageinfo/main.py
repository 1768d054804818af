"""
Image Info Cache - FastAPI Application

Serves image file info and dimensions from a bounded, storage-backed cache,
populated by retrying HEAD probes against the image servers.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from tenacity import wait_exponential

from .api.endpoints.health import router as health_router
from .api.endpoints.images import router as images_router
from .core.config import Settings, get_settings
from .core.logging_config import configure_logging
from .domain.image_info.repository_interfaces import KeyValueStorage
from .infrastructure.repositories.cache_repository import BoundedImageInfoCache
from .infrastructure.storage import RedisKeyValueStorage, create_storage
from .services.fetch.file_info_fetcher import FileInfoFetcher

logger = structlog.get_logger()


def create_app(
    settings: Optional[Settings] = None,
    storage: Optional[KeyValueStorage] = None,
    fetcher: Optional[FileInfoFetcher] = None,
) -> FastAPI:
    """Build the application with its cache and fetcher wired in."""
    settings = settings if settings is not None else get_settings()
    storage = storage if storage is not None else create_storage(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings)
        logger.info(
            "Starting image info cache",
            version=settings.SERVICE_VERSION,
            environment=settings.ENVIRONMENT,
            storage_backend=type(storage).__name__,
            max_cached_images=settings.MAX_CACHED_IMAGES,
        )
        yield
        if isinstance(storage, RedisKeyValueStorage):
            await storage.close()
        logger.info("Image info cache stopped")

    app = FastAPI(
        title="Image Info Cache",
        version=settings.SERVICE_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    app.state.image_info_cache = BoundedImageInfoCache(
        storage,
        max_entries=settings.MAX_CACHED_IMAGES,
        storage_key=settings.CACHE_STORAGE_KEY,
    )
    if fetcher is None:
        fetcher = FileInfoFetcher(
            max_retries=settings.FETCH_MAX_RETRIES,
            wait=wait_exponential(
                multiplier=settings.FETCH_RETRY_MIN_DELAY_SECONDS,
                max=settings.FETCH_RETRY_MAX_DELAY_SECONDS,
            ),
            timeout=settings.FETCH_TIMEOUT_SECONDS,
            user_agent=settings.USER_AGENT,
        )
    app.state.file_info_fetcher = fetcher

    app.include_router(health_router)
    app.include_router(images_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
