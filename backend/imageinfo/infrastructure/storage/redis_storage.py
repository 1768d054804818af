"""
Redis Key-Value Storage

Redis-backed implementation of the key-value storage contract. Every process
pointed at the same Redis database sees the same values, which makes it the
shared storage the image info cache persists through.
"""

import asyncio
import time
from typing import Optional

import structlog
from redis.asyncio import Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from ...core.config import settings
from ...domain.image_info.repository_interfaces import KeyValueStorage
from .exceptions import StorageConnectionException, StorageOperationException

logger = structlog.get_logger(__name__)
tracer = trace.get_tracer(__name__)


class RedisKeyValueStorage(KeyValueStorage):
    """
    Key-value storage on top of a Redis string per key.

    The client is created lazily on first use unless one is injected.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        client: Optional[Redis] = None,
        socket_timeout: Optional[float] = None,
    ):
        self.url = url or settings.REDIS_URL
        self.socket_timeout = (
            settings.REDIS_SOCKET_TIMEOUT if socket_timeout is None else socket_timeout
        )
        self._client = client
        self._lock = asyncio.Lock()

    async def _get_client(self) -> Redis:
        if self._client is not None:
            return self._client

        async with self._lock:
            if self._client is not None:
                return self._client

            if not self.url:
                raise StorageConnectionException(
                    message="Redis storage requires REDIS_URL to be configured"
                )

            try:
                self._client = Redis.from_url(
                    self.url,
                    decode_responses=True,
                    socket_timeout=self.socket_timeout,
                )
                logger.info("Redis storage client created", url=self.url)
            except (RedisError, ValueError) as e:
                raise StorageConnectionException(
                    message=f"Failed to create Redis client: {e}",
                    url=self.url,
                    original_error=e,
                ) from e

        return self._client

    async def get_item(self, key: str) -> Optional[str]:
        with tracer.start_as_current_span("storage.redis.get") as span:
            span.set_attribute("storage.key", key)
            client = await self._get_client()
            start_time = time.time()
            try:
                value = await client.get(key)
            except RedisConnectionError as e:
                span.set_status(Status(StatusCode.ERROR, str(e)))
                raise StorageConnectionException(
                    url=self.url, original_error=e
                ) from e
            except RedisError as e:
                span.set_status(Status(StatusCode.ERROR, str(e)))
                raise StorageOperationException("get", key, original_error=e) from e

            span.set_attribute(
                "storage.execution_time_ms", (time.time() - start_time) * 1000
            )
            span.set_status(Status(StatusCode.OK))
            if isinstance(value, bytes):
                value = value.decode("utf-8")
            return value

    async def set_item(self, key: str, value: str) -> None:
        with tracer.start_as_current_span("storage.redis.set") as span:
            span.set_attribute("storage.key", key)
            span.set_attribute("storage.size_bytes", len(value))
            client = await self._get_client()
            try:
                await client.set(key, value)
            except RedisConnectionError as e:
                span.set_status(Status(StatusCode.ERROR, str(e)))
                raise StorageConnectionException(
                    url=self.url, original_error=e
                ) from e
            except RedisError as e:
                span.set_status(Status(StatusCode.ERROR, str(e)))
                raise StorageOperationException("set", key, original_error=e) from e
            span.set_status(Status(StatusCode.OK))

    async def remove_item(self, key: str) -> None:
        with tracer.start_as_current_span("storage.redis.delete") as span:
            span.set_attribute("storage.key", key)
            client = await self._get_client()
            try:
                await client.delete(key)
            except RedisConnectionError as e:
                span.set_status(Status(StatusCode.ERROR, str(e)))
                raise StorageConnectionException(
                    url=self.url, original_error=e
                ) from e
            except RedisError as e:
                span.set_status(Status(StatusCode.ERROR, str(e)))
                raise StorageOperationException("delete", key, original_error=e) from e
            span.set_status(Status(StatusCode.OK))

    async def close(self) -> None:
        """Close the Redis client if this storage created or was given one."""
        async with self._lock:
            if self._client is not None:
                await self._client.aclose()
                self._client = None
                logger.info("Redis storage client closed")
