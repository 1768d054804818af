"""
Image File Info Fetcher

Probes a remote image with a HEAD request and extracts its file size and
type from the response headers, without downloading the image body.

Transient failures (network errors, 5xx, 429) are retried with exponential
backoff. Other 4xx responses are permanent and abort immediately.
"""

import re
from typing import Mapping, Optional

import httpx
import structlog
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from ...core.config import settings
from ...domain.image_info.value_objects import FileInfo
from .exceptions import HTTPResponseError, NetworkError

logger = structlog.get_logger(__name__)
tracer = trace.get_tracer(__name__)

CONTENT_LENGTH_PATTERN = re.compile(r"\s*(\d+)")
CONTENT_TYPE_PATTERN = re.compile(r"\s*\w+/(\w+)")


def is_retryable_error(error: BaseException) -> bool:
    """
    Classify a failed attempt.

    4xx responses other than 429 are fatal; retrying them is futile.
    Everything else, including rate limiting, is treated as transient.
    """
    if isinstance(error, HTTPResponseError):
        return not error.is_client_error or error.is_rate_limited
    return True


def parse_file_info(headers: Mapping[str, str]) -> FileInfo:
    """Extract size and upper-cased subtype from response headers."""
    headers = httpx.Headers(headers)

    size = None
    length_match = CONTENT_LENGTH_PATTERN.match(headers.get("content-length", ""))
    if length_match:
        size = int(length_match.group(1))

    file_type = None
    type_match = CONTENT_TYPE_PATTERN.match(headers.get("content-type", ""))
    if type_match:
        file_type = type_match.group(1).upper()

    return FileInfo(file_type=file_type, size=size)


def _log_retry(retry_state: RetryCallState) -> None:
    # Called as fn(client, url), so the URL is the last positional argument.
    error = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "Failed to retrieve image file info, retrying",
        url=retry_state.args[-1] if retry_state.args else None,
        attempt=retry_state.attempt_number,
        error=str(error),
        next_delay_seconds=retry_state.next_action.sleep
        if retry_state.next_action
        else None,
    )


class FileInfoFetcher:
    """
    Fetch file info for image URLs with a bounded number of HEAD attempts.

    Instances are callable, so one can be passed wherever a file info
    loader is expected.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        max_retries: Optional[int] = None,
        wait: Optional[wait_base] = None,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
    ):
        self._client = client
        self.max_retries = (
            settings.FETCH_MAX_RETRIES if max_retries is None else max_retries
        )
        self.wait = wait if wait is not None else wait_exponential(
            multiplier=settings.FETCH_RETRY_MIN_DELAY_SECONDS,
            max=settings.FETCH_RETRY_MAX_DELAY_SECONDS,
        )
        self.timeout = settings.FETCH_TIMEOUT_SECONDS if timeout is None else timeout
        self.user_agent = user_agent or settings.USER_AGENT

    async def __call__(self, url: str) -> FileInfo:
        return await self.fetch_file_info(url)

    async def fetch_file_info(self, url: str) -> FileInfo:
        """
        Probe ``url`` and return its file info.

        Raises:
            HTTPResponseError: On a fatal 4xx, or the last HTTP error once
                retries are exhausted
            NetworkError: When the last attempt failed without a response
        """
        with tracer.start_as_current_span("image.fetch_file_info") as span:
            span.set_attribute("http.url", url)
            try:
                if self._client is not None:
                    response = await self._head_with_retries(self._client, url)
                else:
                    async with self._build_client() as client:
                        response = await self._head_with_retries(client, url)
            except (HTTPResponseError, NetworkError) as e:
                span.set_status(Status(StatusCode.ERROR, e.message))
                raise

            file_info = parse_file_info(response.headers)
            span.set_status(Status(StatusCode.OK))
            logger.debug(
                "Retrieved image file info",
                url=url,
                file_type=file_info.file_type,
                size=file_info.size,
            )
            return file_info

    async def _head_with_retries(
        self, client: httpx.AsyncClient, url: str
    ) -> httpx.Response:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_retries + 1),
            wait=self.wait,
            retry=retry_if_exception(is_retryable_error),
            before_sleep=_log_retry,
            reraise=True,
        )
        return await retrying(self._head, client, url)

    async def _head(self, client: httpx.AsyncClient, url: str) -> httpx.Response:
        try:
            response = await client.head(url, follow_redirects=True)
        except httpx.RequestError as e:
            raise NetworkError(url, e) from e

        if response.status_code >= 400:
            raise HTTPResponseError(response.status_code, url, response.reason_phrase)
        return response

    def _build_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout, headers={"User-Agent": self.user_agent}
        )
