"""
Unit tests for the HEAD-based file info fetcher.

Uses httpx.MockTransport to script server responses and checks the retry
policy: fatal 4xx responses abort, everything else is retried.
"""

from unittest.mock import patch

import httpx
import pytest

from imageinfo.domain.image_info.value_objects import FileInfo
from imageinfo.services.fetch.exceptions import HTTPResponseError, NetworkError
from imageinfo.services.fetch.file_info_fetcher import (
    FileInfoFetcher,
    is_retryable_error,
    parse_file_info,
)

from tests.helpers import IMAGE_URL, ScriptedTransport, connect_error, image_response

LOGGER_PATH = "imageinfo.services.fetch.file_info_fetcher.logger"


class TestParseFileInfo:
    """Test header parsing."""

    def test_size_and_type(self):
        info = parse_file_info(
            {"content-length": "12345", "content-type": "image/png"}
        )
        assert info == FileInfo(size=12345, file_type="PNG")

    def test_header_names_case_insensitive(self):
        info = parse_file_info(
            {"Content-Length": "987", "CONTENT-TYPE": "image/jpeg"}
        )
        assert info == FileInfo(size=987, file_type="JPEG")

    def test_subtype_stops_at_non_word_character(self):
        info = parse_file_info({"content-type": "image/svg+xml; charset=utf-8"})
        assert info.file_type == "SVG"

    def test_missing_headers(self):
        assert parse_file_info({}) == FileInfo()

    def test_unparseable_values(self):
        info = parse_file_info({"content-length": "unknown", "content-type": "png"})
        assert info.size is None
        assert info.file_type is None


class TestRetryClassification:
    """Test which failures are retried."""

    @pytest.mark.parametrize("status_code", [400, 401, 403, 404, 410, 499])
    def test_client_errors_are_fatal(self, status_code):
        assert not is_retryable_error(HTTPResponseError(status_code, IMAGE_URL))

    @pytest.mark.parametrize("status_code", [429, 500, 502, 503, 504])
    def test_rate_limit_and_server_errors_retry(self, status_code):
        assert is_retryable_error(HTTPResponseError(status_code, IMAGE_URL))

    def test_network_errors_retry(self):
        assert is_retryable_error(NetworkError(IMAGE_URL, connect_error()))


class TestFileInfoFetcher:
    """Test fetching with retries."""

    @pytest.mark.asyncio
    async def test_success(self, make_fetcher):
        transport = ScriptedTransport([image_response()])
        fetcher = make_fetcher(transport)

        info = await fetcher.fetch_file_info(IMAGE_URL)

        assert info == FileInfo(size=12345, file_type="PNG")
        assert transport.call_count == 1
        assert transport.requests[0].method == "HEAD"
        assert str(transport.requests[0].url) == IMAGE_URL

    @pytest.mark.asyncio
    async def test_fetcher_is_callable_loader(self, make_fetcher):
        fetcher = make_fetcher(ScriptedTransport([image_response(size="7")]))

        assert (await fetcher(IMAGE_URL)).size == 7

    @pytest.mark.asyncio
    async def test_404_fails_without_retry(self, make_fetcher):
        transport = ScriptedTransport([404, image_response()])
        fetcher = make_fetcher(transport)

        with patch(LOGGER_PATH) as mock_logger:
            with pytest.raises(HTTPResponseError) as exc_info:
                await fetcher.fetch_file_info(IMAGE_URL)

        assert exc_info.value.status_code == 404
        assert transport.call_count == 1
        mock_logger.warning.assert_not_called()

    @pytest.mark.asyncio
    async def test_429_retried_until_success(self, make_fetcher):
        transport = ScriptedTransport([429, 429, 429, image_response()])
        fetcher = make_fetcher(transport)

        with patch(LOGGER_PATH) as mock_logger:
            info = await fetcher.fetch_file_info(IMAGE_URL)

        assert info == FileInfo(size=12345, file_type="PNG")
        assert transport.call_count == 4
        assert mock_logger.warning.call_count == 3

    @pytest.mark.asyncio
    async def test_500_exhausts_retries(self, make_fetcher):
        transport = ScriptedTransport([500])
        fetcher = make_fetcher(transport)

        with patch(LOGGER_PATH) as mock_logger:
            with pytest.raises(HTTPResponseError) as exc_info:
                await fetcher.fetch_file_info(IMAGE_URL)

        assert exc_info.value.status_code == 500
        assert transport.call_count == 6
        assert mock_logger.warning.call_count == 5

    @pytest.mark.asyncio
    async def test_last_error_is_raised_after_exhaustion(self, make_fetcher):
        transport = ScriptedTransport([500, 502, 503, 429, 500, 504])
        fetcher = make_fetcher(transport)

        with pytest.raises(HTTPResponseError) as exc_info:
            await fetcher.fetch_file_info(IMAGE_URL)

        assert exc_info.value.status_code == 504

    @pytest.mark.asyncio
    async def test_fatal_error_after_transient_ones(self, make_fetcher):
        transport = ScriptedTransport([503, 403, image_response()])
        fetcher = make_fetcher(transport)

        with pytest.raises(HTTPResponseError) as exc_info:
            await fetcher.fetch_file_info(IMAGE_URL)

        assert exc_info.value.status_code == 403
        assert transport.call_count == 2

    @pytest.mark.asyncio
    async def test_network_error_retried(self, make_fetcher):
        transport = ScriptedTransport([connect_error(), connect_error(), image_response()])
        fetcher = make_fetcher(transport)

        info = await fetcher.fetch_file_info(IMAGE_URL)

        assert info.size == 12345
        assert transport.call_count == 3

    @pytest.mark.asyncio
    async def test_network_error_exhausts_retries(self, make_fetcher):
        transport = ScriptedTransport([connect_error()])
        fetcher = make_fetcher(transport)

        with pytest.raises(NetworkError) as exc_info:
            await fetcher.fetch_file_info(IMAGE_URL)

        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
        assert transport.call_count == 6

    @pytest.mark.asyncio
    async def test_max_retries_zero_makes_single_attempt(self, make_fetcher):
        transport = ScriptedTransport([500, image_response()])
        fetcher = make_fetcher(transport, max_retries=0)

        with pytest.raises(HTTPResponseError):
            await fetcher.fetch_file_info(IMAGE_URL)

        assert transport.call_count == 1

    @pytest.mark.asyncio
    async def test_missing_content_length(self, make_fetcher):
        transport = ScriptedTransport(
            [httpx.Response(200, headers={"content-type": "image/gif"})]
        )
        fetcher = make_fetcher(transport)

        info = await fetcher.fetch_file_info(IMAGE_URL)

        assert info == FileInfo(file_type="GIF")

    def test_defaults_from_settings(self):
        fetcher = FileInfoFetcher()

        assert fetcher.max_retries == 5
        assert fetcher.timeout == 30.0

    def test_zero_timeout_kept(self):
        fetcher = FileInfoFetcher(timeout=0.0)

        assert fetcher.timeout == 0.0
