"""
Image fetch services.

Header-only probing of remote images with selective retries.
"""

from .exceptions import HTTPResponseError, ImageFetchException, NetworkError
from .file_info_fetcher import FileInfoFetcher, is_retryable_error, parse_file_info

__all__ = [
    "FileInfoFetcher",
    "is_retryable_error",
    "parse_file_info",
    "HTTPResponseError",
    "ImageFetchException",
    "NetworkError",
]
