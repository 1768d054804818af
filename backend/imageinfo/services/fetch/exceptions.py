"""
Image Fetch Exceptions

Errors raised while probing a remote image for its file info.
"""

from typing import Optional, Any, Dict


class ImageFetchException(Exception):
    """Base exception for image fetch errors."""

    def __init__(
        self,
        message: str,
        url: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.url = url
        self.error_code = error_code or "IMAGE_FETCH_ERROR"
        self.details = {"url": url, **(details or {})}
        super().__init__(self.message)


class HTTPResponseError(ImageFetchException):
    """Raised when the server answers with a status code of 400 or above."""

    def __init__(self, status_code: int, url: str, reason: Optional[str] = None):
        self.status_code = status_code
        self.reason = reason or ""
        message = f"HTTP error {status_code}"
        if self.reason:
            message = f"{message} ({self.reason})"
        super().__init__(
            message=f"{message} for {url}",
            url=url,
            error_code="HTTP_RESPONSE_ERROR",
            details={"status_code": status_code, "reason": self.reason},
        )

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    @property
    def is_rate_limited(self) -> bool:
        return self.status_code == 429


class NetworkError(ImageFetchException):
    """Raised when the request fails before any response arrives."""

    def __init__(self, url: str, original_error: Exception):
        super().__init__(
            message=f"Network error for {url}: {original_error}",
            url=url,
            error_code="NETWORK_ERROR",
            details={
                "original_error": str(original_error),
                "original_error_type": type(original_error).__name__,
            },
        )
        # Preserve exception context for debugging (exception chaining)
        self.__cause__ = original_error
