"""
API error mapping.

Converts fetch and storage exceptions into HTTP exceptions for the API layer.
"""

from fastapi import HTTPException, status

import structlog

from ..infrastructure.storage.exceptions import StorageException
from ..services.fetch.exceptions import (
    HTTPResponseError,
    ImageFetchException,
    NetworkError,
)

logger = structlog.get_logger(__name__)


def to_http_exception(error: Exception, context: str = "") -> HTTPException:
    """Map a domain error to an HTTPException and log it."""
    if isinstance(error, HTTPResponseError):
        if error.is_client_error and not error.is_rate_limited:
            status_code = status.HTTP_502_BAD_GATEWAY
        else:
            status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    elif isinstance(error, NetworkError):
        status_code = status.HTTP_504_GATEWAY_TIMEOUT
    elif isinstance(error, (ImageFetchException, StorageException)):
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    else:
        logger.exception("Unexpected error", context=context)
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "INTERNAL_ERROR", "message": "Internal server error"},
        )

    logger.warning(
        "Request failed",
        context=context,
        error_code=error.error_code,
        error=error.message,
        status_code=status_code,
    )
    return HTTPException(
        status_code=status_code,
        detail={
            "error": error.error_code,
            "message": error.message,
            "details": error.details,
        },
    )
