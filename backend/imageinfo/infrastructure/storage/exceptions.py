"""
Storage Infrastructure Exceptions

Domain-specific exceptions for key-value storage operations.
Storage failures are never swallowed; they carry the original error as cause.
"""

from typing import Optional, Any, Dict


class StorageException(Exception):
    """Base exception for storage-related errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.error_code = error_code or "STORAGE_ERROR"
        self.details = details or {}
        if original_error:
            self.details["original_error"] = str(original_error)
            self.details["original_error_type"] = type(original_error).__name__
        super().__init__(self.message)
        # Preserve exception context for debugging (exception chaining)
        if original_error:
            self.__cause__ = original_error


class StorageConnectionException(StorageException):
    """Raised when the storage backend cannot be reached."""

    def __init__(
        self,
        message: str = "Storage connection failed",
        url: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            message=message,
            error_code="STORAGE_CONNECTION_ERROR",
            details={"url": url} if url else None,
            original_error=original_error,
        )


class StorageOperationException(StorageException):
    """Raised when a read, write or delete fails."""

    def __init__(
        self,
        operation: str,
        key: str,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            message=f"Storage operation '{operation}' failed for key '{key}'",
            error_code="STORAGE_OPERATION_ERROR",
            details={"operation": operation, "key": key},
            original_error=original_error,
        )
