"""
Custom Exception Classes for the Blog API

This module defines the error taxonomy shared by the GraphQL resolvers,
the services and the HTTP layer. Every error carries a machine-readable
error code that ends up in GraphQL `extensions.code` or in the HTTP error
body.
"""

from enum import Enum
from typing import Any

from fastapi import status


class ErrorCode(str, Enum):
    """Machine-readable error codes."""

    INVALID_GLOBAL_ID = "INVALID_GLOBAL_ID"
    INVALID_PAGINATION_ARGUMENT = "INVALID_PAGINATION_ARGUMENT"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    REQUEST_TIMEOUT = "REQUEST_TIMEOUT"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class BlogError(Exception):
    """Base exception class for all blog API exceptions"""

    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
        error_code: ErrorCode | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        if error_code is not None:
            self.error_code = error_code
        super().__init__(self.message)


# ============================================================================
# Identifier & Argument Exceptions
# ============================================================================


class GlobalIdDecodeError(BlogError):
    """Raised when a global ID is not a token produced by the codec"""

    error_code = ErrorCode.INVALID_GLOBAL_ID

    def __init__(self, global_id: Any, reason: str = "malformed token"):
        super().__init__(
            message=f"Invalid global ID '{global_id}': {reason}",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"global_id": global_id, "reason": reason},
        )


class PaginationArgumentError(BlogError):
    """Raised when connection arguments (first/last/after/before) are invalid"""

    error_code = ErrorCode.INVALID_PAGINATION_ARGUMENT

    def __init__(self, message: str, argument: str | None = None):
        details = {"argument": argument} if argument else {}
        super().__init__(message=message, status_code=status.HTTP_400_BAD_REQUEST, details=details)


class ValidationError(BlogError):
    """Raised when input validation fails"""

    error_code = ErrorCode.VALIDATION_FAILED

    def __init__(self, message: str, field: str | None = None, details: dict[str, Any] | None = None):
        error_details = details or {}
        if field:
            error_details["field"] = field
        super().__init__(message=message, status_code=status.HTTP_400_BAD_REQUEST, details=error_details)


# ============================================================================
# Resource Not Found Exceptions
# ============================================================================


class ResourceNotFoundError(BlogError):
    """Raised when a write references a record that does not exist"""

    error_code = ErrorCode.RESOURCE_NOT_FOUND

    def __init__(self, resource_type: str, resource_id: Any | None = None):
        message = f"{resource_type} not found"
        if resource_id is not None:
            message = f"{resource_type} with id '{resource_id}' not found"
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


# ============================================================================
# Store & Transport Exceptions
# ============================================================================


class StoreUnavailableError(BlogError):
    """Raised when the document store cannot be reached"""

    error_code = ErrorCode.STORE_UNAVAILABLE

    def __init__(self, message: str = "The data store is unavailable", operation: str | None = None):
        details = {"operation": operation} if operation else {}
        super().__init__(message=message, status_code=status.HTTP_503_SERVICE_UNAVAILABLE, details=details)


class RequestTimeoutError(BlogError):
    """Raised when a request exceeds the configured time budget"""

    error_code = ErrorCode.REQUEST_TIMEOUT

    def __init__(self, timeout_seconds: float):
        super().__init__(
            message=f"Request did not complete within {timeout_seconds:g} seconds",
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            details={"timeout_seconds": timeout_seconds},
        )
