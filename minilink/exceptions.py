"""Service-level exceptions mapped to HTTP error responses."""

from typing import Any

from fastapi import status


class MinilinkError(Exception):
    """Base exception for service operations."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}


class ValidationError(MinilinkError):
    """Missing or malformed input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "VALIDATION_ERROR"


class ConflictError(MinilinkError):
    """A unique constraint would be violated."""

    status_code = status.HTTP_409_CONFLICT
    default_code = "CONFLICT"


class NotFoundError(MinilinkError):
    """The requested record does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_code = "NOT_FOUND"


class InternalError(MinilinkError):
    """Unexpected storage or runtime failure."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code = "INTERNAL_ERROR"
