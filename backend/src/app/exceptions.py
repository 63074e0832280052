"""Custom exception classes for the products API.

Each exception carries the HTTP status code the router answers with,
so handlers can raise and let the boundary translate.
"""

from __future__ import annotations

from typing import Any
from typing import Optional


class AppError(Exception):
    """Base exception for application errors.

    Attributes:
        message: Human-readable error message, returned to the caller.
        status_code: HTTP status code (default 500).
        detail: Optional additional context.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        detail: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.detail = detail

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response body."""
        result: dict[str, Any] = {"message": self.message}
        if self.detail:
            result["detail"] = self.detail
        return result


class ValidationError(AppError):
    """Raised when a request is missing a required value or is malformed."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        detail: Optional[str] = None,
    ):
        super().__init__(message, status_code=400, detail=detail)
        self.field = field


class StoreError(AppError):
    """Raised when the backing store rejects or fails an operation.

    The router replaces the message with an operation-specific one
    ("Failed to create product", ...); the original cause stays on
    ``__cause__`` and in ``operation`` for logging.
    """

    def __init__(self, operation: str, detail: Optional[str] = None):
        super().__init__(
            f"Store operation failed: {operation}",
            status_code=500,
            detail=detail,
        )
        self.operation = operation
