"""
EntrySync Backend — Custom Exception Hierarchy
================================================

What:  Application-specific exceptions for the error scenarios of the API.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services and the persistence gateway; caught by global handlers.

Exception Hierarchy:
    EntrySyncError (base)            → 500 Internal Server Error
    ├── MissingParameterError        → 400 Bad Request (client can fix)
    └── StorageError                 → 500 Internal Server Error

Unmatched routes are not represented here: they surface as Starlette's
HTTPException and are rendered as a plain-text 404 by main.py.
"""

from typing import Any, Dict, Optional


class EntrySyncError(Exception):
    """
    Base exception for all EntrySync application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only where a handler opts in)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class MissingParameterError(EntrySyncError):
    """
    Raised when a request omits a required parameter such as `appId`.

    HTTP:    400 Bad Request

    Example response:
        {
            "error": "Missing appId",
            "details": {"parameter": "appId"},
            "request_id": "1a2b3c4d"
        }
    """

    def __init__(
        self,
        parameter: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["parameter"] = parameter
        super().__init__(message=f"Missing {parameter}", context=ctx)
        self.parameter = parameter


class StorageError(EntrySyncError):
    """
    Raised when the backing store rejects or fails a statement.

    When:    Connection lost mid-query, constraint violation, unsupported dialect.
    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. The original
    driver error and the operation name are kept in `context` and logged
    server-side only. No retry is attempted.
    """

    def __init__(
        self,
        message: str = "A storage error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
