"""
Bookmarks API — Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions for the different failure scenarios.
How:   Each exception carries a client-safe message and an optional context
       dict. Global exception handlers (registered in main.py) catch these and
       return `{"error": {"message": ...}}` with the matching status code.
Who:   Raised by the validator, the store gateway and the bookmark service.

Exception Hierarchy:
    BookmarksError (base)        → 500 Internal Server Error
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── NotFoundError            → 404 Not Found
    ├── StoreError               → 500 Internal Server Error
    └── RateLimitExceededError   → 429 Too Many Requests
"""

from typing import Any, Dict, Optional


class BookmarksError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(BookmarksError):
    """
    Raised when a create or update payload is rejected.

    HTTP:    400 Bad Request

    The message is the exact text the client sees, e.g.
    "Missing 'title' in request body." The failing field is kept in
    `field` and in the context for logging.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(BookmarksError):
    """
    Raised when a requested resource does not exist.

    HTTP:    404 Not Found

    SQLAlchemy returns None (or a zero rowcount) for missing records; the
    service layer converts that into this exception.
    """

    def __init__(
        self,
        resource: str = "Bookmark",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=f"{resource} not found.", context=ctx)
        self.resource_id = resource_id


class StoreError(BookmarksError):
    """
    Raised when the store gateway fails unexpectedly.

    HTTP:    500 Internal Server Error

    The client always gets a generic message. Driver details (SQL, constraint
    names) go to the server log only. Store errors are never retried.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(BookmarksError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP:    429 Too Many Requests, with a Retry-After header.
    """

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
