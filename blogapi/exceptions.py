"""
Blog API — Custom Exception Hierarchy
=======================================

What:  Application-specific exceptions plus the single function that maps
       them to HTTP status codes.
Why:   Handlers raise typed errors instead of building error responses by
       hand, so every route reports the same failure the same way.
How:   Each exception carries a client-safe message and a context dict that
       is logged but never returned for server-side failures.
       `classify_error()` is the only place that knows which status code
       belongs to which exception.

Exception Hierarchy:
    BlogApiError (base)
    ├── ValidationError   → 400 Bad Request (client can fix)
    ├── NotFoundError     → 404 Not Found
    └── DatabaseError     → 500 Internal Server Error
"""

from typing import Any, Dict, Optional, Tuple


class BlogApiError(Exception):
    """
    Base exception for all Blog API errors.

    Attributes:
        message:  Error description, safe to return for client errors
        context:  Additional debug info (logged, not returned for 5xx)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(BlogApiError):
    """
    Raised when client input fails validation.

    When:    Missing required field on create, invalid field value,
             path/body id mismatch on update, body that is not a JSON object.
    HTTP:    400 Bad Request

    Always raised before the persistence gateway is touched.
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


class NotFoundError(BlogApiError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None (or a zero rowcount) for missing records; the
    gateway converts that into this exception so absence is reported as a
    normal 404 rather than a server fault.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(BlogApiError):
    """
    Raised when a store operation fails unexpectedly.

    The message returned to the client is always generic. Driver details
    (SQL, constraint names) stay in the server log.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


# ── Error Classification ──────────────────────────────────────────────────
# Most specific class first; anything unrecognized is an internal error.
_STATUS_BY_ERROR: Tuple[Tuple[type, int, str], ...] = (
    (ValidationError, 400, "validation_error"),
    (NotFoundError, 404, "not_found"),
    (DatabaseError, 500, "server_error"),
)


def classify_error(exc: BaseException) -> Tuple[int, str]:
    """
    Map an exception to an HTTP status code and a machine-readable error code.

    Used by every exception handler so distinct failure kinds keep distinct
    statuses (a missing post is a 404, an unreachable store is a 500).

    Returns:
        (status_code, error_code)
    """
    for error_type, status_code, error_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code, error_code
    return 500, "internal_server_error"


def is_client_error(exc: BaseException) -> bool:
    """True when the failure is the caller's fault and its message may be shown."""
    status_code, _ = classify_error(exc)
    return 400 <= status_code < 500
