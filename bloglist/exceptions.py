"""
Bloglist Backend: Custom Exception Hierarchy
=============================================

What:  Application-specific exceptions for the failures a blog request can hit.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the matching HTTP status.
Who:   Raised by the validation and repository services; caught by handlers.
When:  During request processing.

Exception Hierarchy:
    BloglistError (base)
    ├── ValidationError            → 400 Bad Request (missing/empty title or url)
    ├── MalformedIdentifierError   → 400 Bad Request (id not in UUID format)
    └── PersistenceError           → 500 Internal Server Error (storage fault)
"""

from typing import Any, Dict, Optional


class BloglistError(Exception):
    """
    Base exception for all Bloglist application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, only partially returned)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(BloglistError):
    """
    Raised when a client-supplied blog record fails the required-field rules.

    When:    `title` or `url` is missing, null, or the empty string.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Blog validation failed: title is required",
            "details": {"field": "title", "missing": ["title"]}
        }
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


class MalformedIdentifierError(BloglistError):
    """
    Raised when a blog identifier is not in the storage identifier format.

    Distinct from "well-formed but unknown": an unknown id is not an error
    at all for deletes, while a malformed one is a client input error.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        identifier: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["id"] = identifier
        super().__init__(message="malformatted id", context=ctx)
        self.identifier = identifier


class PersistenceError(BloglistError):
    """
    Raised when the storage layer is unreachable or fails unexpectedly.

    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. The driver error
    (SQL, connection details) is logged server-side only. Failures are
    per-request; the process keeps serving subsequent requests.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
