"""
NotePolish Backend - Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for the different error scenarios.
How:   Each exception carries a user-facing message and an optional context
       dict. Global exception handlers (registered in main.py) translate them
       into `{"error": ..., "details": ...}` JSON responses.
Who:   Raised by services and dependencies; caught by global handlers.

Exception Hierarchy:
    NotePolishError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── AuthenticationError      → 401 Unauthorized
    ├── NotFoundError            → 404 Not Found
    ├── LLMServiceError          → 500 Upstream completion failed
    ├── DatabaseError            → 500 Internal Server Error
    └── RateLimitExceededError   → 429 Too Many Requests
"""

from typing import Any, Dict, Optional


class NotePolishError(Exception):
    """
    Base exception for all NotePolish application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional diagnostic info
    """

    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NotePolishError):
    """
    Raised when client input fails validation.

    When:    Empty note content, missing note fields, duplicate registration,
             bad login credentials.
    HTTP:    400 Bad Request
    """

    status_code = 400

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


class AuthenticationError(NotePolishError):
    """
    Raised when a protected route is called without a valid bearer token.

    HTTP:    401 Unauthorized
    """

    status_code = 401

    def __init__(self, message: str = "Invalid or expired token."):
        super().__init__(message=message)


class NotFoundError(NotePolishError):
    """
    Raised when a requested resource does not exist.

    When:    GET /api/auth/me for a user that was deleted after the token was issued.
    HTTP:    404 Not Found
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"The requested {resource} was not found"
            if resource_id:
                message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class LLMServiceError(NotePolishError):
    """
    Raised when the completion pipeline cannot produce a result.

    When:    beautify's single attempt failed, summarize's retry budget is
             exhausted, or orchestration hit an unexpected exception.
    HTTP:    500

    Context carries the terminal outcome kind (timeout, transport_error,
    malformed_response) and a short reason. The raw provider payload is
    never included.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "The AI service is currently unavailable. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(NotePolishError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error

    The message returned to the client is always generic; details are
    logged server-side only.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(NotePolishError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP:    429 Too Many Requests
    """

    status_code = 429

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
