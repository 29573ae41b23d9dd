"""
Habit Tracker Backend — Custom Exception Hierarchy
====================================================

What:  Application-specific exceptions for each failure category.
How:   Each exception carries a user-facing message and an optional context
       dict. Global exception handlers (registered in main.py) catch these
       and return structured JSON error responses with the right status.
Who:   Raised by services, repositories' callers and the security layer.

Exception Hierarchy:
    HabitTrackerError (base)
    ├── ValidationError          → 400 Bad Request
    │   └── InvalidReferenceError → 400 Bad Request (unknown owning account)
    ├── AuthenticationError      → 401 Unauthorized
    ├── NotFoundError            → 404 Not Found
    ├── ConflictError            → 409 Conflict (unique field already taken)
    └── DatabaseError            → 500 Internal Server Error

Every error response body has the same shape:
    {"error": "<code>", "message": "...", "details": {...}, "request_id": "..."}
"""

from typing import Any, Dict, Optional


class HabitTrackerError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info
    """

    error_code = "internal_server_error"
    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(HabitTrackerError):
    """
    Raised when client input fails a business validation rule.

    Schema-level problems (missing fields, wrong types) are caught by
    FastAPI first and are reported with the same "validation_error" code.

    Example response:
        {
            "error": "validation_error",
            "message": "Provide at least one of: title, status",
            "details": {"field": "body"}
        }
    """

    error_code = "validation_error"
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


class InvalidReferenceError(ValidationError):
    """
    Raised when a payload points at a record that does not exist.

    When:  POST /api/habits with an owning account id that is unknown.
    HTTP:  400 Bad Request, error code "invalid_reference"
    """

    error_code = "invalid_reference"

    def __init__(
        self,
        resource: str,
        resource_id: Any,
        field: Optional[str] = None,
    ):
        super().__init__(
            message=f"Referenced {resource} with ID '{resource_id}' does not exist",
            field=field,
            context={"resource": resource, "resource_id": str(resource_id)},
        )


class AuthenticationError(HabitTrackerError):
    """
    Raised when credentials are missing, malformed, expired or wrong.

    The message never says which part of a credential pair was wrong.
    """

    error_code = "authentication_error"
    status_code = 401

    def __init__(
        self,
        message: str = "Invalid or missing credentials",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(HabitTrackerError):
    """
    Raised when a requested resource does not exist.

    Repositories return None for missing rows; services convert that None
    into this exception so a miss can never look like a success.
    """

    error_code = "not_found"
    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=message, context=ctx)


class ConflictError(HabitTrackerError):
    """
    Raised when a write would violate a uniqueness constraint.

    When:  Registering (or updating to) an email that another account owns.
    HTTP:  409 Conflict
    """

    error_code = "conflict"
    status_code = 409

    def __init__(
        self,
        message: str = "The resource already exists",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class DatabaseError(HabitTrackerError):
    """
    Raised when database operations fail unexpectedly.

    What:    Connection lost, deadlock, unclassified constraint violation.
    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. Detailed error
    info (driver message, constraint name) is logged server-side only.
    """

    error_code = "server_error"

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
