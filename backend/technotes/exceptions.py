"""
TechNotes Backend — Custom Exception Hierarchy
================================================

What:  Defines application-specific exceptions for different error scenarios.
Why:   Custom exceptions let services signal failures without knowing about
       HTTP, while still mapping to the right status code and message.
How:   Each exception class carries a message, an optional context dict, and
       a default HTTP status code. A service may override the status for a
       given operation (e.g. "not found" during an update is reported as 400).
       Global exception handlers (registered in main.py) render the response.
Who:   Raised by services and middleware; caught by global handlers.

Exception Hierarchy:
    TechNotesError (base)
    ├── ValidationError   → 400 Bad Request (client can fix)
    ├── NotFoundError     → 404 Not Found
    ├── ConflictError     → 409 Conflict (duplicate key, ownership guard)
    ├── DataError         → 404 Not Found (store returned nothing usable)
    └── DatabaseError     → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class TechNotesError(Exception):
    """
    Base exception for all TechNotes application errors.

    Attributes:
        message:      User-facing error description (safe to return in API response)
        context:      Additional debug info (logged but NOT returned for 5xx errors)
        status_code:  HTTP status the global handler responds with
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        self.message = message
        self.context = context or {}
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(TechNotesError):
    """
    Raised when client input fails validation.

    When:    Missing required fields, empty roles, non-boolean flags, malformed ids.
    HTTP:    400 Bad Request (create endpoints report missing fields as 404)
    """

    status_code = 400

    def __init__(
        self,
        message: str = "All fields are required",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx, status_code=status_code)
        self.field = field


class NotFoundError(TechNotesError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing records (not an exception).
    Services convert None → NotFoundError so the status code is decided
    by the global handler rather than by each route.
    """

    status_code = 404

    def __init__(
        self,
        message: str = "The requested resource was not found",
        resource: Optional[str] = None,
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        ctx = context or {}
        if resource:
            ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx, status_code=status_code)


class ConflictError(TechNotesError):
    """
    Raised when a write would violate a uniqueness or ownership rule.

    When:    Duplicate username / note title, or deleting a user that still
             has notes assigned.
    HTTP:    409 Conflict (the ownership guard is reported as 400)
    """

    status_code = 409

    def __init__(
        self,
        message: str = "Resource conflict",
        context: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message=message, context=context, status_code=status_code)


class DataError(TechNotesError):
    """
    Raised when the store accepted a write but produced no usable record.

    This should not happen with a healthy database; it is surfaced to the
    client as invalid data (404) rather than as a server fault.
    """

    status_code = 404

    def __init__(
        self,
        message: str = "Invalid data received",
        context: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message=message, context=context, status_code=status_code)


class DatabaseError(TechNotesError):
    """
    Raised when database operations fail unexpectedly.

    What:    A database query, insert, or update failed.
    When:    Connection lost mid-query, deadlock, driver errors, etc.
    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic.
        Detailed error info is logged server-side only.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
