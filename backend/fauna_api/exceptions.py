"""
Fauna API: Custom Exception Hierarchy
========================================

What:  Application-specific exceptions for the error scenarios of the API.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return `{"error": "<message>"}` JSON bodies with the matching status code.
Who:   Raised by services and route helpers; caught by global handlers.

Exception Hierarchy:
    FaunaAPIError (base)
    ├── ValidationError   → 400 Bad Request (malformed ID, reference or body)
    ├── NotFoundError     → 404 Not Found
    └── DatabaseError     → 500 Internal Server Error (details logged only)
"""

from typing import Any, Dict, Optional


class FaunaAPIError(Exception):
    """
    Base exception for all Fauna API application errors.

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


class ValidationError(FaunaAPIError):
    """
    Raised when client input fails validation.

    When:    Path or reference identifier is not a 24-hex ObjectId, a
             filter identifier is malformed, or an update carries no fields.
    HTTP:    400 Bad Request

    Example response:
        {"error": "Invalid ID format"}
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


class NotFoundError(FaunaAPIError):
    """
    Raised when a requested document does not exist.

    When:    GET /api/<resource>/{id} or PATCH on an id that matches nothing.
    HTTP:    404 Not Found

    The driver returns None (or matched_count == 0) for missing documents;
    services convert that into this exception so routes stay free of
    status-code logic.
    """

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class DatabaseError(FaunaAPIError):
    """
    Raised when a document-store operation fails.

    When:    Server selection timeout, network error, operation deadline
             exceeded, command failure.
    HTTP:    500 Internal Server Error

    The client always receives a generic message; the driver error and the
    operation context are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
