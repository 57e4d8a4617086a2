"""
Protofolio Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for the record store.
Why:   Targeted error handling with the right HTTP status and a message that is
       safe to show to the user. Generic Python exceptions would leak details.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) turn them into
       structured JSON error responses.
Who:   Raised by the validation layer and RecordService; caught by handlers.

Exception Hierarchy:
    ProtofolioError (base)
    ├── ValidationError   → 400 Bad Request (message passed through verbatim)
    ├── NotFoundError     → 404 Not Found
    └── DatabaseError     → 500 Internal Server Error (the infrastructure fault;
                                generic message to client, detail logged)
"""

from typing import Any, Dict, Optional


class ProtofolioError(Exception):
    """
    Base exception for all Protofolio application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned for server faults)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(ProtofolioError):
    """
    Raised when record input fails validation.

    When:    Missing title or link, over-long fields, link outside the
             recognized host/path shapes, unparseable request body.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Please provide a valid Figma URL",
            "details": {"field": "externalUrl"}
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


class NotFoundError(ProtofolioError):
    """
    Raised when a requested record does not exist.

    When:    GET/PUT/DELETE /records/{id} with an unknown (or malformed) id.
    HTTP:    404 Not Found

    SQLAlchemy returns None for missing rows; the service converts that
    into this exception so the route layer stays free of status-code logic.
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


class DatabaseError(ProtofolioError):
    """
    Raised when the record store is unreachable or a query fails.

    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic.
        Driver errors, SQL text and constraint names are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
