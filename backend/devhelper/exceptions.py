"""
DevHelper Backend — Custom Exception Hierarchy
================================================

What:  Application-specific exceptions, one per failure kind.
How:   Each exception carries a short human-readable message and an optional
       context dict. Global handlers in main.py turn them into plain-text
       responses (or a redirect) with the right HTTP status.
Who:   Raised by services and the session guard; caught by global handlers.

Exception Hierarchy:
    DevHelperError (base)
    ├── ValidationError          → 400 Bad Request
    ├── ConflictError            → 400 Bad Request (duplicate username)
    ├── InvalidCredentialsError  → 400 Bad Request
    ├── UnauthenticatedError     → 303 to /login (pages) or 401 (actions)
    ├── NotFoundError            → 404 Not Found
    ├── DatabaseError            → 500 Internal Server Error
    ├── SessionError             → 500 Internal Server Error
    └── GenerationError          → 500 Internal Server Error

The message is safe to show to the user. The context is logged server-side
and never returned.
"""

from typing import Any, Dict, Optional


class DevHelperError(Exception):
    """
    Base exception for all DevHelper application errors.

    Attributes:
        message:  User-facing error description (returned in the response body)
        context:  Additional debug info (logged, NOT returned to the client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(DevHelperError):
    """
    Raised when a submitted form is missing a required value.

    HTTP: 400 Bad Request
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


class ConflictError(DevHelperError):
    """
    Raised when registering a username that is already taken.

    HTTP: 400 Bad Request. Raised both by the lookup before insert and by
    the unique constraint when two registrations race.
    """

    def __init__(
        self,
        message: str = "User already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidCredentialsError(DevHelperError):
    """
    Raised when a login fails.

    HTTP: 400 Bad Request. The message is identical for an unknown username
    and a wrong password.
    """

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Invalid username or password", context=context)


class UnauthenticatedError(DevHelperError):
    """
    Raised by the session guard when a protected route has no valid session.

    HTTP:
        redirect=True   → 303 See Other to /login (page views)
        redirect=False  → 401 Unauthorized with the message (form actions)
    """

    def __init__(
        self,
        message: str = "You must be logged in",
        redirect: bool = True,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.redirect = redirect


class NotFoundError(DevHelperError):
    """
    Raised when a snippet does not exist or belongs to another user.

    HTTP: 404 Not Found. Both cases share the same response so that a caller
    cannot tell someone else's snippet from a missing one when reading.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(DevHelperError):
    """
    Raised when a store operation fails unexpectedly.

    HTTP: 500 Internal Server Error. The message names the operation
    ("Error in saving the snippet"); driver details stay in the context.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class SessionError(DevHelperError):
    """
    Raised when the server-side session cannot be created or destroyed.

    HTTP: 500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "Error in logging out",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class GenerationError(DevHelperError):
    """
    Raised when the text-generation provider fails.

    HTTP: 500 Internal Server Error. There is no retry; the user can submit
    the prompt again.
    """

    def __init__(
        self,
        message: str = "Error in generating the snippet",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
