"""
AssetVault Backend — Custom Exception Hierarchy
=================================================

What:  Defines application-specific exceptions for different error scenarios.
Why:   Each failure kind maps to one HTTP status and one machine-readable
       error code, so route handlers never build error responses themselves.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses.
Who:   Raised by services and stores; caught by global handlers.

Exception Hierarchy:
    AssetVaultError (base)
    ├── ValidationError          → 400 validation_error
    ├── NotFoundError            → 400 not_found
    ├── UsernameConflictError    → 400 username_conflict
    ├── InvalidCredentialsError  → 400 invalid_credentials
    ├── StoreError               → 400 store_error
    └── UnauthenticatedError     → 401 unauthenticated

    Every client-visible failure is a 4xx. Only truly unexpected exceptions
    (bugs) fall through to the catch-all 500 handler.
"""

from typing import Any, Dict, List, Optional


class AssetVaultError(Exception):
    """
    Base exception for all AssetVault application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged; returned only where a handler says so)
    """

    status_code = 400
    error_code = "error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(AssetVaultError):
    """
    Raised when client input fails validation.

    Carries the full list of field-level violations so the client can fix
    every problem in one round trip.

    Example response:
        {
            "error": "validation_error",
            "message": "Request body failed validation",
            "details": {"violations": [
                {"field": "type", "reason": "Input should be 'Plugin', ...", "kind": "enum"}
            ]}
        }
    """

    error_code = "validation_error"

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        violations: Optional[List[Dict[str, Any]]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        if violations is not None:
            ctx["violations"] = violations
        super().__init__(message=message, context=ctx)
        self.field = field
        self.violations = violations or []


class NotFoundError(AssetVaultError):
    """
    Raised when a requested record does not exist.

    HTTP: 400, matching the public contract of the asset routes
    (an unknown id is treated as an invalid id).
    """

    error_code = "not_found"

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


class UsernameConflictError(AssetVaultError):
    """Raised on registration when the username is already taken."""

    error_code = "username_conflict"

    def __init__(self, username: str, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["username"] = username
        super().__init__(message=f"Username '{username}' is already taken", context=ctx)


class InvalidCredentialsError(AssetVaultError):
    """
    Raised on login when the username is unknown or the password is wrong.

    The message is identical in both cases so the response does not reveal
    which usernames exist.
    """

    error_code = "invalid_credentials"

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Username or password is invalid", context=context)


class StoreError(AssetVaultError):
    """
    Raised when the persistent store fails (connectivity, constraint, driver).

    Security Note:
        The message returned to the client is always generic. The original
        driver error is kept in `context` and logged server-side only.
    """

    error_code = "store_error"

    def __init__(
        self,
        message: str = "A storage error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UnauthenticatedError(AssetVaultError):
    """
    Raised when a request lacks a valid bearer token.

    When: Missing Authorization header, malformed/expired/forged token, or a
          token whose user no longer exists.
    HTTP: 401 with a `WWW-Authenticate: Bearer` header.
    """

    status_code = 401
    error_code = "unauthenticated"

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
