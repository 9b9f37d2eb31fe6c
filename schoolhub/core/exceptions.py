"""
Domain exceptions.

Each one is an ``HTTPException`` so services can raise them directly and the
handlers in ``schoolhub.core.error_handlers`` turn them into the standard
``{"success": false, "message": ...}`` envelope.
"""
from typing import Any, Dict, List, Optional
from fastapi import HTTPException, status


class SchoolHubError(HTTPException):
    """Base exception for the API."""

    def __init__(
        self,
        status_code: int,
        message: str,
        errors: Optional[List[Dict[str, Any]]] = None,
        headers: Optional[Dict[str, str]] = None
    ):
        super().__init__(status_code=status_code, detail=message, headers=headers)
        self.message = message
        self.errors = errors


class ValidationError(SchoolHubError):
    """Malformed or missing input."""

    def __init__(self, message: str = "Validation failed", errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(status.HTTP_400_BAD_REQUEST, message, errors=errors)


class AuthenticationError(SchoolHubError):
    """The caller's identity could not be established."""

    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(
            status.HTTP_401_UNAUTHORIZED,
            message,
            headers={"WWW-Authenticate": "Bearer"}
        )


class AuthorizationError(SchoolHubError):
    """Identity is known but lacks the required permission or relation."""

    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(status.HTTP_403_FORBIDDEN, message)


class NotFoundError(SchoolHubError):
    """Resource does not exist inside the caller's tenant."""

    def __init__(self, resource: str = "Resource"):
        super().__init__(status.HTTP_404_NOT_FOUND, f"{resource} not found")


class ConflictError(SchoolHubError):
    """Uniqueness violation or scheduling overlap."""

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(status.HTTP_409_CONFLICT, message, errors=errors)
