"""Custom exception classes for the SaaS backend.

Every error carries the HTTP status it is reported with; ``main.py`` maps
them to ``{"detail": message}`` responses in one place.
"""

from fastapi import status


class SaaSPlatformError(Exception):
    """Base exception for the platform."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(self.message)


class AuthenticationError(SaaSPlatformError):
    """Raised when authentication fails.

    Messages must stay generic; the specific cause is only logged.
    """
    status_code = status.HTTP_401_UNAUTHORIZED


class AuthorizationError(SaaSPlatformError):
    """Raised when a principal lacks the role or permission for a route."""
    status_code = status.HTTP_403_FORBIDDEN


class ResourceNotFoundError(SaaSPlatformError):
    """Raised when a requested resource has no live record."""
    status_code = status.HTTP_404_NOT_FOUND


class ResourceConflictError(SaaSPlatformError):
    """Raised when a resource already exists."""
    status_code = status.HTTP_409_CONFLICT


class ValidationError(SaaSPlatformError):
    """Raised when input is well-formed but semantically invalid."""
    pass

