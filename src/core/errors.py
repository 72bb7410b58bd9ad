from __future__ import annotations


class UsersCacheError(Exception):
    """Base error for the users cache server."""


class ValidationError(UsersCacheError):
    """Raised when user input is invalid."""


class ExternalServiceError(UsersCacheError):
    """Raised when the remote users API fails."""


class NotFoundError(UsersCacheError):
    """Raised when a requested resource is not found."""
