"""
Domain exceptions raised by the repository, aggregator and identity layers.

Each exception carries the HTTP status it maps to. The handler registered in
main.py turns any of them into a `{"message": ...}` JSON response.
"""

from typing import Optional

from fastapi import status


class MedTrackError(Exception):
    """Base class for all errors surfaced to API callers."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(MedTrackError):
    """Missing or malformed input."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthError(MedTrackError):
    """Bad credentials, or a missing, invalid or expired session token."""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Could not validate credentials"


class AccessDenied(MedTrackError):
    """The caller's role or ownership does not allow the operation."""
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied"


class NotFoundOrUnowned(MedTrackError):
    """The target row does not exist or belongs to someone else."""
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class StoreError(MedTrackError):
    """The underlying database failed."""
    default_message = "Database error"
