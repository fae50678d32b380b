"""
Custom exceptions for airday operations.

This module provides the exception classes reported to callers of the
scheduler. None of them are retried by the scheduler itself.
"""


class AirdayError(Exception):
    """Base exception for all airday errors."""

    code = "AIRDAY_ERROR"


class ValidationError(AirdayError):
    """Raised when a write payload is malformed. The store is left untouched."""

    code = "VALIDATION_ERROR"


class NotFoundError(AirdayError):
    """Raised when an operation targets a track id that is not in the playlist."""

    code = "TRACK_NOT_FOUND"

    def __init__(self, track_id: str) -> None:
        super().__init__(f"Track '{track_id}' not found")
        self.track_id = track_id


class UnauthorizedError(AirdayError):
    """Raised when a mutating call carries a bad or missing credential."""

    code = "UNAUTHORIZED"

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class SearchError(AirdayError):
    """Raised when the upstream song search fails."""

    code = "SEARCH_FAILED"
