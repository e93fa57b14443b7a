"""
Domain exceptions for the booking and ordering services.

Routers translate these into HTTP responses (see ``tablebook.main``);
services never raise ``HTTPException`` themselves.
"""
from typing import Dict, Optional


class BookingError(Exception):
    """Base class for all domain errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BookingError):
    """
    Malformed or missing request fields.

    ``fields`` maps each offending field to a human readable reason so the
    caller can correct all of them in one go.
    """

    def __init__(self, fields: Dict[str, str], message: Optional[str] = None):
        self.fields = dict(fields)
        if message is None:
            message = "Invalid or missing fields: " + ", ".join(sorted(self.fields))
        super().__init__(message)


class ConflictError(BookingError):
    """The requested slot is taken. Carries the busy window that blocked it."""

    def __init__(self, message: str, window_start: Optional[str] = None, window_end: Optional[str] = None):
        super().__init__(message)
        self.window_start = window_start
        self.window_end = window_end


class NotFoundError(BookingError):
    """Referenced row does not exist."""


class NotificationFailure(BookingError):
    """An SMS or email could not be delivered. Logged, never surfaced."""


class SettingsError(BookingError):
    """A restaurant setting row could not be parsed into its typed form."""
