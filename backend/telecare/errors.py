"""Error taxonomy of the booking core.

Every error is recoverable by the caller. The core performs no partial
mutation before raising and never retries on its own.
"""
from typing import Optional


class BookingError(Exception):
    """Base class for all booking core failures."""

    def __init__(self, message: str, *, retryable: bool = False) -> None:
        super().__init__(message)
        self.retryable = retryable


class ValidationError(BookingError):
    """Missing or malformed input, e.g. blank symptoms."""


class SlotUnavailable(BookingError):
    """Requested time is not in the doctor's open set for that date."""


class SlotConflict(BookingError):
    """Another active appointment already holds the slot."""


class InvalidTransition(BookingError):
    """Illegal lifecycle move, or a stale concurrent update."""

    def __init__(
        self,
        message: str,
        *,
        current: Optional[str] = None,
        target: Optional[str] = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message, retryable=retryable)
        self.current = current
        self.target = target


class NotFound(BookingError):
    """Unknown appointment, doctor, interval or notification id."""
