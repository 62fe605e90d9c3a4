from __future__ import annotations

from typing import Optional

from .enums import ErrorKind


class DomainError(Exception):
    """Base exception for business rule violations."""

    kind: Optional[ErrorKind] = None

    def __init__(self, message: str = ""):
        super().__init__(message or self.default_message())

    @classmethod
    def default_message(cls) -> str:
        return cls.__doc__.strip().splitlines()[0] if cls.__doc__ else cls.__name__


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    kind = ErrorKind.INVALID_INTERVAL


class NotFoundError(DomainError):
    """Raised when an identifier does not resolve to an employee."""


class TransitionError(DomainError):
    """Expected, user-facing state machine violation."""


class AlreadyPresentError(TransitionError):
    """Employee is already clocked in."""

    kind = ErrorKind.ALREADY_PRESENT


class NotPresentError(TransitionError):
    """Employee is not clocked in."""

    kind = ErrorKind.NOT_PRESENT


class ActiveSubActivityError(TransitionError):
    """Stop the active break or work session before clocking out."""

    kind = ErrorKind.ACTIVE_SUB_ACTIVITY


class AlreadyOnBreakError(TransitionError):
    """Employee already has an active break."""

    kind = ErrorKind.ALREADY_ON_BREAK


class AlreadyWorkingError(TransitionError):
    """Employee already has an active work session."""

    kind = ErrorKind.ALREADY_WORKING


class NoActiveBreakError(TransitionError):
    """Employee has no active break."""

    kind = ErrorKind.NO_ACTIVE_BREAK


class NoActiveWorkError(TransitionError):
    """Employee has no active work session."""

    kind = ErrorKind.NO_ACTIVE_WORK


class InvalidIntervalError(TransitionError):
    """Timestamp precedes the start of the interval it would close or nest in."""

    kind = ErrorKind.INVALID_INTERVAL


class UnknownTargetError(TransitionError):
    """Order or category reference does not resolve."""

    kind = ErrorKind.UNKNOWN_TARGET


class InfrastructureError(DomainError):
    """Collaborator or resource fault, not caused by the request itself."""


class BusyError(InfrastructureError):
    """Another request for this employee is still in progress."""

    kind = ErrorKind.BUSY


class StoreError(InfrastructureError):
    """Interval store failed."""

    kind = ErrorKind.STORE_FAILURE


class OpenIntervalConflict(DomainError):
    """Store refused the write: an open interval already exists or the row is no longer open."""
