from __future__ import annotations

from typing import Sequence

from .enums import ScanRejection


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class ConflictError(DomainError):
    """Raised when a write collides with an existing record (uniqueness)."""


class TransportError(DomainError):
    """Backend or device unreachable. The only condition worth a manual retry."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class RosterValidationError(ValidationError):
    """One or more roster rows failed validation; nothing was inserted."""

    def __init__(self, errors: Sequence[str], *, shown: int = 5):
        self.errors = list(errors)
        super().__init__("Validation errors:\n" + "\n".join(self.errors[:shown]))


class DuplicateEnrollmentError(ConflictError):
    """Some enrollment numbers already exist in the roster."""


class ScanRejected(DomainError):
    """A scan that did not record attendance. `reason` says why."""

    reason: ScanRejection


class InvalidPayloadError(ScanRejected, ValidationError):
    reason = ScanRejection.INVALID_FORMAT


class StudentNotFoundError(ScanRejected, NotFoundError):
    reason = ScanRejection.STUDENT_NOT_FOUND


class NoActiveSessionError(ScanRejected, NotFoundError):
    reason = ScanRejection.NO_ACTIVE_SESSION


class AlreadyMarkedError(ScanRejected, ConflictError):
    reason = ScanRejection.ALREADY_MARKED
