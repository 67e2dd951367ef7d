from __future__ import annotations

from typing import Optional

from .enums import ErrorKind


class DomainError(Exception):
    """Base exception for business rule violations."""

    kind: ErrorKind = ErrorKind.VALIDATION


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AttendanceError(DomainError):
    """Base for the attendance error kinds reported to clients."""

    kind: ErrorKind


class InvalidTokenError(AttendanceError):
    kind = ErrorKind.INVALID_TOKEN


class OutOfRangeError(AttendanceError):
    kind = ErrorKind.OUT_OF_RANGE

    def __init__(self, message: str, *, distance_m: Optional[float] = None):
        super().__init__(message)
        self.distance_m = distance_m


class InvalidCoordinateError(AttendanceError):
    kind = ErrorKind.INVALID_COORDINATE


class InvalidInstantError(AttendanceError):
    kind = ErrorKind.INVALID_INSTANT


class StorageConflictError(AttendanceError):
    """Concurrent write lost against the (person, day) uniqueness rule."""

    kind = ErrorKind.STORAGE_CONFLICT


class NetworkFailureError(AttendanceError):
    """Transport-level failure reaching the ledger or snapshot endpoint."""

    kind = ErrorKind.NETWORK_FAILURE
