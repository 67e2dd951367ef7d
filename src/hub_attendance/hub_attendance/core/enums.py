from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles carried by people registered at the hub."""

    ADMIN = "admin"
    STAFF = "staff"
    STUDENT = "student"


class AttendanceState(str, Enum):
    """Per (person, day) state of the ledger."""

    NONE = "none"
    CHECKED_IN = "checkedIn"
    CHECKED_OUT = "checkedOut"


class ScanOutcome(str, Enum):
    """Successful results of a scan."""

    CHECKED_IN = "CheckedIn"
    CHECKED_OUT = "CheckedOut"
    ALREADY_COMPLETE = "AlreadyComplete"


class PresenceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"


class ErrorKind(str, Enum):
    """Error kinds surfaced to clients in the ``error`` field."""

    INVALID_TOKEN = "InvalidToken"
    OUT_OF_RANGE = "OutOfRange"
    INVALID_COORDINATE = "InvalidCoordinate"
    INVALID_INSTANT = "InvalidInstant"
    STORAGE_CONFLICT = "StorageConflict"
    NETWORK_FAILURE = "NetworkFailure"
    VALIDATION = "ValidationError"
