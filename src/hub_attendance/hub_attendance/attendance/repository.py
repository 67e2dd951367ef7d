from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..geofence.model import Coordinate
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """Storage for the ledger.

    Implementations must enforce one record per (person_id, day) and
    signal a lost race with ``StorageConflictError``.
    """

    def get_for_person_and_day(self, person_id: int, day: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_day(self, day: str) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create_checkin(
        self,
        *,
        person_id: int,
        day: str,
        check_in_at: datetime,
        location: Coordinate,
    ) -> AttendanceRecord:
        """Insert a new open record; ``StorageConflictError`` on duplicate (person_id, day)."""

        raise NotImplementedError

    def close_checkout(
        self,
        *,
        record_id: int,
        check_out_at: datetime,
        location: Optional[Coordinate] = None,
    ) -> Optional[AttendanceRecord]:
        """Set check-out only if still open; returns None when another writer got there first."""

        raise NotImplementedError
