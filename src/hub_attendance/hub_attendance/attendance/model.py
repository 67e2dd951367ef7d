from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AttendanceState, ScanOutcome
from ..geofence.model import Coordinate


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one person's attendance on one hub day."""

    record_id: int
    person_id: int
    day: str
    check_in_at: datetime
    check_out_at: Optional[datetime] = None
    location: Optional[Coordinate] = None

    @property
    def state(self) -> AttendanceState:
        if self.check_out_at is None:
            return AttendanceState.CHECKED_IN
        return AttendanceState.CHECKED_OUT


@dataclass(frozen=True)
class ScanResult:
    kind: ScanOutcome
    record: AttendanceRecord
    # False when a concurrent request already wrote this record.
    applied: bool = True

    @property
    def check_in_at(self) -> datetime:
        return self.record.check_in_at

    @property
    def check_out_at(self) -> Optional[datetime]:
        return self.record.check_out_at

    @property
    def mutated(self) -> bool:
        return self.applied and self.kind != ScanOutcome.ALREADY_COMPLETE


@dataclass(frozen=True)
class TodayStatus:
    """Read-model for a person's current state on a given day."""

    person_id: int
    day: str
    state: AttendanceState
    check_in_at: Optional[datetime] = None
    check_out_at: Optional[datetime] = None
