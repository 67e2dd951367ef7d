from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import PresenceStatus
from ..people.model import Person
from .model import AttendanceRecord


def isoformat_or_none(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class ChangeEvent:
    """Normalized notification of one ledger mutation."""

    record_id: int
    person_id: int
    person_name: str
    person_role: str
    person_email: str
    day: str
    check_in_at: Optional[datetime]
    check_out_at: Optional[datetime]
    derived_status: PresenceStatus

    @classmethod
    def from_record(cls, record: AttendanceRecord, person: Optional[Person]) -> "ChangeEvent":
        return cls(
            record_id=record.record_id,
            person_id=record.person_id,
            person_name=person.full_name if person else "",
            person_role=person.role.value if person else "",
            person_email=(person.email or "").lower() if person else "",
            day=record.day,
            check_in_at=record.check_in_at,
            check_out_at=record.check_out_at,
            derived_status=PresenceStatus.PRESENT if record.check_in_at else PresenceStatus.ABSENT,
        )

    def to_wire(self) -> dict:
        return {
            "recordId": self.record_id,
            "personId": self.person_id,
            "personName": self.person_name,
            "personRole": self.person_role,
            "personEmail": self.person_email,
            "day": self.day,
            "checkInAt": isoformat_or_none(self.check_in_at),
            "checkOutAt": isoformat_or_none(self.check_out_at),
            "derivedStatus": self.derived_status.value,
        }
