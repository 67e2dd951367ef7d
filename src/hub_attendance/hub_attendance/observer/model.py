from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import PresenceStatus


@dataclass(frozen=True)
class ObservedEntry:
    """What an observer knows about one person's attendance on one day."""

    arrived_at: datetime
    record_id: Optional[str] = None
    person_id: Optional[str] = None
    person_name: Optional[str] = None
    person_role: Optional[str] = None
    email: Optional[str] = None
    day: Optional[str] = None
    check_in_at: Optional[datetime] = None
    check_out_at: Optional[datetime] = None
    status: Optional[PresenceStatus] = None

    @property
    def recency(self) -> Optional[datetime]:
        """Latest instant this entry reflects; used to reject out-of-order updates."""
        return self.check_out_at or self.check_in_at


@dataclass(frozen=True)
class RosterEntry:
    """Person known to account management, with presence derived for today."""

    id: str
    email: str
    role: Optional[str] = None
    name: Optional[str] = None
    status: PresenceStatus = PresenceStatus.ABSENT
