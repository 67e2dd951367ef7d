from __future__ import annotations

from typing import Dict, Iterable, Sequence, Set, Tuple

from ..core.enums import PresenceStatus
from .model import ObservedEntry, RosterEntry


def present_today(entries: Iterable[ObservedEntry], today: str) -> Tuple[Set[str], Set[str]]:
    """(emails, person ids) with a check-in on ``today``."""
    by_email: Set[str] = set()
    by_id: Set[str] = set()
    for e in entries:
        if e.day != today or e.check_in_at is None:
            continue
        if e.email:
            by_email.add(e.email.lower())
        if e.person_id:
            by_id.add(str(e.person_id))
    return by_email, by_id


def derive_presence(
    entries: Iterable[ObservedEntry],
    roster: Sequence[RosterEntry],
    today: str,
) -> Dict[str, PresenceStatus]:
    by_email, by_id = present_today(entries, today)

    presence: Dict[str, PresenceStatus] = {}
    for person in roster:
        if (person.email and person.email.lower() in by_email) or str(person.id) in by_id:
            presence[person.id] = PresenceStatus.PRESENT
        else:
            presence[person.id] = PresenceStatus.ABSENT
    return presence


def attendance_rate(statuses: Iterable[PresenceStatus]) -> int:
    """Share of present people, in whole percent (0 for an empty roster)."""
    statuses = list(statuses)
    if not statuses:
        return 0
    present = sum(1 for s in statuses if s == PresenceStatus.PRESENT)
    return round(present / len(statuses) * 100)
