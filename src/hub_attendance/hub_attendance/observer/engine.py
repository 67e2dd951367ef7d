from __future__ import annotations

import logging
from dataclasses import fields, replace
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from ..common.day_boundary import DayBoundaryResolver, utc_now
from ..core.enums import PresenceStatus
from .identity import same_record
from .model import ObservedEntry, RosterEntry
from .normalize import normalize_payload
from .presence import attendance_rate, derive_presence

logger = logging.getLogger(__name__)

_MERGED_FIELDS = tuple(f.name for f in fields(ObservedEntry) if f.name != "arrived_at")


def overlay(existing: ObservedEntry, incoming: ObservedEntry) -> ObservedEntry:
    """Field-level last write wins; fields the incoming entry lacks are kept."""
    changes = {}
    for name in _MERGED_FIELDS:
        value = getattr(incoming, name)
        if value is None or value == "":
            continue
        if getattr(existing, name) != value:
            changes[name] = value
    # A known check-in always means present, whatever status the incoming payload claims.
    if changes.get("status") == PresenceStatus.ABSENT and (changes.get("check_in_at") or existing.check_in_at):
        del changes["status"]
    return replace(existing, **changes) if changes else existing


def is_stale(existing: ObservedEntry, incoming: ObservedEntry) -> bool:
    """True when ``incoming`` reflects an older state than ``existing``."""
    if existing.recency is None or incoming.recency is None:
        return False
    return incoming.recency < existing.recency


class ObserverMergeEngine:
    """Today's attendance as known to one observer.

    Folds a bulk snapshot and live change events into one de-duplicated
    collection (newest first) and derives roster presence after every
    merge. Not thread-safe: one consumer owns an engine.
    """

    def __init__(self, days: DayBoundaryResolver, *, clock: Callable[[], datetime] = utc_now):
        self._days = days
        self._clock = clock
        self._entries: List[ObservedEntry] = []
        self._roster: List[RosterEntry] = []
        self._presence: Dict[str, PresenceStatus] = {}
        self.stale_ignored = 0

    @property
    def days(self) -> DayBoundaryResolver:
        return self._days

    @property
    def entries(self) -> Tuple[ObservedEntry, ...]:
        return tuple(self._entries)

    @property
    def presence(self) -> Dict[str, PresenceStatus]:
        return dict(self._presence)

    @property
    def roster(self) -> List[RosterEntry]:
        return [replace(p, status=self._presence.get(p.id, PresenceStatus.ABSENT)) for p in self._roster]

    def today(self) -> str:
        return self._days.today(self._clock())

    def set_roster(self, roster: Iterable[RosterEntry]) -> None:
        self._roster = list(roster)
        self._refresh_presence()

    def normalize(self, raw: Mapping[str, Any]) -> ObservedEntry:
        return normalize_payload(raw, days=self._days, arrived_at=self._clock())

    def apply(self, entry: ObservedEntry) -> bool:
        """Merge one change; returns whether the collection changed."""
        changed = self._merge(entry)
        self._resort()
        self._refresh_presence()
        return changed

    def apply_payload(self, raw: Mapping[str, Any]) -> bool:
        return self.apply(self.normalize(raw))

    def load_snapshot(self, entries: Iterable[ObservedEntry]) -> int:
        """Merge a bulk snapshot with the same rules as live events."""
        changed = 0
        for entry in entries:
            if self._merge(entry):
                changed += 1
        self._resort()
        self._refresh_presence()
        return changed

    def attendance_rate(self) -> int:
        return attendance_rate(self._presence.get(p.id, PresenceStatus.ABSENT) for p in self._roster)

    def _find_match(self, incoming: ObservedEntry) -> Optional[int]:
        for idx, existing in enumerate(self._entries):
            if same_record(existing, incoming):
                return idx
        return None

    def _merge(self, incoming: ObservedEntry) -> bool:
        idx = self._find_match(incoming)
        if idx is None:
            self._entries.insert(0, incoming)
            return True

        existing = self._entries[idx]
        if is_stale(existing, incoming):
            self.stale_ignored += 1
            logger.debug(
                "ignored out-of-order update for person=%s day=%s",
                incoming.person_id or incoming.email,
                incoming.day,
            )
            return False

        merged = overlay(existing, incoming)
        if merged is existing:
            return False
        self._entries[idx] = merged
        return True

    def _sort_ts(self, entry: ObservedEntry) -> float:
        if entry.check_in_at is not None:
            return entry.check_in_at.timestamp()
        if entry.day:
            return self._days.start_of_day(entry.day).timestamp()
        return entry.arrived_at.timestamp()

    def _resort(self) -> None:
        self._entries.sort(key=self._sort_ts, reverse=True)

    def _refresh_presence(self) -> None:
        self._presence = derive_presence(self._entries, self._roster, self.today())
