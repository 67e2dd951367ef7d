from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, List, Mapping, Optional

from ..common.day_boundary import DayBoundaryResolver, parse_instant
from ..core.enums import PresenceStatus
from ..core.exceptions import ValidationError
from .model import ObservedEntry, RosterEntry

# Placeholder the overview endpoint renders for a missing time.
_MISSING = {"", "—", "-"}


def _first(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def _nested(raw: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = raw.get(key)
    return value if isinstance(value, Mapping) else {}


def _instant(value: Any) -> Optional[datetime]:
    if value is None or (isinstance(value, str) and value.strip() in _MISSING):
        return None
    return parse_instant(value)


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def normalize_payload(raw: Mapping[str, Any], *, days: DayBoundaryResolver, arrived_at: datetime) -> ObservedEntry:
    """Build an entry from a snapshot row or a change event, whatever its field names."""
    if not isinstance(raw, Mapping):
        raise ValidationError("attendance payload must be an object")

    user = _nested(raw, "user")
    user_ref = raw.get("userId")
    if isinstance(user_ref, Mapping):
        user = user_ref
        user_ref = None

    check_in = _instant(_first(raw, "checkInAt", "checkIn", "checkInTime", "inTime"))
    check_out = _instant(_first(raw, "checkOutAt", "checkOut", "checkOutTime", "outTime"))

    day_raw = _first(raw, "day", "date", "attendanceDate", "createdAt")
    if day_raw is not None:
        day = days.day_key_of(day_raw)
    elif check_in is not None:
        day = days.day_key_of(check_in)
    else:
        day = None

    name = _first(raw, "personName", "name", "userName") or user.get("name")
    if not name:
        name = f"{raw.get('firstName') or ''} {raw.get('lastName') or ''}".strip()

    email = _text(_first(raw, "personEmail", "email") or user.get("email"))

    status_raw = _first(raw, "derivedStatus", "status")
    try:
        status = PresenceStatus(status_raw) if status_raw else None
    except ValueError:
        status = None
    if status is None:
        status = PresenceStatus.PRESENT if check_in else PresenceStatus.ABSENT

    return ObservedEntry(
        arrived_at=arrived_at,
        record_id=_text(_first(raw, "recordId", "id", "_id")),
        person_id=_text(_first(raw, "personId") or user_ref or user.get("_id") or user.get("id")),
        person_name=_text(name),
        person_role=_text(_first(raw, "personRole", "role", "userRole") or user.get("role")),
        email=email.lower() if email else None,
        day=day,
        check_in_at=check_in,
        check_out_at=check_out,
        status=status,
    )


def unwrap_rows(payload: Any) -> List[Mapping[str, Any]]:
    """Snapshot bodies are a bare list or wrapped under ``data``/``attendance``."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, Mapping):
        for key in ("data", "attendance", "records"):
            rows = payload.get(key)
            if isinstance(rows, list):
                return rows
    return []


def normalize_roster(rows: Iterable[Mapping[str, Any]]) -> List[RosterEntry]:
    out: List[RosterEntry] = []
    for r in rows:
        ident = _text(_first(r, "id", "_id", "personId"))
        if not ident:
            continue
        out.append(
            RosterEntry(
                id=ident,
                email=(_text(r.get("email")) or "").lower(),
                role=_text(r.get("role")),
                name=_text(r.get("name")),
            )
        )
    return out
