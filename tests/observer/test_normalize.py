from datetime import datetime, timezone

import pytest

from hub_attendance.common.day_boundary import DayBoundaryResolver
from hub_attendance.core.enums import PresenceStatus
from hub_attendance.core.exceptions import ValidationError
from hub_attendance.observer.normalize import normalize_payload, normalize_roster, unwrap_rows

ARRIVED = datetime(2025, 3, 10, 9, 0, tzinfo=timezone.utc)


def _normalize(raw):
    return normalize_payload(raw, days=DayBoundaryResolver("Africa/Lagos"), arrived_at=ARRIVED)


def test_change_event_wire_form():
    entry = _normalize(
        {
            "recordId": 7,
            "personId": 1,
            "personName": "Ada Obi",
            "personRole": "staff",
            "personEmail": "Ada@Hub.test",
            "day": "2025-03-10",
            "checkInAt": "2025-03-10T07:00:00+00:00",
            "checkOutAt": None,
            "derivedStatus": "present",
        }
    )

    assert entry.record_id == "7"
    assert entry.person_id == "1"
    assert entry.email == "ada@hub.test"
    assert entry.check_in_at == datetime(2025, 3, 10, 7, 0, tzinfo=timezone.utc)
    assert entry.check_out_at is None
    assert entry.status == PresenceStatus.PRESENT
    assert entry.arrived_at == ARRIVED


def test_populated_user_reference_and_placeholders():
    entry = _normalize(
        {
            "_id": "r1",
            "userId": {"_id": "u1", "name": "Tunde Bello", "email": "TUNDE@hub.test", "role": "student"},
            "checkIn": "2025-03-10T07:00:00Z",
            "checkOut": "—",
            "date": "2025-03-10",
        }
    )

    assert entry.record_id == "r1"
    assert entry.person_id == "u1"
    assert entry.person_name == "Tunde Bello"
    assert entry.person_role == "student"
    assert entry.email == "tunde@hub.test"
    assert entry.check_out_at is None


def test_day_falls_back_to_hub_day_of_check_in():
    entry = _normalize({"email": "ada@hub.test", "checkInTime": "2025-03-09T23:30:00Z"})

    assert entry.day == "2025-03-10"


def test_name_from_first_and_last():
    entry = _normalize({"firstName": "Ada", "lastName": "Obi", "email": "ada@hub.test"})

    assert entry.person_name == "Ada Obi"
    assert entry.status == PresenceStatus.ABSENT
    assert entry.day is None


def test_non_object_payload_is_rejected():
    with pytest.raises(ValidationError):
        _normalize(["not", "an", "object"])


def test_unwrap_rows():
    rows = [{"recordId": 1}]

    assert unwrap_rows(rows) is rows
    assert unwrap_rows({"data": rows}) == rows
    assert unwrap_rows({"attendance": rows}) == rows
    assert unwrap_rows({"success": False}) == []
    assert unwrap_rows(None) == []


def test_normalize_roster_skips_rows_without_id():
    roster = normalize_roster(
        [
            {"id": 1, "name": "Ada Obi", "email": "ADA@hub.test", "role": "staff"},
            {"name": "ghost"},
        ]
    )

    assert len(roster) == 1
    assert roster[0].id == "1"
    assert roster[0].email == "ada@hub.test"
    assert roster[0].status == PresenceStatus.ABSENT
