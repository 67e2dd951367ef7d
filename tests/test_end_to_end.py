"""Scan at the hub, then watch the change reach a live and a late observer."""

from __future__ import annotations

import json
from datetime import timedelta

import pytest

from fakes import HUB, HUB_TOKEN, FakeClock, north_of
from hub_attendance.core.enums import PresenceStatus, ScanOutcome
from hub_attendance.core.exceptions import InvalidTokenError, OutOfRangeError
from hub_attendance.observer.engine import ObserverMergeEngine
from hub_attendance.observer.normalize import normalize_roster


def _observer(days, clock, people):
    engine = ObserverMergeEngine(days, clock=clock)
    engine.set_roster(
        normalize_roster(
            [{"id": p.person_id, "name": p.full_name, "email": p.email, "role": p.role.value} for p in people.list_roster()]
        )
    )
    return engine


def _over_the_wire(event):
    return json.loads(json.dumps(event.to_wire()))


def test_live_and_late_observers_agree(ledger, broadcaster, days, people, fixed_now):
    observer_clock = FakeClock(fixed_now + timedelta(hours=2))
    live = _observer(days, observer_clock, people)
    sub = broadcaster.subscribe()

    person_at_40m = north_of(HUB, 40)
    first = ledger.record_scan(1, person_at_40m, HUB_TOKEN, now=fixed_now)
    second = ledger.record_scan(1, person_at_40m, HUB_TOKEN, now=fixed_now + timedelta(seconds=3600))

    assert first.kind == ScanOutcome.CHECKED_IN
    assert second.kind == ScanOutcome.CHECKED_OUT

    while True:
        event = sub.get(timeout=0.05)
        if event is None:
            break
        live.apply_payload(_over_the_wire(event))

    late = _observer(days, observer_clock, people)
    late.load_snapshot(late.normalize(_over_the_wire(e)) for e in ledger.snapshot(now=fixed_now))

    for engine in (live, late):
        (entry,) = engine.entries
        assert entry.person_id == "1"
        assert entry.check_in_at == fixed_now
        assert entry.check_out_at == fixed_now + timedelta(seconds=3600)
        assert engine.presence["1"] == PresenceStatus.PRESENT
        assert engine.presence["2"] == PresenceStatus.ABSENT


@pytest.mark.parametrize(
    "decoded, meters, error",
    [
        ("HUB-ATTENDANCE-1999", 10, InvalidTokenError),
        ("WRONG-TOKEN", 10, InvalidTokenError),
        (HUB_TOKEN, 150, OutOfRangeError),
        (HUB_TOKEN, 5000, OutOfRangeError),
    ],
)
def test_rejected_scans_reach_no_observer(ledger, broadcaster, attendance, fixed_now, decoded, meters, error):
    sub = broadcaster.subscribe()

    with pytest.raises(error):
        ledger.record_scan(1, north_of(HUB, meters), decoded, now=fixed_now)

    assert attendance.list_for_day("2025-03-10") == []
    assert sub.get(timeout=0.01) is None
