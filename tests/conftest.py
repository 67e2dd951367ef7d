from datetime import datetime, timezone

import pytest

from fakes import HUB, HUB_TOKEN, FakeClock, InMemoryAttendance, InMemoryPeople
from hub_attendance.attendance.publisher import ChangeBroadcaster
from hub_attendance.attendance.service import AttendanceLedger
from hub_attendance.attendance.strategies.static_token_strategy import StaticTokenStrategy
from hub_attendance.common.day_boundary import DayBoundaryResolver
from hub_attendance.core.enums import Role
from hub_attendance.geofence.validator import GeofenceValidator
from hub_attendance.people.model import Person


@pytest.fixture
def fixed_now() -> datetime:
    # 08:00 at the hub (Africa/Lagos is UTC+1, no DST)
    return datetime(2025, 3, 10, 7, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(fixed_now) -> FakeClock:
    return FakeClock(fixed_now)


@pytest.fixture
def days(clock) -> DayBoundaryResolver:
    return DayBoundaryResolver("Africa/Lagos", clock=clock)


@pytest.fixture
def people() -> InMemoryPeople:
    return InMemoryPeople(
        [
            Person(person_id=1, full_name="Ada Obi", email="ada@hub.test", role=Role.STAFF),
            Person(person_id=2, full_name="Tunde Bello", email="tunde@hub.test", role=Role.STUDENT),
            Person(person_id=3, full_name="Hub Admin", email="admin@hub.test", role=Role.ADMIN),
        ]
    )


@pytest.fixture
def attendance() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def geofence() -> GeofenceValidator:
    return GeofenceValidator(HUB, radius_m=100)


@pytest.fixture
def broadcaster() -> ChangeBroadcaster:
    return ChangeBroadcaster(queue_size=8)


@pytest.fixture
def ledger(attendance, people, days, geofence, broadcaster, clock) -> AttendanceLedger:
    return AttendanceLedger(
        attendance,
        people,
        token_strategy=StaticTokenStrategy(HUB_TOKEN),
        geofence=geofence,
        days=days,
        publisher=broadcaster,
        clock=clock,
    )
