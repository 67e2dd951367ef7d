from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional

from .attendance.factory import TokenStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.publisher import ChangeBroadcaster
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceLedger
from .attendance.strategies.base import TokenStrategy
from .common.day_boundary import DayBoundaryResolver, utc_now
from .database.connection import DatabaseConnection, DBConfig
from .geofence.model import Coordinate
from .geofence.validator import GeofenceValidator
from .people.mysql_person_repository import MySQLPersonRepository
from .people.repository import PersonRepository


@dataclass(frozen=True)
class Container:
    attendance_repo: AttendanceRepository
    people_repo: PersonRepository

    days: DayBoundaryResolver
    geofence: GeofenceValidator
    token_strategy: TokenStrategy
    broadcaster: ChangeBroadcaster
    ledger: AttendanceLedger

    hub_token: str


def build_container(
    *,
    settings: Any,
    attendance_repo: Optional[AttendanceRepository] = None,
    people_repo: Optional[PersonRepository] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> Container:
    if attendance_repo is None or people_repo is None:
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(getattr(settings, "DB_CONFIG")))
        attendance_repo = attendance_repo or MySQLAttendanceRepository(conn)
        people_repo = people_repo or MySQLPersonRepository(conn)

    hub_token = str(getattr(settings, "HUB_TOKEN"))

    clock = clock or utc_now
    days = DayBoundaryResolver(getattr(settings, "HUB_TIMEZONE"), clock=clock)
    geofence = GeofenceValidator(
        Coordinate(float(getattr(settings, "HUB_LAT")), float(getattr(settings, "HUB_LNG"))),
        radius_m=float(getattr(settings, "HUB_RADIUS_M")),
    )
    token_strategy = TokenStrategyFactory().create(
        name=getattr(settings, "TOKEN_STRATEGY", "static"),
        expected_token=hub_token,
    )
    broadcaster = ChangeBroadcaster(queue_size=int(getattr(settings, "SUBSCRIBER_QUEUE_SIZE", 256)))
    ledger = AttendanceLedger(
        attendance_repo,
        people_repo,
        token_strategy=token_strategy,
        geofence=geofence,
        days=days,
        publisher=broadcaster,
        max_conflict_retries=int(getattr(settings, "MAX_CONFLICT_RETRIES", 3)),
        clock=clock,
    )

    return Container(
        attendance_repo=attendance_repo,
        people_repo=people_repo,
        days=days,
        geofence=geofence,
        token_strategy=token_strategy,
        broadcaster=broadcaster,
        ledger=ledger,
        hub_token=hub_token,
    )
