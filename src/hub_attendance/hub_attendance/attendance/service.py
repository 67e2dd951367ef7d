from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Optional

from ..common.day_boundary import DayBoundaryResolver, parse_instant, utc_now
from ..core.constants import DEFAULT_CONFLICT_RETRIES
from ..core.enums import AttendanceState, ScanOutcome
from ..core.exceptions import (
    InvalidInstantError,
    InvalidTokenError,
    OutOfRangeError,
    StorageConflictError,
    ValidationError,
)
from ..geofence.model import Coordinate
from ..geofence.validator import GeofenceValidator
from ..people.model import Person
from ..people.repository import PersonRepository
from .events import ChangeEvent
from .model import AttendanceRecord, ScanResult, TodayStatus
from .publisher import ChangeBroadcaster
from .repository import AttendanceRepository
from .strategies.base import TokenStrategy

logger = logging.getLogger(__name__)


class AttendanceLedger:
    """Use case: turn hub scans into one attendance record per person per day.

    State per (person, day): NONE -> CHECKED_IN -> CHECKED_OUT (terminal).
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        people: PersonRepository,
        *,
        token_strategy: TokenStrategy,
        geofence: GeofenceValidator,
        days: DayBoundaryResolver,
        publisher: Optional[ChangeBroadcaster] = None,
        max_conflict_retries: int = DEFAULT_CONFLICT_RETRIES,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._attendance = attendance
        self._people = people
        self._tokens = token_strategy
        self._geofence = geofence
        self._days = days
        self._publisher = publisher
        self._max_retries = max(0, int(max_conflict_retries))
        self._clock = clock

    def record_scan(
        self,
        person_id: int,
        coordinate: Coordinate,
        decoded_token: str,
        *,
        now: Optional[datetime] = None,
    ) -> ScanResult:
        if not self._tokens.validate(decoded_token):
            raise InvalidTokenError("Invalid QR code")

        if not self._geofence.is_within_hub(coordinate.lat, coordinate.lng):
            distance = self._geofence.distance_m(coordinate.lat, coordinate.lng)
            raise OutOfRangeError(
                f"You are too far from the hub location ({distance:.0f} m)",
                distance_m=distance,
            )

        now = parse_instant(now or self._clock())
        day = self._days.day_key_of(now)

        person = self._people.get_by_id(person_id)
        if not person:
            raise ValidationError("Unknown person")

        attempt = 0
        while True:
            try:
                result = self._apply_scan(
                    person_id=person_id,
                    day=day,
                    coordinate=coordinate,
                    now=now,
                    retrying=attempt > 0,
                )
                break
            except StorageConflictError:
                attempt += 1
                if attempt > self._max_retries:
                    logger.error("giving up on scan for person %s day %s after %s conflicts", person_id, day, attempt)
                    raise
                logger.warning("scan conflict for person %s day %s, retrying (%s)", person_id, day, attempt)

        logger.info("person %s day %s -> %s", person_id, day, result.kind.value)
        if result.mutated:
            self._publish(result.record, person)
        return result

    def _apply_scan(
        self,
        *,
        person_id: int,
        day: str,
        coordinate: Coordinate,
        now: datetime,
        retrying: bool = False,
    ) -> ScanResult:
        existing = self._attendance.get_for_person_and_day(person_id, day)

        if existing is None:
            record = self._attendance.create_checkin(
                person_id=person_id,
                day=day,
                check_in_at=now,
                location=coordinate,
            )
            return ScanResult(kind=ScanOutcome.CHECKED_IN, record=record)

        if existing.check_out_at is None:
            if now <= existing.check_in_at:
                if retrying:
                    # Lost the first-insert race to a scan stamped at or after ours.
                    return ScanResult(kind=ScanOutcome.CHECKED_IN, record=existing, applied=False)
                raise InvalidInstantError("Check-out must be later than check-in")
            record = self._attendance.close_checkout(
                record_id=existing.record_id,
                check_out_at=now,
                location=coordinate,
            )
            if record is None:
                raise StorageConflictError(f"Record {existing.record_id} was closed concurrently")
            return ScanResult(kind=ScanOutcome.CHECKED_OUT, record=record)

        return ScanResult(kind=ScanOutcome.ALREADY_COMPLETE, record=existing)

    def _publish(self, record: AttendanceRecord, person: Person) -> None:
        if not self._publisher:
            return
        self._publisher.publish(ChangeEvent.from_record(record, person))

    def today_status(self, person_id: int, *, now: Optional[datetime] = None) -> TodayStatus:
        day = self._days.today(now)
        record = self._attendance.get_for_person_and_day(person_id, day)
        if not record:
            return TodayStatus(person_id=person_id, day=day, state=AttendanceState.NONE)
        return TodayStatus(
            person_id=person_id,
            day=day,
            state=record.state,
            check_in_at=record.check_in_at,
            check_out_at=record.check_out_at,
        )

    def snapshot(self, day: Optional[str] = None, *, now: Optional[datetime] = None) -> List[ChangeEvent]:
        """All records of ``day`` (default today) in ChangeEvent shape, newest first."""
        day = self._days.day_key_of(day) if day else self._days.today(now)
        records = list(self._attendance.list_for_day(day))
        people = self._people.get_many({r.person_id for r in records})

        events = []
        for r in records:
            person = people.get(r.person_id)
            if person is None:
                logger.warning("snapshot skips record %s: person %s not found", r.record_id, r.person_id)
                continue
            events.append(ChangeEvent.from_record(r, person))
        events.sort(key=lambda e: e.check_in_at, reverse=True)
        return events
