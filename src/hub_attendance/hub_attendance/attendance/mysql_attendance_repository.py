from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_db_datetime, to_db_datetime
from ..geofence.model import Coordinate
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    record_id, person_id, work_day, check_in_at, check_out_at,
    check_in_lat, check_in_lng, check_out_lat, check_out_lng
"""


def _row_to_record(r: Dict[str, Any]) -> AttendanceRecord:
    if r.get("check_out_lat") is not None and r.get("check_out_lng") is not None:
        location = Coordinate(r["check_out_lat"], r["check_out_lng"])
    else:
        location = Coordinate(r["check_in_lat"], r["check_in_lng"])

    return AttendanceRecord(
        record_id=int(r["record_id"]),
        person_id=int(r["person_id"]),
        day=str(r["work_day"]),
        check_in_at=from_db_datetime(r["check_in_at"]),
        check_out_at=from_db_datetime(r.get("check_out_at")),
        location=location,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_person_and_day(self, person_id: int, day: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE person_id=%s AND work_day=%s",
                (int(person_id), day),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE record_id=%s", (int(record_id),))
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def list_for_day(self, day: str) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE work_day=%s ORDER BY check_in_at DESC",
                (day,),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def create_checkin(
        self,
        *,
        person_id: int,
        day: str,
        check_in_at: datetime,
        location: Coordinate,
    ) -> AttendanceRecord:
        # Duplicate (person_id, work_day) surfaces as StorageConflictError from db_cursor.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(person_id, work_day, check_in_at, check_in_lat, check_in_lng)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(person_id), day, to_db_datetime(check_in_at), location.lat, location.lng),
            )
            record_id = int(cur.lastrowid)

        return AttendanceRecord(
            record_id=record_id,
            person_id=int(person_id),
            day=day,
            check_in_at=check_in_at,
            check_out_at=None,
            location=location,
        )

    def close_checkout(
        self,
        *,
        record_id: int,
        check_out_at: datetime,
        location: Optional[Coordinate] = None,
    ) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_at=%s, check_out_lat=%s, check_out_lng=%s
                WHERE record_id=%s AND check_out_at IS NULL
                """,
                (
                    to_db_datetime(check_out_at),
                    location.lat if location else None,
                    location.lng if location else None,
                    int(record_id),
                ),
            )
            if cur.rowcount == 0:
                return None

        return self.get_by_id(record_id)
