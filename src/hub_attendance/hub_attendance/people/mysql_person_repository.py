from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Person
from .repository import PersonRepository


def _row_to_person(r: Dict[str, Any]) -> Person:
    return Person(
        person_id=int(r["person_id"]),
        full_name=r["full_name"],
        email=(r.get("email") or "").lower(),
        role=Role(r["role"]),
        is_active=bool(r.get("is_active", True)),
    )


class MySQLPersonRepository(PersonRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, person_id: int) -> Optional[Person]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT person_id, full_name, email, role, is_active
                FROM people
                WHERE person_id=%s
                """,
                (int(person_id),),
            )
            row = fetchone(cur)
            return _row_to_person(row) if row else None

    def get_many(self, person_ids: Iterable[int]) -> Mapping[int, Person]:
        ids = sorted({int(i) for i in person_ids})
        if not ids:
            return {}

        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT person_id, full_name, email, role, is_active
                FROM people
                WHERE person_id IN ({placeholders})
                """,
                tuple(ids),
            )
            return {p.person_id: p for p in (_row_to_person(r) for r in fetchall(cur))}

    def list_roster(self, *, role: Optional[Role] = None) -> Sequence[Person]:
        clauses = ["is_active=1"]
        params: list[object] = []
        if role is not None:
            clauses.append("role=%s")
            params.append(role.value)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT person_id, full_name, email, role, is_active
                FROM people
                WHERE {where}
                ORDER BY created_at DESC, person_id DESC
                """,
                tuple(params),
            )
            return [_row_to_person(r) for r in fetchall(cur)]
