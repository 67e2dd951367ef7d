from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class Person:
    """Domain entity: a registered person (owned by account management).

    The attendance core only reads it.
    """

    person_id: int
    full_name: str
    email: str
    role: Role
    is_active: bool = True
