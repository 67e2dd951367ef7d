from __future__ import annotations

from typing import Iterable, Mapping, Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Person


class PersonRepository(Protocol):
    """Read-only view over registered people."""

    def get_by_id(self, person_id: int) -> Optional[Person]:
        raise NotImplementedError

    def get_many(self, person_ids: Iterable[int]) -> Mapping[int, Person]:
        raise NotImplementedError

    def list_roster(self, *, role: Optional[Role] = None) -> Sequence[Person]:
        raise NotImplementedError
