"""Who an observed entry belongs to.

Snapshots and live events are serialized along different paths, so an
entry may carry a person id, an email, or both. Matching tries the id
first and falls back to the lower-cased email.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from .model import ObservedEntry


@dataclass(frozen=True)
class ById:
    person_id: str


@dataclass(frozen=True)
class ByEmail:
    email: str


Identity = Union[ById, ByEmail]


def identity_of(entry: ObservedEntry) -> Optional[Identity]:
    if entry.person_id:
        return ById(str(entry.person_id))
    if entry.email:
        return ByEmail(entry.email.lower())
    return None


def shared_identity(a: ObservedEntry, b: ObservedEntry) -> Optional[Identity]:
    """Identity both entries agree on, or None when they are different people."""
    if a.person_id and b.person_id:
        ident = ById(str(a.person_id))
        return ident if ident == ById(str(b.person_id)) else None

    if a.email and b.email:
        ident = ByEmail(a.email.lower())
        return ident if ident == ByEmail(b.email.lower()) else None

    return None


def same_record(existing: ObservedEntry, incoming: ObservedEntry) -> bool:
    return existing.day == incoming.day and shared_identity(existing, incoming) is not None
