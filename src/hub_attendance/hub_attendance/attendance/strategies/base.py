from __future__ import annotations

from abc import ABC, abstractmethod


class TokenStrategy(ABC):
    """Strategy Pattern: decide whether a decoded hub scan is acceptable.

    The ledger only depends on this interface, so a rotating or signed
    token scheme can replace the static one without touching it.
    """

    @abstractmethod
    def validate(self, decoded: str) -> bool:
        raise NotImplementedError
