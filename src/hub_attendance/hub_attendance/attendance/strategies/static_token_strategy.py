from __future__ import annotations

import hmac

from .base import TokenStrategy


class StaticTokenStrategy(TokenStrategy):
    """Accept exactly one configured token string."""

    def __init__(self, expected: str):
        if not expected:
            raise ValueError("expected token must not be empty")
        self._expected = expected

    def validate(self, decoded: str) -> bool:
        if not isinstance(decoded, str) or not decoded:
            return False
        return hmac.compare_digest(decoded.encode("utf-8"), self._expected.encode("utf-8"))
