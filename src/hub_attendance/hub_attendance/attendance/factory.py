from __future__ import annotations

from dataclasses import dataclass

from .strategies.base import TokenStrategy
from .strategies.static_token_strategy import StaticTokenStrategy


@dataclass
class TokenStrategyFactory:
    """Factory Pattern: build the token strategy named in settings."""

    def create(self, *, name: str, expected_token: str) -> TokenStrategy:
        key = (name or "static").strip().lower()
        if key == "static":
            return StaticTokenStrategy(expected_token)
        raise ValueError(f"Unknown token strategy: {name!r}")
