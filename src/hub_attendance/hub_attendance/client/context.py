from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional

from ..common.day_boundary import DayBoundaryResolver, utc_now
from ..core.constants import DEFAULT_HUB_TIMEZONE


@dataclass
class ObserverContext:
    """Everything one client session needs, built once and passed around.

    Holds the session credential, hub timezone and clock so that nothing
    is read from ambient global state.
    """

    base_url: str
    session_cookie: Optional[str] = None
    hub_timezone: str = DEFAULT_HUB_TIMEZONE
    timeout: float = 10.0
    clock: Callable[[], datetime] = utc_now
    days: DayBoundaryResolver = field(init=False, repr=False)

    def __post_init__(self):
        self.base_url = self.base_url.rstrip("/")
        self.days = DayBoundaryResolver(self.hub_timezone, clock=self.clock)

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"
