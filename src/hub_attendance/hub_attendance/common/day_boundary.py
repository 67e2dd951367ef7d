"""Civil-day keys in the hub timezone.

Every place that partitions or matches attendance by day (ledger writes,
event stamping, observer matching) goes through this module so that a
record never splits or collides because two sides disagree on the zone.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timezone
from typing import Callable, Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.constants import DAY_KEY_FORMAT, DEFAULT_HUB_TIMEZONE
from ..core.exceptions import InvalidInstantError

Instant = Union[datetime, date, str]

_DAY_KEY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def utc_now() -> datetime:
    """Current aware UTC time.

    Note: Wrapped so tests can patch it.
    """
    return datetime.now(timezone.utc)


def parse_instant(value: Union[datetime, str]) -> datetime:
    """Parse an ISO-8601 instant into an aware datetime (naive means UTC)."""
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError as exc:
            raise InvalidInstantError(f"Unparseable instant: {value!r}") from exc
    else:
        raise InvalidInstantError(f"Unsupported instant type: {type(value).__name__}")

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


class DayBoundaryResolver:
    def __init__(self, tz_name: str = DEFAULT_HUB_TIMEZONE, *, clock: Optional[Callable[[], datetime]] = None):
        try:
            self._tz = ZoneInfo(tz_name)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown hub timezone: {tz_name!r}") from exc
        self._tz_name = tz_name
        self._clock = clock or utc_now

    @property
    def tz(self) -> ZoneInfo:
        return self._tz

    @property
    def tz_name(self) -> str:
        return self._tz_name

    def day_key_of(self, instant: Instant) -> str:
        if isinstance(instant, str) and _DAY_KEY_RE.match(instant.strip()):
            return self._normalize_day_key(instant.strip())
        if isinstance(instant, date) and not isinstance(instant, datetime):
            return instant.strftime(DAY_KEY_FORMAT)
        if instant is None:
            raise InvalidInstantError("Instant is missing")

        dt = parse_instant(instant)
        return dt.astimezone(self._tz).strftime(DAY_KEY_FORMAT)

    def today(self, now: Optional[datetime] = None) -> str:
        return self.day_key_of(now or self._clock())

    def start_of_day(self, day_key: str) -> datetime:
        """Local midnight opening ``day_key``, as an aware datetime."""
        day = datetime.strptime(self.day_key_of(day_key), DAY_KEY_FORMAT).date()
        return datetime.combine(day, time.min, tzinfo=self._tz)

    @staticmethod
    def _normalize_day_key(value: str) -> str:
        try:
            return datetime.strptime(value, DAY_KEY_FORMAT).strftime(DAY_KEY_FORMAT)
        except ValueError as exc:
            raise InvalidInstantError(f"Invalid day key: {value!r}") from exc


_default_resolver: Optional[DayBoundaryResolver] = None


def day_key_of(instant: Instant) -> str:
    """Day key in the default hub timezone."""
    global _default_resolver
    if _default_resolver is None:
        _default_resolver = DayBoundaryResolver()
    return _default_resolver.day_key_of(instant)
