from datetime import date, datetime, timedelta, timezone

import pytest

from hub_attendance.common.day_boundary import DayBoundaryResolver, day_key_of, parse_instant
from hub_attendance.core.exceptions import InvalidInstantError

LAGOS_MIDNIGHT_UTC = datetime(2025, 3, 10, 23, 0, tzinfo=timezone.utc)


def test_same_local_day_shares_key():
    days = DayBoundaryResolver("Africa/Lagos")
    # 00:30 and 23:30 hub time on 10 March
    early = datetime(2025, 3, 9, 23, 30, tzinfo=timezone.utc)
    late = datetime(2025, 3, 10, 22, 30, tzinfo=timezone.utc)

    assert days.day_key_of(early) == days.day_key_of(late) == "2025-03-10"


def test_keys_differ_across_local_midnight():
    days = DayBoundaryResolver("Africa/Lagos")
    before = LAGOS_MIDNIGHT_UTC - timedelta(seconds=1)
    after = LAGOS_MIDNIGHT_UTC + timedelta(seconds=1)

    assert days.day_key_of(before) == "2025-03-10"
    assert days.day_key_of(after) == "2025-03-11"


def test_utc_date_is_not_the_hub_date():
    days = DayBoundaryResolver("Africa/Lagos")
    instant = datetime(2025, 3, 10, 23, 30, tzinfo=timezone.utc)

    assert instant.date().isoformat() == "2025-03-10"
    assert days.day_key_of(instant) == "2025-03-11"


def test_naive_datetime_is_treated_as_utc():
    days = DayBoundaryResolver("Africa/Lagos")

    assert days.day_key_of(datetime(2025, 3, 10, 23, 30)) == "2025-03-11"


def test_iso_strings_with_z_and_offset():
    days = DayBoundaryResolver("Africa/Lagos")

    assert days.day_key_of("2025-03-10T23:30:00Z") == "2025-03-11"
    assert days.day_key_of("2025-03-10T23:30:00+01:00") == "2025-03-10"


def test_day_keys_pass_through():
    days = DayBoundaryResolver("Africa/Lagos")

    assert days.day_key_of("2025-03-10") == "2025-03-10"
    assert days.day_key_of(date(2025, 3, 10)) == "2025-03-10"


@pytest.mark.parametrize("bad", ["not-a-date", "2025-13-40", None, 42])
def test_invalid_instants_are_rejected(bad):
    days = DayBoundaryResolver("Africa/Lagos")

    with pytest.raises(InvalidInstantError):
        days.day_key_of(bad)


def test_start_of_day_is_local_midnight():
    days = DayBoundaryResolver("Africa/Lagos")

    assert days.start_of_day("2025-03-11") == LAGOS_MIDNIGHT_UTC


def test_today_uses_injected_clock(clock, days):
    assert days.today() == "2025-03-10"

    clock.now = LAGOS_MIDNIGHT_UTC
    assert days.today() == "2025-03-11"


def test_unknown_timezone():
    with pytest.raises(ValueError):
        DayBoundaryResolver("Mars/Olympus_Mons")


def test_module_level_helper_uses_hub_timezone():
    assert day_key_of("2025-03-10T23:30:00Z") == "2025-03-11"


def test_parse_instant_attaches_utc():
    parsed = parse_instant("2025-03-10T07:00:00")

    assert parsed.tzinfo is not None
    assert parsed == datetime(2025, 3, 10, 7, 0, tzinfo=timezone.utc)
