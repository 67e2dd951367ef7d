from datetime import datetime, timezone

from hub_attendance.observer.identity import ByEmail, ById, identity_of, same_record, shared_identity
from hub_attendance.observer.model import ObservedEntry

ARRIVED = datetime(2025, 3, 10, 9, 0, tzinfo=timezone.utc)


def _entry(**kwargs):
    kwargs.setdefault("day", "2025-03-10")
    return ObservedEntry(arrived_at=ARRIVED, **kwargs)


def test_identity_prefers_id():
    assert identity_of(_entry(person_id="1", email="a@x")) == ById("1")
    assert identity_of(_entry(email="A@X")) == ByEmail("a@x")
    assert identity_of(_entry()) is None


def test_shared_identity_by_id():
    assert shared_identity(_entry(person_id="1"), _entry(person_id="1", email="a@x")) == ById("1")


def test_different_ids_never_match_even_with_same_email():
    assert shared_identity(_entry(person_id="1", email="a@x"), _entry(person_id="2", email="a@x")) is None


def test_email_fallback_is_case_insensitive():
    assert shared_identity(_entry(person_id="1", email="Ada@Hub.test"), _entry(email="ada@hub.test")) == ByEmail(
        "ada@hub.test"
    )


def test_same_record_requires_same_day():
    a = _entry(person_id="1")

    assert same_record(a, _entry(person_id="1"))
    assert not same_record(a, _entry(person_id="1", day="2025-03-11"))
    assert not same_record(_entry(), _entry())
