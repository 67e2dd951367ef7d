from datetime import datetime, timezone

from hub_attendance.attendance.events import ChangeEvent
from hub_attendance.attendance.model import AttendanceRecord
from hub_attendance.attendance.publisher import ChangeBroadcaster
from hub_attendance.core.enums import PresenceStatus, Role
from hub_attendance.people.model import Person

T0 = datetime(2025, 3, 10, 7, 0, tzinfo=timezone.utc)


def _event(record_id: int = 1) -> ChangeEvent:
    record = AttendanceRecord(record_id=record_id, person_id=1, day="2025-03-10", check_in_at=T0)
    person = Person(person_id=1, full_name="Ada Obi", email="Ada@Hub.test", role=Role.STAFF)
    return ChangeEvent.from_record(record, person)


def test_event_wire_shape():
    wire = _event(5).to_wire()

    assert wire == {
        "recordId": 5,
        "personId": 1,
        "personName": "Ada Obi",
        "personRole": "staff",
        "personEmail": "ada@hub.test",
        "day": "2025-03-10",
        "checkInAt": "2025-03-10T07:00:00+00:00",
        "checkOutAt": None,
        "derivedStatus": "present",
    }


def test_event_without_person_keeps_record_fields():
    record = AttendanceRecord(record_id=2, person_id=9, day="2025-03-10", check_in_at=T0)

    event = ChangeEvent.from_record(record, None)

    assert event.person_id == 9
    assert event.person_email == ""
    assert event.derived_status == PresenceStatus.PRESENT


def test_publish_fans_out_to_every_observer():
    hub = ChangeBroadcaster(queue_size=4)
    a = hub.subscribe()
    b = hub.subscribe()

    delivered = hub.publish(_event())

    assert delivered == 2
    assert a.get(timeout=0.1).record_id == 1
    assert b.get(timeout=0.1).record_id == 1


def test_full_channel_drops_for_that_observer_only():
    hub = ChangeBroadcaster(queue_size=1)
    slow = hub.subscribe()
    fast = hub.subscribe()

    hub.publish(_event(1))
    assert fast.get(timeout=0.1).record_id == 1

    delivered = hub.publish(_event(2))

    assert delivered == 1
    assert slow.dropped == 1
    assert fast.get(timeout=0.1).record_id == 2
    assert slow.get(timeout=0.1).record_id == 1
    assert slow.get(timeout=0.01) is None


def test_unsubscribed_observer_receives_nothing():
    hub = ChangeBroadcaster()
    sub = hub.subscribe()
    hub.unsubscribe(sub)

    assert hub.subscriber_count == 0
    assert hub.publish(_event()) == 0
    assert sub.closed


def test_iter_events_yields_none_when_idle():
    hub = ChangeBroadcaster()
    sub = hub.subscribe()
    events = sub.iter_events(keepalive=0.01)

    assert next(events) is None

    hub.publish(_event(3))
    assert next(events).record_id == 3

    sub.close()
    assert list(events) == []
