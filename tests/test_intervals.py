from datetime import datetime, timedelta
from uuid import uuid4

import pytest
import pytz

from meeting_engine.errors import ValidationError
from meeting_engine.intervals import AvailabilityWindow, CandidateSlot, from_epoch, to_epoch, validate
from meeting_engine.models import Event, User
from tests.helpers import at


def test_validate_accepts_well_formed_slot():
    validate(CandidateSlot(start=at(9), end=at(10)))


def test_validate_accepts_zero_length_interval():
    validate(AvailabilityWindow(start=at(9), end=at(9)))


@pytest.mark.parametrize("interval, message", [
    (CandidateSlot(end=at(10)), "start time is required"),
    (CandidateSlot(start=at(9)), "end time is required"),
    (AvailabilityWindow(start=at(11), end=at(10)), "start time is after end time"),
])
def test_validate_rejects_malformed_interval(interval, message):
    with pytest.raises(ValidationError, match=message):
        validate(interval)


def test_slot_and_window_are_distinct_types():
    slot = CandidateSlot(start=at(9), end=at(10))
    window = AvailabilityWindow(start=at(9), end=at(10))
    assert slot != window
    assert slot == CandidateSlot(start=at(9), end=at(10))


def test_epoch_conversion_is_utc():
    assert from_epoch(0) == datetime(1970, 1, 1, tzinfo=pytz.UTC)
    assert to_epoch(datetime(1970, 1, 1, 1, 0)) == 3600
    assert to_epoch(from_epoch(1736154000)) == 1736154000


def test_epoch_out_of_range_is_a_validation_error():
    with pytest.raises(ValidationError, match="timestamp out of range"):
        from_epoch(10**12)
    with pytest.raises(ValidationError, match="timestamp out of range"):
        CandidateSlot.from_wire(0, -(10**12))


def test_to_epoch_drops_fractional_seconds():
    assert to_epoch(at(9) + timedelta(milliseconds=700)) == to_epoch(at(9))


def test_wire_format_uses_epoch_seconds():
    slot = CandidateSlot.from_wire(1736154000, 1736157600)
    assert slot.to_wire() == {"start_time": 1736154000, "end_time": 1736157600}
    assert slot.span.total_seconds() == 3600


def test_event_validation():
    organizer = uuid4()
    Event(title="Sync", duration_hours=1, organizer_id=organizer).ensure_valid()

    with pytest.raises(ValidationError, match="title"):
        Event(duration_hours=1, organizer_id=organizer).ensure_valid()
    with pytest.raises(ValidationError, match="duration"):
        Event(title="Sync", duration_hours=0, organizer_id=organizer).ensure_valid()
    with pytest.raises(ValidationError, match="organizer"):
        Event(title="Sync", duration_hours=1).ensure_valid()
    with pytest.raises(ValidationError, match="invalid slot"):
        Event(
            title="Sync",
            duration_hours=1,
            organizer_id=organizer,
            slots=[CandidateSlot(start=at(10), end=at(9))],
        ).ensure_valid()


def test_user_validation():
    User(name="Alice", email="alice@example.com").ensure_valid()
    with pytest.raises(ValidationError, match="name"):
        User(email="alice@example.com").ensure_valid()
    with pytest.raises(ValidationError, match="email"):
        User(name="Alice").ensure_valid()
