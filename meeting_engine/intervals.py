"""
Interval Model for the Meeting Slot Engine
Candidate slots, availability windows and the epoch-second wire conversion
"""

from datetime import datetime, timedelta
from typing import Optional, Union
import pytz
from pydantic import BaseModel, ConfigDict

from .errors import ValidationError


class _Interval(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: Optional[datetime] = None
    end: Optional[datetime] = None

    @property
    def span(self) -> timedelta:
        return self.end - self.start

    def to_wire(self) -> dict:
        return {"start_time": to_epoch(self.start), "end_time": to_epoch(self.end)}

    @classmethod
    def from_wire(cls, start_time: int, end_time: int):
        return cls(start=from_epoch(start_time), end=from_epoch(end_time))


class CandidateSlot(_Interval):
    """A time window proposed by the organizer of an event"""


class AvailabilityWindow(_Interval):
    """A time window during which a user can attend anything"""


Interval = Union[CandidateSlot, AvailabilityWindow]


def validate(interval: Interval) -> None:
    """
    Check that an interval is well formed

    Zero-length intervals (start == end) are accepted.

    Raises:
        ValidationError: start or end is unset, or start is after end
    """
    if interval.start is None:
        raise ValidationError("start time is required")
    if interval.end is None:
        raise ValidationError("end time is required")
    if ensure_utc(interval.start) > ensure_utc(interval.end):
        raise ValidationError("start time is after end time")


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC"""
    if value.tzinfo is None:
        return pytz.UTC.localize(value)
    return value.astimezone(pytz.UTC)


def from_epoch(seconds: int) -> datetime:
    try:
        return datetime.fromtimestamp(int(seconds), tz=pytz.UTC)
    except (OverflowError, ValueError, OSError) as e:
        raise ValidationError("timestamp out of range") from e


def to_epoch(value: datetime) -> int:
    """Whole epoch seconds; fractions of a second are dropped"""
    return int(ensure_utc(value).timestamp())
