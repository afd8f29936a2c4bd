"""
Domain models for the Meeting Slot Engine
Users, events and the resolution outcome
"""

from datetime import datetime
from typing import FrozenSet, List, Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field

from .errors import ValidationError
from .intervals import CandidateSlot, to_epoch, validate


class User(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: Optional[UUID] = None
    name: str = ""
    email: str = ""

    def ensure_valid(self) -> None:
        if not self.name:
            raise ValidationError("name is required")
        if not self.email:
            raise ValidationError("email is required")

    def to_wire(self) -> dict:
        return {"id": str(self.id), "name": self.name, "email": self.email}


class Event(BaseModel):
    """An event with the candidate slots its organizer proposed, in order"""

    id: Optional[UUID] = None
    title: str = ""
    duration_hours: int = 0
    organizer_id: Optional[UUID] = None
    slots: List[CandidateSlot] = Field(default_factory=list)
    created_at: Optional[datetime] = None

    def ensure_valid(self) -> None:
        if not self.title:
            raise ValidationError("title is required")
        if self.duration_hours <= 0:
            raise ValidationError("duration hours must be greater than 0")
        if self.organizer_id is None:
            raise ValidationError("organizer ID is required")
        for slot in self.slots:
            try:
                validate(slot)
            except ValidationError as e:
                raise ValidationError(f"invalid slot {slot.start} - {slot.end}: {e}") from e

    def to_wire(self) -> dict:
        return {
            "id": str(self.id),
            "title": self.title,
            "duration_hours": self.duration_hours,
            "organizer_id": str(self.organizer_id),
            "slots": [slot.to_wire() for slot in self.slots],
            "created_at": to_epoch(self.created_at) if self.created_at else None,
        }


def _by_name(user: User):
    return (user.name, str(user.id))


class ResolutionResult(BaseModel):
    """
    Best-attended candidate slot of an event

    attendees and non_attendees partition the user population as it was
    when the result was computed. Never persisted.
    """
    model_config = ConfigDict(frozen=True)

    slot: CandidateSlot
    attendees: FrozenSet[User]
    non_attendees: FrozenSet[User]

    def to_wire(self) -> dict:
        return {
            "slot": self.slot.to_wire(),
            "users": [u.to_wire() for u in sorted(self.attendees, key=_by_name)],
            "not_working_users": [u.to_wire() for u in sorted(self.non_attendees, key=_by_name)],
        }
