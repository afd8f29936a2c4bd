"""
Meeting Slot Engine
Picks the candidate slot of an event that most participants can attend
"""

from .availability import window_covers
from .client import SchedulingClient
from .errors import DataAccessError, NotFoundError, ResolutionCancelled, SchedulingError, ValidationError
from .intervals import AvailabilityWindow, CandidateSlot
from .models import Event, ResolutionResult, User
from .slot_resolver import SlotResolver, TieBreak

__version__ = "1.0.0"
__all__ = [
    "AvailabilityWindow",
    "CandidateSlot",
    "DataAccessError",
    "Event",
    "NotFoundError",
    "ResolutionCancelled",
    "ResolutionResult",
    "SchedulingClient",
    "SchedulingError",
    "SlotResolver",
    "TieBreak",
    "User",
    "ValidationError",
    "window_covers",
]
