"""
Availability Query for the Meeting Slot Engine
Decides which users can attend a candidate slot
"""

from datetime import timedelta
from typing import Dict, Iterable, Set, Tuple
from uuid import UUID

from .intervals import AvailabilityWindow, CandidateSlot, ensure_utc
from .models import User


def window_covers(window: AvailabilityWindow, slot: CandidateSlot, min_duration_hours: int) -> bool:
    """
    Check whether an availability window qualifies a user for a slot

    Containment is inclusive at both edges, but the window's own span must
    be strictly longer than min_duration_hours: a window exactly as long as
    the required duration does not qualify.
    """
    start, end = ensure_utc(window.start), ensure_utc(window.end)
    if start > ensure_utc(slot.start) or end < ensure_utc(slot.end):
        return False
    return end - start > timedelta(hours=min_duration_hours)


def users_available_for(
    records: Iterable[Tuple[UUID, AvailabilityWindow]],
    users: Dict[UUID, User],
    slot: CandidateSlot,
    min_duration_hours: int,
) -> Set[User]:
    """
    Fold availability records into the set of users able to attend a slot

    Args:
        records: (user_id, window) pairs, several per user allowed
        users: known users by id; records of unknown users are ignored
        slot: the candidate slot being evaluated
        min_duration_hours: the event's required duration

    Returns:
        Users holding at least one qualifying window, each once
    """
    available: Set[User] = set()
    for user_id, window in records:
        user = users.get(user_id)
        if user is None or user in available:
            continue
        if window_covers(window, slot, min_duration_hours):
            available.add(user)
    return available
