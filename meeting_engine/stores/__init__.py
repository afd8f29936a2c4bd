"""
Store interfaces for the Meeting Slot Engine
The resolver only depends on these protocols, never on a concrete backend
"""

from typing import List, Optional, Protocol, Set
from uuid import UUID

from ..intervals import AvailabilityWindow, CandidateSlot
from ..models import Event, User


class EventStore(Protocol):
    def get_event(self, event_id: UUID) -> Optional[Event]: ...

    def create_event(self, event: Event) -> Event: ...

    def update_event(self, event: Event) -> Event: ...

    def delete_event(self, event_id: UUID) -> None: ...


class UserStore(Protocol):
    def create_user(self, user: User) -> User: ...

    def get_user(self, user_id: UUID) -> Optional[User]: ...

    def get_all_users(self) -> List[User]: ...

    def get_user_availability(self, user_id: UUID) -> List[AvailabilityWindow]: ...

    def set_user_availability(self, user_id: UUID, windows: List[AvailabilityWindow]) -> List[AvailabilityWindow]: ...

    def delete_user_availability(self, user_id: UUID) -> None: ...

    def users_available_for(self, slot: CandidateSlot, min_duration_hours: int) -> Set[User]: ...


__all__ = ["EventStore", "UserStore"]
