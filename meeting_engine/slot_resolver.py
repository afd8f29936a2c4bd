"""
Slot Resolver for the Meeting Slot Engine
Picks the best-attended candidate slot of an event
"""

from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from threading import Event as CancelToken
from typing import Iterator, Optional, Set, Tuple
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from .errors import DataAccessError, ResolutionCancelled
from .intervals import CandidateSlot
from .models import Event, ResolutionResult, User
from .stores import EventStore, UserStore

# wrapped as DataAccessError; any other exception propagates unchanged
STORE_ERRORS = (DataAccessError, SQLAlchemyError, OSError)


class TieBreak(str, Enum):
    """Which slot wins when several reach the same attendee count"""

    PREFER_LATEST = "prefer_latest"
    PREFER_EARLIEST = "prefer_earliest"

    def prefers(self, count: int, best_count: int) -> bool:
        if self is TieBreak.PREFER_LATEST:
            return count >= best_count
        return count > best_count


class SlotResolver:
    def __init__(self,
                 event_store: EventStore,
                 user_store: UserStore,
                 tie_break: TieBreak = TieBreak.PREFER_LATEST,
                 max_workers: int = 1):
        self.event_store = event_store
        self.user_store = user_store
        self.tie_break = TieBreak(tie_break)
        self.max_workers = max_workers

    def resolve_possible_slot(self, event_id: UUID, cancel: Optional[CancelToken] = None) -> Optional[ResolutionResult]:
        """
        Find the candidate slot of an event that most users can attend

        Slots are folded in the event's stored order. Under the default
        PREFER_LATEST policy the last of several equally attended slots wins.
        Evaluation stops as soon as a slot suits the whole population.

        Args:
            event_id: the event to resolve
            cancel: optional token; once set, resolution raises ResolutionCancelled

        Returns:
            The winning slot with attendees and non-attendees, or None when the
            event is missing, has no slots, or no slot has any attendee

        Raises:
            DataAccessError: a store failed; phase names the failing step
        """
        self._check_cancelled(cancel)
        try:
            event = self.event_store.get_event(event_id)
        except STORE_ERRORS as e:
            raise DataAccessError("fetch event", e) from e
        if event is None or not event.slots:
            return None

        self._check_cancelled(cancel)
        try:
            everyone = frozenset(self.user_store.get_all_users())
        except STORE_ERRORS as e:
            raise DataAccessError("fetch population", e) from e

        best: Optional[ResolutionResult] = None
        for slot, available in self._evaluate_slots(event, cancel):
            # restricted to the population fetched above so the partition holds
            attendees = frozenset(available) & everyone
            best_count = len(best.attendees) if best else 0
            if self.tie_break.prefers(len(attendees), best_count):
                best = ResolutionResult(
                    slot=slot,
                    attendees=attendees,
                    non_attendees=everyone - attendees,
                )
            if best is not None and len(best.attendees) == len(everyone):
                break

        if best is None or not best.attendees:
            return None
        return best

    def _evaluate_slots(self, event: Event, cancel: Optional[CancelToken]) -> Iterator[Tuple[CandidateSlot, Set[User]]]:
        """Yield (slot, available users) in slot order, querying lazily or in parallel"""
        if self.max_workers <= 1:
            for slot in event.slots:
                self._check_cancelled(cancel)
                yield slot, self._query_slot(slot, event.duration_hours)
            return

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = [pool.submit(self._query_slot, slot, event.duration_hours) for slot in event.slots]
            try:
                for slot, future in zip(event.slots, futures):
                    self._check_cancelled(cancel)
                    yield slot, future.result()
            finally:
                for future in futures:
                    future.cancel()

    def _query_slot(self, slot: CandidateSlot, duration_hours: int) -> Set[User]:
        try:
            return set(self.user_store.users_available_for(slot, duration_hours))
        except STORE_ERRORS as e:
            raise DataAccessError("fetch availability for slot", e) from e

    @staticmethod
    def _check_cancelled(cancel: Optional[CancelToken]) -> None:
        if cancel is not None and cancel.is_set():
            raise ResolutionCancelled("resolution cancelled")
