"""
SQL stores for the Meeting Slot Engine
SQLAlchemy-backed implementations of the user and event stores
"""

from datetime import datetime
from typing import Callable, List, Optional, Set
from uuid import UUID, uuid4

import pytz
from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from .. import availability
from ..errors import DataAccessError, NotFoundError, ValidationError
from ..intervals import AvailabilityWindow, CandidateSlot, ensure_utc, to_epoch, validate
from ..models import Event, User
from .tables import AvailabilityRow, EventRow, UserRow


def utc_now() -> datetime:
    return datetime.now(pytz.UTC)


def _to_user(row: UserRow) -> User:
    return User(id=row.id, name=row.name, email=row.email)


def _to_event(row: EventRow) -> Event:
    return Event(
        id=row.id,
        title=row.title,
        duration_hours=row.duration_hours,
        organizer_id=row.user_id,
        slots=[CandidateSlot.from_wire(s["start_time"], s["end_time"]) for s in row.slots or []],
        created_at=ensure_utc(row.created_at),
    )


class SQLUserStore:
    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def create_user(self, user: User) -> User:
        user.ensure_valid()
        row = UserRow(id=uuid4(), name=user.name, email=user.email)
        try:
            with self.session_factory.begin() as session:
                session.add(row)
        except IntegrityError as e:
            raise ValidationError(f"email already registered: {user.email}") from e
        except SQLAlchemyError as e:
            raise DataAccessError("create user", e) from e
        print(f"[SQLUserStore.create_user] created id={row.id}")
        return _to_user(row)

    def get_user(self, user_id: UUID) -> Optional[User]:
        try:
            with self.session_factory() as session:
                row = session.get(UserRow, user_id)
        except SQLAlchemyError as e:
            raise DataAccessError("get user", e) from e
        return _to_user(row) if row is not None else None

    def get_all_users(self) -> List[User]:
        try:
            with self.session_factory() as session:
                rows = session.scalars(select(UserRow).order_by(UserRow.name)).all()
        except SQLAlchemyError as e:
            raise DataAccessError("get users", e) from e
        return [_to_user(row) for row in rows]

    def get_user_availability(self, user_id: UUID) -> List[AvailabilityWindow]:
        query = (
            select(AvailabilityRow)
            .where(AvailabilityRow.user_id == user_id)
            .order_by(AvailabilityRow.start_ts, AvailabilityRow.end_ts)
        )
        try:
            with self.session_factory() as session:
                rows = session.scalars(query).all()
        except SQLAlchemyError as e:
            raise DataAccessError("get user availability", e) from e
        return [AvailabilityWindow.from_wire(row.start_ts, row.end_ts) for row in rows]

    def set_user_availability(self, user_id: UUID, windows: List[AvailabilityWindow]) -> List[AvailabilityWindow]:
        """
        Replace every availability window of a user

        The delete and the inserts commit together, so readers see either the
        old set or the new one.

        Windows are stored as whole epoch seconds; fractional seconds are
        truncated, so the stored and returned windows may start and end up
        to a second earlier than the ones passed in.
        """
        for window in windows:
            validate(window)
        # duplicates would collide on the primary key
        keys = list(dict.fromkeys((to_epoch(w.start), to_epoch(w.end)) for w in windows))
        try:
            with self.session_factory.begin() as session:
                session.execute(delete(AvailabilityRow).where(AvailabilityRow.user_id == user_id))
                session.add_all(
                    AvailabilityRow(user_id=user_id, start_ts=start_ts, end_ts=end_ts)
                    for start_ts, end_ts in keys
                )
        except SQLAlchemyError as e:
            raise DataAccessError("set user availability", e) from e
        print(f"[SQLUserStore.set_user_availability] user={user_id} windows={len(keys)}")
        return [AvailabilityWindow.from_wire(start_ts, end_ts) for start_ts, end_ts in keys]

    def delete_user_availability(self, user_id: UUID) -> None:
        try:
            with self.session_factory.begin() as session:
                session.execute(delete(AvailabilityRow).where(AvailabilityRow.user_id == user_id))
        except SQLAlchemyError as e:
            raise DataAccessError("delete user availability", e) from e
        print(f"[SQLUserStore.delete_user_availability] user={user_id}")

    def users_available_for(self, slot: CandidateSlot, min_duration_hours: int) -> Set[User]:
        """Users holding a window that contains the slot and outlasts min_duration_hours"""
        query = (
            select(UserRow, AvailabilityRow)
            .join(AvailabilityRow, AvailabilityRow.user_id == UserRow.id)
            .where(
                AvailabilityRow.start_ts <= to_epoch(slot.start),
                AvailabilityRow.end_ts >= to_epoch(slot.end),
                AvailabilityRow.end_ts - AvailabilityRow.start_ts > min_duration_hours * 3600,
            )
            .order_by(UserRow.name)
        )
        try:
            with self.session_factory() as session:
                rows = session.execute(query).all()
        except SQLAlchemyError as e:
            raise DataAccessError("get users for slot", e) from e

        users = {}
        records = []
        for user_row, availability_row in rows:
            user = users.setdefault(user_row.id, _to_user(user_row))
            records.append((user.id, AvailabilityWindow.from_wire(availability_row.start_ts, availability_row.end_ts)))
        return availability.users_available_for(records, users, slot, min_duration_hours)


class SQLEventStore:
    def __init__(self, session_factory: sessionmaker, clock: Callable[[], datetime] = utc_now):
        self.session_factory = session_factory
        self.clock = clock

    def get_event(self, event_id: UUID) -> Optional[Event]:
        try:
            with self.session_factory() as session:
                row = session.get(EventRow, event_id)
        except SQLAlchemyError as e:
            raise DataAccessError("get event", e) from e
        return _to_event(row) if row is not None else None

    def create_event(self, event: Event) -> Event:
        event.ensure_valid()
        row = EventRow(
            id=uuid4(),
            title=event.title,
            duration_hours=event.duration_hours,
            user_id=event.organizer_id,
            slots=[slot.to_wire() for slot in event.slots],
            created_at=self.clock(),
        )
        try:
            with self.session_factory.begin() as session:
                session.add(row)
        except IntegrityError as e:
            raise NotFoundError(f"organizer not found: {event.organizer_id}") from e
        except SQLAlchemyError as e:
            raise DataAccessError("create event", e) from e
        print(f"[SQLEventStore.create_event] created id={row.id} slots={len(event.slots)}")
        return _to_event(row)

    def update_event(self, event: Event) -> Event:
        """Update title, duration and slots; organizer and created_at never change"""
        event.ensure_valid()
        query = (
            update(EventRow)
            .where(EventRow.id == event.id)
            .values(
                title=event.title,
                duration_hours=event.duration_hours,
                slots=[slot.to_wire() for slot in event.slots],
            )
        )
        try:
            with self.session_factory.begin() as session:
                rowcount = session.execute(query).rowcount
        except SQLAlchemyError as e:
            raise DataAccessError("update event", e) from e
        if rowcount == 0:
            raise NotFoundError(f"event not found: {event.id}")

        updated = self.get_event(event.id)
        if updated is None:
            raise NotFoundError(f"event not found after update: {event.id}")
        return updated

    def delete_event(self, event_id: UUID) -> None:
        try:
            with self.session_factory.begin() as session:
                session.execute(delete(EventRow).where(EventRow.id == event_id))
        except SQLAlchemyError as e:
            raise DataAccessError("delete event", e) from e
        print(f"[SQLEventStore.delete_event] deleted id={event_id}")
