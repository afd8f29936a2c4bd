#!/usr/bin/env python3
"""
Main entry point for the Meeting Slot Engine
Serves the API, queries a running service, or runs a local demo
"""

import sys
from datetime import datetime

import pytz

from meeting_engine.client import SchedulingClient
from meeting_engine.config import get_settings
from meeting_engine.database import create_db_engine, create_session_factory, init_db
from meeting_engine.intervals import AvailabilityWindow, CandidateSlot
from meeting_engine.models import Event, User
from meeting_engine.slot_resolver import SlotResolver, TieBreak
from meeting_engine.stores.sql import SQLEventStore, SQLUserStore

USAGE = """Usage:
  python main.py --serve
  python main.py --resolve <event_id>
  python main.py --demo"""


def serve():
    """Run the API with uvicorn"""
    import uvicorn

    settings = get_settings()
    print(f"Server starting on {settings.host}:{settings.port}")
    uvicorn.run("server:create_app", factory=True, host=settings.host, port=settings.port)


def resolve(event_id: str):
    """Ask a running service for the best slot of an event"""
    client = SchedulingClient(get_settings().backend_url)
    if not client.is_backend_available():
        print(f"Error: service not reachable at {client.base_url}")
        sys.exit(1)

    result = client.get_possible_slot(event_id)
    if result is None:
        print("No possible slot found")
        return
    if "error" in result:
        print(f"Error: {result['error']}")
        sys.exit(1)

    slot = result["slot"]
    print(f"Best slot: {slot['start_time']} - {slot['end_time']}")
    print("Attending: " + ", ".join(u["name"] for u in result.get("users") or []))
    print("Not attending: " + ", ".join(u["name"] for u in result.get("not_working_users") or []))


def demo():
    """Seed an in-memory database with two slots and two users, then resolve"""
    settings = get_settings()
    engine = create_db_engine("sqlite://")
    init_db(engine)
    session_factory = create_session_factory(engine)
    users = SQLUserStore(session_factory)
    events = SQLEventStore(session_factory)

    def at(hour: int, minute: int = 0) -> datetime:
        return pytz.UTC.localize(datetime(2025, 1, 6, hour, minute))

    organizer = users.create_user(User(name="Olivia", email="olivia@example.com"))
    ulla = users.create_user(User(name="Ulla", email="ulla@example.com"))
    umar = users.create_user(User(name="Umar", email="umar@example.com"))
    users.set_user_availability(ulla.id, [AvailabilityWindow(start=at(8, 50), end=at(10, 10))])
    users.set_user_availability(umar.id, [AvailabilityWindow(start=at(9), end=at(10))])

    event = events.create_event(Event(
        title="Planning",
        duration_hours=1,
        organizer_id=organizer.id,
        slots=[CandidateSlot(start=at(9), end=at(10)), CandidateSlot(start=at(11), end=at(12))],
    ))

    resolver = SlotResolver(events, users, tie_break=TieBreak(settings.tie_break))
    result = resolver.resolve_possible_slot(event.id)

    print("=== Demo Resolution ===")
    if result is None:
        print("No possible slot found")
        return
    print(f"Slot: {result.slot.start.isoformat()} - {result.slot.end.isoformat()}")
    print("Attending: " + ", ".join(sorted(u.name for u in result.attendees)))
    print("Not attending: " + ", ".join(sorted(u.name for u in result.non_attendees)))
    engine.dispose()


def main():
    if len(sys.argv) > 1 and sys.argv[1] == "--serve":
        serve()
    elif len(sys.argv) > 1 and sys.argv[1] == "--resolve":
        if len(sys.argv) < 3:
            print(USAGE)
            sys.exit(2)
        resolve(sys.argv[2])
    elif len(sys.argv) > 1 and sys.argv[1] == "--demo":
        demo()
    else:
        print(USAGE)
        sys.exit(2)


if __name__ == "__main__":
    main()
