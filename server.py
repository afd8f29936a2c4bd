from contextlib import asynccontextmanager
from datetime import datetime
from typing import Callable, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field
from sqlalchemy.engine import Engine
from starlette.exceptions import HTTPException as StarletteHTTPException

from meeting_engine.config import Settings, get_settings
from meeting_engine.database import create_db_engine, create_session_factory, init_db
from meeting_engine.errors import NotFoundError, SchedulingError, ValidationError
from meeting_engine.intervals import AvailabilityWindow, CandidateSlot
from meeting_engine.models import Event, User
from meeting_engine.slot_resolver import SlotResolver, TieBreak
from meeting_engine.stores.sql import SQLEventStore, SQLUserStore, utc_now


class SlotPayload(BaseModel):
    start_time: int
    end_time: int


class UserPayload(BaseModel):
    name: str = ""
    email: str = ""


class EventPayload(BaseModel):
    title: str = ""
    duration_hours: int = 0
    organizer_id: str = ""
    slots: List[SlotPayload] = Field(default_factory=list)


def envelope(status: int, data=None) -> JSONResponse:
    return JSONResponse(status_code=status, content={"status": status, "response": data})


def parse_id(value: str, kind: str) -> UUID:
    try:
        return UUID(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"invalid {kind} ID")


def get_user_store(request: Request) -> SQLUserStore:
    return request.app.state.user_store


def get_event_store(request: Request) -> SQLEventStore:
    return request.app.state.event_store


def get_resolver(request: Request) -> SlotResolver:
    return request.app.state.resolver


router = APIRouter(prefix="/api")


@router.get("/health")
def health():
    return envelope(200, "OK")


@router.post("/users")
def create_user(payload: UserPayload, users: SQLUserStore = Depends(get_user_store)):
    print(f"[API /users] create name={payload.name!r}")
    user = users.create_user(User(name=payload.name, email=payload.email))
    return envelope(201, user.to_wire())


@router.get("/users")
def list_users(users: SQLUserStore = Depends(get_user_store)):
    return envelope(200, {"users": [u.to_wire() for u in users.get_all_users()]})


@router.get("/users/{user_id}")
def get_user(user_id: str, users: SQLUserStore = Depends(get_user_store)):
    user = users.get_user(parse_id(user_id, "user"))
    if user is None:
        raise NotFoundError("user not found")
    return envelope(200, user.to_wire())


@router.get("/users/{user_id}/slots")
def get_user_slots(user_id: str, users: SQLUserStore = Depends(get_user_store)):
    uid = parse_id(user_id, "user")
    if users.get_user(uid) is None:
        raise NotFoundError("user not found")
    return envelope(200, [w.to_wire() for w in users.get_user_availability(uid)])


@router.post("/users/{user_id}/slots")
def set_user_slots(user_id: str, payload: List[SlotPayload], users: SQLUserStore = Depends(get_user_store)):
    uid = parse_id(user_id, "user")
    if users.get_user(uid) is None:
        raise NotFoundError("user not found")
    windows = [AvailabilityWindow.from_wire(s.start_time, s.end_time) for s in payload]
    print(f"[API /users/slots] user={uid} windows={len(windows)}")
    saved = users.set_user_availability(uid, windows)
    return envelope(201, [w.to_wire() for w in saved])


@router.delete("/users/{user_id}/slots")
def delete_user_slots(user_id: str, users: SQLUserStore = Depends(get_user_store)):
    uid = parse_id(user_id, "user")
    if users.get_user(uid) is None:
        raise NotFoundError("user not found")
    users.delete_user_availability(uid)
    return Response(status_code=204)


def _event_from_payload(payload: EventPayload, event_id: Optional[UUID] = None) -> Event:
    return Event(
        id=event_id,
        title=payload.title,
        duration_hours=payload.duration_hours,
        organizer_id=parse_id(payload.organizer_id, "organizer"),
        slots=[CandidateSlot.from_wire(s.start_time, s.end_time) for s in payload.slots],
    )


@router.post("/events")
def create_event(payload: EventPayload,
                 events: SQLEventStore = Depends(get_event_store),
                 users: SQLUserStore = Depends(get_user_store)):
    event = _event_from_payload(payload)
    event.ensure_valid()
    if users.get_user(event.organizer_id) is None:
        raise NotFoundError("organizer not found")
    created = events.create_event(event)
    print(f"[API /events] created id={created.id} slots={len(created.slots)}")
    return envelope(201, created.to_wire())


@router.get("/events/{event_id}")
def get_event(event_id: str,
              events: SQLEventStore = Depends(get_event_store),
              users: SQLUserStore = Depends(get_user_store)):
    event = events.get_event(parse_id(event_id, "event"))
    if event is None:
        raise NotFoundError("event not found")
    organizer = users.get_user(event.organizer_id)
    if organizer is None:
        return envelope(500, "organizer not found")
    body = event.to_wire()
    body["organizer"] = organizer.to_wire()
    return envelope(200, body)


@router.put("/events/{event_id}")
def update_event(event_id: str, payload: EventPayload, events: SQLEventStore = Depends(get_event_store)):
    eid = parse_id(event_id, "event")
    if events.get_event(eid) is None:
        raise NotFoundError("event not found")
    event = _event_from_payload(payload, event_id=eid)
    event.ensure_valid()
    updated = events.update_event(event)
    print(f"[API /events] updated id={updated.id}")
    return envelope(200, updated.to_wire())


@router.delete("/events/{event_id}")
def delete_event(event_id: str, events: SQLEventStore = Depends(get_event_store)):
    eid = parse_id(event_id, "event")
    if events.get_event(eid) is None:
        raise NotFoundError("event not found")
    events.delete_event(eid)
    return Response(status_code=204)


@router.get("/events/{event_id}/possible-slot")
def get_possible_slot(event_id: str, resolver: SlotResolver = Depends(get_resolver)):
    eid = parse_id(event_id, "event")
    result = resolver.resolve_possible_slot(eid)
    if result is None:
        print(f"[API /events/possible-slot] event={eid} no usable slot")
        return envelope(404, "no possible event slot found")
    print(f"[API /events/possible-slot] event={eid} attendees={len(result.attendees)} absent={len(result.non_attendees)}")
    return envelope(200, result.to_wire())


def create_app(settings: Optional[Settings] = None,
               engine: Optional[Engine] = None,
               clock: Optional[Callable[[], datetime]] = None) -> FastAPI:
    """
    Build the scheduling service

    Run with `uvicorn server:create_app --factory`, or `python main.py --serve`.
    """
    settings = settings or get_settings()
    owns_engine = engine is None
    engine = engine or create_db_engine(settings.database_url)
    init_db(engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if owns_engine:
            engine.dispose()

    app = FastAPI(title="Meeting Slot Engine", version="1.0.0", lifespan=lifespan)
    session_factory = create_session_factory(engine)
    app.state.user_store = SQLUserStore(session_factory)
    app.state.event_store = SQLEventStore(session_factory, clock=clock or utc_now)
    app.state.resolver = SlotResolver(
        app.state.event_store,
        app.state.user_store,
        tie_break=TieBreak(settings.tie_break),
        max_workers=settings.resolution_workers,
    )

    @app.exception_handler(SchedulingError)
    async def scheduling_error_handler(request: Request, exc: SchedulingError):
        if isinstance(exc, NotFoundError):
            status = 404
        elif isinstance(exc, ValidationError):
            status = 400
        else:
            status = 500
        print(f"[API {request.url.path}] ERROR: {exc}")
        return envelope(status, str(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return envelope(exc.status_code, exc.detail)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        print(f"[API {request.url.path}] invalid request body: {exc.errors()}")
        return envelope(400, "invalid request body")

    app.include_router(router)
    return app
