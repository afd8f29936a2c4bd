import pytest
from fastapi.testclient import TestClient

from meeting_engine.config import Settings
from meeting_engine.database import create_db_engine, create_session_factory, drop_db, init_db
from meeting_engine.stores.sql import SQLEventStore, SQLUserStore
from server import create_app
from tests.helpers import FROZEN_NOW


@pytest.fixture
def engine():
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield engine
    drop_db(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def user_store(session_factory):
    return SQLUserStore(session_factory)


@pytest.fixture
def event_store(session_factory):
    return SQLEventStore(session_factory, clock=lambda: FROZEN_NOW)


@pytest.fixture
def settings():
    settings = Settings()
    settings.database_url = "sqlite://"
    settings.tie_break = "prefer_latest"
    settings.resolution_workers = 1
    return settings


@pytest.fixture
def client(settings, engine):
    app = create_app(settings=settings, engine=engine, clock=lambda: FROZEN_NOW)
    return TestClient(app)
