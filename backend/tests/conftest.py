"""Pytest fixtures — temporary SQLite database and an in-memory fake gateway."""
import uuid
from datetime import date, datetime, timedelta, timezone
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from rsvp.database import Base, make_engine
from rsvp.gateway.errors import GatewayError, InvalidCreationPasswordError, ReferenceViolationError
from rsvp.gateway.interfaces import AttendeeChange, Gateway
from rsvp.gateway.sql_gateway import SqlGateway
from rsvp.main import create_app
from rsvp.pubsub import Listeners
from rsvp.schemas.attendee import AttendeeRow
from rsvp.schemas.event import EventRow

# Import all models so they register with Base.metadata
from rsvp.models.event import Event          # noqa: F401
from rsvp.models.attendee import Attendee    # noqa: F401

CREATION_PASSWORD = "letmein"


@pytest.fixture(scope="function")
def db_engine(tmp_path):
    """Create a fresh SQLite database file for each test."""
    engine = make_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def sql_gateway(session_factory):
    return SqlGateway(session_factory, CREATION_PASSWORD)


@pytest.fixture(scope="function")
def client(sql_gateway):
    """FastAPI TestClient wired to the SQLite-backed gateway."""
    app = create_app(gateway=sql_gateway)
    with TestClient(app) as c:
        yield c


# ---------------------------------------------------------------------------
# Row builders and a scriptable in-memory gateway for store tests
# ---------------------------------------------------------------------------
def make_event(event_id: str, title: str = "Test Event", on: date = date(2070, 5, 15)) -> EventRow:
    return EventRow(
        id=event_id,
        title=title,
        description=None,
        date=on,
        time="18:00",
        location="Quantum District",
    )


def make_attendee(
    attendee_id: str,
    event_id: str,
    name: str = "Ann",
    minutes_ago: int = 0,
) -> AttendeeRow:
    return AttendeeRow(
        id=attendee_id,
        event_id=event_id,
        name=name,
        email=f"{name.lower()}@x.com",
        rsvp_date=datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc) - timedelta(minutes=minutes_ago),
    )


class FakeGateway(Gateway):
    """In-memory gateway; set ``*_error`` attributes to make calls fail."""

    def __init__(self, events=None, attendees=None) -> None:
        self.events: list[EventRow] = list(events or [])
        self.attendees: list[AttendeeRow] = list(attendees or [])
        self.select_events_error: Optional[GatewayError] = None
        self.select_attendees_error: Optional[GatewayError] = None
        self.insert_error: Optional[GatewayError] = None
        self.count_error: Optional[GatewayError] = None
        self.calls: list[str] = []
        self._changes: Listeners[AttendeeChange] = Listeners()

    async def select_events(self) -> list[EventRow]:
        self.calls.append("select_events")
        if self.select_events_error:
            raise self.select_events_error
        return sorted(self.events, key=lambda e: e.date)

    async def select_attendees(self) -> list[AttendeeRow]:
        self.calls.append("select_attendees")
        if self.select_attendees_error:
            raise self.select_attendees_error
        return sorted(self.attendees, key=lambda a: a.rsvp_date, reverse=True)

    async def insert_attendee(self, event_id, name, email, avatar_url=None) -> AttendeeRow:
        self.calls.append("insert_attendee")
        if self.insert_error:
            raise self.insert_error
        if not any(e.id == event_id for e in self.events):
            raise ReferenceViolationError(event_id)
        row = AttendeeRow(
            id=str(uuid.uuid4()),
            event_id=event_id,
            name=name,
            email=email,
            avatar_url=avatar_url,
            rsvp_date=datetime.now(timezone.utc),
        )
        self.attendees.append(row)
        self._changes.emit(AttendeeChange(type="insert", row=row))
        return row

    async def insert_event(self, title, date, time, location, description, creation_password) -> EventRow:
        self.calls.append("insert_event")
        if creation_password != CREATION_PASSWORD:
            raise InvalidCreationPasswordError()
        row = EventRow(
            id=str(uuid.uuid4()),
            title=title,
            description=description,
            date=date,
            time=time,
            location=location,
        )
        self.events.append(row)
        return row

    async def count_attendees(self, event_id: str) -> int:
        if self.count_error:
            raise self.count_error
        return sum(1 for a in self.attendees if a.event_id == event_id)

    def subscribe_attendee_changes(self, callback, event_id=None):
        def _deliver(change: AttendeeChange) -> None:
            if event_id is None or change.event_id == event_id:
                callback(change)

        return self._changes.add(_deliver)


@pytest.fixture
def fake_gateway():
    return FakeGateway()


# ---------------------------------------------------------------------------
# Helper: create an event via the API, returns the JSON response dict
# ---------------------------------------------------------------------------
def create_test_event(
    client: TestClient,
    title: str = "Test Event",
    on: str = "2070-05-15",
    time: str = "18:00",
    password: str = CREATION_PASSWORD,
) -> dict:
    """Helper — POST /api/events and return response JSON."""
    resp = client.post("/api/events/", json={
        "title": title,
        "date": on,
        "time": time,
        "location": "Quantum District, Neo Tokyo",
        "description": "A test event",
        "password": password,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()
