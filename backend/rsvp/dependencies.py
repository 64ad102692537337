"""FastAPI dependencies resolving the per-application gateway and store."""
from fastapi.requests import HTTPConnection

from rsvp.gateway.interfaces import Gateway
from rsvp.store.attendee_store import AttendeeStore


def get_gateway(conn: HTTPConnection) -> Gateway:
    return conn.app.state.gateway


def get_store(conn: HTTPConnection) -> AttendeeStore:
    return conn.app.state.store
