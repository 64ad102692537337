"""SQLAlchemy implementation of the Gateway.

Each call runs one session unit of work on Starlette's worker threadpool so
the event loop is only suspended while the query is in flight.
"""
import hmac
import logging
from datetime import date
from typing import Callable, Optional

import bcrypt
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from rsvp.gateway.errors import (
    GatewayError,
    InvalidCreationPasswordError,
    ReferenceViolationError,
)
from rsvp.gateway.interfaces import AttendeeChange, AttendeeChangeCallback, Gateway
from rsvp.models.attendee import Attendee
from rsvp.models.event import Event
from rsvp.pubsub import Listeners, Subscription
from rsvp.schemas.attendee import AttendeeRow
from rsvp.schemas.event import EventRow

logger = logging.getLogger(__name__)


# bcrypt work factor for stored creation passwords
BCRYPT_ROUNDS = 12


def hash_password(password: str) -> str:
    """Salted bcrypt hash; every call yields a different string."""
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


class SqlGateway(Gateway):
    """Relational gateway over the ``events`` and ``attendees`` tables."""

    def __init__(self, session_factory: Callable[[], Session], creation_password: str) -> None:
        self._session_factory = session_factory
        self._creation_password = creation_password
        self._attendee_changes: Listeners[AttendeeChange] = Listeners()

    # ── reads ──────────────────────────────────────────────────────────

    async def select_events(self) -> list[EventRow]:
        return await run_in_threadpool(self._run, self._select_events)

    async def select_attendees(self) -> list[AttendeeRow]:
        return await run_in_threadpool(self._run, self._select_attendees)

    async def count_attendees(self, event_id: str) -> int:
        return await run_in_threadpool(self._run, self._count_attendees, event_id)

    # ── writes ─────────────────────────────────────────────────────────

    async def insert_attendee(
        self,
        event_id: str,
        name: str,
        email: str,
        avatar_url: Optional[str] = None,
    ) -> AttendeeRow:
        row = await run_in_threadpool(
            self._run, self._insert_attendee, event_id, name, email, avatar_url
        )
        self._publish(AttendeeChange(type="insert", row=row))
        return row

    async def insert_event(
        self,
        title: str,
        date: date,
        time: str,
        location: str,
        description: Optional[str],
        creation_password: str,
    ) -> EventRow:
        if not hmac.compare_digest(
            creation_password.encode("utf-8"), self._creation_password.encode("utf-8")
        ):
            logger.warning("Rejected event '%s': wrong creation password", title)
            raise InvalidCreationPasswordError()
        return await run_in_threadpool(
            self._run, self._insert_event, title, date, time, location, description, creation_password
        )

    # ── change feed ────────────────────────────────────────────────────

    def subscribe_attendee_changes(
        self,
        callback: AttendeeChangeCallback,
        event_id: Optional[str] = None,
    ) -> Subscription:
        def _deliver(change: AttendeeChange) -> None:
            if event_id is not None and change.event_id != event_id:
                return
            try:
                callback(change)
            except Exception:
                # Insert is already committed at this point.
                logger.exception("Attendee change listener failed for event %s", change.event_id)

        return self._attendee_changes.add(_deliver)

    def _publish(self, change: AttendeeChange) -> None:
        logger.debug("Publishing attendee %s for event %s", change.type, change.event_id)
        self._attendee_changes.emit(change)

    # ── session units of work (worker thread) ─────────────────────────

    def _run(self, work, *args):
        """Run ``work(db, *args)`` in a fresh session, mapping DB errors to GatewayError."""
        db = self._session_factory()
        try:
            return work(db, *args)
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("Gateway request %s failed: %s", work.__name__, exc)
            raise GatewayError("Could not reach the event database") from exc
        finally:
            db.close()

    @staticmethod
    def _select_events(db: Session) -> list[EventRow]:
        events = db.query(Event).order_by(Event.date, Event.created_at).all()
        return [EventRow.model_validate(e) for e in events]

    @staticmethod
    def _select_attendees(db: Session) -> list[AttendeeRow]:
        attendees = db.query(Attendee).order_by(Attendee.rsvp_date.desc()).all()
        return [AttendeeRow.model_validate(a) for a in attendees]

    @staticmethod
    def _count_attendees(db: Session, event_id: str) -> int:
        return db.query(Attendee).filter(Attendee.event_id == event_id).count()

    @staticmethod
    def _insert_attendee(
        db: Session, event_id: str, name: str, email: str, avatar_url: Optional[str]
    ) -> AttendeeRow:
        if db.get(Event, event_id) is None:
            raise ReferenceViolationError(event_id)
        attendee = Attendee(event_id=event_id, name=name, email=email, avatar_url=avatar_url)
        db.add(attendee)
        db.commit()
        db.refresh(attendee)
        logger.info("Inserted attendee %s for event %s", attendee.id, event_id)
        return AttendeeRow.model_validate(attendee)

    def _insert_event(
        self,
        db: Session,
        title: str,
        date: date,
        time: str,
        location: str,
        description: Optional[str],
        creation_password: str,
    ) -> EventRow:
        event = Event(
            title=title,
            date=date,
            time=time,
            location=location,
            description=description,
            creation_password_hash=hash_password(creation_password),
        )
        db.add(event)
        db.commit()
        db.refresh(event)
        logger.info("Inserted event '%s' (%s) on %s", title, event.id, date.isoformat())
        return EventRow.model_validate(event)
