"""Event/attendee store: the single in-memory cache of events and attendees.

The store is the only component that mutates cached rows or calls the
gateway on behalf of views. Every change replaces the whole ``StoreState``
snapshot in one step and then notifies subscribers, so a reader never sees a
half-applied update.

Writes never update the cache optimistically: after the gateway accepts an
attendee, the attendee collection is reloaded so ids and RSVP timestamps
always come from the gateway.
"""
import dataclasses
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from rsvp.gateway.errors import GatewayError
from rsvp.gateway.interfaces import Gateway
from rsvp.pubsub import Listeners, Subscription
from rsvp.schemas.attendee import AttendeeRow
from rsvp.schemas.event import EventRow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreState:
    events: tuple[EventRow, ...] = ()
    attendees: tuple[AttendeeRow, ...] = ()
    is_loading: bool = False
    is_submitting: bool = False
    error: Optional[str] = None


StateListener = Callable[[StoreState], None]


def _message(exc: GatewayError, fallback: str) -> str:
    return exc.message or fallback


class AttendeeStore:
    """Cached events and attendees backed by a ``Gateway``.

    Overlapping loads are not serialized: whichever call completes last
    decides the cached collection.
    """

    def __init__(self, gateway: Gateway) -> None:
        self._gateway = gateway
        self._state = StoreState()
        self._listeners: Listeners[StoreState] = Listeners()

    @property
    def state(self) -> StoreState:
        return self._state

    def subscribe(self, listener: StateListener) -> Subscription:
        """Call ``listener(state)`` after every change until the handle is closed."""
        return self._listeners.add(listener)

    def _set(self, **changes) -> None:
        self._state = dataclasses.replace(self._state, **changes)
        self._listeners.emit(self._state)

    # ── loads ──────────────────────────────────────────────────────────

    async def load_events(self) -> None:
        self._set(is_loading=True, error=None)
        try:
            events = await self._gateway.select_events()
        except GatewayError as exc:
            logger.error("Loading events failed: %s", exc)
            self._set(is_loading=False, error=_message(exc, "Failed to load events"))
            return
        except BaseException:
            self._set(is_loading=False)
            raise
        self._set(events=tuple(events or ()), is_loading=False)
        logger.debug("Loaded %d events", len(self._state.events))

    async def load_attendees(self) -> None:
        self._set(is_loading=True, error=None)
        try:
            attendees = await self._gateway.select_attendees()
        except GatewayError as exc:
            logger.error("Loading attendees failed: %s", exc)
            self._set(is_loading=False, error=_message(exc, "Failed to load attendees"))
            return
        except BaseException:
            self._set(is_loading=False)
            raise
        self._set(attendees=tuple(attendees or ()), is_loading=False)
        logger.debug("Loaded %d attendees", len(self._state.attendees))

    # ── writes ─────────────────────────────────────────────────────────

    async def add_attendee(self, event_id: str, name: str, email: str) -> None:
        """RSVP ``name`` to ``event_id`` and resynchronize the attendee cache.

        Raises:
            GatewayError: If the gateway rejects the insert. ``state.error``
                carries the same message.
        """
        self._set(is_submitting=True, error=None)
        try:
            await self._gateway.insert_attendee(event_id, name, email)
        except GatewayError as exc:
            logger.error("RSVP for event %s failed: %s", event_id, exc)
            self._set(is_submitting=False, error=_message(exc, "An unknown error occurred"))
            raise
        except BaseException:
            self._set(is_submitting=False)
            raise

        try:
            await self.load_attendees()
        finally:
            self._set(is_submitting=False)
        logger.info("RSVP recorded for event %s", event_id)

    # ── pure reads ─────────────────────────────────────────────────────

    def get_attendees_by_event_id(self, event_id: str) -> list[AttendeeRow]:
        return [a for a in self._state.attendees if a.event_id == event_id]

    def get_event_by_id(self, event_id: str) -> Optional[EventRow]:
        for event in self._state.events:
            if event.id == event_id:
                return event
        return None

    def count_attendees_for_event(self, event_id: str) -> int:
        return sum(1 for a in self._state.attendees if a.event_id == event_id)
