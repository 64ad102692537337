"""Gateway interface (repository pattern).

Gateways must be swappable and return row models. Every method is a
coroutine; callers suspend only while awaiting one of them.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Callable, Literal, Optional

from rsvp.pubsub import Subscription
from rsvp.schemas.attendee import AttendeeRow
from rsvp.schemas.event import EventRow


@dataclass(frozen=True)
class AttendeeChange:
    """A row change reported on the attendees feed."""

    type: Literal["insert"]
    row: AttendeeRow

    @property
    def event_id(self) -> str:
        return self.row.event_id


AttendeeChangeCallback = Callable[[AttendeeChange], None]


class Gateway(ABC):
    """Interface for event and attendee persistence operations."""

    @abstractmethod
    async def select_events(self) -> list[EventRow]:
        """Return all events ordered by date ascending."""
        ...

    @abstractmethod
    async def select_attendees(self) -> list[AttendeeRow]:
        """Return all attendees ordered by rsvp_date descending."""
        ...

    @abstractmethod
    async def insert_attendee(
        self,
        event_id: str,
        name: str,
        email: str,
        avatar_url: Optional[str] = None,
    ) -> AttendeeRow:
        """Insert an attendee; the gateway assigns id and rsvp_date.

        Raises:
            ReferenceViolationError: If ``event_id`` names no event.
            GatewayError: On any other failure.
        """
        ...

    @abstractmethod
    async def insert_event(
        self,
        title: str,
        date: date,
        time: str,
        location: str,
        description: Optional[str],
        creation_password: str,
    ) -> EventRow:
        """Insert an event.

        Raises:
            InvalidCreationPasswordError: If the password is not accepted.
            GatewayError: On any other failure.
        """
        ...

    @abstractmethod
    async def count_attendees(self, event_id: str) -> int:
        """Return the live attendee count for an event."""
        ...

    @abstractmethod
    def subscribe_attendee_changes(
        self,
        callback: AttendeeChangeCallback,
        event_id: Optional[str] = None,
    ) -> Subscription:
        """Register ``callback`` for attendee row changes, optionally for one event."""
        ...
