"""Attendee / RSVP API routes."""
import logging
from fastapi import APIRouter, Depends, HTTPException, status

from rsvp.config import settings
from rsvp.dependencies import get_store
from rsvp.gateway.errors import GatewayError, ReferenceViolationError
from rsvp.schemas.attendee import AttendeeOut, RSVPCreate
from rsvp.store.attendee_store import AttendeeStore

logger = logging.getLogger(__name__)
router = APIRouter()


def _attendees_out(store: AttendeeStore, event_id: str) -> list[AttendeeOut]:
    return [
        AttendeeOut.from_row(a, settings.DISPLAY_TIMEZONE)
        for a in store.get_attendees_by_event_id(event_id)
    ]


@router.get("/{event_id}/attendees", response_model=list[AttendeeOut])
async def list_attendees(event_id: str, store: AttendeeStore = Depends(get_store)):
    """Attendees of one event, most recent RSVP first."""
    if store.get_event_by_id(event_id) is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return _attendees_out(store, event_id)


@router.post(
    "/{event_id}/rsvp",
    response_model=list[AttendeeOut],
    status_code=status.HTTP_201_CREATED,
)
async def rsvp(event_id: str, payload: RSVPCreate, store: AttendeeStore = Depends(get_store)):
    """RSVP to an event; responds with the refreshed attendee list."""
    try:
        await store.add_attendee(event_id, payload.name, payload.email)
    except ReferenceViolationError:
        raise HTTPException(status_code=404, detail="Event not found")
    except GatewayError:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="There was an error submitting your RSVP. Please try again.",
        )
    logger.info("%s RSVP'd to event %s", payload.name, event_id)
    return _attendees_out(store, event_id)
