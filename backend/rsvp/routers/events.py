"""Event API routes — render store state and delegate writes to the gateway."""
import asyncio
import logging
from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, status

from rsvp.config import settings
from rsvp.dependencies import get_gateway, get_store
from rsvp.gateway.errors import GatewayError, InvalidCreationPasswordError
from rsvp.gateway.interfaces import Gateway
from rsvp.schemas.attendee import AttendeeOut
from rsvp.schemas.event import AttendeeCountOut, EventCreate, EventDetail, EventOut
from rsvp.store.attendee_store import AttendeeStore

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=list[EventOut])
async def list_events(
    refresh: bool = Query(False, description="Reload events and attendees before responding"),
    store: AttendeeStore = Depends(get_store),
):
    """List cached events, ordered by date, with attendee counts."""
    if refresh:
        await store.load_events()
        events_error = store.state.error
        await store.load_attendees()
        error = events_error or store.state.error
        if error:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=f"Error loading events: {error}",
            )
    return [
        EventOut.from_row(event, store.count_attendees_for_event(event.id))
        for event in store.state.events
    ]


@router.post("/", response_model=EventOut, status_code=status.HTTP_201_CREATED)
async def create_event(
    payload: EventCreate,
    gateway: Gateway = Depends(get_gateway),
    store: AttendeeStore = Depends(get_store),
):
    """Create an event behind the shared organizer password."""
    try:
        row = await gateway.insert_event(
            title=payload.title,
            date=payload.date,
            time=payload.time,
            location=payload.location,
            description=payload.description,
            creation_password=payload.password,
        )
    except InvalidCreationPasswordError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))
    except GatewayError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(exc) or "Failed to create event",
        )

    await store.load_events()
    logger.info("Created event '%s' (%s)", row.title, row.id)
    return EventOut.from_row(row, attendee_count=0)


@router.get("/{event_id}", response_model=EventDetail)
async def get_event(event_id: str, store: AttendeeStore = Depends(get_store)):
    """Fetch a single event with its attendee list."""
    event = store.get_event_by_id(event_id)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    attendees = store.get_attendees_by_event_id(event_id)
    return EventDetail(
        **EventOut.from_row(event, len(attendees)).model_dump(),
        attendees=[AttendeeOut.from_row(a, settings.DISPLAY_TIMEZONE) for a in attendees],
    )


async def _live_count(gateway: Gateway, event_id: str) -> dict:
    count = await gateway.count_attendees(event_id)
    return AttendeeCountOut(event_id=event_id, attendee_count=count).model_dump()


@router.get("/{event_id}/attendee-count", response_model=AttendeeCountOut)
async def get_attendee_count(event_id: str, gateway: Gateway = Depends(get_gateway)):
    """Live attendee count straight from the gateway, bypassing the store cache."""
    try:
        return await _live_count(gateway, event_id)
    except GatewayError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))


async def _push_counts(websocket: WebSocket, gateway: Gateway, event_id: str, changes: asyncio.Queue):
    while True:
        await changes.get()
        try:
            payload = await _live_count(gateway, event_id)
        except GatewayError as exc:
            logger.warning("Skipping live count update for event %s: %s", event_id, exc)
            continue
        await websocket.send_json(payload)


@router.websocket("/{event_id}/attendee-count/live")
async def attendee_count_live(
    websocket: WebSocket,
    event_id: str,
    gateway: Gateway = Depends(get_gateway),
):
    """Push the attendee count on connect and after every RSVP to this event."""
    await websocket.accept()
    changes: asyncio.Queue = asyncio.Queue()
    with gateway.subscribe_attendee_changes(changes.put_nowait, event_id=event_id):
        try:
            initial = await _live_count(gateway, event_id)
        except GatewayError as exc:
            logger.warning("Live count feed for event %s unavailable: %s", event_id, exc)
            await websocket.close(code=status.WS_1011_INTERNAL_ERROR, reason=str(exc))
            return
        await websocket.send_json(initial)
        pusher = asyncio.create_task(_push_counts(websocket, gateway, event_id, changes))
        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break
        finally:
            pusher.cancel()
            await asyncio.gather(pusher, return_exceptions=True)
    logger.debug("Live count feed for event %s closed", event_id)
