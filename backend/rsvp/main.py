"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rsvp.config import settings
from rsvp.database import Base, SessionLocal, engine
from rsvp.gateway.interfaces import Gateway
from rsvp.gateway.sql_gateway import SqlGateway
from rsvp.routers import attendees, events
from rsvp.seed import seed_sample_event
from rsvp.store.attendee_store import AttendeeStore

# Import all models so Base.metadata knows about them
from rsvp.models.event import Event          # noqa: F401
from rsvp.models.attendee import Attendee    # noqa: F401

logger = logging.getLogger(__name__)


def _default_gateway() -> Gateway:
    # SQLite dev mode: no migrations, create tables on startup.
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)
    return SqlGateway(SessionLocal, settings.EVENT_CREATION_PASSWORD)


def create_app(gateway: Optional[Gateway] = None) -> FastAPI:
    """Build the application; the store is created per app and loaded on startup."""
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        gw = gateway or _default_gateway()
        store = AttendeeStore(gw)
        app.state.gateway = gw
        app.state.store = store

        if settings.SEED_SAMPLE_EVENT:
            await seed_sample_event(gw, settings.EVENT_CREATION_PASSWORD)
        for load in (store.load_events, store.load_attendees):
            await load()
            if store.state.error:
                logger.warning("Initial %s failed: %s", load.__name__, store.state.error)
        logger.info(
            "Store ready with %d events and %d attendees",
            len(store.state.events),
            len(store.state.attendees),
        )
        yield

    app = FastAPI(
        title="Neo RSVP",
        description="Event listing, attendee lists and RSVPs backed by a relational gateway",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS.split(","),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(events.router, prefix="/api/events", tags=["Events"])
    app.include_router(attendees.router, prefix="/api/events", tags=["Attendees"])

    @app.get("/api/health")
    def health_check():
        return {"status": "ok"}

    return app


app = create_app()
