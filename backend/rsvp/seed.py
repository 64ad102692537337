"""Sample data for an empty database."""
import logging
from datetime import date

from rsvp.gateway.interfaces import Gateway

logger = logging.getLogger(__name__)

SAMPLE_EVENT = {
    "title": "Neo Tokyo 2070 Tech Summit",
    "description": (
        "Join the most innovative minds for a glimpse into the future of technology. "
        "Experience demos of cutting-edge neural interfaces and quantum computing applications."
    ),
    "date": date(2070, 5, 15),
    "time": "18:00 - 22:00",
    "location": "Quantum District, Neo Tokyo",
}


async def seed_sample_event(gateway: Gateway, creation_password: str) -> bool:
    """Insert the sample event when no events exist. Returns True if inserted."""
    if await gateway.select_events():
        return False
    row = await gateway.insert_event(creation_password=creation_password, **SAMPLE_EVENT)
    logger.info("Seeded sample event %s", row.id)
    return True
