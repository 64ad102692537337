"""Display formatting for event times and RSVP dates."""
from datetime import date, datetime

import pytz


def format_event_time(event_date: date, event_time: str) -> str:
    """``date(2070, 5, 15), "18:00 - 22:00"`` → ``"May 15, 2070 · 18:00 - 22:00"``."""
    day = event_date.strftime("%b %d, %Y")
    event_time = (event_time or "").strip()
    if not event_time:
        return day
    return f"{day} · {event_time}"


def format_rsvp_date(rsvp_date: datetime, tz_name: str = "UTC") -> str:
    """Calendar date of an RSVP in ``tz_name``.

    Naive timestamps (SQLite drops the offset) are taken as UTC.
    """
    if rsvp_date.tzinfo is None:
        rsvp_date = pytz.utc.localize(rsvp_date)
    local = rsvp_date.astimezone(pytz.timezone(tz_name))
    return local.strftime("%b %d, %Y")
