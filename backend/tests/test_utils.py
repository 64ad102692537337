"""Tests for display formatting helpers."""
from datetime import date, datetime, timezone

from rsvp.utils import format_event_time, format_rsvp_date


class TestFormatEventTime:
    def test_time_range(self):
        assert format_event_time(date(2070, 5, 15), "18:00 - 22:00") == "May 15, 2070 · 18:00 - 22:00"

    def test_blank_time_shows_only_the_day(self):
        assert format_event_time(date(2070, 5, 15), "  ") == "May 15, 2070"


class TestFormatRsvpDate:
    def test_converts_to_display_timezone(self):
        rsvp = datetime(2026, 3, 2, 2, 0, tzinfo=timezone.utc)
        assert format_rsvp_date(rsvp, "UTC") == "Mar 02, 2026"
        assert format_rsvp_date(rsvp, "America/New_York") == "Mar 01, 2026"

    def test_naive_timestamp_is_utc(self):
        assert format_rsvp_date(datetime(2026, 3, 2, 2, 0), "Asia/Tokyo") == "Mar 02, 2026"
