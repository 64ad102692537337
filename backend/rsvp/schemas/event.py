"""Pydantic schemas for Events."""
from __future__ import annotations
import re
from datetime import date as Date, datetime
from typing import Optional
from pydantic import BaseModel, field_validator

from rsvp.schemas.attendee import AttendeeOut
from rsvp.utils import format_event_time

_TIME_RE = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")


class EventRow(BaseModel):
    """An ``events`` row as returned by the gateway.

    The creation password hash is never part of a row model.
    """

    id: str
    title: str
    description: Optional[str] = None
    date: Date
    time: str
    location: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True, "frozen": True}


class EventCreate(BaseModel):
    title: str
    date: Date
    time: str
    location: str
    description: Optional[str] = None
    password: str

    @field_validator("title")
    @classmethod
    def title_min_length(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 3:
            raise ValueError("Title must be at least 3 characters")
        return value

    @field_validator("time")
    @classmethod
    def time_format(cls, value: str) -> str:
        if not _TIME_RE.match(value):
            raise ValueError("Time must be in HH:MM format")
        return value

    @field_validator("location")
    @classmethod
    def location_min_length(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 3:
            raise ValueError("Location must be at least 3 characters")
        return value

    @field_validator("description")
    @classmethod
    def blank_description_is_none(cls, value: Optional[str]) -> Optional[str]:
        return value or None

    @field_validator("password")
    @classmethod
    def password_min_length(cls, value: str) -> str:
        if len(value) < 4:
            raise ValueError("Password must be at least 4 characters")
        return value


class EventOut(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    date: Date
    time: str
    location: str
    display_time: str
    attendee_count: int

    @classmethod
    def from_row(cls, row: EventRow, attendee_count: int) -> "EventOut":
        return cls(
            id=row.id,
            title=row.title,
            description=row.description,
            date=row.date,
            time=row.time,
            location=row.location,
            display_time=format_event_time(row.date, row.time),
            attendee_count=attendee_count,
        )


class EventDetail(EventOut):
    attendees: list[AttendeeOut] = []


class AttendeeCountOut(BaseModel):
    event_id: str
    attendee_count: int
