"""Pydantic schemas for Attendees."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, field_validator

from rsvp.utils import format_rsvp_date


class AttendeeRow(BaseModel):
    """An ``attendees`` row as returned by the gateway."""

    id: str
    event_id: str
    name: str
    email: str
    avatar_url: Optional[str] = None
    rsvp_date: datetime

    model_config = {"from_attributes": True, "frozen": True}


class RSVPCreate(BaseModel):
    name: str
    email: EmailStr

    @field_validator("name")
    @classmethod
    def name_min_length(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise ValueError("Name must be at least 2 characters.")
        return value


class AttendeeOut(BaseModel):
    id: str
    event_id: str
    name: str
    avatar_url: Optional[str] = None
    rsvp_date: datetime
    rsvp_display: str

    @classmethod
    def from_row(cls, row: AttendeeRow, tz_name: str = "UTC") -> "AttendeeOut":
        return cls(
            id=row.id,
            event_id=row.event_id,
            name=row.name,
            avatar_url=row.avatar_url,
            rsvp_date=row.rsvp_date,
            rsvp_display=format_rsvp_date(row.rsvp_date, tz_name),
        )
