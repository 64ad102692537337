"""Event ORM model."""
import uuid
from sqlalchemy import Column, String, Date, DateTime, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from rsvp.database import Base


class Event(Base):
    __tablename__ = "events"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    date = Column(Date, nullable=False, index=True)
    time = Column(String(50), nullable=False)  # "HH:MM" or a range such as "18:00 - 22:00"
    location = Column(String(255), nullable=False)
    creation_password_hash = Column(String(60), nullable=False)  # bcrypt, write-once
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    attendees = relationship("Attendee", back_populates="event")
