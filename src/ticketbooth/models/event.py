"""
Event, venue and event date (occurrence) models
"""
from enum import Enum as PyEnum

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from ticketbooth.core.database import Base


class SeatingMode(str, PyEnum):
    """How an event date sells its inventory"""
    GA = "GA"
    SEATED = "SEATED"


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String(255), nullable=False, unique=True)
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=False, default="")

    # Relationships
    dates = relationship("EventDate", back_populates="event", order_by="EventDate.id")

    def __repr__(self):
        return f"<Event(id={self.id}, slug='{self.slug}', title='{self.title}')>"


class Venue(Base):
    __tablename__ = "venues"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    capacity = Column(Integer, nullable=False, default=0)

    seats = relationship("Seat", back_populates="venue")

    def __repr__(self):
        return f"<Venue(id={self.id}, name='{self.name}', capacity={self.capacity})>"


class EventDate(Base):
    """
    One dated staging of an event at a venue.

    The seating mode is fixed when the event date is provisioned; every
    booking against it uses that mode.
    """
    __tablename__ = "event_dates"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    venue_id = Column(Integer, ForeignKey("venues.id", ondelete="SET NULL"), nullable=True)
    seating_mode = Column(Enum(SeatingMode, name="seating_mode"), nullable=False)
    date = Column(DateTime, nullable=True)
    total_tickets = Column(Integer, nullable=False, default=0)

    # Relationships
    event = relationship("Event", back_populates="dates")
    venue = relationship("Venue")

    def __repr__(self):
        return (f"<EventDate(id={self.id}, event_id={self.event_id}, "
                f"mode='{self.seating_mode.value}', date='{self.date}')>")
