"""
Pydantic schemas for event and event date resources
"""
from datetime import datetime
from typing import List, Optional

from ticketbooth.models import SeatingMode
from ticketbooth.schemas.booking import CamelModel


class VenueInfo(CamelModel):
    id: int
    name: str
    capacity: int


class EventInfo(CamelModel):
    id: int
    title: str
    description: str


class EventDateItem(CamelModel):
    """One date of an event as shown in the listing"""
    id: int
    date: Optional[datetime] = None
    seating_mode: SeatingMode
    venue_name: Optional[str] = None

    @classmethod
    def from_event_date(cls, event_date):
        return cls(
            id=event_date.id,
            date=event_date.date,
            seating_mode=event_date.seating_mode,
            venue_name=event_date.venue.name if event_date.venue else None,
        )


class EventListItem(CamelModel):
    id: int
    slug: str
    title: str
    description: str
    dates: List[EventDateItem]

    @classmethod
    def from_event(cls, event):
        """Convert Event ORM model (dates and venues loaded) to response"""
        return cls(
            id=event.id,
            slug=event.slug,
            title=event.title,
            description=event.description,
            dates=[EventDateItem.from_event_date(d) for d in event.dates],
        )


class EventListResponse(CamelModel):
    """Response schema for listing events"""
    events: List[EventListItem]
    total: int
    page: int
    page_size: int


class EventDateResponse(CamelModel):
    id: int
    seating_mode: SeatingMode
    date: Optional[datetime] = None
    event: Optional[EventInfo] = None
    venue: Optional[VenueInfo] = None

    @classmethod
    def from_event_date(cls, event_date):
        return cls(
            id=event_date.id,
            seating_mode=event_date.seating_mode,
            date=event_date.date,
            event=EventInfo.model_validate(event_date.event, from_attributes=True) if event_date.event else None,
            venue=VenueInfo.model_validate(event_date.venue, from_attributes=True) if event_date.venue else None,
        )
