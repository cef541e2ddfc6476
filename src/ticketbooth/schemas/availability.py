"""Pydantic schemas for availability listings"""
from decimal import Decimal
from typing import List, Optional

from ticketbooth.models import SeatingMode
from ticketbooth.schemas.booking import CamelModel


class TierAvailabilityResponse(CamelModel):
    id: int
    name: str
    price: Decimal
    remaining: int


class SeatAvailabilityResponse(CamelModel):
    seat_id: int
    label: str
    ticket_type: str
    price: Decimal
    available: bool


class RowAvailabilityResponse(CamelModel):
    row: str
    seats: List[SeatAvailabilityResponse]


class SectionAvailabilityResponse(CamelModel):
    section: str
    rows: List[RowAvailabilityResponse]


class AvailabilityResponse(CamelModel):
    seating_mode: SeatingMode
    tiers: Optional[List[TierAvailabilityResponse]] = None
    sections: Optional[List[SectionAvailabilityResponse]] = None

    @classmethod
    def from_availability(cls, availability):
        return cls.model_validate(availability, from_attributes=True)
