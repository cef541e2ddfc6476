"""Pydantic schemas for booking requests and results"""
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from ticketbooth.core.config import settings
from ticketbooth.services.types import BookingResult, IssuedTicket, SeatSelection, TierSelection


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TierBookingRequest(CamelModel):
    ticket_type_id: int = Field(..., gt=0)
    quantity: int = Field(..., gt=0)

    def to_selection(self) -> TierSelection:
        return TierSelection(ticket_type_id=self.ticket_type_id, quantity=self.quantity)


class SeatBookingRequest(CamelModel):
    seat_id: int = Field(..., gt=0)
    ticket_type_id: Optional[int] = Field(None, gt=0)

    def to_selection(self) -> SeatSelection:
        return SeatSelection(seat_id=self.seat_id, ticket_type_id=self.ticket_type_id)


class BookingCreate(CamelModel):
    """
    Exactly one of ``tiers`` (GA) or ``seats`` (seated) must be non-empty.
    """
    event_date_id: int = Field(..., gt=0)
    customer_name: str = Field(..., min_length=1, max_length=255)
    payment_source: str = Field(..., min_length=1, max_length=255)
    user_id: Optional[int] = Field(None, gt=0)
    tiers: List[TierBookingRequest] = Field(default_factory=list)
    seats: List[SeatBookingRequest] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_shape(self):
        if bool(self.tiers) == bool(self.seats):
            raise ValueError("Either tiers or seats must be provided, not both")

        requested = sum(t.quantity for t in self.tiers) + len(self.seats)
        if requested > settings.MAX_TICKETS_PER_BOOKING:
            raise ValueError(
                f"Cannot book more than {settings.MAX_TICKETS_PER_BOOKING} tickets at once"
            )
        return self

    @property
    def is_ga(self) -> bool:
        return bool(self.tiers)


class TicketResponse(CamelModel):
    id: int
    ticket_type: str
    seat_label: Optional[str] = None
    to_name: str

    @classmethod
    def from_issued(cls, ticket: IssuedTicket):
        return cls(
            id=ticket.id,
            ticket_type=ticket.ticket_type,
            seat_label=ticket.seat_label,
            to_name=ticket.to_name,
        )


class BookingResponse(CamelModel):
    order_id: int
    total_amount: Decimal
    tickets: List[TicketResponse]

    @classmethod
    def from_result(cls, result: BookingResult):
        """Convert a committed BookingResult to response"""
        return cls(
            order_id=result.order_id,
            total_amount=result.total_amount,
            tickets=[TicketResponse.from_issued(t) for t in result.tickets],
        )


class ErrorResponse(BaseModel):
    error: str
    message: str
