"""
Pydantic schemas for API request/response validation
"""
from ticketbooth.schemas.availability import AvailabilityResponse
from ticketbooth.schemas.booking import (
    BookingCreate,
    BookingResponse,
    ErrorResponse,
    SeatBookingRequest,
    TicketResponse,
    TierBookingRequest,
)
from ticketbooth.schemas.event import (
    EventDateItem,
    EventDateResponse,
    EventInfo,
    EventListItem,
    EventListResponse,
    VenueInfo,
)
from ticketbooth.schemas.order import OrderResponse, OrderTicketResponse

__all__ = [
    # Availability
    "AvailabilityResponse",
    # Bookings
    "BookingCreate",
    "BookingResponse",
    "ErrorResponse",
    "SeatBookingRequest",
    "TicketResponse",
    "TierBookingRequest",
    # Events
    "EventDateItem",
    "EventDateResponse",
    "EventInfo",
    "EventListItem",
    "EventListResponse",
    "VenueInfo",
    # Orders
    "OrderResponse",
    "OrderTicketResponse",
]
