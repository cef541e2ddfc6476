"""Bookings API endpoints"""
from typing import Optional

from fastapi import APIRouter, Depends

from ticketbooth.api.dependencies import get_booking_coordinator, get_current_user_id
from ticketbooth.schemas import BookingCreate, BookingResponse, ErrorResponse
from ticketbooth.services import BookingCoordinator, InvalidBookingRequestError

router = APIRouter()


@router.post(
    "/bookings",
    response_model=BookingResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_booking(
    booking_data: BookingCreate,
    user_id: Optional[int] = Depends(get_current_user_id),
    coordinator: BookingCoordinator = Depends(get_booking_coordinator),
):
    """
    Book GA tiers or specific seats for one event date

    - **tiers**: GA request, list of `{ticketTypeId, quantity}`
    - **seats**: seated request, list of `{seatId, ticketTypeId}`

    Exactly one of the two must be non-empty. The booking either fully
    succeeds or leaves no trace.
    """
    buyer_id = user_id or booking_data.user_id
    if buyer_id is None:
        raise InvalidBookingRequestError("userId is required")

    if booking_data.is_ga:
        result = await coordinator.book_ga_tickets(
            event_date_id=booking_data.event_date_id,
            user_id=buyer_id,
            customer_name=booking_data.customer_name,
            payment_source=booking_data.payment_source,
            tiers=[tier.to_selection() for tier in booking_data.tiers],
        )
    else:
        result = await coordinator.book_seated_tickets(
            event_date_id=booking_data.event_date_id,
            user_id=buyer_id,
            customer_name=booking_data.customer_name,
            payment_source=booking_data.payment_source,
            seats=[seat.to_selection() for seat in booking_data.seats],
        )

    return BookingResponse.from_result(result)
