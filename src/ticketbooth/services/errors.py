"""
Booking error kinds

Every failure of the booking engine is one of these exceptions. Each carries
a machine-readable code plus the structured context the caller needs to
react (which ticket type ran short, which seats were taken).
"""
from enum import Enum
from typing import Iterable, Optional


class ErrorCode(str, Enum):
    """Machine-readable error codes surfaced by the transport layer"""
    BAD_REQUEST = "BAD_REQUEST"
    NOT_FOUND = "NOT_FOUND"
    SEATING_MODE_MISMATCH = "SEATING_MODE_MISMATCH"
    INSUFFICIENT_INVENTORY = "INSUFFICIENT_INVENTORY"
    SEAT_ALREADY_TAKEN = "SEAT_ALREADY_TAKEN"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class BookingError(Exception):
    """Base exception for booking engine errors"""
    code = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class InvalidBookingRequestError(BookingError):
    """Raised when a request cannot describe a booking (no lines, non-positive quantity)"""
    code = ErrorCode.BAD_REQUEST


class NotFoundError(BookingError):
    """Raised when a referenced record does not exist"""
    code = ErrorCode.NOT_FOUND


class EventDateNotFoundError(NotFoundError):
    def __init__(self, event_date_id: int):
        super().__init__(f"Event date {event_date_id} not found")
        self.event_date_id = event_date_id


class SeatNotFoundError(NotFoundError):
    """Raised when a seat is not sellable for the event date"""

    def __init__(self, event_date_id: int, seat_id: int):
        super().__init__(f"Seat {seat_id} is not sold for event date {event_date_id}")
        self.event_date_id = event_date_id
        self.seat_id = seat_id


class OrderNotFoundError(NotFoundError):
    def __init__(self, order_id: int):
        super().__init__(f"Order {order_id} not found")
        self.order_id = order_id


class SeatingModeMismatchError(BookingError):
    """Raised when the request shape does not match the event date's seating mode"""
    code = ErrorCode.SEATING_MODE_MISMATCH

    def __init__(self, event_date_id: int, expected: str, actual: str):
        super().__init__(
            f"Event date {event_date_id} is {actual}, not {expected}"
        )
        self.event_date_id = event_date_id
        self.expected = expected
        self.actual = actual


class InsufficientInventoryError(BookingError):
    """
    Raised when a GA reservation cannot be satisfied.

    ``remaining`` is the count seen inside the failed transaction, or None
    when the ticket type is not sold for the event date at all.
    """
    code = ErrorCode.INSUFFICIENT_INVENTORY

    def __init__(self, ticket_type_id: int, requested: int, remaining: Optional[int]):
        if remaining is None:
            message = f"Ticket type {ticket_type_id} is not on sale for this event date"
        else:
            message = (
                f"Not enough tickets left for ticket type {ticket_type_id} "
                f"(remaining: {remaining}, requested: {requested})"
            )
        super().__init__(message)
        self.ticket_type_id = ticket_type_id
        self.requested = requested
        self.remaining = remaining


class SeatAlreadyTakenError(BookingError):
    """Raised when one or more requested seats are no longer available"""
    code = ErrorCode.SEAT_ALREADY_TAKEN

    def __init__(self, seat_ids: Iterable[int]):
        self.seat_ids = sorted(set(seat_ids))
        super().__init__(
            f"Seats {self.seat_ids} are no longer available"
            if self.seat_ids else "One or more selected seats are no longer available"
        )


class BookingStorageError(BookingError):
    """Raised for any other storage failure; the cause is chained"""
    code = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str = "Failed to create booking"):
        super().__init__(message)
