"""
Services package exports
"""
from ticketbooth.services.availability import AvailabilityService
from ticketbooth.services.booking_coordinator import BookingCoordinator
from ticketbooth.services.catalog import CatalogLookup, EventCatalog
from ticketbooth.services.errors import (
    BookingError,
    BookingStorageError,
    ErrorCode,
    EventDateNotFoundError,
    InsufficientInventoryError,
    InvalidBookingRequestError,
    NotFoundError,
    OrderNotFoundError,
    SeatAlreadyTakenError,
    SeatingModeMismatchError,
    SeatNotFoundError,
)
from ticketbooth.services.event_service import EventService
from ticketbooth.services.inventory_ledger import InventoryLedger
from ticketbooth.services.order_assembler import OrderAssembler
from ticketbooth.services.order_queries import OrderQueries
from ticketbooth.services.seat_allocator import SeatAllocator
from ticketbooth.services.types import BookingResult, IssuedTicket, SeatSelection, TierSelection

__all__ = [
    "AvailabilityService",
    "BookingCoordinator",
    "CatalogLookup",
    "EventCatalog",
    "EventService",
    "BookingError",
    "BookingStorageError",
    "ErrorCode",
    "EventDateNotFoundError",
    "InsufficientInventoryError",
    "InvalidBookingRequestError",
    "NotFoundError",
    "OrderNotFoundError",
    "SeatAlreadyTakenError",
    "SeatingModeMismatchError",
    "SeatNotFoundError",
    "InventoryLedger",
    "OrderAssembler",
    "OrderQueries",
    "SeatAllocator",
    "BookingResult",
    "IssuedTicket",
    "SeatSelection",
    "TierSelection",
]
