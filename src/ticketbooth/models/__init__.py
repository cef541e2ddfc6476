"""
SQLAlchemy models for the booking engine

Import all models here for easy access and to ensure proper relationship setup.
"""
from ticketbooth.core.database import Base

from ticketbooth.models.event import Event, EventDate, SeatingMode, Venue
from ticketbooth.models.seat import Seat, TicketType
from ticketbooth.models.inventory import SeatAssignment, TicketTypeAllocation
from ticketbooth.models.order import TICKET_SEAT_CONSTRAINT, Order, OrderTicket, Ticket

__all__ = [
    "Base",
    "Event",
    "EventDate",
    "SeatingMode",
    "Venue",
    "Seat",
    "TicketType",
    "SeatAssignment",
    "TicketTypeAllocation",
    "TICKET_SEAT_CONSTRAINT",
    "Order",
    "OrderTicket",
    "Ticket",
]
