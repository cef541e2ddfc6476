"""
Value types passed between the transport layer and the booking engine
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from ticketbooth.models.event import SeatingMode


@dataclass(frozen=True)
class TierSelection:
    """GA request line: how many units of one ticket type"""
    ticket_type_id: int
    quantity: int


@dataclass(frozen=True)
class SeatSelection:
    """Seated request line; the seat's assigned ticket type wins over ticket_type_id"""
    seat_id: int
    ticket_type_id: Optional[int] = None


@dataclass(frozen=True)
class Occurrence:
    """What the event catalog knows about one event date"""
    event_date_id: int
    event_id: int
    seating_mode: SeatingMode


@dataclass
class IssuedTicket:
    id: int
    ticket_type_id: int
    ticket_type: str
    to_name: str
    seat_id: Optional[int] = None
    seat_label: Optional[str] = None


@dataclass
class BookingResult:
    order_id: int
    total_amount: Decimal
    tickets: List[IssuedTicket] = field(default_factory=list)
