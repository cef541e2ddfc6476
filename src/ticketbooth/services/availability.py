"""
Availability listings for one event date (read-only)
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ticketbooth.models import (
    EventDate,
    Seat,
    SeatAssignment,
    SeatingMode,
    Ticket,
    TicketType,
    TicketTypeAllocation,
)
from ticketbooth.services.errors import EventDateNotFoundError


@dataclass
class TierAvailability:
    id: int
    name: str
    price: Decimal
    remaining: int


@dataclass
class SeatAvailability:
    seat_id: int
    label: str
    ticket_type: str
    price: Decimal
    available: bool


@dataclass
class RowAvailability:
    row: str
    seats: List[SeatAvailability] = field(default_factory=list)


@dataclass
class SectionAvailability:
    section: str
    rows: List[RowAvailability] = field(default_factory=list)


@dataclass
class Availability:
    seating_mode: SeatingMode
    tiers: Optional[List[TierAvailability]] = None
    sections: Optional[List[SectionAvailability]] = None


def label_sort_key(value: str):
    """Numeric row and seat labels sort by value ("2" before "10"), others after them by text"""
    if value.isdigit():
        return (0, int(value), "")
    return (1, 0, value)


class AvailabilityService:
    """Answers 'what is left' for GA tiers and seat maps"""

    @staticmethod
    async def get_availability(db: AsyncSession, event_date_id: int) -> Availability:
        event_date = await db.get(EventDate, event_date_id)
        if event_date is None:
            raise EventDateNotFoundError(event_date_id)

        if event_date.seating_mode == SeatingMode.GA:
            return Availability(
                seating_mode=SeatingMode.GA,
                tiers=await AvailabilityService.get_ga_tiers(db, event_date_id),
            )
        return Availability(
            seating_mode=SeatingMode.SEATED,
            sections=await AvailabilityService.get_seat_map(db, event_date_id),
        )

    @staticmethod
    async def get_ga_tiers(db: AsyncSession, event_date_id: int) -> List[TierAvailability]:
        query = (
            select(
                TicketType.id,
                TicketType.name,
                TicketTypeAllocation.price,
                TicketTypeAllocation.remaining_tickets,
            )
            .join(TicketType, TicketTypeAllocation.ticket_type_id == TicketType.id)
            .where(TicketTypeAllocation.event_date_id == event_date_id)
            .order_by(TicketType.id)
        )
        result = await db.execute(query)
        return [
            TierAvailability(id=row.id, name=row.name, price=Decimal(row.price), remaining=row.remaining_tickets)
            for row in result.all()
        ]

    @staticmethod
    async def get_seat_map(db: AsyncSession, event_date_id: int) -> List[SectionAvailability]:
        """Seats grouped by section then row; a seat is available when no ticket holds it"""
        query = (
            select(
                Seat.id,
                Seat.section,
                Seat.row,
                Seat.number,
                SeatAssignment.price,
                TicketType.name.label("ticket_type_name"),
                Ticket.id.label("ticket_id"),
            )
            .select_from(SeatAssignment)
            .join(Seat, SeatAssignment.seat_id == Seat.id)
            .join(TicketType, SeatAssignment.ticket_type_id == TicketType.id)
            .outerjoin(
                Ticket,
                and_(
                    Ticket.event_date_id == SeatAssignment.event_date_id,
                    Ticket.seat_id == SeatAssignment.seat_id,
                ),
            )
            .where(SeatAssignment.event_date_id == event_date_id)
        )
        result = await db.execute(query)

        sections: Dict[str, SectionAvailability] = {}
        rows: Dict[tuple, RowAvailability] = {}
        seat_rows = sorted(
            result.all(),
            key=lambda r: (r.section, label_sort_key(r.row), label_sort_key(r.number)),
        )
        for row in seat_rows:
            section = sections.get(row.section)
            if section is None:
                section = sections[row.section] = SectionAvailability(section=row.section)

            seat_row = rows.get((row.section, row.row))
            if seat_row is None:
                seat_row = rows[(row.section, row.row)] = RowAvailability(row=row.row)
                section.rows.append(seat_row)

            seat_row.seats.append(SeatAvailability(
                seat_id=row.id,
                label=f"{row.section}{row.row}{row.number}",
                ticket_type=row.ticket_type_name,
                price=Decimal(row.price),
                available=row.ticket_id is None,
            ))

        return list(sections.values())
