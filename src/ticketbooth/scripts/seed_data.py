"""
Seed script to provision a sample catalog for local testing

Usage:
    python -m ticketbooth.scripts.seed_data
"""
import asyncio
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import select

from ticketbooth.core.database import AsyncSessionLocal, init_db
from ticketbooth.models import (
    Event,
    EventDate,
    Seat,
    SeatAssignment,
    SeatingMode,
    TicketType,
    TicketTypeAllocation,
    Venue,
)


async def get_or_create_ticket_types(db, names: Iterable[str]) -> Dict[str, TicketType]:
    """Create ticket types by name, reusing existing ones"""
    ticket_types = {}
    for name in names:
        result = await db.execute(select(TicketType).where(TicketType.name == name))
        ticket_type = result.scalar_one_or_none()
        if ticket_type is None:
            ticket_type = TicketType(name=name, description="")
            db.add(ticket_type)
            await db.flush()
        ticket_types[name] = ticket_type
    return ticket_types


async def create_ga_event_date(
    db,
    event: Event,
    venue: Venue,
    tiers: List[Tuple[TicketType, Decimal, int]],
    date: Optional[datetime] = None,
) -> EventDate:
    """
    Create a GA event date with one allocation per (ticket type, price, quantity).
    """
    event_date = EventDate(
        event_id=event.id,
        venue_id=venue.id,
        seating_mode=SeatingMode.GA,
        date=date,
        total_tickets=sum(quantity for _, _, quantity in tiers),
    )
    db.add(event_date)
    await db.flush()

    for ticket_type, price, quantity in tiers:
        db.add(TicketTypeAllocation(
            event_date_id=event_date.id,
            ticket_type_id=ticket_type.id,
            price=price,
            remaining_tickets=quantity,
            max_quantity=quantity,
        ))
    await db.flush()
    return event_date


async def create_seated_event_date(
    db,
    event: Event,
    venue: Venue,
    sections: List[Tuple[str, int, int, TicketType, Decimal]],
    date: Optional[datetime] = None,
) -> Tuple[EventDate, List[Seat]]:
    """
    Create a seated event date.

    Each section is (name, rows, seats_per_row, ticket_type, price); seats are
    created on the venue and assigned to the event date.
    """
    event_date = EventDate(
        event_id=event.id,
        venue_id=venue.id,
        seating_mode=SeatingMode.SEATED,
        date=date,
    )
    db.add(event_date)
    await db.flush()

    seats = []
    for name, rows, seats_per_row, ticket_type, price in sections:
        for row in range(1, rows + 1):
            for number in range(1, seats_per_row + 1):
                seat = Seat(venue_id=venue.id, section=name, row=str(row), number=str(number))
                db.add(seat)
                await db.flush()
                db.add(SeatAssignment(
                    event_date_id=event_date.id,
                    seat_id=seat.id,
                    price=price,
                    ticket_type_id=ticket_type.id,
                ))
                seats.append(seat)

    event_date.total_tickets = len(seats)
    await db.flush()
    return event_date, seats


async def seed_database():
    """Main seeding function"""
    print("Starting database seeding...")
    await init_db()

    async with AsyncSessionLocal() as db:
        async with db.begin():
            ticket_types = await get_or_create_ticket_types(
                db, ["General Admission", "VIP", "Standard", "Premium"]
            )

            festival = Event(slug="summer-fest", title="Summer Fest", description="Open-air festival")
            theatre = Event(slug="hamlet", title="Hamlet", description="Shakespeare in the round")
            field = Venue(name="Riverside Field", capacity=5000)
            hall = Venue(name="Royal Hall", capacity=200)
            db.add_all([festival, theatre, field, hall])
            await db.flush()

            now = datetime.utcnow()
            ga_date = await create_ga_event_date(
                db, festival, field,
                tiers=[
                    (ticket_types["General Admission"], Decimal("25.00"), 4000),
                    (ticket_types["VIP"], Decimal("120.00"), 200),
                ],
                date=now + timedelta(days=30),
            )
            seated_date, seats = await create_seated_event_date(
                db, theatre, hall,
                sections=[
                    ("A", 5, 10, ticket_types["Premium"], Decimal("80.00")),
                    ("B", 10, 15, ticket_types["Standard"], Decimal("40.00")),
                ],
                date=now + timedelta(days=14),
            )

    print(f"Created GA event date {ga_date.id} ({ga_date.total_tickets} tickets)")
    print(f"Created seated event date {seated_date.id} ({len(seats)} seats)")


if __name__ == "__main__":
    asyncio.run(seed_database())
