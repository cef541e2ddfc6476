"""
Seat Allocator - availability pre-check and pricing for addressed seats
"""
from decimal import Decimal
from typing import Iterable, Set, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ticketbooth.models import SeatAssignment, Ticket
from ticketbooth.services.errors import SeatNotFoundError


class SeatAllocator:
    """
    The availability check here is advisory: it gives a fast rejection in the
    common case, while the unique constraint on tickets decides races.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def check_availability(self, event_date_id: int, seat_ids: Iterable[int]) -> Set[int]:
        """Return the subset of ``seat_ids`` that already have a ticket for the event date"""
        seat_ids = list(seat_ids)
        if not seat_ids:
            return set()

        query = select(Ticket.seat_id).where(
            Ticket.event_date_id == event_date_id,
            Ticket.seat_id.in_(seat_ids),
        )
        result = await self.session.execute(query)
        return set(result.scalars().all())

    async def price_and_ticket_type(self, event_date_id: int, seat_id: int) -> Tuple[Decimal, int]:
        """Return (price, ticket_type_id) of the seat for the event date"""
        query = select(
            SeatAssignment.price,
            SeatAssignment.ticket_type_id,
        ).where(
            SeatAssignment.event_date_id == event_date_id,
            SeatAssignment.seat_id == seat_id,
        )
        row = (await self.session.execute(query)).one_or_none()
        if row is None:
            raise SeatNotFoundError(event_date_id, seat_id)
        return Decimal(row.price), row.ticket_type_id
