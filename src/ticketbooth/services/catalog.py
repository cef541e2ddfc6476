"""
Catalog collaborators used by the booking engine

EventCatalog resolves an event date to its seating mode; CatalogLookup
supplies display names for responses. Both open their own short sessions so
they never share the booking transaction.
"""
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ticketbooth.models import EventDate, Seat, TicketType
from ticketbooth.services.types import Occurrence

logger = logging.getLogger(__name__)


class EventCatalog:
    """Resolves event dates (occurrences)"""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def resolve_occurrence(self, event_date_id: int) -> Optional[Occurrence]:
        """Return the event date's seating mode and owning event, or None"""
        query = select(
            EventDate.id,
            EventDate.event_id,
            EventDate.seating_mode,
        ).where(EventDate.id == event_date_id)

        async with self.session_factory() as session:
            row = (await session.execute(query)).one_or_none()

        if row is None:
            return None
        return Occurrence(event_date_id=row.id, event_id=row.event_id, seating_mode=row.seating_mode)


class CatalogLookup:
    """
    Best-effort display metadata.

    Runs after the booking committed, so any failed lookup degrades to a
    synthetic label instead of raising.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def ticket_type_name(self, ticket_type_id: int) -> str:
        fallback = f"TicketType-{ticket_type_id}"
        try:
            async with self.session_factory() as session:
                name = await session.scalar(
                    select(TicketType.name).where(TicketType.id == ticket_type_id)
                )
        except Exception as e:
            logger.warning(f"Ticket type lookup failed for {ticket_type_id}: {e}", exc_info=True)
            return fallback
        return name or fallback

    async def seat_label(self, seat_id: int) -> str:
        fallback = f"Seat-{seat_id}"
        try:
            async with self.session_factory() as session:
                seat = await session.get(Seat, seat_id)
        except Exception as e:
            logger.warning(f"Seat lookup failed for {seat_id}: {e}", exc_info=True)
            return fallback
        return seat.label if seat is not None else fallback
