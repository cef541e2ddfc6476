"""
Event browsing - read-only listing of events and their dates
"""
import logging
from typing import List, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ticketbooth.models import Event, EventDate
from ticketbooth.services.errors import EventDateNotFoundError

logger = logging.getLogger(__name__)


class EventService:
    """Service for event-related reads"""

    @staticmethod
    async def list_events(
        db: AsyncSession,
        page: int = 1,
        page_size: int = 10,
    ) -> Tuple[List[Event], int]:
        """List events with their dates and venues, oldest event first"""
        total = await db.scalar(select(func.count()).select_from(Event))

        query = (
            select(Event)
            .options(selectinload(Event.dates).selectinload(EventDate.venue))
            .order_by(Event.id)
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        result = await db.execute(query)
        return list(result.scalars().all()), total

    @staticmethod
    async def get_event_date(db: AsyncSession, event_date_id: int) -> EventDate:
        """Get one event date with its event and venue"""
        query = (
            select(EventDate)
            .where(EventDate.id == event_date_id)
            .options(selectinload(EventDate.event), selectinload(EventDate.venue))
        )
        result = await db.execute(query)
        event_date = result.scalar_one_or_none()

        if event_date is None:
            logger.info(f"Event date {event_date_id} requested but not found")
            raise EventDateNotFoundError(event_date_id)
        return event_date
