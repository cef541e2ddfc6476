"""Shared FastAPI dependencies"""
from typing import Optional

from fastapi import Depends, Header, Query
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ticketbooth.core.database import get_session_factory
from ticketbooth.services import BookingCoordinator


async def get_current_user_id(
    x_user_id: Optional[int] = Header(None, alias="X-User-Id", gt=0),
    user_id: Optional[int] = Query(None, alias="userId", gt=0),
) -> Optional[int]:
    """
    Buyer id supplied by the identity layer in front of this service.

    Token verification happens upstream; the header wins over the query
    parameter when both are present.
    """
    return x_user_id or user_id


def get_booking_coordinator(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> BookingCoordinator:
    return BookingCoordinator(session_factory)
