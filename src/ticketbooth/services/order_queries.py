"""
Read-only order retrieval with joined ticket metadata
"""
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ticketbooth.models import Order, OrderTicket, Ticket
from ticketbooth.services.errors import OrderNotFoundError


def _with_tickets():
    """Eager-load tickets with their type, seat, event and event date"""
    ticket = selectinload(Order.order_tickets).selectinload(OrderTicket.ticket)
    return [
        ticket.selectinload(Ticket.ticket_type),
        ticket.selectinload(Ticket.seat),
        ticket.selectinload(Ticket.event),
        ticket.selectinload(Ticket.event_date),
    ]


class OrderQueries:
    """Queries over committed orders; never writes"""

    @staticmethod
    async def get_order(db: AsyncSession, order_id: int) -> Order:
        query = (
            select(Order)
            .where(Order.id == order_id)
            .options(*_with_tickets())
        )
        result = await db.execute(query)
        order = result.scalar_one_or_none()
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    @staticmethod
    async def get_user_orders(db: AsyncSession, user_id: int) -> List[Order]:
        """All orders of a buyer, newest first"""
        query = (
            select(Order)
            .where(Order.user_id == user_id)
            .options(*_with_tickets())
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
        result = await db.execute(query)
        return list(result.scalars().all())
