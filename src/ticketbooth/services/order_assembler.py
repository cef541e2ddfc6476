"""
Order Assembler - append-only writes of orders and tickets
"""
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ticketbooth.core.database import is_unique_violation
from ticketbooth.models import TICKET_SEAT_CONSTRAINT, Order, OrderTicket, Ticket
from ticketbooth.services.errors import SeatAlreadyTakenError


class OrderAssembler:
    """Writes the order header and its tickets inside the caller's transaction"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_order(
        self,
        user_id: int,
        ticket_count: int,
        amount: str,
        payment_source: str,
    ) -> int:
        order = Order(
            user_id=user_id,
            total_tickets=ticket_count,
            amount=amount,
            payment_source=payment_source,
        )
        self.session.add(order)
        await self.session.flush()
        return order.id

    async def create_ticket(
        self,
        order_id: int,
        event_id: int,
        event_date_id: int,
        user_id: int,
        ticket_type_id: int,
        seat_id: Optional[int],
        holder_name: str,
    ) -> int:
        """
        Insert one ticket and its order link.

        Raises SeatAlreadyTakenError when another ticket already holds
        (event_date_id, seat_id); the caller's transaction is then unusable
        and must be rolled back.
        """
        ticket = Ticket(
            event_id=event_id,
            user_id=user_id,
            ticket_type_id=ticket_type_id,
            to_name=holder_name,
            event_date_id=event_date_id,
            seat_id=seat_id,
        )
        self.session.add(ticket)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            if seat_id is not None and is_unique_violation(exc, TICKET_SEAT_CONSTRAINT):
                raise SeatAlreadyTakenError([seat_id]) from exc
            raise

        self.session.add(OrderTicket(order_id=order_id, ticket_id=ticket.id))
        await self.session.flush()
        return ticket.id
