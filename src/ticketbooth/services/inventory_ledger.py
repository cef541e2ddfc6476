"""
Inventory Ledger - atomic availability check for pooled GA inventory
"""
import logging
from decimal import Decimal
from typing import Optional, Tuple

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ticketbooth.models import TicketTypeAllocation

logger = logging.getLogger(__name__)


class InventoryLedger:
    """
    Reserves GA units with a single conditional decrement.

    All methods run on the caller's session and must be called inside its
    open transaction.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def reserve_ga(self, event_date_id: int, ticket_type_id: int, quantity: int) -> bool:
        """
        Take ``quantity`` units off the allocation if at least that many remain.

        The guard and the decrement are one UPDATE, so the database serializes
        racing requests on the allocation row and two of them can never both
        take the last units. Returns True when exactly one row changed.
        """
        stmt = (
            update(TicketTypeAllocation)
            .where(
                TicketTypeAllocation.event_date_id == event_date_id,
                TicketTypeAllocation.ticket_type_id == ticket_type_id,
                TicketTypeAllocation.remaining_tickets >= quantity,
            )
            .values(remaining_tickets=TicketTypeAllocation.remaining_tickets - quantity)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)

        reserved = result.rowcount == 1
        if not reserved:
            logger.info(
                f"GA reservation refused for ticket type {ticket_type_id} x{quantity}",
                extra={'event_date_id': event_date_id},
            )
        return reserved

    async def price_and_remaining(
        self,
        event_date_id: int,
        ticket_type_id: int,
    ) -> Optional[Tuple[Decimal, int]]:
        """Return (price, remaining) for the allocation, or None if it does not exist"""
        query = select(
            TicketTypeAllocation.price,
            TicketTypeAllocation.remaining_tickets,
        ).where(
            TicketTypeAllocation.event_date_id == event_date_id,
            TicketTypeAllocation.ticket_type_id == ticket_type_id,
        )
        row = (await self.session.execute(query)).one_or_none()
        if row is None:
            return None
        return Decimal(row.price), row.remaining_tickets
