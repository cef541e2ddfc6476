"""
Booking Coordinator - one booking request, one all-or-nothing transaction

Per request: Start -> ModeResolved -> InventoryReserved -> OrderWritten ->
TicketsWritten -> Committed. Any failure aborts and rolls back every write
made by the request.
"""
import logging
import time
from collections import Counter
from contextlib import asynccontextmanager
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ticketbooth.core.metrics import (
    booking_duration_seconds,
    record_booking_failure,
    record_booking_success,
)
from ticketbooth.models import SeatingMode
from ticketbooth.services.catalog import CatalogLookup, EventCatalog
from ticketbooth.services.errors import (
    BookingError,
    BookingStorageError,
    ErrorCode,
    EventDateNotFoundError,
    InsufficientInventoryError,
    InvalidBookingRequestError,
    SeatAlreadyTakenError,
    SeatingModeMismatchError,
)
from ticketbooth.services.inventory_ledger import InventoryLedger
from ticketbooth.services.order_assembler import OrderAssembler
from ticketbooth.services.seat_allocator import SeatAllocator
from ticketbooth.services.types import (
    BookingResult,
    IssuedTicket,
    Occurrence,
    SeatSelection,
    TierSelection,
)

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def format_amount(amount: Decimal) -> str:
    """Two-decimal fixed-precision string stored on the order"""
    return str(amount.quantize(CENTS))


class BookingCoordinator:
    """Orchestrates GA and seated bookings"""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        catalog: Optional[EventCatalog] = None,
        lookup: Optional[CatalogLookup] = None,
    ):
        self.session_factory = session_factory
        self.catalog = catalog or EventCatalog(session_factory)
        self.lookup = lookup or CatalogLookup(session_factory)

    @asynccontextmanager
    async def _observe(self, mode: SeatingMode, event_date_id: int, user_id: int):
        """Time the booking and turn storage faults into BookingStorageError"""
        start_time = time.perf_counter()
        log_extra = {'event_date_id': event_date_id, 'user_id': user_id, 'seating_mode': mode.value}
        try:
            yield
        except BookingError as e:
            record_booking_failure(mode.value, e.code.value)
            logger.warning(f"Booking aborted: {e}", extra={**log_extra, 'error_code': e.code.value})
            raise
        except SQLAlchemyError as e:
            record_booking_failure(mode.value, ErrorCode.INTERNAL_ERROR.value)
            logger.error("Booking aborted by storage failure", extra=log_extra, exc_info=True)
            raise BookingStorageError() from e
        finally:
            booking_duration_seconds.labels(seating_mode=mode.value).observe(
                time.perf_counter() - start_time
            )

    async def _resolve(self, event_date_id: int, expected: SeatingMode) -> Occurrence:
        occurrence = await self.catalog.resolve_occurrence(event_date_id)
        if occurrence is None:
            raise EventDateNotFoundError(event_date_id)
        if occurrence.seating_mode != expected:
            raise SeatingModeMismatchError(
                event_date_id,
                expected=expected.value,
                actual=occurrence.seating_mode.value,
            )
        return occurrence

    async def book_ga_tickets(
        self,
        event_date_id: int,
        user_id: int,
        customer_name: str,
        payment_source: str,
        tiers: Sequence[TierSelection],
    ) -> BookingResult:
        """
        Book general-admission tickets.

        Each tier is reserved with a conditional decrement; the first tier
        that cannot be satisfied aborts the whole booking with
        InsufficientInventoryError carrying the remaining count seen inside
        the transaction.
        """
        async with self._observe(SeatingMode.GA, event_date_id, user_id):
            if not tiers:
                raise InvalidBookingRequestError("At least one tier must be requested")
            for tier in tiers:
                if tier.quantity <= 0:
                    raise InvalidBookingRequestError(
                        f"Quantity for ticket type {tier.ticket_type_id} must be positive"
                    )

            occurrence = await self._resolve(event_date_id, SeatingMode.GA)

            async with self.session_factory() as session, session.begin():
                ledger = InventoryLedger(session)
                assembler = OrderAssembler(session)

                total_amount = Decimal("0")
                total_tickets = 0
                # Allocation rows are locked in ticket type order so two
                # requests naming the same tiers cannot wait on each other
                for tier in sorted(tiers, key=lambda t: t.ticket_type_id):
                    if not await ledger.reserve_ga(event_date_id, tier.ticket_type_id, tier.quantity):
                        snapshot = await ledger.price_and_remaining(event_date_id, tier.ticket_type_id)
                        raise InsufficientInventoryError(
                            tier.ticket_type_id,
                            requested=tier.quantity,
                            remaining=snapshot[1] if snapshot else None,
                        )
                    price, _ = await ledger.price_and_remaining(event_date_id, tier.ticket_type_id)
                    total_amount += price * tier.quantity
                    total_tickets += tier.quantity

                order_id = await assembler.create_order(
                    user_id, total_tickets, format_amount(total_amount), payment_source
                )

                written: List[Tuple[int, int]] = []
                for tier in tiers:
                    for _ in range(tier.quantity):
                        ticket_id = await assembler.create_ticket(
                            order_id=order_id,
                            event_id=occurrence.event_id,
                            event_date_id=event_date_id,
                            user_id=user_id,
                            ticket_type_id=tier.ticket_type_id,
                            seat_id=None,
                            holder_name=customer_name,
                        )
                        written.append((ticket_id, tier.ticket_type_id))

        record_booking_success(SeatingMode.GA.value, total_tickets)
        logger.info(
            f"GA booking committed: order {order_id}, {total_tickets} tickets",
            extra={'order_id': order_id, 'event_date_id': event_date_id, 'user_id': user_id},
        )

        names = await self._ticket_type_names(ticket_type_id for _, ticket_type_id in written)
        return BookingResult(
            order_id=order_id,
            total_amount=total_amount.quantize(CENTS),
            tickets=[
                IssuedTicket(
                    id=ticket_id,
                    ticket_type_id=ticket_type_id,
                    ticket_type=names[ticket_type_id],
                    to_name=customer_name,
                )
                for ticket_id, ticket_type_id in written
            ],
        )

    async def book_seated_tickets(
        self,
        event_date_id: int,
        user_id: int,
        customer_name: str,
        payment_source: str,
        seats: Sequence[SeatSelection],
    ) -> BookingResult:
        """
        Book individually addressed seats.

        The availability pre-check only gives an early answer. Two requests
        can both pass it; the unique (event_date_id, seat_id) constraint on
        tickets lets exactly one insert through and the loser is rolled back
        with SeatAlreadyTakenError.
        """
        async with self._observe(SeatingMode.SEATED, event_date_id, user_id):
            if not seats:
                raise InvalidBookingRequestError("At least one seat must be requested")

            seat_ids = [seat.seat_id for seat in seats]
            repeated = [seat_id for seat_id, n in Counter(seat_ids).items() if n > 1]
            if repeated:
                raise SeatAlreadyTakenError(repeated)

            occurrence = await self._resolve(event_date_id, SeatingMode.SEATED)

            async with self.session_factory() as session, session.begin():
                allocator = SeatAllocator(session)
                assembler = OrderAssembler(session)

                taken = await allocator.check_availability(event_date_id, seat_ids)
                if taken:
                    raise SeatAlreadyTakenError(taken)

                # Seats are priced and inserted in id order so overlapping
                # requests block on the unique index in the same sequence
                lock_order = sorted(seat_ids)

                total_amount = Decimal("0")
                seat_ticket_types: Dict[int, int] = {}
                for seat_id in lock_order:
                    price, ticket_type_id = await allocator.price_and_ticket_type(event_date_id, seat_id)
                    total_amount += price
                    seat_ticket_types[seat_id] = ticket_type_id

                order_id = await assembler.create_order(
                    user_id, len(seat_ids), format_amount(total_amount), payment_source
                )

                ticket_ids: Dict[int, int] = {}
                for seat_id in lock_order:
                    ticket_ids[seat_id] = await assembler.create_ticket(
                        order_id=order_id,
                        event_id=occurrence.event_id,
                        event_date_id=event_date_id,
                        user_id=user_id,
                        ticket_type_id=seat_ticket_types[seat_id],
                        seat_id=seat_id,
                        holder_name=customer_name,
                    )

        written = [(ticket_ids[seat_id], seat_ticket_types[seat_id], seat_id) for seat_id in seat_ids]
        record_booking_success(SeatingMode.SEATED.value, len(written))
        logger.info(
            f"Seated booking committed: order {order_id}, seats {seat_ids}",
            extra={'order_id': order_id, 'event_date_id': event_date_id, 'user_id': user_id},
        )

        names = await self._ticket_type_names(ticket_type_id for _, ticket_type_id, _ in written)
        tickets = []
        for ticket_id, ticket_type_id, seat_id in written:
            tickets.append(IssuedTicket(
                id=ticket_id,
                ticket_type_id=ticket_type_id,
                ticket_type=names[ticket_type_id],
                to_name=customer_name,
                seat_id=seat_id,
                seat_label=await self.lookup.seat_label(seat_id),
            ))

        return BookingResult(
            order_id=order_id,
            total_amount=total_amount.quantize(CENTS),
            tickets=tickets,
        )

    async def _ticket_type_names(self, ticket_type_ids) -> Dict[int, str]:
        names: Dict[int, str] = {}
        for ticket_type_id in ticket_type_ids:
            if ticket_type_id not in names:
                names[ticket_type_id] = await self.lookup.ticket_type_name(ticket_type_id)
        return names
