from decimal import Decimal

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from conftest import remaining_tickets, row_counts
from ticketbooth.models import Order, Ticket
from ticketbooth.services import (
    BookingCoordinator,
    BookingStorageError,
    CatalogLookup,
    EventDateNotFoundError,
    InsufficientInventoryError,
    InvalidBookingRequestError,
    InventoryLedger,
    OrderAssembler,
    SeatAllocator,
    SeatAlreadyTakenError,
    SeatingModeMismatchError,
    SeatNotFoundError,
    SeatSelection,
    TierSelection,
)


@pytest.fixture
def coordinator(session_factory):
    return BookingCoordinator(session_factory)


async def book_ga(coordinator, catalog, tiers, user_id=1):
    return await coordinator.book_ga_tickets(
        event_date_id=catalog.ga_date_id,
        user_id=user_id,
        customer_name="Ann",
        payment_source="card",
        tiers=tiers,
    )


async def book_seats(coordinator, catalog, seat_ids, user_id=1):
    return await coordinator.book_seated_tickets(
        event_date_id=catalog.seated_date_id,
        user_id=user_id,
        customer_name="Bob",
        payment_source="paypal",
        seats=[SeatSelection(seat_id=seat_id) for seat_id in seat_ids],
    )


class TestGeneralAdmission:
    @pytest.mark.asyncio
    async def test_books_tickets_and_decrements(self, coordinator, session_factory, catalog):
        """Two of T1 at 25.00: 50.00, two tickets, nothing left"""
        result = await book_ga(coordinator, catalog, [TierSelection(catalog.t1, 2)])

        assert result.total_amount == Decimal("50.00")
        assert len(result.tickets) == 2
        assert {t.ticket_type for t in result.tickets} == {"General"}
        assert {t.to_name for t in result.tickets} == {"Ann"}
        assert all(t.seat_id is None and t.seat_label is None for t in result.tickets)
        assert await remaining_tickets(session_factory, catalog.ga_date_id, catalog.t1) == 0

        async with session_factory() as session:
            order = await session.get(Order, result.order_id)
            assert order.amount == "50.00"
            assert order.total_tickets == 2
            assert order.user_id == 1

    @pytest.mark.asyncio
    async def test_sold_out_tier_reports_zero_remaining(self, coordinator, catalog):
        await book_ga(coordinator, catalog, [TierSelection(catalog.t1, 2)])

        with pytest.raises(InsufficientInventoryError) as exc_info:
            await book_ga(coordinator, catalog, [TierSelection(catalog.t1, 1)], user_id=2)

        assert exc_info.value.remaining == 0
        assert exc_info.value.code.value == "INSUFFICIENT_INVENTORY"

    @pytest.mark.asyncio
    async def test_multiple_tiers_sum_their_prices(self, coordinator, session_factory, catalog):
        result = await book_ga(coordinator, catalog, [TierSelection(catalog.t1, 1), TierSelection(catalog.vip, 2)])

        assert result.total_amount == Decimal("225.00")
        assert [t.ticket_type for t in result.tickets] == ["General", "VIP", "VIP"]
        assert await remaining_tickets(session_factory, catalog.ga_date_id, catalog.vip) == 3

    @pytest.mark.asyncio
    async def test_insufficient_inventory(self, coordinator, session_factory, catalog):
        """Asking for 3 when 2 remain fails and changes nothing"""
        with pytest.raises(InsufficientInventoryError) as exc_info:
            await book_ga(coordinator, catalog, [TierSelection(catalog.t1, 3)])

        assert exc_info.value.ticket_type_id == catalog.t1
        assert exc_info.value.requested == 3
        assert exc_info.value.remaining == 2
        assert await remaining_tickets(session_factory, catalog.ga_date_id, catalog.t1) == 2
        assert await row_counts(session_factory) == {"orders": 0, "tickets": 0, "order_tickets": 0}

    @pytest.mark.asyncio
    async def test_failing_later_tier_restores_earlier_tier(self, coordinator, session_factory, catalog):
        """The first tier's decrement is rolled back when the second tier runs short"""
        with pytest.raises(InsufficientInventoryError) as exc_info:
            await book_ga(coordinator, catalog, [TierSelection(catalog.t1, 1), TierSelection(catalog.vip, 6)])

        assert exc_info.value.ticket_type_id == catalog.vip
        assert await remaining_tickets(session_factory, catalog.ga_date_id, catalog.t1) == 2
        assert await remaining_tickets(session_factory, catalog.ga_date_id, catalog.vip) == 5
        assert (await row_counts(session_factory))["orders"] == 0

    @pytest.mark.asyncio
    async def test_ticket_type_not_on_sale(self, coordinator, catalog):
        with pytest.raises(InsufficientInventoryError) as exc_info:
            await book_ga(coordinator, catalog, [TierSelection(catalog.t2, 1)])

        assert exc_info.value.remaining is None

    @pytest.mark.asyncio
    async def test_seated_event_date_rejects_tiers(self, coordinator, session_factory, catalog):
        with pytest.raises(SeatingModeMismatchError) as exc_info:
            await coordinator.book_ga_tickets(
                event_date_id=catalog.seated_date_id,
                user_id=1,
                customer_name="Ann",
                payment_source="card",
                tiers=[TierSelection(catalog.t2, 1)],
            )

        assert exc_info.value.actual == "SEATED"
        assert (await row_counts(session_factory))["orders"] == 0

    @pytest.mark.asyncio
    async def test_unknown_event_date(self, coordinator, catalog):
        with pytest.raises(EventDateNotFoundError):
            await coordinator.book_ga_tickets(
                event_date_id=9999,
                user_id=1,
                customer_name="Ann",
                payment_source="card",
                tiers=[TierSelection(catalog.t1, 1)],
            )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("tiers", [[], [TierSelection(1, 0)], [TierSelection(1, -2)]])
    async def test_invalid_tiers(self, coordinator, catalog, tiers):
        with pytest.raises(InvalidBookingRequestError):
            await book_ga(coordinator, catalog, tiers)

    @pytest.mark.asyncio
    async def test_storage_failure_rolls_back_everything(self, coordinator, session_factory, catalog, monkeypatch):
        """A driver error midway through ticket writes leaves no trace"""
        original = OrderAssembler.create_ticket
        calls = []

        async def flaky_create_ticket(self, **kwargs):
            calls.append(kwargs)
            if len(calls) == 2:
                raise OperationalError("INSERT INTO tickets", {}, Exception("disk I/O error"))
            return await original(self, **kwargs)

        monkeypatch.setattr(OrderAssembler, "create_ticket", flaky_create_ticket)

        with pytest.raises(BookingStorageError) as exc_info:
            await book_ga(coordinator, catalog, [TierSelection(catalog.t1, 2)])

        assert isinstance(exc_info.value.__cause__, OperationalError)
        assert await remaining_tickets(session_factory, catalog.ga_date_id, catalog.t1) == 2
        assert await row_counts(session_factory) == {"orders": 0, "tickets": 0, "order_tickets": 0}


class TestSeated:
    @pytest.mark.asyncio
    async def test_books_seats(self, coordinator, session_factory, catalog):
        """Seat ticket type and price come from the seat assignment"""
        first, second, _ = catalog.seat_ids
        result = await book_seats(coordinator, catalog, [first, second])

        assert result.total_amount == Decimal("80.00")
        assert [t.seat_id for t in result.tickets] == [first, second]
        assert [t.seat_label for t in result.tickets] == ["A11", "A12"]
        assert {t.ticket_type for t in result.tickets} == {"Standard"}
        assert {t.to_name for t in result.tickets} == {"Bob"}

        async with session_factory() as session:
            order = await session.get(Order, result.order_id)
            assert order.amount == "80.00"
            assert order.payment_source == "paypal"

    @pytest.mark.asyncio
    async def test_requested_ticket_type_is_ignored(self, coordinator, catalog):
        result = await coordinator.book_seated_tickets(
            event_date_id=catalog.seated_date_id,
            user_id=1,
            customer_name="Bob",
            payment_source="card",
            seats=[SeatSelection(seat_id=catalog.seat_ids[0], ticket_type_id=catalog.vip)],
        )

        assert result.tickets[0].ticket_type_id == catalog.t2

    @pytest.mark.asyncio
    async def test_taken_seat_fails_whole_request(self, coordinator, session_factory, catalog):
        """Booking [S1, S2] when S2 is sold books neither"""
        first, second, _ = catalog.seat_ids
        await book_seats(coordinator, catalog, [second], user_id=2)

        with pytest.raises(SeatAlreadyTakenError) as exc_info:
            await book_seats(coordinator, catalog, [first, second])

        assert exc_info.value.seat_ids == [second]
        assert await row_counts(session_factory) == {"orders": 1, "tickets": 1, "order_tickets": 1}

    @pytest.mark.asyncio
    async def test_repeated_seat_in_one_request(self, coordinator, session_factory, catalog):
        seat_id = catalog.seat_ids[0]
        with pytest.raises(SeatAlreadyTakenError) as exc_info:
            await book_seats(coordinator, catalog, [seat_id, seat_id])

        assert exc_info.value.seat_ids == [seat_id]
        assert (await row_counts(session_factory))["tickets"] == 0

    @pytest.mark.asyncio
    async def test_race_lost_at_insert(self, coordinator, session_factory, catalog, monkeypatch):
        """
        When the pre-check misses a concurrent sale, the unique constraint
        rejects the insert and the losing request leaves nothing behind.
        """
        first, second, _ = catalog.seat_ids
        await book_seats(coordinator, catalog, [second], user_id=2)

        async def stale_check(self, event_date_id, seat_ids):
            return set()

        monkeypatch.setattr(SeatAllocator, "check_availability", stale_check)

        with pytest.raises(SeatAlreadyTakenError) as exc_info:
            await book_seats(coordinator, catalog, [first, second])

        assert exc_info.value.seat_ids == [second]
        assert await row_counts(session_factory) == {"orders": 1, "tickets": 1, "order_tickets": 1}

        async with session_factory() as session:
            seats = (await session.execute(select(Ticket.seat_id))).scalars().all()
        assert seats == [second]

    @pytest.mark.asyncio
    async def test_ga_event_date_rejects_seats(self, coordinator, catalog):
        with pytest.raises(SeatingModeMismatchError) as exc_info:
            await coordinator.book_seated_tickets(
                event_date_id=catalog.ga_date_id,
                user_id=1,
                customer_name="Bob",
                payment_source="card",
                seats=[SeatSelection(seat_id=catalog.seat_ids[0])],
            )

        assert exc_info.value.expected == "SEATED"
        assert exc_info.value.actual == "GA"

    @pytest.mark.asyncio
    async def test_unknown_seat(self, coordinator, session_factory, catalog):
        with pytest.raises(SeatNotFoundError):
            await book_seats(coordinator, catalog, [catalog.seat_ids[0], 9999])

        assert (await row_counts(session_factory))["orders"] == 0

    @pytest.mark.asyncio
    async def test_no_seats(self, coordinator, catalog):
        with pytest.raises(InvalidBookingRequestError):
            await book_seats(coordinator, catalog, [])


class BrokenSession:
    async def __aenter__(self):
        raise OperationalError("SELECT", {}, Exception("connection refused"))

    async def __aexit__(self, *exc_info):
        return False


class TestDisplayFallbacks:
    @pytest.mark.asyncio
    async def test_lookup_failure_does_not_fail_booking(self, session_factory, catalog):
        """Names degrade to synthetic labels; the booking stays committed"""
        coordinator = BookingCoordinator(session_factory, lookup=CatalogLookup(lambda: BrokenSession()))
        seat_id = catalog.seat_ids[0]

        result = await book_seats(coordinator, catalog, [seat_id])

        assert result.tickets[0].ticket_type == f"TicketType-{catalog.t2}"
        assert result.tickets[0].seat_label == f"Seat-{seat_id}"
        assert (await row_counts(session_factory))["orders"] == 1

    @pytest.mark.asyncio
    async def test_missing_rows_use_synthetic_labels(self, session_factory, catalog):
        lookup = CatalogLookup(session_factory)

        assert await lookup.ticket_type_name(9999) == "TicketType-9999"
        assert await lookup.seat_label(9999) == "Seat-9999"
        assert await lookup.seat_label(catalog.seat_ids[2]) == "A13"

    @pytest.mark.asyncio
    async def test_non_database_lookup_error_keeps_booking(self, session_factory, catalog):
        """A lookup timeout after commit still returns the committed booking"""

        class TimingOutSession:
            async def __aenter__(self):
                raise TimeoutError("lookup timed out")

            async def __aexit__(self, *exc_info):
                return False

        coordinator = BookingCoordinator(session_factory, lookup=CatalogLookup(lambda: TimingOutSession()))

        result = await book_ga(coordinator, catalog, [TierSelection(catalog.t1, 1)])

        assert result.tickets[0].ticket_type == f"TicketType-{catalog.t1}"
        assert await row_counts(session_factory) == {"orders": 1, "tickets": 1, "order_tickets": 1}


class TestWriteOrder:
    @pytest.mark.asyncio
    async def test_seats_written_in_id_order(self, coordinator, catalog, monkeypatch):
        """Inserts follow seat id order; the result keeps the requested order"""
        first, second, third = catalog.seat_ids
        original = OrderAssembler.create_ticket
        inserted = []

        async def recording_create_ticket(self, **kwargs):
            inserted.append(kwargs["seat_id"])
            return await original(self, **kwargs)

        monkeypatch.setattr(OrderAssembler, "create_ticket", recording_create_ticket)

        result = await book_seats(coordinator, catalog, [third, first, second])

        assert inserted == [first, second, third]
        assert [t.seat_id for t in result.tickets] == [third, first, second]
        assert [t.seat_label for t in result.tickets] == ["A13", "A11", "A12"]

    @pytest.mark.asyncio
    async def test_tiers_reserved_in_ticket_type_order(self, coordinator, catalog, monkeypatch):
        original = InventoryLedger.reserve_ga
        reserved = []

        async def recording_reserve_ga(self, event_date_id, ticket_type_id, quantity):
            reserved.append(ticket_type_id)
            return await original(self, event_date_id, ticket_type_id, quantity)

        monkeypatch.setattr(InventoryLedger, "reserve_ga", recording_reserve_ga)

        result = await book_ga(coordinator, catalog, [TierSelection(catalog.vip, 1), TierSelection(catalog.t1, 1)])

        assert reserved == sorted([catalog.vip, catalog.t1])
        assert [t.ticket_type for t in result.tickets] == ["VIP", "General"]
        assert result.total_amount == Decimal("125.00")
