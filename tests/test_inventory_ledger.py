from decimal import Decimal

import pytest

from conftest import remaining_tickets
from ticketbooth.services import InventoryLedger


@pytest.mark.asyncio
async def test_reserve_decrements_remaining(session_factory, catalog):
    """A reservation within the remaining count succeeds and takes the units"""
    async with session_factory() as session, session.begin():
        ledger = InventoryLedger(session)
        assert await ledger.reserve_ga(catalog.ga_date_id, catalog.vip, 3) is True

    assert await remaining_tickets(session_factory, catalog.ga_date_id, catalog.vip) == 2


@pytest.mark.asyncio
async def test_reserve_exact_remaining_reaches_zero(session_factory, catalog):
    async with session_factory() as session, session.begin():
        ledger = InventoryLedger(session)
        assert await ledger.reserve_ga(catalog.ga_date_id, catalog.t1, 2) is True
        assert await ledger.price_and_remaining(catalog.ga_date_id, catalog.t1) == (Decimal("25.00"), 0)


@pytest.mark.asyncio
async def test_reserve_more_than_remaining_changes_nothing(session_factory, catalog):
    """A refused reservation leaves the allocation untouched"""
    async with session_factory() as session, session.begin():
        ledger = InventoryLedger(session)
        assert await ledger.reserve_ga(catalog.ga_date_id, catalog.t1, 3) is False
        _, remaining = await ledger.price_and_remaining(catalog.ga_date_id, catalog.t1)
        assert remaining == 2


@pytest.mark.asyncio
async def test_reserve_unknown_allocation_is_refused(session_factory, catalog):
    async with session_factory() as session, session.begin():
        ledger = InventoryLedger(session)
        # T2 is only sold as seats on the other event date
        assert await ledger.reserve_ga(catalog.ga_date_id, catalog.t2, 1) is False
        assert await ledger.price_and_remaining(catalog.ga_date_id, catalog.t2) is None


@pytest.mark.asyncio
async def test_reservation_rolls_back_with_transaction(session_factory, catalog):
    """A decrement is discarded when the surrounding transaction aborts"""
    with pytest.raises(RuntimeError):
        async with session_factory() as session, session.begin():
            ledger = InventoryLedger(session)
            assert await ledger.reserve_ga(catalog.ga_date_id, catalog.t1, 1) is True
            raise RuntimeError("abort")

    assert await remaining_tickets(session_factory, catalog.ga_date_id, catalog.t1) == 2
