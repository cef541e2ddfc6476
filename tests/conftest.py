import asyncio
from decimal import Decimal
from types import SimpleNamespace

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event, func, select
from sqlalchemy.ext.asyncio import create_async_engine

from ticketbooth.core.database import build_session_factory, get_db, get_session_factory, init_db
from ticketbooth.main import create_app
from ticketbooth.models import Event, Order, OrderTicket, Ticket, TicketTypeAllocation, Venue
from ticketbooth.scripts.seed_data import (
    create_ga_event_date,
    create_seated_event_date,
    get_or_create_ticket_types,
)


@pytest_asyncio.fixture
async def engine(tmp_path):
    """
    SQLite database on disk, one connection per session.

    Every transaction starts with BEGIN IMMEDIATE so concurrent bookings
    queue on the database lock instead of failing on lock upgrades.
    """
    test_engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'ticketbooth.db'}",
        connect_args={"timeout": 30},
    )

    @event.listens_for(test_engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(test_engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    await init_db(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return build_session_factory(engine)


@pytest_asyncio.fixture
async def catalog(session_factory):
    """
    E1 (GA): T1 "General" at 25.00 with 2 left, VIP at 100.00 with 5 left.
    E2 (SEATED): seats A11..A13, ticket type T2 "Standard" at 40.00.
    """
    async with session_factory() as db:
        async with db.begin():
            types = await get_or_create_ticket_types(db, ["General", "VIP", "Standard"])
            festival = Event(slug="festival", title="Festival", description="")
            recital = Event(slug="recital", title="Recital", description="")
            field = Venue(name="Field", capacity=100)
            hall = Venue(name="Hall", capacity=3)
            db.add_all([festival, recital, field, hall])
            await db.flush()

            ga_date = await create_ga_event_date(
                db, festival, field,
                tiers=[
                    (types["General"], Decimal("25.00"), 2),
                    (types["VIP"], Decimal("100.00"), 5),
                ],
            )
            seated_date, seats = await create_seated_event_date(
                db, recital, hall,
                sections=[("A", 1, 3, types["Standard"], Decimal("40.00"))],
            )

            return SimpleNamespace(
                ga_date_id=ga_date.id,
                ga_event_id=festival.id,
                seated_date_id=seated_date.id,
                seated_event_id=recital.id,
                t1=types["General"].id,
                vip=types["VIP"].id,
                t2=types["Standard"].id,
                seat_ids=[seat.id for seat in seats],
            )


@pytest_asyncio.fixture
async def client(session_factory):
    app = create_app(with_lifespan=False)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as test_client:
        yield test_client


async def remaining_tickets(session_factory, event_date_id: int, ticket_type_id: int) -> int:
    async with session_factory() as db:
        return await db.scalar(
            select(TicketTypeAllocation.remaining_tickets).where(
                TicketTypeAllocation.event_date_id == event_date_id,
                TicketTypeAllocation.ticket_type_id == ticket_type_id,
            )
        )


async def row_counts(session_factory) -> dict:
    """Orders, tickets and order links currently stored"""
    async with session_factory() as db:
        return {
            "orders": await db.scalar(select(func.count()).select_from(Order)),
            "tickets": await db.scalar(select(func.count()).select_from(Ticket)),
            "order_tickets": await db.scalar(select(func.count()).select_from(OrderTicket)),
        }


async def run_concurrently(*coros):
    """Run bookings at the same time and collect results or raised errors"""
    return await asyncio.gather(*coros, return_exceptions=True)
