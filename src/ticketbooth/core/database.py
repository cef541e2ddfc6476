"""
Database configuration and async session management
"""
from typing import AsyncGenerator, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from ticketbooth.core.config import settings

# SQLSTATE for unique_violation (PostgreSQL) and the SQLite extended result name
PG_UNIQUE_VIOLATION = "23505"
SQLITE_UNIQUE_VIOLATION = "SQLITE_CONSTRAINT_UNIQUE"


def build_engine(database_url: str, **kwargs) -> AsyncEngine:
    """Create the async engine; pool sizing only applies to server databases"""
    options = {
        "echo": settings.DEBUG,  # Log SQL queries in debug mode
        "pool_pre_ping": True,
    }
    if not database_url.startswith("sqlite"):
        options["pool_size"] = settings.DB_POOL_SIZE
        options["max_overflow"] = settings.DB_MAX_OVERFLOW
    options.update(kwargs)
    return create_async_engine(database_url, **options)


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,  # Results are read after the booking commits
        autoflush=False,
    )


# Using asyncpg driver for PostgreSQL
engine = build_engine(settings.DATABASE_URL)
AsyncSessionLocal = build_session_factory(engine)

# Create declarative base for models
Base = declarative_base()


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Dependency for FastAPI providing the session factory.

    Booking operations open one session per unit of work, so routes receive
    the factory rather than a shared session.
    """
    return AsyncSessionLocal


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for FastAPI to provide a read-only database session."""
    async with AsyncSessionLocal() as session:
        yield session


def _driver_error(exc: IntegrityError):
    """Return the innermost driver exception carried by an IntegrityError."""
    orig = exc.orig
    # The asyncpg adapter wraps the native asyncpg exception as __cause__
    return getattr(orig, "__cause__", None) or orig


def is_unique_violation(exc: IntegrityError, constraint_name: Optional[str] = None) -> bool:
    """
    Classify an IntegrityError as a uniqueness violation using the driver's
    structured error data (SQLSTATE, SQLite extended code, constraint name).
    """
    candidates = [exc.orig, _driver_error(exc)]

    for err in candidates:
        if err is None:
            continue
        sqlstate = getattr(err, "sqlstate", None) or getattr(err, "pgcode", None)
        if sqlstate == PG_UNIQUE_VIOLATION:
            reported = getattr(err, "constraint_name", None)
            return constraint_name is None or reported in (None, constraint_name)
        if getattr(err, "sqlite_errorname", None) == SQLITE_UNIQUE_VIOLATION:
            return True
        reported = getattr(err, "constraint_name", None)
        if constraint_name is not None and reported == constraint_name:
            return True
    return False


async def init_db(bind: Optional[AsyncEngine] = None):
    """
    Initialize database tables.
    Only for development and tests; production schemas are provisioned out of band.
    """
    # Import all models to register them with Base
    import ticketbooth.models  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_db(bind: Optional[AsyncEngine] = None):
    """
    Drop all database tables.
    WARNING: Use only in development/testing!
    """
    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
