"""
FastAPI application entry point
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from sqlalchemy import text

from ticketbooth.api import bookings, events, orders
from ticketbooth.api.errors import booking_error_handler, validation_error_handler
from ticketbooth.core.config import settings
from ticketbooth.core.database import engine
from ticketbooth.core.logging_config import setup_logging
from ticketbooth.core.metrics import get_metrics
from ticketbooth.middleware.tracing import TracingMiddleware
from ticketbooth.services import BookingError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for startup and shutdown"""
    setup_logging()
    logger.info("Starting booking engine")

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Database connection successful")
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        raise

    yield

    logger.info("Shutting down")
    await engine.dispose()


def create_app(with_lifespan: bool = True) -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Concurrent-safe booking of GA and seated event tickets",
        lifespan=lifespan if with_lifespan else None,
    )

    app.add_exception_handler(BookingError, booking_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    app.add_middleware(TracingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
        }

    @app.get("/metrics", tags=["Health"], include_in_schema=False)
    async def metrics():
        payload, content_type = get_metrics()
        return Response(content=payload, media_type=content_type)

    app.include_router(bookings.router, prefix="/api", tags=["Bookings"])
    app.include_router(orders.router, prefix="/api", tags=["Orders"])
    app.include_router(events.router, prefix="/api", tags=["Events"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "ticketbooth.main:app",
        host="0.0.0.0",
        port=8000,
        log_level="info"
    )
