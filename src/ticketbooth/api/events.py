"""
Event and event date endpoints - Read-only operations
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ticketbooth.core.database import get_db
from ticketbooth.schemas import (
    AvailabilityResponse,
    ErrorResponse,
    EventDateResponse,
    EventListItem,
    EventListResponse,
)
from ticketbooth.services import AvailabilityService, EventService

router = APIRouter()


@router.get("/events", response_model=EventListResponse)
async def list_events(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(10, ge=1, le=100, alias="pageSize", description="Items per page"),
    db: AsyncSession = Depends(get_db),
):
    """
    List events with their dates

    - **page**: Page number (default: 1)
    - **pageSize**: Items per page (default: 10, max: 100)
    """
    events, total = await EventService.list_events(db=db, page=page, page_size=page_size)
    return EventListResponse(
        events=[EventListItem.from_event(event) for event in events],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get(
    "/event-dates/{event_date_id}",
    response_model=EventDateResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_event_date(
    event_date_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Get an event date with its event, venue, date and seating mode"""
    event_date = await EventService.get_event_date(db=db, event_date_id=event_date_id)
    return EventDateResponse.from_event_date(event_date)


@router.get(
    "/event-dates/{event_date_id}/availability",
    response_model=AvailabilityResponse,
    response_model_exclude_none=True,
    responses={404: {"model": ErrorResponse}},
)
async def get_availability(
    event_date_id: int,
    db: AsyncSession = Depends(get_db),
):
    """
    Remaining inventory for an event date

    GA event dates list their tiers with remaining counts; seated event
    dates list sections, rows and seats with an `available` flag.
    """
    availability = await AvailabilityService.get_availability(db=db, event_date_id=event_date_id)
    return AvailabilityResponse.from_availability(availability)
