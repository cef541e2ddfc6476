"""Order lookup endpoints (read-only)"""
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ticketbooth.api.dependencies import get_current_user_id
from ticketbooth.core.database import get_db
from ticketbooth.schemas import ErrorResponse, OrderResponse
from ticketbooth.services import InvalidBookingRequestError, OrderQueries

router = APIRouter()


@router.get("/orders", response_model=List[OrderResponse])
async def list_user_orders(
    user_id: Optional[int] = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """List all orders for the current buyer, newest first"""
    if user_id is None:
        raise InvalidBookingRequestError("userId is required")

    orders = await OrderQueries.get_user_orders(db=db, user_id=user_id)
    return [OrderResponse.from_order(order) for order in orders]


@router.get("/orders/{order_id}", response_model=OrderResponse, responses={404: {"model": ErrorResponse}})
async def get_order(
    order_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Get a specific order with its tickets"""
    order = await OrderQueries.get_order(db=db, order_id=order_id)
    return OrderResponse.from_order(order)
