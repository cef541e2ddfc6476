"""Pydantic schemas for order lookups"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from ticketbooth.schemas.booking import CamelModel


class OrderTicketResponse(CamelModel):
    id: int
    event_title: str = ""
    event_date: Optional[datetime] = None
    ticket_type: str = ""
    seat_label: Optional[str] = None

    @classmethod
    def from_ticket(cls, ticket):
        """Convert Ticket ORM model (with relationships loaded) to response"""
        return cls(
            id=ticket.id,
            event_title=ticket.event.title if ticket.event else "",
            event_date=ticket.event_date.date if ticket.event_date else None,
            ticket_type=ticket.ticket_type.name if ticket.ticket_type else "",
            seat_label=ticket.seat.label if ticket.seat else None,
        )


class OrderResponse(CamelModel):
    id: int
    created_at: datetime
    customer_name: str
    total_amount: Decimal
    payment_source: str
    tickets: List[OrderTicketResponse]

    @classmethod
    def from_order(cls, order):
        """Convert Order ORM model to response; the customer name comes from the first ticket"""
        tickets = [ot.ticket for ot in order.order_tickets]
        return cls(
            id=order.id,
            created_at=order.created_at,
            customer_name=tickets[0].to_name if tickets else "",
            total_amount=order.total_amount,
            payment_source=order.payment_source,
            tickets=[OrderTicketResponse.from_ticket(t) for t in tickets],
        )
