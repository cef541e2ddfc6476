"""
Order and Ticket models - append-only records written by a booking

The (event_date_id, seat_id) unique constraint on tickets is the
authoritative guard against double-booking a seat.
"""
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from ticketbooth.core.database import Base

TICKET_SEAT_CONSTRAINT = "uq_ticket_event_date_seat"


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    total_tickets = Column(Integer, nullable=False)
    amount = Column(String(32), nullable=False)  # Fixed two-decimal string, e.g. "50.00"
    payment_source = Column(String(255), nullable=False)  # Stored verbatim, never charged
    created_at = Column(DateTime, default=utcnow, nullable=False)

    # Relationships
    order_tickets = relationship("OrderTicket", back_populates="order", order_by="OrderTicket.ticket_id")

    def __repr__(self):
        return (f"<Order(id={self.id}, user_id={self.user_id}, "
                f"tickets={self.total_tickets}, amount=${self.amount})>")

    @property
    def total_amount(self) -> Decimal:
        return Decimal(self.amount)


class Ticket(Base):
    __tablename__ = "tickets"
    __table_args__ = (
        UniqueConstraint('event_date_id', 'seat_id', name=TICKET_SEAT_CONSTRAINT),
    )

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False)
    user_id = Column(Integer, nullable=False, index=True)
    ticket_type_id = Column(Integer, ForeignKey("ticket_types.id"), nullable=False)
    to_name = Column(String(255), nullable=False)
    event_date_id = Column(Integer, ForeignKey("event_dates.id"), nullable=False, index=True)
    seat_id = Column(Integer, ForeignKey("seats.id"), nullable=True)  # NULL for GA

    # Relationships
    ticket_type = relationship("TicketType")
    seat = relationship("Seat")
    event = relationship("Event")
    event_date = relationship("EventDate")

    def __repr__(self):
        return (f"<Ticket(id={self.id}, event_date_id={self.event_date_id}, "
                f"ticket_type_id={self.ticket_type_id}, seat_id={self.seat_id})>")


class OrderTicket(Base):
    """Junction table linking tickets to their order"""
    __tablename__ = "order_tickets"

    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), primary_key=True)
    ticket_id = Column(Integer, ForeignKey("tickets.id", ondelete="CASCADE"), primary_key=True)

    order = relationship("Order", back_populates="order_tickets")
    ticket = relationship("Ticket")

    def __repr__(self):
        return f"<OrderTicket(order_id={self.order_id}, ticket_id={self.ticket_id})>"
