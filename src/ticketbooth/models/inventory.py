"""
Sellable inventory for an event date - CRITICAL for concurrency control

GA allocations are decremented with a conditional UPDATE; seat assignments
are never mutated, exclusivity lives on the tickets table.
"""
from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, Numeric
from sqlalchemy.orm import relationship

from ticketbooth.core.database import Base


class TicketTypeAllocation(Base):
    """Pooled GA inventory line for one ticket type within one event date"""
    __tablename__ = "event_date_ticket_types"
    __table_args__ = (
        CheckConstraint('remaining_tickets >= 0', name='ck_allocation_remaining_non_negative'),
        CheckConstraint('remaining_tickets <= max_quantity', name='ck_allocation_remaining_within_max'),
    )

    event_date_id = Column(Integer, ForeignKey("event_dates.id", ondelete="CASCADE"), primary_key=True)
    ticket_type_id = Column(Integer, ForeignKey("ticket_types.id", ondelete="CASCADE"), primary_key=True)
    price = Column(Numeric(10, 2), nullable=False)
    remaining_tickets = Column(Integer, nullable=False)
    max_quantity = Column(Integer, nullable=False)

    ticket_type = relationship("TicketType")

    def __repr__(self):
        return (f"<TicketTypeAllocation(event_date_id={self.event_date_id}, "
                f"ticket_type_id={self.ticket_type_id}, remaining={self.remaining_tickets}/{self.max_quantity})>")


class SeatAssignment(Base):
    """Sellable binding of one physical seat to one event date"""
    __tablename__ = "event_date_seats"

    event_date_id = Column(Integer, ForeignKey("event_dates.id", ondelete="CASCADE"), primary_key=True)
    seat_id = Column(Integer, ForeignKey("seats.id", ondelete="CASCADE"), primary_key=True)
    price = Column(Numeric(10, 2), nullable=False)
    ticket_type_id = Column(Integer, ForeignKey("ticket_types.id"), nullable=False)

    seat = relationship("Seat")
    ticket_type = relationship("TicketType")

    def __repr__(self):
        return (f"<SeatAssignment(event_date_id={self.event_date_id}, seat_id={self.seat_id}, "
                f"price=${self.price})>")
