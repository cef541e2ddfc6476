"""
Physical seats and ticket types
"""
from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from ticketbooth.core.database import Base


class TicketType(Base):
    __tablename__ = "ticket_types"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")

    def __repr__(self):
        return f"<TicketType(id={self.id}, name='{self.name}')>"


class Seat(Base):
    __tablename__ = "seats"
    __table_args__ = (
        UniqueConstraint('venue_id', 'section', 'row', 'number', name='uq_seat_location'),
    )

    id = Column(Integer, primary_key=True, index=True)
    venue_id = Column(Integer, ForeignKey("venues.id", ondelete="CASCADE"), nullable=False, index=True)
    section = Column(String(50), nullable=False)  # 'A', 'VIP', 'Balcony'
    row = Column(String(10), nullable=False)
    number = Column(String(10), nullable=False)
    is_accessible = Column(Boolean, nullable=False, default=False)

    venue = relationship("Venue", back_populates="seats")

    def __repr__(self):
        return f"<Seat(id={self.id}, label='{self.label}')>"

    @property
    def label(self) -> str:
        """Human-readable seat label (section + row + number)"""
        return f"{self.section}{self.row}{self.number}"
