"""
Dining table model: the seating units reservations are booked against.
"""
import uuid
from sqlalchemy import Column, String, Integer, DateTime, Uuid, CheckConstraint, func
from sqlalchemy.orm import relationship

from tablebook.db.base import Base


class DiningTable(Base):
    """A table on the restaurant floor. Position is only used for the layout view."""
    __tablename__ = "tables"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(50), nullable=False)
    seats = Column(Integer, nullable=False)
    position_x = Column(Integer, nullable=False, default=0)
    position_y = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    reservations = relationship(
        "Reservation",
        back_populates="table",
        cascade="all, delete",
        passive_deletes=True,
    )
    orders = relationship("Order", back_populates="table", cascade="all, delete", passive_deletes=True)

    __table_args__ = (
        CheckConstraint("seats > 0", name="ck_tables_seats_positive"),
    )
