"""
Reservation model.

A reservation books exactly one table for one party on one date. There is
no uniqueness constraint on (table, date, time); overlapping bookings are
rejected by ``ReservationStore.reserve_if_available``.
"""
import uuid
from sqlalchemy import (
    Column, String, Text, Integer, Date, Time, DateTime, Uuid, ForeignKey, CheckConstraint, Index, func,
)
from sqlalchemy.orm import relationship

from tablebook.db.base import Base


RESERVATION_STATUSES = ("pending", "confirmed", "arrived", "in_progress", "completed", "cancelled")

DEFAULT_DURATION_HOURS = 2
DEFAULT_BUFFER_MINUTES = 15


class Reservation(Base):
    __tablename__ = "reservations"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    table_id = Column(Uuid, ForeignKey("tables.id", ondelete="CASCADE"), nullable=False)
    customer_name = Column(String(100), nullable=False)
    customer_email = Column(String(255))
    customer_phone = Column(String(20))
    guests = Column(Integer, nullable=False)
    date = Column(Date, nullable=False)
    time = Column(Time, nullable=False)
    duration_hours = Column(Integer, nullable=False, default=DEFAULT_DURATION_HOURS)
    buffer_minutes = Column(Integer, nullable=False, default=DEFAULT_BUFFER_MINUTES)
    status = Column(String(20), nullable=False, default="confirmed")
    notes = Column(Text)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    table = relationship("DiningTable", back_populates="reservations")
    orders = relationship("Order", back_populates="reservation", cascade="all, delete", passive_deletes=True)

    __table_args__ = (
        CheckConstraint("guests > 0", name="ck_reservations_guests_positive"),
        CheckConstraint("duration_hours > 0", name="ck_reservations_duration_positive"),
        CheckConstraint("buffer_minutes >= 0", name="ck_reservations_buffer_non_negative"),
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'arrived', 'in_progress', 'completed', 'cancelled')",
            name="ck_reservations_status",
        ),
        Index("idx_reservations_table_date", "table_id", "date"),
        Index("idx_reservations_date", "date"),
        Index("idx_reservations_status", "status"),
    )
