"""
Reservation Pydantic schemas.

Create requests are lenient (everything optional) so the booking
service can report every missing field at once.
"""
import datetime as dt
from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_serializer

ReservationStatus = Literal["pending", "confirmed", "arrived", "in_progress", "completed", "cancelled"]


class ReservationCreate(BaseModel):
    table_id: Optional[UUID] = None  # omitted = auto-assign the best table
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    guests: Optional[int] = None
    date: Optional[dt.date] = None
    time: Optional[str] = None  # "HH:MM"
    notes: Optional[str] = None


class StaffReservationCreate(ReservationCreate):
    """Staff may override the restaurant's default duration and buffer."""
    duration_hours: Optional[int] = None
    buffer_minutes: Optional[int] = None


class ReservationUpdate(BaseModel):
    table_id: Optional[UUID] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    guests: Optional[int] = None
    date: Optional[dt.date] = None
    time: Optional[str] = None
    duration_hours: Optional[int] = None
    buffer_minutes: Optional[int] = None
    status: Optional[str] = None
    notes: Optional[str] = None


class ReservationStatusUpdate(BaseModel):
    status: str


class ReservationTable(BaseModel):
    id: UUID
    name: str
    seats: int

    model_config = ConfigDict(from_attributes=True)


class ReservationResponse(BaseModel):
    id: UUID
    table_id: UUID
    table: Optional[ReservationTable] = None
    customer_name: str
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    guests: int
    date: dt.date
    time: dt.time
    duration_hours: int
    buffer_minutes: int
    status: ReservationStatus
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("time")
    def serialize_time(self, value: dt.time) -> str:
        return value.strftime("%H:%M")


class ReservationListResponse(BaseModel):
    reservations: List[ReservationResponse]
    total: int
