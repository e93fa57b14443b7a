"""
Table and availability schemas.
"""
import datetime as dt
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class TableCreate(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    seats: int = Field(gt=0)
    position_x: int = 0
    position_y: int = 0


class TableUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    seats: Optional[int] = Field(None, gt=0)
    position_x: Optional[int] = None
    position_y: Optional[int] = None


class TableResponse(BaseModel):
    id: UUID
    name: str
    seats: int
    position_x: int
    position_y: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class TableAvailabilityResponse(BaseModel):
    """One table's status for the requested slot."""
    table: TableResponse
    available: bool
    fits: bool
    busy_from: Optional[str] = None  # blocking window, "HH:MM"
    busy_until: Optional[str] = None


class AvailabilityResponse(BaseModel):
    date: dt.date
    time: str
    guests: int
    duration_hours: int
    buffer_minutes: int
    tables: List[TableAvailabilityResponse]
    available_count: int
    best_table_id: Optional[UUID] = None
