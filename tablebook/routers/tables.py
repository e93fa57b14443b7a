"""
Tables router: floor layout management and the public availability lookup.
"""
import logging
from datetime import date as date_type
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from tablebook.core.deps import get_booking_settings, get_current_user
from tablebook.core.errors import ValidationError
from tablebook.core.timeslots import str_to_time, time_to_str
from tablebook.db.session import get_db
from tablebook.models.table import DiningTable
from tablebook.models.user import User
from tablebook.schemas.reservation import ReservationListResponse, ReservationResponse
from tablebook.schemas.table import (
    AvailabilityResponse,
    TableAvailabilityResponse,
    TableCreate,
    TableResponse,
    TableUpdate,
)
from tablebook.services.availability import OCCUPYING_STATUSES, choose_best_table, table_availability
from tablebook.services.booking_settings import BookingSettings
from tablebook.services.store import ReservationStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tables", tags=["tables"])


def get_table_or_404(db: Session, table_id: UUID) -> DiningTable:
    table = db.get(DiningTable, table_id)
    if not table:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Table not found"
        )
    return table


@router.get("", response_model=list[TableResponse])
def list_tables(db: Session = Depends(get_db)):
    """All tables, ordered by name."""
    return ReservationStore(db).list_tables()


@router.get("/available", response_model=AvailabilityResponse)
def check_availability(
    date: date_type = Query(..., description="Booking date (YYYY-MM-DD)"),
    time: str = Query(..., description="Start time (HH:MM)"),
    guests: int = Query(..., gt=0, description="Party size"),
    fits_only: bool = Query(False, description="Only list tables that seat the party"),
    db: Session = Depends(get_db),
    booking_settings: BookingSettings = Depends(get_booking_settings),
):
    """
    Which tables are free for a party at the given date and time.

    Uses the restaurant's default duration and buffer. Public: the booking
    form calls this before submitting.
    """
    try:
        start_time = str_to_time(time)
    except ValueError:
        raise ValidationError({"time": "expected HH:MM"})

    store = ReservationStore(db)
    tables = store.list_tables()
    reservations = store.list_reservations(on_date=date, status_in=OCCUPYING_STATUSES)

    report = table_availability(
        date,
        start_time,
        guests,
        tables,
        reservations,
        booking_settings.default_reservation_duration,
        booking_settings.default_buffer_minutes,
    )
    if fits_only:
        report = [entry for entry in report if entry.fits]

    entries = [
        TableAvailabilityResponse(
            table=TableResponse.model_validate(entry.table),
            available=entry.available,
            fits=entry.fits,
            busy_from=entry.conflict.start_str if entry.conflict else None,
            busy_until=entry.conflict.end_str if entry.conflict else None,
        )
        for entry in report
    ]
    best = choose_best_table([entry.table for entry in report if entry.bookable])

    return AvailabilityResponse(
        date=date,
        time=time_to_str(start_time),
        guests=guests,
        duration_hours=booking_settings.default_reservation_duration,
        buffer_minutes=booking_settings.default_buffer_minutes,
        tables=entries,
        available_count=sum(1 for entry in report if entry.available),
        best_table_id=best.id if best else None,
    )


@router.post("", response_model=TableResponse, status_code=status.HTTP_201_CREATED)
def create_table(
    data: TableCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    table = DiningTable(**data.model_dump())
    db.add(table)
    db.commit()
    db.refresh(table)
    logger.info("Table %s created with %d seats", table.name, table.seats)
    return table


@router.patch("/{table_id}", response_model=TableResponse)
def update_table(
    table_id: UUID,
    data: TableUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Update name, capacity or floor position. Existing bookings are kept as they are."""
    table = get_table_or_404(db, table_id)

    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None:
            continue
        setattr(table, field, value)

    db.commit()
    db.refresh(table)
    return table


@router.delete("/{table_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_table(
    table_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Delete a table together with its reservations and orders."""
    table = get_table_or_404(db, table_id)
    db.delete(table)
    db.commit()
    logger.info("Table %s deleted", table_id)


@router.get("/{table_id}/reservations", response_model=ReservationListResponse)
def list_table_reservations(
    table_id: UUID,
    date: Optional[date_type] = Query(None, description="Only this date"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    get_table_or_404(db, table_id)
    reservations = ReservationStore(db).list_reservations(on_date=date, table_id=table_id)
    return ReservationListResponse(
        reservations=[ReservationResponse.model_validate(r) for r in reservations],
        total=len(reservations),
    )
