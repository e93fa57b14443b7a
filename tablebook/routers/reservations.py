"""
Reservations router.

Customers book through the public ``POST /reservations`` (written as
``pending``); staff book, edit and move reservations through the other
endpoints. Confirmation messages are sent in the background after the
write has been committed.
"""
import logging
from datetime import date as date_type
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from tablebook.core.deps import get_booking_settings, get_current_user
from tablebook.core.errors import NotFoundError, ValidationError
from tablebook.db.session import get_db
from tablebook.models.reservation import RESERVATION_STATUSES
from tablebook.models.user import User
from tablebook.schemas.order import OrderResponse
from tablebook.schemas.reservation import (
    ReservationCreate,
    ReservationListResponse,
    ReservationResponse,
    ReservationStatusUpdate,
    ReservationUpdate,
    StaffReservationCreate,
)
from tablebook.services.booking import BookingRequest, BookingService
from tablebook.services.booking_settings import BookingSettings
from tablebook.services.notifications import BookingNotice, Notifier, notify_booking
from tablebook.services.orders import OrderService
from tablebook.services.store import ReservationStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reservations", tags=["reservations"])


def get_notifier() -> Notifier:
    return Notifier()


def _schedule_notice(background_tasks: BackgroundTasks, notifier: Notifier, reservation, restaurant_name: str) -> None:
    background_tasks.add_task(
        notify_booking,
        notifier,
        BookingNotice.from_reservation(reservation),
        restaurant_name,
    )


def _book(
    data: ReservationCreate,
    flow: str,
    db: Session,
    booking_settings: BookingSettings,
    background_tasks: BackgroundTasks,
    notifier: Notifier,
):
    service = BookingService(db, booking_settings)
    reservation = service.create_reservation(BookingRequest(**data.model_dump()), flow=flow)
    _schedule_notice(background_tasks, notifier, reservation, booking_settings.restaurant_name)
    return reservation


@router.post("", response_model=ReservationResponse, status_code=status.HTTP_201_CREATED)
def create_reservation(
    data: ReservationCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    booking_settings: BookingSettings = Depends(get_booking_settings),
    notifier: Notifier = Depends(get_notifier),
):
    """
    Public booking request.

    Must respect the advance-booking window and opening hours. Without a
    ``table_id`` the smallest free table that seats the party is assigned.
    Returns 409 with the blocking window when the slot is taken.
    """
    return _book(data, "customer", db, booking_settings, background_tasks, notifier)


@router.post("/staff", response_model=ReservationResponse, status_code=status.HTTP_201_CREATED)
def create_staff_reservation(
    data: StaffReservationCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    booking_settings: BookingSettings = Depends(get_booking_settings),
    notifier: Notifier = Depends(get_notifier),
    current_user: User = Depends(get_current_user),
):
    """Booking entered by staff (phone, walk-in). Written as confirmed."""
    return _book(data, "staff", db, booking_settings, background_tasks, notifier)


@router.get("", response_model=ReservationListResponse)
def list_reservations(
    date: Optional[date_type] = Query(None, description="Only this date"),
    status_filter: Optional[str] = Query(None, alias="status", description="Only this status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if status_filter is not None and status_filter not in RESERVATION_STATUSES:
        raise ValidationError({"status": f"must be one of {', '.join(RESERVATION_STATUSES)}"})

    store = ReservationStore(db)
    reservations = store.list_reservations(
        on_date=date,
        status_in=[status_filter] if status_filter else None,
    )
    return ReservationListResponse(
        reservations=[ReservationResponse.model_validate(r) for r in reservations],
        total=len(reservations),
    )


@router.get("/{reservation_id}", response_model=ReservationResponse)
def get_reservation(
    reservation_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    reservation = ReservationStore(db).get_reservation(reservation_id)
    if reservation is None:
        raise NotFoundError(f"Reservation {reservation_id} not found")
    return reservation


@router.patch("/{reservation_id}", response_model=ReservationResponse)
def update_reservation(
    reservation_id: UUID,
    data: ReservationUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    booking_settings: BookingSettings = Depends(get_booking_settings),
    notifier: Notifier = Depends(get_notifier),
    current_user: User = Depends(get_current_user),
):
    """
    Edit a reservation. Moving an active reservation to another table, date
    or time is re-checked against the table's other bookings. Confirming a
    request here notifies the customer as well.
    """
    changes = data.model_dump(exclude_unset=True)
    service = BookingService(db, booking_settings)
    previous = service.store.get_reservation(reservation_id)
    was_pending = previous is not None and previous.status == "pending"

    reservation = service.update_reservation(reservation_id, changes)
    if was_pending and reservation.status == "confirmed":
        _schedule_notice(background_tasks, notifier, reservation, booking_settings.restaurant_name)
    return reservation


@router.patch("/{reservation_id}/status", response_model=ReservationResponse)
def update_reservation_status(
    reservation_id: UUID,
    data: ReservationStatusUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    booking_settings: BookingSettings = Depends(get_booking_settings),
    notifier: Notifier = Depends(get_notifier),
    current_user: User = Depends(get_current_user),
):
    """Move a reservation through its lifecycle. Confirming a request notifies the customer."""
    service = BookingService(db, booking_settings)
    previous = service.store.get_reservation(reservation_id)
    was_pending = previous is not None and previous.status == "pending"

    reservation = service.update_reservation_status(reservation_id, data.status)
    if was_pending and reservation.status == "confirmed":
        _schedule_notice(background_tasks, notifier, reservation, booking_settings.restaurant_name)
    return reservation


@router.delete("/{reservation_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_reservation(
    reservation_id: UUID,
    db: Session = Depends(get_db),
    booking_settings: BookingSettings = Depends(get_booking_settings),
    current_user: User = Depends(get_current_user),
):
    BookingService(db, booking_settings).delete_reservation(reservation_id)


@router.get("/{reservation_id}/orders", response_model=list[OrderResponse])
def list_reservation_orders(
    reservation_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if ReservationStore(db).get_reservation(reservation_id) is None:
        raise NotFoundError(f"Reservation {reservation_id} not found")
    return OrderService(db).list_for_reservation(reservation_id)
