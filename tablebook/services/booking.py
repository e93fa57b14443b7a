"""
Booking writer: validates booking requests and writes reservations.

Every write that can occupy a table goes through the store's locked
check-and-write, so a request that passed an earlier availability lookup is
re-checked against the database state at write time.

Two flows exist:

- ``customer``: self-service bookings, written as ``pending``. They must
  respect the advance-booking window and opening hours.
- ``staff``: entered from the dashboard, written as ``confirmed``. No
  booking-window checks (walk-ins are booked for "now").
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, Optional
from uuid import UUID

import pytz
from sqlalchemy.orm import Session

from tablebook.core.config import get_settings
from tablebook.core.errors import ConflictError, NotFoundError, ValidationError
from tablebook.core.timeslots import str_to_time, time_to_str
from tablebook.models.reservation import RESERVATION_STATUSES, Reservation
from tablebook.services.availability import (
    OCCUPYING_STATUSES,
    BusyWindow,
    choose_best_table,
    is_occupying,
    list_available_tables,
)
from tablebook.services.booking_settings import BookingSettings
from tablebook.services.store import ReservationStore

logger = logging.getLogger(__name__)

FLOW_STATUS = {
    "customer": "pending",
    "staff": "confirmed",
}

SLOT_FIELDS = ("table_id", "date", "time", "duration_hours", "buffer_minutes")


@dataclass
class BookingRequest:
    """What a caller asks for. Everything is optional so validation can report all gaps at once."""
    customer_name: Optional[str] = None
    guests: Optional[int] = None
    date: Optional[date] = None
    time: Optional[str] = None  # "HH:MM"
    table_id: Optional[UUID] = None  # None = pick the best free table
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    notes: Optional[str] = None
    duration_hours: Optional[int] = None
    buffer_minutes: Optional[int] = None


def restaurant_now() -> datetime:
    """Current wall-clock time in the restaurant's timezone, as a naive datetime."""
    tz = pytz.timezone(get_settings().RESTAURANT_TIMEZONE)
    return datetime.now(tz).replace(tzinfo=None)


def conflict_error(table_name: str, window: BusyWindow) -> ConflictError:
    return ConflictError(
        f"Table {table_name} is busy from {window.start_str} to {window.end_str}",
        window_start=window.start_str,
        window_end=window.end_str,
    )


class BookingService:
    """Creates and mutates reservations on behalf of customers and staff."""

    def __init__(
        self,
        db: Session,
        settings: BookingSettings,
        now: Callable[[], datetime] = restaurant_now,
    ):
        self.db = db
        self.settings = settings
        self.store = ReservationStore(db)
        self._now = now

    # ============ Create ============

    def create_reservation(self, request: BookingRequest, flow: str = "customer") -> Reservation:
        """
        Validate ``request``, re-check availability and write the reservation.

        Without ``table_id`` the smallest free table that seats the party is
        assigned.

        Raises:
            ValidationError: missing/invalid fields, unknown or too small table
            ConflictError: the slot is taken (carries the blocking window)
        """
        if flow not in FLOW_STATUS:
            raise ValueError(f"Unknown booking flow: {flow!r}")

        fields = self._validate_request(request, flow)
        fields["status"] = FLOW_STATUS[flow]

        if request.table_id is not None:
            table = self._require_fitting_table(request.table_id, fields["guests"])
            fields["table_id"] = table.id
            reservation, conflict = self.store.reserve_if_available(fields)
            if conflict is not None:
                logger.info("Booking rejected: table %s busy %s-%s", table.name, conflict.start_str, conflict.end_str)
                raise conflict_error(table.name, conflict)
        else:
            reservation = self._reserve_best_table(fields)

        logger.info(
            "Reservation %s created (%s flow, %s) for %s guests on %s at %s",
            reservation.id, flow, reservation.status, reservation.guests,
            reservation.date, time_to_str(reservation.time),
        )
        return reservation

    def _reserve_best_table(self, fields: Dict[str, Any]) -> Reservation:
        tables = self.store.list_tables()
        if not any(t.seats >= fields["guests"] for t in tables):
            raise ValidationError({"guests": f"No table seats {fields['guests']} guests"})

        # Try candidates smallest-first: another booking may grab one between
        # this read and the locked write.
        candidates = list_available_tables(
            fields["date"],
            fields["time"],
            fields["guests"],
            tables,
            self.store.list_reservations(on_date=fields["date"], status_in=OCCUPYING_STATUSES),
            self.settings.default_reservation_duration,
            self.settings.default_buffer_minutes,
            fits_only=True,
            duration_hours=fields["duration_hours"],
            buffer_minutes=fields["buffer_minutes"],
        )
        while candidates:
            table = choose_best_table(candidates, fields["guests"])
            candidates.remove(table)
            reservation, conflict = self.store.reserve_if_available({**fields, "table_id": table.id})
            if conflict is None:
                return reservation
            logger.info("Table %s taken while booking, trying next candidate", table.name)

        raise ConflictError(
            f"No table available for {fields['guests']} guests at {time_to_str(fields['time'])} on {fields['date']}"
        )

    def _validate_request(self, request: BookingRequest, flow: str) -> Dict[str, Any]:
        errors: Dict[str, str] = {}

        name = (request.customer_name or "").strip()
        if not name:
            errors["customer_name"] = "required"

        if request.guests is None:
            errors["guests"] = "required"
        elif request.guests <= 0:
            errors["guests"] = "must be a positive number"

        if request.date is None:
            errors["date"] = "required"

        start_time = None
        if not request.time:
            errors["time"] = "required"
        else:
            try:
                start_time = str_to_time(request.time)
            except ValueError:
                errors["time"] = "expected HH:MM"

        duration = request.duration_hours
        if duration is None:
            duration = self.settings.default_reservation_duration
        elif duration <= 0:
            errors["duration_hours"] = "must be a positive number of hours"

        buffer = request.buffer_minutes
        if buffer is None:
            buffer = self.settings.default_buffer_minutes
        elif buffer < 0:
            errors["buffer_minutes"] = "must be zero or more minutes"

        if flow == "customer" and request.date is not None and start_time is not None:
            errors.update(self._booking_window_errors(request.date, start_time))

        if errors:
            raise ValidationError(errors)

        return {
            "customer_name": name,
            "customer_email": request.customer_email or None,
            "customer_phone": request.customer_phone or None,
            "guests": request.guests,
            "date": request.date,
            "time": start_time,
            "duration_hours": duration,
            "buffer_minutes": buffer,
            "notes": request.notes,
        }

    def _booking_window_errors(self, on_date: date, start_time) -> Dict[str, str]:
        errors = {}
        now = self._now()
        start = datetime.combine(on_date, start_time)

        earliest = now + timedelta(hours=self.settings.min_advance_booking_hours)
        if start < earliest:
            errors["time"] = f"must be at least {self.settings.min_advance_booking_hours} hours ahead"

        latest_date = now.date() + timedelta(days=self.settings.max_advance_booking_days)
        if on_date > latest_date:
            errors["date"] = f"cannot be more than {self.settings.max_advance_booking_days} days ahead"

        if "time" not in errors and not self.settings.is_open_at(on_date, start_time):
            errors["time"] = "the restaurant is closed at this time"

        return errors

    def _require_fitting_table(self, table_id: UUID, guests: int):
        table = self.store.get_table(table_id)
        if table is None:
            raise ValidationError({"table_id": "unknown table"})
        if table.seats < guests:
            raise ValidationError({"guests": f"table {table.name} seats only {table.seats}"})
        return table

    # ============ Update / delete ============

    def update_reservation_status(self, reservation_id: UUID, status: str) -> Reservation:
        """
        Set a reservation's status.

        Staff transitions are written as-is, except that moving a reservation
        from a non-occupying status (e.g. ``pending``) into an occupying one
        re-checks its slot, since pending requests never blocked anyone.
        """
        if status not in RESERVATION_STATUSES:
            raise ValidationError({"status": f"must be one of {', '.join(RESERVATION_STATUSES)}"})

        reservation = self._require(reservation_id)
        if is_occupying(status) and not is_occupying(reservation.status):
            conflict = self.store.reschedule_if_available(reservation, {"status": status})
            if conflict is not None:
                raise conflict_error(reservation.table.name, conflict)
        else:
            reservation = self.store.update_reservation(reservation_id, {"status": status})

        logger.info("Reservation %s is now %s", reservation_id, status)
        return reservation

    def update_reservation(self, reservation_id: UUID, changes: Dict[str, Any]) -> Reservation:
        """
        Edit reservation fields.

        If the result occupies a table and the slot or status changed, the new
        slot is re-checked against every other booking of that table.
        """
        reservation = self._require(reservation_id)
        changes = self._validate_changes(reservation, changes)
        if not changes:
            return reservation

        status = changes.get("status", reservation.status)
        slot_changed = any(
            field in changes and changes[field] != getattr(reservation, field)
            for field in SLOT_FIELDS
        )
        activated = is_occupying(status) and not is_occupying(reservation.status)

        if is_occupying(status) and (slot_changed or activated):
            table_id = changes.get("table_id", reservation.table_id)
            conflict = self.store.reschedule_if_available(reservation, changes)
            if conflict is not None:
                raise conflict_error(self.store.get_table(table_id).name, conflict)
            return reservation

        return self.store.update_reservation(reservation_id, changes)

    def _validate_changes(self, reservation: Reservation, changes: Dict[str, Any]) -> Dict[str, Any]:
        errors: Dict[str, str] = {}
        cleaned = dict(changes)

        if "customer_name" in cleaned:
            cleaned["customer_name"] = (cleaned["customer_name"] or "").strip()
            if not cleaned["customer_name"]:
                errors["customer_name"] = "required"
        if "guests" in cleaned and (cleaned["guests"] is None or cleaned["guests"] <= 0):
            errors["guests"] = "must be a positive number"
        if "table_id" in cleaned and cleaned["table_id"] is None:
            errors["table_id"] = "required"
        if "date" in cleaned and cleaned["date"] is None:
            errors["date"] = "required"
        if "time" in cleaned:
            try:
                cleaned["time"] = str_to_time(cleaned["time"]) if cleaned["time"] else None
            except ValueError:
                cleaned["time"] = None
            if cleaned["time"] is None:
                errors["time"] = "expected HH:MM"
        if "duration_hours" in cleaned and (cleaned["duration_hours"] is None or cleaned["duration_hours"] <= 0):
            errors["duration_hours"] = "must be a positive number of hours"
        if "buffer_minutes" in cleaned and (cleaned["buffer_minutes"] is None or cleaned["buffer_minutes"] < 0):
            errors["buffer_minutes"] = "must be zero or more minutes"
        if "status" in cleaned and cleaned["status"] not in RESERVATION_STATUSES:
            errors["status"] = f"must be one of {', '.join(RESERVATION_STATUSES)}"

        if errors:
            raise ValidationError(errors)

        if "table_id" in cleaned or "guests" in cleaned:
            self._require_fitting_table(
                cleaned.get("table_id", reservation.table_id),
                cleaned.get("guests", reservation.guests),
            )
        return cleaned

    def delete_reservation(self, reservation_id: UUID) -> None:
        """Hard delete, orders of the reservation are removed with it."""
        self.store.delete_reservation(reservation_id)
        logger.info("Reservation %s deleted", reservation_id)

    def _require(self, reservation_id: UUID) -> Reservation:
        reservation = self.store.get_reservation(reservation_id)
        if reservation is None:
            raise NotFoundError(f"Reservation {reservation_id} not found")
        return reservation
