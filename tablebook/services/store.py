"""
Data access for tables and reservations.

All booking writes that must not double-book a table go through
``reserve_if_available`` / ``reschedule_if_available``: they lock the target
table row (``SELECT ... FOR UPDATE``), read that table's reservations for the
day fresh from the database, re-run the availability engine and write, all in
one transaction. Concurrent bookings for the same table therefore serialize on
the row lock and the later one sees the earlier one's row.
"""
import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from tablebook.core.errors import NotFoundError
from tablebook.models.reservation import Reservation
from tablebook.models.table import DiningTable
from tablebook.services.availability import OCCUPYING_STATUSES, BusyWindow, find_conflict

logger = logging.getLogger(__name__)


class ReservationStore:
    """CRUD over tables and reservations plus the atomic check-and-write."""

    def __init__(self, db: Session):
        self.db = db

    # ============ Tables ============

    def list_tables(self) -> List[DiningTable]:
        return list(self.db.execute(select(DiningTable).order_by(DiningTable.name)).scalars().all())

    def get_table(self, table_id: UUID) -> Optional[DiningTable]:
        return self.db.get(DiningTable, table_id)

    # ============ Reservations ============

    def list_reservations(
        self,
        on_date: Optional[date] = None,
        status_in: Optional[Iterable[str]] = None,
        table_id: Optional[UUID] = None,
    ) -> List[Reservation]:
        """Reservations ordered by date and time, optionally filtered."""
        query = select(Reservation)
        if on_date is not None:
            query = query.where(Reservation.date == on_date)
        if status_in is not None:
            query = query.where(Reservation.status.in_(list(status_in)))
        if table_id is not None:
            query = query.where(Reservation.table_id == table_id)
        query = query.order_by(Reservation.date.asc(), Reservation.time.asc())
        return list(self.db.execute(query).scalars().all())

    def get_reservation(self, reservation_id: UUID) -> Optional[Reservation]:
        return self.db.get(Reservation, reservation_id)

    def insert_reservation(self, fields: Dict[str, Any]) -> Reservation:
        """Plain insert, no availability check. Server assigns id and timestamps."""
        reservation = Reservation(**fields)
        self.db.add(reservation)
        self._commit()
        self.db.refresh(reservation)
        return reservation

    def update_reservation(self, reservation_id: UUID, changes: Dict[str, Any]) -> Reservation:
        reservation = self._require(reservation_id)
        for field, value in changes.items():
            setattr(reservation, field, value)
        self._commit()
        self.db.refresh(reservation)
        return reservation

    def delete_reservation(self, reservation_id: UUID) -> None:
        """Hard delete. Orders of the reservation go with it (FK cascade)."""
        reservation = self._require(reservation_id)
        self.db.delete(reservation)
        self._commit()

    # ============ Atomic check-and-write ============

    def reserve_if_available(self, fields: Dict[str, Any]) -> Tuple[Optional[Reservation], Optional[BusyWindow]]:
        """
        Insert a reservation unless it overlaps an occupying booking.

        Args:
            fields: column values; needs table_id, date, time,
                duration_hours and buffer_minutes

        Returns:
            (reservation, None) on success, (None, conflicting window) otherwise
        """
        try:
            conflict = self._locked_conflict(
                fields["table_id"], fields["date"], fields["time"],
                fields["duration_hours"], fields["buffer_minutes"],
            )
            if conflict is not None:
                self.db.rollback()
                return None, conflict

            reservation = Reservation(**fields)
            self.db.add(reservation)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(reservation)
        return reservation, None

    def reschedule_if_available(
        self,
        reservation: Reservation,
        changes: Dict[str, Any],
    ) -> Optional[BusyWindow]:
        """
        Apply ``changes`` to ``reservation`` if its resulting slot is free.

        The reservation itself is excluded from the check. Returns the
        conflicting window, or None once the changes are committed.
        """
        target = {
            field: changes.get(field, getattr(reservation, field))
            for field in ("table_id", "date", "time", "duration_hours", "buffer_minutes")
        }
        try:
            conflict = self._locked_conflict(
                target["table_id"], target["date"], target["time"],
                target["duration_hours"], target["buffer_minutes"],
                exclude_reservation_id=reservation.id,
            )
            if conflict is not None:
                self.db.rollback()
                return conflict

            for field, value in changes.items():
                setattr(reservation, field, value)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(reservation)
        return None

    def _locked_conflict(
        self,
        table_id: UUID,
        on_date: date,
        start_time,
        duration_hours: int,
        buffer_minutes: int,
        exclude_reservation_id: Optional[UUID] = None,
    ) -> Optional[BusyWindow]:
        table = self.db.execute(
            select(DiningTable).where(DiningTable.id == table_id).with_for_update()
        ).scalar_one_or_none()
        if table is None:
            raise NotFoundError(f"Table {table_id} not found")

        same_day = self.db.execute(
            select(Reservation).where(
                Reservation.table_id == table_id,
                Reservation.date == on_date,
                Reservation.status.in_(sorted(OCCUPYING_STATUSES)),
            ).execution_options(populate_existing=True)
        ).scalars().all()

        return find_conflict(
            table, on_date, start_time, duration_hours, buffer_minutes,
            same_day, exclude_reservation_id=exclude_reservation_id,
        )

    def _require(self, reservation_id: UUID) -> Reservation:
        reservation = self.get_reservation(reservation_id)
        if reservation is None:
            raise NotFoundError(f"Reservation {reservation_id} not found")
        return reservation

    def _commit(self) -> None:
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
