"""
Reservation availability engine.

Pure functions that decide which tables are free for a requested slot. They
never touch the database: callers pass in a snapshot of the tables and of the
reservations on the requested date (ORM rows or the snapshot dataclasses
below, anything exposing the same attributes).

A reservation occupies its table for its *busy window*:

    [time - buffer, time + duration * 60 + buffer)

Two reservations on the same table conflict iff their busy windows overlap
(half-open, so windows that only touch are fine). Only reservations in an
occupying status count, see ``OCCUPYING_STATUSES``.
"""
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, List, Optional, Sequence

from tablebook.core.timeslots import (
    MINUTES_PER_HOUR,
    TimeLike,
    format_time,
    overlaps,
    parse_time,
    time_to_str,
)


# pending requests are provisional holds and do not block other customers;
# completed and cancelled are terminal.
OCCUPYING_STATUSES = frozenset({"confirmed", "arrived", "in_progress"})


@dataclass(frozen=True)
class BusyWindow:
    """Occupied interval in minutes from midnight of the booking date."""
    start: int
    end: int
    reservation_id: Any = None

    @property
    def minutes(self) -> int:
        return self.end - self.start

    @property
    def start_str(self) -> str:
        return format_time(self.start, wrap=True)

    @property
    def end_str(self) -> str:
        return format_time(self.end, wrap=True)


@dataclass(frozen=True)
class TableSnapshot:
    """Minimal table view the engine needs."""
    id: Any
    name: str
    seats: int

    @classmethod
    def from_row(cls, row) -> "TableSnapshot":
        return cls(id=row.id, name=row.name, seats=row.seats)


@dataclass(frozen=True)
class ReservationSnapshot:
    """Minimal reservation view the engine needs."""
    id: Any
    table_id: Any
    date: date
    time: str  # "HH:MM"
    duration_hours: int
    buffer_minutes: int
    status: str

    @classmethod
    def from_row(cls, row) -> "ReservationSnapshot":
        return cls(
            id=row.id,
            table_id=row.table_id,
            date=row.date,
            time=time_to_str(row.time) if not isinstance(row.time, str) else row.time,
            duration_hours=row.duration_hours,
            buffer_minutes=row.buffer_minutes,
            status=row.status,
        )


@dataclass(frozen=True)
class TableAvailability:
    """
    Availability of one table for a requested slot.

    ``available`` (no conflicting booking) and ``fits`` (enough seats) are
    independent, so a UI can show "free but too small" separately from
    "taken".
    """
    table: Any
    available: bool
    fits: bool
    conflict: Optional[BusyWindow] = None

    @property
    def bookable(self) -> bool:
        return self.available and self.fits


def is_occupying(status: str) -> bool:
    """Whether a reservation in ``status`` blocks its table."""
    return status in OCCUPYING_STATUSES


def busy_window(
    start_time: TimeLike,
    duration_hours: int,
    buffer_minutes: int,
    reservation_id: Any = None,
) -> BusyWindow:
    """
    Busy window for a booking starting at ``start_time``.

    Its length is always ``duration_hours * 60 + 2 * buffer_minutes``.

    Raises:
        ValueError: malformed time, non-positive duration or negative buffer
    """
    if duration_hours is None or duration_hours <= 0:
        raise ValueError(f"Duration must be a positive number of hours, got {duration_hours!r}")
    if buffer_minutes is None or buffer_minutes < 0:
        raise ValueError(f"Buffer must be zero or more minutes, got {buffer_minutes!r}")

    start = parse_time(start_time)
    service_end = start + duration_hours * MINUTES_PER_HOUR
    return BusyWindow(
        start=start - buffer_minutes,
        end=service_end + buffer_minutes,
        reservation_id=reservation_id,
    )


def compute_busy_window(reservation) -> BusyWindow:
    """Busy window of an existing reservation, using its own duration and buffer."""
    return busy_window(
        reservation.time,
        reservation.duration_hours,
        reservation.buffer_minutes,
        reservation_id=getattr(reservation, "id", None),
    )


def _check_capacity(table) -> None:
    if table.seats is None or table.seats <= 0:
        raise ValueError(f"Table {table.name!r} has invalid capacity {table.seats!r}")


def find_conflict(
    table,
    on_date: date,
    requested_time: TimeLike,
    duration_hours: int,
    buffer_minutes: int,
    reservations: Iterable,
    exclude_reservation_id: Any = None,
) -> Optional[BusyWindow]:
    """
    First (earliest) busy window on ``table`` that the requested slot overlaps.

    Reservations for other tables, other dates or in a non-occupying status
    are ignored, as is ``exclude_reservation_id`` (used when re-checking an
    edit of an existing reservation against everything else).

    Returns:
        The conflicting window, or None if the table is free
    """
    requested = busy_window(requested_time, duration_hours, buffer_minutes)

    conflicts = []
    for reservation in reservations:
        if reservation.table_id != table.id or reservation.date != on_date:
            continue
        if not is_occupying(reservation.status):
            continue
        if exclude_reservation_id is not None and reservation.id == exclude_reservation_id:
            continue

        existing = compute_busy_window(reservation)
        if overlaps(requested.start, requested.end, existing.start, existing.end):
            conflicts.append(existing)

    if not conflicts:
        return None
    return min(conflicts, key=lambda w: (w.start, w.end))


def is_table_available(
    table,
    on_date: date,
    requested_time: TimeLike,
    duration_hours: int,
    buffer_minutes: int,
    reservations: Iterable,
    exclude_reservation_id: Any = None,
) -> bool:
    """True if no occupying reservation on ``table`` overlaps the requested slot."""
    return find_conflict(
        table, on_date, requested_time, duration_hours, buffer_minutes,
        reservations, exclude_reservation_id=exclude_reservation_id,
    ) is None


def fits_party(table, party_size: int) -> bool:
    """True if ``table`` seats at least ``party_size`` guests."""
    _check_capacity(table)
    if party_size is None or party_size <= 0:
        raise ValueError(f"Party size must be positive, got {party_size!r}")
    return table.seats >= party_size


def table_availability(
    on_date: date,
    requested_time: TimeLike,
    party_size: int,
    tables: Sequence,
    reservations: Sequence,
    duration_hours: int,
    buffer_minutes: int,
) -> List[TableAvailability]:
    """Per-table free/busy and fit report, in the order the tables were given."""
    report = []
    for table in tables:
        conflict = find_conflict(table, on_date, requested_time, duration_hours, buffer_minutes, reservations)
        report.append(TableAvailability(
            table=table,
            available=conflict is None,
            fits=fits_party(table, party_size),
            conflict=conflict,
        ))
    return report


def list_available_tables(
    on_date: date,
    requested_time: TimeLike,
    party_size: int,
    tables: Sequence,
    reservations: Sequence,
    default_duration: int,
    default_buffer: int,
    fits_only: bool = False,
    duration_hours: Optional[int] = None,
    buffer_minutes: Optional[int] = None,
) -> List:
    """
    Tables free for the requested slot.

    ``duration_hours`` / ``buffer_minutes`` override the restaurant defaults
    for this request. With ``fits_only`` the result is further limited to
    tables with at least ``party_size`` seats.
    """
    report = table_availability(
        on_date,
        requested_time,
        party_size,
        tables,
        reservations,
        duration_hours if duration_hours is not None else default_duration,
        buffer_minutes if buffer_minutes is not None else default_buffer,
    )
    return [
        entry.table for entry in report
        if entry.available and (entry.fits or not fits_only)
    ]


def choose_best_table(candidates: Iterable, party_size: Optional[int] = None):
    """
    Smallest table that still seats the party, or None.

    Ties on capacity are broken by name, then id, so the choice is stable.
    """
    pool = list(candidates)
    for table in pool:
        _check_capacity(table)
    if party_size is not None:
        pool = [t for t in pool if fits_party(t, party_size)]
    if not pool:
        return None
    return min(pool, key=lambda t: (t.seats, t.name or "", str(t.id)))
