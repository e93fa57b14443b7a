"""
Concurrent bookings for the same slot.

Needs row locks, so this only runs against PostgreSQL
(``TEST_DATABASE_URL=postgresql://...``).
"""
import threading
from datetime import date, datetime

import pytest
from sqlalchemy.orm import Session

from tablebook.core.errors import ConflictError
from tablebook.db.session import engine
from tablebook.models.reservation import Reservation
from tablebook.services.booking import BookingRequest, BookingService
from tablebook.services.booking_settings import BookingSettings

pytestmark = pytest.mark.skipif(
    engine.dialect.name != "postgresql",
    reason="row locking needs PostgreSQL",
)

WORKERS = 8


def test_simultaneous_bookings_admit_exactly_one(db: Session, tables):
    table_id = tables["T2"].id
    barrier = threading.Barrier(WORKERS)
    results = []
    lock = threading.Lock()

    def book():
        session = Session(bind=engine)
        try:
            service = BookingService(session, BookingSettings(), now=lambda: datetime(2025, 6, 1, 12, 0))
            barrier.wait()
            try:
                service.create_reservation(
                    BookingRequest(customer_name="Racer", guests=2, date=date(2025, 6, 14), time="19:00",
                                   table_id=table_id),
                    flow="staff",
                )
                outcome = "booked"
            except ConflictError:
                outcome = "conflict"
            with lock:
                results.append(outcome)
        finally:
            session.close()

    threads = [threading.Thread(target=book) for _ in range(WORKERS)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(results) == ["booked"] + ["conflict"] * (WORKERS - 1)
    db.expire_all()
    assert db.query(Reservation).filter(Reservation.table_id == table_id).count() == 1
