"""
Tests for the availability engine.

The engine is pure, so these tests build snapshots directly and never touch
the database.
"""
import random
import uuid
from datetime import date

import pytest

from tablebook.services.availability import (
    OCCUPYING_STATUSES,
    ReservationSnapshot,
    TableSnapshot,
    busy_window,
    choose_best_table,
    find_conflict,
    fits_party,
    is_table_available,
    list_available_tables,
    table_availability,
)

DAY = date(2025, 6, 14)


def make_table(name, seats):
    return TableSnapshot(id=uuid.uuid4(), name=name, seats=seats)


def make_reservation(table, time, status="confirmed", duration=2, buffer=15, on_date=DAY):
    return ReservationSnapshot(
        id=uuid.uuid4(),
        table_id=table.id,
        date=on_date,
        time=time,
        duration_hours=duration,
        buffer_minutes=buffer,
        status=status,
    )


@pytest.fixture
def floor():
    return {
        "T1": make_table("T1", 2),
        "T2": make_table("T2", 4),
        "T3": make_table("T3", 2),
        "T4": make_table("T4", 6),
    }


class TestBusyWindow:

    def test_window_includes_buffer_on_both_sides(self):
        window = busy_window("19:00", 2, 15)
        assert (window.start_str, window.end_str) == ("18:45", "21:15")

    def test_window_length(self):
        for duration, buffer in [(1, 0), (2, 15), (3, 30)]:
            assert busy_window("12:00", duration, buffer).minutes == duration * 60 + 2 * buffer

    def test_window_may_run_past_midnight(self):
        window = busy_window("23:00", 2, 15)
        assert window.start == 22 * 60 + 45
        assert window.end == 25 * 60 + 15
        assert window.end_str == "01:15"

    def test_invalid_inputs(self):
        with pytest.raises(ValueError):
            busy_window("19:00", 0, 15)
        with pytest.raises(ValueError):
            busy_window("19:00", 2, -1)
        with pytest.raises(ValueError):
            busy_window("25:00", 2, 15)


class TestFindConflict:

    def test_scenario_overlap_reports_blocking_window(self, floor):
        """A 19:00 booking blocks 20:00 on the same table."""
        existing = make_reservation(floor["T2"], "19:00")
        conflict = find_conflict(floor["T2"], DAY, "20:00", 2, 15, [existing])

        assert conflict is not None
        assert (conflict.start_str, conflict.end_str) == ("18:45", "21:15")
        assert conflict.reservation_id == existing.id

    def test_scenario_back_to_back_with_buffers(self, floor):
        """19:00 and 21:30 with 15 minute buffers touch at 21:15 and are fine."""
        existing = make_reservation(floor["T2"], "19:00")
        assert is_table_available(floor["T2"], DAY, "21:30", 2, 15, [existing]) is True

    def test_one_minute_earlier_conflicts(self, floor):
        existing = make_reservation(floor["T2"], "19:00")
        assert is_table_available(floor["T2"], DAY, "21:29", 2, 15, [existing]) is False

    def test_buffer_is_symmetric(self, floor):
        """Booking before an existing reservation is blocked by the same buffer."""
        existing = make_reservation(floor["T2"], "19:00")
        assert is_table_available(floor["T2"], DAY, "16:30", 2, 15, [existing]) is True
        assert is_table_available(floor["T2"], DAY, "16:31", 2, 15, [existing]) is False

    def test_zero_buffer_touching_is_fine(self, floor):
        existing = make_reservation(floor["T2"], "19:00", buffer=0)
        assert is_table_available(floor["T2"], DAY, "21:00", 2, 0, [existing]) is True
        assert is_table_available(floor["T2"], DAY, "17:00", 2, 0, [existing]) is True

    def test_existing_reservation_uses_its_own_duration(self, floor):
        existing = make_reservation(floor["T2"], "18:00", duration=4, buffer=0)
        assert is_table_available(floor["T2"], DAY, "21:00", 1, 0, [existing]) is False
        assert is_table_available(floor["T2"], DAY, "22:00", 1, 0, [existing]) is True

    def test_other_tables_and_dates_are_ignored(self, floor):
        reservations = [
            make_reservation(floor["T1"], "19:00"),
            make_reservation(floor["T2"], "19:00", on_date=date(2025, 6, 15)),
        ]
        assert find_conflict(floor["T2"], DAY, "19:00", 2, 15, reservations) is None

    @pytest.mark.parametrize("status", ["pending", "completed", "cancelled"])
    def test_non_occupying_statuses_do_not_block(self, floor, status):
        existing = make_reservation(floor["T2"], "19:00", status=status)
        assert is_table_available(floor["T2"], DAY, "19:00", 2, 15, [existing]) is True

    @pytest.mark.parametrize("status", sorted(OCCUPYING_STATUSES))
    def test_occupying_statuses_block(self, floor, status):
        existing = make_reservation(floor["T2"], "19:00", status=status)
        assert is_table_available(floor["T2"], DAY, "19:00", 2, 15, [existing]) is False

    def test_excluded_reservation_does_not_conflict_with_itself(self, floor):
        existing = make_reservation(floor["T2"], "19:00")
        assert find_conflict(
            floor["T2"], DAY, "19:30", 2, 15, [existing], exclude_reservation_id=existing.id
        ) is None

    def test_earliest_conflict_is_reported(self, floor):
        late = make_reservation(floor["T4"], "21:00", duration=1, buffer=0)
        early = make_reservation(floor["T4"], "18:00", duration=1, buffer=0)
        conflict = find_conflict(floor["T4"], DAY, "18:30", 3, 0, [late, early])
        assert conflict.reservation_id == early.id

    def test_late_booking_conflicts_across_midnight_window(self, floor):
        existing = make_reservation(floor["T2"], "22:30", duration=2, buffer=0)
        assert is_table_available(floor["T2"], DAY, "23:59", 1, 0, [existing]) is False


class TestFitsParty:

    def test_fits(self, floor):
        assert fits_party(floor["T2"], 4) is True
        assert fits_party(floor["T2"], 5) is False

    def test_invalid_party_size(self, floor):
        with pytest.raises(ValueError):
            fits_party(floor["T2"], 0)

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            fits_party(make_table("broken", 0), 2)


class TestListAvailableTables:

    def test_scenario_best_table_for_party_of_four(self, floor):
        """With T2 taken at 19:00, a party of 4 gets T4, the only other table that seats them."""
        reservations = [make_reservation(floor["T2"], "19:00")]
        available = list_available_tables(DAY, "19:30", 4, list(floor.values()), reservations, 2, 15)

        assert {t.name for t in available} == {"T1", "T3", "T4"}
        assert choose_best_table(available, 4).name == "T4"

    def test_fits_only_drops_small_tables(self, floor):
        available = list_available_tables(DAY, "19:30", 4, list(floor.values()), [], 2, 15, fits_only=True)
        assert {t.name for t in available} == {"T2", "T4"}

    def test_request_overrides_defaults(self, floor):
        reservations = [make_reservation(floor["T2"], "21:00", buffer=0)]
        tables = [floor["T2"]]
        assert list_available_tables(DAY, "19:00", 2, tables, reservations, 3, 0) == []
        assert list_available_tables(DAY, "19:00", 2, tables, reservations, 3, 0, duration_hours=2) == tables

    def test_preserves_input_order(self, floor):
        tables = [floor["T4"], floor["T1"], floor["T2"]]
        assert list_available_tables(DAY, "12:00", 1, tables, [], 2, 15) == tables

    def test_no_tables(self):
        assert list_available_tables(DAY, "12:00", 2, [], [], 2, 15) == []

    def test_repeated_calls_are_identical(self, floor):
        tables = list(floor.values())
        reservations = [make_reservation(floor["T1"], "18:00"), make_reservation(floor["T4"], "20:00")]

        first = list_available_tables(DAY, "19:00", 2, tables, reservations, 2, 15)
        second = list_available_tables(DAY, "19:00", 2, tables, reservations, 2, 15)
        assert first == second


class TestTableAvailability:

    def test_report_separates_fit_and_availability(self, floor):
        reservations = [make_reservation(floor["T2"], "19:00")]
        report = {e.table.name: e for e in table_availability(
            DAY, "19:00", 4, list(floor.values()), reservations, 2, 15
        )}

        assert report["T1"].available and not report["T1"].fits
        assert not report["T2"].available and report["T2"].fits
        assert report["T2"].conflict.start_str == "18:45"
        assert report["T4"].bookable


class TestChooseBestTable:

    def test_smallest_fitting_table(self, floor):
        assert choose_best_table(floor.values(), 3).name == "T2"

    def test_ties_broken_by_name(self, floor):
        assert choose_best_table([floor["T3"], floor["T1"]], 2).name == "T1"

    def test_none_when_nothing_fits(self, floor):
        assert choose_best_table(floor.values(), 7) is None
        assert choose_best_table([], 2) is None

    def test_minimal_over_random_candidates(self):
        rng = random.Random(7)
        for _ in range(50):
            candidates = [make_table(f"R{i}", rng.randint(1, 10)) for i in range(rng.randint(1, 8))]
            party = rng.randint(1, 10)
            best = choose_best_table(candidates, party)
            fitting = [t for t in candidates if t.seats >= party]
            if not fitting:
                assert best is None
            else:
                assert best.seats == min(t.seats for t in fitting)


class TestNoOverlapProperty:

    def test_accepted_bookings_never_overlap(self, floor):
        """
        Feed random requests through the engine, accepting each one that it
        reports free, and check no two accepted bookings on a table overlap.
        """
        rng = random.Random(20250614)
        tables = list(floor.values())
        accepted = []

        for _ in range(300):
            start = f"{rng.randint(10, 22):02d}:{rng.choice([0, 15, 30, 45]):02d}"
            duration = rng.randint(1, 3)
            buffer = rng.choice([0, 10, 15, 30])
            party = rng.randint(1, 6)

            candidates = list_available_tables(
                DAY, start, party, tables, accepted, 2, 15,
                fits_only=True, duration_hours=duration, buffer_minutes=buffer,
            )
            table = choose_best_table(candidates, party)
            if table is None:
                continue
            accepted.append(make_reservation(table, start, duration=duration, buffer=buffer))

        assert accepted
        for i, a in enumerate(accepted):
            for b in accepted[i + 1:]:
                if a.table_id != b.table_id:
                    continue
                wa = busy_window(a.time, a.duration_hours, a.buffer_minutes)
                wb = busy_window(b.time, b.duration_hours, b.buffer_minutes)
                assert wa.end <= wb.start or wb.end <= wa.start
