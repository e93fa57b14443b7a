"""
Unit tests for time-of-day arithmetic.
"""
import pytest
from datetime import time

from tablebook.core.timeslots import (
    add_minutes,
    format_time,
    overlaps,
    parse_time,
    str_to_time,
    time_to_str,
)


class TestParseTime:

    def test_parses_hh_mm(self):
        assert parse_time("00:00") == 0
        assert parse_time("19:30") == 1170
        assert parse_time("23:59") == 1439

    def test_ignores_seconds(self):
        assert parse_time("19:30:00") == 1170

    def test_accepts_time_objects(self):
        assert parse_time(time(7, 5)) == 425

    @pytest.mark.parametrize("value", [
        "24:00", "12:60", "7pm", "", "12", "-1:00", None, True,
        "19:30:99", "١٩:٣٠", "7:5", "0019:30", "19:3",
    ])
    def test_rejects_malformed_values(self, value):
        with pytest.raises(ValueError):
            parse_time(value)


class TestAddMinutes:

    def test_adds_and_formats(self):
        assert add_minutes("19:00", 135) == "21:15"
        assert add_minutes("09:05", 0) == "09:05"

    def test_subtracts(self):
        assert add_minutes("19:00", -15) == "18:45"

    def test_result_is_zero_padded(self):
        assert add_minutes("00:00", 5) == "00:05"

    def test_does_not_wrap_past_midnight(self):
        """Results outside the day raise instead of wrapping."""
        with pytest.raises(ValueError):
            add_minutes("23:00", 60)
        with pytest.raises(ValueError):
            add_minutes("00:10", -15)


class TestOverlaps:

    def test_overlapping_intervals(self):
        assert overlaps("18:45", "21:15", "21:00", "23:30") is True

    def test_touching_intervals_do_not_overlap(self):
        assert overlaps("18:45", "21:15", "21:15", "23:45") is False
        assert overlaps("21:15", "23:45", "18:45", "21:15") is False

    def test_containment(self):
        assert overlaps("18:00", "23:00", "19:00", "20:00") is True

    def test_minute_offsets_outside_the_day(self):
        """Window bounds may run past midnight as plain minute offsets."""
        assert overlaps(1380, 1515, 1440, 1500) is True
        assert overlaps(-15, 135, 135, 300) is False


class TestFormatting:

    def test_format_time(self):
        assert format_time(425) == "07:05"

    def test_format_time_wraps_for_display_only(self):
        assert format_time(1455, wrap=True) == "00:15"
        assert format_time(-15, wrap=True) == "23:45"
        with pytest.raises(ValueError):
            format_time(1455)

    def test_time_round_trip(self):
        assert time_to_str(str_to_time("19:30")) == "19:30"

    def test_none_passthrough(self):
        assert time_to_str(None) is None
        assert str_to_time(None) is None
