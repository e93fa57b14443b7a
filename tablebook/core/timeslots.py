"""
Time-of-day arithmetic for reservation slots.

All reservation times are wall-clock ``HH:MM`` values on a single booking
date in the restaurant's own timezone, so nothing here deals with dates or
timezones. Internally a time is the number of minutes since midnight.

Busy windows (see ``tablebook.services.availability``) are kept as plain
minute offsets and may fall outside ``[0, 1440)`` for bookings close to
midnight. They are never wrapped into the neighbouring day.
"""
from datetime import time
from typing import Optional, Union


MINUTES_PER_HOUR = 60
MINUTES_PER_DAY = 24 * MINUTES_PER_HOUR

TimeLike = Union[str, int, time]


def parse_time(value: TimeLike) -> int:
    """
    Convert a time of day to minutes since midnight.

    Accepts ``"HH:MM"`` (``"HH:MM:SS"`` as returned by some drivers, seconds
    are ignored), a ``datetime.time`` or an already converted integer.

    Raises:
        ValueError: the value is not a valid time of day

    Examples:
        >>> parse_time("19:30")
        1170
        >>> parse_time(time(7, 5))
        425
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid time: {value!r}")
    if isinstance(value, int):
        if not 0 <= value < MINUTES_PER_DAY:
            raise ValueError(f"Invalid time: {value} minutes is outside a day")
        return value
    if isinstance(value, time):
        return value.hour * MINUTES_PER_HOUR + value.minute
    if not isinstance(value, str):
        raise ValueError(f"Invalid time: {value!r}")

    parts = value.strip().split(":")
    if len(parts) not in (2, 3) or not all(len(p) == 2 and p.isascii() and p.isdigit() for p in parts):
        raise ValueError(f"Invalid time format: {value!r}. Expected HH:MM format.")

    hours, minutes = int(parts[0]), int(parts[1])
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        raise ValueError(f"Invalid time: {value!r}. Hours must be 0-23, minutes 0-59.")
    if len(parts) == 3 and int(parts[2]) > 59:
        raise ValueError(f"Invalid time: {value!r}. Seconds must be 0-59.")
    return hours * MINUTES_PER_HOUR + minutes


def format_time(minutes: int, wrap: bool = False) -> str:
    """
    Convert minutes since midnight back to a zero-padded ``HH:MM`` string.

    With ``wrap=True`` values outside the day are folded onto the clock face,
    which is only meant for display (e.g. a busy window ending at 1455 shows
    as ``"00:15"``).
    """
    if wrap:
        minutes %= MINUTES_PER_DAY
    elif not 0 <= minutes < MINUTES_PER_DAY:
        raise ValueError(f"{minutes} minutes is outside a single day")
    hours, mins = divmod(minutes, MINUTES_PER_HOUR)
    return f"{hours:02d}:{mins:02d}"


def add_minutes(value: TimeLike, delta_minutes: int) -> str:
    """
    Add a (possibly negative) number of minutes to a time of day.

    The result must stay on the same day. Anything before ``00:00`` or at or
    after ``24:00`` raises ``ValueError`` instead of wrapping.

    Examples:
        >>> add_minutes("19:00", 135)
        '21:15'
        >>> add_minutes("19:00", -15)
        '18:45'
    """
    total = parse_time(value) + delta_minutes
    if not 0 <= total < MINUTES_PER_DAY:
        raise ValueError(
            f"{format_time(parse_time(value))} {'+' if delta_minutes >= 0 else '-'} "
            f"{abs(delta_minutes)} minutes leaves the day"
        )
    return format_time(total)


def _as_minutes(value: TimeLike) -> int:
    # Window bounds are already minute offsets and may lie outside the day
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return parse_time(value)


def overlaps(start_a: TimeLike, end_a: TimeLike, start_b: TimeLike, end_b: TimeLike) -> bool:
    """
    Half-open interval overlap test.

    ``[start_a, end_a)`` and ``[start_b, end_b)`` overlap iff
    ``start_a < end_b and start_b < end_a``. Intervals that only touch at an
    endpoint do not overlap, so a booking whose buffer ends at 20:00 never
    conflicts with one whose buffer starts at 20:00.

    Examples:
        >>> overlaps("18:45", "21:15", "21:00", "23:30")
        True
        >>> overlaps("18:45", "21:15", "21:15", "23:45")
        False
    """
    a0, a1 = _as_minutes(start_a), _as_minutes(end_a)
    b0, b1 = _as_minutes(start_b), _as_minutes(end_b)
    return a0 < b1 and b0 < a1


def time_to_str(t: Optional[time]) -> Optional[str]:
    """Convert time object to HH:MM string."""
    if t is None:
        return None
    return t.strftime("%H:%M")


def str_to_time(s: Optional[str]) -> Optional[time]:
    """Convert HH:MM string to time object. Raises ValueError on bad input."""
    if s is None:
        return None
    hours, minutes = divmod(parse_time(s), MINUTES_PER_HOUR)
    return time(hours, minutes)
