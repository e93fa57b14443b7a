"""
Typed booking configuration.

Restaurant settings live in ``restaurant_settings`` as text values with a
type tag. They are parsed exactly once, here, into ``BookingSettings``, which
is then passed explicitly to the availability engine and the booking writer.
"""
import json
import logging
from datetime import date
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator, model_validator
from sqlalchemy import select
from sqlalchemy.orm import Session

from tablebook.core.errors import SettingsError
from tablebook.core.timeslots import MINUTES_PER_DAY, TimeLike, parse_time
from tablebook.models.reservation import DEFAULT_BUFFER_MINUTES, DEFAULT_DURATION_HOURS
from tablebook.models.settings import RestaurantSetting

logger = logging.getLogger(__name__)

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]
OPENING_HOURS_PREFIX = "opening_hours_"


class DayHours(BaseModel):
    """Opening hours for one weekday. ``close`` before ``open`` means past midnight."""
    open: str = "17:00"
    close: str = "23:00"
    closed: bool = False

    @field_validator("open", "close")
    @classmethod
    def validate_time(cls, v: str) -> str:
        parse_time(v)
        return v

    def accepts(self, start_time: TimeLike) -> bool:
        """Whether a booking may start at ``start_time`` on this day."""
        if self.closed:
            return False
        start = parse_time(start_time)
        opens, closes = parse_time(self.open), parse_time(self.close)
        if opens == closes:
            return True  # open around the clock
        if opens < closes:
            return opens <= start < closes
        return start >= opens or start < closes


class BookingSettings(BaseModel):
    """All settings that influence bookings, with the restaurant's defaults."""
    restaurant_name: str = "Tablebook Restaurant"
    default_reservation_duration: int = Field(DEFAULT_DURATION_HOURS, gt=0)
    default_buffer_minutes: int = Field(DEFAULT_BUFFER_MINUTES, ge=0)
    max_advance_booking_days: int = Field(30, ge=0)
    min_advance_booking_hours: int = Field(2, ge=0)
    # Weekdays without an entry are not restricted
    opening_hours: Dict[str, DayHours] = Field(default_factory=dict)

    @field_validator("opening_hours")
    @classmethod
    def validate_weekdays(cls, v: Dict[str, DayHours]) -> Dict[str, DayHours]:
        unknown = set(v) - set(WEEKDAYS)
        if unknown:
            raise ValueError(f"Unknown weekday(s): {', '.join(sorted(unknown))}")
        return v

    @model_validator(mode="after")
    def validate_buffer(self) -> "BookingSettings":
        if self.default_buffer_minutes >= MINUTES_PER_DAY:
            raise ValueError("default_buffer_minutes must be shorter than a day")
        return self

    def hours_for(self, on_date: date) -> Optional[DayHours]:
        return self.opening_hours.get(WEEKDAYS[on_date.weekday()])

    def is_open_at(self, on_date: date, start_time: TimeLike) -> bool:
        hours = self.hours_for(on_date)
        return hours is None or hours.accepts(start_time)


# setting_key -> (setting_type, description)
SETTING_DEFINITIONS = {
    "restaurant_name": ("string", "Name of the restaurant"),
    "default_reservation_duration": ("number", "Default reservation length in hours"),
    "default_buffer_minutes": ("number", "Turnover buffer before and after each reservation, in minutes"),
    "max_advance_booking_days": ("number", "How many days ahead customers may book"),
    "min_advance_booking_hours": ("number", "Minimum notice for a customer booking, in hours"),
}


def parse_setting_value(row: RestaurantSetting) -> Any:
    """Decode a settings row according to its type tag."""
    value = row.setting_value
    try:
        if row.setting_type == "number":
            number = float(value)
            return int(number) if number.is_integer() else number
        if row.setting_type == "boolean":
            lowered = value.strip().lower()
            if lowered not in ("true", "false", "1", "0"):
                raise ValueError(f"not a boolean: {value!r}")
            return lowered in ("true", "1")
        if row.setting_type == "json":
            return json.loads(value)
    except (TypeError, ValueError) as e:
        raise SettingsError(f"Setting {row.setting_key!r} has an invalid {row.setting_type} value: {e}")
    return value


def load_booking_settings(db: Session) -> BookingSettings:
    """
    Read all setting rows and build the typed configuration.

    Rows that are missing fall back to defaults; unknown keys are ignored.

    Raises:
        SettingsError: a row cannot be parsed or holds an out-of-range value
    """
    rows = db.execute(select(RestaurantSetting)).scalars().all()

    values: Dict[str, Any] = {}
    opening_hours: Dict[str, Any] = {}
    for row in rows:
        if row.setting_key.startswith(OPENING_HOURS_PREFIX):
            opening_hours[row.setting_key[len(OPENING_HOURS_PREFIX):]] = parse_setting_value(row)
        elif row.setting_key in SETTING_DEFINITIONS:
            values[row.setting_key] = parse_setting_value(row)

    try:
        return BookingSettings(**values, opening_hours=opening_hours)
    except PydanticValidationError as e:
        raise SettingsError(f"Invalid restaurant settings: {e}")


def _serialize(settings: BookingSettings) -> Dict[str, tuple]:
    rows = {}
    for key, (setting_type, description) in SETTING_DEFINITIONS.items():
        rows[key] = (str(getattr(settings, key)), setting_type, description)
    for day, hours in settings.opening_hours.items():
        rows[f"{OPENING_HOURS_PREFIX}{day}"] = (
            json.dumps(hours.model_dump()),
            "json",
            f"Opening hours on {day.capitalize()}",
        )
    return rows


def save_booking_settings(db: Session, settings: BookingSettings) -> BookingSettings:
    """Upsert every setting row from ``settings``."""
    existing = {
        row.setting_key: row
        for row in db.execute(select(RestaurantSetting)).scalars().all()
    }

    rows = _serialize(settings)
    for key, row in existing.items():
        if key.startswith(OPENING_HOURS_PREFIX) and key not in rows:
            db.delete(row)

    for key, (value, setting_type, description) in rows.items():
        row = existing.get(key)
        if row is None:
            db.add(RestaurantSetting(
                setting_key=key,
                setting_value=value,
                setting_type=setting_type,
                description=description,
            ))
        else:
            row.setting_value = value
            row.setting_type = setting_type

    db.commit()
    logger.info("Booking settings updated")
    return settings
