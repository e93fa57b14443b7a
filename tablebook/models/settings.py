"""
Restaurant settings rows.

Values are stored as text with a type tag. They are parsed into a typed
``BookingSettings`` object once, in ``tablebook.services.booking_settings``.
"""
import uuid
from sqlalchemy import Column, String, Text, DateTime, Uuid, CheckConstraint, func

from tablebook.db.base import Base


SETTING_TYPES = ("string", "number", "boolean", "json")


class RestaurantSetting(Base):
    """Key-value configuration row."""
    __tablename__ = "restaurant_settings"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    setting_key = Column(String(50), nullable=False, unique=True)
    setting_value = Column(Text, nullable=False)
    setting_type = Column(String(20), nullable=False, default="string")
    description = Column(Text)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint(
            "setting_type IN ('string', 'number', 'boolean', 'json')",
            name="ck_restaurant_settings_type",
        ),
    )
