"""
Menu catalog model.
"""
import uuid
from sqlalchemy import (
    Column, String, Text, Integer, Boolean, Numeric, DateTime, Uuid, JSON, CheckConstraint, func,
)

from tablebook.db.base import Base


class MenuItem(Base):
    """A dish or drink on the menu."""
    __tablename__ = "menu_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=False, default="")
    price = Column(Numeric(10, 2), nullable=False)
    category = Column(String(50), nullable=False)
    image_url = Column(Text)
    is_vegetarian = Column(Boolean, nullable=False, default=False)
    is_spicy = Column(Boolean, nullable=False, default=False)
    prep_time_minutes = Column(Integer, nullable=False, default=15)
    allergens = Column(JSON, nullable=False, default=list)
    is_available = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("price > 0", name="ck_menu_items_price_positive"),
        CheckConstraint("prep_time_minutes > 0", name="ck_menu_items_prep_time_positive"),
    )
