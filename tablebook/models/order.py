"""
Order models for phone orders and table-side ordering.

Line items keep a snapshot of the menu item's name and price at order time,
so later menu edits never change what was billed.
"""
import uuid
from sqlalchemy import (
    Column, String, Text, Integer, Numeric, DateTime, Uuid, ForeignKey, CheckConstraint, Index, func,
)
from sqlalchemy.orm import relationship

from tablebook.db.base import Base


ORDER_STATUSES = ("pending", "confirmed", "preparing", "ready", "served", "cancelled")


class Order(Base):
    __tablename__ = "orders"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    reservation_id = Column(Uuid, ForeignKey("reservations.id", ondelete="CASCADE"), nullable=True)
    table_id = Column(Uuid, ForeignKey("tables.id", ondelete="CASCADE"), nullable=True)
    customer_name = Column(String(100))  # phone orders without a reservation
    customer_phone = Column(String(20))
    status = Column(String(20), nullable=False, default="pending")
    total_amount = Column(Numeric(10, 2), nullable=False, default=0)
    notes = Column(Text)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    reservation = relationship("Reservation", back_populates="orders")
    table = relationship("DiningTable", back_populates="orders")
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="OrderItem.position",
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'preparing', 'ready', 'served', 'cancelled')",
            name="ck_orders_status",
        ),
        Index("idx_orders_status", "status"),
        Index("idx_orders_created_at", "created_at"),
    )


class OrderItem(Base):
    """A line item within an order."""
    __tablename__ = "order_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    order_id = Column(Uuid, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    menu_item_id = Column(Uuid, ForeignKey("menu_items.id", ondelete="SET NULL"), nullable=True)
    position = Column(Integer, nullable=False, default=0)
    item_name = Column(String(100), nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    quantity = Column(Integer, nullable=False)
    prep_time_minutes = Column(Integer)
    notes = Column(Text)

    order = relationship("Order", back_populates="items")
    menu_item = relationship("MenuItem")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_order_items_quantity_positive"),
    )
