"""
Order intake and the kitchen queue.

Orders move through ``pending -> confirmed -> preparing -> ready -> served``
and may be cancelled at any point before they are served. Served and
cancelled orders are final and never edited again.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from tablebook.core.errors import NotFoundError, ValidationError
from tablebook.models.menu import MenuItem
from tablebook.models.order import ORDER_STATUSES, Order, OrderItem
from tablebook.models.reservation import Reservation
from tablebook.models.table import DiningTable

logger = logging.getLogger(__name__)

ORDER_TRANSITIONS: Dict[str, tuple] = {
    "pending": ("confirmed", "preparing", "cancelled"),
    "confirmed": ("preparing", "cancelled"),
    "preparing": ("ready", "cancelled"),
    "ready": ("served", "cancelled"),
    "served": (),
    "cancelled": (),
}

FINAL_STATUSES = frozenset({"served", "cancelled"})


@dataclass
class OrderLine:
    menu_item_id: UUID
    quantity: int
    notes: Optional[str] = None


@dataclass
class KitchenTicket:
    """An order in the kitchen queue with its estimated preparation time."""
    order: Order
    estimated_prep_minutes: int


def order_total(items: List[OrderItem]) -> Decimal:
    """Sum of unit price x quantity over the snapshot prices."""
    return sum((Decimal(item.unit_price) * item.quantity for item in items), Decimal("0.00"))


def estimated_prep_minutes(order: Order) -> int:
    return sum((item.prep_time_minutes or 0) * item.quantity for item in order.items)


class OrderService:
    """Service for creating orders and moving them through the kitchen."""

    def __init__(self, db: Session):
        self.db = db

    def create_order(
        self,
        lines: List[OrderLine],
        reservation_id: Optional[UUID] = None,
        table_id: Optional[UUID] = None,
        customer_name: Optional[str] = None,
        customer_phone: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Order:
        """
        Create an order, snapshotting each menu item's current name and price.

        A reservation link implies its table when no table is given.

        Raises:
            ValidationError: no lines, bad quantities, unknown or unavailable items,
                unknown reservation or table
        """
        errors: Dict[str, str] = {}
        if not lines:
            errors["items"] = "at least one item is required"

        reservation = None
        if reservation_id is not None:
            reservation = self.db.get(Reservation, reservation_id)
            if reservation is None:
                errors["reservation_id"] = "unknown reservation"
        if table_id is not None and self.db.get(DiningTable, table_id) is None:
            errors["table_id"] = "unknown table"

        menu_items = {}
        if lines:
            ids = {line.menu_item_id for line in lines}
            menu_items = {
                item.id: item
                for item in self.db.execute(select(MenuItem).where(MenuItem.id.in_(list(ids)))).scalars().all()
            }

        for index, line in enumerate(lines):
            key = f"items[{index}]"
            menu_item = menu_items.get(line.menu_item_id)
            if line.quantity is None or line.quantity <= 0:
                errors[key] = "quantity must be positive"
            elif menu_item is None:
                errors[key] = "unknown menu item"
            elif not menu_item.is_available:
                errors[key] = f"{menu_item.name} is not available"

        if errors:
            raise ValidationError(errors)

        order = Order(
            reservation_id=reservation_id,
            table_id=table_id if table_id is not None else (reservation.table_id if reservation else None),
            customer_name=customer_name or (reservation.customer_name if reservation else None),
            customer_phone=customer_phone or (reservation.customer_phone if reservation else None),
            status="pending",
            notes=notes,
        )
        for position, line in enumerate(lines):
            menu_item = menu_items[line.menu_item_id]
            order.items.append(OrderItem(
                menu_item_id=menu_item.id,
                position=position,
                item_name=menu_item.name,
                unit_price=menu_item.price,
                quantity=line.quantity,
                prep_time_minutes=menu_item.prep_time_minutes,
                notes=line.notes,
            ))
        order.total_amount = order_total(order.items)

        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)

        logger.info("Order %s created with %d item(s), total %s", order.id, len(order.items), order.total_amount)
        return order

    def get_order(self, order_id: UUID) -> Order:
        order = self.db.get(Order, order_id)
        if order is None:
            raise NotFoundError(f"Order {order_id} not found")
        return order

    def list_for_reservation(self, reservation_id: UUID) -> List[Order]:
        query = (
            select(Order)
            .where(Order.reservation_id == reservation_id)
            .options(selectinload(Order.items))
            .order_by(Order.created_at.asc())
        )
        return list(self.db.execute(query).scalars().all())

    def kitchen_queue(self, status: Optional[str] = None) -> List[KitchenTicket]:
        """
        Orders the kitchen still has to handle.

        Without ``status`` every order that is not served or cancelled is
        returned. Orders being prepared come first, then oldest first.
        """
        query = select(Order).options(selectinload(Order.items))
        if status is not None:
            if status not in ORDER_STATUSES:
                raise ValidationError({"status": f"must be one of {', '.join(ORDER_STATUSES)}"})
            query = query.where(Order.status == status)
        else:
            query = query.where(Order.status.not_in(sorted(FINAL_STATUSES)))

        orders = self.db.execute(query).scalars().all()
        orders = sorted(orders, key=lambda o: (o.status != "preparing", o.created_at, str(o.id)))
        return [KitchenTicket(order=o, estimated_prep_minutes=estimated_prep_minutes(o)) for o in orders]

    def update_status(self, order_id: UUID, status: str) -> Order:
        """
        Advance an order.

        Raises:
            NotFoundError: unknown order
            ValidationError: unknown status or a transition the lifecycle does not allow
        """
        if status not in ORDER_STATUSES:
            raise ValidationError({"status": f"must be one of {', '.join(ORDER_STATUSES)}"})

        order = self.get_order(order_id)
        if status not in ORDER_TRANSITIONS[order.status]:
            raise ValidationError(
                {"status": f"cannot go from {order.status} to {status}"},
                message=f"Order is {order.status} and cannot become {status}",
            )

        order.status = status
        self.db.commit()
        self.db.refresh(order)
        logger.info("Order %s is now %s", order_id, status)
        return order

    def delete_order(self, order_id: UUID) -> None:
        order = self.get_order(order_id)
        self.db.delete(order)
        self.db.commit()
