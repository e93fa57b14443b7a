"""
Tests for order intake and the kitchen queue.
"""
import uuid
from datetime import date, time
from decimal import Decimal

import pytest
from sqlalchemy.orm import Session

from tablebook.core.errors import NotFoundError, ValidationError
from tablebook.models.order import Order
from tablebook.models.reservation import Reservation
from tablebook.services.orders import OrderLine, OrderService


@pytest.fixture
def reservation(db: Session, tables) -> Reservation:
    row = Reservation(
        table_id=tables["T2"].id,
        customer_name="Jansen",
        customer_phone="+31600000000",
        guests=3,
        date=date(2025, 6, 14),
        time=time(19, 0),
        status="arrived",
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


class TestCreateOrder:

    def test_snapshots_name_and_price(self, db: Session, menu_items):
        hummus = menu_items["Hummus met Pita"]
        kebab = menu_items["Lams Kebab"]

        order = OrderService(db).create_order([
            OrderLine(menu_item_id=hummus.id, quantity=2),
            OrderLine(menu_item_id=kebab.id, quantity=1, notes="no onions"),
        ], customer_name="Phone order")

        assert order.status == "pending"
        assert order.total_amount == Decimal("35.50")
        assert [i.item_name for i in order.items] == ["Hummus met Pita", "Lams Kebab"]
        assert order.items[1].notes == "no onions"

        # later price changes do not touch the order
        kebab.price = Decimal("25.00")
        db.commit()
        db.refresh(order)
        assert order.items[1].unit_price == Decimal("18.50")

    def test_reservation_link_fills_table_and_customer(self, db: Session, menu_items, reservation):
        order = OrderService(db).create_order(
            [OrderLine(menu_item_id=menu_items["Lams Kebab"].id, quantity=3)],
            reservation_id=reservation.id,
        )

        assert order.table_id == reservation.table_id
        assert order.customer_name == "Jansen"

    def test_requires_items(self, db: Session):
        with pytest.raises(ValidationError) as exc_info:
            OrderService(db).create_order([])
        assert "items" in exc_info.value.fields

    def test_rejects_unavailable_and_unknown_items(self, db: Session, menu_items):
        with pytest.raises(ValidationError) as exc_info:
            OrderService(db).create_order([
                OrderLine(menu_item_id=menu_items["Chef Special"].id, quantity=1),
                OrderLine(menu_item_id=uuid.uuid4(), quantity=1),
                OrderLine(menu_item_id=menu_items["Lams Kebab"].id, quantity=0),
            ])
        assert set(exc_info.value.fields) == {"items[0]", "items[1]", "items[2]"}

    def test_rejects_unknown_reservation(self, db: Session, menu_items):
        with pytest.raises(ValidationError) as exc_info:
            OrderService(db).create_order(
                [OrderLine(menu_item_id=menu_items["Lams Kebab"].id, quantity=1)],
                reservation_id=uuid.uuid4(),
            )
        assert "reservation_id" in exc_info.value.fields


class TestLifecycle:

    def _order(self, db, menu_items):
        return OrderService(db).create_order([OrderLine(menu_item_id=menu_items["Lams Kebab"].id, quantity=1)])

    def test_happy_path(self, db: Session, menu_items):
        service = OrderService(db)
        order = self._order(db, menu_items)
        for next_status in ("confirmed", "preparing", "ready", "served"):
            order = service.update_status(order.id, next_status)
        assert order.status == "served"

    def test_cannot_skip_back(self, db: Session, menu_items):
        service = OrderService(db)
        order = self._order(db, menu_items)
        service.update_status(order.id, "preparing")

        with pytest.raises(ValidationError):
            service.update_status(order.id, "pending")

    def test_final_statuses_are_final(self, db: Session, menu_items):
        service = OrderService(db)
        order = self._order(db, menu_items)
        service.update_status(order.id, "cancelled")

        with pytest.raises(ValidationError):
            service.update_status(order.id, "preparing")

    def test_unknown_order(self, db: Session):
        with pytest.raises(NotFoundError):
            OrderService(db).update_status(uuid.uuid4(), "ready")

    def test_delete(self, db: Session, menu_items):
        service = OrderService(db)
        order = self._order(db, menu_items)
        service.delete_order(order.id)
        assert db.query(Order).count() == 0


class TestKitchenQueue:

    def test_preparing_first_and_finished_hidden(self, db: Session, menu_items):
        service = OrderService(db)
        kebab = menu_items["Lams Kebab"].id
        hummus = menu_items["Hummus met Pita"].id

        waiting = service.create_order([OrderLine(menu_item_id=hummus, quantity=2)])
        cooking = service.create_order([OrderLine(menu_item_id=kebab, quantity=2)])
        done = service.create_order([OrderLine(menu_item_id=kebab, quantity=1)])
        service.update_status(cooking.id, "preparing")
        service.update_status(done.id, "cancelled")

        tickets = service.kitchen_queue()

        assert [t.order.id for t in tickets] == [cooking.id, waiting.id]
        assert tickets[0].estimated_prep_minutes == 50
        assert tickets[1].estimated_prep_minutes == 20

    def test_filter_by_status(self, db: Session, menu_items):
        service = OrderService(db)
        order = service.create_order([OrderLine(menu_item_id=menu_items["Lams Kebab"].id, quantity=1)])
        service.update_status(order.id, "confirmed")

        assert [t.order.id for t in service.kitchen_queue(status="confirmed")] == [order.id]
        assert service.kitchen_queue(status="ready") == []

    def test_unknown_status_filter(self, db: Session):
        with pytest.raises(ValidationError):
            OrderService(db).kitchen_queue(status="burnt")


class TestReservationCascade:

    def test_deleting_reservation_removes_its_orders(self, db: Session, menu_items, reservation):
        OrderService(db).create_order(
            [OrderLine(menu_item_id=menu_items["Lams Kebab"].id, quantity=1)],
            reservation_id=reservation.id,
        )
        db.delete(reservation)
        db.commit()

        assert db.query(Order).count() == 0
