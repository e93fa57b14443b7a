"""
Orders router: order intake and the kitchen display queue.
"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from tablebook.core.deps import get_current_user
from tablebook.db.session import get_db
from tablebook.models.user import User
from tablebook.schemas.order import (
    KitchenQueueResponse,
    KitchenTicketResponse,
    OrderCreate,
    OrderResponse,
    OrderStatusUpdate,
)
from tablebook.services.orders import OrderLine, OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def create_order(
    data: OrderCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Place an order, optionally linked to a reservation or a table."""
    lines = [OrderLine(menu_item_id=i.menu_item_id, quantity=i.quantity, notes=i.notes) for i in data.items]
    return OrderService(db).create_order(
        lines,
        reservation_id=data.reservation_id,
        table_id=data.table_id,
        customer_name=data.customer_name,
        customer_phone=data.customer_phone,
        notes=data.notes,
    )


@router.get("/kitchen", response_model=KitchenQueueResponse)
def kitchen_queue(
    status_filter: Optional[str] = Query(None, alias="status", description="Only orders in this status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Orders the kitchen still has to work on.

    Orders being prepared are listed first, then the oldest first.
    """
    tickets = OrderService(db).kitchen_queue(status=status_filter)
    return KitchenQueueResponse(
        tickets=[
            KitchenTicketResponse(
                order=OrderResponse.model_validate(t.order),
                estimated_prep_minutes=t.estimated_prep_minutes,
            )
            for t in tickets
        ],
        total=len(tickets),
    )


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return OrderService(db).get_order(order_id)


@router.patch("/{order_id}/status", response_model=OrderResponse)
def update_order_status(
    order_id: UUID,
    data: OrderStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return OrderService(db).update_status(order_id, data.status)


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_order(
    order_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    OrderService(db).delete_order(order_id)
