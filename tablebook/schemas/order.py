"""
Order and kitchen queue schemas.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

OrderStatus = Literal["pending", "confirmed", "preparing", "ready", "served", "cancelled"]


class OrderLineCreate(BaseModel):
    menu_item_id: UUID
    quantity: int = Field(gt=0)
    notes: Optional[str] = None


class OrderCreate(BaseModel):
    reservation_id: Optional[UUID] = None
    table_id: Optional[UUID] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    notes: Optional[str] = None
    items: List[OrderLineCreate]


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderItemResponse(BaseModel):
    id: UUID
    menu_item_id: Optional[UUID] = None
    item_name: str
    unit_price: Decimal
    quantity: int
    notes: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class OrderResponse(BaseModel):
    id: UUID
    reservation_id: Optional[UUID] = None
    table_id: Optional[UUID] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    status: OrderStatus
    total_amount: Decimal
    notes: Optional[str] = None
    items: List[OrderItemResponse]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class KitchenTicketResponse(BaseModel):
    order: OrderResponse
    estimated_prep_minutes: int


class KitchenQueueResponse(BaseModel):
    tickets: List[KitchenTicketResponse]
    total: int
