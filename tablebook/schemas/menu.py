"""
Menu item Pydantic schemas for API request/response models.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class MenuItemCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str = ""
    price: Decimal = Field(gt=0)
    category: str = Field(min_length=1, max_length=50)
    image_url: Optional[str] = None
    is_vegetarian: bool = False
    is_spicy: bool = False
    prep_time_minutes: int = Field(15, gt=0)
    allergens: List[str] = []
    is_available: bool = True
    sort_order: int = 0


class MenuItemUpdate(BaseModel):
    """Partial update, only the fields sent are changed."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, gt=0)
    category: Optional[str] = Field(None, min_length=1, max_length=50)
    image_url: Optional[str] = None
    is_vegetarian: Optional[bool] = None
    is_spicy: Optional[bool] = None
    prep_time_minutes: Optional[int] = Field(None, gt=0)
    allergens: Optional[List[str]] = None
    is_available: Optional[bool] = None
    sort_order: Optional[int] = None


class MenuItemResponse(BaseModel):
    id: UUID
    name: str
    description: str
    price: Decimal
    category: str
    image_url: Optional[str] = None
    is_vegetarian: bool
    is_spicy: bool
    prep_time_minutes: int
    allergens: List[str]
    is_available: bool
    sort_order: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MenuItemListResponse(BaseModel):
    items: List[MenuItemResponse]
    total: int
    categories: List[str]
