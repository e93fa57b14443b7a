"""
Menu items router.

The public listing feeds the ordering page; changes are staff only.
"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from tablebook.core.deps import get_current_user
from tablebook.db.session import get_db
from tablebook.models.menu import MenuItem
from tablebook.models.user import User
from tablebook.schemas.menu import (
    MenuItemCreate,
    MenuItemListResponse,
    MenuItemResponse,
    MenuItemUpdate,
)

router = APIRouter(prefix="/menu-items", tags=["menu-items"])


def get_menu_item_or_404(db: Session, item_id: UUID) -> MenuItem:
    item = db.get(MenuItem, item_id)
    if not item:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Menu item not found"
        )
    return item


@router.get("", response_model=MenuItemListResponse)
def list_menu_items(
    available_only: bool = Query(True, description="Only return items that can be ordered"),
    category: Optional[str] = Query(None, description="Only this category"),
    db: Session = Depends(get_db),
):
    """
    List menu items ordered by category, sort order and name.
    """
    query = select(MenuItem)

    if available_only:
        query = query.where(MenuItem.is_available.is_(True))

    if category:
        query = query.where(MenuItem.category == category)

    query = query.order_by(MenuItem.category.asc(), MenuItem.sort_order.asc(), MenuItem.name.asc())

    items = db.execute(query).scalars().all()

    return MenuItemListResponse(
        items=[MenuItemResponse.model_validate(item) for item in items],
        total=len(items),
        categories=sorted({item.category for item in items}),
    )


@router.post("", response_model=MenuItemResponse, status_code=status.HTTP_201_CREATED)
def create_menu_item(
    data: MenuItemCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    item = MenuItem(**data.model_dump())
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


@router.patch("/{item_id}", response_model=MenuItemResponse)
def update_menu_item(
    item_id: UUID,
    data: MenuItemUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Update a menu item.

    Price changes do not affect existing orders, which keep the price they
    were placed at.
    """
    item = get_menu_item_or_404(db, item_id)

    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is None and field not in ("image_url",):
            continue
        setattr(item, field, value)

    db.commit()
    db.refresh(item)
    return item


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_menu_item(
    item_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Delete a menu item. Order lines keep their name and price snapshot."""
    item = get_menu_item_or_404(db, item_id)
    db.delete(item)
    db.commit()
