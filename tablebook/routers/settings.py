"""
Restaurant settings endpoints.
"""
from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from tablebook.core.deps import get_booking_settings, get_current_user
from tablebook.db.session import get_db
from tablebook.models.settings import RestaurantSetting
from tablebook.models.user import User
from tablebook.schemas.settings import SettingRowListResponse, SettingRowResponse
from tablebook.services.booking_settings import BookingSettings, save_booking_settings

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/booking", response_model=BookingSettings)
def get_booking_settings_endpoint(booking_settings: BookingSettings = Depends(get_booking_settings)):
    """Booking rules and opening hours, as shown on the public booking form."""
    return booking_settings


@router.put("/booking", response_model=BookingSettings)
def update_booking_settings(
    booking_settings: BookingSettings,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Replace the booking settings. Weekdays left out of opening_hours become unrestricted."""
    return save_booking_settings(db, booking_settings)


@router.get("", response_model=SettingRowListResponse)
def list_setting_rows(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Raw setting rows as stored."""
    rows = db.execute(select(RestaurantSetting).order_by(RestaurantSetting.setting_key)).scalars().all()
    return SettingRowListResponse(
        settings=[SettingRowResponse.model_validate(row) for row in rows],
        total=len(rows),
    )
