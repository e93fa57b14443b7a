"""
Settings schemas. The typed booking settings model itself lives in
``tablebook.services.booking_settings``.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class SettingRowResponse(BaseModel):
    setting_key: str
    setting_value: str
    setting_type: str
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class SettingRowListResponse(BaseModel):
    settings: List[SettingRowResponse]
    total: int
