from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from microlandlord.models.enums import PropertyTypeEnum


class PropertyCreate(BaseModel):
    name: str = Field(min_length=1)
    address: str = Field(min_length=1)
    type: PropertyTypeEnum = PropertyTypeEnum.LAKAS
    description: Optional[str] = None


class PropertyRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    landlord_id: str
    name: str
    address: str
    description: Optional[str] = None
    type: str
    is_active: bool
    created_at: datetime
