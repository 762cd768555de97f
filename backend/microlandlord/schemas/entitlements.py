from typing import Optional, Union

from pydantic import BaseModel, ConfigDict


class PlanUsageRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    current_properties: int
    property_limit: Union[int, str]
    can_add_property: bool
    upgrade_required: bool
    suggested_plan: Optional[str] = None
    plan_code: Optional[str] = None


class EntitlementCheckRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    feature: str
    has_access: bool
    plan_required: Optional[str] = None
