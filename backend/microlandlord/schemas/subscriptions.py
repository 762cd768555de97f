from typing import Optional

from pydantic import BaseModel, Field

from microlandlord.schemas.entitlements import PlanUsageRead


class ChangePlanRequest(BaseModel):
    plan_code: str = Field(min_length=1)


class ChangePlanResponse(BaseModel):
    plan_code: str
    subscription_id: Optional[int] = None
    created: bool
    usage: PlanUsageRead
