from fastapi import APIRouter, Depends, HTTPException, status

from microlandlord.api.dependencies import get_account_id, get_resolver
from microlandlord.entitlements.errors import PlanNotFound
from microlandlord.entitlements.resolver import EntitlementResolver
from microlandlord.schemas.entitlements import PlanUsageRead
from microlandlord.schemas.subscriptions import ChangePlanRequest, ChangePlanResponse


router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


@router.post("/change-plan", response_model=ChangePlanResponse)
def change_plan(
    payload: ChangePlanRequest,
    account_id: str = Depends(get_account_id),
    resolver: EntitlementResolver = Depends(get_resolver),
):
    result = resolver.change_plan(account_id, payload.plan_code.strip())
    if isinstance(result.error, PlanNotFound):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="A kiválasztott csomag nem található",
        )
    if result.error is not None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Subscription store unavailable",
        )
    usage = resolver.get_plan_usage(account_id)
    return ChangePlanResponse(
        plan_code=result.plan_code,
        subscription_id=result.subscription_id,
        created=result.created,
        usage=PlanUsageRead.model_validate(usage),
    )
