from fastapi import APIRouter, Depends

from microlandlord.api.dependencies import get_account_id, get_resolver
from microlandlord.entitlements.resolver import EntitlementResolver
from microlandlord.schemas.entitlements import EntitlementCheckRead, PlanUsageRead


router = APIRouter(tags=["entitlements"])


@router.get("/plan-usage", response_model=PlanUsageRead)
def read_plan_usage(
    account_id: str = Depends(get_account_id),
    resolver: EntitlementResolver = Depends(get_resolver),
):
    return resolver.get_plan_usage(account_id)


@router.get("/entitlements/{feature}", response_model=EntitlementCheckRead)
def read_entitlement(
    feature: str,
    account_id: str = Depends(get_account_id),
    resolver: EntitlementResolver = Depends(get_resolver),
):
    return resolver.check_entitlement(account_id, feature)
