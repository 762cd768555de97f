from fastapi import APIRouter, Depends, HTTPException, status

from microlandlord.api.dependencies import get_catalog
from microlandlord.billing.catalog import PlanCatalog
from microlandlord.entitlements.errors import PlanNotFound
from microlandlord.schemas.plans import PlanRead


router = APIRouter(prefix="/plans", tags=["plans"])


@router.get("", response_model=list[PlanRead])
def list_plans(catalog: PlanCatalog = Depends(get_catalog)):
    return [PlanRead.from_definition(plan, tier) for tier, plan in enumerate(catalog)]


@router.get("/{code}", response_model=PlanRead)
def get_plan(code: str, catalog: PlanCatalog = Depends(get_catalog)):
    try:
        plan = catalog.plan_by_code(code)
    except PlanNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Plan not found")
    return PlanRead.from_definition(plan, catalog.tier_of(code))


@router.get("/{code}/upgrades", response_model=list[PlanRead])
def list_upgrades(code: str, catalog: PlanCatalog = Depends(get_catalog)):
    return [
        PlanRead.from_definition(plan, catalog.tier_of(plan.code))
        for plan in catalog.next_tiers(code)
    ]
