"""
FastAPI dependency helpers for account context and the entitlement resolver.
"""

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from microlandlord.billing.catalog import PlanCatalog
from microlandlord.core.config import settings
from microlandlord.core.db import get_db
from microlandlord.entitlements.resolver import EntitlementResolver
from microlandlord.entitlements.stores import SqlPropertyCounter, SqlSubscriptionStore


def get_account_id(request: Request) -> str:
    account_id = request.headers.get(settings.ACCOUNT_HEADER_NAME)
    if not account_id or not account_id.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{settings.ACCOUNT_HEADER_NAME} header is required",
        )
    return account_id.strip()


def get_catalog(request: Request) -> PlanCatalog:
    return request.app.state.catalog


def get_resolver(
    db: Session = Depends(get_db),
    catalog: PlanCatalog = Depends(get_catalog),
) -> EntitlementResolver:
    return EntitlementResolver(
        catalog,
        SqlSubscriptionStore(db),
        SqlPropertyCounter(db),
        period_days=settings.SUBSCRIPTION_PERIOD_DAYS,
    )
