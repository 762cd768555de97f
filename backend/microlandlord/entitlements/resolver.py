"""Plan usage and feature entitlement resolution.

Every answer is computed from a fresh read of the subscription store and the
resource counter; nothing is cached between calls. Read paths fail closed:
when a store cannot answer, the caller gets the same "no subscription"
result an account without any plan would get, and the failure is logged
under its own event name so the two situations stay distinguishable.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from microlandlord.billing.catalog import (
    AI_GATED_FEATURES,
    UNLIMITED,
    PlanCatalog,
    PropertyLimit,
)
from microlandlord.core.logging import get_structured_logger
from microlandlord.core.time import utcnow
from microlandlord.entitlements.errors import EntitlementError, PlanNotFound, StoreUnavailable
from microlandlord.entitlements.stores import (
    NewSubscription,
    ResourceCounter,
    SubscriptionRecord,
    SubscriptionStore,
)


logger = get_structured_logger("entitlements")

DEFAULT_PERIOD_DAYS = 30


@dataclass(frozen=True)
class PlanUsage:
    current_properties: int
    property_limit: PropertyLimit
    can_add_property: bool
    upgrade_required: bool
    suggested_plan: Optional[str] = None
    plan_code: Optional[str] = None


@dataclass(frozen=True)
class EntitlementCheck:
    feature: str
    has_access: bool
    plan_required: Optional[str] = None


@dataclass(frozen=True)
class ChangePlanResult:
    plan_code: str
    error: Optional[EntitlementError] = None
    subscription_id: Optional[int] = None
    created: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


class EntitlementResolver:
    def __init__(
        self,
        catalog: PlanCatalog,
        subscriptions: SubscriptionStore,
        properties: ResourceCounter,
        *,
        period_days: int = DEFAULT_PERIOD_DAYS,
        clock: Callable[[], datetime] = utcnow,
    ):
        if period_days <= 0:
            raise ValueError("period_days must be positive")
        self.catalog = catalog
        self.subscriptions = subscriptions
        self.properties = properties
        self.period_days = period_days
        self.clock = clock
        # Entry-level paid tier: what an account without a plan is pointed at.
        self.entry_plan_code = catalog.next_tier_code(catalog.lowest.code) or catalog.lowest.code

    def _no_subscription_usage(self) -> PlanUsage:
        return PlanUsage(
            current_properties=0,
            property_limit=self.catalog.lowest.property_limit,
            can_add_property=False,
            upgrade_required=True,
            suggested_plan=self.entry_plan_code,
        )

    def get_plan_usage(self, account_id: str) -> PlanUsage:
        try:
            subscription = self.subscriptions.find_active_subscription(account_id)
            if subscription is None:
                logger.info("plan_usage.no_subscription", extra={"account_id": account_id})
                return self._no_subscription_usage()
            current = self.properties.count_active_properties(account_id)
        except StoreUnavailable as exc:
            logger.warning(
                "plan_usage.store_unavailable",
                extra={"account_id": account_id, "error_code": exc.code, "operation": exc.operation},
            )
            return self._no_subscription_usage()
        return self._usage_for(subscription, current)

    def _usage_for(self, subscription: SubscriptionRecord, current: int) -> PlanUsage:
        plan = subscription.plan
        if plan.property_limit is None:
            limit: PropertyLimit = UNLIMITED
            can_add = True
        else:
            limit = plan.property_limit
            can_add = current < limit
        suggested = None if can_add else self.catalog.next_tier_code(plan.code)
        return PlanUsage(
            current_properties=current,
            property_limit=limit,
            can_add_property=can_add,
            upgrade_required=not can_add,
            suggested_plan=suggested,
            plan_code=plan.code,
        )

    def check_entitlement(self, account_id: str, feature: str) -> EntitlementCheck:
        try:
            if self.subscriptions.find_override(account_id, feature):
                return EntitlementCheck(feature=feature, has_access=True)
            subscription = self.subscriptions.find_active_subscription(account_id)
        except StoreUnavailable as exc:
            logger.warning(
                "entitlement_check.store_unavailable",
                extra={
                    "account_id": account_id,
                    "feature": feature,
                    "error_code": exc.code,
                    "operation": exc.operation,
                },
            )
            return EntitlementCheck(feature=feature, has_access=False, plan_required=self.entry_plan_code)

        if subscription is None:
            return EntitlementCheck(feature=feature, has_access=False, plan_required=self.entry_plan_code)

        plan = subscription.plan
        if feature in AI_GATED_FEATURES:
            if plan.ai_enabled:
                return EntitlementCheck(feature=feature, has_access=True)
            return EntitlementCheck(
                feature=feature,
                has_access=False,
                plan_required=self.catalog.minimum_plan_for_feature(feature),
            )

        if feature in plan.features or feature in self.catalog.features_for(plan.code):
            return EntitlementCheck(feature=feature, has_access=True)

        return EntitlementCheck(
            feature=feature,
            has_access=False,
            plan_required=self.catalog.minimum_plan_for_feature(feature),
        )

    def change_plan(self, account_id: str, new_plan_code: str) -> ChangePlanResult:
        try:
            self.catalog.plan_by_code(new_plan_code)
            plan_id = self.subscriptions.find_plan_id(new_plan_code)
            if plan_id is None:
                raise PlanNotFound(new_plan_code)
            current = self.subscriptions.find_active_subscription(account_id)
            if current is None:
                subscription_id = self.subscriptions.insert_subscription(
                    NewSubscription(
                        account_id=account_id,
                        plan_id=plan_id,
                        period_days=self.period_days,
                        start=self.clock(),
                    )
                )
                created = True
            else:
                # Same subscription, same period boundaries; no proration.
                self.subscriptions.update_subscription_plan(current.id, plan_id)
                subscription_id = current.id
                created = False
        except EntitlementError as exc:
            logger.warning(
                "change_plan.failed",
                extra={"account_id": account_id, "plan_code": new_plan_code, "error_code": exc.code},
            )
            return ChangePlanResult(plan_code=new_plan_code, error=exc)

        logger.info(
            "change_plan.completed",
            extra={
                "account_id": account_id,
                "plan_code": new_plan_code,
                "subscription_id": subscription_id,
                "subscription_created": created,
            },
        )
        return ChangePlanResult(
            plan_code=new_plan_code,
            subscription_id=subscription_id,
            created=created,
        )


__all__ = [
    "ChangePlanResult",
    "EntitlementCheck",
    "EntitlementResolver",
    "PlanUsage",
]
