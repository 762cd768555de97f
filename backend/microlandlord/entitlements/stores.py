"""Data-access contracts the entitlement resolver depends on.

The resolver only sees the two protocols below. The SQL implementations
translate ORM rows into plain records and wrap every database failure into
``StoreUnavailable`` so callers never handle SQLAlchemy errors directly.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from microlandlord.crud.feature_entitlements import get_override
from microlandlord.crud.plans import get_plan_by_code
from microlandlord.crud.properties import count_active_properties
from microlandlord.crud.subscriptions import (
    create_subscription,
    get_active_subscription_for_account,
    update_subscription_plan,
)
from microlandlord.entitlements.errors import StoreUnavailable
from microlandlord.models.plans import Plan
from microlandlord.models.subscriptions import Subscription


@dataclass(frozen=True)
class PlanRecord:
    id: int
    code: str
    property_limit: Optional[int]  # None means unlimited
    ai_enabled: bool
    features: frozenset[str]


@dataclass(frozen=True)
class SubscriptionRecord:
    id: int
    account_id: str
    status: str
    plan: PlanRecord
    current_period_start: datetime
    current_period_end: datetime
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class NewSubscription:
    account_id: str
    plan_id: int
    period_days: int
    status: str = "active"
    start: Optional[datetime] = None


class SubscriptionStore(Protocol):
    def find_active_subscription(self, account_id: str) -> Optional[SubscriptionRecord]:
        ...

    def find_override(self, account_id: str, feature: str) -> Optional[bool]:
        ...

    def find_plan_id(self, code: str) -> Optional[int]:
        ...

    def insert_subscription(self, record: NewSubscription) -> int:
        ...

    def update_subscription_plan(self, subscription_id: int, plan_id: int) -> None:
        ...


class ResourceCounter(Protocol):
    def count_active_properties(self, account_id: str) -> int:
        ...


def _plan_record(plan: Plan) -> PlanRecord:
    features = plan.features_json
    if isinstance(features, dict):
        features = [key for key, enabled in features.items() if enabled]
    elif not isinstance(features, (list, tuple)):
        # Anything that is not a list of keys grants nothing extra.
        features = []
    return PlanRecord(
        id=plan.id,
        code=plan.code,
        property_limit=plan.property_limit,
        ai_enabled=bool(plan.ai_enabled),
        features=frozenset(str(item) for item in features),
    )


def _subscription_record(subscription: Subscription) -> SubscriptionRecord:
    return SubscriptionRecord(
        id=subscription.id,
        account_id=subscription.account_id,
        status=subscription.status,
        plan=_plan_record(subscription.plan),
        current_period_start=subscription.current_period_start,
        current_period_end=subscription.current_period_end,
        created_at=subscription.created_at,
    )


class SqlSubscriptionStore:
    def __init__(self, db: Session):
        self.db = db

    def _fail(self, operation: str, exc: SQLAlchemyError) -> StoreUnavailable:
        self.db.rollback()
        return StoreUnavailable(operation, exc)

    def find_active_subscription(self, account_id: str) -> Optional[SubscriptionRecord]:
        try:
            subscription = get_active_subscription_for_account(self.db, account_id)
            if subscription is None or subscription.plan is None:
                return None
            return _subscription_record(subscription)
        except SQLAlchemyError as exc:
            raise self._fail("find_active_subscription", exc) from exc

    def find_override(self, account_id: str, feature: str) -> Optional[bool]:
        try:
            entitlement = get_override(self.db, account_id, feature)
        except SQLAlchemyError as exc:
            raise self._fail("find_override", exc) from exc
        return None if entitlement is None else bool(entitlement.enabled)

    def find_plan_id(self, code: str) -> Optional[int]:
        try:
            plan = get_plan_by_code(self.db, code)
        except SQLAlchemyError as exc:
            raise self._fail("find_plan_id", exc) from exc
        return plan.id if plan else None

    def insert_subscription(self, record: NewSubscription) -> int:
        try:
            subscription = create_subscription(
                self.db,
                record.account_id,
                record.plan_id,
                period_days=record.period_days,
                status=record.status,
                now=record.start,
            )
        except SQLAlchemyError as exc:
            raise self._fail("insert_subscription", exc) from exc
        return subscription.id

    def update_subscription_plan(self, subscription_id: int, plan_id: int) -> None:
        try:
            updated = update_subscription_plan(self.db, subscription_id, plan_id)
        except SQLAlchemyError as exc:
            raise self._fail("update_subscription_plan", exc) from exc
        if updated is None:
            raise StoreUnavailable("update_subscription_plan")


class SqlPropertyCounter:
    def __init__(self, db: Session):
        self.db = db

    def count_active_properties(self, account_id: str) -> int:
        try:
            return count_active_properties(self.db, account_id)
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StoreUnavailable("count_active_properties", exc) from exc
