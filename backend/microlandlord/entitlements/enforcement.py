from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from microlandlord.entitlements.resolver import EntitlementResolver


@dataclass
class PlanEnforcementError(Exception):
    code: str
    message: str
    status_code: int
    upgrade_plan_key: str | None = None
    limit: int | str | None = None
    current_usage: int | None = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.upgrade_plan_key:
            payload["upgrade_plan_key"] = self.upgrade_plan_key
        if self.limit is not None:
            payload["limit"] = self.limit
        if self.current_usage is not None:
            payload["current_usage"] = self.current_usage
        return payload


class PlanLimitExceeded(PlanEnforcementError):
    def __init__(
        self,
        message: str,
        *,
        limit: int | str | None,
        current_usage: int | None,
        upgrade_plan_key: str | None = None,
    ):
        super().__init__(
            code="plan_limit_exceeded",
            message=message,
            status_code=402,
            upgrade_plan_key=upgrade_plan_key,
            limit=limit,
            current_usage=current_usage,
        )


class FeatureNotEnabled(PlanEnforcementError):
    def __init__(
        self,
        message: str,
        *,
        upgrade_plan_key: str | None = None,
    ):
        super().__init__(
            code="feature_not_enabled",
            message=message,
            status_code=403,
            upgrade_plan_key=upgrade_plan_key,
        )


def assert_can_add_property(resolver: EntitlementResolver, account_id: str) -> bool:
    usage = resolver.get_plan_usage(account_id)
    if usage.can_add_property:
        return True
    if usage.plan_code is None:
        message = "An active subscription is required to add properties"
    else:
        message = f"Property limit of {usage.property_limit} reached for the {usage.plan_code} plan"
    raise PlanLimitExceeded(
        message,
        limit=usage.property_limit,
        current_usage=usage.current_properties,
        upgrade_plan_key=usage.suggested_plan,
    )


def require_feature(
    resolver: EntitlementResolver,
    account_id: str,
    feature: str,
    *,
    message: str | None = None,
) -> None:
    check = resolver.check_entitlement(account_id, feature)
    if check.has_access:
        return
    message = message or f"Feature '{feature}' is not enabled for this plan"
    raise FeatureNotEnabled(message, upgrade_plan_key=check.plan_required)
