"""Static plan catalog.

The catalog is an immutable value built once and handed to whoever needs it
(the entitlement resolver, the plan seeder, the HTTP layer). Tier order is
the order the plans are given in; feature grants must be monotonic along
that order, which the upgrade-suggestion logic relies on.
"""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Iterator, Literal, Mapping, Optional, Union

from microlandlord.entitlements.errors import PlanNotFound


UNLIMITED: Literal["unlimited"] = "unlimited"

PropertyLimit = Union[int, Literal["unlimited"]]

TIER_ORDER = ("free", "starter", "pro", "unlimited")

# Features decided by the plan's AI capability flag instead of feature lists.
AI_GATED_FEATURES = frozenset({"ai_assistant", "pro_analytics"})

DEFAULT_REQUIRED_PLAN = "starter"


@dataclass(frozen=True, slots=True)
class PlanDefinition:
    code: str
    name: str
    description: str
    price_minor_units: int
    property_limit: PropertyLimit
    ai_enabled: bool
    features: frozenset[str]

    @property
    def is_unlimited(self) -> bool:
        return self.property_limit == UNLIMITED


_FREE_FEATURES = frozenset({"ingatlan_kezeles", "berlok_kezeles", "alapveto_riportok"})
_STARTER_FEATURES = _FREE_FEATURES | {
    "riportok",
    "dokumentum_kezeles",
    "export_properties",
    "finance_reports",
}
_PRO_FEATURES = _STARTER_FEATURES | {
    "fejlett_riportok",
    "ai_asszisztens",
    "ai_assistant",
    "automatizalas",
    "auto_invoicing",
    "pro_analytics",
}
_UNLIMITED_FEATURES = _PRO_FEATURES | {
    "teljes_riportok",
    "teljes_automatizalas",
    "prioritasos_support",
    "priority_support",
    "maintenance_module",
}

DEFAULT_PLANS: tuple[PlanDefinition, ...] = (
    PlanDefinition(
        code="free",
        name="Ingyenes",
        description="Alapfunkciók, manuális adminisztráció, AI nélkül.",
        price_minor_units=0,
        property_limit=1,
        ai_enabled=False,
        features=_FREE_FEATURES,
    ),
    PlanDefinition(
        code="starter",
        name="Starter",
        description="Kis bérbeadóknak. Teljes funkcionalitás, AI nélkül.",
        price_minor_units=4990,
        property_limit=3,
        ai_enabled=False,
        features=_STARTER_FEATURES,
    ),
    PlanDefinition(
        code="pro",
        name="Pro",
        description="Kisebb portfóliót kezelőknek, automatizált és AI-asszisztens funkciókkal.",
        price_minor_units=9900,
        property_limit=10,
        ai_enabled=True,
        features=_PRO_FEATURES,
    ),
    PlanDefinition(
        code="unlimited",
        name="Korlátlan",
        description="Profi bérbeadóknak és cégeknek, teljes automatizálással és prioritásos supporttal.",
        price_minor_units=34990,
        property_limit=UNLIMITED,
        ai_enabled=True,
        features=_UNLIMITED_FEATURES,
    ),
)

DEFAULT_FEATURE_REQUIREMENTS: Mapping[str, str] = MappingProxyType(
    {
        "ai_assistant": "pro",
        "pro_analytics": "pro",
        "auto_invoicing": "pro",
        "finance_reports": "starter",
        "export_properties": "starter",
        "maintenance_module": "unlimited",
        "priority_support": "unlimited",
    }
)


def _validate_plan(plan: PlanDefinition) -> None:
    if plan.price_minor_units < 0:
        raise ValueError(f"Plan {plan.code!r} has a negative price")
    if plan.property_limit != UNLIMITED:
        if isinstance(plan.property_limit, bool) or not isinstance(plan.property_limit, int):
            raise ValueError(f"Plan {plan.code!r} has an invalid property limit")
        if plan.property_limit <= 0:
            raise ValueError(f"Plan {plan.code!r} must allow at least one property")


class PlanCatalog:
    """Ordered, read-only collection of plan definitions."""

    __slots__ = ("_plans", "_index", "_requirements", "_default_required")

    def __init__(
        self,
        plans: Iterable[PlanDefinition],
        feature_requirements: Mapping[str, str] | None = None,
        *,
        default_required: str = DEFAULT_REQUIRED_PLAN,
    ) -> None:
        ordered = tuple(plans)
        if not ordered:
            raise ValueError("A plan catalog needs at least one plan")
        index: dict[str, int] = {}
        for position, plan in enumerate(ordered):
            if plan.code in index:
                raise ValueError(f"Duplicate plan code: {plan.code}")
            _validate_plan(plan)
            index[plan.code] = position
        for lower, higher in zip(ordered, ordered[1:]):
            missing = lower.features - higher.features
            if missing:
                raise ValueError(
                    f"Plan {higher.code!r} drops features granted by {lower.code!r}: "
                    f"{', '.join(sorted(missing))}"
                )
        requirements = dict(feature_requirements or {})
        for feature, code in requirements.items():
            if code not in index:
                raise ValueError(f"Feature {feature!r} requires unknown plan {code!r}")
        if default_required not in index:
            raise ValueError(f"Unknown default required plan: {default_required}")

        self._plans = ordered
        self._index = MappingProxyType(index)
        self._requirements = MappingProxyType(requirements)
        self._default_required = default_required

    def __iter__(self) -> Iterator[PlanDefinition]:
        return iter(self._plans)

    def __len__(self) -> int:
        return len(self._plans)

    def __contains__(self, code: object) -> bool:
        return code in self._index

    @property
    def codes(self) -> tuple[str, ...]:
        return tuple(plan.code for plan in self._plans)

    @property
    def lowest(self) -> PlanDefinition:
        return self._plans[0]

    @property
    def highest(self) -> PlanDefinition:
        return self._plans[-1]

    def is_valid_code(self, code: str | None) -> bool:
        return bool(code) and code in self._index

    def tier_of(self, code: str | None) -> int:
        position = self._index.get(code) if code else None
        if position is None:
            raise PlanNotFound(code)
        return position

    def plan_by_code(self, code: str | None) -> PlanDefinition:
        position = self._index.get(code) if code else None
        if position is None:
            raise PlanNotFound(code)
        return self._plans[position]

    def plan_by_code_or_default(self, code: str | None) -> PlanDefinition:
        position = self._index.get(code) if code else None
        if position is None:
            return self.lowest
        return self._plans[position]

    def next_tiers(self, code: str | None) -> tuple[PlanDefinition, ...]:
        position = self._index.get(code) if code else None
        if position is None:
            return ()
        return self._plans[position + 1:]

    def next_tier_code(self, code: str | None) -> Optional[str]:
        higher = self.next_tiers(code)
        return higher[0].code if higher else None

    def features_for(self, code: str | None) -> frozenset[str]:
        return self.plan_by_code_or_default(code).features

    def minimum_plan_for_feature(self, feature: str) -> str:
        return self._requirements.get(feature, self._default_required)


def build_default_catalog() -> PlanCatalog:
    return PlanCatalog(DEFAULT_PLANS, DEFAULT_FEATURE_REQUIREMENTS)


def can_add_property(plan: PlanDefinition | None, current_property_count: int) -> bool:
    if plan is None:
        return False
    if plan.is_unlimited:
        return True
    return current_property_count < plan.property_limit


def can_use_ai(plan: PlanDefinition | None) -> bool:
    if plan is None:
        return False
    return plan.ai_enabled


def format_price(price: int) -> str:
    if price == 0:
        return "0 Ft"
    text = str(price)
    # Hungarian grouping starts at five digits and uses a no-break space.
    if len(str(abs(price))) >= 5:
        text = f"{price:,}".replace(",", "\u00a0")
    return f"{text} Ft"


def format_property_limit(limit: PropertyLimit) -> str:
    if limit == UNLIMITED:
        return "korlátlan"
    return f"{limit} ingatlan"


def format_ai_status(enabled: bool) -> str:
    return "AI: igen" if enabled else "AI: nem"


__all__ = [
    "AI_GATED_FEATURES",
    "DEFAULT_FEATURE_REQUIREMENTS",
    "DEFAULT_PLANS",
    "PlanCatalog",
    "PlanDefinition",
    "PropertyLimit",
    "TIER_ORDER",
    "UNLIMITED",
    "build_default_catalog",
    "can_add_property",
    "can_use_ai",
    "format_ai_status",
    "format_price",
    "format_property_limit",
]
