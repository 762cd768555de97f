from enum import Enum

# Stored as strings with DB check constraints (native enums disabled for easier evolution).


class SubscriptionStatusEnum(str, Enum):
    # Only ACTIVE rows count toward entitlement. Transitions are driven by
    # billing integrations, never by the entitlement resolver.
    ACTIVE = "active"
    INACTIVE = "inactive"
    CANCELLED = "cancelled"
    PAST_DUE = "past_due"


class EntitlementSourceEnum(str, Enum):
    MANUAL_OVERRIDE = "manual_override"
    PROMOTION = "promotion"
    TRIAL = "trial"


class PropertyTypeEnum(str, Enum):
    LAKAS = "lakas"
    HAZ = "haz"
    KERESKEDELMI = "kereskedelmi"
    IRODA = "iroda"
    RAKTAR = "raktar"
    TARSASHAZ = "tarsashaz"
    EGYEB = "egyeb"
