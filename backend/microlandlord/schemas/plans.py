from typing import Union

from pydantic import BaseModel

from microlandlord.billing.catalog import (
    PlanDefinition,
    format_ai_status,
    format_price,
    format_property_limit,
)


class PlanRead(BaseModel):
    code: str
    name: str
    description: str
    tier: int
    price_huf: int
    price_display: str
    property_limit: Union[int, str]
    property_limit_display: str
    ai_enabled: bool
    ai_status_display: str
    features: list[str]

    @classmethod
    def from_definition(cls, definition: PlanDefinition, tier: int) -> "PlanRead":
        return cls(
            code=definition.code,
            name=definition.name,
            description=definition.description,
            tier=tier,
            price_huf=definition.price_minor_units,
            price_display=format_price(definition.price_minor_units),
            property_limit=definition.property_limit,
            property_limit_display=format_property_limit(definition.property_limit),
            ai_enabled=definition.ai_enabled,
            ai_status_display=format_ai_status(definition.ai_enabled),
            features=sorted(definition.features),
        )
