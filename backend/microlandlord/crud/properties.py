from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from microlandlord.entitlements.enforcement import assert_can_add_property
from microlandlord.models.enums import PropertyTypeEnum
from microlandlord.models.properties import Property

if TYPE_CHECKING:
    from microlandlord.entitlements.resolver import EntitlementResolver


def _normalize_type(value: PropertyTypeEnum | str) -> PropertyTypeEnum:
    if isinstance(value, PropertyTypeEnum):
        return value
    try:
        return PropertyTypeEnum(value)
    except ValueError as exc:
        raise ValueError("Invalid property type.") from exc


def count_active_properties(db: Session, landlord_id: str) -> int:
    return (
        db.query(Property)
        .filter(Property.landlord_id == landlord_id, Property.is_active.is_(True))
        .count()
    )


def list_properties(db: Session, landlord_id: str, *, include_inactive: bool = False) -> list[Property]:
    query = db.query(Property).filter(Property.landlord_id == landlord_id)
    if not include_inactive:
        query = query.filter(Property.is_active.is_(True))
    return query.order_by(Property.id).all()


def create_property(
    db: Session,
    resolver: EntitlementResolver,
    landlord_id: str,
    name: str,
    address: str,
    property_type: PropertyTypeEnum | str = PropertyTypeEnum.LAKAS,
    description: str | None = None,
) -> Property:
    normalized_type = _normalize_type(property_type)
    assert_can_add_property(resolver, landlord_id)
    prop = Property(
        landlord_id=landlord_id,
        name=name.strip(),
        address=address.strip(),
        description=description,
        type=normalized_type.value,
        is_active=True,
    )
    db.add(prop)
    db.commit()
    db.refresh(prop)
    return prop


def deactivate_property(db: Session, landlord_id: str, property_id: int) -> Property | None:
    prop = (
        db.query(Property)
        .filter(Property.id == property_id, Property.landlord_id == landlord_id)
        .first()
    )
    if not prop:
        return None
    prop.is_active = False
    db.commit()
    db.refresh(prop)
    return prop
