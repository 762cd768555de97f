from sqlalchemy.orm import Session

from microlandlord.models.enums import EntitlementSourceEnum
from microlandlord.models.feature_entitlements import FeatureEntitlement


def validate_entitlement_source(source: str) -> None:
    try:
        EntitlementSourceEnum(source)
    except ValueError as exc:
        raise ValueError(f"Unsupported entitlement source: {source}") from exc


def get_override(db: Session, account_id: str, feature: str) -> FeatureEntitlement | None:
    return (
        db.query(FeatureEntitlement)
        .filter(
            FeatureEntitlement.account_id == account_id,
            FeatureEntitlement.feature == feature,
        )
        .first()
    )


def upsert_override(
    db: Session,
    account_id: str,
    feature: str,
    enabled: bool,
    source: str = EntitlementSourceEnum.MANUAL_OVERRIDE.value,
) -> FeatureEntitlement:
    validate_entitlement_source(source)
    entitlement = get_override(db, account_id, feature)
    if entitlement:
        entitlement.enabled = enabled
        entitlement.source = source
    else:
        entitlement = FeatureEntitlement(
            account_id=account_id,
            feature=feature,
            enabled=enabled,
            source=source,
        )
        db.add(entitlement)
    db.commit()
    db.refresh(entitlement)
    return entitlement
