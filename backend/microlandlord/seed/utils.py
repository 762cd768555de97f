from sqlalchemy.orm import Session

from microlandlord.billing.catalog import PlanCatalog
from microlandlord.models.plans import Plan


def seed_default_plans(db: Session, catalog: PlanCatalog) -> list[Plan]:
    """Write every catalog plan into the plans table.

    Existing rows keep their id and their stored feature allowlist; price,
    limits and display text are refreshed from the catalog.
    """
    seeded: list[Plan] = []
    for tier, definition in enumerate(catalog):
        plan = db.query(Plan).filter(Plan.code == definition.code).first()
        if plan is None:
            plan = Plan(code=definition.code, features_json=[])
            db.add(plan)
        plan.name = definition.name
        plan.description = definition.description
        plan.price_huf = definition.price_minor_units
        plan.property_limit = None if definition.is_unlimited else definition.property_limit
        plan.ai_enabled = definition.ai_enabled
        plan.tier = tier
        plan.is_active = True
        seeded.append(plan)
    db.commit()
    for plan in seeded:
        db.refresh(plan)
    return seeded
