from sqlalchemy.orm import Session

from microlandlord.models.plans import Plan


def get_plan_by_code(db: Session, code: str) -> Plan | None:
    return db.query(Plan).filter(Plan.code == code).first()


def list_active_plans(db: Session) -> list[Plan]:
    return db.query(Plan).filter(Plan.is_active.is_(True)).order_by(Plan.tier, Plan.id).all()
