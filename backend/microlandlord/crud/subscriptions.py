from datetime import datetime, timedelta

from sqlalchemy.orm import Session, selectinload

from microlandlord.core.time import utcnow
from microlandlord.models.enums import SubscriptionStatusEnum
from microlandlord.models.subscriptions import Subscription


def _normalize_status(status: SubscriptionStatusEnum | str) -> SubscriptionStatusEnum:
    if isinstance(status, SubscriptionStatusEnum):
        return status
    try:
        return SubscriptionStatusEnum(status)
    except ValueError as exc:
        raise ValueError("Invalid subscription status.") from exc


def get_active_subscription_for_account(db: Session, account_id: str) -> Subscription | None:
    # Several active rows should not exist, but when they do the newest one
    # is authoritative.
    return (
        db.query(Subscription)
        .options(selectinload(Subscription.plan))
        .filter(
            Subscription.account_id == account_id,
            Subscription.status == SubscriptionStatusEnum.ACTIVE.value,
        )
        .order_by(Subscription.created_at.desc(), Subscription.id.desc())
        .first()
    )


def get_subscription_by_id(db: Session, subscription_id: int) -> Subscription | None:
    return db.query(Subscription).filter(Subscription.id == subscription_id).first()


def create_subscription(
    db: Session,
    account_id: str,
    plan_id: int,
    *,
    period_days: int,
    status: SubscriptionStatusEnum | str = SubscriptionStatusEnum.ACTIVE,
    now: datetime | None = None,
) -> Subscription:
    start = now or utcnow()
    subscription = Subscription(
        account_id=account_id,
        plan_id=plan_id,
        status=_normalize_status(status).value,
        current_period_start=start,
        current_period_end=start + timedelta(days=period_days),
    )
    db.add(subscription)
    db.commit()
    db.refresh(subscription)
    return subscription


def update_subscription_plan(db: Session, subscription_id: int, plan_id: int) -> Subscription | None:
    subscription = get_subscription_by_id(db, subscription_id)
    if not subscription:
        return None
    subscription.plan_id = plan_id
    db.commit()
    db.refresh(subscription)
    return subscription


def set_subscription_status(
    db: Session,
    subscription_id: int,
    status: SubscriptionStatusEnum | str,
) -> Subscription | None:
    subscription = get_subscription_by_id(db, subscription_id)
    if not subscription:
        return None
    subscription.status = _normalize_status(status).value
    db.commit()
    db.refresh(subscription)
    return subscription
