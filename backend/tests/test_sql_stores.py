import os
from datetime import datetime, timedelta

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("SKIP_CREATE_ALL", "1")

from microlandlord.billing.catalog import UNLIMITED, build_default_catalog
from microlandlord.core.db import Base
from microlandlord.crud.feature_entitlements import upsert_override
from microlandlord.crud.plans import get_plan_by_code, list_active_plans
from microlandlord.crud.properties import count_active_properties
from microlandlord.crud.subscriptions import (
    create_subscription,
    get_active_subscription_for_account,
    get_subscription_by_id,
    set_subscription_status,
)
from microlandlord.entitlements.errors import PlanNotFound, StoreUnavailable
from microlandlord.entitlements.resolver import EntitlementResolver
from microlandlord.entitlements.stores import SqlPropertyCounter, SqlSubscriptionStore
from microlandlord.models.plans import Plan
from microlandlord.models.properties import Property
from microlandlord.models.subscriptions import Subscription
from microlandlord.seed.utils import seed_default_plans


NOW = datetime(2026, 5, 4, 8, 0, 0)


@pytest.fixture
def db_session(tmp_path):
    db_url = f"sqlite:///{tmp_path}/stores_test.db"
    engine = create_engine(db_url, connect_args={"check_same_thread": False}, future=True)
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    Base.metadata.create_all(bind=engine)
    with TestingSessionLocal() as session:
        seed_default_plans(session, build_default_catalog())
        yield session
    engine.dispose()


def _resolver(db):
    return EntitlementResolver(
        build_default_catalog(),
        SqlSubscriptionStore(db),
        SqlPropertyCounter(db),
        clock=lambda: NOW,
    )


def _add_properties(db, account_id, count, *, active=True):
    for index in range(count):
        db.add(
            Property(
                landlord_id=account_id,
                name=f"Lakás {index}",
                address=f"Budapest, Fő utca {index + 1}.",
                is_active=active,
            )
        )
    db.commit()


def test_seed_plans_is_idempotent_and_keeps_allowlists(db_session):
    pro = get_plan_by_code(db_session, "pro")
    pro.features_json = ["maintenance_module"]
    pro.price_huf = 1
    db_session.commit()

    seed_default_plans(db_session, build_default_catalog())

    assert db_session.query(Plan).count() == 4
    pro = get_plan_by_code(db_session, "pro")
    assert pro.price_huf == 9900
    assert pro.features_json == ["maintenance_module"]
    assert get_plan_by_code(db_session, "unlimited").property_limit is None
    assert [plan.code for plan in list_active_plans(db_session)] == ["free", "starter", "pro", "unlimited"]


def test_change_plan_creates_thirty_day_subscription(db_session):
    result = _resolver(db_session).change_plan("acct-1", "starter")

    assert result.ok is True
    assert result.created is True
    subscription = get_subscription_by_id(db_session, result.subscription_id)
    assert subscription.plan.code == "starter"
    assert subscription.status == "active"
    assert subscription.current_period_start == NOW
    assert subscription.current_period_end == NOW + timedelta(days=30)


def test_change_plan_updates_in_place_keeping_period(db_session):
    resolver = _resolver(db_session)
    first = resolver.change_plan("acct-1", "starter")
    before = get_subscription_by_id(db_session, first.subscription_id)
    start, end = before.current_period_start, before.current_period_end

    second = resolver.change_plan("acct-1", "unlimited")

    assert second.created is False
    assert second.subscription_id == first.subscription_id
    assert db_session.query(Subscription).count() == 1
    after = get_subscription_by_id(db_session, first.subscription_id)
    assert after.plan.code == "unlimited"
    assert (after.current_period_start, after.current_period_end) == (start, end)


def test_change_plan_unknown_code_leaves_rows_untouched(db_session):
    resolver = _resolver(db_session)
    resolver.change_plan("acct-1", "free")

    result = resolver.change_plan("acct-1", "enterprise")

    assert isinstance(result.error, PlanNotFound)
    assert db_session.query(Subscription).count() == 1
    assert get_active_subscription_for_account(db_session, "acct-1").plan.code == "free"


def test_scenario_starter_at_limit_then_upgrade(db_session):
    resolver = _resolver(db_session)
    resolver.change_plan("acct-1", "starter")
    _add_properties(db_session, "acct-1", 3)

    usage = resolver.get_plan_usage("acct-1")
    assert (usage.current_properties, usage.property_limit) == (3, 3)
    assert usage.can_add_property is False
    assert usage.suggested_plan == "pro"

    resolver.change_plan("acct-1", "unlimited")
    usage = resolver.get_plan_usage("acct-1")
    assert usage.property_limit == UNLIMITED
    assert usage.can_add_property is True


def test_inactive_properties_are_not_counted(db_session):
    _add_properties(db_session, "acct-1", 2)
    _add_properties(db_session, "acct-1", 4, active=False)
    _add_properties(db_session, "acct-2", 1)

    assert count_active_properties(db_session, "acct-1") == 2
    assert SqlPropertyCounter(db_session).count_active_properties("acct-2") == 1


def test_only_active_subscriptions_are_considered(db_session):
    resolver = _resolver(db_session)
    result = resolver.change_plan("acct-1", "pro")
    set_subscription_status(db_session, result.subscription_id, "cancelled")

    usage = resolver.get_plan_usage("acct-1")

    assert usage.plan_code is None
    assert usage.can_add_property is False
    assert usage.suggested_plan == "starter"


def test_newest_active_subscription_wins(db_session):
    free = get_plan_by_code(db_session, "free")
    pro = get_plan_by_code(db_session, "pro")
    older = create_subscription(db_session, "acct-1", free.id, period_days=30, now=NOW)
    older.created_at = NOW - timedelta(days=10)
    db_session.commit()
    newer = create_subscription(db_session, "acct-1", pro.id, period_days=30, now=NOW)

    record = SqlSubscriptionStore(db_session).find_active_subscription("acct-1")

    assert record.id == newer.id
    assert record.plan.code == "pro"
    assert record.plan.ai_enabled is True


def test_overrides_and_allowlist_grant_features(db_session):
    resolver = _resolver(db_session)
    resolver.change_plan("acct-1", "free")
    upsert_override(db_session, "acct-1", "ai_assistant", True, source="promotion")

    assert resolver.check_entitlement("acct-1", "ai_assistant").has_access is True
    assert resolver.check_entitlement("acct-1", "finance_reports").has_access is False

    free = get_plan_by_code(db_session, "free")
    free.features_json = ["finance_reports"]
    db_session.commit()

    assert resolver.check_entitlement("acct-1", "finance_reports").has_access is True


def test_upsert_override_rejects_unknown_source(db_session):
    with pytest.raises(ValueError):
        upsert_override(db_session, "acct-1", "ai_assistant", True, source="gift")


def test_sql_store_wraps_database_errors(db_session):
    db_session.execute(text("DROP TABLE subscriptions"))
    db_session.commit()
    store = SqlSubscriptionStore(db_session)

    with pytest.raises(StoreUnavailable) as exc:
        store.find_active_subscription("acct-1")
    assert exc.value.operation == "find_active_subscription"

    usage = _resolver(db_session).get_plan_usage("acct-1")
    assert usage.can_add_property is False
    assert usage.plan_code is None


def test_sql_store_update_of_missing_subscription_is_reported(db_session):
    pro = get_plan_by_code(db_session, "pro")

    with pytest.raises(StoreUnavailable):
        SqlSubscriptionStore(db_session).update_subscription_plan(12345, pro.id)


@pytest.mark.parametrize("stored", [5, "finance_reports"])
def test_malformed_feature_allowlist_grants_nothing_extra(db_session, stored):
    resolver = _resolver(db_session)
    resolver.change_plan("acct-1", "starter")
    starter = get_plan_by_code(db_session, "starter")
    starter.features_json = stored
    db_session.commit()

    usage = resolver.get_plan_usage("acct-1")
    record = SqlSubscriptionStore(db_session).find_active_subscription("acct-1")

    assert usage.plan_code == "starter"
    assert usage.property_limit == 3
    assert record.plan.features == frozenset()
    assert resolver.check_entitlement("acct-1", "finance_reports").has_access is True
    assert resolver.check_entitlement("acct-1", "maintenance_module").has_access is False


def test_dict_feature_allowlist_keeps_enabled_keys(db_session):
    _resolver(db_session).change_plan("acct-1", "free")
    free = get_plan_by_code(db_session, "free")
    free.features_json = {"maintenance_module": True, "priority_support": False}
    db_session.commit()

    record = SqlSubscriptionStore(db_session).find_active_subscription("acct-1")

    assert record.plan.features == frozenset({"maintenance_module"})


def test_plan_change_moves_updated_at(db_session):
    resolver = _resolver(db_session)
    result = resolver.change_plan("acct-1", "starter")
    subscription = get_subscription_by_id(db_session, result.subscription_id)
    subscription.updated_at = NOW - timedelta(days=2)
    db_session.commit()

    resolver.change_plan("acct-1", "pro")

    subscription = get_subscription_by_id(db_session, result.subscription_id)
    assert subscription.updated_at > NOW - timedelta(days=2)
    assert subscription.created_at <= subscription.updated_at


def test_subscription_table_columns():
    assert set(Subscription.__table__.columns.keys()) == {
        "id",
        "account_id",
        "plan_id",
        "status",
        "current_period_start",
        "current_period_end",
        "created_at",
        "updated_at",
    }
