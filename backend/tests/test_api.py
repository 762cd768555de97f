import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("SKIP_CREATE_ALL", "1")
os.environ.setdefault("SEED_PLANS_ON_STARTUP", "0")

from microlandlord.main import app
import microlandlord.core.db as db_module
from microlandlord.core.db import Base
from microlandlord.seed.utils import seed_default_plans


client = TestClient(app)


def _setup_db(db_url: str):
    engine = create_engine(
        db_url,
        connect_args={"check_same_thread": False},
        future=True,
    )
    SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    db_module.engine = engine
    db_module.SessionLocal = SessionLocal
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as db:
        seed_default_plans(db, app.state.catalog)
    return SessionLocal


@pytest.fixture(autouse=True)
def database(tmp_path):
    return _setup_db(f"sqlite:///{tmp_path}/api_test.db")


def _headers(account_id="acct-1"):
    return {"X-Account-ID": account_id}


def test_health():
    resp = client.get("/api/v1/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_list_plans_includes_display_fields():
    resp = client.get("/api/v1/plans")
    assert resp.status_code == 200
    plans = resp.json()
    assert [plan["code"] for plan in plans] == ["free", "starter", "pro", "unlimited"]
    unlimited = plans[-1]
    assert unlimited["price_display"] == "34\u00a0990 Ft"
    assert unlimited["property_limit"] == "unlimited"
    assert unlimited["property_limit_display"] == "korlátlan"
    assert plans[0]["price_display"] == "0 Ft"
    assert plans[1]["ai_status_display"] == "AI: nem"
    assert plans[2]["property_limit"] == 10


def test_get_plan_and_upgrades():
    assert client.get("/api/v1/plans/pro").json()["tier"] == 2
    assert client.get("/api/v1/plans/enterprise").status_code == 404
    upgrades = client.get("/api/v1/plans/starter/upgrades").json()
    assert [plan["code"] for plan in upgrades] == ["pro", "unlimited"]


def test_plan_usage_requires_account_header():
    resp = client.get("/api/v1/plan-usage")
    assert resp.status_code == 400


def test_plan_usage_without_subscription():
    resp = client.get("/api/v1/plan-usage", headers=_headers())
    assert resp.status_code == 200
    assert resp.json() == {
        "current_properties": 0,
        "property_limit": 1,
        "can_add_property": False,
        "upgrade_required": True,
        "suggested_plan": "starter",
        "plan_code": None,
    }


def test_change_plan_unknown_code_returns_404():
    resp = client.post(
        "/api/v1/subscriptions/change-plan",
        json={"plan_code": "platinum"},
        headers=_headers(),
    )
    assert resp.status_code == 404
    assert resp.json()["detail"] == "A kiválasztott csomag nem található"


def test_change_plan_then_usage_reflects_new_plan():
    resp = client.post(
        "/api/v1/subscriptions/change-plan",
        json={"plan_code": "starter"},
        headers=_headers(),
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["plan_code"] == "starter"
    assert body["created"] is True
    assert body["usage"]["property_limit"] == 3
    assert body["usage"]["can_add_property"] is True

    resp = client.post(
        "/api/v1/subscriptions/change-plan",
        json={"plan_code": "pro"},
        headers=_headers(),
    )
    assert resp.json()["created"] is False
    assert resp.json()["subscription_id"] == body["subscription_id"]


def test_add_property_over_limit_returns_402_payload():
    client.post("/api/v1/subscriptions/change-plan", json={"plan_code": "free"}, headers=_headers())
    created = client.post(
        "/api/v1/properties",
        json={"name": "Lakás", "address": "Debrecen, Piac u. 10."},
        headers=_headers(),
    )
    assert created.status_code == 201
    assert created.json()["type"] == "lakas"

    resp = client.post(
        "/api/v1/properties",
        json={"name": "Iroda", "address": "Budapest, Váci út 1.", "type": "iroda"},
        headers=_headers(),
    )
    assert resp.status_code == 402
    assert resp.headers["X-Error-Code"] == "plan_limit_exceeded"
    assert resp.json()["upgrade_plan_key"] == "starter"
    assert resp.json()["current_usage"] == 1


def test_delete_property_is_scoped_to_account():
    client.post("/api/v1/subscriptions/change-plan", json={"plan_code": "pro"}, headers=_headers())
    created = client.post(
        "/api/v1/properties",
        json={"name": "Raktár", "address": "Miskolc", "type": "raktar"},
        headers=_headers(),
    ).json()

    assert client.delete(f"/api/v1/properties/{created['id']}", headers=_headers("acct-2")).status_code == 404
    resp = client.delete(f"/api/v1/properties/{created['id']}", headers=_headers())
    assert resp.status_code == 200
    assert resp.json()["is_active"] is False
    assert client.get("/api/v1/properties", headers=_headers()).json() == []


def test_entitlement_endpoint():
    client.post("/api/v1/subscriptions/change-plan", json={"plan_code": "starter"}, headers=_headers())

    granted = client.get("/api/v1/entitlements/finance_reports", headers=_headers()).json()
    denied = client.get("/api/entitlements/ai_assistant", headers=_headers()).json()

    assert granted == {"feature": "finance_reports", "has_access": True, "plan_required": None}
    assert denied == {"feature": "ai_assistant", "has_access": False, "plan_required": "pro"}


def test_property_export_requires_paid_plan():
    client.post("/api/v1/subscriptions/change-plan", json={"plan_code": "free"}, headers=_headers())

    resp = client.get("/api/v1/properties/export", headers=_headers())

    assert resp.status_code == 403
    assert resp.headers["X-Error-Code"] == "feature_not_enabled"
    assert resp.json() == {
        "code": "feature_not_enabled",
        "message": "Property exports require a paid plan",
        "upgrade_plan_key": "starter",
    }


def test_property_export_returns_csv_on_starter():
    client.post("/api/v1/subscriptions/change-plan", json={"plan_code": "starter"}, headers=_headers())
    client.post(
        "/api/v1/properties",
        json={"name": "Társasház", "address": "Eger, Dobó tér 3.", "type": "tarsashaz"},
        headers=_headers(),
    )

    resp = client.get("/api/v1/properties/export", headers=_headers())

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    lines = resp.text.strip().splitlines()
    assert lines[0] == "id,name,address,type,description,is_active,created_at"
    assert len(lines) == 2
    assert "tarsashaz" in lines[1]
