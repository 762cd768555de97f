# This file bootstraps the FastAPI app: request logging, plan enforcement
# error handlers, the static plan catalog and the versioned routers.

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from microlandlord.api.entitlements import router as entitlements_router
from microlandlord.api.plans import router as plans_router
from microlandlord.api.properties import router as properties_router
from microlandlord.api.subscriptions import router as subscriptions_router
from microlandlord.billing.catalog import build_default_catalog
from microlandlord.core.config import settings
from microlandlord.core.db import Base, engine
import microlandlord.core.db as db_module
from microlandlord.core.logging import APILoggingMiddleware, get_structured_logger
from microlandlord.core.versioning import API_PREFIX, API_V1_PREFIX
from microlandlord.entitlements.enforcement import FeatureNotEnabled, PlanLimitExceeded
from microlandlord.seed.utils import seed_default_plans


logger = get_structured_logger("microlandlord")

# Create DB tables right away for local runs. Migration-managed deployments
# and tests set SKIP_CREATE_ALL.
if not settings.SKIP_CREATE_ALL:
    Base.metadata.create_all(bind=engine)

app = FastAPI(title=settings.APP_NAME)
app.state.catalog = build_default_catalog()


@app.on_event("startup")
def _seed_plans() -> None:
    if not settings.SEED_PLANS_ON_STARTUP:
        return
    with db_module.SessionLocal() as db:
        seeded = seed_default_plans(db, app.state.catalog)
    logger.info("plans.seeded", extra={"plan_codes": [plan.code for plan in seeded]})


@app.exception_handler(PlanLimitExceeded)
def handle_plan_limit(_request, exc: PlanLimitExceeded):
    response = JSONResponse(status_code=exc.status_code, content=exc.to_payload())
    response.headers["X-Error-Code"] = exc.code
    return response


@app.exception_handler(FeatureNotEnabled)
def handle_feature_disabled(_request, exc: FeatureNotEnabled):
    response = JSONResponse(status_code=exc.status_code, content=exc.to_payload())
    response.headers["X-Error-Code"] = exc.code
    return response


app.add_middleware(APILoggingMiddleware)

# Routers grouped by version + compatibility
api_v1 = APIRouter(prefix=API_V1_PREFIX)
api_legacy = APIRouter(prefix=API_PREFIX)

routers = [
    plans_router,
    entitlements_router,
    subscriptions_router,
    properties_router,
]

for r in routers:
    api_v1.include_router(r)
    api_legacy.include_router(r)


@api_v1.get("/health")
def health():
    return {"status": "ok"}


app.include_router(api_v1)
app.include_router(api_legacy)

# Local frontend dev servers talk to the API directly.
app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=r"https?://(localhost|127\.0\.0\.1)(:\d+)?$",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Error-Code"],
)
