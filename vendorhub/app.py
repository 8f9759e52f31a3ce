from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.middleware.sessions import SessionMiddleware

from .analytics.aggregator import compute_analytics
from .analytics.store import get_events
from .auth.dependencies import require_admin, require_user, require_vendor
from .auth.models import LoginRequest
from .auth.users import authenticate
from .config import DEFAULT_APP_CONFIG
from .errors import Unauthorized, ValidationFailed, VendorHubError
from .matching.cache import get_cache_stats
from .matching.engine import match_vendors
from .matching.models import MatchCriteria, MatchResponse
from .profiles import service
from .profiles.models import (
    Availability,
    AvailabilitySlot,
    Category,
    Performance,
    Portfolio,
    PortfolioItemCreate,
    ProfileUpdate,
    SlotStatus,
    SlotUpdate,
    VendorProfile,
)

logging.basicConfig(level=DEFAULT_APP_CONFIG.log_level.upper())
logger = logging.getLogger(__name__)

app = FastAPI(title="VendorHub Matching API", version="1.0.0")
app.add_middleware(SessionMiddleware, secret_key=DEFAULT_APP_CONFIG.session_secret)


# ── Error rendering ──────────────────────────────────────────────────────


@app.exception_handler(VendorHubError)
async def vendorhub_error_handler(request: Request, exc: VendorHubError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.code},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=ValidationFailed.status_code,
        content={"detail": jsonable_encoder(exc.errors()), "error": ValidationFailed.code},
    )


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metadata")
def metadata() -> dict:
    return {
        "categories": [c.value for c in Category],
        "slot_statuses": [s.value for s in SlotStatus],
    }


@app.get("/vendor/portfolio/{vendor_id}", response_model=Portfolio)
def public_portfolio(vendor_id: str) -> Portfolio:
    return service.get_portfolio(vendor_id)


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/auth/login")
def login(body: LoginRequest, request: Request) -> dict:
    user = authenticate(body.username, body.password)
    if not user:
        raise Unauthorized("Invalid credentials")
    request.session["user"] = user
    return {"status": "ok", "user": user}


@app.post("/auth/logout")
def logout(request: Request) -> dict:
    request.session.clear()
    return {"status": "logged_out"}


@app.get("/auth/me")
def auth_me(user: dict = Depends(require_user)) -> dict:
    return user


# ── Vendor endpoints ─────────────────────────────────────────────────────


@app.get("/vendor/profile", response_model=VendorProfile)
def get_profile(user: dict = Depends(require_vendor)) -> VendorProfile:
    return service.get_profile(user["id"])


@app.post("/vendor/profile", response_model=VendorProfile)
def upsert_profile(body: ProfileUpdate, user: dict = Depends(require_vendor)) -> VendorProfile:
    return service.upsert_profile(user["id"], body)


@app.get("/vendor/availability", response_model=list[AvailabilitySlot])
def availability_range(
    start_date: str | None = None,
    end_date: str | None = None,
    user: dict = Depends(require_vendor),
) -> list[AvailabilitySlot]:
    return service.get_availability_range(user["id"], start_date, end_date)


@app.post("/vendor/availability", response_model=Availability)
def set_availability(body: SlotUpdate, user: dict = Depends(require_vendor)) -> Availability:
    return service.set_availability_slot(user["id"], body)


@app.post("/vendor/portfolio", response_model=Portfolio)
def add_portfolio_item(
    body: PortfolioItemCreate, user: dict = Depends(require_vendor),
) -> Portfolio:
    return service.add_portfolio_item(user["id"], body)


@app.get("/vendor/performance", response_model=Performance)
def performance(user: dict = Depends(require_vendor)) -> Performance:
    return service.get_performance(user["id"])


# ── Matching ─────────────────────────────────────────────────────────────


@app.get("/vendor/match", response_model=MatchResponse)
def match(
    category: str,
    date: str,
    budget: float,
    location: str | None = None,
    user: dict = Depends(require_user),
) -> MatchResponse:
    try:
        criteria = MatchCriteria(
            category=category, date=date, max_budget=budget, location=location,
        )
    except ValidationError as exc:
        raise ValidationFailed(
            "; ".join(f"{'.'.join(map(str, e['loc']))}: {e['msg']}" for e in exc.errors())
        ) from exc
    return match_vendors(criteria)


# ── Admin endpoints ──────────────────────────────────────────────────────


@app.get("/analytics")
def analytics(user: dict = Depends(require_admin)) -> dict:
    return compute_analytics(get_events())


@app.get("/cache/stats")
def cache_stats(user: dict = Depends(require_admin)) -> dict:
    return get_cache_stats()
