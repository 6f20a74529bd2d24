"""Health check endpoints for the Fixly location API v1.

Provides liveness and readiness checks for container deployments.  The
readiness check verifies the gazetteer, the geocode cache, the location
store and the geocoding provider.
"""

from __future__ import annotations

import time

import structlog
from fastapi import APIRouter, Request
from pydantic import BaseModel

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """Basic health check response."""

    status: str
    version: str
    uptime_seconds: float


class ReadinessResponse(BaseModel):
    """Readiness check response with individual service statuses."""

    status: str
    checks: dict[str, str]


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Liveness check.

    Returns 200 if the application process is running and able to
    handle requests.  Does *not* check downstream dependencies.
    """
    start_time: float = getattr(request.app.state, "start_time", time.time())
    uptime = time.time() - start_time

    return HealthResponse(
        status="healthy",
        version=request.app.version,
        uptime_seconds=round(uptime, 2),
    )


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(request: Request) -> ReadinessResponse:
    """Readiness check.

    Verifies the gazetteer is loaded and the geocode cache and location
    store answer, and reports
    whether a geocoding provider is configured, so the load balancer only
    routes traffic to fully-initialised instances.
    """
    checks: dict[str, str] = {}
    all_ok = True

    # -- Check geocode cache connectivity ----------------------------------
    cache = getattr(request.app.state, "geocode_cache", None)
    if cache is not None:
        try:
            await cache.set("_health_check", "ok", ttl_seconds=10)
            val = await cache.get("_health_check")
            if val == "ok":
                checks["cache"] = "ok" if cache.redis_available else "ok (in-memory)"
            else:
                checks["cache"] = "degraded"
                all_ok = False
        except Exception as exc:
            checks["cache"] = f"error: {exc!s}"
            all_ok = False
    else:
        checks["cache"] = "not_configured"

    # -- Check gazetteer loaded --------------------------------------------
    gazetteer = getattr(request.app.state, "gazetteer", None)
    if gazetteer is not None and len(gazetteer) > 0:
        checks["gazetteer"] = f"ok ({len(gazetteer)} cities loaded)"
    else:
        checks["gazetteer"] = "no_data"
        all_ok = False

    # -- Check geocoding provider ------------------------------------------
    # Without a provider only gazetteer-based reverse geocoding works.
    resolver = getattr(request.app.state, "geo_resolver", None)
    if resolver is None:
        checks["geocoding"] = "not_initialised"
        all_ok = False
    elif resolver.has_provider:
        checks["geocoding"] = "ok"
    else:
        checks["geocoding"] = "gazetteer_only"

    # -- Check location store ----------------------------------------------
    tracker = getattr(request.app.state, "location_tracker", None)
    if tracker is None:
        checks["location_tracker"] = "not_initialised"
        all_ok = False
    elif await tracker.ping():
        checks["location_tracker"] = "ok"
    else:
        checks["location_tracker"] = "store_unavailable"
        all_ok = False

    status = "ready" if all_ok else "degraded"

    logger.info("health.readiness_check", status=status, checks=checks)

    return ReadinessResponse(status=status, checks=checks)
