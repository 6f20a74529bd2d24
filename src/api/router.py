"""Main API router combining all v1 route modules.

Aggregates all routers under the ``/api/v1`` prefix so the
FastAPI application only needs to include a single router.

Includes:
    * Health: liveness and readiness checks
    * Locations: city search, geocoding, autocomplete, proximity
    * Users: per-user location snapshot and history
"""

from __future__ import annotations

from fastapi import APIRouter

from src.api.v1 import health, locations, users

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(health.router)
api_router.include_router(locations.router)
api_router.include_router(users.router)
