"""Fixly location API entry point.

Creates the FastAPI app, configures middleware, includes routers, and
manages the lifecycle of the location services (Gazetteer, SearchRanker,
ProximityMatcher, GeoResolver, LocationHistoryTracker, Cache).
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from pydantic import ValidationError

from config.settings import settings
from src.api.router import api_router

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Structured logging configuration
# ---------------------------------------------------------------------------


def _configure_logging() -> None:
    """Set up structlog with JSON or console rendering based on settings."""
    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(settings.log_level),
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Application lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage startup and shutdown of the location services.

    On startup:
      1. Load the gazetteer
      2. Build the search ranker and proximity matcher on top of it
      3. Initialise the geocode result cache
      4. Create the geocoding client (only when an API key is set) and resolver
      5. Create the location history tracker on Redis (in memory without it)
      6. Store everything on ``app.state``

    On shutdown:
      - Close the HTTP client and caches gracefully.
    """
    _configure_logging()
    logger.info(
        "app.startup",
        env=settings.env,
        geocoding_provider=bool(settings.google_maps_api_key),
        redis=bool(settings.redis_url),
    )

    app.state.start_time = time.time()
    app.state.default_radius_km = settings.default_service_radius_km
    app.state.search_default_limit = settings.search_default_limit

    # -- 1. Gazetteer -------------------------------------------------------
    from src.services.gazetteer import Gazetteer

    gazetteer = Gazetteer.default()
    app.state.gazetteer = gazetteer

    # -- 2. Search and proximity --------------------------------------------
    from src.services.proximity import ProximityMatcher
    from src.services.search import SearchRanker

    app.state.search_ranker = SearchRanker(gazetteer)
    proximity = ProximityMatcher(gazetteer)
    app.state.proximity = proximity
    logger.info("app.search_and_proximity_initialised")

    # -- 3. Cache -----------------------------------------------------------
    from src.services.cache import CacheManager

    redis_url = settings.redis_url if settings.redis_url else None
    geocode_cache = CacheManager.for_namespace("fixly:geocode:", redis_url=redis_url)
    app.state.geocode_cache = geocode_cache
    logger.info("app.cache_initialised")

    # -- 4. Geocoding -------------------------------------------------------
    from src.services.geocoding import GeoResolver, GoogleMapsClient

    maps_client: GoogleMapsClient | None = None
    if settings.google_maps_api_key:
        maps_client = GoogleMapsClient(
            settings.google_maps_api_key,
            timeout=settings.geocoding_timeout_seconds,
            min_interval_ms=settings.geocoding_min_interval_ms,
        )
        logger.info("app.geocoding_client_initialised")
    else:
        logger.warning("app.geocoding_provider_missing", note="reverse geocoding falls back to the gazetteer")

    app.state.geo_resolver = GeoResolver(
        maps_client,
        cache=geocode_cache,
        nearest_city=proximity.nearest_city,
        timeout=settings.geocoding_timeout_seconds,
        cache_ttl=settings.geocode_cache_ttl,
    )

    # -- 5. Location history ------------------------------------------------
    from src.services.location_history import (
        InMemoryLocationStore,
        LocationHistoryTracker,
        LocationStore,
        RedisLocationStore,
    )

    redis_store: RedisLocationStore | None = None
    store: LocationStore
    if redis_url:
        redis_store = RedisLocationStore.from_url(redis_url, prefix="fixly:location:")
        store = redis_store
    else:
        store = InMemoryLocationStore()
        logger.warning("app.location_store_in_memory", note="snapshots are lost on restart")
    app.state.location_tracker = LocationHistoryTracker(store)
    logger.info("app.location_tracker_initialised")

    logger.info("app.startup_complete")

    yield

    # -- Shutdown -----------------------------------------------------------
    logger.info("app.shutdown_start")

    if maps_client is not None:
        await maps_client.close()
    if redis_store is not None:
        await redis_store.close()
    await geocode_cache.close()

    logger.info("app.shutdown_complete")


# ---------------------------------------------------------------------------
# FastAPI application
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Fixly Location API",
    description=(
        "Location resolution and geospatial matching for the Fixly hyperlocal "
        "services marketplace: city search, geocoding, proximity search and "
        "per-user location history across India."
    ),
    version="0.1.0",
    lifespan=lifespan,
    default_response_class=ORJSONResponse,
    docs_url="/docs" if not settings.is_production else None,
    redoc_url="/redoc" if not settings.is_production else None,
)

# -- CORS middleware --------------------------------------------------------
# allow_credentials=True must not be combined with allow_origins=["*"].
if settings.is_production:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT"],
        allow_headers=["Content-Type", "Authorization"],
    )
else:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://localhost:8000", "http://127.0.0.1:8000"],
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "OPTIONS", "HEAD"],
        allow_headers=["Content-Type", "Accept", "Authorization"],
    )

# -- Include routers -------------------------------------------------------
app.include_router(api_router)


# -- Exception handlers ----------------------------------------------------


@app.exception_handler(ValidationError)
async def model_validation_error_handler(request: Request, exc: ValidationError) -> ORJSONResponse:
    """Return 400 when a model built inside a route rejects client input."""
    logger.info("api.model_validation_failed", path=request.url.path, error_count=exc.error_count())
    return ORJSONResponse(
        status_code=400,
        content={"detail": exc.errors(include_url=False, include_context=False, include_input=False)},
    )


@app.get("/api", response_class=ORJSONResponse)
async def api_info() -> dict:
    """API information endpoint."""
    return {
        "name": "Fixly Location API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/api/v1/health",
        "endpoints": {
            "search": "/api/v1/locations/search",
            "states": "/api/v1/locations/states",
            "resolve_address": "/api/v1/locations/resolve/address",
            "resolve_coordinates": "/api/v1/locations/resolve/coordinates",
            "device": "/api/v1/locations/device",
            "autocomplete": "/api/v1/locations/autocomplete",
            "nearby": "/api/v1/locations/nearby",
            "user_location": "/api/v1/users/{entity_id}/location",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("src.main:app", host=settings.api_host, port=settings.api_port)
