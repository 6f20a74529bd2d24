"""Async HTTP client for the Google Maps geocoding and places APIs.

The client only speaks HTTP: it returns decoded JSON and leaves status
classification to :mod:`src.services.geocoding.parser`.  Transport
problems are reported as :class:`GeocodingError` so callers see a single
error family.  Requests are spaced by a minimum interval so bursts of
keystrokes or map pans do not trip the provider's rate limits.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any

import httpx
import structlog

from src.exceptions import GeocodingError, GeocodingFailure

logger = structlog.get_logger(__name__)

BASE_URL = "https://maps.googleapis.com/maps/api"

# Autocomplete bias radius around the caller's position, in metres.
_AUTOCOMPLETE_RADIUS_M = 50_000


class GoogleMapsClient:
    """Thin wrapper over the geocode, place autocomplete and place details endpoints.

    Parameters
    ----------
    api_key:
        Google Maps API key.
    timeout:
        Per-request timeout in seconds.
    min_interval_ms:
        Minimum spacing between successive requests.
    transport:
        Optional ``httpx`` transport, used by tests to stub the provider.
    """

    BASE_URL = BASE_URL

    def __init__(
        self,
        api_key: str,
        *,
        timeout: float = 10.0,
        min_interval_ms: int = 100,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._client = httpx.AsyncClient(
            base_url=self.BASE_URL,
            timeout=timeout,
            headers={"Accept": "application/json"},
            limits=httpx.Limits(
                max_connections=10,
                max_keepalive_connections=5,
            ),
            transport=transport,
        )
        self._min_interval = max(min_interval_ms, 0) / 1000.0
        self._throttle_lock = asyncio.Lock()
        self._last_request_time: float = 0.0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Request helper
    # ------------------------------------------------------------------

    async def _get_json(self, path: str, params: dict[str, Any]) -> Any:
        """GET *path* with the API key attached, after the throttle delay."""
        async with self._throttle_lock:
            elapsed = time.monotonic() - self._last_request_time
            if elapsed < self._min_interval:
                await asyncio.sleep(self._min_interval - elapsed)
            self._last_request_time = time.monotonic()

        try:
            response = await self._client.get(path, params={**params, "key": self._api_key})
            response.raise_for_status()
            return response.json()
        except httpx.TimeoutException as exc:
            logger.warning("geocoding.client.timeout", path=path)
            raise GeocodingError(GeocodingFailure.TIMEOUT, "Geocoding provider timed out") from exc
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "geocoding.client.http_error",
                path=path,
                status_code=exc.response.status_code,
            )
            raise GeocodingError(
                GeocodingFailure.PROVIDER_ERROR,
                f"Geocoding provider returned HTTP {exc.response.status_code}",
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("geocoding.client.transport_error", path=path, error=str(exc))
            raise GeocodingError(GeocodingFailure.PROVIDER_ERROR, "Geocoding provider unreachable") from exc
        except ValueError as exc:
            raise GeocodingError(GeocodingFailure.PROVIDER_ERROR, "Geocoding provider sent invalid JSON") from exc

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    async def geocode(self, address: str) -> Any:
        return await self._get_json(
            "/geocode/json",
            {"address": address, "region": "in", "components": "country:IN"},
        )

    async def reverse_geocode(self, lat: float, lng: float) -> Any:
        return await self._get_json("/geocode/json", {"latlng": f"{lat},{lng}"})

    async def autocomplete(self, text: str, near: tuple[float, float] | None = None) -> Any:
        """Query place autocomplete for Indian cities, biased toward *near*."""
        params: dict[str, Any] = {
            "input": text,
            "components": "country:in",
            "types": "(cities)",
        }
        if near is not None:
            params["location"] = f"{near[0]},{near[1]}"
            params["radius"] = _AUTOCOMPLETE_RADIUS_M
        return await self._get_json("/place/autocomplete/json", params)

    async def place_details(self, place_id: str) -> Any:
        return await self._get_json(
            "/place/details/json",
            {
                "place_id": place_id,
                "fields": "formatted_address,geometry,address_components",
            },
        )
