"""Classification of geocoding / places provider payloads.

Provider JSON is turned into one of three explicit shapes before anything
else looks at it:

* :class:`ComponentsResult` -- a hit with tagged address components;
* :class:`BareResult` -- a hit with coordinates but no components;
* :class:`ProviderFailure` -- a recognised non-OK status.

Anything else (an unknown status, a result without coordinates, a
component that is not ``{long_name, short_name, types}``) raises
:class:`ProviderParseError` instead of being papered over with defaults.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Final

from src.exceptions import GeocodingFailure, ProviderParseError
from src.models.location import PlacePrediction

# ---------------------------------------------------------------------------
# Status and component tables
# ---------------------------------------------------------------------------

_FAILURE_STATUSES: Final[dict[str, GeocodingFailure]] = {
    "ZERO_RESULTS": GeocodingFailure.NO_RESULT,
    "NOT_FOUND": GeocodingFailure.NO_RESULT,
    "OVER_QUERY_LIMIT": GeocodingFailure.PROVIDER_ERROR,
    "OVER_DAILY_LIMIT": GeocodingFailure.PROVIDER_ERROR,
    "REQUEST_DENIED": GeocodingFailure.PROVIDER_ERROR,
    "INVALID_REQUEST": GeocodingFailure.PROVIDER_ERROR,
    "UNKNOWN_ERROR": GeocodingFailure.PROVIDER_ERROR,
}

# Provider component type -> normalised field.  Earlier types win when a
# result carries more than one candidate for the same field.
COMPONENT_FIELD_MAP: Final[dict[str, str]] = {
    "street_number": "street",
    "route": "street",
    "locality": "city",
    "administrative_area_level_3": "city",
    "administrative_area_level_1": "state",
    "postal_code": "postal_code",
    "country": "country",
}

_CITY_PRIORITY: Final[tuple[str, ...]] = ("locality", "administrative_area_level_3")


# ---------------------------------------------------------------------------
# Result shapes
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AddressComponents:
    street: str | None = None
    city: str | None = None
    state: str | None = None
    state_short: str | None = None
    postal_code: str | None = None
    country: str | None = None
    country_code: str | None = None


@dataclass(frozen=True, slots=True)
class ComponentsResult:
    lat: float
    lng: float
    formatted_address: str | None
    components: AddressComponents


@dataclass(frozen=True, slots=True)
class BareResult:
    lat: float
    lng: float
    formatted_address: str | None


@dataclass(frozen=True, slots=True)
class ProviderFailure:
    status: str
    reason: GeocodingFailure
    message: str = ""


GeocodeOutcome = ComponentsResult | BareResult | ProviderFailure


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def derive_state_code(state: str, short_name: str | None = None) -> str:
    """Short upper-case code for *state*.

    Uses the provider's short name when it already looks like a code
    (``"MH"``), otherwise the first two letters of the state name
    upper-cased.  The fallback is lossy: states sharing a two-letter
    prefix collide.
    """
    if short_name:
        token = short_name.strip()
        if 1 <= len(token) <= 3 and token.isalpha() and token.isupper():
            return token
    return state.strip()[:2].upper()


def _failure_for(payload: Mapping[str, Any]) -> ProviderFailure | None:
    status = payload.get("status")
    if status == "OK":
        return None
    if not isinstance(status, str) or status not in _FAILURE_STATUSES:
        raise ProviderParseError(f"Unrecognised provider status: {status!r}")
    return ProviderFailure(
        status=status,
        reason=_FAILURE_STATUSES[status],
        message=str(payload.get("error_message") or ""),
    )


def _require_mapping(value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ProviderParseError(f"Expected an object for {what}, got {type(value).__name__}")
    return value


def _parse_location(result: Mapping[str, Any]) -> tuple[float, float]:
    geometry = _require_mapping(result.get("geometry"), "geometry")
    location = _require_mapping(geometry.get("location"), "geometry.location")
    lat, lng = location.get("lat"), location.get("lng")
    for value in (lat, lng):
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise ProviderParseError("geometry.location must carry numeric lat/lng")
    return float(lat), float(lng)


def _parse_components(raw: list[Any]) -> AddressComponents:
    fields: dict[str, str] = {}
    street_parts: dict[str, str] = {}
    state_short: str | None = None
    country_code: str | None = None
    city_by_type: dict[str, str] = {}

    for item in raw:
        component = _require_mapping(item, "address component")
        long_name = component.get("long_name")
        short_name = component.get("short_name", long_name)
        types = component.get("types")
        if not isinstance(long_name, str) or not isinstance(short_name, str):
            raise ProviderParseError("address component names must be strings")
        if not isinstance(types, list) or not all(isinstance(t, str) for t in types):
            raise ProviderParseError("address component types must be a list of strings")

        for component_type in types:
            field = COMPONENT_FIELD_MAP.get(component_type)
            if field is None:
                continue
            if field == "street":
                street_parts.setdefault(component_type, long_name)
            elif field == "city":
                city_by_type.setdefault(component_type, long_name)
            elif field not in fields:
                fields[field] = long_name
                if field == "state":
                    state_short = short_name
                elif field == "country":
                    country_code = short_name

    street = " ".join(
        part for part in (street_parts.get("street_number"), street_parts.get("route")) if part
    )
    city = next((city_by_type[t] for t in _CITY_PRIORITY if t in city_by_type), None)

    return AddressComponents(
        street=street or None,
        city=city,
        state=fields.get("state"),
        state_short=state_short,
        postal_code=fields.get("postal_code"),
        country=fields.get("country"),
        country_code=country_code,
    )


def _classify_result(result: Any) -> ComponentsResult | BareResult:
    result = _require_mapping(result, "result")
    lat, lng = _parse_location(result)
    formatted = result.get("formatted_address")
    formatted_address = formatted if isinstance(formatted, str) and formatted else None

    raw_components = result.get("address_components")
    if raw_components is None or raw_components == []:
        return BareResult(lat=lat, lng=lng, formatted_address=formatted_address)
    if not isinstance(raw_components, list):
        raise ProviderParseError("address_components must be a list")

    return ComponentsResult(
        lat=lat,
        lng=lng,
        formatted_address=formatted_address,
        components=_parse_components(raw_components),
    )


# ---------------------------------------------------------------------------
# Public parsers
# ---------------------------------------------------------------------------


def parse_geocode_response(payload: Any) -> GeocodeOutcome:
    """Classify a geocode / reverse-geocode response (first result wins)."""
    payload = _require_mapping(payload, "response")
    failure = _failure_for(payload)
    if failure is not None:
        return failure

    results = payload.get("results")
    if not isinstance(results, list):
        raise ProviderParseError("OK response without a results list")
    if not results:
        return ProviderFailure(status="OK", reason=GeocodingFailure.NO_RESULT)
    return _classify_result(results[0])


def parse_place_details_response(payload: Any) -> GeocodeOutcome:
    """Classify a place-details response, which carries a single ``result``."""
    payload = _require_mapping(payload, "response")
    failure = _failure_for(payload)
    if failure is not None:
        return failure
    if "result" not in payload:
        raise ProviderParseError("OK response without a result")
    return _classify_result(payload["result"])


def parse_autocomplete_response(payload: Any) -> list[PlacePrediction] | ProviderFailure:
    """Parse autocomplete predictions; ``ZERO_RESULTS`` yields ``[]``."""
    payload = _require_mapping(payload, "response")
    failure = _failure_for(payload)
    if failure is not None:
        if failure.reason == GeocodingFailure.NO_RESULT:
            return []
        return failure

    raw = payload.get("predictions")
    if not isinstance(raw, list):
        raise ProviderParseError("OK response without a predictions list")

    predictions: list[PlacePrediction] = []
    for item in raw:
        prediction = _require_mapping(item, "prediction")
        place_id = prediction.get("place_id")
        description = prediction.get("description")
        if not isinstance(place_id, str) or not isinstance(description, str):
            raise ProviderParseError("prediction must carry place_id and description")

        structured = prediction.get("structured_formatting") or {}
        structured = _require_mapping(structured, "structured_formatting")
        types = prediction.get("types") or []
        if not isinstance(types, list):
            raise ProviderParseError("prediction types must be a list")

        predictions.append(
            PlacePrediction(
                place_id=place_id,
                description=description,
                main_text=str(structured.get("main_text") or description),
                secondary_text=structured.get("secondary_text"),
                types=[str(t) for t in types],
            )
        )
    return predictions
