"""State -> region classification for approximate (privacy-reduced) locations."""

from __future__ import annotations

from datetime import datetime
from typing import Final

from src.models.enums import Region
from src.models.location import ApproximateLocation

_STATE_REGIONS: Final[dict[str, Region]] = {
    # North India
    "delhi": Region.NORTH,
    "punjab": Region.NORTH,
    "haryana": Region.NORTH,
    "himachal pradesh": Region.NORTH,
    "jammu and kashmir": Region.NORTH,
    "ladakh": Region.NORTH,
    "uttarakhand": Region.NORTH,
    "uttar pradesh": Region.NORTH,
    "chandigarh": Region.NORTH,
    # West India
    "rajasthan": Region.WEST,
    "gujarat": Region.WEST,
    "maharashtra": Region.WEST,
    "goa": Region.WEST,
    "dadra and nagar haveli and daman and diu": Region.WEST,
    # South India
    "karnataka": Region.SOUTH,
    "kerala": Region.SOUTH,
    "tamil nadu": Region.SOUTH,
    "andhra pradesh": Region.SOUTH,
    "telangana": Region.SOUTH,
    "puducherry": Region.SOUTH,
    "lakshadweep": Region.SOUTH,
    "andaman and nicobar islands": Region.SOUTH,
    # East India
    "west bengal": Region.EAST,
    "odisha": Region.EAST,
    "jharkhand": Region.EAST,
    "bihar": Region.EAST,
    "sikkim": Region.EAST,
    # Northeast India
    "assam": Region.NORTHEAST,
    "arunachal pradesh": Region.NORTHEAST,
    "manipur": Region.NORTHEAST,
    "meghalaya": Region.NORTHEAST,
    "mizoram": Region.NORTHEAST,
    "nagaland": Region.NORTHEAST,
    "tripura": Region.NORTHEAST,
    # Central India
    "madhya pradesh": Region.CENTRAL,
    "chhattisgarh": Region.CENTRAL,
}


def region_for_state(state: str) -> Region:
    """Classify *state* into a coarse region; unknown states map to ``India``."""
    return _STATE_REGIONS.get(state.strip().lower(), Region.INDIA)


def approximate_location(city: str, state: str, when: datetime) -> ApproximateLocation:
    return ApproximateLocation(
        city=city,
        state=state,
        region=region_for_state(state),
        last_updated=when,
    )
