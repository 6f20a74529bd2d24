from src.models.enums import (
    LocationMethod,
    ProviderRole,
    Region,
)
from src.models.gazetteer import City, State
from src.models.location import (
    ApproximateLocation,
    Coordinates,
    LocationHistoryEntry,
    LocationRecord,
    LocationSnapshot,
    PlacePrediction,
    SearchResult,
)
from src.models.provider import ServiceProvider

__all__ = [
    "ApproximateLocation",
    "City",
    "Coordinates",
    "LocationHistoryEntry",
    "LocationMethod",
    "LocationRecord",
    "LocationSnapshot",
    "PlacePrediction",
    "ProviderRole",
    "Region",
    "SearchResult",
    "ServiceProvider",
    "State",
]
