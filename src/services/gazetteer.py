"""Immutable in-memory gazetteer of Indian states and cities.

The gazetteer is built once at startup and handed to the search ranker,
the proximity matcher and the API.  It never mutates after construction,
so any number of concurrent readers can share it without locking.  All
lookups are linear scans or dict hits over a few hundred rows.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import structlog

from src.models.gazetteer import City, State

logger = structlog.get_logger(__name__)


class Gazetteer:
    """Read-only lookup surface over states and cities.

    Usage::

        gazetteer = Gazetteer.default()

        gazetteer.cities_by_state("MH")
        gazetteer.state_by_name("tamil nadu")
        gazetteer.cities_with_population(2_000_000)
    """

    __slots__ = ("_cities", "_city_by_id", "_state_by_code", "_state_by_name", "_states")

    def __init__(self, states: Iterable[State], cities: Iterable[City]) -> None:
        self._states: tuple[State, ...] = tuple(states)
        self._cities: tuple[City, ...] = tuple(cities)

        self._state_by_code: dict[str, State] = {s.code.upper(): s for s in self._states}
        self._state_by_name: dict[str, State] = {s.name.lower(): s for s in self._states}
        self._city_by_id: dict[str, City] = {c.id: c for c in self._cities}

    @classmethod
    def from_records(
        cls,
        states: Iterable[Mapping[str, Any]],
        cities: Iterable[Mapping[str, Any]],
    ) -> Gazetteer:
        """Build a gazetteer from plain dict rows (e.g. the bundled data)."""
        return cls(
            states=[State.model_validate(row) for row in states],
            cities=[City.model_validate(row) for row in cities],
        )

    @classmethod
    def default(cls) -> Gazetteer:
        """Load the bundled Indian gazetteer."""
        from src.data.gazetteer import CITIES, STATES

        gazetteer = cls.from_records(STATES, CITIES)
        logger.info(
            "gazetteer.loaded",
            states=len(gazetteer.states),
            cities=len(gazetteer.cities),
        )
        return gazetteer

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    @property
    def states(self) -> tuple[State, ...]:
        return self._states

    @property
    def cities(self) -> tuple[City, ...]:
        return self._cities

    def __len__(self) -> int:
        return len(self._cities)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def cities_by_state(self, code: str) -> list[City]:
        """Cities whose state code equals *code* (case-insensitive)."""
        wanted = code.strip().upper()
        return [city for city in self._cities if city.state_code == wanted]

    def metro_cities(self) -> list[City]:
        return [city for city in self._cities if city.is_metro]

    def cities_with_population(self, min_population: int) -> list[City]:
        """Cities with a known population of at least *min_population*."""
        return [
            city
            for city in self._cities
            if city.population is not None and city.population >= min_population
        ]

    def popular_cities(self, limit: int = 20) -> list[City]:
        """The *limit* most populous cities, largest first."""
        ranked = sorted(
            (city for city in self._cities if city.population),
            key=lambda city: city.population or 0,
            reverse=True,
        )
        return ranked[:limit]

    def state_by_code(self, code: str) -> State | None:
        return self._state_by_code.get(code.strip().upper())

    def state_by_name(self, name: str) -> State | None:
        return self._state_by_name.get(name.strip().lower())

    def city_by_id(self, city_id: str) -> City | None:
        return self._city_by_id.get(city_id)
