"""Tests for the bundled gazetteer and its lookup surface."""

from __future__ import annotations

import pytest

from src.services.gazetteer import Gazetteer


@pytest.fixture(scope="module")
def gazetteer() -> Gazetteer:
    return Gazetteer.default()


class TestGazetteerData:
    def test_counts(self, gazetteer: Gazetteer) -> None:
        assert len(gazetteer.states) == 36, "28 states and 8 union territories expected"
        assert len(gazetteer) == 64

    def test_city_ids_unique(self, gazetteer: Gazetteer) -> None:
        ids = [city.id for city in gazetteer.cities]
        assert len(ids) == len(set(ids))

    def test_every_city_state_code_is_known(self, gazetteer: Gazetteer) -> None:
        for city in gazetteer.cities:
            state = gazetteer.state_by_code(city.state_code)
            assert state is not None, f"{city.name} has unknown state code {city.state_code}"
            assert state.name == city.state, f"{city.name} state name does not match its code"

    def test_every_city_inside_service_area(self, gazetteer: Gazetteer) -> None:
        from src.models.location import is_within_india

        assert all(is_within_india(c.lat, c.lng) for c in gazetteer.cities)


class TestLookups:
    def test_cities_by_state_case_insensitive(self, gazetteer: Gazetteer) -> None:
        names = {c.name for c in gazetteer.cities_by_state("mh")}
        assert {"Mumbai", "Pune", "Nagpur", "Thane", "Nashik"} <= names

    def test_cities_by_unknown_state(self, gazetteer: Gazetteer) -> None:
        assert gazetteer.cities_by_state("ZZ") == []

    def test_metro_cities(self, gazetteer: Gazetteer) -> None:
        metros = {c.name for c in gazetteer.metro_cities()}
        assert metros == {"Mumbai", "Delhi", "Bangalore", "Hyderabad", "Ahmedabad", "Chennai", "Kolkata", "Pune"}

    def test_cities_with_population(self, gazetteer: Gazetteer) -> None:
        big = gazetteer.cities_with_population(5_000_000)
        assert {c.name for c in big} >= {"Mumbai", "Delhi", "Bangalore"}
        assert all(c.population is not None and c.population >= 5_000_000 for c in big)

    def test_popular_cities_sorted(self, gazetteer: Gazetteer) -> None:
        popular = gazetteer.popular_cities(limit=5)
        assert len(popular) == 5
        assert popular[0].name == "Mumbai"
        populations = [c.population for c in popular]
        assert populations == sorted(populations, reverse=True)

    def test_state_by_code_and_name(self, gazetteer: Gazetteer) -> None:
        assert gazetteer.state_by_code("tg").name == "Telangana"
        assert gazetteer.state_by_name("  tamil nadu ").code == "TN"
        assert gazetteer.state_by_name("Atlantis") is None

    def test_city_by_id(self, gazetteer: Gazetteer) -> None:
        assert gazetteer.city_by_id("navi-mumbai").name == "Navi Mumbai"
        assert gazetteer.city_by_id("nowhere") is None
