"""City search over the gazetteer.

Ranking is a strict tie-break chain rather than a numeric score:

1. match tier -- exact city name, then name starts with the query, then
   any other substring hit on the city or state name;
2. metro cities before non-metro cities;
3. larger population first (unknown population sorts last);
4. gazetteer order, via a stable sort.

Identical input always yields identical output order.

:class:`DebouncedSearch` replaces ad-hoc search-as-you-type timers with an
explicit policy: wait a short delay, and let a newer query cancel the one
still waiting.
"""

from __future__ import annotations

import asyncio
from enum import IntEnum

import structlog

from src.models.gazetteer import City
from src.models.location import SearchResult
from src.services.gazetteer import Gazetteer

logger = structlog.get_logger(__name__)

DEFAULT_LIMIT = 10


class MatchTier(IntEnum):
    """Relevance tiers; lower sorts first."""

    EXACT = 0
    PREFIX = 1
    SUBSTRING = 2


def _match_tier(city: City, needle: str) -> MatchTier | None:
    name = city.name.lower()
    if name == needle:
        return MatchTier.EXACT
    if name.startswith(needle):
        return MatchTier.PREFIX
    if needle in name or needle in city.state.lower():
        return MatchTier.SUBSTRING
    return None


class SearchRanker:
    """Ranks gazetteer cities against a free-text query."""

    __slots__ = ("_gazetteer",)

    def __init__(self, gazetteer: Gazetteer) -> None:
        self._gazetteer = gazetteer

    def search(
        self,
        query: str,
        state_filter: str | None = None,
        limit: int = DEFAULT_LIMIT,
    ) -> list[SearchResult]:
        """Return up to *limit* cities matching *query*, best first.

        Parameters
        ----------
        query:
            Free text; matched case-insensitively against city and state
            names.  Blank queries return ``[]`` without further checks.
        state_filter:
            Optional state code (``"MH"``) or state name
            (``"Maharashtra"``) restricting the candidate cities.
        limit:
            Maximum number of results; must be at least 1.
        """
        needle = query.strip().lower()
        if not needle:
            return []
        if limit < 1:
            raise ValueError(f"limit must be at least 1, got {limit}")

        candidates = self._candidates(state_filter)

        ranked: list[tuple[MatchTier, City]] = []
        for city in candidates:
            tier = _match_tier(city, needle)
            if tier is not None:
                ranked.append((tier, city))

        ranked.sort(
            key=lambda item: (
                item[0],
                not item[1].is_metro,
                -(item[1].population or 0),
            )
        )

        results = [
            SearchResult(
                city=city.name,
                state=city.state,
                state_code=city.state_code,
                lat=city.lat,
                lng=city.lng,
            )
            for _, city in ranked[:limit]
        ]

        logger.debug(
            "search.ranked",
            query=needle,
            state_filter=state_filter,
            matches=len(ranked),
            returned=len(results),
        )
        return results

    def _candidates(self, state_filter: str | None) -> tuple[City, ...] | list[City]:
        if not state_filter or not state_filter.strip():
            return self._gazetteer.cities

        wanted = state_filter.strip()
        state = self._gazetteer.state_by_code(wanted) or self._gazetteer.state_by_name(wanted)
        if state is None:
            return []
        return self._gazetteer.cities_by_state(state.code)


class DebouncedSearch:
    """Search-as-you-type scheduling: delay, then rank; newest query wins.

    Each call waits ``delay_ms`` before ranking.  A call made while an
    earlier one is still waiting cancels the earlier one, whose caller
    gets ``None``.  Cancelling a caller cancels its pending search; no
    state outside this object is touched either way.

    Usage::

        debounced = DebouncedSearch(ranker, delay_ms=300)
        results = await debounced.search("pun")
        if results is None:
            ...  # superseded by a newer keystroke
    """

    __slots__ = ("_delay", "_pending", "_ranker")

    def __init__(self, ranker: SearchRanker, delay_ms: int = 300) -> None:
        self._ranker = ranker
        self._delay = max(delay_ms, 0) / 1000.0
        self._pending: asyncio.Task[list[SearchResult]] | None = None

    async def _run(
        self, query: str, state_filter: str | None, limit: int
    ) -> list[SearchResult]:
        await asyncio.sleep(self._delay)
        return self._ranker.search(query, state_filter=state_filter, limit=limit)

    async def search(
        self,
        query: str,
        state_filter: str | None = None,
        limit: int = DEFAULT_LIMIT,
    ) -> list[SearchResult] | None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()

        task = asyncio.create_task(self._run(query, state_filter, limit))
        self._pending = task
        try:
            return await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            logger.debug("search.superseded", query=query)
            return None
        finally:
            if self._pending is task:
                self._pending = None
