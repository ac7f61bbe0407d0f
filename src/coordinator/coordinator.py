"""Per-session dashboard state: tracked cities, unit system, snapshot cache and search.

The coordinator runs on a single asyncio event loop. State is only mutated
between ``await`` points, so a membership check followed by an insert with
no suspension in between cannot interleave with another task.
"""

import asyncio
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence, Set, Tuple

from src.api.errors import UpstreamUnavailableError
from src.config import settings
from src.coordinator.gateway import WeatherGateway
from src.data.models import (
    DEFAULT_CITIES,
    CacheKey,
    CityInfo,
    SearchResult,
    UnitSystem,
    cache_key,
)
from src.data.snapshot import WeatherSnapshot
from src.utils.logger import setup_logger

logger = setup_logger(__name__)

UNIT_SYSTEMS = ("metric", "imperial")


class DashboardCoordinator:
    """
    Decides what to fetch for a dashboard session and keeps the results.

    Snapshots are cached per (lat, lon, unit) for the lifetime of the
    session; at most one request per key is ever outstanding.
    """

    def __init__(
        self,
        gateway: WeatherGateway,
        cities: Sequence[CityInfo] = None,
        unit: UnitSystem = "metric",
        debounce_seconds: float = None,
        min_query_length: int = None,
    ):
        """
        Initialize coordinator.

        Args:
            gateway: Network boundary used for weather and search requests
            cities: Initially tracked cities (default: DEFAULT_CITIES)
            unit: Initial unit system
            debounce_seconds: Quiet period before a search is dispatched
            min_query_length: Shorter queries never reach the network
        """
        self.gateway = gateway
        self._cities: List[CityInfo] = []
        for city in cities or DEFAULT_CITIES:
            if not any(existing.is_near(city.lat, city.lon) for existing in self._cities):
                self._cities.append(city)
        if not self._cities:
            raise ValueError("At least one city is required")
        if unit not in UNIT_SYSTEMS:
            raise ValueError(f"Unknown unit system: {unit}")

        self.active_index = 0
        self.unit: UnitSystem = unit
        self.debounce_seconds = (
            settings.search_debounce_seconds if debounce_seconds is None else debounce_seconds
        )
        self.min_query_length = min_query_length or settings.search_min_query_length

        self.loading = False
        self.error: Optional[str] = None

        self._cache: Dict[CacheKey, WeatherSnapshot] = {}
        self._in_flight: Set[CacheKey] = set()

        self.search_query = ""
        self.search_results: List[SearchResult] = []
        self._search_task: Optional[asyncio.Task] = None
        self._search_generation = 0

    @property
    def cities(self) -> Tuple[CityInfo, ...]:
        return tuple(self._cities)

    @property
    def active_city(self) -> CityInfo:
        return self._cities[self.active_index]

    @property
    def cache(self) -> Mapping[CacheKey, WeatherSnapshot]:
        """Read-only view of the snapshot cache."""
        return MappingProxyType(self._cache)

    @property
    def in_flight(self) -> frozenset:
        return frozenset(self._in_flight)

    @property
    def current_snapshot(self) -> Optional[WeatherSnapshot]:
        """Snapshot of the active city under the current unit, if fetched."""
        return self._cache.get(cache_key(self.active_city, self.unit))

    def _try_reserve(self, key: CacheKey) -> bool:
        """Mark a key in flight; False when it already was."""
        if key in self._in_flight:
            return False
        self._in_flight.add(key)
        return True

    def _store(self, key: CacheKey, snapshot: WeatherSnapshot) -> None:
        # First write wins; a concurrent fetch may have filled the key meanwhile
        if key in self._cache:
            logger.debug(f"Skipping cache write for {key}, already present")
            return
        self._cache[key] = snapshot

    async def fetch_weather(self, city: CityInfo) -> Optional[WeatherSnapshot]:
        """
        Make sure the snapshot for a city under the current unit is cached.

        A call for a key that is cached or already being fetched issues no
        request. Failures are recorded in ``error`` rather than raised.

        Returns:
            The cached snapshot, or None if it is still being fetched or failed
        """
        unit = self.unit
        key = cache_key(city, unit)
        if key in self._cache:
            self.loading = False
            return self._cache[key]
        if not self._try_reserve(key):
            return None

        self.loading = True
        self.error = None
        try:
            snapshot = await self.gateway.fetch_weather(city, unit)
        except UpstreamUnavailableError as e:
            logger.warning(f"Weather fetch failed for {city.name} ({unit}): {e}")
            self.error = str(e) or "Unknown error"
            return None
        finally:
            self._in_flight.discard(key)
            self.loading = False

        self._store(key, snapshot)
        return self._cache[key]

    async def select_city(self, index: int) -> Optional[WeatherSnapshot]:
        """Make a tracked city active and fetch it if needed."""
        if not 0 <= index < len(self._cities):
            raise IndexError(f"No city at index {index}")
        self.active_index = index
        return await self.fetch_weather(self.active_city)

    async def add_city(self, result: SearchResult) -> Optional[WeatherSnapshot]:
        """
        Track a search result and make it active.

        A result within the proximity threshold of a tracked city selects
        that city instead of adding a duplicate.
        """
        for index, city in enumerate(self._cities):
            if city.is_near(result.lat, result.lon):
                logger.debug(f"{result.name} matches tracked city {city.name}")
                self.active_index = index
                break
        else:
            self._cities.append(result.to_city())
            self.active_index = len(self._cities) - 1
            logger.info(f"Tracking {result.name} ({len(self._cities)} cities)")

        self.clear_search()
        return await self.fetch_weather(self.active_city)

    async def remove_city(self, index: int) -> bool:
        """
        Stop tracking a city; the last remaining city cannot be removed.

        Returns:
            True if the city was removed
        """
        if len(self._cities) <= 1:
            return False
        if not 0 <= index < len(self._cities):
            raise IndexError(f"No city at index {index}")

        removed = self._cities.pop(index)
        if self.active_index >= index and self.active_index > 0:
            self.active_index -= 1
        logger.info(f"Stopped tracking {removed.name}")

        await self.fetch_weather(self.active_city)
        return True

    async def set_unit(self, unit: UnitSystem) -> Optional[WeatherSnapshot]:
        """Switch unit system; snapshots under the other unit stay cached."""
        if unit not in UNIT_SYSTEMS:
            raise ValueError(f"Unknown unit system: {unit}")
        self.unit = unit
        return await self.fetch_weather(self.active_city)

    async def retry(self) -> Optional[WeatherSnapshot]:
        """Fetch the active city again after a failure."""
        self.error = None
        return await self.fetch_weather(self.active_city)

    async def _prefetch_one(
        self, city: CityInfo, key: CacheKey, unit: UnitSystem
    ) -> Tuple[CacheKey, Optional[WeatherSnapshot]]:
        try:
            return key, await self.gateway.fetch_weather(city, unit)
        except UpstreamUnavailableError as e:
            logger.warning(f"Prefetch failed for {city.name} ({unit}): {e}")
            return key, None
        finally:
            self._in_flight.discard(key)

    async def prefetch_all(self) -> int:
        """
        Fetch every tracked city missing under the current unit.

        Results are merged into the cache in one update once all requests
        have resolved; failed cities are skipped.

        Returns:
            Number of snapshots added to the cache
        """
        unit = self.unit
        pending = []
        for city in self._cities:
            key = cache_key(city, unit)
            if key not in self._cache and self._try_reserve(key):
                pending.append(self._prefetch_one(city, key, unit))

        if not pending:
            return 0

        results = await asyncio.gather(*pending)
        fetched = {
            key: snapshot
            for key, snapshot in results
            if snapshot is not None and key not in self._cache
        }
        if fetched:
            self._cache.update(fetched)
        logger.info(f"Prefetched {len(fetched)} of {len(pending)} cities ({unit})")
        return len(fetched)

    def _cancel_search(self) -> None:
        self._search_generation += 1
        if self._search_task is not None and not self._search_task.done():
            self._search_task.cancel()
        self._search_task = None

    def clear_search(self) -> None:
        """Drop the query, its results and any pending search."""
        self._cancel_search()
        self.search_query = ""
        self.search_results = []

    def search(self, query: str) -> Optional[asyncio.Task]:
        """
        Schedule a debounced city search, superseding any previous one.

        Must be called from within the running event loop.

        Returns:
            The scheduled search task, or None for queries too short to send
        """
        self.search_query = query
        self._cancel_search()

        if len(query) < self.min_query_length:
            self.search_results = []
            return None

        generation = self._search_generation
        self._search_task = asyncio.get_running_loop().create_task(
            self._run_search(query, generation)
        )
        return self._search_task

    async def _run_search(self, query: str, generation: int) -> None:
        await asyncio.sleep(self.debounce_seconds)
        try:
            results = await self.gateway.search(query)
        except UpstreamUnavailableError as e:
            logger.warning(f"City search failed for {query!r}: {e}")
            return

        if generation != self._search_generation:
            logger.debug(f"Discarding stale results for {query!r}")
            return
        self.search_results = results

    async def close(self) -> None:
        """Cancel pending work and release the gateway."""
        self._cancel_search()
        await self.gateway.aclose()
