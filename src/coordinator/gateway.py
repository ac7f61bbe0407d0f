"""Network boundary used by the dashboard coordinator."""

from typing import List, Protocol

import httpx
from pydantic import ValidationError

from src.api.errors import UpstreamUnavailableError
from src.config import settings
from src.data.models import CityInfo, SearchResult, UnitSystem
from src.data.snapshot import WeatherSnapshot
from src.utils.logger import setup_logger

logger = setup_logger(__name__)


class WeatherGateway(Protocol):
    """What the coordinator needs from the network."""

    async def fetch_weather(self, city: CityInfo, unit: UnitSystem) -> WeatherSnapshot:
        ...

    async def search(self, query: str) -> List[SearchResult]:
        ...

    async def aclose(self) -> None:
        ...


class HttpWeatherGateway:
    """Calls the SkyPulse HTTP API (``/api/weather``, ``/api/search``)."""

    def __init__(self, base_url: str = None, timeout: float = None):
        """
        Initialize gateway.

        Args:
            base_url: Root URL of the SkyPulse API
            timeout: Request timeout in seconds
        """
        self.base_url = base_url or settings.api_base_url
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Accept": "application/json"},
            timeout=httpx.Timeout(timeout or settings.request_timeout_seconds),
        )

    async def fetch_weather(self, city: CityInfo, unit: UnitSystem) -> WeatherSnapshot:
        """
        Fetch one normalized snapshot.

        Raises:
            UpstreamUnavailableError: With the server's error message on any failure
        """
        try:
            response = await self.client.get(
                "/api/weather",
                params={"lat": city.lat, "lon": city.lon, "units": unit},
            )
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise UpstreamUnavailableError(f"Failed to fetch weather data: {e}") from e

        if not response.is_success:
            message = data.get("error") if isinstance(data, dict) else None
            raise UpstreamUnavailableError(
                message or "Failed to fetch weather data",
                status_code=response.status_code,
            )

        try:
            return WeatherSnapshot.model_validate(data)
        except ValidationError as e:
            logger.error(f"Malformed weather response for {city.name}: {e}")
            raise UpstreamUnavailableError("Failed to fetch weather data") from e

    async def search(self, query: str) -> List[SearchResult]:
        """
        Search cities; non-list responses yield no results.

        Raises:
            UpstreamUnavailableError: If the search endpoint cannot be reached
                or returns malformed results
        """
        try:
            response = await self.client.get("/api/search", params={"q": query})
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise UpstreamUnavailableError(f"Failed to search cities: {e}") from e

        if not isinstance(data, list):
            return []

        try:
            return [
                SearchResult(
                    name=item["name"],
                    country=item.get("country", ""),
                    country_name=item.get("countryName", ""),
                    state=item.get("state", ""),
                    lat=item["lat"],
                    lon=item["lon"],
                )
                for item in data
            ]
        except (KeyError, TypeError, AttributeError) as e:
            logger.error(f"Malformed search response for {query!r}: {e}")
            raise UpstreamUnavailableError("Failed to search cities") from e

    async def aclose(self) -> None:
        """Close HTTP client."""
        await self.client.aclose()
