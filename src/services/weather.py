"""Weather and geocoding services behind the HTTP endpoints."""

import math
from typing import Dict, List, Optional, Tuple

import httpx
from pydantic import ValidationError

from src.api.errors import InvalidRequestError, UpstreamUnavailableError
from src.api.nominatim import NominatimClient
from src.api.open_meteo import OpenMeteoClient
from src.api.schemas import (
    CitySearchResult,
    GeocodeResult,
    OpenMeteoAirQuality,
    OpenMeteoWeather,
)
from src.config import settings
from src.data.snapshot import WeatherSnapshot
from src.data.transform import normalize_weather
from src.utils.logger import setup_logger

logger = setup_logger(__name__)

# Well-known places answered without a reverse lookup, keyed by "lat,lon" at 2 decimals
KNOWN_CITIES: Dict[str, GeocodeResult] = {
    "51.51,-0.13": GeocodeResult(name="London", country="GB"),
    "40.71,-74.01": GeocodeResult(name="New York", country="US"),
    "35.68,139.65": GeocodeResult(name="Tokyo", country="JP"),
    "19.08,72.88": GeocodeResult(name="Mumbai", country="IN"),
    "25.20,55.27": GeocodeResult(name="Dubai", country="AE"),
}

UNKNOWN_PLACE = GeocodeResult(name="Unknown", country="")


def parse_coordinates(
    lat: Optional[str],
    lon: Optional[str],
    missing_message: str = "Please provide coordinates (lat & lon)",
) -> Tuple[float, float]:
    """
    Parse raw query values into finite coordinates.

    Raises:
        InvalidRequestError: If either value is missing or not a finite number
    """
    if not lat or not lon:
        raise InvalidRequestError(missing_message)

    try:
        lat_num = float(lat)
        lon_num = float(lon)
    except (TypeError, ValueError):
        raise InvalidRequestError("Invalid coordinates provided")

    if not math.isfinite(lat_num) or not math.isfinite(lon_num):
        raise InvalidRequestError("Invalid coordinates provided")

    return lat_num, lon_num


class WeatherService:
    """Fetches provider payloads and turns them into weather snapshots."""

    def __init__(self, client: OpenMeteoClient = None):
        """
        Initialize weather service.

        Args:
            client: Open-Meteo client (default: a new client from settings)
        """
        self.client = client or OpenMeteoClient()

    def fetch_forecast(self, lat: float, lon: float, imperial: bool) -> OpenMeteoWeather:
        """
        Fetch and validate the forecast payload.

        Raises:
            UpstreamUnavailableError: On failure, non-2xx status or unexpected shape
        """
        try:
            data = self.client.get_forecast(lat, lon, imperial=imperial)
        except httpx.HTTPStatusError as e:
            logger.error(f"Open-Meteo weather error: {e.response.text[:200]}")
            raise UpstreamUnavailableError(
                "Failed to fetch weather data from Open-Meteo",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Weather API error: {e}")
            raise UpstreamUnavailableError("Failed to fetch weather data") from e
        except ValueError as e:
            logger.error(f"Forecast response is not JSON: {e}")
            raise UpstreamUnavailableError(
                "Failed to fetch weather data", status_code=502
            ) from e

        try:
            return OpenMeteoWeather.model_validate(data)
        except ValidationError as e:
            logger.error(f"Unexpected forecast payload shape: {e}")
            raise UpstreamUnavailableError(
                "Failed to fetch weather data from Open-Meteo", status_code=502
            ) from e

    def fetch_air_quality(self, lat: float, lon: float) -> Optional[OpenMeteoAirQuality]:
        """Fetch current air quality; None when the provider fails in any way."""
        try:
            data = self.client.get_air_quality(lat, lon)
            return OpenMeteoAirQuality.model_validate(data)
        except httpx.HTTPError as e:
            logger.warning(f"Air quality unavailable for {lat},{lon}: {e}")
        except ValidationError as e:
            logger.warning(f"Unexpected air quality payload for {lat},{lon}: {e}")
        except ValueError as e:
            logger.warning(f"Air quality response is not JSON for {lat},{lon}: {e}")
        return None

    def get_snapshot(self, lat: float, lon: float, units: str = "metric") -> WeatherSnapshot:
        """
        Build the snapshot for a coordinate under a unit system.

        Args:
            lat: Latitude
            lon: Longitude
            units: "imperial" or anything else for metric

        Returns:
            Normalized weather snapshot

        Raises:
            UpstreamUnavailableError: If the forecast cannot be fetched
        """
        imperial = units == "imperial"
        logger.info(f"Fetching weather for {lat},{lon} ({'imperial' if imperial else 'metric'})")

        weather = self.fetch_forecast(lat, lon, imperial)
        air_quality = self.fetch_air_quality(lat, lon)

        return normalize_weather(weather, air_quality, lat, lon, imperial)


class GeocodingService:
    """City search and reverse geocoding."""

    def __init__(self, client: OpenMeteoClient = None, nominatim: NominatimClient = None):
        self.client = client or OpenMeteoClient()
        self.nominatim = nominatim or NominatimClient()

    def search(self, query: Optional[str]) -> List[CitySearchResult]:
        """
        Search cities by name.

        Queries shorter than the minimum length and provider errors
        yield an empty list.

        Raises:
            httpx.TransportError: If the provider cannot be reached
        """
        if not query or len(query) < settings.search_min_query_length:
            return []

        try:
            results = self.client.search_cities(query)
        except httpx.HTTPStatusError as e:
            logger.warning(f"City search failed with status {e.response.status_code}")
            return []

        return [
            CitySearchResult(
                name=item["name"],
                country=(item.get("country_code") or "").upper(),
                country_name=item.get("country") or "",
                state=item.get("admin1") or "",
                lat=item["latitude"],
                lon=item["longitude"],
            )
            for item in results
        ]

    def reverse(self, lat: float, lon: float) -> Tuple[GeocodeResult, bool]:
        """
        Name the place at a coordinate.

        Returns:
            Tuple of (result, resolved); resolved is False when the fallback
            "Unknown" result was returned
        """
        key = f"{lat:.2f},{lon:.2f}"
        if key in KNOWN_CITIES:
            return KNOWN_CITIES[key], True

        try:
            data = self.nominatim.reverse(lat, lon)
        except httpx.HTTPError as e:
            logger.warning(f"Reverse geocoding failed for {key}: {e}")
            return UNKNOWN_PLACE, False

        address = data.get("address") or {}
        return (
            GeocodeResult(
                name=NominatimClient.place_name(data) or "Unknown",
                country=(address.get("country_code") or "").upper(),
            ),
            True,
        )
