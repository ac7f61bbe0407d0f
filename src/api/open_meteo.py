"""Open-Meteo API client for forecasts, air quality and city search."""

import hashlib
from typing import Any, Dict, List

import httpx
from src.api.schemas import (
    AIR_QUALITY_FIELDS,
    CURRENT_FIELDS,
    DAILY_FIELDS,
    HOURLY_FIELDS,
)
from src.config import settings
from src.utils.cache import MemoryCache, geocode_cache, weather_cache
from src.utils.logger import setup_logger

logger = setup_logger(__name__)


class OpenMeteoClient:
    """Client for the Open-Meteo forecast, air quality and geocoding APIs."""

    def __init__(
        self,
        base_url: str = None,
        air_quality_url: str = None,
        geocoding_url: str = None,
        timeout: float = None,
    ):
        """
        Initialize Open-Meteo client.

        Args:
            base_url: Forecast API base URL
            air_quality_url: Air quality API base URL
            geocoding_url: Geocoding API base URL
            timeout: Request timeout in seconds
        """
        self.base_url = base_url or settings.open_meteo_base_url
        self.air_quality_url = air_quality_url or settings.air_quality_base_url
        self.geocoding_url = geocoding_url or settings.geocoding_base_url

        timeout = httpx.Timeout(timeout or settings.request_timeout_seconds)
        self.client = httpx.Client(
            headers={"Accept": "application/json"},
            timeout=timeout,
        )

    def _make_request(
        self, url: str, params: Dict[str, Any], cache: MemoryCache
    ) -> Any:
        """Make HTTP GET request, serving repeated requests from cache.

        Raises:
            httpx.HTTPError: On transport failure or non-2xx status
        """
        cache_key = hashlib.md5(f"{url}:{str(params)}".encode()).hexdigest()

        cached_response = cache.get(cache_key)
        if cached_response is not None:
            logger.debug(f"Cache hit for {url}")
            return cached_response

        try:
            logger.debug(f"Making request to {url} with params: {params}")
            response = self.client.get(url, params=params)
            response.raise_for_status()
            result = response.json()
        except httpx.TimeoutException as e:
            logger.error(f"Timeout error for {url}: {e}")
            raise
        except httpx.HTTPStatusError as e:
            logger.error(
                f"HTTP error for {url}: {e.response.status_code} - {e.response.text[:200]}"
            )
            raise

        cache.set(cache_key, result)
        return result

    def get_forecast(
        self,
        latitude: float,
        longitude: float,
        imperial: bool = False,
        forecast_days: int = None,
    ) -> Dict[str, Any]:
        """
        Get current conditions plus hourly and daily forecast.

        Args:
            latitude: Latitude coordinate
            longitude: Longitude coordinate
            imperial: Request Fahrenheit and mph instead of Celsius and km/h
            forecast_days: Number of days to forecast

        Returns:
            Forecast data dictionary
        """
        params = {
            "latitude": latitude,
            "longitude": longitude,
            "current": ",".join(CURRENT_FIELDS),
            "hourly": ",".join(HOURLY_FIELDS),
            "daily": ",".join(DAILY_FIELDS),
            "temperature_unit": "fahrenheit" if imperial else "celsius",
            "wind_speed_unit": "mph" if imperial else "kmh",
            "precipitation_unit": "mm",
            "timezone": "auto",
            "forecast_days": forecast_days or settings.forecast_days,
        }

        return self._make_request(f"{self.base_url}/forecast", params, weather_cache)

    def get_air_quality(self, latitude: float, longitude: float) -> Dict[str, Any]:
        """
        Get current air quality (European/US AQI and pollutant concentrations).

        Args:
            latitude: Latitude coordinate
            longitude: Longitude coordinate

        Returns:
            Air quality data dictionary
        """
        params = {
            "latitude": latitude,
            "longitude": longitude,
            "current": ",".join(AIR_QUALITY_FIELDS),
        }

        return self._make_request(
            f"{self.air_quality_url}/air-quality", params, weather_cache
        )

    def search_cities(
        self, name: str, count: int = None, language: str = "en"
    ) -> List[Dict[str, Any]]:
        """
        Search places by name.

        Args:
            name: Free-text place name
            count: Maximum number of ranked matches
            language: Language of returned names

        Returns:
            List of raw geocoding results (empty when nothing matches)
        """
        params = {
            "name": name,
            "count": count or settings.search_result_count,
            "language": language,
            "format": "json",
        }

        data = self._make_request(f"{self.geocoding_url}/search", params, geocode_cache)
        return data.get("results") or []

    def close(self):
        """Close HTTP client."""
        self.client.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
