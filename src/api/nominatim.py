"""Nominatim (OpenStreetMap) reverse geocoding client."""

import hashlib
from typing import Any, Dict, Optional

import httpx
from src.config import settings
from src.utils.cache import geocode_cache
from src.utils.logger import setup_logger
from src.utils.rate_limiter import RateLimiter

logger = setup_logger(__name__)


class NominatimClient:
    """Client for the Nominatim reverse geocoding API."""

    def __init__(
        self,
        base_url: str = None,
        user_agent: str = None,
        rate_limit: int = None,
    ):
        """
        Initialize Nominatim client.

        Args:
            base_url: API base URL
            user_agent: Identifying User-Agent, required by the usage policy
            rate_limit: Requests per minute limit
        """
        self.base_url = base_url or settings.nominatim_base_url
        self.rate_limiter = RateLimiter(
            max_requests=rate_limit or settings.nominatim_rate_limit, time_window=60
        )

        self.client = httpx.Client(
            base_url=self.base_url,
            headers={
                "Accept": "application/json",
                "User-Agent": user_agent or settings.nominatim_user_agent,
            },
            timeout=httpx.Timeout(settings.request_timeout_seconds),
        )

    def reverse(self, latitude: float, longitude: float, zoom: int = 10) -> Dict[str, Any]:
        """
        Look up the place at a coordinate.

        Args:
            latitude: Latitude coordinate
            longitude: Longitude coordinate
            zoom: Address detail level (10 = city)

        Returns:
            Raw Nominatim response

        Raises:
            httpx.HTTPError: On transport failure or non-2xx status
        """
        params = {"lat": latitude, "lon": longitude, "format": "json", "zoom": zoom}
        cache_key = hashlib.md5(f"reverse:{str(params)}".encode()).hexdigest()

        cached_response = geocode_cache.get(cache_key)
        if cached_response is not None:
            logger.debug(f"Cache hit for reverse geocode {latitude},{longitude}")
            return cached_response

        self.rate_limiter.wait_if_needed()
        response = self.client.get("/reverse", params=params)
        response.raise_for_status()
        result = response.json()

        geocode_cache.set(cache_key, result)
        return result

    @staticmethod
    def place_name(data: Dict[str, Any]) -> Optional[str]:
        """Most specific settlement name in a reverse geocoding response."""
        address = data.get("address") or {}
        return (
            address.get("city")
            or address.get("town")
            or address.get("village")
            or data.get("name")
        )

    def close(self):
        """Close HTTP client."""
        self.client.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
