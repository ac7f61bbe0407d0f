"""In-process response caching with TTL."""

from typing import Any, Optional
from cachetools import TTLCache

from src.config import settings
from src.utils.logger import setup_logger

logger = setup_logger(__name__)


class MemoryCache:
    """In-memory TTL cache."""

    def __init__(self, maxsize: int = 1000, ttl_seconds: int = None):
        """Initialize memory cache."""
        self.ttl_seconds = ttl_seconds or settings.weather_cache_ttl_seconds
        self.cache = TTLCache(maxsize=maxsize, ttl=self.ttl_seconds)

    def get(self, key: str) -> Optional[Any]:
        """Get value from cache."""
        return self.cache.get(key)

    def set(self, key: str, value: Any) -> None:
        """Store value in cache."""
        self.cache[key] = value

    def clear(self) -> None:
        """Drop every cached entry."""
        logger.debug(f"Clearing {len(self.cache)} cached responses")
        self.cache.clear()

    def __len__(self) -> int:
        return len(self.cache)


# Shared caches: weather data goes stale in minutes, place names in days
weather_cache = MemoryCache()
geocode_cache = MemoryCache(ttl_seconds=settings.geocode_cache_ttl_seconds)
