"""Data models for cities, search results and unit systems."""

from dataclasses import dataclass
from typing import Literal, Optional, Tuple

UnitSystem = Literal["metric", "imperial"]

# Two places closer than this in both axes are the same city
PROXIMITY_DEGREES = 0.01

CacheKey = Tuple[float, float, str]


@dataclass(frozen=True)
class CityInfo:
    """A tracked city."""

    name: str
    country: str
    lat: float
    lon: float
    state: Optional[str] = None

    def __post_init__(self):
        """Validate city data."""
        if not -90 <= self.lat <= 90:
            raise ValueError(f"Invalid latitude: {self.lat}")
        if not -180 <= self.lon <= 180:
            raise ValueError(f"Invalid longitude: {self.lon}")

    def is_near(self, lat: float, lon: float) -> bool:
        """Check whether a coordinate pair falls on this city."""
        return (
            abs(self.lat - lat) < PROXIMITY_DEGREES
            and abs(self.lon - lon) < PROXIMITY_DEGREES
        )


@dataclass(frozen=True)
class SearchResult:
    """One ranked match from the city search endpoint."""

    name: str
    country: str
    lat: float
    lon: float
    country_name: str = ""
    state: str = ""

    def to_city(self) -> CityInfo:
        """Convert to a trackable city."""
        return CityInfo(
            name=self.name,
            country=self.country,
            lat=self.lat,
            lon=self.lon,
            state=self.state or None,
        )


def cache_key(city: CityInfo, unit: UnitSystem) -> CacheKey:
    """Key of one cached snapshot: a city under a unit system."""
    return (city.lat, city.lon, unit)


DEFAULT_CITIES = [
    CityInfo(name="London", country="GB", lat=51.5074, lon=-0.1278),
    CityInfo(name="New York", country="US", lat=40.7128, lon=-74.006),
    CityInfo(name="Tokyo", country="JP", lat=35.6762, lon=139.6503),
    CityInfo(name="Mumbai", country="IN", lat=19.076, lon=72.8777),
    CityInfo(name="Dubai", country="AE", lat=25.2048, lon=55.2708),
]


def get_city_by_name(name: str) -> Optional[CityInfo]:
    """Get a default city by name."""
    for city in DEFAULT_CITIES:
        if city.name.lower() == name.lower():
            return city
    return None
