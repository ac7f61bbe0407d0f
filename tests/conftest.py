"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone

import pytest

from src.data.models import CityInfo, SearchResult
from src.utils.cache import geocode_cache, weather_cache

START = datetime(2024, 6, 1, 0, 0)
# 05:30 local: the current hour sample is 05:00 (index 5)
NOW_OFFSET = timedelta(hours=5, minutes=30)


def epoch(local: datetime, utc_offset: int = 0) -> int:
    """Epoch seconds of a location-local naive datetime."""
    return int(local.replace(tzinfo=timezone.utc).timestamp()) - utc_offset


def build_weather_payload(
    hours: int = 72,
    utc_offset: int = 0,
    weather_code: int = 61,
    is_day: int = 0,
    wind_speed: float = 18.0,
    wind_gusts: float = 36.0,
    temperature: float = 20.0,
    humidity: float = 50.0,
    rain: float = 0.4,
    snowfall: float = 0.0,
):
    """Open-Meteo forecast payload with hourly values derived from the hour index."""
    times = [START + timedelta(hours=i) for i in range(hours)]
    return {
        "latitude": 51.5,
        "longitude": -0.125,
        "timezone": "Europe/London",
        "timezone_abbreviation": "BST",
        "utc_offset_seconds": utc_offset,
        "current": {
            "time": (START + NOW_OFFSET).strftime("%Y-%m-%dT%H:%M"),
            "temperature_2m": temperature,
            "relative_humidity_2m": humidity,
            "apparent_temperature": temperature - 1,
            "is_day": is_day,
            "precipitation": rain,
            "rain": rain,
            "showers": 0.0,
            "snowfall": snowfall,
            "weather_code": weather_code,
            "cloud_cover": 90,
            "pressure_msl": 1012.5,
            "surface_pressure": 1008.4,
            "wind_speed_10m": wind_speed,
            "wind_direction_10m": 200,
            "wind_gusts_10m": wind_gusts,
        },
        "hourly": {
            "time": [t.strftime("%Y-%m-%dT%H:%M") for t in times],
            "temperature_2m": [float(i) for i in range(hours)],
            "relative_humidity_2m": [60] * hours,
            "apparent_temperature": [float(i) - 2 for i in range(hours)],
            "precipitation_probability": [i % 100 for i in range(hours)],
            "precipitation": [0.5 if i % 2 else 0.0 for i in range(hours)],
            "weather_code": [3] * hours,
            "cloud_cover": [75] * hours,
            "wind_speed_10m": [36.0] * hours,
            "wind_direction_10m": [90] * hours,
            "visibility": [24000.0] * hours,
            "is_day": [1 if 6 <= t.hour < 21 else 0 for t in times],
        },
        "daily": {
            "time": ["2024-06-01", "2024-06-02", "2024-06-03"],
            "weather_code": [61, 3, 0],
            "temperature_2m_max": [24.0, 22.0, 25.0],
            "temperature_2m_min": [12.0, 11.0, 13.0],
            "apparent_temperature_max": [23.0, 21.0, 24.0],
            "apparent_temperature_min": [11.0, 10.0, 12.0],
            "sunrise": ["2024-06-01T04:45", "2024-06-02T04:44", "2024-06-03T04:44"],
            "sunset": ["2024-06-01T21:15", "2024-06-02T21:16", "2024-06-03T21:17"],
            "precipitation_sum": [2.1, 0.0, 0.0],
            "precipitation_probability_max": [80, 10, 0],
            "wind_speed_10m_max": [30.0, 20.0, 15.0],
        },
    }


@pytest.fixture(autouse=True)
def clear_response_caches():
    """Upstream responses are cached process-wide; isolate every test."""
    weather_cache.clear()
    geocode_cache.clear()
    yield
    weather_cache.clear()
    geocode_cache.clear()


@pytest.fixture
def now():
    """Fixed wall clock, 05:30 on the first forecast day (UTC location)."""
    return epoch(START + NOW_OFFSET)


@pytest.fixture
def weather_payload():
    """Open-Meteo forecast payload (slight rain at night)."""
    return build_weather_payload()


@pytest.fixture
def make_weather_payload():
    """Factory for customised forecast payloads."""
    return build_weather_payload


@pytest.fixture
def air_quality_payload():
    """Open-Meteo air quality payload."""
    return {
        "latitude": 51.5,
        "longitude": -0.125,
        "current": {
            "time": "2024-06-01T05:00",
            "european_aqi": 55,
            "us_aqi": 80,
            "pm10": 20.1,
            "pm2_5": 12.3,
            "carbon_monoxide": 250.0,
            "nitrogen_dioxide": 18.2,
            "sulphur_dioxide": 3.1,
            "ozone": 60.5,
            "ammonia": 1.2,
        },
    }


@pytest.fixture
def sample_city():
    """Sample city for testing."""
    return CityInfo(name="London", country="GB", lat=51.5074, lon=-0.1278)


@pytest.fixture
def paris_result():
    """Search result far from every default city."""
    return SearchResult(
        name="Paris",
        country="FR",
        country_name="France",
        state="Île-de-France",
        lat=48.8566,
        lon=2.3522,
    )
