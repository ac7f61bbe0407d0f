"""Pydantic schemas for upstream payloads and HTTP response bodies.

Open-Meteo payloads are validated at the boundary so that a shape change
upstream surfaces as an error instead of leaking missing fields into the
normalized snapshot.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

HOURLY_FIELDS = [
    "temperature_2m",
    "relative_humidity_2m",
    "apparent_temperature",
    "precipitation_probability",
    "precipitation",
    "weather_code",
    "cloud_cover",
    "wind_speed_10m",
    "wind_direction_10m",
    "visibility",
    "is_day",
]

DAILY_FIELDS = [
    "weather_code",
    "temperature_2m_max",
    "temperature_2m_min",
    "apparent_temperature_max",
    "apparent_temperature_min",
    "sunrise",
    "sunset",
    "precipitation_sum",
    "precipitation_probability_max",
    "wind_speed_10m_max",
]

CURRENT_FIELDS = [
    "temperature_2m",
    "relative_humidity_2m",
    "apparent_temperature",
    "is_day",
    "precipitation",
    "rain",
    "showers",
    "snowfall",
    "weather_code",
    "cloud_cover",
    "pressure_msl",
    "surface_pressure",
    "wind_speed_10m",
    "wind_direction_10m",
    "wind_gusts_10m",
]

AIR_QUALITY_FIELDS = [
    "european_aqi",
    "us_aqi",
    "pm10",
    "pm2_5",
    "carbon_monoxide",
    "nitrogen_dioxide",
    "sulphur_dioxide",
    "ozone",
    "ammonia",
]


class ProviderModel(BaseModel):
    """Upstream payloads carry more than we read; ignore the rest."""

    model_config = ConfigDict(extra="ignore")


class OpenMeteoCurrent(ProviderModel):
    time: str
    temperature_2m: float
    relative_humidity_2m: float
    apparent_temperature: float
    is_day: int
    weather_code: int
    pressure_msl: float
    wind_speed_10m: float
    wind_direction_10m: float
    precipitation: float = 0.0
    rain: float = 0.0
    showers: float = 0.0
    snowfall: float = 0.0
    cloud_cover: float = 0.0
    surface_pressure: Optional[float] = None
    wind_gusts_10m: Optional[float] = None


class OpenMeteoHourly(ProviderModel):
    """Parallel hourly arrays, all aligned by index to ``time``."""

    time: List[str]
    temperature_2m: List[Optional[float]]
    relative_humidity_2m: List[Optional[float]]
    apparent_temperature: List[Optional[float]]
    precipitation_probability: List[Optional[float]]
    precipitation: List[Optional[float]]
    weather_code: List[Optional[int]]
    cloud_cover: List[Optional[float]]
    wind_speed_10m: List[Optional[float]]
    wind_direction_10m: List[Optional[float]]
    visibility: List[Optional[float]]
    is_day: List[Optional[int]]

    @model_validator(mode="after")
    def check_aligned(self):
        expected = len(self.time)
        for name in HOURLY_FIELDS:
            if len(getattr(self, name)) != expected:
                raise ValueError(
                    f"hourly.{name} has {len(getattr(self, name))} values, expected {expected}"
                )
        return self


class OpenMeteoDaily(ProviderModel):
    time: List[str] = Field(min_length=1)
    weather_code: List[Optional[int]] = Field(default_factory=list)
    temperature_2m_max: List[float] = Field(min_length=1)
    temperature_2m_min: List[float] = Field(min_length=1)
    apparent_temperature_max: List[Optional[float]] = Field(default_factory=list)
    apparent_temperature_min: List[Optional[float]] = Field(default_factory=list)
    sunrise: List[str] = Field(min_length=1)
    sunset: List[str] = Field(min_length=1)
    precipitation_sum: List[Optional[float]] = Field(default_factory=list)
    precipitation_probability_max: List[Optional[float]] = Field(default_factory=list)
    wind_speed_10m_max: List[Optional[float]] = Field(default_factory=list)


class OpenMeteoWeather(ProviderModel):
    """Forecast API response for ``current``, ``hourly`` and ``daily`` blocks."""

    latitude: Optional[float] = None
    longitude: Optional[float] = None
    timezone: str = "GMT"
    timezone_abbreviation: Optional[str] = None
    utc_offset_seconds: int = 0
    current: OpenMeteoCurrent
    hourly: OpenMeteoHourly
    daily: OpenMeteoDaily


class OpenMeteoAirQualityCurrent(ProviderModel):
    time: Optional[str] = None
    european_aqi: Optional[float] = None
    us_aqi: Optional[float] = None
    pm10: Optional[float] = None
    pm2_5: Optional[float] = None
    carbon_monoxide: Optional[float] = None
    nitrogen_dioxide: Optional[float] = None
    sulphur_dioxide: Optional[float] = None
    ozone: Optional[float] = None
    ammonia: Optional[float] = None


class OpenMeteoAirQuality(ProviderModel):
    current: OpenMeteoAirQualityCurrent


class CitySearchResult(BaseModel):
    """Body item of ``GET /api/search``."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    country: str = ""
    country_name: str = Field(default="", alias="countryName")
    state: str = ""
    lat: float
    lon: float


class GeocodeResult(BaseModel):
    """Body of ``GET /api/geocode``."""

    name: str = "Unknown"
    country: str = ""


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str
    version: str
