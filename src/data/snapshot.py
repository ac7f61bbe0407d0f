"""Normalized weather snapshot.

Field names and nesting follow the OpenWeatherMap response shapes
(current weather, 5 day / 3 hour forecast, air pollution) so any renderer
written against that API can consume a snapshot unchanged. Precipitation
accumulations keep their literal ``"1h"`` / ``"3h"`` keys.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SnapshotModel(BaseModel):
    """Base for snapshot parts: immutable, populated by name or alias."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Coord(SnapshotModel):
    lon: float
    lat: float


class Condition(SnapshotModel):
    """One weather condition; snapshots always carry exactly one."""

    id: int
    main: str
    description: str
    icon: str


class CurrentMain(SnapshotModel):
    temp: float
    feels_like: float
    temp_min: float
    temp_max: float
    pressure: int
    humidity: float
    sea_level: Optional[int] = None
    grnd_level: Optional[int] = None


class Wind(SnapshotModel):
    speed: float
    deg: float
    gust: Optional[float] = None


class Clouds(SnapshotModel):
    all: float


class Accumulation(SnapshotModel):
    """Rain or snow amount in mm over the last hour or three hours."""

    one_hour: Optional[float] = Field(default=None, alias="1h")
    three_hour: Optional[float] = Field(default=None, alias="3h")


class Sys(SnapshotModel):
    type: Optional[int] = None
    id: Optional[int] = None
    country: str = ""
    sunrise: int
    sunset: int


class CurrentWeather(SnapshotModel):
    coord: Coord
    weather: List[Condition] = Field(min_length=1)
    base: str = "open-meteo"
    main: CurrentMain
    visibility: float
    wind: Wind
    clouds: Clouds
    rain: Optional[Accumulation] = None
    snow: Optional[Accumulation] = None
    dt: int
    sys: Sys
    timezone: int
    id: int = 0
    name: str = ""
    cod: int = 200


class ForecastMain(SnapshotModel):
    temp: float
    feels_like: float
    temp_min: float
    temp_max: float
    pressure: int
    humidity: float


class ForecastItem(SnapshotModel):
    dt: int
    main: ForecastMain
    weather: List[Condition] = Field(min_length=1)
    clouds: Clouds
    wind: Wind
    visibility: float
    pop: float = Field(ge=0, le=1)
    rain: Optional[Accumulation] = None
    snow: Optional[Accumulation] = None
    dt_txt: str


class ForecastCity(SnapshotModel):
    id: int = 0
    name: str = ""
    coord: Coord
    country: str = ""
    population: int = 0
    timezone: int
    sunrise: int
    sunset: int


class Forecast(SnapshotModel):
    cod: str = "200"
    message: int = 0
    cnt: int
    list: List[ForecastItem]
    city: ForecastCity


class AirQualityComponents(SnapshotModel):
    """Pollutant concentrations in μg/m³; ``no`` is never reported."""

    co: float = 0
    no: float = 0
    no2: float = 0
    o3: float = 0
    so2: float = 0
    pm2_5: float = 0
    pm10: float = 0
    nh3: float = 0


class AirQualityMain(SnapshotModel):
    aqi: int = Field(ge=1, le=5)


class AirQualityItem(SnapshotModel):
    main: AirQualityMain
    components: AirQualityComponents
    dt: int


class AirQuality(SnapshotModel):
    coord: Coord
    list: List[AirQualityItem]


class WeatherSnapshot(SnapshotModel):
    """Everything the dashboard shows for one city under one unit system."""

    current: CurrentWeather
    forecast: Forecast
    air_quality: AirQuality = Field(alias="airQuality")
    hourly_detailed: List[ForecastItem] = Field(
        default_factory=list, alias="hourlyDetailed"
    )

    def to_response(self) -> dict:
        """Serialize with the wire field names, omitting absent optionals."""
        return self.model_dump(by_alias=True, exclude_none=True)
