"""Normalization of Open-Meteo payloads into weather snapshots.

Everything here is a pure function of its arguments: no I/O, no shared
state, safe to call from any thread.
"""

import time
from datetime import datetime, timezone
from typing import Any, List, Optional, Sequence, Union

from src.api.schemas import OpenMeteoAirQuality, OpenMeteoWeather
from src.data.snapshot import (
    Accumulation,
    AirQuality,
    AirQualityComponents,
    AirQualityItem,
    AirQualityMain,
    Clouds,
    Condition,
    Coord,
    CurrentMain,
    CurrentWeather,
    Forecast,
    ForecastCity,
    ForecastItem,
    ForecastMain,
    Sys,
    WeatherSnapshot,
    Wind,
)
from src.data.wmo_codes import (
    get_wmo_description,
    get_wmo_icon,
    get_wmo_main,
    get_wmo_weather_id,
)
from src.utils.numeric import round_half_up

KMH_PER_MS = 3.6
DEFAULT_VISIBILITY_M = 10000
FORECAST_HORIZON_HOURS = 48
FORECAST_STEP_HOURS = 3
DETAILED_HOURS = 9

# Upper bounds of European AQI bands 1..4; anything above is band 5
EUROPEAN_AQI_THRESHOLDS = (20, 40, 60, 80)


def parse_local_time(value: str, utc_offset_seconds: int = 0) -> int:
    """
    Convert an Open-Meteo local timestamp to epoch seconds.

    Requests use ``timezone=auto`` so times come back as location-local
    ISO strings without an offset (``2024-01-01T14:00``).

    Args:
        value: Local ISO timestamp
        utc_offset_seconds: Offset of the location from UTC

    Returns:
        Epoch seconds (UTC)
    """
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        return int(parsed.replace(tzinfo=timezone.utc).timestamp()) - utc_offset_seconds
    return int(parsed.timestamp())


def current_hour_index(
    times: Sequence[str], utc_offset_seconds: int = 0, now: Optional[float] = None
) -> int:
    """
    Find the hourly sample covering the current hour.

    The index is one before the first sample at or after ``now``, clamped to
    zero; zero as well when every sample lies in the past.
    """
    if now is None:
        now = time.time()
    for i, value in enumerate(times):
        if parse_local_time(value, utc_offset_seconds) >= now:
            return max(0, i - 1)
    return 0


def convert_wind_speed(speed: Optional[float], is_imperial: bool) -> Optional[float]:
    """Wind arrives in km/h for metric requests (stored as m/s) and mph for imperial."""
    if speed is None:
        return None
    if is_imperial:
        return speed
    return speed / KMH_PER_MS


def map_european_aqi(eaqi: Optional[float]) -> int:
    """Bucket a European AQI value into the 1 (good) .. 5 (very poor) scale."""
    if eaqi is None:
        return 1
    for category, upper in enumerate(EUROPEAN_AQI_THRESHOLDS, start=1):
        if eaqi <= upper:
            return category
    return 5


def build_condition(code: Optional[int], is_day: bool) -> Condition:
    """Map a WMO code to the single condition entry of a sample."""
    code = code if code is not None else -1
    return Condition(
        id=get_wmo_weather_id(code),
        main=get_wmo_main(code),
        description=get_wmo_description(code).lower(),
        icon=get_wmo_icon(code, is_day),
    )


def _at(series: List[Any], index: int, default: Any = 0) -> Any:
    value = series[index] if index < len(series) else None
    return default if value is None else value


def _build_forecast_item(
    weather: OpenMeteoWeather, index: int, is_imperial: bool
) -> ForecastItem:
    hourly = weather.hourly
    local_time = hourly.time[index]
    temp = _at(hourly.temperature_2m, index)
    precipitation = _at(hourly.precipitation, index)

    return ForecastItem(
        dt=parse_local_time(local_time, weather.utc_offset_seconds),
        main=ForecastMain(
            temp=temp,
            feels_like=_at(hourly.apparent_temperature, index, temp),
            # No 3-hour extremes upstream: a +/-1 degree band stands in
            temp_min=temp - 1,
            temp_max=temp + 1,
            pressure=round_half_up(weather.current.pressure_msl),
            humidity=_at(hourly.relative_humidity_2m, index),
        ),
        weather=[
            build_condition(
                _at(hourly.weather_code, index, None),
                _at(hourly.is_day, index) == 1,
            )
        ],
        clouds=Clouds(all=_at(hourly.cloud_cover, index)),
        wind=Wind(
            speed=convert_wind_speed(_at(hourly.wind_speed_10m, index), is_imperial),
            deg=_at(hourly.wind_direction_10m, index),
        ),
        visibility=_at(hourly.visibility, index) or DEFAULT_VISIBILITY_M,
        pop=_at(hourly.precipitation_probability, index) / 100,
        rain=Accumulation(three_hour=precipitation) if precipitation > 0 else None,
        dt_txt=local_time.replace("T", " ") + ":00",
    )


def build_forecast_items(
    weather: OpenMeteoWeather,
    start: int,
    hours: int,
    step: int,
    is_imperial: bool,
) -> List[ForecastItem]:
    """Sample the hourly series from ``start`` every ``step`` hours for ``hours`` hours."""
    end = min(len(weather.hourly.time), start + hours)
    return [
        _build_forecast_item(weather, i, is_imperial) for i in range(start, end, step)
    ]


def build_air_quality(
    air_quality: Optional[OpenMeteoAirQuality], lat: float, lon: float, dt: int
) -> AirQuality:
    """Air quality block; a missing reading yields zeros and category 1."""
    reading = air_quality.current if air_quality is not None else None

    def component(name: str) -> float:
        if reading is None:
            return 0
        return getattr(reading, name) or 0

    return AirQuality(
        coord=Coord(lon=lon, lat=lat),
        list=[
            AirQualityItem(
                main=AirQualityMain(
                    aqi=map_european_aqi(reading.european_aqi if reading else None)
                ),
                components=AirQualityComponents(
                    co=component("carbon_monoxide"),
                    no=0,
                    no2=component("nitrogen_dioxide"),
                    o3=component("ozone"),
                    so2=component("sulphur_dioxide"),
                    pm2_5=component("pm2_5"),
                    pm10=component("pm10"),
                    nh3=component("ammonia"),
                ),
                dt=dt,
            )
        ],
    )


def normalize_weather(
    weather: Union[OpenMeteoWeather, dict],
    air_quality: Union[OpenMeteoAirQuality, dict, None],
    lat: float,
    lon: float,
    is_imperial: bool,
    now: Optional[float] = None,
) -> WeatherSnapshot:
    """
    Transform Open-Meteo forecast and air quality payloads into a snapshot.

    Args:
        weather: Forecast API payload (current, hourly and daily blocks)
        air_quality: Air quality API payload, or None when unavailable
        lat: Requested latitude
        lon: Requested longitude
        is_imperial: Whether the payload was requested in imperial units
        now: Epoch seconds used to locate the current hour (default: wall clock)

    Returns:
        Normalized weather snapshot
    """
    if not isinstance(weather, OpenMeteoWeather):
        weather = OpenMeteoWeather.model_validate(weather)
    if air_quality is not None and not isinstance(air_quality, OpenMeteoAirQuality):
        air_quality = OpenMeteoAirQuality.model_validate(air_quality)

    offset = weather.utc_offset_seconds
    current = weather.current
    daily = weather.daily

    dt = parse_local_time(current.time, offset)
    sunrise = parse_local_time(daily.sunrise[0], offset)
    sunset = parse_local_time(daily.sunset[0], offset)
    start = current_hour_index(weather.hourly.time, offset, now)

    current_weather = CurrentWeather(
        coord=Coord(lon=lon, lat=lat),
        weather=[build_condition(current.weather_code, current.is_day == 1)],
        main=CurrentMain(
            temp=current.temperature_2m,
            feels_like=current.apparent_temperature,
            temp_min=daily.temperature_2m_min[0],
            temp_max=daily.temperature_2m_max[0],
            pressure=round_half_up(current.pressure_msl),
            humidity=current.relative_humidity_2m,
            sea_level=round_half_up(current.pressure_msl),
            grnd_level=(
                round_half_up(current.surface_pressure)
                if current.surface_pressure is not None
                else None
            ),
        ),
        visibility=_at(weather.hourly.visibility, start) or DEFAULT_VISIBILITY_M,
        wind=Wind(
            speed=convert_wind_speed(current.wind_speed_10m, is_imperial),
            deg=current.wind_direction_10m,
            gust=convert_wind_speed(current.wind_gusts_10m, is_imperial),
        ),
        clouds=Clouds(all=current.cloud_cover),
        rain=Accumulation(one_hour=current.rain) if current.rain > 0 else None,
        snow=Accumulation(one_hour=current.snowfall) if current.snowfall > 0 else None,
        dt=dt,
        sys=Sys(type=2, id=0, country="", sunrise=sunrise, sunset=sunset),
        timezone=offset,
    )

    forecast_list = build_forecast_items(
        weather, start, FORECAST_HORIZON_HOURS, FORECAST_STEP_HOURS, is_imperial
    )
    forecast = Forecast(
        cnt=len(forecast_list),
        list=forecast_list,
        city=ForecastCity(
            coord=Coord(lat=lat, lon=lon),
            timezone=offset,
            sunrise=sunrise,
            sunset=sunset,
        ),
    )

    return WeatherSnapshot(
        current=current_weather,
        forecast=forecast,
        air_quality=build_air_quality(air_quality, lat, lon, dt),
        hourly_detailed=build_forecast_items(
            weather, start, DETAILED_HOURS, 1, is_imperial
        ),
    )
