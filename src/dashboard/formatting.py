"""Display helpers for weather values."""

import math
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from src.data.models import UnitSystem
from src.utils.numeric import round_half_up

COMPASS_POINTS = [
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
]

AQI_LABELS = {
    1: ("Good", "#22c55e"),
    2: ("Fair", "#eab308"),
    3: ("Moderate", "#f97316"),
    4: ("Poor", "#ef4444"),
    5: ("Very Poor", "#7c3aed"),
}
UNKNOWN_LABEL = ("Unknown", "#64748b")

METERS_PER_MILE = 1609.34

# Magnus formula coefficients
MAGNUS_A = 17.27
MAGNUS_B = 237.7


def _local(timestamp: int, utc_offset: int = 0) -> datetime:
    return datetime.fromtimestamp(timestamp + utc_offset, tz=timezone.utc)


def format_temp(temp: float, unit: UnitSystem) -> str:
    return f"{round_half_up(temp)}°{'C' if unit == 'metric' else 'F'}"


def format_temp_short(temp: float) -> str:
    return f"{round_half_up(temp)}°"


def format_hour(hour: int) -> str:
    """12-hour clock label for an hour of day, e.g. ``3 PM``."""
    return f"{hour % 12 or 12} {'AM' if hour < 12 else 'PM'}"


def format_time(timestamp: int, utc_offset: int) -> str:
    """Local wall-clock time at the city, e.g. ``6:42 AM``."""
    local = _local(timestamp, utc_offset)
    hour, suffix = format_hour(local.hour).split()
    return f"{hour}:{local.minute:02d} {suffix}"


def format_date(timestamp: int, utc_offset: int) -> str:
    """Local date at the city, e.g. ``Monday, January 1``."""
    local = _local(timestamp, utc_offset)
    return f"{local:%A}, {local:%B} {local.day}"


def format_day(timestamp: int, utc_offset: int = 0, now: Optional[float] = None) -> str:
    """``Today``, ``Tomorrow`` or the abbreviated weekday."""
    if now is None:
        now = datetime.now(timezone.utc).timestamp()
    day = _local(timestamp, utc_offset).date()
    today = _local(int(now), utc_offset).date()

    if day == today:
        return "Today"
    if day == today + timedelta(days=1):
        return "Tomorrow"
    return f"{day:%a}"


def wind_direction(deg: float) -> str:
    return COMPASS_POINTS[round_half_up(deg / 22.5) % 16]


def wind_speed_label(speed: float, unit: UnitSystem) -> str:
    """Metric snapshots store m/s; the dashboard shows km/h."""
    if unit == "imperial":
        return f"{round_half_up(speed)} mph"
    return f"{round_half_up(speed * 3.6)} km/h"


def visibility_label(visibility: float, unit: UnitSystem) -> str:
    if unit == "imperial":
        return f"{visibility / METERS_PER_MILE:.1f} mi"
    if visibility >= 1000:
        return f"{visibility / 1000:.1f} km"
    return f"{visibility:g} m"


def aqi_label(aqi: int) -> Tuple[str, str]:
    """Label and color of an air quality category."""
    return AQI_LABELS.get(aqi, UNKNOWN_LABEL)


def uv_label(uv: float) -> Tuple[str, str]:
    if uv <= 2:
        return ("Low", "#22c55e")
    if uv <= 5:
        return ("Moderate", "#eab308")
    if uv <= 7:
        return ("High", "#f97316")
    if uv <= 10:
        return ("Very High", "#ef4444")
    return ("Extreme", "#7c3aed")


def weather_icon_url(icon: str) -> str:
    return f"https://openweathermap.org/img/wn/{icon}@2x.png"


def sun_position(sunrise: int, sunset: int, current: int) -> float:
    """Progress of the sun between sunrise and sunset, in percent."""
    if current < sunrise:
        return 0.0
    if current > sunset:
        return 100.0
    total = sunset - sunrise
    if total <= 0:
        return 0.0
    return min(100.0, max(0.0, (current - sunrise) / total * 100))


def pressure_trend(pressure: float) -> str:
    if pressure >= 1020:
        return "High"
    if pressure >= 1013:
        return "Normal"
    if pressure >= 1000:
        return "Low"
    return "Very Low"


def dew_point(temp: float, humidity: float) -> int:
    """Dew point in °C from temperature (°C) and relative humidity (%)."""
    humidity = max(humidity, 1)  # log(0) is undefined
    alpha = (MAGNUS_A * temp) / (MAGNUS_B + temp) + math.log(humidity / 100)
    return round_half_up((MAGNUS_B * alpha) / (MAGNUS_A - alpha))


def fahrenheit_to_celsius(temp: float) -> float:
    return (temp - 32) * 5 / 9


def celsius_to_fahrenheit(temp: float) -> float:
    return temp * 9 / 5 + 32
