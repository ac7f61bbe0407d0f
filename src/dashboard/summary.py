"""View model a renderer needs for one dashboard screen."""

from dataclasses import dataclass, field
from typing import List, Optional

from src.dashboard.forecasts import daily_forecasts, hourly_forecasts
from src.dashboard.formatting import (
    aqi_label,
    celsius_to_fahrenheit,
    dew_point,
    fahrenheit_to_celsius,
    sun_position,
)
from src.dashboard.theme import DEFAULT_THEME, ThemeColors, theme_for_snapshot
from src.data.models import UnitSystem
from src.data.snapshot import ForecastItem, WeatherSnapshot
from src.utils.numeric import round_half_up


@dataclass
class DashboardSummary:
    hourly: List[ForecastItem] = field(default_factory=list)
    daily: List[ForecastItem] = field(default_factory=list)
    aqi_label: str = "N/A"
    aqi_color: str = "#64748b"
    sun_position: float = 0.0
    dew_point: int = 0
    temp_range_min: float = 0.0
    temp_range_span: float = 1.0
    theme: ThemeColors = DEFAULT_THEME


def build_summary(snapshot: Optional[WeatherSnapshot], unit: UnitSystem) -> DashboardSummary:
    """
    Derive everything shown around the current conditions.

    Args:
        snapshot: Snapshot of the active city, None while loading
        unit: Unit system the snapshot was fetched in

    Returns:
        Dashboard summary (placeholder values when there is no snapshot)
    """
    if snapshot is None:
        return DashboardSummary()

    current = snapshot.current
    forecast = snapshot.forecast

    hourly = snapshot.hourly_detailed or hourly_forecasts(forecast.list, 8)
    daily = daily_forecasts(forecast.list, forecast.city.timezone)

    if snapshot.air_quality.list:
        label, color = aqi_label(snapshot.air_quality.list[0].main.aqi)
    else:
        label, color = "N/A", "#64748b"

    # Magnus formula works in °C
    temp_c = current.main.temp
    if unit == "imperial":
        temp_c = fahrenheit_to_celsius(temp_c)
    dew = dew_point(temp_c, current.main.humidity)
    if unit == "imperial":
        dew = round_half_up(celsius_to_fahrenheit(dew))

    temps = [t for item in daily for t in (item.main.temp_min, item.main.temp_max)]
    low = min(temps) if temps else 0.0
    high = max(temps) if temps else 0.0

    return DashboardSummary(
        hourly=hourly,
        daily=daily,
        aqi_label=label,
        aqi_color=color,
        sun_position=sun_position(current.sys.sunrise, current.sys.sunset, current.dt),
        dew_point=dew,
        temp_range_min=low,
        temp_range_span=max(1.0, high - low),
        theme=theme_for_snapshot(snapshot, unit),
    )
