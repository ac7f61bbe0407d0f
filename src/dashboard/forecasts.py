"""Forecast selection and chart series for the dashboard."""

from typing import List, Sequence

import pandas as pd

from src.dashboard.formatting import format_hour
from src.data.snapshot import ForecastItem
from src.utils.numeric import round_half_up

CHART_POINTS = 12
DAILY_DAYS = 5
MIDDAY_HOURS = (11, 14)

# Bar colors by precipitation chance, highest threshold first
CHANCE_COLORS = [
    (80, "#3b82f6"),
    (60, "#06b6d4"),
    (40, "#22c55e"),
    (20, "#eab308"),
]
DEFAULT_CHANCE_COLOR = "#64748b"


def hourly_forecasts(items: Sequence[ForecastItem], count: int = 8) -> List[ForecastItem]:
    return list(items[:count])


def _forecast_frame(items: Sequence[ForecastItem], utc_offset: int) -> pd.DataFrame:
    frame = pd.DataFrame(
        {
            "position": range(len(items)),
            "dt": [item.dt for item in items],
            "temp": [item.main.temp for item in items],
            "feels": [item.main.feels_like for item in items],
            "temp_min": [item.main.temp_min for item in items],
            "temp_max": [item.main.temp_max for item in items],
            "humidity": [item.main.humidity for item in items],
            "pop": [item.pop for item in items],
            "rain": [(item.rain.three_hour or 0) if item.rain else 0 for item in items],
            "snow": [(item.snow.three_hour or 0) if item.snow else 0 for item in items],
        }
    )
    local = pd.to_datetime(frame["dt"] + utc_offset, unit="s")
    frame["date"] = local.dt.date
    frame["hour"] = local.dt.hour
    return frame


def daily_forecasts(
    items: Sequence[ForecastItem], utc_offset: int = 0, days: int = DAILY_DAYS
) -> List[ForecastItem]:
    """
    Collapse a forecast list into one item per local day.

    The representative sample of a day is its last midday reading
    (11:00-14:00), or its first reading when there is none. Its min/max
    span the whole day and its precipitation chance is the day's maximum.

    Args:
        items: Forecast items in time order
        utc_offset: Offset of the city from UTC in seconds
        days: Maximum number of days returned

    Returns:
        Up to ``days`` forecast items
    """
    if not items:
        return []

    frame = _forecast_frame(items, utc_offset)
    frame["midday"] = frame["hour"].between(*MIDDAY_HOURS)

    daily = []
    for _, day in frame.groupby("date", sort=True):
        midday = day[day["midday"]]
        position = midday["position"].iloc[-1] if not midday.empty else day["position"].iloc[0]
        item = items[int(position)]

        main = item.main.model_copy(
            update={
                "temp_min": float(day["temp_min"].min()),
                "temp_max": float(day["temp_max"].max()),
            }
        )
        daily.append(item.model_copy(update={"main": main, "pop": float(day["pop"].max())}))

    return daily[:days]


def temperature_chart_frame(
    items: Sequence[ForecastItem], utc_offset: int = 0, limit: int = CHART_POINTS
) -> pd.DataFrame:
    """Temperature and feels-like series, rounded to whole degrees."""
    if not items:
        return pd.DataFrame(columns=["time", "temp", "feels", "humidity"])
    frame = _forecast_frame(items[:limit], utc_offset)
    return pd.DataFrame(
        {
            "time": frame["hour"].map(format_hour),
            "temp": frame["temp"].map(round_half_up),
            "feels": frame["feels"].map(round_half_up),
            "humidity": frame["humidity"],
        }
    )


def chance_color(chance: int) -> str:
    for threshold, color in CHANCE_COLORS:
        if chance >= threshold:
            return color
    return DEFAULT_CHANCE_COLOR


def precipitation_chart_frame(
    items: Sequence[ForecastItem], utc_offset: int = 0, limit: int = CHART_POINTS
) -> pd.DataFrame:
    """Precipitation amount (mm, one decimal) and chance (%) per sample."""
    if not items:
        return pd.DataFrame(columns=["time", "precipitation", "chance", "color"])
    frame = _forecast_frame(items[:limit], utc_offset)
    chance = (frame["pop"] * 100).map(round_half_up)
    return pd.DataFrame(
        {
            "time": frame["hour"].map(format_hour),
            "precipitation": (frame["rain"] + frame["snow"]).round(1),
            "chance": chance,
            "color": chance.map(chance_color),
        }
    )
