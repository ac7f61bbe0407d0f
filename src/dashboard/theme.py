"""Background palette derived from the current conditions."""

from dataclasses import dataclass

from src.dashboard.formatting import fahrenheit_to_celsius
from src.data.models import UnitSystem
from src.data.snapshot import WeatherSnapshot

HOT_CELSIUS = 35
COLD_CELSIUS = -5


@dataclass(frozen=True)
class ThemeColors:
    """Page background and the three glow orb colors."""

    bg: str
    orb1: str
    orb2: str
    orb3: str


DEFAULT_THEME = ThemeColors(
    "#0a0e1a", "rgba(59, 130, 246, 0.12)", "rgba(139, 92, 246, 0.1)", "rgba(6, 182, 212, 0.08)"
)
THUNDERSTORM_THEME = ThemeColors(
    "#0b0614", "rgba(139, 92, 246, 0.18)", "rgba(168, 85, 247, 0.14)", "rgba(234, 179, 8, 0.1)"
)
RAIN_THEME = ThemeColors(
    "#080e1e", "rgba(30, 64, 175, 0.16)", "rgba(99, 102, 241, 0.12)", "rgba(6, 182, 212, 0.1)"
)
SNOW_THEME = ThemeColors(
    "#0c1220", "rgba(147, 197, 253, 0.15)", "rgba(199, 210, 254, 0.12)", "rgba(224, 231, 255, 0.08)"
)
FOG_THEME = ThemeColors(
    "#10131c", "rgba(148, 163, 184, 0.12)", "rgba(100, 116, 139, 0.1)", "rgba(203, 213, 225, 0.06)"
)
CLEAR_DAY_THEME = ThemeColors(
    "#060d1f", "rgba(14, 165, 233, 0.15)", "rgba(234, 179, 8, 0.1)", "rgba(59, 130, 246, 0.08)"
)
CLEAR_NIGHT_THEME = ThemeColors(
    "#050810", "rgba(30, 58, 138, 0.15)", "rgba(88, 28, 135, 0.1)", "rgba(15, 23, 42, 0.12)"
)
CLOUDY_THEME = ThemeColors(
    "#090d18", "rgba(71, 85, 105, 0.14)", "rgba(100, 116, 139, 0.1)", "rgba(59, 130, 246, 0.06)"
)
HOT_THEME = ThemeColors(
    "#140a06", "rgba(249, 115, 22, 0.16)", "rgba(239, 68, 68, 0.12)", "rgba(234, 179, 8, 0.08)"
)
COLD_THEME = ThemeColors(
    "#060a14", "rgba(147, 197, 253, 0.18)", "rgba(199, 210, 254, 0.14)", "rgba(224, 231, 255, 0.1)"
)


def derive_theme(weather_id: int, is_day: bool, temperature_celsius: float) -> ThemeColors:
    """
    Pick the dashboard palette for a condition.

    Args:
        weather_id: OpenWeatherMap-compatible condition id (e.g. 500 for rain)
        is_day: Whether the sun is up
        temperature_celsius: Current temperature in °C

    Returns:
        Theme colors; extreme temperatures override the condition palette
    """
    if temperature_celsius > HOT_CELSIUS:
        return HOT_THEME
    if temperature_celsius < COLD_CELSIUS:
        return COLD_THEME

    if 200 <= weather_id < 300:
        return THUNDERSTORM_THEME
    if 300 <= weather_id < 600:
        return RAIN_THEME
    if 600 <= weather_id < 700:
        return SNOW_THEME
    if 700 <= weather_id < 800:
        return FOG_THEME
    if weather_id == 800:
        return CLEAR_DAY_THEME if is_day else CLEAR_NIGHT_THEME
    if weather_id > 800:
        return CLOUDY_THEME
    return DEFAULT_THEME


def theme_for_snapshot(snapshot: WeatherSnapshot, unit: UnitSystem) -> ThemeColors:
    """Theme of a snapshot's current conditions."""
    condition = snapshot.current.weather[0]
    temp = snapshot.current.main.temp
    if unit == "imperial":
        temp = fahrenheit_to_celsius(temp)
    return derive_theme(condition.id or 800, not condition.icon.endswith("n"), temp)
