"""WMO weather interpretation codes.

Maps the discrete codes reported by Open-Meteo to descriptions, condition
groups and OpenWeatherMap-compatible icon tokens.
Reference: https://open-meteo.com/en/docs
"""

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class WMOMapping:
    """Display attributes of one WMO code."""

    description: str
    icon_day: str
    icon_night: str
    main: str


WMO_CODES: Dict[int, WMOMapping] = {
    0: WMOMapping("Clear sky", "01d", "01n", "Clear"),
    1: WMOMapping("Mainly clear", "01d", "01n", "Clear"),
    2: WMOMapping("Partly cloudy", "02d", "02n", "Clouds"),
    3: WMOMapping("Overcast", "04d", "04n", "Clouds"),
    45: WMOMapping("Fog", "50d", "50n", "Fog"),
    48: WMOMapping("Depositing rime fog", "50d", "50n", "Fog"),
    51: WMOMapping("Light drizzle", "09d", "09n", "Drizzle"),
    53: WMOMapping("Moderate drizzle", "09d", "09n", "Drizzle"),
    55: WMOMapping("Dense drizzle", "09d", "09n", "Drizzle"),
    56: WMOMapping("Light freezing drizzle", "09d", "09n", "Drizzle"),
    57: WMOMapping("Dense freezing drizzle", "09d", "09n", "Drizzle"),
    61: WMOMapping("Slight rain", "10d", "10n", "Rain"),
    63: WMOMapping("Moderate rain", "10d", "10n", "Rain"),
    65: WMOMapping("Heavy rain", "10d", "10n", "Rain"),
    66: WMOMapping("Light freezing rain", "13d", "13n", "Rain"),
    67: WMOMapping("Heavy freezing rain", "13d", "13n", "Rain"),
    71: WMOMapping("Slight snow fall", "13d", "13n", "Snow"),
    73: WMOMapping("Moderate snow fall", "13d", "13n", "Snow"),
    75: WMOMapping("Heavy snow fall", "13d", "13n", "Snow"),
    77: WMOMapping("Snow grains", "13d", "13n", "Snow"),
    80: WMOMapping("Slight rain showers", "09d", "09n", "Rain"),
    81: WMOMapping("Moderate rain showers", "09d", "09n", "Rain"),
    82: WMOMapping("Violent rain showers", "09d", "09n", "Rain"),
    85: WMOMapping("Slight snow showers", "13d", "13n", "Snow"),
    86: WMOMapping("Heavy snow showers", "13d", "13n", "Snow"),
    95: WMOMapping("Thunderstorm", "11d", "11n", "Thunderstorm"),
    96: WMOMapping("Thunderstorm with slight hail", "11d", "11n", "Thunderstorm"),
    99: WMOMapping("Thunderstorm with heavy hail", "11d", "11n", "Thunderstorm"),
}


def get_wmo_description(code: int) -> str:
    mapping = WMO_CODES.get(code)
    return mapping.description if mapping else "Unknown"


def get_wmo_icon(code: int, is_day: bool = True) -> str:
    mapping = WMO_CODES.get(code)
    if mapping is None:
        return "01d" if is_day else "01n"
    return mapping.icon_day if is_day else mapping.icon_night


def get_wmo_main(code: int) -> str:
    mapping = WMO_CODES.get(code)
    return mapping.main if mapping else "Unknown"


def get_wmo_weather_id(code: int) -> int:
    """Approximate OpenWeatherMap condition id for a WMO code."""
    if code <= 1:
        return 800  # clear
    if code == 2:
        return 802  # few clouds
    if code == 3:
        return 804  # overcast
    if code <= 48:
        return 741  # fog
    if code <= 57:
        return 300  # drizzle
    if code <= 67:
        return 500  # rain
    if code <= 77:
        return 600  # snow
    if code <= 82:
        return 520  # showers
    if code <= 86:
        return 620  # snow showers
    if code <= 99:
        return 200  # thunderstorm
    return 800
