"""Tests for the HTTP API."""

import json
from unittest.mock import Mock

import httpx
import pytest
from fastapi.testclient import TestClient

from src.api.errors import UpstreamUnavailableError
from src.api.schemas import CitySearchResult, GeocodeResult
from src.api.server import create_app
from src.data.transform import normalize_weather
from src.services.weather import GeocodingService, UNKNOWN_PLACE, WeatherService


@pytest.fixture
def weather_service():
    return Mock(spec=WeatherService)


@pytest.fixture
def geocoding_service():
    return Mock(spec=GeocodingService)


@pytest.fixture
def client(weather_service, geocoding_service):
    """Test client over mocked services."""
    app = create_app(weather_service=weather_service, geocoding_service=geocoding_service)
    return TestClient(app)


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


class TestWeatherEndpoint:
    """Tests for GET /api/weather."""

    def test_success(self, client, weather_service, weather_payload, air_quality_payload, now):
        snapshot = normalize_weather(
            weather_payload, air_quality_payload, 51.5, -0.12, False, now=now
        )
        weather_service.get_snapshot.return_value = snapshot

        response = client.get("/api/weather", params={"lat": "51.5", "lon": "-0.12"})

        assert response.status_code == 200
        assert response.headers["cache-control"] == (
            "public, s-maxage=600, stale-while-revalidate=1200"
        )
        body = response.json()
        assert set(body) == {"current", "forecast", "airQuality", "hourlyDetailed"}
        assert body["current"]["weather"][0]["icon"] == "10n"
        assert body["forecast"]["cnt"] == 16
        weather_service.get_snapshot.assert_called_once_with(51.5, -0.12, "metric")

    def test_units_forwarded(self, client, weather_service, weather_payload, now):
        weather_service.get_snapshot.return_value = normalize_weather(
            weather_payload, None, 1.0, 2.0, True, now=now
        )

        client.get("/api/weather", params={"lat": "1", "lon": "2", "units": "imperial"})

        weather_service.get_snapshot.assert_called_once_with(1.0, 2.0, "imperial")

    def test_missing_coordinates(self, client, weather_service):
        response = client.get("/api/weather", params={"lat": "51.5"})

        assert response.status_code == 400
        assert response.json() == {"error": "Please provide coordinates (lat & lon)"}
        assert response.headers["cache-control"] == "no-store"
        weather_service.get_snapshot.assert_not_called()

    def test_invalid_coordinates(self, client, weather_service):
        response = client.get("/api/weather", params={"lat": "north", "lon": "0"})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid coordinates provided"}
        weather_service.get_snapshot.assert_not_called()

    def test_upstream_status_propagated(self, client, weather_service):
        weather_service.get_snapshot.side_effect = UpstreamUnavailableError(
            "Failed to fetch weather data from Open-Meteo", status_code=503
        )

        response = client.get("/api/weather", params={"lat": "1", "lon": "2"})

        assert response.status_code == 503
        assert response.json() == {"error": "Failed to fetch weather data from Open-Meteo"}
        assert response.headers["cache-control"] == "no-store"

    def test_upstream_failure_without_status(self, client, weather_service):
        weather_service.get_snapshot.side_effect = UpstreamUnavailableError(
            "Failed to fetch weather data"
        )

        response = client.get("/api/weather", params={"lat": "1", "lon": "2"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch weather data"}

    def test_forecast_not_json_is_bad_gateway(self, geocoding_service):
        """A non-JSON forecast body maps to 502 rather than an unhandled error."""
        meteo = Mock()
        meteo.get_forecast.side_effect = json.JSONDecodeError(
            "Expecting value", "<html>maintenance</html>", 0
        )
        app = create_app(
            weather_service=WeatherService(meteo), geocoding_service=geocoding_service
        )

        response = TestClient(app).get("/api/weather", params={"lat": "1", "lon": "2"})

        assert response.status_code == 502
        assert response.json() == {"error": "Failed to fetch weather data"}
        assert response.headers["cache-control"] == "no-store"


class TestSearchEndpoint:
    """Tests for GET /api/search."""

    def test_results(self, client, geocoding_service):
        geocoding_service.search.return_value = [
            CitySearchResult(
                name="Paris", country="FR", country_name="France", state="Île-de-France",
                lat=48.85, lon=2.35,
            )
        ]

        response = client.get("/api/search", params={"q": "Paris"})

        assert response.status_code == 200
        assert response.json() == [
            {
                "name": "Paris",
                "country": "FR",
                "countryName": "France",
                "state": "Île-de-France",
                "lat": 48.85,
                "lon": 2.35,
            }
        ]
        geocoding_service.search.assert_called_once_with("Paris")

    def test_missing_query(self, client, geocoding_service):
        geocoding_service.search.return_value = []

        response = client.get("/api/search")

        assert response.status_code == 200
        assert response.json() == []
        geocoding_service.search.assert_called_once_with(None)

    def test_failure(self, client, geocoding_service):
        geocoding_service.search.side_effect = httpx.ConnectError("down")

        response = client.get("/api/search", params={"q": "Paris"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to search cities"}


class TestGeocodeEndpoint:
    """Tests for GET /api/geocode."""

    def test_resolved(self, client, geocoding_service):
        geocoding_service.reverse.return_value = (GeocodeResult(name="London", country="GB"), True)

        response = client.get("/api/geocode", params={"lat": "51.51", "lon": "-0.13"})

        assert response.status_code == 200
        assert response.json() == {"name": "London", "country": "GB"}
        assert "s-maxage=86400" in response.headers["cache-control"]
        geocoding_service.reverse.assert_called_once_with(51.51, -0.13)

    def test_unresolved_not_cached(self, client, geocoding_service):
        geocoding_service.reverse.return_value = (UNKNOWN_PLACE, False)

        response = client.get("/api/geocode", params={"lat": "1", "lon": "2"})

        assert response.status_code == 200
        assert response.json() == {"name": "Unknown", "country": ""}
        assert response.headers["cache-control"] == "no-store"

    def test_missing_coordinates(self, client, geocoding_service):
        response = client.get("/api/geocode", params={"lon": "2"})

        assert response.status_code == 400
        assert response.json() == {"error": "Please provide lat and lon"}
        geocoding_service.reverse.assert_not_called()
