"""Tests for the coordinator's HTTP gateway."""

import asyncio
from unittest.mock import AsyncMock, Mock, patch

import httpx
import pytest

from src.api.errors import UpstreamUnavailableError
from src.coordinator.gateway import HttpWeatherGateway
from src.data.transform import normalize_weather


def _response(payload, status_code=200):
    response = Mock()
    response.json.return_value = payload
    response.status_code = status_code
    response.is_success = 200 <= status_code < 300
    return response


@pytest.fixture
def mock_client():
    with patch("src.coordinator.gateway.httpx.AsyncClient") as mock_client_class:
        client = Mock()
        client.get = AsyncMock()
        client.aclose = AsyncMock()
        mock_client_class.return_value = client
        yield client


class TestHttpWeatherGateway:
    """Tests for HttpWeatherGateway."""

    def test_fetch_weather(self, mock_client, sample_city, weather_payload, now):
        snapshot = normalize_weather(weather_payload, None, 51.5074, -0.1278, False, now=now)
        mock_client.get.return_value = _response(snapshot.to_response())

        gateway = HttpWeatherGateway(base_url="http://api.test")
        result = asyncio.run(gateway.fetch_weather(sample_city, "imperial"))

        assert result.to_response() == snapshot.to_response()
        assert result.current.rain.one_hour == 0.4
        mock_client.get.assert_awaited_once_with(
            "/api/weather", params={"lat": 51.5074, "lon": -0.1278, "units": "imperial"}
        )

    def test_error_message_from_server(self, mock_client, sample_city):
        mock_client.get.return_value = _response(
            {"error": "Failed to fetch weather data from Open-Meteo"}, status_code=503
        )

        with pytest.raises(UpstreamUnavailableError) as exc_info:
            asyncio.run(HttpWeatherGateway().fetch_weather(sample_city, "metric"))

        assert str(exc_info.value) == "Failed to fetch weather data from Open-Meteo"
        assert exc_info.value.status_code == 503

    def test_transport_error(self, mock_client, sample_city):
        mock_client.get.side_effect = httpx.ConnectError("refused")

        with pytest.raises(UpstreamUnavailableError):
            asyncio.run(HttpWeatherGateway().fetch_weather(sample_city, "metric"))

    def test_malformed_snapshot(self, mock_client, sample_city):
        mock_client.get.return_value = _response({"current": {}})

        with pytest.raises(UpstreamUnavailableError, match="Failed to fetch weather data"):
            asyncio.run(HttpWeatherGateway().fetch_weather(sample_city, "metric"))

    def test_search(self, mock_client):
        mock_client.get.return_value = _response(
            [
                {
                    "name": "Paris",
                    "country": "FR",
                    "countryName": "France",
                    "state": "Île-de-France",
                    "lat": 48.85,
                    "lon": 2.35,
                }
            ]
        )

        results = asyncio.run(HttpWeatherGateway().search("Paris"))

        assert len(results) == 1
        assert results[0].country_name == "France"
        assert results[0].to_city().lat == 48.85
        mock_client.get.assert_awaited_once_with("/api/search", params={"q": "Paris"})

    def test_search_error_body(self, mock_client):
        mock_client.get.return_value = _response(
            {"error": "Failed to search cities"}, status_code=500
        )

        assert asyncio.run(HttpWeatherGateway().search("Paris")) == []

    def test_search_malformed_results(self, mock_client):
        """Results without coordinates are an upstream failure, not a KeyError."""
        mock_client.get.return_value = _response([{"name": "Paris", "country": "FR"}])

        with pytest.raises(UpstreamUnavailableError, match="Failed to search cities"):
            asyncio.run(HttpWeatherGateway().search("Paris"))

    def test_aclose(self, mock_client):
        asyncio.run(HttpWeatherGateway().aclose())

        mock_client.aclose.assert_awaited_once()
