"""FastAPI application serving the dashboard's weather, search and geocode endpoints.

Example:
    >>> from src.api.server import create_app
    >>> app = create_app()
    >>> # Run with: uvicorn src.api.server:app --reload
"""

from typing import Optional

import httpx
from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.errors import InvalidRequestError, UpstreamUnavailableError
from src.api.schemas import ErrorResponse, HealthResponse
from src.config import settings
from src.services.weather import GeocodingService, WeatherService, parse_coordinates
from src.utils.logger import setup_logger

logger = setup_logger(__name__)

API_VERSION = "1.0.0"
NO_STORE_HEADERS = {"Cache-Control": "no-store"}


def error_response(message: str, status_code: int) -> JSONResponse:
    """JSON error body that must never be cached."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
        headers=NO_STORE_HEADERS,
    )


def create_app(
    weather_service: WeatherService = None,
    geocoding_service: GeocodingService = None,
) -> FastAPI:
    """
    Create FastAPI application.

    Args:
        weather_service: Service used by /api/weather (default: from settings)
        geocoding_service: Service used by /api/search and /api/geocode

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="SkyPulse Weather API",
        description="Normalized Open-Meteo weather, air quality and geocoding",
        version=API_VERSION,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    weather = weather_service or WeatherService()
    geocoding = geocoding_service or GeocodingService()

    @app.get("/health", response_model=HealthResponse, tags=["info"])
    def health_check():
        """Health check endpoint."""
        return HealthResponse(status="healthy", version=API_VERSION)

    @app.get("/api/weather", tags=["weather"])
    def get_weather(
        lat: Optional[str] = Query(default=None),
        lon: Optional[str] = Query(default=None),
        units: str = Query(default="metric"),
    ):
        """Current conditions, 3-hour forecast, air quality and hourly detail."""
        try:
            lat_num, lon_num = parse_coordinates(lat, lon)
        except InvalidRequestError as e:
            return error_response(str(e), 400)

        try:
            snapshot = weather.get_snapshot(lat_num, lon_num, units)
        except UpstreamUnavailableError as e:
            return error_response(str(e), e.status_code or 500)

        return JSONResponse(
            content=snapshot.to_response(),
            headers={"Cache-Control": settings.weather_cache_control},
        )

    @app.get("/api/search", tags=["geocoding"])
    def search_cities(q: Optional[str] = Query(default=None)):
        """Up to five ranked city matches for a free-text query."""
        try:
            results = geocoding.search(q)
        except (httpx.HTTPError, KeyError, ValueError) as e:
            logger.error(f"Search API error: {e}")
            return JSONResponse(
                status_code=500, content=ErrorResponse(error="Failed to search cities").model_dump()
            )

        return [result.model_dump(by_alias=True) for result in results]

    @app.get("/api/geocode", tags=["geocoding"])
    def reverse_geocode(
        lat: Optional[str] = Query(default=None),
        lon: Optional[str] = Query(default=None),
    ):
        """Place name and country code at a coordinate."""
        try:
            lat_num, lon_num = parse_coordinates(
                lat, lon, missing_message="Please provide lat and lon"
            )
        except InvalidRequestError as e:
            return error_response(str(e), 400)

        result, resolved = geocoding.reverse(lat_num, lon_num)
        headers = (
            {"Cache-Control": settings.geocode_cache_control}
            if resolved
            else NO_STORE_HEADERS
        )
        return JSONResponse(content=result.model_dump(), headers=headers)

    return app


# Default app instance for uvicorn
app = create_app()
