"""Main entry point for the application."""

import argparse
import json
import sys

import uvicorn

from src.api.errors import InvalidRequestError, UpstreamUnavailableError
from src.services.weather import GeocodingService, WeatherService, parse_coordinates
from src.utils.logger import setup_logger

logger = setup_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SkyPulse weather dashboard backend")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve.add_argument("--port", type=int, default=8000, help="Bind port")
    serve.add_argument("--reload", action="store_true", help="Reload on code changes")

    weather = subparsers.add_parser("weather", help="Print the normalized snapshot")
    weather.add_argument("--lat", required=True, help="Latitude")
    weather.add_argument("--lon", required=True, help="Longitude")
    weather.add_argument(
        "--units",
        choices=["metric", "imperial"],
        default="metric",
        help="Unit system (default: metric)",
    )

    search = subparsers.add_parser("search", help="Search cities by name")
    search.add_argument("query", help="City name (at least 2 characters)")

    geocode = subparsers.add_parser("geocode", help="Name the place at a coordinate")
    geocode.add_argument("--lat", required=True, help="Latitude")
    geocode.add_argument("--lon", required=True, help="Longitude")

    return parser


def main(argv=None) -> int:
    """Main function."""
    args = build_parser().parse_args(argv)

    if args.command == "serve":
        logger.info(f"Starting API on {args.host}:{args.port}")
        uvicorn.run("src.api.server:app", host=args.host, port=args.port, reload=args.reload)
        return 0

    try:
        if args.command == "weather":
            lat, lon = parse_coordinates(args.lat, args.lon)
            result = WeatherService().get_snapshot(lat, lon, args.units).to_response()
        elif args.command == "search":
            result = [
                r.model_dump(by_alias=True) for r in GeocodingService().search(args.query)
            ]
        else:
            lat, lon = parse_coordinates(args.lat, args.lon, "Please provide lat and lon")
            result = GeocodingService().reverse(lat, lon)[0].model_dump()
    except (InvalidRequestError, UpstreamUnavailableError) as e:
        logger.error(str(e))
        print(json.dumps({"error": str(e)}), file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
