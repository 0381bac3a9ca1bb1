"""Command-line access to the transportation weather service."""
import argparse
import dataclasses
import json
import logging
import os
import sys
from typing import Any, Optional, Sequence

from dotenv import load_dotenv

from openweather_provider import OpenWeatherProvider
from weather_cache import ExpiringCache
from weather_service import WeatherService

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
DEFAULT_LOG_FILE = os.path.join(BASE_DIR, "transit-weather.log")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser("transit-weather", description="Weather impact on transportation")
    parser.add_argument("--log-file", default=DEFAULT_LOG_FILE)
    parser.add_argument("--cache-ttl", type=int, default=600)
    parser.add_argument("--timeout", type=int, default=10, help="HTTP timeout in seconds")
    parser.add_argument("--verbose", action="store_true")

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("locations", help="List known locations")
    current = commands.add_parser("current", help="Current conditions")
    current.add_argument("location")
    comprehensive = commands.add_parser("comprehensive", help="Current, forecast and impact")
    comprehensive.add_argument("location")
    multi = commands.add_parser("multi", help="Current conditions for several locations")
    multi.add_argument("locations", nargs="+")
    route = commands.add_parser("route", help="Weather impact along a route")
    route.add_argument("origin")
    route.add_argument("destination")
    forecast = commands.add_parser("forecast", help="Multi-day travel outlook")
    forecast.add_argument("location")
    forecast.add_argument("--days", type=int, default=7)
    return parser.parse_args(argv)


def setup_logging(log_file: str, verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr),
            logging.FileHandler(log_file)
        ]
    )


def load_config() -> tuple:
    load_dotenv()
    api_key = os.getenv("WEATHER_API_KEY")
    lang = os.getenv("WEATHER_LANG", "en")

    if not api_key:
        logging.error("Missing WEATHER_API_KEY in environment")
        raise SystemExit("Missing WEATHER_API_KEY in environment")

    logging.info("Configuration loaded: lang=%s", lang)
    return api_key, lang


def build_weather_service(api_key: str, lang: str, args: argparse.Namespace) -> WeatherService:
    provider = OpenWeatherProvider(
        api_key=api_key,
        lang=lang,
        timeout=args.timeout,
    )
    service = WeatherService(
        provider=provider,
        cache=ExpiringCache(ttl_seconds=args.cache_ttl),
    )
    logging.info("Weather service ready (cache ttl=%ss)", args.cache_ttl)
    return service


def to_json(result: Any) -> str:
    """Render a service result (dataclasses, enums, datetimes) as JSON."""
    if dataclasses.is_dataclass(result):
        result = dataclasses.asdict(result)
    elif isinstance(result, dict):
        result = {key: dataclasses.asdict(value) for key, value in result.items()}
    elif isinstance(result, list):
        result = [dataclasses.asdict(item) for item in result]
    return json.dumps(result, indent=2, default=str, ensure_ascii=False)


def run_command(service: WeatherService, args: argparse.Namespace) -> Any:
    if args.command == "locations":
        return service.list_locations()
    if args.command == "current":
        return service.get_current_weather(args.location)
    if args.command == "comprehensive":
        return service.get_comprehensive_weather(args.location)
    if args.command == "multi":
        return service.get_multi_location_weather(args.locations)
    if args.command == "route":
        return service.get_route_weather(args.origin, args.destination)
    if args.command == "forecast":
        return service.get_transportation_forecast(args.location, args.days)
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_file, args.verbose)
    api_key, lang = load_config()
    service = build_weather_service(api_key, lang, args)

    result = run_command(service, args)
    if result is None:
        logging.warning("No weather data available for %s", args.command)
        print("null")
        return 1
    print(to_json(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
