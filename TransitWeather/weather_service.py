"""Weather query interface with caching and concurrent fetching."""
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional

from impact import classify, unavailable_assessment
from locations import LocationRegistry
from normalizer import MAX_DAILY_AGGREGATES, parse_current, parse_daily, parse_hourly
from route_impact import EndpointImpact, combine_route
from weather_cache import CacheKey, ExpiringCache
from weather_data import (
    ComprehensiveWeather,
    CurrentSnapshot,
    Location,
    RouteWeather,
    TransportationForecast,
)
from weather_provider import WeatherProviderBase

FAVORABLE_MAX_PRECIP_PCT = 20
FAVORABLE_MAX_WIND_KMH = 25
CAUTION_MIN_PRECIP_PCT = 60
CAUTION_MIN_WIND_KMH = 40

# Raised by the normalizer on payloads of an unexpected shape
PARSE_ERRORS = (KeyError, ValueError, TypeError, AttributeError, OverflowError, OSError)


def gather(calls: Dict[str, Callable[[], Any]]) -> Dict[str, Any]:
    """
    Run independent calls concurrently and wait for all of them.

    Each slot settles on its own: a call that raises is logged and its slot
    set to None, without affecting the other calls.
    """
    if not calls:
        return {}
    results: Dict[str, Any] = {}
    with ThreadPoolExecutor(max_workers=len(calls)) as pool:
        futures = {slot: pool.submit(call) for slot, call in calls.items()}
        for slot, future in futures.items():
            try:
                results[slot] = future.result()
            except Exception:
                logging.exception(f"Weather task {slot!r} failed")
                results[slot] = None
    return results


class WeatherService:
    """
    Service that answers weather queries for named locations.

    Results are cached per (query kind, location) for the cache TTL
    (default: 10 minutes) to bound calls to the provider. No method raises:
    unknown locations and upstream failures come back as None, or are left
    out of multi-location results.
    """

    def __init__(
        self,
        provider: WeatherProviderBase,
        registry: Optional[LocationRegistry] = None,
        cache: Optional[ExpiringCache] = None,
        clock: Callable[[], float] = time.time
    ):
        """
        Initialize weather service.

        Args:
            provider: Weather provider to use
            registry: Known locations (defaults to the built-in catalog)
            cache: Cache for fetched results (defaults to a 10 minute cache on `clock`)
            clock: Returns the current time in seconds, used for timestamps
        """
        self.provider = provider
        self.registry = registry or LocationRegistry()
        self.cache = cache if cache is not None else ExpiringCache(clock=clock)
        self._clock = clock

    def _now(self) -> datetime:
        return datetime.fromtimestamp(self._clock(), timezone.utc)

    @staticmethod
    def _parse(what: str, parser: Callable[..., Any], *args: Any) -> Any:
        """Run a normalizer; a payload it cannot read is logged and treated as missing."""
        try:
            return parser(*args)
        except PARSE_ERRORS as e:
            logging.error(f"Failed to parse {what}: {e}", exc_info=True)
            return None

    def list_locations(self) -> List[Location]:
        return self.registry.list_all()

    def get_current_weather(self, location_name: str) -> Optional[CurrentSnapshot]:
        """
        Get current conditions for a location, using cache if still fresh.

        Returns:
            CurrentSnapshot, or None if the location is unknown or no data is available
        """
        location = self.registry.resolve(location_name)
        if location is None:
            logging.info(f"Current weather requested for unknown location {location_name!r}")
            return None

        key = CacheKey("current", location.name)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        logging.info(f"Fetching current weather for {location.name} from provider...")
        raw = self.provider.fetch_current(location)
        if raw is None:
            return None

        current = self._parse(f"current weather for {location.name}", parse_current, raw, location.name)
        if current is None:
            return None
        self.cache.put(key, current)
        logging.info(f"Current weather for {location.name}: {current.temperature_c}°C, {current.condition_code}")
        return current

    def get_comprehensive_weather(self, location_name: str) -> Optional[ComprehensiveWeather]:
        """
        Get current conditions, forecast and impact assessment for a location.

        Current conditions and forecast are fetched concurrently. If only one
        of them arrives the result is still returned, with the impact set to
        the neutral "data unavailable" assessment, and it is not cached so the
        next call tries again.

        Returns:
            ComprehensiveWeather, or None if the location is unknown or nothing could be fetched
        """
        location = self.registry.resolve(location_name)
        if location is None:
            logging.info(f"Comprehensive weather requested for unknown location {location_name!r}")
            return None

        key = CacheKey("comprehensive", location.name)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        logging.info(f"Fetching current weather and forecast for {location.name}...")
        raw = gather({
            "current": lambda: self.provider.fetch_current(location),
            "forecast": lambda: self.provider.fetch_forecast(location),
        })
        raw_current, raw_forecast = raw["current"], raw["forecast"]

        if raw_current is None and raw_forecast is None:
            logging.error(f"No weather data available for {location.name}")
            return None

        current = None
        if raw_current is not None:
            current = self._parse(f"current weather for {location.name}", parse_current, raw_current, location.name)
        hourly, daily = (), ()
        forecast_ok = False
        if raw_forecast is not None:
            parsed = self._parse(
                f"forecast for {location.name}",
                lambda: (tuple(parse_hourly(raw_forecast)), tuple(parse_daily(raw_forecast))),
            )
            if parsed is not None:
                hourly, daily = parsed
                forecast_ok = True

        if current is None and not forecast_ok:
            logging.error(f"No usable weather data for {location.name}")
            return None

        if current is not None and forecast_ok:
            impact = classify(current, hourly)
        else:
            logging.warning(f"Partial weather data for {location.name}; impact assessment unavailable")
            impact = unavailable_assessment("location")

        weather = ComprehensiveWeather(
            current=current,
            hourly=hourly,
            daily=daily,
            impact=impact,
            last_updated=self._now(),
        )
        if current is not None and forecast_ok:
            self.cache.put(key, weather)
        return weather

    def get_multi_location_weather(self, location_names: Iterable[str]) -> Dict[str, CurrentSnapshot]:
        """
        Get current conditions for several locations concurrently.

        Returns:
            Mapping of requested name to CurrentSnapshot; names that are
            unknown or failed to fetch are omitted
        """
        names = list(dict.fromkeys(location_names))
        results = gather({
            name: (lambda name=name: self.get_current_weather(name))
            for name in names
        })
        return {name: current for name, current in results.items() if current is not None}

    def get_route_weather(self, origin_name: str, destination_name: str) -> RouteWeather:
        """Get weather at both ends of a route and the combined route impact."""
        results = gather({
            "origin": lambda: self.get_current_weather(origin_name),
            "destination": lambda: self.get_current_weather(destination_name),
        })
        origin, destination = results["origin"], results["destination"]

        route_impact = combine_route(
            EndpointImpact(origin, classify(origin)) if origin is not None else None,
            EndpointImpact(destination, classify(destination)) if destination is not None else None,
        )
        logging.info(f"Route {origin_name} -> {destination_name}: {route_impact.overall.value}")
        return RouteWeather(origin=origin, destination=destination, route_impact=route_impact)

    def get_transportation_forecast(
        self,
        location_name: str,
        days: int = MAX_DAILY_AGGREGATES
    ) -> Optional[TransportationForecast]:
        """
        Get a multi-day travel outlook for a location.

        A day is favorable when precipitation chance is below 20% and wind
        below 25 km/h, and needs caution when precipitation chance is above
        60% or wind above 40 km/h.

        Returns:
            TransportationForecast, or None if no forecast is available
        """
        weather = self.get_comprehensive_weather(location_name)
        if weather is None or not weather.daily:
            return None

        days = max(0, min(days, MAX_DAILY_AGGREGATES))
        forecast = weather.daily[:days]
        favorable_days: List[str] = []
        caution_days: List[str] = []

        for index, day in enumerate(forecast):
            label = "Today" if index == 0 else "Tomorrow" if index == 1 else day.day_name
            if (day.precipitation_chance_pct < FAVORABLE_MAX_PRECIP_PCT
                    and day.wind_speed_kmh < FAVORABLE_MAX_WIND_KMH):
                favorable_days.append(label)
            if (day.precipitation_chance_pct > CAUTION_MIN_PRECIP_PCT
                    or day.wind_speed_kmh > CAUTION_MIN_WIND_KMH):
                caution_days.append(label)

        advisories = []
        if favorable_days:
            advisories.append(f"Best travel days: {', '.join(favorable_days)}")
        if caution_days:
            advisories.append(f"Exercise caution: {', '.join(caution_days)}")
        advisories.append("Check real-time conditions before departure")
        advisories.append("Monitor weather updates during travel")

        location = self.registry.resolve(location_name)
        return TransportationForecast(
            location=location.name if location else location_name,
            forecast=forecast,
            advisories=tuple(advisories),
            favorable_days=tuple(favorable_days),
            caution_days=tuple(caution_days),
        )

    def clear_cache(self) -> None:
        self.cache.clear()

    def cache_stats(self) -> Dict[str, Any]:
        return self.cache.stats()
