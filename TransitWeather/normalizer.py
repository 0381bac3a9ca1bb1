"""
Conversion of raw OpenWeather payloads into the domain model.

Providers omit wind, precipitation and visibility fields intermittently, so
missing numeric fields fall back to zero (visibility to the 10 km ceiling the
API reports in clear air) instead of failing the whole payload. Blocks of the
wrong shape are treated as missing.

Wind and visibility are kept at full precision; impact thresholds are
compared against these values.
"""
import logging
import statistics
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Any, Dict, List, Optional

from weather_data import CurrentSnapshot, DailyAggregate, HourlyPoint

MAX_HOURLY_POINTS = 24
MAX_DAILY_AGGREGATES = 7
DEFAULT_VISIBILITY_M = 10000
MS_TO_KMH = 3.6
MAX_UTC_OFFSET_SECONDS = 14 * 3600


def _num(value: Any, default: float = 0.0) -> float:
    """Coerce a payload value to float, using `default` when absent or invalid."""
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _block(container: Any, key: str) -> Dict[str, Any]:
    """Nested object `key` of `container`, or {} when missing or not an object."""
    if not isinstance(container, dict):
        return {}
    value = container.get(key)
    return value if isinstance(value, dict) else {}


def _kmh(speed_ms: Any) -> float:
    return _num(speed_ms) * MS_TO_KMH


def _local_tz(offset_seconds: Any) -> Optional[tzinfo]:
    """Fixed-offset zone for the location, or None to use process local time."""
    if offset_seconds is None:
        return None
    offset = int(_num(offset_seconds))
    if abs(offset) > MAX_UTC_OFFSET_SECONDS:
        logging.warning(f"Ignoring out-of-range UTC offset {offset_seconds!r}")
        return None
    return timezone(timedelta(seconds=offset))


def _local_time(epoch: Any, tz: Optional[tzinfo]) -> datetime:
    if tz is None:
        return datetime.fromtimestamp(_num(epoch)).astimezone()
    return datetime.fromtimestamp(_num(epoch), tz)


def _clock_label(epoch: Any, tz: Optional[tzinfo]) -> Optional[str]:
    if epoch is None:
        return None
    return _local_time(epoch, tz).strftime("%H:%M")


def _condition(item: Dict[str, Any]) -> Dict[str, Any]:
    weather = item.get("weather")
    if not isinstance(weather, list) or not weather:
        return {}
    return weather[0] if isinstance(weather[0], dict) else {}


def parse_current(raw: Dict[str, Any], location_name: str) -> CurrentSnapshot:
    """
    Build a CurrentSnapshot from an OpenWeather current-conditions payload.

    Args:
        raw: Decoded JSON from the /weather endpoint (metric units)
        location_name: Registry name of the location the payload is for

    Returns:
        CurrentSnapshot with wind in km/h and visibility in km
    """
    main = _block(raw, "main")
    wind = _block(raw, "wind")
    sys_block = _block(raw, "sys")
    weather = _condition(raw)
    tz = _local_tz(raw.get("timezone"))

    if raw.get("dt") is not None:
        observed_at = _local_time(raw["dt"], tz)
    else:
        observed_at = datetime.now(timezone.utc)

    visibility_m = _num(raw.get("visibility"), DEFAULT_VISIBILITY_M)

    snapshot = CurrentSnapshot(
        location=location_name,
        temperature_c=round(_num(main.get("temp"))),
        feels_like_c=round(_num(main.get("feels_like"))),
        humidity_pct=_num(main.get("humidity")),
        pressure_hpa=_num(main.get("pressure")),
        wind_speed_kmh=_kmh(wind.get("speed")),
        wind_direction_deg=_num(wind.get("deg")),
        visibility_km=visibility_m / 1000.0,
        condition_code=weather.get("main", "Unknown"),
        description=weather.get("description", ""),
        icon_id=weather.get("icon", ""),
        observed_at=observed_at,
        sunrise=_clock_label(sys_block.get("sunrise"), tz),
        sunset=_clock_label(sys_block.get("sunset"), tz),
    )
    logging.debug(f"Parsed current weather for {location_name}: {snapshot.temperature_c}°C, {snapshot.condition_code}")
    return snapshot


def _forecast_entries(raw_forecast: Dict[str, Any]) -> List[Dict[str, Any]]:
    entries = []
    for item in raw_forecast.get("list") or []:
        if not isinstance(item, dict) or item.get("dt") is None:
            logging.warning("Skipping forecast entry without timestamp")
            continue
        entries.append(item)
    return entries


def _forecast_tz(raw_forecast: Dict[str, Any]) -> Optional[tzinfo]:
    city = _block(raw_forecast, "city")
    return _local_tz(city.get("timezone"))


def parse_hourly(raw_forecast: Dict[str, Any]) -> List[HourlyPoint]:
    """
    Build the hourly series from a forecast payload.

    Only the first 24 entries are used. Every call rebuilds the list from the
    payload, so the result can be consumed any number of times.
    """
    tz = _forecast_tz(raw_forecast)
    points = []
    for item in _forecast_entries(raw_forecast)[:MAX_HOURLY_POINTS]:
        main = _block(item, "main")
        wind = _block(item, "wind")
        weather = _condition(item)
        stamp = _local_time(item["dt"], tz)
        points.append(HourlyPoint(
            timestamp=stamp,
            time_label=stamp.strftime("%I:%M %p"),
            temperature_c=round(_num(main.get("temp"))),
            feels_like_c=round(_num(main.get("feels_like"))),
            humidity_pct=_num(main.get("humidity")),
            wind_speed_kmh=_kmh(wind.get("speed")),
            precipitation_chance_pct=round(_num(item.get("pop")) * 100),
            condition_code=weather.get("main", "Unknown"),
            icon_id=weather.get("icon", ""),
        ))
    points.sort(key=lambda point: point.timestamp)
    return points


def parse_daily(raw_forecast: Dict[str, Any]) -> List[DailyAggregate]:
    """
    Reduce forecast entries to one aggregate per calendar date.

    Entries are grouped by their location-local date in order of first
    appearance. Temperatures use the group extrema; humidity, wind and
    precipitation chance are arithmetic means; condition, description and
    icon come from the first entry of the group. At most 7 days are returned.

    Sunrise and sunset are only known for the date the payload's `city` block
    reports them on; other days carry None. UV index is never provided by
    this endpoint and is always None.
    """
    tz = _forecast_tz(raw_forecast)
    groups: Dict[date, List[Dict[str, Any]]] = {}
    for item in _forecast_entries(raw_forecast):
        day = _local_time(item["dt"], tz).date()
        groups.setdefault(day, []).append(item)

    city = _block(raw_forecast, "city")
    sun_dates = {}
    if city.get("sunrise") is not None:
        sun_dates[_local_time(city["sunrise"], tz).date()] = (
            _clock_label(city.get("sunrise"), tz),
            _clock_label(city.get("sunset"), tz),
        )

    aggregates = []
    for day, items in list(groups.items())[:MAX_DAILY_AGGREGATES]:
        temps = [_num(_block(item, "main").get("temp")) for item in items]
        humidities = [_num(_block(item, "main").get("humidity")) for item in items]
        winds = [_num(_block(item, "wind").get("speed")) for item in items]
        pops = [_num(item.get("pop")) for item in items]
        first = _condition(items[0])
        sunrise, sunset = sun_dates.get(day, (None, None))

        aggregates.append(DailyAggregate(
            date=day.isoformat(),
            day_name=day.strftime("%A"),
            temp_max_c=round(max(temps)),
            temp_min_c=round(min(temps)),
            humidity_pct=round(statistics.mean(humidities)),
            wind_speed_kmh=statistics.mean(winds) * MS_TO_KMH,
            precipitation_chance_pct=round(statistics.mean(pops) * 100),
            condition_code=first.get("main", "Unknown"),
            description=first.get("description", ""),
            icon_id=first.get("icon", ""),
            sunrise=sunrise,
            sunset=sunset,
        ))

    logging.debug(f"Parsed {len(aggregates)} daily aggregates from {sum(len(g) for g in groups.values())} entries")
    return aggregates
