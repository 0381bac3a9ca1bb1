"""Weather domain model - pure data structures independent of any API."""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from impact import ImpactAssessment


@dataclass(frozen=True)
class Location:
    """A named point the engine can fetch weather for."""
    name: str
    latitude: float
    longitude: float
    district: str
    province: str


@dataclass(frozen=True)
class CurrentSnapshot:
    """Current conditions at a location, in metric units."""
    location: str
    temperature_c: int
    feels_like_c: int
    humidity_pct: float
    pressure_hpa: float
    wind_speed_kmh: float
    wind_direction_deg: float
    visibility_km: float
    condition_code: str  # e.g., "Clouds", "Rain", "Clear"
    description: str  # e.g., "broken clouds", "light rain"
    icon_id: str
    observed_at: datetime

    # Not provided by every endpoint; None means unknown
    uv_index: Optional[float] = None
    sunrise: Optional[str] = None
    sunset: Optional[str] = None


@dataclass(frozen=True)
class HourlyPoint:
    """One step of the forecast series."""
    timestamp: datetime  # location-local
    time_label: str  # e.g., "03:00 PM"
    temperature_c: int
    feels_like_c: int
    humidity_pct: float
    wind_speed_kmh: float
    precipitation_chance_pct: int
    condition_code: str
    icon_id: str


@dataclass(frozen=True)
class DailyAggregate:
    """Forecast points of one calendar date reduced to a single day."""
    date: str  # ISO yyyy-mm-dd
    day_name: str  # e.g., "Monday"
    temp_max_c: int
    temp_min_c: int
    humidity_pct: int
    wind_speed_kmh: float
    precipitation_chance_pct: int
    condition_code: str
    description: str
    icon_id: str
    sunrise: Optional[str] = None
    sunset: Optional[str] = None
    uv_index: Optional[float] = None


@dataclass(frozen=True)
class ComprehensiveWeather:
    """Everything known about a location for one fetch cycle."""
    current: Optional[CurrentSnapshot]
    hourly: Tuple[HourlyPoint, ...]
    daily: Tuple[DailyAggregate, ...]
    impact: "ImpactAssessment"
    last_updated: datetime

    @property
    def is_complete(self) -> bool:
        """True when both current conditions and forecast were available."""
        return self.current is not None and len(self.hourly) > 0


@dataclass(frozen=True)
class RouteWeather:
    """Weather at both ends of a travel leg plus the combined verdict."""
    origin: Optional[CurrentSnapshot]
    destination: Optional[CurrentSnapshot]
    route_impact: "ImpactAssessment"


@dataclass(frozen=True)
class TransportationForecast:
    """Multi-day outlook with travel advice for one location."""
    location: str
    forecast: Tuple[DailyAggregate, ...]
    advisories: Tuple[str, ...]
    favorable_days: Tuple[str, ...]
    caution_days: Tuple[str, ...]
