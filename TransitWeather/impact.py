"""
Rule-based classification of weather into transportation impact ratings.

Every rating scale is an ordered enum, least severe first. Rules only ever
move a rating through escalate() or step_up(), both of which keep the more
severe value, so a later rule can never undo an earlier one.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Sequence, Tuple, TypeVar

from weather_data import CurrentSnapshot, HourlyPoint

PRECIPITATION_KEYWORDS = ("rain", "drizzle", "storm", "snow")
FOG_KEYWORDS = ("fog", "mist", "haze")

HIGH_WIND_KMH = 40.0
LOW_VISIBILITY_KM = 5.0
HIGH_HUMIDITY_PCT = 90.0
RAIN_LIKELY_PCT = 60
FORECAST_LOOKAHEAD_POINTS = 8  # 3-hour steps, 24 hours


class Rating(str, Enum):
    """Base for ordered rating scales; members are declared mildest first."""

    @property
    def severity(self) -> int:
        return list(type(self)).index(self)

    def implied_overall(self) -> "OverallRating":
        """The least severe overall rating compatible with this sub-rating."""
        if isinstance(self, OverallRating):
            return self
        return _IMPLIED_OVERALL[type(self)][self]


class OverallRating(Rating):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    DANGEROUS = "dangerous"


class VisibilityRating(Rating):
    EXCELLENT = "excellent"
    GOOD = "good"
    REDUCED = "reduced"
    POOR = "poor"


class RoadConditions(Rating):
    EXCELLENT = "excellent"
    GOOD = "good"
    WET = "wet"
    HAZARDOUS = "hazardous"


class DelayRisk(Rating):
    NONE = "none"
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


_IMPLIED_OVERALL = {
    VisibilityRating: {
        VisibilityRating.EXCELLENT: OverallRating.EXCELLENT,
        VisibilityRating.GOOD: OverallRating.EXCELLENT,
        VisibilityRating.REDUCED: OverallRating.GOOD,
        VisibilityRating.POOR: OverallRating.POOR,
    },
    RoadConditions: {
        RoadConditions.EXCELLENT: OverallRating.EXCELLENT,
        RoadConditions.GOOD: OverallRating.EXCELLENT,
        RoadConditions.WET: OverallRating.POOR,
        RoadConditions.HAZARDOUS: OverallRating.DANGEROUS,
    },
    DelayRisk: {
        DelayRisk.NONE: OverallRating.EXCELLENT,
        DelayRisk.LOW: OverallRating.GOOD,
        DelayRisk.MODERATE: OverallRating.FAIR,
        DelayRisk.HIGH: OverallRating.POOR,
    },
}

R = TypeVar("R", bound=Rating)


def escalate(current: R, candidate: R) -> R:
    """Return whichever of two ratings on the same scale is more severe."""
    return candidate if candidate.severity > current.severity else current


def step_up(rating: R) -> R:
    """Move one step towards the severe end of the scale, stopping at the end."""
    members = list(type(rating))
    return members[min(rating.severity + 1, len(members) - 1)]


def worst(ratings: Iterable[R]) -> R:
    """Most severe of a non-empty collection of ratings on one scale."""
    return max(ratings, key=lambda rating: rating.severity)


@dataclass(frozen=True)
class ImpactAssessment:
    """How weather affects vehicle travel at a place or along a route."""
    overall: OverallRating
    visibility: VisibilityRating
    road_conditions: RoadConditions
    delay_risk: DelayRisk
    recommendations: Tuple[str, ...] = ()
    alerts: Tuple[str, ...] = ()

    def __post_init__(self):
        floor = worst(
            rating.implied_overall()
            for rating in (self.overall, self.visibility, self.road_conditions, self.delay_risk)
        )
        if floor.severity > self.overall.severity:
            raise ValueError(
                f"overall rating {self.overall.value!r} is milder than its sub-ratings imply ({floor.value!r})"
            )

    @classmethod
    def reconciled(
        cls,
        overall: OverallRating,
        visibility: VisibilityRating,
        road_conditions: RoadConditions,
        delay_risk: DelayRisk,
        recommendations: Sequence[str] = (),
        alerts: Sequence[str] = (),
    ) -> "ImpactAssessment":
        """Build an assessment, raising `overall` to the worst its sub-ratings imply."""
        for rating in (visibility, road_conditions, delay_risk):
            overall = escalate(overall, rating.implied_overall())
        return cls(
            overall=overall,
            visibility=visibility,
            road_conditions=road_conditions,
            delay_risk=delay_risk,
            recommendations=tuple(recommendations),
            alerts=tuple(alerts),
        )


def _mentions(condition: str, keywords: Sequence[str]) -> bool:
    text = condition.lower()
    return any(keyword in text for keyword in keywords)


def is_precipitation(current: CurrentSnapshot) -> bool:
    return _mentions(current.condition_code, PRECIPITATION_KEYWORDS)


def is_fog(current: CurrentSnapshot) -> bool:
    return _mentions(current.condition_code, FOG_KEYWORDS)


def classify(
    current: CurrentSnapshot,
    forecast: Optional[Sequence[HourlyPoint]] = None
) -> ImpactAssessment:
    """
    Derive the transportation impact of the current conditions.

    Rules run in a fixed order and may only raise severity:
    precipitation, fog/mist, high wind, low visibility distance, then
    advisory-only checks for humidity and upcoming rain.

    Args:
        current: Normalized current conditions
        forecast: Optional hourly forecast; only adds advisories

    Returns:
        ImpactAssessment for the location
    """
    overall = OverallRating.EXCELLENT
    visibility = VisibilityRating.EXCELLENT
    road = RoadConditions.EXCELLENT
    delay = DelayRisk.NONE
    recommendations = []
    alerts = []

    precipitation = is_precipitation(current)
    fog = is_fog(current)

    if precipitation:
        road = escalate(road, RoadConditions.WET)
        overall = escalate(overall, OverallRating.POOR)
        delay = escalate(delay, DelayRisk.HIGH)
        recommendations.append("Allow extra travel time")
        recommendations.append("Use headlights during the day")
        alerts.append("Wet road conditions expected")

    if fog:
        visibility = escalate(visibility, VisibilityRating.POOR)
        overall = escalate(overall, OverallRating.POOR)
        delay = escalate(delay, DelayRisk.HIGH)
        recommendations.append("Drive with extreme caution")
        recommendations.append("Use fog lights if available")
        alerts.append("Reduced visibility due to fog or mist")

    if current.wind_speed_kmh > HIGH_WIND_KMH:
        overall = step_up(overall)
        delay = step_up(delay)
        recommendations.append("High winds - avoid high-profile vehicles")
        alerts.append("Strong wind conditions")

    if current.visibility_km < LOW_VISIBILITY_KM and not fog:
        visibility = escalate(visibility, VisibilityRating.REDUCED)
        overall = escalate(overall, OverallRating.GOOD)

    if current.humidity_pct > HIGH_HUMIDITY_PCT and not precipitation:
        recommendations.append("High humidity - ensure vehicle ventilation")

    if forecast:
        upcoming = list(forecast)[:FORECAST_LOOKAHEAD_POINTS]
        if any(point.precipitation_chance_pct >= RAIN_LIKELY_PCT for point in upcoming):
            recommendations.append("Rain likely within the next 24 hours - check conditions before departure")

    untouched = (
        overall is OverallRating.EXCELLENT
        and visibility is VisibilityRating.EXCELLENT
        and road is RoadConditions.EXCELLENT
        and delay is DelayRisk.NONE
    )
    if untouched:
        recommendations.append("Conditions favorable for travel")

    return ImpactAssessment.reconciled(overall, visibility, road, delay, recommendations, alerts)


def unavailable_assessment(scope: str = "route") -> ImpactAssessment:
    """Neutral assessment used when weather data is missing."""
    return ImpactAssessment(
        overall=OverallRating.FAIR,
        visibility=VisibilityRating.GOOD,
        road_conditions=RoadConditions.GOOD,
        delay_risk=DelayRisk.LOW,
        recommendations=(f"Weather data unavailable for complete {scope} analysis",),
        alerts=("Weather data unavailable, verify local conditions before departure",),
    )
