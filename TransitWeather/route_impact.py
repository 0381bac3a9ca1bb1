"""Worst-case combination of origin and destination assessments."""
from dataclasses import dataclass
from typing import List, Optional

from impact import (
    ImpactAssessment,
    OverallRating,
    VisibilityRating,
    escalate,
    unavailable_assessment,
    worst,
)
from weather_data import CurrentSnapshot

ROUTE_GOOD_VISIBILITY_KM = 5.0


@dataclass(frozen=True)
class EndpointImpact:
    """Current conditions at one end of a route and their assessment."""
    current: CurrentSnapshot
    impact: ImpactAssessment

    @property
    def prefix(self) -> str:
        return f"{self.current.location} ({self.current.temperature_c}°C)"


def combine_route(
    origin: Optional[EndpointImpact],
    destination: Optional[EndpointImpact]
) -> ImpactAssessment:
    """
    Combine two endpoint assessments into one verdict for the travel leg.

    If either end has no weather data the neutral "unavailable" assessment is
    returned rather than assuming good conditions. Otherwise every rating is
    the worse of the two ends, visibility is good only when both ends see
    further than 5 km, and each advisory line is prefixed with the name and
    temperature of the location it came from.
    """
    if origin is None or destination is None:
        return unavailable_assessment("route")

    endpoints = (origin, destination)
    overall = worst(end.impact.overall for end in endpoints)
    road = worst(end.impact.road_conditions for end in endpoints)
    delay = worst(end.impact.delay_risk for end in endpoints)

    if all(end.current.visibility_km > ROUTE_GOOD_VISIBILITY_KM for end in endpoints):
        visibility = VisibilityRating.GOOD
    else:
        visibility = VisibilityRating.POOR
        overall = escalate(overall, OverallRating.POOR)

    recommendations: List[str] = []
    alerts: List[str] = []
    for end in endpoints:
        recommendations.extend(f"{end.prefix}: {line}" for line in end.impact.recommendations)
        alerts.extend(f"{end.prefix}: {line}" for line in end.impact.alerts)

    return ImpactAssessment.reconciled(overall, visibility, road, delay, recommendations, alerts)
