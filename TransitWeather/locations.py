"""Static catalog of the places the engine can report on."""
import logging
from typing import Dict, Iterable, List, Optional

from weather_data import Location


# Major Sri Lankan cities and transportation hubs
DEFAULT_LOCATIONS = (
    Location("Colombo", 6.9271, 79.8612, "Colombo", "Western"),
    Location("Kandy", 7.2906, 80.6337, "Kandy", "Central"),
    Location("Galle", 6.0535, 80.2210, "Galle", "Southern"),
    Location("Jaffna", 9.6615, 80.0255, "Jaffna", "Northern"),
    Location("Anuradhapura", 8.3114, 80.4037, "Anuradhapura", "North Central"),
    Location("Batticaloa", 7.7102, 81.6924, "Batticaloa", "Eastern"),
    Location("Matara", 5.9549, 80.5550, "Matara", "Southern"),
    Location("Negombo", 7.2083, 79.8358, "Gampaha", "Western"),
    Location("Trincomalee", 8.5874, 81.2152, "Trincomalee", "Eastern"),
    Location("Badulla", 6.9895, 81.0567, "Badulla", "Uva"),
    Location("Ratnapura", 6.6828, 80.4008, "Ratnapura", "Sabaragamuwa"),
    Location("Kurunegala", 7.4863, 80.3647, "Kurunegala", "North Western"),
)


class LocationRegistry:
    """
    Read-only lookup of locations by name.

    Lookup is a case-insensitive exact match. Unknown names are an expected
    outcome of user input, so resolve() returns None instead of raising.
    """

    def __init__(self, locations: Iterable[Location] = DEFAULT_LOCATIONS):
        self._ordered: List[Location] = []
        self._by_name: Dict[str, Location] = {}
        for location in locations:
            key = location.name.lower()
            if key in self._by_name:
                raise ValueError(f"Duplicate location name: {location.name}")
            self._by_name[key] = location
            self._ordered.append(location)

    def resolve(self, name: str) -> Optional[Location]:
        """Return the location called `name`, or None if there is none."""
        if not name:
            return None
        location = self._by_name.get(name.strip().lower())
        if location is None:
            logging.debug(f"Unknown location requested: {name!r}")
        return location

    def list_all(self) -> List[Location]:
        """All locations in catalog order."""
        return list(self._ordered)

    def __len__(self) -> int:
        return len(self._ordered)
