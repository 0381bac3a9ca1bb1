"""Weather provider abstraction - allows swapping different weather APIs."""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from weather_data import Location


class WeatherProviderBase(ABC):
    """
    Abstract base class for weather data providers.

    Each fetch is a single attempt. Failures are reported as None so that
    callers can carry on with whatever other data they have.
    """

    @abstractmethod
    def fetch_current(self, location: Location) -> Optional[Dict[str, Any]]:
        """
        Fetch the raw current-conditions payload for a location.

        Returns:
            The decoded JSON payload, or None if no data could be obtained
        """
        pass

    @abstractmethod
    def fetch_forecast(self, location: Location) -> Optional[Dict[str, Any]]:
        """
        Fetch the raw multi-day forecast payload for a location.

        Returns:
            The decoded JSON payload, or None if no data could be obtained
        """
        pass


class WeatherProviderError(Exception):
    """Exception raised when a weather provider fails."""
    pass
