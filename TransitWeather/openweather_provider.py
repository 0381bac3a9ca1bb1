"""OpenWeather Current Weather and 5 day / 3 hour Forecast API provider."""
import logging
import requests
from typing import Any, Dict, Optional
from weather_provider import WeatherProviderBase, WeatherProviderError
from weather_data import Location


class OpenWeatherProvider(WeatherProviderBase):
    """
    Weather provider using the free OpenWeather 2.5 APIs.

    Current conditions: https://openweathermap.org/current
    Forecast (3-hour steps over 5 days): https://openweathermap.org/forecast5
    Units are always metric; the normalizer relies on that.
    """

    BASE_URL = "https://api.openweathermap.org/data/2.5"
    UNITS = "metric"

    def __init__(
        self,
        api_key: str,
        lang: str = "en",
        timeout: int = 10
    ):
        """
        Initialize OpenWeather provider.

        Args:
            api_key: OpenWeather API key
            lang: Language code for descriptions (e.g., "en", "si")
            timeout: HTTP request timeout in seconds
        """
        if not api_key:
            logging.error("OpenWeather API key is not configured; every fetch will fail")
        self.api_key = api_key
        self.lang = lang
        self.timeout = timeout

    def fetch_current(self, location: Location) -> Optional[Dict[str, Any]]:
        """Fetch current weather for a location; None on any failure."""
        try:
            data = self._get("weather", location)
            if not data.get("main"):
                raise WeatherProviderError("Response missing 'main' block")
            if not data.get("weather"):
                raise WeatherProviderError("Response missing 'weather' array")
            return data
        except WeatherProviderError as e:
            logging.error(f"Current weather unavailable for {location.name}: {e}")
            return None

    def fetch_forecast(self, location: Location) -> Optional[Dict[str, Any]]:
        """Fetch the 5 day forecast for a location; None on any failure."""
        try:
            data = self._get("forecast", location)
            if not isinstance(data.get("list"), list):
                raise WeatherProviderError("Response missing 'list' array")
            return data
        except WeatherProviderError as e:
            logging.error(f"Forecast unavailable for {location.name}: {e}")
            return None

    def _get(self, endpoint: str, location: Location) -> Dict[str, Any]:
        """
        Make a single GET request to an OpenWeather endpoint.

        Raises:
            WeatherProviderError: If the request fails or the body is not a JSON object
        """
        url = f"{self.BASE_URL}/{endpoint}"
        params = {
            "lat": location.latitude,
            "lon": location.longitude,
            "appid": self.api_key,
            "units": self.UNITS,
            "lang": self.lang,
        }

        try:
            logging.info(f"Making OpenWeather API request: {url} ({location.name})")
            logging.debug(f"Request parameters: lat={location.latitude}, lon={location.longitude}, lang={self.lang}")

            response = requests.get(url, params=params, timeout=self.timeout)

            logging.info(f"API response status: {response.status_code}")

            if not response.ok:
                logging.error(f"API request failed with status {response.status_code}")
                self._handle_error_response(response)

            data = response.json()
            if not isinstance(data, dict):
                raise WeatherProviderError("Response is not a JSON object")
            logging.debug(f"API response data keys: {list(data.keys())}")
            return data

        except requests.exceptions.RequestException as e:
            logging.error(f"Network error during API request: {e}")
            raise WeatherProviderError(f"Network error: {str(e)}")
        except ValueError as e:
            logging.error(f"Failed to decode API response: {e}")
            raise WeatherProviderError(f"Failed to parse response: {str(e)}")

    def _handle_error_response(self, response: requests.Response) -> None:
        """Parse and raise error from OpenWeather error response."""
        try:
            error_data = response.json()
        except ValueError:
            # Not JSON, use HTTP status
            logging.error(f"Non-JSON error response: HTTP {response.status_code}, body: {response.text[:500]}")
            raise WeatherProviderError(
                f"HTTP {response.status_code}: {response.text[:200]}"
            )

        if not isinstance(error_data, dict):
            error_data = {}
        cod = error_data.get("cod", response.status_code)
        message = error_data.get("message", "Unknown error")
        logging.error(f"OpenWeather API error response: {error_data}")
        raise WeatherProviderError(f"OpenWeather API error {cod}: {message}")
