"""Shared fixtures: OpenWeather-shaped payloads, a controllable clock, a fake provider."""
import threading

import pytest

from weather_provider import WeatherProviderBase

COLOMBO_TZ_OFFSET = 19800  # UTC+05:30
FORECAST_START = 1792348200  # 2026-10-19 00:00 local (Monday)
THREE_HOURS = 10800


class FakeClock:
    """Clock returning a fixed time that tests move forward by hand."""

    def __init__(self, start: float = 1792369800.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeProvider(WeatherProviderBase):
    """Provider serving canned payloads per location name and counting calls."""

    def __init__(self, current=None, forecast=None):
        self.current = dict(current or {})
        self.forecast = dict(forecast or {})
        self.current_calls = []
        self.forecast_calls = []
        self._lock = threading.Lock()

    def fetch_current(self, location):
        with self._lock:
            self.current_calls.append(location.name)
        payload = self.current.get(location.name)
        if isinstance(payload, Exception):
            raise payload
        return payload

    def fetch_forecast(self, location):
        with self._lock:
            self.forecast_calls.append(location.name)
        payload = self.forecast.get(location.name)
        if isinstance(payload, Exception):
            raise payload
        return payload


def build_current(
    condition="Clear",
    description="clear sky",
    temp=30.4,
    feels_like=34.1,
    humidity=70,
    wind_ms=2.0,
    visibility=10000,
    name="Colombo",
):
    payload = {
        "coord": {"lon": 79.8612, "lat": 6.9271},
        "weather": [{"id": 800, "main": condition, "description": description, "icon": "01d"}],
        "main": {"temp": temp, "feels_like": feels_like, "pressure": 1009, "humidity": humidity},
        "wind": {"speed": wind_ms, "deg": 240},
        "dt": 1792369800,
        "sys": {"country": "LK", "sunrise": 1792369080, "sunset": 1792412460},
        "timezone": COLOMBO_TZ_OFFSET,
        "name": name,
    }
    if visibility is not None:
        payload["visibility"] = visibility
    return payload


def build_forecast(
    count=40,
    start=FORECAST_START,
    condition="Clouds",
    temps=None,
    pop=0.0,
    wind_ms=2.0,
    humidity=75,
):
    """Forecast payload with `count` 3-hour entries beginning at `start`."""
    entries = []
    for index in range(count):
        temp = temps[index % len(temps)] if temps else 25.0 + (index % 8)
        entries.append({
            "dt": start + index * THREE_HOURS,
            "main": {"temp": temp, "feels_like": temp + 1, "humidity": humidity},
            "weather": [{"main": condition, "description": condition.lower(), "icon": "04d"}],
            "wind": {"speed": wind_ms, "deg": 200},
            "pop": pop,
        })
    return {
        "cod": "200",
        "cnt": count,
        "list": entries,
        "city": {
            "name": "Colombo",
            "timezone": COLOMBO_TZ_OFFSET,
            "sunrise": 1792369080,  # 05:48 local on the first day
            "sunset": 1792412460,
        },
    }


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def current_payload():
    return build_current


@pytest.fixture
def forecast_payload():
    return build_forecast
