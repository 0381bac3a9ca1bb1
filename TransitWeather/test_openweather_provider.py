"""Tests for OpenWeather provider."""
import pytest
import requests
from unittest.mock import Mock, patch
from openweather_provider import OpenWeatherProvider
from locations import LocationRegistry


@pytest.fixture
def provider():
    """Create OpenWeather provider instance."""
    return OpenWeatherProvider(api_key="test_key", timeout=5)


@pytest.fixture
def colombo():
    return LocationRegistry().resolve("Colombo")


def ok_response(payload):
    response = Mock()
    response.ok = True
    response.status_code = 200
    response.json.return_value = payload
    return response


def test_fetch_current_success(provider, colombo, current_payload):
    """Test successful API call returns the raw payload."""
    payload = current_payload(condition="Rain", description="light rain")
    with patch('openweather_provider.requests.get') as mock_get:
        mock_get.return_value = ok_response(payload)

        data = provider.fetch_current(colombo)

        assert data == payload
        mock_get.assert_called_once()
        url = mock_get.call_args[0][0]
        params = mock_get.call_args[1]["params"]
        assert url == "https://api.openweathermap.org/data/2.5/weather"
        assert params["lat"] == 6.9271
        assert params["lon"] == 79.8612
        assert params["appid"] == "test_key"
        assert params["units"] == "metric"
        assert mock_get.call_args[1]["timeout"] == 5


def test_fetch_forecast_success(provider, colombo, forecast_payload):
    payload = forecast_payload()
    with patch('openweather_provider.requests.get') as mock_get:
        mock_get.return_value = ok_response(payload)

        data = provider.fetch_forecast(colombo)

        assert data == payload
        assert mock_get.call_args[0][0].endswith("/forecast")


def test_fetch_current_http_error(provider, colombo, caplog):
    """Non-success status yields None and logs the provider message."""
    with patch('openweather_provider.requests.get') as mock_get:
        mock_response = Mock()
        mock_response.ok = False
        mock_response.status_code = 401
        mock_response.json.return_value = {
            "cod": 401,
            "message": "Invalid API key"
        }
        mock_get.return_value = mock_response

        assert provider.fetch_current(colombo) is None

    assert "Invalid API key" in caplog.text


def test_fetch_current_non_json_error(provider, colombo, caplog):
    with patch('openweather_provider.requests.get') as mock_get:
        mock_response = Mock()
        mock_response.ok = False
        mock_response.status_code = 502
        mock_response.text = "<html>Bad Gateway</html>"
        mock_response.json.side_effect = ValueError("not json")
        mock_get.return_value = mock_response

        assert provider.fetch_current(colombo) is None

    assert "HTTP 502" in caplog.text


def test_fetch_network_error(provider, colombo, caplog):
    """Transport errors are not raised to the caller."""
    with patch('openweather_provider.requests.get') as mock_get:
        mock_get.side_effect = requests.exceptions.ConnectionError("Connection timeout")

        assert provider.fetch_current(colombo) is None
        assert provider.fetch_forecast(colombo) is None

    assert "Network error" in caplog.text


def test_fetch_single_attempt(provider, colombo):
    """A failed fetch is not retried."""
    with patch('openweather_provider.requests.get') as mock_get:
        mock_get.side_effect = requests.exceptions.Timeout("timed out")

        provider.fetch_forecast(colombo)

        assert mock_get.call_count == 1


def test_fetch_current_missing_main(provider, colombo):
    """Test handling of missing main block."""
    response = {
        "weather": [{"main": "Clear", "description": "clear sky"}],
    }
    with patch('openweather_provider.requests.get') as mock_get:
        mock_get.return_value = ok_response(response)

        assert provider.fetch_current(colombo) is None


def test_fetch_current_missing_weather(provider, colombo):
    """Test handling of empty 'weather' array."""
    response = {"main": {"temp": 20.0}, "dt": 1684929490, "weather": []}
    with patch('openweather_provider.requests.get') as mock_get:
        mock_get.return_value = ok_response(response)

        assert provider.fetch_current(colombo) is None


def test_fetch_forecast_missing_list(provider, colombo):
    with patch('openweather_provider.requests.get') as mock_get:
        mock_get.return_value = ok_response({"cod": "200", "city": {}})

        assert provider.fetch_forecast(colombo) is None


def test_fetch_malformed_body(provider, colombo):
    with patch('openweather_provider.requests.get') as mock_get:
        mock_response = ok_response(None)
        mock_response.json.side_effect = ValueError("Expecting value")
        mock_get.return_value = mock_response

        assert provider.fetch_current(colombo) is None


def test_missing_api_key_logged_at_construction(caplog):
    OpenWeatherProvider(api_key="")
    assert "API key is not configured" in caplog.text
