from __future__ import annotations

import copy
from typing import Any, Callable, Dict, List

import httpx
import pytest

from settings import get_settings

LONDON_RESPONSE: Dict[str, Any] = {
    "coord": {"lon": -0.1257, "lat": 51.5085},
    "weather": [
        {"id": 803, "main": "Clouds", "description": "broken clouds", "icon": "04n"}
    ],
    "base": "stations",
    "main": {
        "temp": 280.34,
        "feels_like": 276.76,
        "temp_min": 278.64,
        "temp_max": 281.62,
        "pressure": 1021,
        "humidity": 86,
    },
    "visibility": 10000,
    "wind": {"speed": 6.17, "deg": 300},
    "clouds": {"all": 75},
    "dt": 1675061138,
    "sys": {
        "type": 2,
        "id": 2075535,
        "country": "GB",
        "sunrise": 1675064547,
        "sunset": 1675097090,
    },
    "timezone": 0,
    "id": 2643743,
    "name": "London",
    "cod": 200,
}

SAN_FRANCISCO_GEO: Dict[str, Any] = {
    "status": "success",
    "country": "United States",
    "countryCode": "US",
    "region": "CA",
    "regionName": "California",
    "city": "San Francisco",
    "zip": "94107",
    "lat": 37.7749,
    "lon": -122.4194,
    "timezone": "America/Los_Angeles",
    "isp": "Google",
    "org": "Google LLC",
    "as": "AS15169 Google LLC",
}


@pytest.fixture()
def weather_body() -> Dict[str, Any]:
    return copy.deepcopy(LONDON_RESPONSE)


@pytest.fixture()
def geo_body() -> Dict[str, Any]:
    return copy.deepcopy(SAN_FRANCISCO_GEO)


class RecordingTransport(httpx.MockTransport):
    """Mock transport that remembers every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: List[httpx.Request] = []

        def recording_handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(recording_handler)


@pytest.fixture()
def make_transport() -> Callable[[Callable[[httpx.Request], httpx.Response]], RecordingTransport]:
    return RecordingTransport


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch, tmp_path):
    monkeypatch.setenv("MAUSAM_CACHE_PATH", str(tmp_path / "config" / "location.json"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
