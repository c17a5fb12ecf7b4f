import pytest
import requests

import config
from environmental_data import (
    ESTIMATED,
    FALLBACK,
    MEASURED,
    EnvironmentalReading,
    fetch_altitude,
    fetch_rainfall,
    get_environmental_data,
    simulate_elevations,
)
from tests.conftest import FakeResponse

WEATHER = config.WEATHER_API_URL
ELEVATION = config.ELEVATION_API_URL


def test_fetch_rainfall_reads_first_daily_sum(upstream):
    fake = upstream({WEATHER: FakeResponse({"daily": {"precipitation_sum": [12.34, 5.0]}})})

    assert fetch_rainfall(27.7, 85.3) == (12.34, "open-meteo")
    params = fake.calls[0]["params"]
    assert params["latitude"] == 27.7
    assert params["longitude"] == 85.3
    assert params["daily"] == "precipitation_sum"
    assert params["timezone"] == "auto"


@pytest.mark.parametrize("payload", [
    {},
    {"daily": {}},
    {"daily": {"precipitation_sum": []}},
    {"daily": {"precipitation_sum": [None]}},
])
def test_fetch_rainfall_missing_value_is_zero(upstream, payload):
    upstream({WEATHER: FakeResponse(payload)})
    assert fetch_rainfall(0, 0) == (0.0, "open-meteo")


@pytest.mark.parametrize("answer", [
    requests.ConnectionError("down"),
    requests.Timeout("slow"),
    FakeResponse({"error": True}, status_code=503),
    FakeResponse(ValueError("not json")),
    FakeResponse(["unexpected"]),
])
def test_fetch_rainfall_failure_falls_back(upstream, answer):
    upstream({WEATHER: answer})
    assert fetch_rainfall(0, 0) == (0.0, FALLBACK)


def test_fetch_altitude(upstream):
    fake = upstream({ELEVATION: FakeResponse({"results": [{"elevation": 1337}]})})

    assert fetch_altitude(27.7, 85.3) == (1337.0, "open-elevation")
    assert fake.calls[0]["params"] == {"locations": "27.7,85.3"}


def test_fetch_altitude_failure_falls_back(upstream):
    upstream({ELEVATION: FakeResponse({}, status_code=500)})
    assert fetch_altitude(0, 0) == (0.0, FALLBACK)


def test_simulated_elevations_stay_within_jitter():
    for _ in range(200):
        area, road = simulate_elevations(100.0)
        assert 99.0 <= area <= 101.0
        assert 99.75 <= road <= 100.25


def test_simulated_elevations_custom_jitter():
    area, road = simulate_elevations(10.0, area_jitter=0, road_jitter=0)
    assert (area, road) == (10.0, 10.0)


def test_get_environmental_data_measured(upstream, monkeypatch):
    upstream({
        WEATHER: FakeResponse({"daily": {"precipitation_sum": [42.26]}}),
        ELEVATION: FakeResponse({"results": [{"elevation": 1400}]}),
    })
    monkeypatch.setattr(config, "AREA_ELEVATION_JITTER", 0.0)
    monkeypatch.setattr(config, "ROAD_ELEVATION_JITTER", 0.0)

    payload = get_environmental_data(27.7, 85.3).to_dict()

    assert payload == {
        "rainfall": "42.3",
        "altitude": "1400.0",
        "areaElevation": "1400.0",
        "roadElevation": "1400.0",
        "dataQuality": MEASURED,
        "sources": {"rainfall": "open-meteo", "altitude": "open-elevation"},
    }


def test_get_environmental_data_weather_down(upstream):
    upstream({
        WEATHER: requests.ConnectionError("down"),
        ELEVATION: FakeResponse({"results": [{"elevation": 5}]}),
    })

    reading = get_environmental_data(1.0, 2.0)

    assert reading.rainfall == 0.0
    assert reading.altitude == 5.0
    assert reading.data_quality == ESTIMATED
    assert reading.to_dict()["rainfall"] == "0.0"
    assert reading.sources == {"rainfall": FALLBACK, "altitude": "open-elevation"}


def test_reading_formats_one_decimal():
    reading = EnvironmentalReading(3.14159, 2.0, 1.96, -0.04, {"rainfall": "open-meteo"})
    payload = reading.to_dict()
    assert payload["rainfall"] == "3.1"
    assert payload["altitude"] == "2.0"
    assert payload["areaElevation"] == "2.0"
    assert payload["roadElevation"] == "-0.0"
    assert payload["dataQuality"] == MEASURED
