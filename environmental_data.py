"""
Environmental data gateway.

Looks up daily rainfall (Open-Meteo) and ground elevation (Open-Elevation)
for a coordinate and derives simulated area and road elevations from it.
Upstream failures never propagate: the affected value falls back to 0 and
the record is flagged as estimated.
"""

import logging
from dataclasses import dataclass, field, asdict

import numpy as np
import requests

import config

logger = logging.getLogger(__name__)

MEASURED = "measured"
ESTIMATED = "estimated"
FALLBACK = "fallback"


@dataclass
class EnvironmentalReading:
    rainfall: float
    altitude: float
    area_elevation: float
    road_elevation: float
    sources: dict = field(default_factory=dict)

    @property
    def data_quality(self):
        if any(source == FALLBACK for source in self.sources.values()):
            return ESTIMATED
        return MEASURED

    def to_dict(self):
        """JSON payload: numbers as one-decimal strings, camelCase keys."""
        return {
            "rainfall": f"{self.rainfall:.1f}",
            "altitude": f"{self.altitude:.1f}",
            "areaElevation": f"{self.area_elevation:.1f}",
            "roadElevation": f"{self.road_elevation:.1f}",
            "dataQuality": self.data_quality,
            "sources": dict(self.sources),
        }


def _as_number(value):
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not np.isfinite(number):
        return 0.0
    return number


def _get_json(url, params):
    response = requests.get(url, params=params, timeout=config.UPSTREAM_TIMEOUT)
    response.raise_for_status()
    return response.json()


def fetch_rainfall(lat, lng):
    """
    Today's precipitation sum in mm.

    Returns (rainfall, source) where source is "open-meteo" or "fallback".
    """
    params = {
        "latitude": lat,
        "longitude": lng,
        "daily": "precipitation_sum",
        "timezone": "auto",
    }
    try:
        data = _get_json(config.WEATHER_API_URL, params)
        sums = (data.get("daily") or {}).get("precipitation_sum") or [0]
        return _as_number(sums[0]), "open-meteo"
    except (requests.RequestException, ValueError, TypeError, AttributeError, LookupError) as e:
        logger.warning("Weather API failed, using fallback 0 (%s)", e)
        return 0.0, FALLBACK


def fetch_altitude(lat, lng):
    """
    Ground elevation in metres.

    Returns (altitude, source) where source is "open-elevation" or "fallback".
    """
    params = {"locations": f"{lat},{lng}"}
    try:
        data = _get_json(config.ELEVATION_API_URL, params)
        results = data.get("results") or [{}]
        return _as_number(results[0].get("elevation")), "open-elevation"
    except (requests.RequestException, ValueError, TypeError, AttributeError, LookupError) as e:
        logger.warning("Elevation API failed, using fallback 0 (%s)", e)
        return 0.0, FALLBACK


def simulate_elevations(altitude, area_jitter=None, road_jitter=None):
    """Area and road elevation around the point: altitude plus uniform noise."""
    area_jitter = config.AREA_ELEVATION_JITTER if area_jitter is None else area_jitter
    road_jitter = config.ROAD_ELEVATION_JITTER if road_jitter is None else road_jitter
    area_elevation = altitude + np.random.uniform(-area_jitter, area_jitter)
    road_elevation = altitude + np.random.uniform(-road_jitter, road_jitter)
    return float(area_elevation), float(road_elevation)


def get_environmental_data(lat, lng):
    rainfall, rainfall_source = fetch_rainfall(lat, lng)
    altitude, altitude_source = fetch_altitude(lat, lng)
    area_elevation, road_elevation = simulate_elevations(altitude)

    reading = EnvironmentalReading(
        rainfall=rainfall,
        altitude=altitude,
        area_elevation=area_elevation,
        road_elevation=road_elevation,
        sources={"rainfall": rainfall_source, "altitude": altitude_source},
    )
    logger.info("Environmental data for (%s, %s): %s", lat, lng, asdict(reading))
    return reading
