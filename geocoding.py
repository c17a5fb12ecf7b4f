"""
Free-text place lookup through Nominatim (OpenStreetMap).
"""

import logging

import requests

import config

logger = logging.getLogger(__name__)


def search_places(query, limit=config.GEOCODER_LIMIT):
    """Return up to `limit` matches as {name, fullName, lat, lng}; [] on failure."""
    params = {"q": query, "format": "json", "limit": limit}
    headers = {"User-Agent": config.GEOCODER_USER_AGENT, "Accept": "application/json"}

    try:
        response = requests.get(
            config.GEOCODER_API_URL,
            params=params,
            headers=headers,
            timeout=config.UPSTREAM_TIMEOUT,
        )
        response.raise_for_status()
        places = response.json()
    except (requests.RequestException, ValueError) as e:
        logger.warning("Geocoding failed for %r (%s)", query, e)
        return []

    results = []
    for place in places if isinstance(places, list) else []:
        try:
            display_name = place.get("display_name", "")
            results.append({
                "name": display_name.split(",")[0],
                "fullName": display_name,
                "lat": float(place["lat"]),
                "lng": float(place["lon"]),
            })
        except (KeyError, TypeError, ValueError, AttributeError):
            continue
    return results
