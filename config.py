"""
Configuration constants for the Crowd Hydra flood risk dashboard.

Values can be overridden through environment variables or a .env file.
"""

import os

from dotenv import load_dotenv

load_dotenv()

# ── Server ───────────────────────────────────────────────────────────────────
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
DEBUG = ENVIRONMENT != "production"
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# ── Upstream APIs ────────────────────────────────────────────────────────────
WEATHER_API_URL = "https://api.open-meteo.com/v1/forecast"
ELEVATION_API_URL = "https://api.open-elevation.com/api/v1/lookup"
GEOCODER_API_URL = "https://nominatim.openstreetmap.org/search"
GEOCODER_USER_AGENT = os.getenv("GEOCODER_USER_AGENT", "CrowdHydra/1.0")
GEOCODER_LIMIT = 5
UPSTREAM_TIMEOUT = float(os.getenv("UPSTREAM_TIMEOUT", "10"))

# ── GIS simulation (metres) ──────────────────────────────────────────────────
# Area and road elevations are altitude plus uniform noise in ±jitter.
AREA_ELEVATION_JITTER = float(os.getenv("AREA_ELEVATION_JITTER", "1.0"))
ROAD_ELEVATION_JITTER = float(os.getenv("ROAD_ELEVATION_JITTER", "0.25"))

# ── Classifier ───────────────────────────────────────────────────────────────
N_ESTIMATORS = 50
RANDOM_STATE = 42

# Used when the estimator cannot report class probabilities.
FALLBACK_FLOOD_PROBABILITY = 0.85
FALLBACK_NO_FLOOD_PROBABILITY = 0.15

# ── Risk classification ──────────────────────────────────────────────────────
#   p > HIGH    → High
#   p > MEDIUM  → Medium
#   otherwise   → Low
HIGH_RISK_THRESHOLD = float(os.getenv("HIGH_RISK_THRESHOLD", "0.7"))
MEDIUM_RISK_THRESHOLD = float(os.getenv("MEDIUM_RISK_THRESHOLD", "0.4"))

# ── Drainage ─────────────────────────────────────────────────────────────────
DRAINAGE_CODES = {
    "Fair": 1,
    "Good": 2,
    "Very Good": 3,
}
DEFAULT_DRAINAGE_CODE = DRAINAGE_CODES["Good"]
