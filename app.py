"""
Crowd Hydra - smart urban flood prediction.
Flask backend serving the prediction API and the dashboard.
"""

import logging
import math
import os
import re

from flask import Flask, request, jsonify, send_from_directory, current_app
from flask_cors import CORS

import config
from environmental_data import get_environmental_data
from flood_model import FloodRiskModel, FLOOD, risk_level
from geocoding import search_places


def setup_logging():
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    return logging.getLogger(__name__)


logger = setup_logging()

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

app = Flask(__name__)
CORS(app, resources={r"/*": {"origins": "*"}})

app.config["ENVIRONMENT"] = config.ENVIRONMENT
if config.DEBUG:
    app.config["SEND_FILE_MAX_AGE_DEFAULT"] = 0

app.config["FLOOD_MODEL"] = FloodRiskModel.train()


# ─── Input normalisation ──────────────────────────────────────────────────────

_LEADING_NUMBER = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def parse_number(value):
    """
    Read a form value as a float.

    Strings are read up to the first character that can't be part of a
    number ("12.5mm" → 12.5). Anything else non-numeric becomes 0.
    """
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = _LEADING_NUMBER.match(value)
        if not match:
            return 0.0
        number = float(match.group())
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def drainage_code(value):
    if isinstance(value, str):
        return config.DRAINAGE_CODES.get(value, config.DEFAULT_DRAINAGE_CODE)
    return config.DEFAULT_DRAINAGE_CODE


def build_features(data):
    """Feature vector in training order from a client record."""
    return [
        parse_number(data.get("rainfall")),
        parse_number(data.get("altitude")),
        parse_number(data.get("areaElevation")),
        parse_number(data.get("roadElevation")),
        drainage_code(data.get("drainageSystem")),
    ]


# ─── Routes ───────────────────────────────────────────────────────────────────

@app.route("/api/predict", methods=["POST"])
def predict():
    try:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            data = {}

        features = build_features(data)
        model = current_app.config["FLOOD_MODEL"]
        label, flood_prob = model.predict(features)

        return jsonify({
            "prediction": "Flood Likely" if label == FLOOD else "No Flood Expected",
            "probability": f"{flood_prob * 100:.2f}",
            "riskLevel": risk_level(flood_prob),
        })

    except Exception:
        logger.exception("Prediction error")
        return jsonify({"error": "Failed to process prediction"}), 500


@app.route("/api/environmental-data")
def environmental_data():
    lat = request.args.get("lat", "").strip()
    lng = request.args.get("lng", "").strip()
    if not lat or not lng:
        return jsonify({"error": "Latitude and longitude are required"}), 400

    try:
        lat, lng = float(lat), float(lng)
    except ValueError:
        return jsonify({"error": "Latitude and longitude must be numbers"}), 400

    try:
        reading = get_environmental_data(lat, lng)
        return jsonify(reading.to_dict())
    except Exception:
        logger.exception("Environmental data fetch error")
        return jsonify({"error": "Failed to fetch environmental data"}), 500


@app.route("/api/geocode")
def geocode():
    query = request.args.get("q", "").strip()
    if not query:
        return jsonify({"error": "Search query is required"}), 400
    return jsonify({"query": query, "results": search_places(query)})


@app.route("/api/model")
def model_info():
    return jsonify(current_app.config["FLOOD_MODEL"].describe())


@app.route("/health")
def health():
    return jsonify({"status": "running", "environment": current_app.config["ENVIRONMENT"]})


@app.route("/")
def home():
    return send_from_directory(BASE_DIR, "index.html")


if __name__ == "__main__":
    logger.info("🌊 Crowd Hydra server running on http://localhost:%d (%s)", config.PORT, config.ENVIRONMENT)
    app.run(host=config.HOST, port=config.PORT, debug=config.DEBUG)
