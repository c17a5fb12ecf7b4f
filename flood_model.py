"""
Flood risk classifier.

A random forest trained once at start-up on a small hand-authored table of
urban flood scenarios. The trained model is never refit; request handlers
share one instance.
"""

import logging

import numpy as np
import pandas as pd
from sklearn.ensemble import RandomForestClassifier

import config

logger = logging.getLogger(__name__)

FEATURE_NAMES = [
    "rainfall",
    "altitude",
    "area_elevation",
    "road_elevation",
    "drainage_system",
]

FLOOD = 1
NO_FLOOD = 0

# Rainfall (mm), altitude (m), area elevation (m), road elevation (m),
# drainage system (1=Fair, 2=Good, 3=Very Good) → label
TRAINING_SAMPLES = (
    ((50, 100, 50, 52, 3), NO_FLOOD),     # very good drainage, high ground
    ((200, 5, 2, 1, 1), FLOOD),           # fair drainage, low ground, heavy rain
    ((150, 10, 5, 4, 1), FLOOD),
    ((20, 200, 150, 152, 3), NO_FLOOD),
    ((300, 2, 1, 1, 1), FLOOD),
    ((80, 50, 20, 22, 2), NO_FLOOD),
    ((120, 15, 8, 7, 2), NO_FLOOD),
    ((180, 8, 4, 3, 1), FLOOD),
    ((40, 120, 80, 82, 3), NO_FLOOD),
    ((250, 5, 3, 2, 1), FLOOD),
    ((60, 40, 15, 16, 2), NO_FLOOD),
    ((220, 12, 6, 5, 1), FLOOD),
    ((10, 300, 250, 252, 3), NO_FLOOD),
    ((100, 20, 10, 11, 2), NO_FLOOD),
    ((140, 18, 9, 8, 1), NO_FLOOD),
)


def training_frame(samples=TRAINING_SAMPLES):
    """Return (X, y) for the given samples as a DataFrame and Series."""
    X = pd.DataFrame([list(f) for f, _ in samples], columns=FEATURE_NAMES, dtype=float)
    y = pd.Series([label for _, label in samples], name="flood")
    return X, y


class FloodRiskModel:
    """Read-only wrapper around a fitted estimator."""

    def __init__(self, estimator, metrics=None):
        self._estimator = estimator
        self._metrics = dict(metrics or {})

    @classmethod
    def train(cls, samples=TRAINING_SAMPLES, n_estimators=config.N_ESTIMATORS,
              random_state=config.RANDOM_STATE):
        X, y = training_frame(samples)

        # Every tree sees the full table; randomness comes from feature
        # subsampling, so each training row is reproduced exactly.
        estimator = RandomForestClassifier(
            n_estimators=n_estimators,
            bootstrap=False,
            random_state=random_state,
        )
        estimator.fit(X, y)

        metrics = {
            "accuracy": float(estimator.score(X, y)),
            "n_samples": len(X),
        }
        logger.info(
            "Random forest trained on %d samples (%d trees), accuracy %.2f",
            len(X), n_estimators, metrics["accuracy"],
        )
        return cls(estimator, metrics)

    @property
    def metrics(self):
        return dict(self._metrics)

    def describe(self):
        return {
            "model_type": type(self._estimator).__name__,
            "n_estimators": getattr(self._estimator, "n_estimators", None),
            "features": list(FEATURE_NAMES),
            "training_samples": self._metrics.get("n_samples"),
            "training_accuracy": self._metrics.get("accuracy"),
        }

    def predict(self, features):
        """
        Classify one feature vector.

        Returns (label, flood_probability). When the estimator cannot give
        class probabilities the probability is a fixed heuristic based on
        the label, so treat it as a confidence proxy.
        """
        X = pd.DataFrame([list(features)], columns=FEATURE_NAMES, dtype=float)
        label = int(self._estimator.predict(X)[0])

        try:
            probabilities = self._estimator.predict_proba(X)[0]
            classes = list(self._estimator.classes_)
            flood_prob = float(probabilities[classes.index(FLOOD)]) if FLOOD in classes else 0.0
        except Exception as e:
            logger.warning("Probability estimate unavailable, using heuristic (%s)", e)
            flood_prob = (
                config.FALLBACK_FLOOD_PROBABILITY if label == FLOOD
                else config.FALLBACK_NO_FLOOD_PROBABILITY
            )

        if np.isnan(flood_prob):
            flood_prob = 0.0
        return label, flood_prob


def risk_level(probability, high=None, medium=None):
    """Bucket a flood probability in [0, 1] into High / Medium / Low."""
    high = config.HIGH_RISK_THRESHOLD if high is None else high
    medium = config.MEDIUM_RISK_THRESHOLD if medium is None else medium
    if probability > high:
        return "High"
    if probability > medium:
        return "Medium"
    return "Low"
