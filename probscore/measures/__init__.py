"""Measures for probabilistic predictions.

Contains:
- The measure base class and its metadata
- Proper scoring rules (log, Brier, spherical) and AUC
- Fail-fast validation of predictions and parameters
- The evaluator (bulk and per-observation paths, aggregation)
- The alias table
"""

from __future__ import annotations

from .base import Measure
from .evaluator import aggregate, call, per_observation, single
from .probabilistic import (
    AUC,
    AreaUnderCurve,
    BrierLoss,
    BrierScore,
    CrossEntropy,
    LogLoss,
    LogScore,
    SphericalScore,
)
from .registry import (
    ALIASES,
    area_under_curve,
    auc,
    brier_loss,
    brier_score,
    cross_entropy,
    info,
    log_loss,
    log_score,
    lookup,
    measures,
    spherical_score,
)
from .validation import MeasureValidator

__all__ = [
    "Measure",
    "MeasureValidator",
    "aggregate",
    "call",
    "per_observation",
    "single",
    "AUC",
    "AreaUnderCurve",
    "BrierLoss",
    "BrierScore",
    "CrossEntropy",
    "LogLoss",
    "LogScore",
    "SphericalScore",
    "ALIASES",
    "area_under_curve",
    "auc",
    "brier_loss",
    "brier_score",
    "cross_entropy",
    "info",
    "log_loss",
    "log_score",
    "lookup",
    "measures",
    "spherical_score",
]
