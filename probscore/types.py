"""Type definitions and errors for the measure library."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class MeasureError(Exception):
    """Base class for all measure errors."""

    pass


class ArgumentError(MeasureError, ValueError):
    """Raised when a measure is called with unusable arguments."""

    pass


class UnsupportedDistributionError(ArgumentError):
    """Raised when a predicted distribution family is not accepted by a measure."""

    pass


class InvalidParameterError(ArgumentError):
    """Raised when a measure or distribution parameter is out of range."""

    pass


class DimensionMismatchError(ArgumentError):
    """Raised when predictions, observations and weights differ in length."""

    pass


class DegenerateInputError(MeasureError):
    """Raised when the input admits no defined aggregate value."""

    pass


# ─────────────────────────────────────────────────────────────────────────────
# Enums
# ─────────────────────────────────────────────────────────────────────────────


class Orientation(str, Enum):
    """Whether higher values of a measure are better (score) or worse (loss)."""
    SCORE = "score"
    LOSS = "loss"


class Aggregation(str, Enum):
    """How per-observation values become one number."""
    MEAN = "mean"      # per-observation values, then (weighted) mean
    WHOLE = "whole"    # single whole-array computation (AUC)


class PredictionType(str, Enum):
    PROBABILISTIC = "probabilistic"
    DETERMINISTIC = "deterministic"
    INTERVAL = "interval"
    UNKNOWN = "unknown"


class DistributionKind(str, Enum):
    """Coarse family of a predicted distribution."""
    FINITE = "finite"
    CONTINUOUS = "continuous"
    COUNT = "count"


class Scitype(str, Enum):
    """Scientific type tags for targets and inputs."""
    MULTICLASS = "Multiclass"
    ORDERED_FACTOR = "OrderedFactor"
    BINARY = "Finite{2}"
    CONTINUOUS = "Continuous"
    COUNT = "Count"
    TABLE = "Table"
    UNKNOWN = "Unknown"


# ─────────────────────────────────────────────────────────────────────────────
# Dataclasses for metadata
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class MeasureInfo:
    """Static metadata declared by each measure class."""

    name: str
    human_name: str
    instances: Tuple[str, ...]  # string aliases
    orientation: Orientation
    target_scitypes: Tuple[Scitype, ...]
    distribution_kinds: Tuple[DistributionKind, ...]
    supports_weights: bool = True
    aggregation: Aggregation = Aggregation.MEAN
    prediction_type: PredictionType = PredictionType.PROBABILISTIC

    @property
    def is_score(self) -> bool:
        return self.orientation is Orientation.SCORE


__all__ = [
    "MeasureError",
    "ArgumentError",
    "UnsupportedDistributionError",
    "InvalidParameterError",
    "DimensionMismatchError",
    "DegenerateInputError",
    "Orientation",
    "Aggregation",
    "PredictionType",
    "DistributionKind",
    "Scitype",
    "MeasureInfo",
]
