"""Measure defaults and configuration.

All tunable defaults of the measure library live here so that every
measure constructed without explicit arguments agrees with every other.
Bounds are enforced by pydantic at construction time.
"""

from __future__ import annotations

import numpy as np
from pydantic import BaseModel, Field


# float64 machine epsilon, the default clamp for log scores
MACHINE_EPS = float(np.finfo(np.float64).eps)


class LogParams(BaseModel):
    """Parameters for the log score and log loss."""

    tol: float = Field(
        default=MACHINE_EPS,
        gt=0.0,
        lt=0.5,
        description="Probabilities are clamped to [tol, 1 - tol] before taking the log.",
    )


class SphericalParams(BaseModel):
    """Parameters for the spherical score."""

    alpha: float = Field(
        default=2.0,
        gt=1.0,
        description="Exponent of the alpha-norm. Only 2 is defined for non-finite targets.",
    )


class FiniteParams(BaseModel):
    """Parameters for finite (categorical) distributions."""

    prob_sum_tolerance: float = Field(
        default=1e-6,
        ge=0.0,
        le=1e-2,
        description="Allowed deviation of a probability vector sum from 1.0.",
    )


class EvaluationParams(BaseModel):
    """Parameters for the evaluator."""

    vectorize: bool = Field(
        default=True,
        description="Use the bulk path for arrays of finite distributions sharing one class set.",
    )


class MeasureParams(BaseModel):
    """Master configuration for all measure parameters."""

    log: LogParams = Field(default_factory=LogParams)
    spherical: SphericalParams = Field(default_factory=SphericalParams)
    finite: FiniteParams = Field(default_factory=FiniteParams)
    evaluation: EvaluationParams = Field(default_factory=EvaluationParams)


# Default instance for easy import
DEFAULT_MEASURE_PARAMS = MeasureParams()


def get_measure_params() -> MeasureParams:
    """Get measure parameters."""
    return DEFAULT_MEASURE_PARAMS


__all__ = [
    "MACHINE_EPS",
    "LogParams",
    "SphericalParams",
    "FiniteParams",
    "EvaluationParams",
    "MeasureParams",
    "DEFAULT_MEASURE_PARAMS",
    "get_measure_params",
]
