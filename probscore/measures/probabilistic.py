"""Proper scoring rules for probabilistic predictions.

Proper scoring rules reward honest, calibrated probability forecasts:
the best expected score is achieved by reporting your true beliefs.

- Log score / log loss: log-likelihood of the realized observation
- Brier score / Brier loss: quadratic rule
- Spherical score: probability of the observation over the alpha-norm
- Area under the ROC curve: rank-based, computed over the whole array

Scores are oriented so that bigger is better; each loss is the negated
score. Finite predictions use the class probability vector. Continuous
and count predictions use the density and its squared L2 norm in place
of the sum over classes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Collection

import numpy as np
from numpy.typing import NDArray
from scipy import stats

from probscore.config.measure_params import get_measure_params
from probscore.distributions.registry import DistributionFamily
from probscore.types import (
    Aggregation,
    ArgumentError,
    DegenerateInputError,
    DistributionKind,
    InvalidParameterError,
    MeasureInfo,
    Orientation,
    Scitype,
)

from .base import Measure


ALL_KINDS = (DistributionKind.FINITE, DistributionKind.CONTINUOUS, DistributionKind.COUNT)

MULTI_TARGETS = (
    Scitype.MULTICLASS,
    Scitype.ORDERED_FACTOR,
    Scitype.CONTINUOUS,
    Scitype.COUNT,
)


# ─────────────────────────────────────────────────────────────────────────────
# Rule kernels (scalar or vectorized over the leading axis)
# ─────────────────────────────────────────────────────────────────────────────


def clamped_log(p_observed: Any, tol: float) -> Any:
    """log(clamp(p(η), tol, 1 - tol))"""
    return np.log(np.clip(p_observed, tol, 1.0 - tol))


def brier_finite(p_observed: Any, probs: NDArray[np.float64]) -> Any:
    """2p(η) - Σ_c p(c)² - 1

    Zero for a point mass on the observed class, otherwise negative.
    """
    offset = 1.0 + np.sum(probs ** 2, axis=-1)
    return 2.0 * p_observed - offset


def brier_density(p_observed: float, squared_l2_norm: float) -> float:
    """2p(η) - ∫ p(t)² dt  (or Σ_t p(t)² for counts)"""
    return 2.0 * p_observed - squared_l2_norm


def spherical_finite(p_observed: Any, probs: NDArray[np.float64], alpha: float) -> Any:
    """(p(η) / ‖p‖_α)^(α - 1)"""
    alpha_norm = np.sum(probs ** alpha, axis=-1) ** (1.0 / alpha)
    return (p_observed / alpha_norm) ** (alpha - 1.0)


def spherical_density(p_observed: float, squared_l2_norm: float) -> float:
    """p(η) / ‖p‖₂"""
    return p_observed / np.sqrt(squared_l2_norm)


def mann_whitney_auc(scores: NDArray[np.float64], positive: NDArray[np.bool_]) -> float:
    """Area under the ROC curve via the Mann-Whitney U statistic.

    Ties share the average rank of their group.

    Args:
        scores: Shape (N,) predicted probability of the positive class
        positive: Shape (N,) True where the observation is the positive class

    Returns:
        U / (n_pos * n_neg)

    Raises:
        DegenerateInputError: If either class is absent from the observations
    """
    n = len(scores)
    n_pos = int(np.count_nonzero(positive))
    n_neg = n - n_pos
    if n_pos == 0 or n_neg == 0:
        raise DegenerateInputError(
            f"AUC is undefined with {n_pos} positive and {n_neg} negative observations"
        )
    ranks = stats.rankdata(scores, method="average")
    r_pos = ranks[positive].sum()
    u = r_pos - 0.5 * n_pos * (n_pos + 1)
    return float(u / (n_pos * n_neg))


def _density(family: DistributionFamily, d: Any, eta: Any) -> float:
    """p(η), rejecting NaN, infinite or negative values."""
    p = family.pdf(d, eta)
    if not (np.isfinite(p) and p >= 0):
        raise InvalidParameterError(
            f"{family.name} density at {eta!r} is {p}; expected a finite, non-negative value"
        )
    return p


def _finite_probs(family: DistributionFamily, d: Any) -> NDArray[np.float64]:
    return np.array([family.pdf(d, c) for c in family.classes(d)], dtype=np.float64)


# ─────────────────────────────────────────────────────────────────────────────
# Aggregated measures
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class AreaUnderCurve(Measure):
    """Area under the ROC curve for binary finite predictions.

    The second class of the fixed class ordering is the positive class.
    Missing values are not supported: filter with ``skipinvalid`` first.
    """

    info: ClassVar[MeasureInfo] = MeasureInfo(
        name="AreaUnderCurve",
        human_name="area under the ROC",
        instances=("area_under_curve", "auc"),
        orientation=Orientation.SCORE,
        target_scitypes=(Scitype.BINARY,),
        distribution_kinds=(DistributionKind.FINITE,),
        supports_weights=False,
        aggregation=Aggregation.WHOLE,
    )

    def score(self, family: DistributionFamily, d: Any, eta: Any) -> float:
        raise ArgumentError(f"{self.name} is not defined for a single observation")

    def from_scores(self, scores: NDArray[np.float64], positive: NDArray[np.bool_]) -> float:
        return mann_whitney_auc(scores, positive)


AUC = AreaUnderCurve


# ─────────────────────────────────────────────────────────────────────────────
# Unaggregated measures
# ─────────────────────────────────────────────────────────────────────────────


def _default_tol() -> float:
    return get_measure_params().log.tol


def _check_tol(tol: float) -> None:
    if not (0.0 < tol < 0.5):
        raise InvalidParameterError(f"tol must lie in (0, 0.5), got {tol}")


@dataclass(frozen=True)
class LogScore(Measure):
    """Log score, clamped to [tol, 1 - tol] before taking the log.

    For a binary target with "yes"/"no" labels and predicted probability
    of "yes" equal to 0.8, an observation of "no" scores log(0.2).
    """

    tol: float = field(default_factory=_default_tol)

    info: ClassVar[MeasureInfo] = MeasureInfo(
        name="LogScore",
        human_name="log score",
        instances=("log_score",),
        orientation=Orientation.SCORE,
        target_scitypes=MULTI_TARGETS,
        distribution_kinds=ALL_KINDS,
    )

    def __post_init__(self) -> None:
        _check_tol(self.tol)

    def score(self, family: DistributionFamily, d: Any, eta: Any) -> float:
        return clamped_log(_density(family, d, eta), self.tol)

    def score_matrix(self, probs, p_observed):
        return clamped_log(p_observed, self.tol)


@dataclass(frozen=True)
class LogLoss(Measure):
    """Log loss (cross entropy). The negated ``LogScore``."""

    tol: float = field(default_factory=_default_tol)

    info: ClassVar[MeasureInfo] = MeasureInfo(
        name="LogLoss",
        human_name="log loss",
        instances=("log_loss", "cross_entropy"),
        orientation=Orientation.LOSS,
        target_scitypes=MULTI_TARGETS,
        distribution_kinds=ALL_KINDS,
    )

    def __post_init__(self) -> None:
        _check_tol(self.tol)

    def score(self, family: DistributionFamily, d: Any, eta: Any) -> float:
        return -clamped_log(_density(family, d, eta), self.tol)

    def score_matrix(self, probs, p_observed):
        return -clamped_log(p_observed, self.tol)


CrossEntropy = LogLoss


@dataclass(frozen=True)
class BrierScore(Measure):
    """Brier score (a.k.a. quadratic score).

    Finite case, with p the predicted pmf and C the classes:

        2p(η) - Σ_{c ∈ C} p(c)² - 1

    This is a score: 0 is optimal and every other value is negative, the
    opposite sign of Brier's original definition. The binary case is not
    special-cased, so values may differ by a factor of two from other
    conventions.

    Continuous or count case, with p the density or pmf:

        2p(η) - ∫ p(t)² dt
    """

    info: ClassVar[MeasureInfo] = MeasureInfo(
        name="BrierScore",
        human_name="Brier score (a.k.a. quadratic score)",
        instances=("brier_score",),
        orientation=Orientation.SCORE,
        target_scitypes=MULTI_TARGETS,
        distribution_kinds=ALL_KINDS,
    )

    def score(self, family: DistributionFamily, d: Any, eta: Any) -> float:
        p = _density(family, d, eta)
        if family.is_finite:
            return brier_finite(p, _finite_probs(family, d))
        return brier_density(p, family.squared_l2_norm(d))

    def score_matrix(self, probs, p_observed):
        return brier_finite(p_observed, probs)


@dataclass(frozen=True)
class BrierLoss(Measure):
    """Brier loss (a.k.a. quadratic loss). The negated ``BrierScore``."""

    info: ClassVar[MeasureInfo] = MeasureInfo(
        name="BrierLoss",
        human_name="Brier loss (a.k.a. quadratic loss)",
        instances=("brier_loss",),
        orientation=Orientation.LOSS,
        target_scitypes=MULTI_TARGETS,
        distribution_kinds=ALL_KINDS,
    )

    def score(self, family: DistributionFamily, d: Any, eta: Any) -> float:
        return -BrierScore().score(family, d, eta)

    def score_matrix(self, probs, p_observed):
        return -brier_finite(p_observed, probs)


@dataclass(frozen=True)
class SphericalScore(Measure):
    """Spherical score.

    Finite case: (p(η) / ‖p‖_α)^(α - 1) with ‖p‖_α = (Σ_c p(c)^α)^(1/α).
    Continuous or count case (α = 2 only): p(η) / sqrt(∫ p(t)² dt).
    """

    alpha: float = field(default_factory=lambda: get_measure_params().spherical.alpha)

    info: ClassVar[MeasureInfo] = MeasureInfo(
        name="SphericalScore",
        human_name="Spherical score",
        instances=("spherical_score",),
        orientation=Orientation.SCORE,
        target_scitypes=MULTI_TARGETS,
        distribution_kinds=ALL_KINDS,
    )

    def __post_init__(self) -> None:
        if not self.alpha > 1.0:
            raise InvalidParameterError(f"alpha must be greater than 1, got {self.alpha}")

    def check_params(self, kinds: Collection[DistributionKind]) -> None:
        if self.alpha != 2 and any(k is not DistributionKind.FINITE for k in kinds):
            raise InvalidParameterError(
                f"Only `alpha = 2` is supported, unless scoring a finite target (got alpha={self.alpha})"
            )

    def score(self, family: DistributionFamily, d: Any, eta: Any) -> float:
        p = _density(family, d, eta)
        if family.is_finite:
            return spherical_finite(p, _finite_probs(family, d), self.alpha)
        return spherical_density(p, family.squared_l2_norm(d))

    def score_matrix(self, probs, p_observed):
        return spherical_finite(p_observed, probs, self.alpha)


__all__ = [
    "clamped_log",
    "brier_finite",
    "brier_density",
    "spherical_finite",
    "spherical_density",
    "mann_whitney_auc",
    "AreaUnderCurve",
    "AUC",
    "LogScore",
    "LogLoss",
    "CrossEntropy",
    "BrierScore",
    "BrierLoss",
    "SphericalScore",
]
