"""Evaluate measures over arrays of predictions and observations.

Two paths produce per-observation values:
1. Bulk: finite predictions sharing one class set are scored from the
   (N, K) probability matrix in a single vectorized pass
2. Per-observation: every other prediction array is scored one entry at
   a time through ``Measure.score``

Both return a masked array (masked = missing). Mean-based measures then
reduce to a scalar with numpy's pairwise summation over the unmasked
values in observation order. AUC skips the per-observation stage and
ranks the whole array.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from probscore.config.measure_params import get_measure_params
from probscore.distributions.finite import UnivariateFinite, UnivariateFiniteArray
from probscore.distributions.registry import DistributionFamily, FamilyRegistry
from probscore.missing import is_missing, missing_mask
from probscore.types import (
    Aggregation,
    ArgumentError,
    DegenerateInputError,
    UnsupportedDistributionError,
)

from .base import Measure
from .validation import MeasureValidator

logger = logging.getLogger(__name__)


def single(
    measure: Measure,
    d: Any,
    eta: Any,
    registry: Optional[FamilyRegistry] = None,
) -> Optional[float]:
    """Score one prediction against one observation (None if either is missing)."""
    return measure.single(d, eta, registry=registry)


def as_finite_array(yhat: Sequence[Any]) -> Optional[UnivariateFiniteArray]:
    """View ``yhat`` as a ``UnivariateFiniteArray`` if every prediction allows it.

    Returns None unless all non-missing entries are ``UnivariateFinite``
    over the same classes (and at least one is present).
    """
    if isinstance(yhat, UnivariateFiniteArray):
        return yhat
    reference: Optional[UnivariateFinite] = None
    for d in yhat:
        if is_missing(d):
            continue
        if not isinstance(d, UnivariateFinite):
            return None
        if reference is None:
            reference = d
        elif not d.same_classes(reference):
            return None
    if reference is None:
        return None
    return UnivariateFiniteArray.from_distributions(yhat)


def _score_bulk(
    measure: Measure,
    yhat: UnivariateFiniteArray,
    y: Sequence[Any],
) -> Tuple[NDArray[np.float64], NDArray[np.bool_]]:
    codes = yhat.encode(y)
    missing = yhat.missing_mask() | (codes < 0)
    probs = yhat.pdf_matrix()
    p_observed = probs[np.arange(len(yhat)), np.where(missing, 0, codes)]
    # missing rows are NaN throughout
    with np.errstate(invalid="ignore"):
        values = np.asarray(measure.score_matrix(probs, p_observed), dtype=np.float64)
    values = np.where(missing, np.nan, values)
    return values, missing


def _score_each(
    measure: Measure,
    families: List[Optional[DistributionFamily]],
    yhat: Sequence[Any],
    y: Sequence[Any],
) -> Tuple[NDArray[np.float64], NDArray[np.bool_]]:
    n = len(families)
    values = np.full(n, np.nan)
    missing = np.zeros(n, dtype=bool)
    for i, (family, d, eta) in enumerate(zip(families, yhat, y)):
        if family is None or is_missing(eta):
            missing[i] = True
            continue
        values[i] = measure.score(family, d, eta)
    return values, missing


def _normalize_weights(weights: NDArray[np.float64], missing: NDArray[np.bool_]) -> NDArray[np.float64]:
    """Rescale weights to mean 1 over the non-missing positions."""
    valid = weights[~missing]
    total = valid.sum()
    if total <= 0:
        raise DegenerateInputError("weights of the non-missing observations sum to zero")
    return weights * (valid.size / total)


def per_observation(
    measure: Measure,
    yhat: Sequence[Any],
    y: Sequence[Any],
    w: Optional[Sequence[float]] = None,
    *,
    vectorize: Optional[bool] = None,
    registry: Optional[FamilyRegistry] = None,
) -> np.ma.MaskedArray:
    """Per-observation values of a mean-based measure.

    Args:
        measure: The measure to apply
        yhat: Predicted distributions, one per observation
        y: Observations
        w: Optional non-negative weights; values are multiplied by the
            weights rescaled to mean 1 over the non-missing positions
        vectorize: Use the bulk path when possible (config default)
        registry: Distribution family registry (process default)

    Returns:
        Masked array of shape (N,), masked where the prediction or the
        observation is missing

    Raises:
        ArgumentError: If the measure is not decomposable, or on bad input
    """
    if measure.info.aggregation is Aggregation.WHOLE:
        raise ArgumentError(f"{measure.name} is not decomposable per observation")

    if vectorize is None:
        vectorize = get_measure_params().evaluation.vectorize
    if vectorize:
        finite = as_finite_array(yhat)
    else:
        finite = None
        if isinstance(yhat, UnivariateFiniteArray):
            yhat = list(yhat)

    validator = MeasureValidator(registry)
    families, weights = validator.check(measure, finite if finite is not None else yhat, y, w)

    if finite is not None:
        values, missing = _score_bulk(measure, finite, y)
        path = "bulk"
    else:
        values, missing = _score_each(measure, families, yhat, y)
        path = "per-observation"

    logger.debug(
        "%s: scored %d observations (%d missing) via %s path",
        measure.name, len(values), int(missing.sum()), path,
    )

    if weights is not None:
        values = values * _normalize_weights(weights, missing)
    return np.ma.MaskedArray(values, mask=missing)


def aggregate(values: np.ma.MaskedArray) -> float:
    """Arithmetic mean of the unmasked values.

    Raises:
        DegenerateInputError: If every value is masked
    """
    if values.count() == 0:
        raise DegenerateInputError("no non-missing observations to aggregate")
    return float(values.mean())


def _area_under_curve(
    measure: Measure,
    yhat: Sequence[Any],
    y: Sequence[Any],
    w: Optional[Sequence[float]],
    registry: Optional[FamilyRegistry],
) -> float:
    MeasureValidator(registry).check(measure, yhat, y, w)
    if missing_mask(yhat).all():
        raise DegenerateInputError(f"{measure.name} is undefined without any prediction")
    finite = as_finite_array(yhat)
    if finite is None:
        raise UnsupportedDistributionError(
            f"{measure.name} needs finite predictions sharing one class set"
        )
    if len(finite.classes) != 2:
        raise UnsupportedDistributionError(
            f"{measure.name} needs exactly two classes, got {len(finite.classes)}"
        )
    if finite.missing_mask().any() or missing_mask(y).any():
        raise ArgumentError(
            f"{measure.name} does not support missing values; use skipinvalid(yhat, y) first"
        )
    positive = finite.encode(y) == 1
    scores = finite.pdf(finite.positive_class)
    logger.debug("%s: ranking %d observations", measure.name, len(scores))
    return measure.from_scores(scores, positive)


def call(
    measure: Measure,
    yhat: Sequence[Any],
    y: Sequence[Any],
    w: Optional[Sequence[float]] = None,
    *,
    vectorize: Optional[bool] = None,
    registry: Optional[FamilyRegistry] = None,
) -> float:
    """Evaluate ``measure`` and reduce to a single number.

    Mean-based measures return the (weighted) mean over non-missing
    observations; AUC is computed over the whole array.
    """
    if measure.info.aggregation is Aggregation.WHOLE:
        return _area_under_curve(measure, yhat, y, w, registry)
    return aggregate(per_observation(measure, yhat, y, w, vectorize=vectorize, registry=registry))


__all__ = [
    "single",
    "per_observation",
    "aggregate",
    "call",
    "as_finite_array",
]
