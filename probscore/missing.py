"""Missing-value markers and filtering.

A missing observation or prediction is ``None`` or a float NaN. Scoring a
missing entry yields ``None`` rather than an error; aggregate-only measures
such as AUC expect the caller to filter first with :func:`skipinvalid`.
"""

from __future__ import annotations

import math
from typing import Any, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from .types import DimensionMismatchError


def is_missing(value: Any) -> bool:
    """Return True if ``value`` is the missing marker (None or NaN)."""
    if value is None:
        return True
    if isinstance(value, (float, np.floating)):
        return math.isnan(value)
    return False


def missing_mask(values: Sequence[Any]) -> NDArray[np.bool_]:
    """Boolean mask of missing entries in a sequence of predictions or observations."""
    if hasattr(values, "missing_mask"):
        return values.missing_mask()
    if isinstance(values, np.ndarray) and values.dtype.kind == "f":
        return np.isnan(values)
    return np.fromiter((is_missing(v) for v in values), dtype=bool, count=len(values))


def _take(values: Sequence[Any], keep: NDArray[np.bool_]) -> Any:
    if isinstance(values, np.ndarray) or hasattr(values, "missing_mask"):
        return values[keep]
    return [v for v, k in zip(values, keep) if k]


def skipinvalid(
    yhat: Sequence[Any],
    y: Sequence[Any],
    w: Optional[Sequence[float]] = None,
) -> Tuple[Any, ...]:
    """Drop positions where the prediction or the observation is missing.

    The container type of each argument is preserved, so a
    ``UnivariateFiniteArray`` stays eligible for the bulk path.

    Args:
        yhat: Predictions
        y: Observations
        w: Optional per-observation weights

    Returns:
        (yhat, y) or (yhat, y, w) restricted to valid positions

    Raises:
        DimensionMismatchError: If the arguments differ in length
    """
    if len(yhat) != len(y):
        raise DimensionMismatchError(
            f"predictions ({len(yhat)}) and observations ({len(y)}) differ in length"
        )
    keep = ~(missing_mask(yhat) | missing_mask(y))
    if w is None:
        return _take(yhat, keep), _take(y, keep)

    if len(w) != len(y):
        raise DimensionMismatchError(
            f"weights ({len(w)}) and observations ({len(y)}) differ in length"
        )
    w_arr = np.asarray(w, dtype=np.float64)
    return _take(yhat, keep), _take(y, keep), w_arr[keep]


__all__ = [
    "is_missing",
    "missing_mask",
    "skipinvalid",
]
