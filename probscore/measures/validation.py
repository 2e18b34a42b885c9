"""Input validation for measures.

All validation happens BEFORE any observation is scored, once per call:
- Predicted distribution families the measure does not accept
- Distribution parameters out of range (e.g. a negative scale)
- Measure parameters that don't fit the predictions (spherical alpha)
- Length mismatches between predictions, observations and weights
- Weights that are negative, NaN or infinite
"""

from __future__ import annotations

from typing import Any, Dict, Hashable, List, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from probscore.distributions.finite import UnivariateFiniteArray
from probscore.distributions.parametric import scipy_name
from probscore.distributions.registry import DistributionFamily, FamilyRegistry, get_registry
from probscore.missing import is_missing
from probscore.types import (
    ArgumentError,
    DimensionMismatchError,
    DistributionKind,
    UnsupportedDistributionError,
)

from .base import Measure


def describe(d: Any) -> str:
    """Short name of a prediction's type for error messages."""
    return scipy_name(d) or type(d).__name__


def unsupported_distribution(
    measure: Measure,
    d: Any,
    registry: FamilyRegistry,
) -> UnsupportedDistributionError:
    supported = registry.names(measure.info.distribution_kinds)
    listed = ", ".join(f"`{name}`" for name in supported)
    return UnsupportedDistributionError(
        f"Distribution `{describe(d)}` not supported by {measure.name}. "
        f"Supported distributions are {listed}"
    )


class MeasureValidator:
    """Validate measure inputs before scoring.

    All validation is stateless; the family registry is injected.
    """

    def __init__(self, registry: Optional[FamilyRegistry] = None):
        self.registry = registry or get_registry()

    def check(
        self,
        measure: Measure,
        yhat: Sequence[Any],
        y: Optional[Sequence[Any]] = None,
        w: Optional[Sequence[float]] = None,
    ) -> Tuple[Optional[List[Optional[DistributionFamily]]], Optional[NDArray[np.float64]]]:
        """Run every check for one evaluation.

        Args:
            measure: Measure about to be evaluated
            yhat: Predictions (sequence or ``UnivariateFiniteArray``)
            y: Observations, if lengths should be compared
            w: Optional weights

        Returns:
            (families, weights). ``families`` is None for a
            ``UnivariateFiniteArray``; ``weights`` is None when ``w`` is.
        """
        if y is not None:
            self.check_lengths(yhat, y, w)
        weights = self.check_weights(measure, w) if w is not None else None
        if isinstance(yhat, UnivariateFiniteArray):
            self.check_finite_array(measure, yhat)
            return None, weights
        return self.check_predictions(measure, yhat), weights

    def resolve(self, measure: Measure, d: Any) -> DistributionFamily:
        """Family of a single non-missing prediction.

        Raises:
            UnsupportedDistributionError: If the family is unknown or not accepted
            InvalidParameterError: If ``d`` or the measure parameters are out of range
        """
        family = self.registry.resolve(d)
        if family is None or family.kind not in measure.info.distribution_kinds:
            raise unsupported_distribution(measure, d, self.registry)
        family.check(d)
        measure.check_params((family.kind,))
        return family

    def check_predictions(
        self,
        measure: Measure,
        yhat: Sequence[Any],
    ) -> List[Optional[DistributionFamily]]:
        """Resolve the family of every prediction, once per distinct type.

        Returns:
            One family per prediction; None where the prediction is missing

        Raises:
            UnsupportedDistributionError: If a family is unknown or not accepted
            InvalidParameterError: If a prediction or the measure has bad parameters
        """
        cache: Dict[Hashable, DistributionFamily] = {}
        families: List[Optional[DistributionFamily]] = []
        for d in yhat:
            if is_missing(d):
                families.append(None)
                continue
            key = (type(d), scipy_name(d))
            family = cache.get(key)
            if family is None:
                family = self.registry.resolve(d)
                if family is None or family.kind not in measure.info.distribution_kinds:
                    raise unsupported_distribution(measure, d, self.registry)
                cache[key] = family
            family.check(d)
            families.append(family)
        measure.check_params({f.kind for f in cache.values()})
        return families

    def check_finite_array(self, measure: Measure, yhat: UnivariateFiniteArray) -> None:
        if DistributionKind.FINITE not in measure.info.distribution_kinds:
            raise unsupported_distribution(measure, yhat, self.registry)
        measure.check_params((DistributionKind.FINITE,))

    def check_lengths(
        self,
        yhat: Sequence[Any],
        y: Sequence[Any],
        w: Optional[Sequence[float]] = None,
    ) -> None:
        if len(yhat) != len(y):
            raise DimensionMismatchError(
                f"predictions ({len(yhat)}) and observations ({len(y)}) differ in length"
            )
        if w is not None and len(w) != len(y):
            raise DimensionMismatchError(
                f"weights ({len(w)}) and observations ({len(y)}) differ in length"
            )

    def check_weights(self, measure: Measure, w: Sequence[float]) -> NDArray[np.float64]:
        """Validate and convert weights to a float vector.

        Raises:
            ArgumentError: If the measure takes no weights or a weight is invalid
        """
        if not measure.supports_weights:
            raise ArgumentError(f"{measure.name} does not support weights")
        weights = np.asarray(w, dtype=np.float64)
        if weights.ndim != 1:
            raise ArgumentError(f"weights must be one-dimensional, got shape {weights.shape}")
        if not np.all(np.isfinite(weights)):
            raise ArgumentError("weights must be finite")
        if np.any(weights < 0):
            raise ArgumentError("weights must be non-negative")
        return weights


__all__ = [
    "MeasureValidator",
    "describe",
    "unsupported_distribution",
]
