"""Base class for measures.

A measure is an immutable value object: the scoring rule plus its
parameters. Subclasses declare static metadata in ``info`` and implement
``score`` (one non-missing observation) and ``score_matrix`` (the bulk
path over an (N, K) probability matrix).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar, Collection, Optional, Sequence

import numpy as np
from numpy.typing import NDArray

from probscore.missing import is_missing
from probscore.types import DistributionKind, MeasureInfo, Orientation

if TYPE_CHECKING:
    from probscore.distributions.registry import DistributionFamily, FamilyRegistry


@dataclass(frozen=True)
class Measure:
    """A scoring rule with its parameters."""

    info: ClassVar[MeasureInfo]

    @property
    def name(self) -> str:
        return self.info.name

    @property
    def orientation(self) -> Orientation:
        return self.info.orientation

    @property
    def supports_weights(self) -> bool:
        return self.info.supports_weights

    def check_params(self, kinds: Collection[DistributionKind]) -> None:
        """Reject parameter values that are invalid for the given prediction kinds."""
        return None

    def score(self, family: "DistributionFamily", d: Any, eta: Any) -> float:
        """Score one non-missing prediction ``d`` against observation ``eta``."""
        raise NotImplementedError

    def score_matrix(
        self,
        probs: NDArray[np.float64],
        p_observed: NDArray[np.float64],
    ) -> NDArray[np.float64]:
        """Score N finite predictions at once.

        Args:
            probs: Shape (N, K) class probabilities
            p_observed: Shape (N,) probability of each observed class

        Returns:
            Shape (N,) per-observation values
        """
        raise NotImplementedError

    def single(
        self,
        d: Any,
        eta: Any,
        registry: Optional["FamilyRegistry"] = None,
    ) -> Optional[float]:
        """Score one prediction against one observation.

        Returns None if either argument is missing.

        Raises:
            UnsupportedDistributionError: If ``d`` is not an accepted family
            InvalidParameterError: If the measure parameters don't fit ``d``
        """
        from .validation import MeasureValidator

        if is_missing(d) or is_missing(eta):
            return None
        family = MeasureValidator(registry).resolve(self, d)
        return float(self.score(family, d, eta))

    def per_observation(
        self,
        yhat: Sequence[Any],
        y: Sequence[Any],
        w: Optional[Sequence[float]] = None,
        **kwargs: Any,
    ) -> np.ma.MaskedArray:
        from .evaluator import per_observation

        return per_observation(self, yhat, y, w, **kwargs)

    def __call__(
        self,
        yhat: Sequence[Any],
        y: Sequence[Any],
        w: Optional[Sequence[float]] = None,
        **kwargs: Any,
    ) -> float:
        from .evaluator import call

        return call(self, yhat, y, w, **kwargs)


__all__ = ["Measure"]
