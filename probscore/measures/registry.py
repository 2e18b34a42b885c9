"""Alias table and metadata lookup for measures.

Every string alias maps to a measure class through an explicit static
table. ``lookup("log_loss", tol=1e-6)`` constructs a measure; ``measures()``
lists metadata, optionally filtered on any ``MeasureInfo`` field.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, List, Mapping, Tuple, Type, Union

from probscore.types import ArgumentError, MeasureInfo

from .base import Measure
from .probabilistic import (
    AreaUnderCurve,
    BrierLoss,
    BrierScore,
    LogLoss,
    LogScore,
    SphericalScore,
)


MEASURE_TYPES: Tuple[Type[Measure], ...] = (
    AreaUnderCurve,
    LogScore,
    LogLoss,
    BrierScore,
    BrierLoss,
    SphericalScore,
)

ALIASES: Mapping[str, Type[Measure]] = MappingProxyType({
    "area_under_curve": AreaUnderCurve,
    "auc": AreaUnderCurve,
    "log_score": LogScore,
    "log_loss": LogLoss,
    "cross_entropy": LogLoss,
    "brier_score": BrierScore,
    "brier_loss": BrierLoss,
    "spherical_score": SphericalScore,
})


# Default instances
auc = area_under_curve = AreaUnderCurve()
log_score = LogScore()
log_loss = cross_entropy = LogLoss()
brier_score = BrierScore()
brier_loss = BrierLoss()
spherical_score = SphericalScore()


def measure_type(alias: str) -> Type[Measure]:
    """Measure class registered under ``alias`` (case-insensitive).

    Raises:
        ArgumentError: If no measure has that alias
    """
    try:
        return ALIASES[alias.strip().lower()]
    except KeyError:
        known = ", ".join(sorted(ALIASES))
        raise ArgumentError(f"unknown measure {alias!r}; known aliases: {known}")


def lookup(alias: str, **params: Any) -> Measure:
    """Construct the measure registered under ``alias`` with ``params``."""
    cls = measure_type(alias)
    try:
        return cls(**params)
    except TypeError as e:
        raise ArgumentError(f"bad parameters for {cls.info.name}: {e}")


def info(measure: Union[str, Measure, Type[Measure]]) -> MeasureInfo:
    """Static metadata of a measure, given an alias, an instance or a class."""
    if isinstance(measure, str):
        return measure_type(measure).info
    return measure.info


def measures(**filters: Any) -> List[MeasureInfo]:
    """Metadata of all registered measures matching every ``field=value`` filter.

    >>> [m.name for m in measures(orientation="loss")]
    ['LogLoss', 'BrierLoss']
    """
    result = []
    for cls in MEASURE_TYPES:
        meta = cls.info
        for key, wanted in filters.items():
            if not hasattr(meta, key):
                raise ArgumentError(f"unknown measure trait {key!r}")
            if getattr(meta, key) != wanted:
                break
        else:
            result.append(meta)
    return result


__all__ = [
    "MEASURE_TYPES",
    "ALIASES",
    "auc",
    "area_under_curve",
    "log_score",
    "log_loss",
    "cross_entropy",
    "brier_score",
    "brier_loss",
    "spherical_score",
    "measure_type",
    "lookup",
    "info",
    "measures",
]
