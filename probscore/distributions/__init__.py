"""Predicted distributions consumed by the scoring rules.

- Finite (categorical) distributions and their array form
- Parametric continuous/count distributions (scipy.stats) with exact L2 norms
- The family registry used by validation
"""

from __future__ import annotations

from .finite import UnivariateFinite, UnivariateFiniteArray
from .parametric import DiscreteNonParametric
from .registry import (
    DEFAULT_REGISTRY,
    DistributionFamily,
    FamilyRegistry,
    build_default_registry,
    get_registry,
)

__all__ = [
    "UnivariateFinite",
    "UnivariateFiniteArray",
    "DiscreteNonParametric",
    "DEFAULT_REGISTRY",
    "DistributionFamily",
    "FamilyRegistry",
    "build_default_registry",
    "get_registry",
]
