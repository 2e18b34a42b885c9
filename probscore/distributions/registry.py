"""Registry of distribution families the scoring rules understand.

Each family supplies the capabilities a scoring rule may need:
``pdf``, ``classes`` (finite families only) and ``squared_l2_norm``.
The registry is immutable and built once; validation and evaluation take
it as an argument and fall back to the process-wide default.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Hashable, Iterable, Optional, Tuple

from probscore.types import DistributionKind

from .finite import UnivariateFinite
from .parametric import (
    STANDARD_CONTINUOUS_NORMS,
    DiscreteNonParametric,
    check_scipy_params,
    continuous_squared_l2_norm,
    is_rv_sample,
    nonparametric_pmf,
    nonparametric_squared_l2_norm,
    poisson_squared_l2_norm,
    randint_squared_l2_norm,
    scipy_name,
)


@dataclass(frozen=True)
class DistributionFamily:
    """Capabilities of one family of predicted distributions."""

    name: str
    kind: DistributionKind
    matches: Callable[[Any], bool]
    pdf: Callable[[Any, Any], float]
    squared_l2_norm: Callable[[Any], float]
    classes: Optional[Callable[[Any], Tuple[Hashable, ...]]] = None
    validate: Optional[Callable[[Any], None]] = None

    @property
    def is_finite(self) -> bool:
        return self.kind is DistributionKind.FINITE

    def check(self, d: Any) -> None:
        """Raise ``InvalidParameterError`` if ``d`` has out-of-range parameters."""
        if self.validate is not None:
            self.validate(d)


@dataclass(frozen=True)
class FamilyRegistry:
    """Immutable, ordered collection of distribution families."""

    families: Tuple[DistributionFamily, ...]

    def resolve(self, d: Any) -> Optional[DistributionFamily]:
        """Family of ``d``, or None if no registered family matches."""
        for family in self.families:
            if family.matches(d):
                return family
        return None

    def names(self, kinds: Iterable[DistributionKind] = tuple(DistributionKind)) -> Tuple[str, ...]:
        wanted = set(kinds)
        return tuple(f.name for f in self.families if f.kind in wanted)

    def get(self, name: str) -> DistributionFamily:
        for family in self.families:
            if family.name == name:
                return family
        raise KeyError(name)

    def __len__(self) -> int:
        return len(self.families)


def _finite_family() -> DistributionFamily:
    return DistributionFamily(
        name="UnivariateFinite",
        kind=DistributionKind.FINITE,
        matches=lambda d: isinstance(d, UnivariateFinite),
        pdf=lambda d, x: d.pdf(x),
        squared_l2_norm=lambda d: float((d.probs ** 2).sum()),
        classes=lambda d: d.classes,
    )


def _scipy_family(name: str, kind: DistributionKind, norm: Callable[[Any], float]) -> DistributionFamily:
    if kind is DistributionKind.CONTINUOUS:
        pdf = lambda d, x: float(d.pdf(x))  # noqa: E731
    else:
        pdf = lambda d, x: float(d.pmf(x))  # noqa: E731
    return DistributionFamily(
        name=name,
        kind=kind,
        matches=lambda d: scipy_name(d) == name and not is_rv_sample(d),
        pdf=pdf,
        squared_l2_norm=norm,
        validate=check_scipy_params,
    )


def build_default_registry() -> FamilyRegistry:
    """Build the table of supported families.

    Finite first, then the continuous families, then the count families.
    """
    families = [_finite_family()]
    for name in STANDARD_CONTINUOUS_NORMS:
        families.append(_scipy_family(name, DistributionKind.CONTINUOUS, continuous_squared_l2_norm))
    families.append(_scipy_family("poisson", DistributionKind.COUNT, poisson_squared_l2_norm))
    families.append(_scipy_family("randint", DistributionKind.COUNT, randint_squared_l2_norm))
    families.append(
        DistributionFamily(
            name="DiscreteNonParametric",
            kind=DistributionKind.COUNT,
            matches=lambda d: isinstance(d, DiscreteNonParametric) or is_rv_sample(d),
            pdf=nonparametric_pmf,
            squared_l2_norm=nonparametric_squared_l2_norm,
        )
    )
    return FamilyRegistry(families=tuple(families))


DEFAULT_REGISTRY = build_default_registry()


def get_registry() -> FamilyRegistry:
    """Get the process-wide family registry."""
    return DEFAULT_REGISTRY


__all__ = [
    "DistributionFamily",
    "FamilyRegistry",
    "build_default_registry",
    "DEFAULT_REGISTRY",
    "get_registry",
]
