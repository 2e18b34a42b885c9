"""Parametric (continuous and count) distributions.

Predictions for continuous or count targets are frozen ``scipy.stats``
distributions, e.g. ``stats.norm(0, 1)`` or ``stats.poisson(3.2)``, or a
``DiscreteNonParametric`` for an arbitrary finite-support pmf.

The Brier and spherical scores need the squared L2 norm of the density:

    ∫ p(x)² dx   (continuous)      Σ p(k)²   (count)

Every supported family has this in closed form, so no quadrature is used:

    norm      1 / (2σ√π)
    cauchy    1 / (2πσ)
    uniform   1 / (b - a)
    logistic  1 / (6s)
    expon     1 / (2θ)
    gamma     Γ(2a-1) / (Γ(a)² 2^(2a-1) θ)               a > 1/2
    chi2      Γ(k-1) / (Γ(k/2)² 2^k s)                    k > 1
    chi       2^(1-k) Γ(k-1/2) / (Γ(k/2)² s)              k > 1/2
    beta      B(2a-1, 2b-1) / (B(a, b)² s)                a, b > 1/2
    poisson   e^(-2λ) I₀(2λ)
    randint   1 / (high - low)
"""

from __future__ import annotations

import math
from typing import Any, Callable, Dict, Optional, Sequence

import numpy as np
from numpy.typing import NDArray
from scipy import special
from scipy.stats import rv_continuous, rv_discrete

from probscore.types import InvalidParameterError


class DiscreteNonParametric:
    """Probability mass function on an explicit, finite set of support points.

    Args:
        support: Distinct support points
        probs: Mass at each support point (sums to 1)
    """

    def __init__(self, support: Sequence[float], probs: Sequence[float]):
        xs = np.asarray(support, dtype=np.float64)
        ps = np.asarray(probs, dtype=np.float64)
        if xs.ndim != 1 or xs.shape != ps.shape or xs.size == 0:
            raise InvalidParameterError("support and probs must be non-empty vectors of equal length")
        if not (np.all(np.isfinite(xs)) and np.all(np.isfinite(ps))):
            raise InvalidParameterError("support and probs must be finite")
        if np.any(ps < 0):
            raise InvalidParameterError("probabilities must be non-negative")
        if abs(ps.sum() - 1.0) > 1e-8:
            raise InvalidParameterError(f"probabilities sum to {ps.sum()}, not 1")
        if np.unique(xs).size != xs.size:
            raise InvalidParameterError("support points must be distinct")
        order = np.argsort(xs)
        self.support = xs[order]
        self.probs = ps[order]

    def pmf(self, x: float) -> float:
        hit = np.flatnonzero(self.support == x)
        return float(self.probs[hit[0]]) if hit.size else 0.0

    def __repr__(self) -> str:
        return f"DiscreteNonParametric(support={self.support.tolist()}, probs={self.probs.tolist()})"


# ─────────────────────────────────────────────────────────────────────────────
# Parameter extraction
# ─────────────────────────────────────────────────────────────────────────────


def is_frozen_scipy(d: Any) -> bool:
    """True for a frozen ``scipy.stats`` distribution (``stats.norm(0, 1)``)."""
    return isinstance(getattr(d, "dist", None), (rv_continuous, rv_discrete)) and hasattr(d, "args")


def scipy_name(d: Any) -> Optional[str]:
    """Family name of a frozen scipy distribution, e.g. ``"norm"``."""
    if not is_frozen_scipy(d):
        return None
    return d.dist.name


def scipy_params(d: Any) -> Dict[str, float]:
    """Named parameters of a frozen scipy distribution, including defaults.

    Continuous families get ``loc`` (0) and ``scale`` (1); discrete families
    only ``loc`` (0).
    """
    dist = d.dist
    shapes = [s.strip() for s in dist.shapes.split(",")] if dist.shapes else []
    names = shapes + ["loc"]
    params: Dict[str, float] = {"loc": 0.0}
    if isinstance(dist, rv_continuous):
        names.append("scale")
        params["scale"] = 1.0
    for name, value in zip(names, d.args):
        params[name] = float(value)
    for name, value in d.kwds.items():
        params[name] = float(value)
    return params


def check_scipy_params(d: Any) -> None:
    """Reject a frozen scipy distribution whose parameters are out of range.

    scipy reports invalid shapes (or a non-positive scale) as a NaN support,
    e.g. ``stats.norm(0, -1)`` or ``stats.poisson(-2)``.

    Raises:
        InvalidParameterError: If the parameters define no distribution
    """
    lo, hi = d.support()
    if np.isnan(lo) or np.isnan(hi):
        detail = ", ".join(f"{k}={v:g}" for k, v in scipy_params(d).items())
        raise InvalidParameterError(f"invalid parameters for {scipy_name(d)}({detail})")


def is_rv_sample(d: Any) -> bool:
    """True for an ``rv_discrete(values=(xk, pk))`` object, frozen or not."""
    if is_frozen_scipy(d):
        d = d.dist
    return isinstance(d, rv_discrete) and hasattr(d, "xk") and hasattr(d, "pk")


# ─────────────────────────────────────────────────────────────────────────────
# Closed-form squared L2 norms (standard form, scale = 1)
# ─────────────────────────────────────────────────────────────────────────────


def _not_square_integrable(family: str, **params: float) -> InvalidParameterError:
    detail = ", ".join(f"{k}={v:g}" for k, v in params.items())
    return InvalidParameterError(f"density of {family}({detail}) is not square-integrable")


def _gamma_norm(p: Dict[str, float]) -> float:
    a = p["a"]
    if a <= 0.5:
        raise _not_square_integrable("gamma", a=a)
    return math.exp(
        special.gammaln(2 * a - 1) - 2 * special.gammaln(a) - (2 * a - 1) * math.log(2)
    )


def _chi2_norm(p: Dict[str, float]) -> float:
    k = p["df"]
    if k <= 1:
        raise _not_square_integrable("chi2", df=k)
    return math.exp(special.gammaln(k - 1) - 2 * special.gammaln(k / 2) - k * math.log(2))


def _chi_norm(p: Dict[str, float]) -> float:
    k = p["df"]
    if k <= 0.5:
        raise _not_square_integrable("chi", df=k)
    return math.exp(
        (1 - k) * math.log(2) + special.gammaln(k - 0.5) - 2 * special.gammaln(k / 2)
    )


def _beta_norm(p: Dict[str, float]) -> float:
    a, b = p["a"], p["b"]
    if a <= 0.5 or b <= 0.5:
        raise _not_square_integrable("beta", a=a, b=b)
    return math.exp(special.betaln(2 * a - 1, 2 * b - 1) - 2 * special.betaln(a, b))


STANDARD_CONTINUOUS_NORMS: Dict[str, Callable[[Dict[str, float]], float]] = {
    "chi2": _chi2_norm,
    "gamma": _gamma_norm,
    "beta": _beta_norm,
    "chi": _chi_norm,
    "cauchy": lambda p: 1.0 / (2.0 * math.pi),
    "norm": lambda p: 1.0 / (2.0 * math.sqrt(math.pi)),
    "uniform": lambda p: 1.0,
    "logistic": lambda p: 1.0 / 6.0,
    "expon": lambda p: 0.5,
}


def continuous_squared_l2_norm(d: Any) -> float:
    """Squared L2 norm of a frozen continuous scipy distribution's density."""
    params = scipy_params(d)
    scale = params["scale"]
    if scale <= 0:
        raise InvalidParameterError(f"scale must be positive, got {scale}")
    return STANDARD_CONTINUOUS_NORMS[d.dist.name](params) / scale


def poisson_squared_l2_norm(d: Any) -> float:
    mu = scipy_params(d)["mu"]
    if mu < 0:
        raise InvalidParameterError(f"poisson rate must be non-negative, got {mu}")
    # ive(0, x) = I0(x) e^(-x)
    return float(special.ive(0, 2.0 * mu))


def randint_squared_l2_norm(d: Any) -> float:
    p = scipy_params(d)
    width = p["high"] - p["low"]
    if width < 1:
        raise InvalidParameterError(f"randint needs high > low, got low={p['low']}, high={p['high']}")
    return 1.0 / width


def nonparametric_squared_l2_norm(d: Any) -> float:
    if isinstance(d, DiscreteNonParametric):
        probs: NDArray[np.float64] = d.probs
    else:
        probs = np.asarray(d.dist.pk if is_frozen_scipy(d) else d.pk, dtype=np.float64)
    return float(np.sum(probs ** 2))


def nonparametric_pmf(d: Any, x: Any) -> float:
    return float(d.pmf(x))


__all__ = [
    "DiscreteNonParametric",
    "is_frozen_scipy",
    "is_rv_sample",
    "check_scipy_params",
    "scipy_name",
    "scipy_params",
    "STANDARD_CONTINUOUS_NORMS",
    "continuous_squared_l2_norm",
    "poisson_squared_l2_norm",
    "randint_squared_l2_norm",
    "nonparametric_squared_l2_norm",
    "nonparametric_pmf",
]
