"""Shared fixtures for measure tests."""

from __future__ import annotations

from typing import List, Tuple

import numpy as np
import pytest

from probscore.distributions import UnivariateFinite, UnivariateFiniteArray


@pytest.fixture
def yes_no() -> UnivariateFinite:
    """Binary prediction with P(yes) = 0.8."""
    return UnivariateFinite(["no", "yes"], [0.2, 0.8])


@pytest.fixture
def ranked_binary() -> Tuple[UnivariateFiniteArray, List[str]]:
    """Four binary predictions whose AUC is 0.75."""
    yhat = UnivariateFiniteArray.binary(["neg", "pos"], [0.1, 0.4, 0.35, 0.8])
    y = ["neg", "neg", "pos", "pos"]
    return yhat, y


@pytest.fixture
def multiclass_sample() -> Tuple[List[UnivariateFinite], List[str]]:
    """Twenty three-class predictions drawn from a seeded Dirichlet."""
    rng = np.random.default_rng(7)
    classes = ["a", "b", "c"]
    probs = rng.dirichlet(np.ones(3), size=20)
    yhat = [UnivariateFinite(classes, p) for p in probs]
    y = list(rng.choice(classes, size=20))
    return yhat, y
