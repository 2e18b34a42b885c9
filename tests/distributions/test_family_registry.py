"""Tests for distribution family resolution."""

import pytest
from scipy import stats

from probscore.distributions import (
    DEFAULT_REGISTRY,
    DiscreteNonParametric,
    FamilyRegistry,
    UnivariateFinite,
    build_default_registry,
    get_registry,
)
from probscore.types import DistributionKind


class TestFamilyRegistry:

    def test_default_is_shared(self):
        assert get_registry() is DEFAULT_REGISTRY

    def test_family_order(self):
        names = DEFAULT_REGISTRY.names()
        assert names[0] == "UnivariateFinite"
        assert names[1:10] == (
            "chi2", "gamma", "beta", "chi", "cauchy", "norm", "uniform", "logistic", "expon",
        )
        assert names[10:] == ("poisson", "randint", "DiscreteNonParametric")
        assert len(DEFAULT_REGISTRY) == 13

    def test_names_by_kind(self):
        assert DEFAULT_REGISTRY.names([DistributionKind.FINITE]) == ("UnivariateFinite",)
        assert DEFAULT_REGISTRY.names([DistributionKind.COUNT]) == (
            "poisson", "randint", "DiscreteNonParametric",
        )

    @pytest.mark.parametrize(
        "d, name, kind",
        [
            (UnivariateFinite(["a", "b"], [0.5, 0.5]), "UnivariateFinite", DistributionKind.FINITE),
            (stats.norm(0, 1), "norm", DistributionKind.CONTINUOUS),
            (stats.beta(2, 2), "beta", DistributionKind.CONTINUOUS),
            (stats.poisson(1.5), "poisson", DistributionKind.COUNT),
            (stats.randint(0, 3), "randint", DistributionKind.COUNT),
            (DiscreteNonParametric([1, 2], [0.5, 0.5]), "DiscreteNonParametric", DistributionKind.COUNT),
            (stats.rv_discrete(values=([1, 2], [0.5, 0.5])), "DiscreteNonParametric", DistributionKind.COUNT),
        ],
    )
    def test_resolve(self, d, name, kind):
        family = DEFAULT_REGISTRY.resolve(d)
        assert family is not None
        assert family.name == name
        assert family.kind is kind

    def test_unknown_family(self):
        assert DEFAULT_REGISTRY.resolve(stats.lognorm(1.0)) is None
        assert DEFAULT_REGISTRY.resolve("norm") is None

    def test_get(self):
        assert DEFAULT_REGISTRY.get("expon").kind is DistributionKind.CONTINUOUS
        with pytest.raises(KeyError):
            DEFAULT_REGISTRY.get("lognorm")

    def test_finite_capabilities(self):
        d = UnivariateFinite(["a", "b", "c"], [0.2, 0.3, 0.5])
        family = DEFAULT_REGISTRY.resolve(d)
        assert family.is_finite
        assert family.classes(d) == ("a", "b", "c")
        assert family.squared_l2_norm(d) == pytest.approx(0.04 + 0.09 + 0.25)

    def test_custom_registry(self):
        """A registry restricted to the finite family rejects everything else."""
        full = build_default_registry()
        finite_only = FamilyRegistry(families=(full.get("UnivariateFinite"),))
        assert finite_only.resolve(stats.norm(0, 1)) is None
        assert finite_only.resolve(UnivariateFinite(["a"], [1.0])) is not None
