"""Tests for fail-fast input validation."""

import numpy as np
import pytest
from scipy import stats

from probscore.distributions import (
    FamilyRegistry,
    UnivariateFinite,
    UnivariateFiniteArray,
    build_default_registry,
)
from probscore.measures import BrierScore, MeasureValidator, SphericalScore, auc, log_score
from probscore.types import (
    ArgumentError,
    DimensionMismatchError,
    InvalidParameterError,
    UnsupportedDistributionError,
)


class TestCheckPredictions:

    def test_families_with_missing(self):
        validator = MeasureValidator()
        d = UnivariateFinite(["a", "b"], [0.5, 0.5])
        families = validator.check_predictions(log_score, [d, None, stats.norm(0, 1)])
        assert [f.name if f else None for f in families] == ["UnivariateFinite", None, "norm"]

    def test_rejects_before_scoring(self):
        """An unsupported entry anywhere in the array fails the whole call."""
        yhat = [stats.norm(0, 1)] * 5 + [stats.lognorm(1.0)]
        with pytest.raises(UnsupportedDistributionError):
            MeasureValidator().check_predictions(BrierScore(), yhat)

    def test_spherical_alpha_checked_against_all_kinds(self):
        yhat = [UnivariateFinite(["a", "b"], [0.5, 0.5]), stats.poisson(1.0)]
        with pytest.raises(InvalidParameterError):
            MeasureValidator().check_predictions(SphericalScore(alpha=2.5), yhat)

    def test_spherical_alpha_allowed_for_finite(self):
        yhat = [UnivariateFinite(["a", "b"], [0.5, 0.5])]
        MeasureValidator().check_predictions(SphericalScore(alpha=2.5), yhat)

    def test_measure_kinds_restrict_families(self):
        with pytest.raises(UnsupportedDistributionError, match="UnivariateFinite"):
            MeasureValidator().resolve(auc, stats.norm(0, 1))

    def test_injected_registry(self):
        full = build_default_registry()
        validator = MeasureValidator(FamilyRegistry(families=(full.get("norm"),)))
        with pytest.raises(UnsupportedDistributionError):
            validator.resolve(log_score, UnivariateFinite(["a", "b"], [0.5, 0.5]))
        assert log_score.single(stats.norm(0, 1), 0.0, registry=validator.registry) < 0


class TestCheck:
    """The combined entry point used by the evaluator."""

    def test_sequence(self):
        yhat = [stats.norm(0, 1), None]
        families, weights = MeasureValidator().check(log_score, yhat, [0.0, 1.0], [1.0, 2.0])
        assert families[0].name == "norm"
        assert families[1] is None
        np.testing.assert_allclose(weights, [1.0, 2.0])

    def test_finite_array(self):
        yhat = UnivariateFiniteArray.binary(["n", "y"], [0.1, 0.7])
        families, weights = MeasureValidator().check(SphericalScore(alpha=4.0), yhat, ["n", "y"])
        assert families is None
        assert weights is None

    def test_lengths_checked_first(self):
        with pytest.raises(DimensionMismatchError):
            MeasureValidator().check(auc, [None], ["a", "b"], [1.0])


class TestCheckLengthsAndWeights:

    def test_length_mismatch(self):
        with pytest.raises(DimensionMismatchError):
            MeasureValidator().check_lengths([1, 2], [1])
        with pytest.raises(DimensionMismatchError):
            MeasureValidator().check_lengths([1, 2], [1, 2], [1.0])

    def test_dimension_mismatch_is_argument_error(self):
        assert issubclass(DimensionMismatchError, ArgumentError)
        assert issubclass(ArgumentError, ValueError)

    def test_weights_converted(self):
        w = MeasureValidator().check_weights(log_score, [1, 2, 3])
        assert w.dtype == np.float64

    def test_two_dimensional_weights(self):
        with pytest.raises(ArgumentError):
            MeasureValidator().check_weights(log_score, [[1.0, 2.0]])

    def test_weights_unsupported(self):
        with pytest.raises(ArgumentError):
            MeasureValidator().check_weights(auc, [1.0])
