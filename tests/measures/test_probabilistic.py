"""Tests for the scoring rules on single observations and for AUC."""

import math

import numpy as np
import pytest
from scipy import stats

from probscore.config import MACHINE_EPS
from probscore.distributions import (
    DiscreteNonParametric,
    DistributionFamily,
    FamilyRegistry,
    UnivariateFinite,
    UnivariateFiniteArray,
)
from probscore.measures import (
    AreaUnderCurve,
    BrierLoss,
    BrierScore,
    LogLoss,
    LogScore,
    SphericalScore,
    auc,
    brier_loss,
    brier_score,
    log_loss,
    log_score,
    spherical_score,
)
from probscore.measures.probabilistic import mann_whitney_auc
from probscore.types import (
    ArgumentError,
    DegenerateInputError,
    DistributionKind,
    InvalidParameterError,
    UnsupportedDistributionError,
)


NORM_PEAK = 1.0 / math.sqrt(2.0 * math.pi)       # standard normal density at 0
NORM_SQ_L2 = 1.0 / (2.0 * math.sqrt(math.pi))    # ∫ φ(x)² dx


class TestLogScore:
    """Log score and log loss."""

    def test_binary_example(self, yes_no):
        """Observing "no" under P(yes) = 0.8 scores ln(0.2)."""
        assert log_score.single(yes_no, "no") == pytest.approx(math.log(0.2))
        assert log_score.single(yes_no, "yes") == pytest.approx(math.log(0.8))

    def test_loss_is_negated_score(self, yes_no):
        for eta in ("no", "yes"):
            assert log_loss.single(yes_no, eta) == pytest.approx(-log_score.single(yes_no, eta))

    def test_zero_probability_is_clamped(self):
        """A zero mass is clamped to tol, so the loss stays finite."""
        d = UnivariateFinite(["a", "b"], [1.0, 0.0])
        assert log_loss.single(d, "b") == pytest.approx(-math.log(MACHINE_EPS))
        assert LogLoss(tol=1e-3).single(d, "b") == pytest.approx(-math.log(1e-3))

    def test_continuous_density(self):
        assert log_score.single(stats.norm(0, 1), 0.0) == pytest.approx(math.log(NORM_PEAK))

    def test_count_distribution(self):
        d = stats.poisson(3.0)
        assert log_score.single(d, 2) == pytest.approx(math.log(stats.poisson.pmf(2, 3.0)))

    def test_tol_out_of_range(self):
        with pytest.raises(InvalidParameterError):
            LogScore(tol=0.0)
        with pytest.raises(InvalidParameterError):
            LogLoss(tol=0.5)

    def test_missing_yields_none(self, yes_no):
        assert log_score.single(None, "yes") is None
        assert log_score.single(yes_no, float("nan")) is None
        assert log_score.single(yes_no, None) is None


class TestBrierScore:
    """Brier score and Brier loss."""

    def test_finite_value(self, yes_no):
        """2p(η) - Σp² - 1 with p = (0.2, 0.8)."""
        assert brier_score.single(yes_no, "yes") == pytest.approx(1.6 - 1.68)
        assert brier_score.single(yes_no, "no") == pytest.approx(0.4 - 1.68)

    def test_point_mass_is_zero(self):
        d = UnivariateFinite(["a", "b", "c"], [0.0, 1.0, 0.0])
        assert brier_score.single(d, "b") == pytest.approx(0.0)
        assert brier_score.single(d, "a") == pytest.approx(-2.0)

    def test_finite_bounds(self, multiclass_sample):
        yhat, y = multiclass_sample
        for d, eta in zip(yhat, y):
            value = brier_score.single(d, eta)
            assert -2.0 <= value <= 0.0

    def test_loss_is_negated_score(self, yes_no):
        assert brier_loss.single(yes_no, "no") == pytest.approx(-brier_score.single(yes_no, "no"))
        d = stats.norm(1.0, 2.0)
        assert brier_loss.single(d, 0.5) == pytest.approx(-brier_score.single(d, 0.5))

    def test_normal_density(self):
        """2φ(0) - 1/(2√π) for the standard normal."""
        expected = 2.0 * NORM_PEAK - NORM_SQ_L2
        assert brier_score.single(stats.norm(0, 1), 0.0) == pytest.approx(expected)

    def test_nonparametric_count(self):
        d = DiscreteNonParametric([0, 1, 5], [0.2, 0.3, 0.5])
        assert brier_score.single(d, 5) == pytest.approx(1.0 - 0.38)
        assert brier_score.single(d, 2) == pytest.approx(-0.38)

    def test_not_square_integrable(self):
        with pytest.raises(InvalidParameterError):
            brier_score.single(stats.gamma(0.5), 1.0)


class TestSphericalScore:
    """Spherical score."""

    def test_finite_alpha_two(self, yes_no):
        assert spherical_score.single(yes_no, "yes") == pytest.approx(0.8 / math.sqrt(0.68))

    def test_finite_alpha_three(self, yes_no):
        expected = (0.8 / 0.52 ** (1.0 / 3.0)) ** 2
        assert SphericalScore(alpha=3).single(yes_no, "yes") == pytest.approx(expected)

    def test_relation_to_brier(self, multiclass_sample):
        """With alpha = 2, spherical = p / sqrt(2p - B - 1) where B is the Brier score."""
        yhat, y = multiclass_sample
        for d, eta in zip(yhat, y):
            p = d.pdf(eta)
            b = brier_score.single(d, eta)
            assert spherical_score.single(d, eta) == pytest.approx(p / math.sqrt(2 * p - b - 1))

    def test_normal_density(self):
        expected = NORM_PEAK / math.sqrt(NORM_SQ_L2)
        assert spherical_score.single(stats.norm(0, 1), 0.0) == pytest.approx(expected)

    def test_alpha_three_rejected_for_continuous(self):
        with pytest.raises(InvalidParameterError, match="alpha = 2"):
            SphericalScore(alpha=3).single(stats.norm(0, 1), 0.0)

    def test_alpha_three_rejected_for_count(self):
        with pytest.raises(InvalidParameterError):
            SphericalScore(alpha=3).single(stats.poisson(2.0), 1)

    def test_alpha_must_exceed_one(self):
        with pytest.raises(InvalidParameterError):
            SphericalScore(alpha=1.0)


class TestUnsupportedDistributions:
    """Families outside the registry are rejected with a listing of supported ones."""

    def test_lognormal_rejected(self):
        with pytest.raises(UnsupportedDistributionError) as exc:
            log_score.single(stats.lognorm(1.0), 1.0)
        message = str(exc.value)
        assert "`lognorm`" in message
        assert "Supported distributions are" in message
        assert "`norm`" in message

    def test_plain_object_rejected(self):
        with pytest.raises(UnsupportedDistributionError):
            brier_score.single(object(), 1.0)

    def test_auc_rejects_continuous(self):
        with pytest.raises(UnsupportedDistributionError):
            auc([stats.norm(0, 1), stats.norm(1, 1)], [0.0, 1.0])

    def test_unknown_class_label(self, yes_no):
        with pytest.raises(ArgumentError):
            log_score.single(yes_no, "maybe")


class TestInvalidDistributionParameters:
    """Out-of-range parameters fail validation instead of scoring NaN."""

    @pytest.mark.parametrize(
        "d, eta",
        [
            (stats.norm(0, -1.0), 0.0),
            (stats.cauchy(scale=0.0), 0.0),
            (stats.poisson(-2.0), 1),
        ],
        ids=["norm-negative-scale", "cauchy-zero-scale", "poisson-negative-rate"],
    )
    @pytest.mark.parametrize("measure", [log_score, log_loss, brier_score, spherical_score])
    def test_rejected(self, measure, d, eta):
        with pytest.raises(InvalidParameterError, match="invalid parameters"):
            measure([d], [eta])
        with pytest.raises(InvalidParameterError):
            measure.single(d, eta)

    def test_rejected_anywhere_in_array(self):
        yhat = [stats.poisson(1.0), stats.poisson(2.0), stats.poisson(-2.0)]
        with pytest.raises(InvalidParameterError):
            log_score(yhat, [0, 1, 2])

    def test_non_finite_density_rejected(self):
        """A family whose density misbehaves raises rather than returning NaN."""
        broken = DistributionFamily(
            name="broken",
            kind=DistributionKind.CONTINUOUS,
            matches=lambda d: d == "broken",
            pdf=lambda d, x: float("nan"),
            squared_l2_norm=lambda d: 1.0,
        )
        registry = FamilyRegistry(families=(broken,))
        with pytest.raises(InvalidParameterError, match="non-negative"):
            log_score.single("broken", 0.0, registry=registry)
        with pytest.raises(InvalidParameterError):
            brier_score(["broken"], [0.0], registry=registry)


class TestAreaUnderCurve:
    """AUC via the Mann-Whitney statistic."""

    def test_known_value(self, ranked_binary):
        yhat, y = ranked_binary
        assert auc(yhat, y) == pytest.approx(0.75)

    def test_list_of_distributions(self, ranked_binary):
        yhat, y = ranked_binary
        assert auc(list(yhat), y) == pytest.approx(0.75)

    def test_perfect_separation(self):
        yhat = UnivariateFiniteArray.binary(["n", "y"], [0.1, 0.2, 0.7, 0.9])
        assert auc(yhat, ["n", "n", "y", "y"]) == pytest.approx(1.0)

    def test_constant_scores(self):
        yhat = UnivariateFiniteArray.binary(["n", "y"], [0.5, 0.5, 0.5, 0.5])
        assert auc(yhat, ["n", "y", "n", "y"]) == pytest.approx(0.5)

    def test_invariant_under_monotone_transform(self):
        scores = np.array([0.05, 0.3, 0.3, 0.6, 0.9, 0.2])
        positive = np.array([False, True, False, True, True, False])
        assert mann_whitney_auc(scores, positive) == pytest.approx(
            mann_whitney_auc(scores ** 3, positive)
        )

    def test_single_class_is_degenerate(self):
        yhat = UnivariateFiniteArray.binary(["n", "y"], [0.2, 0.4])
        with pytest.raises(DegenerateInputError):
            auc(yhat, ["y", "y"])

    @pytest.mark.parametrize(
        "yhat, y",
        [
            ([], []),
            ([None, None], ["n", "y"]),
            (UnivariateFiniteArray(["n", "y"], np.empty((0, 2))), []),
            (UnivariateFiniteArray(["n", "y"], [[np.nan, np.nan]]), ["y"]),
        ],
        ids=["empty-list", "all-missing-list", "empty-array", "all-missing-array"],
    )
    def test_no_predictions_is_degenerate(self, yhat, y):
        """The error kind does not depend on the container."""
        with pytest.raises(DegenerateInputError):
            auc(yhat, y)

    def test_rejects_weights(self, ranked_binary):
        yhat, y = ranked_binary
        with pytest.raises(ArgumentError, match="weights"):
            auc(yhat, y, [1.0, 1.0, 1.0, 1.0])

    def test_rejects_missing(self, ranked_binary):
        yhat, y = ranked_binary
        with pytest.raises(ArgumentError, match="skipinvalid"):
            auc(yhat, ["neg", None, "pos", "pos"])

    def test_needs_two_classes(self):
        d = UnivariateFinite(["a", "b", "c"], [0.2, 0.3, 0.5])
        with pytest.raises(UnsupportedDistributionError):
            auc([d, d], ["a", "c"])

    def test_not_defined_per_observation(self, yes_no):
        with pytest.raises(ArgumentError):
            auc.single(yes_no, "yes")

    def test_alias_is_same_class(self):
        assert isinstance(auc, AreaUnderCurve)


class TestMeasureValues:
    """Measures are immutable values."""

    def test_equality(self):
        assert LogLoss(tol=1e-3) == LogLoss(tol=1e-3)
        assert LogLoss(tol=1e-3) != LogLoss(tol=1e-4)
        assert BrierScore() == BrierScore()

    def test_frozen(self):
        m = SphericalScore()
        with pytest.raises(AttributeError):
            m.alpha = 3.0

    def test_orientation(self):
        assert BrierScore().info.is_score
        assert not BrierLoss().info.is_score
