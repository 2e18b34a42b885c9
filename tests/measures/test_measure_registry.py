"""Tests for measure aliases and metadata lookup."""

import pytest

from probscore.measures import (
    ALIASES,
    AreaUnderCurve,
    LogLoss,
    SphericalScore,
    cross_entropy,
    info,
    log_loss,
    lookup,
    measures,
)
from probscore.measures.registry import MEASURE_TYPES, measure_type
from probscore.types import Aggregation, ArgumentError, DistributionKind, Orientation, Scitype


class TestAliases:

    def test_every_instance_alias_is_registered(self):
        for cls in MEASURE_TYPES:
            for alias in cls.info.instances:
                assert ALIASES[alias] is cls

    def test_alias_table_is_read_only(self):
        with pytest.raises(TypeError):
            ALIASES["brier"] = LogLoss

    def test_case_insensitive(self):
        assert measure_type("Log_Loss") is LogLoss
        assert measure_type(" AUC ") is AreaUnderCurve

    def test_unknown_alias(self):
        with pytest.raises(ArgumentError, match="unknown measure"):
            lookup("accuracy")

    def test_default_instances(self):
        assert cross_entropy is log_loss
        assert isinstance(log_loss, LogLoss)


class TestLookup:

    def test_with_parameters(self):
        m = lookup("spherical_score", alpha=3.0)
        assert isinstance(m, SphericalScore)
        assert m.alpha == 3.0
        assert lookup("cross_entropy", tol=1e-4) == LogLoss(tol=1e-4)

    def test_bad_parameter_name(self):
        with pytest.raises(ArgumentError, match="bad parameters"):
            lookup("auc", tol=0.1)


class TestMetadata:

    def test_info_by_alias_instance_and_class(self):
        assert info("auc") is AreaUnderCurve.info
        assert info(log_loss) is LogLoss.info
        assert info(SphericalScore) is SphericalScore.info

    def test_auc_traits(self):
        meta = info("area_under_curve")
        assert meta.aggregation is Aggregation.WHOLE
        assert not meta.supports_weights
        assert meta.target_scitypes == (Scitype.BINARY,)
        assert meta.distribution_kinds == (DistributionKind.FINITE,)

    def test_filter_by_orientation(self):
        assert [m.name for m in measures(orientation="loss")] == ["LogLoss", "BrierLoss"]
        assert [m.name for m in measures(orientation=Orientation.LOSS)] == ["LogLoss", "BrierLoss"]

    def test_filter_by_several_traits(self):
        names = [m.name for m in measures(orientation="score", supports_weights=True)]
        assert names == ["LogScore", "BrierScore", "SphericalScore"]

    def test_unfiltered(self):
        assert len(measures()) == len(MEASURE_TYPES)

    def test_unknown_trait(self):
        with pytest.raises(ArgumentError):
            measures(colour="red")
