# The MIT License (MIT)
# Copyright © 2025 probscore

# Permission is hereby granted, free of charge, to any person obtaining a copy of this software and associated
# documentation files (the "Software"), to deal in the Software without restriction, including without limitation
# the rights to use, copy, modify, merge, publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so, subject to the following conditions:

# The above copyright notice and this permission notice shall be included in all copies or substantial portions of
# the Software.

# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO
# THE WARRANTIES OF MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL
# THE AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN ACTION
# OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER
# DEALINGS IN THE SOFTWARE.

# Read version from pyproject.toml via importlib.metadata
try:
    from importlib.metadata import version as _get_version
    __version__ = _get_version("probscore")
except Exception:
    __version__ = "0.0.0"

from .distributions import (
    DiscreteNonParametric,
    UnivariateFinite,
    UnivariateFiniteArray,
)
from .measures import (
    AUC,
    ALIASES,
    AreaUnderCurve,
    BrierLoss,
    BrierScore,
    CrossEntropy,
    LogLoss,
    LogScore,
    Measure,
    SphericalScore,
    aggregate,
    area_under_curve,
    auc,
    brier_loss,
    brier_score,
    call,
    cross_entropy,
    info,
    log_loss,
    log_score,
    lookup,
    measures,
    per_observation,
    single,
    spherical_score,
)
from .missing import is_missing, skipinvalid
from .types import (
    ArgumentError,
    DegenerateInputError,
    DimensionMismatchError,
    InvalidParameterError,
    MeasureError,
    MeasureInfo,
    Orientation,
    UnsupportedDistributionError,
)
from .traits import (
    MODEL_REGISTRY,
    Deterministic,
    Interval,
    Model,
    ModelRegistry,
    Probabilistic,
    Supervised,
    Unsupervised,
    model_traits,
    register_model,
    trait,
)
