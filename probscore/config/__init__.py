from .measure_params import (
    MACHINE_EPS,
    DEFAULT_MEASURE_PARAMS,
    EvaluationParams,
    FiniteParams,
    LogParams,
    MeasureParams,
    SphericalParams,
    get_measure_params,
)

__all__ = [
    "MACHINE_EPS",
    "DEFAULT_MEASURE_PARAMS",
    "EvaluationParams",
    "FiniteParams",
    "LogParams",
    "MeasureParams",
    "SphericalParams",
    "get_measure_params",
]
