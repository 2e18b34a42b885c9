"""Model traits: what each predictive model consumes and produces.

Models subclass one of the abstract bases below and declare traits as
class attributes. Traits that are not declared fall back to defaults;
``name``, ``is_supervised`` and ``prediction_type`` are derived from the
class itself. Measures expose the same vocabulary through ``MeasureInfo``.
"""

from __future__ import annotations

import logging
from abc import ABC
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, List, Optional, Type, Union

from probscore.types import ArgumentError, PredictionType, Scitype

logger = logging.getLogger(__name__)


class Model(ABC):
    """Base for all models. Holds hyperparameters; declares traits."""

    # Declared traits and their fallbacks
    input_scitype: Scitype = Scitype.UNKNOWN
    output_scitype: Scitype = Scitype.UNKNOWN
    target_scitype: Scitype = Scitype.UNKNOWN
    package_name: str = "unknown"
    package_license: str = "unknown"
    package_url: str = "unknown"
    load_path: str = "unknown"
    is_wrapper: bool = False
    supports_weights: bool = False
    docstring: Optional[str] = None

    # Set by the abstract bases
    _prediction_type: PredictionType = PredictionType.UNKNOWN
    _is_supervised: bool = False

    def clean(self) -> str:
        """Correct invalid hyperparameters in place; return a warning message."""
        return ""


class Supervised(Model):
    _is_supervised = True


class Unsupervised(Model):
    pass


class Probabilistic(Supervised):
    """Supervised models whose predictions are probability distributions."""
    _prediction_type = PredictionType.PROBABILISTIC


class Deterministic(Supervised):
    """Supervised models whose predictions are point values."""
    _prediction_type = PredictionType.DETERMINISTIC


class Interval(Supervised):
    """Supervised models whose predictions are intervals."""
    _prediction_type = PredictionType.INTERVAL


@dataclass(frozen=True)
class ModelTraits:
    """Snapshot of every trait of a model class."""

    name: str
    is_supervised: bool
    prediction_type: PredictionType
    input_scitype: Scitype
    output_scitype: Scitype
    target_scitype: Scitype
    package_name: str
    package_license: str
    package_url: str
    load_path: str
    is_wrapper: bool
    supports_weights: bool
    docstring: str

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


ModelLike = Union[Model, Type[Model]]


def _model_class(model: ModelLike) -> Type[Model]:
    cls = model if isinstance(model, type) else type(model)
    if not issubclass(cls, Model):
        raise ArgumentError(f"{cls.__name__} is not a Model")
    return cls


def _docstring(cls: Type[Model]) -> str:
    if cls.docstring:
        return cls.docstring
    if cls.__doc__:
        return cls.__doc__.strip()
    return f"{cls.__name__} from {cls.package_name}.\n[Documentation]({cls.package_url})."


def model_traits(model: ModelLike) -> ModelTraits:
    """All traits of a model instance or class."""
    cls = _model_class(model)
    return ModelTraits(
        name=cls.__name__,
        is_supervised=cls._is_supervised,
        prediction_type=cls._prediction_type if cls._is_supervised else PredictionType.UNKNOWN,
        input_scitype=cls.input_scitype,
        output_scitype=cls.output_scitype,
        target_scitype=cls.target_scitype if cls._is_supervised else Scitype.UNKNOWN,
        package_name=cls.package_name,
        package_license=cls.package_license,
        package_url=cls.package_url,
        load_path=cls.load_path,
        is_wrapper=cls.is_wrapper,
        supports_weights=cls.supports_weights if cls._is_supervised else False,
        docstring=_docstring(cls),
    )


def trait(model: ModelLike, name: str) -> Any:
    """Value of a single trait, e.g. ``trait(model, "prediction_type")``."""
    traits = model_traits(model)
    if not hasattr(traits, name):
        raise ArgumentError(f"unknown model trait {name!r}")
    return getattr(traits, name)


class ModelRegistry:
    """Name -> model class lookup with trait-based filtering."""

    def __init__(self) -> None:
        self._models: Dict[str, Type[Model]] = {}

    def register(self, cls: Type[Model]) -> Type[Model]:
        """Register ``cls`` under its class name. Usable as a decorator."""
        _model_class(cls)
        existing = self._models.get(cls.__name__)
        if existing is not None and existing is not cls:
            logger.warning(
                "Model name %s already registered by %s; keeping the existing entry",
                cls.__name__, existing.__module__,
            )
            return cls
        self._models[cls.__name__] = cls
        return cls

    def get(self, name: str) -> Type[Model]:
        try:
            return self._models[name]
        except KeyError:
            raise ArgumentError(f"no model registered as {name!r}")

    def models(self, predicate: Optional[Callable[[ModelTraits], bool]] = None, **filters: Any) -> List[ModelTraits]:
        """Traits of registered models matching ``predicate`` and every ``trait=value`` filter."""
        result = []
        for name in sorted(self._models):
            traits = model_traits(self._models[name])
            if predicate is not None and not predicate(traits):
                continue
            if all(getattr(traits, k) == v for k, v in filters.items()):
                result.append(traits)
        return result

    def __contains__(self, name: object) -> bool:
        return name in self._models

    def __len__(self) -> int:
        return len(self._models)


# Default registry for easy import
MODEL_REGISTRY = ModelRegistry()


def register_model(cls: Type[Model]) -> Type[Model]:
    return MODEL_REGISTRY.register(cls)


__all__ = [
    "Model",
    "Supervised",
    "Unsupervised",
    "Probabilistic",
    "Deterministic",
    "Interval",
    "ModelTraits",
    "model_traits",
    "trait",
    "ModelRegistry",
    "MODEL_REGISTRY",
    "register_model",
]
