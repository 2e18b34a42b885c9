"""Finite (categorical) distributions over a fixed, ordered class set.

``UnivariateFinite`` is a single probability mass function. The array
form ``UnivariateFiniteArray`` stores N predictions sharing one class set
as an (N, K) matrix, which is what the bulk scoring path consumes.
"""

from __future__ import annotations

from typing import Any, Dict, Hashable, Iterator, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from probscore.config.measure_params import get_measure_params
from probscore.missing import is_missing
from probscore.types import ArgumentError, InvalidParameterError


def _check_classes(classes: Tuple[Hashable, ...]) -> Dict[Hashable, int]:
    if not classes:
        raise InvalidParameterError("class set is empty")
    index = {c: i for i, c in enumerate(classes)}
    if len(index) != len(classes):
        raise InvalidParameterError(f"class labels are not unique: {classes!r}")
    return index


def _check_probs(probs: NDArray[np.float64], tol: Optional[float]) -> None:
    """Validate rows of a probability matrix.

    Rejects:
    - NaN, Inf
    - Negative masses
    - Rows whose sum deviates from 1.0 by more than ``tol``
    """
    if tol is None:
        tol = get_measure_params().finite.prob_sum_tolerance
    if probs.size == 0:
        return
    if not np.all(np.isfinite(probs)):
        raise InvalidParameterError("probabilities must be finite")
    if np.any(probs < 0):
        raise InvalidParameterError("probabilities must be non-negative")
    deviation = np.abs(probs.sum(axis=1) - 1.0)
    worst = int(np.argmax(deviation))
    if deviation[worst] > tol:
        raise InvalidParameterError(
            f"probability vector sum {probs[worst].sum()} deviates from 1.0 by {deviation[worst]}"
        )


class UnivariateFinite:
    """Probability mass function over an ordered tuple of class labels.

    Args:
        classes: Class labels in their fixed order
        probs: One probability per class
        tol: Allowed deviation of ``sum(probs)`` from 1 (config default)

    Raises:
        InvalidParameterError: If the labels or probabilities are invalid
    """

    __slots__ = ("_classes", "_probs", "_index")

    def __init__(
        self,
        classes: Sequence[Hashable],
        probs: Sequence[float],
        tol: Optional[float] = None,
    ):
        classes = tuple(classes)
        index = _check_classes(classes)
        p = np.array(probs, dtype=np.float64)
        if p.shape != (len(classes),):
            raise InvalidParameterError(
                f"expected {len(classes)} probabilities, got shape {p.shape}"
            )
        _check_probs(p[np.newaxis, :], tol)
        p.setflags(write=False)
        self._classes = classes
        self._probs = p
        self._index = index

    @classmethod
    def _trusted(
        cls,
        classes: Tuple[Hashable, ...],
        probs: NDArray[np.float64],
        index: Dict[Hashable, int],
    ) -> "UnivariateFinite":
        obj = cls.__new__(cls)
        obj._classes = classes
        obj._probs = probs
        obj._index = index
        return obj

    @property
    def classes(self) -> Tuple[Hashable, ...]:
        return self._classes

    @property
    def probs(self) -> NDArray[np.float64]:
        return self._probs

    @property
    def positive_class(self) -> Hashable:
        """The second class, which AUC treats as positive."""
        if len(self._classes) != 2:
            raise ArgumentError(
                f"positive class is only defined for two classes, got {len(self._classes)}"
            )
        return self._classes[1]

    def index(self, label: Hashable) -> int:
        try:
            return self._index[label]
        except (KeyError, TypeError):
            raise ArgumentError(f"{label!r} is not one of the classes {self._classes!r}")

    def pdf(self, label: Hashable) -> float:
        """Probability mass of ``label``."""
        return float(self._probs[self.index(label)])

    def mode(self) -> Hashable:
        return self._classes[int(np.argmax(self._probs))]

    def same_classes(self, other: "UnivariateFinite") -> bool:
        return self._classes == other._classes

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UnivariateFinite):
            return NotImplemented
        return self._classes == other._classes and np.array_equal(self._probs, other._probs)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        body = ", ".join(f"{c!r}=>{p:.3g}" for c, p in zip(self._classes, self._probs))
        return f"UnivariateFinite({body})"


class UnivariateFiniteArray:
    """N finite distributions sharing one class set, stored as an (N, K) matrix.

    A row consisting entirely of NaN marks a missing prediction.

    Args:
        classes: Class labels in their fixed order
        probs: Matrix of shape (N, K)
        tol: Allowed deviation of each row sum from 1 (config default)
    """

    def __init__(
        self,
        classes: Sequence[Hashable],
        probs: Any,
        tol: Optional[float] = None,
    ):
        classes = tuple(classes)
        index = _check_classes(classes)
        p = np.array(probs, dtype=np.float64)
        if p.ndim != 2 or p.shape[1] != len(classes):
            raise InvalidParameterError(
                f"expected a matrix with {len(classes)} columns, got shape {p.shape}"
            )
        missing = np.all(np.isnan(p), axis=1)
        _check_probs(p[~missing], tol)
        p.setflags(write=False)
        self._classes = classes
        self._index = index
        self._probs = p
        self._missing = missing

    @classmethod
    def binary(
        cls,
        classes: Sequence[Hashable],
        p_positive: Sequence[float],
    ) -> "UnivariateFiniteArray":
        """Two-class array from the probability of the second (positive) class."""
        if len(classes) != 2:
            raise InvalidParameterError(f"binary arrays need two classes, got {len(classes)}")
        p = np.asarray(p_positive, dtype=np.float64)
        if p.ndim != 1:
            raise InvalidParameterError("p_positive must be one-dimensional")
        return cls(classes, np.column_stack([1.0 - p, p]))

    @classmethod
    def from_distributions(cls, dists: Sequence[Any]) -> "UnivariateFiniteArray":
        """Stack ``UnivariateFinite`` entries (or missing markers) sharing one class set.

        Raises:
            ArgumentError: If an entry is not finite or the class sets differ
        """
        reference: Optional[UnivariateFinite] = None
        for d in dists:
            if is_missing(d):
                continue
            if not isinstance(d, UnivariateFinite):
                raise ArgumentError(f"cannot stack {type(d).__name__} into a finite array")
            if reference is None:
                reference = d
            elif not d.same_classes(reference):
                raise ArgumentError(
                    f"class sets differ: {reference.classes!r} vs {d.classes!r}"
                )
        if reference is None:
            raise ArgumentError("cannot infer classes: every prediction is missing")

        k = len(reference.classes)
        rows = [np.full(k, np.nan) if is_missing(d) else d.probs for d in dists]
        probs = np.vstack(rows) if rows else np.empty((0, k))
        probs.setflags(write=False)

        obj = cls.__new__(cls)
        obj._classes = reference.classes
        obj._index = reference._index
        obj._probs = probs
        obj._missing = np.all(np.isnan(probs), axis=1)
        return obj

    @property
    def classes(self) -> Tuple[Hashable, ...]:
        return self._classes

    @property
    def positive_class(self) -> Hashable:
        if len(self._classes) != 2:
            raise ArgumentError(
                f"positive class is only defined for two classes, got {len(self._classes)}"
            )
        return self._classes[1]

    def pdf_matrix(self) -> NDArray[np.float64]:
        """Read-only (N, K) matrix of class probabilities."""
        return self._probs

    def pdf(self, label: Hashable) -> NDArray[np.float64]:
        """Probability of ``label`` under each of the N distributions."""
        try:
            j = self._index[label]
        except (KeyError, TypeError):
            raise ArgumentError(f"{label!r} is not one of the classes {self._classes!r}")
        return self._probs[:, j]

    def missing_mask(self) -> NDArray[np.bool_]:
        return self._missing.copy()

    def encode(self, y: Sequence[Any]) -> NDArray[np.intp]:
        """Map observed labels to column indices; missing observations map to -1.

        Raises:
            ArgumentError: If an observation is not one of the classes
        """
        codes = np.empty(len(y), dtype=np.intp)
        for i, label in enumerate(y):
            if is_missing(label):
                codes[i] = -1
                continue
            try:
                codes[i] = self._index[label]
            except (KeyError, TypeError):
                raise ArgumentError(
                    f"observation {label!r} at position {i} is not one of the classes {self._classes!r}"
                )
        return codes

    def __len__(self) -> int:
        return self._probs.shape[0]

    def __iter__(self) -> Iterator[Optional[UnivariateFinite]]:
        for i in range(len(self)):
            yield self[i]

    def __getitem__(self, key: Any) -> Any:
        if isinstance(key, (int, np.integer)):
            if self._missing[key]:
                return None
            return UnivariateFinite._trusted(self._classes, self._probs[key], self._index)
        obj = UnivariateFiniteArray.__new__(UnivariateFiniteArray)
        obj._classes = self._classes
        obj._index = self._index
        obj._probs = self._probs[key]
        obj._missing = self._missing[key]
        return obj

    def __repr__(self) -> str:
        return f"UnivariateFiniteArray(classes={self._classes!r}, n={len(self)})"


__all__ = [
    "UnivariateFinite",
    "UnivariateFiniteArray",
]
