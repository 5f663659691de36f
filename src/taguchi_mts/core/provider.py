"""
Numeric Operations Provider

The engine never performs concrete arithmetic itself: scalar casts, the
binary arithmetic of the orthogonal array construction, correlation, means,
matrix products and inversion are all delegated to a provider object that is
injected at construction time. ``NumpyMathProvider`` is the default
implementation, backed by numpy and scipy and parameterised by the working
dtype.
"""

from abc import ABC, abstractmethod
from typing import Sequence
import logging
import warnings
import numpy as np
from scipy import linalg, stats

from .exceptions import DimensionMismatchError, SingularMatrixError
from .space import Sample, Space

logger = logging.getLogger(__name__)


class MathProvider(ABC):
    """Capability bundle the engine needs from a numeric type."""

    dtype = np.float64

    @abstractmethod
    def multiply(self, sample: Sample, space: Space) -> Sample:
        """Row vector ``sample`` times matrix ``space``."""

    @abstractmethod
    def invert(self, space: Space) -> Space:
        """Inverse of a square matrix; must raise on singular input."""

    @abstractmethod
    def correlate(self, a: Sequence, b: Sequence):
        """Pearson correlation of two equal-length arrays."""

    @abstractmethod
    def mean(self, values: Sequence) -> float:
        """Arithmetic mean of an array."""

    @abstractmethod
    def cast_int(self, value: int):
        """Convert an int into the working scalar type."""

    @abstractmethod
    def cast_double(self, value: float):
        """Convert a float into the working scalar type."""

    @abstractmethod
    def add(self, a, b):
        """Sum of two scalars."""

    @abstractmethod
    def modulo(self, dividend, divisor):
        """Remainder of ``dividend / divisor``."""


class NumpyMathProvider(MathProvider):
    """
    numpy/scipy implementation of the numeric operations.

    Inversion goes through ``scipy.linalg.inv`` with finiteness checks, so a
    correlation matrix poisoned by NaN (constant variables) or a singular
    matrix is reported as ``SingularMatrixError`` instead of being returned.
    """

    def __init__(self, dtype=np.float64):
        self.dtype = np.dtype(dtype).type

    def multiply(self, sample: Sample, space: Space) -> Sample:
        if sample.variables != space.samples:
            raise DimensionMismatchError(
                f"Cannot multiply a 1x{sample.variables} vector by a "
                f"{space.samples}x{space.variables} matrix"
            )
        product = np.asarray(sample.storage, dtype=self.dtype) @ np.asarray(space.storage, dtype=self.dtype)
        return Sample(product, dtype=self.dtype)

    def invert(self, space: Space) -> Space:
        if space.samples != space.variables:
            raise DimensionMismatchError(f"Cannot invert non-square matrix of shape {space.shape}")

        matrix = np.asarray(space.storage, dtype=self.dtype)
        if not np.all(np.isfinite(matrix)):
            raise SingularMatrixError("Matrix contains NaN or infinite entries and cannot be inverted")

        # Numerically singular: the inverse would be dominated by rounding
        condition = np.linalg.cond(matrix)
        if not np.isfinite(condition) or condition > 1.0 / np.finfo(self.dtype).eps:
            raise SingularMatrixError(
                f"Matrix of shape {space.shape} is singular to working precision (condition {condition:.3g})"
            )

        try:
            with warnings.catch_warnings():
                warnings.simplefilter("error", linalg.LinAlgWarning)
                inverse = linalg.inv(matrix)
        except (linalg.LinAlgError, linalg.LinAlgWarning) as e:
            logger.debug(f"Inversion failed for {space.shape[0]}x{space.shape[1]} matrix: {e}")
            raise SingularMatrixError(f"Matrix of shape {space.shape} is singular: {e}") from e

        if not np.all(np.isfinite(inverse)):
            raise SingularMatrixError(f"Inverse of matrix of shape {space.shape} is not finite")

        return Space(inverse, dtype=self.dtype)

    def correlate(self, a: Sequence, b: Sequence):
        a = np.asarray(a, dtype=np.float64)
        b = np.asarray(b, dtype=np.float64)

        if a.shape != b.shape:
            raise DimensionMismatchError(f"Cannot correlate arrays of shapes {a.shape} and {b.shape}")
        if a.size < 2:
            raise ValueError("Correlation requires at least 2 values per array")

        # Constant input has no defined correlation
        if np.ptp(a) == 0 or np.ptp(b) == 0:
            return self.dtype(np.nan)

        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            result = stats.pearsonr(a, b)

        return self.dtype(result[0])

    def mean(self, values: Sequence) -> float:
        return float(np.mean(np.asarray(values, dtype=np.float64)))

    def cast_int(self, value: int):
        return self.dtype(value)

    def cast_double(self, value: float):
        return self.dtype(value)

    def add(self, a, b):
        return self.dtype(a + b)

    def modulo(self, dividend, divisor):
        return self.dtype(np.mod(dividend, divisor))
