"""
Mahalanobis-Taguchi System (MTS)

Multivariate pattern recognition against a reference ("normal") population:
a scale-invariant Mahalanobis distance of any sample from that population,
and Taguchi orthogonal-array analysis of which measured variables actually
help to discriminate abnormal samples.

Key Components:
- Standardization of samples into the unit space
- Mahalanobis distance over the inverse correlation structure
- Two-level orthogonal arrays (literal L12, power-of-two construction)
- Signal-to-noise ratio based variable selection, parallel across runs
"""

from .core import (
    DimensionMismatchError,
    MathProvider,
    MTSConfig,
    MTSError,
    NotFittedError,
    NumpyMathProvider,
    Sample,
    SingularMatrixError,
    Space,
    SpaceFactory,
)
from .design import OrthogonalArrayGenerator, ceiling_to_power_of_two
from .distance import MahalanobisDistanceEngine, Standardizer
from .mts import MahalanobisTaguchiSystem
from .selection import VariableSelectionEngine, VariableSelectionResult, signal_to_noise_ratio

__all__ = [
    'MahalanobisTaguchiSystem',
    'MahalanobisDistanceEngine',
    'Standardizer',
    'OrthogonalArrayGenerator',
    'ceiling_to_power_of_two',
    'VariableSelectionEngine',
    'VariableSelectionResult',
    'signal_to_noise_ratio',
    'MTSConfig',
    'MathProvider',
    'NumpyMathProvider',
    'SpaceFactory',
    'Space',
    'Sample',
    'MTSError',
    'DimensionMismatchError',
    'SingularMatrixError',
    'NotFittedError',
]

# Version info
__version__ = '1.0.0'
