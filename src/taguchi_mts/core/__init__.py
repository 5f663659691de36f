"""
Core containers and collaborators for the Mahalanobis-Taguchi System.

Key Components:
- Space/Sample value types with non-mutating variable removal
- Numeric operations provider (numpy/scipy backed by default)
- Space factory, including the literal L12 orthogonal array
- Engine configuration and error types
"""

from .config import MTSConfig
from .exceptions import (
    DimensionMismatchError,
    MTSError,
    NotFittedError,
    SingularMatrixError,
)
from .factory import SpaceFactory
from .provider import MathProvider, NumpyMathProvider
from .space import Sample, Space

__all__ = [
    'MTSConfig',
    'MTSError',
    'DimensionMismatchError',
    'SingularMatrixError',
    'NotFittedError',
    'SpaceFactory',
    'MathProvider',
    'NumpyMathProvider',
    'Sample',
    'Space',
]
