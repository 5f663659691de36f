"""
Unit-space standardization and Mahalanobis distance.
"""

from .mahalanobis import MahalanobisDistanceEngine
from .standardizer import Standardizer

__all__ = [
    'MahalanobisDistanceEngine',
    'Standardizer',
]
