"""
Exceptions raised by the Mahalanobis-Taguchi System engine.

Structural and numeric failures surface to the caller of the top-level
operation; degenerate-but-recoverable conditions (zero variance) are handled
locally and never raise.
"""


class MTSError(Exception):
    """Base class for all engine errors."""


class DimensionMismatchError(MTSError, ValueError):
    """Sample/space shapes or variable counts disagree."""


class SingularMatrixError(MTSError, ArithmeticError):
    """Correlation structure could not be inverted."""


class NotFittedError(MTSError, ValueError):
    """Estimator used before fit."""
