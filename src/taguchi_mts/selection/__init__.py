"""
Orthogonal-array variable selection driven by signal-to-noise ratios.
"""

from .variable_selection import (
    RunOutcome,
    VariableSelectionEngine,
    VariableSelectionResult,
    signal_to_noise_ratio,
)

__all__ = [
    'RunOutcome',
    'VariableSelectionEngine',
    'VariableSelectionResult',
    'signal_to_noise_ratio',
]
