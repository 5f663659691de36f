"""
Orthogonal array (fractional factorial design) generation.
"""

from .orthogonal_array import (
    OrthogonalArrayGenerator,
    ceiling_to_power_of_two,
    is_power_of_two,
    two_to_the_nth_power,
)

__all__ = [
    'OrthogonalArrayGenerator',
    'ceiling_to_power_of_two',
    'is_power_of_two',
    'two_to_the_nth_power',
]
