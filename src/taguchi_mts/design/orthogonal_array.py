"""
Two-level orthogonal array generation.

Produces the design matrix driving variable selection: one row per run, one
column per variable, entries 1 (level 1) or 2 (level 2).

- 8 to 11 variables: the literal Taguchi L12 array (12 runs x 11 columns),
  which the doubling construction cannot produce.
- Any other count: an algebraic two-level fractional factorial with
  ``runs = ceiling_to_power_of_two(variables + 1)``. Power-of-two columns
  (1, 2, 4, ...) alternate between 0 and 1 every ``runs / (2 * column)``
  rows; every other column is the modulo-2 sum of the power-of-two columns
  making up its index (column 5 = column 1 + column 4). Levels are then
  shifted from {0, 1} to {1, 2} and column 0 is dropped.
"""

import logging
import numpy as np

from ..core.factory import SpaceFactory
from ..core.provider import MathProvider
from ..core.space import Space

logger = logging.getLogger(__name__)

L12_MIN_VARIABLES = 8
L12_MAX_VARIABLES = 11
L12_RUNS = 12


def is_power_of_two(n: int) -> bool:
    return n != 0 and (n & (n - 1)) == 0


def ceiling_to_power_of_two(n: int) -> int:
    """Smallest power of two >= n; 1 for n <= 0."""
    if n <= 0:
        return 1
    return 1 << (n - 1).bit_length()


def two_to_the_nth_power(n: int) -> int:
    return 1 << n


class OrthogonalArrayGenerator:
    """Builds two-level orthogonal arrays through the numeric provider."""

    def __init__(self, provider: MathProvider, factory: SpaceFactory):
        self.provider = provider
        self.factory = factory

    @staticmethod
    def uses_l12(variable_count: int) -> bool:
        return L12_MIN_VARIABLES <= variable_count <= L12_MAX_VARIABLES

    def run_count(self, variable_count: int) -> int:
        """Number of runs (rows) ``generate`` returns for ``variable_count``."""
        if self.uses_l12(variable_count):
            return L12_RUNS
        return ceiling_to_power_of_two(variable_count + 1)

    def generate(self, variable_count: int, trim: bool = False) -> Space:
        """
        Generate the design matrix for ``variable_count`` variables.

        Args:
            variable_count: Number of variables (factors), at least 1
            trim: Keep only the first ``variable_count`` columns instead of
                every column the construction yields

        Returns:
            Space of runs x columns with entries in {1, 2}

        Raises:
            ValueError: if ``variable_count`` < 1
        """
        if variable_count < 1:
            raise ValueError(f"variable_count must be at least 1, got {variable_count}")

        if self.uses_l12(variable_count):
            logger.debug(f"Using literal L12 array for {variable_count} variables")
            design = self.factory.generate_l12()
        else:
            design = self._generate_two_level(variable_count)

        if trim and design.variables > variable_count:
            design = design.without_variables(range(variable_count, design.variables))

        return design

    def _generate_two_level(self, variable_count: int) -> Space:
        runs = ceiling_to_power_of_two(variable_count + 1)
        logger.debug(f"Generating {runs}-run two-level array for {variable_count} variables")

        zero = self.provider.cast_int(0)
        one = self.provider.cast_int(1)
        two = self.provider.cast_int(2)

        oa = np.full((runs, runs), zero, dtype=self.factory.dtype)

        for column in range(1, runs):
            if is_power_of_two(column):
                value = 1
                period = runs // (2 * column)
                for row in range(runs):
                    if period != 0 and row % period == 0:
                        value ^= 1
                    oa[row, column] = self.provider.cast_int(value)
            else:
                for row in range(runs):
                    digit = 0
                    while two_to_the_nth_power(digit) < column:
                        digit_column = two_to_the_nth_power(digit)
                        if column & digit_column == digit_column:
                            oa[row, column] = self.provider.modulo(
                                self.provider.add(oa[row, column], oa[row, digit_column]), two
                            )
                        digit += 1

        for i in range(runs):
            for j in range(runs):
                oa[i, j] = self.provider.add(oa[i, j], one)

        return self.factory.create_space_from_array(oa).without_variable(0)
