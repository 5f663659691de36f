"""
Standardization of samples into the unit space.

A raw observation becomes a Z vector relative to a reference space:
``z_i = (x_i - mean_i) / std_i`` with the mean and the population standard
deviation (divide by N) of each reference variable. A variable with zero
standard deviation keeps the provider's additive identity as its Z value.
"""

from typing import Optional, Tuple
import logging
import numpy as np

from ..core.exceptions import DimensionMismatchError
from ..core.factory import SpaceFactory
from ..core.provider import MathProvider
from ..core.space import Sample, Space

logger = logging.getLogger(__name__)

ReferenceStatistics = Tuple[np.ndarray, np.ndarray]


class Standardizer:
    """Converts samples into Z vectors relative to a reference space."""

    def __init__(self, provider: MathProvider, factory: SpaceFactory):
        self.provider = provider
        self.factory = factory

    def variable_means(self, space: Space) -> np.ndarray:
        means = np.zeros(space.variables, dtype=np.float64)
        for i in range(space.variables):
            means[i] = self.provider.mean(space.variable_values(i))
        return means

    def variable_standard_deviations(
        self,
        space: Space,
        means: Optional[np.ndarray] = None
    ) -> np.ndarray:
        """
        Population standard deviation of every variable.

        Constant columns get exactly 0, whatever rounding the mean picked up.
        """
        if means is None:
            means = self.variable_means(space)

        values = np.asarray(space.storage, dtype=np.float64)
        deviations = values - means
        variances = np.sum(deviations * deviations, axis=0) / space.samples
        std_devs = np.sqrt(variances)
        std_devs[self.constant_variables(space)] = 0.0
        return std_devs

    @staticmethod
    def constant_variables(space: Space) -> np.ndarray:
        """Boolean mask of the variables whose values never change."""
        return np.ptp(np.asarray(space.storage, dtype=np.float64), axis=0) == 0

    def reference_statistics(self, space: Space) -> ReferenceStatistics:
        """Per-variable (means, standard deviations) of a reference space."""
        means = self.variable_means(space)
        return means, self.variable_standard_deviations(space, means)

    def standardize(
        self,
        space: Space,
        sample: Sample,
        statistics: Optional[ReferenceStatistics] = None
    ) -> Sample:
        """
        Compute the Z vector of ``sample`` against ``space``.

        Args:
            space: Reference (unit) space
            sample: Observation with one value per reference variable
            statistics: Precomputed ``reference_statistics(space)``

        Returns:
            Z vector as a Sample

        Raises:
            DimensionMismatchError: if the variable counts differ
        """
        if sample.variables != space.variables:
            raise DimensionMismatchError(
                f"Sample has {sample.variables} variables, reference space has {space.variables}"
            )

        if statistics is None:
            statistics = self.reference_statistics(space)
            self._warn_constant_variables(space, statistics[1])
        means, std_devs = statistics

        zero = self.provider.cast_int(0)
        z = np.full(sample.variables, zero, dtype=self.factory.dtype)
        for i in range(sample.variables):
            if std_devs[i] != 0:
                z[i] = self.provider.cast_double((float(sample[i]) - means[i]) / std_devs[i])

        return self.factory.create_sample_from_array(z)

    def standardize_space(self, space: Space, samples: Space) -> Space:
        """Z vectors of every sample in ``samples`` against ``space``."""
        if samples.variables != space.variables:
            raise DimensionMismatchError(
                f"Samples have {samples.variables} variables, reference space has {space.variables}"
            )

        statistics = self.reference_statistics(space)
        self._warn_constant_variables(space, statistics[1])

        rows = [self.standardize(space, sample, statistics).storage for sample in samples]
        return self.factory.create_space_from_array(np.vstack(rows), samples.variable_names)

    @staticmethod
    def _warn_constant_variables(space: Space, std_devs: np.ndarray) -> None:
        constant = [space.variable_names[i] for i in np.flatnonzero(std_devs == 0)]
        if constant:
            logger.warning(f"Zero variance in reference variables {constant}; their Z values are 0")
