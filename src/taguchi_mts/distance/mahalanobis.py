"""
Mahalanobis Distance Engine

Computes the MTS form of the Mahalanobis distance of a sample from a
reference space:

    D = 2 * (Z . C^-1 . Z^T) / N

where Z is the sample standardized against the reference space, C is the
variable-by-variable correlation matrix of the reference space and N is the
reference sample count. Abnormal samples give markedly larger values than
samples drawn from the reference population.

Key Features:
- All arithmetic delegated to the injected numeric provider
- Batch computation reusing the reference statistics and C^-1
- Constant variables contribute zero instead of poisoning C
- Singular correlation structures surface as SingularMatrixError
"""

from typing import Optional
import logging
import numpy as np

from ..core.exceptions import DimensionMismatchError
from ..core.factory import SpaceFactory
from ..core.provider import MathProvider
from ..core.space import Sample, Space
from .standardizer import ReferenceStatistics, Standardizer

logger = logging.getLogger(__name__)

# 2/N normalisation of the MTS distance
DISTANCE_SCALE = 2.0


class MahalanobisDistanceEngine:
    """Mahalanobis distance of samples against a reference space."""

    def __init__(
        self,
        provider: MathProvider,
        factory: SpaceFactory,
        standardizer: Optional[Standardizer] = None
    ):
        self.provider = provider
        self.factory = factory
        self.standardizer = standardizer or Standardizer(provider, factory)

    def correlation_space(self, space: Space) -> Space:
        """
        Pairwise correlation of all variable columns, diagonal included.

        A constant variable has no defined correlation; it gets a unit row and
        column instead. Its Z value is always 0, so it adds nothing to D and
        the matrix stays invertible.
        """
        columns = [space.variable_values(i) for i in range(space.variables)]
        constant = self.standardizer.constant_variables(space)

        correlations = np.zeros((space.variables, space.variables), dtype=self.factory.dtype)
        for i in range(space.variables):
            for j in range(space.variables):
                if constant[i] or constant[j]:
                    correlations[i, j] = self.provider.cast_int(1 if i == j else 0)
                else:
                    correlations[i, j] = self.provider.correlate(columns[i], columns[j])

        return self.factory.create_space_from_array(correlations)

    def inverse_correlation_space(self, space: Space) -> Space:
        return self.provider.invert(self.correlation_space(space))

    def distance(self, space: Space, sample: Sample) -> float:
        """
        Mahalanobis distance of ``sample`` from ``space``.

        Raises:
            DimensionMismatchError: if the variable counts differ
            SingularMatrixError: if the correlation matrix cannot be inverted
        """
        z = self.standardizer.standardize(space, sample)
        inverse_c = self.inverse_correlation_space(space)
        return self._distance_from_z(z, inverse_c, space.samples)

    def distances(self, space: Space, samples: Space) -> np.ndarray:
        """
        Mahalanobis distance of every sample in ``samples`` from ``space``.

        The reference statistics and the inverse correlation matrix are
        computed once and shared by all samples.
        """
        if samples.variables != space.variables:
            raise DimensionMismatchError(
                f"Samples have {samples.variables} variables, reference space has {space.variables}"
            )

        statistics: ReferenceStatistics = self.standardizer.reference_statistics(space)
        inverse_c = self.inverse_correlation_space(space)

        results = np.empty(samples.samples, dtype=np.float64)
        for i, sample in enumerate(samples):
            z = self.standardizer.standardize(space, sample, statistics)
            results[i] = self._distance_from_z(z, inverse_c, space.samples)

        logger.debug(
            f"Computed {samples.samples} distances over {space.variables} variables "
            f"(reference samples: {space.samples})"
        )
        return results

    def _distance_from_z(self, z: Sample, inverse_c: Space, reference_samples: int) -> float:
        transpose_z = self.factory.create_single_variable_space_from_sample(z)

        step1 = self.provider.multiply(z, inverse_c)
        step2 = self.provider.multiply(step1, transpose_z)

        return DISTANCE_SCALE * float(step2[0]) / reference_samples
