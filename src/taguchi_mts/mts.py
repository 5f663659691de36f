"""
Mahalanobis-Taguchi System

Coordinates the numeric provider, space factory, standardizer, distance
engine, orthogonal array generator and variable selection engine behind a
single object. Two ways of using it:

- Engine calls on Spaces and Samples: ``mahalanobis_distance``,
  ``mahalanobis_distances``, ``find_useful_variables``, ``orthogonal_array``
- Estimator workflow on arrays or DataFrames: ``fit`` a reference (normal)
  population against abnormal samples, then ``transform`` data down to the
  useful variables or ``score_samples`` with the reduced unit space
"""

from typing import Any, Dict, List, Optional, Union
import logging
import numpy as np
import pandas as pd

from .core.config import MTSConfig
from .core.exceptions import DimensionMismatchError, NotFittedError
from .core.factory import SpaceFactory
from .core.provider import MathProvider, NumpyMathProvider
from .core.space import Sample, Space
from .design.orthogonal_array import OrthogonalArrayGenerator
from .distance.mahalanobis import MahalanobisDistanceEngine
from .distance.standardizer import Standardizer
from .selection.variable_selection import VariableSelectionEngine, VariableSelectionResult

logger = logging.getLogger(__name__)

SpaceLike = Union[Space, Sample, pd.DataFrame, np.ndarray, list]


class MahalanobisTaguchiSystem:
    """
    Mahalanobis distance and Taguchi variable selection over a reference space.

    Every collaborator can be injected; defaults are numpy/scipy backed and
    share the provider's dtype.
    """

    def __init__(
        self,
        provider: Optional[MathProvider] = None,
        factory: Optional[SpaceFactory] = None,
        config: Optional[MTSConfig] = None,
        array_generator: Optional[OrthogonalArrayGenerator] = None
    ):
        """
        Initialize the system.

        Args:
            provider: Numeric operations provider
            factory: Space/Sample factory
            config: Engine configuration
            array_generator: Orthogonal array generator for variable selection
        """
        self.provider = provider or NumpyMathProvider()
        self.factory = factory or SpaceFactory(self.provider.dtype)
        self.config = config or MTSConfig()

        self.standardizer = Standardizer(self.provider, self.factory)
        self.distance_engine = MahalanobisDistanceEngine(self.provider, self.factory, self.standardizer)
        self.array_generator = array_generator or OrthogonalArrayGenerator(self.provider, self.factory)
        self.selection_engine = VariableSelectionEngine(
            self.distance_engine, self.array_generator, self.config
        )

        # Fitted state
        self.reference_space_: Optional[Space] = None
        self.selection_result_: Optional[VariableSelectionResult] = None
        self.selected_variables_: List[str] = []
        self.is_fitted_ = False

    # Engine operations

    def mahalanobis_distance(self, space: Space, sample: Sample) -> float:
        return self.distance_engine.distance(space, sample)

    def mahalanobis_distances(self, space: Space, samples: Space) -> np.ndarray:
        return self.distance_engine.distances(space, samples)

    def find_useful_variables(self, space: Space, samples: Union[Space, Sample]) -> List[Optional[bool]]:
        """Usefulness of each variable for one abnormal sample or a space of them."""
        if isinstance(samples, Sample):
            return self.selection_engine.select_useful_variables_for_sample(space, samples)
        return self.selection_engine.select_useful_variables(space, samples)

    def orthogonal_array(self, variable_count: int) -> Space:
        return self.array_generator.generate(variable_count)

    # Estimator workflow

    def fit(self, reference: SpaceLike, abnormal: SpaceLike) -> "MahalanobisTaguchiSystem":
        """
        Select the useful variables for separating ``abnormal`` from ``reference``.

        Args:
            reference: Normal population (samples x variables)
            abnormal: Abnormal samples with the same variables

        Returns:
            self
        """
        if isinstance(reference, pd.DataFrame) and isinstance(abnormal, pd.DataFrame):
            missing = [col for col in reference.columns if col not in abnormal.columns]
            if missing:
                raise DimensionMismatchError(f"Abnormal data is missing reference columns: {missing}")
            abnormal = abnormal[list(reference.columns)]

        reference_space = self.factory.ensure_space(reference)
        abnormal_space = self.factory.ensure_space(abnormal, reference_space.variable_names)

        logger.info(
            f"Fitting MTS: reference {reference_space.shape}, abnormal {abnormal_space.shape}"
        )

        result = self.selection_engine.analyze(reference_space, abnormal_space)

        self.reference_space_ = reference_space
        self.selection_result_ = result
        self.selected_variables_ = result.useful_variable_names()
        self.is_fitted_ = True

        if not self.selected_variables_:
            logger.warning("No variable was judged useful")

        return self

    def _check_fitted(self) -> None:
        if not self.is_fitted_:
            raise NotFittedError("MahalanobisTaguchiSystem not fitted - call fit first")

    def transform(self, X: pd.DataFrame) -> pd.DataFrame:
        """Keep only the useful variables of ``X``."""
        self._check_fitted()

        available = [f for f in self.selected_variables_ if f in X.columns]
        missing = [f for f in self.selected_variables_ if f not in X.columns]
        if missing:
            logger.warning(f"Missing {len(missing)} selected variables in transform data: {missing}")

        return X[available].copy() if available else pd.DataFrame(index=X.index)

    def fit_transform(self, reference: pd.DataFrame, abnormal: SpaceLike) -> pd.DataFrame:
        return self.fit(reference, abnormal).transform(reference)

    def reduced_reference_space(self) -> Space:
        """Reference space restricted to the useful variables."""
        self._check_fitted()
        useful = set(self.selection_result_.useful_indices())
        if not useful:
            raise ValueError("No useful variables were selected; the reduced space is empty")

        excluded = [i for i in range(self.reference_space_.variables) if i not in useful]
        return self.reference_space_.without_variables(excluded)

    def score_samples(self, X: SpaceLike) -> np.ndarray:
        """
        Mahalanobis distance of every row of ``X`` in the reduced unit space.

        ``X`` must carry all reference variables; DataFrames are matched by
        column name, arrays by position.
        """
        self._check_fitted()
        reduced = self.reduced_reference_space()

        if isinstance(X, pd.DataFrame):
            missing = [name for name in reduced.variable_names if name not in X.columns]
            if missing:
                raise DimensionMismatchError(f"Samples are missing selected variables: {missing}")
            samples = self.factory.create_space_from_frame(X[list(reduced.variable_names)])
        else:
            samples = self.factory.ensure_space(X, self.reference_space_.variable_names)
            if samples.variables != self.reference_space_.variables:
                raise DimensionMismatchError(
                    f"Samples have {samples.variables} variables, reference space has "
                    f"{self.reference_space_.variables}"
                )
            useful = set(self.selection_result_.useful_indices())
            samples = samples.without_variables(i for i in range(samples.variables) if i not in useful)

        return self.distance_engine.distances(reduced, samples)

    def get_selection_summary(self) -> Dict[str, Any]:
        """Get comprehensive selection summary."""
        self._check_fitted()
        result = self.selection_result_

        return {
            'selected_variables': self.selected_variables_.copy(),
            'useful': result.useful,
            'indeterminate_variables': [result.variable_names[i] for i in result.indeterminate],
            'variable_report': result.to_frame(),
            'run_signal_to_noise': result.run_signal_to_noise.copy(),
            'skipped_runs': list(result.skipped_runs),
            'design_shape': result.design.shape,
            'memory_usage': dict(self.selection_engine.memory_stats_),
            'parameters': {
                'included_level': self.config.included_level,
                'level_tolerance': self.config.level_tolerance,
                'sn_log_base': self.config.sn_log_base,
                'parallel': self.config.parallel,
                'max_workers': self.config.max_workers,
            }
        }
