"""
Variable Selection Engine

Decides which measured variables help to separate abnormal samples from the
reference (normal) population, using a Taguchi orthogonal array over
variable subsets.

Selection Procedure:
1. Generate a two-level orthogonal array with one column per variable
2. For every run, keep only the variables at the "included" level in both
   the reference space and the test space
3. Compute the larger-the-better signal-to-noise ratio of the run:
   SN = -10 * log(mean over test samples of 1 / D)
4. For every variable, average SN over the runs that include it and over
   the runs that exclude it
5. A variable is useful when its average SN with it included is at least
   its average SN without it

Runs are independent of each other and are evaluated on a thread pool; each
run produces its own outcome and outcomes are summed in run order.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
import logging
import math
import numpy as np
import pandas as pd
import psutil

from ..core.config import DEFAULT_SN_LOG_BASE, MTSConfig
from ..core.exceptions import DimensionMismatchError
from ..core.space import Sample, Space
from ..design.orthogonal_array import OrthogonalArrayGenerator
from ..distance.mahalanobis import MahalanobisDistanceEngine

logger = logging.getLogger(__name__)

SN_SCALE = -10.0


def signal_to_noise_ratio(
    inverse_distance_sum: float,
    sample_count: int,
    log_base: float = DEFAULT_SN_LOG_BASE
) -> float:
    """
    Larger-the-better SN ratio of a run: ``-10 * log_b(sum(1/D) / n)``.

    Args:
        inverse_distance_sum: Sum of 1/D over the test samples
        sample_count: Number of test samples
        log_base: Logarithm base

    Returns:
        SN ratio; -inf/inf/nan propagate from degenerate inputs
    """
    with np.errstate(divide='ignore', invalid='ignore'):
        return float(SN_SCALE * np.log(inverse_distance_sum / sample_count) / math.log(log_base))


@dataclass
class RunOutcome:
    """Result of a single orthogonal-array run."""
    run: int
    included: np.ndarray                  # bool per variable
    signal_to_noise: float = float('nan')
    skipped: bool = False


@dataclass
class VariableSelectionResult:
    """Per-variable and per-run results of a selection."""
    variable_names: Tuple[str, ...]
    design: Space
    times_used: np.ndarray
    times_not_used: np.ndarray
    sn_used: np.ndarray
    sn_not_used: np.ndarray
    run_signal_to_noise: np.ndarray
    skipped_runs: List[int] = field(default_factory=list)

    @property
    def variables(self) -> int:
        return len(self.variable_names)

    @property
    def mean_sn_used(self) -> np.ndarray:
        with np.errstate(divide='ignore', invalid='ignore'):
            return np.where(self.times_used > 0, self.sn_used / np.maximum(self.times_used, 1), np.nan)

    @property
    def mean_sn_not_used(self) -> np.ndarray:
        with np.errstate(divide='ignore', invalid='ignore'):
            return np.where(
                self.times_not_used > 0,
                self.sn_not_used / np.maximum(self.times_not_used, 1),
                np.nan
            )

    @property
    def gain(self) -> np.ndarray:
        """Mean SN when used minus mean SN when not used; NaN if unattained."""
        return self.mean_sn_used - self.mean_sn_not_used

    @property
    def indeterminate(self) -> List[int]:
        return [i for i in range(self.variables) if self.times_used[i] == 0 or self.times_not_used[i] == 0]

    @property
    def useful(self) -> List[Optional[bool]]:
        """True/False per variable, None when a level was never attained."""
        unattained = set(self.indeterminate)
        gain = self.gain
        return [None if i in unattained else bool(gain[i] >= 0) for i in range(self.variables)]

    def useful_indices(self) -> List[int]:
        return [i for i, flag in enumerate(self.useful) if flag]

    def useful_variable_names(self) -> List[str]:
        return [self.variable_names[i] for i in self.useful_indices()]

    def to_frame(self) -> pd.DataFrame:
        """Tabular report indexed by variable name."""
        return pd.DataFrame(
            {
                'times_used': self.times_used,
                'times_not_used': self.times_not_used,
                'mean_sn_used': self.mean_sn_used,
                'mean_sn_not_used': self.mean_sn_not_used,
                'gain': self.gain,
                'useful': pd.array(self.useful, dtype='boolean'),
            },
            index=pd.Index(self.variable_names, name='variable')
        )


class VariableSelectionEngine:
    """
    Taguchi orthogonal-array variable selection over Mahalanobis distances.
    """

    def __init__(
        self,
        distance_engine: MahalanobisDistanceEngine,
        array_generator: OrthogonalArrayGenerator,
        config: Optional[MTSConfig] = None
    ):
        self.distance_engine = distance_engine
        self.array_generator = array_generator
        self.config = config or MTSConfig()

        self.memory_stats_: Dict[str, Dict[str, Any]] = {}

    def _monitor_memory(self, stage: str) -> Dict[str, Any]:
        """Monitor memory usage during selection."""
        process = psutil.Process()
        memory_gb = process.memory_info().rss / 1024 / 1024 / 1024

        self.memory_stats_[stage] = {
            'memory_gb': memory_gb,
            'timestamp': datetime.now(),
            'warning': memory_gb > self.config.memory_limit_gb
        }

        if memory_gb > self.config.memory_limit_gb:
            logger.warning(f"Memory usage ({memory_gb:.2f}GB) exceeds limit at {stage}")

        return self.memory_stats_[stage]

    def select_useful_variables(self, reference: Space, test: Space) -> List[Optional[bool]]:
        """
        Judge every variable of ``test`` useful (True), not useful (False) or
        indeterminate (None).
        """
        return self.analyze(reference, test).useful

    def select_useful_variables_for_sample(self, reference: Space, sample: Sample) -> List[Optional[bool]]:
        """Variable selection with a single abnormal observation."""
        test = self.distance_engine.factory.create_single_sample_space_from_sample(
            sample, reference.variable_names if sample.variables == reference.variables else None
        )
        return self.select_useful_variables(reference, test)

    def analyze(self, reference: Space, test: Space) -> VariableSelectionResult:
        """
        Run the orthogonal-array experiment and collect per-variable statistics.

        Args:
            reference: Reference (normal) space
            test: Space of samples under test (abnormal)

        Returns:
            VariableSelectionResult

        Raises:
            DimensionMismatchError: if the spaces have different variable counts
            SingularMatrixError: if any run's correlation matrix is singular
        """
        if reference.variables != test.variables:
            raise DimensionMismatchError(
                f"Reference space has {reference.variables} variables, test space has {test.variables}"
            )

        variables = test.variables
        start_time = datetime.now()
        self._monitor_memory("selection_start")

        design = self.array_generator.generate(variables)
        if design.variables < variables:
            raise DimensionMismatchError(
                f"Design has {design.variables} columns, {variables} variables need one each"
            )

        logger.info(
            f"Starting variable selection: {variables} variables, {design.samples} runs, "
            f"{reference.samples} reference samples, {test.samples} test samples"
        )

        outcomes = self._evaluate_runs(reference, test, design)

        times_used = np.zeros(variables, dtype=np.int64)
        times_not_used = np.zeros(variables, dtype=np.int64)
        sn_used = np.zeros(variables, dtype=np.float64)
        sn_not_used = np.zeros(variables, dtype=np.float64)
        run_sn = np.full(design.samples, np.nan, dtype=np.float64)
        skipped_runs = []

        for outcome in outcomes:
            if outcome.skipped:
                skipped_runs.append(outcome.run)
                continue

            run_sn[outcome.run] = outcome.signal_to_noise
            times_used += outcome.included
            times_not_used += ~outcome.included
            sn_used[outcome.included] += outcome.signal_to_noise
            sn_not_used[~outcome.included] += outcome.signal_to_noise

        result = VariableSelectionResult(
            variable_names=test.variable_names,
            design=design,
            times_used=times_used,
            times_not_used=times_not_used,
            sn_used=sn_used,
            sn_not_used=sn_not_used,
            run_signal_to_noise=run_sn,
            skipped_runs=skipped_runs
        )

        indeterminate = [result.variable_names[i] for i in result.indeterminate]
        if indeterminate:
            logger.warning(f"Variables never included or never excluded, usefulness indeterminate: {indeterminate}")

        self._monitor_memory("selection_complete")
        elapsed_time = (datetime.now() - start_time).total_seconds()
        logger.info(
            f"Variable selection completed in {elapsed_time:.2f}s: "
            f"{len(result.useful_indices())}/{variables} variables useful "
            f"{result.useful_variable_names()}"
        )

        return result

    def _evaluate_runs(self, reference: Space, test: Space, design: Space) -> List[RunOutcome]:
        runs = range(design.samples)

        if not self.config.parallel or design.samples < 2:
            return [self._evaluate_run(reference, test, design, run) for run in runs]

        max_workers = self.config.max_workers or min(8, design.samples)
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            # map preserves run order and re-raises the first failure
            return list(executor.map(lambda run: self._evaluate_run(reference, test, design, run), runs))

    def _evaluate_run(self, reference: Space, test: Space, design: Space, run: int) -> RunOutcome:
        variables = test.variables
        included = np.array(
            [self.config.is_included(design[run, v]) for v in range(variables)],
            dtype=bool
        )

        if not included.any():
            logger.warning(f"Run {run} includes no variables; skipped")
            return RunOutcome(run=run, included=included, skipped=True)

        excluded = [v for v in range(variables - 1, -1, -1) if not included[v]]
        masked_reference = reference.without_variables(excluded)
        masked_test = test.without_variables(excluded)

        distances = self.distance_engine.distances(masked_reference, masked_test)
        with np.errstate(divide='ignore'):
            inverse_distance_sum = float(np.sum(1.0 / distances))

        sn = signal_to_noise_ratio(inverse_distance_sum, test.samples, self.config.sn_log_base)
        if not np.isfinite(sn):
            logger.warning(f"Run {run} produced a non-finite SN ratio ({sn})")

        logger.debug(
            f"Run {run}: {int(included.sum())} variables included, SN={sn:.4f}"
        )
        return RunOutcome(run=run, included=included, signal_to_noise=sn)
