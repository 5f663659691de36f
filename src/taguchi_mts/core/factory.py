"""
Space/Sample Factory

Builds Spaces and Samples from raw arrays and labelled DataFrames, provides
the row/column reshapes used for the distance formula and the literal L12
orthogonal array.
"""

from typing import Optional, Sequence
import logging
import numpy as np
import pandas as pd

from .exceptions import DimensionMismatchError
from .space import Sample, Space

logger = logging.getLogger(__name__)


class SpaceFactory:
    """Constructs containers with independent (copied) storage."""

    # Taguchi L12: 12 runs, 11 two-level columns
    L12_DESIGN = (
        (1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1),
        (1, 1, 1, 1, 1, 2, 2, 2, 2, 2, 2),
        (1, 1, 2, 2, 2, 1, 1, 1, 2, 2, 2),
        (1, 2, 1, 2, 2, 1, 2, 2, 1, 1, 2),
        (1, 2, 2, 1, 2, 2, 1, 2, 1, 2, 1),
        (1, 2, 2, 2, 1, 2, 2, 1, 2, 1, 1),
        (2, 1, 2, 2, 1, 1, 2, 2, 1, 2, 1),
        (2, 1, 2, 1, 2, 2, 2, 1, 1, 1, 2),
        (2, 1, 1, 2, 2, 2, 1, 2, 2, 1, 1),
        (2, 2, 2, 1, 1, 1, 1, 2, 2, 1, 2),
        (2, 2, 1, 2, 1, 2, 1, 1, 1, 2, 2),
        (2, 2, 1, 1, 2, 1, 2, 1, 2, 2, 1),
    )

    def __init__(self, dtype=np.float64):
        self.dtype = np.dtype(dtype).type

    def create_space_from_array(
        self,
        array,
        variable_names: Optional[Sequence[str]] = None
    ) -> Space:
        return Space(array, variable_names=variable_names, dtype=self.dtype)

    def create_sample_from_array(self, array) -> Sample:
        return Sample(array, dtype=self.dtype)

    def create_space_from_frame(self, frame: pd.DataFrame) -> Space:
        """
        Build a Space from a DataFrame, keeping column labels as variable names.

        Args:
            frame: Rows are samples, columns are variables

        Returns:
            Space with one variable per column

        Raises:
            ValueError: if the frame is empty, holds non-numeric columns or NaN
        """
        if frame.empty:
            raise ValueError("Input DataFrame is empty")

        non_numeric = [col for col in frame.columns if not pd.api.types.is_numeric_dtype(frame[col])]
        if non_numeric:
            raise ValueError(f"Non-numeric columns cannot form a space: {non_numeric}")

        if frame.isna().any().any():
            missing = frame.columns[frame.isna().any()].tolist()
            raise ValueError(f"Missing values in columns: {missing}")

        logger.debug(f"Building space from DataFrame of shape {frame.shape}")
        return Space(
            frame.to_numpy(dtype=self.dtype),
            variable_names=[str(col) for col in frame.columns],
            dtype=self.dtype
        )

    def create_single_variable_space_from_sample(self, sample: Sample) -> Space:
        """n x 1 column space (the transpose of a row sample)."""
        return Space(np.reshape(sample.storage, (-1, 1)), dtype=self.dtype)

    def create_single_sample_space_from_sample(
        self,
        sample: Sample,
        variable_names: Optional[Sequence[str]] = None
    ) -> Space:
        """1 x n row space holding a single observation."""
        return Space(
            np.reshape(sample.storage, (1, -1)),
            variable_names=variable_names,
            dtype=self.dtype
        )

    def generate_l12(self) -> Space:
        return Space(self.L12_DESIGN, dtype=self.dtype)

    def ensure_space(self, data, variable_names: Optional[Sequence[str]] = None) -> Space:
        """Coerce a Space, Sample, DataFrame or array-like into a Space."""
        if isinstance(data, Space):
            return data
        if isinstance(data, Sample):
            return self.create_single_sample_space_from_sample(data, variable_names)
        if isinstance(data, pd.DataFrame):
            return self.create_space_from_frame(data)

        array = np.asarray(data, dtype=self.dtype)
        if array.ndim == 1:
            array = array.reshape(1, -1)
        if array.ndim != 2:
            raise DimensionMismatchError(f"Cannot build a space from array of shape {array.shape}")

        return self.create_space_from_array(array, variable_names)
