"""
Space and Sample containers.

A Space is a rectangular block of observations (samples x variables); a
Sample is a single observation. Both are value types over read-only numpy
buffers: every derivation (removing variables, extracting a column or a
sample) returns a new container with its own storage, so masked copies made
during variable selection can never affect the space they came from.
"""

from typing import Iterable, Iterator, List, Optional, Sequence, Tuple
import numpy as np

from .exceptions import DimensionMismatchError


def _frozen_copy(values, ndim: int, dtype) -> np.ndarray:
    try:
        array = np.array(values, dtype=dtype, copy=True)
    except ValueError as e:
        # Ragged nested sequences or non-numeric entries
        raise DimensionMismatchError(f"Values do not form a numeric rectangular array: {e}") from e

    if array.ndim != ndim:
        raise DimensionMismatchError(
            f"Expected a {ndim}-dimensional array, got shape {array.shape}"
        )
    if array.size == 0:
        raise DimensionMismatchError(f"Array must not be empty, got shape {array.shape}")

    array.setflags(write=False)
    return array


class Sample:
    """A single observation: one value per variable."""

    def __init__(self, storage, dtype=np.float64):
        self._storage = _frozen_copy(storage, 1, dtype)

    @property
    def storage(self) -> np.ndarray:
        return self._storage

    @property
    def variables(self) -> int:
        return self._storage.shape[0]

    def __len__(self) -> int:
        return self.variables

    def __getitem__(self, index):
        return self._storage[index]

    def __iter__(self) -> Iterator:
        return iter(self._storage)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Sample):
            return NotImplemented
        return np.array_equal(self._storage, other._storage)

    def __repr__(self) -> str:
        return f"Sample({self._storage.tolist()})"


class Space:
    """
    A rectangular collection of samples x variables.

    Addressable by ``space[sample, variable]``, by column through
    ``variable_values`` and by row through ``get_sample``. Optional variable
    names travel with their columns when variables are removed.
    """

    def __init__(
        self,
        storage,
        variable_names: Optional[Sequence[str]] = None,
        dtype=np.float64
    ):
        self._storage = _frozen_copy(storage, 2, dtype)

        if variable_names is None:
            variable_names = [f"x{i}" for i in range(self._storage.shape[1])]
        variable_names = tuple(str(name) for name in variable_names)

        if len(variable_names) != self._storage.shape[1]:
            raise DimensionMismatchError(
                f"Got {len(variable_names)} variable names for "
                f"{self._storage.shape[1]} variables"
            )
        self._variable_names = variable_names

    @property
    def storage(self) -> np.ndarray:
        return self._storage

    @property
    def samples(self) -> int:
        return self._storage.shape[0]

    @property
    def variables(self) -> int:
        return self._storage.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return self._storage.shape

    @property
    def variable_names(self) -> Tuple[str, ...]:
        return self._variable_names

    def __getitem__(self, index):
        return self._storage[index]

    def __iter__(self) -> Iterator[Sample]:
        for i in range(self.samples):
            yield self.get_sample(i)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Space):
            return NotImplemented
        return np.array_equal(self._storage, other._storage)

    def __repr__(self) -> str:
        return f"Space(samples={self.samples}, variables={self.variables})"

    def get_sample(self, index: int) -> Sample:
        """Return the observation at ``index`` as a Sample."""
        return Sample(self._storage[index, :], dtype=self._storage.dtype)

    def variable_values(self, index: int) -> np.ndarray:
        """Return a copy of the values of one variable across all samples."""
        return self._storage[:, index].copy()

    def without_variable(self, index: int) -> "Space":
        """Derive a new Space with variable ``index`` excluded."""
        return self.without_variables([index])

    def without_variables(self, indices: Iterable[int]) -> "Space":
        """
        Derive a new Space with every variable in ``indices`` excluded.

        Removal is applied highest index first so earlier indices stay valid.

        Raises:
            IndexError: if an index is out of range
            DimensionMismatchError: if no variable would remain
        """
        removed = sorted(set(indices), reverse=True)
        for index in removed:
            if not 0 <= index < self.variables:
                raise IndexError(f"Variable index {index} out of range for {self.variables} variables")

        kept: List[int] = list(range(self.variables))
        for index in removed:
            del kept[index]

        if not kept:
            raise DimensionMismatchError("Cannot remove every variable from a space")

        return Space(
            self._storage[:, kept],
            variable_names=[self._variable_names[i] for i in kept],
            dtype=self._storage.dtype
        )
