"""
Tests for the Space and Sample containers.
"""

import numpy as np
import pytest

from taguchi_mts.core import DimensionMismatchError, Sample, Space


@pytest.fixture
def space():
    return Space(
        [[1.0, 2.0, 3.0],
         [4.0, 5.0, 6.0]],
        variable_names=['a', 'b', 'c']
    )


class TestSpace:
    """Test Space construction and access."""

    def test_shape(self, space):
        assert space.samples == 2
        assert space.variables == 3
        assert space.shape == (2, 3)
        assert space[1, 2] == 6.0

    def test_default_variable_names(self):
        space = Space([[1.0, 2.0]])
        assert space.variable_names == ('x0', 'x1')

    def test_variable_values_and_sample(self, space):
        np.testing.assert_array_equal(space.variable_values(1), [2.0, 5.0])
        assert space.get_sample(0) == Sample([1.0, 2.0, 3.0])
        assert [s.variables for s in space] == [3, 3]

    def test_storage_is_copied(self):
        source = np.array([[1.0, 2.0], [3.0, 4.0]])
        space = Space(source)
        source[0, 0] = 100.0

        assert space[0, 0] == 1.0

    def test_storage_is_read_only(self, space):
        with pytest.raises(ValueError):
            space.storage[0, 0] = 10.0

    def test_variable_values_is_a_copy(self, space):
        column = space.variable_values(0)
        column[0] = 99.0
        assert space[0, 0] == 1.0

    def test_invalid_shapes(self):
        with pytest.raises(DimensionMismatchError):
            Space([[1.0, 2.0], [3.0]])
        with pytest.raises(DimensionMismatchError):
            Space([1.0, 2.0])
        with pytest.raises(DimensionMismatchError):
            Space(np.empty((0, 3)))
        with pytest.raises(DimensionMismatchError, match="variable names"):
            Space([[1.0, 2.0]], variable_names=['only_one'])


class TestVariableRemoval:
    """Test non-mutating variable removal."""

    def test_without_variable_leaves_original(self, space):
        reduced = space.without_variable(1)

        assert reduced.shape == (2, 2)
        assert reduced.variable_names == ('a', 'c')
        np.testing.assert_array_equal(reduced.storage, [[1.0, 3.0], [4.0, 6.0]])

        assert space.shape == (2, 3)
        assert space.variable_names == ('a', 'b', 'c')

    def test_without_variables(self, space):
        reduced = space.without_variables([0, 2])
        assert reduced.variable_names == ('b',)
        np.testing.assert_array_equal(reduced.storage, [[2.0], [5.0]])

    def test_without_no_variables_is_a_copy(self, space):
        copy = space.without_variables([])
        assert copy == space
        assert copy.storage is not space.storage

    def test_removing_every_variable_fails(self, space):
        with pytest.raises(DimensionMismatchError, match="every variable"):
            space.without_variables([0, 1, 2])

    def test_out_of_range(self, space):
        with pytest.raises(IndexError):
            space.without_variable(3)


class TestSample:
    """Test Sample behaviour."""

    def test_sample(self):
        sample = Sample([1, 2, 3])
        assert sample.variables == 3
        assert len(sample) == 3
        assert sample[2] == 3.0
        assert list(sample) == [1.0, 2.0, 3.0]

    def test_sample_requires_vector(self):
        with pytest.raises(DimensionMismatchError):
            Sample([[1.0, 2.0]])
        with pytest.raises(DimensionMismatchError):
            Sample([])
