"""
Tests for the MahalanobisTaguchiSystem facade.
"""

import numpy as np
import pandas as pd
import pytest

from taguchi_mts import (
    DimensionMismatchError,
    MahalanobisTaguchiSystem,
    MTSConfig,
    NotFittedError,
    Sample,
    Space,
)


@pytest.fixture
def mts():
    return MahalanobisTaguchiSystem(config=MTSConfig(parallel=False))


class TestEngineOperations:
    """Test the Space/Sample level operations."""

    def test_distance_delegates_to_engine(self, mts, distance_engine, reference_data):
        space = Space(reference_data)
        sample = Sample([1.0, -2.0, 0.5, 3.0])

        assert mts.mahalanobis_distance(space, sample) == pytest.approx(
            distance_engine.distance(space, sample), rel=1e-12
        )

    def test_distances(self, mts, reference_data, abnormal_data):
        distances = mts.mahalanobis_distances(Space(reference_data), Space(abnormal_data))

        assert distances.shape == (20,)
        assert np.all(distances > 0)

    def test_find_useful_variables(self, mts, reference_data, abnormal_data):
        space = Space(reference_data)

        from_space = mts.find_useful_variables(space, Space(abnormal_data))
        from_sample = mts.find_useful_variables(space, Sample(abnormal_data[0]))

        assert len(from_space) == 4
        assert len(from_sample) == 4
        assert from_space[:2] == [True, True]
        assert from_sample[:2] == [True, True]

    def test_orthogonal_array(self, mts):
        assert mts.orthogonal_array(3).shape == (4, 3)
        assert mts.orthogonal_array(9).shape == (12, 11)


@pytest.mark.integration
class TestEstimatorWorkflow:
    """Test fit/transform/score on DataFrames and arrays."""

    def test_not_fitted(self, mts, reference_frame):
        assert not mts.is_fitted_
        with pytest.raises(NotFittedError):
            mts.transform(reference_frame)
        with pytest.raises(NotFittedError):
            mts.score_samples(reference_frame)
        with pytest.raises(NotFittedError):
            mts.get_selection_summary()

    def test_fit_selects_shifted_variables(self, mts, reference_frame, abnormal_frame):
        mts.fit(reference_frame, abnormal_frame)

        assert mts.is_fitted_
        assert 'temperature' in mts.selected_variables_
        assert 'pressure' in mts.selected_variables_
        assert mts.reference_space_.variable_names == tuple(reference_frame.columns)

    def test_transform(self, mts, reference_frame, abnormal_frame):
        transformed = mts.fit(reference_frame, abnormal_frame).transform(abnormal_frame)

        assert list(transformed.columns) == mts.selected_variables_
        assert len(transformed) == len(abnormal_frame)

    def test_fit_transform(self, mts, reference_frame, abnormal_frame):
        transformed = mts.fit_transform(reference_frame, abnormal_frame)

        assert list(transformed.columns) == mts.selected_variables_
        assert len(transformed) == len(reference_frame)

    def test_reordered_columns(self, reference_frame, abnormal_frame):
        ordered = MahalanobisTaguchiSystem(config=MTSConfig(parallel=False))
        shuffled = MahalanobisTaguchiSystem(config=MTSConfig(parallel=False))

        ordered.fit(reference_frame, abnormal_frame)
        shuffled.fit(reference_frame, abnormal_frame[['humidity', 'pressure', 'temperature', 'vibration']])

        assert shuffled.selected_variables_ == ordered.selected_variables_
        np.testing.assert_allclose(
            shuffled.selection_result_.gain, ordered.selection_result_.gain
        )

    def test_missing_columns(self, mts, reference_frame, abnormal_frame):
        with pytest.raises(DimensionMismatchError, match="humidity"):
            mts.fit(reference_frame, abnormal_frame.drop(columns=['humidity']))

    def test_score_samples(self, mts, reference_frame, abnormal_frame):
        mts.fit(reference_frame, abnormal_frame)

        normal_scores = mts.score_samples(reference_frame)
        abnormal_scores = mts.score_samples(abnormal_frame)

        assert normal_scores.shape == (len(reference_frame),)
        assert abnormal_scores.shape == (len(abnormal_frame),)
        assert abnormal_scores.min() > np.median(normal_scores)
        assert abnormal_scores.mean() > 10 * normal_scores.mean()

    def test_score_samples_array_matches_frame(self, mts, reference_frame, abnormal_frame, abnormal_data):
        mts.fit(reference_frame, abnormal_frame)

        np.testing.assert_allclose(
            mts.score_samples(abnormal_data), mts.score_samples(abnormal_frame), rtol=1e-12
        )

        with pytest.raises(DimensionMismatchError):
            mts.score_samples(abnormal_data[:, :3])

    def test_score_samples_frame_missing_variables(self, mts, reference_data, abnormal_data, abnormal_frame):
        # Fitted on arrays: variables are named x0, x1, ...
        mts.fit(reference_data, abnormal_data)

        with pytest.raises(DimensionMismatchError, match="missing selected variables"):
            mts.score_samples(abnormal_frame)

    def test_constant_reference_column(self, mts, reference_frame, abnormal_frame):
        reference = reference_frame.copy()
        reference['humidity'] = 0.1

        mts.fit(reference, abnormal_frame)

        assert 'temperature' in mts.selected_variables_
        assert 'pressure' in mts.selected_variables_
        assert np.all(np.isfinite(mts.score_samples(abnormal_frame)))

    def test_fit_on_arrays(self, mts, reference_data, abnormal_data):
        mts.fit(reference_data, abnormal_data)

        assert mts.selected_variables_[:2] == ['x0', 'x1']
        reduced = mts.reduced_reference_space()
        assert reduced.variables == len(mts.selected_variables_)
        assert reduced.samples == 60

    def test_selection_summary(self, mts, reference_frame, abnormal_frame):
        summary = mts.fit(reference_frame, abnormal_frame).get_selection_summary()

        expected_keys = [
            'selected_variables', 'useful', 'indeterminate_variables', 'variable_report',
            'run_signal_to_noise', 'skipped_runs', 'design_shape', 'memory_usage', 'parameters'
        ]
        for key in expected_keys:
            assert key in summary

        assert summary['selected_variables'] == mts.selected_variables_
        assert summary['design_shape'] == (8, 7)
        assert summary['indeterminate_variables'] == []
        assert isinstance(summary['variable_report'], pd.DataFrame)
        assert summary['parameters']['sn_log_base'] == 10.0
        assert 'selection_complete' in summary['memory_usage']
