"""
Pytest configuration and shared fixtures for the MTS test suite.
"""

import logging
import numpy as np
import pandas as pd
import pytest

from taguchi_mts import (
    MahalanobisDistanceEngine,
    NumpyMathProvider,
    OrthogonalArrayGenerator,
    SpaceFactory,
    Standardizer,
)

# Configure logging for tests
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

VARIABLE_NAMES = ['temperature', 'pressure', 'vibration', 'humidity']


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as end-to-end tests"
    )


@pytest.fixture
def provider():
    return NumpyMathProvider()


@pytest.fixture
def factory():
    return SpaceFactory()


@pytest.fixture
def standardizer(provider, factory):
    return Standardizer(provider, factory)


@pytest.fixture
def distance_engine(provider, factory):
    return MahalanobisDistanceEngine(provider, factory)


@pytest.fixture
def array_generator(provider, factory):
    return OrthogonalArrayGenerator(provider, factory)


@pytest.fixture
def reference_data():
    """Normal population: 60 samples of 4 independent unit-variance variables."""
    rng = np.random.default_rng(42)
    return rng.normal(0.0, 1.0, size=(60, 4))


@pytest.fixture
def abnormal_data():
    """Abnormal samples: the first two variables shifted by 6 standard deviations."""
    rng = np.random.default_rng(7)
    data = rng.normal(0.0, 1.0, size=(20, 4))
    data[:, 0] += 6.0
    data[:, 1] += 6.0
    return data


@pytest.fixture
def reference_frame(reference_data):
    return pd.DataFrame(reference_data, columns=VARIABLE_NAMES)


@pytest.fixture
def abnormal_frame(abnormal_data):
    return pd.DataFrame(abnormal_data, columns=VARIABLE_NAMES)
