"""Shared fixtures for hyperlsh tests."""

import numpy as np
import pytest

from hyperlsh import BasicIndex, HyperplaneHasher


@pytest.fixture
def rng():
    """Seeded generator so tests are reproducible."""
    return np.random.default_rng(42)


@pytest.fixture
def sample_vectors(rng):
    """Sample unit vectors for testing."""
    vectors = rng.standard_normal(size=(500, 64))
    return vectors / np.linalg.norm(vectors, axis=1, keepdims=True)


@pytest.fixture
def x_axis_index():
    """2D index with a single hyperplane whose normal is (1, 0)."""
    return BasicIndex.from_hasher(HyperplaneHasher.from_planes([[1.0, 0.0]]))
