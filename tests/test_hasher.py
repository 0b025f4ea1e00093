"""
Tests for HyperplaneHasher.
"""

import numpy as np
import pytest

from hyperlsh import DimensionMismatch, HyperplaneHasher, InvalidConfiguration
from hyperlsh.index import MAX_PLANES


class TestHyperplaneHasherBasics:
    """Test construction and hashing."""

    def test_initialization(self, rng):
        """Test that the hasher draws the requested unit normals."""
        hasher = HyperplaneHasher(dimension=300, planes=10, rng=rng)
        assert hasher.dimension == 300
        assert hasher.planes_count == 10
        assert hasher.planes.shape == (10, 300)
        np.testing.assert_allclose(np.linalg.norm(hasher.planes, axis=1), 1.0, atol=1e-9)

    def test_planes_are_read_only(self, rng):
        """Test that the hyperplanes cannot be changed after construction."""
        hasher = HyperplaneHasher(dimension=4, planes=3, rng=rng)
        with pytest.raises(ValueError):
            hasher.planes[0, 0] = 5.0

    def test_code_length(self, rng):
        """Test that codes have one bit per plane."""
        hasher = HyperplaneHasher(dimension=8, planes=5, rng=rng)
        code = hasher.hash(np.ones(8))
        assert len(code) == 5
        assert set(code) <= {"0", "1"}

    def test_hash_is_deterministic(self, rng, sample_vectors):
        """Test that hashing the same vector always gives the same code."""
        hasher = HyperplaneHasher(dimension=64, planes=16, rng=rng)
        for v in sample_vectors[:50]:
            assert hasher.hash(v) == hasher.hash(v.copy())
            assert hasher.hash(v) == hasher.hash(list(v))

    def test_seed_is_reproducible(self):
        """Test that the same seed gives the same hyperplanes."""
        a = HyperplaneHasher(dimension=20, planes=6, rng=3)
        b = HyperplaneHasher(dimension=20, planes=6, rng=3)
        np.testing.assert_array_equal(a.planes, b.planes)

    def test_many_planes(self, rng):
        """Test plane counts wider than a machine word."""
        hasher = HyperplaneHasher(dimension=16, planes=200, rng=rng)
        v = rng.standard_normal(16)
        code = hasher.hash(v)
        assert len(code) == 200
        # Opposite vectors fall on opposite sides of every plane
        flipped = hasher.hash(-v)
        assert all(a != b for a, b in zip(code, flipped))


class TestHyperplaneHasherExplicitPlanes:
    """Test hashing against known hyperplanes."""

    def test_sign_bits(self):
        """Test that bit i is the sign of the dot product with normal i."""
        hasher = HyperplaneHasher.from_planes([[1.0, 0.0], [0.0, 1.0]])
        assert hasher.hash([1.0, 1.0]) == "11"
        assert hasher.hash([1.0, -1.0]) == "10"
        assert hasher.hash([-1.0, 1.0]) == "01"
        assert hasher.hash([-1.0, -1.0]) == "00"

    def test_zero_dot_product_is_one(self):
        """Test that a point on the hyperplane gets bit 1."""
        hasher = HyperplaneHasher.from_planes([[1.0, 0.0]])
        assert hasher.hash([0.0, 3.0]) == "1"
        assert hasher.hash([0.0, 0.0]) == "1"

    def test_from_planes_copies(self):
        """Test that later changes to the input do not affect the hasher."""
        normals = np.array([[1.0, 0.0]])
        hasher = HyperplaneHasher.from_planes(normals)
        normals[0, 0] = -1.0
        assert hasher.hash([1.0, 0.0]) == "1"

    def test_from_planes_requires_2d(self):
        with pytest.raises(InvalidConfiguration, match="normals"):
            HyperplaneHasher.from_planes([1.0, 0.0])


class TestHyperplaneHasherZeroPlanes:
    """Test the degenerate zero-plane configuration."""

    def test_single_code(self, rng, sample_vectors):
        """Test that every vector gets the same empty code."""
        hasher = HyperplaneHasher(dimension=64, planes=0, rng=rng)
        assert {hasher.hash(v) for v in sample_vectors} == {""}


class TestHyperplaneHasherNeighbours:
    """Test adjacent code enumeration."""

    def test_neighbours(self):
        hasher = HyperplaneHasher.from_planes(np.eye(3))
        assert list(hasher.neighbours("101")) == ["101", "001", "111", "100"]

    def test_neighbours_of_empty_code(self):
        hasher = HyperplaneHasher(dimension=2, planes=0)
        assert list(hasher.neighbours("")) == [""]


class TestHyperplaneHasherValidation:
    """Test input validation."""

    def test_dimension_mismatch(self, rng):
        """Test error on vectors of the wrong length."""
        hasher = HyperplaneHasher(dimension=10, planes=4, rng=rng)
        with pytest.raises(DimensionMismatch, match="does not match index dimension 10") as exc:
            hasher.hash(np.zeros(9))
        assert exc.value.expected == 10
        assert exc.value.received == 9

    def test_dimension_mismatch_is_value_error(self, rng):
        hasher = HyperplaneHasher(dimension=10, planes=4, rng=rng)
        with pytest.raises(ValueError):
            hasher.hash(np.zeros(11))

    def test_2d_vector_rejected(self, rng):
        """Test that a matrix is not silently flattened."""
        hasher = HyperplaneHasher(dimension=4, planes=2, rng=rng)
        with pytest.raises(DimensionMismatch):
            hasher.hash(np.zeros((2, 2)))

    @pytest.mark.parametrize("planes", [-1, MAX_PLANES + 1, 2.5, None])
    def test_invalid_planes(self, planes):
        with pytest.raises(InvalidConfiguration, match="planes"):
            HyperplaneHasher(dimension=4, planes=planes)

    def test_invalid_dimension(self):
        with pytest.raises(InvalidConfiguration, match="dimension"):
            HyperplaneHasher(dimension=0, planes=4)
