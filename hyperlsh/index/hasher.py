"""
HyperplaneHasher - random projection hash for LSH.

Each bit of a hash code records which side of one random hyperplane
(through the origin) a point falls on.
"""

import logging
from typing import Any, Iterator

import numpy as np

from hyperlsh.errors import DimensionMismatch, InvalidConfiguration
from hyperlsh.vector import random_unit_vectors

logger = logging.getLogger(__name__)

# Upper bound on bits per code; codes are strings so this is not tied to a word size
MAX_PLANES = 4096

# A hash code is a string of '0'/'1' characters, one per hyperplane
HashCode = str


def as_vector(vector: Any, dimension: int, what: str = "Vector") -> np.ndarray:
    """Convert input to a 1D float64 array of the expected length."""
    vector = np.asarray(vector, dtype=np.float64)
    if vector.ndim != 1:
        raise DimensionMismatch(dimension, vector.size, what=f"{what} (shape {vector.shape})")
    if vector.shape[0] != dimension:
        raise DimensionMismatch(dimension, vector.shape[0], what=what)
    return vector


def check_planes(planes: Any) -> None:
    if not isinstance(planes, (int, np.integer)) or isinstance(planes, bool):
        raise InvalidConfiguration("planes", planes, "must be an integer")
    if planes < 0 or planes > MAX_PLANES:
        raise InvalidConfiguration("planes", planes, f"must be between 0 and {MAX_PLANES}")


class HyperplaneHasher:
    """
    Maps D-dimensional points to P-bit codes using P random hyperplanes.

    Bit i is 1 when the dot product with normal i is >= 0, else 0.
    The normals are drawn once at construction and never change.

    Example:
        >>> hasher = HyperplaneHasher(dimension=300, planes=10, rng=42)
        >>> code = hasher.hash(np.ones(300))
        >>> len(code)
        10
    """

    def __init__(self, dimension: int, planes: int, rng: Any = None):
        """
        Args:
            dimension: Dimension of hashed vectors.
            planes: Number of hyperplanes (bits per code). 0 puts all points
                into a single code.
            rng: numpy Generator, int seed, or None for fresh entropy.
        """
        check_planes(planes)
        normals = random_unit_vectors(int(planes), dimension, rng)
        self._set_planes(normals)
        logger.debug("Created hasher with %d planes in %d dimensions", planes, dimension)

    @classmethod
    def from_planes(cls, normals: Any) -> "HyperplaneHasher":
        """
        Build a hasher from explicit hyperplane normals.

        Args:
            normals: 2D array of shape (planes, dimension). Rows are used as given.
        """
        normals = np.asarray(normals, dtype=np.float64)
        if normals.ndim != 2:
            raise InvalidConfiguration(
                "normals", normals.shape, "must be a 2D array of shape (planes, dimension)"
            )
        planes, dimension = normals.shape
        check_planes(planes)
        if dimension < 1:
            raise InvalidConfiguration("dimension", dimension, "must be a positive integer")

        hasher = cls.__new__(cls)
        hasher._set_planes(normals.copy())
        return hasher

    def _set_planes(self, normals: np.ndarray) -> None:
        normals.setflags(write=False)
        self._planes = normals
        self._dimension = normals.shape[1]

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def planes_count(self) -> int:
        return self._planes.shape[0]

    @property
    def planes(self) -> np.ndarray:
        """Read-only array of hyperplane normals, shape (planes, dimension)."""
        return self._planes

    def hash(self, vector: Any) -> HashCode:
        """
        Compute the hash code for a vector.

        Args:
            vector: 1D array-like of length `dimension`.

        Returns:
            A string of '0'/'1' characters, one per hyperplane.

        Raises:
            DimensionMismatch: If the vector length is not `dimension`.
        """
        vector = as_vector(vector, self._dimension)
        return self._hash_checked(vector)

    def _hash_checked(self, vector: np.ndarray) -> HashCode:
        """Hash a vector that has already been validated."""
        projection = self._planes @ vector
        binary_hash = (projection >= 0).astype(np.uint8)
        return "".join(str(b) for b in binary_hash)

    def neighbours(self, code: HashCode) -> Iterator[HashCode]:
        """Yield `code` itself, then every code one bit flip away."""
        yield code
        for i, bit in enumerate(code):
            yield code[:i] + ("0" if bit == "1" else "1") + code[i + 1:]
