"""
BasicIndex - single-hasher LSH index.

Groups keys into buckets by the hash code of their vector. Only keys are
retained; vectors are discarded once hashed.
"""

import logging
from dataclasses import dataclass
from typing import Any, Generic, Hashable, Iterable, Optional, Sequence, TypeVar

import numpy as np

from hyperlsh.errors import DimensionMismatch
from hyperlsh.index.hasher import HashCode, HyperplaneHasher

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)


@dataclass(frozen=True)
class BucketStats:
    """Bucket size summary: smallest, mean and largest bucket."""

    min: int
    mean: float
    max: int


def as_matrix(vectors: Any, dimension: int) -> np.ndarray:
    """Validate a batch of vectors for fit()."""
    vectors = np.asarray(vectors, dtype=np.float64)
    if vectors.ndim != 2:
        raise ValueError(f"Vectors must be 2D array, got shape {vectors.shape}")
    if vectors.shape[1] != dimension:
        raise DimensionMismatch(dimension, vectors.shape[1])
    return vectors


def resolve_keys(vectors: np.ndarray, keys: Optional[Iterable[Any]]) -> list[Any]:
    keys = list(range(len(vectors))) if keys is None else list(keys)
    if len(vectors) != len(keys):
        raise ValueError(
            f"Number of vectors ({len(vectors)}) must match "
            f"number of keys ({len(keys)})"
        )
    return keys


class BasicIndex(Generic[K]):
    """
    Approximate group lookup over one set of random hyperplanes.

    API:
    - __init__(dimension, planes, rng=None)
    - add(key, vector) - Add one key under its vector's hash code
    - fit(vectors, keys=None) - Add a batch of vectors
    - group(query_vector) - Keys sharing the query's hash code, or None

    Example:
        >>> index = BasicIndex(dimension=300, planes=10, rng=7)
        >>> vectors = random_unit_vectors(1000, 300, rng=1)
        >>> index.fit(vectors)
        >>> index.group(vectors[0])  # contains key 0
    """

    def __init__(self, dimension: int, planes: int, rng: Any = None):
        """
        Initialize the BasicIndex.

        Args:
            dimension: Dimension of indexed vectors.
            planes: Number of hyperplanes (more = smaller buckets, worse recall).
            rng: numpy Generator, int seed, or None for fresh entropy.
        """
        self._init(HyperplaneHasher(dimension, planes, rng))

    @classmethod
    def from_hasher(cls, hasher: HyperplaneHasher) -> "BasicIndex[K]":
        """Build an empty index around an existing hasher."""
        index = cls.__new__(cls)
        index._init(hasher)
        return index

    def _init(self, hasher: HyperplaneHasher) -> None:
        self._hasher = hasher
        self._groups: dict[HashCode, list[K]] = {}
        self._size = 0

    @property
    def hasher(self) -> HyperplaneHasher:
        return self._hasher

    @property
    def dimension(self) -> int:
        return self._hasher.dimension

    @property
    def planes_count(self) -> int:
        return self._hasher.planes_count

    @property
    def groups_count(self) -> int:
        return len(self._groups)

    def __len__(self) -> int:
        return self._size

    def key(self, vector: Any) -> HashCode:
        """Hash code of a vector under this index's hyperplanes."""
        return self._hasher.hash(vector)

    def add(self, key: K, vector: Any) -> "BasicIndex[K]":
        """
        Add a key to the bucket of its vector's hash code.

        Args:
            key: Caller-defined identifier (must be hashable).
            vector: 1D array-like of length `dimension`.

        Returns:
            self for method chaining.

        Raises:
            DimensionMismatch: If the vector length is not `dimension`.
        """
        self._insert(key, self.key(vector))
        return self

    def _insert(self, key: K, code: HashCode) -> None:
        self._groups.setdefault(code, []).append(key)
        self._size += 1

    def fit(self, vectors: Any, keys: Optional[Iterable[K]] = None) -> "BasicIndex[K]":
        """
        Add a batch of vectors.

        The whole batch is validated before anything is inserted.

        Args:
            vectors: 2D array of shape (n, dimension).
            keys: Keys for each row. Defaults to 0..n-1.

        Returns:
            self for method chaining.
        """
        vectors = as_matrix(vectors, self.dimension)
        keys = resolve_keys(vectors, keys)
        for key, vector in zip(keys, vectors):
            self._insert(key, self._hasher._hash_checked(vector))
        logger.debug("Indexed %d vectors into %d groups", len(keys), len(self._groups))
        return self

    def group(self, query_vector: Any) -> Optional[Sequence[K]]:
        """
        Keys inserted under the same hash code as the query.

        Args:
            query_vector: 1D array-like of length `dimension`.

        Returns:
            Keys in insertion order, or None if no key has this code.
            True near neighbours just across a hyperplane are not included.

        Raises:
            DimensionMismatch: If the vector length is not `dimension`.
        """
        return self.group_for_code(self.key(query_vector))

    def group_for_code(self, code: HashCode) -> Optional[Sequence[K]]:
        """Bucket for a precomputed hash code, or None."""
        bucket = self._groups.get(code)
        return tuple(bucket) if bucket else None

    def stats(self) -> BucketStats:
        """Min, mean and max bucket size (all zero when empty)."""
        if not self._groups:
            return BucketStats(0, 0.0, 0)
        sizes = [len(bucket) for bucket in self._groups.values()]
        return BucketStats(min(sizes), sum(sizes) / len(sizes), max(sizes))
