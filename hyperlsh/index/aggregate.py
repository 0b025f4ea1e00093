"""
AggregateIndex - ensemble of independent BasicIndex instances.

Each sub-index has its own random hyperplanes, so a true neighbour missed
by one partition is likely caught by another. Candidates from all
sub-indices are merged, deduplicated, scored once with a caller-supplied
distance function, and ranked.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Generic, Hashable, Iterable, Optional, TypeVar

import numpy as np

from hyperlsh.errors import InvalidConfiguration
from hyperlsh.index.basic import BasicIndex, as_matrix, resolve_keys
from hyperlsh.index.hasher import HashCode, as_vector, check_planes

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)


@dataclass(frozen=True)
class DistanceNode(Generic[K]):
    """
    A scored candidate returned by AggregateIndex.nearest.

    Nodes order by distance only; equality still compares key and distance.
    """

    key: K
    distance: float

    def __lt__(self, other: "DistanceNode[K]") -> bool:
        if not isinstance(other, DistanceNode):
            return NotImplemented
        return self.distance < other.distance

    def __le__(self, other: "DistanceNode[K]") -> bool:
        if not isinstance(other, DistanceNode):
            return NotImplemented
        return self.distance <= other.distance

    def __gt__(self, other: "DistanceNode[K]") -> bool:
        if not isinstance(other, DistanceNode):
            return NotImplemented
        return self.distance > other.distance

    def __ge__(self, other: "DistanceNode[K]") -> bool:
        if not isinstance(other, DistanceNode):
            return NotImplemented
        return self.distance >= other.distance


def _is_count(value: Any) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


class AggregateIndex(Generic[K]):
    """
    Nearest-k search over several independently hashed BasicIndex instances.

    More sub-indices improve recall at the cost of memory and query time;
    more planes per sub-index shrink buckets and speed up scoring.

    API:
    - __init__(dimension, sub_index_count, planes, rng=None)
    - add(key, vector) - Add a key to every sub-index
    - fit(vectors, keys=None) - Add a batch of vectors
    - candidates(query_vector, probe_adjacent=False) - Merged candidate keys
    - nearest(query_vector, k, distance_fn, probe_adjacent=False) - Ranked top-k

    Example:
        >>> vectors = random_unit_vectors(10000, 300, rng=1)
        >>> index = AggregateIndex(dimension=300, sub_index_count=15, planes=5, rng=2)
        >>> index.fit(vectors)
        >>> lookup = distance_from_lookup(lambda key: vectors[key])
        >>> results = index.nearest(vectors[0], 10, lookup)
        >>> results[0].key
        0
    """

    def __init__(
        self,
        dimension: int,
        sub_index_count: int,
        planes: int,
        rng: Any = None,
    ):
        """
        Initialize the AggregateIndex.

        Args:
            dimension: Dimension of indexed vectors.
            sub_index_count: Number of independent sub-indices (at least 1).
            planes: Number of hyperplanes per sub-index.
            rng: numpy Generator, int seed, or None for fresh entropy. Sub-indices
                draw their hyperplanes from it one after another.
        """
        if not _is_count(sub_index_count) or sub_index_count < 1:
            raise InvalidConfiguration(
                "sub_index_count", sub_index_count, "must be a positive integer"
            )
        check_planes(planes)

        rng = np.random.default_rng(rng)
        self._indices: tuple[BasicIndex[K], ...] = tuple(
            BasicIndex(dimension, planes, rng) for _ in range(sub_index_count)
        )
        self._size = 0
        logger.debug(
            "Created aggregate index: %d sub-indices, %d planes, %d dimensions",
            sub_index_count, planes, dimension,
        )

    @classmethod
    def from_indices(cls, indices: Iterable[BasicIndex[K]]) -> "AggregateIndex[K]":
        """
        Wrap pre-built basic indices.

        All indices must share dimension and plane count. Keys already in
        them are not reconciled; pass empty indices unless that is intended.
        """
        indices = tuple(indices)
        if not indices:
            raise InvalidConfiguration("sub_index_count", 0, "must be a positive integer")
        first = indices[0]
        for index in indices[1:]:
            if (index.dimension, index.planes_count) != (first.dimension, first.planes_count):
                raise InvalidConfiguration(
                    "indices",
                    (index.dimension, index.planes_count),
                    f"expected dimension={first.dimension} and planes={first.planes_count}",
                )

        # Sub-indices must not share a bucket map or hyperplanes
        seen_indices: set[int] = set()
        seen_hashers: set[int] = set()
        for position, index in enumerate(indices):
            if id(index) in seen_indices or id(index.hasher) in seen_hashers:
                raise InvalidConfiguration(
                    "indices", position, "sub-indices must be distinct and not share a hasher"
                )
            seen_indices.add(id(index))
            seen_hashers.add(id(index.hasher))

        aggregate = cls.__new__(cls)
        aggregate._indices = indices
        aggregate._size = max(len(index) for index in indices)
        return aggregate

    @property
    def dimension(self) -> int:
        return self._indices[0].dimension

    @property
    def planes_count(self) -> int:
        return self._indices[0].planes_count

    @property
    def sub_index_count(self) -> int:
        return len(self._indices)

    @property
    def indices(self) -> tuple[BasicIndex[K], ...]:
        return self._indices

    def __len__(self) -> int:
        return self._size

    def add(self, key: K, vector: Any) -> "AggregateIndex[K]":
        """
        Add a key to every sub-index.

        The vector is validated once up front, so a bad vector leaves every
        sub-index untouched.

        Returns:
            self for method chaining.

        Raises:
            DimensionMismatch: If the vector length is not `dimension`.
        """
        vector = as_vector(vector, self.dimension)
        for index in self._indices:
            index._insert(key, index.hasher._hash_checked(vector))
        self._size += 1
        return self

    def fit(self, vectors: Any, keys: Optional[Iterable[K]] = None) -> "AggregateIndex[K]":
        """
        Add a batch of vectors to every sub-index.

        Args:
            vectors: 2D array of shape (n, dimension).
            keys: Keys for each row. Defaults to 0..n-1.

        Returns:
            self for method chaining.
        """
        vectors = as_matrix(vectors, self.dimension)
        keys = resolve_keys(vectors, keys)
        for index in self._indices:
            for key, vector in zip(keys, vectors):
                index._insert(key, index.hasher._hash_checked(vector))
        self._size += len(keys)
        return self

    def _codes(self, index: BasicIndex[K], vector: np.ndarray, probe_adjacent: bool) -> Iterable[HashCode]:
        code = index.hasher._hash_checked(vector)
        if probe_adjacent:
            return index.hasher.neighbours(code)
        return (code,)

    def _candidates(self, vector: np.ndarray, probe_adjacent: bool) -> list[K]:
        # dict keeps first-seen order while deduplicating
        seen: dict[K, None] = {}
        for index in self._indices:
            for code in self._codes(index, vector, probe_adjacent):
                for key in index._groups.get(code, ()):
                    seen.setdefault(key, None)
        return list(seen)

    def candidates(self, query_vector: Any, probe_adjacent: bool = False) -> list[K]:
        """
        Unique keys from every sub-index's matching bucket.

        Args:
            query_vector: 1D array-like of length `dimension`.
            probe_adjacent: Also read buckets one bit flip away from the
                query's code in each sub-index.

        Returns:
            Keys in first-seen order (sub-index order, then bucket order).
        """
        vector = as_vector(query_vector, self.dimension, what="Query vector")
        return self._candidates(vector, probe_adjacent)

    def nearest(
        self,
        query_vector: Any,
        k: int,
        distance_fn: Callable[[Any, K], float],
        probe_adjacent: bool = False,
    ) -> list[DistanceNode[K]]:
        """
        Approximate k nearest keys to the query.

        Args:
            query_vector: 1D array-like of length `dimension`.
            k: Maximum number of results.
            distance_fn: Called as distance_fn(query_vector, key), once per
                unique candidate.
            probe_adjacent: See candidates().

        Returns:
            Up to k DistanceNode entries, ascending by distance. Equal
            distances keep candidate first-seen order.

        Raises:
            DimensionMismatch: If the vector length is not `dimension`.
            ValueError: If k is negative.
        """
        vector = as_vector(query_vector, self.dimension, what="Query vector")
        if not _is_count(k) or k < 0:
            raise ValueError(f"k must be a non-negative integer, got {k!r}")
        if k == 0:
            return []

        scored = [
            DistanceNode(key, distance_fn(query_vector, key))
            for key in self._candidates(vector, probe_adjacent)
        ]

        # Sort by distance (ascending); sort is stable
        scored.sort(key=lambda node: node.distance)
        return scored[:k]

    @staticmethod
    def autotune_planes(
        dimension: int,
        group_size: float,
        vectors: Any,
        rng: Any = None,
        max_planes: int = 255,
    ) -> int:
        """
        Find a plane count giving buckets of roughly `group_size` keys.

        Trial indices are built with increasing plane counts, starting from
        an estimate based on the number of vectors. Returns the plane count
        whose mean bucket size is the smallest seen that is still above
        `group_size`, stopping once the mean drops below it.

        Args:
            dimension: Dimension of the vectors.
            group_size: Target mean bucket size.
            vectors: 2D array of sample vectors.
            rng: numpy Generator, int seed, or None for fresh entropy.
            max_planes: Largest plane count to try (exclusive).

        Returns:
            The chosen plane count (0 if even the first trial is below target).
        """
        if group_size <= 0:
            raise InvalidConfiguration("group_size", group_size, "must be positive")
        vectors = as_matrix(vectors, dimension)
        if len(vectors) == 0:
            raise InvalidConfiguration("vectors", len(vectors), "need at least one vector")
        check_planes(max_planes)
        if max_planes < 1:
            raise InvalidConfiguration("max_planes", max_planes, "must be at least 1")

        # Start slightly below the estimate in case points are clustered
        estimate = int(math.log2(len(vectors))) - int(math.floor(math.log2(group_size)))
        initial = min(max(estimate, 2), 255) - 2
        initial = max(min(initial, max_planes - 1), 0)

        rng = np.random.default_rng(rng)
        best_plane_count = 0
        best_group_mean = math.inf
        for planes in range(initial, max_planes):
            trial = BasicIndex(dimension, planes, rng).fit(vectors)
            mean = trial.stats().mean
            logger.debug("autotune: %d planes => mean group size %.2f", planes, mean)

            # Smallest mean that is not under the target group size
            if group_size < mean < best_group_mean:
                best_group_mean = mean
                best_plane_count = planes

            if mean < group_size:
                return best_plane_count

        return best_plane_count
