"""
Distance functions for ranking candidates in hyperlsh.

The indexes never look vectors up by key. Callers pass a distance callable
to AggregateIndex.nearest; distance_from_lookup builds one from a key to
vector lookup and a metric name.
"""

from typing import Any, Callable, Hashable

import numpy as np

from hyperlsh.errors import DimensionMismatch, InvalidConfiguration


def _pair(a: Any, b: Any) -> tuple[np.ndarray, np.ndarray]:
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.shape != b.shape:
        raise DimensionMismatch(
            a.shape[-1] if a.ndim else 0,
            b.shape[-1] if b.ndim else 0,
            what="Second vector",
            against="first vector",
        )
    return a, b


def dot(a: Any, b: Any) -> float:
    """Dot product accumulated in float64."""
    a, b = _pair(a, b)
    return float(np.dot(a, b))


def euclidean_distance(a: Any, b: Any) -> float:
    a, b = _pair(a, b)
    return float(np.linalg.norm(a - b))


def modified_cosine_distance(a: Any, b: Any) -> float:
    """
    Cosine distance for unit vectors, shifted from [-1, 1] into [0, 2].

    Inputs are assumed normalized; no renormalization is done here.
    """
    return max(0.0, 1.0 - dot(a, b))


# Metric mapping for distance_from_lookup
# Each metric takes two vectors (a, b) and returns a non-negative float
METRICS: dict[str, Callable[[Any, Any], float]] = {
    "euclidean": euclidean_distance,
    "cosine": modified_cosine_distance,
}


def distance_from_lookup(
    get_vector: Callable[[Hashable], Any],
    metric: str = "euclidean",
) -> Callable[[Any, Hashable], float]:
    """
    Build a distance_fn(query_vector, key) for AggregateIndex.nearest.

    Args:
        get_vector: Caller-owned lookup returning the vector stored for a key.
        metric: Name of a metric in METRICS.

    Returns:
        A callable scoring a key against a query vector.

    Raises:
        InvalidConfiguration: If the metric name is unknown.
    """
    if metric not in METRICS:
        raise InvalidConfiguration(
            "metric", metric, f"expected one of {sorted(METRICS)}"
        )
    fn = METRICS[metric]

    def distance(query_vector: Any, key: Hashable) -> float:
        return fn(query_vector, get_vector(key))

    return distance
