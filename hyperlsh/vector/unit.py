"""
Random unit vectors uniformly distributed on the unit hypersphere.

Components are drawn from a standard normal and the vector is normalized.
Sampling each coordinate uniformly instead would bias directions towards
the corners of the hypercube.
"""

from typing import Any

import numpy as np

from hyperlsh.errors import InvalidConfiguration


def _check_dimension(dimension: int) -> None:
    if not isinstance(dimension, (int, np.integer)) or isinstance(dimension, bool) or dimension < 1:
        raise InvalidConfiguration("dimension", dimension, "must be a positive integer")


def random_unit_vectors(count: int, dimension: int, rng: Any = None) -> np.ndarray:
    """
    Draw `count` independent random unit vectors.

    Args:
        count: Number of vectors (0 is allowed).
        dimension: Number of components per vector.
        rng: numpy Generator, int seed, or None for fresh entropy.

    Returns:
        Array of shape (count, dimension), float64, each row of norm 1.
    """
    _check_dimension(dimension)
    if not isinstance(count, (int, np.integer)) or isinstance(count, bool) or count < 0:
        raise InvalidConfiguration("count", count, "must be a non-negative integer")

    rng = np.random.default_rng(rng)
    vectors = rng.standard_normal(size=(count, dimension))
    norms = np.linalg.norm(vectors, axis=1)

    # A zero draw has no direction; redraw those rows
    zero = norms == 0
    while zero.any():
        vectors[zero] = rng.standard_normal(size=(int(zero.sum()), dimension))
        norms = np.linalg.norm(vectors, axis=1)
        zero = norms == 0

    return vectors / norms[:, np.newaxis]


def random_unit_vector(dimension: int, rng: Any = None) -> np.ndarray:
    """Draw a single random unit vector of shape (dimension,)."""
    return random_unit_vectors(1, dimension, rng)[0]
