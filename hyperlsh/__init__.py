"""
hyperlsh - Approximate nearest neighbour search with random hyperplane LSH.

hyperlsh provides in-memory indexes that bucket vectors by which side of a
set of random hyperplanes they fall on, and an ensemble index that merges
several such partitions into a ranked nearest-k search.
"""

from hyperlsh.__version__ import __version__
from hyperlsh.errors import DimensionMismatch, HyperLSHError, InvalidConfiguration
from hyperlsh.index import AggregateIndex, BasicIndex, DistanceNode, HyperplaneHasher
from hyperlsh.metrics import distance_from_lookup, euclidean_distance, modified_cosine_distance
from hyperlsh.vector import random_unit_vector, random_unit_vectors

__all__ = [
    "AggregateIndex",
    "BasicIndex",
    "DimensionMismatch",
    "DistanceNode",
    "HyperLSHError",
    "HyperplaneHasher",
    "InvalidConfiguration",
    "distance_from_lookup",
    "euclidean_distance",
    "modified_cosine_distance",
    "random_unit_vector",
    "random_unit_vectors",
    "__version__",
]
