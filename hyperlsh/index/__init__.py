"""
Index module using random hyperplane LSH.

BasicIndex groups keys by hash code; AggregateIndex merges several
independent BasicIndex instances into a ranked nearest-k search.
"""

from hyperlsh.index.aggregate import AggregateIndex, DistanceNode
from hyperlsh.index.basic import BasicIndex, BucketStats
from hyperlsh.index.hasher import MAX_PLANES, HashCode, HyperplaneHasher

__all__ = [
    "AggregateIndex",
    "BasicIndex",
    "BucketStats",
    "DistanceNode",
    "HashCode",
    "HyperplaneHasher",
    "MAX_PLANES",
]
