"""
Vector utilities for hyperlsh.

This module provides uniformly distributed random unit vectors, used for
hyperplane normals and for generating example data.
"""

from hyperlsh.vector.unit import random_unit_vector, random_unit_vectors

__all__ = ["random_unit_vector", "random_unit_vectors"]
