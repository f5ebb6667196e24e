"""
Small vector helpers shared by the geometry modules.

All geometric tests (parallel, orthogonal, coincident) use the same fixed
absolute tolerance on normalized vectors.
"""

import numpy as np

EPSILON = 1e-6


def normalized(vector: np.ndarray) -> np.ndarray:
    """Return ``vector`` scaled to unit length (zero vectors are returned unchanged)."""
    vector = np.asarray(vector, dtype=float)
    norm = np.linalg.norm(vector)
    if norm == 0.0:
        return vector
    return vector / norm


def are_parallel(u: np.ndarray, v: np.ndarray, epsilon: float = EPSILON) -> bool:
    """True if ``u`` and ``v`` are parallel or antiparallel."""
    return abs(abs(np.dot(normalized(u), normalized(v))) - 1.0) < epsilon


def are_orthogonal(u: np.ndarray, v: np.ndarray, epsilon: float = EPSILON) -> bool:
    """True if ``u`` and ``v`` are orthogonal."""
    return abs(np.dot(normalized(u), normalized(v))) < epsilon
