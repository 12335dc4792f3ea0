"""Vector and set similarity scorers."""

from typing import Sequence

import numpy as np


class DimensionMismatch(ValueError):
    """Raised when two vectors of different length are compared."""


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two equal-length vectors, in [-1, 1].

    A zero vector has no direction, so any comparison involving one
    scores 0.0 rather than dividing by zero.
    """
    if len(a) != len(b):
        raise DimensionMismatch(f"Vectors must have same length ({len(a)} != {len(b)})")

    va = np.asarray(a, dtype=float)
    vb = np.asarray(b, dtype=float)
    norm_a = np.linalg.norm(va)
    norm_b = np.linalg.norm(vb)
    if norm_a == 0 or norm_b == 0:
        return 0.0

    sim = float(np.dot(va, vb) / (norm_a * norm_b))
    # Clamp rounding noise so identical vectors never exceed 1.0
    return max(-1.0, min(1.0, sim))


def jaccard_similarity(a: set[str], b: set[str]) -> float:
    """|a ∩ b| / |a ∪ b|. Two empty sets score 0.0."""
    union = a | b
    if not union:
        return 0.0
    return len(a & b) / len(union)


def similarity_matrix(vectors: Sequence[Sequence[float]]) -> np.ndarray:
    """All-pairs cosine similarity of equal-length vectors.

    Rows for zero vectors are all 0.0, matching cosine_similarity.
    """
    if len(vectors) == 0:
        return np.zeros((0, 0))

    lengths = {len(v) for v in vectors}
    if len(lengths) > 1:
        raise DimensionMismatch(f"Vectors must have same length (got {sorted(lengths)})")

    matrix = np.asarray(vectors, dtype=float)
    norms = np.linalg.norm(matrix, axis=1, keepdims=True)
    safe = np.where(norms == 0, 1.0, norms)
    normalized = np.where(norms == 0, 0.0, matrix / safe)
    return np.clip(normalized @ normalized.T, -1.0, 1.0)
