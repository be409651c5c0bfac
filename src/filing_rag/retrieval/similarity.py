"""Cosine similarity and ranking over dense vectors."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

# Guards the denominator against zero-norm vectors
EPSILON = 1e-8


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """``dot(a, b) / (norm(a) * norm(b) + EPSILON)``."""
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.shape != vb.shape:
        raise ValueError(f"Vector shapes differ: {va.shape} vs {vb.shape}")
    return float(np.dot(va, vb) / (np.linalg.norm(va) * np.linalg.norm(vb) + EPSILON))


def cosine_scores(query: Sequence[float], matrix: Sequence[Sequence[float]]) -> np.ndarray:
    """Score every row of ``matrix`` against ``query`` in one pass.

    Returns:
        1-D array of cosine similarities, one per row.
    """
    q = np.asarray(query, dtype=np.float64)
    m = np.asarray(matrix, dtype=np.float64)
    if m.ndim != 2 or m.shape[1] != q.shape[0]:
        raise ValueError(f"Matrix shape {m.shape} incompatible with query of length {q.shape[0]}")
    return (m @ q) / (np.linalg.norm(m, axis=1) * np.linalg.norm(q) + EPSILON)


def top_k_indices(scores: np.ndarray, top_k: int) -> list[int]:
    """Indices of the ``top_k`` highest scores, descending.

    The sort is stable, so equal scores keep their original order.
    """
    order = np.argsort(-scores, kind="stable")
    return [int(i) for i in order[:top_k]]
