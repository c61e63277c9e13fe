from __future__ import annotations

import math
from typing import List, Optional, Sequence, Tuple
import numpy as np

from pointsim.common.errors import FeatureLengthMismatchError
from pointsim.common.types import FeatureVector, SimilarityResult


def average_features(selected: Sequence[Tuple[str, FeatureVector]]) -> FeatureVector:
    """
    Element-wise mean of the selected descriptors (the query vector).

    Args:
        selected: (image_id, features) pairs, at least one

    Raises:
        ValueError: selected is empty
        FeatureLengthMismatchError: descriptors differ in length
    """
    if not selected:
        raise ValueError("No features provided")

    expected = len(selected[0][1])
    for image_id, features in selected:
        if len(features) != expected:
            raise FeatureLengthMismatchError(expected, len(features), image_id)

    return np.mean(np.stack([features for _, features in selected]), axis=0)


def cosine_similarities(query: FeatureVector, matrix: np.ndarray) -> np.ndarray:
    """
    Cosine similarity between one query vector and every row of a matrix.

    A pair where either vector has zero norm scores 0.0.
    """
    if matrix.ndim != 2 or matrix.shape[1] != query.shape[0]:
        raise FeatureLengthMismatchError(query.shape[0], matrix.shape[-1])

    query_norm = np.linalg.norm(query)
    row_norms = np.linalg.norm(matrix, axis=1)
    denom = row_norms * query_norm

    scores = np.zeros(matrix.shape[0], dtype=np.float64)
    nonzero = denom != 0.0
    if query_norm != 0.0 and nonzero.any():
        scores[nonzero] = (matrix[nonzero] @ query) / denom[nonzero]

    # Rounding can push parallel vectors just past 1.0
    return np.clip(scores, -1.0, 1.0)


def cosine_similarity(a: FeatureVector, b: FeatureVector) -> float:
    """Cosine similarity of two vectors (0.0 when either norm is zero)"""
    if len(a) != len(b):
        raise FeatureLengthMismatchError(len(a), len(b))
    return float(cosine_similarities(np.asarray(a, dtype=np.float64), np.atleast_2d(b).astype(np.float64))[0])


def _sort_key(result: SimilarityResult) -> Tuple[bool, float, str]:
    # NaN scores go last, ordered among themselves by id
    if math.isnan(result.similarity):
        return True, 0.0, result.image_id
    return False, -result.similarity, result.image_id


def sort_results(results: List[SimilarityResult], limit: Optional[int] = None) -> List[SimilarityResult]:
    """
    Order results by similarity (highest first), ties by image id ascending.
    Results with a NaN similarity are placed after every finite one.

    Args:
        results: Unordered results
        limit: Keep only the first `limit` results (None = all)
    """
    ordered = sorted(results, key=_sort_key)
    if limit is not None:
        ordered = ordered[:limit]
    return ordered
