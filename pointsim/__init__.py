"""
pointsim

In-memory similarity search over point-set images: extract a descriptor per
image, cache it, and rank the dataset against a selection of images.

Example:
    engine = SimilarityEngine()
    engine.initialize()
    engine.cache_features("a", [(0.0, 0.0, 1.0), (1.0, 2.0, 3.0)])
    engine.cache_features("b", [(0.5, 0.5, 1.0), (2.0, 1.0, 0.5)])
    engine.rank(["a"])   # -> [SimilarityResult(image_id="b", similarity=...)]
"""

from pointsim.common.errors import (
    CacheUninitializedError,
    EmptyInputError,
    EmptySelectionError,
    FeatureLengthMismatchError,
    InvalidPointsError,
    LockError,
    MissingFeaturesError,
    SimilarityError,
)
from pointsim.common.types import FeatureRecord, Point, SimilarityResult
from pointsim.features import FEATURE_LENGTH, FeatureExtractor, extract_features
from pointsim.retrieval.cache import FeatureCache
from pointsim.retrieval.engine import SimilarityEngine
from pointsim.util.config import EngineConfig

__all__ = [
    "EngineConfig",
    "FeatureCache",
    "FeatureExtractor",
    "SimilarityEngine",
    "FEATURE_LENGTH",
    "extract_features",

    # Types
    "FeatureRecord",
    "Point",
    "SimilarityResult",

    # Errors
    "CacheUninitializedError",
    "EmptyInputError",
    "EmptySelectionError",
    "FeatureLengthMismatchError",
    "InvalidPointsError",
    "LockError",
    "MissingFeaturesError",
    "SimilarityError",
]
