"""
Feature extraction for point-set images.

Key components:
- FEATURE_REGISTRY: Name, category and vector slot of every descriptor dimension
- FeatureExtractor: Point set -> fixed-length descriptor
- Helper functions: get_feature_index(), get_features_by_category(), etc.
"""

from .registry import (
    FEATURE_LENGTH,
    FEATURE_REGISTRY,
    GRID_OFFSET,
    GRID_SIZE,
    FeatureDefinition,
    FeatureType,
    get_feature,
    get_feature_index,
    get_features_by_category,
    get_feature_names
)

from .extractor import FeatureExtractor, extract_features, extract_many

__all__ = [
    # Core classes
    "FEATURE_REGISTRY",
    "FeatureDefinition",
    "FeatureType",
    "FeatureExtractor",

    # Layout constants
    "FEATURE_LENGTH",
    "GRID_OFFSET",
    "GRID_SIZE",

    # Helper functions
    "extract_features",
    "extract_many",
    "get_feature",
    "get_feature_index",
    "get_features_by_category",
    "get_feature_names"
]
