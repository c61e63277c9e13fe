from dataclasses import dataclass
from typing import Dict, Optional, List
from enum import Enum

GRID_SIZE = 10

class FeatureType(Enum):
    """Feature category for organization"""
    MEAN = "mean"  # Arithmetic mean per axis
    SPREAD = "spread"  # Population standard deviation per axis
    EXTENT = "extent"  # Per-axis min/max
    DENSITY = "density"  # Number of points
    GRID = "grid"  # Spatial occupancy cell counts

@dataclass
class FeatureDefinition:
    """
    Declarative description of one dimension of the descriptor

    Attributes:
        name: Unique feature identifier
        category: Feature category from FeatureType
        index: Position of the value inside the feature vector
        description: Human-readable documentation

    Example:
        FeatureDefinition(
            name="x_mean",
            category=FeatureType.MEAN,
            index=0,
            description="Mean x coordinate"
        )
    """
    name: str # Feature name (e.g. "x_mean")
    category: FeatureType # Feature category
    index: int # Slot in the vector

    # Documentation
    description: str = ""


def _build_registry() -> Dict[str, FeatureDefinition]:
    # Order of this table IS the vector layout, do not reorder
    layout = [
        ("x_mean", FeatureType.MEAN, "Mean x coordinate"),
        ("y_mean", FeatureType.MEAN, "Mean y coordinate"),
        ("value_mean", FeatureType.MEAN, "Mean point value"),
        ("x_std", FeatureType.SPREAD, "Population std-dev of x"),
        ("y_std", FeatureType.SPREAD, "Population std-dev of y"),
        ("value_std", FeatureType.SPREAD, "Population std-dev of value"),
        ("x_min", FeatureType.EXTENT, "Smallest x"),
        ("x_max", FeatureType.EXTENT, "Largest x"),
        ("y_min", FeatureType.EXTENT, "Smallest y"),
        ("y_max", FeatureType.EXTENT, "Largest y"),
        ("value_min", FeatureType.EXTENT, "Smallest value"),
        ("value_max", FeatureType.EXTENT, "Largest value"),
        ("point_count", FeatureType.DENSITY, "Number of points in the image"),
    ]
    for i in range(GRID_SIZE):
        for j in range(GRID_SIZE):
            layout.append((
                f"grid_{i}_{j}",
                FeatureType.GRID,
                f"Points in x-bin {i}, y-bin {j} of the bounding box"
            ))

    return {
        name: FeatureDefinition(name=name, category=category, index=idx, description=desc)
        for idx, (name, category, desc) in enumerate(layout)
    }


# ============================================
# GLOBAL FEATURE REGISTRY
# ============================================
FEATURE_REGISTRY: Dict[str, FeatureDefinition] = _build_registry()

FEATURE_LENGTH = len(FEATURE_REGISTRY)

# First slot of the occupancy grid
GRID_OFFSET = FEATURE_REGISTRY["grid_0_0"].index

# ============================================
# REGISTRY ACCESS FUNCTIONS
# ============================================

def get_feature(name: str) -> Optional[FeatureDefinition]:
    """Get feature definition by name"""
    return FEATURE_REGISTRY.get(name)

def get_feature_index(name: str) -> int:
    """
    Get the vector position of a feature.

    Raises:
        KeyError: if the name is not registered
    """
    return FEATURE_REGISTRY[name].index

def get_features_by_category(category: FeatureType) -> Dict[str, FeatureDefinition]:
    """Get all features in a specific category"""
    return {name: feat for name, feat in FEATURE_REGISTRY.items() if feat.category == category}

def get_feature_names() -> List[str]:
    """Get all registered feature names in vector order"""
    return list(FEATURE_REGISTRY.keys())
