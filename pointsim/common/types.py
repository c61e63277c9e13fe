from dataclasses import dataclass
from typing import Any, Dict, NamedTuple
import numpy as np

# Fixed-length float64 descriptor produced by the feature extractor
FeatureVector = np.ndarray


class Point(NamedTuple):
    """
    A single sample of an image: 2D position plus the scalar measured there.
    Plain (x, y, value) tuples are accepted anywhere a Point is.
    """
    x: float
    y: float
    value: float


@dataclass
class SimilarityResult:
    """
    One ranked candidate returned by SimilarityEngine.rank()
    """
    image_id: str
    similarity: float

    def to_dict(self) -> Dict[str, Any]:
        return {"image_id": self.image_id, "similarity": self.similarity}


@dataclass
class FeatureRecord:
    """
    A cached descriptor together with the image it belongs to
    """
    image_id: str
    features: FeatureVector
