from typing import Dict, Iterable, Sequence, Union
import numpy as np

from pointsim.common.errors import EmptyInputError, FeatureLengthMismatchError, InvalidPointsError
from pointsim.common.types import FeatureVector, Point
from pointsim.util.logger import logger
from .registry import FEATURE_LENGTH, FEATURE_REGISTRY, FeatureType, GRID_SIZE

PointsLike = Union[Sequence[Point], Sequence[Sequence[float]], np.ndarray]


class FeatureExtractor:
    """
    Turns a set of (x, y, value) points into the fixed-length descriptor.

    Layout (see registry.FEATURE_REGISTRY):
        [0:3]    mean of x, y, value
        [3:6]    population std-dev of x, y, value
        [6:12]   x_min, x_max, y_min, y_max, value_min, value_max
        [12]     point count
        [13:113] 10x10 occupancy grid, outer loop over x-bin, inner over y-bin
    """

    @staticmethod
    def extract(points: PointsLike) -> FeatureVector:
        """
        Extract the descriptor of one image.

        Args:
            points: Sequence of (x, y, value) triples, in any order

        Returns:
            Read-only float64 array of length FEATURE_LENGTH

        Raises:
            EmptyInputError: no points were given
            InvalidPointsError: the input is not an N x 3 numeric table
        """
        data = FeatureExtractor._as_array(points)

        # Canonical order so float reductions do not depend on input order
        data = data[np.lexsort((data[:, 2], data[:, 1], data[:, 0]))]
        xs, ys = data[:, 0], data[:, 1]

        means = data.mean(axis=0)
        stds = data.std(axis=0)  # ddof=0 -> divide by N
        mins = data.min(axis=0)
        maxs = data.max(axis=0)
        extents = np.column_stack((mins, maxs)).ravel()

        grid = FeatureExtractor._occupancy_grid(xs, ys, mins[0], maxs[0], mins[1], maxs[1])

        features = np.concatenate((
            means,
            stds,
            extents,
            [float(len(data))],
            grid.ravel(),
        )).astype(np.float64)

        if features.shape[0] != FEATURE_LENGTH:
            raise FeatureLengthMismatchError(FEATURE_LENGTH, features.shape[0])

        features.setflags(write=False)
        logger.debug(f"Extracted {FEATURE_LENGTH} features from {len(data)} points")
        return features

    @staticmethod
    def describe(features: FeatureVector) -> Dict[str, float]:
        """
        Map the summary (non-grid) part of a descriptor back to feature names.

        Example:
            FeatureExtractor.describe(vec)
            # Returns: {"x_mean": 1.5, "y_mean": 0.5, ..., "point_count": 4.0}
        """
        return {
            name: float(features[feat.index])
            for name, feat in FEATURE_REGISTRY.items()
            if feat.category != FeatureType.GRID
        }

    @staticmethod
    def _as_array(points: PointsLike) -> np.ndarray:
        if points is None or len(points) == 0:
            raise EmptyInputError()
        try:
            data = np.asarray(points, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise InvalidPointsError(f"Points must be (x, y, value) numbers: {e}") from e

        if data.ndim != 2 or data.shape[1] != 3:
            raise InvalidPointsError(f"Expected an N x 3 point table, got shape {data.shape}")
        return data

    @staticmethod
    def _occupancy_grid(
            xs: np.ndarray,
            ys: np.ndarray,
            x_min: float,
            x_max: float,
            y_min: float,
            y_max: float,
    ) -> np.ndarray:
        """
        Count points per cell of a GRID_SIZE x GRID_SIZE grid over the bounding box.

        Bins are half-open [start, end), so a point lying exactly on x_max or
        y_max can miss every bin along that axis. A zero-width axis uses a bin
        size of 1.0.
        """
        x_step = (x_max - x_min) / GRID_SIZE if x_max > x_min else 1.0
        y_step = (y_max - y_min) / GRID_SIZE if y_max > y_min else 1.0

        steps = np.arange(GRID_SIZE + 1)
        x_edges = x_min + steps * x_step
        y_edges = y_min + steps * y_step

        # in_x[i, p] is True when point p falls in x-bin i
        in_x = (xs >= x_edges[:-1, None]) & (xs < x_edges[1:, None])
        in_y = (ys >= y_edges[:-1, None]) & (ys < y_edges[1:, None])

        return in_x.astype(np.float64) @ in_y.astype(np.float64).T


def extract_features(points: PointsLike) -> FeatureVector:
    """Shortcut for FeatureExtractor.extract"""
    return FeatureExtractor.extract(points)


def extract_many(items: Iterable) -> Dict[str, FeatureVector]:
    """
    Extract descriptors for several images.

    Args:
        items: Iterable of (image_id, points) pairs

    Returns:
        Dict mapping image id to its descriptor, in input order
    """
    return {image_id: FeatureExtractor.extract(points) for image_id, points in items}
