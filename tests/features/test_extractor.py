"""
Tests for pointsim/features/extractor.py

Tests cover:
- FeatureExtractor.extract() statistics and occupancy grid
- Order independence
- Input validation (EmptyInputError, InvalidPointsError)
- FeatureExtractor.describe() and extract_many()
"""

import random

import numpy as np
import pytest

from pointsim.common.errors import EmptyInputError, InvalidPointsError
from pointsim.common.types import Point
from pointsim.features.extractor import FeatureExtractor, extract_features, extract_many
from pointsim.features.registry import FEATURE_LENGTH, GRID_OFFSET, get_feature_index


# ============================================
# Test Fixtures
# ============================================

@pytest.fixture
def square_points():
    """Four corners of a 2 x 4 box with values 1, 3, 5, 7"""
    return [(0.0, 0.0, 1.0), (2.0, 0.0, 3.0), (0.0, 4.0, 5.0), (2.0, 4.0, 7.0)]


@pytest.fixture
def scattered_points():
    rng = random.Random(42)
    return [(rng.uniform(-5, 5), rng.uniform(0, 20), rng.uniform(0, 1)) for _ in range(200)]


def _grid(vector):
    return np.asarray(vector[GRID_OFFSET:]).reshape(10, 10)


# ============================================
# Summary Statistics Tests
# ============================================

class TestSummaryStatistics:
    """Means, std-devs, extents and count"""

    def test_length_is_fixed(self, square_points):
        assert extract_features(square_points).shape == (FEATURE_LENGTH,)
        assert extract_features([(1.0, 1.0, 1.0)]).shape == (FEATURE_LENGTH,)

    def test_means(self, square_points):
        vec = extract_features(square_points)
        assert vec[0] == pytest.approx(1.0)
        assert vec[1] == pytest.approx(2.0)
        assert vec[2] == pytest.approx(4.0)

    def test_population_std(self, square_points):
        """Std-dev divides by N, not N - 1"""
        vec = extract_features(square_points)
        assert vec[3] == pytest.approx(1.0)
        assert vec[4] == pytest.approx(2.0)
        assert vec[5] == pytest.approx(np.sqrt(5.0))

    def test_extents(self, square_points):
        vec = extract_features(square_points)
        assert list(vec[6:12]) == [0.0, 2.0, 0.0, 4.0, 1.0, 7.0]

    def test_point_count(self, scattered_points):
        vec = extract_features(scattered_points)
        assert vec[get_feature_index("point_count")] == 200.0

    def test_single_point(self):
        vec = extract_features([(3.0, -1.0, 0.5)])
        assert list(vec[:3]) == [3.0, -1.0, 0.5]
        assert list(vec[3:6]) == [0.0, 0.0, 0.0]
        assert vec[12] == 1.0

    def test_accepts_point_tuples_and_arrays(self, square_points):
        as_points = [Point(*p) for p in square_points]
        as_array = np.array(square_points)
        expected = extract_features(square_points)
        np.testing.assert_array_equal(extract_features(as_points), expected)
        np.testing.assert_array_equal(extract_features(as_array), expected)

    def test_result_is_read_only(self, square_points):
        vec = extract_features(square_points)
        assert vec.dtype == np.float64
        assert not vec.flags.writeable


# ============================================
# Occupancy Grid Tests
# ============================================

class TestOccupancyGrid:
    """10 x 10 histogram over the bounding box"""

    def test_max_edge_points_are_excluded(self, square_points):
        """Points lying on x_max or y_max fall outside every half-open bin"""
        grid = _grid(extract_features(square_points))
        assert grid[0, 0] == 1.0
        assert grid.sum() == 1.0

    def test_row_major_order(self):
        """Cell (x-bin 1, y-bin 9) lands at grid_1_9"""
        points = [(0.0, 0.0, 0.0), (1.0, 9.0, 0.0), (10.0, 10.0, 0.0)]
        vec = extract_features(points)
        assert vec[get_feature_index("grid_0_0")] == 1.0
        assert vec[get_feature_index("grid_1_9")] == 1.0
        assert vec[get_feature_index("grid_9_1")] == 0.0
        assert _grid(vec).sum() == 2.0

    def test_zero_range_uses_unit_bins(self):
        """Degenerate axis: every point sits in the first bin"""
        vec = extract_features([(5.0, 5.0, 1.0), (5.0, 5.0, 2.0), (5.0, 5.0, 3.0)])
        grid = _grid(vec)
        assert grid[0, 0] == 3.0
        assert grid.sum() == 3.0

    def test_zero_range_on_one_axis(self):
        points = [(0.0, 2.0, 0.0), (5.0, 2.0, 0.0), (10.0, 2.0, 0.0)]
        grid = _grid(extract_features(points))
        assert grid[0, 0] == 1.0
        assert grid[5, 0] == 1.0
        # x = 10 is x_max
        assert grid.sum() == 2.0

    def test_counts_never_exceed_point_count(self, scattered_points):
        vec = extract_features(scattered_points)
        assert 0 < _grid(vec).sum() <= 200


# ============================================
# Determinism Tests
# ============================================

class TestOrderIndependence:
    """Reordering the input never changes the descriptor"""

    def test_shuffled_input_is_bit_identical(self, scattered_points):
        expected = extract_features(scattered_points)
        rng = random.Random(7)
        for _ in range(5):
            shuffled = list(scattered_points)
            rng.shuffle(shuffled)
            np.testing.assert_array_equal(extract_features(shuffled), expected)

    def test_reversed_input(self, square_points):
        np.testing.assert_array_equal(
            extract_features(list(reversed(square_points))),
            extract_features(square_points),
        )


# ============================================
# Validation Tests
# ============================================

class TestValidation:
    """Bad input raises the matching error"""

    def test_empty_list_raises(self):
        with pytest.raises(EmptyInputError):
            extract_features([])

    def test_empty_array_raises(self):
        with pytest.raises(EmptyInputError):
            extract_features(np.empty((0, 3)))

    def test_wrong_arity_raises(self):
        with pytest.raises(InvalidPointsError):
            extract_features([(1.0, 2.0)])

    def test_non_numeric_raises(self):
        with pytest.raises(InvalidPointsError):
            extract_features([("a", 1.0, 2.0)])

    def test_ragged_raises(self):
        with pytest.raises(InvalidPointsError):
            extract_features([(1.0, 2.0, 3.0), (1.0, 2.0)])

    def test_invalid_points_is_value_error(self):
        with pytest.raises(ValueError):
            extract_features([(1.0, 2.0)])


# ============================================
# Helper Tests
# ============================================

class TestHelpers:
    """describe() and extract_many()"""

    def test_describe_names_summary_values(self, square_points):
        summary = FeatureExtractor.describe(extract_features(square_points))
        assert len(summary) == 13
        assert summary["x_mean"] == pytest.approx(1.0)
        assert summary["value_max"] == 7.0
        assert summary["point_count"] == 4.0
        assert not any(name.startswith("grid_") for name in summary)

    def test_extract_many_keeps_ids(self, square_points):
        out = extract_many([("a", square_points), ("b", [(1.0, 1.0, 1.0)])])
        assert list(out) == ["a", "b"]
        assert out["b"][12] == 1.0

    def test_extract_many_propagates_errors(self, square_points):
        with pytest.raises(EmptyInputError):
            extract_many([("a", square_points), ("b", [])])
