# backend/tests/test_statistics.py
import math

import pytest

from backend.app.core.errors import ZeroVarianceWarning
from backend.app.services.statistics import compute_stats


def test_basic_moments_quartiles_and_outliers():
    s = compute_stats([4, 1, 100, 3, 2])
    assert s.count == 5
    assert s.mean == pytest.approx(22.0)
    assert s.median == 3
    assert s.min == 1
    assert s.max == 100
    assert s.q1 == 2
    assert s.q3 == 4
    assert s.iqr == 2
    assert s.outlier_count == 1
    # population std: sqrt(7610 / 5)
    assert s.std == pytest.approx(math.sqrt(1522))


def test_even_length_median_takes_upper_middle():
    s = compute_stats([4, 1, 3, 2])
    assert s.median == 3
    assert s.q1 == 2
    assert s.q3 == 4


def test_only_finite_numbers_are_used():
    s = compute_stats([None, "", "abc", True, float("inf"), float("nan"), 2, "3"])
    assert s.count == 2
    assert s.mean == pytest.approx(2.5)


def test_no_numbers_returns_none():
    assert compute_stats(["a", None, ""]) is None
    assert compute_stats([]) is None


def test_symmetric_data_has_zero_skew():
    s = compute_stats([1, 2, 3])
    assert s.skewness == pytest.approx(0.0)


def test_right_skewed_data():
    s = compute_stats([1, 1, 1, 1, 10])
    assert s.skewness > 1


def test_zero_variance_skewness_is_undefined():
    with pytest.warns(ZeroVarianceWarning):
        s = compute_stats([5, 5, 5])
    assert s.std == 0
    assert s.skewness is None
    assert s.outlier_count == 0


def test_serialization_rounds_to_two_places():
    s = compute_stats([1, 2, 2])
    dumped = s.model_dump(mode="json")
    assert dumped["mean"] == 1.67
    # full precision is kept on the model itself
    assert s.mean == pytest.approx(5 / 3)
