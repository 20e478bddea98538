import numpy as np
import pytest
from numpy.testing import assert_array_equal

from sklloyd import (
    closest_point_distance,
    closest_point_distance_excluding_id,
    closest_point_index,
    indices_with_label,
    points_with_label,
)


def _points():
    return np.array([[0.0, 0.0], [3.0, 4.0], [1.0, 0.0], [-1.0, 0.0], [6.0, 8.0]])


def test_indices_with_label():
    labels = np.array([1, 0, 1, 2, 1])
    assert_array_equal(indices_with_label(labels, 1), [0, 2, 4])
    assert indices_with_label(labels, 3).shape == (0,)


def test_points_with_label_keeps_order():
    X = _points()
    labels = [2, 0, 2, 0, 2]
    assert_array_equal(points_with_label(X, labels, 2), X[[0, 2, 4]])
    assert points_with_label(X, labels, 1).shape == (0, 2)


def test_closest_point_index_ties_to_lowest():
    X = _points()
    # (1, 0) and (-1, 0) are both at distance 1 from the query
    assert closest_point_index(X[2:4], [0.0, 0.0]) == 0
    assert closest_point_index(X, [5.5, 7.0]) == 4


def test_closest_point_distance_with_exclusions():
    X = _points()
    assert closest_point_distance(X, [3.0, 4.0]) == pytest.approx(0.0)
    # with (3, 4) skipped the nearest row is (1, 0)
    assert closest_point_distance(X, [3.0, 4.0], excluded_ids=[1]) == pytest.approx(np.sqrt(20.0))
    assert closest_point_distance_excluding_id(X, [0.0, 0.0], 0) == pytest.approx(1.0)
    assert closest_point_distance(X, [0.0, 0.0], excluded_ids=range(5)) == np.inf


def test_query_dimension_mismatch():
    with pytest.raises(ValueError):
        closest_point_index(_points(), [1.0, 2.0, 3.0])


def test_excluded_ids_out_of_range():
    X = np.array([[0.0, 0.0], [5.0, 0.0]])
    with pytest.raises(ValueError, match="excluded_ids"):
        closest_point_distance(X, [5.0, 0.0], excluded_ids=[-1])
    with pytest.raises(ValueError, match="excluded_ids"):
        closest_point_distance(X, [5.0, 0.0], excluded_ids=[2])
    assert closest_point_distance(X, [5.0, 0.0], excluded_ids=[0]) == pytest.approx(0.0)
