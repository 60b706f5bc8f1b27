"""Tests for the numeric kernels."""

import numpy as np
import pytest

from chunking import InvalidArgumentError, SingularMatrixError
from chunking.math_kernels import (
    filter_split_indices,
    find_local_minima,
    invert_matrix,
    percentile,
    savitzky_golay_filter,
    windowed_cross_similarity,
)


def test_smoothing_keeps_length():
    data = [1, 2, 1.5, 3, 2.5, 4, 3.5, 5]
    smoothed = savitzky_golay_filter(data, window_length=5, poly_order=2)
    assert len(smoothed) == len(data)
    assert np.all(np.isfinite(smoothed))


def test_smoothing_preserves_polynomials_in_interior():
    data = [x ** 2 for x in range(10)]
    smoothed = savitzky_golay_filter(data, window_length=5, poly_order=2)
    assert np.allclose(smoothed[2:-2], data[2:-2])


def test_first_derivative_of_linear_data():
    data = [x + 3.0 for x in range(12)]
    derivative = savitzky_golay_filter(data, window_length=5, poly_order=2, derivative=1)
    assert all(0.5 <= d <= 1.5 for d in derivative[2:-2])


def test_second_derivative_of_parabola():
    data = [float(x * x) for x in range(15)]
    second = savitzky_golay_filter(data, window_length=7, poly_order=3, derivative=2)
    assert all(1.0 <= d <= 3.0 for d in second[3:-3])


@pytest.mark.parametrize("window, order", [(4, 2), (3, 3), (2, 2)])
def test_invalid_window_rejected(window, order):
    with pytest.raises(InvalidArgumentError):
        savitzky_golay_filter([1, 2, 3, 4, 5], window_length=window, poly_order=order)


def test_empty_input():
    assert len(savitzky_golay_filter([])) == 0
    assert find_local_minima([]) == ([], [])


def test_short_series_does_not_fail():
    assert len(savitzky_golay_filter([1.0, 2.0], window_length=5, poly_order=2)) == 2


def test_singular_matrix_detected():
    with pytest.raises(SingularMatrixError):
        invert_matrix(np.array([[1.0, 2.0], [2.0, 4.0]]))


def test_inverse_with_pivoting():
    matrix = np.array([[0.0, 1.0], [2.0, 3.0]])
    assert np.allclose(invert_matrix(matrix) @ matrix, np.eye(2))


def test_parabola_minimum_found():
    data = [float((x - 5) ** 2) for x in range(11)]
    indices, values = find_local_minima(data, window_size=5, poly_order=2, tolerance=0.5)
    assert 5 in indices
    assert values[indices.index(5)] == 0.0


def test_windowed_cross_similarity_averages_neighbouring_pairs():
    embeddings = [[1.0, 0.0], [1.0, 0.0], [0.0, 1.0]]
    assert windowed_cross_similarity(embeddings, window_size=3) == pytest.approx([0.5, 0.5])


def test_windowed_cross_similarity_ignores_zero_vectors():
    embeddings = [[0.0, 0.0], [1.0, 0.0], [1.0, 0.0]]
    assert windowed_cross_similarity(embeddings) == pytest.approx([1.0, 1.0])


def test_windowed_cross_similarity_window_validated():
    with pytest.raises(InvalidArgumentError):
        windowed_cross_similarity([[1.0], [1.0]], window_size=2)


def test_percentile_interpolates():
    values = [0.1, 0.3, 0.8, 0.2, 0.9, 0.15]
    assert percentile(values, 0.5) == pytest.approx(0.25)
    assert percentile([], 0.5) == 0.0
    assert percentile([0.7], 0.9) == 0.7


def test_filter_split_indices_keeps_low_distant_points():
    values = [0.1, 0.3, 0.8, 0.2, 0.9, 0.15]
    indices, kept = filter_split_indices(list(range(6)), values, threshold=0.5, min_distance=2)
    assert indices == [0, 3, 5]
    assert kept == [0.1, 0.2, 0.15]


def test_filter_split_indices_enforces_min_distance():
    indices, _ = filter_split_indices([0, 1, 2, 3], [0.1, 0.1, 0.1, 0.1], min_distance=2)
    assert indices == [0, 2]
