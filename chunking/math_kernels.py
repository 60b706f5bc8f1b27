"""
Numeric kernels for boundary detection.

- Savitzky-Golay smoothing and derivatives
- Local minima detection on smoothed curves
- Windowed cross similarity over consecutive embeddings
- Percentile-based split index filtering
"""

import logging
import math
from typing import List, Sequence, Tuple

import numpy as np

from .exceptions import InvalidArgumentError, SingularMatrixError

logger = logging.getLogger(__name__)

PIVOT_EPSILON = 1e-10


def invert_matrix(matrix: np.ndarray) -> np.ndarray:
    """
    Invert a square matrix by Gauss-Jordan elimination with partial pivoting.

    Raises:
        SingularMatrixError: If a pivot magnitude falls below 1e-10
    """
    n = matrix.shape[0]
    augmented = np.hstack([np.array(matrix, dtype=float), np.eye(n)])

    for col in range(n):
        pivot_row = col + int(np.argmax(np.abs(augmented[col:, col])))
        if abs(augmented[pivot_row, col]) < PIVOT_EPSILON:
            raise SingularMatrixError("Matrix is singular or nearly singular.")
        if pivot_row != col:
            augmented[[col, pivot_row]] = augmented[[pivot_row, col]]

        augmented[col] /= augmented[col, col]
        for row in range(n):
            if row != col:
                augmented[row] -= augmented[row, col] * augmented[col]

    return augmented[:, n:]


def savitzky_golay_coefficients(
    window_length: int, poly_order: int, derivative: int = 0
) -> np.ndarray:
    """Convolution coefficients for a least-squares polynomial fit."""
    half = window_length // 2
    offsets = np.arange(-half, half + 1, dtype=float)
    vandermonde = np.vander(offsets, poly_order + 1, increasing=True)
    normal_inverse = invert_matrix(vandermonde.T @ vandermonde)
    return math.factorial(derivative) * (vandermonde @ normal_inverse[derivative])


def savitzky_golay_filter(
    data: Sequence[float],
    window_length: int = 5,
    poly_order: int = 3,
    derivative: int = 0,
) -> np.ndarray:
    """
    Smooth ``data`` (or take its derivative) with a Savitzky-Golay filter.

    Edges are handled by reflecting indices around the boundaries.

    Args:
        data: Input samples
        window_length: Odd window size, greater than ``poly_order``
        poly_order: Degree of the fitted polynomial
        derivative: Derivative order (0 = smoothing)

    Returns:
        Filtered samples, same length as ``data``
    """
    if window_length % 2 == 0 or window_length <= poly_order:
        raise InvalidArgumentError(
            "Window length must be odd and greater than polynomial order."
        )
    if derivative < 0 or derivative > poly_order:
        raise InvalidArgumentError(
            f"Derivative order must be between 0 and {poly_order}, got {derivative}."
        )

    values = np.asarray(data, dtype=float)
    n = len(values)
    if n == 0:
        return values

    coefficients = savitzky_golay_coefficients(window_length, poly_order, derivative)
    half = window_length // 2

    indices = np.arange(n)[:, None] + np.arange(-half, half + 1)[None, :]
    indices = np.where(indices < 0, -indices, indices)
    indices = np.where(indices >= n, 2 * n - indices - 2, indices)
    # Reflection can still leave the range for series shorter than the window.
    indices = np.clip(indices, 0, n - 1)

    return values[indices] @ coefficients


def find_local_minima(
    data: Sequence[float],
    window_size: int = 11,
    poly_order: int = 2,
    tolerance: float = 0.2,
) -> Tuple[List[int], List[float]]:
    """
    Find local minima of a noisy curve.

    A point is a minimum where the smoothed first derivative is within
    ``tolerance`` of zero and the second derivative is positive.

    Returns:
        (indices, values) of the minima, values taken from ``data``
    """
    values = np.asarray(data, dtype=float)
    if len(values) == 0:
        return [], []

    first = savitzky_golay_filter(values, window_size, poly_order, derivative=1)
    second = savitzky_golay_filter(values, window_size, poly_order, derivative=2)

    mask = (np.abs(first) < tolerance) & (second > 0)
    indices = [int(i) for i in np.flatnonzero(mask)]
    return indices, [float(values[i]) for i in indices]


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity; ``nan`` when either vector has zero norm."""
    va = np.asarray(a, dtype=float)
    vb = np.asarray(b, dtype=float)
    norm = np.linalg.norm(va) * np.linalg.norm(vb)
    if norm == 0:
        return float("nan")
    return float(np.dot(va, vb) / norm)


def windowed_cross_similarity(
    embeddings: Sequence[Sequence[float]], window_size: int = 3
) -> List[float]:
    """
    Average adjacent-pair cosine similarity around each boundary.

    For boundary ``i`` (between elements ``i`` and ``i + 1``) the result is
    the mean similarity of adjacent pairs ``(j, j + 1)`` with ``j`` in
    ``[max(0, i - half), min(n, i + half + 2) - 1)``. Undefined pairs are
    ignored; a boundary with no defined pair scores 0.

    Returns:
        ``len(embeddings) - 1`` values
    """
    if window_size < 3 or window_size % 2 == 0:
        raise InvalidArgumentError("Window size must be an odd number >= 3.")

    n = len(embeddings)
    if n < 2:
        return []

    pair_similarity = [
        cosine_similarity(embeddings[j], embeddings[j + 1]) for j in range(n - 1)
    ]
    half = window_size // 2
    result = []
    for i in range(n - 1):
        start = max(0, i - half)
        end = min(n, i + half + 2) - 1
        defined = [s for s in pair_similarity[start:end] if not math.isnan(s)]
        result.append(sum(defined) / len(defined) if defined else 0.0)
    return result


def percentile(values: Sequence[float], fraction: float) -> float:
    """
    Percentile with linear interpolation between order statistics.

    Args:
        values: Samples
        fraction: Percentile as a fraction in [0, 1]
    """
    if len(values) == 0:
        return 0.0
    return float(np.percentile(np.asarray(values, dtype=float), fraction * 100))


def filter_split_indices(
    indices: Sequence[int],
    values: Sequence[float],
    threshold: float = 0.5,
    min_distance: int = 2,
) -> Tuple[List[int], List[float]]:
    """
    Keep candidate split points that are low enough and far enough apart.

    A candidate survives when its value is at or below the ``threshold``
    percentile of ``values`` and it sits at least ``min_distance`` after the
    previously kept index.

    Returns:
        (kept_indices, kept_values)
    """
    cutoff = percentile(values, threshold)
    kept_indices: List[int] = []
    kept_values: List[float] = []
    last = -min_distance - 1
    for index, value in zip(indices, values):
        if value <= cutoff and index - last >= min_distance:
            kept_indices.append(index)
            kept_values.append(value)
            last = index
    return kept_indices, kept_values
