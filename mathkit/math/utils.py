"""
Mathematical utility functions shared by the filter and geometry modules.
"""

import math
import numpy as np

from .constants import TWO_PI, SYMMETRY_TOLERANCE


def signum(value):
    """
    Sign of a value.

    Args:
        value (float): Input value

    Returns:
        float: -1.0, 0.0 or 1.0 (NaN is returned unchanged)
    """
    if value > 0.0:
        return 1.0
    if value < 0.0:
        return -1.0
    return value


_SPLIT_FACTOR = 134217729.0  # 2**27 + 1


def _split(value):
    """Split a float into two halves whose products with other halves are exact."""
    c = _SPLIT_FACTOR * value
    high = c - (c - value)
    return high, value - high


def _two_product(a, b):
    """Return (p, e) with p = fl(a*b) and p + e == a*b exactly."""
    p = a * b
    a_high, a_low = _split(a)
    b_high, b_low = _split(b)
    e = a_low * b_low - (((p - a_high * b_high) - a_low * b_high) - a_high * b_low)
    return p, e


def linear_combination(a1, b1, a2, b2):
    """
    Compute a1*b1 + a2*b2 with a single rounding on the exact result.

    Both products are expanded into exact (product, error) pairs which are
    then summed exactly by math.fsum.

    Args:
        a1, b1: First product factors
        a2, b2: Second product factors

    Returns:
        float: a1*b1 + a2*b2
    """
    a1, b1, a2, b2 = float(a1), float(b1), float(a2), float(b2)
    result = a1 * b1 + a2 * b2
    if not math.isfinite(result):
        return result
    exact = math.fsum(_two_product(a1, b1) + _two_product(a2, b2))
    # Splitting overflows for factors above about 1e300
    return exact if math.isfinite(exact) else result


def normalize_angle_positive(angle):
    """
    Normalize angle to [0, 2*pi) range.

    Args:
        angle (float): Angle in radians

    Returns:
        float: Normalized angle in [0, 2*pi)
    """
    angle = angle % TWO_PI
    # fmod can round up to exactly 2*pi for tiny negative inputs
    if angle >= TWO_PI:
        angle -= TWO_PI
    return angle


def as_matrix(value, name="matrix"):
    """
    Convert an array-like or scalar into a 2-D float matrix.

    Args:
        value: Scalar, 1-D or 2-D array-like
        name: Name used in error messages

    Returns:
        np.ndarray: 2-D float array (scalars become 1x1, vectors become a single row)
    """
    matrix = np.array(value, dtype=float)
    if matrix.ndim == 0:
        return matrix.reshape(1, 1)
    if matrix.ndim == 1:
        return matrix.reshape(1, -1)
    if matrix.ndim != 2:
        raise ValueError(f"{name} must be at most 2-dimensional, got {matrix.ndim} dimensions")
    return matrix


def as_vector(value, name="vector"):
    """
    Convert an array-like or scalar into a 1-D float vector.

    Args:
        value: Scalar or array-like
        name: Name used in error messages

    Returns:
        np.ndarray: 1-D float array
    """
    vector = np.array(value, dtype=float)
    if vector.ndim == 0:
        return vector.reshape(1)
    if vector.ndim == 2 and 1 in vector.shape:
        return vector.reshape(-1)
    if vector.ndim != 1:
        raise ValueError(f"{name} must be a vector, got shape {vector.shape}")
    return vector


def is_symmetric(matrix, tolerance=SYMMETRY_TOLERANCE):
    """Check whether a square matrix equals its transpose within a relative tolerance."""
    matrix = np.asarray(matrix)
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        return False
    scale = max(1.0, float(np.max(np.abs(matrix))) if matrix.size else 1.0)
    return bool(np.all(np.abs(matrix - matrix.T) <= tolerance * scale))
