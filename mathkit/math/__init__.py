"""
Mathematical utilities shared across the library.
"""

from .utils import signum, linear_combination, normalize_angle_positive, as_matrix, as_vector, is_symmetric
from .constants import *

__all__ = [
    "signum",
    "linear_combination",
    "normalize_angle_positive",
    "as_matrix",
    "as_vector",
    "is_symmetric",
]
