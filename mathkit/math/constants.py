"""
Numerical constants and library defaults.
"""

import math

# Mathematical constants
PI = math.pi
TWO_PI = 2 * math.pi

# Geometry defaults
DEFAULT_TOLERANCE = 1.0e-10   # Distance below which points are considered identical

# Kalman filter defaults
# Innovation covariances with a condition number above this are treated as singular
DEFAULT_SINGULARITY_THRESHOLD = 1.0e12

# Symmetry check used on covariance matrices
SYMMETRY_TOLERANCE = 1.0e-9
