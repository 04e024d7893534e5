"""
Numerical building blocks for estimation and planar geometry.

This package provides:
- A linear Kalman filter driven by pluggable process/measurement models
- Convex hull validation, boundary segments and convex regions in 2-D
- Configuration and logging setup
"""

__version__ = "1.0.0"

from .kalman import KalmanFilter, ProcessModel, MeasurementModel, DefaultProcessModel, DefaultMeasurementModel
from .geometry import Vector2D, Line, Segment, ConvexHull2D, ConvexRegion
from .exceptions import (
    MathError,
    DimensionMismatchError,
    SingularMatrixError,
    NotConvexError,
    InsufficientDataError,
)

__all__ = [
    "KalmanFilter",
    "ProcessModel",
    "MeasurementModel",
    "DefaultProcessModel",
    "DefaultMeasurementModel",
    "Vector2D",
    "Line",
    "Segment",
    "ConvexHull2D",
    "ConvexRegion",
    "MathError",
    "DimensionMismatchError",
    "SingularMatrixError",
    "NotConvexError",
    "InsufficientDataError",
]
