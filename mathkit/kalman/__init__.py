"""
Linear Kalman filter and the models that drive it.
"""

from .kalman_filter import KalmanFilter, FilterState
from .models import (
    ProcessModel,
    MeasurementModel,
    DefaultProcessModel,
    DefaultMeasurementModel,
    ConstantVelocityModel,
    PositionMeasurementModel,
)

__all__ = [
    "KalmanFilter",
    "FilterState",
    "ProcessModel",
    "MeasurementModel",
    "DefaultProcessModel",
    "DefaultMeasurementModel",
    "ConstantVelocityModel",
    "PositionMeasurementModel",
]
