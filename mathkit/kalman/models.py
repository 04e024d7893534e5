"""
Process and measurement models for the Kalman filter.

A model is any object implementing the accessor set of ``ProcessModel`` or
``MeasurementModel``. The filter re-reads the noise matrices on every step,
so a model may return different matrices over time.
"""

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from ..math.utils import as_matrix, as_vector


class ProcessModel(ABC):
    """
    Defines the process dynamics model for a Kalman filter.

    x(k) = A * x(k-1) + B * u(k-1) + w(k-1),  w ~ N(0, Q)
    """

    @property
    @abstractmethod
    def state_transition_matrix(self) -> np.ndarray:
        """State transition matrix A (n x n)."""

    @property
    @abstractmethod
    def control_matrix(self) -> Optional[np.ndarray]:
        """Control matrix B (n x k), or None if the process has no control input."""

    @property
    @abstractmethod
    def process_noise(self) -> np.ndarray:
        """Process noise covariance Q (n x n)."""

    @property
    @abstractmethod
    def initial_state_estimate(self) -> Optional[np.ndarray]:
        """Initial state estimate x0 (n), or None to start from the zero vector."""

    @property
    @abstractmethod
    def initial_error_covariance(self) -> Optional[np.ndarray]:
        """Initial error covariance P0 (n x n), or None to start from Q."""


class MeasurementModel(ABC):
    """
    Defines the measurement model for a Kalman filter.

    z(k) = H * x(k) + v(k),  v ~ N(0, R)
    """

    @property
    @abstractmethod
    def measurement_matrix(self) -> np.ndarray:
        """Measurement matrix H (m x n)."""

    @property
    @abstractmethod
    def measurement_noise(self) -> np.ndarray:
        """Measurement noise covariance R (m x m)."""


class DefaultProcessModel(ProcessModel):
    """
    Process model with constant matrices.

    Scalars are promoted to 1x1 matrices so one-dimensional processes can be
    written as ``DefaultProcessModel(1.0, process_noise=1e-5)``.
    """

    def __init__(self, state_transition, control=None, process_noise=None,
                 initial_state=None, initial_covariance=None):
        """
        Initialize the process model.

        Args:
            state_transition: State transition matrix A
            control: Optional control matrix B
            process_noise: Process noise covariance Q
            initial_state: Optional initial state estimate x0
            initial_covariance: Optional initial error covariance P0
        """
        if state_transition is None:
            raise ValueError("State transition matrix is required")
        if process_noise is None:
            raise ValueError("Process noise matrix is required")

        self._A = as_matrix(state_transition, "state transition matrix")
        # A 1-D control argument is a single column for a scalar input
        if control is None:
            self._B = None
        elif np.ndim(control) == 1:
            self._B = as_matrix(control, "control matrix").T
        else:
            self._B = as_matrix(control, "control matrix")
        self._Q = as_matrix(process_noise, "process noise")
        self._x0 = None if initial_state is None else as_vector(initial_state, "initial state")
        self._P0 = None if initial_covariance is None else as_matrix(initial_covariance, "initial covariance")

    @property
    def state_transition_matrix(self) -> np.ndarray:
        return self._A

    @property
    def control_matrix(self) -> Optional[np.ndarray]:
        return self._B

    @property
    def process_noise(self) -> np.ndarray:
        return self._Q

    @property
    def initial_state_estimate(self) -> Optional[np.ndarray]:
        return self._x0

    @property
    def initial_error_covariance(self) -> Optional[np.ndarray]:
        return self._P0


class DefaultMeasurementModel(MeasurementModel):
    """Measurement model with constant matrices."""

    def __init__(self, measurement, measurement_noise):
        if measurement is None:
            raise ValueError("Measurement matrix is required")
        if measurement_noise is None:
            raise ValueError("Measurement noise matrix is required")

        self._H = as_matrix(measurement, "measurement matrix")
        self._R = as_matrix(measurement_noise, "measurement noise")

    @property
    def measurement_matrix(self) -> np.ndarray:
        return self._H

    @property
    def measurement_noise(self) -> np.ndarray:
        return self._R


class ConstantVelocityModel(ProcessModel):
    """
    Constant velocity motion model driven by white acceleration noise.

    State: [p_1, ..., p_d, v_1, ..., v_d]
    Control input: acceleration [a_1, ..., a_d]

    The noise intensity ``q`` may be changed between predictions; the filter
    picks up the new Q on its next ``predict``. The time step is read-only:
    the filter reads A and B once, at construction.
    """

    def __init__(self, dim: int = 2, dt: float = 1.0, q: float = 0.1,
                 initial_state=None, initial_covariance=None):
        """
        Initialize the motion model.

        Args:
            dim: Number of spatial dimensions
            dt: Time step in seconds
            q: White acceleration noise intensity
            initial_state: Optional initial state [positions, velocities]
            initial_covariance: Optional initial error covariance
        """
        if dim < 1:
            raise ValueError(f"Dimension must be positive, got {dim}")
        if dt <= 0:
            raise ValueError(f"Time step must be positive, got {dt}")
        if q < 0:
            raise ValueError(f"Noise intensity must be non-negative, got {q}")

        self.dim = int(dim)
        self._dt = float(dt)
        self.q = float(q)
        self._x0 = None if initial_state is None else as_vector(initial_state, "initial state")
        self._P0 = None if initial_covariance is None else as_matrix(initial_covariance, "initial covariance")

    @property
    def dt(self) -> float:
        """Time step in seconds."""
        return self._dt

    @property
    def state_dimension(self) -> int:
        return 2 * self.dim

    @property
    def state_transition_matrix(self) -> np.ndarray:
        d, dt = self.dim, self.dt
        A = np.eye(2 * d)

        # Position derivatives
        A[:d, d:] = dt * np.eye(d)  # dp/dv

        return A

    @property
    def control_matrix(self) -> np.ndarray:
        d, dt = self.dim, self.dt
        B = np.zeros((2 * d, d))
        B[:d, :] = 0.5 * dt**2 * np.eye(d)  # position from acceleration
        B[d:, :] = dt * np.eye(d)            # velocity from acceleration
        return B

    @property
    def process_noise(self) -> np.ndarray:
        d, dt, q = self.dim, self.dt, self.q
        I = np.eye(d)

        # Discretized continuous white noise acceleration
        return q * np.block([
            [dt**3 / 3.0 * I, dt**2 / 2.0 * I],
            [dt**2 / 2.0 * I, dt * I],
        ])

    @property
    def initial_state_estimate(self) -> Optional[np.ndarray]:
        return self._x0

    @property
    def initial_error_covariance(self) -> Optional[np.ndarray]:
        return self._P0


class PositionMeasurementModel(MeasurementModel):
    """
    Measurement model that directly observes the position part of a
    constant velocity state.

    The noise variance ``r`` may be changed between corrections.
    """

    def __init__(self, dim: int = 2, r: float = 1.0):
        if dim < 1:
            raise ValueError(f"Dimension must be positive, got {dim}")
        if r < 0:
            raise ValueError(f"Noise variance must be non-negative, got {r}")

        self.dim = int(dim)
        self.r = float(r)

    @property
    def measurement_matrix(self) -> np.ndarray:
        d = self.dim
        H = np.zeros((d, 2 * d))
        H[:, :d] = np.eye(d)  # dz/dp
        return H

    @property
    def measurement_noise(self) -> np.ndarray:
        return self.r * np.eye(self.dim)
