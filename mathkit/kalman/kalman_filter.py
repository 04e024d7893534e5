"""
Linear Kalman filter driven by injected process and measurement models.
"""

import logging
from enum import Enum
from typing import Optional, Dict, Any

import numpy as np

from .models import ProcessModel, MeasurementModel
from ..exceptions import DimensionMismatchError, SingularMatrixError
from ..math.constants import DEFAULT_SINGULARITY_THRESHOLD
from ..math.utils import as_matrix, as_vector

logger = logging.getLogger(__name__)


class FilterState(Enum):
    """Lifecycle of a filter instance."""
    INITIALIZED = "initialized"
    UPDATED = "updated"


class KalmanFilter:
    """
    Kalman filter for a discrete-time linear stochastic process.

    Prediction:
        x = A * x + B * u
        P = A * P * A^T + Q
    Correction:
        S = H * P * H^T + R
        K = P * H^T * S^-1
        x = x + K * (z - H * x)
        P = (I - K * H) * P

    Q and R are fetched from the models on every step, so time-varying
    noise is supported by models that return different matrices over time.

    Instances are not thread-safe; callers sharing a filter must serialize
    calls to ``predict`` and ``correct``.
    """

    def __init__(self, process_model: ProcessModel, measurement_model: MeasurementModel,
                 singularity_threshold: float = DEFAULT_SINGULARITY_THRESHOLD):
        """
        Initialize the Kalman filter.

        Args:
            process_model: Model providing A, B, Q and the initial estimate
            measurement_model: Model providing H and R
            singularity_threshold: Innovation covariances whose condition
                number exceeds this value are rejected as singular

        Raises:
            ValueError: If a model or one of its required matrices is missing
            DimensionMismatchError: If the model matrices are not compatible
        """
        if process_model is None:
            raise ValueError("Process model is required")
        if measurement_model is None:
            raise ValueError("Measurement model is required")
        if singularity_threshold <= 0:
            raise ValueError(f"Singularity threshold must be positive, got {singularity_threshold}")

        self.process_model = process_model
        self.measurement_model = measurement_model
        self.singularity_threshold = float(singularity_threshold)

        # Transition and measurement matrices are fixed for the filter lifetime
        self._A = self._require_matrix(process_model.state_transition_matrix, "state transition matrix")
        self._A_T = self._A.T
        control = process_model.control_matrix
        self._B = None if control is None else as_matrix(control, "control matrix")
        self._H = self._require_matrix(measurement_model.measurement_matrix, "measurement matrix")
        self._H_T = self._H.T

        n = self._A.shape[0]
        m = self._H.shape[0]

        if self._A.shape != (n, n):
            raise DimensionMismatchError(self._A.shape, (n, n), "state transition matrix shape")
        if self._B is not None and self._B.size > 0 and self._B.shape[0] != n:
            raise DimensionMismatchError(self._B.shape[0], n, "control matrix rows")
        if self._H.shape[1] != n:
            raise DimensionMismatchError(self._H.shape[1], n, "measurement matrix columns")

        # Checked here once so a broken model fails at construction, not mid-run
        self._fetch_process_noise()
        self._fetch_measurement_noise()

        self.state_dim = n
        self.measurement_dim = m

        self.reset()

        logger.debug("KalmanFilter initialized: state dimension %d, measurement dimension %d, control %s",
                     n, m, "none" if self.control_dim == 0 else self.control_dim)

    @staticmethod
    def _require_matrix(value, name: str) -> np.ndarray:
        if value is None:
            raise ValueError(f"Model must provide a {name}")
        return as_matrix(value, name)

    def _fetch_process_noise(self) -> np.ndarray:
        """Read Q from the process model and check its shape."""
        Q = self._require_matrix(self.process_model.process_noise, "process noise matrix")
        n = self._A.shape[0]
        if Q.shape != (n, n):
            raise DimensionMismatchError(Q.shape, (n, n), "process noise shape")
        return Q

    def _fetch_measurement_noise(self) -> np.ndarray:
        """Read R from the measurement model and check its shape."""
        R = self._require_matrix(self.measurement_model.measurement_noise, "measurement noise matrix")
        m = self._H.shape[0]
        if R.shape != (m, m):
            raise DimensionMismatchError(R.shape, (m, m), "measurement noise shape")
        return R

    def reset(self):
        """Reset the filter to the initial estimate provided by the process model."""
        n = self._A.shape[0]

        x0 = self.process_model.initial_state_estimate
        if x0 is None:
            self.x = np.zeros(n)
        else:
            self.x = as_vector(x0, "initial state estimate").copy()
            if self.x.shape[0] != n:
                raise DimensionMismatchError(self.x.shape[0], n, "initial state dimension")

        P0 = self.process_model.initial_error_covariance
        if P0 is None:
            # Compatibility default: start from the process noise
            self.P = self._fetch_process_noise().copy()
        else:
            self.P = as_matrix(P0, "initial error covariance").copy()
            if self.P.shape != (n, n):
                raise DimensionMismatchError(self.P.shape, (n, n), "initial error covariance shape")

        self.x_prior = None
        self.P_prior = None
        self.y = None
        self.S = None
        self.state = FilterState.INITIALIZED

        # Statistics
        self.prediction_count = 0
        self.correction_count = 0

    @property
    def control_dim(self) -> int:
        return 0 if self._B is None else self._B.shape[1]

    def predict(self, control_input=None) -> np.ndarray:
        """
        Prediction step of the Kalman filter.

        Args:
            control_input: Optional control vector u, must match the column
                count of the control matrix

        Returns:
            Copy of the predicted state estimate

        Raises:
            DimensionMismatchError: If u does not match the control matrix
        """
        u = None
        if control_input is not None:
            u = as_vector(control_input, "control input")
            if u.shape[0] != self.control_dim:
                raise DimensionMismatchError(u.shape[0], self.control_dim, "control input dimension")

        Q = self._fetch_process_noise()

        # Project the state ahead: x = A * x (+ B * u)
        x = self._A @ self.x
        if u is not None and self.control_dim > 0:
            x = x + self._B @ u

        # Project the error covariance ahead: P = A * P * A^T + Q
        P = self._A @ self.P @ self._A_T + Q

        self.x = x
        self.P = P
        self.x_prior = x.copy()
        self.P_prior = P.copy()
        self.state = FilterState.UPDATED
        self.prediction_count += 1

        return self.x.copy()

    def correct(self, measurement) -> np.ndarray:
        """
        Correction step with a new measurement.

        Args:
            measurement: Measurement vector z of length m

        Returns:
            Copy of the corrected state estimate

        Raises:
            DimensionMismatchError: If z does not have m elements
            SingularMatrixError: If the innovation covariance cannot be inverted;
                the filter state is left unchanged
        """
        if measurement is None:
            raise ValueError("Measurement is required")
        z = as_vector(measurement, "measurement")
        if z.shape[0] != self.measurement_dim:
            raise DimensionMismatchError(z.shape[0], self.measurement_dim, "measurement dimension")

        R = self._fetch_measurement_noise()

        # Innovation covariance
        S = self._H @ self.P @ self._H_T + R

        S_inv = self._invert(S)

        # Innovation (measurement residual)
        y = z - self._H @ self.x

        # Kalman gain
        K = self.P @ self._H_T @ S_inv

        # Update state and covariance
        self.x = self.x + K @ y
        I = np.eye(self.state_dim)
        self.P = (I - K @ self._H) @ self.P

        self.y = y
        self.S = S
        self.state = FilterState.UPDATED
        self.correction_count += 1

        return self.x.copy()

    def _invert(self, S: np.ndarray) -> np.ndarray:
        """Invert the innovation covariance, rejecting ill-conditioned matrices."""
        cond = np.linalg.cond(S)
        if not np.isfinite(cond) or cond > self.singularity_threshold:
            logger.warning("Innovation covariance is singular (condition number %.3e), correction rejected", cond)
            raise SingularMatrixError(cond, S.shape)
        try:
            return np.linalg.inv(S)
        except np.linalg.LinAlgError as e:
            logger.warning("Innovation covariance inversion failed: %s", e)
            raise SingularMatrixError(float("inf"), S.shape) from e

    @property
    def state_dimension(self) -> int:
        return self.state_dim

    @property
    def measurement_dimension(self) -> int:
        return self.measurement_dim

    @property
    def state_estimation(self) -> np.ndarray:
        """Copy of the current state estimate."""
        return self.x.copy()

    @property
    def error_covariance(self) -> np.ndarray:
        """Copy of the current error covariance."""
        return self.P.copy()

    @property
    def predicted_state_estimation(self) -> Optional[np.ndarray]:
        """Copy of the state estimate after the last prediction, before any correction."""
        return None if self.x_prior is None else self.x_prior.copy()

    @property
    def predicted_error_covariance(self) -> Optional[np.ndarray]:
        """Copy of the error covariance after the last prediction, before any correction."""
        return None if self.P_prior is None else self.P_prior.copy()

    @property
    def innovation(self) -> Optional[np.ndarray]:
        """Innovation of the last correction."""
        return None if self.y is None else self.y.copy()

    @property
    def innovation_covariance(self) -> Optional[np.ndarray]:
        """Innovation covariance of the last correction."""
        return None if self.S is None else self.S.copy()

    def get_uncertainty(self) -> np.ndarray:
        """Get current state uncertainty (square root of the covariance diagonal)."""
        return np.sqrt(np.clip(np.diag(self.P), 0.0, None))

    def get_statistics(self) -> Dict[str, Any]:
        """Get filter statistics."""
        return {
            'state': self.state.value,
            'predictions': self.prediction_count,
            'corrections': self.correction_count,
            'covariance_trace': float(np.trace(self.P)),
            'state_uncertainty': self.get_uncertainty().tolist()
        }
