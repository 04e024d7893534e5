#!/usr/bin/env python3
"""
Unit tests for the Kalman filter and its models.
"""

import unittest
import numpy as np
import sys
import os

# Add package to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from mathkit.kalman import (
    KalmanFilter,
    FilterState,
    ProcessModel,
    DefaultProcessModel,
    DefaultMeasurementModel,
    ConstantVelocityModel,
    PositionMeasurementModel,
)
from mathkit.exceptions import DimensionMismatchError, SingularMatrixError
from mathkit.math import is_symmetric


class CountingProcessModel(DefaultProcessModel):
    """Process model whose noise grows every time it is read."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.noise_reads = 0

    @property
    def process_noise(self):
        self.noise_reads += 1
        return self._Q * self.noise_reads


class TestDefaultModels(unittest.TestCase):
    """Test DefaultProcessModel and DefaultMeasurementModel."""

    def test_scalar_promotion(self):
        """Scalars become 1x1 matrices."""
        model = DefaultProcessModel(1.0, process_noise=1e-5, initial_state=2.0)

        self.assertEqual(model.state_transition_matrix.shape, (1, 1))
        self.assertEqual(model.process_noise.shape, (1, 1))
        np.testing.assert_array_equal(model.initial_state_estimate, [2.0])
        self.assertIsNone(model.control_matrix)
        self.assertIsNone(model.initial_error_covariance)

    def test_vector_control_is_column(self):
        """A 1-D control argument is a single control column."""
        model = DefaultProcessModel(np.eye(2), control=[0.5, 1.0], process_noise=np.eye(2))
        self.assertEqual(model.control_matrix.shape, (2, 1))

    def test_missing_matrices(self):
        with self.assertRaises(ValueError):
            DefaultProcessModel(None, process_noise=np.eye(2))
        with self.assertRaises(ValueError):
            DefaultProcessModel(np.eye(2))
        with self.assertRaises(ValueError):
            DefaultMeasurementModel(None, np.eye(1))
        with self.assertRaises(ValueError):
            DefaultMeasurementModel(np.eye(1), None)

    def test_abstract_contract(self):
        """The model contract cannot be instantiated directly."""
        with self.assertRaises(TypeError):
            ProcessModel()


class TestConstantVelocityModel(unittest.TestCase):
    """Test ConstantVelocityModel and PositionMeasurementModel."""

    def test_state_transition(self):
        model = ConstantVelocityModel(dim=2, dt=0.1)
        A = model.state_transition_matrix

        self.assertEqual(A.shape, (4, 4))
        for i in range(4):
            self.assertAlmostEqual(A[i, i], 1.0)
        self.assertAlmostEqual(A[0, 2], 0.1)  # dx/dvx
        self.assertAlmostEqual(A[1, 3], 0.1)  # dy/dvy

    def test_control_matrix(self):
        model = ConstantVelocityModel(dim=2, dt=2.0)
        B = model.control_matrix

        self.assertEqual(B.shape, (4, 2))
        # Position: 0.5 * a * dt^2, velocity: a * dt
        np.testing.assert_allclose(B @ np.array([1.0, 0.0]), [2.0, 0.0, 2.0, 0.0])

    def test_process_noise(self):
        model = ConstantVelocityModel(dim=1, dt=1.0, q=3.0)
        Q = model.process_noise

        np.testing.assert_allclose(Q, [[1.0, 1.5], [1.5, 3.0]])
        np.testing.assert_allclose(Q, Q.T)

    def test_position_measurement(self):
        model = PositionMeasurementModel(dim=2, r=5.0)
        H = model.measurement_matrix

        self.assertEqual(H.shape, (2, 4))
        np.testing.assert_array_equal(H @ np.array([10.0, 20.0, 1.0, 2.0]), [10.0, 20.0])
        np.testing.assert_array_equal(model.measurement_noise, 5.0 * np.eye(2))

    def test_invalid_parameters(self):
        with self.assertRaises(ValueError):
            ConstantVelocityModel(dim=0)
        with self.assertRaises(ValueError):
            ConstantVelocityModel(dt=0.0)
        with self.assertRaises(ValueError):
            ConstantVelocityModel(q=-1.0)
        with self.assertRaises(ValueError):
            PositionMeasurementModel(r=-1.0)

    def test_time_step_is_read_only(self):
        model = ConstantVelocityModel(dim=1, dt=1.0)

        with self.assertRaises(AttributeError):
            model.dt = 2.0
        self.assertEqual(model.dt, 1.0)

    def test_noise_intensity_change(self):
        """A new q reaches the filter while A keeps the construction time step."""
        process = ConstantVelocityModel(dim=1, dt=1.0, q=1.0, initial_state=[0.0, 1.0],
                                        initial_covariance=np.zeros((2, 2)))
        kf = KalmanFilter(process, PositionMeasurementModel(dim=1, r=1.0))

        process.q = 3.0
        x = kf.predict()

        np.testing.assert_allclose(x, [1.0, 1.0])
        np.testing.assert_allclose(kf.error_covariance, [[1.0, 1.5], [1.5, 3.0]])


class TestKalmanFilterConstruction(unittest.TestCase):
    """Test KalmanFilter construction and validation."""

    def test_defaults(self):
        """Missing initial estimate is zero, missing covariance is Q."""
        Q = np.array([[0.2, 0.05], [0.05, 0.1]])
        kf = KalmanFilter(DefaultProcessModel(np.eye(2), process_noise=Q),
                          DefaultMeasurementModel([[1.0, 0.0]], [[0.5]]))

        self.assertEqual(kf.state_dimension, 2)
        self.assertEqual(kf.measurement_dimension, 1)
        np.testing.assert_array_equal(kf.state_estimation, np.zeros(2))
        np.testing.assert_array_equal(kf.error_covariance, Q)
        self.assertIs(kf.state, FilterState.INITIALIZED)
        self.assertIsNone(kf.predicted_state_estimation)
        self.assertIsNone(kf.innovation)

    def test_initial_estimate(self):
        kf = KalmanFilter(DefaultProcessModel(np.eye(2), process_noise=np.eye(2),
                                              initial_state=[1.0, 2.0], initial_covariance=3 * np.eye(2)),
                          DefaultMeasurementModel(np.eye(2), np.eye(2)))

        np.testing.assert_array_equal(kf.state_estimation, [1.0, 2.0])
        np.testing.assert_array_equal(kf.error_covariance, 3 * np.eye(2))

    def test_missing_models(self):
        measurement = DefaultMeasurementModel(np.eye(1), np.eye(1))
        with self.assertRaises(ValueError):
            KalmanFilter(None, measurement)
        with self.assertRaises(ValueError):
            KalmanFilter(DefaultProcessModel(1.0, process_noise=1.0), None)

    def test_non_square_transition(self):
        with self.assertRaises(DimensionMismatchError):
            KalmanFilter(DefaultProcessModel(np.ones((2, 3)), process_noise=np.eye(2)),
                         DefaultMeasurementModel(np.ones((1, 2)), np.eye(1)))

    def test_dimension_mismatches(self):
        """Every incompatible model matrix is rejected at construction."""
        measurement = DefaultMeasurementModel([[1.0, 0.0]], [[1.0]])
        cases = [
            # Initial state of the wrong length
            (DefaultProcessModel(np.eye(2), process_noise=np.eye(2), initial_state=[1.0, 2.0, 3.0]), measurement),
            # Initial covariance of the wrong shape
            (DefaultProcessModel(np.eye(2), process_noise=np.eye(2), initial_covariance=np.eye(3)), measurement),
            # Control matrix rows
            (DefaultProcessModel(np.eye(2), control=np.ones((3, 1)), process_noise=np.eye(2)), measurement),
            # Process noise shape
            (DefaultProcessModel(np.eye(2), process_noise=np.eye(3)), measurement),
            # Measurement matrix columns
            (DefaultProcessModel(np.eye(2), process_noise=np.eye(2)),
             DefaultMeasurementModel([[1.0, 0.0, 0.0]], [[1.0]])),
            # Measurement noise shape
            (DefaultProcessModel(np.eye(2), process_noise=np.eye(2)),
             DefaultMeasurementModel([[1.0, 0.0]], np.eye(2))),
        ]
        for process, meas in cases:
            with self.assertRaises(DimensionMismatchError):
                KalmanFilter(process, meas)

    def test_invalid_threshold(self):
        with self.assertRaises(ValueError):
            KalmanFilter(DefaultProcessModel(1.0, process_noise=1.0),
                         DefaultMeasurementModel(1.0, 1.0), singularity_threshold=0.0)


class TestKalmanFilter(unittest.TestCase):
    """Test predict/correct cycles."""

    def setUp(self):
        """Set up a 2-D constant velocity tracker."""
        self.process = ConstantVelocityModel(dim=2, dt=0.1, q=0.5,
                                             initial_state=[0.0, 0.0, 1.0, 0.5],
                                             initial_covariance=np.eye(4))
        self.measurement = PositionMeasurementModel(dim=2, r=0.25)
        self.kf = KalmanFilter(self.process, self.measurement)

    def test_predict(self):
        """Prediction moves the position by velocity * dt."""
        x = self.kf.predict()

        np.testing.assert_allclose(x, [0.1, 0.05, 1.0, 0.5])
        self.assertIs(self.kf.state, FilterState.UPDATED)
        self.assertEqual(self.kf.prediction_count, 1)
        np.testing.assert_allclose(self.kf.predicted_state_estimation, x)

    def test_predict_covariance(self):
        A = self.process.state_transition_matrix
        Q = self.process.process_noise

        self.kf.predict()

        np.testing.assert_allclose(self.kf.error_covariance, A @ A.T + Q)

    def test_predict_with_control(self):
        x = self.kf.predict([10.0, 0.0])

        # 0.5 * 10 * 0.01 = 0.05 extra position, 10 * 0.1 = 1.0 extra velocity
        np.testing.assert_allclose(x, [0.15, 0.05, 2.0, 0.5])

    def test_predict_without_control_equals_zero_control(self):
        other = KalmanFilter(self.process, self.measurement)

        for _ in range(5):
            self.kf.predict()
            other.predict(np.zeros(2))

        np.testing.assert_array_equal(self.kf.state_estimation, other.state_estimation)
        np.testing.assert_array_equal(self.kf.error_covariance, other.error_covariance)

    def test_predict_control_dimension_mismatch(self):
        with self.assertRaises(DimensionMismatchError) as ctx:
            self.kf.predict([1.0, 2.0, 3.0])
        self.assertEqual(ctx.exception.actual, 3)
        self.assertEqual(ctx.exception.expected, 2)

    def test_control_without_control_matrix(self):
        kf = KalmanFilter(DefaultProcessModel(1.0, process_noise=0.1), DefaultMeasurementModel(1.0, 0.1))
        with self.assertRaises(DimensionMismatchError):
            kf.predict([1.0])

    def test_correct(self):
        """Correction pulls the estimate towards the measurement and shrinks uncertainty."""
        self.kf.predict()
        prior_uncertainty = self.kf.get_uncertainty()

        x = self.kf.correct([1.0, 1.0])

        self.assertGreater(x[0], 0.1)
        self.assertGreater(x[1], 0.05)
        self.assertEqual(self.kf.correction_count, 1)
        self.assertTrue(np.all(self.kf.get_uncertainty()[:2] < prior_uncertainty[:2]))
        np.testing.assert_allclose(self.kf.innovation, [0.9, 0.95])

    def test_correct_formula(self):
        """Check the correction against the closed form equations."""
        self.kf.predict()
        P = self.kf.error_covariance
        x = self.kf.state_estimation
        H = self.measurement.measurement_matrix
        R = self.measurement.measurement_noise
        z = np.array([0.3, -0.2])

        S = H @ P @ H.T + R
        K = P @ H.T @ np.linalg.inv(S)
        expected_x = x + K @ (z - H @ x)
        expected_P = (np.eye(4) - K @ H) @ P

        self.kf.correct(z)

        np.testing.assert_allclose(self.kf.state_estimation, expected_x)
        np.testing.assert_allclose(self.kf.error_covariance, expected_P)
        np.testing.assert_allclose(self.kf.innovation_covariance, S)

    def test_correct_dimension_mismatch(self):
        with self.assertRaises(DimensionMismatchError):
            self.kf.correct([1.0, 2.0, 3.0])
        with self.assertRaises(ValueError):
            self.kf.correct(None)

    def test_singular_innovation_covariance(self):
        """A singular S is reported and leaves the filter untouched."""
        kf = KalmanFilter(DefaultProcessModel(np.eye(2), process_noise=np.eye(2), initial_covariance=np.eye(2)),
                          DefaultMeasurementModel([[1.0, 0.0], [1.0, 0.0]], np.zeros((2, 2))))
        before_x = kf.state_estimation
        before_P = kf.error_covariance

        with self.assertRaises(SingularMatrixError):
            kf.correct([1.0, 1.0])

        np.testing.assert_array_equal(kf.state_estimation, before_x)
        np.testing.assert_array_equal(kf.error_covariance, before_P)
        self.assertEqual(kf.correction_count, 0)

    def test_accessors_return_copies(self):
        x = self.kf.state_estimation
        P = self.kf.error_covariance
        x[:] = 100.0
        P[:, :] = 100.0

        np.testing.assert_array_equal(self.kf.state_estimation, [0.0, 0.0, 1.0, 0.5])
        np.testing.assert_array_equal(self.kf.error_covariance, np.eye(4))

        returned = self.kf.predict()
        returned[0] = 42.0
        self.assertNotEqual(self.kf.state_estimation[0], 42.0)

    def test_covariance_stays_symmetric(self):
        rng = np.random.default_rng(42)
        A = np.eye(3) + 0.1 * rng.standard_normal((3, 3))
        L = rng.standard_normal((3, 3))
        Q = 0.1 * L @ L.T + 0.01 * np.eye(3)
        H = rng.standard_normal((2, 3))
        R = 0.5 * np.eye(2)
        kf = KalmanFilter(DefaultProcessModel(A, process_noise=Q, initial_covariance=np.eye(3)),
                          DefaultMeasurementModel(H, R))

        for _ in range(50):
            kf.predict()
            self.assertTrue(is_symmetric(kf.error_covariance))
            kf.correct(rng.standard_normal(2))
            self.assertTrue(is_symmetric(kf.error_covariance))

    def test_constant_position_converges(self):
        """Repeated corrections towards a fixed value converge monotonically."""
        kf = KalmanFilter(DefaultProcessModel(1.0, process_noise=1e-5, initial_state=0.0, initial_covariance=1.0),
                          DefaultMeasurementModel(1.0, 0.1))
        target = 5.0

        errors = []
        for _ in range(30):
            kf.predict()
            kf.correct([target])
            errors.append(abs(kf.state_estimation[0] - target))

        for previous, current in zip(errors, errors[1:]):
            self.assertLess(current, previous)
        self.assertLess(errors[-1], 0.05)

    def test_time_varying_process_noise(self):
        """Q is fetched from the model on every prediction."""
        process = CountingProcessModel(1.0, process_noise=1.0, initial_covariance=0.0)
        kf = KalmanFilter(process, DefaultMeasurementModel(1.0, 1.0))
        reads_after_init = process.noise_reads

        kf.predict()
        first = kf.error_covariance[0, 0]
        kf.predict()
        second = kf.error_covariance[0, 0]

        self.assertEqual(process.noise_reads, reads_after_init + 2)
        self.assertAlmostEqual(first, reads_after_init + 1)
        self.assertAlmostEqual(second, first + reads_after_init + 2)

    def test_time_varying_measurement_noise(self):
        """R is fetched from the model on every correction."""
        self.kf.predict()
        self.kf.correct([0.0, 0.0])
        low_noise_S = self.kf.innovation_covariance

        self.measurement.r = 10.0
        self.kf.predict()
        self.kf.correct([0.0, 0.0])

        self.assertLess(low_noise_S[0, 0], 2.0)
        self.assertGreater(self.kf.innovation_covariance[0, 0], 10.0)

    def test_get_statistics(self):
        self.kf.predict()
        self.kf.correct([0.1, 0.1])

        stats = self.kf.get_statistics()

        self.assertEqual(stats['state'], 'updated')
        self.assertEqual(stats['predictions'], 1)
        self.assertEqual(stats['corrections'], 1)
        self.assertIsInstance(stats['covariance_trace'], float)
        self.assertEqual(len(stats['state_uncertainty']), 4)

    def test_reset(self):
        self.kf.predict()
        self.kf.correct([1.0, 1.0])

        self.kf.reset()

        self.assertIs(self.kf.state, FilterState.INITIALIZED)
        self.assertEqual(self.kf.prediction_count, 0)
        self.assertEqual(self.kf.correction_count, 0)
        np.testing.assert_array_equal(self.kf.state_estimation, [0.0, 0.0, 1.0, 0.5])
        np.testing.assert_array_equal(self.kf.error_covariance, np.eye(4))


if __name__ == '__main__':
    unittest.main()
