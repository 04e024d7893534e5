#!/usr/bin/env python3
"""
Basic usage example.

Tracks a target moving on a circle with a constant velocity Kalman filter
and checks every estimate against a convex geofence.
"""

import sys
import os
import numpy as np

# Add package to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from mathkit.config import Config, setup_logging
from mathkit.exceptions import SingularMatrixError
from mathkit.geometry import ConvexHull2D, Location
from mathkit.kalman import KalmanFilter, ConstantVelocityModel, PositionMeasurementModel


def simulate_target(duration=60, dt=0.1, seed=0):
    """
    Simulate a target moving on a circle.

    Args:
        duration: Simulation duration in seconds
        dt: Time step in seconds
        seed: Random seed for the measurement noise

    Yields:
        (t, true_position, measured_position) tuples
    """
    rng = np.random.default_rng(seed)

    speed = 2.0  # m/s
    radius = 20.0  # meters
    angular_velocity = speed / radius  # rad/s
    noise = 0.5  # meters

    t = 0.0
    while t < duration:
        position = np.array([radius * np.sin(angular_velocity * t),
                             radius * (1 - np.cos(angular_velocity * t))])
        yield t, position, position + rng.normal(0.0, noise, size=2)
        t += dt


def main(config_file=None):
    """Main example function."""
    config = Config(config_file)
    logger = setup_logging(config)

    dt = 0.1
    process = ConstantVelocityModel(dim=2, dt=dt, q=config.process_noise["acceleration"],
                                    initial_covariance=np.diag([10.0, 10.0, 4.0, 4.0]))
    measurement = PositionMeasurementModel(dim=2, r=config.measurement_noise["position"])
    kf = KalmanFilter(process, measurement, config.singularity_threshold)

    # Octagonal geofence around the circle
    angles = np.linspace(0.0, 2 * np.pi, 8, endpoint=False)
    fence = ConvexHull2D([(30.0 * np.cos(a), 20.0 + 30.0 * np.sin(a)) for a in angles],
                         config.hull_tolerance)
    region = fence.create_region()

    print("Kalman Filter Tracking - Basic Usage Example")
    print("=" * 50)
    print(f"Geofence: {len(fence)} vertices, area {region.size:.1f} m^2, perimeter {fence.perimeter():.1f} m")
    print()

    last_print_time = -np.inf
    print_interval = 10.0
    for t, truth, z in simulate_target(dt=dt):
        kf.predict()
        try:
            x = kf.correct(z)
        except SingularMatrixError:
            logger.warning("Skipping measurement at t=%.1f", t)
            continue

        location = region.check_point(x[:2])
        if location is not Location.INSIDE:
            logger.warning("Estimate %s is %s the geofence at t=%.1f", x[:2], location.value, t)

        if t - last_print_time >= print_interval:
            print_status(t, truth, kf, fence)
            last_print_time = t

    stats = kf.get_statistics()
    print("=== Final Statistics ===")
    print(f"Predictions: {stats['predictions']}")
    print(f"Corrections: {stats['corrections']}")
    print(f"Covariance trace: {stats['covariance_trace']:.4f}")


def print_status(t, truth, kf, fence):
    """Print current tracking status."""
    x = kf.state_estimation
    error = np.linalg.norm(x[:2] - truth)
    clearance = min(segment.distance(x[:2]) for segment in fence.get_line_segments())

    print(f"Time: {t:.1f}s")
    print(f"  Position: [{x[0]:6.2f}, {x[1]:6.2f}] m (error {error:4.2f} m)")
    print(f"  Velocity: [{x[2]:5.2f}, {x[3]:5.2f}] m/s")
    print(f"  Distance to fence: {clearance:5.2f} m")
    print()


if __name__ == "__main__":
    main(sys.argv[1] if len(sys.argv) > 1 else None)
