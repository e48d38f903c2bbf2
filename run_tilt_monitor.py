#!/usr/bin/env python3
"""Main entry point to compare the tilt estimators.

Prints, side by side for roll and pitch, the accelerometer angle, raw gyro
integration, complementary filter and Kalman filter outputs, plus the die
temperature.

Examples:
    # Live MPU6050 on I2C bus 1, pitch restricted to +/-90 degrees
    python run_tilt_monitor.py

    # Restrict roll instead of pitch
    python run_tilt_monitor.py --restricted-axis roll

    # Run for 60 seconds
    python run_tilt_monitor.py --duration 60

    # No hardware: replay a synthetic tilt sweep and plot the result
    python run_tilt_monitor.py --simulate --plot comparison.png
"""

import argparse
import dataclasses
import logging
import sys

import numpy as np

from fusion_pipeline import ColumnReporter, FusionCycle
from tilt_estimation import EstimatorConfig, RestrictedAxis


def parse_args():
    """Parse command-line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description='MPU6050 roll/pitch estimator comparison',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    # Estimator parameters
    parser.add_argument(
        '--config',
        type=str,
        default='config/estimator_params.yaml',
        help='Path to estimator parameters YAML'
    )
    parser.add_argument(
        '--restricted-axis',
        choices=[axis.value for axis in RestrictedAxis],
        default=None,
        help='Axis confined to +/-90 degrees (default: from config)'
    )

    # Hardware parameters
    parser.add_argument(
        '--bus',
        type=int,
        default=1,
        help='I2C bus number (default: 1)'
    )
    parser.add_argument(
        '--address',
        type=lambda x: int(x, 0),  # Support 0x68 hex notation
        default=0x68,
        help='MPU6050 I2C address (default: 0x68)'
    )
    parser.add_argument(
        '--duration',
        type=float,
        default=None,
        help='Run duration in seconds (default: run until Ctrl+C)'
    )

    # Offline mode
    parser.add_argument(
        '--simulate',
        action='store_true',
        help='Replay a synthetic tilt sweep instead of reading hardware'
    )
    parser.add_argument(
        '--plot',
        type=str,
        default=None,
        help='Save a comparison plot to this path (simulate mode only)'
    )

    parser.add_argument(
        '--log-level',
        default='INFO',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (default: INFO)'
    )

    return parser.parse_args()


def load_config(args) -> EstimatorConfig:
    """Load estimator configuration and apply command-line overrides."""
    config = EstimatorConfig.from_yaml(args.config)
    if args.restricted_axis is not None:
        config = dataclasses.replace(
            config, restricted_axis=RestrictedAxis(args.restricted_axis)
        )
    return config


def run_simulation(cycle: FusionCycle, args) -> None:
    """Replay a synthetic sweep through the estimators."""
    from simulation import generate_samples, run_estimators, tilt_sweep

    sampling_period_s = 0.01
    duration_s = args.duration if args.duration else 16.0
    trajectory = tilt_sweep(duration_s, sampling_period_s)
    gyro_bias_dps = np.array([1.5, -0.8, 0.0])

    samples = generate_samples(
        trajectory[:, 0],
        trajectory[:, 1],
        sampling_period_s,
        accel_noise_lsb=300.0,
        gyro_noise_lsb=20.0,
        gyro_bias_dps=gyro_bias_dps,
        seed=0,
    )
    history = run_estimators(cycle, samples, sampling_period_s)

    for name, estimate in (
        ('gyro', history.roll_gyro_deg),
        ('complementary', history.roll_complementary_deg),
        ('kalman', history.roll_kalman_deg),
    ):
        error = np.abs(estimate - trajectory[:len(estimate), 0])
        print(f"roll {name:<14} median |error| {np.median(error):6.2f} deg")

    if args.plot:
        from debug import plot_estimator_comparison
        plot_estimator_comparison(history, true_angles_deg=trajectory, save_path=args.plot)
        print(f"Plot saved to {args.plot}")


def run_hardware(cycle: FusionCycle, args) -> None:
    """Stream live MPU6050 samples through the estimators."""
    from hardware import MPU6050Interface, TiltMonitor

    print(f"Connecting to MPU6050 on I2C bus {args.bus} address 0x{args.address:02X}...")
    try:
        imu = MPU6050Interface(bus=args.bus, address=args.address)
    except (ImportError, OSError) as e:
        print(f"✗ Failed to connect to MPU6050: {e}")
        print("\nTroubleshooting:")
        print("  - Check I2C is enabled: sudo raspi-config > Interface Options > I2C")
        print("  - Test I2C detection: sudo i2cdetect -y 1")
        sys.exit(1)
    print("✓ I2C connection established")

    monitor = TiltMonitor(imu, cycle, reporter=ColumnReporter())
    try:
        stats = monitor.run(duration_s=args.duration)
        print(
            f"\n{stats.cycles} cycles, {stats.skipped_samples} skipped, "
            f"{stats.reseeds} reseeds, {stats.mean_rate_hz:.1f} Hz"
        )
    finally:
        print("\nClosing I2C connection...")
        imu.close()
        print("✓ Done")


def main():
    """Main entry point."""
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    try:
        config = load_config(args)
    except (OSError, ValueError) as e:
        print(f"✗ Failed to load estimator configuration: {e}")
        sys.exit(1)

    print("=" * 60)
    print("MPU6050 TILT ESTIMATOR COMPARISON")
    print("=" * 60)
    print(f"Restricted axis: {config.restricted_axis.value} (+/-90 deg)")
    print(f"Complementary:   alpha = {config.complementary_weight:.2f}")
    print(f"Source:          {'synthetic' if args.simulate else 'MPU6050'}")
    print("=" * 60)
    print()

    cycle = FusionCycle(config)
    if args.simulate:
        run_simulation(cycle, args)
    else:
        run_hardware(cycle, args)


if __name__ == '__main__':
    main()
