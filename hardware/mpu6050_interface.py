"""I2C communication interface for the MPU6050 IMU.

This module provides low-level register access to an MPU6050 wired to the
Raspberry Pi I2C bus. Each register pair holds a big-endian two's
complement 16-bit word.
"""

import logging
import time
from typing import Optional

try:
    from smbus2 import SMBus
    SMBUS_AVAILABLE = True
except ImportError:
    SMBUS_AVAILABLE = False
    SMBus = None

from fusion_pipeline import SensorSample


logger = logging.getLogger(__name__)

# I2C Device Addresses
MPU6050_ADDRESS = 0x68      # AD0 low
DEFAULT_I2C_BUS = 1         # Raspberry Pi I2C bus 1

# MPU6050 Register Addresses
PWR_MGMT_1 = 0x6B           # Power management
SMPLRT_DIV = 0x19           # Sample rate divider
ACCEL_XOUT_H = 0x3B
ACCEL_YOUT_H = 0x3D
ACCEL_ZOUT_H = 0x3F
TEMP_OUT_H = 0x41
GYRO_XOUT_H = 0x43
GYRO_YOUT_H = 0x45
GYRO_ZOUT_H = 0x47

SLEEP_MODE_DISABLED = 0x00
STARTUP_DELAY_S = 0.15


def to_signed_word(high_byte: int, low_byte: int) -> int:
    """Combine two register bytes into a signed 16-bit integer."""
    value = (high_byte << 8) + low_byte
    if value >= 0x8000:
        value = -(65536 - value)
    return value


class MPU6050Interface:
    """Register-level reader for the MPU6050.

    Example:
        >>> imu = MPU6050Interface(bus=1)
        >>> sample = imu.read_sample()
        >>> imu.close()
    """

    def __init__(
        self,
        bus: int = DEFAULT_I2C_BUS,
        address: int = MPU6050_ADDRESS,
        smbus: Optional[object] = None,
        startup_delay_s: float = STARTUP_DELAY_S,
    ) -> None:
        """Open the bus and wake the device.

        Args:
            bus: I2C bus number (default 1 for Raspberry Pi)
            address: MPU6050 I2C address (default 0x68)
            smbus: Already opened bus object, mainly for testing
            startup_delay_s: Time to let the sensor stabilize after wake-up

        Raises:
            ImportError: If smbus2 is not installed and no bus is given
            OSError: If the device cannot be woken up
        """
        if smbus is None:
            if not SMBUS_AVAILABLE:
                raise ImportError(
                    "smbus2 not installed. Install with: pip install smbus2"
                )
            smbus = SMBus(bus)

        self._bus_num = bus
        self._address = address
        self._bus = smbus

        self._bus.write_byte_data(self._address, PWR_MGMT_1, SLEEP_MODE_DISABLED)
        time.sleep(startup_delay_s)

        logger.info("MPU6050 initialized on bus %d at 0x%02X", bus, address)

    def read_word(self, register_high: int) -> int:
        """Read a signed 16-bit word starting at the high-byte register."""
        high = self._bus.read_byte_data(self._address, register_high)
        low = self._bus.read_byte_data(self._address, register_high + 1)
        return to_signed_word(high, low)

    def read_sample(self) -> Optional[SensorSample]:
        """Read accelerometer, gyroscope and temperature registers.

        Returns:
            SensorSample, or None if the bus reported an error
        """
        try:
            return SensorSample(
                accel_x=self.read_word(ACCEL_XOUT_H),
                accel_y=self.read_word(ACCEL_YOUT_H),
                accel_z=self.read_word(ACCEL_ZOUT_H),
                gyro_x=self.read_word(GYRO_XOUT_H),
                gyro_y=self.read_word(GYRO_YOUT_H),
                gyro_z=self.read_word(GYRO_ZOUT_H),
                temperature_raw=self.read_word(TEMP_OUT_H),
            )
        except OSError as exc:
            logger.warning("MPU6050 read failed: %s", exc)
            return None

    def close(self) -> None:
        """Close the I2C bus."""
        if self._bus is not None:
            self._bus.close()
            self._bus = None

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

    @property
    def address(self) -> int:
        return self._address
