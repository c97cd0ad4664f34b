"""
OrientationDecoder - Turns sensor quaternions into coarse angle buckets.

Converts each orientation update to roll/pitch/yaw and quantizes every
angle linearly across its full range. The decoder never rejects input:
a non-unit quaternion gives a defined (if meaningless) result, because
the control loop must keep running on a bad reading.
"""

import logging
import math
import threading
import time
from typing import Optional

from .types import (
    AngleBuckets,
    DecoderConfig,
    EulerAngles,
    OrientationSnapshot,
    Quaternion,
)


logger = logging.getLogger(__name__)

HALF_PI = math.pi / 2


def quaternion_to_euler(q: Quaternion) -> EulerAngles:
    """
    Convert a unit quaternion to Euler angles (radians).

    The asin argument is clamped to [-1, 1] so floating-point drift
    cannot produce NaN for pitch.
    """
    roll = math.atan2(2.0 * (q.w * q.x + q.y * q.z),
                      1.0 - 2.0 * (q.x * q.x + q.y * q.y))
    sinp = 2.0 * (q.w * q.y - q.z * q.x)
    pitch = math.asin(max(-1.0, min(1.0, sinp)))
    yaw = math.atan2(2.0 * (q.w * q.z + q.x * q.y),
                     1.0 - 2.0 * (q.y * q.y + q.z * q.z))
    return EulerAngles(roll=roll, pitch=pitch, yaw=yaw)


def quantize(angle: float, low: float, high: float, resolution: int) -> int:
    """
    Map an angle in [low, high] onto an integer bucket in [0, resolution).

    Args:
        angle: Angle to quantize (radians)
        low: Bottom of the angle's valid range
        high: Top of the angle's valid range
        resolution: Number of buckets

    Returns:
        Bucket index, clamped so that angle == high lands in the last bucket
    """
    if math.isnan(angle):
        return 0
    scaled = (angle - low) / (high - low) * resolution
    if math.isinf(scaled):
        return 0 if scaled < 0 else resolution - 1
    return max(0, min(resolution - 1, math.floor(scaled)))


class OrientationDecoder:
    """
    Holds the most recent decoded orientation.

    update() may be called from the sensor's callback thread while the
    poll loop reads; the cached record is swapped under a lock so a
    reader always gets one whole snapshot.
    """

    def __init__(self, config: Optional[DecoderConfig] = None) -> None:
        """
        Initialize decoder.

        Args:
            config: Decoder configuration (bucket resolution)
        """
        self.config = config or DecoderConfig()
        self._lock = threading.Lock()
        self._snapshot = OrientationSnapshot()

    @property
    def resolution(self) -> int:
        return self.config.resolution

    def update(self, quaternion: Quaternion, timestamp: Optional[float] = None) -> None:
        """
        Decode a new orientation and overwrite the cached state.

        Args:
            quaternion: Unit orientation quaternion from the sensor
            timestamp: Time of the reading (defaults to now)
        """
        angles = quaternion_to_euler(quaternion)
        res = self.config.resolution
        buckets = AngleBuckets(
            roll=quantize(angles.roll, -math.pi, math.pi, res),
            pitch=quantize(angles.pitch, -HALF_PI, HALF_PI, res),
            yaw=quantize(angles.yaw, -math.pi, math.pi, res),
        )
        snapshot = OrientationSnapshot(
            buckets=buckets,
            angles=angles,
            timestamp=time.time() if timestamp is None else timestamp,
        )
        with self._lock:
            self._snapshot = snapshot

    def reset(self) -> None:
        """Forget the last orientation (sensor lost)"""
        logger.debug("Decoder reset")
        with self._lock:
            self._snapshot = OrientationSnapshot()

    def snapshot(self) -> OrientationSnapshot:
        """Return the cached angles and buckets as one consistent record"""
        with self._lock:
            return self._snapshot

    def current_roll_bucket(self) -> int:
        return self.snapshot().buckets.roll

    def current_pitch_bucket(self) -> int:
        return self.snapshot().buckets.pitch

    def current_yaw_bucket(self) -> int:
        return self.snapshot().buckets.yaw

    @property
    def angles(self) -> Optional[EulerAngles]:
        """Last decoded angles, or None before the first update"""
        return self.snapshot().angles

    @property
    def has_reading(self) -> bool:
        return self.snapshot().has_reading
