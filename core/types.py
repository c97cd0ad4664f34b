"""
Core data types for the armsteer control system.

All the data structures that flow between the sensor, the decoder,
the resolver and the output sinks, fully typed.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple
import math
import time


class Gesture(Enum):
    """Hand pose reported by the armband's own classifier"""
    NEUTRAL = "rest"
    UNKNOWN = "unknown"
    FIST = "fist"
    SPREAD = "fingersSpread"
    WAVE_IN = "waveIn"
    WAVE_OUT = "waveOut"
    DOUBLE_TAP = "doubleTap"

    @property
    def is_known(self) -> bool:
        """True for a deliberate pose (anything but rest/unknown)"""
        return self not in (Gesture.NEUTRAL, Gesture.UNKNOWN)


class Arm(Enum):
    """Arm the sensor is worn on"""
    LEFT = "left"
    RIGHT = "right"
    UNKNOWN = "unknown"


class UnlockMode(Enum):
    """How long the sensor stays unlocked for pose events"""
    TIMED = "timed"    # Relock after a short delay
    HOLD = "hold"      # Stay unlocked until told otherwise


class LateralCommand(Enum):
    """Steering axis decision, derived from yaw"""
    TURN_RIGHT = "Right"
    TURN_LEFT = "Left"
    STRAIGHT = "Straight"
    IDLE = ""


class LongitudinalCommand(Enum):
    """Drive axis decision, derived from gesture"""
    FORWARD = "Forward"
    REVERSE = "Reverse"
    NONE = ""


class SupervisorState(Enum):
    """Supervisor state machine states"""
    DISCONNECTED = "disconnected"  # No sensor
    CONNECTING = "connecting"      # Waiting for a sensor to answer
    CONNECTED = "connected"        # Sensor paired, not on an arm
    SYNCED = "synced"              # Worn on an arm, commands are emitted
    STALE = "stale"                # Orientation stopped arriving


@dataclass(frozen=True)
class Quaternion:
    """
    Unit orientation quaternion as delivered by the sensor.

    Unit norm is a precondition placed on the caller, it is not checked.
    """
    w: float
    x: float
    y: float
    z: float

    @classmethod
    def identity(cls) -> "Quaternion":
        """Zero rotation"""
        return cls(w=1.0, x=0.0, y=0.0, z=0.0)

    @classmethod
    def from_euler(cls, roll: float, pitch: float, yaw: float) -> "Quaternion":
        """Build a quaternion from roll/pitch/yaw (radians, ZYX order)"""
        cr, sr = math.cos(roll / 2), math.sin(roll / 2)
        cp, sp = math.cos(pitch / 2), math.sin(pitch / 2)
        cy, sy = math.cos(yaw / 2), math.sin(yaw / 2)
        return cls(
            w=cr * cp * cy + sr * sp * sy,
            x=sr * cp * cy - cr * sp * sy,
            y=cr * sp * cy + sr * cp * sy,
            z=cr * cp * sy - sr * sp * cy,
        )

    @property
    def norm(self) -> float:
        return math.sqrt(self.w ** 2 + self.x ** 2 + self.y ** 2 + self.z ** 2)


@dataclass(frozen=True)
class EulerAngles:
    """Roll/pitch/yaw in radians"""
    roll: float    # (-pi, pi]
    pitch: float   # [-pi/2, pi/2]
    yaw: float     # (-pi, pi]


@dataclass(frozen=True)
class AngleBuckets:
    """Quantized angles, each in [0, resolution)"""
    roll: int = 0
    pitch: int = 0
    yaw: int = 0


@dataclass(frozen=True)
class OrientationSnapshot:
    """
    One consistent read of the decoder state.

    angles is None until the first orientation update arrives.
    """
    buckets: AngleBuckets = field(default_factory=AngleBuckets)
    angles: Optional[EulerAngles] = None
    timestamp: float = 0.0

    @property
    def has_reading(self) -> bool:
        return self.angles is not None


@dataclass(frozen=True)
class MovementCommand:
    """
    Output of the CommandResolver.

    Lateral and longitudinal decisions are independent axes,
    reported together.
    """
    lateral: LateralCommand
    longitudinal: LongitudinalCommand
    timestamp: float = field(default_factory=time.time, compare=False)

    @classmethod
    def neutral(cls) -> "MovementCommand":
        """No directional statement on either axis"""
        return cls(lateral=LateralCommand.IDLE, longitudinal=LongitudinalCommand.NONE)

    @property
    def is_neutral(self) -> bool:
        return (self.lateral == LateralCommand.IDLE
                and self.longitudinal == LongitudinalCommand.NONE)

    @property
    def label(self) -> str:
        """Flattened text, e.g. 'Forward Right'"""
        parts = [self.longitudinal.value, self.lateral.value]
        return " ".join(p for p in parts if p)


@dataclass(frozen=True)
class SessionSnapshot:
    """Everything the poll loop needs, read in one go"""
    orientation: OrientationSnapshot
    gesture: Gesture = Gesture.UNKNOWN
    on_arm: bool = False
    arm: Arm = Arm.UNKNOWN
    unlocked: bool = False


@dataclass
class DecoderConfig:
    """Configuration for the OrientationDecoder"""
    resolution: int = 18               # Buckets per axis

    def __post_init__(self) -> None:
        """Validate ranges"""
        assert self.resolution > 0, f"resolution must be positive: {self.resolution}"


# Turn ranges as laid out over 18 buckets; other resolutions cover the same yaw
REFERENCE_RESOLUTION = 18
REFERENCE_TURN_RIGHT = (12, 16)
REFERENCE_TURN_LEFT = (0, 5)


def scale_bounds(bounds: Tuple[int, int], resolution: int) -> Tuple[int, int]:
    """
    Rescale exclusive bucket bounds from REFERENCE_RESOLUTION.

    The buckets strictly inside the reference bounds are mapped to the
    same span of yaw at the new resolution.
    """
    scale = resolution / REFERENCE_RESOLUTION
    low, high = bounds
    first = int(round((low + 1) * scale))
    end = int(round(high * scale))
    return (first - 1, end)


@dataclass
class ResolverConfig:
    """
    Configuration for the CommandResolver.

    Turn ranges are exclusive on both ends. Left unset they are scaled
    from the 18-bucket layout, so the same yaw steers the same way at
    any resolution. straight_buckets defaults to bucket 0 and the
    centre bucket (zero yaw).
    """
    resolution: int = 18
    turn_right: Optional[Tuple[int, int]] = None
    turn_left: Optional[Tuple[int, int]] = None
    straight_buckets: Optional[Tuple[int, ...]] = None
    forward_gestures: Tuple[Gesture, ...] = (Gesture.FIST,)
    reverse_gestures: Tuple[Gesture, ...] = (Gesture.SPREAD,)

    def __post_init__(self) -> None:
        """Validate ranges and fill in defaults"""
        assert self.resolution > 0, f"resolution must be positive: {self.resolution}"
        if self.turn_right is None:
            self.turn_right = scale_bounds(REFERENCE_TURN_RIGHT, self.resolution)
        if self.turn_left is None:
            self.turn_left = scale_bounds(REFERENCE_TURN_LEFT, self.resolution)
        assert self.turn_right[0] <= self.turn_right[1], f"bad turn_right: {self.turn_right}"
        assert self.turn_left[0] <= self.turn_left[1], f"bad turn_left: {self.turn_left}"
        if self.straight_buckets is None:
            self.straight_buckets = (0, self.resolution // 2)


@dataclass
class SupervisorConfig:
    """Configuration for the Supervisor"""
    loop_interval: float = 0.05        # Main loop interval (20Hz)
    connect_timeout: float = 10.0      # Seconds to wait for the sensor per attempt
    max_connect_attempts: int = 3      # Give up after this many failed connects
    reconnect_delay: float = 1.0       # Wait N seconds between connect attempts
    orientation_timeout: float = 1.0   # No orientation for this long -> STALE
