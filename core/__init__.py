"""
armsteer Core - Orientation-to-command mapping engine.

This package contains the core logic for steering a remote device
from a wearable motion sensor:
- Types: Data classes for orientation, gestures, commands
- Decoder: Quaternion -> Euler angles -> angle buckets
- Resolver: Yaw bucket + gesture -> movement command
- Interfaces: Protocols for pluggable components (sensor, sink)
- Session: Sensor event state behind the callback table
- Supervisor: Polling loop and connection state machine
"""

from .types import (
    Quaternion,
    EulerAngles,
    AngleBuckets,
    OrientationSnapshot,
    Gesture,
    Arm,
    UnlockMode,
    LateralCommand,
    LongitudinalCommand,
    MovementCommand,
    SessionSnapshot,
    SupervisorState,
    DecoderConfig,
    ResolverConfig,
    SupervisorConfig,
)
from .decoder import OrientationDecoder, quaternion_to_euler, quantize
from .resolver import CommandResolver
from .interfaces import (
    SensorCallbacks,
    SensorDevice,
    CommandSink,
)

__all__ = [
    "Quaternion",
    "EulerAngles",
    "AngleBuckets",
    "OrientationSnapshot",
    "Gesture",
    "Arm",
    "UnlockMode",
    "LateralCommand",
    "LongitudinalCommand",
    "MovementCommand",
    "SessionSnapshot",
    "SupervisorState",
    "DecoderConfig",
    "ResolverConfig",
    "SupervisorConfig",
    "OrientationDecoder",
    "quaternion_to_euler",
    "quantize",
    "CommandResolver",
    "SensorCallbacks",
    "SensorDevice",
    "CommandSink",
]
