"""
CommandResolver - Turns yaw bucket + gesture into a movement command.

Two independent classifications are fused into one MovementCommand:
- Lateral: yaw bucket -> turn right / turn left / straight / idle
- Longitudinal: gesture -> forward / reverse / none

The resolver is stateless. The same inputs always give the same
command; there is no memoized command and no hysteresis.
"""

import logging
from typing import Optional

from .types import (
    Gesture,
    LateralCommand,
    LongitudinalCommand,
    MovementCommand,
    ResolverConfig,
)


logger = logging.getLogger(__name__)


class CommandResolver:
    """
    Maps {gesture, yaw bucket} to exactly one MovementCommand.

    Every integer bucket is accepted; out-of-range values from a
    misbehaving caller are clamped before lookup.
    """

    def __init__(self, config: Optional[ResolverConfig] = None) -> None:
        """
        Initialize resolver with configuration.

        Args:
            config: Resolver configuration (bucket ranges, gesture sets)
        """
        self.config = config or ResolverConfig()

    def resolve(self, gesture: Gesture, yaw_bucket: int) -> MovementCommand:
        """
        Resolve the current command.

        Args:
            gesture: Last gesture reported by the sensor
            yaw_bucket: Current quantized yaw

        Returns:
            MovementCommand pairing the lateral and longitudinal decisions
        """
        return MovementCommand(
            lateral=self.lateral_from_yaw(yaw_bucket),
            longitudinal=self.longitudinal_from_gesture(gesture),
        )

    def lateral_from_yaw(self, yaw_bucket: int) -> LateralCommand:
        """
        Classify the yaw bucket, first matching rule wins.

        Buckets covered by no rule (the dead zones between the turn
        ranges) give IDLE.
        """
        bucket = self._clamp(yaw_bucket)
        if bucket != yaw_bucket:
            logger.debug(f"Yaw bucket {yaw_bucket} out of range, clamped to {bucket}")

        if self._strictly_inside(bucket, self.config.turn_right):
            return LateralCommand.TURN_RIGHT

        if self._strictly_inside(bucket, self.config.turn_left):
            return LateralCommand.TURN_LEFT

        if bucket in self.config.straight_buckets:
            return LateralCommand.STRAIGHT

        return LateralCommand.IDLE

    def longitudinal_from_gesture(self, gesture: Gesture) -> LongitudinalCommand:
        """Classify the gesture"""
        if gesture in self.config.forward_gestures:
            return LongitudinalCommand.FORWARD
        if gesture in self.config.reverse_gestures:
            return LongitudinalCommand.REVERSE
        return LongitudinalCommand.NONE

    def _clamp(self, bucket: int) -> int:
        """Clamp bucket to [0, resolution - 1]"""
        return max(0, min(self.config.resolution - 1, int(bucket)))

    @staticmethod
    def _strictly_inside(bucket: int, bounds: tuple) -> bool:
        low, high = bounds
        return low < bucket < high
