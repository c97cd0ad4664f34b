"""
Text rendering of the decoder buckets and the resolved command.

Used by the console sink and the --status launcher mode.
"""

from typing import Optional

from .types import AngleBuckets, Arm, MovementCommand, SessionSnapshot

POSE_FIELD_WIDTH = 14


def render_bar(bucket: int, resolution: int) -> str:
    """Bar graph for one bucket, e.g. '[***   ]'"""
    filled = max(0, min(resolution, bucket))
    return "[" + "*" * filled + " " * (resolution - filled) + "]"


def render_buckets(buckets: AngleBuckets, resolution: int) -> str:
    """Roll, pitch and yaw bars; the yaw bar also shows its bucket and complement"""
    yaw_bar = render_bar(buckets.yaw, resolution)
    return (
        render_bar(buckets.roll, resolution)
        + render_bar(buckets.pitch, resolution)
        + f"{yaw_bar[:-1]}{buckets.yaw} {resolution - buckets.yaw}]"
    )


def render_session(snapshot: SessionSnapshot, resolution: int) -> str:
    """
    Full status line.

    Lock state, arm and pose are only shown while the sensor is worn.
    """
    line = render_buckets(snapshot.orientation.buckets, resolution)
    if not snapshot.on_arm:
        return line

    lock = "unlocked" if snapshot.unlocked else "locked  "
    arm = {Arm.LEFT: "L", Arm.RIGHT: "R"}.get(snapshot.arm, "?")
    pose = snapshot.gesture.value.ljust(POSE_FIELD_WIDTH)
    return line + f"[{lock}][{arm}][{pose}]"


def render_command(command: Optional[MovementCommand]) -> str:
    """Human-readable command, '' when there is nothing to say"""
    if command is None:
        return ""
    return command.label
