"""Tests for core types"""

import math

import pytest
from core.types import (
    Quaternion,
    Gesture,
    LateralCommand,
    LongitudinalCommand,
    MovementCommand,
    OrientationSnapshot,
    AngleBuckets,
    DecoderConfig,
    ResolverConfig,
    SupervisorConfig,
    SupervisorState,
)


def test_quaternion_identity():
    """Test identity quaternion"""
    q = Quaternion.identity()
    assert (q.w, q.x, q.y, q.z) == (1.0, 0.0, 0.0, 0.0)
    assert q.norm == pytest.approx(1.0)


def test_quaternion_from_euler_is_unit():
    """Test from_euler produces unit quaternions"""
    q = Quaternion.from_euler(0.3, -0.7, 2.1)
    assert q.norm == pytest.approx(1.0)


def test_quaternion_from_euler_pure_yaw():
    """Test pure yaw rotation about z"""
    q = Quaternion.from_euler(0.0, 0.0, math.pi / 2)
    assert q.w == pytest.approx(math.cos(math.pi / 4))
    assert q.z == pytest.approx(math.sin(math.pi / 4))
    assert q.x == pytest.approx(0.0)
    assert q.y == pytest.approx(0.0)


def test_quaternion_is_immutable():
    """Test quaternions are frozen"""
    q = Quaternion.identity()
    with pytest.raises(Exception):
        q.w = 0.5


def test_gesture_is_known():
    """Test deliberate pose detection"""
    assert Gesture.FIST.is_known is True
    assert Gesture.SPREAD.is_known is True
    assert Gesture.WAVE_OUT.is_known is True
    assert Gesture.NEUTRAL.is_known is False
    assert Gesture.UNKNOWN.is_known is False


def test_movement_command_neutral():
    """Test neutral command"""
    cmd = MovementCommand.neutral()
    assert cmd.lateral == LateralCommand.IDLE
    assert cmd.longitudinal == LongitudinalCommand.NONE
    assert cmd.is_neutral is True
    assert cmd.label == ""


def test_movement_command_label():
    """Test flattened command text"""
    cmd = MovementCommand(LateralCommand.TURN_RIGHT, LongitudinalCommand.FORWARD)
    assert cmd.label == "Forward Right"

    cmd = MovementCommand(LateralCommand.STRAIGHT, LongitudinalCommand.NONE)
    assert cmd.label == "Straight"

    cmd = MovementCommand(LateralCommand.IDLE, LongitudinalCommand.REVERSE)
    assert cmd.label == "Reverse"


def test_movement_command_equality_ignores_timestamp():
    """Test commands compare by axes only"""
    a = MovementCommand(LateralCommand.TURN_LEFT, LongitudinalCommand.NONE, timestamp=1.0)
    b = MovementCommand(LateralCommand.TURN_LEFT, LongitudinalCommand.NONE, timestamp=2.0)
    assert a == b


def test_orientation_snapshot_default():
    """Test empty snapshot before any reading"""
    snap = OrientationSnapshot()
    assert snap.has_reading is False
    assert snap.buckets == AngleBuckets(0, 0, 0)


def test_decoder_config_validation():
    """Test decoder config validates resolution"""
    assert DecoderConfig().resolution == 18
    with pytest.raises(AssertionError):
        DecoderConfig(resolution=0)


def test_resolver_config_defaults():
    """Test resolver config defaults"""
    config = ResolverConfig()
    assert config.turn_right == (12, 16)
    assert config.turn_left == (0, 5)
    assert config.straight_buckets == (0, 9)
    assert config.forward_gestures == (Gesture.FIST,)
    assert config.reverse_gestures == (Gesture.SPREAD,)


def test_resolver_config_straight_follows_resolution():
    """Test centre bucket tracks resolution"""
    config = ResolverConfig(resolution=36)
    assert config.straight_buckets == (0, 18)


def test_resolver_config_turn_ranges_follow_resolution():
    """Test turn ranges cover the same yaw at a finer resolution"""
    config = ResolverConfig(resolution=36)
    assert config.turn_right == (25, 32)
    assert config.turn_left == (1, 10)

    explicit = ResolverConfig(resolution=36, turn_right=(20, 30))
    assert explicit.turn_right == (20, 30)


def test_resolver_config_validation():
    """Test resolver config validates ranges"""
    with pytest.raises(AssertionError):
        ResolverConfig(resolution=-1)
    with pytest.raises(AssertionError):
        ResolverConfig(turn_right=(16, 12))


def test_supervisor_config_defaults():
    """Test supervisor ticks at 20 Hz by default"""
    config = SupervisorConfig()
    assert config.loop_interval == pytest.approx(0.05)


def test_supervisor_state_enum():
    """Test supervisor state enum"""
    assert SupervisorState.DISCONNECTED.value == "disconnected"
    assert SupervisorState.CONNECTING.value == "connecting"
    assert SupervisorState.CONNECTED.value == "connected"
    assert SupervisorState.SYNCED.value == "synced"
    assert SupervisorState.STALE.value == "stale"
