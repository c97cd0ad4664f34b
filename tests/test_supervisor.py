"""Tests for Supervisor"""

import asyncio
import time

import pytest
from core.types import (
    Arm,
    Gesture,
    LateralCommand,
    LongitudinalCommand,
    MovementCommand,
    Quaternion,
    SupervisorConfig,
    SupervisorState,
    UnlockMode,
)
from core.decoder import OrientationDecoder
from core.resolver import CommandResolver
from core.session import ArmSession
from core.supervisor import ConnectionFailed, Supervisor
from core.output import MockSink
from sensor.mock_sensor import MockSensor, SensorEvent, TestScripts


def make_supervisor(device, **config_overrides):
    """Wire a supervisor around a mock sensor and sink"""
    config = SupervisorConfig(
        loop_interval=0.001,
        connect_timeout=0.1,
        max_connect_attempts=2,
        reconnect_delay=0.0,
        orientation_timeout=5.0,
    )
    for key, value in config_overrides.items():
        setattr(config, key, value)

    session = ArmSession(OrientationDecoder(), device=device)
    return Supervisor(
        device=device,
        session=session,
        resolver=CommandResolver(),
        sink=MockSink(),
        config=config,
    )


def run_ticks(supervisor, ticks):
    """Run a number of control loop iterations"""
    async def run():
        for _ in range(ticks):
            await supervisor._update()
    asyncio.run(run())


def test_starts_disconnected():
    """Test initial state"""
    supervisor = make_supervisor(MockSensor())
    assert supervisor.state == SupervisorState.DISCONNECTED
    assert supervisor.last_command is None


def test_connect_transitions_to_connected():
    """Test connection flow"""
    supervisor = make_supervisor(MockSensor())
    supervisor.request_connect()
    assert supervisor.state == SupervisorState.CONNECTING

    run_ticks(supervisor, 1)
    assert supervisor.state == SupervisorState.CONNECTED
    assert supervisor.is_connected is True


def test_forward_straight_script():
    """Test a full drive-forward script"""
    device = MockSensor(TestScripts.drive_forward_straight())
    supervisor = make_supervisor(device)
    supervisor.request_connect()

    run_ticks(supervisor, 8)

    assert supervisor.state == SupervisorState.SYNCED
    assert supervisor.last_command == MovementCommand(
        LateralCommand.STRAIGHT, LongitudinalCommand.FORWARD
    )
    assert device.unlock_requests == [UnlockMode.HOLD]
    assert device.notifications == 1


def test_turn_left_reverse_script():
    """Test swinging into the left turn range while reversing"""
    device = MockSensor(TestScripts.turn_left_reverse())
    supervisor = make_supervisor(device)
    supervisor.request_connect()

    run_ticks(supervisor, 9)

    assert supervisor.last_command == MovementCommand(
        LateralCommand.TURN_LEFT, LongitudinalCommand.REVERSE
    )


def test_no_commands_without_arm():
    """Test nothing is emitted until the band is worn"""
    device = MockSensor([
        SensorEvent.orientation(yaw_deg=0.0),
        SensorEvent.pose(Gesture.FIST),
    ])
    supervisor = make_supervisor(device)
    supervisor.request_connect()

    run_ticks(supervisor, 5)

    assert supervisor.state == SupervisorState.CONNECTED
    assert supervisor.sink.emit_count == 0
    assert supervisor.poll() is None


def test_arm_lost_script():
    """Test arm unsync stops emission and unpair disconnects"""
    device = MockSensor(TestScripts.arm_lost())
    supervisor = make_supervisor(device)
    states = []
    supervisor.add_state_callback(lambda old, new: states.append(new))
    supervisor.request_connect()

    run_ticks(supervisor, 8)

    assert supervisor.state == SupervisorState.DISCONNECTED
    assert SupervisorState.SYNCED in states
    assert states[-2:] == [SupervisorState.CONNECTED, SupervisorState.DISCONNECTED]
    assert supervisor.sink.emit_count == 4
    assert supervisor.sink.last_command == MovementCommand(
        LateralCommand.STRAIGHT, LongitudinalCommand.FORWARD
    )
    assert supervisor.session.snapshot().orientation.has_reading is False
    assert supervisor.last_command is None


def test_stale_orientation_goes_neutral():
    """Test the neutral command is emitted without fresh orientation"""
    device = MockSensor([SensorEvent.arm_sync(Arm.RIGHT), SensorEvent.pose(Gesture.FIST)])
    supervisor = make_supervisor(device)
    supervisor.request_connect()

    run_ticks(supervisor, 3)

    assert supervisor.state == SupervisorState.STALE
    assert supervisor.last_command.is_neutral is True


def test_old_orientation_is_stale():
    """Test orientation older than the timeout counts as stale"""
    device = MockSensor([SensorEvent.arm_sync(Arm.RIGHT)])
    supervisor = make_supervisor(device, orientation_timeout=0.5)
    supervisor.request_connect()
    run_ticks(supervisor, 2)

    supervisor.session.on_orientation(Quaternion.identity(), time.time() - 10.0)
    supervisor.session.on_pose(Gesture.FIST, time.time())
    assert supervisor.poll().is_neutral is True

    supervisor.session.on_orientation(Quaternion.identity(), time.time())
    assert supervisor.poll() == MovementCommand(
        LateralCommand.STRAIGHT, LongitudinalCommand.FORWARD
    )


def test_recovers_from_stale():
    """Test fresh orientation brings the supervisor back to SYNCED"""
    device = MockSensor([SensorEvent.arm_sync(Arm.RIGHT)])
    supervisor = make_supervisor(device)
    supervisor.request_connect()
    run_ticks(supervisor, 2)
    assert supervisor.state == SupervisorState.STALE

    device.push(SensorEvent.orientation(yaw_deg=90.0))
    run_ticks(supervisor, 1)
    assert supervisor.state == SupervisorState.SYNCED
    assert supervisor.last_command.lateral == LateralCommand.TURN_RIGHT


def test_stale_checked_once_per_tick(monkeypatch):
    """Test state and command agree when the timeout passes mid-tick"""
    device = MockSensor(TestScripts.drive_forward_straight())
    supervisor = make_supervisor(device)
    supervisor.request_connect()
    run_ticks(supervisor, 8)
    assert supervisor.state == SupervisorState.SYNCED

    readings = iter([False, True])
    monkeypatch.setattr(supervisor, "_is_stale", lambda: next(readings))
    run_ticks(supervisor, 1)

    assert supervisor.state == SupervisorState.SYNCED
    assert supervisor.last_command == MovementCommand(
        LateralCommand.STRAIGHT, LongitudinalCommand.FORWARD
    )


def test_idle_callback_while_off_arm():
    """Test idle observers run on connected ticks that emit nothing"""
    device = MockSensor([SensorEvent.orientation(yaw_deg=90.0)])
    supervisor = make_supervisor(device)
    seen = []
    supervisor.add_idle_callback(seen.append)
    supervisor.request_connect()

    run_ticks(supervisor, 3)

    assert len(seen) == 2
    assert all(snap.on_arm is False for snap in seen)
    assert seen[-1].orientation.buckets.yaw == 13
    assert supervisor.sink.emit_count == 0


def test_idle_callback_not_called_while_worn():
    """Test idle observers stay quiet once commands are emitted"""
    device = MockSensor([SensorEvent.arm_sync(Arm.RIGHT), SensorEvent.orientation()])
    supervisor = make_supervisor(device)
    seen = []
    supervisor.add_idle_callback(seen.append)
    supervisor.request_connect()

    run_ticks(supervisor, 4)

    assert seen == []
    assert supervisor.sink.emit_count == 3


def test_connection_failure_raises():
    """Test ConnectionFailed after max attempts"""
    device = MockSensor(fail_connect=True)
    supervisor = make_supervisor(device)
    supervisor.request_connect()

    with pytest.raises(ConnectionFailed):
        asyncio.run(supervisor.run())

    assert device.connect_attempts == 2
    assert supervisor.state == SupervisorState.DISCONNECTED


def test_disconnect_request():
    """Test user disconnect"""
    device = MockSensor(TestScripts.drive_forward_straight())
    supervisor = make_supervisor(device)
    supervisor.request_connect()
    run_ticks(supervisor, 4)

    supervisor.request_disconnect()
    run_ticks(supervisor, 1)

    assert supervisor.state == SupervisorState.DISCONNECTED
    assert device.is_connected is False


def test_command_callback_receives_snapshot():
    """Test command observers"""
    device = MockSensor(TestScripts.drive_forward_straight())
    supervisor = make_supervisor(device)
    seen = []
    supervisor.add_command_callback(lambda cmd, snap: seen.append((cmd, snap)))
    supervisor.request_connect()

    run_ticks(supervisor, 8)

    cmd, snap = seen[-1]
    assert cmd.longitudinal == LongitudinalCommand.FORWARD
    assert snap.gesture == Gesture.FIST
    assert snap.arm == Arm.RIGHT


def test_failing_callback_does_not_stop_loop():
    """Test observer errors are contained"""
    device = MockSensor(TestScripts.drive_forward_straight())
    supervisor = make_supervisor(device)

    def broken(cmd, snap):
        raise RuntimeError("observer bug")

    supervisor.add_command_callback(broken)
    supervisor.request_connect()
    run_ticks(supervisor, 8)

    assert supervisor.sink.emit_count > 0


def test_run_until_stopped():
    """Test the async loop end to end"""
    device = MockSensor(TestScripts.drive_forward_straight(), events_per_pump=10)
    supervisor = make_supervisor(device, loop_interval=0.01)

    async def run():
        task = asyncio.create_task(supervisor.run())
        supervisor.request_connect()
        for _ in range(200):
            await asyncio.sleep(0.01)
            if supervisor.last_command is not None and \
                    supervisor.last_command.longitudinal == LongitudinalCommand.FORWARD:
                break
        supervisor.stop()
        await task

    asyncio.run(run())

    assert supervisor.last_command == MovementCommand(
        LateralCommand.STRAIGHT, LongitudinalCommand.FORWARD
    )
    assert device.is_connected is False
