"""
Integration test - Full engine against the scripted mock sensor.

Runs the same wiring as the demo, in real time at the 20 Hz tick.
"""

import asyncio

from core.types import LateralCommand, LongitudinalCommand, MovementCommand
from armsteer_config import ArmsteerConfig
from demo_core import run_demo
from launch import build_supervisor
from sensor.mock_sensor import MockSensor, SensorEvent


def test_demo_forward_script():
    """Test the forward script ends driving straight ahead"""
    sink = asyncio.run(run_demo("forward", ticks=30))

    assert sink.emit_count > 0
    assert sink.last_command == MovementCommand(
        LateralCommand.STRAIGHT, LongitudinalCommand.FORWARD
    )


def test_demo_sweep_script():
    """Test the sweep passes through both turn directions"""
    sink = asyncio.run(run_demo("sweep", ticks=40))

    laterals = {cmd.lateral for cmd in sink.commands}
    assert LateralCommand.TURN_LEFT in laterals
    assert LateralCommand.TURN_RIGHT in laterals
    assert LateralCommand.IDLE in laterals
    assert all(cmd.longitudinal == LongitudinalCommand.NONE for cmd in sink.commands)


def test_status_line_drawn_off_arm(monkeypatch, tmp_path, capsys):
    """Test --status wiring draws the bars before the band is worn"""
    for name in ("ARMSTEER_RESOLUTION", "ARMSTEER_ORIENTATION_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)

    device = MockSensor([SensorEvent.orientation(yaw_deg=0.0)])
    supervisor = build_supervisor(device, ArmsteerConfig(), show_status=True)
    supervisor.request_connect()

    async def run():
        for _ in range(3):
            await supervisor._update()
    asyncio.run(run())

    out = capsys.readouterr().out
    assert out.startswith("\r[")
    assert "9 9]" in out
    assert supervisor.last_command is None
