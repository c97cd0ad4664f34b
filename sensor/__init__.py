"""Sensor providers"""

from sensor.mock_sensor import MockSensor, SensorEvent, EventKind, TestScripts
from sensor.gamepad_sensor import GamepadSensor, HAS_PYGAME

__all__ = ["MockSensor", "SensorEvent", "EventKind", "TestScripts", "GamepadSensor", "HAS_PYGAME"]
