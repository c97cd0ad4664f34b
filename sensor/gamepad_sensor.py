"""
Gamepad Sensor

Emulates the armband with a USB/wireless game controller, for driving
the engine without the real sensor.
"""

import asyncio
import logging
import math
import time
from typing import Optional

try:
    import pygame
    HAS_PYGAME = True
except ImportError:
    HAS_PYGAME = False

from core.interfaces import SensorCallbacks
from core.types import Arm, Gesture, Quaternion, UnlockMode


logger = logging.getLogger(__name__)


class GamepadSensor:
    """
    Game controller pretending to be an armband.

    Maps gamepad controls to sensor events:
    - Left stick X: yaw (full deflection = +/- 180 degrees)
    - Left stick Y: pitch (full deflection = +/- 90 degrees)
    - A / B / X / Y: fist / fingers spread / wave in / wave out
    - Start: toggle arm sync
    """

    BUTTON_GESTURES = {
        0: Gesture.FIST,
        1: Gesture.SPREAD,
        2: Gesture.WAVE_IN,
        3: Gesture.WAVE_OUT,
    }
    BUTTON_START = 7

    def __init__(self, deadzone: float = 0.1, arm: Arm = Arm.RIGHT) -> None:
        """
        Initialize gamepad sensor.

        Args:
            deadzone: Ignore stick movements below this threshold
            arm: Arm reported when Start syncs
        """
        if not HAS_PYGAME:
            raise RuntimeError(
                "pygame not installed. Install with: pip install pygame"
            )

        self._deadzone = deadzone
        self._arm = arm
        self._joystick: Optional["pygame.joystick.Joystick"] = None
        self._callbacks: Optional[SensorCallbacks] = None

        self._gesture = Gesture.NEUTRAL
        self._synced = False
        self._start_held = False
        self._unlocked = False

        self._axis_x = 0
        self._axis_y = 1

    async def connect(self, timeout: float) -> bool:
        """Initialize pygame and wait for a controller"""
        logger.info("Initializing gamepad sensor...")
        pygame.init()
        pygame.joystick.init()

        deadline = time.monotonic() + timeout
        while pygame.joystick.get_count() == 0:
            if time.monotonic() >= deadline:
                logger.warning("No game controllers found")
                return False
            await asyncio.sleep(0.2)
            pygame.joystick.quit()
            pygame.joystick.init()

        self._joystick = pygame.joystick.Joystick(0)
        self._joystick.init()
        logger.info(f"Selected: {self._joystick.get_name()}")
        logger.info("Controls:")
        logger.info("  Left stick: yaw / pitch")
        logger.info("  A/B/X/Y: fist / spread / wave in / wave out")
        logger.info("  Start: put the band on / take it off")
        return True

    async def disconnect(self) -> None:
        logger.info("Stopping gamepad sensor")
        if self._joystick:
            self._joystick.quit()
            self._joystick = None
        pygame.joystick.quit()
        pygame.quit()

    def attach(self, callbacks: SensorCallbacks) -> None:
        self._callbacks = callbacks

    async def pump(self) -> None:
        """Read the controller and fire the matching events"""
        if self._joystick is None or self._callbacks is None:
            return

        pygame.event.pump()
        now = time.time()

        self._check_sync_toggle(now)

        x = self._apply_deadzone(self._joystick.get_axis(self._axis_x))
        y = self._apply_deadzone(self._joystick.get_axis(self._axis_y))
        quat = Quaternion.from_euler(0.0, -y * math.pi / 2, x * math.pi)
        self._callbacks.on_orientation(quat, now)

        gesture = self._read_gesture()
        if gesture != self._gesture:
            self._gesture = gesture
            self._callbacks.on_pose(gesture, now)

    def unlock(self, mode: UnlockMode) -> None:
        # A gamepad is always "unlocked"; report it once
        if not self._unlocked and self._callbacks is not None:
            self._unlocked = True
            self._callbacks.on_unlock(time.time())

    def notify_user_action(self) -> None:
        if self._joystick is not None and hasattr(self._joystick, "rumble"):
            self._joystick.rumble(0.5, 0.5, 100)

    @property
    def is_connected(self) -> bool:
        return self._joystick is not None

    def _check_sync_toggle(self, now: float) -> None:
        pressed = (self._joystick.get_numbuttons() > self.BUTTON_START
                   and bool(self._joystick.get_button(self.BUTTON_START)))
        if pressed and not self._start_held:
            self._synced = not self._synced
            if self._synced:
                self._callbacks.on_arm_sync(self._arm, now)
            else:
                self._callbacks.on_arm_unsync(now)
        self._start_held = pressed

    def _read_gesture(self) -> Gesture:
        for button, gesture in self.BUTTON_GESTURES.items():
            if button < self._joystick.get_numbuttons() and self._joystick.get_button(button):
                return gesture
        return Gesture.NEUTRAL

    def _apply_deadzone(self, value: float) -> float:
        if abs(value) < self._deadzone:
            return 0.0
        return max(-1.0, min(1.0, value))
