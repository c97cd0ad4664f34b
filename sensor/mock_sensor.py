"""
Mock (test) sensor.

Plays scripted armband events for testing without physical hardware.
"""

import asyncio
import logging
import math
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional

from core.interfaces import SensorCallbacks
from core.types import Arm, Gesture, Quaternion, UnlockMode


logger = logging.getLogger(__name__)


class EventKind(Enum):
    ORIENTATION = "orientation"
    POSE = "pose"
    ARM_SYNC = "arm_sync"
    ARM_UNSYNC = "arm_unsync"
    UNLOCK = "unlock"
    LOCK = "lock"
    UNPAIR = "unpair"


@dataclass(frozen=True)
class SensorEvent:
    """One scripted event; payload depends on kind"""
    kind: EventKind
    payload: Any = None

    @classmethod
    def orientation(cls, roll_deg: float = 0.0, pitch_deg: float = 0.0,
                    yaw_deg: float = 0.0) -> "SensorEvent":
        q = Quaternion.from_euler(math.radians(roll_deg),
                                  math.radians(pitch_deg),
                                  math.radians(yaw_deg))
        return cls(EventKind.ORIENTATION, q)

    @classmethod
    def pose(cls, gesture: Gesture) -> "SensorEvent":
        return cls(EventKind.POSE, gesture)

    @classmethod
    def arm_sync(cls, arm: Arm = Arm.RIGHT) -> "SensorEvent":
        return cls(EventKind.ARM_SYNC, arm)


class MockSensor:
    """
    Mock sensor for testing.

    Each pump() dispatches the next events_per_pump scripted events.
    Once the script is exhausted the last orientation is repeated, the
    way a real armband keeps streaming while held still.
    """

    def __init__(
        self,
        events: Optional[List[SensorEvent]] = None,
        connect_delay: float = 0.0,
        fail_connect: bool = False,
        events_per_pump: int = 1,
    ) -> None:
        """
        Initialize mock sensor.

        Args:
            events: Events to deliver in sequence
            connect_delay: Simulated pairing time (seconds)
            fail_connect: If True, connect() never succeeds
            events_per_pump: Events dispatched per pump() call
        """
        self._events = list(events or [])
        self._index = 0
        self._connect_delay = connect_delay
        self._fail_connect = fail_connect
        self._events_per_pump = events_per_pump

        self._callbacks: Optional[SensorCallbacks] = None
        self._connected = False
        self._last_orientation: Optional[Quaternion] = None

        self.unlock_requests: List[UnlockMode] = []
        self.notifications = 0
        self.connect_attempts = 0

    async def connect(self, timeout: float) -> bool:
        """Simulate pairing"""
        self.connect_attempts += 1
        logger.info("[MOCK SENSOR] Waiting for sensor...")

        await asyncio.sleep(min(self._connect_delay, timeout))
        if self._fail_connect or self._connect_delay > timeout:
            logger.info("[MOCK SENSOR] No sensor found")
            return False

        self._connected = True
        logger.info(f"[MOCK SENSOR] Paired ({len(self._events)} scripted events)")
        return True

    async def disconnect(self) -> None:
        logger.info("[MOCK SENSOR] Disconnected")
        self._connected = False

    def attach(self, callbacks: SensorCallbacks) -> None:
        self._callbacks = callbacks

    async def pump(self) -> None:
        """Dispatch the next scripted events"""
        if not self._connected or self._callbacks is None:
            return

        for _ in range(self._events_per_pump):
            if self._index < len(self._events):
                event = self._events[self._index]
                self._index += 1
            elif self._last_orientation is not None:
                event = SensorEvent(EventKind.ORIENTATION, self._last_orientation)
            else:
                return
            self._dispatch(event)
            if not self._connected:
                return

    def push(self, event: SensorEvent) -> None:
        """Append an event to the script"""
        self._events.append(event)

    def unlock(self, mode: UnlockMode) -> None:
        self.unlock_requests.append(mode)

    def notify_user_action(self) -> None:
        self.notifications += 1

    def reset(self) -> None:
        """Restart the script from the beginning"""
        self._index = 0
        self._last_orientation = None

    def load_script(self, script_name: str) -> None:
        """
        Load a predefined test script.

        Args:
            script_name: Name of script to load from TestScripts
        """
        script_map = {
            "forward": TestScripts.drive_forward_straight,
            "turn_left_reverse": TestScripts.turn_left_reverse,
            "sweep": TestScripts.sweep_yaw,
            "arm_lost": TestScripts.arm_lost,
        }

        if script_name in script_map:
            self._events = script_map[script_name]()
            self.reset()
            logger.info(f"Loaded script '{script_name}' with {len(self._events)} events")
        else:
            logger.warning(f"Unknown script '{script_name}'")

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def remaining(self) -> int:
        """Scripted events not yet dispatched"""
        return max(0, len(self._events) - self._index)

    def _dispatch(self, event: SensorEvent) -> None:
        cb = self._callbacks
        now = time.time()

        if event.kind == EventKind.ORIENTATION:
            self._last_orientation = event.payload
            cb.on_orientation(event.payload, now)
        elif event.kind == EventKind.POSE:
            cb.on_pose(event.payload, now)
        elif event.kind == EventKind.ARM_SYNC:
            cb.on_arm_sync(event.payload, now)
        elif event.kind == EventKind.ARM_UNSYNC:
            cb.on_arm_unsync(now)
        elif event.kind == EventKind.UNLOCK:
            cb.on_unlock(now)
        elif event.kind == EventKind.LOCK:
            cb.on_lock(now)
        elif event.kind == EventKind.UNPAIR:
            self._last_orientation = None
            self._connected = False
            cb.on_unpair(now)


class TestScripts:
    """Pre-defined test scripts"""

    __test__ = False  # not a pytest class

    @staticmethod
    def drive_forward_straight() -> List[SensorEvent]:
        """Sync, face straight ahead, make a fist"""
        return [
            SensorEvent.arm_sync(Arm.RIGHT),
            SensorEvent(EventKind.UNLOCK),
            SensorEvent.orientation(yaw_deg=0.0),
            SensorEvent.pose(Gesture.FIST),
            SensorEvent.orientation(yaw_deg=5.0),
            SensorEvent.orientation(yaw_deg=0.0),
        ]

    @staticmethod
    def turn_left_reverse() -> List[SensorEvent]:
        """Spread fingers and swing the arm into the left turn range"""
        return [
            SensorEvent.arm_sync(Arm.LEFT),
            SensorEvent(EventKind.UNLOCK),
            SensorEvent.orientation(yaw_deg=0.0),
            SensorEvent.pose(Gesture.SPREAD),
            SensorEvent.orientation(yaw_deg=-90.0),
            SensorEvent.orientation(yaw_deg=-120.0),
            SensorEvent.orientation(yaw_deg=-120.0),
        ]

    @staticmethod
    def sweep_yaw() -> List[SensorEvent]:
        """Sweep yaw across the full circle in 20 degree steps"""
        events = [SensorEvent.arm_sync(Arm.RIGHT), SensorEvent.pose(Gesture.NEUTRAL)]
        events.extend(SensorEvent.orientation(yaw_deg=float(deg))
                      for deg in range(-170, 180, 20))
        return events

    @staticmethod
    def arm_lost() -> List[SensorEvent]:
        """Drive forward, take the band off, lose the sensor"""
        return [
            SensorEvent.arm_sync(Arm.RIGHT),
            SensorEvent.orientation(yaw_deg=0.0),
            SensorEvent.pose(Gesture.FIST),
            SensorEvent.orientation(yaw_deg=0.0),
            SensorEvent(EventKind.ARM_UNSYNC),
            SensorEvent.orientation(yaw_deg=0.0),
            SensorEvent(EventKind.UNPAIR),
        ]
