"""
ArmSession - Receives sensor events and holds the wearer's state.

The session is the engine's side of the SensorCallbacks table. It feeds
orientation into the OrientationDecoder and keeps the last gesture,
arm sync and lock state for the poll loop.
"""

import logging
import threading
from typing import Optional

from .decoder import OrientationDecoder
from .interfaces import SensorCallbacks, SensorDevice
from .types import Arm, Gesture, Quaternion, SessionSnapshot, UnlockMode


logger = logging.getLogger(__name__)


class ArmSession:
    """
    Per-sensor event state.

    Unlock policy: a deliberate pose keeps the sensor unlocked and
    notifies the wearer; rest/unknown only extends a timed unlock so
    the wearer has time to perform the next pose.
    """

    def __init__(
        self,
        decoder: OrientationDecoder,
        device: Optional[SensorDevice] = None,
    ) -> None:
        """
        Initialize session.

        Args:
            decoder: Decoder that receives orientation updates
            device: Sensor to send unlock/notify requests to (optional)
        """
        self.decoder = decoder
        self.device = device

        self._lock = threading.Lock()
        self._gesture = Gesture.UNKNOWN
        self._on_arm = False
        self._arm = Arm.UNKNOWN
        self._unlocked = False
        self._last_orientation_time = 0.0

    def callbacks(self) -> SensorCallbacks:
        """Build the callback table to hand to a SensorDevice"""
        return SensorCallbacks(
            on_orientation=self.on_orientation,
            on_pose=self.on_pose,
            on_arm_sync=self.on_arm_sync,
            on_arm_unsync=self.on_arm_unsync,
            on_unlock=self.on_unlock,
            on_lock=self.on_lock,
            on_unpair=self.on_unpair,
        )

    # Sensor events

    def on_orientation(self, quaternion: Quaternion, timestamp: float) -> None:
        self.decoder.update(quaternion, timestamp)
        with self._lock:
            self._last_orientation_time = timestamp

    def on_pose(self, gesture: Gesture, timestamp: float) -> None:
        with self._lock:
            self._gesture = gesture
        logger.debug(f"Pose: {gesture.value}")
        self._apply_unlock_policy(gesture)

    def on_arm_sync(self, arm: Arm, timestamp: float) -> None:
        logger.info(f"Arm synced ({arm.value})")
        with self._lock:
            self._on_arm = True
            self._arm = arm

    def on_arm_unsync(self, timestamp: float) -> None:
        logger.info("Arm unsynced")
        with self._lock:
            self._on_arm = False

    def on_unlock(self, timestamp: float) -> None:
        with self._lock:
            self._unlocked = True

    def on_lock(self, timestamp: float) -> None:
        with self._lock:
            self._unlocked = False

    def on_unpair(self, timestamp: float) -> None:
        """Sensor lost: drop everything it told us"""
        logger.warning("Sensor unpaired")
        with self._lock:
            self._on_arm = False
            self._unlocked = False
            self._last_orientation_time = 0.0
        self.decoder.reset()

    # Reads

    def snapshot(self) -> SessionSnapshot:
        """Current state for one poll"""
        orientation = self.decoder.snapshot()
        with self._lock:
            return SessionSnapshot(
                orientation=orientation,
                gesture=self._gesture,
                on_arm=self._on_arm,
                arm=self._arm,
                unlocked=self._unlocked,
            )

    @property
    def gesture(self) -> Gesture:
        with self._lock:
            return self._gesture

    @property
    def on_arm(self) -> bool:
        with self._lock:
            return self._on_arm

    @property
    def last_orientation_time(self) -> float:
        with self._lock:
            return self._last_orientation_time

    def _apply_unlock_policy(self, gesture: Gesture) -> None:
        if self.device is None:
            return
        try:
            if gesture.is_known:
                self.device.unlock(UnlockMode.HOLD)
                self.device.notify_user_action()
            else:
                self.device.unlock(UnlockMode.TIMED)
        except Exception as e:
            # Called on the sensor's thread, must not raise
            logger.error(f"Unlock request failed: {e}", exc_info=True)
