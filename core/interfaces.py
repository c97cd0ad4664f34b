"""
Core interfaces (protocols) for pluggable components.

These define the contracts between the engine and its collaborators:
the sensor that produces events and the sink that consumes commands.
Sensors do not subclass a listener type; they are handed a
SensorCallbacks table and invoke its entries.
"""

from dataclasses import dataclass
from typing import Callable, Protocol

from .types import Arm, Gesture, MovementCommand, Quaternion, UnlockMode


@dataclass(frozen=True)
class SensorCallbacks:
    """
    Callback table a SensorDevice invokes when events arrive.

    Every entry takes the event payload followed by a timestamp
    (seconds). Entries may be called from the sensor's own thread.
    """
    on_orientation: Callable[[Quaternion, float], None]
    on_pose: Callable[[Gesture, float], None]
    on_arm_sync: Callable[[Arm, float], None]
    on_arm_unsync: Callable[[float], None]
    on_unlock: Callable[[float], None]
    on_lock: Callable[[float], None]
    on_unpair: Callable[[float], None]


class SensorDevice(Protocol):
    """
    Interface for motion sensors (armband, gamepad emulator, mock, etc.).
    """

    async def connect(self, timeout: float) -> bool:
        """
        Wait for the sensor to pair.

        Args:
            timeout: Seconds to wait before giving up

        Returns:
            True if a sensor paired within the timeout
        """
        ...

    async def disconnect(self) -> None:
        """Release the sensor"""
        ...

    def attach(self, callbacks: SensorCallbacks) -> None:
        """
        Register the callback table.

        Events delivered before attach() may be dropped.
        """
        ...

    async def pump(self) -> None:
        """
        Dispatch pending sensor events to the callback table.

        Must return promptly; called once per supervisor tick.
        """
        ...

    def unlock(self, mode: UnlockMode) -> None:
        """Ask the sensor to accept pose events"""
        ...

    def notify_user_action(self) -> None:
        """Give the wearer feedback (e.g. a short vibration)"""
        ...

    @property
    def is_connected(self) -> bool:
        """
        Check if sensor is paired.

        Returns:
            True if paired
        """
        ...


class CommandSink(Protocol):
    """
    Interface for whatever consumes movement commands.
    """

    async def emit(self, command: MovementCommand) -> bool:
        """
        Deliver one command.

        Args:
            command: Command resolved on this tick

        Returns:
            True if the sink accepted the command
        """
        ...
