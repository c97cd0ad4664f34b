"""
Supervisor - Polling loop and connection state machine.

The Supervisor is the main control loop. It:
- Manages state transitions (disconnected -> connecting -> synced -> etc.)
- Pumps sensor events into the ArmSession once per tick
- Resolves the current command from the latest snapshot
- Hands commands to the CommandSink while the sensor is worn
- Falls back to the neutral command when orientation goes stale
"""

import asyncio
import logging
import time
from typing import Any, Callable, Optional

from .interfaces import CommandSink, SensorDevice
from .resolver import CommandResolver
from .session import ArmSession
from .types import MovementCommand, SessionSnapshot, SupervisorConfig, SupervisorState


logger = logging.getLogger(__name__)


class ConnectionFailed(RuntimeError):
    """No sensor answered within the configured attempts"""


class Supervisor:
    """
    Main control loop.

    Orchestrates sensor, session, resolver and sink. The resolver is
    asked afresh on every tick; nothing about earlier commands carries
    over into the next one.
    """

    def __init__(
        self,
        device: SensorDevice,
        session: ArmSession,
        resolver: CommandResolver,
        sink: CommandSink,
        config: SupervisorConfig,
    ) -> None:
        """
        Initialize supervisor.

        Args:
            device: Sensor that produces orientation and pose events
            session: Receives the sensor's events
            resolver: Converts gesture + yaw bucket to commands
            sink: Consumes the resolved commands
            config: Supervisor configuration
        """
        self.device = device
        self.session = session
        self.resolver = resolver
        self.sink = sink
        self.config = config

        self.state = SupervisorState.DISCONNECTED
        self._running = False
        self._stop_requested = False
        self._connect_attempts = 0
        self._last_command: Optional[MovementCommand] = None

        self._state_callbacks: list[Callable[[SupervisorState, SupervisorState], Any]] = []
        self._command_callbacks: list[Callable[[MovementCommand, SessionSnapshot], Any]] = []
        self._idle_callbacks: list[Callable[[SessionSnapshot], Any]] = []

    def add_state_callback(self, callback: Callable[[SupervisorState, SupervisorState], Any]) -> None:
        """
        Register callback for state changes.

        Callback signature: callback(old_state, new_state)
        """
        self._state_callbacks.append(callback)

    def add_command_callback(self, callback: Callable[[MovementCommand, SessionSnapshot], Any]) -> None:
        """
        Register callback for every emitted command.

        Callback signature: callback(command, snapshot)
        """
        self._command_callbacks.append(callback)

    def add_idle_callback(self, callback: Callable[[SessionSnapshot], Any]) -> None:
        """
        Register callback for connected ticks that emit no command
        (sensor paired but not worn).

        Callback signature: callback(snapshot)
        """
        self._idle_callbacks.append(callback)

    def request_connect(self) -> None:
        """Request connection to the sensor"""
        if self.state == SupervisorState.DISCONNECTED:
            self._connect_attempts = 0
            self._transition_to(SupervisorState.CONNECTING)

    def request_disconnect(self) -> None:
        """Request disconnect from the sensor"""
        if self.state != SupervisorState.DISCONNECTED:
            self._stop_requested = True

    async def run(self) -> None:
        """
        Main control loop - runs until stopped.

        Raises:
            ConnectionFailed: if the sensor never answered
        """
        logger.info("Supervisor starting")
        self._running = True

        try:
            while self._running:
                try:
                    await self._update()
                except ConnectionFailed:
                    raise
                except Exception as e:
                    logger.error(f"Error in supervisor update: {e}", exc_info=True)
                await asyncio.sleep(self.config.loop_interval)
        finally:
            logger.info("Supervisor stopping")
            await self._cleanup()

    def stop(self) -> None:
        """Stop the supervisor (call from outside async context)"""
        self._running = False

    def poll(self) -> Optional[MovementCommand]:
        """
        Resolve the command for the current snapshot without emitting it.

        Returns:
            None while no arm is synced, the neutral command while
            orientation is stale, otherwise the resolved command
        """
        snapshot = self.session.snapshot()
        return self._command_for(snapshot, self._is_stale())

    async def _update(self) -> None:
        """Single iteration of control loop"""

        if self._stop_requested:
            await self._handle_stop_request()
            return

        if self.state == SupervisorState.DISCONNECTED:
            return

        if self.state == SupervisorState.CONNECTING:
            await self._handle_connecting()
            return

        # CONNECTED, SYNCED, STALE
        await self.device.pump()

        if not self.device.is_connected:
            logger.warning("Sensor connection lost")
            self.session.on_unpair(time.time())
            self._transition_to(SupervisorState.DISCONNECTED)
            return

        await self._handle_connected()

    async def _handle_connecting(self) -> None:
        """CONNECTING state - wait for the sensor to pair"""
        logger.info(f"Connecting to sensor (attempt {self._connect_attempts + 1})")

        self.device.attach(self.session.callbacks())
        try:
            success = await self.device.connect(self.config.connect_timeout)
        except Exception as e:
            logger.error(f"Connection error: {e}", exc_info=True)
            success = False

        if success:
            logger.info("Connected to sensor")
            self._connect_attempts = 0
            self._transition_to(SupervisorState.CONNECTED)
            return

        self._connect_attempts += 1
        logger.warning("Connection failed")

        if self._connect_attempts >= self.config.max_connect_attempts:
            logger.error("Max connection attempts reached")
            self._transition_to(SupervisorState.DISCONNECTED)
            raise ConnectionFailed("Unable to connect to sensor")

        await asyncio.sleep(self.config.reconnect_delay)

    async def _handle_connected(self) -> None:
        """Paired states - resolve and emit while the sensor is worn"""
        snapshot = self.session.snapshot()

        if not snapshot.on_arm:
            self._transition_to(SupervisorState.CONNECTED)
            self._notify_idle(snapshot)
            return

        stale = self._is_stale()
        if stale:
            self._transition_to(SupervisorState.STALE)
        else:
            self._transition_to(SupervisorState.SYNCED)

        command = self._command_for(snapshot, stale)
        await self._emit(command, snapshot)

    def _command_for(self, snapshot: SessionSnapshot, stale: bool) -> Optional[MovementCommand]:
        if not snapshot.on_arm:
            return None
        if stale:
            return MovementCommand.neutral()
        return self.resolver.resolve(snapshot.gesture, snapshot.orientation.buckets.yaw)

    def _is_stale(self) -> bool:
        """No orientation within orientation_timeout"""
        last = self.session.last_orientation_time
        if last <= 0:
            return True
        return time.time() - last > self.config.orientation_timeout

    async def _emit(self, command: MovementCommand, snapshot: SessionSnapshot) -> None:
        """Send command to the sink and notify observers"""
        accepted = await self.sink.emit(command)
        if not accepted:
            logger.warning(f"Sink rejected command: {command.label!r}")

        if self._last_command is None or command != self._last_command:
            logger.debug(f"Command: {command.label or '(idle)'}")
        self._last_command = command

        for callback in self._command_callbacks:
            try:
                callback(command, snapshot)
            except Exception as e:
                logger.error(f"Error in command callback: {e}", exc_info=True)

    def _notify_idle(self, snapshot: SessionSnapshot) -> None:
        for callback in self._idle_callbacks:
            try:
                callback(snapshot)
            except Exception as e:
                logger.error(f"Error in idle callback: {e}", exc_info=True)

    async def _handle_stop_request(self) -> None:
        """Handle user stop request"""
        logger.info("Stop requested")
        await self.device.disconnect()
        self._transition_to(SupervisorState.DISCONNECTED)
        self._stop_requested = False

    def _transition_to(self, new_state: SupervisorState) -> None:
        """
        Transition to new state.

        Args:
            new_state: State to transition to
        """
        if new_state == self.state:
            return

        old_state = self.state
        logger.info(f"State transition: {old_state.value} -> {new_state.value}")
        self.state = new_state

        if new_state == SupervisorState.DISCONNECTED:
            self._last_command = None

        for callback in self._state_callbacks:
            try:
                callback(old_state, new_state)
            except Exception as e:
                logger.error(f"Error in state callback: {e}", exc_info=True)

    async def _cleanup(self) -> None:
        """Cleanup on shutdown"""
        try:
            if self.device.is_connected:
                await self.device.disconnect()
        except Exception as e:
            logger.error(f"Error during cleanup: {e}", exc_info=True)

    # Public properties for UI/monitoring

    @property
    def last_command(self) -> Optional[MovementCommand]:
        """Last command handed to the sink"""
        return self._last_command

    @property
    def is_connected(self) -> bool:
        return self.device.is_connected

    @property
    def is_synced(self) -> bool:
        return self.state == SupervisorState.SYNCED
