"""
Mock Sink - For testing without a remote device.

Records commands instead of transmitting them.
"""

import logging
from typing import List, Optional

from core.types import MovementCommand
from core.output.console import ConsoleSink


logger = logging.getLogger(__name__)


class MockSink:
    """
    Mock command sink for testing.

    Keeps every emitted command in memory.
    """

    def __init__(self, reject: bool = False) -> None:
        """
        Initialize mock sink.

        Args:
            reject: If True, report every command as not accepted
        """
        self._reject = reject
        self._commands: List[MovementCommand] = []

    async def emit(self, command: MovementCommand) -> bool:
        """Record command instead of sending"""
        self._commands.append(command)
        logger.debug(f"[MOCK] Command #{len(self._commands)}: {command.label or '(idle)'}")
        return not self._reject

    @property
    def commands(self) -> List[MovementCommand]:
        """All commands received so far (for testing)"""
        return list(self._commands)

    @property
    def last_command(self) -> Optional[MovementCommand]:
        """Get last command received (for testing)"""
        return self._commands[-1] if self._commands else None

    @property
    def emit_count(self) -> int:
        """Get total commands received (for testing)"""
        return len(self._commands)


__all__ = ["MockSink", "ConsoleSink"]
